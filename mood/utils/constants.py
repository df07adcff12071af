# mood/utils/constants.py
"""
Central constants for the mood insights rules.
Use these constants instead of hardcoded numbers so every rule threshold
lives in one place.
"""

# ============================================
# MOOD SCALE
# ============================================
MOOD_MIN = 1
MOOD_MAX = 5

MOOD_LABELS = {
    1: 'Terrible',
    2: 'Bad',
    3: 'Okay',
    4: 'Good',
    5: 'Great',
}

MOOD_CATEGORY_LOW = 'low'
MOOD_CATEGORY_NEUTRAL = 'neutral'
MOOD_CATEGORY_HIGH = 'high'

# A mood at or above this counts as a "good" outcome
GOOD_MOOD_THRESHOLD = 4
# A mood at or below this counts as a "low" day
LOW_MOOD_THRESHOLD = 2

ENERGY_MIN = 1
ENERGY_MAX = 5
SLEEP_HOURS_MAX = 24.0

# ============================================
# CORRELATION ENGINE
# ============================================
CORRELATION_MIN_TOTAL_ENTRIES = 10
CORRELATION_MIN_OBSERVATIONS = 3

# ============================================
# PATTERN DETECTOR
# ============================================
STREAK_MIN_LENGTH = 3
STREAK_FULL_CONFIDENCE_LENGTH = 7

DAY_OF_WEEK_MIN_ENTRIES = 14
DAY_OF_WEEK_MIN_DEVIATION = 1.0

SLEEP_MIN_ENTRIES = 10
SLEEP_LOW_HOURS = 6.0
SLEEP_GOOD_HOURS = 7.5
SLEEP_MIN_MOOD_DELTA = 0.8

# Confidence = min(value / divisor, 1.0)
CONFIDENCE_DIVISOR = 2.0

# ISO weekday numbers, Monday=1 .. Sunday=7
WEEKDAY_NAMES = {
    1: 'Monday',
    2: 'Tuesday',
    3: 'Wednesday',
    4: 'Thursday',
    5: 'Friday',
    6: 'Saturday',
    7: 'Sunday',
}

# ============================================
# SUGGESTION ENGINE
# ============================================
SUGGESTION_MIN_SUCCESS_RATE = 0.6
SUGGESTION_MIN_OBSERVATIONS = 3
SUGGESTION_RECENT_DAYS = 7
# Strong enough to be suggested even if done within the recent window
SUGGESTION_RECENCY_OVERRIDE_RATE = 0.85
SUGGESTION_LIMIT = 3
SUGGESTION_REASON = 'Based on your history'

FALLBACK_SUCCESS_RATE = 0.75
FALLBACK_REASON = 'Research-backed (not yet personalized)'
FALLBACK_SUGGESTIONS = [
    ('walk', 'Take a 10-minute walk outside'),
    ('social', 'Call or text a friend'),
    ('breathing', 'Try 5 minutes of deep breathing'),
]

# Activity id -> local hour from which the activity is no longer suggested.
# Activities not listed are always feasible.
FEASIBILITY_CUTOFF_HOURS = {
    'exercise': 22,
    'caffeine': 16,
}

# ============================================
# TRIGGER MANAGER
# ============================================
TRIGGER_MISSED_HELPFUL_ACTIVITY = 'missed_helpful_activity'
TRIGGER_LOW_MOOD_STREAK = 'low_mood_streak'
TRIGGER_SLEEP_WARNING = 'sleep_warning'
TRIGGER_POSITIVE_STREAK = 'positive_streak'

TRIGGER_TYPE_CHOICES = [
    (TRIGGER_MISSED_HELPFUL_ACTIVITY, 'Missed helpful activity'),
    (TRIGGER_LOW_MOOD_STREAK, 'Low mood streak'),
    (TRIGGER_SLEEP_WARNING, 'Sleep warning'),
    (TRIGGER_POSITIVE_STREAK, 'Positive streak'),
]

TRIGGER_PRIORITIES = {
    TRIGGER_MISSED_HELPFUL_ACTIVITY: 2,
    TRIGGER_LOW_MOOD_STREAK: 3,
    TRIGGER_SLEEP_WARNING: 2,
    TRIGGER_POSITIVE_STREAK: 1,
}

TRIGGER_COOLDOWN_DAYS = {
    TRIGGER_MISSED_HELPFUL_ACTIVITY: 7,
    TRIGGER_LOW_MOOD_STREAK: 7,
    TRIGGER_SLEEP_WARNING: 7,
    TRIGGER_POSITIVE_STREAK: 14,
}

HELPFUL_ACTIVITY_MIN_SUCCESS_RATE = 0.7
MISSED_ACTIVITY_DEFAULT_DAYS = 4
MISSED_ACTIVITY_THRESHOLD_DAYS = {
    'exercise': 3,
    'social_time': 5,
    'friends': 5,
    'family': 5,
}

LOW_MOOD_STREAK_ENTRIES = 3
SLEEP_WARNING_ENTRIES = 5
SLEEP_WARNING_MAX_AVG_HOURS = 6.0
POSITIVE_STREAK_ENTRIES = 5

# ============================================
# JOURNAL PROMPTS
# ============================================
PROMPT_RECENT_DAYS = 7
PROMPT_DEFAULT_RECENT_AVERAGE = 3.0
PROMPT_MOOD_SHIFT = 1.0
PROMPT_PATTERN_ENTRIES = 3

WORK_ACTIVITIES = ('work', 'work_hours')
SOCIAL_ACTIVITIES = ('social_time', 'friends')

# ============================================
# NOTIFICATIONS
# ============================================
NOTIFICATION_TYPE_CHOICES = [
    ('info', 'Information'),
    ('reminder', 'Reminder'),
    ('trigger', 'Trigger'),
    ('achievement', 'Achievement'),
]
