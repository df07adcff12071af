"""
Journal Prompt Generator

Picks a context-aware journaling prompt for a check-in. Rules are tried in
order and the first match wins:
1. Mood drop against the 7-day average
2. Mood improvement against the 7-day average
3. Same mood for the last few check-ins
4. Activity-specific prompt
5. Generic prompt
"""
from datetime import datetime
import random
from typing import Dict, List, Optional, Sequence

from mood.analytics.history_stats import average_mood, entries_since
from mood.analytics.records import MoodRecord
from mood.utils.constants import (
    PROMPT_DEFAULT_RECENT_AVERAGE, PROMPT_MOOD_SHIFT, PROMPT_PATTERN_ENTRIES,
    PROMPT_RECENT_DAYS, SOCIAL_ACTIVITIES, WORK_ACTIVITIES,
)
from mood.utils.time_utils import resolve_now


DEFAULT_PROMPTS = [
    "What's the main thing affecting how you feel?",
    "What's on your mind right now?",
    "How are you really doing today?",
    "What's one thing you're grateful for today?",
    "What would make tomorrow better?",
]

ACTIVITY_PROMPTS: Dict[str, List[str]] = {
    'exercise': [
        "How did the workout feel?",
        "Did exercise help or drain you today?",
        "How's your body feeling after that?",
    ],
    'work': [
        "What about work felt especially challenging?",
        "Work today - what stood out?",
        "How was the work situation today?",
    ],
    'social': [
        "How did social time feel today?",
        "What was it like connecting with people?",
        "Did social time energize or drain you?",
    ],
}

PROMPT_MOOD_WORDS = {
    1: 'terrible',
    2: 'down',
    3: 'okay',
    4: 'good',
    5: 'great',
}


def _contains_any(activities: Sequence[str], candidates) -> bool:
    return any(a in activities for a in candidates)


class PromptGenerator:
    """
    Example usage:
        generator = PromptGenerator(rng=random.Random(7))
        prompt = generator.generate_prompt(2, ['work'], recent_entries, now=now)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate_prompt(
        self,
        current_mood: int,
        selected_activities: Sequence[str],
        recent_entries: Sequence[MoodRecord],
        now: Optional[datetime] = None
    ) -> str:
        now = resolve_now(now)
        recent_avg = self._recent_average(recent_entries, now)

        for prompt in (
            self._prompt_for_mood_drop(current_mood, recent_avg, selected_activities),
            self._prompt_for_mood_improvement(current_mood, recent_avg, selected_activities, recent_entries),
            self._prompt_for_pattern_continuation(current_mood, recent_entries),
            self._prompt_for_activity(selected_activities),
        ):
            if prompt is not None:
                return prompt

        return self.rng.choice(DEFAULT_PROMPTS)

    @staticmethod
    def _recent_average(entries: Sequence[MoodRecord], now: datetime) -> float:
        recent = entries_since(entries, PROMPT_RECENT_DAYS, now)
        if not recent:
            return PROMPT_DEFAULT_RECENT_AVERAGE
        return average_mood(recent)

    @staticmethod
    def _prompt_for_mood_drop(current_mood, recent_avg, activities) -> Optional[str]:
        if current_mood >= recent_avg - PROMPT_MOOD_SHIFT:
            return None

        if _contains_any(activities, WORK_ACTIVITIES):
            return "What about work felt especially hard today?"
        if _contains_any(activities, SOCIAL_ACTIVITIES):
            return "How did social time feel different than usual?"
        return "Something shifted today. What changed?"

    @staticmethod
    def _prompt_for_mood_improvement(current_mood, recent_avg, activities, recent_entries) -> Optional[str]:
        if current_mood <= recent_avg + PROMPT_MOOD_SHIFT:
            return None

        seen = set()
        for entry in recent_entries:
            seen.update(entry.activities)

        new_activity = next((a for a in activities if a not in seen), None)
        if new_activity is not None:
            return f"First time trying {new_activity.replace('_', ' ').lower()} - how was it?"
        return "You seem brighter! What helped today?"

    @staticmethod
    def _prompt_for_pattern_continuation(current_mood, recent_entries) -> Optional[str]:
        latest = sorted(recent_entries, key=lambda e: e.timestamp, reverse=True)[:PROMPT_PATTERN_ENTRIES]
        if len(latest) < PROMPT_PATTERN_ENTRIES:
            return None

        if all(abs(e.mood - current_mood) <= 1 for e in latest):
            word = PROMPT_MOOD_WORDS.get(current_mood, 'neutral')
            return f"You've felt {word} for a few days. What's been on your mind?"
        return None

    def _prompt_for_activity(self, activities) -> Optional[str]:
        if 'exercise' in activities:
            return self.rng.choice(ACTIVITY_PROMPTS['exercise'])
        if _contains_any(activities, WORK_ACTIVITIES):
            return self.rng.choice(ACTIVITY_PROMPTS['work'])
        if _contains_any(activities, SOCIAL_ACTIVITIES):
            return self.rng.choice(ACTIVITY_PROMPTS['social'])
        return None
