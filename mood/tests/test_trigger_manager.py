import pytest

from mood.analytics.trigger_manager import (
    TriggerManager, TriggerType, evaluate_triggers, has_fired_recently, threshold_days,
)
from mood.tests.factories import NOW, RecordFactory


def evaluate(entries, correlations=(), triggers=()):
    return TriggerManager.evaluate(list(entries), list(correlations), list(triggers), now=NOW)


def neutral_week():
    return RecordFactory.series([3, 3, 4, 3, 3, 4, 3])


class TestTriggerTypes:

    def test_priorities_and_cooldowns(self):
        assert TriggerType.LOW_MOOD_STREAK.priority == 3
        assert TriggerType.MISSED_HELPFUL_ACTIVITY.priority == 2
        assert TriggerType.SLEEP_WARNING.priority == 2
        assert TriggerType.POSITIVE_STREAK.priority == 1
        assert TriggerType.POSITIVE_STREAK.cooldown_days == 14
        assert TriggerType.SLEEP_WARNING.cooldown_days == 7

    @pytest.mark.parametrize('activity_id,days', [
        ('exercise', 3), ('social_time', 5), ('friends', 5), ('family', 5), ('reading', 4),
    ])
    def test_missed_thresholds(self, activity_id, days):
        assert threshold_days(activity_id) == days


class TestMissedHelpfulActivity:

    def test_fires_after_threshold(self):
        entries = [RecordFactory.entry(4, days_ago=3, activities=['exercise'])] + neutral_week()[-2:]
        correlations = [RecordFactory.correlation('exercise', success_rate=0.8)]
        pending = evaluate(entries, correlations)

        assert pending.trigger_type == TriggerType.MISSED_HELPFUL_ACTIVITY
        assert pending.priority == 2
        assert pending.message == "Haven't done exercise in 3 days. It usually helps your mood by 80%"

    def test_not_before_threshold(self):
        entries = [RecordFactory.entry(4, days_ago=2, activities=['exercise'])]
        correlations = [RecordFactory.correlation('exercise', success_rate=0.8)]
        assert evaluate(entries, correlations) is None

    def test_rate_must_exceed_seventy_percent(self):
        entries = [RecordFactory.entry(4, days_ago=10, activities=['exercise'])]
        correlations = [RecordFactory.correlation('exercise', success_rate=0.7)]
        assert evaluate(entries, correlations) is None

    def test_never_done_activity_is_skipped(self):
        entries = neutral_week()
        correlations = [RecordFactory.correlation('exercise', success_rate=0.9)]
        assert evaluate(entries, correlations) is None

    def test_first_qualifying_activity_wins(self):
        entries = [
            RecordFactory.entry(4, days_ago=6, activities=['reading']),
            RecordFactory.entry(4, days_ago=5, activities=['exercise']),
        ]
        correlations = [
            RecordFactory.correlation('exercise', success_rate=0.75),
            RecordFactory.correlation('reading', success_rate=0.95),
        ]
        assert 'exercise' in evaluate(entries, correlations).message

    def test_uses_most_recent_occurrence(self):
        entries = [
            RecordFactory.entry(4, days_ago=10, activities=['exercise']),
            RecordFactory.entry(4, days_ago=1, activities=['exercise']),
        ]
        correlations = [RecordFactory.correlation('exercise', success_rate=0.8)]
        assert evaluate(entries, correlations) is None


class TestStreakRules:

    def test_low_mood_streak(self):
        pending = evaluate(RecordFactory.series([4, 2, 1, 2]))

        assert pending.trigger_type == TriggerType.LOW_MOOD_STREAK
        assert pending.priority == 3

    def test_low_mood_streak_needs_three_entries(self):
        assert evaluate(RecordFactory.series([1, 1])) is None

    def test_positive_streak(self):
        pending = evaluate(RecordFactory.series([2, 4, 5, 4, 4, 5]))
        assert pending.trigger_type == TriggerType.POSITIVE_STREAK

    def test_positive_streak_broken_by_neutral_day(self):
        assert evaluate(RecordFactory.series([4, 5, 3, 4, 5])) is None


class TestSleepWarning:

    def test_fires_on_short_average(self):
        entries = [RecordFactory.entry(3, days_ago=d, sleep_hours=5.0) for d in range(5)]
        pending = evaluate(entries)

        assert pending.trigger_type == TriggerType.SLEEP_WARNING
        assert pending.message.startswith("Sleep's been rough (avg 5.0h)")

    def test_entries_without_sleep_are_ignored(self):
        entries = [RecordFactory.entry(3, days_ago=d, sleep_hours=5.0) for d in range(1, 5)]
        entries.append(RecordFactory.entry(3, days_ago=0))
        assert evaluate(entries) is None

    def test_only_five_most_recent_nights_count(self):
        entries = [RecordFactory.entry(3, days_ago=d, sleep_hours=8.0) for d in range(5)]
        entries += [RecordFactory.entry(3, days_ago=d, sleep_hours=2.0) for d in range(5, 10)]
        assert evaluate(entries) is None


class TestPriorityAndCooldown:

    def test_single_highest_priority_trigger(self):
        entries = [RecordFactory.entry(1, days_ago=d, sleep_hours=4.0) for d in range(5)]
        entries.append(RecordFactory.entry(5, days_ago=9, activities=['exercise']))
        correlations = [RecordFactory.correlation('exercise', success_rate=0.9)]

        pending = evaluate(entries, correlations)
        assert pending.trigger_type == TriggerType.LOW_MOOD_STREAK

    def test_equal_priority_goes_to_earlier_rule(self):
        entries = [RecordFactory.entry(3, days_ago=d, sleep_hours=4.0) for d in range(5)]
        entries.append(RecordFactory.entry(5, days_ago=9, activities=['exercise']))
        correlations = [RecordFactory.correlation('exercise', success_rate=0.9)]

        pending = evaluate(entries, correlations)
        assert pending.trigger_type == TriggerType.MISSED_HELPFUL_ACTIVITY

    def test_suppressed_rule_lets_lower_priority_fire(self):
        entries = [RecordFactory.entry(1, days_ago=d, sleep_hours=4.0) for d in range(5)]
        triggers = [RecordFactory.trigger('low_mood_streak', days_ago=2)]

        pending = evaluate(entries, triggers=triggers)
        assert pending.trigger_type == TriggerType.SLEEP_WARNING

    @pytest.mark.parametrize('days_ago,suppressed', [(1, True), (6, True), (7, True), (8, False)])
    def test_low_mood_cooldown_window(self, days_ago, suppressed):
        triggers = [RecordFactory.trigger('low_mood_streak', days_ago=days_ago)]
        pending = evaluate_triggers(RecordFactory.series([1, 1, 1]), [], triggers, now=NOW)
        assert (pending is None) is suppressed

    def test_positive_streak_cooldown_is_two_weeks(self):
        entries = RecordFactory.series([5, 5, 5, 5, 5])
        assert evaluate(entries, triggers=[RecordFactory.trigger('positive_streak', days_ago=13)]) is None
        assert evaluate(entries, triggers=[RecordFactory.trigger('positive_streak', days_ago=15)]) is not None

    def test_other_trigger_types_do_not_suppress(self):
        triggers = [RecordFactory.trigger('sleep_warning', days_ago=1)]
        assert has_fired_recently(TriggerType.LOW_MOOD_STREAK, triggers, NOW) is False

    def test_empty_history(self):
        assert evaluate([]) is None
