from datetime import timedelta

import pytest

from mood.analytics.pattern_detector import PatternDetector, PatternType, detect_patterns, mood_category
from mood.tests.factories import NOW, RecordFactory


def weekday_history(mood_for_offset, days=14):
    """
    One entry per day for `days` days ending on NOW (a Monday).

    offset % 7: 0=Mon, 6=Tue, 5=Wed, 4=Thu, 3=Fri, 2=Sat, 1=Sun
    """
    return [
        RecordFactory.entry(mood_for_offset(offset % 7), days_ago=offset)
        for offset in range(days)
    ]


def sleep_history(nights):
    """`nights` is a list of (sleep_hours, mood)."""
    return [
        RecordFactory.entry(mood, days_ago=len(nights) - i, sleep_hours=hours)
        for i, (hours, mood) in enumerate(nights)
    ]


class TestMoodCategory:

    @pytest.mark.parametrize('mood,category', [(1, 'low'), (2, 'low'), (3, 'neutral'), (4, 'high'), (5, 'high')])
    def test_categories(self, mood, category):
        assert mood_category(mood) == category


class TestStreakDetection:

    def test_first_run_is_reported_and_scan_stops(self):
        pattern = PatternDetector.detect_streak(RecordFactory.series([5, 5, 5, 2, 2]))

        assert pattern.pattern_type == PatternType.HIGH_MOOD_STREAK
        assert pattern.evidence['streak_length'] == 3
        assert pattern.confidence == pytest.approx(0.43, abs=0.01)

    def test_later_longer_run_is_not_reported(self):
        pattern = PatternDetector.detect_streak(RecordFactory.series([3, 3, 3, 1, 1, 1, 1, 1]))

        assert pattern.pattern_type == PatternType.NEUTRAL_STREAK
        assert pattern.evidence['streak_length'] == 3

    def test_low_streak(self):
        pattern = PatternDetector.detect_streak(RecordFactory.series([4, 1, 2, 2]))

        assert pattern.pattern_type == PatternType.LOW_MOOD_STREAK
        assert pattern.description == "You've felt low for 3 check-ins in a row"

    def test_same_day_check_ins_count_as_separate_entries(self):
        entries = [
            RecordFactory.entry(2, timestamp=NOW - timedelta(hours=hours))
            for hours in (9, 6, 3)
        ]
        pattern = PatternDetector.detect_streak(entries)

        assert pattern.evidence['streak_length'] == 3
        assert pattern.description == "You've felt low for 3 check-ins in a row"

    def test_input_order_does_not_matter(self):
        entries = RecordFactory.series([5, 5, 5, 2, 2])
        pattern = PatternDetector.detect_streak(list(reversed(entries)))
        assert pattern.pattern_type == PatternType.HIGH_MOOD_STREAK

    def test_alternating_moods_have_no_streak(self):
        assert PatternDetector.detect_streak(RecordFactory.series([4, 2, 4, 2, 3, 5])) is None

    def test_too_few_entries(self):
        assert PatternDetector.detect_streak(RecordFactory.series([1, 1])) is None


class TestDayOfWeek:

    def test_outlier_weekday_is_reported(self):
        entries = weekday_history(lambda day: 1 if day == 0 else 4)
        pattern = PatternDetector.detect_day_of_week(entries)

        assert pattern.pattern_type == PatternType.DAY_OF_WEEK
        assert pattern.evidence['weekday'] == 1
        assert pattern.evidence['weekday_name'] == 'Monday'
        assert pattern.evidence['overall_average'] == pytest.approx(25 / 7, abs=0.01)
        assert pattern.confidence == 1.0
        assert pattern.description == "Mondays average 1.0, your overall average is 3.6"

    def test_thirteen_entries_is_not_enough(self):
        entries = weekday_history(lambda day: 1 if day == 0 else 5, days=13)
        assert PatternDetector.detect_day_of_week(entries) is None

    def test_flat_week_has_no_pattern(self):
        assert PatternDetector.detect_day_of_week(weekday_history(lambda day: 3)) is None

    def test_small_deviation_is_ignored(self):
        # Monday 2, others 3: deviation from mean-of-means is 6/7
        entries = weekday_history(lambda day: 2 if day == 0 else 3)
        assert PatternDetector.detect_day_of_week(entries) is None

    def test_tie_goes_to_earliest_weekday(self):
        # Monday 1, Tuesday 5, rest 3: both deviate by exactly 2
        entries = weekday_history(lambda day: {0: 1, 6: 5}.get(day, 3))
        pattern = PatternDetector.detect_day_of_week(entries)

        assert pattern.evidence['weekday'] == 1
        assert pattern.evidence['deviation'] == pytest.approx(-2.0)

    def test_baseline_is_mean_of_weekday_means(self):
        # Three extra Friday entries must not drag the baseline towards Friday
        entries = weekday_history(lambda day: 1 if day == 0 else 4)
        entries += [RecordFactory.entry(4, days_ago=3) for _ in range(3)]
        pattern = PatternDetector.detect_day_of_week(entries)

        assert pattern.evidence['overall_average'] == pytest.approx(25 / 7, abs=0.01)


class TestSleepCorrelation:

    def test_sleep_pattern_fires(self):
        nights = [(5.0, 4), (5.5, 4), (4.0, 4), (8.0, 5), (7.5, 5), (9.0, 5)]
        nights += [(6.5, 3)] * 4
        pattern = PatternDetector.detect_sleep_correlation(sleep_history(nights))

        assert pattern.pattern_type == PatternType.SLEEP_CORRELATION
        assert pattern.confidence == pytest.approx(0.5)
        assert pattern.evidence['low_sleep_average'] == 4.0
        assert pattern.evidence['good_sleep_average'] == 5.0
        assert pattern.description == "Mood drops when sleep < 6 hours (avg 4.0 vs 5.0)"

    def test_needs_ten_entries_with_sleep(self):
        nights = [(5.0, 1)] * 4 + [(8.0, 5)] * 5
        entries = sleep_history(nights) + [RecordFactory.entry(3, days_ago=20)]
        assert PatternDetector.detect_sleep_correlation(entries) is None

    def test_needs_both_buckets(self):
        nights = [(5.0, 2)] * 5 + [(6.5, 4)] * 5
        assert PatternDetector.detect_sleep_correlation(sleep_history(nights)) is None

    def test_small_delta_is_ignored(self):
        nights = [(5.0, 3)] * 5 + [(8.0, 3)] * 4 + [(8.0, 4)]
        assert PatternDetector.detect_sleep_correlation(sleep_history(nights)) is None


class TestDetectPatterns:

    def test_empty_history(self):
        assert detect_patterns([]) == []

    def test_returns_at_most_three_in_fixed_order(self):
        entries = weekday_history(lambda day: 1 if day == 0 else 4)
        entries = [
            RecordFactory.entry(e.mood, timestamp=e.timestamp, sleep_hours=5.0 if e.mood == 1 else 8.0)
            for e in entries
        ]
        patterns = detect_patterns(entries)

        assert [p.pattern_type for p in patterns] == [
            PatternType.HIGH_MOOD_STREAK,
            PatternType.DAY_OF_WEEK,
            PatternType.SLEEP_CORRELATION,
        ]
