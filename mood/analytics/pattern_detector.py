"""
Pattern Detector

Scans a mood history for recurring temporal patterns:
- Mood streaks (3+ consecutive entries in the same mood category)
- Day-of-week effects (one weekday far from the typical day)
- Sleep effects (mood after short nights vs. after good nights)

Stateless and deterministic. Each detector answers None when the history
does not carry enough data for it.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from mood.analytics.records import MoodRecord
from mood.utils.constants import (
    CONFIDENCE_DIVISOR, DAY_OF_WEEK_MIN_DEVIATION, DAY_OF_WEEK_MIN_ENTRIES,
    GOOD_MOOD_THRESHOLD, LOW_MOOD_THRESHOLD, MOOD_CATEGORY_HIGH, MOOD_CATEGORY_LOW,
    MOOD_CATEGORY_NEUTRAL, SLEEP_GOOD_HOURS, SLEEP_LOW_HOURS, SLEEP_MIN_ENTRIES,
    SLEEP_MIN_MOOD_DELTA, STREAK_FULL_CONFIDENCE_LENGTH, STREAK_MIN_LENGTH, WEEKDAY_NAMES,
)
from mood.utils.time_utils import local_weekday


class PatternType(Enum):
    """Kinds of detected patterns"""
    LOW_MOOD_STREAK = "low_mood_streak"
    HIGH_MOOD_STREAK = "high_mood_streak"
    NEUTRAL_STREAK = "neutral_streak"
    DAY_OF_WEEK = "day_of_week"
    SLEEP_CORRELATION = "sleep_correlation"


STREAK_TYPES = {
    MOOD_CATEGORY_LOW: PatternType.LOW_MOOD_STREAK,
    MOOD_CATEGORY_HIGH: PatternType.HIGH_MOOD_STREAK,
    MOOD_CATEGORY_NEUTRAL: PatternType.NEUTRAL_STREAK,
}


@dataclass
class Pattern:
    """
    A detected pattern.

    Attributes:
        pattern_type: Kind of pattern (from PatternType enum)
        description: Human-readable observation
        confidence: 0-1, grows with the size of the effect
        evidence: Raw numbers behind the observation
    """
    pattern_type: PatternType
    description: str
    confidence: float
    evidence: Dict = field(default_factory=dict)


def mood_category(mood: int) -> str:
    if mood <= LOW_MOOD_THRESHOLD:
        return MOOD_CATEGORY_LOW
    if mood >= GOOD_MOOD_THRESHOLD:
        return MOOD_CATEGORY_HIGH
    return MOOD_CATEGORY_NEUTRAL


def _capped(value: float, divisor: float) -> float:
    return min(value / divisor, 1.0)


class PatternDetector:
    """
    Runs every pattern rule over one history snapshot.

    Example usage:
        for pattern in PatternDetector.detect_patterns(entries):
            print(pattern.pattern_type.value, pattern.description)
    """

    @staticmethod
    def detect_patterns(entries: Sequence[MoodRecord]) -> List[Pattern]:
        """Return zero to three patterns: streak, day-of-week, sleep (in that order)."""
        patterns = []

        for detector in (
            PatternDetector.detect_streak,
            PatternDetector.detect_day_of_week,
            PatternDetector.detect_sleep_correlation,
        ):
            pattern = detector(entries)
            if pattern is not None:
                patterns.append(pattern)

        return patterns

    @staticmethod
    def detect_streak(entries: Sequence[MoodRecord]) -> Optional[Pattern]:
        """
        Report the first run of 3 same-category entries in chronological order.

        Scanning stops as soon as a run reaches the minimum length, so a
        later (possibly longer) run is never reported.
        """
        ordered = sorted(entries, key=lambda e: e.timestamp)
        if len(ordered) < STREAK_MIN_LENGTH:
            return None

        run_length = 1
        for previous, current in zip(ordered, ordered[1:]):
            category = mood_category(current.mood)
            if mood_category(previous.mood) == category:
                run_length += 1
            else:
                run_length = 1

            if run_length >= STREAK_MIN_LENGTH:
                return Pattern(
                    pattern_type=STREAK_TYPES[category],
                    description=f"You've felt {category} for {run_length} check-ins in a row",
                    confidence=_capped(run_length, STREAK_FULL_CONFIDENCE_LENGTH),
                    evidence={
                        'category': category,
                        'streak_length': run_length,
                        'ended_at': current.timestamp.isoformat(),
                    }
                )

        return None

    @staticmethod
    def detect_day_of_week(entries: Sequence[MoodRecord]) -> Optional[Pattern]:
        """
        Find the weekday that deviates most from the mean of weekday means.

        The baseline is the mean of the per-weekday means, so a weekday with
        many entries weighs no more than one with few.
        """
        if len(entries) < DAY_OF_WEEK_MIN_ENTRIES:
            return None

        moods_by_day = defaultdict(list)
        for entry in entries:
            moods_by_day[local_weekday(entry.timestamp)].append(entry.mood)

        day_averages = [
            (day, float(np.mean(moods_by_day[day])))
            for day in sorted(WEEKDAY_NAMES)
            if moods_by_day[day]
        ]
        overall = float(np.mean([avg for _, avg in day_averages]))

        outlier_day, outlier_avg = day_averages[0]
        for day, avg in day_averages[1:]:
            if abs(avg - overall) > abs(outlier_avg - overall):
                outlier_day, outlier_avg = day, avg

        deviation = abs(outlier_avg - overall)
        if deviation < DAY_OF_WEEK_MIN_DEVIATION:
            return None

        day_name = WEEKDAY_NAMES[outlier_day]
        return Pattern(
            pattern_type=PatternType.DAY_OF_WEEK,
            description=(
                f"{day_name}s average {outlier_avg:.1f}, "
                f"your overall average is {overall:.1f}"
            ),
            confidence=_capped(deviation, CONFIDENCE_DIVISOR),
            evidence={
                'weekday': outlier_day,
                'weekday_name': day_name,
                'weekday_average': round(outlier_avg, 2),
                'overall_average': round(overall, 2),
                'deviation': round(outlier_avg - overall, 2),
            }
        )

    @staticmethod
    def detect_sleep_correlation(entries: Sequence[MoodRecord]) -> Optional[Pattern]:
        """Compare mood after short nights (<6h) with mood after good nights (>=7.5h)."""
        with_sleep = [e for e in entries if e.sleep_hours is not None]
        if len(with_sleep) < SLEEP_MIN_ENTRIES:
            return None

        low_sleep = [e.mood for e in with_sleep if e.sleep_hours < SLEEP_LOW_HOURS]
        good_sleep = [e.mood for e in with_sleep if e.sleep_hours >= SLEEP_GOOD_HOURS]

        if not low_sleep or not good_sleep:
            return None

        low_avg = float(np.mean(low_sleep))
        good_avg = float(np.mean(good_sleep))
        delta = good_avg - low_avg

        if delta < SLEEP_MIN_MOOD_DELTA:
            return None

        return Pattern(
            pattern_type=PatternType.SLEEP_CORRELATION,
            description=(
                f"Mood drops when sleep < {SLEEP_LOW_HOURS:g} hours "
                f"(avg {low_avg:.1f} vs {good_avg:.1f})"
            ),
            confidence=_capped(delta, CONFIDENCE_DIVISOR),
            evidence={
                'low_sleep_average': round(low_avg, 2),
                'good_sleep_average': round(good_avg, 2),
                'low_sleep_entries': len(low_sleep),
                'good_sleep_entries': len(good_sleep),
            }
        )


def detect_patterns(entries) -> List[Pattern]:
    """Convenience wrapper around PatternDetector.detect_patterns."""
    return PatternDetector.detect_patterns(entries)
