"""
Correlation Engine

Reduces a mood history into per-activity statistics: how mood looks on
days with an activity versus days without it, and how often a day with the
activity ended well.

No significance testing - plain means and rates over the full history.
"""
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
import logging

import numpy as np

from mood.analytics.records import CorrelationRecord, MoodRecord
from mood.utils.constants import (
    CORRELATION_MIN_OBSERVATIONS, CORRELATION_MIN_TOTAL_ENTRIES, GOOD_MOOD_THRESHOLD,
)
from mood.utils.time_utils import resolve_now

logger = logging.getLogger(__name__)


class CorrelationEngine:
    """
    Computes ActivityCorrelation rows from a history snapshot.

    Example usage:
        rows = CorrelationEngine.calculate_all(entries, ['exercise', 'reading'])
        for row in rows:
            print(row.activity_id, row.success_rate)
    """

    MIN_TOTAL_ENTRIES = CORRELATION_MIN_TOTAL_ENTRIES
    MIN_OBSERVATIONS = CORRELATION_MIN_OBSERVATIONS

    @staticmethod
    def calculate_all(
        entries: Sequence[MoodRecord],
        tracked_activities: Iterable[str],
        now: Optional[datetime] = None
    ) -> List[CorrelationRecord]:
        """
        Calculate correlations for every tracked activity.

        Args:
            entries: Full mood history
            tracked_activities: Activity ids to analyze (duplicates ignored)
            now: Timestamp stamped on every row as last_calculated

        Returns:
            One row per activity with enough observations, in the order the
            activities were given. Empty when the history is too short.
        """
        if len(entries) < CorrelationEngine.MIN_TOTAL_ENTRIES:
            logger.debug(
                f"Skipping correlations: {len(entries)} entries, "
                f"need {CorrelationEngine.MIN_TOTAL_ENTRIES}"
            )
            return []

        calculated_at = resolve_now(now)
        correlations = []

        for activity_id in dict.fromkeys(tracked_activities):
            correlation = CorrelationEngine.calculate_for_activity(activity_id, entries, calculated_at)
            if correlation is not None:
                correlations.append(correlation)

        return correlations

    @staticmethod
    def calculate_for_activity(
        activity_id: str,
        entries: Sequence[MoodRecord],
        calculated_at: datetime
    ) -> Optional[CorrelationRecord]:
        """Correlation for one activity, or None with fewer than 3 observations."""
        with_moods = [e.mood for e in entries if e.has_activity(activity_id)]
        without_moods = [e.mood for e in entries if not e.has_activity(activity_id)]

        if len(with_moods) < CorrelationEngine.MIN_OBSERVATIONS:
            return None

        successes = sum(1 for mood in with_moods if mood >= GOOD_MOOD_THRESHOLD)

        return CorrelationRecord(
            activity_id=activity_id,
            avg_mood_with=float(np.mean(with_moods)),
            avg_mood_without=float(np.mean(without_moods)) if without_moods else None,
            success_rate=successes / len(with_moods),
            times_observed=len(with_moods),
            last_calculated=calculated_at,
        )


def calculate_correlations(entries, tracked_activities, now=None) -> List[CorrelationRecord]:
    """Convenience wrapper around CorrelationEngine.calculate_all."""
    return CorrelationEngine.calculate_all(entries, tracked_activities, now=now)
