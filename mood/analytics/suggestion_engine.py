"""
Suggestion Engine

Recommends the activities most likely to lift the user's mood, ranked from
their own correlations. Falls back to a short generic list until there is
enough history to personalize.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence
import logging

from mood.analytics.history_stats import activity_display_name, entries_since
from mood.analytics.records import CorrelationRecord, MoodRecord
from mood.utils.constants import (
    FALLBACK_REASON, FALLBACK_SUCCESS_RATE, FALLBACK_SUGGESTIONS, FEASIBILITY_CUTOFF_HOURS,
    SUGGESTION_LIMIT, SUGGESTION_MIN_OBSERVATIONS, SUGGESTION_MIN_SUCCESS_RATE,
    SUGGESTION_REASON, SUGGESTION_RECENCY_OVERRIDE_RATE, SUGGESTION_RECENT_DAYS,
)
from mood.utils.time_utils import local_hour, resolve_now

logger = logging.getLogger(__name__)


@dataclass
class Suggestion:
    activity_id: str
    activity_name: str
    success_rate: float
    times_observed: int
    reason: str
    personalized: bool = True

    @property
    def display_text(self) -> str:
        return (
            f"{self.activity_name} helped {int(self.success_rate * 100)}% of the time "
            f"({self.times_observed} observations)"
        )


class SuggestionEngine:
    """
    Ranks correlations into at most three suggestions.

    Example usage:
        suggestions = SuggestionEngine.generate(correlations, current_mood=2, recent_entries=entries)
        feasible = [s for s in suggestions if SuggestionEngine.is_feasible(s.activity_id)]
    """

    MIN_SUCCESS_RATE = SUGGESTION_MIN_SUCCESS_RATE
    MIN_OBSERVATIONS = SUGGESTION_MIN_OBSERVATIONS
    RECENT_DAYS = SUGGESTION_RECENT_DAYS
    RECENCY_OVERRIDE_RATE = SUGGESTION_RECENCY_OVERRIDE_RATE
    LIMIT = SUGGESTION_LIMIT

    @staticmethod
    def generate(
        correlations: Sequence[CorrelationRecord],
        current_mood: int,
        recent_entries: Sequence[MoodRecord],
        now: Optional[datetime] = None
    ) -> List[Suggestion]:
        """
        Generate suggestions.

        Args:
            correlations: Current correlation rows
            current_mood: Mood of the check-in being answered (logged only;
                ranking depends on correlations and recency)
            recent_entries: Recent history used for recency suppression
            now: Evaluation time (defaults to the current time)

        Returns:
            Up to 3 ranked suggestions, or exactly 3 fallbacks when there
            are no correlations at all.
        """
        if not correlations:
            logger.debug(f"No correlations yet, using fallbacks (mood={current_mood})")
            return SuggestionEngine.fallback_suggestions()

        now = resolve_now(now)

        candidates = [
            c for c in correlations
            if c.success_rate >= SuggestionEngine.MIN_SUCCESS_RATE
            and c.times_observed >= SuggestionEngine.MIN_OBSERVATIONS
        ]
        candidates.sort(key=lambda c: (c.success_rate, c.times_observed), reverse=True)

        recent_activities = set()
        for entry in entries_since(recent_entries, SuggestionEngine.RECENT_DAYS, now):
            recent_activities.update(entry.activities)

        # Done recently: only a very strong signal keeps it on the list
        survivors = [
            c for c in candidates
            if c.activity_id not in recent_activities
            or c.success_rate >= SuggestionEngine.RECENCY_OVERRIDE_RATE
        ]

        suggestions = [
            Suggestion(
                activity_id=c.activity_id,
                activity_name=activity_display_name(c.activity_id),
                success_rate=c.success_rate,
                times_observed=c.times_observed,
                reason=SUGGESTION_REASON,
            )
            for c in survivors[:SuggestionEngine.LIMIT]
        ]

        logger.debug(
            f"Ranked {len(candidates)} candidates into {len(suggestions)} suggestions "
            f"(mood={current_mood}, recent activities={len(recent_activities)})"
        )
        return suggestions

    @staticmethod
    def fallback_suggestions() -> List[Suggestion]:
        """Generic, non-personalized suggestions."""
        return [
            Suggestion(
                activity_id=activity_id,
                activity_name=name,
                success_rate=FALLBACK_SUCCESS_RATE,
                times_observed=0,
                reason=FALLBACK_REASON,
                personalized=False,
            )
            for activity_id, name in FALLBACK_SUGGESTIONS
        ]

    @staticmethod
    def is_feasible(activity_id: str, at: Optional[datetime] = None) -> bool:
        """
        Whether an activity makes sense at the given local time.

        Driven by FEASIBILITY_CUTOFF_HOURS: an activity listed there is
        infeasible from its cutoff hour until midnight.
        """
        cutoff_hour = FEASIBILITY_CUTOFF_HOURS.get(activity_id)
        if cutoff_hour is None:
            return True
        return local_hour(resolve_now(at)) < cutoff_hour


def generate_suggestions(correlations, current_mood, recent_entries, now=None) -> List[Suggestion]:
    """Convenience wrapper around SuggestionEngine.generate."""
    return SuggestionEngine.generate(correlations, current_mood, recent_entries, now=now)


def is_feasible(activity_id: str, at: Optional[datetime] = None) -> bool:
    return SuggestionEngine.is_feasible(activity_id, at)
