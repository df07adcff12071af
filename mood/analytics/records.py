"""
Immutable snapshots handed to the analytics engines.

The engines never see ORM objects; repositories convert rows into these
records so every computation runs over a fixed, fully-materialized history.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class MoodRecord:
    entry_id: str
    timestamp: datetime
    mood: int
    activities: FrozenSet[str] = frozenset()
    sleep_hours: Optional[float] = None
    energy_level: Optional[int] = None
    note: str = ''

    def has_activity(self, activity_id: str) -> bool:
        return activity_id in self.activities


@dataclass(frozen=True)
class CorrelationRecord:
    """
    Per-activity statistics.

    Attributes:
        activity_id: Activity identifier (exact string match)
        avg_mood_with: Mean mood over entries containing the activity
        avg_mood_without: Mean mood over the remaining entries, or None when
            every entry contains the activity
        success_rate: Fraction of "with" entries whose mood was >= 4
        times_observed: Number of entries containing the activity
        last_calculated: When this row was computed
    """
    activity_id: str
    avg_mood_with: float
    avg_mood_without: Optional[float]
    success_rate: float
    times_observed: int
    last_calculated: datetime

    @property
    def correlation_strength(self) -> Optional[float]:
        if self.avg_mood_without is None:
            return None
        return self.avg_mood_with - self.avg_mood_without


@dataclass(frozen=True)
class TriggerRecord:
    trigger_id: str
    trigger_type: str
    fired_at: datetime
    message: str
    dismissed: bool = False
