"""
Trigger Manager

Decides whether a proactive alert should fire, from a fixed rule set:

| Rule                    | Priority | Cool-down |
|-------------------------|----------|-----------|
| missed_helpful_activity | 2        | 7 days    |
| low_mood_streak         | 3        | 7 days    |
| sleep_warning           | 2        | 7 days    |
| positive_streak         | 1        | 14 days   |

A rule whose type already fired inside its cool-down window is skipped
entirely. At most one trigger is returned per evaluation: the highest
priority, with ties going to the rule evaluated first.

Pure: persisting the decision is the caller's job (see TriggerService).
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence
import logging

import numpy as np

from mood.analytics.records import CorrelationRecord, MoodRecord, TriggerRecord
from mood.utils.constants import (
    GOOD_MOOD_THRESHOLD, HELPFUL_ACTIVITY_MIN_SUCCESS_RATE, LOW_MOOD_STREAK_ENTRIES,
    LOW_MOOD_THRESHOLD, MISSED_ACTIVITY_DEFAULT_DAYS, MISSED_ACTIVITY_THRESHOLD_DAYS,
    POSITIVE_STREAK_ENTRIES, SLEEP_WARNING_ENTRIES, SLEEP_WARNING_MAX_AVG_HOURS,
    TRIGGER_COOLDOWN_DAYS, TRIGGER_LOW_MOOD_STREAK, TRIGGER_MISSED_HELPFUL_ACTIVITY,
    TRIGGER_POSITIVE_STREAK, TRIGGER_PRIORITIES, TRIGGER_SLEEP_WARNING,
)
from mood.utils.time_utils import days_ago, resolve_now, whole_days_between

logger = logging.getLogger(__name__)


class TriggerType(Enum):
    """Types of proactive alerts"""
    MISSED_HELPFUL_ACTIVITY = TRIGGER_MISSED_HELPFUL_ACTIVITY
    LOW_MOOD_STREAK = TRIGGER_LOW_MOOD_STREAK
    SLEEP_WARNING = TRIGGER_SLEEP_WARNING
    POSITIVE_STREAK = TRIGGER_POSITIVE_STREAK

    @property
    def priority(self) -> int:
        return TRIGGER_PRIORITIES[self.value]

    @property
    def cooldown_days(self) -> int:
        return TRIGGER_COOLDOWN_DAYS[self.value]


@dataclass
class PendingTrigger:
    """A trigger that should fire (not yet persisted)."""
    trigger_type: TriggerType
    message: str
    priority: int


def threshold_days(activity_id: str) -> int:
    """Days without a helpful activity before it counts as missed."""
    return MISSED_ACTIVITY_THRESHOLD_DAYS.get(activity_id, MISSED_ACTIVITY_DEFAULT_DAYS)


def has_fired_recently(
    trigger_type: TriggerType,
    existing_triggers: Sequence[TriggerRecord],
    now: datetime
) -> bool:
    """True if a trigger of this type fired within its cool-down window."""
    cutoff = days_ago(now, trigger_type.cooldown_days)
    return any(
        t.trigger_type == trigger_type.value and t.fired_at >= cutoff
        for t in existing_triggers
    )


def _newest_first(entries: Sequence[MoodRecord]) -> List[MoodRecord]:
    return sorted(entries, key=lambda e: e.timestamp, reverse=True)


class TriggerManager:
    """
    Evaluates every trigger rule against one snapshot.

    Example usage:
        pending = TriggerManager.evaluate(entries, correlations, existing_triggers, now=now)
        if pending:
            print(pending.trigger_type.value, pending.message)
    """

    @staticmethod
    def rules() -> List[Callable]:
        """Rule checks in evaluation order (also the tie-break order)."""
        return [
            TriggerManager.check_missed_helpful_activity,
            TriggerManager.check_low_mood_streak,
            TriggerManager.check_sleep_warning,
            TriggerManager.check_positive_streak,
        ]

    @staticmethod
    def evaluate(
        entries: Sequence[MoodRecord],
        correlations: Sequence[CorrelationRecord],
        existing_triggers: Sequence[TriggerRecord],
        now: Optional[datetime] = None
    ) -> Optional[PendingTrigger]:
        """
        Check all rules and return the single trigger that should fire, if any.

        Args:
            entries: Mood history snapshot
            correlations: Current correlation rows
            existing_triggers: Trigger log, used for cool-down checks
            now: Evaluation time (defaults to the current time)
        """
        now = resolve_now(now)
        selected = None

        for rule in TriggerManager.rules():
            pending = rule(entries, correlations, existing_triggers, now)
            if pending is None:
                continue
            if selected is None or pending.priority > selected.priority:
                selected = pending

        if selected is not None:
            logger.debug(f"Selected trigger {selected.trigger_type.value} (priority {selected.priority})")
        return selected

    @staticmethod
    def check_missed_helpful_activity(entries, correlations, existing_triggers, now) -> Optional[PendingTrigger]:
        """A usually-helpful activity (>70% success) has not been done for a while."""
        trigger_type = TriggerType.MISSED_HELPFUL_ACTIVITY
        if has_fired_recently(trigger_type, existing_triggers, now):
            return None

        ordered = _newest_first(entries)

        for correlation in correlations:
            if correlation.success_rate <= HELPFUL_ACTIVITY_MIN_SUCCESS_RATE:
                continue

            last_entry = next((e for e in ordered if e.has_activity(correlation.activity_id)), None)
            if last_entry is None:
                continue

            days_since = whole_days_between(last_entry.timestamp, now)
            if days_since >= threshold_days(correlation.activity_id):
                return PendingTrigger(
                    trigger_type=trigger_type,
                    message=(
                        f"Haven't done {correlation.activity_id} in {days_since} days. "
                        f"It usually helps your mood by {int(correlation.success_rate * 100)}%"
                    ),
                    priority=trigger_type.priority,
                )

        return None

    @staticmethod
    def check_low_mood_streak(entries, correlations, existing_triggers, now) -> Optional[PendingTrigger]:
        """The three most recent check-ins were all low."""
        trigger_type = TriggerType.LOW_MOOD_STREAK
        recent = _newest_first(entries)[:LOW_MOOD_STREAK_ENTRIES]

        if len(recent) < LOW_MOOD_STREAK_ENTRIES:
            return None
        if not all(e.mood <= LOW_MOOD_THRESHOLD for e in recent):
            return None
        if has_fired_recently(trigger_type, existing_triggers, now):
            return None

        return PendingTrigger(
            trigger_type=trigger_type,
            message="Rough few days. Here are 3 things that have helped you before",
            priority=trigger_type.priority,
        )

    @staticmethod
    def check_sleep_warning(entries, correlations, existing_triggers, now) -> Optional[PendingTrigger]:
        """The five most recent sleep values average under six hours."""
        trigger_type = TriggerType.SLEEP_WARNING
        recent = [e for e in _newest_first(entries) if e.sleep_hours is not None][:SLEEP_WARNING_ENTRIES]

        if len(recent) < SLEEP_WARNING_ENTRIES:
            return None

        avg_sleep = float(np.mean([e.sleep_hours for e in recent]))
        if avg_sleep >= SLEEP_WARNING_MAX_AVG_HOURS:
            return None
        if has_fired_recently(trigger_type, existing_triggers, now):
            return None

        return PendingTrigger(
            trigger_type=trigger_type,
            message=(
                f"Sleep's been rough (avg {avg_sleep:.1f}h). "
                f"This typically affects mood in 2-3 days"
            ),
            priority=trigger_type.priority,
        )

    @staticmethod
    def check_positive_streak(entries, correlations, existing_triggers, now) -> Optional[PendingTrigger]:
        """The five most recent check-ins were all good."""
        trigger_type = TriggerType.POSITIVE_STREAK
        recent = _newest_first(entries)[:POSITIVE_STREAK_ENTRIES]

        if len(recent) < POSITIVE_STREAK_ENTRIES:
            return None
        if not all(e.mood >= GOOD_MOOD_THRESHOLD for e in recent):
            return None
        if has_fired_recently(trigger_type, existing_triggers, now):
            return None

        return PendingTrigger(
            trigger_type=trigger_type,
            message="Great week! Keep up whatever you're doing",
            priority=trigger_type.priority,
        )


def evaluate_triggers(entries, correlations, existing_triggers, now=None) -> Optional[PendingTrigger]:
    """Convenience wrapper around TriggerManager.evaluate."""
    return TriggerManager.evaluate(entries, correlations, existing_triggers, now=now)
