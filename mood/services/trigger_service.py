"""
Trigger Service

Runs the trigger rules for a user and records the one that fires.

Evaluation and the append happen inside one per-user critical section, so
two overlapping evaluations can never both fire the same type inside its
cool-down window. Delivery runs after the append has committed; it can fail
without undoing the trigger.
"""
from dataclasses import dataclass
from typing import Optional
import logging

from mood.analytics.records import TriggerRecord
from mood.analytics.trigger_manager import PendingTrigger, TriggerManager, TriggerType
from mood.exceptions import NotificationError
from mood.repositories import CorrelationRepository, MoodHistoryRepository, TriggerRepository
from mood.services.notification_service import NotificationDispatcher
from mood.utils.logging_utils import log_execution_time
from mood.utils.time_utils import SystemClock, days_ago

logger = logging.getLogger(__name__)


@dataclass
class TriggerEvaluation:
    """Outcome of one evaluation."""
    pending: Optional[PendingTrigger] = None
    trigger: Optional[TriggerRecord] = None
    delivered: bool = False
    delivery_error: Optional[str] = None

    @property
    def fired(self) -> bool:
        return self.trigger is not None

    def to_dict(self) -> dict:
        data = {
            'fired': self.fired,
            'delivered': self.delivered,
            'delivery_error': self.delivery_error,
            'trigger': None,
        }
        if self.trigger is not None:
            data['trigger'] = {
                'trigger_id': self.trigger.trigger_id,
                'trigger_type': self.trigger.trigger_type,
                'message': self.trigger.message,
                'fired_at': self.trigger.fired_at.isoformat(),
                'priority': self.pending.priority if self.pending else None,
                'dismissed': self.trigger.dismissed,
            }
        return data


class TriggerService:
    """
    Example usage:
        service = TriggerService(user, dispatcher=NotificationDispatcher())
        result = service.evaluate()
        if result.fired:
            print(result.trigger.message)
    """

    def __init__(self, user, dispatcher=None, history=None, correlations=None, triggers=None, clock=None):
        self.user = user
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.history = history or MoodHistoryRepository(user)
        self.correlations = correlations or CorrelationRepository(user)
        self.triggers = triggers or TriggerRepository(user)
        self.clock = clock or SystemClock()

    @log_execution_time('triggers.evaluate')
    def evaluate(self) -> TriggerEvaluation:
        """
        Evaluate all rules and append the winning trigger, if any.

        Raises:
            StorageError: a store could not be read, or the append failed;
                in the latter case nothing counts as fired
        """
        with self.triggers.locked():
            now = self.clock.now()
            entries = self.history.read_all()
            correlations = self.correlations.read_all()
            existing = self._recent_triggers(now)

            pending = TriggerManager.evaluate(entries, correlations, existing, now=now)
            if pending is None:
                logger.info(f"No trigger fired for user {self.user.pk}")
                return TriggerEvaluation()

            trigger = self.triggers.append(pending.trigger_type.value, pending.message, fired_at=now)

        logger.info(f"Fired {trigger.trigger_type} trigger for user {self.user.pk}")
        result = TriggerEvaluation(pending=pending, trigger=trigger)
        self._deliver(result)
        return result

    def _recent_triggers(self, now):
        """One windowed read per type, each covering that type's cool-down."""
        return [
            trigger
            for trigger_type in TriggerType
            for trigger in self.triggers.read_since(trigger_type.value, days_ago(now, trigger_type.cooldown_days))
        ]

    def _deliver(self, result: TriggerEvaluation):
        try:
            notification = self.dispatcher.send_trigger(self.user, result.trigger)
        except NotificationError as e:
            logger.warning(f"Trigger {result.trigger.trigger_id} fired but was not delivered: {e}")
            result.delivery_error = str(e)
            return
        result.delivered = notification is not None

    def dismiss(self, trigger_id: str) -> TriggerRecord:
        """Raises TriggerNotFoundError for an unknown id."""
        record = self.triggers.mark_dismissed(trigger_id)
        logger.info(f"User {self.user.pk} dismissed trigger {trigger_id}")
        return record
