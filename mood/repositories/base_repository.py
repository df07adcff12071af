"""
Data access for mood history, correlations and the trigger log.

Each repository is scoped to one user and hands out immutable records, never
ORM objects. Database failures surface as the StorageError subclass of the
store involved; nothing here swallows or retries them.
"""
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterable, List, Optional
import logging
import uuid

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction

from mood.analytics.records import CorrelationRecord, MoodRecord, TriggerRecord
from mood.exceptions import (
    CorrelationStoreError, MoodHistoryStoreError, TriggerNotFoundError, TriggerStoreError,
)
from mood.models import ActivityCorrelation, MoodEntry, Trigger

logger = logging.getLogger(__name__)


def lock_user_row(user):
    """
    Take a row lock on the user inside the current transaction.

    Serializes read-then-write sequences for one user's stores. A no-op on
    backends without SELECT ... FOR UPDATE (sqlite serializes writers anyway).
    """
    User = get_user_model()
    return User.objects.select_for_update().filter(pk=user.pk).first()


# =============================================================================
# MOOD HISTORY
# =============================================================================

class MoodHistoryRepository:
    """Read-only view of a user's mood log (plus entry creation for the API)."""

    def __init__(self, user):
        self.user = user

    def read_all(self) -> List[MoodRecord]:
        """Full history, oldest first."""
        try:
            entries = MoodEntry.objects.filter(user=self.user).order_by('timestamp')
            return [entry.to_record() for entry in entries]
        except DatabaseError as e:
            logger.error(f"Error reading mood history for user {self.user.pk}: {e}")
            raise MoodHistoryStoreError('read_all', str(e)) from e

    def distinct_activities(self) -> List[str]:
        """Every activity id that appears in the history, sorted."""
        activities = set()
        for record in self.read_all():
            activities.update(record.activities)
        return sorted(activities)

    def create(self, mood: int, activities: Iterable[str] = (), timestamp: Optional[datetime] = None,
               sleep_hours: Optional[float] = None, energy_level: Optional[int] = None,
               note: str = '') -> MoodRecord:
        """Store a new check-in and return its snapshot."""
        fields = {
            'entry_id': str(uuid.uuid4()),
            'user': self.user,
            'mood': mood,
            'activities': list(dict.fromkeys(activities)),
            'sleep_hours': sleep_hours,
            'energy_level': energy_level,
            'note': note or '',
        }
        if timestamp is not None:
            fields['timestamp'] = timestamp

        try:
            entry = MoodEntry.objects.create(**fields)
        except DatabaseError as e:
            logger.error(f"Error creating mood entry for user {self.user.pk}: {e}")
            raise MoodHistoryStoreError('create', str(e)) from e
        return entry.to_record()


# =============================================================================
# CORRELATIONS
# =============================================================================

class CorrelationRepository:
    """The user's current correlation set. Only ever replaced as a whole."""

    def __init__(self, user):
        self.user = user

    def read_all(self) -> List[CorrelationRecord]:
        try:
            rows = ActivityCorrelation.objects.filter(user=self.user).order_by('activity_id')
            return [row.to_record() for row in rows]
        except DatabaseError as e:
            logger.error(f"Error reading correlations for user {self.user.pk}: {e}")
            raise CorrelationStoreError('read_all', str(e)) from e

    def replace_all(self, rows: Iterable[CorrelationRecord]) -> int:
        """
        Swap the stored set for `rows` in one transaction.

        Either every old row is gone and every new row is present, or (on
        failure) the previous set is untouched.

        Returns:
            Number of rows written
        """
        new_rows = [
            ActivityCorrelation(
                correlation_id=str(uuid.uuid4()),
                user=self.user,
                activity_id=row.activity_id,
                avg_mood_with=row.avg_mood_with,
                avg_mood_without=row.avg_mood_without,
                success_rate=row.success_rate,
                times_observed=row.times_observed,
                last_calculated=row.last_calculated,
            )
            for row in rows
        ]

        try:
            with transaction.atomic():
                lock_user_row(self.user)
                ActivityCorrelation.objects.filter(user=self.user).delete()
                ActivityCorrelation.objects.bulk_create(new_rows)
        except DatabaseError as e:
            logger.error(f"Error replacing correlations for user {self.user.pk}: {e}")
            raise CorrelationStoreError('replace_all', str(e)) from e

        return len(new_rows)


# =============================================================================
# TRIGGER LOG
# =============================================================================

class TriggerRepository:
    """Append-only trigger log for one user."""

    def __init__(self, user):
        self.user = user

    def read_all(self) -> List[TriggerRecord]:
        """Whole log, newest first."""
        try:
            return [t.to_record() for t in Trigger.objects.filter(user=self.user).order_by('-fired_at')]
        except DatabaseError as e:
            logger.error(f"Error reading triggers for user {self.user.pk}: {e}")
            raise TriggerStoreError('read_all', str(e)) from e

    def read_since(self, trigger_type: str, since: datetime) -> List[TriggerRecord]:
        """Triggers of one type fired at or after `since`, newest first."""
        try:
            triggers = Trigger.objects.filter(
                user=self.user,
                trigger_type=trigger_type,
                fired_at__gte=since
            ).order_by('-fired_at')
            return [t.to_record() for t in triggers]
        except DatabaseError as e:
            logger.error(f"Error reading {trigger_type} triggers for user {self.user.pk}: {e}")
            raise TriggerStoreError('read_since', str(e)) from e

    def append(self, trigger_type: str, message: str, fired_at: datetime) -> TriggerRecord:
        """Write one new trigger row. Existing rows are never touched."""
        try:
            trigger = Trigger.objects.create(
                trigger_id=str(uuid.uuid4()),
                user=self.user,
                trigger_type=trigger_type,
                message=message,
                fired_at=fired_at,
            )
        except DatabaseError as e:
            logger.error(f"Error appending {trigger_type} trigger for user {self.user.pk}: {e}")
            raise TriggerStoreError('append', str(e)) from e
        return trigger.to_record()

    def mark_dismissed(self, trigger_id: str) -> TriggerRecord:
        """UI-side acknowledgement; the only mutation a stored trigger allows."""
        try:
            updated = Trigger.objects.filter(user=self.user, trigger_id=trigger_id).update(dismissed=True)
            if not updated:
                raise TriggerNotFoundError(trigger_id)
            return Trigger.objects.get(trigger_id=trigger_id).to_record()
        except DatabaseError as e:
            logger.error(f"Error dismissing trigger {trigger_id}: {e}")
            raise TriggerStoreError('mark_dismissed', str(e)) from e

    @contextmanager
    def locked(self):
        """
        Critical section for evaluate-and-append.

        Everything inside runs in one transaction holding the user's row
        lock, so two overlapping evaluations cannot both fire the same type.
        """
        try:
            with transaction.atomic():
                lock_user_row(self.user)
                yield self
        except DatabaseError as e:
            logger.error(f"Trigger log transaction failed for user {self.user.pk}: {e}")
            raise TriggerStoreError('transaction', str(e)) from e


def record_to_dict(record) -> dict:
    """Convert a snapshot record to a JSON-friendly dictionary"""
    if record is None:
        return None

    data = {}
    for name, value in record.__dict__.items():
        if isinstance(value, (date, datetime)):
            data[name] = value.isoformat()
        elif isinstance(value, frozenset):
            data[name] = sorted(value)
        else:
            data[name] = value

    if isinstance(record, CorrelationRecord):
        data['correlation_strength'] = record.correlation_strength
    return data
