from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
import uuid

from mood.exceptions import ValidationError
from mood.utils.constants import (
    ENERGY_MAX, ENERGY_MIN, MOOD_MAX, MOOD_MIN, NOTIFICATION_TYPE_CHOICES,
    SLEEP_HOURS_MAX, TRIGGER_TYPE_CHOICES,
)


class UserProfile(models.Model):
    """Per-user preferences: goals, tracked activities and notification settings"""

    user = models.OneToOneField('auth.User', on_delete=models.CASCADE, related_name='mood_profile')
    goals = models.JSONField(default=list, blank=True)
    tracking_categories = models.JSONField(
        default=list,
        blank=True,
        help_text="Activity ids the user chose to track"
    )
    onboarding_completed = models.BooleanField(default=False)
    notifications_enabled = models.BooleanField(default=False)
    preferred_notification_time = models.TimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mood_user_profiles'

    def __str__(self):
        return f"Profile for {self.user}"


class MoodEntry(models.Model):
    """A single mood check-in. Immutable once created."""

    entry_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='mood_entries')
    timestamp = models.DateTimeField(default=timezone.now)
    mood = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MOOD_MIN), MaxValueValidator(MOOD_MAX)],
        help_text="1=terrible, 2=bad, 3=okay, 4=good, 5=great"
    )
    activities = models.JSONField(default=list, blank=True)
    sleep_hours = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0.0), MaxValueValidator(SLEEP_HOURS_MAX)]
    )
    energy_level = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(ENERGY_MIN), MaxValueValidator(ENERGY_MAX)]
    )
    note = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mood_entries'
        ordering = ['timestamp']
        indexes = [
            models.Index(fields=['user', 'timestamp'], name='mood_entry_history'),
            models.Index(fields=['user', '-timestamp'], name='mood_entry_recent'),
        ]

    def __str__(self):
        return f"{self.mood}/5 at {self.timestamp:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        """Entries are write-once; updating a stored entry is refused."""
        if not self._state.adding:
            raise ValidationError('entry', 'Mood entries are immutable once created')
        super().save(*args, **kwargs)

    def to_record(self):
        """Immutable snapshot used by the analytics engines."""
        from mood.analytics.records import MoodRecord
        return MoodRecord(
            entry_id=str(self.entry_id),
            timestamp=self.timestamp,
            mood=self.mood,
            activities=frozenset(self.activities or []),
            sleep_hours=self.sleep_hours,
            energy_level=self.energy_level,
            note=self.note,
        )


class ActivityCorrelation(models.Model):
    """
    Pre-computed relation between one activity and mood outcomes.

    The set for a user is replaced as a whole on every recomputation.
    """

    correlation_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='activity_correlations')
    activity_id = models.CharField(max_length=100)
    avg_mood_with = models.FloatField()
    avg_mood_without = models.FloatField(
        null=True,
        blank=True,
        help_text="Null when every entry contains the activity"
    )
    success_rate = models.FloatField(
        validators=[MinValueValidator(0.0), MaxValueValidator(1.0)],
        help_text="Fraction of entries with this activity where mood >= 4"
    )
    times_observed = models.PositiveIntegerField()
    last_calculated = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'mood_activity_correlations'
        ordering = ['activity_id']
        constraints = [
            models.UniqueConstraint(fields=['user', 'activity_id'], name='unique_user_activity_correlation'),
        ]

    def __str__(self):
        return f"{self.activity_id}: {self.success_rate:.0%} over {self.times_observed}"

    @property
    def correlation_strength(self):
        if self.avg_mood_without is None:
            return None
        return self.avg_mood_with - self.avg_mood_without

    def to_record(self):
        from mood.analytics.records import CorrelationRecord
        return CorrelationRecord(
            activity_id=self.activity_id,
            avg_mood_with=self.avg_mood_with,
            avg_mood_without=self.avg_mood_without,
            success_rate=self.success_rate,
            times_observed=self.times_observed,
            last_calculated=self.last_calculated,
        )


class Trigger(models.Model):
    """A proactive alert that fired. Append-only apart from `dismissed`."""

    trigger_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='mood_triggers')
    trigger_type = models.CharField(max_length=40, choices=TRIGGER_TYPE_CHOICES)
    fired_at = models.DateTimeField(default=timezone.now)
    message = models.TextField()
    dismissed = models.BooleanField(default=False)

    class Meta:
        db_table = 'mood_triggers'
        ordering = ['-fired_at']
        indexes = [
            models.Index(fields=['user', 'trigger_type', 'fired_at'], name='trigger_cooldown_lookup'),
            models.Index(fields=['user', '-fired_at'], name='trigger_recent'),
        ]

    def __str__(self):
        return f"{self.trigger_type} @ {self.fired_at:%Y-%m-%d %H:%M}"

    def to_record(self):
        from mood.analytics.records import TriggerRecord
        return TriggerRecord(
            trigger_id=str(self.trigger_id),
            trigger_type=self.trigger_type,
            fired_at=self.fired_at,
            message=self.message,
            dismissed=self.dismissed,
        )


class Notification(models.Model):
    """In-app notification, e.g. the delivery of a fired trigger"""

    notification_id = models.CharField(max_length=36, primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('auth.User', on_delete=models.CASCADE, related_name='mood_notifications')
    trigger = models.ForeignKey(
        Trigger, on_delete=models.SET_NULL, null=True, blank=True, related_name='notifications'
    )
    type = models.CharField(max_length=20, choices=NOTIFICATION_TYPE_CHOICES, default='info')
    title = models.CharField(max_length=200)
    message = models.TextField()
    link = models.CharField(max_length=500, blank=True, default='')
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mood_notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_unread'),
            models.Index(fields=['user', '-created_at'], name='notification_recent'),
        ]

    def __str__(self):
        return f"{self.type}: {self.title}"
