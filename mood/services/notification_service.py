"""
Notification Service

In-app notifications for fired triggers. A dispatcher is an ordinary object
handed to whoever needs it; there is no module-level instance.
"""
from typing import Optional
import logging
import uuid

from django.db import DatabaseError

from mood.analytics.records import TriggerRecord
from mood.exceptions import NotificationError
from mood.models import Notification, Trigger, UserProfile

logger = logging.getLogger(__name__)


TRIGGER_TITLES = {
    'missed_helpful_activity': 'Time for something that helps',
    'low_mood_streak': 'Checking in on you',
    'sleep_warning': 'Sleep check',
    'positive_streak': 'Nice streak!',
}


class NotificationDispatcher:
    """
    Stores an in-app Notification for a fired trigger.

    Example usage:
        dispatcher = NotificationDispatcher()
        notification = dispatcher.send_trigger(user, trigger_record)
    """

    channel = 'in_app'

    @staticmethod
    def notifications_enabled(user) -> bool:
        try:
            return user.mood_profile.notifications_enabled
        except UserProfile.DoesNotExist:
            return False

    def send_trigger(self, user, trigger: TriggerRecord) -> Optional[Notification]:
        """
        Deliver `trigger` to the user.

        Returns:
            The stored Notification, or None when the user has notifications off

        Raises:
            NotificationError: the profile could not be read or the
                notification could not be stored
        """
        try:
            if not self.notifications_enabled(user):
                logger.debug(f"Notifications disabled for user {user.pk}, not delivering {trigger.trigger_type}")
                return None

            notification = Notification.objects.create(
                notification_id=str(uuid.uuid4()),
                user=user,
                trigger=Trigger.objects.filter(trigger_id=trigger.trigger_id).first(),
                type='trigger',
                title=TRIGGER_TITLES.get(trigger.trigger_type, 'Mood insight'),
                message=trigger.message,
                link='/insights',
            )
        except DatabaseError as e:
            raise NotificationError(self.channel, str(e)) from e

        logger.info(f"Delivered {trigger.trigger_type} notification to user {user.pk}")
        return notification

    @staticmethod
    def get_unread_count(user) -> int:
        return Notification.objects.filter(user=user, is_read=False).count()

    @staticmethod
    def mark_all_read(user) -> int:
        """Returns the number of notifications updated."""
        return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
