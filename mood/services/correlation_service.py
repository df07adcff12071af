"""
Correlation Service

Recomputes a user's activity correlations from their mood history and
replaces the stored set in one transaction.
"""
from typing import List
import logging

from django.db import DatabaseError

from mood.analytics.correlation_engine import CorrelationEngine
from mood.analytics.records import CorrelationRecord
from mood.exceptions import ProfileStoreError
from mood.models import UserProfile
from mood.repositories import CorrelationRepository, MoodHistoryRepository
from mood.utils.logging_utils import log_execution_time
from mood.utils.time_utils import SystemClock

logger = logging.getLogger(__name__)


class CorrelationService:
    """
    Example usage:
        service = CorrelationService(user)
        rows = service.recompute()
    """

    def __init__(self, user, history=None, store=None, clock=None):
        self.user = user
        self.history = history or MoodHistoryRepository(user)
        self.store = store or CorrelationRepository(user)
        self.clock = clock or SystemClock()

    def tracked_activities(self) -> List[str]:
        """
        Activities chosen in the user's profile, or every activity seen in
        the history when the profile names none.
        """
        try:
            categories = list(self.user.mood_profile.tracking_categories or [])
        except UserProfile.DoesNotExist:
            categories = []
        except DatabaseError as e:
            logger.error(f"Error reading mood profile for user {self.user.pk}: {e}")
            raise ProfileStoreError('read_profile', str(e)) from e

        if categories:
            return list(dict.fromkeys(categories))
        return self.history.distinct_activities()

    def compute(self) -> List[CorrelationRecord]:
        """Calculate rows without storing them."""
        entries = self.history.read_all()
        return CorrelationEngine.calculate_all(entries, self.tracked_activities(), now=self.clock.now())

    @log_execution_time('correlations.recompute')
    def recompute(self) -> List[CorrelationRecord]:
        """
        Calculate and store the user's correlation set.

        An empty result (too little history) still replaces the set, so
        stale rows never outlive the data that produced them.

        Raises:
            MoodHistoryStoreError: history could not be read
            ProfileStoreError: the profile could not be read
            CorrelationStoreError: the set could not be replaced (the previous set is kept)
        """
        rows = self.compute()
        self.store.replace_all(rows)
        logger.info(f"Recomputed {len(rows)} correlations for user {self.user.pk}")
        return rows

    def current(self) -> List[CorrelationRecord]:
        return self.store.read_all()
