"""
Scheduler integration for mood insights.

Periodic background work using APScheduler:
- Nightly correlation recomputation
- Trigger evaluation right after it, on the fresh correlations
"""
from apscheduler.schedulers.background import BackgroundScheduler
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import DatabaseError
from functools import wraps
import atexit
import logging
import time

from mood.exceptions import MoodException
from mood.services import CorrelationService, NotificationDispatcher, TriggerService

logger = logging.getLogger(__name__)


# ============================================================================
# JOB LOCKING
# ============================================================================

def with_lock(lock_name: str, lock_timeout: int = 3600):
    """
    Skip a job run while another process holds its cache lock.

    Args:
        lock_name: Unique name for the lock
        lock_timeout: Seconds before a stale lock expires
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            lock_key = f"mood_scheduler_lock:{lock_name}"

            if not cache.add(lock_key, "locked", lock_timeout):
                logger.warning(f"Job '{lock_name}' is already running, skipping")
                return None

            try:
                return func(*args, **kwargs)
            finally:
                cache.delete(lock_key)

        return wrapper
    return decorator


# ============================================================================
# SCHEDULED JOBS
# ============================================================================

def refresh_user(user, dispatcher, clock=None):
    """Recompute one user's correlations, then evaluate their triggers."""
    CorrelationService(user, clock=clock).recompute()
    return TriggerService(user, dispatcher=dispatcher, clock=clock).evaluate()


def users_with_history():
    User = get_user_model()
    return User.objects.filter(is_active=True, mood_entries__isnull=False).distinct().order_by('pk')


@with_lock('nightly_mood_refresh', lock_timeout=7200)
def nightly_refresh(clock=None):
    """
    Refresh insights for every active user with at least one entry.

    A failing user is logged and counted; the batch carries on.

    Returns:
        Dict with success, error and fired counts
    """
    logger.info("Starting nightly mood refresh")
    start = time.monotonic()
    dispatcher = NotificationDispatcher()
    counts = {'success': 0, 'errors': 0, 'fired': 0}

    for user in users_with_history():
        try:
            result = refresh_user(user, dispatcher, clock=clock)
        except (MoodException, DatabaseError) as e:
            logger.error(f"Nightly refresh failed for user {user.pk}: {e}")
            counts['errors'] += 1
            continue

        counts['success'] += 1
        if result.fired:
            counts['fired'] += 1

    logger.info(
        f"Nightly mood refresh complete: {counts['success']} successful, "
        f"{counts['errors']} errors, {counts['fired']} triggers fired, "
        f"{time.monotonic() - start:.1f}s elapsed"
    )
    return counts


def start_scheduler():
    """
    Start the background scheduler.

    Schedules:
        - Correlation recompute + trigger evaluation daily at 3 AM
    """
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        nightly_refresh,
        'cron',
        hour=3,
        minute=0,
        id='nightly_mood_refresh',
        replace_existing=True,
        misfire_grace_time=3600
    )

    scheduler.start()
    logger.info("Scheduler started: nightly mood refresh at 03:00")

    atexit.register(lambda: scheduler.shutdown())
    return scheduler
