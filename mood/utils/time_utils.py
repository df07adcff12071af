"""
Time utility functions for mood insights.

Every recency, streak and feasibility rule takes its "now" from a clock
object instead of calling the wall clock directly, so the rules can be
evaluated against any fixed moment.
"""
from datetime import date, datetime
from dateutil.relativedelta import relativedelta
from django.utils import timezone


class SystemClock:
    """Clock backed by django.utils.timezone.now()."""

    def now(self) -> datetime:
        return timezone.now()


class FixedClock:
    """
    Clock frozen at a given moment.

    Usage:
        clock = FixedClock(datetime(2025, 3, 10, 9, 0, tzinfo=dt_timezone.utc))
        clock.advance(days=3)
    """

    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by relativedelta kwargs (days=, hours=...)."""
        self._moment = self._moment + relativedelta(**kwargs)
        return self._moment


def resolve_now(now=None) -> datetime:
    """Return `now` if given, otherwise the current time."""
    return now if now is not None else timezone.now()


def days_ago(now: datetime, days: int) -> datetime:
    """The moment exactly `days` days before `now`."""
    return now - relativedelta(days=days)


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """Number of complete 24-hour periods from `earlier` to `later`."""
    return (later - earlier).days


def to_local(moment: datetime) -> datetime:
    """Convert an aware datetime to the active time zone; naive values pass through."""
    if timezone.is_aware(moment):
        return timezone.localtime(moment)
    return moment


def local_hour(moment: datetime) -> int:
    return to_local(moment).hour


def local_date(moment: datetime) -> date:
    return to_local(moment).date()


def local_weekday(moment: datetime) -> int:
    """ISO weekday of the local date: Monday=1 .. Sunday=7."""
    return to_local(moment).isoweekday()
