"""
Summary statistics over a mood history snapshot.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Sequence

import numpy as np

from mood.analytics.records import MoodRecord
from mood.utils.constants import MOOD_LABELS
from mood.utils.time_utils import days_ago, local_date


def entries_since(entries: Sequence[MoodRecord], days: int, now: datetime) -> List[MoodRecord]:
    """Entries whose timestamp falls within the last `days` days of `now`."""
    cutoff = days_ago(now, days)
    return [e for e in entries if e.timestamp >= cutoff]


def average_mood(entries: Sequence[MoodRecord]) -> float:
    if not entries:
        return 0.0
    return float(np.mean([e.mood for e in entries]))


def current_day_streak(entries: Sequence[MoodRecord]) -> int:
    """
    Consecutive calendar days with at least one check-in, counted back from
    the most recent entry.
    """
    days = sorted({local_date(e.timestamp) for e in entries}, reverse=True)
    if not days:
        return 0

    streak = 1
    for newer, older in zip(days, days[1:]):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


def mood_label(mood: int) -> str:
    return MOOD_LABELS.get(mood, 'Unknown')


def activity_display_name(activity_id: str) -> str:
    """'social_time' -> 'Social Time'"""
    return activity_id.replace('_', ' ').title()


def summarize(entries: Sequence[MoodRecord], now: datetime) -> Dict:
    return {
        'total_entries': len(entries),
        'average_mood_7d': round(average_mood(entries_since(entries, 7, now)), 2),
        'average_mood_30d': round(average_mood(entries_since(entries, 30, now)), 2),
        'current_streak_days': current_day_streak(entries),
    }
