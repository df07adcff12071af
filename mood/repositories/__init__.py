"""
Repositories package for mood insights.

Data access layer using Repository pattern:
- MoodHistoryRepository: mood log snapshots
- CorrelationRepository: atomically replaced correlation set
- TriggerRepository: append-only trigger log with a per-user critical section
"""
from mood.repositories.base_repository import (
    CorrelationRepository, MoodHistoryRepository, TriggerRepository, record_to_dict,
)

__all__ = [
    'CorrelationRepository',
    'MoodHistoryRepository',
    'TriggerRepository',
    'record_to_dict',
]
