"""
Services package for mood insights.

Business logic layer sitting between the API views and the repositories:
- correlation_service: recompute and replace correlations
- trigger_service: evaluate-and-append trigger critical section
- insight_service: patterns, suggestions, summary and prompt bundle
- notification_service: injected trigger delivery
"""
from mood.services.correlation_service import CorrelationService
from mood.services.insight_service import InsightService
from mood.services.notification_service import NotificationDispatcher
from mood.services.trigger_service import TriggerEvaluation, TriggerService

__all__ = [
    'CorrelationService',
    'InsightService',
    'NotificationDispatcher',
    'TriggerEvaluation',
    'TriggerService',
]
