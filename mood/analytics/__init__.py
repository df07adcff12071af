"""
Mood Analytics Package

Deterministic rules over a mood history snapshot:
- correlation_engine: activity vs. mood statistics
- pattern_detector: streaks, weekday and sleep effects
- suggestion_engine: ranked activity suggestions and feasibility
- trigger_manager: cool-down gated proactive alerts
- prompt_generator: journaling prompts
- history_stats: summary numbers

No AI/ML - every function is a pure computation over immutable records.
"""
from mood.analytics.correlation_engine import CorrelationEngine, calculate_correlations
from mood.analytics.pattern_detector import Pattern, PatternDetector, PatternType, detect_patterns
from mood.analytics.prompt_generator import PromptGenerator
from mood.analytics.records import CorrelationRecord, MoodRecord, TriggerRecord
from mood.analytics.suggestion_engine import (
    Suggestion, SuggestionEngine, generate_suggestions, is_feasible,
)
from mood.analytics.trigger_manager import (
    PendingTrigger, TriggerManager, TriggerType, evaluate_triggers,
)

__all__ = [
    'CorrelationEngine',
    'calculate_correlations',
    'Pattern',
    'PatternDetector',
    'PatternType',
    'detect_patterns',
    'PromptGenerator',
    'CorrelationRecord',
    'MoodRecord',
    'TriggerRecord',
    'Suggestion',
    'SuggestionEngine',
    'generate_suggestions',
    'is_feasible',
    'PendingTrigger',
    'TriggerManager',
    'TriggerType',
    'evaluate_triggers',
]
