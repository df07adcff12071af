"""
Insight Service

Read-side composition of the analytics engines for one user: patterns,
feasible suggestions, summary numbers and a journal prompt. Nothing here
writes to a store.
"""
from typing import Dict, List, Optional
import logging
import random

from mood.analytics.history_stats import summarize
from mood.analytics.pattern_detector import Pattern, PatternDetector
from mood.analytics.prompt_generator import PromptGenerator
from mood.analytics.suggestion_engine import Suggestion, SuggestionEngine
from mood.repositories import CorrelationRepository, MoodHistoryRepository, record_to_dict
from mood.utils.constants import MOOD_MAX, MOOD_MIN
from mood.utils.time_utils import SystemClock

logger = logging.getLogger(__name__)

NEUTRAL_MOOD = 3


def pattern_to_dict(pattern: Pattern) -> Dict:
    return {
        'type': pattern.pattern_type.value,
        'description': pattern.description,
        'confidence': round(pattern.confidence, 3),
        'evidence': pattern.evidence,
    }


def suggestion_to_dict(suggestion: Suggestion) -> Dict:
    return {
        'activity_id': suggestion.activity_id,
        'activity_name': suggestion.activity_name,
        'success_rate': suggestion.success_rate,
        'times_observed': suggestion.times_observed,
        'reason': suggestion.reason,
        'personalized': suggestion.personalized,
        'display_text': suggestion.display_text,
    }


class InsightService:
    """
    Example usage:
        service = InsightService(user)
        bundle = service.get_insights()
    """

    def __init__(self, user, history=None, correlations=None, clock=None, rng: Optional[random.Random] = None):
        self.user = user
        self.history = history or MoodHistoryRepository(user)
        self.correlations = correlations or CorrelationRepository(user)
        self.clock = clock or SystemClock()
        self.prompts = PromptGenerator(rng=rng)

    def patterns(self, entries=None) -> List[Pattern]:
        if entries is None:
            entries = self.history.read_all()
        return PatternDetector.detect_patterns(entries)

    def suggestions(self, current_mood: int, entries=None, correlations=None) -> List[Suggestion]:
        """Ranked suggestions, minus those that make no sense right now."""
        if entries is None:
            entries = self.history.read_all()
        if correlations is None:
            correlations = self.correlations.read_all()

        now = self.clock.now()
        ranked = SuggestionEngine.generate(correlations, current_mood, entries, now=now)
        feasible = [s for s in ranked if SuggestionEngine.is_feasible(s.activity_id, now)]

        if len(feasible) < len(ranked):
            logger.debug(f"Dropped {len(ranked) - len(feasible)} infeasible suggestions for user {self.user.pk}")
        return feasible

    def get_insights(self, current_mood: Optional[int] = None) -> Dict:
        """
        Everything the insights screen shows, from one snapshot.

        Args:
            current_mood: Mood to answer for; defaults to the latest entry's
                mood, or neutral without history
        """
        entries = self.history.read_all()
        correlations = self.correlations.read_all()
        now = self.clock.now()

        latest = entries[-1] if entries else None
        if current_mood is None:
            current_mood = latest.mood if latest else NEUTRAL_MOOD
        current_mood = max(MOOD_MIN, min(MOOD_MAX, current_mood))
        selected = sorted(latest.activities) if latest else []

        suggestions = self.suggestions(current_mood, entries=entries, correlations=correlations)

        return {
            'summary': summarize(entries, now),
            'correlations': [record_to_dict(c) for c in correlations],
            'patterns': [pattern_to_dict(p) for p in self.patterns(entries)],
            'suggestions': [suggestion_to_dict(s) for s in suggestions],
            'personalized': any(s.personalized for s in suggestions),
            'prompt': self.prompts.generate_prompt(current_mood, selected, entries, now=now),
        }
