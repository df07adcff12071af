from datetime import datetime, timezone as dt_timezone
import random

import pytest

from mood.repositories import CorrelationRepository
from mood.services import InsightService
from mood.tests.factories import MoodEntryFactory, RecordFactory
from mood.utils.time_utils import FixedClock

LATE_EVENING = datetime(2025, 3, 10, 23, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def service(user, clock):
    return InsightService(user, clock=clock, rng=random.Random(3))


@pytest.mark.django_db
class TestInsightService:

    def test_new_user_gets_fallbacks(self, service):
        bundle = service.get_insights()

        assert bundle['summary']['total_entries'] == 0
        assert bundle['correlations'] == []
        assert bundle['patterns'] == []
        assert len(bundle['suggestions']) == 3
        assert bundle['personalized'] is False
        assert isinstance(bundle['prompt'], str) and bundle['prompt']

    def test_patterns_from_stored_history(self, user, service):
        MoodEntryFactory.create_series(user, [5, 5, 5, 2, 2])
        patterns = service.patterns()

        assert patterns[0].pattern_type.value == 'high_mood_streak'

    def test_infeasible_suggestions_are_dropped(self, user):
        CorrelationRepository(user).replace_all([
            RecordFactory.correlation('exercise', success_rate=0.9),
            RecordFactory.correlation('reading', success_rate=0.8),
        ])
        late = InsightService(user, clock=FixedClock(LATE_EVENING))

        assert [s.activity_id for s in late.suggestions(current_mood=2)] == ['reading']

    def test_bundle_uses_latest_mood_and_serializes(self, user, service):
        MoodEntryFactory.create_series(user, [4, 4, 4], activities=['work'])
        CorrelationRepository(user).replace_all([RecordFactory.correlation('walk', success_rate=0.8)])

        bundle = service.get_insights()

        assert bundle['summary']['total_entries'] == 3
        assert bundle['correlations'][0]['activity_id'] == 'walk'
        assert bundle['suggestions'][0]['display_text'].startswith('Walk helped 80%')
        assert bundle['personalized'] is True
        assert bundle['patterns'][0]['type'] == 'high_mood_streak'
