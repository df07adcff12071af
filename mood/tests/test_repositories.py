"""
Repository tests: snapshots, atomic replace, append-only log and storage
failure translation.
"""
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from mood.exceptions import (
    CorrelationStoreError, MoodHistoryStoreError, StorageError, TriggerNotFoundError,
    TriggerStoreError, ValidationError,
)
from mood.models import ActivityCorrelation, MoodEntry, Trigger
from mood.repositories import (
    CorrelationRepository, MoodHistoryRepository, TriggerRepository, record_to_dict,
)
from mood.repositories.base_repository import lock_user_row
from mood.tests.factories import NOW, MoodEntryFactory, RecordFactory
from mood.utils.time_utils import days_ago


@pytest.mark.django_db
class TestMoodHistoryRepository:

    def test_read_all_is_oldest_first_and_scoped_to_user(self, user, other_user):
        MoodEntryFactory.create(user, mood=2, days_ago=1)
        MoodEntryFactory.create(user, mood=4, days_ago=3)
        MoodEntryFactory.create(other_user, mood=5, days_ago=2)

        records = MoodHistoryRepository(user).read_all()

        assert [r.mood for r in records] == [4, 2]
        assert records[0].timestamp < records[1].timestamp

    def test_records_are_snapshots(self, user):
        MoodEntryFactory.create(user, mood=3, activities=['work', 'exercise'], sleep_hours=7.0)
        record = MoodHistoryRepository(user).read_all()[0]

        assert record.activities == frozenset({'work', 'exercise'})
        assert record.sleep_hours == 7.0

    def test_create(self, user):
        record = MoodHistoryRepository(user).create(
            mood=4, activities=['walk', 'walk', 'music'], timestamp=NOW, note='good day'
        )

        assert record.mood == 4
        assert record.activities == frozenset({'walk', 'music'})
        assert MoodEntry.objects.get(entry_id=record.entry_id).activities == ['walk', 'music']

    def test_distinct_activities_sorted(self, user):
        MoodEntryFactory.create(user, activities=['walk', 'work'])
        MoodEntryFactory.create(user, activities=['art'], days_ago=1)
        assert MoodHistoryRepository(user).distinct_activities() == ['art', 'walk', 'work']

    def test_stored_entries_are_immutable(self, user):
        entry = MoodEntryFactory.create(user, mood=3)
        entry.mood = 5
        with pytest.raises(ValidationError):
            entry.save()

    def test_read_failure_is_a_storage_error(self, user):
        with patch.object(MoodEntry.objects, 'filter', side_effect=DatabaseError('database is locked')):
            with pytest.raises(MoodHistoryStoreError) as exc_info:
                MoodHistoryRepository(user).read_all()

        assert isinstance(exc_info.value, StorageError)
        assert exc_info.value.operation == 'read_all'


@pytest.mark.django_db
class TestCorrelationRepository:

    def test_replace_all_swaps_the_whole_set(self, user):
        repo = CorrelationRepository(user)
        repo.replace_all([RecordFactory.correlation('exercise'), RecordFactory.correlation('work')])
        written = repo.replace_all([RecordFactory.correlation('reading', success_rate=0.65)])

        rows = repo.read_all()
        assert written == 1
        assert [r.activity_id for r in rows] == ['reading']
        assert rows[0].success_rate == 0.65

    def test_replace_with_nothing_clears(self, user):
        repo = CorrelationRepository(user)
        repo.replace_all([RecordFactory.correlation('exercise')])
        repo.replace_all([])
        assert repo.read_all() == []

    def test_absent_without_average_round_trips_as_none(self, user):
        repo = CorrelationRepository(user)
        repo.replace_all([RecordFactory.correlation('work', avg_without=None)])

        row = repo.read_all()[0]
        assert row.avg_mood_without is None
        assert row.correlation_strength is None

    def test_replace_is_scoped_to_user(self, user, other_user):
        CorrelationRepository(other_user).replace_all([RecordFactory.correlation('exercise')])
        CorrelationRepository(user).replace_all([])
        assert len(CorrelationRepository(other_user).read_all()) == 1

    def test_failed_replace_keeps_previous_set(self, user):
        repo = CorrelationRepository(user)
        repo.replace_all([RecordFactory.correlation('exercise'), RecordFactory.correlation('work')])

        with patch.object(ActivityCorrelation.objects, 'bulk_create', side_effect=DatabaseError('disk I/O error')):
            with pytest.raises(CorrelationStoreError):
                repo.replace_all([RecordFactory.correlation('reading')])

        assert [r.activity_id for r in repo.read_all()] == ['exercise', 'work']

    def test_replace_locks_the_user_row_before_writing(self, user):
        repo = CorrelationRepository(user)
        events = []
        real_bulk_create = ActivityCorrelation.objects.bulk_create

        def lock(locked_user):
            events.append(('lock', locked_user.pk))
            return lock_user_row(locked_user)

        def write(rows):
            events.append(('write', len(rows)))
            return real_bulk_create(rows)

        with patch('mood.repositories.base_repository.lock_user_row', side_effect=lock), \
                patch.object(ActivityCorrelation.objects, 'bulk_create', side_effect=write):
            repo.replace_all([RecordFactory.correlation('exercise')])

        assert events == [('lock', user.pk), ('write', 1)]
        assert [r.activity_id for r in repo.read_all()] == ['exercise']


@pytest.mark.django_db
class TestTriggerRepository:

    def test_append_and_read(self, user):
        repo = TriggerRepository(user)
        record = repo.append('low_mood_streak', 'Rough few days', fired_at=NOW)

        assert record.trigger_type == 'low_mood_streak'
        assert record.dismissed is False
        assert repo.read_all() == [record]

    def test_read_since_filters_type_and_window(self, user):
        repo = TriggerRepository(user)
        repo.append('low_mood_streak', 'old', fired_at=days_ago(NOW, 10))
        recent = repo.append('low_mood_streak', 'recent', fired_at=days_ago(NOW, 2))
        repo.append('sleep_warning', 'other type', fired_at=days_ago(NOW, 1))

        assert repo.read_since('low_mood_streak', days_ago(NOW, 7)) == [recent]

    def test_mark_dismissed(self, user):
        repo = TriggerRepository(user)
        record = repo.append('positive_streak', 'Great week!', fired_at=NOW)

        dismissed = repo.mark_dismissed(record.trigger_id)

        assert dismissed.dismissed is True
        assert Trigger.objects.get(trigger_id=record.trigger_id).dismissed is True

    def test_mark_dismissed_unknown_or_foreign_trigger(self, user, other_user):
        foreign = TriggerRepository(other_user).append('positive_streak', 'x', fired_at=NOW)

        with pytest.raises(TriggerNotFoundError):
            TriggerRepository(user).mark_dismissed(foreign.trigger_id)
        with pytest.raises(TriggerNotFoundError):
            TriggerRepository(user).mark_dismissed('missing')

    def test_append_failure_is_a_storage_error(self, user):
        with patch.object(Trigger.objects, 'create', side_effect=DatabaseError('readonly database')):
            with pytest.raises(TriggerStoreError):
                TriggerRepository(user).append('low_mood_streak', 'x', fired_at=NOW)

        assert Trigger.objects.count() == 0


class TestRecordToDict:

    def test_serializes_dates_and_sets(self):
        data = record_to_dict(RecordFactory.entry(4, activities=['b', 'a']))
        assert data['activities'] == ['a', 'b']
        assert data['timestamp'] == NOW.isoformat()

    def test_correlation_includes_strength(self):
        data = record_to_dict(RecordFactory.correlation('walk', avg_with=4.0, avg_without=3.0))
        assert data['correlation_strength'] == 1.0

    def test_none(self):
        assert record_to_dict(None) is None
