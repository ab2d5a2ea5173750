"""
Tests for the bounded per-farm audit history.
"""
import pytest
from django.db import transaction
from django.utils import timezone

from registry.constants import MAX_HISTORY_ENTRIES
from registry.errors import HistoryFull, InvalidDetails, RegistryErrorCode
from registry.history import AuditHistoryLog
from registry.models import Farm, HistoryEntry, HistoryCounter


pytestmark = pytest.mark.django_db


@pytest.fixture
def log():
    return AuditHistoryLog()


@pytest.fixture
def farm():
    now = timezone.now()
    return Farm.objects.create(
        id=7, owner='kofi', name='Green Acres', location='Tamale',
        registered_at=now, last_updated_at=now,
    )


def fill(log, farm, n):
    for i in range(n):
        with transaction.atomic():
            log.append(farm, 'Status Updated', f'Status {i}', 'kofi', timezone.now())


class TestAppend:

    def test_entry_ids_are_contiguous_from_one(self, log, farm):
        ids = []
        for action in ('Registered', 'Certified', 'Revoked'):
            with transaction.atomic():
                ids.append(log.append(farm, action, '', 'kofi', timezone.now()))

        assert ids == [1, 2, 3]
        assert log.get_count(farm.id) == 3
        assert [e.entry_id for e in log.list_entries(farm.id)] == [1, 2, 3]

    def test_entry_records_all_fields(self, log, farm):
        now = timezone.now()
        with transaction.atomic():
            log.append(farm, 'Certified', 'Level: Gold', 'deployer', now)

        entry = log.get_entry(farm.id, 1)
        assert entry.action == 'Certified'
        assert entry.details == 'Level: Gold'
        assert entry.performer == 'deployer'
        assert entry.timestamp == now

    def test_fifty_entries_fit(self, log, farm):
        fill(log, farm, MAX_HISTORY_ENTRIES)
        assert log.get_count(farm.id) == MAX_HISTORY_ENTRIES
        assert log.get_entry(farm.id, MAX_HISTORY_ENTRIES) is not None

    def test_fifty_first_entry_is_rejected(self, log, farm):
        fill(log, farm, MAX_HISTORY_ENTRIES)

        with pytest.raises(HistoryFull) as exc_info:
            with transaction.atomic():
                log.append(farm, 'Status Updated', 'one too many', 'kofi', timezone.now())

        assert isinstance(exc_info.value, InvalidDetails)
        assert exc_info.value.code == RegistryErrorCode.INVALID_DETAILS
        assert log.get_count(farm.id) == MAX_HISTORY_ENTRIES
        assert HistoryEntry.objects.filter(farm=farm).count() == MAX_HISTORY_ENTRIES
        assert log.get_entry(farm.id, MAX_HISTORY_ENTRIES + 1) is None

    def test_rejection_rolls_back_writes_in_same_block(self, log, farm):
        fill(log, farm, MAX_HISTORY_ENTRIES)

        with pytest.raises(HistoryFull):
            with transaction.atomic():
                Farm.objects.filter(pk=farm.pk).update(name='Renamed')
                log.append(farm, 'Updated Details', '', 'kofi', timezone.now())

        farm.refresh_from_db()
        assert farm.name == 'Green Acres'


class TestReads:

    def test_unknown_farm_reads_are_empty(self, log):
        assert log.get_count(999) == 0
        assert log.get_entry(999, 1) is None
        assert log.list_entries(999) == []

    def test_counter_row_created_on_first_append(self, log, farm):
        assert not HistoryCounter.objects.filter(farm=farm).exists()
        with transaction.atomic():
            log.append(farm, 'Registered', 'Initial farm registration', 'kofi', timezone.now())
        assert HistoryCounter.objects.get(farm=farm).count == 1
