"""
Audit History Log

Bounded, append-only history per farm. Appends happen as the last step of
every mutating registry operation, inside that operation's atomic block:
when the log is full the raised HistoryFull aborts the whole operation.
"""

import logging

from .constants import MAX_HISTORY_ENTRIES
from .errors import HistoryFull
from .models import HistoryEntry, HistoryCounter

logger = logging.getLogger(__name__)


class AuditHistoryLog:
    """Per-farm audit trail capped at MAX_HISTORY_ENTRIES entries."""

    max_entries = MAX_HISTORY_ENTRIES

    def append(self, farm, action, details, performer, timestamp):
        """
        Append an entry to the farm's history.

        Must be called inside transaction.atomic; the counter row is locked
        for the duration of that transaction.

        Args:
            farm: Farm instance
            action: Short action name (e.g. 'Registered')
            details: Free-text detail
            performer: Actor handle of the caller
            timestamp: Operation timestamp

        Returns:
            The new entry id (1-based)

        Raises:
            HistoryFull: the farm already has max_entries entries
        """
        counter, _ = HistoryCounter.objects.select_for_update().get_or_create(farm=farm)
        entry_id = counter.count + 1

        if entry_id > self.max_entries:
            logger.error(
                f"History full for farm #{farm.id}: rejected '{action}' by {performer}"
            )
            raise HistoryFull(
                f"Farm #{farm.id} already has {self.max_entries} history entries"
            )

        HistoryEntry.objects.create(
            farm=farm,
            entry_id=entry_id,
            action=action,
            timestamp=timestamp,
            performer=performer,
            details=details,
        )
        counter.count = entry_id
        counter.save(update_fields=['count'])

        return entry_id

    def get_entry(self, farm_id, entry_id):
        """Get one history entry, or None."""
        return HistoryEntry.objects.filter(farm_id=farm_id, entry_id=entry_id).first()

    def get_count(self, farm_id):
        """Number of history entries for the farm (0 if unknown)."""
        count = (
            HistoryCounter.objects
            .filter(farm_id=farm_id)
            .values_list('count', flat=True)
            .first()
        )
        return count or 0

    def list_entries(self, farm_id):
        """All history entries for the farm, oldest first."""
        return list(HistoryEntry.objects.filter(farm_id=farm_id).order_by('entry_id'))
