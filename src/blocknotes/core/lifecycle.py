"""Retention sweep: expire temp notes and purge old deleted ones."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from blocknotes.config import PURGE_AFTER_DAYS, TEMP_DURATION_HOURS
from blocknotes.models.ids import utc_now
from blocknotes.models.note import NoteStatus
from blocknotes.protocols import StoreProtocol


@dataclass(frozen=True)
class SweepStats:
    """Summary of one sweep."""

    expired: int
    purged: int
    repaired: int


class LifecycleSweeper:
    """Applies the retention rules to every note in a store.

    Temp notes move to deleted once ``temp_duration_hours`` have passed since
    creation. Deleted notes are removed for good ``purge_after_days`` after
    they were moved to deleted, taking their whole block tree with them.

    Args:
        store: Where notes are read from and written back to.
        temp_duration_hours: Lifetime of a temp note.
        purge_after_days: Grace period for deleted notes.
        clock: Returns the current time (injectable for tests).
    """

    def __init__(
        self,
        store: StoreProtocol,
        *,
        temp_duration_hours: int = TEMP_DURATION_HOURS,
        purge_after_days: int = PURGE_AFTER_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._temp_duration = timedelta(hours=temp_duration_hours)
        self._purge_after = timedelta(days=purge_after_days)
        self._clock = clock

    def run(self) -> SweepStats:
        now = self._clock()
        expired = 0
        for note in self._store.list_notes(status=NoteStatus.TEMP):
            if note.created_at + self._temp_duration < now:
                note.mark_deleted(now=now)
                self._store.insert(note)
                expired += 1

        purged = 0
        repaired = 0
        # Loaded unrepaired; missing timestamps come from this sweep's clock.
        for note in self._store.list_notes(status=NoteStatus.DELETED, repair=False):
            if note.moved_to_deleted_at is None:
                note.repair(now=now)
                self._store.insert(note)
                repaired += 1
            elif note.moved_to_deleted_at + self._purge_after < now:
                self._store.delete(note)
                purged += 1

        # Save failures are logged by the store; the sweep reruns next time.
        self._store.save()
        logger.info(
            "Sweep complete: {} expired, {} purged, {} repaired", expired, purged, repaired
        )
        return SweepStats(expired=expired, purged=purged, repaired=repaired)
