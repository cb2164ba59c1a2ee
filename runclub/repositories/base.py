"""Shared load-mutate-save plumbing for collection repositories."""
from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
from typing import Iterator

from runclub.domain.errors import NotFoundError

from .store import RecordStore

logger = logging.getLogger(__name__)

_LOCKS: dict[str, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def collection_lock(name: str) -> threading.RLock:
    """Process-wide lock for one collection, shared by every repository instance."""
    with _LOCKS_GUARD:
        lock = _LOCKS.get(name)
        if lock is None:
            lock = _LOCKS[name] = threading.RLock()
        return lock


def record_id(record: dict) -> int:
    try:
        return int(record.get("id") or 0)
    except (TypeError, ValueError):
        return 0


class CollectionRepository:
    """
    Base for repositories that own one collection in a RecordStore.

    Every mutation runs inside `_transaction()`, which holds the collection
    lock across load and save. Other processes writing the same file/KV key
    can still overwrite each other (last write wins).
    """

    collection: str = ""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def _entities(self) -> list[dict]:
        """Records that carry a usable id; the rest are left in storage untouched."""
        records = self.store.load_collection(self.collection)
        usable = [record for record in records if record_id(record) > 0]
        skipped = len(records) - len(usable)
        if skipped:
            logger.warning("Ignoring %d %s record(s) without a valid id", skipped, self.collection)
        return usable

    @contextmanager
    def _transaction(self) -> Iterator[list[dict]]:
        """
        Yield every stored record; saves them when the block exits cleanly.

        Records without a valid id are written back unchanged.
        """
        with collection_lock(self.collection):
            records = self.store.load_collection(self.collection)
            yield records
            self.store.save_collection(self.collection, records)

    @staticmethod
    def _next_id(records: list[dict]) -> int:
        return max((record_id(r) for r in records), default=0) + 1

    def _index_of(self, records: list[dict], target_id: int) -> int:
        if target_id > 0:
            for index, record in enumerate(records):
                if record_id(record) == target_id:
                    return index
        raise NotFoundError(self.collection, target_id)
