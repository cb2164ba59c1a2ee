"""Event CRUD on top of a RecordStore."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from runclub.domain.models import Event, now_timestamp, stored_int
from runclub.domain.validation import clean_event_fields

from .base import CollectionRepository, record_id

logger = logging.getLogger(__name__)


def _display_order(record: dict) -> tuple[int, int]:
    return stored_int(record.get("sortOrder")) or 0, record_id(record)


class EventRepository(CollectionRepository):
    collection = "events"

    def list_all_events(self) -> list[Event]:
        records = sorted(self._entities(), key=_display_order)
        return [Event.from_dict(r) for r in records]

    def list_active_events(self) -> list[Event]:
        """Active events by (sortOrder asc, id asc)."""
        return [event for event in self.list_all_events() if event.is_active]

    def get_event(self, event_id: int) -> Event:
        records = self._entities()
        return Event.from_dict(records[self._index_of(records, event_id)])

    def add_event(self, fields: Mapping[str, Any]) -> int:
        cleaned = clean_event_fields(fields, partial=False)
        with self._transaction() as records:
            new_id = self._next_id(records)
            timestamp = now_timestamp()
            records.append({"id": new_id, **cleaned, "createdAt": timestamp, "updatedAt": timestamp})
        logger.info("Added event %s (%s)", new_id, cleaned["title"])
        return new_id

    def update_event(self, event_id: int, changes: Mapping[str, Any]) -> Event:
        cleaned = clean_event_fields(changes, partial=True)
        with self._transaction() as records:
            index = self._index_of(records, event_id)
            record = {**records[index], **cleaned, "updatedAt": now_timestamp()}
            records[index] = record
        logger.info("Updated event %s", event_id)
        return Event.from_dict(record)

    def delete_event(self, event_id: int) -> None:
        with self._transaction() as records:
            del records[self._index_of(records, event_id)]
        logger.info("Deleted event %s", event_id)

    def seed_defaults(self, events: Iterable[Mapping[str, Any]]) -> list[int]:
        """Insert the given events only when the collection is empty."""
        prepared = [clean_event_fields(e, partial=False) for e in events]
        created: list[int] = []
        with self._transaction() as records:
            if not records:
                timestamp = now_timestamp()
                for cleaned in prepared:
                    new_id = self._next_id(records)
                    records.append({"id": new_id, **cleaned, "createdAt": timestamp, "updatedAt": timestamp})
                    created.append(new_id)
        if created:
            logger.info("Seeded %d default events", len(created))
        return created
