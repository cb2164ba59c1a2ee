"""Route CRUD on top of a RecordStore, enforcing the single upcoming route."""
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Mapping, Optional

from runclub.domain.models import Route, now_timestamp, parse_timestamp
from runclub.domain.validation import clean_route_fields

from .base import CollectionRepository, record_id

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _clear_other_upcoming(records: list[dict], keep_id: int, timestamp: str) -> None:
    for record in records:
        if record_id(record) != keep_id and record.get("isUpcoming"):
            record["isUpcoming"] = False
            record["updatedAt"] = timestamp


class RouteRepository(CollectionRepository):
    collection = "routes"

    def list_routes(self) -> list[Route]:
        """All routes, newest first (createdAt desc, then id desc) on every backend."""
        records = self._entities()
        records.sort(
            key=lambda r: (parse_timestamp(r.get("createdAt")) or _EPOCH, record_id(r)),
            reverse=True,
        )
        return [Route.from_dict(r) for r in records]

    def get_route(self, route_id: int) -> Route:
        records = self._entities()
        return Route.from_dict(records[self._index_of(records, route_id)])

    def get_upcoming_route(self) -> Optional[Route]:
        for route in self.list_routes():
            if route.is_upcoming:
                return route
        return None

    def add_route(self, fields: Mapping[str, Any]) -> int:
        cleaned = clean_route_fields(fields, partial=False)
        with self._transaction() as records:
            new_id = self._next_id(records)
            timestamp = now_timestamp()
            record = {"id": new_id, **cleaned, "createdAt": timestamp, "updatedAt": timestamp}
            if record["isUpcoming"]:
                _clear_other_upcoming(records, new_id, timestamp)
            records.append(record)
        logger.info("Added route %s (%s)", new_id, record["name"])
        return new_id

    def update_route(self, route_id: int, changes: Mapping[str, Any]) -> Route:
        cleaned = clean_route_fields(changes, partial=True)
        with self._transaction() as records:
            index = self._index_of(records, route_id)
            timestamp = now_timestamp()
            record = {**records[index], **cleaned, "updatedAt": timestamp}
            if record.get("isUpcoming"):
                _clear_other_upcoming(records, route_id, timestamp)
            records[index] = record
        logger.info("Updated route %s (%s)", route_id, ", ".join(sorted(cleaned)) or "no fields")
        return Route.from_dict(record)

    def delete_route(self, route_id: int) -> None:
        with self._transaction() as records:
            del records[self._index_of(records, route_id)]
        logger.info("Deleted route %s", route_id)

    def set_upcoming_route(self, route_id: int) -> Route:
        """Flag one route as upcoming and clear every other; a missing id changes nothing."""
        with self._transaction() as records:
            index = self._index_of(records, route_id)
            timestamp = now_timestamp()
            _clear_other_upcoming(records, route_id, timestamp)
            target = records[index]
            if not target.get("isUpcoming"):
                target["isUpcoming"] = True
                target["updatedAt"] = timestamp
        logger.info("Route %s is now the upcoming route", route_id)
        return Route.from_dict(target)
