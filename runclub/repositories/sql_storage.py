"""Relational record store: one typed table per collection."""
from __future__ import annotations

import json
import logging
from typing import Any, Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from runclub.db import Database
from runclub.db.models import EventRow, RouteRow
from runclub.domain.errors import StorageUnavailableError
from runclub.domain.models import format_timestamp, parse_timestamp, stored_int, utcnow

logger = logging.getLogger(__name__)


def load_json_list(text: str | None, *, column: str) -> list:
    """Parse a serialized list column; unparseable text reads as empty."""
    if not text:
        return []
    try:
        value = json.loads(text)
    except (TypeError, json.JSONDecodeError):
        logger.warning("Malformed JSON in column %s; reading as empty list", column)
        return []
    return value if isinstance(value, list) else []


def _timestamp(record: dict, key: str):
    return parse_timestamp(record.get(key)) or utcnow()


def _with_row_ids(records: list[dict], collection: str) -> list[dict]:
    """Records whose id is missing or unusable get the next free id; the table key needs one."""
    next_id = max([0] + [stored_int(r.get("id"), None) or 0 for r in records]) + 1
    prepared = []
    for record in records:
        current = stored_int(record.get("id"), None)
        if current is None or current <= 0:
            logger.warning("Storing %s record without a valid id as id %d", collection, next_id)
            record = {**record, "id": next_id}
            next_id += 1
        prepared.append(record)
    return prepared


def _route_row(record: dict) -> RouteRow:
    return RouteRow(
        id=int(record["id"]),
        name=record.get("name") or "",
        description=record.get("description") or "",
        distance=record.get("distance") or "",
        difficulty=record.get("difficulty") or "Easy",
        estimated_time=record.get("estimatedTime") or "",
        points=json.dumps(record.get("points") or []),
        is_upcoming=bool(record.get("isUpcoming")),
        created_at=_timestamp(record, "createdAt"),
        updated_at=_timestamp(record, "updatedAt"),
    )


def _route_record(row: RouteRow) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "distance": row.distance,
        "difficulty": row.difficulty,
        "estimatedTime": row.estimated_time,
        "points": load_json_list(row.points, column="routes.points"),
        "isUpcoming": bool(row.is_upcoming),
        "createdAt": format_timestamp(row.created_at),
        "updatedAt": format_timestamp(row.updated_at),
    }


def _event_row(record: dict) -> EventRow:
    is_active = record.get("isActive")
    return EventRow(
        id=int(record["id"]),
        badge=record.get("badge") or "",
        title=record.get("title") or "",
        description=record.get("description") or "",
        date=record.get("date") or "",
        location=record.get("location") or "",
        is_active=True if is_active is None else bool(is_active),
        sort_order=stored_int(record.get("sortOrder")) or 0,
        created_at=_timestamp(record, "createdAt"),
        updated_at=_timestamp(record, "updatedAt"),
    )


def _event_record(row: EventRow) -> dict:
    return {
        "id": row.id,
        "badge": row.badge,
        "title": row.title,
        "description": row.description,
        "date": row.date,
        "location": row.location,
        "isActive": bool(row.is_active),
        "sortOrder": int(row.sort_order or 0),
        "createdAt": format_timestamp(row.created_at),
        "updatedAt": format_timestamp(row.updated_at),
    }


_TABLES: dict[str, tuple[Any, Callable[[dict], Any], Callable[[Any], dict]]] = {
    "routes": (RouteRow, _route_row, _route_record),
    "events": (EventRow, _event_row, _event_record),
}


class SqlRecordStore:
    """Collections backed by SQLAlchemy tables; saves replace the table in one transaction."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def _table(self, name: str):
        try:
            return _TABLES[name]
        except KeyError:
            raise ValueError(f"Unknown collection: {name}") from None

    def load_collection(self, name: str) -> list[dict]:
        model, _, to_record = self._table(name)
        try:
            with self.database.session() as session:
                rows = session.execute(select(model).order_by(model.id)).scalars().all()
                return [to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot load {name}: {exc}") from exc

    def save_collection(self, name: str, records: list[dict]) -> None:
        model, to_row, _ = self._table(name)
        try:
            with self.database.session() as session:
                session.execute(delete(model))
                session.add_all([to_row(record) for record in _with_row_ids(records, name)])
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Cannot save {name}: {exc}") from exc
