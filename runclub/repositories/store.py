"""
Record store contract and backend selection.

A record store persists a whole named collection ("routes", "events") as a
unit. Repositories load the full list, mutate it in memory and save it back.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from runclub.core.config import Settings
from runclub.domain.errors import MalformedDataError

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Read-all / write-all access to named collections."""

    def load_collection(self, name: str) -> list[dict]:
        ...

    def save_collection(self, name: str, records: list[dict]) -> None:
        ...


def decode_collection(value: Any) -> list[dict]:
    """
    Parse-or-passthrough for stored collection values.

    Accepts a native list, JSON text (str/bytes) or None (missing). Raises
    MalformedDataError for anything that is not a list of objects.
    """
    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedDataError(f"collection is not valid UTF-8: {exc}") from exc
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise MalformedDataError(f"collection is not valid JSON: {exc}") from exc
    if not isinstance(value, list):
        raise MalformedDataError(f"collection must be a list, got {type(value).__name__}")
    if not all(isinstance(item, dict) for item in value):
        raise MalformedDataError("collection entries must be objects")
    return value


def encode_collection(records: list[dict], *, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(records, ensure_ascii=False, indent=2)
    return json.dumps(records, ensure_ascii=False, separators=(",", ":"))


def build_record_store(settings: Settings, database=None) -> RecordStore:
    """Pick the collection backend once, at process start."""
    backend = settings.resolved_storage_backend()
    if backend == "kv":
        from .kv_storage import KeyValueStore, build_kv_client

        logger.info("Using key-value record store")
        return KeyValueStore(build_kv_client(settings), key_prefix=settings.kv_key_prefix)
    if backend == "sql":
        from runclub.db import Database

        from .sql_storage import SqlRecordStore

        if database is None:
            database = Database(settings.database_url)
            database.create_all()
        logger.info("Using SQL record store")
        return SqlRecordStore(database)

    from .json_storage import JsonFileStore

    logger.info("Using JSON file record store at %s", settings.data_dir)
    return JsonFileStore(settings.data_dir)
