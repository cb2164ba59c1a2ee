"""
Flat-file persistence adapter: one pretty-printed JSON array per collection.

Used for local development when no managed key-value store is configured.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from runclub.domain.errors import MalformedDataError, StorageUnavailableError

from .store import decode_collection, encode_collection

logger = logging.getLogger(__name__)


class JsonFileStore:
    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def load_collection(self, name: str) -> list[dict]:
        path = self.path_for(name)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            # first access: create the file with an empty collection
            self.save_collection(name, [])
            return []
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot read {path}: {exc}") from exc

        try:
            return decode_collection(raw)
        except MalformedDataError as exc:
            logger.warning("Resetting corrupt collection file %s: %s", path, exc)
            self.save_collection(name, [])
            return []

    def save_collection(self, name: str, records: list[dict]) -> None:
        path = self.path_for(name)
        tmp = path.with_name(path.name + ".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(encode_collection(records, pretty=True), encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp)
            raise StorageUnavailableError(f"Cannot write {path}: {exc}") from exc
