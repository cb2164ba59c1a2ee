#!/usr/bin/env python3
"""
Copy the routes/events collections from one backend to another.

Typical use is pushing local JSON data into the managed key-value store
before the first deploy:

  python scripts/migrate_collections.py --source json --target kv
"""
from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from runclub.core.config import STORAGE_BACKENDS, Settings, get_settings  # noqa: E402
from runclub.core.logging import configure_logging  # noqa: E402
from runclub.repositories.store import RecordStore, build_record_store  # noqa: E402

COLLECTIONS = ("routes", "events")


def migrate(source: RecordStore, target: RecordStore, *, collections=COLLECTIONS, force: bool = False) -> dict:
    """Return {collection: copied count}; non-empty targets are skipped unless force."""
    copied = {}
    for name in collections:
        records = source.load_collection(name)
        if not force and target.load_collection(name):
            print(f"skip {name}: target already has data (use --force to overwrite)")
            continue
        target.save_collection(name, records)
        copied[name] = len(records)
    return copied


def _store_for(settings: Settings, backend: str) -> RecordStore:
    return build_record_store(replace(settings, storage_backend=backend))


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy collections between storage backends")
    ap.add_argument("--source", required=True, choices=sorted(STORAGE_BACKENDS))
    ap.add_argument("--target", required=True, choices=sorted(STORAGE_BACKENDS))
    ap.add_argument("--collection", action="append", choices=COLLECTIONS, help="default: all")
    ap.add_argument("--force", action="store_true", help="overwrite non-empty target collections")
    args = ap.parse_args()

    if args.source == args.target:
        raise SystemExit("source and target must differ")
    settings = get_settings()
    configure_logging(settings.log_level)
    copied = migrate(
        _store_for(settings, args.source),
        _store_for(settings, args.target),
        collections=tuple(args.collection or COLLECTIONS),
        force=args.force,
    )
    for name, count in copied.items():
        print(f"OK: {name}: {count} records copied")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
