#!/usr/bin/env python3
"""
Seed the default weekly/weekend/monthly events into the configured store.

Does nothing when the events collection already has entries.

Usage:
  python scripts/seed_events.py
"""
from __future__ import annotations

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from runclub.core.config import get_settings  # noqa: E402
from runclub.core.logging import configure_logging  # noqa: E402
from runclub.domain.defaults import DEFAULT_EVENTS  # noqa: E402
from runclub.repositories.event_repository import EventRepository  # noqa: E402
from runclub.repositories.store import build_record_store  # noqa: E402


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    repo = EventRepository(build_record_store(settings))
    created = repo.seed_defaults(DEFAULT_EVENTS)
    if created:
        print(f"OK: {len(created)} events created (ids {', '.join(map(str, created))})")
    else:
        print("Events collection is not empty; nothing to do.")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
