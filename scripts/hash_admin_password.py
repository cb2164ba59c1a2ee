#!/usr/bin/env python3
"""
Print an ADMIN_PASSWORD_HASH value for the given password.

Usage:
  python scripts/hash_admin_password.py
"""
from __future__ import annotations

import getpass
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from runclub.core.security import hash_password  # noqa: E402


def main() -> None:
    password = getpass.getpass("Admin password: ")
    if not password:
        raise SystemExit("empty password")
    if getpass.getpass("Confirm: ") != password:
        raise SystemExit("passwords do not match")
    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")


if __name__ == "__main__":
    main()
