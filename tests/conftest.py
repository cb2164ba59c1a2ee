from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the runclub package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from runclub.core import config as core_config  # noqa: E402
from runclub.core.rate_limiter import reset_rate_limits  # noqa: E402
from runclub.db import Database  # noqa: E402
from runclub.repositories.json_storage import JsonFileStore  # noqa: E402
from runclub.repositories.kv_storage import KeyValueStore  # noqa: E402
from runclub.repositories.sql_storage import SqlRecordStore  # noqa: E402

ENV_VARS = (
    "APP_ENV",
    "DATA_DIR",
    "DATABASE_URL",
    "STORAGE_BACKEND",
    "KV_REST_API_URL",
    "KV_REST_API_TOKEN",
    "KV_URL",
    "UPSTASH_REDIS_REST_URL",
    "UPSTASH_REDIS_REST_TOKEN",
    "KV_KEY_PREFIX",
    "ADMIN_PASSWORD",
    "ADMIN_PASSWORD_HASH",
    "REGISTRATION_EMAIL_DOMAIN",
    "LOGIN_RATE_LIMIT",
)


class FakeKVClient:
    """In-memory stand-in for a managed KV client (get/set only)."""

    def __init__(self, initial: dict | None = None) -> None:
        self.values: dict = dict(initial or {})
        self.set_calls = 0

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.set_calls += 1
        self.values[key] = value
        return "OK"


@pytest.fixture()
def clean_env(tmp_path, monkeypatch):
    """Remove storage/admin env vars and point DATA_DIR at a temp dir."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    core_config.get_settings.cache_clear()
    reset_rate_limits()
    yield monkeypatch
    core_config.get_settings.cache_clear()
    reset_rate_limits()


@pytest.fixture()
def database(tmp_path):
    """Temporary SQLite database with the full schema; disposed on teardown."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.create_all()
    yield db
    try:
        db.drop_all()
    finally:
        db.dispose()


@pytest.fixture()
def kv_client():
    return FakeKVClient()


@pytest.fixture(params=["json", "kv", "sql"])
def record_store(request, tmp_path, database, kv_client):
    """Each collection backend in turn."""
    if request.param == "json":
        return JsonFileStore(tmp_path / "data")
    if request.param == "kv":
        return KeyValueStore(kv_client)
    return SqlRecordStore(database)
