"""
Configuration helpers for the run club backend.

Settings are read from environment variables once and cached, so that
routers/repositories never touch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

STORAGE_BACKENDS = {"json", "kv", "sql"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    log_level: str
    data_dir: str
    database_url: str
    storage_backend: str
    kv_rest_api_url: str
    kv_rest_api_token: str
    kv_url: str
    upstash_redis_rest_url: str
    upstash_redis_rest_token: str
    kv_key_prefix: str
    kv_timeout_seconds: int
    admin_password: str
    admin_password_hash: str
    registration_email_domain: str
    login_rate_limit: int
    login_rate_window_seconds: int

    @property
    def has_managed_kv(self) -> bool:
        return bool((self.kv_rest_api_url and self.kv_rest_api_token) or self.kv_url)

    @property
    def has_upstash_config(self) -> bool:
        return bool(self.upstash_redis_rest_url and self.upstash_redis_rest_token)

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_password or self.admin_password_hash)

    def resolved_storage_backend(self) -> str:
        """Return the collection backend name, honouring an explicit override."""
        if self.storage_backend in STORAGE_BACKENDS:
            return self.storage_backend
        if self.has_managed_kv or self.has_upstash_config:
            return "kv"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _str(name: str, default: str = "") -> str:
        return (os.getenv(name) or default).strip()

    data_dir = _str("DATA_DIR") or str(Path.cwd() / "data")
    database_url = _str("DATABASE_URL") or f"sqlite:///{Path(data_dir) / 'registrations.db'}"

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        log_level=_str("LOG_LEVEL", "INFO").upper(),
        data_dir=data_dir,
        database_url=database_url,
        storage_backend=_str("STORAGE_BACKEND").lower(),
        kv_rest_api_url=_str("KV_REST_API_URL").rstrip("/"),
        kv_rest_api_token=_str("KV_REST_API_TOKEN"),
        kv_url=_str("KV_URL"),
        upstash_redis_rest_url=_str("UPSTASH_REDIS_REST_URL").rstrip("/"),
        upstash_redis_rest_token=_str("UPSTASH_REDIS_REST_TOKEN"),
        kv_key_prefix=_str("KV_KEY_PREFIX"),
        kv_timeout_seconds=_int(os.getenv("KV_TIMEOUT_SECONDS", "10"), 10),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        admin_password_hash=_str("ADMIN_PASSWORD_HASH"),
        registration_email_domain=_str("REGISTRATION_EMAIL_DOMAIN", "umich.edu").lstrip("@").lower(),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "300"), 300),
    )
