"""
Remote key-value persistence adapter.

Each collection lives under one key. Managed providers differ in what a GET
returns (native document, JSON text or bytes), so reads go through
decode_collection; writes always store JSON text.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Optional, Protocol

import redis
import requests
from redis import exceptions as redis_exceptions

from runclub.core.config import Settings
from runclub.domain.errors import MalformedDataError, StorageUnavailableError

from .store import decode_collection, encode_collection

logger = logging.getLogger(__name__)


class KeyValueClient(Protocol):
    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: str) -> Any:
        ...


@dataclass
class UpstashRestClient:
    """Minimal client for the Redis-over-HTTP REST API (Upstash / Vercel KV)."""

    url: str
    token: str
    timeout: int = 10
    session: Optional[requests.Session] = None

    def __post_init__(self):
        self.url = self.url.rstrip("/")
        if self.session is None:
            self.session = requests.Session()

    def command(self, *args: Any) -> Any:
        try:
            response = self.session.post(
                self.url,
                json=list(args),
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise StorageUnavailableError(f"KV request {args[0]} failed: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageUnavailableError(f"Unexpected KV response: {payload!r}")
        if payload.get("error"):
            raise StorageUnavailableError(f"KV error: {payload['error']}")
        return payload.get("result")

    def get(self, key: str) -> Any:
        return self.command("GET", key)

    def set(self, key: str, value: str) -> Any:
        return self.command("SET", key, value)


def build_kv_client(settings: Settings) -> KeyValueClient:
    if settings.kv_rest_api_url and settings.kv_rest_api_token:
        return UpstashRestClient(settings.kv_rest_api_url, settings.kv_rest_api_token, timeout=settings.kv_timeout_seconds)
    if settings.has_upstash_config:
        return UpstashRestClient(
            settings.upstash_redis_rest_url,
            settings.upstash_redis_rest_token,
            timeout=settings.kv_timeout_seconds,
        )
    if settings.kv_url:
        return redis.Redis.from_url(
            settings.kv_url,
            socket_timeout=settings.kv_timeout_seconds,
            socket_connect_timeout=settings.kv_timeout_seconds,
        )
    raise RuntimeError("No key-value store configured (KV_REST_API_URL, KV_URL or UPSTASH_REDIS_REST_URL).")


class KeyValueStore:
    def __init__(self, client: KeyValueClient, key_prefix: str = "") -> None:
        self.client = client
        self.key_prefix = key_prefix

    def key_for(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def load_collection(self, name: str) -> list[dict]:
        key = self.key_for(name)
        try:
            value = self.client.get(key)
        except (redis_exceptions.RedisError, requests.RequestException) as exc:
            raise StorageUnavailableError(f"KV get {key} failed: {exc}") from exc
        try:
            return decode_collection(value)
        except MalformedDataError as exc:
            logger.warning("Ignoring malformed KV value under %s: %s", key, exc)
            return []

    def save_collection(self, name: str, records: list[dict]) -> None:
        key = self.key_for(name)
        try:
            self.client.set(key, encode_collection(records))
        except (redis_exceptions.RedisError, requests.RequestException) as exc:
            raise StorageUnavailableError(f"KV set {key} failed: {exc}") from exc
