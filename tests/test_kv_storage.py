from __future__ import annotations

import json

import pytest
import requests
from redis import exceptions as redis_exceptions

from runclub.domain.errors import StorageUnavailableError
from runclub.repositories.kv_storage import KeyValueStore, UpstashRestClient

from conftest import FakeKVClient

ROUTES = [{"id": 1, "name": "Campus Loop", "points": [{"lat": 42.28, "lng": -83.74}]}]


@pytest.mark.parametrize(
    "stored",
    [ROUTES, json.dumps(ROUTES), json.dumps(ROUTES).encode("utf-8")],
    ids=["native", "text", "bytes"],
)
def test_load_parses_or_passes_through(stored):
    store = KeyValueStore(FakeKVClient({"routes": stored}))
    assert store.load_collection("routes") == ROUTES


@pytest.mark.parametrize("stored", [None, "", "{broken", json.dumps({"id": 1}), 42])
def test_missing_or_malformed_value_reads_as_empty(stored):
    store = KeyValueStore(FakeKVClient({"routes": stored}))
    assert store.load_collection("routes") == []


def test_save_stores_json_text_under_prefixed_key():
    client = FakeKVClient()
    store = KeyValueStore(client, key_prefix="club:")
    store.save_collection("events", [{"id": 3, "title": "Long run"}])
    assert json.loads(client.values["club:events"]) == [{"id": 3, "title": "Long run"}]
    assert store.load_collection("events") == [{"id": 3, "title": "Long run"}]


class _BrokenClient:
    def get(self, key):
        raise redis_exceptions.ConnectionError("connection reset")

    def set(self, key, value):
        raise requests.ConnectionError("unreachable")


def test_client_failures_raise_storage_unavailable():
    store = KeyValueStore(_BrokenClient())
    with pytest.raises(StorageUnavailableError):
        store.load_collection("routes")
    with pytest.raises(StorageUnavailableError):
        store.save_collection("routes", [])


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class _FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return self.responses.pop(0)


def test_rest_client_sends_commands_with_bearer_token():
    session = _FakeSession([_FakeResponse({"result": "OK"}), _FakeResponse({"result": '[{"id": 1}]'})])
    client = UpstashRestClient("https://kv.example.test/", "secret", timeout=5, session=session)
    store = KeyValueStore(client)

    store.save_collection("routes", [{"id": 1}])
    assert store.load_collection("routes") == [{"id": 1}]

    set_call, get_call = session.calls
    assert set_call["url"] == "https://kv.example.test"
    assert set_call["json"] == ["SET", "routes", '[{"id":1}]']
    assert set_call["headers"] == {"Authorization": "Bearer secret"}
    assert set_call["timeout"] == 5
    assert get_call["json"] == ["GET", "routes"]


@pytest.mark.parametrize(
    "response",
    [_FakeResponse({"error": "WRONGPASS"}), _FakeResponse({}, status_code=503), _FakeResponse(["unexpected"])],
)
def test_rest_client_errors_surface_as_storage_unavailable(response):
    client = UpstashRestClient("https://kv.example.test", "secret", session=_FakeSession([response]))
    with pytest.raises(StorageUnavailableError):
        KeyValueStore(client).load_collection("routes")
