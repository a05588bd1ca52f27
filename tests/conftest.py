"""Pytest shared fixtures: an in-memory SmileCDR admin API behind stubbed requests."""
import copy
import json
import pathlib
import sys
from typing import Optional
from urllib.parse import unquote, urlsplit

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from smilecdr_provider.config import ProviderConfig
from smilecdr_provider.core.smilecdr import SmileCdrClient

BASE_URL = "http://smilecdr.test:9000"


class StubResponse:
    def __init__(self, payload, status_code: int = 200, url: str = ""):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        self.text = payload if isinstance(payload, str) else json.dumps(payload)

    def json(self):
        if isinstance(self._payload, str):
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSmileCdr:
    """Minimal stand-in for the SmileCDR OIDC admin endpoints.

    Behaviour the reconciler relies on:
    - POST of a client_id that is active (not archived) -> 409
    - PUT with a pid that is not the active record for client_id -> 404
    - archived client ids may be registered again and receive a new pid
    - client secrets posted without a value get a generated one
    """

    def __init__(self):
        self.clients = {}   # (node, module) -> list of client dicts
        self.servers = {}   # (node, module) -> list of server dicts
        self.next_pid = 1
        self.calls = []
        self.fail_next: Optional[StubResponse] = None

    # ── helpers ────────────────────────────────────────────────────────────
    def _pid(self) -> int:
        pid = self.next_pid
        self.next_pid += 1
        return pid

    def active_client(self, node, module, client_id):
        for record in self.clients.get((node, module), []):
            if record["clientId"] == client_id and not record.get("archivedAt"):
                return record
        return None

    def latest_client(self, node, module, client_id):
        matches = [r for r in self.clients.get((node, module), []) if r["clientId"] == client_id]
        return matches[-1] if matches else None

    def _fill_secrets(self, record):
        for index, secret in enumerate(record.get("clientSecrets") or []):
            if not secret.get("secret"):
                secret["secret"] = f"generated-{record['pid']}-{index}"
            if secret.get("pid") is None:
                secret["pid"] = self._pid()

    # ── request dispatch ──────────────────────────────────────────────────
    def handle(self, method, url, json_body=None):
        self.calls.append((method, url))
        if self.fail_next is not None:
            resp, self.fail_next = self.fail_next, None
            resp.url = url
            return resp
        parts = [unquote(p) for p in urlsplit(url).path.strip("/").split("/")]
        collection, node, module, rest = parts[0], parts[1], parts[2], parts[3:]
        key = (node, module)
        if collection == "openid-connect-clients":
            return self._clients(method, url, key, rest, json_body)
        if collection == "openid-connect-servers":
            return self._servers(method, url, key, rest, json_body)
        return StubResponse("Unknown endpoint", 404, url)

    def _clients(self, method, url, key, rest, body):
        store = self.clients.setdefault(key, [])
        if method == "GET" and not rest:
            return StubResponse(copy.deepcopy(store), 200, url)
        if method == "POST" and not rest:
            if self.active_client(*key, body["clientId"]):
                return StubResponse("Client ID already exists", 409, url)
            record = copy.deepcopy(body)
            record["pid"] = self._pid()
            record["nodeId"], record["moduleId"] = key
            self._fill_secrets(record)
            store.append(record)
            return StubResponse(copy.deepcopy(record), 200, url)
        client_id = rest[0]
        if method == "GET":
            record = self.latest_client(*key, client_id)
            if record is None:
                return StubResponse(f"Unknown client ID: {client_id}", 404, url)
            return StubResponse(copy.deepcopy(record), 200, url)
        if method == "PUT":
            current = self.active_client(*key, client_id)
            if current is None or current["pid"] != body.get("pid"):
                return StubResponse(f"No client {client_id} with pid {body.get('pid')}", 404, url)
            record = copy.deepcopy(body)
            record["nodeId"], record["moduleId"] = key
            self._fill_secrets(record)
            store[store.index(current)] = record
            return StubResponse(copy.deepcopy(record), 200, url)
        return StubResponse("Method not allowed", 405, url)

    def _servers(self, method, url, key, rest, body):
        store = self.servers.setdefault(key, [])
        if method == "GET" and not rest:
            return StubResponse(copy.deepcopy(store), 200, url)
        if method == "POST" and not rest:
            if any(s["name"] == body["name"] for s in store):
                return StubResponse("Server name already exists", 409, url)
            record = copy.deepcopy(body)
            record["pid"] = self._pid()
            record["nodeId"], record["moduleId"] = key
            store.append(record)
            return StubResponse(copy.deepcopy(record), 200, url)
        pid = int(rest[0])
        current = next((s for s in store if s["pid"] == pid), None)
        if current is None:
            return StubResponse(f"Unknown server pid: {pid}", 404, url)
        if method == "PUT":
            record = copy.deepcopy(body)
            record["pid"] = pid
            record["nodeId"], record["moduleId"] = key
            store[store.index(current)] = record
            return StubResponse(copy.deepcopy(record), 200, url)
        if method == "DELETE":
            store.remove(current)
            return StubResponse("", 204, url)
        return StubResponse("Method not allowed", 405, url)


@pytest.fixture
def fake_smilecdr(monkeypatch):
    """Route requests.get/post/put/delete to an in-memory SmileCDR."""
    fake = FakeSmileCdr()

    def route(method):
        def _call(url, **kwargs):
            assert kwargs.get("auth") == ("admin", "secret")
            return fake.handle(method, url, kwargs.get("json"))
        return _call

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(requests, method, route(method.upper()))
    return fake


@pytest.fixture
def provider_config():
    return ProviderConfig(base_url=BASE_URL, username="admin", password="secret")


@pytest.fixture
def api_client(provider_config):
    return SmileCdrClient.from_config(provider_config)
