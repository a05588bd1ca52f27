"""Unit tests for the low-level SmileCDR HTTP client."""
import pytest
import requests

from smilecdr_provider.core.smilecdr import client as client_module
from smilecdr_provider.core.smilecdr import (
    ConflictError,
    NotFoundError,
    SmileCdrClient,
    TransportError,
    ValidationError,
)
from tests.conftest import StubResponse


@pytest.fixture
def captured(monkeypatch):
    """Capture the kwargs of the last requests call and answer with a queued response."""
    state = {"response": StubResponse({}, 200, "http://cdr/x"), "kwargs": None, "url": None}

    def fake(url, **kwargs):
        state["url"] = url
        state["kwargs"] = kwargs
        return state["response"]

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(client_module.requests, method, fake)
    return state


def test_base_url_defaults_and_trailing_slash_is_stripped():
    assert SmileCdrClient().base_url == "http://localhost:9000"
    assert SmileCdrClient("http://cdr:9000/").base_url == "http://cdr:9000"


def test_requests_carry_basic_auth_timeout_and_json_headers(captured):
    client = SmileCdrClient("http://cdr:9000", "admin", "pw", timeout=3, verify_tls=False)
    client.post("/openid-connect-clients/Master/smart_auth", json={"clientId": "a"})

    assert captured["url"] == "http://cdr:9000/openid-connect-clients/Master/smart_auth"
    assert captured["kwargs"]["auth"] == ("admin", "pw")
    assert captured["kwargs"]["timeout"] == 3
    assert captured["kwargs"]["verify"] is False
    assert captured["kwargs"]["json"] == {"clientId": "a"}
    assert captured["kwargs"]["headers"]["Accept"] == "application/json"


@pytest.mark.parametrize(
    "status, exc_type",
    [
        (400, ValidationError),
        (422, ValidationError),
        (404, NotFoundError),
        (409, ConflictError),
        (401, TransportError),
        (500, TransportError),
        (503, TransportError),
    ],
)
def test_error_statuses_map_to_typed_exceptions(captured, status, exc_type):
    captured["response"] = StubResponse("boom", status, "http://cdr/openid-connect-clients")
    client = SmileCdrClient("http://cdr", "admin", "pw")

    with pytest.raises(exc_type) as exc_info:
        client.get("/openid-connect-clients")

    assert exc_info.value.status_code == status
    assert exc_info.value.endpoint == "http://cdr/openid-connect-clients"


def test_network_failure_becomes_transport_error(monkeypatch):
    def explode(url, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client_module.requests, "put", explode)
    client = SmileCdrClient("http://cdr", "admin", "pw")

    with pytest.raises(TransportError, match="connection refused") as exc_info:
        client.put("/openid-connect-clients/Master/smart_auth/a", json={})
    assert exc_info.value.status_code is None


def test_invalid_json_body_becomes_transport_error():
    resp = StubResponse("<html>", 200, "http://cdr/x")
    with pytest.raises(TransportError, match="Invalid JSON"):
        SmileCdrClient.json_body(resp)


def test_success_statuses_pass_through(captured):
    captured["response"] = StubResponse("", 204, "http://cdr/x")
    resp = SmileCdrClient("http://cdr", "admin", "pw").delete("/x")
    assert resp.status_code == 204
