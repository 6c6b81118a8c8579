"""Integration tests for the WebSocket route and health endpoints (fakes injected via dependency overrides)."""
from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from site_service.api.deps import get_feed_store, get_message_router
from site_service.app import create_app
from site_service.config import Settings
from site_service.infrastructure.http.daemon_client import DaemonClient
from site_service.infrastructure.http.newsletter_client import NewsletterClient
from site_service.services.feed_service import FeedCache
from site_service.services.message_router import MessageRouter
from tests.conftest import FakeAlertSink, FakeFeedStore, FakeGitHub, RecordingTransport


def _upstream(request: httpx.Request) -> httpx.Response:
    if request.url.host == "newsletter.test":
        return httpx.Response(409, json={"success": False, "error": "exists"})
    return httpx.Response(200, json={"result": {"ok": True}})


@pytest.fixture
def store() -> FakeFeedStore:
    return FakeFeedStore()


@pytest.fixture
def app(store):
    app = create_app(Settings(ENVIRONMENT="test"))
    alerts = FakeAlertSink()
    http = RecordingTransport(_upstream).client()
    message_router = MessageRouter(
        daemon=DaemonClient(http, rpc_url="http://daemon.test", images_url="http://daemon.test/images.php", access_token="t"),
        feed=FeedCache(None, FakeGitHub(), alerts, org="lbryio"),
        newsletter=NewsletterClient(http, url="http://newsletter.test/list/subscribe"),
        alerts=alerts,
    )
    app.dependency_overrides[get_message_router] = lambda: message_router
    app.dependency_overrides[get_feed_store] = lambda: store
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_readyz_with_store(client):
    resp = client.get("/readyz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ready", "feed": True}


def test_readyz_without_store(app, client):
    app.dependency_overrides[get_feed_store] = lambda: None
    resp = client.get("/readyz")
    assert resp.status_code == 200
    assert resp.json()["feed"] is False


def test_ws_unknown_message_gets_no_reply(client):
    with client.websocket_connect("/") as ws:
        ws.send_text(json.dumps({"message": "hello there"}))
        ws.send_text(json.dumps({"message": "subscribe", "email": "not-an-email"}))

        assert ws.receive_json() == {
            "message": "updated html",
            "selector": "#emailMessage",
            "html": "Your email is invalid",
        }


def test_ws_binary_frame_is_decoded(client):
    with client.websocket_connect("/") as ws:
        ws.send_bytes(json.dumps({"message": "subscribe", "email": "not-an-email"}).encode())

        assert ws.receive_json()["html"] == "Your email is invalid"


def test_ws_already_subscribed(client):
    with client.websocket_connect("/") as ws:
        ws.send_text(json.dumps({"message": "subscribe", "email": "a@b.com"}))

        assert ws.receive_json()["html"] == "You have already subscribed!"


def test_ws_tour_notification(client):
    with client.websocket_connect("/") as ws:
        ws.send_text(json.dumps({"message": "fetch metadata", "step": 1, "claim": "nope", "method": "resolve"}))

        assert ws.receive_json() == {
            "message": "notification",
            "type": "error",
            "details": "Invalid claim ID for tutorial",
        }


def test_ws_tour_success(client):
    with client.websocket_connect("/") as ws:
        ws.send_text(json.dumps({"message": "fetch metadata", "step": 1, "claim": "hellolbry", "method": "resolve"}))

        reply = ws.receive_json()
        assert reply["message"] == "updated html"
        assert reply["selector"] == "#step1-result"
        assert "details" not in reply
