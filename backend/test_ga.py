"""Google Analytics connect / callback / properties / disconnect."""

import dataclasses
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2 import InvalidGrantError

from datapal.core.errors import UpstreamError
from datapal.ga import client as ga_client
from datapal.ga import oauth
from datapal.main import create_app
from datapal.models import database as db
from datapal.models.integration_model import GATokens

ACCOUNT_SUMMARIES = f"{ga_client.GA_ADMIN_API_BASE}/accountSummaries"

SUMMARIES = {
    "accountSummaries": [
        {
            "account": "accounts/1",
            "displayName": "Acme",
            "propertySummaries": [
                {"property": "properties/123", "displayName": "Acme Web"},
                {"property": "properties/456"},
            ],
        }
    ]
}


def _query(url):
    return parse_qs(urlparse(url).query)


# ── connect ───────────────────────────────────────────────────────────────────


def test_connect_requires_user_id(client):
    r = client.get("/api/ga/connect")
    assert r.status_code == 400
    assert r.json() == {"error": "userId is required"}

    assert client.get("/api/ga/connect?userId=").status_code == 400


def test_connect_returns_auth_url_with_state(client):
    r = client.get("/api/ga/connect", params={"userId": "abc123"})
    assert r.status_code == 200
    auth_url = r.json()["authUrl"]
    assert "state=abc123" in auth_url

    q = _query(auth_url)
    assert q["state"] == ["abc123"]
    assert q["client_id"] == ["ga-client-id"]
    assert q["access_type"] == ["offline"]
    assert q["prompt"] == ["consent"]
    assert q["include_granted_scopes"] == ["true"]
    assert q["redirect_uri"] == ["https://app.datapal.test/api/ga/callback"]
    assert set(q["scope"][0].split()) == set(oauth.GA_SCOPES)
    assert "code_challenge" not in q


def test_connect_without_credentials_is_500(settings):
    app = create_app(dataclasses.replace(settings, google_client_id="", google_client_secret=""))
    with TestClient(app) as c:
        r = c.get("/api/ga/connect", params={"userId": "abc123"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to generate authentication URL"}


# ── callback ──────────────────────────────────────────────────────────────────


def test_callback_oauth_error(client):
    r = client.get("/api/ga/callback?error=access_denied", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "https://app.datapal.test/new-report/step-ga?error=access_denied"


def test_callback_missing_params(client):
    r = client.get("/api/ga/callback?code=xyz", follow_redirects=False)
    assert r.headers["location"].endswith("error=missing_params")


def test_callback_stores_integration(client, upstream, monkeypatch):
    seen = {}

    def fake_exchange(settings, code):
        seen["code"] = code
        return GATokens(access_token="at-1", refresh_token="rt-1", expiry_date=4_102_444_800_000)

    monkeypatch.setattr(oauth, "exchange_code_for_tokens", fake_exchange)
    upstream.on("GET", ACCOUNT_SUMMARIES, json=SUMMARIES)

    r = client.get("/api/ga/callback?code=good-code&state=user-1", follow_redirects=False)
    assert r.headers["location"].endswith("/new-report/step-ga?connected=true")
    assert seen["code"] == "good-code"

    stored = db.get_ga_integration("user-1")
    assert stored["connected"] is True
    assert stored["accessToken"] == "at-1"
    assert stored["refreshToken"] == "rt-1"
    assert [p["propertyId"] for p in stored["properties"]] == ["123", "456"]
    assert stored["properties"][1]["displayName"] == "Unnamed Property"

    (call,) = upstream.calls("GET", ACCOUNT_SUMMARIES)
    assert call.headers["Authorization"] == "Bearer at-1"


def test_callback_exchange_failure(client, monkeypatch):
    def failing_exchange(settings, code):
        raise UpstreamError("Token exchange failed: invalid_grant")

    monkeypatch.setattr(oauth, "exchange_code_for_tokens", failing_exchange)
    r = client.get("/api/ga/callback?code=bad&state=user-1", follow_redirects=False)
    assert r.headers["location"].endswith("error=auth_failed")
    assert db.get_ga_integration("user-1") is None


def _fetch_token_returns(monkeypatch, token=None, error=None):
    """Answer ``Flow.fetch_token`` with ``token`` as Google's token response, or raise ``error``."""
    seen = []

    def fake_fetch_token(self, **kwargs):
        seen.append(kwargs)
        if error is not None:
            raise error
        self.oauth2session.token = token
        return token

    monkeypatch.setattr(Flow, "fetch_token", fake_fetch_token)
    return seen


def test_exchange_code_for_tokens(settings, monkeypatch):
    seen = _fetch_token_returns(
        monkeypatch,
        token={
            "access_token": "at-1",
            "refresh_token": "rt-1",
            "token_type": "Bearer",
            "expires_at": 4_102_444_800,
            "scope": oauth.GA_SCOPES,
        },
    )

    tokens = oauth.exchange_code_for_tokens(settings, "good-code")

    assert seen == [{"code": "good-code"}]
    assert tokens.access_token == "at-1"
    assert tokens.refresh_token == "rt-1"
    assert tokens.expiry_date == 4_102_444_800_000
    assert set(tokens.scope.split()) == set(oauth.GA_SCOPES)


def test_exchange_code_for_tokens_bad_code(settings, monkeypatch):
    _fetch_token_returns(monkeypatch, error=InvalidGrantError("Bad Request"))
    with pytest.raises(UpstreamError) as excinfo:
        oauth.exchange_code_for_tokens(settings, "bad-code")
    assert excinfo.value.status_code == 502
    assert excinfo.value.message.startswith("Token exchange failed")


def test_callback_runs_real_exchange(client, upstream, monkeypatch):
    _fetch_token_returns(
        monkeypatch,
        token={"access_token": "at-2", "refresh_token": "rt-2", "expires_at": 4_102_444_800},
    )
    upstream.on("GET", ACCOUNT_SUMMARIES, json=SUMMARIES)

    r = client.get("/api/ga/callback?code=good-code&state=user-2", follow_redirects=False)
    assert r.headers["location"].endswith("connected=true")

    stored = db.get_ga_integration("user-2")
    assert stored["accessToken"] == "at-2"
    assert stored["expiresAt"] == 4_102_444_800_000


# ── properties ────────────────────────────────────────────────────────────────


def _store(user_id="user-1", **overrides):
    integration = {
        "connected": True,
        "accessToken": "at-old",
        "refreshToken": "rt-1",
        "expiresAt": 4_102_444_800_000,
        "connectedAt": "2026-01-01T00:00:00+00:00",
        "properties": [],
    }
    integration.update(overrides)
    db.save_ga_integration(user_id, integration)


def test_properties_requires_user_id(client):
    assert client.get("/api/ga/properties").status_code == 400


def test_properties_not_connected(client):
    r = client.get("/api/ga/properties?userId=nobody")
    assert r.status_code == 401
    assert r.json() == {"error": "Google Analytics not connected", "connected": False}


def test_properties_lists_and_caches(client, upstream):
    _store()
    upstream.on("GET", ACCOUNT_SUMMARIES, json=SUMMARIES)

    r = client.get("/api/ga/properties?userId=user-1")
    assert r.status_code == 200
    body = r.json()
    assert body["connected"] is True
    assert body["properties"][0] == {"propertyId": "123", "displayName": "Acme Web", "parent": "accounts/1"}
    assert len(db.get_ga_integration("user-1")["properties"]) == 2


def _refresh_returns(monkeypatch, token="at-new", error=None):
    """Answer google-auth refreshes with ``token`` (valid for an hour) or ``error``."""
    seen = []

    def fake_refresh(self, request):
        seen.append(self.refresh_token)
        if error is not None:
            raise error
        self.token = token
        self.expiry = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1)

    monkeypatch.setattr(Credentials, "refresh", fake_refresh)
    return seen


def test_properties_refreshes_expired_token(client, upstream, monkeypatch):
    _store(expiresAt=1000)
    seen = _refresh_returns(monkeypatch)
    upstream.on("GET", ACCOUNT_SUMMARIES, json=SUMMARIES)

    r = client.get("/api/ga/properties?userId=user-1")
    assert r.status_code == 200
    assert seen == ["rt-1"]

    stored = db.get_ga_integration("user-1")
    assert stored["accessToken"] == "at-new"
    assert stored["refreshToken"] == "rt-1"
    assert stored["expiresAt"] > 1000
    (call,) = upstream.calls("GET", ACCOUNT_SUMMARIES)
    assert call.headers["Authorization"] == "Bearer at-new"


def test_properties_keeps_refreshed_token_when_listing_fails(client, upstream, monkeypatch):
    _store(expiresAt=1000)
    _refresh_returns(monkeypatch)
    upstream.on("GET", ACCOUNT_SUMMARIES, status_code=503, json={"error": {"code": 503}})

    r = client.get("/api/ga/properties?userId=user-1")
    assert r.status_code == 500

    stored = db.get_ga_integration("user-1")
    assert stored["accessToken"] == "at-new"
    assert stored["expiresAt"] > 1000


def test_properties_expired_without_refresh_token(client):
    _store(expiresAt=1000, refreshToken=None)
    r = client.get("/api/ga/properties?userId=user-1")
    assert r.status_code == 401
    assert r.json()["error"] == "Token expired, please reconnect"


def test_properties_refresh_failure(client, monkeypatch):
    _store(expiresAt=1000)
    _refresh_returns(monkeypatch, error=RefreshError("invalid_grant: Token has been expired or revoked."))
    r = client.get("/api/ga/properties?userId=user-1")
    assert r.status_code == 401
    assert r.json() == {"error": "Failed to refresh token, please reconnect", "connected": False}
    assert db.get_ga_integration("user-1")["accessToken"] == "at-old"


def test_properties_upstream_failure_is_500(client, upstream):
    _store()
    upstream.on("GET", ACCOUNT_SUMMARIES, status_code=403, json={"error": {"code": 403}})
    r = client.get("/api/ga/properties?userId=user-1")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch properties"}


# ── disconnect ────────────────────────────────────────────────────────────────


def test_disconnect_requires_user_id(client):
    r = client.post("/api/ga/disconnect", json={})
    assert r.status_code == 400


def test_disconnect_revokes_and_deletes(client, upstream):
    _store()
    upstream.on("POST", oauth.REVOKE_URI)

    r = client.post("/api/ga/disconnect", json={"userId": "user-1"})
    assert r.json() == {"success": True}
    assert db.get_ga_integration("user-1") is None
    (call,) = upstream.calls("POST", oauth.REVOKE_URI)
    assert call.url.params["token"] == "at-old"


def test_disconnect_ignores_revoke_failure(client, upstream):
    _store()
    upstream.on("POST", oauth.REVOKE_URI, status_code=400, json={"error": "invalid_token"})

    r = client.post("/api/ga/disconnect", json={"userId": "user-1"})
    assert r.status_code == 200
    assert db.get_ga_integration("user-1") is None


def test_disconnect_without_integration(client, upstream):
    r = client.post("/api/ga/disconnect", json={"userId": "ghost"})
    assert r.json() == {"success": True}
    assert upstream.requests == []
