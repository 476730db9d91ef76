"""
Google Analytics OAuth.

The authorization URL and the code exchange go through google-auth-oauthlib;
refresh uses google-auth credentials; revoke is a single POST.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleRequest
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from datapal.core.config import Settings
from datapal.core.errors import ConfigurationError, UpstreamError
from datapal.models.integration_model import GATokens

logger = logging.getLogger("datapal.ga.oauth")

# Google may return previously granted scopes alongside ours (include_granted_scopes).
os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")

GA_SCOPES: List[str] = [
    "https://www.googleapis.com/auth/analytics.readonly",  # GA4 data
    "https://www.googleapis.com/auth/analytics.manage.users.readonly",  # accounts/properties listing
]

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
REVOKE_URI = "https://oauth2.googleapis.com/revoke"


def _client_config(settings: Settings) -> dict:
    if not settings.google_client_id or not settings.google_client_secret:
        raise ConfigurationError(
            "Google Analytics OAuth credentials not configured. "
            "Check GOOGLE_GA_CLIENT_ID and GOOGLE_GA_CLIENT_SECRET env vars."
        )
    return {
        "web": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
            "redirect_uris": [settings.ga_redirect_uri],
        }
    }


def create_flow(settings: Settings, state: Optional[str] = None) -> Flow:
    return Flow.from_client_config(
        client_config=_client_config(settings),
        scopes=GA_SCOPES,
        state=state,
        redirect_uri=settings.ga_redirect_uri,
        # The callback is stateless across processes; no PKCE verifier to carry.
        autogenerate_code_verifier=False,
    )


def generate_auth_url(settings: Settings, state: str) -> str:
    """Consent URL for the GA scopes; ``state`` comes back on the callback."""
    flow = create_flow(settings)
    auth_url, _ = flow.authorization_url(
        access_type="offline",  # refresh token
        prompt="consent",  # always re-issue the refresh token
        include_granted_scopes="true",
        state=state,
    )
    return auth_url


def _epoch_ms(expiry: Optional[datetime]) -> Optional[int]:
    # google-auth keeps expiry as a naive UTC datetime
    if expiry is None:
        return None
    return int(expiry.replace(tzinfo=timezone.utc).timestamp() * 1000)


def exchange_code_for_tokens(settings: Settings, code: str) -> GATokens:
    """Blocking: run it in an executor from async code."""
    flow = create_flow(settings)
    try:
        flow.fetch_token(code=code)
    except Exception as exc:
        logger.error("GA token exchange failed: %s", exc)
        raise UpstreamError(f"Token exchange failed: {exc}") from exc

    creds = flow.credentials
    if not creds.token:
        raise UpstreamError("No access token received")

    return GATokens(
        access_token=creds.token,
        refresh_token=creds.refresh_token,
        expiry_date=_epoch_ms(creds.expiry),
        scope=" ".join(creds.scopes or []) or None,
    )


def refresh_access_token(settings: Settings, refresh_token: str) -> GATokens:
    """Blocking: run it in an executor from async code."""
    config = _client_config(settings)["web"]
    creds = Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=config["token_uri"],
        client_id=config["client_id"],
        client_secret=config["client_secret"],
    )
    try:
        creds.refresh(GoogleRequest())
    except GoogleAuthError as exc:
        raise UpstreamError(f"Failed to refresh access token: {exc}") from exc

    return GATokens(
        access_token=creds.token,
        # Google omits the refresh token on refresh; keep the one we have.
        refresh_token=creds.refresh_token or refresh_token,
        expiry_date=_epoch_ms(creds.expiry),
    )


async def revoke_token(client: httpx.AsyncClient, token: str) -> bool:
    resp = await client.post(REVOKE_URI, params={"token": token})
    return resp.status_code == 200
