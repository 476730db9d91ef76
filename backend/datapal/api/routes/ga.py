"""Google Analytics integration routes: connect, callback, properties, disconnect."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from datapal.api.dependencies import get_http_client, get_settings
from datapal.core.config import Settings
from datapal.core.errors import UpstreamError, error_response
from datapal.ga import client as ga_client
from datapal.ga import oauth
from datapal.models import database as db
from datapal.models.integration_model import GAIntegration

logger = logging.getLogger("datapal.ga")

router = APIRouter()

GA_STEP_PATH = "/new-report/step-ga"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _step_redirect(settings: Settings, **params) -> RedirectResponse:
    return RedirectResponse(f"{settings.base_url.rstrip('/')}{GA_STEP_PATH}?{urlencode(params)}")


@router.get("/ga/connect")
async def ga_connect(
    user_id: Optional[str] = Query(None, alias="userId"),
    settings: Settings = Depends(get_settings),
):
    """Start the OAuth flow; the userId travels as ``state``."""
    if not user_id:
        return error_response("userId is required", 400)
    try:
        auth_url = oauth.generate_auth_url(settings, user_id)
    except Exception:
        logger.exception("Error generating GA auth URL")
        return error_response("Failed to generate authentication URL", 500)
    return {"authUrl": auth_url}


@router.get("/ga/callback")
async def ga_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if error:
        logger.error("OAuth error: %s", error)
        return _step_redirect(settings, error=error)
    if not code or not state:
        return _step_redirect(settings, error="missing_params")

    user_id = state
    try:
        loop = asyncio.get_running_loop()
        tokens = await loop.run_in_executor(None, oauth.exchange_code_for_tokens, settings, code)
        properties = await ga_client.list_properties(client, tokens.access_token)

        integration = GAIntegration(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_at=tokens.expiry_date,
            connected_at=datetime.now(timezone.utc).isoformat(),
            properties=properties,
        )
        db.save_ga_integration(user_id, integration.model_dump(by_alias=True))
    except Exception:
        logger.exception("Error in GA OAuth callback")
        return _step_redirect(settings, error="auth_failed")

    return _step_redirect(settings, connected="true")


@router.get("/ga/properties")
async def ga_properties(
    user_id: Optional[str] = Query(None, alias="userId"),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not user_id:
        return error_response("userId is required", 400)

    try:
        stored = db.get_ga_integration(user_id)
        if not stored or not stored.get("connected"):
            return error_response("Google Analytics not connected", 401, connected=False)
        integration = GAIntegration.model_validate(stored)

        if integration.is_expired(_now_ms()):
            if not integration.refresh_token:
                return error_response("Token expired, please reconnect", 401, connected=False)
            try:
                loop = asyncio.get_running_loop()
                tokens = await loop.run_in_executor(
                    None, oauth.refresh_access_token, settings, integration.refresh_token
                )
            except UpstreamError as exc:
                logger.warning("GA token refresh failed for %s: %s", user_id, exc)
                return error_response("Failed to refresh token, please reconnect", 401, connected=False)
            integration = integration.model_copy(
                update={
                    "access_token": tokens.access_token,
                    "refresh_token": tokens.refresh_token,
                    "expires_at": tokens.expiry_date,
                }
            )
            # The refreshed token is stored even if listing fails below.
            db.save_ga_integration(user_id, integration.model_dump(by_alias=True))

        properties = await ga_client.list_properties(client, integration.access_token)
        integration = integration.model_copy(update={"properties": properties})
        db.save_ga_integration(user_id, integration.model_dump(by_alias=True))
    except Exception:
        logger.exception("Error fetching GA properties")
        return error_response("Failed to fetch properties", 500)

    return {"connected": True, "properties": [p.model_dump(by_alias=True) for p in properties]}


class DisconnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")


@router.post("/ga/disconnect")
async def ga_disconnect(
    body: DisconnectRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not body.user_id:
        return error_response("userId is required", 400)

    try:
        stored = db.get_ga_integration(body.user_id)
        if stored:
            token = stored.get("accessToken")
            if token:
                # Best effort: an unrevoked token simply expires.
                try:
                    if not await oauth.revoke_token(client, token):
                        logger.warning("Google refused to revoke token for %s", body.user_id)
                except httpx.HTTPError as exc:
                    logger.warning("Failed to revoke token: %s", exc)
            db.delete_ga_integration(body.user_id)
    except Exception:
        logger.exception("Error disconnecting GA")
        return error_response("Failed to disconnect Google Analytics", 500)

    return {"success": True}
