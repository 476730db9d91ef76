"""Auth routes: demo login credentials and the session/landing state."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from datapal.api.dependencies import get_settings
from datapal.core.auth import AuthState, get_auth_state, require_user
from datapal.core.config import Settings
from datapal.core.errors import error_response
from datapal.core.redirects import landing_redirect
from datapal.models.user_model import User
from datapal.services import settings_service

logger = logging.getLogger("datapal.auth")

router = APIRouter()


@router.post("/auth/demo")
async def demo_credentials(settings: Settings = Depends(get_settings)):
    """Credentials of the shared demo account; the password only lives in the environment."""
    try:
        logger.info("DEMO_USER_PASSWORD exists: %s", bool(settings.demo_user_password))
        if not settings.demo_user_password:
            logger.error("DEMO_USER_PASSWORD not found in environment variables")
            return error_response("Demo is not configured. Contact the administrator.", 503)
        return {"email": settings.demo_user_email, "password": settings.demo_user_password}
    except Exception:
        logger.exception("Demo auth failed")
        return error_response("Internal server error", 500)


@router.get("/auth/session")
async def session(state: AuthState = Depends(get_auth_state)):
    return {
        "user": state.user.model_dump(by_alias=True) if state.user else None,
        "loading": state.loading,
        "redirectTo": landing_redirect(state),
    }


@router.get("/auth/me")
async def me(user: User = Depends(require_user)):
    return {"user": settings_service.get_profile(user).model_dump(by_alias=True)}
