"""Account settings routes: profile overview, branding, monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from datapal.api.dependencies import get_uploader
from datapal.api.routes.upload import upload_logo_file
from datapal.core.auth import require_user
from datapal.core.errors import UploadRejected, error_response
from datapal.models.settings_model import BrandingConfig, MonitoringPreferences
from datapal.models.user_model import User
from datapal.services import settings_service
from datapal.services.upload_service import LogoUploader

logger = logging.getLogger("datapal.settings")

router = APIRouter()


@router.get("/settings")
async def settings_overview(user: User = Depends(require_user)):
    return settings_service.settings_overview(user)


@router.get("/settings/branding")
async def get_branding(user: User = Depends(require_user)):
    return settings_service.get_branding(user.id).model_dump(by_alias=True)


@router.put("/settings/branding")
async def put_branding(branding: BrandingConfig, user: User = Depends(require_user)):
    return settings_service.save_branding(user.id, branding).model_dump(by_alias=True)


@router.post("/settings/branding/logo")
async def upload_branding_logo(
    file: UploadFile = File(...),
    user: User = Depends(require_user),
    uploader: LogoUploader = Depends(get_uploader),
):
    try:
        uploaded = await upload_logo_file(uploader, file)
    except UploadRejected:
        raise
    except Exception:
        logger.exception("Logo upload failed for %s", user.id)
        return error_response("Error uploading image", 500)
    return settings_service.set_logo(user.id, uploaded["url"]).model_dump(by_alias=True)


@router.get("/settings/monitoring")
async def get_monitoring(user: User = Depends(require_user)):
    return settings_service.get_monitoring(user.id).model_dump(by_alias=True)


@router.put("/settings/monitoring")
async def put_monitoring(prefs: MonitoringPreferences, user: User = Depends(require_user)):
    return settings_service.save_monitoring(user.id, prefs).model_dump(by_alias=True)
