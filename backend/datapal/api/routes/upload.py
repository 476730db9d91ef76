"""Image upload route (client logos)."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from datapal.api.dependencies import get_uploader
from datapal.core.errors import UploadRejected, error_response
from datapal.services.upload_service import LogoUploader

logger = logging.getLogger("datapal.upload")

router = APIRouter()


async def upload_logo_file(uploader: LogoUploader, file: UploadFile, report_id: Optional[str] = None):
    """Shared by the upload and branding routes; UploadRejected propagates as a 400."""
    content = await file.read()
    return await uploader.upload(content, file.filename, file.content_type, report_id)


@router.post("/upload")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    report_id: Optional[str] = Form(None, alias="reportId"),
    uploader: LogoUploader = Depends(get_uploader),
):
    if file is None:
        return error_response("No file provided", 400)
    try:
        return await upload_logo_file(uploader, file, report_id)
    except UploadRejected:
        raise
    except Exception:
        logger.exception("Error uploading to Cloudinary")
        return error_response("Error uploading image", 500)
