"""
Client logo uploads to Cloudinary.

The incoming transformation caps logos at 200x200 and lets Cloudinary pick
quality and format.
"""

from __future__ import annotations

import asyncio
import functools
import io
import logging
from typing import Dict, Optional

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from datapal.core.config import Settings
from datapal.core.errors import ConfigurationError, UploadRejected, UpstreamError
from datapal.core.security import is_safe_identifier

logger = logging.getLogger("datapal.upload")

MAX_LOGO_BYTES = 2 * 1024 * 1024
LOGO_FOLDER = "datapal/client-logos"
LOGO_TRANSFORMATION = [
    {"width": 200, "height": 200, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


def validate_logo(content_type: Optional[str], size: int) -> None:
    if not (content_type or "").startswith("image/"):
        raise UploadRejected("File must be an image")
    if size > MAX_LOGO_BYTES:
        raise UploadRejected("Image must be smaller than 2MB")
    if size == 0:
        raise UploadRejected("No file provided")


def logo_folder(report_id: Optional[str]) -> str:
    if report_id and not is_safe_identifier(report_id):
        raise UploadRejected("Invalid reportId")
    return f"{LOGO_FOLDER}/{report_id or 'general'}"


class LogoUploader:
    def __init__(self, settings: Settings):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret

    def _check_configured(self) -> None:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ConfigurationError("Image hosting is not configured")

    def _upload_sync(self, content: bytes, filename: str, folder: str) -> dict:
        # Credentials go per call; the SDK's global config stays untouched.
        return cloudinary.uploader.upload(
            io.BytesIO(content),
            filename=filename,
            folder=folder,
            resource_type="image",
            transformation=LOGO_TRANSFORMATION,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
        )

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str],
        report_id: Optional[str] = None,
    ) -> Dict[str, str]:
        validate_logo(content_type, len(content))
        folder = logo_folder(report_id)
        self._check_configured()

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(
                None, functools.partial(self._upload_sync, content, filename or "logo", folder)
            )
        except CloudinaryError as exc:
            logger.error("Cloudinary upload failed: %s", exc)
            raise UpstreamError("Error uploading image") from exc

        return {"url": result["secure_url"], "publicId": result["public_id"]}
