"""
Shared API dependencies.

Settings, the logo uploader and the outbound HTTP client are resolved from
``app.state`` so tests can swap any of them without patching modules.
"""

from __future__ import annotations

from typing import AsyncIterator

import httpx
from fastapi import Request

from datapal.core.config import Settings
from datapal.services.upload_service import LogoUploader

HTTP_TIMEOUT_SECONDS = 20


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_uploader(request: Request) -> LogoUploader:
    return request.app.state.logo_uploader


async def get_http_client(request: Request) -> AsyncIterator[httpx.AsyncClient]:
    # No retries: every upstream call is attempted once.
    transport = getattr(request.app.state, "http_transport", None)
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=transport) as client:
        yield client
