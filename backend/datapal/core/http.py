"""HTTP-level behaviour: request ids, access log, security and cache headers."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request

logger = logging.getLogger("datapal.http")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

# Crawl documents change rarely; match the 60s image cache of the web build.
CACHEABLE_PATHS = {"/robots.txt": "public, max-age=60", "/sitemap.xml": "public, max-age=60"}


async def request_context_middleware(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid

    start = time.time()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "rid=%s %s %s status=%s dur_ms=%s", rid, request.method, request.url.path, status_code, duration_ms
        )

    response.headers["X-Request-ID"] = rid
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    cache = CACHEABLE_PATHS.get(request.url.path)
    if cache and "Cache-Control" not in response.headers:
        response.headers["Cache-Control"] = cache
    if "server" in response.headers:
        del response.headers["server"]
    return response
