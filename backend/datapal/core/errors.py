"""
Error taxonomy and the JSON error envelope.

Every failure leaves the API as ``{"error": <message>}``. Domain code raises
``DataPalError`` subclasses; routes with their own documented 500 contract
catch and log before the generic handler sees anything.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("datapal.errors")


class DataPalError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(DataPalError):
    """A required setting (credentials, secrets) is missing."""

    status_code = 500


class NotFoundError(DataPalError):
    status_code = 404


class UnauthenticatedError(DataPalError):
    status_code = 401


class ConflictError(DataPalError):
    status_code = 409


class UploadRejected(DataPalError):
    status_code = 400


class UpstreamError(DataPalError):
    """A third-party service (Google, image host) answered with an error."""

    status_code = 502


def error_response(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def _datapal_error_handler(request: Request, exc: DataPalError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.message, exc.status_code)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field_name = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
    message = first.get("msg", "Invalid request")
    if field_name:
        message = f"{field_name}: {message}"
    return error_response(message, 422)


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return error_response("Internal server error", 500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DataPalError, _datapal_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
