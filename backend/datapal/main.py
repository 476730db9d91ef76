"""
DataPal — FastAPI Main Application
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from datapal.api.router import api_router, site_router
from datapal.core.auth import AuthProvider, HeaderAuthProvider
from datapal.core.config import Settings, settings as default_settings
from datapal.core.errors import register_error_handlers
from datapal.core.http import request_context_middleware
from datapal.core.logging import configure_logging
from datapal.core.redirects import redirect_middleware
from datapal.models import database as db
from datapal.services.upload_service import LogoUploader

logger = logging.getLogger("datapal")


def create_app(settings: Optional[Settings] = None, auth_provider: Optional[AuthProvider] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database on startup."""
        logger.info("%s v%s starting...", settings.app_name, settings.version)
        db.configure(settings.sqlite_path)
        db.init_db()
        logger.info("Database ready at %s", settings.sqlite_path)
        yield
        db.close()
        logger.info("Shutting down...")

    app = FastAPI(
        title=settings.app_name,
        description="Analytics reports, Google Analytics connection and account settings",
        version=settings.version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.auth_provider = auth_provider or HeaderAuthProvider()
    app.state.logo_uploader = LogoUploader(settings)
    app.state.http_transport = None

    # Added innermost first: request ids and logging wrap the redirect policy.
    app.middleware("http")(redirect_middleware)
    app.middleware("http")(request_context_middleware)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_error_handlers(app)

    # Routes
    app.include_router(api_router, prefix="/api")
    app.include_router(site_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": settings.version, "platform": settings.app_name}

    return app


app = create_app()
