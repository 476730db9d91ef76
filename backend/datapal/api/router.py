"""API router composition.

We keep JSON endpoints under `/api/*` (the redirect middleware never touches
them) and crawl documents at the site root.
"""

from fastapi import APIRouter

from datapal.api.routes.auth import router as auth_router
from datapal.api.routes.ga import router as ga_router
from datapal.api.routes.reports import router as reports_router
from datapal.api.routes.seo import router as seo_router
from datapal.api.routes.settings import router as settings_router
from datapal.api.routes.upload import router as upload_router


api_router = APIRouter()
site_router = APIRouter()

# JSON routes
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(ga_router, tags=["google-analytics"])
api_router.include_router(reports_router, tags=["reports"])
api_router.include_router(settings_router, tags=["settings"])
api_router.include_router(upload_router, tags=["upload"])

# Root-level documents (no `/api` prefix)
site_router.include_router(seo_router, tags=["seo"])
