"""Crawl documents served at the site root."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from datapal import seo
from datapal.api.dependencies import get_settings
from datapal.core.config import Settings

router = APIRouter()


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt(settings: Settings = Depends(get_settings)):
    return seo.render_robots(seo.robots(settings))


@router.get("/sitemap.xml")
async def sitemap_xml(settings: Settings = Depends(get_settings)):
    return Response(content=seo.render_sitemap(seo.sitemap(settings)), media_type="application/xml")
