"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_first(*names: str) -> str:
    for name in names:
        value = _env(name)
        if value:
            return value
    return ""


def _default_sqlite_path() -> str:
    return str(Path(__file__).parent.parent.parent / "datapal.db")


@dataclass(frozen=True)
class Settings:
    app_name: str = "DataPal"
    version: str = "1.0.0"
    cors_allow_origins: str = field(default_factory=lambda: _env("CORS_ALLOW_ORIGINS", "*"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())

    # Public URL used in robots.txt / sitemap.xml
    app_url: str = field(default_factory=lambda: _env("NEXT_PUBLIC_APP_URL", "https://datapal.vercel.app"))
    # Base URL the OAuth callback is served from
    base_url: str = field(default_factory=lambda: _env("NEXT_PUBLIC_BASE_URL", "http://localhost:3000"))

    google_client_id: str = field(default_factory=lambda: _env_first("GOOGLE_GA_CLIENT_ID", "GOOGLE_CLIENT_ID"))
    google_client_secret: str = field(
        default_factory=lambda: _env_first("GOOGLE_GA_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET")
    )

    demo_user_email: str = field(default_factory=lambda: _env("DEMO_USER_EMAIL", "demo@datapal.cl"))
    demo_user_password: Optional[str] = field(default_factory=lambda: _env("DEMO_USER_PASSWORD") or None)

    cloudinary_cloud_name: str = field(default_factory=lambda: _env("NEXT_PUBLIC_CLOUDINARY_CLOUD_NAME"))
    cloudinary_api_key: str = field(default_factory=lambda: _env("CLOUDINARY_API_KEY"))
    cloudinary_api_secret: str = field(default_factory=lambda: _env("CLOUDINARY_API_SECRET"))

    sqlite_path: str = field(default_factory=lambda: _env("DATAPAL_SQLITE_PATH") or _default_sqlite_path())

    @property
    def ga_redirect_uri(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/ga/callback"

    @property
    def public_url(self) -> str:
        return self.app_url.rstrip("/")


settings = Settings()
