"""Branding (white-label) and monitoring preference models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from datapal.core.security import is_hex_color


class BrandingConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(alias="companyName", max_length=120)
    brand_color: str = Field(alias="brandColor")
    brand_color_secondary: str = Field(alias="brandColorSecondary")
    company_logo_url: Optional[str] = Field(default=None, alias="companyLogoUrl")

    @field_validator("brand_color", "brand_color_secondary")
    @classmethod
    def _hex(cls, value: str) -> str:
        if not is_hex_color(value):
            raise ValueError("must be a hex color like #019B77")
        return value


DEFAULT_BRANDING = BrandingConfig(
    company_name="DataPal",
    brand_color="#019B77",
    brand_color_secondary="#02c494",
    company_logo_url=None,
)


class MonitoringThresholds(BaseModel):
    """Percent changes that raise an alert."""

    model_config = ConfigDict(populate_by_name=True)

    reach_drop: float = Field(default=20, ge=0, le=100, alias="reachDrop")
    interactions_drop: float = Field(default=25, ge=0, le=100, alias="interactionsDrop")
    followers_drop: float = Field(default=10, ge=0, le=100, alias="followersDrop")
    impressions_drop: float = Field(default=20, ge=0, le=100, alias="impressionsDrop")
    significant_growth: float = Field(default=30, ge=0, alias="significantGrowth")


class MonitoringPreferences(BaseModel):
    enabled: bool = True
    thresholds: MonitoringThresholds = MonitoringThresholds()


DEFAULT_MONITORING = MonitoringPreferences()
