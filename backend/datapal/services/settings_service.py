"""Settings page state: profile, branding, monitoring and the trash."""

from __future__ import annotations

from typing import Any, Dict

from datapal.models import database as db
from datapal.models.settings_model import (
    DEFAULT_BRANDING,
    DEFAULT_MONITORING,
    BrandingConfig,
    MonitoringPreferences,
)
from datapal.models.user_model import Profile, User

BRANDING_KEY = "branding"
MONITORING_KEY = "monitoring"


def get_profile(user: User) -> Profile:
    stored = db.upsert_user(user.model_dump(by_alias=True))
    return Profile.model_validate(stored)


def get_branding(user_id: str) -> BrandingConfig:
    stored = db.get_setting(user_id, BRANDING_KEY)
    if stored is None:
        return DEFAULT_BRANDING.model_copy()
    return BrandingConfig.model_validate(stored)


def save_branding(user_id: str, branding: BrandingConfig) -> BrandingConfig:
    db.save_setting(user_id, BRANDING_KEY, branding.model_dump(by_alias=True))
    return branding


def set_logo(user_id: str, logo_url: str) -> BrandingConfig:
    branding = get_branding(user_id).model_copy(update={"company_logo_url": logo_url})
    return save_branding(user_id, branding)


def get_monitoring(user_id: str) -> MonitoringPreferences:
    stored = db.get_setting(user_id, MONITORING_KEY)
    if stored is None:
        return DEFAULT_MONITORING.model_copy(deep=True)
    return MonitoringPreferences.model_validate(stored)


def save_monitoring(user_id: str, prefs: MonitoringPreferences) -> MonitoringPreferences:
    db.save_setting(user_id, MONITORING_KEY, prefs.model_dump(by_alias=True))
    return prefs


def settings_overview(user: User) -> Dict[str, Any]:
    profile = get_profile(user)
    return {
        "profile": {**profile.model_dump(by_alias=True), "isPro": profile.is_pro},
        "branding": get_branding(user.id).model_dump(by_alias=True),
        "monitoring": get_monitoring(user.id).model_dump(by_alias=True),
        "deletedReports": db.get_deleted_reports(user.id),
    }
