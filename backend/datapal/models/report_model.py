"""Report models."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ReportStatus = Literal["uploading", "processing", "ready", "error"]
Platform = Literal["instagram", "facebook", "linkedin", "tiktok", "google_analytics"]


class Report(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    title: str = ""
    objective: str = "analysis"
    platforms: List[Platform] = []
    status: ReportStatus = "uploading"
    client_logo: Optional[str] = Field(default=None, alias="clientLogo")
    data: Dict[str, Any] = {}
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    is_deleted: bool = Field(default=False, alias="isDeleted")
    deleted_at: Optional[str] = Field(default=None, alias="deletedAt")


class ReportCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    title: str = Field(default="", max_length=200)
    objective: str = "analysis"
    platforms: List[Platform] = []
    client_logo: Optional[str] = Field(default=None, alias="clientLogo")
    data: Dict[str, Any] = {}
