"""Report routes, including the trash (soft delete, restore, permanent delete)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from datapal.core.auth import require_user
from datapal.models.report_model import Report, ReportCreate
from datapal.models.user_model import User
from datapal.services import report_service

router = APIRouter()


@router.get("/reports")
async def list_reports(user: User = Depends(require_user)):
    return {"reports": report_service.list_reports(user.id)}


@router.post("/reports", status_code=201, response_model=Report)
async def create_report(payload: ReportCreate, user: User = Depends(require_user)):
    return report_service.create_report(user.id, payload)


# ── TRASH ─────────────────────────────────────────────────────────────────────


@router.get("/reports/deleted")
async def list_deleted_reports(user: User = Depends(require_user)):
    return {"reports": report_service.list_deleted_reports(user.id)}


@router.get("/reports/{report_id}", response_model=Report)
async def get_report(report_id: str, user: User = Depends(require_user)):
    return report_service.get_report(report_id, user.id)


@router.post("/reports/{report_id}/trash", response_model=Report)
async def trash_report(report_id: str, user: User = Depends(require_user)):
    return report_service.trash_report(report_id, user.id)


@router.post("/reports/{report_id}/restore", response_model=Report)
async def restore_report(report_id: str, user: User = Depends(require_user)):
    return report_service.restore_report(report_id, user.id)


@router.delete("/reports/{report_id}")
async def permanent_delete_report(report_id: str, user: User = Depends(require_user)):
    deleted = report_service.permanent_delete_report(report_id, user.id)
    return {"success": True, "deleted": deleted}
