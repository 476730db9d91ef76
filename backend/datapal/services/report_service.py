"""Report helpers: ownership checks over the persistence layer."""

from __future__ import annotations

from typing import Any, Dict, List

from datapal.core.errors import ConflictError, NotFoundError
from datapal.models import database as db
from datapal.models.report_model import ReportCreate


def _owned(report_id: str, user_id: str) -> Dict[str, Any]:
    report = db.get_report(report_id)
    if not report or report["userId"] != user_id:
        raise NotFoundError("Report not found")
    return report


def list_reports(user_id: str) -> List[Dict[str, Any]]:
    return db.get_user_reports(user_id)


def create_report(user_id: str, payload: ReportCreate) -> Dict[str, Any]:
    if payload.id and db.get_report(payload.id):
        raise ConflictError("Report already exists")
    return db.create_report(user_id, payload.model_dump(by_alias=True, exclude_none=True))


def get_report(report_id: str, user_id: str) -> Dict[str, Any]:
    return _owned(report_id, user_id)


def trash_report(report_id: str, user_id: str) -> Dict[str, Any]:
    _owned(report_id, user_id)
    db.soft_delete_report(report_id)
    return db.get_report(report_id)


def list_deleted_reports(user_id: str) -> List[Dict[str, Any]]:
    return db.get_deleted_reports(user_id)


def restore_report(report_id: str, user_id: str) -> Dict[str, Any]:
    """Idempotent: restoring an active report returns it unchanged."""
    _owned(report_id, user_id)
    db.restore_report(report_id)
    return db.get_report(report_id)


def permanent_delete_report(report_id: str, user_id: str) -> bool:
    """Idempotent: a report that is already gone counts as deleted."""
    report = db.get_report(report_id)
    if report is None:
        return False
    if report["userId"] != user_id:
        raise NotFoundError("Report not found")
    return db.permanent_delete_report(report_id)
