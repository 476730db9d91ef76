"""
SQLite Persistence Layer — DataPal
Stores reports (with soft delete), per-user settings documents and the
Google Analytics integration of each user.
Thread-safe, uses WAL mode for concurrent reads.
"""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from datapal.core.config import settings

DB_PATH = Path(settings.sqlite_path)

_local = threading.local()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def configure(path) -> None:
    """Point the layer at another database file (tests, alternate deployments)."""
    global DB_PATH
    DB_PATH = Path(path)
    close()


def close() -> None:
    conn = getattr(_local, "conn", None)
    if conn is not None:
        conn.close()
    _local.conn = None
    _local.path = None


def _get_conn() -> sqlite3.Connection:
    """Return a thread-local connection (SQLite is not thread-safe across threads)."""
    if getattr(_local, "conn", None) is None or _local.path != DB_PATH:
        conn = sqlite3.connect(str(DB_PATH), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        _local.conn = conn
        _local.path = DB_PATH
    return _local.conn


def init_db():
    """Create tables if they don't exist."""
    conn = _get_conn()
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS reports (
            id          TEXT PRIMARY KEY,
            user_id     TEXT NOT NULL,
            title       TEXT NOT NULL DEFAULT '',
            objective   TEXT NOT NULL DEFAULT 'analysis',
            platforms   TEXT NOT NULL DEFAULT '[]',
            status      TEXT NOT NULL DEFAULT 'uploading',  -- uploading | processing | ready | error
            client_logo TEXT,
            data_json   TEXT NOT NULL DEFAULT '{}',
            is_deleted  INTEGER NOT NULL DEFAULT 0,
            deleted_at  TEXT,
            created_at  TEXT NOT NULL,
            updated_at  TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_reports_user ON reports(user_id, created_at DESC);

        CREATE TABLE IF NOT EXISTS users (
            id           TEXT PRIMARY KEY,
            email        TEXT,
            display_name TEXT,
            photo_url    TEXT,
            subscription TEXT NOT NULL DEFAULT 'free',
            created_at   TEXT NOT NULL,
            updated_at   TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS user_settings (
            user_id    TEXT NOT NULL,
            key        TEXT NOT NULL,               -- 'branding' | 'monitoring'
            value_json TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            PRIMARY KEY (user_id, key)
        );

        CREATE TABLE IF NOT EXISTS ga_integrations (
            user_id    TEXT PRIMARY KEY,
            full_json  TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
    """
    )
    conn.commit()


# ── Reports ──────────────────────────────────────────────────────────────────


def _report_from_row(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "userId": row["user_id"],
        "title": row["title"],
        "objective": row["objective"],
        "platforms": json.loads(row["platforms"]),
        "status": row["status"],
        "clientLogo": row["client_logo"],
        "data": json.loads(row["data_json"]),
        "isDeleted": bool(row["is_deleted"]),
        "deletedAt": row["deleted_at"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }


def create_report(user_id: str, report: Dict[str, Any]) -> Dict[str, Any]:
    """Persist a new report. Returns the stored document."""
    rid = report.get("id") or str(uuid.uuid4())
    now = _now()
    conn = _get_conn()
    conn.execute(
        """
        INSERT INTO reports
            (id, user_id, title, objective, platforms, status, client_logo,
             data_json, is_deleted, deleted_at, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, NULL, ?, ?)
    """,
        (
            rid,
            user_id,
            report.get("title", ""),
            report.get("objective", "analysis"),
            json.dumps(report.get("platforms", [])),
            report.get("status", "uploading"),
            report.get("clientLogo"),
            json.dumps(report.get("data", {})),
            now,
            now,
        ),
    )
    conn.commit()
    return get_report(rid)


def get_report(rid: str) -> Optional[Dict[str, Any]]:
    """Fetch a single report by ID, deleted or not."""
    conn = _get_conn()
    row = conn.execute("SELECT * FROM reports WHERE id = ?", (rid,)).fetchone()
    return _report_from_row(row) if row else None


def get_user_reports(user_id: str) -> List[Dict[str, Any]]:
    """Active reports of a user, newest first."""
    conn = _get_conn()
    rows = conn.execute(
        "SELECT * FROM reports WHERE user_id = ? AND is_deleted = 0 ORDER BY created_at DESC",
        (user_id,),
    ).fetchall()
    return [_report_from_row(r) for r in rows]


def soft_delete_report(rid: str) -> bool:
    """Move a report to the trash. Already-deleted reports keep their original deleted_at."""
    conn = _get_conn()
    cur = conn.execute(
        "UPDATE reports SET is_deleted = 1, deleted_at = ?, updated_at = ? WHERE id = ? AND is_deleted = 0",
        (_now(), _now(), rid),
    )
    conn.commit()
    return cur.rowcount > 0


def restore_report(rid: str) -> bool:
    """Bring a report back from the trash. No-op for active or missing reports."""
    conn = _get_conn()
    cur = conn.execute(
        "UPDATE reports SET is_deleted = 0, deleted_at = NULL, updated_at = ? WHERE id = ? AND is_deleted = 1",
        (_now(), rid),
    )
    conn.commit()
    return cur.rowcount > 0


def permanent_delete_report(rid: str) -> bool:
    """Remove a report for good. No-op when it does not exist."""
    conn = _get_conn()
    cur = conn.execute("DELETE FROM reports WHERE id = ?", (rid,))
    conn.commit()
    return cur.rowcount > 0


def get_deleted_reports(user_id: str) -> List[Dict[str, Any]]:
    """Reports in a user's trash, most recently deleted first."""
    conn = _get_conn()
    rows = conn.execute(
        "SELECT * FROM reports WHERE user_id = ? AND is_deleted = 1 ORDER BY deleted_at DESC",
        (user_id,),
    ).fetchall()
    return [_report_from_row(r) for r in rows]


# ── Users & settings ─────────────────────────────────────────────────────────


def upsert_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Insert or refresh a user's identity fields; subscription is left untouched."""
    now = _now()
    conn = _get_conn()
    conn.execute(
        """
        INSERT INTO users (id, email, display_name, photo_url, subscription, created_at, updated_at)
        VALUES (?, ?, ?, ?, 'free', ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            email = COALESCE(excluded.email, users.email),
            display_name = COALESCE(excluded.display_name, users.display_name),
            photo_url = COALESCE(excluded.photo_url, users.photo_url),
            updated_at = excluded.updated_at
    """,
        (user["id"], user.get("email"), user.get("displayName"), user.get("photoURL"), now, now),
    )
    conn.commit()
    return get_user(user["id"])


def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    conn = _get_conn()
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    if not row:
        return None
    return {
        "id": row["id"],
        "email": row["email"],
        "displayName": row["display_name"],
        "photoURL": row["photo_url"],
        "subscription": row["subscription"],
        "createdAt": row["created_at"],
    }


def get_setting(user_id: str, key: str) -> Optional[Dict[str, Any]]:
    conn = _get_conn()
    row = conn.execute(
        "SELECT value_json FROM user_settings WHERE user_id = ? AND key = ?", (user_id, key)
    ).fetchone()
    return json.loads(row["value_json"]) if row else None


def save_setting(user_id: str, key: str, value: Dict[str, Any]) -> None:
    conn = _get_conn()
    conn.execute(
        """
        INSERT OR REPLACE INTO user_settings (user_id, key, value_json, updated_at)
        VALUES (?, ?, ?, ?)
    """,
        (user_id, key, json.dumps(value), _now()),
    )
    conn.commit()


# ── Google Analytics integration ─────────────────────────────────────────────


def save_ga_integration(user_id: str, integration: Dict[str, Any]) -> None:
    conn = _get_conn()
    conn.execute(
        "INSERT OR REPLACE INTO ga_integrations (user_id, full_json, updated_at) VALUES (?, ?, ?)",
        (user_id, json.dumps(integration), _now()),
    )
    conn.commit()


def get_ga_integration(user_id: str) -> Optional[Dict[str, Any]]:
    conn = _get_conn()
    row = conn.execute("SELECT full_json FROM ga_integrations WHERE user_id = ?", (user_id,)).fetchone()
    return json.loads(row["full_json"]) if row else None


def delete_ga_integration(user_id: str) -> bool:
    conn = _get_conn()
    cur = conn.execute("DELETE FROM ga_integrations WHERE user_id = ?", (user_id,))
    conn.commit()
    return cur.rowcount > 0
