from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.core.config import settings

HISTORY_KINDS = ("resume", "job", "comprehensive")


class PersistenceFailure(RuntimeError):
    """The history store could not read or write a record."""


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.history_db_path)


def _connect() -> sqlite3.Connection:
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_path)


def init_db() -> None:
    if not settings.history_enabled:
        return
    try:
        with _connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS analysis_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    industry TEXT NOT NULL,
                    level TEXT NOT NULL,
                    job_title TEXT,
                    company TEXT,
                    match_score INTEGER NOT NULL,
                    analysis_json TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_analysis_history_user_created
                ON analysis_history (user_id, created_at)
                """
            )
            conn.commit()
    except (sqlite3.Error, OSError) as exc:
        raise PersistenceFailure(f"history init failed: {exc}") from exc


def save_analysis(
    *,
    user_id: str,
    kind: str,
    industry: str,
    level: str,
    match_score: int,
    analysis: dict[str, Any],
    job_title: str | None = None,
    company: str | None = None,
) -> int | None:
    """Insert one analysis record and return its row id (``None`` when history is off)."""
    if not settings.history_enabled:
        return None
    if kind not in HISTORY_KINDS:
        raise ValueError(f"Unknown history kind '{kind}'")
    analysis_json = json.dumps(analysis, ensure_ascii=False)
    try:
        init_db()
        with _connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO analysis_history (
                    created_at, user_id, kind, industry, level, job_title, company, match_score, analysis_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    _utc_now(),
                    user_id,
                    kind,
                    industry,
                    level,
                    job_title,
                    company,
                    int(match_score),
                    analysis_json,
                ),
            )
            conn.commit()
            return int(cur.lastrowid)
    except (sqlite3.Error, OSError) as exc:
        raise PersistenceFailure(f"history write failed: {exc}") from exc


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def list_analyses(user_id: str, limit: int = 20) -> list[dict[str, Any]]:
    if not settings.history_enabled:
        return []
    limit = max(1, min(int(limit), settings.history_page_size_max))
    try:
        init_db()
        with _connect() as conn:
            cur = conn.execute(
                """
                SELECT id, created_at, user_id, kind, industry, level, job_title, company,
                       match_score, analysis_json
                FROM analysis_history
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (user_id, limit),
            )
            rows = [_row_to_dict(cur, row) for row in cur.fetchall()]
    except (sqlite3.Error, OSError) as exc:
        raise PersistenceFailure(f"history read failed: {exc}") from exc

    for row in rows:
        row["analysis"] = json.loads(row.pop("analysis_json") or "{}")
    return rows


def get_user_stats(user_id: str) -> dict[str, Any]:
    empty = {"total_analyses": 0, "average_match_score": 0.0, "best_match_score": 0, "last_analyzed_at": None}
    if not settings.history_enabled:
        return empty
    try:
        init_db()
        with _connect() as conn:
            cur = conn.execute(
                """
                SELECT COUNT(*), AVG(match_score), MAX(match_score), MAX(created_at)
                FROM analysis_history
                WHERE user_id = ?
                """,
                (user_id,),
            )
            total, average, best, last = cur.fetchone()
    except (sqlite3.Error, OSError) as exc:
        raise PersistenceFailure(f"history read failed: {exc}") from exc

    if not total:
        return empty
    return {
        "total_analyses": int(total),
        "average_match_score": round(float(average or 0.0), 2),
        "best_match_score": int(best or 0),
        "last_analyzed_at": last,
    }


def purge_old_records() -> int:
    if not settings.history_enabled:
        return 0
    retention = max(1, int(settings.history_retention_days))
    try:
        init_db()
        with _connect() as conn:
            # created_at is ISO-8601 with a "T" separator; compare on the same format.
            cur = conn.execute(
                "DELETE FROM analysis_history WHERE created_at < strftime('%Y-%m-%dT%H:%M:%S', 'now', ?)",
                (f"-{retention} days",),
            )
            conn.commit()
            return int(cur.rowcount or 0)
    except (sqlite3.Error, OSError) as exc:
        raise PersistenceFailure(f"history purge failed: {exc}") from exc
