from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from influence_engine.models.action import ActionEvent
from influence_engine.storage.database import Database


def _deserialize(row: Any) -> dict | None:
    """Convert a sqlite3.Row to a dict with the detail field parsed.

    A detail that is not valid JSON is handed back as the raw string so
    the profiler can treat it as malformed instead of losing the row.
    """
    if row is None:
        return None
    result = dict(row)
    result.pop("seq", None)
    raw = result.get("detail")
    if raw is not None:
        try:
            result["detail"] = json.loads(raw)
        except json.JSONDecodeError:
            result["detail"] = raw
    return result


def _deserialize_many(rows: list) -> list[dict]:
    return [_deserialize(r) for r in rows]


class ActionLogRepo:
    """Append-only repository for player actions."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def append(self, event: ActionEvent) -> None:
        """Insert a new action. Actions are immutable once written."""
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO users (uid, platform, created_at) VALUES (?, 'Unity', ?) "
                "ON CONFLICT(uid) DO NOTHING",
                (event.uid, datetime.now(timezone.utc).isoformat()),
            )
            conn.execute(
                "INSERT INTO game_actions "
                "(id, seq, uid, action_type, detail, time_in_game, hex_x, hex_y, occurred_at) "
                "VALUES (?, (SELECT COALESCE(MAX(seq), 0) + 1 FROM game_actions), "
                "?, ?, ?, ?, ?, ?, ?)",
                (
                    event.id,
                    event.uid,
                    event.action_type,
                    json.dumps(event.detail),
                    event.time_in_game,
                    event.hex_x,
                    event.hex_y,
                    event.occurred_at.isoformat(),
                ),
            )

    def get_actions(self, uid: str, limit: int | None = None) -> list[dict]:
        """Return a user's actions, newest first."""
        sql = (
            "SELECT * FROM game_actions WHERE uid = ? "
            "ORDER BY occurred_at DESC, seq DESC"
        )
        params: tuple = (uid,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (uid, limit)
        with self.db.get_connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return _deserialize_many(rows)

    def get_by_type(self, uid: str, action_type: str, limit: int = 50) -> list[dict]:
        """Return a user's actions of one type, newest first."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM game_actions WHERE uid = ? AND action_type = ? "
                "ORDER BY occurred_at DESC, seq DESC LIMIT ?",
                (uid, action_type, limit),
            ).fetchall()
        return _deserialize_many(rows)

    def count(self, uid: str) -> int:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) as cnt FROM game_actions WHERE uid = ?",
                (uid,),
            ).fetchone()
        return row["cnt"] if row else 0
