"""Repository for influence events and effectiveness weights."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from influence_engine.models.influence import InfluenceEvent
from influence_engine.storage.database import Database


class InfluenceRepo:
    """Append-only influence_events plus one weight row per mechanism."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # -- Influence events --

    def append_event(self, event: InfluenceEvent) -> InfluenceEvent:
        """Insert an event and return it with its assigned id."""
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO influence_events "
                "(uid, mechanism, strength, context, player_response, "
                "effectiveness_score, occurred_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    event.uid,
                    event.mechanism,
                    event.strength,
                    event.context,
                    event.player_response.value,
                    event.effectiveness_score,
                    event.occurred_at.isoformat(),
                ),
            )
            event_id = cursor.lastrowid
        return event.model_copy(update={"id": event_id})

    def get_events(self, uid: str, limit: int | None = None) -> list[InfluenceEvent]:
        """Return a user's influence events, newest first."""
        sql = "SELECT * FROM influence_events WHERE uid = ? ORDER BY occurred_at DESC, id DESC"
        params: tuple = (uid,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (uid, limit)
        with self.db.get_connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [InfluenceEvent.model_validate(dict(r)) for r in rows]

    def count_by_mechanism(self, uid: str) -> dict[str, int]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT mechanism, COUNT(*) as cnt FROM influence_events "
                "WHERE uid = ? GROUP BY mechanism",
                (uid,),
            ).fetchall()
        return {row["mechanism"]: row["cnt"] for row in rows}

    # -- Effectiveness weights --

    def get_weight(self, mechanism: str) -> float | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT weight FROM effectiveness_weights WHERE mechanism = ?",
                (mechanism,),
            ).fetchone()
        return row["weight"] if row else None

    def get_all_weights(self) -> dict[str, float]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT mechanism, weight FROM effectiveness_weights"
            ).fetchall()
        return {row["mechanism"]: row["weight"] for row in rows}

    def update_weight(
        self, mechanism: str, initial: float, update: Callable[[float], float],
    ) -> float:
        """Read-modify-write a mechanism's weight inside one transaction.

        A mechanism without a row starts from ``initial``. Returns the
        stored new weight.
        """
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT weight FROM effectiveness_weights WHERE mechanism = ?",
                (mechanism,),
            ).fetchone()
            current = row["weight"] if row else initial
            new_weight = update(current)
            conn.execute(
                """INSERT INTO effectiveness_weights (mechanism, weight, updates, updated_at)
                VALUES (?, ?, 1, ?)
                ON CONFLICT(mechanism)
                DO UPDATE SET weight = excluded.weight, updates = updates + 1,
                updated_at = excluded.updated_at""",
                (mechanism, new_weight, datetime.now(timezone.utc).isoformat()),
            )
        return new_weight
