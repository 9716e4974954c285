"""Repository for behavioral profiles."""
from __future__ import annotations

from influence_engine.models.profile import SCORE_FIELDS, BehavioralProfile
from influence_engine.storage.database import Database

_COLUMNS = ("uid", *SCORE_FIELDS, "confidence", "data_points_analyzed", "updated_at")


class ProfileRepo:
    """One row per uid; every analysis overwrites the previous row."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def upsert(self, profile: BehavioralProfile) -> None:
        data = profile.model_dump()
        data["updated_at"] = profile.updated_at.isoformat()
        values = [data[c] for c in _COLUMNS]
        columns = ", ".join(_COLUMNS)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        updates = ", ".join(f"{c} = excluded.{c}" for c in _COLUMNS if c != "uid")
        with self.db.get_connection() as conn:
            conn.execute(
                f"INSERT INTO user_profiles ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(uid) DO UPDATE SET {updates}",
                values,
            )

    def get(self, uid: str) -> BehavioralProfile | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM user_profiles WHERE uid = ?", (uid,),
            ).fetchone()
        return BehavioralProfile.model_validate(dict(row)) if row else None

