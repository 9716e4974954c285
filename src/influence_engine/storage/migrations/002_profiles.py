"""Migration 002: one behavioral profile row per user."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS user_profiles (
            uid                       TEXT PRIMARY KEY,
            risk_tolerance            REAL NOT NULL DEFAULT 0.5,
            decision_speed            REAL NOT NULL DEFAULT 0.5,
            resource_efficiency       REAL NOT NULL DEFAULT 0.5,
            strategic_score           REAL NOT NULL DEFAULT 0.5,
            engagement_level          REAL NOT NULL DEFAULT 0.5,
            emotional_responsiveness  REAL NOT NULL DEFAULT 0.5,
            influence_susceptibility  REAL NOT NULL DEFAULT 0.5,
            skill_progression         REAL NOT NULL DEFAULT 0.5,
            confidence                REAL NOT NULL DEFAULT 0.0,
            data_points_analyzed      INTEGER NOT NULL DEFAULT 0,
            updated_at                TEXT NOT NULL
        )
    """)
