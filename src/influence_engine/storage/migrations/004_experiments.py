"""Migration 004: write-once experiment bucket assignments."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS experiment_assignments (
            uid              TEXT NOT NULL,
            experiment_name  TEXT NOT NULL,
            bucket           TEXT NOT NULL,
            assigned_at      TEXT NOT NULL,
            PRIMARY KEY (uid, experiment_name)
        )
    """)
