"""Migration 001: append-only player action log."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS users (
            uid         TEXT PRIMARY KEY,
            platform    TEXT,
            created_at  TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS game_actions (
            id            TEXT PRIMARY KEY,
            seq           INTEGER NOT NULL,
            uid           TEXT NOT NULL REFERENCES users(uid),
            action_type   TEXT NOT NULL,
            detail        TEXT,
            time_in_game  REAL,
            hex_x         INTEGER,
            hex_y         INTEGER,
            occurred_at   TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_actions_uid
            ON game_actions(uid, occurred_at DESC, seq DESC);
        CREATE INDEX IF NOT EXISTS idx_actions_uid_type
            ON game_actions(uid, action_type, occurred_at DESC);
    """)
