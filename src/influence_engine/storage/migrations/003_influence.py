"""Migration 003: influence events and per-mechanism effectiveness weights."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS influence_events (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            uid                  TEXT NOT NULL,
            mechanism            TEXT NOT NULL,
            strength             REAL NOT NULL,
            context              TEXT NOT NULL DEFAULT '',
            player_response      TEXT NOT NULL,
            effectiveness_score  REAL NOT NULL DEFAULT 0,
            occurred_at          TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_influence_uid
            ON influence_events(uid, occurred_at DESC);

        CREATE TABLE IF NOT EXISTS effectiveness_weights (
            mechanism   TEXT PRIMARY KEY,
            weight      REAL NOT NULL,
            updates     INTEGER NOT NULL DEFAULT 0,
            updated_at  TEXT NOT NULL
        );
    """)
