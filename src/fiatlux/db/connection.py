"""SQLite connection management for the persisted search index."""

import sqlite3
from pathlib import Path


def get_connection(db_path: Path | str) -> sqlite3.Connection:
    """
    Get a SQLite connection with row factory and WAL mode.

    WAL (Write-Ahead Logging) mode lets readers keep querying an index while
    it is being rebuilt.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize database schema."""
    conn.executescript("""
        -- verses: one document per verse per translation
        -- path is the /book/chapter/verse facet, matched by exact prefix
        CREATE VIRTUAL TABLE IF NOT EXISTS verses USING fts5(
            translation UNINDEXED,
            path UNINDEXED,
            content
        );

        -- index_meta: provenance of each translation's documents
        CREATE TABLE IF NOT EXISTS index_meta (
            translation TEXT PRIMARY KEY,
            corpus_sha256 TEXT NOT NULL,
            verse_count INTEGER NOT NULL,
            built_at TEXT NOT NULL
        );
    """)
    conn.commit()
