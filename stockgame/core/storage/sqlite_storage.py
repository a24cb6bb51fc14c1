"""
SQLite-backed key/value storage.

Every namespace is a table of ``(key, value, expires_at, updated_at)`` rows.
Expired rows are hidden from reads and purged on every write.
"""

import argparse
import os
import sqlite3
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import bittensor

from .base import BaseStorage


class SQLiteStorage(BaseStorage):
    """
    SQLite-based storage implementation.

    One connection is opened per operation, so a single ``put`` or ``get`` is
    atomic and the store can be shared between threads.
    """

    def __init__(self, config=None, namespace: str = "games", clock: Callable[[], float] = time.time):
        """
        Initialize SQLite storage with database schema.

        Args:
            config: Configuration object, ``sqlite_path`` selects the directory
            namespace: Table holding this store's keys
            clock: Returns the current epoch seconds, used for expiry
        """
        self.config = config or self.get_config()
        self.namespace = namespace
        self.clock = clock

        if getattr(self.config, "sqlite_path", None) is not None:
            db_dir = Path(self.config.sqlite_path).expanduser()
        else:
            db_dir = Path.home() / ".stockgame" / "data"

        db_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = db_dir / "stockgame.db"

        self._initialize_database()

        bittensor.logging.info(f"SQLite storage initialized at: {self.db_path}")

    @classmethod
    def add_args(cls, parser: "argparse.ArgumentParser"):
        """Add SQLite storage-specific arguments to parser."""
        parser.add_argument(
            "--sqlite_path",
            type=str,
            default=os.getenv("SQLITE_PATH"),
            help="Directory holding the SQLite database",
        )

    def _initialize_database(self):
        """Create the namespace table if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.namespace} (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at REAL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{self.namespace}_expires_at
                ON {self.namespace}(expires_at)
            """)

            conn.commit()

    def put(self, key: str, value: str, ttl: Optional[timedelta] = None) -> None:
        now = self.clock()
        expires_at = now + ttl.total_seconds() if ttl is not None else None

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(f"""
                INSERT OR REPLACE INTO {self.namespace} (key, value, expires_at, updated_at)
                VALUES (?, ?, ?, ?)
            """, (key, value, expires_at, datetime.now(timezone.utc).isoformat()))

            conn.execute(f"""
                DELETE FROM {self.namespace}
                WHERE expires_at IS NOT NULL AND expires_at <= ?
            """, (now,))

            conn.commit()

        bittensor.logging.debug(f"Saved key {key} to SQLite table {self.namespace}")

    def get(self, key: str) -> Optional[str]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(f"""
                SELECT value FROM {self.namespace}
                WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)
            """, (key, self.clock())).fetchone()
        return row[0] if row else None

    def get_all(self) -> list[tuple[str, str]]:
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(f"""
                SELECT key, value FROM {self.namespace}
                WHERE expires_at IS NULL OR expires_at > ?
                ORDER BY key
            """, (self.clock(),)).fetchall()
        return [(key, value) for key, value in rows]
