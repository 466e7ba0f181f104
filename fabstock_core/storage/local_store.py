# =============================================================================
# fabstock_core/storage/local_store.py
# Local durable key-value storage (SQLite)
# =============================================================================
"""
LocalStore - SQLite-backed store of named JSON blobs.

Each key holds one JSON document (an entity collection or the settings
object). Keys are process-wide and not scoped by user: everyone sharing the
device shares local-mode data.

Features:
- Fail-soft reads (missing or malformed content returns the fallback)
- Thread-local connections
- Transaction support
"""

from __future__ import annotations
import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from fabstock_core.config import get_db_path
from fabstock_core.logging import get_logger

logger = get_logger(__name__)


class LocalStore:
    """
    Durable key-value storage for local mode.

    Usage:
        store = get_local_store()
        items = store.load("fabstock_inventory", [])
        store.save("fabstock_inventory", items)
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    _instance: Optional[LocalStore] = None
    _lock = threading.Lock()

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize local store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else get_db_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._initialized = False

    @classmethod
    def get_instance(cls, db_path: Optional[Path] = None) -> LocalStore:
        """Get or create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = LocalStore(db_path)
        return cls._instance

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        """Create the key-value table if needed."""
        if self._initialized:
            return

        with self.transaction() as conn:
            conn.execute(self.SCHEMA)

        self._initialized = True
        logger.info(f"Local store initialized at: {self.db_path}")

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    def load(self, key: str, fallback: Any = None) -> Any:
        """
        Read and decode the blob stored under ``key``.

        Returns ``fallback`` when the key is missing or the stored content is
        not valid JSON. Never raises for bad content.
        """
        self.initialize()
        row = self._get_connection().execute(
            "SELECT value FROM kv_store WHERE key = ?", [key]
        ).fetchone()

        if row is None:
            return fallback

        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Malformed content under '{key}', using fallback: {e}")
            return fallback

    def save(self, key: str, value: Any) -> None:
        """Serialize ``value`` and overwrite the blob stored under ``key``."""
        self.initialize()
        payload = json.dumps(value, ensure_ascii=False)

        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                [key, payload, datetime.now().isoformat()],
            )

    def save_raw(self, key: str, raw: str) -> None:
        """Store an undecoded string (used to import blobs verbatim)."""
        self.initialize()
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                [key, raw, datetime.now().isoformat()],
            )

    def delete(self, key: str) -> bool:
        self.initialize()
        with self.transaction() as conn:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", [key])
            return cursor.rowcount > 0

    def keys(self) -> List[str]:
        self.initialize()
        rows = self._get_connection().execute(
            "SELECT key FROM kv_store ORDER BY key"
        ).fetchall()
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close this thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None


# Singleton accessor
_local_store: Optional[LocalStore] = None


def get_local_store() -> LocalStore:
    """Get the global LocalStore instance."""
    global _local_store
    if _local_store is None:
        _local_store = LocalStore.get_instance()
        _local_store.initialize()
    return _local_store
