"""SQLite ledger of entries already sent to Jira"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import LedgerUnavailable

logger = logging.getLogger(__name__)


class SyncLedger:
    """
    Durable record of synced tiempo entry ids

    Besides `synced_entries`, the ledger keeps `pending_entries`: an id is
    marked pending right before its worklog is submitted and moved to
    `synced_entries` once jira confirms. A pending id left behind means the
    submission outcome was never recorded.
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path).expanduser()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise LedgerUnavailable(f"Cannot open sync database {self.db_path}: {e}") from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise LedgerUnavailable(f"Sync database error ({self.db_path}): {e}") from e
        finally:
            conn.close()

    def initialize(self):
        """Create the database and tables if needed; safe to call on every run"""
        logger.debug("Initializing sync database at %s", self.db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LedgerUnavailable(f"Cannot create {self.db_path.parent}: {e}") from e

        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS synced_entries (
                    entry_id INTEGER PRIMARY KEY,
                    synced_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pending_entries (
                    entry_id INTEGER PRIMARY KEY,
                    started_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def is_synced(self, entry_id: int) -> bool:
        return self.synced_at(entry_id) is not None

    def synced_at(self, entry_id: int) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT synced_at FROM synced_entries WHERE entry_id = ?",
                (entry_id,),
            ).fetchone()
        return row[0] if row else None

    def mark_synced(self, entry_id: int):
        """Record a confirmed submission; re-marking is a no-op"""
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO synced_entries (entry_id) VALUES (?)",
                (entry_id,),
            )
            conn.execute("DELETE FROM pending_entries WHERE entry_id = ?", (entry_id,))
        logger.debug("Entry %s marked as synced", entry_id)

    def mark_pending(self, entry_id: int):
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO pending_entries (entry_id) VALUES (?)",
                (entry_id,),
            )

    def clear_pending(self, entry_id: int):
        with self._connect() as conn:
            conn.execute("DELETE FROM pending_entries WHERE entry_id = ?", (entry_id,))

    def is_pending(self, entry_id: int) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM pending_entries WHERE entry_id = ?",
                (entry_id,),
            ).fetchone()
        return row is not None

    def pending_entries(self) -> list[tuple[int, str]]:
        """(entry_id, started_at) of submissions that were never confirmed"""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT entry_id, started_at FROM pending_entries ORDER BY entry_id"
            ).fetchall()
        return [(row[0], row[1]) for row in rows]

    def synced_count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM synced_entries").fetchone()[0]
