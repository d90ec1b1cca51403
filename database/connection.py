"""SQLite connection handling for the raffle database.

Every repository call opens a short-lived connection. A multi-statement
sequence runs inside :meth:`Database.transaction`; repository calls made on
the same thread while the transaction is open reuse its connection, so the
whole sequence commits or rolls back together.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from core.constants import DatabaseDefaults
from core.exceptions import RepositoryError


class Database:
    """Connection factory bound to one SQLite database file."""

    def __init__(self, database_path: str, busy_timeout_ms: int = DatabaseDefaults.BUSY_TIMEOUT) -> None:
        self.database_path = Path(database_path)
        self.busy_timeout_ms = busy_timeout_ms
        self._local = threading.local()

    def _connect(self) -> sqlite3.Connection:
        if not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            self.database_path,
            timeout=DatabaseDefaults.CONNECT_TIMEOUT,
            isolation_level=None,  # explicit BEGIN/COMMIT only
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute(f"PRAGMA busy_timeout={self.busy_timeout_ms}")
        return conn

    @property
    def in_transaction(self) -> bool:
        return getattr(self._local, "conn", None) is not None

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield the active transaction connection or a fresh autocommit one."""
        active: Optional[sqlite3.Connection] = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return

        try:
            conn = self._connect()
        except sqlite3.Error as e:
            raise RepositoryError(f"Cannot open database {self.database_path}: {e}") from e
        try:
            yield conn
        except sqlite3.Error as e:
            raise RepositoryError(str(e)) from e
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements atomically.

        Uses ``BEGIN IMMEDIATE`` so that a check-then-write sequence cannot
        interleave with another writer. Nested calls join the outer transaction.
        """
        if self.in_transaction:
            yield self._local.conn
            return

        try:
            conn = self._connect()
        except sqlite3.Error as e:
            raise RepositoryError(f"Cannot open database {self.database_path}: {e}") from e
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            conn.close()
            raise RepositoryError(f"Cannot start transaction: {e}") from e

        self._local.conn = conn
        try:
            yield conn
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            conn.execute("ROLLBACK")
            raise RepositoryError(str(e)) from e
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        finally:
            self._local.conn = None
            conn.close()

    def ping(self) -> bool:
        with self.connection() as conn:
            return conn.execute("SELECT 1").fetchone()[0] == 1

