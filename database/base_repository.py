"""Base repository pattern for database operations."""

from __future__ import annotations

import sqlite3
from typing import Any, List, Optional, Sequence

from database.connection import Database


class BaseRepository:
    """Base repository with common database operations."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def execute(self, query: str, params: Sequence[Any] = ()) -> int:
        """Execute a query without returning results.

        Returns:
            Number of affected rows
        """
        with self.db.connection() as conn:
            cursor = conn.execute(query, params)
            return cursor.rowcount

    def execute_many(self, query: str, params: Sequence[Sequence[Any]]) -> None:
        """Execute a query multiple times with different parameters."""
        if not params:
            return
        with self.db.connection() as conn:
            conn.executemany(query, params)

    def insert(self, query: str, params: Sequence[Any] = ()) -> int:
        """Execute an INSERT and return the new rowid."""
        with self.db.connection() as conn:
            cursor = conn.execute(query, params)
            return cursor.lastrowid

    def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        """Fetch a single row."""
        with self.db.connection() as conn:
            return conn.execute(query, params).fetchone()

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Fetch all rows."""
        with self.db.connection() as conn:
            return conn.execute(query, params).fetchall()

    def fetch_value(self, query: str, params: Sequence[Any] = ()) -> Optional[Any]:
        """Fetch a single value from a single row."""
        row = self.fetch_one(query, params)
        return row[0] if row else None

    def fetch_column(self, query: str, params: Sequence[Any] = ()) -> List[Any]:
        """Fetch first column from all rows."""
        return [row[0] for row in self.fetch_all(query, params)]
