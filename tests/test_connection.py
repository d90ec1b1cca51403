"""Tests for Database transactions."""

import sqlite3
from unittest.mock import MagicMock, patch

import pytest

from core.exceptions import RepositoryError
from database.connection import Database


def test_failed_begin_closes_connection(tmp_path):
    db = Database(str(tmp_path / "locked.sqlite"))
    conn = MagicMock()
    conn.execute.side_effect = sqlite3.OperationalError("database is locked")

    with patch.object(db, "_connect", return_value=conn):
        with pytest.raises(RepositoryError, match="database is locked"):
            with db.transaction():
                pass

    conn.close.assert_called_once()
    assert not db.in_transaction


def test_nested_transaction_rolls_back_as_one(db):
    with pytest.raises(RuntimeError):
        with db.transaction():
            with db.transaction() as conn:
                conn.execute("INSERT INTO config (key, value) VALUES ('extra', '1')")
            raise RuntimeError("abort")

    with db.connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM config WHERE key='extra'").fetchone()[0] == 0
