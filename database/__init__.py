"""Database package public API."""

from .connection import Database
from .migrations import run_migrations

__all__ = [
    "Database",
    "run_migrations",
]
