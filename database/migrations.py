"""Database schema migrations and default data."""

from __future__ import annotations

import json
import logging

from werkzeug.security import generate_password_hash

from core.constants import RaffleDefaults
from .connection import Database

logger = logging.getLogger(__name__)


SCHEMA_SQL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS config (
        key TEXT PRIMARY KEY,
        value TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        phone TEXT NOT NULL,
        qty INTEGER NOT NULL,
        total REAL NOT NULL,
        image TEXT,
        status TEXT NOT NULL DEFAULT 'pending',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_orders_status ON orders(status, created_at);",
    # Numbers of each order, in purchase order. UNIQUE(number) allocates a
    # number to at most one live order.
    """
    CREATE TABLE IF NOT EXISTS order_numbers (
        order_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        number TEXT NOT NULL UNIQUE,
        PRIMARY KEY(order_id, position),
        FOREIGN KEY(order_id) REFERENCES orders(order_id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS sold_numbers (
        number TEXT PRIMARY KEY,
        order_id TEXT,
        confirmed_at TIMESTAMP
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_sold_numbers_order ON sold_numbers(order_id);",
    """
    CREATE TABLE IF NOT EXISTS prize_images (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        image_data TEXT,
        position INTEGER NOT NULL UNIQUE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS payment_methods (
        id TEXT PRIMARY KEY,
        data TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS backups (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        reason TEXT,
        data TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
)


def seed_defaults(db: Database, admin_password: str) -> None:
    """Insert default config and payment methods that are not present yet.

    Existing values are never overwritten.
    """
    config_rows = [(RaffleDefaults.ADMIN_PASSWORD_KEY, generate_password_hash(admin_password))]
    config_rows.extend(RaffleDefaults.PRIZE_CONFIG.items())
    payment_rows = [
        (method_id, json.dumps(payload, ensure_ascii=False))
        for method_id, payload in RaffleDefaults.PAYMENT_METHODS.items()
    ]

    with db.transaction() as conn:
        conn.executemany("INSERT OR IGNORE INTO config (key, value) VALUES (?, ?)", config_rows)
        conn.executemany("INSERT OR IGNORE INTO payment_methods (id, data) VALUES (?, ?)", payment_rows)


def run_migrations(db: Database, admin_password: str = "admin123") -> None:
    with db.transaction() as conn:
        for statement in SCHEMA_SQL:
            conn.execute(statement)
    seed_defaults(db, admin_password)
    logger.info("Database schema ready at %s", db.database_path)
