"""Pytest configuration and fixtures."""

import os
import sys
from dataclasses import replace

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import load_config
from database.connection import Database
from database.migrations import run_migrations
from services import BackupService, OrderService, SettingsService, StatsService
from web.app import create_app


@pytest.fixture
def test_config(tmp_path):
    """Configuration pointing at a throwaway database."""
    return replace(
        load_config(),
        database_path=str(tmp_path / "test_raffle.sqlite"),
        admin_password="admin123",
        backup_history_size=50,
    )


@pytest.fixture
def db(test_config):
    database = Database(test_config.database_path)
    run_migrations(database, admin_password=test_config.admin_password)
    return database


@pytest.fixture
def backup_service(db):
    return BackupService(db, history_size=50)


@pytest.fixture
def order_service(db, backup_service):
    return OrderService(db, backups=backup_service)


@pytest.fixture
def settings_service(db, backup_service):
    return SettingsService(db, backups=backup_service)


@pytest.fixture
def stats_service(db):
    return StatsService(db)


@pytest.fixture
def make_order(order_service):
    """Create a pending order; defaults describe a valid purchase."""
    def _make(numbers=("0001",), total=None, **overrides):
        numbers = list(numbers)
        data = {
            "name": "Ana Pérez",
            "email": "ana@example.com",
            "phone": "+58 (412) 555-1234",
            "numbers": numbers,
            "qty": len(numbers),
            "total": 10.0 * len(numbers) if total is None else total,
            "image": None,
        }
        data.update(overrides)
        return order_service.create(**data)
    return _make


@pytest.fixture
def app(test_config):
    return create_app(test_config, testing=True)


@pytest.fixture
def client(app):
    return app.test_client()
