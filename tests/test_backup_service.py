"""Tests for snapshots, history rotation and full export."""

from unittest.mock import patch

from core.exceptions import RepositoryError
from services.backup_service import BackupService


def test_snapshot_contents(order_service, make_order, backup_service):
    order_id = make_order(["0001", "0002"])
    order_service.confirm(order_id)

    backup_id = backup_service.snapshot("manual")
    data = backup_service.get_snapshot(backup_id)["data"]

    assert data["orders"][0]["order_id"] == order_id
    assert data["orders"][0]["numbers"] == ["0001", "0002"]
    assert [row["number"] for row in data["soldNumbers"]] == ["0001", "0002"]
    assert data["config"]["prizeDigits"] == "4"
    assert "adminPass" not in data["config"]


def test_history_keeps_fifty_most_recent(backup_service):
    ids = [backup_service.snapshot(f"event-{i}") for i in range(60)]

    assert backup_service.backups.count() == 50
    assert backup_service.backups.ids() == ids[10:]
    assert backup_service.list_history(limit=1)[0]["reason"] == "event-59"


def test_history_size_is_configurable(db):
    service = BackupService(db, history_size=3)
    for i in range(5):
        service.snapshot(f"event-{i}")
    assert [entry["reason"] for entry in service.list_history()] == ["event-4", "event-3", "event-2"]


def test_snapshot_failure_is_swallowed(backup_service):
    with patch.object(backup_service.backups, "add", side_effect=RepositoryError("disk full")):
        assert backup_service.snapshot("manual") is None


def test_order_creation_survives_backup_failure(order_service, make_order):
    with patch.object(order_service.backups.backups, "add", side_effect=RepositoryError("disk full")):
        order_id = make_order(["0004"])
    assert order_service.get(order_id) is not None


def test_export_full(order_service, make_order, backup_service):
    order_service.confirm(make_order(["0001"], total=10))
    make_order(["0002", "0003"], total=20)

    document = backup_service.export_full()

    assert document["stats"] == {
        "totalOrders": 2,
        "confirmedOrders": 1,
        "pendingOrders": 1,
        "soldNumbers": 1,
    }
    assert "exportedAt" in document
    assert document["config"]["prizeTitle"] == "Gran Premio"
    assert sorted(o["numbers"][0] for o in document["orders"]) == ["0001", "0002"]
    assert document["soldNumbers"][0]["number"] == "0001"


def test_export_does_not_touch_history(backup_service):
    backup_service.export_full()
    assert backup_service.list_history() == []
