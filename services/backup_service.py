"""Dataset snapshots kept in a rotating history, plus full exports."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.constants import BackupDefaults, OrderStatus
from database.connection import Database
from database.repositories import (
    BackupRepository,
    ConfigRepository,
    OrderRepository,
    SoldNumberRepository,
)


logger = logging.getLogger(__name__)


class BackupService:
    """Service for dataset snapshots and on-demand exports."""

    def __init__(self, db: Database, history_size: int = BackupDefaults.HISTORY_SIZE):
        self.db = db
        self.history_size = history_size
        self.backups = BackupRepository(db)
        self.orders = OrderRepository(db)
        self.sold_numbers = SoldNumberRepository(db)
        self.config = ConfigRepository(db)

    def _dataset(self) -> Dict[str, Any]:
        return {
            "orders": self.orders.list_all(),
            "soldNumbers": self.sold_numbers.list_rows(),
            "config": self.config.get_all(),
        }

    def snapshot(self, reason: str = "manual") -> Optional[int]:
        """Append a snapshot of the whole dataset and evict the oldest ones.

        Never raises: a failed snapshot must not fail the request that
        triggered it.

        Returns:
            Id of the new snapshot, or None if it could not be stored
        """
        try:
            with self.db.transaction():
                data = self._dataset()
                data["createdAt"] = datetime.now().isoformat()
                backup_id = self.backups.add(reason, data)
                removed = self.backups.prune(self.history_size)
            logger.debug(f"Snapshot #{backup_id} stored ({reason}), {removed} old snapshot(s) evicted")
            return backup_id
        except Exception:
            logger.exception(f"Failed to store snapshot ({reason})")
            return None

    def export_full(self) -> Dict[str, Any]:
        """Point-in-time export of config, orders and sold numbers."""
        with self.db.transaction():
            orders = self.orders.list_all()
            sold = self.sold_numbers.list_rows()
            config = self.config.get_all()

        confirmed = sum(1 for order in orders if order["status"] == OrderStatus.CONFIRMED.value)
        pending = sum(1 for order in orders if order["status"] == OrderStatus.PENDING.value)
        return {
            "exportedAt": datetime.now().isoformat(),
            "stats": {
                "totalOrders": len(orders),
                "confirmedOrders": confirmed,
                "pendingOrders": pending,
                "soldNumbers": len(sold),
            },
            "config": config,
            "orders": orders,
            "soldNumbers": sold,
        }

    def export_filename(self) -> str:
        """Generate export filename with timestamp."""
        return datetime.now().strftime(BackupDefaults.EXPORT_FILENAME_FORMAT)

    def list_history(self, limit: int = BackupDefaults.HISTORY_SIZE) -> List[Dict[str, Any]]:
        return self.backups.list_recent(limit)

    def get_snapshot(self, backup_id: int) -> Optional[Dict[str, Any]]:
        return self.backups.get(backup_id)
