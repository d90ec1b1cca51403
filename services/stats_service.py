"""Raffle statistics, recomputed on every call."""

from __future__ import annotations

from typing import Any, Dict

from core.constants import OrderStatus
from database.connection import Database
from database.repositories import OrderRepository, SoldNumberRepository


class StatsService:
    def __init__(self, db: Database) -> None:
        self.orders = OrderRepository(db)
        self.sold_numbers = SoldNumberRepository(db)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "soldCount": self.sold_numbers.count(),
            "pendingCount": self.orders.count_by_status(OrderStatus.PENDING),
            "confirmedCount": self.orders.count_by_status(OrderStatus.CONFIRMED),
            "totalRevenue": self.orders.total_revenue(),
        }
