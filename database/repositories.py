"""Database access layer helpers."""

from __future__ import annotations

import json
import sqlite3
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.constants import OrderStatus, RaffleDefaults
from database.base_repository import BaseRepository


def _placeholders(values: Sequence[Any]) -> str:
    return ",".join(["?"] * len(values))


class ConfigRepository(BaseRepository):
    """Key/value settings of the raffle."""

    def get(self, key: str) -> Optional[str]:
        return self.fetch_value("SELECT value FROM config WHERE key=?", (key,))

    def set(self, key: str, value: str) -> None:
        self.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)", (key, value))

    def set_many(self, values: Dict[str, str]) -> None:
        self.execute_many(
            "INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
            list(values.items()),
        )

    def get_all(self, include_hidden: bool = False) -> Dict[str, str]:
        """Return every config entry; credentials are left out unless asked for."""
        rows = self.fetch_all("SELECT key, value FROM config")
        return {
            row["key"]: row["value"]
            for row in rows
            if include_hidden or row["key"] not in RaffleDefaults.HIDDEN_KEYS
        }


class PaymentMethodRepository(BaseRepository):
    """Payment channels shown to buyers, stored as JSON payloads."""

    def set(self, method_id: str, payload: Dict[str, Any]) -> None:
        self.execute(
            "INSERT OR REPLACE INTO payment_methods (id, data) VALUES (?, ?)",
            (method_id, json.dumps(payload, ensure_ascii=False)),
        )

    def get_all(self) -> Dict[str, Any]:
        rows = self.fetch_all("SELECT id, data FROM payment_methods ORDER BY id")
        return {row["id"]: json.loads(row["data"]) if row["data"] else {} for row in rows}


class PrizeImageRepository(BaseRepository):
    """Ordered prize pictures (data URIs) addressed by position."""

    def add(self, image_data: str, position: int) -> None:
        """Store an image at ``position``, replacing whatever was there."""
        with self.db.transaction():
            self.execute("DELETE FROM prize_images WHERE position=?", (position,))
            self.execute(
                "INSERT INTO prize_images (image_data, position) VALUES (?, ?)",
                (image_data, position),
            )

    def remove(self, position: int) -> None:
        """Delete the image at ``position`` and close the gap it leaves."""
        with self.db.transaction():
            self.execute("DELETE FROM prize_images WHERE position=?", (position,))
            remaining = self.fetch_column("SELECT image_data FROM prize_images ORDER BY position")
            self.execute("DELETE FROM prize_images")
            self.execute_many(
                "INSERT INTO prize_images (image_data, position) VALUES (?, ?)",
                [(image_data, index) for index, image_data in enumerate(remaining)],
            )

    def list_ordered(self) -> List[str]:
        images = self.fetch_column("SELECT image_data FROM prize_images ORDER BY position")
        return [image for image in images if image]

    def list_positions(self) -> List[int]:
        return self.fetch_column("SELECT position FROM prize_images ORDER BY position")

    def clear_all(self) -> None:
        self.execute("DELETE FROM prize_images")


class SoldNumberRepository(BaseRepository):
    """Numbers permanently allocated to confirmed orders."""

    def mark_sold(self, numbers: Iterable[str], order_id: str) -> None:
        # An already sold number keeps its original order
        self.execute_many(
            "INSERT OR IGNORE INTO sold_numbers (number, order_id, confirmed_at) "
            "VALUES (?, ?, CURRENT_TIMESTAMP)",
            [(number, order_id) for number in numbers],
        )

    def is_sold(self, number: str) -> bool:
        return self.get(number) is not None

    def get(self, number: str) -> Optional[sqlite3.Row]:
        return self.fetch_one(
            "SELECT number, order_id, confirmed_at FROM sold_numbers WHERE number=?",
            (number,),
        )

    def find_sold(self, numbers: Sequence[str]) -> List[str]:
        if not numbers:
            return []
        return self.fetch_column(
            f"SELECT number FROM sold_numbers WHERE number IN ({_placeholders(numbers)})",
            tuple(numbers),
        )

    def list_all(self) -> List[str]:
        return self.fetch_column("SELECT number FROM sold_numbers ORDER BY number")

    def list_rows(self) -> List[Dict[str, Any]]:
        rows = self.fetch_all(
            "SELECT number, order_id, confirmed_at FROM sold_numbers ORDER BY number"
        )
        return [dict(row) for row in rows]

    def count(self) -> int:
        return self.fetch_value("SELECT COUNT(*) FROM sold_numbers") or 0

    def clear_all(self) -> None:
        self.execute("DELETE FROM sold_numbers")


class OrderRepository(BaseRepository):
    """Purchase orders and the numbers each one holds."""

    _COLUMNS = "order_id, name, email, phone, qty, total, image, status, created_at"

    def insert(
        self,
        order_id: str,
        name: str,
        email: str,
        phone: str,
        numbers: Sequence[str],
        qty: int,
        total: float,
        image: Optional[str],
    ) -> None:
        with self.db.transaction():
            self.execute(
                "INSERT INTO orders (order_id, name, email, phone, qty, total, image, status) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (order_id, name, email, phone, qty, total, image, OrderStatus.PENDING.value),
            )
            self.execute_many(
                "INSERT INTO order_numbers (order_id, position, number) VALUES (?, ?, ?)",
                [(order_id, position, number) for position, number in enumerate(numbers)],
            )

    def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        row = self.fetch_one(f"SELECT {self._COLUMNS} FROM orders WHERE order_id=?", (order_id,))
        if row is None:
            return None
        return self._attach_numbers([row])[0]

    def list_by_status(self, status: OrderStatus) -> List[Dict[str, Any]]:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM orders WHERE status=? ORDER BY created_at DESC, id DESC",
            (status.value,),
        )
        return self._attach_numbers(rows)

    def list_all(self) -> List[Dict[str, Any]]:
        rows = self.fetch_all(f"SELECT {self._COLUMNS} FROM orders ORDER BY created_at DESC, id DESC")
        return self._attach_numbers(rows)

    def find_allocated(self, numbers: Sequence[str]) -> List[str]:
        """Return the given numbers that already belong to some order."""
        if not numbers:
            return []
        return self.fetch_column(
            f"SELECT number FROM order_numbers WHERE number IN ({_placeholders(numbers)})",
            tuple(numbers),
        )

    def find_by_number(self, number: str, status: OrderStatus) -> Optional[Dict[str, Any]]:
        order_id = self.fetch_value(
            "SELECT o.order_id FROM order_numbers n "
            "JOIN orders o ON o.order_id = n.order_id "
            "WHERE n.number=? AND o.status=?",
            (number, status.value),
        )
        return self.get(order_id) if order_id else None

    def set_status(self, order_id: str, status: OrderStatus) -> int:
        return self.execute("UPDATE orders SET status=? WHERE order_id=?", (status.value, order_id))

    def delete_pending(self, order_id: str) -> int:
        return self.execute(
            "DELETE FROM orders WHERE order_id=? AND status=?",
            (order_id, OrderStatus.PENDING.value),
        )

    def count_by_status(self, status: OrderStatus) -> int:
        return self.fetch_value("SELECT COUNT(*) FROM orders WHERE status=?", (status.value,)) or 0

    def total_revenue(self) -> float:
        total = self.fetch_value(
            "SELECT SUM(total) FROM orders WHERE status=?",
            (OrderStatus.CONFIRMED.value,),
        )
        return float(total or 0)

    def clear_all(self) -> None:
        with self.db.transaction():
            self.execute("DELETE FROM order_numbers")
            self.execute("DELETE FROM orders")

    def _attach_numbers(self, rows: Sequence[sqlite3.Row]) -> List[Dict[str, Any]]:
        if not rows:
            return []
        order_ids = [row["order_id"] for row in rows]
        numbers: Dict[str, List[str]] = defaultdict(list)
        for link in self.fetch_all(
            f"SELECT order_id, number FROM order_numbers WHERE order_id IN ({_placeholders(order_ids)}) "
            "ORDER BY order_id, position",
            tuple(order_ids),
        ):
            numbers[link["order_id"]].append(link["number"])

        orders = []
        for row in rows:
            order = dict(row)
            order["numbers"] = numbers.get(row["order_id"], [])
            orders.append(order)
        return orders


class BackupRepository(BaseRepository):
    """Rotating history of JSON dataset snapshots."""

    def add(self, reason: str, data: Dict[str, Any]) -> int:
        return self.insert(
            "INSERT INTO backups (reason, data) VALUES (?, ?)",
            (reason, json.dumps(data, ensure_ascii=False, default=str)),
        )

    def prune(self, keep: int) -> int:
        """Delete all but the ``keep`` most recent snapshots."""
        return self.execute(
            "DELETE FROM backups WHERE id NOT IN (SELECT id FROM backups ORDER BY id DESC LIMIT ?)",
            (keep,),
        )

    def list_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        rows = self.fetch_all(
            "SELECT id, reason, created_at FROM backups ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return [dict(row) for row in rows]

    def get(self, backup_id: int) -> Optional[Dict[str, Any]]:
        row = self.fetch_one("SELECT id, reason, data, created_at FROM backups WHERE id=?", (backup_id,))
        if row is None:
            return None
        snapshot = dict(row)
        snapshot["data"] = json.loads(snapshot["data"])
        return snapshot

    def count(self) -> int:
        return self.fetch_value("SELECT COUNT(*) FROM backups") or 0

    def ids(self) -> List[int]:
        return self.fetch_column("SELECT id FROM backups ORDER BY id")
