"""Order lifecycle: pending -> confirmed, or pending -> deleted on rejection."""

from __future__ import annotations

import secrets
import time
from typing import Any, Dict, List, Optional, Sequence

from core import get_logger
from core.constants import NumberStatus, OrderDefaults, OrderStatus, RaffleDefaults
from core.exceptions import NumbersUnavailableError, OrderNotFoundError, ValidationError
from database.connection import Database
from database.repositories import ConfigRepository, OrderRepository, SoldNumberRepository
from services.backup_service import BackupService
from services.notification_service import NotificationService
from utils.validators import (
    coerce_amount,
    coerce_int,
    coerce_raffle_number,
    validate_email,
    validate_full_name,
    validate_phone,
    validate_raffle_number,
)

logger = get_logger(__name__)


def generate_order_id() -> str:
    """Human-readable order id: millisecond timestamp plus a random suffix.

    The random part keeps ids distinct when several orders are created in
    the same millisecond.
    """
    millis = int(time.time() * 1000)
    suffix = secrets.token_hex(OrderDefaults.RANDOM_SUFFIX_BYTES).upper()
    return f"{OrderDefaults.ID_PREFIX}-{millis}-{suffix}"


class OrderService:
    """Creates, lists, confirms and rejects purchase orders."""

    def __init__(
        self,
        db: Database,
        backups: Optional[BackupService] = None,
        notifications: Optional[NotificationService] = None,
    ) -> None:
        self.db = db
        self.orders = OrderRepository(db)
        self.sold_numbers = SoldNumberRepository(db)
        self.config = ConfigRepository(db)
        self.backups = backups or BackupService(db)
        self.notifications = notifications or NotificationService()

    def raffle_digits(self) -> int:
        value = coerce_int(self.config.get(RaffleDefaults.DIGITS_KEY))
        if value is None:
            return int(RaffleDefaults.PRIZE_CONFIG[RaffleDefaults.DIGITS_KEY])
        return value

    def _clean_numbers(self, numbers: Any, qty: Any) -> List[str]:
        if not isinstance(numbers, list) or not numbers:
            raise ValidationError("At least one number is required")

        digits = self.raffle_digits()
        cleaned = []
        for raw in numbers:
            number = coerce_raffle_number(raw, digits)
            if number is None or not validate_raffle_number(number, digits):
                raise ValidationError(f"Invalid number {raw!r}: expected {digits} digits")
            cleaned.append(number)

        duplicates = sorted({n for n in cleaned if cleaned.count(n) > 1})
        if duplicates:
            raise ValidationError(f"Duplicate numbers in order: {', '.join(duplicates)}")

        if coerce_int(qty) != len(cleaned):
            raise ValidationError("qty must match the amount of numbers")
        return cleaned

    def create(
        self,
        name: Any,
        email: Any,
        phone: Any,
        numbers: Any,
        qty: Any,
        total: Any,
        image: Any = None,
    ) -> str:
        """Reserve the numbers for a new pending order.

        Raises:
            ValidationError: invalid buyer data or numbers
            NumbersUnavailableError: a number is sold or held by another order

        Returns:
            The generated order id
        """
        if not validate_full_name(name):
            raise ValidationError("Name is required")
        if not validate_email(email):
            raise ValidationError("A valid email is required")
        if not validate_phone(phone):
            raise ValidationError("A valid phone number is required")
        cleaned = self._clean_numbers(numbers, qty)
        amount = coerce_amount(total)
        if amount is None:
            raise ValidationError("total must be a non-negative number")
        if image is not None and not isinstance(image, str):
            raise ValidationError("image must be a string")

        order_id = generate_order_id()
        with self.db.transaction():
            taken = self.unavailable_numbers(cleaned)
            if taken:
                raise NumbersUnavailableError(taken)
            self.orders.insert(
                order_id=order_id,
                name=name.strip(),
                email=email.strip(),
                phone=phone.strip(),
                numbers=cleaned,
                qty=len(cleaned),
                total=amount,
                image=image or None,
            )

        logger.info(f"Order {order_id} created with {len(cleaned)} number(s)")
        self.backups.snapshot("order_created")
        return order_id

    def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        return self.orders.get(order_id)

    def list_pending(self) -> List[Dict[str, Any]]:
        return self.orders.list_by_status(OrderStatus.PENDING)

    def list_confirmed(self) -> List[Dict[str, Any]]:
        return self.orders.list_by_status(OrderStatus.CONFIRMED)

    def confirm(self, order_id: str) -> Dict[str, Any]:
        """Confirm the payment of an order and mark its numbers sold.

        Confirming twice is harmless: sold numbers are inserted at most once.

        Returns:
            ``{"whatsappLink": ..., "order": ...}``
        """
        with self.db.transaction():
            order = self.orders.get(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            self.orders.set_status(order_id, OrderStatus.CONFIRMED)
            self.sold_numbers.mark_sold(order["numbers"], order_id)

        order["status"] = OrderStatus.CONFIRMED.value
        logger.info(f"Order {order_id} confirmed, {len(order['numbers'])} number(s) sold")
        self.backups.snapshot("order_confirmed")
        return {
            "whatsappLink": self.notifications.confirmation_link(order),
            "order": order,
        }

    def reject(self, order_id: str) -> bool:
        """Delete a pending order. Unknown ids and confirmed orders are left alone.

        Returns:
            True if an order was deleted
        """
        deleted = self.orders.delete_pending(order_id) > 0
        if deleted:
            logger.info(f"Order {order_id} rejected")
        return deleted

    def find_by_number(self, number: Any) -> Dict[str, Any]:
        """Who holds ``number``: a confirmed order, a pending one, or nobody."""
        number = coerce_raffle_number(number, self.raffle_digits()) or ""

        sold = self.sold_numbers.get(number)
        if sold is not None:
            order = self.orders.get(sold["order_id"]) if sold["order_id"] else None
            return {"found": True, "status": NumberStatus.CONFIRMED.value, "order": order}

        for status in (OrderStatus.CONFIRMED, OrderStatus.PENDING):
            order = self.orders.find_by_number(number, status)
            if order is not None:
                return {"found": True, "status": status.value, "order": order}

        return {"found": False, "status": NumberStatus.AVAILABLE.value, "order": None}

    def list_sold(self) -> List[str]:
        return self.sold_numbers.list_all()

    def unavailable_numbers(self, numbers: Sequence[str]) -> List[str]:
        """Numbers from ``numbers`` that are sold or held by an order."""
        taken = set(self.sold_numbers.find_sold(numbers))
        taken.update(self.orders.find_allocated(numbers))
        return sorted(taken)
