"""Raffle settings: prize config, payment methods, prize images, admin password, reset."""

from __future__ import annotations

from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from core import get_logger
from core.constants import RaffleDefaults
from core.exceptions import ValidationError
from database.connection import Database
from database.repositories import (
    ConfigRepository,
    OrderRepository,
    PaymentMethodRepository,
    PrizeImageRepository,
    SoldNumberRepository,
)
from services.backup_service import BackupService
from utils.validators import coerce_amount, coerce_int, validate_image_data

logger = get_logger(__name__)


def _format_amount(amount: float) -> str:
    return str(int(amount)) if amount.is_integer() else str(amount)


class SettingsService:
    """Admin-side configuration of the raffle."""

    def __init__(self, db: Database, backups: Optional[BackupService] = None) -> None:
        self.db = db
        self.config = ConfigRepository(db)
        self.payments = PaymentMethodRepository(db)
        self.images = PrizeImageRepository(db)
        self.sold_numbers = SoldNumberRepository(db)
        self.orders = OrderRepository(db)
        self.backups = backups or BackupService(db)

    def public_config(self) -> Dict[str, Any]:
        """Everything the public page needs; the admin password is never included."""
        return {
            "config": self.config.get_all(),
            "payments": self.payments.get_all(),
            "images": self.images.list_ordered(),
            "soldCount": self.sold_numbers.count(),
        }

    def update_prize(self, fields: Dict[str, Any]) -> bool:
        """Write the supplied prize fields.

        A change of the digit count invalidates every number already handed
        out, so all orders and sold numbers are deleted with it.

        Returns:
            True if orders and sold numbers were wiped
        """
        values: Dict[str, str] = {}
        for field, key in RaffleDefaults.PRIZE_FIELDS.items():
            value = fields.get(field)
            if value is None:
                continue
            # Blank numeric inputs from the admin form leave the stored value alone
            if field in ("price", "digits") and isinstance(value, str) and not value.strip():
                continue
            if field == "price":
                amount = coerce_amount(value)
                if amount is None:
                    raise ValidationError("price must be a non-negative number")
                values[key] = _format_amount(amount)
            elif field == "digits":
                digits = coerce_int(value)
                if digits is None or not RaffleDefaults.MIN_DIGITS <= digits <= RaffleDefaults.MAX_DIGITS:
                    raise ValidationError(
                        f"digits must be between {RaffleDefaults.MIN_DIGITS} and {RaffleDefaults.MAX_DIGITS}"
                    )
                values[key] = str(digits)
            elif isinstance(value, str):
                values[key] = value
            else:
                raise ValidationError(f"{field} must be a string")

        wiped = False
        with self.db.transaction():
            new_digits = values.get(RaffleDefaults.DIGITS_KEY)
            if new_digits is not None and new_digits != self.config.get(RaffleDefaults.DIGITS_KEY):
                self.sold_numbers.clear_all()
                self.orders.clear_all()
                wiped = True
            self.config.set_many(values)

        if wiped:
            logger.warning(f"Digit count changed to {values[RaffleDefaults.DIGITS_KEY]}, orders and sold numbers cleared")
        return wiped

    def set_payment_method(self, method_id: str, payload: Any) -> None:
        if not method_id:
            raise ValidationError("Payment method id is required")
        if not isinstance(payload, dict):
            raise ValidationError("Payment method data must be a JSON object")
        self.payments.set(method_id, payload)

    def change_password(self, password: Any) -> None:
        if not isinstance(password, str) or len(password) < RaffleDefaults.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {RaffleDefaults.MIN_PASSWORD_LENGTH} characters"
            )
        self.config.set(RaffleDefaults.ADMIN_PASSWORD_KEY, generate_password_hash(password))
        logger.info("Admin password changed")

    def verify_password(self, password: Any) -> bool:
        if not isinstance(password, str) or not password:
            return False
        stored = self.config.get(RaffleDefaults.ADMIN_PASSWORD_KEY)
        if not stored:
            return False
        return check_password_hash(stored, password)

    def add_image(self, image: Any, position: Any) -> None:
        if not validate_image_data(image):
            raise ValidationError("image must be a data:image URI")
        index = coerce_int(position)
        if index is None or index < 0:
            raise ValidationError("position must be a non-negative integer")
        self.images.add(image, index)

    def remove_image(self, position: int) -> None:
        self.images.remove(position)

    def reset_raffle(self) -> None:
        """Start over: snapshot, then drop orders, sold numbers and images.

        Payment methods and the admin password are kept.
        """
        self.backups.snapshot("reset")
        with self.db.transaction():
            self.orders.clear_all()
            self.sold_numbers.clear_all()
            self.images.clear_all()
            self.config.set_many(RaffleDefaults.RESET_CONFIG)
        logger.warning("Raffle reset: orders, sold numbers and prize images deleted")
