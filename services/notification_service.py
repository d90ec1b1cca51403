"""Pre-filled buyer notifications.

Nothing is sent from the server: the admin panel opens the returned
WhatsApp link and the admin presses send.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

from core import get_logger
from core.constants import NotificationDefaults
from utils.validators import phone_digits

logger = get_logger(__name__)


class NotificationService:
    """Builds outbound notification links for buyers."""

    def __init__(self, template: Optional[str] = None) -> None:
        """Initialize notification service.

        Args:
            template: Confirmation message template, formatted with
                ``name``, ``order_id``, ``qty``, ``total`` and ``numbers``
        """
        self.template = template or NotificationDefaults.CONFIRMATION_TEMPLATE

    def confirmation_message(self, order: Dict[str, Any]) -> str:
        return self.template.format(
            name=order["name"],
            order_id=order["order_id"],
            qty=order["qty"],
            total=float(order["total"]),
            numbers=", ".join(order["numbers"]),
        )

    def whatsapp_link(self, phone: str, message: str) -> str:
        """Build a wa.me deep link with the message percent-encoded."""
        digits = phone_digits(phone)
        if not digits:
            logger.warning("Building WhatsApp link without recipient phone")
        return NotificationDefaults.WHATSAPP_URL.format(phone=digits, text=quote(message, safe=""))

    def confirmation_link(self, order: Dict[str, Any]) -> str:
        """Link that opens a chat with the buyer, confirmation message pre-filled."""
        return self.whatsapp_link(order["phone"], self.confirmation_message(order))
