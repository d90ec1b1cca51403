"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum


# Status enums
class OrderStatus(str, Enum):
    """Purchase order status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"


class NumberStatus(str, Enum):
    """Status reported by the winner lookup."""
    CONFIRMED = "confirmed"
    PENDING = "pending"
    AVAILABLE = "available"


# Database constants
class DatabaseDefaults:
    """Default database configuration."""
    BUSY_TIMEOUT = 5000  # milliseconds
    CONNECT_TIMEOUT = 30.0  # seconds


# Raffle configuration
class RaffleDefaults:
    """Seed values for the config table and the values restored by a reset."""
    ADMIN_PASSWORD_KEY = "adminPass"
    DIGITS_KEY = "prizeDigits"
    PRICE_KEY = "prizePrice"
    HIDDEN_KEYS = frozenset({ADMIN_PASSWORD_KEY})

    MIN_PASSWORD_LENGTH = 4
    MIN_DIGITS = 1
    MAX_DIGITS = 6

    PRIZE_CONFIG = {
        "prizeTitle": "Gran Premio",
        "prizeDescription": "Participa en nuestra rifa solidaria.",
        "prizeDate": "",
        "prizeTime": "",
        "prizePrice": "10",
        "prizeDigits": "4",
    }

    RESET_CONFIG = {
        "prizeTitle": "",
        "prizeDescription": "",
        "prizeDate": "",
        "prizeTime": "",
        "prizePrice": "10",
        "prizeDigits": "4",
    }

    # Request field -> config key
    PRIZE_FIELDS = {
        "title": "prizeTitle",
        "description": "prizeDescription",
        "date": "prizeDate",
        "time": "prizeTime",
        "price": "prizePrice",
        "digits": "prizeDigits",
    }

    PAYMENT_METHODS = {
        "zelle": {
            "email": "pagos@fundabenefica.com",
            "phone": "+1 555 123-4567",
            "name": "FundaBenefica",
        },
        "bank": {
            "name": "Bank of America",
            "account": "1234567890",
            "routing": "026009593",
            "beneficiary": "FundaBenefica",
        },
        "notice": {
            "message": "Envía tu comprobante de pago para confirmar tu participación.",
        },
    }


# Order constants
class OrderDefaults:
    """Order identifier format."""
    ID_PREFIX = "ORD"
    RANDOM_SUFFIX_BYTES = 4


# Backup constants
class BackupDefaults:
    """Snapshot history configuration."""
    HISTORY_SIZE = 50
    EXPORT_FILENAME_FORMAT = "backup-%Y%m%d_%H%M%S.json"


# Outbound notification
class NotificationDefaults:
    """WhatsApp deep link used to notify a buyer after confirmation."""
    WHATSAPP_URL = "https://wa.me/{phone}?text={text}"
    CONFIRMATION_TEMPLATE = (
        "¡Hola {name}! Tu pago ha sido confirmado.\n"
        "Pedido: {order_id}\n"
        "Cantidad de números: {qty}\n"
        "Total: ${total:.2f}\n"
        "Tus números: {numbers}\n"
        "¡Gracias por apoyar a FundaBenefica y mucha suerte!"
    )
