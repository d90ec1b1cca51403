"""Input validation helpers."""

import math
import re
from typing import Any, Optional


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")
DATA_URI_RE = re.compile(r"^data:image/[a-zA-Z0-9.+-]+(;[^,]*)?,")
DIGITS_RE = re.compile(r"^[0-9]+$")


def validate_full_name(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return 1 <= len(value.strip()) <= 100


def validate_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value.strip()))


def validate_phone(value: Any) -> bool:
    """Validate phone numbers - accepts any international format"""
    if not isinstance(value, str) or not value:
        return False

    clean_phone = re.sub(r'[\s\-\(\)\.]', '', value)

    # E.164: 7 to 15 digits, optional leading +
    return bool(re.match(r'^\+?[0-9]{7,15}$', clean_phone))


def phone_digits(value: str) -> str:
    """Strip everything but digits, as expected by wa.me links."""
    return re.sub(r'\D', '', value or '')


def validate_raffle_number(value: Any, digits: int) -> bool:
    return isinstance(value, str) and len(value) == digits and bool(DIGITS_RE.match(value))


def coerce_raffle_number(value: Any, digits: int) -> Optional[str]:
    """Return the number as a string; ints are zero-padded to ``digits``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value).zfill(digits) if value >= 0 else None
    if isinstance(value, str):
        return value.strip()
    return None


def coerce_amount(value: Any) -> Optional[float]:
    """Parse a non-negative money amount from a number or numeric string."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def coerce_int(value: Any) -> Optional[int]:
    """Parse an integer from an int or an integer-looking string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.match(r'^\s*-?[0-9]+\s*$', value):
        return int(value)
    return None


def validate_image_data(value: Any) -> bool:
    return isinstance(value, str) and bool(DATA_URI_RE.match(value))
