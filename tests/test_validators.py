"""Tests for input validators and notification links."""

import pytest

from services.notification_service import NotificationService
from utils.validators import (
    coerce_amount,
    coerce_int,
    coerce_raffle_number,
    phone_digits,
    validate_email,
    validate_image_data,
    validate_phone,
    validate_raffle_number,
)


@pytest.mark.parametrize("phone,expected", [
    ("+58 412-555-1234", True),
    ("(0414) 123 4567", True),
    ("12345", False),
    ("phone", False),
    (None, False),
])
def test_validate_phone(phone, expected):
    assert validate_phone(phone) is expected


def test_phone_digits():
    assert phone_digits("+1 (555) 123-4567") == "15551234567"


def test_validate_email():
    assert validate_email("ana@example.com")
    assert not validate_email("ana.example.com")
    assert not validate_email(42)


def test_raffle_numbers():
    assert coerce_raffle_number(7, 4) == "0007"
    assert coerce_raffle_number(" 0042 ", 4) == "0042"
    assert coerce_raffle_number(True, 4) is None
    assert validate_raffle_number("0042", 4)
    assert not validate_raffle_number("042", 4)
    assert not validate_raffle_number("00-1", 4)


def test_coercions():
    assert coerce_amount("12.5") == 12.5
    assert coerce_amount(-1) is None
    assert coerce_amount(float("nan")) is None
    assert coerce_amount(float("inf")) is None
    assert coerce_amount("1e400") is None
    assert coerce_int("3") == 3
    assert coerce_int("3.5") is None
    assert coerce_int(False) is None


def test_validate_image_data():
    assert validate_image_data("data:image/jpeg;base64,/9j/4AAQ")
    assert not validate_image_data("data:text/plain;base64,aGk=")


def test_whatsapp_link_encoding():
    service = NotificationService(template="Hola {name} #{order_id} {qty} {total:.2f} {numbers}")
    link = service.confirmation_link({
        "name": "José",
        "order_id": "ORD-1",
        "qty": 2,
        "total": 5,
        "numbers": ["0001", "0002"],
        "phone": "+58 412 555 1234",
    })
    assert link == (
        "https://wa.me/584125551234?text="
        "Hola%20Jos%C3%A9%20%23ORD-1%202%205.00%200001%2C%200002"
    )
