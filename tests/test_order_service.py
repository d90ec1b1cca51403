"""Unit tests for OrderService."""

import re
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch
from urllib.parse import unquote

import pytest

from core.constants import OrderStatus
from core.exceptions import NumbersUnavailableError, OrderNotFoundError, RepositoryError, ValidationError
from services.order_service import generate_order_id


def test_order_id_format():
    assert re.match(r"^ORD-\d{13}-[0-9A-F]{8}$", generate_order_id())


def test_order_ids_unique_across_threads():
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda _: generate_order_id(), range(500)))
    assert len(set(ids)) == 500


def test_concurrent_creations_get_distinct_ids(make_order):
    numbers = [f"{n:04d}" for n in range(20)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        ids = list(pool.map(lambda number: make_order([number]), numbers))
    assert len(set(ids)) == 20


def test_create_stores_pending_order(order_service, make_order):
    order_id = make_order(["0042", "0007"], total=20.0)

    order = order_service.get(order_id)
    assert order["status"] == OrderStatus.PENDING.value
    assert order["numbers"] == ["0042", "0007"]
    assert order["qty"] == 2
    assert order["total"] == 20.0
    assert order["image"] is None


def test_create_pads_integer_numbers(order_service, make_order):
    order_id = make_order([7, 123])
    assert order_service.get(order_id)["numbers"] == ["0007", "0123"]


def test_create_takes_a_snapshot(make_order, backup_service):
    make_order()
    history = backup_service.list_history()
    assert len(history) == 1
    assert history[0]["reason"] == "order_created"


@pytest.mark.parametrize("overrides", [
    {"name": ""},
    {"email": "not-an-email"},
    {"phone": "12"},
    {"numbers": []},
    {"numbers": ["12345"], "qty": 1},
    {"numbers": ["12a4"], "qty": 1},
    {"numbers": ["0001", "0001"], "qty": 2},
    {"qty": 3},
    {"total": -5},
    {"total": "abc"},
    {"total": 1e400},
    {"total": "inf"},
])
def test_create_rejects_invalid_input(make_order, overrides):
    with pytest.raises(ValidationError):
        make_order(**overrides)


def test_create_refuses_numbers_held_by_pending_order(make_order):
    make_order(["0001", "0002"])
    with pytest.raises(NumbersUnavailableError) as exc:
        make_order(["0002", "0003"])
    assert exc.value.numbers == ["0002"]


def test_create_refuses_sold_numbers(order_service, make_order):
    order_service.confirm(make_order(["0005"]))
    with pytest.raises(NumbersUnavailableError):
        make_order(["0005"])


def test_failed_reservation_leaves_nothing_behind(order_service, make_order):
    make_order(["0001"])
    with pytest.raises(NumbersUnavailableError):
        make_order(["0009", "0001"])
    assert [o["numbers"] for o in order_service.list_pending()] == [["0001"]]
    assert order_service.find_by_number("0009")["status"] == "available"


def test_rejected_numbers_become_available_again(order_service, make_order):
    order_id = make_order(["0003"])
    order_service.reject(order_id)
    make_order(["0003"])


def test_lists_are_newest_first(order_service, make_order):
    first = make_order(["0001"])
    second = make_order(["0002"])
    third = make_order(["0003"])
    order_service.confirm(second)

    assert [o["order_id"] for o in order_service.list_pending()] == [third, first]
    assert [o["order_id"] for o in order_service.list_confirmed()] == [second]


def test_confirm_marks_numbers_sold(order_service, make_order):
    order_id = make_order(["0010", "0011"])
    result = order_service.confirm(order_id)

    assert result["order"]["status"] == "confirmed"
    assert order_service.list_sold() == ["0010", "0011"]
    assert order_service.get(order_id)["status"] == "confirmed"


def test_confirm_twice_is_idempotent(order_service, make_order, db):
    order_id = make_order(["0010", "0011"])
    order_service.confirm(order_id)
    order_service.confirm(order_id)

    with db.connection() as conn:
        rows = conn.execute("SELECT number, order_id FROM sold_numbers ORDER BY number").fetchall()
    assert [tuple(r) for r in rows] == [("0010", order_id), ("0011", order_id)]


def test_confirm_unknown_order_raises(order_service):
    with pytest.raises(OrderNotFoundError):
        order_service.confirm("ORD-0-MISSING")


def test_confirm_rolls_back_when_marking_sold_fails(order_service, make_order, backup_service):
    order_id = make_order(["0010", "0011"])

    with patch.object(order_service.sold_numbers, "mark_sold", side_effect=RepositoryError("disk I/O error")):
        with pytest.raises(RepositoryError):
            order_service.confirm(order_id)

    assert order_service.get(order_id)["status"] == "pending"
    assert order_service.list_sold() == []
    assert [entry["reason"] for entry in backup_service.list_history()] == ["order_created"]

    order_service.confirm(order_id)
    assert order_service.list_sold() == ["0010", "0011"]


def test_create_rolls_back_when_insert_fails(order_service, make_order):
    with patch.object(order_service.orders, "execute_many", side_effect=RepositoryError("disk I/O error")):
        with pytest.raises(RepositoryError):
            make_order(["0020"])

    assert order_service.list_pending() == []
    assert order_service.unavailable_numbers(["0020"]) == []


def test_confirm_returns_whatsapp_link(order_service, make_order):
    order_id = make_order(["0010", "0011"], total=25.5, name="Luis")
    link = order_service.confirm(order_id)["whatsappLink"]

    assert link.startswith("https://wa.me/584125551234?text=")
    message = unquote(link.split("?text=", 1)[1])
    assert "Luis" in message
    assert order_id in message
    assert "25.50" in message
    assert "0010, 0011" in message


def test_confirm_takes_a_snapshot(order_service, make_order, backup_service):
    order_service.confirm(make_order())
    assert backup_service.list_history()[0]["reason"] == "order_confirmed"


def test_reject_deletes_pending_order(order_service, make_order):
    order_id = make_order()
    assert order_service.reject(order_id) is True
    assert order_service.get(order_id) is None


def test_reject_unknown_order_is_noop(order_service):
    assert order_service.reject("ORD-DOES-NOT-EXIST") is False


def test_reject_leaves_confirmed_order(order_service, make_order):
    order_id = make_order(["0020"])
    order_service.confirm(order_id)
    assert order_service.reject(order_id) is False
    assert order_service.get(order_id)["status"] == "confirmed"
    assert order_service.list_sold() == ["0020"]


def test_find_by_number_states(order_service, make_order):
    assert order_service.find_by_number("0099") == {"found": False, "status": "available", "order": None}

    order_id = make_order(["0099"])
    pending = order_service.find_by_number("0099")
    assert pending["found"] is True
    assert pending["status"] == "pending"
    assert pending["order"]["order_id"] == order_id

    order_service.confirm(order_id)
    confirmed = order_service.find_by_number("0099")
    assert confirmed["status"] == "confirmed"
    assert confirmed["order"]["name"] == "Ana Pérez"
    assert confirmed["order"]["numbers"] == ["0099"]
