import logging

import pytest
from pydantic import ValidationError

from bookshop.models.order import OrderCreate, OrderItemIn
from bookshop.services.order_service import (
    OrderService, coerce_price, coerce_quantity, compute_total, normalize_items,
)


@pytest.mark.parametrize("value, expected", [
    (3, 3),
    (2.0, 2),
    ("4", 4),
    (" 5 ", 5),
    ("6.0", 6),
    (2.5, None),
    ("2.5", None),
    ("abc", None),
    (True, None),
    (None, None),
    (float("nan"), None),
    ([1], None),
])
def test_coerce_quantity(value, expected):
    assert coerce_quantity(value) == expected


@pytest.mark.parametrize("value, expected", [
    (1500, 1500.0),
    (19.99, 19.99),
    ("2000", 2000.0),
    ("12.50", 12.5),
    ("free", None),
    (float("inf"), None),
    (False, None),
    (None, None),
])
def test_coerce_price(value, expected):
    assert coerce_price(value) == expected


def test_normalize_items_skips_bad_lines(caplog):
    items = [
        OrderItemIn(product_id="p1", product_name="Madol Doova", quantity=2, price=1500),
        OrderItemIn(product_id="p2", product_name="Gamperaliya", quantity="abc", price=2000),
        OrderItemIn(product_id="p3", product_name="Viragaya", quantity=0, price=900),
        OrderItemIn(product_id="p4", product_name="Kaliyugaya", quantity=1, price=-5),
        OrderItemIn(product_id="", product_name="No id", quantity=1, price=100),
        OrderItemIn(product_id="p6", product_name=None, quantity=1, price=100),
        OrderItemIn(product_id="p7", product_name="Yuganthaya", quantity="3", price="250.5"),
    ]
    with caplog.at_level(logging.WARNING, logger="bookshop.services.order_service"):
        lines = normalize_items(items)

    assert [line["product_id"] for line in lines] == ["p1", "p7"]
    assert lines[1] == {"product_id": "p7", "product_name": "Yuganthaya", "quantity": 3, "unit_price": 250.5}
    assert len([r for r in caplog.records if "Skipping order item" in r.getMessage()]) == 5


def test_compute_total_ignores_nothing_but_lines():
    lines = [
        {"product_id": "p1", "product_name": "A", "quantity": 2, "unit_price": 1500.0},
        {"product_id": "p2", "product_name": "B", "quantity": 1, "unit_price": 2000.0},
    ]
    assert compute_total(lines) == 5000.0
    assert compute_total([]) == 0


class FakeOrderRepo:
    def __init__(self):
        self.calls = []

    def create_order(self, **kwargs):
        self.calls.append(kwargs)
        return "ord_1_abcd"


class FakeUserRepo:
    def __init__(self, contact=None, error=None):
        self.contact = contact
        self.error = error

    def get_contact(self, user_id):
        if self.error:
            raise self.error
        return self.contact


def _request(**overrides):
    payload = {
        "userId": "user_1",
        "items": [{"productId": "p1", "productName": "Madol Doova", "quantity": 2, "price": 1500},
                  {"productId": "p2", "productName": "Gamperaliya", "quantity": 1, "price": 2000}],
        "branch": "Colombo",
        "paymentMethod": "Cash on Delivery",
        "deliveryAddress": "12 Galle Road",
        "taxAmount": 100,
        "deliveryCharges": 250,
        "discountAmount": 50,
    }
    payload.update(overrides)
    return OrderCreate(**payload)


def test_place_order_computes_total_without_extras():
    order_repo = FakeOrderRepo()
    service = OrderService(order_repo, FakeUserRepo({"username": "Nimal", "phone_number": "0771234567"}))

    created = service.place_order(_request())

    assert created.order_id == "ord_1_abcd"
    assert created.final_amount == 5000.0
    call = order_repo.calls[0]
    assert call["total_amount"] == 5000.0
    assert call["customer_name"] == "Nimal"
    assert call["customer_phone"] == "0771234567"
    assert len(call["items"]) == 2


def test_place_order_stores_supplied_final_amount_verbatim():
    order_repo = FakeOrderRepo()
    service = OrderService(order_repo, FakeUserRepo({"username": "Nimal", "phone_number": "0771234567"}))

    created = service.place_order(_request(finalAmount=1234.5))

    assert created.final_amount == 1234.5
    assert order_repo.calls[0]["total_amount"] == 1234.5


@pytest.mark.parametrize("field, value", [
    ("finalAmount", float("nan")),
    ("finalAmount", float("inf")),
    ("taxAmount", -0.01),
    ("deliveryCharges", float("-inf")),
    ("discountAmount", -5),
])
def test_order_amounts_must_be_finite_and_non_negative(field, value):
    with pytest.raises(ValidationError):
        _request(**{field: value})


@pytest.mark.parametrize("user_repo", [
    FakeUserRepo(contact=None),
    FakeUserRepo(contact={"username": None, "phone_number": None}),
    FakeUserRepo(error=RuntimeError("lookup failed")),
])
def test_place_order_uses_placeholder_identity(user_repo):
    order_repo = FakeOrderRepo()
    OrderService(order_repo, user_repo).place_order(_request())

    assert order_repo.calls[0]["customer_name"] == "Customer"
    assert order_repo.calls[0]["customer_phone"] == "N/A"


def test_place_order_with_no_valid_items_still_persists(caplog):
    order_repo = FakeOrderRepo()
    service = OrderService(order_repo, FakeUserRepo())

    with caplog.at_level(logging.WARNING, logger="bookshop.services.order_service"):
        created = service.place_order(_request(items=[{"productId": "p1", "productName": "A", "quantity": "x", "price": 10}]))

    assert created.final_amount == 0
    assert order_repo.calls[0]["items"] == []
    assert any("no valid items" in r.getMessage() for r in caplog.records)
