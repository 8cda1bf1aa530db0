# backend/bookshop/services/order_service.py

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bookshop.models.order import OrderCreate, OrderCreated, OrderItemIn
from bookshop.repositories.order_repository import OrderRepository
from bookshop.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "Customer"
DEFAULT_CUSTOMER_PHONE = "N/A"


def coerce_quantity(value: Any) -> Optional[int]:
    """
    Integer quantity from an int, an integral float or a numeric string.

    Returns None for anything else, including fractional values such as
    2.5 which would otherwise be silently truncated.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) and number.is_integer() else None
    return None


def coerce_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def normalize_items(items: Sequence[OrderItemIn]) -> List[Dict[str, Any]]:
    """
    Turn raw request lines into persistable ones.

    A line is skipped, with a warning, when its quantity is not a positive
    integer, its price is not a non-negative number, or its product id or
    name is missing. Skipping never fails the order.
    """
    lines = []
    for position, item in enumerate(items, start=1):
        quantity = coerce_quantity(item.quantity)
        price = coerce_price(item.price)

        if quantity is None or quantity <= 0:
            logger.warning("Skipping order item %s: invalid quantity %r", position, item.quantity)
            continue
        if price is None or price < 0:
            logger.warning("Skipping order item %s: invalid price %r", position, item.price)
            continue
        if not item.product_id or not item.product_name:
            logger.warning("Skipping order item %s: missing productId or productName (%r)", position, item)
            continue

        lines.append({
            "product_id": item.product_id,
            "product_name": item.product_name,
            "quantity": quantity,
            "unit_price": price,
        })
    return lines


def compute_total(lines: Sequence[Dict[str, Any]]) -> float:
    """Sum of unit price x quantity. Tax, delivery charges and discounts are not applied."""
    return sum(line["unit_price"] * line["quantity"] for line in lines)


class OrderService:
    """Order placement: normalize the request, denormalize the customer, persist atomically."""

    def __init__(self, order_repo: OrderRepository, user_repo: UserRepository):
        self.order_repo = order_repo
        self.user_repo = user_repo

    def resolve_customer(self, user_id: str) -> Tuple[str, str]:
        """Display name and phone for the order header, with placeholders when unknown."""
        try:
            contact = self.user_repo.get_contact(user_id)
        except Exception as err:
            logger.warning("Error fetching user %s: %s. Using default customer values.", user_id, err)
            return DEFAULT_CUSTOMER_NAME, DEFAULT_CUSTOMER_PHONE

        if not contact:
            logger.warning("User %s not found. Using default customer values.", user_id)
            return DEFAULT_CUSTOMER_NAME, DEFAULT_CUSTOMER_PHONE
        return (contact.get("username") or DEFAULT_CUSTOMER_NAME,
                contact.get("phone_number") or DEFAULT_CUSTOMER_PHONE)

    def place_order(self, request: OrderCreate) -> OrderCreated:
        lines = normalize_items(request.items)
        if not lines:
            # TODO: decide with product owners whether an order whose items were all
            # rejected should fail with 400 instead of being stored empty.
            logger.warning("Order for user %s has no valid items; storing it without line items", request.user_id)

        if request.final_amount is not None:
            final_amount = request.final_amount
        else:
            final_amount = compute_total(lines)

        customer_name, customer_phone = self.resolve_customer(request.user_id)
        logger.info("Placing order for user %s at %s: %s items, amount %.2f",
                    request.user_id, request.branch, len(lines), final_amount)

        order_id = self.order_repo.create_order(
            user_id=request.user_id,
            branch=request.branch,
            total_amount=final_amount,
            payment_method=request.payment_method,
            delivery_address=request.delivery_address,
            customer_name=customer_name,
            customer_phone=customer_phone,
            items=lines,
        )
        return OrderCreated(order_id=order_id, final_amount=final_amount)
