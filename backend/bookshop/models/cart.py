# backend/bookshop/models/cart.py

from pydantic import Field
from typing import List, Optional

from bookshop.models.common import CamelModel


class CartItemIn(CamelModel):
    product_id: str
    quantity: int = 1

class CartLine(CamelModel):
    product_id: str
    quantity: int
    product_name: str
    product_price: float
    product_description: Optional[str] = None

class Cart(CamelModel):
    products: List[CartLine] = Field(default_factory=list)
    total_amount: float = 0.0
