# backend/bookshop/models/product.py

from pydantic import Field
from typing import Optional
from datetime import datetime

from bookshop.models.common import CamelModel


class ProductBase(CamelModel):
    product_name: str = Field(..., min_length=1)
    category_name: str
    product_price: float = Field(..., ge=0)
    product_description: Optional[str] = None
    stock_quantity: int = Field(0, ge=0)
    status: str = "Active"
    discount_percentage: float = Field(0.0, ge=0, le=100)

class ProductCreate(ProductBase):
    pass

class Product(ProductBase):
    product_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None
