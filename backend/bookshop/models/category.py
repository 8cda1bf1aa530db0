# backend/bookshop/models/category.py

from pydantic import Field
from typing import Optional
from datetime import datetime

from bookshop.models.common import CamelModel


class CategoryBase(CamelModel):
    category_name: str = Field(..., min_length=1)
    category_description: Optional[str] = None
    status: str = "Active"
    display_order: int = 0

class CategoryCreate(CategoryBase):
    pass

class Category(CategoryBase):
    category_id: str
    created_at: datetime
    updated_at: datetime
