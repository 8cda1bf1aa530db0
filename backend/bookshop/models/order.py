# backend/bookshop/models/order.py

from enum import Enum
from pydantic import Field
from typing import Any, Optional, List
from datetime import datetime

from bookshop.models.common import CamelModel


class OrderStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PREPARING = "Preparing"
    READY = "Ready"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

# --- Order Item Models ---
class OrderItemIn(CamelModel):
    """
    One line of an incoming order, exactly as the client sent it.

    quantity and price stay untyped here: they are coerced item by item in
    the order service so that one malformed line does not reject the order.
    """
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    quantity: Any = None
    price: Any = None

class OrderItem(CamelModel):
    item_id: str
    order_id: Optional[str] = None
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float

# --- Order Models ---
class OrderCreate(CamelModel):
    user_id: str
    user_email: Optional[str] = None # accepted for client compatibility, not persisted
    items: List[OrderItemIn]
    branch: str
    payment_method: str
    delivery_address: str
    offer_id: Optional[str] = None
    # charges are informational; finalAmount, when given, is stored as the order total
    tax_amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    delivery_charges: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    discount_amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    final_amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

class OrderCreated(CamelModel):
    message: str = "Order created successfully"
    order_id: str
    final_amount: float

class OrderUpdate(CamelModel):
    status: Optional[OrderStatus] = None
    payment_method: Optional[str] = None
    delivery_address: Optional[str] = None

class Order(CamelModel):
    order_id: str
    user_id: str
    branch: str
    total_amount: float
    status: OrderStatus = OrderStatus.PENDING
    payment_method: Optional[str] = None
    delivery_address: Optional[str] = None
    customer_name: str
    customer_phone: str
    order_date: datetime
    updated_at: datetime
    items: List[OrderItem] = []

# --- Report Models ---
class SalesLine(CamelModel):
    order_id: str
    customer_name: str
    customer_phone: str
    total_amount: float
    status: str
    order_date: datetime
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[float] = None

class SalesReport(CamelModel):
    report_type: str = "Sales Report"
    start_date: str
    end_date: str
    generated_at: datetime
    total_orders: int
    total_revenue: float
    sales_data: List[SalesLine]

class TopProduct(CamelModel):
    product_name: str
    total_quantity: int
    total_revenue: float

class FinancialData(CamelModel):
    total_revenue: float = 0.0
    order_count: int = 0
    avg_order_value: float = 0.0
    top_products: List[TopProduct] = Field(default_factory=list)

class FinancialReport(CamelModel):
    report_type: str = "Financial Report"
    start_date: str
    end_date: str
    generated_at: datetime
    financial_data: FinancialData
