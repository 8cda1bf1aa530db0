# backend/bookshop/api/order_api.py

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List, Optional

from bookshop.dependencies import get_admin_user, get_order_repo, get_order_service
from bookshop.models.common import Message
from bookshop.models.order import (
    FinancialReport, Order, OrderCreate, OrderCreated, OrderUpdate, SalesReport,
)
from bookshop.repositories.order_repository import OrderRepository
from bookshop.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])


def _report_bounds(start_date: Optional[str], end_date: Optional[str]):
    if not start_date or not end_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="startDate and endDate are required")
    # A bare end date covers the whole day
    if len(end_date) == 10:
        end_date = f"{end_date} 23:59:59"
    return start_date, end_date


@router.post("/orders", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
def create_order(order: OrderCreate, order_service: OrderService = Depends(get_order_service)):
    """
    Place an order: header, line items and cart clearing in one transaction.

    Malformed lines are skipped rather than failing the request; any store
    failure rolls the whole order back and answers 500.
    """
    try:
        return order_service.place_order(order)
    except Exception as e:
        logger.error("Order creation failed for user %s: %s", order.user_id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail=f"Failed to create order: {str(e)}")

@router.get("/orders", response_model=List[Order])
def get_orders(user_id: Optional[str] = Query(None, alias="userId"),
               order_repo: OrderRepository = Depends(get_order_repo)):
    try:
        if user_id:
            return order_repo.get_orders_by_user_id(user_id)
        return order_repo.get_all_orders()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch orders: {str(e)}")

# Report routes are declared before /orders/{order_id} so they are not captured by it
@router.get("/orders/sales-report", response_model=SalesReport, dependencies=[Depends(get_admin_user)])
def sales_report(start_date: Optional[str] = Query(None, alias="startDate"),
                 end_date: Optional[str] = Query(None, alias="endDate"),
                 order_repo: OrderRepository = Depends(get_order_repo)):
    start, end = _report_bounds(start_date, end_date)
    try:
        lines = order_repo.get_sales_lines(start, end)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to generate sales report: {str(e)}")

    # Revenue counts each order once, not once per line
    totals = {line["order_id"]: line["total_amount"] for line in lines}
    return SalesReport(
        start_date=start_date,
        end_date=end_date,
        generated_at=datetime.now(),
        total_orders=len(totals),
        total_revenue=sum(totals.values()),
        sales_data=lines,
    )

@router.get("/orders/financial-report", response_model=FinancialReport, dependencies=[Depends(get_admin_user)])
def financial_report(start_date: Optional[str] = Query(None, alias="startDate"),
                     end_date: Optional[str] = Query(None, alias="endDate"),
                     order_repo: OrderRepository = Depends(get_order_repo)):
    start, end = _report_bounds(start_date, end_date)
    try:
        summary = order_repo.get_financial_summary(start, end)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to generate financial report: {str(e)}")
    return FinancialReport(
        start_date=start_date,
        end_date=end_date,
        generated_at=datetime.now(),
        financial_data=summary,
    )

@router.get("/orders/{order_id}", response_model=Order)
def get_order(order_id: str, order_repo: OrderRepository = Depends(get_order_repo)):
    order = order_repo.get_order_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

@router.put("/orders/{order_id}", response_model=Order, dependencies=[Depends(get_admin_user)])
def update_order(order_id: str, update: OrderUpdate, order_repo: OrderRepository = Depends(get_order_repo)):
    fields = update.model_dump(exclude_none=True, mode="json")
    try:
        updated = order_repo.update_order(order_id, fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update order: {str(e)}")
    if not updated:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_repo.get_order_by_id(order_id)

@router.delete("/orders/{order_id}", response_model=Message, dependencies=[Depends(get_admin_user)])
def delete_order(order_id: str, order_repo: OrderRepository = Depends(get_order_repo)):
    try:
        deleted = order_repo.delete_order(order_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete order: {str(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"message": "Order deleted successfully"}
