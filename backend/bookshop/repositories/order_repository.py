# backend/bookshop/repositories/order_repository.py

import logging
import time
import uuid
import mysql.connector
from typing import List, Dict, Any, Optional, Sequence
from datetime import datetime

from bookshop.database import Database, new_id, now_timestamp

logger = logging.getLogger(__name__)

ORDER_COLUMNS = (
    "order_id, user_id, branch, total_amount, status, payment_method, delivery_address, "
    "customer_name, customer_phone, order_date, updated_at"
)
ITEM_COLUMNS = "item_id, order_id, product_id, product_name, quantity, unit_price, total_price"

UPDATABLE_COLUMNS = ("status", "payment_method", "delivery_address")

# InnoDB rolls back the whole transaction on a deadlock, not just the statement
ER_LOCK_DEADLOCK = 1213


class OrderPersistenceError(Exception):
    """A write inside the order transaction affected no rows."""


def new_order_id() -> str:
    """Millisecond timestamp plus a random suffix, so same-millisecond orders never collide."""
    return f"ord_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


class OrderRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        """Borrow a connection from the shared pool"""
        return self.db.get_connection()

    def _format_order_data(self, order_data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Helper to format datetime objects for API response."""
        if order_data:
            for key in ("order_date", "updated_at"):
                if isinstance(order_data.get(key), datetime):
                    order_data[key] = order_data[key].isoformat()
        return order_data

    def _fetch_items(self, cursor, order_id: str) -> List[Dict[str, Any]]:
        cursor.execute(f"SELECT {ITEM_COLUMNS} FROM order_items WHERE order_id = %s", (order_id,))
        return cursor.fetchall()

    # --- Order placement ---
    def create_order(self, user_id: str, branch: str, total_amount: float, payment_method: str,
                     delivery_address: str, customer_name: str, customer_phone: str,
                     items: Sequence[Dict[str, Any]]) -> str:
        """
        Persist an order header, its line items and clear the user's cart in
        one transaction, returning the generated order id.

        ``items`` are already normalized: each has product_id, product_name,
        an int quantity and a float unit_price.

        The header and every item are all-or-nothing: any failure or any
        statement that affects no rows rolls the whole transaction back and
        re-raises. Clearing the cart is best effort: it runs behind a
        savepoint, so a failed delete is undone on its own, logged, and the
        order is still committed. An error that aborted the whole
        transaction (a deadlock, for instance) is re-raised instead, since
        the header and items are gone with it.
        """
        order_id = new_order_id()
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            conn.start_transaction()
            now = now_timestamp()

            # 1. Order header
            sql_order = """
                INSERT INTO orders (order_id, user_id, branch, total_amount, status, payment_method,
                                    delivery_address, customer_name, customer_phone, order_date, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """
            cursor.execute(sql_order, (order_id, user_id, branch, total_amount, "Pending", payment_method,
                                       delivery_address, customer_name, customer_phone, now, now))
            if cursor.rowcount == 0:
                raise OrderPersistenceError(f"Failed to insert order {order_id} - no rows affected")

            # 2. Line items
            sql_item = """
                INSERT INTO order_items (item_id, order_id, product_id, product_name, quantity, unit_price, total_price)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
            """
            for item in items:
                cursor.execute(sql_item, (new_id("item"), order_id, item["product_id"], item["product_name"],
                                          item["quantity"], item["unit_price"], item["unit_price"] * item["quantity"]))
                if cursor.rowcount == 0:
                    raise OrderPersistenceError(
                        f"Failed to insert item {item['product_id']} of order {order_id} - no rows affected")

            # 3. Cart clearing
            cursor.execute("SAVEPOINT clear_cart")
            try:
                cursor.execute("DELETE FROM cart WHERE user_id = %s", (user_id,))
                cleared = cursor.rowcount
                cursor.execute("RELEASE SAVEPOINT clear_cart")
                logger.info("Cart cleared for user %s (%s rows)", user_id, cleared)
            except Exception as err:
                if getattr(err, "errno", None) == ER_LOCK_DEADLOCK or not conn.in_transaction:
                    raise
                logger.warning("Error clearing cart for user %s after order %s: %s", user_id, order_id, err)
                cursor.execute("ROLLBACK TO SAVEPOINT clear_cart")

            conn.commit()
            logger.info("Order %s created for user %s with %s items", order_id, user_id, len(items))
            return order_id

        except Exception as err:
            logger.error("Error during creation of order %s, rolling back: %s", order_id, err)
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    # --- Reads ---
    def get_order_by_id(self, order_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {ORDER_COLUMNS} FROM orders WHERE order_id = %s", (order_id,))
            order = self._format_order_data(cursor.fetchone())
            if order:
                order['items'] = self._fetch_items(cursor, order_id)
            return order
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_orders_by_user_id(self, user_id: str) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {ORDER_COLUMNS} FROM orders WHERE user_id = %s ORDER BY order_date DESC", (user_id,))
            orders = [self._format_order_data(order) for order in cursor.fetchall()]
            for order in orders:
                order['items'] = self._fetch_items(cursor, order['order_id'])
            return orders
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_all_orders(self) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {ORDER_COLUMNS} FROM orders ORDER BY order_date DESC")
            orders = [self._format_order_data(order) for order in cursor.fetchall()]
            for order in orders:
                order['items'] = self._fetch_items(cursor, order['order_id'])
            return orders
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    # --- Maintenance ---
    def update_order(self, order_id: str, fields: Dict[str, Any]) -> bool:
        """Partial update of status / payment_method / delivery_address; False when no order matched."""
        fields = {column: value for column, value in fields.items() if column in UPDATABLE_COLUMNS}
        if not fields:
            raise ValueError(f"Nothing to update; updatable fields are: {', '.join(UPDATABLE_COLUMNS)}")

        assignments = ", ".join(f"{column} = %s" for column in fields)
        values = list(fields.values()) + [now_timestamp(), order_id]
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute(f"UPDATE orders SET {assignments}, updated_at = %s WHERE order_id = %s", values)
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def delete_order(self, order_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            conn.start_transaction()
            cursor.execute("DELETE FROM order_items WHERE order_id = %s", (order_id,))
            cursor.execute("DELETE FROM orders WHERE order_id = %s", (order_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
            return deleted
        except Exception:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    # --- Reports ---
    def get_sales_lines(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        """One row per order line (or per empty order) placed between the two dates, inclusive."""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute("""
                SELECT o.order_id, o.customer_name, o.customer_phone, o.total_amount, o.status, o.order_date,
                       oi.product_name, oi.quantity, oi.unit_price
                FROM orders o
                LEFT JOIN order_items oi ON o.order_id = oi.order_id
                WHERE o.order_date >= %s AND o.order_date <= %s
                ORDER BY o.order_date DESC
            """, (start_date, end_date))
            return [self._format_order_data(row) for row in cursor.fetchall()]
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_financial_summary(self, start_date: str, end_date: str) -> Dict[str, Any]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute("""
                SELECT COALESCE(SUM(total_amount), 0) AS total_revenue,
                       COUNT(*) AS order_count,
                       COALESCE(AVG(total_amount), 0) AS avg_order_value
                FROM orders
                WHERE order_date >= %s AND order_date <= %s
            """, (start_date, end_date))
            summary = cursor.fetchone()

            cursor.execute("""
                SELECT oi.product_name, SUM(oi.quantity) AS total_quantity, SUM(oi.total_price) AS total_revenue
                FROM order_items oi
                JOIN orders o ON oi.order_id = o.order_id
                WHERE o.order_date >= %s AND o.order_date <= %s
                GROUP BY oi.product_name
                ORDER BY total_quantity DESC
                LIMIT 5
            """, (start_date, end_date))
            top_products = cursor.fetchall()

            return {
                "total_revenue": float(summary["total_revenue"]),
                "order_count": int(summary["order_count"]),
                "avg_order_value": float(summary["avg_order_value"]),
                "top_products": [
                    {
                        "product_name": row["product_name"],
                        "total_quantity": int(row["total_quantity"]),
                        "total_revenue": float(row["total_revenue"]),
                    }
                    for row in top_products
                ],
            }
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
