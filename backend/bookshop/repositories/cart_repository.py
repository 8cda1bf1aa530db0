# backend/bookshop/repositories/cart_repository.py

import logging
import mysql.connector
from typing import List, Dict, Any

from bookshop.database import Database, new_id, now_timestamp

logger = logging.getLogger(__name__)

class CartRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        """Borrow a connection from the shared pool"""
        return self.db.get_connection()

    def get_cart_items(self, user_id: str) -> List[Dict[str, Any]]:
        """Get all cart lines for a user, joined with current product data"""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            query = """
            SELECT c.product_id, c.quantity, p.product_name, p.product_price, p.product_description
            FROM cart c
            JOIN products p ON c.product_id = p.product_id
            WHERE c.user_id = %s
            ORDER BY c.created_at DESC
            """
            cursor.execute(query, (user_id,))
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def add_to_cart(self, user_id: str, product_id: str, quantity: int) -> bool:
        """Add quantity to an existing line, or create the line"""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT quantity FROM cart WHERE user_id = %s AND product_id = %s",
                         (user_id, product_id))
            existing_item = cursor.fetchone()

            if existing_item:
                cursor.execute("UPDATE cart SET quantity = %s, created_at = %s WHERE user_id = %s AND product_id = %s",
                             (existing_item[0] + quantity, now_timestamp(), user_id, product_id))
            else:
                cursor.execute("INSERT INTO cart (cart_id, user_id, product_id, quantity, created_at) VALUES (%s, %s, %s, %s, %s)",
                             (new_id("cart"), user_id, product_id, quantity, now_timestamp()))

            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error as err:
            conn.rollback()
            logger.error("Error adding cart item for user %s: %s", user_id, err)
            return False
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> bool:
        """Overwrite the quantity of a line, creating it if needed"""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("UPDATE cart SET quantity = %s WHERE user_id = %s AND product_id = %s",
                         (quantity, user_id, product_id))
            if cursor.rowcount == 0:
                cursor.execute("INSERT INTO cart (cart_id, user_id, product_id, quantity, created_at) VALUES (%s, %s, %s, %s, %s)",
                             (new_id("cart"), user_id, product_id, quantity, now_timestamp()))
            conn.commit()
            return True
        except mysql.connector.Error as err:
            conn.rollback()
            logger.error("Error updating cart item for user %s: %s", user_id, err)
            return False
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def remove_cart_item(self, user_id: str, product_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM cart WHERE user_id = %s AND product_id = %s",
                         (user_id, product_id))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error as err:
            conn.rollback()
            logger.error("Error removing cart item for user %s: %s", user_id, err)
            return False
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def clear_cart(self, user_id: str) -> int:
        """Clear all items from user's cart, returning the number of lines removed"""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM cart WHERE user_id = %s", (user_id,))
            conn.commit()
            return cursor.rowcount
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_cart_count(self, user_id: str) -> int:
        """Get total number of units in cart"""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT SUM(quantity) FROM cart WHERE user_id = %s", (user_id,))
            result = cursor.fetchone()
            return int(result[0]) if result and result[0] else 0
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
