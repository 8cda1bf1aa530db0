# backend/bookshop/repositories/product_repository.py

import mysql.connector
from typing import Dict, List, Optional, Any
from datetime import datetime

from bookshop.database import Database, new_id, now_timestamp

PRODUCT_COLUMNS = (
    "product_id, product_name, category_name, product_price, product_description, "
    "stock_quantity, status, discount_percentage, created_at, updated_at"
)

class ProductRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        """Borrow a connection from the shared pool"""
        return self.db.get_connection()

    def _format_product_data(self, product: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if product:
            if isinstance(product.get('created_at'), datetime):
                product['created_at'] = product['created_at'].isoformat()
            if isinstance(product.get('updated_at'), datetime):
                product['updated_at'] = product['updated_at'].isoformat()
        return product

    def get_all_products(self, category_name: Optional[str] = None) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            if category_name:
                cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM products WHERE category_name = %s ORDER BY product_name", (category_name,))
            else:
                cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY product_name")
            return [self._format_product_data(product) for product in cursor.fetchall()]
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_product_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM products WHERE product_id = %s", (product_id,))
            return self._format_product_data(cursor.fetchone())
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def product_exists(self, product_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM products WHERE product_id = %s", (product_id,))
            return cursor.fetchone() is not None
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_product(self, product_name: str, category_name: str, product_price: float,
                       product_description: Optional[str] = None, stock_quantity: int = 0,
                       status: str = "Active", discount_percentage: float = 0.0) -> Dict[str, Any]:
        conn = self._get_db_connection()
        cursor = None
        product_id = new_id("prod")
        now = now_timestamp()
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO products (product_id, product_name, category_name, product_price, product_description,
                                      stock_quantity, status, discount_percentage, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """
            values = (product_id, product_name, category_name, product_price, product_description,
                      stock_quantity, status, discount_percentage, now, now)
            cursor.execute(sql, values)
            conn.commit()
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_product_by_id(product_id)

    def update_product(self, product_id: str, product_name: str, category_name: str, product_price: float,
                       product_description: Optional[str] = None, stock_quantity: int = 0,
                       status: str = "Active", discount_percentage: float = 0.0) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            sql = """
                UPDATE products SET product_name = %s, category_name = %s, product_price = %s, product_description = %s,
                                    stock_quantity = %s, status = %s, discount_percentage = %s, updated_at = %s
                WHERE product_id = %s
            """
            values = (product_name, category_name, product_price, product_description, stock_quantity,
                      status, discount_percentage, now_timestamp(), product_id)
            cursor.execute(sql, values)
            conn.commit()

            if cursor.rowcount == 0:
                return None # Product not found
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_product_by_id(product_id)

    def delete_product(self, product_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM products WHERE product_id = %s", (product_id,))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
