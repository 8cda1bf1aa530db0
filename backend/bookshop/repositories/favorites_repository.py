# backend/bookshop/repositories/favorites_repository.py

import logging
import mysql.connector
from typing import List, Dict, Any

from bookshop.database import Database, new_id, now_timestamp

logger = logging.getLogger(__name__)

class FavoritesRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        return self.db.get_connection()

    def get_favorites(self, user_id: str) -> List[Dict[str, Any]]:
        """Get all favorite products for a user"""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            query = """
            SELECT p.product_id, p.product_name, p.category_name, p.product_price, p.product_description,
                   p.stock_quantity, p.status, p.discount_percentage, p.created_at, p.updated_at
            FROM favorites f
            JOIN products p ON f.product_id = p.product_id
            WHERE f.user_id = %s
            ORDER BY f.created_at DESC
            """
            cursor.execute(query, (user_id,))
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def add_favorite(self, user_id: str, product_id: str) -> bool:
        """Add product to favorites; adding an existing favorite is a no-op"""
        if self.is_favorite(user_id, product_id):
            return True

        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("INSERT INTO favorites (favorite_id, user_id, product_id, created_at) VALUES (%s, %s, %s, %s)",
                         (new_id("fav"), user_id, product_id, now_timestamp()))
            conn.commit()
            return True
        except mysql.connector.IntegrityError:
            # Inserted concurrently by another request
            return True
        except mysql.connector.Error as err:
            conn.rollback()
            logger.error("Error adding favorite for user %s: %s", user_id, err)
            return False
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def remove_favorite(self, user_id: str, product_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM favorites WHERE user_id = %s AND product_id = %s",
                         (user_id, product_id))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error as err:
            conn.rollback()
            logger.error("Error removing favorite for user %s: %s", user_id, err)
            return False
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def is_favorite(self, user_id: str, product_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM favorites WHERE user_id = %s AND product_id = %s",
                         (user_id, product_id))
            return cursor.fetchone() is not None
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
