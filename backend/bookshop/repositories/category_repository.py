# backend/bookshop/repositories/category_repository.py

import mysql.connector
from typing import Dict, List, Optional, Any

from bookshop.database import Database, new_id, now_timestamp

CATEGORY_COLUMNS = "category_id, category_name, category_description, status, display_order, created_at, updated_at"

class CategoryRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        return self.db.get_connection()

    def get_all_categories(self) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {CATEGORY_COLUMNS} FROM categories ORDER BY display_order, category_name")
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_category_by_id(self, category_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {CATEGORY_COLUMNS} FROM categories WHERE category_id = %s", (category_id,))
            return cursor.fetchone()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def name_taken(self, category_name: str, exclude_id: Optional[str] = None) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT category_id FROM categories WHERE category_name = %s", (category_name,))
            row = cursor.fetchone()
            return row is not None and row[0] != exclude_id
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_category(self, category_name: str, category_description: Optional[str] = None,
                        status: str = "Active", display_order: int = 0) -> Dict[str, Any]:
        if self.name_taken(category_name):
            raise ValueError(f"Category '{category_name}' already exists.")

        conn = self._get_db_connection()
        cursor = None
        category_id = new_id("cat")
        now = now_timestamp()
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO categories (category_id, category_name, category_description, status, display_order, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
            """
            cursor.execute(sql, (category_id, category_name, category_description, status, display_order, now, now))
            conn.commit()
        except mysql.connector.IntegrityError as err:
            conn.rollback()
            if err.errno == 1062:
                raise ValueError(f"Category '{category_name}' already exists.")
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_category_by_id(category_id)

    def update_category(self, category_id: str, category_name: str, category_description: Optional[str] = None,
                        status: str = "Active", display_order: int = 0) -> Optional[Dict[str, Any]]:
        if self.name_taken(category_name, exclude_id=category_id):
            raise ValueError(f"Category '{category_name}' already exists.")

        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            sql = """
                UPDATE categories SET category_name = %s, category_description = %s, status = %s,
                                      display_order = %s, updated_at = %s
                WHERE category_id = %s
            """
            cursor.execute(sql, (category_name, category_description, status, display_order, now_timestamp(), category_id))
            conn.commit()
            if cursor.rowcount == 0:
                return None
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_category_by_id(category_id)

    def delete_category(self, category_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM categories WHERE category_id = %s", (category_id,))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
