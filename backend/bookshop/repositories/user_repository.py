# backend/bookshop/repositories/user_repository.py

import logging
import mysql.connector
from typing import Dict, Any, Optional, List
from datetime import datetime

from bookshop.core.security import get_password_hash
from bookshop.database import Database, new_id, now_timestamp

logger = logging.getLogger(__name__)

USER_COLUMNS = "user_id, user_email, username, phone_number, user_type, branch, created_at, updated_at"

class UserRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        """Borrow a connection from the shared pool"""
        return self.db.get_connection()

    def _format_user_data(self, user_data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Helper to format datetime objects for API response."""
        if user_data:
            for key in ("created_at", "updated_at"):
                if isinstance(user_data.get(key), datetime):
                    user_data[key] = user_data[key].isoformat()
        return user_data

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Includes password_hash; callers must drop it before returning to the API."""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE user_email = %s", (email,))
            return self._format_user_data(cursor.fetchone())
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE user_id = %s", (user_id,))
            return self._format_user_data(cursor.fetchone())
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_contact(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Display name and phone number used to denormalize onto orders."""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute("SELECT username, phone_number FROM users WHERE user_id = %s", (user_id,))
            return cursor.fetchone()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def email_exists(self, email: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM users WHERE user_email = %s", (email,))
            return cursor.fetchone() is not None
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_user(self, user_email: str, username: str, password: str, phone_number: Optional[str] = None,
                    user_type: str = "Customer", branch: Optional[str] = None) -> Dict[str, Any]:
        if self.email_exists(user_email):
            raise ValueError(f"User with email '{user_email}' already exists.")

        conn = self._get_db_connection()
        cursor = None
        user_id = new_id("user")
        now = now_timestamp()
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO users (user_id, user_email, username, password_hash, phone_number, user_type, branch, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """
            values = (user_id, user_email, username, get_password_hash(password), phone_number, user_type, branch, now, now)
            cursor.execute(sql, values)
            conn.commit()
        except mysql.connector.IntegrityError as err:
            conn.rollback()
            if err.errno == 1062: # Duplicate entry, lost a race with a concurrent registration
                raise ValueError(f"User with email '{user_email}' already exists.")
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

        logger.info("Created user %s (%s)", user_id, user_type)
        new_user = self.get_user_by_id(user_id)
        if not new_user:
            raise Exception("Failed to retrieve new user after creation.")
        return new_user

    def get_all_users(self) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC")
            return [self._format_user_data(user) for user in cursor.fetchall()]
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Partial update; ``fields`` keys are column names already whitelisted by the caller."""
        if not fields:
            return self.get_user_by_id(user_id)

        assignments = ", ".join(f"{column} = %s" for column in fields)
        values = list(fields.values()) + [now_timestamp(), user_id]
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute(f"UPDATE users SET {assignments}, updated_at = %s WHERE user_id = %s", values)
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
        return self.get_user_by_id(user_id)

    def delete_user(self, user_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM users WHERE user_id = %s", (user_id,))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
