# backend/bookshop/repositories/feedback_repository.py

import mysql.connector
from typing import Dict, List, Optional, Any

from bookshop.database import Database, new_id, now_timestamp

FEEDBACK_COLUMNS = "feedback_id, name, email, phone_number, subject, message, staff_response, created_at"

class FeedbackRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        return self.db.get_connection()

    def get_all_feedback(self) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {FEEDBACK_COLUMNS} FROM feedback ORDER BY created_at DESC")
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_feedback_by_id(self, feedback_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {FEEDBACK_COLUMNS} FROM feedback WHERE feedback_id = %s", (feedback_id,))
            return cursor.fetchone()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_feedback(self, name: str, email: str, subject: str, message: str,
                        phone_number: Optional[str] = None) -> Dict[str, Any]:
        conn = self._get_db_connection()
        cursor = None
        feedback_id = new_id("fb")
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO feedback (feedback_id, name, email, phone_number, subject, message, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
            """
            cursor.execute(sql, (feedback_id, name, email, phone_number, subject, message, now_timestamp()))
            conn.commit()
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_feedback_by_id(feedback_id)

    def respond(self, feedback_id: str, staff_response: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("UPDATE feedback SET staff_response = %s WHERE feedback_id = %s", (staff_response, feedback_id))
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
        return self.get_feedback_by_id(feedback_id)
