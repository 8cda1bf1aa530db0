# backend/bookshop/repositories/reservation_repository.py

import mysql.connector
from typing import Dict, List, Optional, Any

from bookshop.database import Database, new_id, now_timestamp

RESERVATION_COLUMNS = (
    "reservation_id, name, email, branch, phone_number, reservation_date, reservation_time, "
    "persons, request, status, created_at"
)

class ReservationRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        return self.db.get_connection()

    def get_reservations(self, branch: Optional[str] = None) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            if branch:
                cursor.execute(f"SELECT {RESERVATION_COLUMNS} FROM reservations WHERE branch = %s "
                               "ORDER BY reservation_date, reservation_time", (branch,))
            else:
                cursor.execute(f"SELECT {RESERVATION_COLUMNS} FROM reservations ORDER BY reservation_date, reservation_time")
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_reservation_by_id(self, reservation_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {RESERVATION_COLUMNS} FROM reservations WHERE reservation_id = %s", (reservation_id,))
            return cursor.fetchone()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_reservation(self, name: str, email: str, branch: str, phone_number: str, reservation_date: str,
                           reservation_time: str, persons: int, request: Optional[str] = None) -> Dict[str, Any]:
        conn = self._get_db_connection()
        cursor = None
        reservation_id = new_id("res")
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO reservations (reservation_id, name, email, branch, phone_number, reservation_date,
                                          reservation_time, persons, request, status, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """
            values = (reservation_id, name, email, branch, phone_number, reservation_date, reservation_time,
                      persons, request, "Pending", now_timestamp())
            cursor.execute(sql, values)
            conn.commit()
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_reservation_by_id(reservation_id)

    def update_status(self, reservation_id: str, status: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("UPDATE reservations SET status = %s WHERE reservation_id = %s", (status, reservation_id))
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
        return self.get_reservation_by_id(reservation_id)
