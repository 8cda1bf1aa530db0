# backend/bookshop/repositories/offer_repository.py

import mysql.connector
from typing import Dict, List, Optional, Any
from datetime import datetime

from bookshop.database import Database, new_id, now_timestamp

OFFER_COLUMNS = (
    "offer_id, offer_title, offer_description, offer_value, offer_image, discount_percentage, "
    "valid_from, valid_to, is_active, created_at, updated_at"
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


class OfferRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        return self.db.get_connection()

    def get_all_offers(self, active_only: bool = False) -> List[Dict[str, Any]]:
        """All offers, newest first; ``active_only`` keeps enabled offers whose window covers now."""
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            if active_only:
                now = now_timestamp()
                cursor.execute(f"SELECT {OFFER_COLUMNS} FROM offers WHERE is_active = %s "
                               "AND valid_from <= %s AND valid_to >= %s ORDER BY created_at DESC",
                               (True, now, now))
            else:
                cursor.execute(f"SELECT {OFFER_COLUMNS} FROM offers ORDER BY created_at DESC")
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_offer_by_id(self, offer_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {OFFER_COLUMNS} FROM offers WHERE offer_id = %s", (offer_id,))
            return cursor.fetchone()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def title_taken(self, offer_title: str, exclude_id: Optional[str] = None) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT offer_id FROM offers WHERE offer_title = %s", (offer_title,))
            row = cursor.fetchone()
            return row is not None and row[0] != exclude_id
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_offer(self, offer_title: str, offer_description: str, offer_value: str, valid_from: datetime,
                     valid_to: datetime, offer_image: Optional[str] = None, discount_percentage: float = 0.0,
                     is_active: bool = True) -> Dict[str, Any]:
        if self.title_taken(offer_title):
            raise ValueError(f"Offer '{offer_title}' already exists.")

        offer_id = new_id("off")
        now = now_timestamp()
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO offers (offer_id, offer_title, offer_description, offer_value, offer_image,
                                    discount_percentage, valid_from, valid_to, is_active, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """
            cursor.execute(sql, (offer_id, offer_title, offer_description, offer_value, offer_image,
                                 discount_percentage, _timestamp(valid_from), _timestamp(valid_to),
                                 is_active, now, now))
            conn.commit()
        except mysql.connector.IntegrityError as err:
            conn.rollback()
            if err.errno == 1062:
                raise ValueError(f"Offer '{offer_title}' already exists.")
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_offer_by_id(offer_id)

    def update_offer(self, offer_id: str, offer_title: str, offer_description: str, offer_value: str,
                     valid_from: datetime, valid_to: datetime, offer_image: Optional[str] = None,
                     discount_percentage: float = 0.0, is_active: bool = True) -> Optional[Dict[str, Any]]:
        if self.title_taken(offer_title, exclude_id=offer_id):
            raise ValueError(f"Offer '{offer_title}' already exists.")

        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            sql = """
                UPDATE offers SET offer_title = %s, offer_description = %s, offer_value = %s, offer_image = %s,
                                  discount_percentage = %s, valid_from = %s, valid_to = %s, is_active = %s,
                                  updated_at = %s
                WHERE offer_id = %s
            """
            cursor.execute(sql, (offer_title, offer_description, offer_value, offer_image, discount_percentage,
                                 _timestamp(valid_from), _timestamp(valid_to), is_active, now_timestamp(),
                                 offer_id))
            conn.commit()
            if cursor.rowcount == 0:
                return None
        except mysql.connector.IntegrityError as err:
            conn.rollback()
            if err.errno == 1062:
                raise ValueError(f"Offer '{offer_title}' already exists.")
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_offer_by_id(offer_id)

    def delete_offer(self, offer_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM offers WHERE offer_id = %s", (offer_id,))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
