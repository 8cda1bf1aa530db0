# backend/bookshop/repositories/branch_repository.py

import mysql.connector
from typing import Dict, List, Optional, Any

from bookshop.database import Database, new_id, now_timestamp

BRANCH_COLUMNS = "branch_id, branch_name, branch_address, branch_phone, branch_email, created_at"

class BranchRepository:
    def __init__(self, db: Database):
        self.db = db

    def _get_db_connection(self):
        return self.db.get_connection()

    def get_all_branches(self) -> List[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {BRANCH_COLUMNS} FROM branches ORDER BY branch_name")
            return cursor.fetchall()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def get_branch_by_id(self, branch_id: str) -> Optional[Dict[str, Any]]:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(f"SELECT {BRANCH_COLUMNS} FROM branches WHERE branch_id = %s", (branch_id,))
            return cursor.fetchone()
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def name_taken(self, branch_name: str, exclude_id: Optional[str] = None) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT branch_id FROM branches WHERE branch_name = %s", (branch_name,))
            row = cursor.fetchone()
            return row is not None and row[0] != exclude_id
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def create_branch(self, branch_name: str, branch_address: str, branch_phone: Optional[str] = None,
                      branch_email: Optional[str] = None) -> Dict[str, Any]:
        if self.name_taken(branch_name):
            raise ValueError(f"Branch '{branch_name}' already exists.")

        conn = self._get_db_connection()
        cursor = None
        branch_id = new_id("branch")
        try:
            cursor = conn.cursor()
            sql = """
                INSERT INTO branches (branch_id, branch_name, branch_address, branch_phone, branch_email, created_at)
                VALUES (%s, %s, %s, %s, %s, %s)
            """
            cursor.execute(sql, (branch_id, branch_name, branch_address, branch_phone, branch_email, now_timestamp()))
            conn.commit()
        except mysql.connector.IntegrityError as err:
            conn.rollback()
            if err.errno == 1062:
                raise ValueError(f"Branch '{branch_name}' already exists.")
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_branch_by_id(branch_id)

    def update_branch(self, branch_id: str, branch_name: str, branch_address: str,
                      branch_phone: Optional[str] = None, branch_email: Optional[str] = None) -> Optional[Dict[str, Any]]:
        if self.name_taken(branch_name, exclude_id=branch_id):
            raise ValueError(f"Branch '{branch_name}' already exists.")

        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            sql = """
                UPDATE branches SET branch_name = %s, branch_address = %s, branch_phone = %s, branch_email = %s
                WHERE branch_id = %s
            """
            cursor.execute(sql, (branch_name, branch_address, branch_phone, branch_email, branch_id))
            conn.commit()
            if cursor.rowcount == 0:
                return None
        except mysql.connector.IntegrityError as err:
            conn.rollback()
            if err.errno == 1062:
                raise ValueError(f"Branch '{branch_name}' already exists.")
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
        return self.get_branch_by_id(branch_id)

    def delete_branch(self, branch_id: str) -> bool:
        conn = self._get_db_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM branches WHERE branch_id = %s", (branch_id,))
            conn.commit()
            return cursor.rowcount > 0
        except mysql.connector.Error:
            conn.rollback()
            raise
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()
