import sqlite3

import pytest
from fastapi.testclient import TestClient

from bookshop.core.security import create_access_token
from bookshop.database import Database
from bookshop.main import create_app
from bookshop.repositories.product_repository import ProductRepository
from bookshop.repositories.user_repository import UserRepository


class SQLiteCursor:
    """The slice of the mysql.connector cursor API the repositories use."""

    def __init__(self, conn: sqlite3.Connection, dictionary: bool = False):
        self._cursor = conn.cursor()
        self._dictionary = dictionary

    def execute(self, sql, params=()):
        self._cursor.execute(sql.replace("%s", "?"), tuple(params))

    @property
    def rowcount(self):
        return self._cursor.rowcount

    def _convert(self, row):
        if row is None or not self._dictionary:
            return row
        return {column[0]: value for column, value in zip(self._cursor.description, row)}

    def fetchone(self):
        return self._convert(self._cursor.fetchone())

    def fetchall(self):
        return [self._convert(row) for row in self._cursor.fetchall()]

    def close(self):
        self._cursor.close()


class SQLiteConnection:
    def __init__(self, path: str):
        self._conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False, timeout=10)
        self._conn.execute("PRAGMA foreign_keys = ON")

    def cursor(self, dictionary: bool = False):
        return SQLiteCursor(self._conn, dictionary=dictionary)

    @property
    def in_transaction(self):
        return self._conn.in_transaction

    def start_transaction(self):
        self._conn.execute("BEGIN")

    def commit(self):
        if self._conn.in_transaction:
            self._conn.execute("COMMIT")

    def rollback(self):
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")

    def close(self):
        self._conn.close()


class SQLiteDatabase(Database):
    """File-backed stand-in for the MySQL pool; every call opens a fresh connection."""

    def __init__(self, path):
        super().__init__(config={"database": str(path)}, pool_size=1)
        self.path = str(path)

    def connect(self):
        return self

    def get_connection(self):
        return SQLiteConnection(self.path)

    def close(self):
        pass

    def execute(self, sql, params=()):
        conn = self.get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(sql, params)
        finally:
            cursor.close()
            conn.close()

    def query(self, sql, params=()):
        conn = self.get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(sql, params)
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()

    def count(self, table, where="1 = 1", params=()):
        return self.query(f"SELECT COUNT(*) AS n FROM {table} WHERE {where}", params)[0]["n"]


@pytest.fixture
def db(tmp_path):
    database = SQLiteDatabase(tmp_path / "bookshop.db")
    database.init_schema()
    return database


@pytest.fixture
def client(db):
    app = create_app(database=db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def customer(db):
    return UserRepository(db).create_user(
        user_email="nimal@example.com",
        username="Nimal Perera",
        password="secret123",
        phone_number="0771234567",
    )


@pytest.fixture
def admin(db):
    return UserRepository(db).create_user(
        user_email="admin@example.com",
        username="Admin",
        password="admin123",
        phone_number="0110000000",
        user_type="Admin",
    )


def auth_headers(user):
    token = create_access_token(user_id=user["user_id"], user_type=user["user_type"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def books(db):
    repo = ProductRepository(db)
    return [
        repo.create_product(product_name="Madol Doova", category_name="Fiction", product_price=1500.0),
        repo.create_product(product_name="Gamperaliya", category_name="Fiction", product_price=2000.0),
        repo.create_product(product_name="Sinhala Grammar", category_name="Education", product_price=850.0),
    ]
