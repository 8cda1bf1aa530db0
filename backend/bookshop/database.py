# backend/bookshop/database.py

import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

logger = logging.getLogger(__name__)

# Portable DDL: the same statements run on MySQL in production and on the
# SQLite test double. Order rows keep no FK to users/products because they
# carry denormalized snapshots that must survive missing or deleted parents.
SCHEMA: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id VARCHAR(64) PRIMARY KEY,
        user_email VARCHAR(255) NOT NULL UNIQUE,
        username VARCHAR(255) NOT NULL,
        password_hash VARCHAR(255) NOT NULL,
        phone_number VARCHAR(32),
        user_type VARCHAR(16) NOT NULL DEFAULT 'Customer',
        branch VARCHAR(255),
        created_at DATETIME NOT NULL,
        updated_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS categories (
        category_id VARCHAR(64) PRIMARY KEY,
        category_name VARCHAR(255) NOT NULL UNIQUE,
        category_description TEXT,
        status VARCHAR(16) NOT NULL DEFAULT 'Active',
        display_order INT NOT NULL DEFAULT 0,
        created_at DATETIME NOT NULL,
        updated_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        product_id VARCHAR(64) PRIMARY KEY,
        product_name VARCHAR(255) NOT NULL,
        category_name VARCHAR(255) NOT NULL,
        product_price DOUBLE NOT NULL,
        product_description TEXT,
        stock_quantity INT NOT NULL DEFAULT 0,
        status VARCHAR(16) NOT NULL DEFAULT 'Active',
        discount_percentage DOUBLE NOT NULL DEFAULT 0,
        created_at DATETIME NOT NULL,
        updated_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS branches (
        branch_id VARCHAR(64) PRIMARY KEY,
        branch_name VARCHAR(255) NOT NULL UNIQUE,
        branch_address VARCHAR(512) NOT NULL,
        branch_phone VARCHAR(32),
        branch_email VARCHAR(255),
        created_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        order_id VARCHAR(64) PRIMARY KEY,
        user_id VARCHAR(64) NOT NULL,
        branch VARCHAR(255) NOT NULL,
        total_amount DOUBLE NOT NULL,
        status VARCHAR(16) NOT NULL,
        payment_method VARCHAR(64),
        delivery_address VARCHAR(512),
        customer_name VARCHAR(255) NOT NULL,
        customer_phone VARCHAR(32) NOT NULL,
        order_date DATETIME NOT NULL,
        updated_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_items (
        item_id VARCHAR(64) PRIMARY KEY,
        order_id VARCHAR(64) NOT NULL,
        product_id VARCHAR(64) NOT NULL,
        product_name VARCHAR(255) NOT NULL,
        quantity INT NOT NULL,
        unit_price DOUBLE NOT NULL,
        total_price DOUBLE NOT NULL,
        FOREIGN KEY (order_id) REFERENCES orders(order_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS cart (
        cart_id VARCHAR(64) PRIMARY KEY,
        user_id VARCHAR(64) NOT NULL,
        product_id VARCHAR(64) NOT NULL,
        quantity INT NOT NULL,
        created_at DATETIME NOT NULL,
        UNIQUE (user_id, product_id),
        FOREIGN KEY (product_id) REFERENCES products(product_id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS favorites (
        favorite_id VARCHAR(64) PRIMARY KEY,
        user_id VARCHAR(64) NOT NULL,
        product_id VARCHAR(64) NOT NULL,
        created_at DATETIME NOT NULL,
        UNIQUE (user_id, product_id),
        FOREIGN KEY (product_id) REFERENCES products(product_id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS feedback (
        feedback_id VARCHAR(64) PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL,
        phone_number VARCHAR(32),
        subject VARCHAR(255) NOT NULL,
        message TEXT NOT NULL,
        staff_response TEXT,
        created_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS offers (
        offer_id VARCHAR(64) PRIMARY KEY,
        offer_title VARCHAR(255) NOT NULL UNIQUE,
        offer_description TEXT,
        offer_value VARCHAR(64),
        offer_image VARCHAR(512),
        discount_percentage DOUBLE NOT NULL DEFAULT 0,
        valid_from DATETIME NOT NULL,
        valid_to DATETIME NOT NULL,
        is_active BOOLEAN NOT NULL DEFAULT 1,
        created_at DATETIME NOT NULL,
        updated_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reservations (
        reservation_id VARCHAR(64) PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL,
        branch VARCHAR(255) NOT NULL,
        phone_number VARCHAR(32) NOT NULL,
        reservation_date VARCHAR(16) NOT NULL,
        reservation_time VARCHAR(16) NOT NULL,
        persons INT NOT NULL,
        request TEXT,
        status VARCHAR(16) NOT NULL,
        created_at DATETIME NOT NULL
    )
    """,
]


def get_db_config() -> Dict[str, Any]:
    """Get database configuration from environment variables"""
    return {
        "host": os.getenv("MYSQL_HOST", "127.0.0.1"),
        "port": int(os.getenv("MYSQL_PORT", "3306")),
        "user": os.getenv("MYSQL_USER", "app_user"),
        "password": os.getenv("MYSQL_PASSWORD", "changeme123"),
        "database": os.getenv("MYSQL_DATABASE", "pahana_bookshop"),
        "charset": "utf8mb4",
        "collation": "utf8mb4_unicode_ci",
        "autocommit": True,
        # rowcount reports matched rather than changed rows, so UPDATEs that
        # rewrite identical values still count as found
        "client_flags": [ClientFlag.FOUND_ROWS],
        "connection_timeout": int(os.getenv("MYSQL_CONNECT_TIMEOUT", "10")),
    }


def new_id(prefix: str) -> str:
    """Random text identifier such as ``cart_3f9c0a...``."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def now_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class Database:
    """
    Connection pool shared by every repository.

    Created once when the application starts and handed to repositories
    through FastAPI dependencies. Connections taken from the pool must be
    closed by the caller, which returns them to the pool.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, pool_size: Optional[int] = None):
        self.config = config or get_db_config()
        self.pool_size = pool_size or int(os.getenv("MYSQL_POOL_SIZE", "10"))
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    def connect(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            try:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="bookshop",
                    pool_size=self.pool_size,
                    **self.config,
                )
                logger.info("Database pool created (size=%s, host=%s)", self.pool_size, self.config.get("host"))
            except mysql.connector.Error as err:
                logger.error("Database connection error: %s", err)
                raise
        return self._pool

    def get_connection(self):
        return self.connect().get_connection()

    def init_schema(self) -> None:
        conn = self.get_connection()
        cursor = None
        try:
            cursor = conn.cursor()
            for ddl in SCHEMA:
                cursor.execute(ddl)
            conn.commit()
            logger.info("Database schema ready (%s tables)", len(SCHEMA))
        finally:
            if cursor is not None:
                cursor.close()
            conn.close()

    def close(self) -> None:
        # MySQLConnectionPool has no public shutdown; idle connections are
        # released when the pool is garbage collected.
        self._pool = None
