#!/usr/bin/env python3
"""
Populate a running bookshop API with sample categories, branches, books and
orders for demos and manual testing.

    ADMIN_EMAIL=admin@pahana.com ADMIN_PASSWORD=admin123 python -m bookshop.sample_data

Everything goes through the public HTTP API, so the admin account must
already exist (see ADMIN_EMAIL / ADMIN_PASSWORD in the server configuration).
"""

import logging
import os

import requests

from bookshop.core.logging import setup_logging

logger = logging.getLogger(__name__)

# Configuration
API_BASE = os.getenv("BOOKSHOP_API_BASE", "http://localhost:8000/api/v1")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@pahana.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

SAMPLE_CATEGORIES = [
    {"categoryName": "Fiction", "categoryDescription": "Fiction books and novels", "displayOrder": 1},
    {"categoryName": "Non-Fiction", "categoryDescription": "Non-fiction and educational books", "displayOrder": 2},
    {"categoryName": "Academic", "categoryDescription": "Academic and study materials", "displayOrder": 3},
    {"categoryName": "Children", "categoryDescription": "Children books and stories", "displayOrder": 4},
]

SAMPLE_BRANCHES = [
    {"branchName": "Main Branch", "branchAddress": "123 Main Street, Colombo",
     "branchPhone": "0112345678", "branchEmail": "main@pahana.com"},
    {"branchName": "City Branch", "branchAddress": "456 City Road, Kandy",
     "branchPhone": "0812345678", "branchEmail": "city@pahana.com"},
]

SAMPLE_BOOKS = [
    {"productName": "Sample Book 1", "categoryName": "Fiction", "productPrice": 500.0, "stockQuantity": 10,
     "productDescription": "A sample fiction book for testing"},
    {"productName": "Sample Book 2", "categoryName": "Non-Fiction", "productPrice": 500.0, "stockQuantity": 15,
     "productDescription": "A sample non-fiction book for testing"},
    {"productName": "Sample Book 3", "categoryName": "Academic", "productPrice": 1200.0, "stockQuantity": 8,
     "productDescription": "A sample academic book for testing"},
    {"productName": "Sample Book 4", "categoryName": "Children", "productPrice": 1000.0, "stockQuantity": 20,
     "productDescription": "A sample children book for testing"},
]

# (branch, payment method, address, [(book index, quantity), ...])
SAMPLE_ORDERS = [
    ("Main Branch", "Cash", "123 Test Street, Colombo", [(0, 2), (1, 1)]),
    ("City Branch", "Card", "456 Sample Road, Kandy", [(2, 1), (3, 1)]),
]


def get_admin_token(http=requests, api_base=API_BASE, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    """Get admin authentication token"""
    response = http.post(f"{api_base}/token", data={"username": email, "password": password})
    if response.status_code == 200:
        return response.json()["access_token"]
    logger.error("Failed to authenticate as %s: %s", email, response.status_code)
    return None


def _create(http, url, payload, headers):
    response = http.post(url, json=payload, headers=headers)
    if response.status_code in (200, 201):
        return response.json()
    # 409 means an earlier run already created it
    if response.status_code != 409:
        logger.warning("POST %s failed: %s - %s", url, response.status_code, response.text)
    return None


def seed(http=requests, api_base=API_BASE, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    """
    Create the sample catalogue and place the sample orders as the admin user.

    Returns a summary dict with the number of records created per kind.
    Categories and branches are unique by name, so re-running only adds
    books and orders.
    """
    token = get_admin_token(http, api_base, email, password)
    if not token:
        raise RuntimeError("Could not obtain an admin token; check ADMIN_EMAIL / ADMIN_PASSWORD")
    headers = {"Authorization": f"Bearer {token}"}
    summary = {"categories": 0, "branches": 0, "products": 0, "orders": 0}

    for category in SAMPLE_CATEGORIES:
        if _create(http, f"{api_base}/categories", category, headers):
            summary["categories"] += 1

    for branch in SAMPLE_BRANCHES:
        if _create(http, f"{api_base}/branches", branch, headers):
            summary["branches"] += 1

    books = []
    for book in SAMPLE_BOOKS:
        created = _create(http, f"{api_base}/products", book, headers)
        if created:
            books.append(created)
            summary["products"] += 1

    if len(books) != len(SAMPLE_BOOKS):
        logger.warning("Skipping sample orders: only %s of %s books were created", len(books), len(SAMPLE_BOOKS))
        return summary

    me = http.get(f"{api_base}/users/me", headers=headers).json()
    for branch, payment_method, address, lines in SAMPLE_ORDERS:
        order = {
            "userId": me["userId"],
            "branch": branch,
            "paymentMethod": payment_method,
            "deliveryAddress": address,
            "items": [
                {"productId": books[index]["productId"], "productName": books[index]["productName"],
                 "quantity": quantity, "price": books[index]["productPrice"]}
                for index, quantity in lines
            ],
        }
        if _create(http, f"{api_base}/orders", order, headers):
            summary["orders"] += 1

    return summary


def main():
    setup_logging()
    summary = seed()
    logger.info("Sample data added: %s", summary)


if __name__ == "__main__":
    main()
