from bookshop.repositories.cart_repository import CartRepository


def order_payload(user_id, **overrides):
    payload = {
        "userId": user_id,
        "userEmail": "nimal@example.com",
        "items": [
            {"productId": "prod_a", "productName": "Madol Doova", "quantity": 2, "price": 1500},
            {"productId": "prod_b", "productName": "Gamperaliya", "quantity": 1, "price": 2000},
        ],
        "branch": "Colombo",
        "paymentMethod": "Cash on Delivery",
        "deliveryAddress": "12 Galle Road, Colombo 03",
    }
    payload.update(overrides)
    return payload


def test_create_order_persists_header_and_items(client, db, customer):
    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Order created successfully"
    assert body["orderId"].startswith("ord_")
    assert body["finalAmount"] == 5000.0

    headers = db.query("SELECT * FROM orders WHERE order_id = %s", (body["orderId"],))
    assert len(headers) == 1
    assert headers[0]["status"] == "Pending"
    assert headers[0]["customer_name"] == "Nimal Perera"
    assert headers[0]["customer_phone"] == "0771234567"
    assert headers[0]["total_amount"] == 5000.0

    items = db.query("SELECT * FROM order_items WHERE order_id = %s ORDER BY product_id", (body["orderId"],))
    assert [(i["product_id"], i["quantity"], i["unit_price"], i["total_price"]) for i in items] == [
        ("prod_a", 2, 1500.0, 3000.0),
        ("prod_b", 1, 2000.0, 2000.0),
    ]
    assert len({i["item_id"] for i in items}) == 2


def test_total_excludes_tax_delivery_and_discount(client, customer):
    payload = order_payload(customer["user_id"], taxAmount=400, deliveryCharges=250, discountAmount="100")
    resp = client.post("/api/v1/orders", json=payload)

    assert resp.status_code == 201
    assert resp.json()["finalAmount"] == 5000.0


def test_supplied_final_amount_is_stored_verbatim(client, db, customer):
    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], finalAmount="5450.75"))

    assert resp.status_code == 201
    assert resp.json()["finalAmount"] == 5450.75
    header = db.query("SELECT total_amount FROM orders WHERE order_id = %s", (resp.json()["orderId"],))[0]
    assert header["total_amount"] == 5450.75


def test_identical_payloads_get_distinct_ids(client, customer):
    first = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))
    second = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    assert first.status_code == second.status_code == 201
    assert first.json()["orderId"] != second.json()["orderId"]


def test_unknown_user_gets_placeholder_identity(client, db):
    resp = client.post("/api/v1/orders", json=order_payload("user_missing"))

    assert resp.status_code == 201
    header = db.query("SELECT customer_name, customer_phone FROM orders WHERE order_id = %s",
                      (resp.json()["orderId"],))[0]
    assert header == {"customer_name": "Customer", "customer_phone": "N/A"}


def test_missing_required_field_is_rejected_without_writes(client, db, customer):
    payload = order_payload(customer["user_id"])
    del payload["branch"]

    resp = client.post("/api/v1/orders", json=payload)

    assert resp.status_code == 400
    assert "branch" in resp.json()["error"]
    assert db.count("orders") == 0
    assert db.count("order_items") == 0


def test_null_required_field_is_rejected(client, db, customer):
    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], deliveryAddress=None))

    assert resp.status_code == 400
    assert db.count("orders") == 0


def test_non_finite_final_amount_is_rejected_without_writes(client, db, customer):
    for value in ("NaN", "Infinity", "-Infinity"):
        resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], finalAmount=value))

        assert resp.status_code == 400
        assert "finalAmount" in resp.json()["error"]
    assert db.count("orders") == 0
    assert db.count("order_items") == 0


def test_negative_amounts_are_rejected(client, db, customer):
    for field in ("taxAmount", "deliveryCharges", "discountAmount", "finalAmount"):
        resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], **{field: -1}))

        assert resp.status_code == 400
        assert field in resp.json()["error"]
    assert db.count("orders") == 0


def test_zero_final_amount_is_accepted(client, customer):
    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], finalAmount=0))

    assert resp.status_code == 201
    assert resp.json()["finalAmount"] == 0.0


def test_non_numeric_quantity_item_is_skipped(client, db, customer):
    items = [
        {"productId": "prod_a", "productName": "Madol Doova", "quantity": "two", "price": 1500},
        {"productId": "prod_b", "productName": "Gamperaliya", "quantity": "1", "price": "2000"},
    ]
    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], items=items))

    assert resp.status_code == 201
    assert resp.json()["finalAmount"] == 2000.0
    rows = db.query("SELECT product_id FROM order_items WHERE order_id = %s", (resp.json()["orderId"],))
    assert [r["product_id"] for r in rows] == ["prod_b"]


def test_order_with_no_valid_items_is_stored_empty(client, db, customer):
    items = [{"productId": "prod_a", "productName": "Madol Doova", "quantity": 2.5, "price": 1500}]
    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], items=items))

    assert resp.status_code == 201
    assert resp.json()["finalAmount"] == 0.0
    assert db.count("orders") == 1
    assert db.count("order_items") == 0


def test_order_clears_the_users_cart(client, db, customer, books):
    cart = CartRepository(db)
    cart.add_to_cart(customer["user_id"], books[0]["product_id"], 2)
    cart.add_to_cart(customer["user_id"], books[1]["product_id"], 1)
    cart.add_to_cart("user_other", books[0]["product_id"], 1)

    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    assert resp.status_code == 201
    assert db.count("cart", "user_id = %s", (customer["user_id"],)) == 0
    assert db.count("cart", "user_id = %s", ("user_other",)) == 1


def test_failing_item_rolls_back_whole_order(client, db, customer, books):
    CartRepository(db).add_to_cart(customer["user_id"], books[0]["product_id"], 1)
    db.execute("""
        CREATE TRIGGER reject_item BEFORE INSERT ON order_items
        WHEN NEW.product_id = 'prod_bad'
        BEGIN SELECT RAISE(ABORT, 'item rejected'); END
    """)
    items = [
        {"productId": "prod_a", "productName": "Madol Doova", "quantity": 1, "price": 1500},
        {"productId": "prod_bad", "productName": "Broken", "quantity": 1, "price": 10},
        {"productId": "prod_b", "productName": "Gamperaliya", "quantity": 1, "price": 2000},
    ]

    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"], items=items))

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Failed to create order")
    assert db.count("orders") == 0
    assert db.count("order_items") == 0
    assert db.count("cart", "user_id = %s", (customer["user_id"],)) == 1


def test_failing_header_insert_rolls_back(client, db, customer):
    db.execute("""
        CREATE TRIGGER reject_order BEFORE INSERT ON orders
        BEGIN SELECT RAISE(ABORT, 'orders are closed'); END
    """)

    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    assert resp.status_code == 500
    assert "orders are closed" in resp.json()["error"]
    assert db.count("order_items") == 0


def test_cart_clearing_failure_keeps_the_order(client, db, customer, books):
    CartRepository(db).add_to_cart(customer["user_id"], books[0]["product_id"], 1)
    db.execute("""
        CREATE TRIGGER cart_locked BEFORE DELETE ON cart
        BEGIN SELECT RAISE(ABORT, 'cart is locked'); END
    """)

    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    assert resp.status_code == 201
    assert db.count("orders") == 1
    assert db.count("order_items") == 2
    assert db.count("cart", "user_id = %s", (customer["user_id"],)) == 1


def test_cart_clearing_that_aborts_the_transaction_fails_the_order(client, db, customer, books):
    CartRepository(db).add_to_cart(customer["user_id"], books[0]["product_id"], 1)
    # a deadlock victim loses the whole transaction, not only the failed statement
    db.execute("""
        CREATE TRIGGER cart_deadlock BEFORE DELETE ON cart
        BEGIN SELECT RAISE(ROLLBACK, 'Deadlock found when trying to get lock'); END
    """)

    resp = client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Failed to create order")
    assert db.count("orders") == 0
    assert db.count("order_items") == 0
    assert db.count("cart", "user_id = %s", (customer["user_id"],)) == 1


def test_get_order_returns_header_with_items(client, customer):
    order_id = client.post("/api/v1/orders", json=order_payload(customer["user_id"])).json()["orderId"]

    resp = client.get(f"/api/v1/orders/{order_id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["orderId"] == order_id
    assert body["customerName"] == "Nimal Perera"
    assert body["totalAmount"] == 5000.0
    assert sorted(item["productName"] for item in body["items"]) == ["Gamperaliya", "Madol Doova"]


def test_get_unknown_order_is_404(client):
    resp = client.get("/api/v1/orders/ord_nope")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Order not found"}


def test_list_orders_for_user(client, customer):
    client.post("/api/v1/orders", json=order_payload(customer["user_id"]))
    client.post("/api/v1/orders", json=order_payload("user_other"))

    mine = client.get("/api/v1/orders", params={"userId": customer["user_id"]}).json()
    everyone = client.get("/api/v1/orders").json()

    assert len(mine) == 1
    assert mine[0]["userId"] == customer["user_id"]
    assert len(mine[0]["items"]) == 2
    assert len(everyone) == 2


def test_admin_updates_order_status(client, admin_headers, customer):
    order_id = client.post("/api/v1/orders", json=order_payload(customer["user_id"])).json()["orderId"]

    resp = client.put(f"/api/v1/orders/{order_id}", json={"status": "Confirmed"}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["status"] == "Confirmed"


def test_update_order_validation(client, admin_headers, customer):
    order_id = client.post("/api/v1/orders", json=order_payload(customer["user_id"])).json()["orderId"]

    assert client.put(f"/api/v1/orders/{order_id}", json={"status": "Lost"}, headers=admin_headers).status_code == 400
    assert client.put(f"/api/v1/orders/{order_id}", json={}, headers=admin_headers).status_code == 400
    assert client.put("/api/v1/orders/ord_nope", json={"status": "Ready"}, headers=admin_headers).status_code == 404


def test_update_order_requires_admin(client, customer_headers, customer):
    order_id = client.post("/api/v1/orders", json=order_payload(customer["user_id"])).json()["orderId"]

    resp = client.put(f"/api/v1/orders/{order_id}", json={"status": "Cancelled"}, headers=customer_headers)

    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin access required"}


def test_admin_deletes_order_and_items(client, db, admin_headers, customer):
    order_id = client.post("/api/v1/orders", json=order_payload(customer["user_id"])).json()["orderId"]

    resp = client.delete(f"/api/v1/orders/{order_id}", headers=admin_headers)

    assert resp.status_code == 200
    assert db.count("orders") == 0
    assert db.count("order_items") == 0
    assert client.delete(f"/api/v1/orders/{order_id}", headers=admin_headers).status_code == 404


def test_sales_report(client, admin_headers, customer):
    client.post("/api/v1/orders", json=order_payload(customer["user_id"]))
    client.post("/api/v1/orders", json=order_payload("user_other", finalAmount=1000))

    resp = client.get("/api/v1/orders/sales-report",
                      params={"startDate": "2000-01-01", "endDate": "2999-12-31"}, headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["reportType"] == "Sales Report"
    assert body["totalOrders"] == 2
    assert body["totalRevenue"] == 6000.0
    assert len(body["salesData"]) == 4


def test_report_requires_dates(client, admin_headers):
    resp = client.get("/api/v1/orders/sales-report", params={"startDate": "2024-01-01"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json() == {"error": "startDate and endDate are required"}


def test_financial_report(client, admin_headers, customer):
    client.post("/api/v1/orders", json=order_payload(customer["user_id"]))
    client.post("/api/v1/orders", json=order_payload(customer["user_id"]))

    resp = client.get("/api/v1/orders/financial-report",
                      params={"startDate": "2000-01-01", "endDate": "2999-12-31"}, headers=admin_headers)

    assert resp.status_code == 200
    data = resp.json()["financialData"]
    assert data["totalRevenue"] == 10000.0
    assert data["orderCount"] == 2
    assert data["avgOrderValue"] == 5000.0
    assert data["topProducts"][0] == {"productName": "Madol Doova", "totalQuantity": 4, "totalRevenue": 6000.0}


def test_financial_report_with_no_orders(client, admin_headers):
    resp = client.get("/api/v1/orders/financial-report",
                      params={"startDate": "2000-01-01", "endDate": "2000-01-02"}, headers=admin_headers)

    assert resp.status_code == 200
    data = resp.json()["financialData"]
    assert data == {"totalRevenue": 0.0, "orderCount": 0, "avgOrderValue": 0.0, "topProducts": []}
