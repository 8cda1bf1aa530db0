def test_register_creates_customer(client):
    resp = client.post("/api/v1/register", json={
        "userEmail": "kamala@example.com",
        "username": "Kamala",
        "password": "bookworm",
        "phoneNumber": "0719876543",
    })

    assert resp.status_code == 201
    body = resp.json()
    assert body["userEmail"] == "kamala@example.com"
    assert body["userType"] == "Customer"
    assert "password" not in body and "passwordHash" not in body


def test_register_duplicate_email_conflicts(client, customer):
    resp = client.post("/api/v1/register", json={
        "userEmail": customer["user_email"],
        "username": "Someone Else",
        "password": "another1",
        "phoneNumber": "0700000000",
    })

    assert resp.status_code == 409
    assert "already exists" in resp.json()["error"]


def test_register_rejects_short_password(client):
    resp = client.post("/api/v1/register", json={
        "userEmail": "short@example.com", "username": "Shorty", "password": "123", "phoneNumber": "0700000000",
    })

    assert resp.status_code == 400
    assert "password" in resp.json()["error"]


def test_login_and_read_profile(client, customer):
    resp = client.post("/api/v1/token", data={"username": "nimal@example.com", "password": "secret123"})

    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert resp.json()["token_type"] == "bearer"

    me = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["userId"] == customer["user_id"]
    assert me.json()["username"] == "Nimal Perera"


def test_login_with_wrong_password(client, customer):
    resp = client.post("/api/v1/token", data={"username": "nimal@example.com", "password": "wrong"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid email or password"}
    assert resp.headers["www-authenticate"] == "Bearer"


def test_profile_requires_token(client):
    assert client.get("/api/v1/users/me").status_code == 401
    bad = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
    assert bad.json() == {"error": "Could not validate credentials"}


def test_user_admin_requires_admin_role(client, customer_headers):
    resp = client.get("/api/v1/users", headers=customer_headers)

    assert resp.status_code == 403


def test_admin_manages_users(client, admin_headers, admin, customer):
    listing = client.get("/api/v1/users", headers=admin_headers)
    assert listing.status_code == 200
    assert {u["userEmail"] for u in listing.json()} == {"admin@example.com", "nimal@example.com"}

    created = client.post("/api/v1/users", headers=admin_headers, json={
        "userEmail": "staff@example.com", "username": "Staff One", "password": "staff123",
        "phoneNumber": "0711111111", "userType": "Staff", "branch": "Kandy",
    })
    assert created.status_code == 201
    staff_id = created.json()["userId"]
    assert created.json()["userType"] == "Staff"

    updated = client.put(f"/api/v1/users/{staff_id}", headers=admin_headers, json={"branch": "Galle"})
    assert updated.status_code == 200
    assert updated.json()["branch"] == "Galle"

    assert client.delete(f"/api/v1/users/{staff_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/v1/users/{staff_id}", headers=admin_headers).status_code == 404


def test_admin_cannot_delete_self(client, admin_headers, admin):
    resp = client.delete(f"/api/v1/users/{admin['user_id']}", headers=admin_headers)

    assert resp.status_code == 400
