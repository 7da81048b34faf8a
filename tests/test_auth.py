from tests.conftest import auth, make_user

REGISTRATION = {
    "email": "Nuevo@Example.com",
    "password": "secret123",
    "first_name": "Nuevo",
    "last_name": "Prestamista",
    "identity_document": "71234567",
    "mobile": "3115550000",
    "city": "Medellin",
    "address": "Cra 45 # 10-20",
    "sex": "male",
}


def login(client, email, password="secret123"):
    return client.post("/auth/login", data={"username": email, "password": password})


def test_register_creates_inactive_lender(client):
    r = client.post("/auth/register", json=REGISTRATION)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["email"] == "nuevo@example.com"
    assert body["role"] == "lender"
    assert body["is_active"] is False
    assert body["country"] == "Colombia"
    assert body["region"] == "Antioquia"
    assert "password_hash" not in body


def test_register_requires_profile_fields(client):
    data = dict(REGISTRATION, city="")
    r = client.post("/auth/register", json=data)
    assert r.status_code == 422


def test_register_duplicate_email(client):
    assert client.post("/auth/register", json=REGISTRATION).status_code == 201
    r = client.post("/auth/register", json=REGISTRATION)
    assert r.status_code == 409


def test_inactive_user_cannot_login_until_approved(client, admin_headers):
    user_id = client.post("/auth/register", json=REGISTRATION).json()["user_id"]

    r = login(client, "nuevo@example.com")
    assert r.status_code == 403
    assert "access_token" not in r.json()

    r = client.post(f"/users/{user_id}/approve", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["is_active"] is True

    r = login(client, "nuevo@example.com")
    assert r.status_code == 200, r.text
    assert r.json()["token_type"] == "bearer"
    assert r.json()["user"]["user_id"] == user_id


def test_login_wrong_password(client, lender):
    r = login(client, lender.email, "wrong-password")
    assert r.status_code == 401


def test_login_unknown_email(client):
    assert login(client, "nadie@example.com").status_code == 401


def test_token_gives_access_to_me(client, lender):
    token = login(client, lender.email).json()["access_token"]
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == lender.email


def test_deactivated_user_loses_session(client, db, lender, lender_headers):
    assert client.get("/auth/me", headers=lender_headers).status_code == 200

    lender.is_active = False
    db.commit()

    r = client.get("/auth/me", headers=lender_headers)
    assert r.status_code == 403


def test_missing_or_garbage_token(client):
    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_update_profile(client, lender_headers):
    r = client.put(
        "/auth/me",
        json={"first_name": "Ana Maria", "last_name": "Lopez", "city": "Bello", "sex": "female"},
        headers=lender_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["first_name"] == "Ana Maria"
    assert r.json()["city"] == "Bello"
    assert r.json()["role"] == "lender"


def test_change_password(client, lender, lender_headers):
    r = client.post(
        "/auth/me/password",
        json={"current_password": "wrong", "new_password": "another123"},
        headers=lender_headers,
    )
    assert r.status_code == 400

    r = client.post(
        "/auth/me/password",
        json={"current_password": "secret123", "new_password": "another123"},
        headers=lender_headers,
    )
    assert r.status_code == 200
    assert login(client, lender.email, "another123").status_code == 200
    assert login(client, lender.email).status_code == 401


def test_operator_can_log_in(client, db):
    operator = make_user(db, "ope@example.com", role="operator")
    assert login(client, operator.email).status_code == 200
    assert client.get("/auth/me", headers=auth(operator)).json()["role"] == "operator"
