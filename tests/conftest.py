import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import prestamistas.models  # noqa: F401
from main import app
from prestamistas.core.security import create_access_token, hash_password
from prestamistas.initial_data import seed_settings
from prestamistas.models.user_model import User
from prestamistas.utils.database import Base, get_db

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    seed_settings(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with_client = TestClient(app)
    yield with_client
    app.dependency_overrides.clear()


def make_user(db, email, role="lender", is_active=True, password="secret123"):
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=email.split("@")[0].title(),
        last_name="Test",
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth(user):
    return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}


@pytest.fixture()
def admin(db):
    return make_user(db, "admin@example.com", role="admin")


@pytest.fixture()
def lender(db):
    return make_user(db, "ana@example.com")


@pytest.fixture()
def other_lender(db):
    return make_user(db, "bruno@example.com")


@pytest.fixture()
def admin_headers(admin):
    return auth(admin)


@pytest.fixture()
def lender_headers(lender):
    return auth(lender)


@pytest.fixture()
def other_headers(other_lender):
    return auth(other_lender)


def customer_payload(document="1001", **overrides):
    data = {
        "identity_document": document,
        "first_name": "Carla",
        "last_name": "Gomez",
        "phone": "3001234567",
        "address": "Calle 10 # 20-30",
    }
    data.update(overrides)
    return data


def loan_payload(customer_id, **overrides):
    data = {
        "customer_id": customer_id,
        "principal_amount": 1000,
        "interest_rate": 5,
        "interest_type": "simple",
        "term_days": 30,
        "start_date": "2024-03-01",
        "payment_frequency": "weekly",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def create_customer(client):
    def _create(headers, document="1001", **overrides):
        r = client.post("/customers", json=customer_payload(document, **overrides), headers=headers)
        assert r.status_code == 201, r.text
        return r.json()
    return _create


@pytest.fixture()
def create_loan(client):
    def _create(headers, customer_id, **overrides):
        r = client.post("/loans", json=loan_payload(customer_id, **overrides), headers=headers)
        assert r.status_code == 201, r.text
        return r.json()
    return _create
