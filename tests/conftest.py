"""
Pytest fixtures for the cleanstock API tests.

Provides an in-memory database per test, a test client wired to it,
and authenticated headers.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cleanstock.database import Base, get_db
from cleanstock.main import app
from cleanstock.models.product import ProductType
from cleanstock.schemas.product import ProductCreate
from cleanstock.services import product_service


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email="ana@example.com", password="abc123", name="Ana", role="operator"):
    return client.post(
        "/api/auth/register",
        json={"name": name, "role": role, "email": email, "password": password},
    )


def login(client, email="ana@example.com", password="abc123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def auth_headers(client):
    assert register(client).status_code == 201
    resp = login(client)
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def create_product_api(client, headers, **overrides):
    payload = {
        "name": "Detergente Neutro",
        "type": "finished_good",
        "capacity": "500ml",
        "unit": "un",
        "current_stock": 100,
        "min_stock": 10,
    }
    payload.update(overrides)
    resp = client.post("/api/products", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def product(client, auth_headers):
    """A finished good with 100 units in stock and a minimum of 10."""
    return create_product_api(client, auth_headers)


@pytest.fixture
def make_product(db_session):
    def _make(name="Hipoclorito", current_stock=0, min_stock=0, type=ProductType.RAW_MATERIAL):
        return product_service.create_product(
            db_session,
            ProductCreate(name=name, type=type, unit="l", current_stock=current_stock, min_stock=min_stock),
        )

    return _make
