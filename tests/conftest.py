import pytest

from marketplace.app import create_app
from marketplace.db import db

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "JWT_SECRET": "test-secret",
        "ADMIN_EMAIL": ADMIN_EMAIL,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email, role="buyer", name=None, password="secret123", **extra):
    payload = {
        "name": name or email.split("@")[0].title(),
        "email": email,
        "password": password,
        "role": role,
        "location": "Pune",
        "phone": "9876543210",
    }
    payload.update(extra)
    res = client.post("/auth/register", json=payload)
    assert res.status_code == 201, res.get_json()
    body = res.get_json()
    return body["access_token"], body["user"]


def create_listing(client, token, **fields):
    payload = {
        "title": "Broken iPhone 12",
        "category": "Phones",
        "brand": "Apple",
        "model": "iPhone 12",
        "condition": "broken",
        "price": 100,
        "location": "Pune",
        "description": "Cracked screen, board works",
        "working_parts": "logic board, camera",
        "photos": [],
    }
    payload.update(fields)
    res = client.post("/listings/", json=payload, headers=auth(token))
    assert res.status_code == 201, res.get_json()
    return res.get_json()


@pytest.fixture
def seller(client):
    return register(client, "seller@example.com", role="seller", name="Sam Seller")


@pytest.fixture
def buyer(client):
    return register(client, "buyer@example.com", role="buyer", name="Bea Buyer")


@pytest.fixture
def admin_token(client):
    res = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return res.get_json()["access_token"]
