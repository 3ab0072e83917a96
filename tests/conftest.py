import os

# must be set before petspa modules are imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SHOP_TIMEZONE", "America/Sao_Paulo")
os.environ.setdefault("ADMIN_EMAILS", "admin@princesaspetshop.com")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from petspa.core import day_of_week, local_today
from petspa.db import get_session
from petspa.main import app

ADMIN_EMAIL = "admin@princesaspetshop.com"
PASSWORD = "Password!23"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, email, role="client"):
    resp = client.post("/users", json={"email": email, "password": PASSWORD, "role": role})
    assert resp.status_code == 201, resp.text
    resp = client.post("/auth/login", data={"username": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return register_and_login(client, ADMIN_EMAIL, role="admin")


@pytest.fixture
def client_headers(client):
    return register_and_login(client, "tutor@example.com")


@pytest.fixture
def next_wednesday():
    """A Wednesday at least a week away, in shop time."""
    today = local_today()
    return today + timedelta(days=(3 - day_of_week(today)) % 7 + 7)
