"""Pytest configuration and fixtures."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Set test environment
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:5000")

from fastapi.testclient import TestClient

from core.db import Base
from core.models import User
from api.app import app
from api.deps import get_db
from domain.auth import AuthService

ADMIN_TOKEN = os.environ["ADMIN_TOKEN"]
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}
PASSWORD = "secret123"


def cp_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "role": "cp",
        "fullName": "Rahul Sharma",
        "companyName": "Sharma Realty",
        "email": "rahul@example.com",
        "phone": "9876543210",
        "city": "Mumbai",
        "password": PASSWORD,
    }
    payload.update(overrides)
    return payload


def developer_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "role": "developer",
        "companyName": "Lodha Group",
        "contactPerson": "Abhishek Lodha",
        "email": "dev@lodha.example.com",
        "phone": "9999888877",
        "city": "Mumbai",
        "password": PASSWORD,
        "gstNumber": "27AABCL1234F1Z5",
        "isReraRegistered": True,
        "reraNumber": "P51700012345",
    }
    payload.update(overrides)
    return payload


def buyer_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "role": "buyer",
        "fullName": "Meera Iyer",
        "email": "meera@example.com",
        "phone": "9812345678",
        "city": "Chennai",
        "password": PASSWORD,
        "budget": "5000000",
    }
    payload.update(overrides)
    return payload


@dataclass
class Actor:
    """A signed-in test client together with the user it registered."""

    client: TestClient
    user: Dict[str, Any]

    @property
    def id(self) -> str:
        return self.user["id"]


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


@pytest.fixture(scope="session")
def tables(engine):
    """Create all tables for testing."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(engine, tables) -> Session:
    """
    Returns a SQLAlchemy session for testing.

    Each test gets a fresh transaction that is rolled back after the test.
    """
    connection = engine.connect()
    transaction = connection.begin()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=connection)
    session = SessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
def client_factory(db_session):
    """Build independent TestClients (separate cookie jars) over one session."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def make() -> TestClient:
        c = TestClient(app)
        clients.append(c)
        return c

    yield make

    for c in clients:
        c.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()


@pytest.fixture
def register(client_factory):
    """Register a user on a fresh client and return the signed-in Actor."""
    def _register(payload: Dict[str, Any]) -> Actor:
        c = client_factory()
        resp = c.post("/api/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        return Actor(client=c, user=resp.json())

    return _register


@pytest.fixture
def cp(register) -> Actor:
    return register(cp_payload())


@pytest.fixture
def other_cp(register) -> Actor:
    return register(cp_payload(
        fullName="Priya Patel",
        companyName="Patel Properties",
        email="priya@example.com",
        phone="9123456789",
        city="Pune",
    ))


@pytest.fixture
def developer(register) -> Actor:
    return register(developer_payload())


@pytest.fixture
def other_developer(register) -> Actor:
    return register(developer_payload(
        companyName="Godrej Properties",
        contactPerson="Pirojsha Godrej",
        email="dev@godrej.example.com",
        phone="9988776655",
        gstNumber="27AABCG5678H1Z3",
        reraNumber="P52900067890",
    ))


@pytest.fixture
def buyer(register) -> Actor:
    return register(buyer_payload())


@pytest.fixture
def project(developer) -> Dict[str, Any]:
    """An active project owned by ``developer``."""
    resp = developer.client.post("/api/projects", json={
        "name": "Lodha Park Side",
        "description": "Sea-facing 2 and 3 BHK apartments",
        "location": "Worli",
        "city": "Mumbai",
        "projectType": "residential",
        "status": "under_construction",
        "priceMin": 35000000,
        "priceMax": 70000000,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def lead_payload(project):
    def _payload(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "projectId": project["id"],
            "customerName": "Vikram Mehta",
            "customerPhone": "9112233445",
            "customerEmail": "vikram@example.com",
            "customerCity": "Mumbai",
            "budget": "4 Cr",
            "source": "meta_ads",
        }
        payload.update(overrides)
        return payload

    return _payload


# ---------------------------------------------------------------------------
# Service-level users
# ---------------------------------------------------------------------------

@pytest.fixture
def cp_user(db_session) -> User:
    """A channel partner created through the service layer."""
    return AuthService(db_session).register({
        "role": "cp",
        "full_name": "Service CP",
        "company_name": "Service Realty",
        "email": "service.cp@example.com",
        "phone": "9000000001",
        "city": "Mumbai",
        "password": PASSWORD,
    })


@pytest.fixture
def developer_user(db_session) -> User:
    return AuthService(db_session).register({
        "role": "developer",
        "company_name": "Service Developers",
        "contact_person": "Service Owner",
        "email": "service.dev@example.com",
        "phone": "9000000002",
        "city": "Pune",
        "password": PASSWORD,
        "gst_number": "27AABCS0000A1Z1",
    })
