# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from main import create_app
from core.config import settings
from core.permission_helpers import default_policy
from core.store import get_store
from dependencies.auth import get_external_identity
from models.account import Account, account_from_row
from models.identity import ExternalIdentity
from services.lifecycle import AccountLifecycleManager
from tests.fakes import make_store


ADMIN_ROW = {
    "id": "user_admin",
    "email": "admin@example.com",
    "first_name": "Grace",
    "last_name": "Hopper",
    "role": "admin",
    "status": "active",
    "created_at": "2024-01-01T00:00:00+00:00",
}

EXECUTIVE_ROW = {
    "id": "user_exec",
    "email": "exec@example.com",
    "first_name": "Katherine",
    "last_name": "Johnson",
    "role": "executive",
    "status": "active",
    "created_at": "2024-01-02T00:00:00+00:00",
}

MEMBER_ROW = {
    "id": "user_member",
    "email": "member@example.com",
    "first_name": "Alan",
    "last_name": "Turing",
    "role": "member",
    "status": "active",
    "department": "Research",
    "created_at": "2024-01-03T00:00:00+00:00",
}

SUSPENDED_ROW = {
    "id": "user_suspended",
    "email": "suspended@example.com",
    "first_name": "Sam",
    "last_name": "Paused",
    "role": "team_lead",
    "status": "suspended",
    "created_at": "2024-01-04T00:00:00+00:00",
}


@pytest.fixture
def store():
    """Fake store seeded with one account per interesting role/status."""
    s = make_store()
    s.accounts.seed(ADMIN_ROW, EXECUTIVE_ROW, MEMBER_ROW, SUSPENDED_ROW)
    return s


@pytest.fixture
def manager(store) -> AccountLifecycleManager:
    return AccountLifecycleManager(store, default_policy)


@pytest.fixture
def admin() -> Account:
    return account_from_row(ADMIN_ROW)


@pytest.fixture
def executive() -> Account:
    return account_from_row(EXECUTIVE_ROW)


@pytest.fixture
def member() -> Account:
    return account_from_row(MEMBER_ROW)


@pytest.fixture
def suspended() -> Account:
    return account_from_row(SUSPENDED_ROW)


@pytest.fixture
def session():
    """Mutable identity assertion used by the overridden auth dependency."""
    return {"email": None, "external_id": "ext-123"}


@pytest.fixture
def login(session):
    def _login(email: str, external_id: str = "ext-123"):
        session["email"] = email
        session["external_id"] = external_id
    return _login


@pytest.fixture(scope="function")
def app(store, session):
    """Create a test FastAPI application wired to the fake store."""
    application = create_app()
    application.dependency_overrides[get_store] = lambda: store
    application.dependency_overrides[get_external_identity] = lambda: ExternalIdentity(
        external_id=session["external_id"],
        email=session["email"],
    )
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def bootstrap_email() -> str:
    return settings.BOOTSTRAP_ADMIN_EMAIL
