# tests/test_identity.py

"""
Tests for mapping external identities onto accounts.
"""

import pytest
from unittest.mock import Mock

from core.errors import StoreUnavailable, ValidationError
from models.enums import AccountStatus, Role
from models.identity import ExternalIdentity, ResolutionOutcome
from services.identity import BootstrapAdmin, IdentityResolver
from tests.fakes import InMemoryTable


BOOTSTRAP = BootstrapAdmin(email="root@ekan.test", account_id="user_root")


@pytest.fixture
def accounts():
    table = InMemoryTable("users", unique=("email",))
    table.seed(
        {
            "id": "user_1",
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "role": "team_lead",
            "status": "active",
            "department": "Eng",
        },
        {
            "id": "user_2",
            "email": "legacy@example.com",
            "firstName": "Legacy",
            "lastName": "Row",
            "avatarUrl": "https://cdn.example.com/a.png",
        },
        {
            "id": "user_3",
            "email": "odd@example.com",
            "role": "super_admin",
            "status": "enabled",
        },
    )
    return table


def test_bootstrap_email_resolves_without_store_call():
    accounts = Mock()
    resolver = IdentityResolver(accounts, BOOTSTRAP)

    result = resolver.resolve(ExternalIdentity(external_id="ext-9", email="root@ekan.test"))

    assert result.outcome == ResolutionOutcome.resolved
    assert result.account.role == Role.admin
    assert result.account.status == AccountStatus.active
    assert result.account.id == "user_root"
    assert result.account.user_id == "ext-9"
    assert accounts.mock_calls == []


def test_bootstrap_is_case_sensitive(accounts):
    result = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(email="ROOT@ekan.test")
    )
    assert result.outcome == ResolutionOutcome.no_account


def test_stored_account_is_resolved(accounts):
    result = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(external_id="ext-1", email="ada@example.com")
    )

    assert result.outcome == ResolutionOutcome.resolved
    account = result.account
    assert account.id == "user_1"
    assert account.role == Role.team_lead
    assert account.status == AccountStatus.active
    assert account.department == "Eng"
    assert account.phone == ""
    assert account.user_id == "ext-1"


def test_unknown_email_is_no_account_not_a_default_account(accounts):
    result = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(email="nobody@example.com")
    )

    assert result.outcome == ResolutionOutcome.no_account
    assert result.account is None
    assert result.error is None


def test_email_match_is_exact(accounts):
    result = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(email="Ada@example.com")
    )
    assert result.outcome == ResolutionOutcome.no_account


def test_missing_role_and_status_default_to_member_pending(accounts):
    account = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(email="legacy@example.com")
    ).account

    assert account.role == Role.member
    assert account.status == AccountStatus.pending
    assert account.first_name == "Legacy"
    assert account.avatar_url == "https://cdn.example.com/a.png"
    assert not account.is_active


def test_invalid_role_and_status_never_grant_access(accounts):
    account = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(email="odd@example.com")
    ).account

    assert account.role == Role.member
    assert account.status == AccountStatus.pending


def test_store_failure_is_distinct_from_no_account(accounts):
    accounts.fail_on["list"] = StoreUnavailable("timeout", timeout=True)

    result = IdentityResolver(accounts, BOOTSTRAP).resolve(
        ExternalIdentity(email="ada@example.com")
    )

    assert result.outcome == ResolutionOutcome.resolution_failed
    assert result.account is None
    assert "ada@example.com" in result.error


def test_resolution_does_not_write(accounts):
    IdentityResolver(accounts, BOOTSTRAP).resolve(ExternalIdentity(email="ada@example.com"))
    IdentityResolver(accounts, BOOTSTRAP).resolve(ExternalIdentity(email="nobody@example.com"))

    assert set(accounts.calls) == {"list"}


@pytest.mark.parametrize("email", ["", "   "])
def test_blank_email_is_rejected(accounts, email):
    with pytest.raises(ValidationError):
        IdentityResolver(accounts, BOOTSTRAP).resolve(ExternalIdentity(email=email))
