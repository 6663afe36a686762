# tests/test_store.py

"""
Tests for the Supabase table gateway and store error translation.
"""

import httpx
import pytest
from unittest.mock import MagicMock, Mock

from core.errors import Conflict, DuplicateAccount, NotFound, StoreUnavailable, translate_store_error
from core.store import SupabaseTable, build_store


@pytest.fixture
def client():
    return MagicMock()


def chain(client):
    """The query builder returned by client.table(); every step returns itself."""
    query = client.table.return_value
    for step in ("select", "insert", "update", "delete", "eq", "order", "limit"):
        getattr(query, step).return_value = query
    return query


def test_conditional_update_filters_on_expected_columns(client):
    query = chain(client)
    query.execute.return_value = Mock(data=[{"id": "req_1", "status": "approved"}])

    row = SupabaseTable(client, "account_requests").update(
        "req_1", {"status": "approved"}, expected={"status": "pending"}
    )

    assert row == {"id": "req_1", "status": "approved"}
    client.table.assert_called_with("account_requests")
    query.update.assert_called_once_with({"status": "approved"}, returning="representation")
    query.eq.assert_any_call("id", "req_1")
    query.eq.assert_any_call("status", "pending")


def test_update_with_no_matching_row_returns_none(client):
    query = chain(client)
    query.execute.return_value = Mock(data=[])

    assert SupabaseTable(client, "account_requests").update(
        "req_1", {"status": "approved"}, expected={"status": "pending"}
    ) is None


def test_list_applies_filters_order_and_limit(client):
    query = chain(client)
    query.execute.return_value = Mock(data=None)

    rows = SupabaseTable(client, "users").list(filters={"role": "admin"}, limit=10)

    assert rows == []
    query.select.assert_called_once_with("*")
    query.eq.assert_called_once_with("role", "admin")
    query.order.assert_called_once_with("created_at", desc=True)
    query.limit.assert_called_once_with(10)


def test_find_one_skips_ordering(client):
    query = chain(client)
    query.execute.return_value = Mock(data=[{"id": "user_1", "email": "a@x.com"}])

    row = SupabaseTable(client, "users").find_one(email="a@x.com")

    assert row["id"] == "user_1"
    query.order.assert_not_called()
    query.limit.assert_called_once_with(1)


def test_insert_returns_stored_row(client):
    query = chain(client)
    query.execute.return_value = Mock(data=[{"id": "user_1"}])

    assert SupabaseTable(client, "users").insert({"id": "user_1"}) == {"id": "user_1"}


def test_timeout_becomes_store_unavailable(client):
    query = chain(client)
    query.execute.side_effect = httpx.ReadTimeout("read timed out")

    with pytest.raises(StoreUnavailable) as exc_info:
        SupabaseTable(client, "users").list()

    assert exc_info.value.timeout is True
    assert exc_info.value.retryable is True


def unique_violation():
    error = Exception("duplicate key value violates unique constraint")
    error.code = "23505"
    return error


def test_unique_violation_on_users_is_duplicate_account(client):
    chain(client).execute.side_effect = unique_violation()

    accounts = build_store(client).accounts

    with pytest.raises(DuplicateAccount) as exc_info:
        accounts.insert({"id": "user_1", "email": "a@x.com"})
    assert exc_info.value.code == "duplicate_account"


@pytest.mark.parametrize("table", ["account_requests", "strategic_approvals"])
def test_unique_violation_elsewhere_is_generic_conflict(client, table):
    chain(client).execute.side_effect = unique_violation()

    store = build_store(client)

    with pytest.raises(Conflict) as exc_info:
        getattr(store, table).insert({"id": "x_1"})
    assert not isinstance(exc_info.value, DuplicateAccount)
    assert exc_info.value.code == "conflict"
    assert exc_info.value.status_code == 409


def test_translate_store_error():
    assert isinstance(translate_store_error(httpx.ConnectError("refused"), "op"), StoreUnavailable)
    assert translate_store_error(httpx.ConnectError("refused"), "op").timeout is False

    original = NotFound("missing")
    assert translate_store_error(original, "op") is original

    other = translate_store_error(RuntimeError("boom"), "op")
    assert isinstance(other, StoreUnavailable)
    assert other.message == "op failed"
