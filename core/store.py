# core/store.py

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from supabase import Client

from core.config import settings
from core.errors import Conflict, DuplicateAccount, StoreUnavailable, translate_store_error
from core.supabase_client import get_supabase_client


# =================================================================
#  TABLE GATEWAY
# =================================================================
# Every read/write against the service's tables goes through here so
# Supabase failures surface as typed errors instead of raw client
# exceptions. Rows are plain dicts keyed by column name.
# =================================================================

class SupabaseTable:
    def __init__(self, client: Client, name: str, conflict: Type[Conflict] = Conflict):
        self.client = client
        self.name = name
        self.conflict = conflict

    def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = (
                self.client.table(self.name)
                .insert(data, returning="representation")
                .execute()
            )
        except Exception as e:
            raise translate_store_error(e, f"Failed to insert into {self.name}", self.conflict) from e

        if not result.data:
            raise StoreUnavailable(f"Insert into {self.name} returned no row")
        return result.data[0]

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.find_one(id=record_id)

    def find_one(self, **filters) -> Optional[Dict[str, Any]]:
        rows = self.list(filters=filters, order_by=None, limit=1)
        return rows[0] if rows else None

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = "created_at",
        desc: bool = True,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        try:
            query = self.client.table(self.name).select("*")
            for key, val in (filters or {}).items():
                query = query.eq(key, val)
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit:
                query = query.limit(limit)
            result = query.execute()
        except Exception as e:
            raise translate_store_error(e, f"Failed to fetch from {self.name}", self.conflict) from e

        return result.data or []

    def update(
        self,
        record_id: str,
        data: Dict[str, Any],
        expected: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        UPDATE ... WHERE id = record_id [AND col = expected[col] ...]

        Returns the updated row, or None when no row matched (missing id,
        or a concurrent writer changed one of the expected columns first).
        """
        try:
            query = (
                self.client.table(self.name)
                .update(data, returning="representation")
                .eq("id", record_id)
            )
            for key, val in (expected or {}).items():
                query = query.eq(key, val)
            result = query.execute()
        except Exception as e:
            raise translate_store_error(e, f"Failed to update {self.name}", self.conflict) from e

        return result.data[0] if result.data else None

    def delete(self, record_id: str) -> bool:
        try:
            result = (
                self.client.table(self.name)
                .delete()
                .eq("id", record_id)
                .execute()
            )
        except Exception as e:
            raise translate_store_error(e, f"Failed to delete from {self.name}", self.conflict) from e

        return bool(result.data)


# =================================================================
#  STORE BUNDLE
# =================================================================

@dataclass
class Store:
    accounts: SupabaseTable
    account_requests: SupabaseTable
    strategic_approvals: SupabaseTable


def build_store(client: Client) -> Store:
    return Store(
        accounts=SupabaseTable(client, settings.USERS_TABLE, conflict=DuplicateAccount),
        account_requests=SupabaseTable(client, settings.ACCOUNT_REQUESTS_TABLE),
        strategic_approvals=SupabaseTable(client, settings.STRATEGIC_APPROVALS_TABLE),
    )


def get_store() -> Store:
    """FastAPI dependency; overridden in tests."""
    client = get_supabase_client()
    if client is None:
        raise StoreUnavailable("Supabase client not configured")
    return build_store(client)
