from types import MappingProxyType
from typing import AbstractSet, Iterable, Mapping, Optional

from fastapi import Depends

from core.errors import PermissionDenied
from core.permissions import ROLE_PERMISSIONS


# -----------------------------------------------------
# Permission policy
# -----------------------------------------------------
class PermissionPolicy:
    """
    Answers capability queries against a fixed role → capability table.

    The table is frozen at construction. There is no wildcard, no
    per-user override and no inheritance between roles: a role holds
    exactly the capabilities listed for it.
    """

    def __init__(self, table: Mapping[str, Iterable[str]]):
        self._table = MappingProxyType(
            {str(role): frozenset(caps) for role, caps in table.items()}
        )

    @property
    def roles(self) -> frozenset:
        return frozenset(self._table)

    def permissions_for(self, role: Optional[str]) -> frozenset:
        if role is None:
            return frozenset()
        return self._table.get(str(role), frozenset())

    def has_permission(self, role: Optional[str], capability: str) -> bool:
        return capability in self.permissions_for(role)

    def has_any_permission(self, role: Optional[str], capabilities: Iterable[str]) -> bool:
        return any(self.has_permission(role, c) for c in capabilities)

    @staticmethod
    def has_any_role(role: Optional[str], allowed: AbstractSet[str]) -> bool:
        if role is None:
            return False
        return str(role) in {str(r) for r in allowed}


default_policy = PermissionPolicy(ROLE_PERMISSIONS)


def get_permission_policy() -> PermissionPolicy:
    """FastAPI dependency; tests may override with an alternate table."""
    return default_policy


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_permission(permission: str):
    """
    Usage:
        @router.get("/", dependencies=[Depends(requires_permission("manage_users"))])
    """
    return requires_any_permission(permission)


def requires_any_permission(*permissions: str):
    from dependencies.auth import get_current_account
    from models.account import Account

    def dependency(
        current: Account = Depends(get_current_account),
        policy: PermissionPolicy = Depends(get_permission_policy),
    ) -> Account:
        if not policy.has_any_permission(current.role, permissions):
            raise PermissionDenied(
                f"Insufficient permissions: one of {list(permissions)} required"
            )
        return current

    return dependency
