from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import ResolutionError
from core.navigation import landing_page_for, menu_for
from core.permission_helpers import PermissionPolicy, get_permission_policy
from core.permissions import ROLE_HIERARCHY
from dependencies.auth import (
    get_current_account,
    get_lifecycle_manager,
    get_resolution,
)
from models.account import Account, ProfileUpdate
from models.enums import Role
from models.identity import IdentityResolution, ResolutionOutcome
from services.lifecycle import AccountLifecycleManager


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# MODELS
# ============================================================
class NavigationItem(BaseModel):
    label: str
    href: str
    capability: Optional[str] = None


class SessionResponse(BaseModel):
    outcome: ResolutionOutcome
    account: Optional[Account] = None
    permissions: List[str] = []
    navigation: List[NavigationItem] = []
    landing_page: Optional[str] = None


class RolePermissions(BaseModel):
    role: Role
    hierarchy: int
    permissions: List[str]


# ============================================================
# CURRENT SESSION
# ============================================================
@router.get("/me", response_model=SessionResponse, summary="Resolve the current identity")
def read_me(
    resolution: IdentityResolution = Depends(get_resolution),
    policy: PermissionPolicy = Depends(get_permission_policy),
):
    """
    `resolved` carries the account and what it may see; `no_account`
    means the person should submit an account request. A failed lookup
    is a 503 so the client retries instead of offering "request access".
    """
    if resolution.outcome == ResolutionOutcome.resolution_failed:
        raise ResolutionError(resolution.error or "Identity resolution failed")

    account = resolution.account
    if resolution.outcome != ResolutionOutcome.resolved or account is None:
        return SessionResponse(outcome=ResolutionOutcome.no_account)

    # Locked-out accounts see who they are, but nothing they could use
    role = account.role if account.is_active else None

    return SessionResponse(
        outcome=resolution.outcome,
        account=account,
        permissions=sorted(policy.permissions_for(role)),
        navigation=menu_for(policy, role) if role else [],
        landing_page=landing_page_for(role) if role else None,
    )


@router.patch("/me", response_model=Account, summary="Update current user profile")
def update_profile(
    payload: ProfileUpdate,
    current: Account = Depends(get_current_account),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    """
    Self-service edit of names and contact fields.
    Role and status must be changed by an administrator.
    """
    return manager.update_own_profile(current, payload)


# ============================================================
# ROLE CAPABILITIES
# ============================================================
@router.get(
    "/permissions/{role}",
    response_model=RolePermissions,
    summary="Capabilities granted to a role",
)
def read_role_permissions(
    role: Role,
    current: Account = Depends(get_current_account),
    policy: PermissionPolicy = Depends(get_permission_policy),
):
    return RolePermissions(
        role=role,
        hierarchy=ROLE_HIERARCHY.get(role.value, 0),
        permissions=sorted(policy.permissions_for(role)),
    )
