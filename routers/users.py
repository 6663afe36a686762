# routers/users.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from core.permission_helpers import requires_any_permission, requires_permission
from dependencies.auth import get_lifecycle_manager
from models.account import Account, AccountSummary, AccountUpdate
from models.enums import AccountStatus, Role
from services.lifecycle import AccountLifecycleManager


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)

require_user_admin = requires_permission("manage_users")
require_account_reviewer = requires_any_permission("manage_users", "approve_accounts")


# -----------------------------------------------------
# STATS (totals by status and role, pending requests)
# -----------------------------------------------------
@router.get(
    "/stats",
    response_model=AccountSummary,
    summary="Admin: Account and request counts",
)
def read_stats(
    current: Account = Depends(require_account_reviewer),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.account_summary(current)


# -----------------------------------------------------
# LIST USERS
# -----------------------------------------------------
@router.get(
    "/users",
    response_model=List[Account],
    summary="Admin: List users",
)
def list_users(
    role: Optional[Role] = None,
    status: Optional[AccountStatus] = None,
    search: Optional[str] = Query(None, description="Name, email, department or position"),
    current: Account = Depends(require_user_admin),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.list_accounts(current, role=role, status=status, search=search)


# -----------------------------------------------------
# GET USER
# -----------------------------------------------------
@router.get(
    "/users/{user_id}",
    response_model=Account,
    summary="Admin: Get user",
)
def get_user(
    user_id: str,
    current: Account = Depends(require_user_admin),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.get_account(current, user_id)


# -----------------------------------------------------
# UPDATE USER (role / status / profile)
# -----------------------------------------------------
@router.patch(
    "/users/{user_id}",
    response_model=Account,
    summary="Admin: Update user",
)
def update_user(
    user_id: str,
    payload: AccountUpdate,
    current: Account = Depends(require_user_admin),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.update_account(current, user_id, payload)


# -----------------------------------------------------
# DELETE USER (irreversible)
# -----------------------------------------------------
@router.delete(
    "/users/{user_id}",
    status_code=204,
    summary="Admin: Delete user",
)
def delete_user(
    user_id: str,
    current: Account = Depends(require_user_admin),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    manager.delete_account(current, user_id)
    return Response(status_code=204)
