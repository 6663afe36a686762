# routers/account_requests.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.permission_helpers import requires_permission
from dependencies.auth import get_lifecycle_manager
from models.account import Account
from models.account_request import (
    AccountApprovalDecision,
    AccountRequestCreate,
    AccountRequestRead,
    ApprovalResult,
    ReviewDecision,
)
from models.enums import RequestStatus
from services.lifecycle import AccountLifecycleManager


router = APIRouter(
    prefix="/account-requests",
    tags=["Account Requests"],
)

require_approver = requires_permission("approve_accounts")


# -----------------------------------------------------
# 1️⃣ PUBLIC: Submit account request
# -----------------------------------------------------
@router.post(
    "",
    response_model=AccountRequestRead,
    status_code=201,
    summary="Public: Request an account",
)
def submit_request(
    payload: AccountRequestCreate,
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.submit_account_request(payload)


# -----------------------------------------------------
# 2️⃣ ADMIN: List account requests
# permissions: approve_accounts
# -----------------------------------------------------
@router.get(
    "",
    response_model=List[AccountRequestRead],
    summary="Admin: List account requests",
)
def list_requests(
    status: Optional[RequestStatus] = Query(None, description="pending, approved or rejected"),
    search: Optional[str] = Query(None, description="Name, email, department or position"),
    current: Account = Depends(require_approver),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.list_account_requests(current, status=status, search=search)


@router.get(
    "/orphaned",
    response_model=List[AccountRequestRead],
    summary="Admin: Approved requests with no account",
)
def list_orphaned(
    current: Account = Depends(require_approver),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.find_orphaned_approvals(current)


@router.get(
    "/{request_id}",
    response_model=AccountRequestRead,
    summary="Admin: Get account request",
)
def get_request(
    request_id: str,
    current: Account = Depends(require_approver),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.get_account_request(current, request_id)


# -----------------------------------------------------
# 3️⃣ ADMIN: Approve (creates the account)
# -----------------------------------------------------
@router.post(
    "/{request_id}/approve",
    response_model=ApprovalResult,
    summary="Admin: Approve account request",
)
def approve_request(
    request_id: str,
    decision: Optional[AccountApprovalDecision] = None,
    current: Account = Depends(require_approver),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    decision = decision or AccountApprovalDecision()
    return manager.approve_account_request(
        current,
        request_id,
        role=decision.role,
        notes=decision.notes,
    )


# -----------------------------------------------------
# 4️⃣ ADMIN: Reject
# -----------------------------------------------------
@router.post(
    "/{request_id}/reject",
    response_model=AccountRequestRead,
    summary="Admin: Reject account request",
)
def reject_request(
    request_id: str,
    decision: Optional[ReviewDecision] = None,
    current: Account = Depends(require_approver),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    decision = decision or ReviewDecision()
    return manager.reject_account_request(current, request_id, notes=decision.notes)
