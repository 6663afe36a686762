# routers/strategic_approvals.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.permission_helpers import requires_any_permission
from dependencies.auth import get_current_account, get_lifecycle_manager
from models.account import Account
from models.account_request import ReviewDecision
from models.enums import ApprovalStatus, RECOMMENDED_CATEGORIES
from models.strategic_approval import StrategicApprovalCreate, StrategicApprovalRead
from services.lifecycle import AccountLifecycleManager, STRATEGIC_CAPABILITIES


router = APIRouter(
    prefix="/strategic-approvals",
    tags=["Strategic Approvals"],
)

require_strategic = requires_any_permission(*STRATEGIC_CAPABILITIES)


@router.post(
    "",
    response_model=StrategicApprovalRead,
    status_code=201,
    summary="Request a strategic decision",
)
def create_approval(
    payload: StrategicApprovalCreate,
    current: Account = Depends(get_current_account),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.create_strategic_approval(current, payload)


@router.get("/categories", response_model=List[str], summary="Suggested categories")
def list_categories():
    return list(RECOMMENDED_CATEGORIES)


@router.get(
    "",
    response_model=List[StrategicApprovalRead],
    summary="List strategic approvals",
)
def list_approvals(
    status: Optional[ApprovalStatus] = None,
    category: Optional[str] = None,
    search: Optional[str] = Query(None, description="Title, description or category"),
    current: Account = Depends(require_strategic),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.list_strategic_approvals(
        current, status=status, category=category, search=search
    )


@router.get(
    "/{approval_id}",
    response_model=StrategicApprovalRead,
    summary="Get strategic approval",
)
def get_approval(
    approval_id: str,
    current: Account = Depends(require_strategic),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.get_strategic_approval(current, approval_id)


@router.post(
    "/{approval_id}/review",
    response_model=StrategicApprovalRead,
    summary="Mark strategic approval as under review",
)
def start_review(
    approval_id: str,
    current: Account = Depends(require_strategic),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    return manager.start_strategic_review(current, approval_id)


@router.post(
    "/{approval_id}/approve",
    response_model=StrategicApprovalRead,
    summary="Approve strategic approval",
)
def approve(
    approval_id: str,
    decision: Optional[ReviewDecision] = None,
    current: Account = Depends(require_strategic),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    notes = decision.notes if decision else None
    return manager.approve_strategic_approval(current, approval_id, notes=notes)


@router.post(
    "/{approval_id}/reject",
    response_model=StrategicApprovalRead,
    summary="Reject strategic approval",
)
def reject(
    approval_id: str,
    decision: Optional[ReviewDecision] = None,
    current: Account = Depends(require_strategic),
    manager: AccountLifecycleManager = Depends(get_lifecycle_manager),
):
    notes = decision.notes if decision else None
    return manager.reject_strategic_approval(current, approval_id, notes=notes)
