# models/account_request.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from models.enums import Role, RequestStatus
from models.account import Account


class AccountRequestCreate(BaseModel):
    """What the public request-access form sends."""
    email: EmailStr
    first_name: str
    last_name: str
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    reason: Optional[str] = Field(None, description="Why access is needed")


class AccountRequestRead(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    reason: Optional[str] = None

    status: RequestStatus
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    notes: Optional[str] = None
    account_id: Optional[str] = Field(None, description="Account created by the approval")


class AccountApprovalDecision(BaseModel):
    role: Role = Field(Role.member, description="Role assigned to the new account")
    notes: Optional[str] = None


class ReviewDecision(BaseModel):
    notes: Optional[str] = None


class ApprovalResult(BaseModel):
    request: AccountRequestRead
    account: Account
