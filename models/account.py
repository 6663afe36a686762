# models/account.py

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from models.enums import Role, AccountStatus


# ===============================================================
# ACCOUNT (table: users)
# ===============================================================

class Account(BaseModel):
    """
    A person with system access.

    `user_id` is the external (Supabase Auth) identity id; `request_id`
    points back at the Account Request whose approval created the row.
    """
    id: str
    user_id: str = ""
    email: str
    first_name: str = ""
    last_name: str = ""
    role: Role = Role.member
    status: AccountStatus = AccountStatus.pending

    department: str = ""
    position: str = ""
    phone: str = ""
    avatar_url: str = ""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    approved_by: str = ""
    approved_at: Optional[datetime] = None
    request_id: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.active

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# Stored rows come from more than one writer; both spellings are accepted.
_COLUMN_ALIASES = {
    "user_id": ("user_id", "userId"),
    "first_name": ("first_name", "firstName"),
    "last_name": ("last_name", "lastName"),
    "avatar_url": ("avatar_url", "avatarUrl"),
    "created_at": ("created_at", "createdAt"),
    "updated_at": ("updated_at", "updatedAt"),
    "last_login": ("last_login", "lastLogin"),
    "approved_by": ("approved_by", "approvedBy"),
    "approved_at": ("approved_at", "approvedAt"),
    "request_id": ("request_id", "requestId"),
}

_TEXT_FIELDS = (
    "id", "user_id", "email", "first_name", "last_name",
    "department", "position", "phone", "avatar_url",
    "approved_by", "request_id",
)

_TIMESTAMP_FIELDS = ("created_at", "updated_at", "last_login", "approved_at")


def _pick(row: Dict[str, Any], field: str) -> Any:
    for key in _COLUMN_ALIASES.get(field, (field,)):
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def account_from_row(row: Dict[str, Any], external_id: str = "") -> Account:
    """
    Map a stored row into an Account.

    Absent text fields become "", absent timestamps None. A missing or
    unknown role falls back to member and a missing or unknown status to
    pending, so a malformed row never grants access.
    """
    data: Dict[str, Any] = {}
    for field in _TEXT_FIELDS:
        value = _pick(row, field)
        data[field] = str(value) if value is not None else ""
    for field in _TIMESTAMP_FIELDS:
        data[field] = _pick(row, field)

    data["role"] = Role.coerce(row.get("role"), Role.member)
    data["status"] = AccountStatus.coerce(row.get("status"), AccountStatus.pending)

    if external_id and not data["user_id"]:
        data["user_id"] = external_id

    return Account(**data)


# ===============================================================
# UPDATE PAYLOADS
# ===============================================================

class AccountUpdate(BaseModel):
    """
    Partial update (administrators only).
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[Role] = None
    status: Optional[AccountStatus] = None


class ProfileUpdate(BaseModel):
    """
    Self-service profile edit. Role and status are not accepted here.
    """
    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


# ===============================================================
# ADMIN SUMMARY
# ===============================================================

class AccountSummary(BaseModel):
    """Live counts over the users and account_requests tables."""
    total_users: int
    active_users: int
    pending_users: int
    administrators: int
    pending_requests: int
    by_status: Dict[str, int]
    by_role: Dict[str, int]
