# models/identity.py

from typing import Optional
from pydantic import BaseModel

from models.enums import BaseStrEnum
from models.account import Account


class ExternalIdentity(BaseModel):
    """Email / id pair asserted by Supabase Auth, trusted as-is."""
    external_id: str = ""
    email: str


class ResolutionOutcome(BaseStrEnum):
    resolved = "resolved"
    no_account = "no_account"          # legitimate: the person should request access
    resolution_failed = "resolution_failed"  # lookup failed: retry


class IdentityResolution(BaseModel):
    outcome: ResolutionOutcome
    account: Optional[Account] = None
    error: Optional[str] = None

    @classmethod
    def resolved(cls, account: Account) -> "IdentityResolution":
        return cls(outcome=ResolutionOutcome.resolved, account=account)

    @classmethod
    def no_account(cls) -> "IdentityResolution":
        return cls(outcome=ResolutionOutcome.no_account)

    @classmethod
    def failed(cls, error: str) -> "IdentityResolution":
        return cls(outcome=ResolutionOutcome.resolution_failed, error=error)
