# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    AccountStatus,
    RequestStatus,
    ApprovalStatus,
    Priority,
    RECOMMENDED_CATEGORIES,
)

# -------------------------
# Account Models
# -------------------------
from .account import (
    Account,
    AccountUpdate,
    ProfileUpdate,
    AccountSummary,
    account_from_row,
)

# -------------------------
# Account Request Models
# -------------------------
from .account_request import (
    AccountRequestCreate,
    AccountRequestRead,
    AccountApprovalDecision,
    ReviewDecision,
    ApprovalResult,
)

# -------------------------
# Strategic Approval Models
# -------------------------
from .strategic_approval import (
    StrategicApprovalCreate,
    StrategicApprovalRead,
)

# -------------------------
# Identity Models
# -------------------------
from .identity import (
    ExternalIdentity,
    IdentityResolution,
    ResolutionOutcome,
)

__all__ = [
    # enums
    "Role",
    "AccountStatus",
    "RequestStatus",
    "ApprovalStatus",
    "Priority",
    "RECOMMENDED_CATEGORIES",

    # accounts
    "Account",
    "AccountUpdate",
    "ProfileUpdate",
    "AccountSummary",
    "account_from_row",

    # account requests
    "AccountRequestCreate",
    "AccountRequestRead",
    "AccountApprovalDecision",
    "ReviewDecision",
    "ApprovalResult",

    # strategic approvals
    "StrategicApprovalCreate",
    "StrategicApprovalRead",

    # identity
    "ExternalIdentity",
    "IdentityResolution",
    "ResolutionOutcome",
]
