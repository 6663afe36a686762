from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]

    @classmethod
    def coerce(cls, value, default):
        """Return the member for `value`, or `default` when missing/unknown."""
        try:
            return cls(value)
        except ValueError:
            return default


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    admin = "admin"
    executive = "executive"
    team_lead = "team_lead"
    coordinator = "coordinator"
    member = "member"


# -----------------------------------------------------
# ACCOUNT STATUS
# -----------------------------------------------------
class AccountStatus(BaseStrEnum):
    """Only `active` accounts may act; everything else is locked out."""

    pending = "pending"
    active = "active"
    suspended = "suspended"
    inactive = "inactive"


# -----------------------------------------------------
# ACCOUNT REQUEST STATUS
# -----------------------------------------------------
class RequestStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# -----------------------------------------------------
# STRATEGIC APPROVAL STATUS
# -----------------------------------------------------
class ApprovalStatus(BaseStrEnum):
    pending = "pending"
    under_review = "under_review"
    approved = "approved"
    rejected = "rejected"


# -----------------------------------------------------
# STRATEGIC APPROVAL PRIORITY
# -----------------------------------------------------
class Priority(BaseStrEnum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


# Suggested in the request form; any non-blank category is accepted.
RECOMMENDED_CATEGORIES = (
    "Financial",
    "Strategic",
    "Operational",
    "Technology",
    "Human Resources",
    "Marketing",
    "Legal",
)
