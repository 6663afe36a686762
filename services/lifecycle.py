# services/lifecycle.py

"""
Account lifecycle: request intake, approvals, and account administration.

Every status change is a conditional update keyed on the status that was
read beforehand, so of two concurrent reviewers exactly one wins and the
other gets InvalidStateTransition.

Approving an account request writes twice (claim the request, then create
the account). The request is claimed first; if creating the account fails
the claim is reverted. If the revert fails too, the request is left
approved with no account and shows up in find_orphaned_approvals().
"""

import uuid
from typing import Callable, Dict, List, Optional

from core.errors import (
    AppError,
    DuplicateAccount,
    InvalidStateTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from core.logging_config import logger
from core.permission_helpers import PermissionPolicy
from core.store import Store, SupabaseTable
from core.utils import clean_fields, clean_text, filter_by_search, is_blank, utcnow
from models.account import (
    Account,
    AccountSummary,
    AccountUpdate,
    ProfileUpdate,
    account_from_row,
)
from models.account_request import (
    AccountRequestCreate,
    AccountRequestRead,
    ApprovalResult,
)
from models.enums import AccountStatus, ApprovalStatus, RequestStatus, Role
from models.strategic_approval import StrategicApprovalCreate, StrategicApprovalRead


# -----------------------------------------------------
# State machines: current status → allowed targets
# -----------------------------------------------------
ACCOUNT_REQUEST_TRANSITIONS = {
    RequestStatus.pending.value: {
        RequestStatus.approved.value,
        RequestStatus.rejected.value,
    },
}

STRATEGIC_APPROVAL_TRANSITIONS = {
    ApprovalStatus.pending.value: {
        ApprovalStatus.under_review.value,
        ApprovalStatus.approved.value,
        ApprovalStatus.rejected.value,
    },
    ApprovalStatus.under_review.value: {
        ApprovalStatus.approved.value,
        ApprovalStatus.rejected.value,
    },
}

STRATEGIC_CAPABILITIES = ("strategic_decisions", "approve_strategic")

ACCOUNT_SEARCH_FIELDS = ("first_name", "last_name", "email", "department", "position")
REQUEST_SEARCH_FIELDS = ("first_name", "last_name", "email", "department", "position")
APPROVAL_SEARCH_FIELDS = ("title", "description", "category")

PROFILE_FIELDS = ("first_name", "last_name", "department", "position", "phone", "avatar_url")


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class AccountLifecycleManager:
    def __init__(
        self,
        store: Store,
        policy: PermissionPolicy,
        now: Callable = utcnow,
        id_factory: Callable[[str], str] = new_id,
    ):
        self.store = store
        self.policy = policy
        self.now = now
        self.id_factory = id_factory

    # =================================================
    # Guards
    # =================================================
    def _timestamp(self) -> str:
        return self.now().isoformat()

    def _require_active(self, actor: Account):
        if actor.status != AccountStatus.active:
            raise PermissionDenied(f"Account is {actor.status}; only active accounts may act")

    def _require(self, actor: Account, *capabilities: str):
        self._require_active(actor)
        if not self.policy.has_any_permission(actor.role, capabilities):
            raise PermissionDenied(
                f"Insufficient permissions: one of {list(capabilities)} required"
            )

    @staticmethod
    def _get_or_404(table: SupabaseTable, record_id: str, label: str) -> dict:
        row = table.get(record_id)
        if row is None:
            raise NotFound(f"{label} {record_id} not found")
        return row

    def _transition(
        self,
        table: SupabaseTable,
        row: dict,
        target: str,
        transitions: Dict[str, set],
        fields: dict,
        label: str,
    ) -> dict:
        current = row.get("status")
        if target not in transitions.get(current, ()):
            raise InvalidStateTransition(
                f"{label} {row['id']} is {current}; cannot move to {target}"
            )

        updated = table.update(
            row["id"],
            {"status": target, "updated_at": self._timestamp(), **fields},
            expected={"status": current},
        )
        if updated is None:
            logger.warning(f"{label} {row['id']} changed before {target} could be applied")
            raise InvalidStateTransition(
                f"{label} {row['id']} was modified by another reviewer; refresh and retry"
            )

        logger.info(f"{label} {row['id']}: {current} → {target}")
        return updated

    def _review_fields(self, actor: Account, notes: Optional[str]) -> dict:
        return {
            "reviewed_by": actor.id,
            "reviewed_at": self._timestamp(),
            "notes": clean_text(notes),
        }

    # =================================================
    # Account requests
    # =================================================
    def submit_account_request(self, payload: AccountRequestCreate) -> AccountRequestRead:
        data = clean_fields(payload.model_dump())
        for field in ("first_name", "last_name"):
            if data.get(field) is None:
                raise ValidationError(f"{field} is required")

        now = self._timestamp()
        row = self.store.account_requests.insert({
            "id": self.id_factory("req"),
            **data,
            "status": RequestStatus.pending.value,
            "user_id": "anonymous",
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Account request {row['id']} submitted for {row['email']}")
        return AccountRequestRead.model_validate(row)

    def list_account_requests(
        self,
        actor: Account,
        status: Optional[RequestStatus] = None,
        search: Optional[str] = None,
    ) -> List[AccountRequestRead]:
        self._require(actor, "approve_accounts")
        filters = {"status": status.value} if status else None
        rows = self.store.account_requests.list(filters=filters)
        rows = filter_by_search(rows, search, REQUEST_SEARCH_FIELDS)
        return [AccountRequestRead.model_validate(r) for r in rows]

    def get_account_request(self, actor: Account, request_id: str) -> AccountRequestRead:
        self._require(actor, "approve_accounts")
        row = self._get_or_404(self.store.account_requests, request_id, "Account request")
        return AccountRequestRead.model_validate(row)

    def approve_account_request(
        self,
        actor: Account,
        request_id: str,
        role: Role = Role.member,
        notes: Optional[str] = None,
    ) -> ApprovalResult:
        self._require(actor, "approve_accounts")
        role = Role.coerce(role, None)
        if role is None:
            raise ValidationError(f"Invalid role. Must be one of {Role.list()}")

        requests = self.store.account_requests
        accounts = self.store.accounts

        req = self._get_or_404(requests, request_id, "Account request")
        if req.get("status") != RequestStatus.pending.value:
            raise InvalidStateTransition(
                f"Account request {request_id} is already {req.get('status')}"
            )

        if accounts.find_one(email=req["email"]) is not None:
            raise DuplicateAccount(f"An account already exists for {req['email']}")

        # 1) claim the request
        claimed = self._transition(
            requests,
            req,
            RequestStatus.approved.value,
            ACCOUNT_REQUEST_TRANSITIONS,
            self._review_fields(actor, notes),
            "Account request",
        )

        # 2) create the account
        now = self._timestamp()
        try:
            account_row = accounts.insert({
                "id": self.id_factory("user"),
                "user_id": "",
                "email": req["email"],
                "first_name": req.get("first_name") or "",
                "last_name": req.get("last_name") or "",
                "role": role.value,
                "status": AccountStatus.active.value,
                "department": req.get("department") or "",
                "position": req.get("position") or "",
                "phone": req.get("phone") or "",
                "avatar_url": "",
                "created_at": now,
                "updated_at": now,
                "approved_by": actor.id,
                "approved_at": now,
                "request_id": request_id,
            })
        except AppError:
            self._release_claim(request_id, actor)
            raise

        # 3) point the request at its account
        claimed = self._record_account(request_id, account_row["id"]) or claimed

        logger.info(
            f"Account {account_row['id']} created for {req['email']} "
            f"as {role.value} by {actor.id}"
        )
        return ApprovalResult(
            request=AccountRequestRead.model_validate(claimed),
            account=account_from_row(account_row),
        )

    def _record_account(self, request_id: str, account_id: str) -> Optional[dict]:
        """
        Stamp `account_id` on an approved request. Failure is logged only;
        the account's `request_id` still links the two.
        """
        try:
            return self.store.account_requests.update(
                request_id,
                {"account_id": account_id},
                expected={"status": RequestStatus.approved.value},
            )
        except AppError as e:
            logger.warning(
                f"Account request {request_id}: could not record account {account_id} ({e.message})"
            )
            return None

    def _release_claim(self, request_id: str, actor: Account):
        """Undo step 1 of an approval whose account insert failed."""
        try:
            reverted = self.store.account_requests.update(
                request_id,
                {
                    "status": RequestStatus.pending.value,
                    "reviewed_by": None,
                    "reviewed_at": None,
                    "notes": None,
                    "updated_at": self._timestamp(),
                },
                expected={
                    "status": RequestStatus.approved.value,
                    "reviewed_by": actor.id,
                },
            )
        except AppError as e:
            logger.error(
                f"Orphaned approval: request {request_id} approved without an account "
                f"and could not be reverted ({e.message})"
            )
            return

        if reverted is None:
            logger.error(
                f"Orphaned approval: request {request_id} approved without an account "
                f"and no longer matches the claim"
            )
        else:
            logger.warning(f"Account request {request_id} returned to pending after failed account creation")

    def reject_account_request(
        self,
        actor: Account,
        request_id: str,
        notes: Optional[str] = None,
    ) -> AccountRequestRead:
        self._require(actor, "approve_accounts")
        req = self._get_or_404(self.store.account_requests, request_id, "Account request")
        updated = self._transition(
            self.store.account_requests,
            req,
            RequestStatus.rejected.value,
            ACCOUNT_REQUEST_TRANSITIONS,
            self._review_fields(actor, notes),
            "Account request",
        )
        return AccountRequestRead.model_validate(updated)

    def find_orphaned_approvals(self, actor: Account) -> List[AccountRequestRead]:
        """
        Approved requests whose account was never created.

        A request is settled once it carries `account_id`, or once an
        account points back at it through `request_id`. Rows from before
        either reference existed are matched on email. An account deleted
        after a successful approval leaves `account_id` in place, so its
        request is not listed.
        """
        self._require(actor, "approve_accounts")
        approved = self.store.account_requests.list(
            filters={"status": RequestStatus.approved.value}
        )
        accounts = [account_from_row(row) for row in self.store.accounts.list(order_by=None)]
        carried = {a.request_id for a in accounts if a.request_id}
        emails = {a.email for a in accounts if not a.request_id}
        return [
            AccountRequestRead.model_validate(r)
            for r in approved
            if not r.get("account_id")
            and r["id"] not in carried
            and r.get("email") not in emails
        ]

    # =================================================
    # Strategic approvals
    # =================================================
    def create_strategic_approval(
        self,
        actor: Account,
        payload: StrategicApprovalCreate,
    ) -> StrategicApprovalRead:
        self._require_active(actor)
        for field in ("title", "description", "category"):
            if is_blank(getattr(payload, field)):
                raise ValidationError(f"{field} is required")

        now = self._timestamp()
        row = self.store.strategic_approvals.insert({
            "id": self.id_factory("approval"),
            "title": clean_text(payload.title),
            "description": clean_text(payload.description),
            "category": clean_text(payload.category),
            "priority": payload.priority.value,
            "status": ApprovalStatus.pending.value,
            "requested_by": actor.id,
            "user_id": actor.user_id or actor.id,
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Strategic approval {row['id']} requested by {actor.id}")
        return StrategicApprovalRead.model_validate(row)

    def list_strategic_approvals(
        self,
        actor: Account,
        status: Optional[ApprovalStatus] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[StrategicApprovalRead]:
        self._require(actor, *STRATEGIC_CAPABILITIES)
        filters = {}
        if status:
            filters["status"] = status.value
        if category:
            filters["category"] = category
        rows = self.store.strategic_approvals.list(filters=filters or None)
        rows = filter_by_search(rows, search, APPROVAL_SEARCH_FIELDS)
        return [StrategicApprovalRead.model_validate(r) for r in rows]

    def get_strategic_approval(self, actor: Account, approval_id: str) -> StrategicApprovalRead:
        self._require(actor, *STRATEGIC_CAPABILITIES)
        row = self._get_or_404(self.store.strategic_approvals, approval_id, "Strategic approval")
        return StrategicApprovalRead.model_validate(row)

    def _review_strategic(
        self,
        actor: Account,
        approval_id: str,
        target: ApprovalStatus,
        notes: Optional[str],
    ) -> StrategicApprovalRead:
        self._require(actor, *STRATEGIC_CAPABILITIES)
        table = self.store.strategic_approvals
        row = self._get_or_404(table, approval_id, "Strategic approval")
        if target == ApprovalStatus.under_review:
            fields = {"reviewed_by": actor.id}
        else:
            fields = self._review_fields(actor, notes)
        updated = self._transition(
            table,
            row,
            target.value,
            STRATEGIC_APPROVAL_TRANSITIONS,
            fields,
            "Strategic approval",
        )
        return StrategicApprovalRead.model_validate(updated)

    def start_strategic_review(self, actor: Account, approval_id: str) -> StrategicApprovalRead:
        return self._review_strategic(actor, approval_id, ApprovalStatus.under_review, None)

    def approve_strategic_approval(
        self, actor: Account, approval_id: str, notes: Optional[str] = None
    ) -> StrategicApprovalRead:
        return self._review_strategic(actor, approval_id, ApprovalStatus.approved, notes)

    def reject_strategic_approval(
        self, actor: Account, approval_id: str, notes: Optional[str] = None
    ) -> StrategicApprovalRead:
        return self._review_strategic(actor, approval_id, ApprovalStatus.rejected, notes)

    # =================================================
    # Accounts
    # =================================================
    def list_accounts(
        self,
        actor: Account,
        role: Optional[Role] = None,
        status: Optional[AccountStatus] = None,
        search: Optional[str] = None,
    ) -> List[Account]:
        self._require(actor, "manage_users")
        filters = {}
        if role:
            filters["role"] = role.value
        if status:
            filters["status"] = status.value
        rows = self.store.accounts.list(filters=filters or None)
        rows = filter_by_search(rows, search, ACCOUNT_SEARCH_FIELDS)
        return [account_from_row(r) for r in rows]

    def account_summary(self, actor: Account) -> AccountSummary:
        self._require(actor, "manage_users", "approve_accounts")

        accounts = [account_from_row(r) for r in self.store.accounts.list(order_by=None)]
        by_status = {status: 0 for status in AccountStatus.list()}
        by_role = {role: 0 for role in Role.list()}
        for account in accounts:
            by_status[account.status.value] += 1
            by_role[account.role.value] += 1

        pending = self.store.account_requests.list(
            filters={"status": RequestStatus.pending.value},
            order_by=None,
        )

        return AccountSummary(
            total_users=len(accounts),
            active_users=by_status[AccountStatus.active.value],
            pending_users=by_status[AccountStatus.pending.value],
            administrators=by_role[Role.admin.value],
            pending_requests=len(pending),
            by_status=by_status,
            by_role=by_role,
        )

    def get_account(self, actor: Account, account_id: str) -> Account:
        self._require(actor, "manage_users")
        return account_from_row(self._get_or_404(self.store.accounts, account_id, "Account"))

    def update_account(self, actor: Account, account_id: str, changes: AccountUpdate) -> Account:
        self._require(actor, "manage_users")
        existing = self._get_or_404(self.store.accounts, account_id, "Account")

        updates = {}
        for field in PROFILE_FIELDS:
            value = getattr(changes, field)
            if value is not None:
                updates[field] = clean_text(value) or ""
        if changes.role is not None:
            updates["role"] = changes.role.value
        if changes.status is not None:
            updates["status"] = changes.status.value

        if not updates:
            raise ValidationError("No fields provided to update.")

        role_changed = "role" in updates and updates["role"] != existing.get("role")
        status_changed = "status" in updates and updates["status"] != existing.get("status")

        if role_changed and not self.policy.has_permission(actor.role, "manage_roles"):
            raise PermissionDenied("Insufficient permissions: 'manage_roles' required")

        if account_id == actor.id and (role_changed or status_changed):
            raise PermissionDenied("You cannot change your own role or status")

        merged_role = updates.get("role", existing.get("role"))
        merged_status = updates.get("status", existing.get("status"))
        if merged_status == AccountStatus.active.value and merged_role not in Role.list():
            raise ValidationError("An active account must have a valid role")

        updates["updated_at"] = self._timestamp()
        row = self.store.accounts.update(account_id, updates)
        if row is None:
            raise NotFound(f"Account {account_id} not found")

        logger.info(f"Account {account_id} updated by {actor.id}: {sorted(updates)}")
        return account_from_row(row)

    def delete_account(self, actor: Account, account_id: str):
        self._require(actor, "manage_users")
        if account_id == actor.id:
            raise PermissionDenied("You cannot delete your own account")

        self._get_or_404(self.store.accounts, account_id, "Account")
        if not self.store.accounts.delete(account_id):
            raise NotFound(f"Account {account_id} not found")

        logger.info(f"Account {account_id} deleted by {actor.id}")

    def update_own_profile(self, actor: Account, changes: ProfileUpdate) -> Account:
        self._require_active(actor)
        if self.store.accounts.get(actor.id) is None:
            raise NotFound("This account is not stored and its profile cannot be edited")

        updates = {
            field: clean_text(value) or ""
            for field, value in changes.model_dump(exclude_none=True).items()
            if field in PROFILE_FIELDS
        }
        if not updates:
            raise ValidationError("No fields provided to update.")

        updates["updated_at"] = self._timestamp()
        row = self.store.accounts.update(actor.id, updates)
        if row is None:
            raise NotFound(f"Account {actor.id} not found")
        return account_from_row(row)
