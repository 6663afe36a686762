# services/identity.py

from dataclasses import dataclass

from core.config import Settings
from core.errors import AppError, ResolutionError, ValidationError
from core.logging_config import logger
from core.store import SupabaseTable
from models.account import Account, account_from_row
from models.enums import Role, AccountStatus
from models.identity import ExternalIdentity, IdentityResolution


@dataclass(frozen=True)
class BootstrapAdmin:
    """The one identity that is always an active admin, store or no store."""
    email: str
    account_id: str
    first_name: str = "EKAN"
    last_name: str = "Admin"
    department: str = "Administration"
    position: str = "System Administrator"

    @classmethod
    def from_settings(cls, settings: Settings) -> "BootstrapAdmin":
        return cls(
            email=settings.BOOTSTRAP_ADMIN_EMAIL,
            account_id=settings.BOOTSTRAP_ADMIN_ID,
            first_name=settings.BOOTSTRAP_ADMIN_FIRST_NAME,
            last_name=settings.BOOTSTRAP_ADMIN_LAST_NAME,
            department=settings.BOOTSTRAP_ADMIN_DEPARTMENT,
            position=settings.BOOTSTRAP_ADMIN_POSITION,
        )

    def account(self, external_id: str) -> Account:
        return Account(
            id=self.account_id,
            user_id=external_id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            role=Role.admin,
            status=AccountStatus.active,
            department=self.department,
            position=self.position,
            approved_by="system",
        )


class IdentityResolver:
    """
    Maps an external identity assertion onto an internal Account.

    Read-only: never creates, updates or caches accounts.
    """

    def __init__(self, accounts: SupabaseTable, bootstrap: BootstrapAdmin):
        self.accounts = accounts
        self.bootstrap = bootstrap

    def is_bootstrap(self, email: str) -> bool:
        return bool(self.bootstrap.email) and email == self.bootstrap.email

    def resolve(self, identity: ExternalIdentity) -> IdentityResolution:
        email = identity.email or ""
        if not email.strip():
            raise ValidationError("Identity assertion has no email")

        if self.is_bootstrap(email):
            logger.info("Bootstrap administrator authenticated")
            return IdentityResolution.resolved(self.bootstrap.account(identity.external_id))

        try:
            row = self.accounts.find_one(email=email)
        except AppError as e:
            failure = ResolutionError(f"Account lookup failed for {email}: {e.message}")
            logger.warning(failure.message)
            return IdentityResolution.failed(failure.message)

        if row is None:
            logger.info(f"No account for {email}")
            return IdentityResolution.no_account()

        account = account_from_row(row, external_id=identity.external_id)
        return IdentityResolution.resolved(account)
