from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from core.config import settings
from core.errors import NoAccount, PermissionDenied, ResolutionError, StoreUnavailable
from core.logging_config import logger
from core.permission_helpers import PermissionPolicy, get_permission_policy
from core.store import Store, get_store
from core.supabase_client import get_supabase_client
from models.account import Account
from models.identity import ExternalIdentity, IdentityResolution, ResolutionOutcome
from services.identity import BootstrapAdmin, IdentityResolver
from services.lifecycle import AccountLifecycleManager


bearer_scheme = HTTPBearer()


# ============================================================
# AUTH DECODING (Supabase: validates JWT → identity assertion)
# ============================================================
def get_external_identity(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> ExternalIdentity:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise StoreUnavailable("Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Token validation failed: {type(e).__name__}")
        raise unauthorized

    if not auth_resp or not auth_resp.user or not auth_resp.user.email:
        raise unauthorized

    return ExternalIdentity(
        external_id=auth_resp.user.id or "",
        email=auth_resp.user.email,
    )


# ============================================================
# IDENTITY RESOLUTION (assertion → Account | no account | failure)
# ============================================================
def get_identity_resolver(store: Store = Depends(get_store)) -> IdentityResolver:
    return IdentityResolver(store.accounts, BootstrapAdmin.from_settings(settings))


def get_resolution(
    identity: ExternalIdentity = Depends(get_external_identity),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> IdentityResolution:
    return resolver.resolve(identity)


def get_current_account(
    resolution: IdentityResolution = Depends(get_resolution),
) -> Account:
    """
    The acting account. Fails closed:
      • no account        → 403 no_account (request access)
      • lookup failed     → 503 resolution_failed (retry)
      • not active        → 403 permission_denied
    """
    if resolution.outcome == ResolutionOutcome.resolution_failed:
        raise ResolutionError(resolution.error or "Identity resolution failed")

    if resolution.outcome == ResolutionOutcome.no_account or resolution.account is None:
        raise NoAccount("No account exists for this identity; request access")

    account = resolution.account
    if not account.is_active:
        raise PermissionDenied(f"Account is {account.status}")

    return account


# ============================================================
# SERVICES
# ============================================================
def get_lifecycle_manager(
    store: Store = Depends(get_store),
    policy: PermissionPolicy = Depends(get_permission_policy),
) -> AccountLifecycleManager:
    return AccountLifecycleManager(store, policy)
