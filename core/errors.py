# core/errors.py

from typing import Optional, Type

import httpx

from core.logging_config import logger


# ============================================================
# Error taxonomy
# ============================================================
class AppError(Exception):
    """
    Base class for every failure the service reports to callers.

    status_code / code / retryable drive the JSON error body built in
    main.py, so clients can tell "fix your input" from "try again".
    """

    status_code: int = 500
    code: str = "error"
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResolutionError(AppError):
    """Identity lookup failed; the caller should retry."""

    status_code = 503
    code = "resolution_failed"
    retryable = True


class StoreUnavailable(AppError):
    """Transport failure or timeout talking to the store."""

    status_code = 503
    code = "store_unavailable"
    retryable = True

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class InvalidStateTransition(AppError):
    """The record is not in a state that allows the requested transition."""

    status_code = 409
    code = "invalid_state_transition"


class ValidationError(AppError):
    status_code = 422
    code = "validation_error"


class Conflict(AppError):
    """A unique constraint rejected the write."""

    status_code = 409
    code = "conflict"


class DuplicateAccount(Conflict):
    code = "duplicate_account"


class PermissionDenied(AppError):
    status_code = 403
    code = "permission_denied"


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class NoAccount(PermissionDenied):
    """Authenticated, but no account exists: the person should request access."""

    code = "no_account"


# ============================================================
# Supabase error helpers
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors (have .message / .code)
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    message = getattr(error, "message", None)
    if message:
        return str(message)

    if error.args:
        return str(error.args[0])

    return str(error) or type(error).__name__


def _postgrest_code(error: Exception) -> Optional[str]:
    code = getattr(error, "code", None)
    return str(code) if code else None


def translate_store_error(
    error: Exception,
    operation: str,
    conflict: Type[Conflict] = Conflict,
) -> AppError:
    """
    Map a Supabase client failure onto the error taxonomy.
    Returns the error (doesn't raise) so the caller can `raise ... from`.
    Unique violations become `conflict`; the users table passes DuplicateAccount.
    """
    if isinstance(error, AppError):
        return error

    detail = extract_supabase_error(error)

    if isinstance(error, httpx.TimeoutException):
        logger.warning(f"{operation}: store timed out ({detail})")
        return StoreUnavailable(f"{operation}: store timed out", timeout=True)

    if isinstance(error, httpx.TransportError):
        logger.warning(f"{operation}: store unreachable ({detail})")
        return StoreUnavailable(f"{operation}: store unreachable")

    lowered = detail.lower()
    if _postgrest_code(error) == "23505" or "duplicate" in lowered:
        logger.warning(f"{operation}: duplicate record ({detail})")
        return conflict(f"{operation}: record already exists")

    logger.error(f"{operation}: {detail}")
    return StoreUnavailable(f"{operation} failed")
