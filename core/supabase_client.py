# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

def get_supabase_client() -> Optional[Client]:
    """
    Creates a Supabase client using the SERVICE ROLE KEY.
    REQUIRED for:
        - auth.get_user (bearer token validation)
        - full read/write on users / account_requests / strategic_approvals
    Returns None when credentials are missing.
    """
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY

    if not supabase_url or not supabase_key:
        logger.error("Missing Supabase credentials")
        logger.error(f"   URL: {supabase_url}")
        logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
        return None

    try:
        return create_client(supabase_url, supabase_key)
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

def ping_supabase() -> dict:
    """
    Simple connectivity check against the tables this service owns.
    Does NOT query auth tables.
    """
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    tables = [
        settings.USERS_TABLE,
        settings.ACCOUNT_REQUESTS_TABLE,
        settings.STRATEGIC_APPROVALS_TABLE,
    ]
    results = {}
    overall = "ok"

    for t in tables:
        try:
            res = client.table(t).select("id").limit(1).execute()
            results[t] = {
                "status": "ok",
                "rows_found": len(res.data or []),
            }
        except Exception as err:
            overall = "degraded"
            results[t] = {"status": "error", "detail": str(err)}

    return {
        "service": "Supabase",
        "status": overall,
        "tables": results,
    }
