from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


# Placeholder shipped with the code; deployments set BOOTSTRAP_ADMIN_EMAIL.
DEFAULT_BOOTSTRAP_EMAIL = "admin@ekan.local"


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "EKAN Access API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Frontend (CORS)
    # -------------------------------------------------
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Tables
    # -------------------------------------------------
    USERS_TABLE: str = "users"
    ACCOUNT_REQUESTS_TABLE: str = "account_requests"
    STRATEGIC_APPROVALS_TABLE: str = "strategic_approvals"

    # -------------------------------------------------
    # Bootstrap administrator
    # Always resolves to an active admin, even on an empty store.
    # -------------------------------------------------
    BOOTSTRAP_ADMIN_EMAIL: str = Field(DEFAULT_BOOTSTRAP_EMAIL, env="BOOTSTRAP_ADMIN_EMAIL")
    BOOTSTRAP_ADMIN_ID: str = Field("user_bootstrap_admin", env="BOOTSTRAP_ADMIN_ID")
    BOOTSTRAP_ADMIN_FIRST_NAME: str = "EKAN"
    BOOTSTRAP_ADMIN_LAST_NAME: str = "Admin"
    BOOTSTRAP_ADMIN_DEPARTMENT: str = "Administration"
    BOOTSTRAP_ADMIN_POSITION: str = "System Administrator"

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    {origin.rstrip("/") for origin in settings.FRONTEND_ORIGINS}
)
