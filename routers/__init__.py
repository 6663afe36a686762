# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .account_requests import router as account_requests_router
from .users import router as users_router
from .strategic_approvals import router as strategic_approvals_router
from .health import router as health_router


# Master router, registered by main.create_app()
api_router = APIRouter()

# Auth / session
api_router.include_router(auth_router)

# Account lifecycle
api_router.include_router(account_requests_router)
api_router.include_router(users_router)
api_router.include_router(strategic_approvals_router)

# Health
api_router.include_router(health_router)

__all__ = ["api_router"]
