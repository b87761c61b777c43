"""API v1 routers.

Resources:
    /api/v1/accounts   - Accounts, authentication and passwords
    /api/v1/audits     - Audit trail (administrators)
"""

from fastapi import APIRouter

from keyhold.presentation.api.v1.accounts import router as accounts_router
from keyhold.presentation.api.v1.audits import router as audits_router


def build_v1_router(prefix: str = "/api/v1") -> APIRouter:
    """Create the v1 router with every resource mounted under ``prefix``."""
    v1_router = APIRouter(prefix=prefix)
    v1_router.include_router(accounts_router)
    v1_router.include_router(audits_router)
    return v1_router


__all__ = ["build_v1_router"]
