"""Non-versioned routers (health)."""

from keyhold.presentation.routers.system import system_router

__all__ = ["system_router"]
