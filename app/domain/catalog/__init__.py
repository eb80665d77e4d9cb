"""Catalog domain - The salon's service menu"""

from .router import admin_router, manage_router, public_router

__all__ = ["public_router", "admin_router", "manage_router"]
