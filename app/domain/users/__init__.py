"""Users domain - Authentication, profiles and admin client management"""

from .router import admin_router, auth_router

__all__ = ["auth_router", "admin_router"]
