"""Dashboard domain - Admin overview figures"""

from .router import router

__all__ = ["router"]
