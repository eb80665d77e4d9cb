"""Bookings domain - Client booking flow, admin management and status workflow"""

from .router import admin_router, client_router

__all__ = ["client_router", "admin_router"]
