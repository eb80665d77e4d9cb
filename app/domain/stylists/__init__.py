"""Stylists domain - Stylist profiles and the services each offers"""

from .router import admin_router, manage_router, public_router

__all__ = ["public_router", "admin_router", "manage_router"]
