"""User routers - authentication endpoints and admin client management"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...schemas import MessageResponse
from ...services.notification_service import ConnectionRegistry, get_connection_registry
from .schemas import (
    AdminUserCreate,
    AdminUserUpdate,
    AuthResponse,
    ProfileUpdate,
    UserEnvelope,
    UserListResponse,
    UserLogin,
    UserMessageResponse,
    UserRegister,
    UserResponse,
    UserRole,
)
from .service import UserService

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["Authentication"])
admin_router = APIRouter(prefix="/api/admin/users", tags=["Admin: Clients"])

rate_limit_register = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="register")
rate_limit_login = create_rate_limiter(limit=20, window_seconds=300, key_prefix="login")


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


# ============================================================================
# AUTHENTICATION
# ============================================================================


@auth_router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: UserRegister,
    request: Request,
    service: UserService = Depends(get_user_service),
    _: None = Depends(rate_limit_register),
):
    """Register a client account and return a session token"""
    user, token = service.register(data, _client_ip(request))
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserResponse.model_validate(user),
    )


@auth_router.post("/login", response_model=AuthResponse)
async def login(
    data: UserLogin,
    request: Request,
    service: UserService = Depends(get_user_service),
    _: None = Depends(rate_limit_login),
):
    user, token = service.login(data, _client_ip(request))
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )


@auth_router.get("/profile", response_model=UserEnvelope)
async def get_profile(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@auth_router.put("/profile", response_model=UserMessageResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update the caller's name, phone number or password"""
    user = service.update_profile(current_user, data)
    return UserMessageResponse(
        message="Profile updated successfully", user=UserResponse.model_validate(user)
    )


# ============================================================================
# ADMIN CLIENT MANAGEMENT
# ============================================================================


@admin_router.get("", response_model=UserListResponse)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    users = service.list_users(role)
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


@admin_router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: int,
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    return UserEnvelope(user=UserResponse.model_validate(service.get_user(user_id)))


@admin_router.post("", response_model=UserMessageResponse, status_code=201)
async def create_user(
    data: AdminUserCreate,
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    user = service.create_user(data)
    return UserMessageResponse(
        message="User created successfully", user=UserResponse.model_validate(user)
    )


@admin_router.put("/{user_id}", response_model=UserMessageResponse)
async def update_user(
    user_id: int,
    data: AdminUserUpdate,
    _admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    user = service.update_user(user_id, data)
    return UserMessageResponse(
        message="User updated successfully", user=UserResponse.model_validate(user)
    )


@admin_router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
    registry: ConnectionRegistry = Depends(get_connection_registry),
):
    """Delete a user; their bookings stay on record as guest bookings"""
    return service.delete_user(user_id, admin, registry)
