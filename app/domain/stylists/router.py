"""Stylist routers - public stylist profiles and admin stylist management"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from ..catalog.schemas import ServiceResponse
from .schemas import (
    StylistCreate,
    StylistDetailResponse,
    StylistListResponse,
    StylistMessageResponse,
    StylistResponse,
    StylistUpdate,
)
from .service import StylistService

logger = logging.getLogger(__name__)

# Mounted under /api and /api/client
public_router = APIRouter(prefix="/stylists", tags=["Stylists"])
# Mounted under /api/admin
admin_router = APIRouter(prefix="/stylists", tags=["Admin: Stylists"])
# Mounted under /api/admin and /api
manage_router = APIRouter(prefix="/stylists", tags=["Admin: Stylists"])


def get_stylist_service(db: Session = Depends(get_db)) -> StylistService:
    """Dependency injection for StylistService"""
    return StylistService(db)


def _detail(stylist, services) -> dict:
    return {
        "stylist": StylistResponse.model_validate(stylist),
        "services": [ServiceResponse.model_validate(s) for s in services],
    }


# ============================================================================
# PUBLIC
# ============================================================================


@public_router.get("", response_model=StylistListResponse)
async def list_active_stylists(service: StylistService = Depends(get_stylist_service)):
    stylists = service.list_stylists(active_only=True)
    return StylistListResponse(stylists=[StylistResponse.model_validate(s) for s in stylists])


@public_router.get("/{stylist_id}", response_model=StylistDetailResponse)
async def get_stylist(stylist_id: int, service: StylistService = Depends(get_stylist_service)):
    """Stylist profile with the services they currently offer"""
    stylist, services = service.get_stylist_with_services(stylist_id, active_only=True)
    return StylistDetailResponse(**_detail(stylist, services))


# ============================================================================
# ADMIN
# ============================================================================


@admin_router.get("", response_model=StylistListResponse)
async def list_all_stylists(
    _admin: User = Depends(get_current_admin),
    service: StylistService = Depends(get_stylist_service),
):
    stylists = service.list_stylists(active_only=False)
    return StylistListResponse(stylists=[StylistResponse.model_validate(s) for s in stylists])


@admin_router.get("/{stylist_id}", response_model=StylistDetailResponse)
async def admin_get_stylist(
    stylist_id: int,
    _admin: User = Depends(get_current_admin),
    service: StylistService = Depends(get_stylist_service),
):
    stylist, services = service.get_stylist_with_services(stylist_id)
    return StylistDetailResponse(**_detail(stylist, services))


@manage_router.post("", response_model=StylistMessageResponse, status_code=201)
async def create_stylist(
    data: StylistCreate,
    _admin: User = Depends(get_current_admin),
    service: StylistService = Depends(get_stylist_service),
):
    stylist, services = service.create_stylist(data)
    return StylistMessageResponse(message="Stylist created successfully", **_detail(stylist, services))


@manage_router.put("/{stylist_id}", response_model=StylistMessageResponse)
async def update_stylist(
    stylist_id: int,
    data: StylistUpdate,
    _admin: User = Depends(get_current_admin),
    service: StylistService = Depends(get_stylist_service),
):
    """Update a stylist; a `services` list replaces the offered services atomically"""
    stylist, services = service.update_stylist(stylist_id, data)
    return StylistMessageResponse(message="Stylist updated successfully", **_detail(stylist, services))


@manage_router.delete("/{stylist_id}", response_model=MessageResponse)
async def delete_stylist(
    stylist_id: int,
    _admin: User = Depends(get_current_admin),
    service: StylistService = Depends(get_stylist_service),
):
    return service.delete_stylist(stylist_id)
