"""Catalog routers - public service menu and admin service management"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import (
    ServiceCreate,
    ServiceEnvelope,
    ServiceListResponse,
    ServiceMessageResponse,
    ServiceResponse,
    ServiceUpdate,
)
from .service import CatalogService

logger = logging.getLogger(__name__)

# Mounted under /api and /api/client
public_router = APIRouter(prefix="/services", tags=["Services"])
# Mounted under /api/admin
admin_router = APIRouter(prefix="/services", tags=["Admin: Services"])
# Mounted under /api/admin and /api
manage_router = APIRouter(prefix="/services", tags=["Admin: Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


# ============================================================================
# PUBLIC
# ============================================================================


@public_router.get("", response_model=ServiceListResponse)
async def list_active_services(service: CatalogService = Depends(get_catalog_service)):
    """Services currently offered"""
    services = service.list_services(active_only=True)
    return ServiceListResponse(services=[ServiceResponse.model_validate(s) for s in services])


@public_router.get("/{service_id}", response_model=ServiceEnvelope)
async def get_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    return ServiceEnvelope(service=ServiceResponse.model_validate(service.get_service(service_id)))


# ============================================================================
# ADMIN
# ============================================================================


@admin_router.get("", response_model=ServiceListResponse)
async def list_all_services(
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    """All services, including inactive ones"""
    services = service.list_services(active_only=False)
    return ServiceListResponse(services=[ServiceResponse.model_validate(s) for s in services])


@admin_router.get("/{service_id}", response_model=ServiceEnvelope)
async def admin_get_service(
    service_id: int,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceEnvelope(service=ServiceResponse.model_validate(service.get_service(service_id)))


@manage_router.post("", response_model=ServiceMessageResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    created = service.create_service(data)
    return ServiceMessageResponse(
        message="Service created successfully", service=ServiceResponse.model_validate(created)
    )


@manage_router.put("/{service_id}", response_model=ServiceMessageResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    updated = service.update_service(service_id, data)
    return ServiceMessageResponse(
        message="Service updated successfully", service=ServiceResponse.model_validate(updated)
    )


@manage_router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: int,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id)
