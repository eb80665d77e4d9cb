"""Catalog service - Business logic for the salon's service menu"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for salon services"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def list_services(self, active_only: bool = True) -> list[Service]:
        return self.repo.get_services(self.db, active_only=active_only)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = self.repo.create_service(self.db, **data.model_dump())
        logger.info(f"✅ Service created: {service.id} '{service.name}'")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        return self.repo.update_service(self.db, service, **data.model_dump(exclude_unset=True))

    def delete_service(self, service_id: int) -> dict:
        """Delete a service; services with booking history cannot be deleted"""
        service = self.get_service(service_id)

        if self.repo.count_bookings(self.db, service_id):
            raise HTTPException(
                status_code=409,
                detail="Cannot delete service with existing bookings. Deactivate it instead.",
            )

        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service {service_id} deleted")
        return {"message": "Service deleted successfully"}
