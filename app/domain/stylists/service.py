"""Stylist service - Business logic for stylists and the services they offer"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service, Stylist
from ..catalog.repository import ServiceRepository
from .repository import StylistRepository
from .schemas import StylistCreate, StylistUpdate

logger = logging.getLogger(__name__)


class StylistService:
    """Service layer for stylist business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StylistRepository()
        self.service_repo = ServiceRepository()

    def list_stylists(self, active_only: bool = True) -> list[Stylist]:
        return self.repo.get_stylists(self.db, active_only=active_only)

    def get_stylist(self, stylist_id: int) -> Stylist:
        stylist = self.repo.get_stylist_by_id(self.db, stylist_id)
        if not stylist:
            raise HTTPException(status_code=404, detail="Stylist not found")
        return stylist

    def get_stylist_with_services(
        self, stylist_id: int, active_only: bool = False
    ) -> tuple[Stylist, list[Service]]:
        stylist = self.get_stylist(stylist_id)
        return stylist, self.repo.get_services_for_stylist(self.db, stylist_id, active_only)

    def _check_services_exist(self, service_ids: Optional[list[int]]) -> None:
        if not service_ids:
            return
        found = {s.id for s in self.service_repo.get_services_by_ids(self.db, service_ids)}
        missing = [sid for sid in service_ids if sid not in found]
        if missing:
            raise HTTPException(status_code=404, detail=f"Service not found: {missing}")

    def create_stylist(self, data: StylistCreate) -> tuple[Stylist, list[Service]]:
        self._check_services_exist(data.services)

        stylist = self.repo.create_stylist(
            self.db, service_ids=data.services, **data.model_dump(exclude={"services"})
        )
        logger.info(f"✅ Stylist created: {stylist.id} with {len(data.services or [])} service(s)")
        return stylist, self.repo.get_services_for_stylist(self.db, stylist.id)

    def update_stylist(self, stylist_id: int, data: StylistUpdate) -> tuple[Stylist, list[Service]]:
        stylist = self.get_stylist(stylist_id)
        self._check_services_exist(data.services)

        updates = data.model_dump(exclude_unset=True, exclude={"services"})
        stylist = self.repo.update_stylist(self.db, stylist, updates, service_ids=data.services)
        return stylist, self.repo.get_services_for_stylist(self.db, stylist.id)

    def delete_stylist(self, stylist_id: int) -> dict:
        stylist = self.get_stylist(stylist_id)

        if self.repo.count_bookings(self.db, stylist_id):
            raise HTTPException(
                status_code=409,
                detail="Cannot delete stylist with existing bookings. Deactivate them instead.",
            )

        self.repo.delete_stylist(self.db, stylist)
        logger.info(f"🗑️ Stylist {stylist_id} deleted")
        return {"message": "Stylist deleted successfully"}
