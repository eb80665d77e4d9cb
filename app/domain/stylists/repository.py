"""Stylist repository - Database operations for stylists and their services"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Service, Stylist, StylistService

logger = logging.getLogger(__name__)


class StylistRepository:
    """Repository for stylist database operations"""

    @staticmethod
    def get_stylist_by_id(db: Session, stylist_id: int) -> Optional[Stylist]:
        return db.query(Stylist).filter(Stylist.id == stylist_id).first()

    @staticmethod
    def get_stylists(db: Session, active_only: bool = False) -> list[Stylist]:
        query = db.query(Stylist)
        if active_only:
            query = query.filter(Stylist.is_active.is_(True))
        return query.order_by(Stylist.name).all()

    @staticmethod
    def get_services_for_stylist(
        db: Session, stylist_id: int, active_only: bool = False
    ) -> list[Service]:
        """Services the stylist offers"""
        query = (
            db.query(Service)
            .join(StylistService, StylistService.service_id == Service.id)
            .filter(StylistService.stylist_id == stylist_id)
        )
        if active_only:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.category, Service.name).all()

    @staticmethod
    def _sync_services(db: Session, stylist: Stylist, service_ids: list[int]) -> None:
        """Diff the stylist's links against service_ids; changes are flushed, not committed"""
        wanted = set(service_ids)
        current = {link.service_id: link for link in stylist.service_links}

        for service_id, link in current.items():
            if service_id not in wanted:
                stylist.service_links.remove(link)

        for service_id in service_ids:
            if service_id not in current:
                stylist.service_links.append(StylistService(service_id=service_id))

        db.flush()

    @staticmethod
    def create_stylist(
        db: Session, service_ids: Optional[list[int]] = None, **stylist_data
    ) -> Stylist:
        """Create a stylist and its service links in one transaction"""
        stylist = Stylist(**stylist_data)
        try:
            db.add(stylist)
            db.flush()
            if service_ids:
                StylistRepository._sync_services(db, stylist, service_ids)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(stylist)
        return stylist

    @staticmethod
    def update_stylist(
        db: Session,
        stylist: Stylist,
        updates: dict,
        service_ids: Optional[list[int]] = None,
    ) -> Stylist:
        """
        Update stylist fields and, when service_ids is given, replace the
        offered services. Everything commits together or not at all.
        """
        try:
            for key, value in updates.items():
                if hasattr(stylist, key):
                    setattr(stylist, key, value)

            if service_ids is not None:
                StylistRepository._sync_services(db, stylist, service_ids)

            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"❌ Stylist {stylist.id} update rolled back: {e}")
            raise

        db.refresh(stylist)
        return stylist

    @staticmethod
    def count_bookings(db: Session, stylist_id: int) -> int:
        return db.query(Booking).filter(Booking.stylist_id == stylist_id).count()

    @staticmethod
    def delete_stylist(db: Session, stylist: Stylist) -> None:
        """Delete a stylist and their service links"""
        db.delete(stylist)
        db.commit()
