"""Catalog repository - Database operations for services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Service


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def get_services(db: Session, active_only: bool = False) -> list[Service]:
        """Get services ordered by category then name"""
        query = db.query(Service)
        if active_only:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.category, Service.name).all()

    @staticmethod
    def get_services_by_ids(db: Session, service_ids: list[int]) -> list[Service]:
        if not service_ids:
            return []
        return db.query(Service).filter(Service.id.in_(service_ids)).all()

    @staticmethod
    def create_service(db: Session, **service_data) -> Service:
        service = Service(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        """Set every given field on the service; None clears a nullable column"""
        for key, value in updates.items():
            if hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def count_bookings(db: Session, service_id: int) -> int:
        return db.query(Booking).filter(Booking.service_id == service_id).count()

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        """Delete a service and its stylist associations"""
        db.delete(service)
        db.commit()
