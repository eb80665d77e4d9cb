"""Booking repository - Database operations for bookings"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def _query(db: Session):
        """Bookings with stylist, service and client loaded"""
        return db.query(Booking).options(
            joinedload(Booking.stylist),
            joinedload(Booking.service),
            joinedload(Booking.client),
        )

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        return BookingRepository._query(db).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_bookings(
        db: Session, stylist_id: Optional[int] = None, client_id: Optional[int] = None
    ) -> list[Booking]:
        """Get all bookings, newest appointment first, optionally filtered"""
        query = BookingRepository._query(db)
        if stylist_id is not None:
            query = query.filter(Booking.stylist_id == stylist_id)
        if client_id is not None:
            query = query.filter(Booking.client_id == client_id)
        return query.order_by(Booking.date.desc(), Booking.id.desc()).all()

    @staticmethod
    def get_bookings_by_client(db: Session, client_id: int) -> list[Booking]:
        return BookingRepository.get_bookings(db, client_id=client_id)

    @staticmethod
    def get_bookings_by_status(db: Session, status: str) -> list[Booking]:
        return (
            BookingRepository._query(db)
            .filter(Booking.status == status)
            .order_by(Booking.date.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_bookings_by_date_range(db: Session, start: datetime, end: datetime) -> list[Booking]:
        """Bookings with start <= date < end, earliest first"""
        return (
            BookingRepository._query(db)
            .filter(Booking.date >= start, Booking.date < end)
            .order_by(Booking.date, Booking.id)
            .all()
        )

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def update_booking(db: Session, booking: Booking, **updates) -> Booking:
        """Set every given field on the booking; None clears a nullable column"""
        for key, value in updates.items():
            if hasattr(booking, key):
                setattr(booking, key, value)

        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def delete_booking(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()
