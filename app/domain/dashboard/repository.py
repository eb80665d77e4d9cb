"""Dashboard repository - aggregate booking queries"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Booking, Service


class DashboardRepository:
    """All ranges are half-open: start <= Booking.date < end"""

    @staticmethod
    def count_bookings_between(db: Session, start: datetime, end: datetime) -> int:
        return (
            db.query(func.count(Booking.id))
            .filter(Booking.date >= start, Booking.date < end)
            .scalar()
            or 0
        )

    @staticmethod
    def count_distinct_clients_between(db: Session, start: datetime, end: datetime) -> int:
        """Registered clients with at least one booking in the range (guests excluded)"""
        return (
            db.query(func.count(func.distinct(Booking.client_id)))
            .filter(Booking.client_id.isnot(None), Booking.date >= start, Booking.date < end)
            .scalar()
            or 0
        )

    @staticmethod
    def completed_totals_between(db: Session, start: datetime, end: datetime) -> tuple[int, float]:
        """(number of completed bookings, sum of their service prices)"""
        count, revenue = (
            db.query(func.count(Booking.id), func.coalesce(func.sum(Service.price), 0))
            .join(Service, Service.id == Booking.service_id)
            .filter(Booking.status == "completed", Booking.date >= start, Booking.date < end)
            .one()
        )
        return int(count or 0), float(revenue or 0)
