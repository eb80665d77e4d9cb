"""Booking service - Client booking flow, admin booking management and status workflow"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import enforce, may_set_booking_status, owns_booking
from ...models import Booking, Service, Stylist, User
from ...services.booking_workflow import is_open, validate_status_transition
from ...shared.validators import add_minutes_to_time_label, ends_after_start
from ..catalog.repository import ServiceRepository
from ..stylists.repository import StylistRepository
from ..users.repository import UserRepository
from .repository import BookingRepository
from .schemas import (
    AdminBookingCreate,
    AdminBookingUpdate,
    BookingClientUpdate,
    BookingCreate,
    BookingPaymentUpdate,
)

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.service_repo = ServiceRepository()
        self.stylist_repo = StylistRepository()
        self.user_repo = UserRepository()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def _get_stylist(self, stylist_id: int, require_active: bool = False) -> Stylist:
        stylist = self.stylist_repo.get_stylist_by_id(self.db, stylist_id)
        if not stylist:
            raise HTTPException(status_code=404, detail="Stylist not found")
        if require_active and not stylist.is_active:
            raise HTTPException(status_code=400, detail="Stylist is not currently available")
        return stylist

    def _get_service(self, service_id: int, require_active: bool = False) -> Service:
        service = self.service_repo.get_service_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        if require_active and not service.is_active:
            raise HTTPException(status_code=400, detail="Service is not currently offered")
        return service

    def _check_client_exists(self, client_id: Optional[int]) -> None:
        if client_id is not None and not self.user_repo.get_user_by_id(self.db, client_id):
            raise HTTPException(status_code=404, detail="Client not found")

    @staticmethod
    def _check_slot(time_start: str, time_end: str) -> None:
        if not ends_after_start(time_start, time_end):
            raise HTTPException(
                status_code=400, detail="timeEnd must be after timeStart on the same day"
            )

    def _apply_updates(self, booking: Booking, updates: dict, require_active: bool) -> Booking:
        """
        Validate changed references, recompute the end time if needed, and save.

        An explicit null timeEnd is recomputed from the start time and service.
        """
        if "stylist_id" in updates:
            self._get_stylist(updates["stylist_id"], require_active)

        service = None
        if "service_id" in updates:
            service = self._get_service(updates["service_id"], require_active)

        start = updates.get("time_start", booking.time_start)
        if updates.get("time_end") is None and (
            "time_end" in updates or "time_start" in updates or service
        ):
            updates["time_end"] = add_minutes_to_time_label(
                start, (service or booking.service).duration
            )
        self._check_slot(start, updates.get("time_end", booking.time_end))

        return self.repo.update_booking(self.db, booking, **updates)

    # ------------------------------------------------------------------
    # Client flow
    # ------------------------------------------------------------------

    def create_client_booking(self, user: User, data: BookingCreate) -> Booking:
        """Book an appointment for the caller; always starts pending"""
        stylist = self._get_stylist(data.stylist_id, require_active=True)
        service = self._get_service(data.service_id, require_active=True)
        time_end = data.time_end or add_minutes_to_time_label(data.time_start, service.duration)
        self._check_slot(data.time_start, time_end)

        booking = self.repo.create_booking(
            self.db,
            client_name=data.client_name or user.name,
            client_contact=data.client_contact or user.phone_number or user.email,
            client_location=data.client_location,
            client_id=user.id,
            stylist_id=stylist.id,
            service_id=service.id,
            date=data.date,
            time_start=data.time_start,
            time_end=time_end,
            status="pending",
            payment_method=data.payment_method,
            payment_status="pending",
            notes=data.notes,
        )
        logger.info(f"📅 Booking {booking.id} created by client {user.id}")
        return booking

    def list_client_bookings(self, user: User) -> list[Booking]:
        return self.repo.get_bookings_by_client(self.db, user.id)

    def get_client_booking(self, booking_id: int, user: User) -> Booking:
        booking = self.get_booking(booking_id)
        enforce(owns_booking(user, booking))
        return booking

    def update_client_booking(self, booking_id: int, user: User, data: BookingClientUpdate) -> Booking:
        booking = self.get_booking(booking_id)
        enforce(owns_booking(user, booking))

        if not is_open(booking):
            raise HTTPException(
                status_code=409,
                detail=f"Booking is {booking.status} and can no longer be modified",
            )

        return self._apply_updates(booking, data.model_dump(exclude_unset=True), require_active=True)

    # ------------------------------------------------------------------
    # Status workflow
    # ------------------------------------------------------------------

    def update_status(self, booking_id: int, new_status: str, actor: User) -> Booking:
        """
        Move a booking to new_status.

        Raises:
            HTTPException: 404 unknown booking, 403 actor may not set this
                status, 409 transition not allowed
        """
        booking = self.get_booking(booking_id)
        enforce(may_set_booking_status(actor, booking, new_status))

        old_status = booking.status
        if not validate_status_transition(old_status, new_status):
            raise HTTPException(
                status_code=409,
                detail=f"Cannot change booking status from '{old_status}' to '{new_status}'",
            )

        if old_status != new_status:
            booking = self.repo.update_booking(self.db, booking, status=new_status)
            logger.info(f"🔄 Booking {booking_id}: {old_status} → {new_status} (by user {actor.id})")
        return booking

    def cancel_booking(self, booking_id: int, actor: User) -> Booking:
        return self.update_status(booking_id, "cancelled", actor)

    # ------------------------------------------------------------------
    # Admin management
    # ------------------------------------------------------------------

    def list_bookings(
        self, stylist_id: Optional[int] = None, client_id: Optional[int] = None
    ) -> list[Booking]:
        return self.repo.get_bookings(self.db, stylist_id=stylist_id, client_id=client_id)

    def list_bookings_by_status(self, status: str) -> list[Booking]:
        return self.repo.get_bookings_by_status(self.db, status)

    def list_bookings_by_date_range(self, start_date: date, end_date: date) -> list[Booking]:
        """Bookings from the start of start_date through the end of end_date"""
        if end_date < start_date:
            raise HTTPException(status_code=400, detail="endDate must not be before startDate")

        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date + timedelta(days=1), time.min)
        return self.repo.get_bookings_by_date_range(self.db, start, end)

    def create_admin_booking(self, data: AdminBookingCreate) -> Booking:
        self._check_client_exists(data.client_id)
        self._get_stylist(data.stylist_id)
        service = self._get_service(data.service_id)

        values = data.model_dump()
        if not values["time_end"]:
            values["time_end"] = add_minutes_to_time_label(data.time_start, service.duration)
        self._check_slot(values["time_start"], values["time_end"])

        booking = self.repo.create_booking(self.db, **values)
        kind = f"client {booking.client_id}" if booking.client_id else "guest"
        logger.info(f"📅 Admin booking {booking.id} created ({kind})")
        return booking

    def update_admin_booking(self, booking_id: int, data: AdminBookingUpdate) -> Booking:
        booking = self.get_booking(booking_id)
        updates = data.model_dump(exclude_unset=True)
        self._check_client_exists(updates.get("client_id"))
        return self._apply_updates(booking, updates, require_active=False)

    def update_payment(self, booking_id: int, data: BookingPaymentUpdate) -> Booking:
        booking = self.get_booking(booking_id)
        booking = self.repo.update_booking(self.db, booking, **data.model_dump(exclude_none=True))
        logger.info(f"💵 Booking {booking_id} payment {booking.payment_status}")
        return booking

    def delete_booking(self, booking_id: int) -> dict:
        booking = self.get_booking(booking_id)
        self.repo.delete_booking(self.db, booking)
        logger.info(f"🗑️ Booking {booking_id} deleted")
        return {"message": "Booking deleted successfully"}
