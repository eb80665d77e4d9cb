"""Booking routers - client booking flow and admin booking management"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import Booking, User
from ...schemas import MessageResponse
from ...services.notification_service import (
    ConnectionRegistry,
    get_connection_registry,
    notify_booking_status_change,
)
from .schemas import (
    AdminBookingCreate,
    AdminBookingUpdate,
    BookingClientUpdate,
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingMessageResponse,
    BookingPaymentUpdate,
    BookingResponse,
    BookingStatus,
    BookingStatusUpdate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

# Mounted under /api/client and /api
client_router = APIRouter(prefix="/bookings", tags=["Client Bookings"])
# Mounted under /api/admin
admin_router = APIRouter(prefix="/bookings", tags=["Admin: Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def _listing(bookings: list[Booking]) -> BookingListResponse:
    return BookingListResponse(bookings=[BookingResponse.model_validate(b) for b in bookings])


def _message(message: str, booking: Booking) -> BookingMessageResponse:
    return BookingMessageResponse(message=message, booking=BookingResponse.model_validate(booking))


# ============================================================================
# CLIENT
# ============================================================================


@client_router.post("", response_model=BookingMessageResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Book an appointment for the current user"""
    booking = service.create_client_booking(current_user, data)
    return _message("Booking created successfully", booking)


@client_router.get("", response_model=BookingListResponse)
async def get_my_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return _listing(service.list_client_bookings(current_user))


@client_router.get("/{booking_id}", response_model=BookingEnvelope)
async def get_my_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_client_booking(booking_id, current_user)
    return BookingEnvelope(booking=BookingResponse.model_validate(booking))


@client_router.put("/{booking_id}", response_model=BookingMessageResponse)
async def update_my_booking(
    booking_id: int,
    data: BookingClientUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Reschedule or change an open booking (date, times, notes, service, stylist)"""
    booking = service.update_client_booking(booking_id, current_user, data)
    return _message("Booking updated successfully", booking)


@client_router.put("/{booking_id}/cancel", response_model=BookingMessageResponse)
async def cancel_my_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    registry: ConnectionRegistry = Depends(get_connection_registry),
):
    booking = service.cancel_booking(booking_id, current_user)
    await notify_booking_status_change(registry, booking)
    return _message("Booking cancelled successfully", booking)


# ============================================================================
# ADMIN
# ============================================================================


@admin_router.get("", response_model=BookingListResponse)
async def list_bookings(
    stylist_id: Optional[int] = Query(None, alias="stylistId"),
    client_id: Optional[int] = Query(None, alias="clientId"),
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return _listing(service.list_bookings(stylist_id=stylist_id, client_id=client_id))


@admin_router.get("/status/{status}", response_model=BookingListResponse)
async def list_bookings_by_status(
    status: BookingStatus,
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return _listing(service.list_bookings_by_status(status))


@admin_router.get("/date-range", response_model=BookingListResponse)
async def list_bookings_by_date_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings dated from startDate through endDate, both days included"""
    return _listing(service.list_bookings_by_date_range(start_date, end_date))


@admin_router.get("/{booking_id}", response_model=BookingEnvelope)
async def get_booking(
    booking_id: int,
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return BookingEnvelope(booking=BookingResponse.model_validate(service.get_booking(booking_id)))


@admin_router.post("", response_model=BookingMessageResponse, status_code=201)
async def admin_create_booking(
    data: AdminBookingCreate,
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return _message("Booking created successfully", service.create_admin_booking(data))


@admin_router.put("/{booking_id}", response_model=BookingMessageResponse)
async def admin_update_booking(
    booking_id: int,
    data: AdminBookingUpdate,
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return _message("Booking updated successfully", service.update_admin_booking(booking_id, data))


@admin_router.put("/{booking_id}/status", response_model=BookingMessageResponse)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    registry: ConnectionRegistry = Depends(get_connection_registry),
):
    """
    Change a booking's status and notify the booking's client.
    Admins may set any status; the booking's own client may only cancel it.
    """
    booking = service.update_status(booking_id, data.status, current_user)
    await notify_booking_status_change(registry, booking)
    return _message("Booking status updated successfully", booking)


@admin_router.put("/{booking_id}/payment", response_model=BookingMessageResponse)
async def update_booking_payment(
    booking_id: int,
    data: BookingPaymentUpdate,
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return _message("Payment status updated successfully", service.update_payment(booking_id, data))


@admin_router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: int,
    _admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    return service.delete_booking(booking_id)
