"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...schemas import CamelModel
from ...security_utils import sanitize_text
from ...shared.validators import normalize_time_label, parse_booking_date, require_value
from ..catalog.schemas import ServiceSummary
from ..stylists.schemas import StylistSummary
from ..users.schemas import UserSummary

BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]
PaymentMethod = Literal["cash", "other"]
PaymentStatus = Literal["pending", "completed"]


class _BookingFields(CamelModel):
    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def parse_date(cls, v):
        return parse_booking_date(v)

    @field_validator("time_start", "time_end", check_fields=False)
    @classmethod
    def normalize_time(cls, v):
        return normalize_time_label(v)

    @field_validator("notes", check_fields=False)
    @classmethod
    def clean_notes(cls, v):
        return sanitize_text(v)

    @field_validator("client_name", "client_contact", "client_location", check_fields=False)
    @classmethod
    def clean_client_text(cls, v):
        if v is None:
            return v
        cleaned = sanitize_text(v)
        if not cleaned:
            raise ValueError("Field cannot be blank")
        return cleaned


class BookingCreate(_BookingFields):
    """
    Schema for a client booking an appointment

    Name and contact default to the caller's profile. The booking is always
    created as pending; a status in the payload is ignored.
    """

    client_name: Optional[str] = Field(default=None, max_length=255)
    client_contact: Optional[str] = Field(default=None, max_length=255)
    client_location: str = Field(max_length=500)
    stylist_id: int
    service_id: int
    date: datetime
    time_start: str
    time_end: Optional[str] = None
    payment_method: PaymentMethod = "cash"
    notes: Optional[str] = None


class BookingClientUpdate(_BookingFields):
    """The only fields a client may change on their own booking"""

    model_config = ConfigDict(extra="forbid")

    date: Optional[datetime] = None
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    notes: Optional[str] = None
    service_id: Optional[int] = None
    stylist_id: Optional[int] = None

    @field_validator("date", "time_start", "service_id", "stylist_id")
    @classmethod
    def reject_null(cls, v):
        return require_value(v)


class AdminBookingCreate(_BookingFields):
    """Admin booking: a guest booking when clientId is omitted"""

    client_name: str = Field(max_length=255)
    client_contact: str = Field(max_length=255)
    client_location: str = Field(max_length=500)
    client_id: Optional[int] = None
    stylist_id: int
    service_id: int
    date: datetime
    time_start: str
    time_end: Optional[str] = None
    status: BookingStatus = "pending"
    payment_method: PaymentMethod = "cash"
    payment_status: PaymentStatus = "pending"
    notes: Optional[str] = None


class AdminBookingUpdate(_BookingFields):
    """Any booking field except status, which goes through the status endpoint"""

    model_config = ConfigDict(extra="forbid")

    client_name: Optional[str] = Field(default=None, max_length=255)
    client_contact: Optional[str] = Field(default=None, max_length=255)
    client_location: Optional[str] = Field(default=None, max_length=500)
    client_id: Optional[int] = None
    stylist_id: Optional[int] = None
    service_id: Optional[int] = None
    date: Optional[datetime] = None
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None

    @field_validator(
        "client_name",
        "client_contact",
        "client_location",
        "stylist_id",
        "service_id",
        "date",
        "time_start",
        "payment_method",
        "payment_status",
    )
    @classmethod
    def reject_null(cls, v):
        return require_value(v)


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingPaymentUpdate(CamelModel):
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None


class BookingResponse(CamelModel):
    id: int
    client_name: str
    client_contact: str
    client_location: str
    client_id: Optional[int] = None
    stylist_id: int
    service_id: int
    date: datetime
    time_start: str
    time_end: str
    status: str
    payment_method: str
    payment_status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    stylist: Optional[StylistSummary] = None
    service: Optional[ServiceSummary] = None
    client: Optional[UserSummary] = None


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]


class BookingEnvelope(BaseModel):
    booking: BookingResponse


class BookingMessageResponse(BaseModel):
    message: str
    booking: BookingResponse
