"""Stylist domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...schemas import CamelModel
from ...security_utils import sanitize_text
from ...shared.validators import require_value, validate_email, validate_phone
from ..catalog.schemas import ServiceResponse


class _StylistFields(CamelModel):
    @field_validator("bio", check_fields=False)
    @classmethod
    def clean_bio(cls, v):
        return sanitize_text(v)

    @field_validator("email", check_fields=False)
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone_number", check_fields=False)
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("services", check_fields=False)
    @classmethod
    def dedupe_services(cls, v):
        # Keep request order, drop repeats
        return list(dict.fromkeys(v)) if v is not None else v


class StylistCreate(_StylistFields):
    """Schema for adding a stylist, optionally with the services they offer"""

    name: str = Field(min_length=1, max_length=255)
    title: str = Field(min_length=1, max_length=255)
    bio: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    rating: float = Field(default=5.0, ge=0, le=5)
    is_active: bool = True
    services: Optional[list[int]] = None


class StylistUpdate(_StylistFields):
    """Omit `services` to leave the offered services untouched"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    bio: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    is_active: Optional[bool] = None
    services: Optional[list[int]] = None

    @field_validator("name", "title", "is_active")
    @classmethod
    def reject_null(cls, v):
        return require_value(v)


class StylistResponse(CamelModel):
    id: int
    name: str
    title: str
    bio: Optional[str] = None
    image: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    rating: Optional[float] = None
    is_active: bool
    created_at: Optional[datetime] = None


class StylistSummary(CamelModel):
    """Stylist details embedded in booking payloads"""

    id: int
    name: str
    title: str
    image: Optional[str] = None


class StylistListResponse(BaseModel):
    stylists: list[StylistResponse]


class StylistDetailResponse(BaseModel):
    stylist: StylistResponse
    services: list[ServiceResponse]


class StylistMessageResponse(BaseModel):
    message: str
    stylist: StylistResponse
    services: list[ServiceResponse]
