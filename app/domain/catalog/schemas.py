"""Catalog schemas - salon services offered to clients"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...schemas import CamelModel
from ...security_utils import sanitize_text
from ...shared.validators import require_value

ServiceCategory = Literal["Hair", "Beard", "Skincare", "Nails", "Event", "Other"]


class _ServiceFields(CamelModel):
    @field_validator("description", check_fields=False)
    @classmethod
    def clean_description(cls, v):
        return sanitize_text(v)

    @field_validator("name", check_fields=False)
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip() if v else v


class ServiceCreate(_ServiceFields):
    """Schema for creating a new service"""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(ge=0)
    duration: int = Field(gt=0, description="Duration in minutes")
    category: ServiceCategory
    image: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True


class ServiceUpdate(_ServiceFields):
    """Schema for updating an existing service"""

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)
    category: Optional[ServiceCategory] = None
    image: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator("name", "price", "duration", "category", "is_active")
    @classmethod
    def reject_null(cls, v):
        return require_value(v)


class ServiceResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    duration: int
    category: str
    image: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class ServiceSummary(CamelModel):
    """Service details embedded in booking payloads"""

    id: int
    name: str
    price: float
    duration: int
    category: str


class ServiceListResponse(BaseModel):
    services: list[ServiceResponse]


class ServiceEnvelope(BaseModel):
    service: ServiceResponse


class ServiceMessageResponse(BaseModel):
    message: str
    service: ServiceResponse
