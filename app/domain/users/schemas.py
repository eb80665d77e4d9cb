"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...schemas import CamelModel
from ...shared.validators import require_value, validate_email, validate_phone

UserRole = Literal["admin", "client"]


class _UserFields(CamelModel):
    @field_validator("email", check_fields=False)
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone_number", check_fields=False)
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("name", check_fields=False)
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip() if v else v


class UserRegister(_UserFields):
    """Schema for self-registration (always creates a client account)"""

    name: str = Field(min_length=1, max_length=255)
    email: str
    password: str = Field(min_length=6, max_length=72)
    phone_number: Optional[str] = None


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileUpdate(_UserFields):
    """Fields a user may change on their own profile"""

    name: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=72)

    @field_validator("name", "password")
    @classmethod
    def reject_null(cls, v):
        return require_value(v)


class AdminUserCreate(_UserFields):
    """Schema for an admin adding a client (or another admin)"""

    name: str = Field(min_length=1, max_length=255)
    email: str
    password: str = Field(min_length=6, max_length=72)
    role: UserRole = "client"
    phone_number: Optional[str] = None


class AdminUserUpdate(_UserFields):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=72)
    role: Optional[UserRole] = None
    phone_number: Optional[str] = None

    @field_validator("name", "email", "password", "role")
    @classmethod
    def reject_null(cls, v):
        return require_value(v)


class UserResponse(CamelModel):
    """User as returned by the API (never includes the password hash)"""

    id: int
    name: str
    email: str
    role: str
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None


class UserSummary(CamelModel):
    """Client details embedded in admin booking listings"""

    id: int
    name: str
    email: str
    phone_number: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class UserEnvelope(BaseModel):
    user: UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse]


class UserMessageResponse(BaseModel):
    message: str
    user: UserResponse
