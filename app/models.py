from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    __tablename__ = "users"
    # Ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(20), default="client", nullable=False)  # admin, client
    phone_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    bookings = relationship("Booking", back_populates="client")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    duration = Column(Integer, nullable=False)  # Duration in minutes
    category = Column(String(20), nullable=False)  # Hair, Beard, Skincare, Nails, Event, Other
    image = Column(String(500), nullable=True)  # URL to image
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    bookings = relationship("Booking", back_populates="service")
    stylist_links = relationship(
        "StylistService", back_populates="service", cascade="all, delete-orphan"
    )


class Stylist(Base):
    __tablename__ = "stylists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)  # URL to profile image
    email = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    rating = Column(Float, default=5.0, nullable=True)  # 0-5
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    bookings = relationship("Booking", back_populates="stylist")
    service_links = relationship(
        "StylistService", back_populates="stylist", cascade="all, delete-orphan"
    )


class StylistService(Base):
    """Many-to-many link between stylists and the services they offer"""

    __tablename__ = "stylist_services"
    __table_args__ = (UniqueConstraint("stylist_id", "service_id", name="uq_stylist_service"),)

    id = Column(Integer, primary_key=True, index=True)
    stylist_id = Column(Integer, ForeignKey("stylists.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)

    stylist = relationship("Stylist", back_populates="service_links")
    service = relationship("Service", back_populates="stylist_links")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String(255), nullable=False)
    client_contact = Column(String(255), nullable=False)
    client_location = Column(String(500), nullable=False)
    # Null for guest bookings taken by the admin
    client_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    stylist_id = Column(Integer, ForeignKey("stylists.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    time_start = Column(String(20), nullable=False)  # e.g. "10:00 AM"
    time_end = Column(String(20), nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)
    payment_method = Column(String(20), default="cash", nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    client = relationship("User", back_populates="bookings")
    stylist = relationship("Stylist", back_populates="bookings")
    service = relationship("Service", back_populates="bookings")
