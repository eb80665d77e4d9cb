"""Shared validation utilities"""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

TIME_LABEL_FORMAT = "%I:%M %p"


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate an international phone number.

    Accepts the formats clients actually type ("+971 50 123 4567",
    "(555) 010-2030") and keeps them as entered, stripped.

    Raises:
        ValueError: If the number does not have 7-15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    if not re.match(r"^\+?[\d\s().-]+$", phone):
        raise ValueError("Phone number may only contain digits, spaces, +, -, . and parentheses")

    digits = re.sub(r"\D", "", phone)
    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must have between 7 and 15 digits")

    return phone


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def parse_time_label(value: str) -> datetime:
    """Parse "10:00 AM", "10:00am" or 24h "14:30" into a datetime on 1900-01-01"""
    cleaned = value.strip().upper()
    for fmt in (TIME_LABEL_FORMAT, "%I:%M%p", "%H:%M"):
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    raise ValueError("Time must look like '10:00 AM' or '14:30'")


def normalize_time_label(value: Optional[str]) -> Optional[str]:
    """Normalize a time of day to the stored "HH:MM AM" form"""
    if value is None:
        return value
    return parse_time_label(value).strftime(TIME_LABEL_FORMAT)


def add_minutes_to_time_label(value: str, minutes: int) -> str:
    """End time label for a slot starting at `value` and lasting `minutes`"""
    return (parse_time_label(value) + timedelta(minutes=minutes)).strftime(TIME_LABEL_FORMAT)


def parse_booking_date(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """
    Accept "2025-04-08", a full ISO timestamp, or date/datetime objects.

    Booking dates are stored as naive server-local datetimes; an aware
    timestamp is converted to local time before its offset is dropped.
    """
    if value is None or isinstance(value, datetime):
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.astimezone(tz=None).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError("Date must be an ISO date like '2025-04-08'") from e
        return parse_booking_date(parsed)
    raise ValueError("Date must be an ISO date like '2025-04-08'")


def require_value(value):
    """Reject an explicit null for a field that cannot be cleared"""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def ends_after_start(time_start: str, time_end: str) -> bool:
    """True when the slot ends later on the same day than it starts"""
    return parse_time_label(time_end) > parse_time_label(time_start)
