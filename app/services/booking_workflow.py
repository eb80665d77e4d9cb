"""
Booking status workflow

Booking statuses: pending → confirmed → completed, with cancelled reachable
from pending and confirmed. completed and cancelled are terminal.
"""

from ..models import Booking

VALID_TRANSITIONS = {
    "pending": ["confirmed", "cancelled"],
    "confirmed": ["completed", "cancelled"],
    "completed": [],  # Terminal state
    "cancelled": [],  # Terminal state
}

# Statuses in which the booking details can still be edited or cancelled
OPEN_STATUSES = ("pending", "confirmed")


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """
    Validate if a booking status transition is allowed

    Args:
        current_status: Current booking status
        new_status: Desired new status

    Returns:
        bool: True if transition is valid, False otherwise
    """
    # Allow same status (no-op)
    if current_status == new_status:
        return True

    return new_status in VALID_TRANSITIONS.get(current_status, [])


def is_open(booking: Booking) -> bool:
    return booking.status in OPEN_STATUSES


def status_change_message(status: str) -> str:
    return f"Your booking status has been updated to: {status}"
