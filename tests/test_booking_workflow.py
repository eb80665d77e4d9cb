import pytest

from app.auth import admin_or_owner, any_of, deny, is_admin, may_set_booking_status, owns_booking
from app.models import Booking, User
from app.services.booking_workflow import (
    is_open,
    status_change_message,
    validate_status_transition,
)

ADMIN = User(id=1, role="admin")
OWNER = User(id=2, role="client")
STRANGER = User(id=3, role="client")


@pytest.mark.parametrize(
    "current,new,allowed",
    [
        ("pending", "confirmed", True),
        ("pending", "cancelled", True),
        ("confirmed", "completed", True),
        ("confirmed", "cancelled", True),
        ("pending", "pending", True),
        ("completed", "completed", True),
        ("pending", "completed", False),
        ("confirmed", "pending", False),
        ("completed", "pending", False),
        ("completed", "cancelled", False),
        ("cancelled", "confirmed", False),
    ],
)
def test_status_transitions(current, new, allowed):
    assert validate_status_transition(current, new) is allowed


def test_status_values_and_open_states():
    assert is_open(Booking(status="confirmed"))
    assert not is_open(Booking(status="cancelled"))
    assert status_change_message("confirmed") == "Your booking status has been updated to: confirmed"


def test_booking_guards():
    booking = Booking(id=10, client_id=OWNER.id)
    guest_booking = Booking(id=11, client_id=None)

    assert is_admin(ADMIN).allowed
    assert not is_admin(OWNER).allowed
    assert owns_booking(OWNER, booking).allowed
    assert not owns_booking(STRANGER, booking).allowed
    assert not owns_booking(OWNER, guest_booking).allowed
    assert admin_or_owner(ADMIN, guest_booking).allowed
    assert admin_or_owner(OWNER, booking).allowed
    assert admin_or_owner(STRANGER, booking).status_code == 403


def test_only_cancel_is_open_to_owners():
    booking = Booking(id=10, client_id=OWNER.id)

    assert may_set_booking_status(OWNER, booking, "cancelled").allowed
    assert not may_set_booking_status(OWNER, booking, "confirmed").allowed
    assert not may_set_booking_status(STRANGER, booking, "cancelled").allowed
    assert may_set_booking_status(ADMIN, booking, "completed").allowed


def test_any_of_returns_first_denial_when_nothing_allows():
    first, second = deny("first"), deny("second", status_code=401)

    assert any_of(first, second).reason == "first"
    assert any_of().allowed is False
