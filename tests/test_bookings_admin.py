from datetime import datetime

import pytest

from app.models import Booking

from .conftest import FakeConnection, bearer


def test_admin_lists_bookings_with_client_summary(client, admin_user, booking):
    response = client.get("/api/admin/bookings", headers=bearer(admin_user))

    assert response.status_code == 200
    bookings = response.json()["bookings"]
    assert len(bookings) == 1
    assert bookings[0]["client"]["email"] == "michael@example.com"
    assert bookings[0]["service"]["price"] == 200


def test_admin_list_filters_by_stylist_and_client(
    client, admin_user, client_user, other_client, make_booking
):
    mine = make_booking(client=client_user)
    make_booking(client=other_client)

    by_client = client.get(
        "/api/admin/bookings", headers=bearer(admin_user), params={"clientId": client_user.id}
    )
    by_stylist = client.get(
        "/api/admin/bookings", headers=bearer(admin_user), params={"stylistId": mine.stylist_id}
    )
    no_match = client.get("/api/admin/bookings", headers=bearer(admin_user), params={"stylistId": 999})

    assert [b["id"] for b in by_client.json()["bookings"]] == [mine.id]
    assert len(by_stylist.json()["bookings"]) == 2
    assert no_match.json()["bookings"] == []


def test_admin_lists_by_status(client, admin_user, make_booking):
    pending = make_booking(status="pending")
    make_booking(status="confirmed")

    response = client.get("/api/admin/bookings/status/pending", headers=bearer(admin_user))

    assert response.status_code == 200
    assert [b["id"] for b in response.json()["bookings"]] == [pending.id]
    assert client.get("/api/admin/bookings/status/done", headers=bearer(admin_user)).status_code == 400


def test_admin_lists_by_date_range_including_end_day(client, admin_user, make_booking):
    first = make_booking(date=datetime(2025, 4, 8))
    late_on_last_day = make_booking(date=datetime(2025, 4, 10, 18, 30))
    make_booking(date=datetime(2025, 4, 11))

    response = client.get(
        "/api/admin/bookings/date-range",
        headers=bearer(admin_user),
        params={"startDate": "2025-04-08", "endDate": "2025-04-10"},
    )

    assert response.status_code == 200
    assert [b["id"] for b in response.json()["bookings"]] == [first.id, late_on_last_day.id]


def test_date_range_validation(client, admin_user):
    missing = client.get("/api/admin/bookings/date-range", headers=bearer(admin_user))
    reversed_range = client.get(
        "/api/admin/bookings/date-range",
        headers=bearer(admin_user),
        params={"startDate": "2025-04-10", "endDate": "2025-04-08"},
    )

    assert missing.status_code == 400
    assert reversed_range.status_code == 400


def test_admin_creates_guest_booking(client, admin_user, stylist, service):
    response = client.post(
        "/api/admin/bookings",
        headers=bearer(admin_user),
        json={
            "clientName": "Walk-in Guest",
            "clientContact": "+971 55 000 1111",
            "clientLocation": "Dubai, UAE",
            "stylistId": stylist.id,
            "serviceId": service.id,
            "date": "2025-04-12",
            "timeStart": "2:45 PM",
            "status": "confirmed",
        },
    )

    assert response.status_code == 201
    booking = response.json()["booking"]
    assert booking["clientId"] is None
    assert booking["client"] is None
    assert booking["status"] == "confirmed"
    assert booking["timeEnd"] == "03:30 PM"


def test_admin_create_for_unknown_client_is_404(client, admin_user, stylist, service):
    response = client.post(
        "/api/admin/bookings",
        headers=bearer(admin_user),
        json={
            "clientName": "Nobody",
            "clientContact": "n/a",
            "clientLocation": "Dubai, UAE",
            "clientId": 999,
            "stylistId": stylist.id,
            "serviceId": service.id,
            "date": "2025-04-12",
            "timeStart": "10:00 AM",
        },
    )

    assert response.status_code == 404


def test_admin_update_cannot_change_status(client, admin_user, booking):
    response = client.put(
        f"/api/admin/bookings/{booking.id}", headers=bearer(admin_user), json={"status": "completed"}
    )

    assert response.status_code == 400


def test_admin_update_booking_fields(client, admin_user, booking):
    response = client.put(
        f"/api/admin/bookings/{booking.id}",
        headers=bearer(admin_user),
        json={"clientLocation": "Abu Dhabi, UAE", "paymentMethod": "other"},
    )

    assert response.status_code == 200
    updated = response.json()["booking"]
    assert updated["clientLocation"] == "Abu Dhabi, UAE"
    assert updated["paymentMethod"] == "other"
    assert updated["status"] == "pending"


@pytest.mark.parametrize(
    "current,new",
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "cancelled"),
        ("confirmed", "confirmed"),
    ],
)
def test_admin_allowed_status_changes(client, admin_user, make_booking, current, new):
    booking = make_booking(status=current)

    response = client.put(
        f"/api/admin/bookings/{booking.id}/status", headers=bearer(admin_user), json={"status": new}
    )

    assert response.status_code == 200
    assert response.json()["booking"]["status"] == new


@pytest.mark.parametrize(
    "current,new",
    [
        ("completed", "pending"),
        ("cancelled", "confirmed"),
        ("pending", "completed"),
        ("confirmed", "pending"),
    ],
)
def test_illegal_status_changes_are_409(client, admin_user, make_booking, current, new):
    booking = make_booking(status=current)

    response = client.put(
        f"/api/admin/bookings/{booking.id}/status", headers=bearer(admin_user), json={"status": new}
    )

    assert response.status_code == 409


def test_unknown_status_is_400_and_unknown_booking_404(client, admin_user, booking):
    bad_status = client.put(
        f"/api/admin/bookings/{booking.id}/status", headers=bearer(admin_user), json={"status": "done"}
    )
    missing = client.put(
        "/api/admin/bookings/999/status", headers=bearer(admin_user), json={"status": "confirmed"}
    )

    assert bad_status.status_code == 400
    assert missing.status_code == 404


def test_status_cancel_by_owner_allowed_other_client_forbidden(
    client, client_user, other_client, booking
):
    forbidden = client.put(
        f"/api/admin/bookings/{booking.id}/status",
        headers=bearer(other_client),
        json={"status": "cancelled"},
    )
    owner_confirm = client.put(
        f"/api/admin/bookings/{booking.id}/status",
        headers=bearer(client_user),
        json={"status": "confirmed"},
    )
    owner_cancel = client.put(
        f"/api/admin/bookings/{booking.id}/status",
        headers=bearer(client_user),
        json={"status": "cancelled"},
    )

    assert forbidden.status_code == 403
    assert owner_confirm.status_code == 403
    assert owner_cancel.status_code == 200
    assert owner_cancel.json()["booking"]["status"] == "cancelled"


def test_confirm_then_fetch_and_notify_owner(client, admin_user, client_user, stylist, service, registry):
    socket = FakeConnection()
    second_tab = FakeConnection()
    closed = FakeConnection(open_=False)
    for connection in (socket, second_tab, closed):
        registry.register(client_user.id, connection)

    created = client.post(
        "/api/client/bookings",
        headers=bearer(client_user),
        json={
            "stylistId": stylist.id,
            "serviceId": service.id,
            "date": "2025-04-08",
            "timeStart": "10:00 AM",
            "clientLocation": "Dubai, UAE",
        },
    ).json()["booking"]
    assert created["status"] == "pending"

    response = client.put(
        f"/api/admin/bookings/{created['id']}/status",
        headers=bearer(admin_user),
        json={"status": "confirmed"},
    )
    assert response.status_code == 200

    fetched = client.get(f"/api/client/bookings/{created['id']}", headers=bearer(client_user))
    assert fetched.json()["booking"]["status"] == "confirmed"

    expected = {
        "type": "notification",
        "data": {
            "type": "booking_status_update",
            "bookingId": created["id"],
            "status": "confirmed",
            "message": "Your booking status has been updated to: confirmed",
        },
    }
    assert socket.sent == [expected]
    assert second_tab.sent == [expected]
    assert closed.sent == []


def test_failed_notification_does_not_change_response(client, admin_user, client_user, booking, registry):
    registry.register(client_user.id, FakeConnection(fail=True))

    response = client.put(
        f"/api/admin/bookings/{booking.id}/status", headers=bearer(admin_user), json={"status": "confirmed"}
    )

    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "confirmed"


def test_guest_booking_status_change_notifies_nobody(client, admin_user, client_user, make_booking, registry):
    socket = FakeConnection()
    registry.register(client_user.id, socket)
    guest = make_booking(client=None)

    response = client.put(
        f"/api/admin/bookings/{guest.id}/status", headers=bearer(admin_user), json={"status": "confirmed"}
    )

    assert response.status_code == 200
    assert socket.sent == []


def test_client_cancel_notifies_own_connections(client, client_user, booking, registry):
    socket = FakeConnection()
    registry.register(client_user.id, socket)

    client.put(f"/api/client/bookings/{booking.id}/cancel", headers=bearer(client_user))

    assert socket.sent[0]["data"]["status"] == "cancelled"


def test_payment_update(client, admin_user, booking):
    response = client.put(
        f"/api/admin/bookings/{booking.id}/payment",
        headers=bearer(admin_user),
        json={"paymentStatus": "completed"},
    )

    assert response.status_code == 200
    updated = response.json()["booking"]
    assert updated["paymentStatus"] == "completed"
    assert updated["paymentMethod"] == "cash"


def test_admin_deletes_booking(client, admin_user, booking, db_session):
    booking_id = booking.id

    response = client.delete(f"/api/admin/bookings/{booking_id}", headers=bearer(admin_user))

    assert response.status_code == 200
    db_session.expunge_all()
    assert db_session.get(Booking, booking_id) is None
    assert client.delete(f"/api/admin/bookings/{booking_id}", headers=bearer(admin_user)).status_code == 404


def test_admin_update_clears_client_and_notes(client, admin_user, booking, db_session):
    db_session.query(Booking).filter(Booking.id == booking.id).update({"notes": "Bring photos"})
    db_session.commit()

    response = client.put(
        f"/api/admin/bookings/{booking.id}",
        headers=bearer(admin_user),
        json={"clientId": None, "notes": None},
    )

    assert response.status_code == 200
    updated = response.json()["booking"]
    assert updated["clientId"] is None
    assert updated["client"] is None
    assert updated["notes"] is None
    assert updated["clientName"] == "Michael Johnson"


@pytest.mark.parametrize(
    "field", ["clientName", "stylistId", "serviceId", "date", "timeStart", "paymentStatus"]
)
def test_admin_update_rejects_null_for_required_fields(client, admin_user, booking, field):
    response = client.put(
        f"/api/admin/bookings/{booking.id}", headers=bearer(admin_user), json={field: None}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid input data"


def test_admin_update_null_end_time_is_recomputed(client, admin_user, make_booking):
    booking = make_booking(time_start="10:00 AM", time_end="11:30 AM")

    response = client.put(
        f"/api/admin/bookings/{booking.id}", headers=bearer(admin_user), json={"timeEnd": None}
    )

    assert response.status_code == 200
    assert response.json()["booking"]["timeEnd"] == "10:45 AM"


def test_admin_create_rejects_slot_past_midnight(client, admin_user, stylist, service):
    response = client.post(
        "/api/admin/bookings",
        headers=bearer(admin_user),
        json={
            "clientName": "Late Guest",
            "clientContact": "+971 55 000 2222",
            "clientLocation": "Dubai, UAE",
            "stylistId": stylist.id,
            "serviceId": service.id,
            "date": "2025-04-12",
            "timeStart": "11:30 PM",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "timeEnd must be after timeStart on the same day"


def test_status_filter_path_rejects_unknown_status(client, admin_user):
    response = client.get("/api/admin/bookings/status/done", headers=bearer(admin_user))

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "path.status"


def test_unknown_status_body_reports_field(client, admin_user, booking):
    response = client.put(
        f"/api/admin/bookings/{booking.id}/status", headers=bearer(admin_user), json={"status": "done"}
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "status"
