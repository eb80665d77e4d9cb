from app.models import Booking

from .conftest import PASSWORD, bearer


def test_list_users_filters_by_role(client, admin_user, client_user, other_client):
    everyone = client.get("/api/admin/users", headers=bearer(admin_user))
    clients = client.get("/api/admin/users", headers=bearer(admin_user), params={"role": "client"})

    assert everyone.status_code == 200
    assert len(everyone.json()["users"]) == 3
    assert {u["email"] for u in clients.json()["users"]} == {"michael@example.com", "david@example.com"}


def test_invalid_role_filter_is_400(client, admin_user):
    response = client.get("/api/admin/users", headers=bearer(admin_user), params={"role": "owner"})

    assert response.status_code == 400


def test_admin_creates_client_who_can_log_in(client, admin_user):
    response = client.post(
        "/api/admin/users",
        headers=bearer(admin_user),
        json={"name": "Robert Brown", "email": "robert@example.com", "password": "robert123"},
    )

    assert response.status_code == 201
    assert response.json()["user"]["role"] == "client"

    login = client.post("/api/auth/login", json={"email": "robert@example.com", "password": "robert123"})
    assert login.status_code == 200


def test_admin_create_duplicate_email_is_400(client, admin_user, client_user):
    response = client.post(
        "/api/admin/users",
        headers=bearer(admin_user),
        json={"name": "Dup", "email": client_user.email, "password": PASSWORD},
    )

    assert response.status_code == 400


def test_admin_updates_user(client, admin_user, client_user):
    response = client.put(
        f"/api/admin/users/{client_user.id}",
        headers=bearer(admin_user),
        json={"phoneNumber": "+971 50 999 8888", "role": "admin"},
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["phoneNumber"] == "+971 50 999 8888"
    assert user["role"] == "admin"
    assert user["name"] == "Michael Johnson"


def test_update_to_taken_email_is_400(client, admin_user, client_user, other_client):
    response = client.put(
        f"/api/admin/users/{client_user.id}",
        headers=bearer(admin_user),
        json={"email": other_client.email},
    )

    assert response.status_code == 400


def test_get_unknown_user_is_404(client, admin_user):
    assert client.get("/api/admin/users/999", headers=bearer(admin_user)).status_code == 404


def test_deleting_client_keeps_bookings_as_guest_bookings(
    client, admin_user, client_user, booking, db_session
):
    booking_id = booking.id

    response = client.delete(f"/api/admin/users/{client_user.id}", headers=bearer(admin_user))

    assert response.status_code == 200
    db_session.expire_all()
    stored = db_session.get(Booking, booking_id)
    assert stored is not None
    assert stored.client_id is None
    assert stored.client_name == "Michael Johnson"


def test_admin_cannot_delete_self(client, admin_user):
    response = client.delete(f"/api/admin/users/{admin_user.id}", headers=bearer(admin_user))

    assert response.status_code == 400
