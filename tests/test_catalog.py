from .conftest import bearer

NEW_SERVICE = {
    "name": "Hot Towel Shave",
    "description": "<b>Classic</b> straight <i>razor</i> shave",
    "price": 120,
    "duration": 30,
    "category": "Beard",
}


def test_public_list_shows_only_active_services(client, make_service):
    make_service(name="Haircut & Trim")
    make_service(name="Old Perm", is_active=False)

    for path in ("/api/services", "/api/client/services"):
        response = client.get(path)
        assert response.status_code == 200
        names = [s["name"] for s in response.json()["services"]]
        assert names == ["Haircut & Trim"]


def test_public_get_service_by_id(client, service):
    response = client.get(f"/api/services/{service.id}")

    assert response.status_code == 200
    body = response.json()["service"]
    assert body["name"] == "Haircut & Trim"
    assert body["duration"] == 45
    assert body["isActive"] is True


def test_unknown_service_is_404(client):
    response = client.get("/api/services/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Service not found"


def test_admin_list_includes_inactive(client, admin_user, make_service):
    make_service(name="Haircut & Trim")
    make_service(name="Old Perm", is_active=False)

    response = client.get("/api/admin/services", headers=bearer(admin_user))

    assert response.status_code == 200
    assert {s["name"] for s in response.json()["services"]} == {"Haircut & Trim", "Old Perm"}


def test_admin_creates_service_with_sanitized_description(client, admin_user):
    response = client.post("/api/admin/services", headers=bearer(admin_user), json=NEW_SERVICE)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Service created successfully"
    assert body["service"]["description"] == "Classic straight razor shave"
    assert body["service"]["category"] == "Beard"


def test_write_routes_are_also_mounted_without_admin_segment(client, admin_user):
    response = client.post("/api/services", headers=bearer(admin_user), json=NEW_SERVICE)

    assert response.status_code == 201
    service_id = response.json()["service"]["id"]

    update = client.put(
        f"/api/services/{service_id}", headers=bearer(admin_user), json={"price": 135.5}
    )
    assert update.status_code == 200
    assert update.json()["service"]["price"] == 135.5
    assert update.json()["service"]["name"] == "Hot Towel Shave"


def test_service_writes_require_admin(client, client_user):
    anonymous = client.post("/api/admin/services", json=NEW_SERVICE)
    as_client = client.post("/api/admin/services", headers=bearer(client_user), json=NEW_SERVICE)

    assert anonymous.status_code == 401
    assert as_client.status_code == 403


def test_invalid_service_payload_is_400(client, admin_user):
    payload = dict(NEW_SERVICE, duration=0, category="Massage")

    response = client.post("/api/admin/services", headers=bearer(admin_user), json=payload)

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"duration", "category"} <= fields


def test_deactivate_service_hides_it_from_public_list(client, admin_user, service):
    response = client.put(
        f"/api/admin/services/{service.id}", headers=bearer(admin_user), json={"isActive": False}
    )

    assert response.status_code == 200
    assert client.get("/api/services").json()["services"] == []
    # Still reachable by id for existing bookings
    assert client.get(f"/api/services/{service.id}").status_code == 200


def test_delete_service(client, admin_user, service):
    service_id = service.id

    response = client.delete(f"/api/admin/services/{service_id}", headers=bearer(admin_user))

    assert response.status_code == 200
    assert response.json()["message"] == "Service deleted successfully"
    assert client.get(f"/api/services/{service_id}").status_code == 404


def test_delete_missing_service_is_404(client, admin_user):
    assert client.delete("/api/admin/services/999", headers=bearer(admin_user)).status_code == 404


def test_delete_service_with_bookings_is_409(client, admin_user, booking):
    response = client.delete(f"/api/admin/services/{booking.service_id}", headers=bearer(admin_user))

    assert response.status_code == 409


def test_update_clears_description_and_image(client, admin_user, service):
    client.put(
        f"/api/admin/services/{service.id}",
        headers=bearer(admin_user),
        json={"image": "https://cdn.example.com/haircut.jpg"},
    )

    response = client.put(
        f"/api/admin/services/{service.id}",
        headers=bearer(admin_user),
        json={"description": None, "image": None},
    )

    assert response.status_code == 200
    updated = response.json()["service"]
    assert updated["description"] is None
    assert updated["image"] is None
    assert updated["name"] == "Haircut & Trim"


def test_update_rejects_null_price(client, admin_user, service):
    response = client.put(
        f"/api/admin/services/{service.id}", headers=bearer(admin_user), json={"price": None}
    )

    assert response.status_code == 400
