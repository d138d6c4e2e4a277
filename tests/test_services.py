import pytest

from barberflow.extensions import db
from barberflow.models import Service
from barberflow.provisioning import seed_organization


@pytest.fixture
def haircut(shop):
    organization, _ = shop
    service = Service(organization_id=organization.id, name="Haircut", price=45.0, duration_minutes=30)
    db.session.add(service)
    db.session.commit()
    return service.id


def test_service_create_list_delete_scenario(client, shop, auth_headers):
    created = client.post(
        "/services",
        json={"name": "Beard Trim", "price": 30, "duration_minutes": 20, "category": "beard"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    service_id = created.get_json()["service"]["id"]
    assert service_id

    listed = client.get("/services", headers=auth_headers).get_json()["services"]
    assert [s["id"] for s in listed] == [service_id]

    deleted = client.delete(f"/services/{service_id}", headers=auth_headers)
    assert deleted.status_code == 200

    listed = client.get("/services", headers=auth_headers).get_json()["services"]
    assert listed == []


def test_create_service_uses_token_organization(client, shop, rival_shop, auth_headers):
    organization, _ = shop
    rival, _ = rival_shop

    response = client.post(
        "/services",
        json={"name": "Fade", "price": 50, "duration_minutes": 40, "organization_id": rival.id},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.get_json()["service"]["organization_id"] == organization.id
    assert db.session.query(Service).filter_by(organization_id=rival.id).count() == 0


def test_list_services_ordered_by_name(client, shop, auth_headers):
    for name in ("Shave", "Beard Trim", "Haircut"):
        client.post("/services", json={"name": name, "price": 10, "duration_minutes": 15}, headers=auth_headers)

    listed = client.get("/services", headers=auth_headers).get_json()["services"]

    assert [s["name"] for s in listed] == ["Beard Trim", "Haircut", "Shave"]


@pytest.mark.parametrize(
    "payload",
    [
        {"price": 10, "duration_minutes": 30},
        {"name": "Cut", "duration_minutes": 30},
        {"name": "Cut", "price": -5, "duration_minutes": 30},
        {"name": "Cut", "price": 10, "duration_minutes": 0},
        {"name": "   ", "price": 10, "duration_minutes": 30},
    ],
)
def test_create_service_invalid_payload_400(client, shop, auth_headers, payload):
    response = client.post("/services", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_payload"
    assert db.session.query(Service).count() == 0


def test_update_service_success_200(client, haircut, auth_headers):
    response = client.put(f"/services/{haircut}", json={"price": 55.5}, headers=auth_headers)
    data = response.get_json()

    assert response.status_code == 200
    assert data["service"]["price"] == 55.5
    assert data["service"]["name"] == "Haircut"


def test_update_service_rejects_null_name_400(client, haircut, auth_headers):
    response = client.put(f"/services/{haircut}", json={"name": None}, headers=auth_headers)

    assert response.status_code == 400


def test_update_service_not_found_404(client, shop, auth_headers):
    response = client.put("/services/999", json={"price": 10}, headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_delete_service_not_found_404(client, shop, auth_headers):
    response = client.delete("/services/999", headers=auth_headers)

    assert response.status_code == 404


def test_soft_deleted_service_still_readable_by_id(client, haircut, auth_headers):
    client.delete(f"/services/{haircut}", headers=auth_headers)

    response = client.get(f"/services/{haircut}", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()["service"]["active"] is False
    assert db.session.get(Service, haircut) is not None


def test_public_services_by_slug(client, shop, haircut, auth_headers):
    client.post("/services", json={"name": "Old Style", "price": 5, "duration_minutes": 10}, headers=auth_headers)
    old = client.get("/services", headers=auth_headers).get_json()["services"][1]
    client.delete(f"/services/{old['id']}", headers=auth_headers)

    response = client.get("/services/barberflow-model")
    data = response.get_json()

    assert response.status_code == 200
    assert data["services"] == [{"id": haircut, "name": "Haircut", "price": 45.0, "duration_minutes": 30}]


def test_public_services_unknown_slug_404(client, shop):
    response = client.get("/services/no-such-shop")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Organization not found"


def test_public_services_slug_starting_with_digits(client, app):
    organization, _ = seed_organization(
        db.session,
        slug="2024-cuts",
        name="2024 Cuts",
        owner_email="owner@2024cuts.com",
        owner_password="x",
    )
    db.session.add(Service(organization_id=organization.id, name="Fade", price=40, duration_minutes=30))
    db.session.commit()

    response = client.get("/services/2024-cuts")

    assert response.status_code == 200
    assert [s["name"] for s in response.get_json()["services"]] == ["Fade"]
