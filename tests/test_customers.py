"""Tests for tenant-scoped customer CRUD."""
from __future__ import annotations

from barberflow.extensions import db
from barberflow.models import Customer


def _create(client, headers, **fields):
    payload = {"name": "Carlos", "phone": "11999990000"}
    payload.update(fields)
    response = client.post("/customers", json=payload, headers=headers)
    assert response.status_code == 201
    return response.get_json()["customer"]


def test_create_customer_defaults(client, shop, auth_headers) -> None:
    customer = _create(client, auth_headers, email="carlos@mail.com", notes="likes fades")

    assert customer["total_visits"] == 0
    assert customer["active"] is True
    assert customer["email"] == "carlos@mail.com"


def test_create_customer_ignores_visit_counter_in_body(client, shop, auth_headers) -> None:
    customer = _create(client, auth_headers, total_visits=99, active=False)

    assert customer["total_visits"] == 0
    assert customer["active"] is True


def test_create_customer_requires_name(client, shop, auth_headers) -> None:
    response = client.post("/customers", json={"phone": "123"}, headers=auth_headers)

    assert response.status_code == 400
    assert "name" in response.get_json()["message"]


def test_list_customers_ordered_and_excludes_deleted(client, shop, auth_headers) -> None:
    zeca = _create(client, auth_headers, name="Zeca")
    _create(client, auth_headers, name="Ana")
    gone = _create(client, auth_headers, name="Bruno")
    client.delete(f"/customers/{gone['id']}", headers=auth_headers)

    response = client.get("/customers", headers=auth_headers)
    names = [c["name"] for c in response.get_json()["customers"]]

    assert names == ["Ana", "Zeca"]
    assert zeca["id"] in [c["id"] for c in response.get_json()["customers"]]


def test_soft_delete_keeps_row(client, shop, auth_headers) -> None:
    customer = _create(client, auth_headers)

    response = client.delete(f"/customers/{customer['id']}", headers=auth_headers)

    assert response.status_code == 200
    row = db.session.get(Customer, customer["id"])
    assert row is not None
    assert row.active is False

    audit = client.get(f"/customers/{customer['id']}", headers=auth_headers)
    assert audit.status_code == 200
    assert audit.get_json()["customer"]["active"] is False


def test_update_customer_partial(client, shop, auth_headers) -> None:
    customer = _create(client, auth_headers, notes="first visit")

    response = client.put(
        f"/customers/{customer['id']}",
        json={"phone": "11888880000", "notes": None},
        headers=auth_headers,
    )
    updated = response.get_json()["customer"]

    assert response.status_code == 200
    assert updated["name"] == "Carlos"
    assert updated["phone"] == "11888880000"
    assert updated["notes"] is None


def test_update_customer_cannot_touch_visit_counter(client, shop, auth_headers) -> None:
    customer = _create(client, auth_headers)

    response = client.put(f"/customers/{customer['id']}", json={"total_visits": 50}, headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()["customer"]["total_visits"] == 0


def test_get_customer_not_found(client, shop, auth_headers) -> None:
    response = client.get("/customers/12345", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json()["message"] == "Customer not found"
