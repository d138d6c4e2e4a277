"""Tests for professional CRUD and the public barber listing."""
from __future__ import annotations

from barberflow.extensions import db
from barberflow.models import Professional


def test_create_and_list_professionals(client, shop, auth_headers) -> None:
    for name in ("Rafael", "Diego"):
        response = client.post("/professionals", json={"name": name, "phone": "11"}, headers=auth_headers)
        assert response.status_code == 201

    response = client.get("/professionals", headers=auth_headers)
    names = [p["name"] for p in response.get_json()["professionals"]]

    assert response.status_code == 200
    assert names == ["Diego", "Rafael"]


def test_update_professional(client, shop, auth_headers) -> None:
    created = client.post("/professionals", json={"name": "Rafa"}, headers=auth_headers).get_json()

    response = client.put(
        f"/professionals/{created['professional']['id']}",
        json={"name": "Rafael"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.get_json()["professional"]["name"] == "Rafael"


def test_delete_professional_is_soft(client, shop, auth_headers) -> None:
    created = client.post("/professionals", json={"name": "Diego"}, headers=auth_headers).get_json()
    professional_id = created["professional"]["id"]

    response = client.delete(f"/professionals/{professional_id}", headers=auth_headers)

    assert response.status_code == 200
    assert client.get("/professionals", headers=auth_headers).get_json()["professionals"] == []
    assert db.session.get(Professional, professional_id).active is False


def test_public_barbers_by_slug(client, shop, auth_headers) -> None:
    client.post("/professionals", json={"name": "Diego", "phone": "11"}, headers=auth_headers)

    response = client.get("/barbers/barberflow-model")
    barbers = response.get_json()["barbers"]

    assert response.status_code == 200
    assert [b["name"] for b in barbers] == ["Diego"]
    assert "phone" not in barbers[0]


def test_public_barbers_unknown_slug_404(client) -> None:
    response = client.get("/barbers/unknown")

    assert response.status_code == 404
