"""pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project root is available on sys.path so tests can import the barberflow package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from barberflow import create_app  # noqa: E402
from barberflow.auth import issue_token  # noqa: E402
from barberflow.extensions import db  # noqa: E402
from barberflow.provisioning import seed_organization  # noqa: E402

OWNER_PASSWORD = "123456"
RIVAL_PASSWORD = "rival-secret"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SECRET_KEY": "test-secret",
        "LOGIN_BYPASS_PASSWORD": None,
        "REQUEST_TIMEOUT_SECONDS": 30,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def shop(app):
    """Active organization with an owner account (owner@shop.com / 123456)."""
    return seed_organization(
        db.session,
        slug="barberflow-model",
        name="BarberFlow Model",
        owner_email="owner@shop.com",
        owner_password=OWNER_PASSWORD,
        owner_name="Neto",
    )


@pytest.fixture
def rival_shop(app):
    return seed_organization(
        db.session,
        slug="rival-cuts",
        name="Rival Cuts",
        owner_email="owner@rival.com",
        owner_password=RIVAL_PASSWORD,
    )


def bearer(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def auth_headers(shop):
    _, owner = shop
    return bearer(owner)


@pytest.fixture
def rival_headers(rival_shop):
    _, owner = rival_shop
    return bearer(owner)


@pytest.fixture
def make_headers(app):
    return bearer
