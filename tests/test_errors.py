"""Tests for error translation and request deadlines."""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from barberflow.errors import (PersistenceError, RequestTimeout,
                               ServiceUnavailable, translate_db_error)


def test_pool_timeout_maps_to_service_unavailable() -> None:
    error = translate_db_error(PoolTimeoutError("QueuePool limit reached"))

    assert isinstance(error, ServiceUnavailable)
    assert error.status_code == 503


def test_statement_timeout_maps_to_request_timeout() -> None:
    exc = OperationalError("SELECT 1", {}, Exception("canceling statement due to statement timeout"))

    assert isinstance(translate_db_error(exc), RequestTimeout)


def test_other_failures_map_to_persistence_error() -> None:
    exc = IntegrityError("INSERT", {}, Exception("duplicate key"))

    error = translate_db_error(exc, "Failed to create service")

    assert isinstance(error, PersistenceError)
    assert error.to_dict() == {"error": "database_error", "message": "Failed to create service"}


def test_request_past_deadline_returns_504(client, app, shop, auth_headers) -> None:
    app.config["REQUEST_TIMEOUT_SECONDS"] = -1

    response = client.get("/services", headers=auth_headers)

    assert response.status_code == 504
    assert response.get_json()["error"] == "timeout"
