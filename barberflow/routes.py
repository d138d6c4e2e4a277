"""HTTP routes: health, authentication, public catalog, services and customers."""
from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .auth import issue_token, token_required, verify_credentials
from .extensions import db
from .models import User
from .repository import customers, guarded, professionals, services
from .schemas import (CustomerCreate, CustomerUpdate, LoginRequest,
                      ServiceCreate, ServiceUpdate, parse_body)

bp = Blueprint("api", __name__)


@bp.get("/")
def index() -> tuple[dict[str, str], int]:
    return jsonify({"status": "online", "message": "BarberFlow API running"}), 200


@bp.get("/health")
def health_check() -> tuple[dict[str, str], int]:
    """
    Expose a simple uptime check endpoint.
    ---
    tags:
      - Health
    responses:
      200:
        description: Service is healthy and running.
    """
    return jsonify({"status": "ok"}), 200


@bp.get("/db-health")
def database_health() -> tuple[dict[str, str], int]:
    """Check connectivity to the configured database.
    ---
    tags:
      - Health
    responses:
      200:
        description: Database connection is ok.
      500:
        description: Database connection failed.
    """
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        current_app.logger.exception("Database connectivity check failed", exc_info=exc)
        return jsonify({"database": "unavailable"}), 500

    return jsonify({"database": "ok"}), 200


# --- Public storefront (no authentication) ---


@bp.get("/services/<string:slug>")
def list_public_services(slug: str) -> tuple[dict[str, object], int]:
    """Active services of the organization identified by ``slug``.
    ---
    tags:
      - Public
    parameters:
      - name: slug
        in: path
        type: string
        required: true
    responses:
      200:
        description: List of services
      404:
        description: Organization not found
    """
    rows = services.list_public(db.session, slug)
    return jsonify({"services": [service.to_public_dict() for service in rows]}), 200


@bp.get("/barbers/<string:slug>")
def list_public_barbers(slug: str) -> tuple[dict[str, object], int]:
    """Active professionals of the organization identified by ``slug``."""
    rows = professionals.list_public(db.session, slug)
    return jsonify({"barbers": [professional.to_public_dict() for professional in rows]}), 200


# --- Authentication ---


@bp.post("/auth/login")
def login() -> tuple[dict[str, object], int]:
    """Authenticate a staff member by email/password and return an access token.
    ---
    tags:
      - Authentication
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
            password:
              type: string
          required:
            - email
            - password
    responses:
      200:
        description: Login successful, returns access token
      400:
        description: Missing email or password
      401:
        description: Invalid email or password
      403:
        description: Organization suspended
    """
    body = parse_body(LoginRequest, request.get_json(silent=True))
    user, organization = verify_credentials(db.session, body.email, body.password)

    with guarded(db.session, "Failed to update last login timestamp"):
        user.last_login_at = datetime.now(timezone.utc)
        db.session.commit()

    token = issue_token(user)
    current_app.logger.info("User %s logged in to organization %s", user.id, organization.id)

    return jsonify({
        "token": token,
        "user": user.to_dict_basic(),
        "organization": organization.to_dict(),
    }), 200


@bp.post("/auth/register")
def register_user() -> tuple[dict[str, str], int]:
    # Organizations and staff accounts are provisioned with scripts/seed_organization.py.
    return jsonify({
        "error": "not_implemented",
        "message": "Self-registration is not available",
    }), 501


@bp.get("/auth/me")
@token_required
def me(identity) -> tuple[dict[str, object], int]:
    with guarded(db.session, "Failed to fetch current user"):
        user = db.session.get(User, identity.user_id)

    return jsonify({
        "identity": identity.to_dict(),
        "user": user.to_dict_basic() if user else None,
    }), 200


# --- Services ---


@bp.get("/services")
@token_required
def list_services(identity) -> tuple[dict[str, object], int]:
    rows = services.list(db.session, identity.organization_id)
    return jsonify({"services": [service.to_dict() for service in rows]}), 200


@bp.post("/services")
@token_required
def create_service(identity) -> tuple[dict[str, object], int]:
    """Create a new service for the caller's organization.
    ---
    tags:
      - Services
    parameters:
      - in: body
        name: body
        required: true
        schema:
          properties:
            name:
              type: string
            price:
              type: number
            duration_minutes:
              type: integer
            category:
              type: string
    responses:
      201:
        description: Service created successfully
      400:
        description: Invalid input
      500:
        description: Database error
    """
    body = parse_body(ServiceCreate, request.get_json(silent=True))
    service = services.create(db.session, identity.organization_id, body.model_dump())
    return jsonify({"message": "Service created successfully", "service": service.to_dict()}), 201


@bp.get("/services/<int:service_id>")
@token_required
def get_service(service_id: int, identity) -> tuple[dict[str, object], int]:
    service = services.get(db.session, identity.organization_id, service_id)
    return jsonify({"service": service.to_dict()}), 200


@bp.put("/services/<int:service_id>")
@token_required
def update_service(service_id: int, identity) -> tuple[dict[str, object], int]:
    body = parse_body(ServiceUpdate, request.get_json(silent=True))
    service = services.update(
        db.session, identity.organization_id, service_id, body.model_dump(exclude_unset=True)
    )
    return jsonify({"message": "Service updated successfully", "service": service.to_dict()}), 200


@bp.delete("/services/<int:service_id>")
@token_required
def delete_service(service_id: int, identity) -> tuple[dict[str, str], int]:
    services.soft_delete(db.session, identity.organization_id, service_id)
    return jsonify({"message": "Service deleted successfully"}), 200


# --- Customers ---


@bp.get("/customers")
@token_required
def list_customers(identity) -> tuple[dict[str, object], int]:
    rows = customers.list(db.session, identity.organization_id)
    return jsonify({"customers": [customer.to_dict() for customer in rows]}), 200


@bp.post("/customers")
@token_required
def create_customer(identity) -> tuple[dict[str, object], int]:
    body = parse_body(CustomerCreate, request.get_json(silent=True))
    customer = customers.create(db.session, identity.organization_id, body.model_dump())
    return jsonify({"message": "Customer created successfully", "customer": customer.to_dict()}), 201


@bp.get("/customers/<int:customer_id>")
@token_required
def get_customer(customer_id: int, identity) -> tuple[dict[str, object], int]:
    customer = customers.get(db.session, identity.organization_id, customer_id)
    return jsonify({"customer": customer.to_dict()}), 200


@bp.put("/customers/<int:customer_id>")
@token_required
def update_customer(customer_id: int, identity) -> tuple[dict[str, object], int]:
    body = parse_body(CustomerUpdate, request.get_json(silent=True))
    customer = customers.update(
        db.session, identity.organization_id, customer_id, body.model_dump(exclude_unset=True)
    )
    return jsonify({"message": "Customer updated successfully", "customer": customer.to_dict()}), 200


@bp.delete("/customers/<int:customer_id>")
@token_required
def delete_customer(customer_id: int, identity) -> tuple[dict[str, str], int]:
    customers.soft_delete(db.session, identity.organization_id, customer_id)
    return jsonify({"message": "Customer deleted successfully"}), 200
