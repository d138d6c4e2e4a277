"""Routes for professionals, their schedules and service assignments, and appointments."""
from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request

from . import assignments, lifecycle
from .auth import token_required
from .errors import ValidationError
from .extensions import db
from .repository import professionals
from .schemas import (AppointmentCreate, AppointmentStatusUpdate,
                      ProfessionalCreate, ProfessionalUpdate,
                      ScheduleSave, ServiceAssignmentSave, parse_body)

bp_scheduling = Blueprint("api_scheduling", __name__)


# --- Professionals ---


@bp_scheduling.get("/professionals")
@token_required
def list_professionals(identity) -> tuple[dict[str, object], int]:
    rows = professionals.list(db.session, identity.organization_id)
    return jsonify({"professionals": [professional.to_dict() for professional in rows]}), 200


@bp_scheduling.post("/professionals")
@token_required
def create_professional(identity) -> tuple[dict[str, object], int]:
    body = parse_body(ProfessionalCreate, request.get_json(silent=True))
    professional = professionals.create(db.session, identity.organization_id, body.model_dump())
    return jsonify({
        "message": "Professional created successfully",
        "professional": professional.to_dict(),
    }), 201


@bp_scheduling.get("/professionals/<int:professional_id>")
@token_required
def get_professional(professional_id: int, identity) -> tuple[dict[str, object], int]:
    professional = professionals.get(db.session, identity.organization_id, professional_id)
    return jsonify({"professional": professional.to_dict()}), 200


@bp_scheduling.put("/professionals/<int:professional_id>")
@token_required
def update_professional(professional_id: int, identity) -> tuple[dict[str, object], int]:
    body = parse_body(ProfessionalUpdate, request.get_json(silent=True))
    professional = professionals.update(
        db.session, identity.organization_id, professional_id, body.model_dump(exclude_unset=True)
    )
    return jsonify({
        "message": "Professional updated successfully",
        "professional": professional.to_dict(),
    }), 200


@bp_scheduling.delete("/professionals/<int:professional_id>")
@token_required
def delete_professional(professional_id: int, identity) -> tuple[dict[str, str], int]:
    professionals.soft_delete(db.session, identity.organization_id, professional_id)
    return jsonify({"message": "Professional deleted successfully"}), 200


@bp_scheduling.get("/professionals/<int:professional_id>/schedule")
@token_required
def get_professional_schedule(professional_id: int, identity) -> tuple[dict[str, object], int]:
    rows = assignments.list_working_hours(db.session, identity.organization_id, professional_id)
    return jsonify({
        "professional_id": professional_id,
        "schedule": [row.to_dict() for row in rows],
    }), 200


@bp_scheduling.post("/professionals/<int:professional_id>/schedule")
@token_required
def save_professional_schedule(professional_id: int, identity) -> tuple[dict[str, object], int]:
    """Replace a professional's weekly working hours.

    Only entries with ``active: true`` are stored; the previous schedule is
    discarded as a whole.
    ---
    tags:
      - Professionals
    parameters:
      - in: path
        name: professional_id
        required: true
        schema:
          type: integer
      - in: body
        name: body
        required: true
        schema:
          properties:
            schedule:
              type: array
              items:
                type: object
                properties:
                  day_of_week:
                    type: integer
                  start_time:
                    type: string
                  end_time:
                    type: string
                  active:
                    type: boolean
    responses:
      200:
        description: Schedule saved
      400:
        description: Invalid input
      404:
        description: Professional not found
      500:
        description: Database error, previous schedule kept
    """
    body = parse_body(ScheduleSave, request.get_json(silent=True))
    rows = assignments.replace_working_hours(
        db.session,
        identity.organization_id,
        professional_id,
        [day.model_dump() for day in body.schedule],
    )
    return jsonify({
        "message": "Schedule saved successfully",
        "professional_id": professional_id,
        "schedule": [row.to_dict() for row in rows],
    }), 200


@bp_scheduling.get("/professionals/<int:professional_id>/services")
@token_required
def get_professional_services(professional_id: int, identity) -> tuple[dict[str, object], int]:
    rows = assignments.list_assignments(db.session, identity.organization_id, professional_id)
    return jsonify({
        "professional_id": professional_id,
        "services": [row.to_dict() for row in rows],
    }), 200


@bp_scheduling.post("/professionals/<int:professional_id>/services")
@token_required
def save_professional_services(professional_id: int, identity) -> tuple[dict[str, object], int]:
    """Replace the set of services a professional performs."""
    body = parse_body(ServiceAssignmentSave, request.get_json(silent=True))
    rows = assignments.replace_services(
        db.session,
        identity.organization_id,
        professional_id,
        [entry.model_dump() for entry in body.services],
    )
    return jsonify({
        "message": "Services saved successfully",
        "professional_id": professional_id,
        "services": [row.to_dict() for row in rows],
    }), 200


# --- Appointments ---


@bp_scheduling.get("/appointments")
@token_required
def list_appointments(identity) -> tuple[dict[str, object], int]:
    """List the organization's appointments.
    ---
    tags:
      - Appointments
    parameters:
      - name: status
        in: query
        type: string
        enum: [confirmed, completed, cancelled]
      - name: date
        in: query
        type: string
        description: Date in YYYY-MM-DD format
    responses:
      200:
        description: List of appointments ordered by date_time
      400:
        description: Invalid filter
    """
    status = (request.args.get("status") or "").strip().lower() or None
    date_str = (request.args.get("date") or "").strip()
    on_date = None
    if date_str:
        try:
            on_date = date.fromisoformat(date_str)
        except ValueError as exc:
            raise ValidationError("Invalid date format, use YYYY-MM-DD") from exc

    rows = lifecycle.list_appointments(
        db.session, identity.organization_id, status=status, on_date=on_date
    )
    return jsonify({"appointments": [appointment.to_dict() for appointment in rows]}), 200


@bp_scheduling.post("/appointments")
@token_required
def create_appointment(identity) -> tuple[dict[str, object], int]:
    body = parse_body(AppointmentCreate, request.get_json(silent=True))
    appointment = lifecycle.create_appointment(db.session, identity.organization_id, body.model_dump())
    return jsonify({
        "message": "Appointment created successfully",
        "appointment": appointment.to_dict(),
    }), 201


@bp_scheduling.patch("/appointments/<int:appointment_id>/status")
@token_required
def update_appointment_status(appointment_id: int, identity) -> tuple[dict[str, object], int]:
    """Update appointment status (confirmed -> completed or cancelled).

    Marking an appointment ``completed`` adds one visit to the customer's
    ``total_visits``. Sending the current status again is accepted and changes
    nothing.
    ---
    tags:
      - Appointments
    parameters:
      - in: path
        name: appointment_id
        required: true
        schema:
          type: integer
      - in: body
        name: body
        required: true
        schema:
          properties:
            status:
              type: string
              enum: [confirmed, completed, cancelled]
    responses:
      200:
        description: Appointment status updated successfully
      400:
        description: Invalid status or transition
      404:
        description: Appointment not found
      500:
        description: Database error
    """
    body = parse_body(AppointmentStatusUpdate, request.get_json(silent=True))
    appointment, visit_recorded = lifecycle.transition_status(
        db.session, identity.organization_id, appointment_id, body.status
    )
    return jsonify({
        "appointment": appointment.to_dict(),
        "visit_recorded": visit_recorded,
    }), 200
