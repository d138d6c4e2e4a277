"""Appointment booking and status transitions."""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import joinedload

from .errors import InvalidTransition, NotFoundError, ValidationError
from .models import Appointment, Customer, Professional, Service
from .repository import guarded

logger = logging.getLogger(__name__)

STATUSES = ("confirmed", "completed", "cancelled")
TERMINAL_STATUSES = frozenset({"completed", "cancelled"})


def _require_active(session, model, organization_id: int, record_id: int, label: str) -> None:
    found = session.execute(
        select(model.id).where(
            model.id == record_id,
            model.organization_id == organization_id,
            model.active.is_(True),
        )
    ).scalar_one_or_none()
    if found is None:
        raise NotFoundError(f"{label} not found")


def list_appointments(
    session,
    organization_id: int,
    status: str | None = None,
    on_date: date | None = None,
) -> list[Appointment]:
    if status is not None and status not in STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(STATUSES)}")

    stmt = (
        select(Appointment)
        .options(
            joinedload(Appointment.customer),
            joinedload(Appointment.service),
            joinedload(Appointment.professional),
        )
        .where(Appointment.organization_id == organization_id)
    )
    if status is not None:
        stmt = stmt.where(Appointment.status == status)
    if on_date is not None:
        start_of_day = datetime.combine(on_date, time.min)
        stmt = stmt.where(
            Appointment.date_time >= start_of_day,
            Appointment.date_time < start_of_day + timedelta(days=1),
        )

    with guarded(session, "Failed to fetch appointments"):
        return list(session.execute(stmt.order_by(Appointment.date_time)).scalars())


def create_appointment(session, organization_id: int, fields: dict) -> Appointment:
    """Book an appointment. Every referenced row must belong to the same organization."""
    with guarded(session, "Failed to create appointment"):
        _require_active(session, Customer, organization_id, fields["customer_id"], "Customer")
        _require_active(session, Service, organization_id, fields["service_id"], "Service")
        if fields.get("professional_id") is not None:
            _require_active(
                session, Professional, organization_id, fields["professional_id"], "Professional"
            )

        appointment = Appointment(
            organization_id=organization_id,
            customer_id=fields["customer_id"],
            service_id=fields["service_id"],
            professional_id=fields.get("professional_id"),
            date_time=fields["date_time"],
            notes=fields.get("notes"),
            status="confirmed",
        )
        session.add(appointment)
        session.commit()

    logger.info("Booked appointment %s for organization %s", appointment.id, organization_id)
    return appointment


def transition_status(session, organization_id: int, appointment_id: int, new_status: str) -> tuple[Appointment, bool]:
    """Move an appointment to ``new_status``.

    Returns the appointment and whether a visit was recorded. Entering
    ``completed`` bumps the customer's ``total_visits`` by one, in the same
    transaction as the status change. Re-applying the current status changes
    nothing, so a repeated ``completed`` never counts a second visit. Terminal
    statuses cannot be left.
    """
    if new_status not in STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(STATUSES)}")

    with guarded(session, "Failed to update appointment status"):
        appointment = session.execute(
            select(Appointment)
            .where(Appointment.id == appointment_id, Appointment.organization_id == organization_id)
            .with_for_update()
        ).scalar_one_or_none()

        if appointment is None:
            session.rollback()
            raise NotFoundError("Appointment not found")

        previous = appointment.status
        if previous == new_status:
            session.rollback()
            return appointment, False

        if previous in TERMINAL_STATUSES:
            session.rollback()
            raise InvalidTransition(f"Cannot change status of a {previous} appointment")

        visit_recorded = False
        if new_status == "completed":
            session.execute(
                update(Customer)
                .where(
                    Customer.id == appointment.customer_id,
                    Customer.organization_id == organization_id,
                )
                .values(total_visits=Customer.total_visits + 1)
            )
            visit_recorded = True

        appointment.status = new_status
        session.commit()

    logger.info(
        "Appointment %s moved from %s to %s (organization %s)",
        appointment_id,
        previous,
        new_status,
        organization_id,
    )
    return appointment, visit_recorded
