"""Replace-all saves for a professional's working hours and service assignments.

Both saves run as a single transaction holding a row lock on the professional:
delete every existing row, then insert the active/enabled entries. A failure at
any point rolls back to the previous set.
"""
from __future__ import annotations

import logging

from sqlalchemy import delete, select

from .errors import NotFoundError
from .models import Professional, ProfessionalService, Service, WorkingHours
from .repository import guarded

logger = logging.getLogger(__name__)


def _lock_professional(session, organization_id: int, professional_id: int) -> Professional:
    professional = session.execute(
        select(Professional)
        .where(
            Professional.id == professional_id,
            Professional.organization_id == organization_id,
        )
        .with_for_update()
    ).scalar_one_or_none()
    if professional is None:
        session.rollback()
        raise NotFoundError("Professional not found")
    return professional


def _owned_professional(session, organization_id: int, professional_id: int) -> None:
    found = session.execute(
        select(Professional.id).where(
            Professional.id == professional_id,
            Professional.organization_id == organization_id,
        )
    ).scalar_one_or_none()
    if found is None:
        raise NotFoundError("Professional not found")


def list_working_hours(session, organization_id: int, professional_id: int) -> list[WorkingHours]:
    with guarded(session, "Failed to fetch working hours"):
        _owned_professional(session, organization_id, professional_id)
        stmt = (
            select(WorkingHours)
            .where(WorkingHours.professional_id == professional_id)
            .order_by(WorkingHours.day_of_week)
        )
        return list(session.execute(stmt).scalars())


def replace_working_hours(session, organization_id: int, professional_id: int, days: list[dict]) -> list[WorkingHours]:
    """Replace the professional's schedule with the days marked ``active``."""
    with guarded(session, "Failed to save working hours"):
        _lock_professional(session, organization_id, professional_id)

        session.execute(delete(WorkingHours).where(WorkingHours.professional_id == professional_id))
        rows = [
            WorkingHours(
                professional_id=professional_id,
                day_of_week=day["day_of_week"],
                start_time=day["start_time"],
                end_time=day["end_time"],
            )
            for day in days
            if day.get("active")
        ]
        session.add_all(rows)
        session.commit()

    logger.info("Saved %d working days for professional %s", len(rows), professional_id)
    return list_working_hours(session, organization_id, professional_id)


def list_assignments(session, organization_id: int, professional_id: int) -> list[ProfessionalService]:
    with guarded(session, "Failed to fetch professional services"):
        _owned_professional(session, organization_id, professional_id)
        stmt = (
            select(ProfessionalService)
            .where(ProfessionalService.professional_id == professional_id)
            .order_by(ProfessionalService.service_id)
        )
        return list(session.execute(stmt).scalars())


def replace_services(session, organization_id: int, professional_id: int, assignments: list[dict]) -> list[ProfessionalService]:
    """Replace the services a professional performs with the ``enabled`` entries."""
    enabled = [entry for entry in assignments if entry.get("enabled")]
    requested_ids = {entry["service_id"] for entry in enabled}

    with guarded(session, "Failed to save professional services"):
        _lock_professional(session, organization_id, professional_id)

        if requested_ids:
            owned_ids = set(
                session.execute(
                    select(Service.id).where(
                        Service.id.in_(requested_ids),
                        Service.organization_id == organization_id,
                        Service.active.is_(True),
                    )
                ).scalars()
            )
            missing = requested_ids - owned_ids
            if missing:
                session.rollback()
                raise NotFoundError(f"Service not found: {', '.join(str(i) for i in sorted(missing))}")

        session.execute(
            delete(ProfessionalService).where(ProfessionalService.professional_id == professional_id)
        )
        rows = [
            ProfessionalService(
                professional_id=professional_id,
                service_id=entry["service_id"],
                custom_duration=entry.get("custom_duration"),
                enabled=True,
            )
            for entry in enabled
        ]
        session.add_all(rows)
        session.commit()

    logger.info("Saved %d service assignments for professional %s", len(rows), professional_id)
    return list_assignments(session, organization_id, professional_id)
