"""Tenant-scoped persistence helpers.

Every statement issued here carries ``organization_id`` next to the primary
key. A write aimed at another tenant's row therefore matches nothing and is
reported as ``NotFoundError``, exactly like a row that does not exist.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager

from flask import g, has_request_context
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from .errors import NotFoundError, RequestTimeout, translate_db_error
from .models import Customer, Organization, Professional, Service

logger = logging.getLogger(__name__)

# Columns a request body can never set directly.
PROTECTED_FIELDS = frozenset({"id", "organization_id", "active", "total_visits", "created_at", "updated_at"})


def check_deadline() -> None:
    """Raise ``RequestTimeout`` once the current request has run out of time."""
    if not has_request_context():
        return
    deadline = g.get("request_deadline")
    if deadline is not None and time.monotonic() > deadline:
        raise RequestTimeout()


@contextmanager
def guarded(session, message: str):
    """Run a unit of database work, rolling back and translating any failure."""
    check_deadline()
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception(message, exc_info=exc)
        raise translate_db_error(exc, message) from exc


def resolve_organization(session, slug: str) -> Organization:
    """Look up an organization by its public slug."""
    with guarded(session, "Failed to resolve organization slug"):
        organization = session.execute(
            select(Organization).where(Organization.slug == slug)
        ).scalar_one_or_none()

    if organization is None:
        raise NotFoundError("Organization not found")
    return organization


class TenantRepository:
    """list/get/create/update/soft_delete for one tenant-owned model."""

    def __init__(self, model, label: str) -> None:
        self.model = model
        self.label = label

    def _scoped(self, organization_id: int):
        return select(self.model).where(self.model.organization_id == organization_id)

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.label} not found")

    @staticmethod
    def _writable(fields: dict) -> dict:
        return {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}

    def list(self, session, organization_id: int) -> list:
        """Active rows of the organization ordered by name."""
        with guarded(session, f"Failed to fetch {self.label.lower()} list"):
            stmt = (
                self._scoped(organization_id)
                .where(self.model.active.is_(True))
                .order_by(self.model.name)
            )
            return list(session.execute(stmt).scalars())

    def list_public(self, session, slug: str) -> list:
        organization = resolve_organization(session, slug)
        return self.list(session, organization.id)

    def get(self, session, organization_id: int, record_id: int):
        """Fetch one row by id, soft-deleted rows included."""
        with guarded(session, f"Failed to fetch {self.label.lower()}"):
            record = session.execute(
                self._scoped(organization_id).where(self.model.id == record_id)
            ).scalar_one_or_none()

        if record is None:
            raise self._not_found()
        return record

    def create(self, session, organization_id: int, fields: dict):
        with guarded(session, f"Failed to create {self.label.lower()}"):
            record = self.model(**self._writable(fields))
            record.organization_id = organization_id
            session.add(record)
            session.commit()

        logger.info("Created %s %s for organization %s", self.label.lower(), record.id, organization_id)
        return record

    def update(self, session, organization_id: int, record_id: int, fields: dict):
        values = self._writable(fields)
        if not values:
            return self.get(session, organization_id, record_id)

        with guarded(session, f"Failed to update {self.label.lower()}"):
            result = session.execute(
                update(self.model)
                .where(self.model.id == record_id, self.model.organization_id == organization_id)
                .values(**values)
            )
            if result.rowcount == 0:
                session.rollback()
                raise self._not_found()
            session.commit()

        return self.get(session, organization_id, record_id)

    def soft_delete(self, session, organization_id: int, record_id: int) -> None:
        with guarded(session, f"Failed to delete {self.label.lower()}"):
            result = session.execute(
                update(self.model)
                .where(self.model.id == record_id, self.model.organization_id == organization_id)
                .values(active=False)
            )
            if result.rowcount == 0:
                session.rollback()
                raise self._not_found()
            session.commit()

        logger.info("Soft-deleted %s %s for organization %s", self.label.lower(), record_id, organization_id)


customers = TenantRepository(Customer, "Customer")
services = TenantRepository(Service, "Service")
professionals = TenantRepository(Professional, "Professional")
