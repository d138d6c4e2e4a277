"""Out-of-band provisioning of organizations and staff accounts.

There is no self-registration; these helpers back ``scripts/seed_organization.py``.
"""
from __future__ import annotations

import logging

from sqlalchemy import select
from werkzeug.security import generate_password_hash

from .errors import ValidationError
from .models import Organization, User
from .repository import guarded

logger = logging.getLogger(__name__)


def seed_organization(
    session,
    *,
    slug: str,
    name: str,
    owner_email: str,
    owner_password: str,
    owner_name: str = "Owner",
    status: str = "active",
) -> tuple[Organization, User]:
    """Create an organization together with its owner account."""
    slug = slug.strip().lower()
    owner_email = owner_email.strip().lower()
    if not slug or slug.isdigit():
        # All-digit slugs would be routed to the /services/<int:id> endpoints.
        raise ValidationError("slug must contain at least one non-digit character")

    with guarded(session, "Failed to seed organization"):
        if session.execute(select(Organization.id).where(Organization.slug == slug)).first():
            raise ValidationError(f"slug '{slug}' is already in use")
        if session.execute(select(User.id).where(User.email == owner_email)).first():
            raise ValidationError(f"email '{owner_email}' is already in use")

        organization = Organization(slug=slug, name=name, status=status)
        session.add(organization)
        session.flush()  # Get the new organization id before creating the owner

        owner = User(
            organization_id=organization.id,
            email=owner_email,
            password_hash=generate_password_hash(owner_password),
            full_name=owner_name,
            role="owner",
        )
        session.add(owner)
        session.commit()

    logger.info("Seeded organization %s (%s) with owner %s", organization.id, slug, owner_email)
    return organization, owner


def set_organization_status(session, slug: str, status: str) -> Organization:
    if status not in ("active", "suspended"):
        raise ValidationError("status must be 'active' or 'suspended'")

    with guarded(session, "Failed to update organization status"):
        organization = session.execute(
            select(Organization).where(Organization.slug == slug)
        ).scalar_one_or_none()
        if organization is None:
            raise ValidationError(f"no organization with slug '{slug}'")
        organization.status = status
        session.commit()

    logger.info("Organization %s is now %s", slug, status)
    return organization
