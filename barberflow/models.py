"""Database models for the BarberFlow backend."""
from __future__ import annotations

from datetime import datetime, timezone

from .extensions import db


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


class Organization(db.Model):
    """A barbershop tenant. Every tenant-owned row points back here."""

    __tablename__ = "organizations"

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(100), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    status = db.Column(
        db.Enum(
            "active",
            "suspended",
            name="organization_status",
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        server_default="active",
        default="active",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "status": self.status,
        }


class User(db.Model):
    """Staff login account. Distinct from ``Professional`` (the roster entry)."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(150), nullable=False)
    role = db.Column(
        db.Enum(
            "owner",
            "manager",
            "barber",
            name="user_role",
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        server_default="barber",
        default="barber",
    )
    avatar_url = db.Column(db.String(500))
    last_login_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    organization = db.relationship("Organization")

    def to_dict_basic(self) -> dict[str, object]:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
            "avatar_url": self.avatar_url,
        }


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True
    )
    name = db.Column(db.String(150), nullable=False)
    phone = db.Column(db.String(30))
    email = db.Column(db.String(255))
    notes = db.Column(db.Text)
    total_visits = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    active = db.Column(db.Boolean, nullable=False, default=True, server_default="1")
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "notes": self.notes,
            "total_visits": self.total_visits,
            "active": bool(self.active),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Service(db.Model):
    """Services offered by an organization."""

    __tablename__ = "services"

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True
    )
    name = db.Column(db.String(150), nullable=False)
    price = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(100))
    active = db.Column(db.Boolean, nullable=False, default=True, server_default="1")
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_public_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "duration_minutes": self.duration_minutes,
        }

    def to_dict(self) -> dict[str, object]:
        return {
            **self.to_public_dict(),
            "organization_id": self.organization_id,
            "category": self.category,
            "active": bool(self.active),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Professional(db.Model):
    """Roster entry for someone who performs services."""

    __tablename__ = "professionals"

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True
    )
    name = db.Column(db.String(150), nullable=False)
    phone = db.Column(db.String(30))
    active = db.Column(db.Boolean, nullable=False, default=True, server_default="1")
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_public_dict(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name}

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "name": self.name,
            "phone": self.phone,
            "active": bool(self.active),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class WorkingHours(db.Model):
    """One working day for a professional. The full set is replaced on save."""

    __tablename__ = "working_hours"

    id = db.Column(db.Integer, primary_key=True)
    professional_id = db.Column(
        db.Integer, db.ForeignKey("professionals.id"), nullable=False, index=True
    )
    day_of_week = db.Column(db.Integer, nullable=False)  # 0=Sunday, 1=Monday, etc.
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "professional_id": self.professional_id,
            "day_of_week": self.day_of_week,
            "start_time": self.start_time.strftime("%H:%M") if self.start_time else None,
            "end_time": self.end_time.strftime("%H:%M") if self.end_time else None,
        }


class ProfessionalService(db.Model):
    __tablename__ = "professional_services"
    __table_args__ = (
        db.UniqueConstraint("professional_id", "service_id", name="uq_professional_service"),
    )

    id = db.Column(db.Integer, primary_key=True)
    professional_id = db.Column(
        db.Integer, db.ForeignKey("professionals.id"), nullable=False, index=True
    )
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False)
    custom_duration = db.Column(db.Integer)
    enabled = db.Column(db.Boolean, nullable=False, default=True, server_default="1")
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    service = db.relationship("Service")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "professional_id": self.professional_id,
            "service_id": self.service_id,
            "service_name": self.service.name if self.service else None,
            "custom_duration": self.custom_duration,
            "duration_minutes": self.custom_duration
            or (self.service.duration_minutes if self.service else None),
            "enabled": bool(self.enabled),
        }


class Appointment(db.Model):
    """Customer appointments. Never hard-deleted; only the status changes."""

    __tablename__ = "appointments"

    id = db.Column(db.Integer, primary_key=True)
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id"), nullable=False, index=True
    )
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey("services.id"), nullable=False)
    professional_id = db.Column(db.Integer, db.ForeignKey("professionals.id"), nullable=True)
    date_time = db.Column(db.DateTime, nullable=False, index=True)
    notes = db.Column(db.Text)
    status = db.Column(
        db.Enum(
            "confirmed",
            "completed",
            "cancelled",
            name="appointment_status",
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        server_default="confirmed",
        default="confirmed",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    customer = db.relationship("Customer")
    service = db.relationship("Service")
    professional = db.relationship("Professional")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "customer_id": self.customer_id,
            "customer": {
                "id": self.customer.id,
                "name": self.customer.name,
                "phone": self.customer.phone,
            } if self.customer else None,
            "service_id": self.service_id,
            "service": {
                "id": self.service.id,
                "name": self.service.name,
                "price": self.service.price,
                "duration_minutes": self.service.duration_minutes,
            } if self.service else None,
            "professional_id": self.professional_id,
            "professional_name": self.professional.name if self.professional else None,
            "date_time": _iso(self.date_time),
            "notes": self.notes,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
