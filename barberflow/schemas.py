"""Request bodies accepted by the API.

Each schema enumerates the fields a client may send. ``organization_id`` is
never part of a request schema: the tenant always comes from the session token.
"""
from __future__ import annotations

from datetime import datetime, time
from typing import ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

AppointmentStatus = Literal["confirmed", "completed", "cancelled"]


class RequestSchema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class PartialUpdate(RequestSchema):
    """Update body where omitted fields are left alone.

    Fields listed in ``not_nullable`` may be omitted but not sent as null.
    """

    not_nullable: ClassVar[tuple[str, ...]] = ("name",)

    @model_validator(mode="after")
    def check_not_null(self) -> "PartialUpdate":
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class LoginRequest(RequestSchema):
    # Passwords are hashed as typed; the email is normalized in verify_credentials.
    model_config = ConfigDict(str_strip_whitespace=False, extra="ignore")

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class CustomerCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=150)
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None


class CustomerUpdate(PartialUpdate):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None


class ServiceCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=150)
    price: float = Field(ge=0)
    duration_minutes: int = Field(gt=0)
    category: Optional[str] = None


class ServiceUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("name", "price", "duration_minutes")

    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    price: Optional[float] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    category: Optional[str] = None


class ProfessionalCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=150)
    phone: Optional[str] = None


class ProfessionalUpdate(PartialUpdate):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    phone: Optional[str] = None


class WorkingDay(RequestSchema):
    day_of_week: int = Field(ge=0, le=6)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    active: bool = False

    @model_validator(mode="after")
    def check_hours(self) -> "WorkingDay":
        if self.active:
            if self.start_time is None or self.end_time is None:
                raise ValueError("start_time and end_time are required for active days")
            if self.start_time >= self.end_time:
                raise ValueError("start_time must be before end_time")
        return self


class ScheduleSave(RequestSchema):
    schedule: List[WorkingDay]

    @model_validator(mode="after")
    def check_unique_days(self) -> "ScheduleSave":
        days = [entry.day_of_week for entry in self.schedule if entry.active]
        if len(days) != len(set(days)):
            raise ValueError("schedule cannot contain the same active day twice")
        return self


class ServiceAssignment(RequestSchema):
    service_id: int
    custom_duration: Optional[int] = Field(default=None, gt=0)
    enabled: bool = False


class ServiceAssignmentSave(RequestSchema):
    services: List[ServiceAssignment]

    @model_validator(mode="after")
    def check_unique_services(self) -> "ServiceAssignmentSave":
        ids = [entry.service_id for entry in self.services if entry.enabled]
        if len(ids) != len(set(ids)):
            raise ValueError("services cannot enable the same service twice")
        return self


class AppointmentCreate(RequestSchema):
    customer_id: int
    service_id: int
    professional_id: Optional[int] = None
    date_time: datetime
    notes: Optional[str] = None


class AppointmentStatusUpdate(RequestSchema):
    status: AppointmentStatus


def parse_body(schema: type[RequestSchema], payload) -> RequestSchema:
    """Validate a JSON body, turning pydantic errors into a 400 ``ValidationError``."""
    try:
        return schema.model_validate(payload if payload is not None else {})
    except PydanticValidationError as exc:
        messages = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"])
            messages.append(f"{location}: {err['msg']}" if location else err["msg"])
        raise ValidationError("; ".join(messages)) from exc
