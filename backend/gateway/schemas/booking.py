"""Booking Schemas — request parsing and response shape for POST /api/booking.

Invariants:
    - String fields are sanitized before any constraint runs
    - An empty required field reports as missing, not as invalid
    - timezone must resolve (UTC or an IANA zone) before the request is accepted

Design Decisions:
    - Pydantic instead of the contact form's hand-rolled checks: the booking body is
      JSON with typed date/time fields that pydantic already parses
"""

import datetime as dt
from zoneinfo import ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from gateway.core.booking import resolve_timezone
from gateway.core.sanitize_input import describe_rule, sanitize, validate

DEFAULT_START_TIME = dt.time(9, 0)


class BookingRequest(BaseModel):
    """Untrusted booking payload."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    date: dt.date
    time: dt.time = DEFAULT_START_TIME
    duration_minutes: int = Field(30, ge=15, le=240, alias="duration")
    timezone: str = "UTC"
    topic: str = Field("Consultation", max_length=100)
    message: str = Field("", max_length=2000)

    @field_validator("name", "email", "timezone", "topic", "message", mode="before")
    @classmethod
    def sanitize_text(cls, v):
        return sanitize(v) if isinstance(v, str) else v

    @field_validator("name", "email")
    @classmethod
    def check_pattern(cls, v: str, info: ValidationInfo) -> str:
        if not v:
            raise PydanticCustomError("missing", "{field} is required", {"field": info.field_name})
        if not validate(v, info.field_name):
            raise ValueError(describe_rule(info.field_name))
        return v

    @field_validator("date", mode="before")
    @classmethod
    def require_date(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("missing", "date is required")
        return v

    @field_validator("time", mode="before")
    @classmethod
    def default_time(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_START_TIME
        return v

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        if not v:
            return "UTC"
        try:
            resolve_timezone(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError("timezone must be UTC or an IANA zone such as Europe/Paris")
        return v

    @field_validator("topic")
    @classmethod
    def default_topic(cls, v: str) -> str:
        return v or "Consultation"

    def start_datetime(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time, tzinfo=resolve_timezone(self.timezone))


class CalendarEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    start: str
    end: str
    duration_minutes: int
    timezone: str
    description: str
    ics: str


class BookingResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    booking_id: str
    calendar_event: CalendarEvent
    message: str = "Booking request received"
