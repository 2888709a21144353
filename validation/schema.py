"""
Schema tier of event validation.

``ValidatedEvent`` is the full event shape accepted from providers and manual
entry. Field validators raise :class:`PydanticCustomError` with a stable code
and a human message so callers can report every failing field at once.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from pydantic import ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from fetchers.models import CamelModel, EventSource
from normalization.text import has_control_chars
from validation.dates import is_iso_datetime

_EMAIL_SHAPE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*$", re.I)


class EventTag(str, Enum):
    WORK = "Work"
    SOCIAL = "Social"
    MUSIC = "Music"
    OTHER = "Other"


class EventStatus(str, Enum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


# (max length, label used in messages) for optional free-text fields.
_TEXT_LIMITS: dict[str, tuple[int, str]] = {
    "timezone": (50, "Timezone"),
    "venue_name": (255, "Venue name"),
    "address": (500, "Address"),
    "category": (100, "Category"),
    "city": (100, "City name"),
    "country": (100, "Country name"),
}

_MISSING_MESSAGES = {
    "uid": "Event UID is required",
    "source": "Invalid event source",
    "title": "Event title is required",
    "startUtc": "Invalid start date format",
    "lastSeenAtUtc": "Invalid last seen date format",
}


class ValidatedEvent(CamelModel):
    uid: str
    source: EventSource
    title: str
    description: str | None = None
    start_utc: str
    end_utc: str | None = None
    timezone: str | None = None
    venue_name: str | None = None
    address: str | None = None
    lat: float | None = None
    lng: float | None = None
    category: str | None = None
    tag: EventTag = EventTag.OTHER
    url: str | None = None
    organizer_email: str | None = None
    contact_email: str | None = None
    created_by_user: bool = False
    city: str | None = None
    country: str | None = None
    status: EventStatus | None = None
    last_seen_at_utc: str

    @field_validator("uid")
    @classmethod
    def _check_uid(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("too_small", "Event UID is required")
        if len(value) > 255:
            raise PydanticCustomError("too_big", "Event UID too long")
        if has_control_chars(value):
            raise PydanticCustomError("invalid_characters", "Event UID contains invalid characters")
        return value

    @field_validator("source", mode="before")
    @classmethod
    def _check_source(cls, value: Any) -> EventSource:
        try:
            return EventSource(value)
        except ValueError:
            raise PydanticCustomError("invalid_enum_value", "Invalid event source") from None

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("too_small", "Event title is required")
        if len(value) > 500:
            raise PydanticCustomError("too_big", "Event title too long")
        if not value.strip():
            raise PydanticCustomError("blank", "Event title cannot be empty or whitespace")
        if has_control_chars(value):
            raise PydanticCustomError("invalid_characters", "Event title contains invalid characters")
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if len(value) > 2000:
            raise PydanticCustomError("too_big", "Event description too long")
        if has_control_chars(value, allow_newlines=True):
            raise PydanticCustomError(
                "invalid_characters", "Event description contains invalid characters"
            )
        return value

    @field_validator("start_utc", "end_utc", "last_seen_at_utc")
    @classmethod
    def _check_datetime(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is None:
            return value
        if not is_iso_datetime(value):
            label = {"start_utc": "start", "end_utc": "end", "last_seen_at_utc": "last seen"}
            raise PydanticCustomError(
                "invalid_string", f"Invalid {label[info.field_name]} date format"
            )
        return value

    @field_validator(*_TEXT_LIMITS)
    @classmethod
    def _check_text(cls, value: str | None, info: ValidationInfo) -> str | None:
        if not value:
            return value
        limit, label = _TEXT_LIMITS[info.field_name]
        if len(value) > limit:
            raise PydanticCustomError("too_big", f"{label} too long")
        if has_control_chars(value):
            raise PydanticCustomError("invalid_characters", f"{label} contains invalid characters")
        return value

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _check_coordinate(cls, value: Any, info: ValidationInfo) -> float | None:
        if value is None:
            return value
        label, limit = ("Latitude", 90) if info.field_name == "lat" else ("Longitude", 180)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            raise PydanticCustomError("invalid_type", f"{label} must be a valid number")
        if not math.isfinite(value):
            raise PydanticCustomError("not_finite", f"{label} must be a finite number")
        if not -limit <= value <= limit:
            raise PydanticCustomError(
                "out_of_range", f"{label} must be between -{limit} and {limit} degrees"
            )
        return float(value)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if not value:
            return value
        try:
            parts = urlsplit(value)
        except ValueError:
            parts = None
        if (
            parts is None
            or not _SCHEME.match(parts.scheme)
            or (parts.scheme.lower() in ("http", "https") and not parts.hostname)
            or not (parts.netloc or parts.path)
        ):
            raise PydanticCustomError("invalid_string", "Invalid URL format")
        return value

    @field_validator("organizer_email", "contact_email")
    @classmethod
    def _check_email(cls, value: str | None, info: ValidationInfo) -> str | None:
        if not value:
            return value
        if not _EMAIL_SHAPE.match(value):
            label = "organizer" if info.field_name == "organizer_email" else "contact"
            raise PydanticCustomError("invalid_string", f"Invalid {label} email")
        return value

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and unset optionals dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass
class ValidationIssue:
    field: str
    code: str
    message: str
    suggestion: str | None = None
    value: Any = None

    def as_dict(self) -> dict[str, Any]:
        data = {"field": self.field, "code": self.code, "message": self.message}
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class SchemaValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    data: ValidatedEvent | None = None


def _wire_field(loc: tuple) -> str:
    if not loc:
        return "event"
    head = str(loc[0])
    model_field = ValidatedEvent.model_fields.get(head)
    if model_field is not None and model_field.alias:
        head = model_field.alias
    return ".".join([head, *(str(part) for part in loc[1:])])


def parse_event(raw: Any) -> tuple[ValidatedEvent | None, list[ValidationIssue]]:
    """Validate *raw* against the schema, collecting one issue per failing field."""
    try:
        return ValidatedEvent.model_validate(raw), []
    except ValidationError as exc:
        issues = []
        for error in exc.errors():
            name = _wire_field(error["loc"])
            message = error["msg"]
            if error["type"] == "missing":
                message = _MISSING_MESSAGES.get(name, message)
            issues.append(
                ValidationIssue(
                    field=name, code=error["type"], message=message, value=error.get("input")
                )
            )
        return None, issues
    except Exception:
        return None, [ValidationIssue("unknown", "unknown_error", "Unknown validation error")]


def validate_event_data(raw: Any) -> SchemaValidationResult:
    """Schema-only validation; errors are ``"<field>: <message>"`` strings."""
    data, issues = parse_event(raw)
    if issues:
        if issues[0].code == "unknown_error":
            return SchemaValidationResult(False, [issues[0].message])
        return SchemaValidationResult(False, [f"{i.field}: {i.message}" for i in issues])
    return SchemaValidationResult(True, data=data)
