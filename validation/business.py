"""Business-logic rules applied to events that already passed the schema."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import urlsplit

from validation.dates import MAX_EVENT_DURATION, MIN_EVENT_DURATION, parse_datetime
from validation.schema import ValidatedEvent, ValidationIssue

PAST_ERROR_AFTER = timedelta(days=365)
PAST_WARNING_AFTER = timedelta(days=30)
FUTURE_WARNING_AFTER = timedelta(days=730)

_PLACEHOLDER_WORDS = ("test", "example", "sample")


def _check_duration(event: ValidatedEvent, errors: list[ValidationIssue]) -> None:
    start = parse_datetime(event.start_utc)
    end = parse_datetime(event.end_utc)
    if start is None or end is None:
        return
    duration = end - start
    if duration <= timedelta(0):
        errors.append(
            ValidationIssue(
                "endUtc", "invalid_duration", "End date must be after start date", value=event.end_utc
            )
        )
    elif duration > MAX_EVENT_DURATION:
        hours = round(duration.total_seconds() / 3600)
        errors.append(
            ValidationIssue(
                "endUtc",
                "duration_too_long",
                f"Event duration is {hours} hours (max 168 hours)",
                suggestion="Consider breaking this into multiple events if appropriate",
                value=event.end_utc,
            )
        )
    elif duration < MIN_EVENT_DURATION:
        errors.append(
            ValidationIssue(
                "endUtc",
                "duration_too_short",
                "Event duration is less than 1 minute",
                suggestion="Please verify the end time is correct",
                value=event.end_utc,
            )
        )


def _check_start(
    event: ValidatedEvent,
    now: datetime,
    errors: list[ValidationIssue],
    warnings: list[ValidationIssue],
) -> None:
    start = parse_datetime(event.start_utc)
    if start is None:
        return
    offset = start - now
    if offset < -PAST_ERROR_AFTER:
        errors.append(
            ValidationIssue(
                "startUtc",
                "too_far_past",
                "Event start date is more than 1 year in the past",
                value=event.start_utc,
            )
        )
    elif offset < -PAST_WARNING_AFTER:
        warnings.append(
            ValidationIssue(
                "startUtc",
                "past_event",
                "Event start date is in the past",
                suggestion="This may be a completed event",
            )
        )
    if offset > FUTURE_WARNING_AFTER:
        warnings.append(
            ValidationIssue(
                "startUtc",
                "far_future",
                "Event start date is more than 2 years in the future",
                suggestion="Please verify the date is correct",
            )
        )


def perform_business_logic_validation(
    event: ValidatedEvent, now: datetime | None = None
) -> tuple[list[ValidationIssue], list[ValidationIssue]]:
    """Return ``(errors, warnings)`` for a schema-valid event.

    *now* defaults to the current UTC time and exists so callers can pin the
    clock.
    """
    now = now or datetime.now(timezone.utc)
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    _check_duration(event, errors)
    _check_start(event, now, errors, warnings)

    title = event.title.lower()
    if any(word in title for word in _PLACEHOLDER_WORDS):
        warnings.append(
            ValidationIssue(
                "title",
                "suspicious_title",
                "Event title appears to be a test or example",
                suggestion="Please verify this is a real event",
            )
        )
    if len(event.title) < 3:
        warnings.append(
            ValidationIssue(
                "title",
                "short_title",
                "Event title is very short",
                suggestion="Consider adding more descriptive details",
            )
        )

    has_lat = event.lat is not None
    has_lng = event.lng is not None
    if not event.venue_name and not event.address and not has_lat and not has_lng:
        warnings.append(
            ValidationIssue(
                "location",
                "missing_location",
                "No location information provided",
                suggestion="Consider adding venue name, address, or coordinates",
            )
        )
    if has_lat != has_lng:
        errors.append(
            ValidationIssue(
                "coordinates",
                "incomplete_coordinates",
                "Both latitude and longitude must be provided together",
                value={"lat": event.lat, "lng": event.lng},
            )
        )

    if event.url:
        scheme = urlsplit(event.url).scheme.lower()
        if scheme not in ("http", "https"):
            errors.append(
                ValidationIssue(
                    "url",
                    "invalid_protocol",
                    "URL must use HTTP or HTTPS protocol",
                    value=event.url,
                )
            )

    if (
        event.organizer_email
        and event.contact_email
        and event.organizer_email.lower() == event.contact_email.lower()
    ):
        warnings.append(
            ValidationIssue(
                "contactEmail",
                "duplicate_email",
                "Organizer and contact emails are the same",
                suggestion="Consider using different email addresses if appropriate",
            )
        )

    return errors, warnings
