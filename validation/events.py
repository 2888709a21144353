"""
Event validation entry points.

``validate_event_detailed`` runs the schema and business-logic tiers and
returns structured issues. ``validate_complete_event`` adds the
sub-validators (dates, timezone, coordinates, URL, emails, venue, address)
and canonicalizes the accepted event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from normalization.addresses import normalize_address
from normalization.timezones import validate_timezone
from normalization.venues import normalize_venue_name
from validation.business import perform_business_logic_validation
from validation.coordinates import validate_coordinates
from validation.dates import validate_datetime_with_timezone, validate_event_duration
from validation.emails import validate_and_sanitize_email
from validation.schema import ValidatedEvent, ValidationIssue, parse_event
from validation.urls import validate_and_sanitize_url

PROVIDER_URL_DOMAINS = ("eventbrite.com", "ticketmaster.com", "seatgeek.com", "google.com")
PROVIDER_EMAIL_DOMAINS = (*PROVIDER_URL_DOMAINS, "meetup.com")


@dataclass
class ValidationSummary:
    total_errors: int
    total_warnings: int
    fields_with_errors: list[str]
    fields_with_warnings: list[str]

    @classmethod
    def of(cls, errors: list[ValidationIssue], warnings: list[ValidationIssue]) -> ValidationSummary:
        return cls(
            total_errors=len(errors),
            total_warnings=len(warnings),
            fields_with_errors=list(dict.fromkeys(e.field for e in errors)),
            fields_with_warnings=list(dict.fromkeys(w.field for w in warnings)),
        )


@dataclass
class DetailedValidationResult:
    is_valid: bool
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]
    data: ValidatedEvent | None
    summary: ValidationSummary


def validate_event_detailed(raw: Any, now: datetime | None = None) -> DetailedValidationResult:
    data, errors = parse_event(raw)
    if data is None:
        return DetailedValidationResult(False, errors, [], None, ValidationSummary.of(errors, []))

    errors, warnings = perform_business_logic_validation(data, now=now)
    return DetailedValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        data=data if not errors else None,
        summary=ValidationSummary.of(errors, warnings),
    )


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    data: ValidatedEvent | None = None
    error_details: list[ValidationIssue] = field(default_factory=list)
    warning_details: list[ValidationIssue] = field(default_factory=list)

    def error(self, issue: ValidationIssue, text: str | None = None) -> None:
        self.error_details.append(issue)
        self.errors.append(text or f"{issue.field}: {issue.message}")

    def warn(self, issue: ValidationIssue, text: str | None = None) -> None:
        self.warning_details.append(issue)
        self.warnings.append(text or f"{issue.field}: {issue.message}")


def _has_error_on(result: ValidationResult, *fields: str) -> bool:
    return any(issue.field in fields for issue in result.error_details)


def _check_dates(event: ValidatedEvent, zone: str | None, result: ValidationResult) -> None:
    start = validate_datetime_with_timezone(event.start_utc, zone, check_bounds=False)
    if not start.is_valid:
        message = f"Start date validation failed: {start.error}"
        result.error(ValidationIssue("startUtc", "invalid_start_date", message), message)
    if not event.end_utc:
        return

    end = validate_datetime_with_timezone(event.end_utc, zone, check_bounds=False)
    if not end.is_valid:
        message = f"End date validation failed: {end.error}"
        result.error(ValidationIssue("endUtc", "invalid_end_date", message), message)
        return

    duration = validate_event_duration(event.start_utc, event.end_utc, check_bounds=False)
    if not duration.is_valid:
        if not _has_error_on(result, "endUtc"):
            result.error(ValidationIssue("endUtc", "invalid_duration", duration.error), duration.error)
    elif duration.duration_minutes and duration.duration_minutes // 60 > 24:
        hours = duration.duration_minutes // 60
        message = f"Event duration is {hours} hours ({hours // 24} days)"
        result.warn(ValidationIssue("endUtc", "long_duration", message), message)


def _check_email(
    value: str | None, label: str, wire_field: str, result: ValidationResult
) -> str | None:
    if not value:
        return None
    checked = validate_and_sanitize_email(value, trusted_domains=PROVIDER_EMAIL_DOMAINS)
    if not checked.is_valid:
        message = f"{label} email validation failed: {checked.error}"
        result.error(ValidationIssue(wire_field, "invalid_email", message, value=value), message)
        return None
    for warning in checked.warnings:
        message = f"{label} email: {warning}"
        result.warn(ValidationIssue(wire_field, "email_warning", message), message)
    return checked.normalized_email


def validate_complete_event(raw: Any, now: datetime | None = None) -> ValidationResult:
    """Validate *raw* end to end and return the canonical event on success.

    Schema failures stop validation early. Otherwise every business rule and
    sub-validator runs so the caller sees all problems in one pass.
    """
    result = ValidationResult(is_valid=False)
    event, schema_errors = parse_event(raw)
    if event is None:
        for issue in schema_errors:
            result.error(issue)
        return result

    errors, warnings = perform_business_logic_validation(event, now=now)
    for issue in errors:
        result.error(issue)
    for issue in warnings:
        result.warn(issue)

    updates: dict[str, Any] = {}

    zone: str | None = None
    if event.timezone:
        tz = validate_timezone(event.timezone)
        if tz.is_valid:
            zone = updates["timezone"] = tz.normalized_timezone
        else:
            message = f"Timezone validation failed: {tz.error}"
            result.error(ValidationIssue("timezone", "invalid_timezone", message), message)

    _check_dates(event, zone, result)

    if (event.lat is not None or event.lng is not None) and not _has_error_on(result, "coordinates"):
        coords = validate_coordinates(event.lat, event.lng)
        if not coords.is_valid:
            result.error(ValidationIssue("coordinates", "invalid_coordinates", coords.error), coords.error)
        else:
            updates["lat"], updates["lng"] = coords.lat, coords.lng
            for warning in coords.warnings:
                message = f"Coordinates: {warning}"
                result.warn(ValidationIssue("coordinates", "coordinates_warning", warning), message)

    if event.url and not _has_error_on(result, "url"):
        checked = validate_and_sanitize_url(event.url, trusted_domains=PROVIDER_URL_DOMAINS)
        if not checked.is_valid:
            result.error(ValidationIssue("url", "invalid_url", checked.error, value=event.url), checked.error)
        else:
            updates["url"] = checked.normalized_url
            for warning in checked.warnings:
                result.warn(ValidationIssue("url", "url_warning", warning), warning)

    organizer = _check_email(event.organizer_email, "Organizer", "organizerEmail", result)
    contact = _check_email(event.contact_email, "Contact", "contactEmail", result)
    if organizer:
        updates["organizer_email"] = organizer
    if contact:
        updates["contact_email"] = contact

    if event.venue_name:
        venue = normalize_venue_name(event.venue_name, event.source)
        if venue.normalized_name:
            updates["venue_name"] = venue.normalized_name
        for warning in venue.warnings:
            result.warn(ValidationIssue("venueName", "venue_warning", warning), f"Venue name: {warning}")

    if event.address:
        parsed = normalize_address(event.address, event.source)
        for warning in parsed.warnings:
            result.warn(ValidationIssue("address", "address_warning", warning), f"Address: {warning}")
        components = parsed.normalized_address
        if components is not None:
            if not event.city and components.city:
                updates["city"] = components.city
            if not event.country and components.country:
                updates["country"] = components.country

    if len(event.title.split()) < 2:
        message = "Event title is very short, consider adding more details"
        result.warn(ValidationIssue("title", "brief_title", message), message)
    if not event.timezone:
        message = "No timezone specified, assuming UTC"
        result.warn(ValidationIssue("timezone", "missing_timezone", message), message)

    result.is_valid = not result.error_details
    if result.is_valid:
        result.data = event.model_copy(update=updates)
    return result
