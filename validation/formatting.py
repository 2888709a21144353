"""User-facing rendering of validation issues."""

from __future__ import annotations

from typing import Any, Iterable

from validation.events import DetailedValidationResult
from validation.schema import ValidationIssue

FIELD_LABELS = {
    "uid": "Event ID",
    "source": "Event Source",
    "title": "Event Title",
    "description": "Description",
    "startUtc": "Start Date",
    "endUtc": "End Date",
    "timezone": "Timezone",
    "venueName": "Venue Name",
    "address": "Address",
    "lat": "Latitude",
    "lng": "Longitude",
    "category": "Category",
    "tag": "Tag",
    "url": "URL",
    "organizerEmail": "Organizer Email",
    "contactEmail": "Contact Email",
    "createdByUser": "Created by User",
    "city": "City",
    "country": "Country",
    "status": "Status",
    "lastSeenAtUtc": "Last Seen Date",
    "coordinates": "Coordinates",
    "location": "Location",
}


def format_field_name(field: str) -> str:
    return FIELD_LABELS.get(field, field)


def format_validation_errors(errors: Iterable[ValidationIssue]) -> list[str]:
    return [f"{format_field_name(e.field)}: {e.message}" for e in errors]


def format_validation_warnings(warnings: Iterable[ValidationIssue]) -> list[str]:
    formatted = []
    for warning in warnings:
        message = f"{format_field_name(warning.field)}: {warning.message}"
        if warning.suggestion:
            message += f" ({warning.suggestion})"
        formatted.append(message)
    return formatted


def format_validation_result_for_api(result: DetailedValidationResult) -> dict[str, Any]:
    summary = result.summary
    return {
        "isValid": result.is_valid,
        "errors": [e.as_dict() for e in result.errors],
        "warnings": [w.as_dict() for w in result.warnings],
        "summary": {
            "totalErrors": summary.total_errors,
            "totalWarnings": summary.total_warnings,
            "fieldsWithErrors": summary.fields_with_errors,
            "fieldsWithWarnings": summary.fields_with_warnings,
        },
        "data": result.data.to_wire() if result.data else None,
    }
