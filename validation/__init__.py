"""Event validation: schema, business rules and field sub-validators."""

from validation.business import perform_business_logic_validation
from validation.coordinates import validate_coordinates
from validation.dates import validate_date_string, validate_event_duration
from validation.emails import validate_and_sanitize_email, validate_email
from validation.events import (
    DetailedValidationResult,
    ValidationResult,
    validate_complete_event,
    validate_event_detailed,
)
from validation.schema import ValidatedEvent, ValidationIssue, validate_event_data
from validation.urls import validate_and_sanitize_url, validate_url

__all__ = [
    "DetailedValidationResult",
    "ValidatedEvent",
    "ValidationIssue",
    "ValidationResult",
    "perform_business_logic_validation",
    "validate_and_sanitize_email",
    "validate_and_sanitize_url",
    "validate_complete_event",
    "validate_coordinates",
    "validate_date_string",
    "validate_email",
    "validate_event_data",
    "validate_event_detailed",
    "validate_event_duration",
    "validate_url",
]
