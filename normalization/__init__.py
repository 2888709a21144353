"""Text, timezone, address and venue-name normalization."""

from normalization.addresses import (
    AddressParseResult,
    NormalizedAddress,
    compare_addresses,
    extract_address_components,
    format_address_for_display,
    normalize_address,
    validate_address_completeness,
)
from normalization.text import sanitize_text, strip_html
from normalization.timezones import (
    get_timezone_offset,
    normalize_timezone,
    validate_timezone,
)
from normalization.venues import (
    extract_venue_name_from_address,
    format_venue_name,
    normalize_venue_name,
    validate_venue_name,
)

__all__ = [
    "AddressParseResult",
    "NormalizedAddress",
    "compare_addresses",
    "extract_address_components",
    "extract_venue_name_from_address",
    "format_address_for_display",
    "format_venue_name",
    "get_timezone_offset",
    "normalize_address",
    "normalize_timezone",
    "normalize_venue_name",
    "sanitize_text",
    "strip_html",
    "validate_address_completeness",
    "validate_timezone",
    "validate_venue_name",
]
