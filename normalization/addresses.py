"""
Address normalization.

Breaks free-text addresses coming from providers or manual entry into
structured components. Each source gets its own pre-cleaning step before the
shared pattern matcher runs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from fetchers.models import EventSource
from normalization.text import CONTROL_CHARS, collapse_whitespace

PROVIDER_LABELS: dict[EventSource, str] = {
    EventSource.GOOGLECAL: "Google Calendar",
    EventSource.EVENTBRITE: "Eventbrite",
    EventSource.TICKETMASTER: "Ticketmaster",
    EventSource.SEATGEEK: "SeatGeek",
    EventSource.MANUAL: "Manual",
}

US_STATES: dict[str, str] = {
    "ALABAMA": "AL", "ALASKA": "AK", "ARIZONA": "AZ", "ARKANSAS": "AR",
    "CALIFORNIA": "CA", "COLORADO": "CO", "CONNECTICUT": "CT", "DELAWARE": "DE",
    "FLORIDA": "FL", "GEORGIA": "GA", "HAWAII": "HI", "IDAHO": "ID",
    "ILLINOIS": "IL", "INDIANA": "IN", "IOWA": "IA", "KANSAS": "KS",
    "KENTUCKY": "KY", "LOUISIANA": "LA", "MAINE": "ME", "MARYLAND": "MD",
    "MASSACHUSETTS": "MA", "MICHIGAN": "MI", "MINNESOTA": "MN", "MISSISSIPPI": "MS",
    "MISSOURI": "MO", "MONTANA": "MT", "NEBRASKA": "NE", "NEVADA": "NV",
    "NEW HAMPSHIRE": "NH", "NEW JERSEY": "NJ", "NEW MEXICO": "NM", "NEW YORK": "NY",
    "NORTH CAROLINA": "NC", "NORTH DAKOTA": "ND", "OHIO": "OH", "OKLAHOMA": "OK",
    "OREGON": "OR", "PENNSYLVANIA": "PA", "RHODE ISLAND": "RI", "SOUTH CAROLINA": "SC",
    "SOUTH DAKOTA": "SD", "TENNESSEE": "TN", "TEXAS": "TX", "UTAH": "UT",
    "VERMONT": "VT", "VIRGINIA": "VA", "WASHINGTON": "WA", "WEST VIRGINIA": "WV",
    "WISCONSIN": "WI", "WYOMING": "WY", "DISTRICT OF COLUMBIA": "DC",
}
US_STATE_CODES = frozenset(US_STATES.values())

CANADIAN_PROVINCES = frozenset(
    {"AB", "BC", "MB", "NB", "NL", "NS", "NT", "NU", "ON", "PE", "QC", "SK", "YT"}
)

COUNTRY_ALIASES: dict[str, str] = {
    "USA": "United States",
    "US": "United States",
    "UNITED STATES": "United States",
    "AMERICA": "United States",
    "UK": "United Kingdom",
    "ENGLAND": "United Kingdom",
    "BRITAIN": "United Kingdom",
    "GB": "United Kingdom",
    "CA": "Canada",
    "AU": "Australia",
    "DE": "Germany",
    "FR": "France",
    "IT": "Italy",
    "ES": "Spain",
    "JP": "Japan",
    "CN": "China",
    "IN": "India",
    "BR": "Brazil",
    "MX": "Mexico",
}

_CITY_INDICATORS = (
    "city", "town", "village", "burg", "ville", "port", "beach", "springs",
    "heights", "hills", "valley", "grove", "park", "ridge", "dale", "ford",
)

_US_ZIP = re.compile(r"^\d{5}(-\d{4})?$")
_CA_POSTAL = re.compile(r"^[A-Z]\d[A-Z]\s?\d[A-Z]\d$")
_UK_POSTAL = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}$")
_TRAILING_PUNCTUATION = re.compile(r"[.,!?;:]+$")


@dataclass
class NormalizedAddress:
    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    full_address: str | None = None


@dataclass
class AddressParseResult:
    is_valid: bool
    normalized_address: NormalizedAddress | None = None
    warnings: list[str] = field(default_factory=list)
    error: str | None = None


# (pattern, builder) pairs, most specific first.
_AddressBuilder = Callable[[re.Match], NormalizedAddress]
ADDRESS_PATTERNS: list[tuple[re.Pattern, _AddressBuilder]] = [
    # "123 Main St, City, ST 12345"
    (
        re.compile(r"^(.+?),\s*([^,]+?),\s*([A-Z]{2})\s+(\d{5}(?:-\d{4})?)$", re.I),
        lambda m: NormalizedAddress(
            street=m[1], city=m[2], state=m[3].upper(), postal_code=m[4],
            country="United States",
        ),
    ),
    # "123 Main St, City, ON A1A 1A1"
    (
        re.compile(r"^(.+?),\s*([^,]+?),\s*([A-Z]{2})\s+([A-Z]\d[A-Z]\s?\d[A-Z]\d)$", re.I),
        lambda m: NormalizedAddress(
            street=m[1], city=m[2], state=m[3].upper(), postal_code=m[4].upper(),
            country="Canada",
        ),
    ),
    # "10 Downing St, London SW1A 2AA"
    (
        re.compile(r"^(.+?),\s*([^,]+?)\s+([A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2})$", re.I),
        lambda m: NormalizedAddress(
            street=m[1], city=m[2], postal_code=m[3].upper(), country="United Kingdom",
        ),
    ),
    # "123 Main St, City, Country"
    (
        re.compile(r"^(.+?),\s*([^,]+?),\s*([^,]+)$"),
        lambda m: NormalizedAddress(street=m[1], city=m[2], country=m[3]),
    ),
    # "City, ST"
    (
        re.compile(r"^([^,]+),\s*([A-Z]{2})$", re.I),
        lambda m: NormalizedAddress(city=m[1], state=m[2].upper(), country="United States"),
    ),
    # "123 Main St, City"
    (
        re.compile(r"^([^,]*\d[^,]*),\s*([^,]+)$"),
        lambda m: NormalizedAddress(street=m[1], city=m[2]),
    ),
    # "City, Country"
    (
        re.compile(r"^([^,]+),\s*([^,]+)$"),
        lambda m: NormalizedAddress(city=m[1], country=m[2]),
    ),
]


def strip_provider_suffix(address: str, label: str) -> str:
    pattern = re.compile(
        rf"\s*(?:-\s*{re.escape(label)}|@\s*{re.escape(label)}|\({re.escape(label)}\))$",
        re.I,
    )
    return pattern.sub("", address).strip()


def _preclean_google_calendar(address: str) -> str:
    # Calendar locations often lead with the venue: "Venue, 123 Street, City".
    cleaned = re.sub(
        r"^(The\s+)?[A-Z][a-z]+\s+(Theater|Theatre|Center|Centre|Arena|Stadium|Hall|"
        r"Auditorium|Pavilion)\s*,?\s*",
        "",
        address,
        flags=re.I,
    )
    cleaned = re.sub(r"\s*-\s*Google\s*Calendar$", "", cleaned, flags=re.I)
    cleaned = re.sub(r"\s*@\s*Google$", "", cleaned, flags=re.I).strip()
    venue_match = re.match(r"^[^,]+,\s*(\d+\s+[^,]+),\s*(.+)$", cleaned)
    if venue_match:
        cleaned = f"{venue_match[1]}, {venue_match[2]}"
    return cleaned


def normalize_address(
    address: str | None,
    source: EventSource | str = EventSource.MANUAL,
) -> AddressParseResult:
    """Decompose *address* into structured components.

    Blank input is valid and yields no address. Unrecognised formats are
    accepted with a warning rather than rejected.
    """
    if not address or not isinstance(address, str):
        return AddressParseResult(is_valid=True)

    clean = collapse_whitespace(CONTROL_CHARS.sub("", address))
    if not clean:
        return AddressParseResult(is_valid=True)

    try:
        source = EventSource(source)
    except ValueError:
        return parse_structured_address(clean)

    if source is EventSource.GOOGLECAL:
        clean = _preclean_google_calendar(clean)
    else:
        clean = strip_provider_suffix(clean, PROVIDER_LABELS[source])
    return parse_structured_address(clean)


def extract_address_components(
    address: str | None, source: EventSource | str = EventSource.MANUAL
) -> AddressParseResult:
    return normalize_address(address, source)


def parse_structured_address(address: str) -> AddressParseResult:
    warnings: list[str] = []
    if not address or not address.strip():
        return AddressParseResult(is_valid=True)
    address = address.strip()

    parsed: NormalizedAddress | None = None
    for pattern, build in ADDRESS_PATTERNS:
        match = pattern.match(address)
        if match:
            parsed = build(match)
            break

    if parsed is None:
        if is_likely_city_name(address):
            parsed = NormalizedAddress(city=address)
        else:
            parsed = NormalizedAddress(street=address)
            warnings.append("Address format not recognized - treating as street address")

    if parsed.street:
        parsed.street = clean_street_address(parsed.street)
    if parsed.city:
        parsed.city = clean_city_name(parsed.city)
    if parsed.state:
        parsed.state = clean_state_name(parsed.state)
    if parsed.country:
        parsed.country = clean_country_name(parsed.country)
    if parsed.postal_code:
        parsed.postal_code = parsed.postal_code.strip().upper()

    parsed.full_address = format_address_for_display(parsed)

    if not parsed.street and not parsed.city:
        warnings.append("Address missing both street and city information")
    if parsed.state and not is_valid_state(parsed.state, parsed.country):
        warnings.append(f'State "{parsed.state}" may not be valid')
    if parsed.postal_code and not is_valid_postal_code(parsed.postal_code):
        warnings.append(f'Postal code "{parsed.postal_code}" format may be invalid')

    return AddressParseResult(is_valid=True, normalized_address=parsed, warnings=warnings)


def clean_street_address(street: str) -> str:
    return collapse_whitespace(_TRAILING_PUNCTUATION.sub("", street.strip()))


def clean_city_name(city: str) -> str:
    city = collapse_whitespace(_TRAILING_PUNCTUATION.sub("", city.strip()))
    return " ".join(word[:1].upper() + word[1:].lower() for word in city.split(" "))


def clean_state_name(state: str) -> str:
    cleaned = state.strip().upper()
    return US_STATES.get(cleaned, cleaned)


def clean_country_name(country: str) -> str:
    cleaned = country.strip()
    return COUNTRY_ALIASES.get(cleaned.upper(), cleaned)


def is_likely_city_name(text: str) -> bool:
    lower = text.lower()
    if any(indicator in lower for indicator in _CITY_INDICATORS):
        return True
    # A leading house number means a street, however long.
    return len(text) > 3 and not text[:1].isdigit()


def is_valid_state(state: str, country: str | None = None) -> bool:
    state = state.upper()
    if country == "Canada":
        return state in CANADIAN_PROVINCES
    return state in US_STATE_CODES


def is_valid_postal_code(postal_code: str) -> bool:
    return bool(
        _US_ZIP.match(postal_code)
        or _CA_POSTAL.match(postal_code)
        or _UK_POSTAL.match(postal_code)
    )


def format_address_for_display(address: NormalizedAddress | None) -> str:
    """Join present components: street, city, "state postal", country."""
    if address is None:
        return ""
    if address.state and address.postal_code:
        region = f"{address.state} {address.postal_code}"
    else:
        region = address.state or address.postal_code
    parts = [address.street, address.city, region, address.country]
    return ", ".join(p for p in parts if p and p.strip())


@dataclass
class AddressCompleteness:
    is_valid: bool
    completeness: int
    missing_components: list[str]
    warnings: list[str]


_COMPONENT_WEIGHTS = {
    "street": 20,
    "city": 25,
    "state": 15,
    "country": 20,
    "postal_code": 20,
}


def validate_address_completeness(address: NormalizedAddress) -> AddressCompleteness:
    """Score how complete *address* is on a 0-100 scale."""
    score = 0
    missing: list[str] = []
    warnings: list[str] = []
    for component, weight in _COMPONENT_WEIGHTS.items():
        value = getattr(address, component)
        if value and value.strip():
            score += weight
        else:
            missing.append(component)

    if address.postal_code and not is_valid_postal_code(address.postal_code):
        warnings.append("Postal code format may be invalid")
    if "city" in missing:
        warnings.append("City is missing - this may affect location accuracy")
    if "country" in missing:
        warnings.append("Country is missing - this may affect location accuracy")

    return AddressCompleteness(
        is_valid=score >= 40,
        completeness=score,
        missing_components=missing,
        warnings=warnings,
    )


@dataclass
class AddressComparison:
    similarity: float
    matching_components: list[str]
    differences: list[tuple[str, str | None, str | None]]


def compare_addresses(first: NormalizedAddress, second: NormalizedAddress) -> AddressComparison:
    """Component-wise, case-insensitive comparison of two addresses."""
    matching: list[str] = []
    differences: list[tuple[str, str | None, str | None]] = []
    for component in _COMPONENT_WEIGHTS:
        a = getattr(first, component)
        b = getattr(second, component)
        a_key = a.strip().lower() if a else ""
        b_key = b.strip().lower() if b else ""
        if a_key and a_key == b_key:
            matching.append(component)
        elif a_key or b_key:
            differences.append((component, a, b))
    return AddressComparison(
        similarity=len(matching) / len(_COMPONENT_WEIGHTS) * 100,
        matching_components=matching,
        differences=differences,
    )
