"""Venue-name cleanup and capitalization."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from fetchers.models import EventSource
from normalization.addresses import PROVIDER_LABELS, strip_provider_suffix
from normalization.text import CONTROL_CHARS, collapse_whitespace

VENUE_INDICATORS = (
    "theater", "theatre", "center", "centre", "arena", "stadium", "hall",
    "auditorium", "pavilion", "club", "bar", "restaurant", "cafe", "coffee",
    "gallery", "museum", "library", "church", "temple", "mosque", "synagogue",
    "park", "garden", "plaza", "square", "mall", "shopping", "convention",
    "conference", "hotel", "resort", "casino", "racetrack", "field", "grounds",
)

MINOR_WORDS = frozenset(
    {"a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)

SPECIAL_WORDS: dict[str, str] = {
    "msg": "MSG",
    "at&t": "AT&T",
    "nba": "NBA",
    "nfl": "NFL",
    "mlb": "MLB",
    "nhl": "NHL",
    "ncaa": "NCAA",
    "vip": "VIP",
    "usa": "USA",
    "us": "US",
    "uk": "UK",
    "nyc": "NYC",
    "la": "LA",
    "sf": "SF",
    "dc": "DC",
}

SUSPICIOUS_VENUE_PATTERNS = [
    re.compile(p, re.I)
    for p in (
        r"test", r"example", r"sample", r"placeholder", r"temp", r"fake",
        r"dummy", r"spam", r"scam", r"malware", r"virus", r"phishing",
        r"javascript:", r"<script", r"onclick", r"onload", r"onerror",
    )
]

_CALENDAR_ADDRESS_TAILS = [
    re.compile(r",\s*\d{5}(-\d{4})?(\s*[A-Z]{2})?"),
    re.compile(r",\s*[A-Z]{2}\s*\d{5}"),
    re.compile(r",\s*[A-Z]{2}$"),
    re.compile(r",\s*USA$", re.I),
    re.compile(r",\s*United States$", re.I),
    re.compile(r",\s*US$", re.I),
]
_PUNCTUATION = re.compile(r"[.,!?;:]")
_TRAILING_PUNCTUATION = re.compile(r"[.,!?;:]+$")


def is_likely_venue_name(text: str) -> bool:
    lower = text.lower()
    return any(indicator in lower for indicator in VENUE_INDICATORS) or len(text) > 5


def _capitalize_word(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _capitalize_token(word: str, index: int) -> str:
    lower = word.lower()
    if lower in MINOR_WORDS and index > 0:
        return lower
    if lower in SPECIAL_WORDS:
        return SPECIAL_WORDS[lower]
    if "(" in word and ")" in word and word.index("(") < word.index(")"):
        open_at, close_at = word.index("("), word.index(")")
        return (
            capitalize_venue_name(word[:open_at])
            + "("
            + capitalize_venue_name(word[open_at + 1 : close_at])
            + ")"
            + capitalize_venue_name(word[close_at + 1 :])
        )
    if "-" in word:
        return "-".join(_capitalize_token(part, 0) for part in word.split("-"))
    if "'" in word:
        head, *rest = word.split("'")
        # Possessive "s" stays lowercase: "Joe's", not "Joe'S".
        tail = [part.lower() if part.lower() == "s" else _capitalize_word(part) for part in rest]
        return "'".join([_capitalize_token(head, 0), *tail])
    return _capitalize_word(word)


def capitalize_venue_name(name: str) -> str:
    """Title-case *name*, keeping minor words lowercase and acronyms upper."""
    if not name:
        return name
    words = name.split(" ")
    return " ".join(_capitalize_token(word, i) if word else word for i, word in enumerate(words))


def _format_google_calendar(name: str) -> str:
    for pattern in _CALENDAR_ADDRESS_TAILS:
        name = pattern.sub("", name)
    name = name.strip()
    if "," in name:
        first = name.split(",")[0].strip()
        if is_likely_venue_name(first):
            name = first
    return name


def format_venue_name(
    name: str | None, source: EventSource | str = EventSource.MANUAL
) -> str | None:
    """Clean and capitalize a venue name for display; ``None`` when blank."""
    if not name or not isinstance(name, str):
        return None
    formatted = collapse_whitespace(CONTROL_CHARS.sub("", name))
    if not formatted:
        return None

    try:
        source = EventSource(source)
    except ValueError:
        return capitalize_venue_name(formatted)

    if source is EventSource.GOOGLECAL:
        formatted = _format_google_calendar(formatted)
    else:
        formatted = strip_provider_suffix(formatted, PROVIDER_LABELS[source])
    return capitalize_venue_name(formatted)


@dataclass
class VenueValidationResult:
    is_valid: bool
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    normalized_name: str | None = None


def validate_venue_name(name: str | None) -> VenueValidationResult:
    if not name or not isinstance(name, str):
        return VenueValidationResult(is_valid=True)

    clean = name.strip()
    if len(clean) > 255:
        return VenueValidationResult(False, "Venue name too long (max 255 characters)")
    if len(clean) < 2:
        return VenueValidationResult(False, "Venue name too short (min 2 characters)")

    warnings: list[str] = []
    if any(p.search(clean) for p in SUSPICIOUS_VENUE_PATTERNS):
        warnings.append("Venue name contains suspicious patterns")
    if clean == clean.upper() and clean != clean.lower():
        warnings.append("Venue name is all uppercase - consider proper capitalization")
    if clean == clean.lower() and clean != clean.upper():
        warnings.append("Venue name is all lowercase - consider proper capitalization")
    if len(_PUNCTUATION.findall(clean)) > 3:
        warnings.append("Venue name has excessive punctuation")
    if clean[0].isdigit():
        warnings.append("Venue name starts with a number - might be an address")

    normalized = _TRAILING_PUNCTUATION.sub("", collapse_whitespace(clean)).strip()
    return VenueValidationResult(True, warnings=warnings, normalized_name=normalized)


def extract_venue_name_from_address(address: str | None) -> str | None:
    """Pick the first venue-looking segment of a comma/semicolon separated address."""
    if not address or not isinstance(address, str):
        return None
    parts = [part.strip() for part in re.split(r"[,;]", address)]
    for part in parts:
        if len(part) > 3 and is_likely_venue_name(part):
            return capitalize_venue_name(part)
    return capitalize_venue_name(parts[0]) if parts[0] else None


@dataclass
class VenueNormalization:
    normalized_name: str | None
    warnings: list[str] = field(default_factory=list)


def normalize_venue_name(
    name: str | None, source: EventSource | str = EventSource.MANUAL
) -> VenueNormalization:
    """Format then validate; validation failures become warnings."""
    formatted = format_venue_name(name, source)
    if not formatted:
        return VenueNormalization(None)

    validation = validate_venue_name(formatted)
    if not validation.is_valid:
        return VenueNormalization(
            None, [f"Venue name validation failed: {validation.error}"]
        )
    return VenueNormalization(
        validation.normalized_name or formatted, list(validation.warnings)
    )
