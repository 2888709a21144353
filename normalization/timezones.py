"""Timezone alias resolution and offset helpers built on :mod:`zoneinfo`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

TIMEZONE_ALIASES: dict[str, str] = {
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "CST": "America/Chicago",
    "CDT": "America/Chicago",
    "MST": "America/Denver",
    "MDT": "America/Denver",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
    "GMT": "UTC",
    "Z": "UTC",
    "+00:00": "UTC",
    "-00:00": "UTC",
}

# Standard-time offsets in minutes east of UTC, as observed in January.
STATIC_OFFSETS: dict[str, int] = {
    "UTC": 0,
    "America/New_York": -300,
    "America/Chicago": -360,
    "America/Denver": -420,
    "America/Los_Angeles": -480,
    "Europe/London": 0,
    "Europe/Paris": 60,
    "Europe/Berlin": 60,
    "Asia/Tokyo": 540,
    "Asia/Shanghai": 480,
    "Australia/Sydney": 660,
    "Pacific/Auckland": 780,
}

# Reference instant for computed offsets; matches the static table's season.
_REFERENCE_INSTANT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class TimezoneValidationResult:
    is_valid: bool
    error: str | None = None
    normalized_timezone: str | None = None


@dataclass
class TimezoneInfo:
    name: str
    offset: str
    is_dst: bool
    abbreviation: str


def normalize_timezone(name: str) -> str:
    """Map common abbreviations and offsets onto IANA identifiers."""
    return TIMEZONE_ALIASES.get(name, name)


def get_zone(name: str) -> ZoneInfo | None:
    """Return the zone for *name* after alias resolution, or ``None``."""
    try:
        return ZoneInfo(normalize_timezone(name.strip()))
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # Region names such as "America" resolve to tzdata directories.
        return None


def validate_timezone(name: str | None) -> TimezoneValidationResult:
    if not name or not isinstance(name, str):
        return TimezoneValidationResult(False, "Timezone is required")

    clean = name.strip()
    if not clean:
        return TimezoneValidationResult(False, "Timezone cannot be empty")

    normalized = normalize_timezone(clean)
    zone = get_zone(normalized)
    if zone is None:
        return TimezoneValidationResult(False, "Invalid timezone identifier")

    # The zone must resolve a concrete instant.
    try:
        _REFERENCE_INSTANT.astimezone(zone)
    except (OverflowError, ValueError):
        return TimezoneValidationResult(False, "Invalid timezone identifier")

    return TimezoneValidationResult(True, normalized_timezone=normalized)


def get_timezone_offset(name: str) -> int:
    """Offset in minutes east of UTC; static table first, then computed."""
    if name in STATIC_OFFSETS:
        return STATIC_OFFSETS[name]
    zone = get_zone(name)
    if zone is None:
        return 0
    offset = _REFERENCE_INSTANT.astimezone(zone).utcoffset() or timedelta(0)
    return int(offset.total_seconds() // 60)


def _format_offset(minutes: int) -> str:
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def get_timezone_offset_string(name: str, at: datetime | None = None) -> str:
    """Current offset of *name* as ``+HH:MM``; UTC when the zone is unknown."""
    zone = get_zone(name)
    if zone is None:
        return "+00:00"
    moment = at or datetime.now(timezone.utc)
    offset = moment.astimezone(zone).utcoffset() or timedelta(0)
    return _format_offset(round(offset.total_seconds() / 60))


def convert_utc_to_timezone(utc_date: datetime, name: str) -> datetime | None:
    """Return *utc_date* as wall-clock time in *name* (naive), or ``None``."""
    if not validate_timezone(name).is_valid:
        return None
    if utc_date.tzinfo is None:
        utc_date = utc_date.replace(tzinfo=timezone.utc)
    return utc_date.astimezone(get_zone(name)).replace(tzinfo=None)


def convert_timezone_to_utc(local_date: datetime, name: str) -> datetime | None:
    """Interpret naive *local_date* as wall-clock time in *name* and return UTC."""
    if not validate_timezone(name).is_valid:
        return None
    zone = get_zone(name)
    if local_date.tzinfo is None:
        local_date = local_date.replace(tzinfo=zone)
    return local_date.astimezone(timezone.utc)


def get_available_timezones() -> list[str]:
    zones = set(available_timezones())
    zones.add("UTC")
    return sorted(zones)


def is_daylight_saving_time(name: str, at: datetime | None = None) -> bool | None:
    """Whether *name* observes DST at *at*; ``None`` for unknown zones."""
    zone = get_zone(name)
    if zone is None:
        return None
    moment = (at or datetime.now(timezone.utc)).astimezone(zone)
    return bool(moment.dst())


def get_timezone_info(name: str, at: datetime | None = None) -> TimezoneInfo | None:
    validation = validate_timezone(name)
    if not validation.is_valid:
        return None
    zone = get_zone(name)
    moment = (at or datetime.now(timezone.utc)).astimezone(zone)
    return TimezoneInfo(
        name=validation.normalized_timezone,
        offset=get_timezone_offset_string(name, moment),
        is_dst=bool(moment.dst()),
        abbreviation=moment.tzname() or "",
    )


def format_datetime_with_timezone(value: datetime, name: str = "UTC") -> str:
    """Human-readable rendering, e.g. ``Jan 5, 2025, 08:00 PM EST``."""
    zone = get_zone(name) or ZoneInfo("UTC")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(zone)
    return f"{local:%b} {local.day}, {local:%Y, %I:%M %p} {local.tzname()}"
