"""Date-string parsing, bounds and duration checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from normalization.timezones import get_zone, validate_timezone

# Full date-time with an explicit UTC designator or numeric offset.
ISO_DATETIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d{1,9})?)?(?:Z|[+-]\d{2}:\d{2})$"
)
_OFFSET_SUFFIX = re.compile(r"(?:Z|[+-]\d{2}:?\d{2})$", re.I)
_FRACTION = re.compile(r"\.(\d{6})\d+")

MAX_EVENT_DURATION = timedelta(days=7)
MIN_EVENT_DURATION = timedelta(minutes=1)
DATE_BOUND_YEARS = 2


def _parse(value: str) -> datetime | None:
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    # fromisoformat only takes microseconds.
    text = _FRACTION.sub(r".\1", text)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string to an aware UTC datetime; naive input is UTC."""
    if not value or not isinstance(value, str):
        return None
    parsed = _parse(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Offsets that push year 1 or year 9999 out of range.
        return None


def is_iso_datetime(value: str) -> bool:
    """Strict form used by the event schema: time component and offset required."""
    return bool(ISO_DATETIME.match(value)) and parse_datetime(value) is not None


def _shift_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # Feb 29 on a non-leap target year.
        return moment.replace(year=moment.year + years, day=28)


@dataclass
class DateValidationResult:
    is_valid: bool
    error: str | None = None
    date: datetime | None = None


def validate_date_string(
    value: str | None,
    now: datetime | None = None,
    check_bounds: bool = True,
) -> DateValidationResult:
    if not value or not isinstance(value, str):
        return DateValidationResult(False, "Date string is required")
    parsed = parse_datetime(value)
    if parsed is None:
        return DateValidationResult(False, "Invalid date format")

    if check_bounds:
        now = now or datetime.now(timezone.utc)
        if parsed < _shift_years(now, -DATE_BOUND_YEARS):
            return DateValidationResult(False, "Date is too far in the past")
        if parsed > _shift_years(now, DATE_BOUND_YEARS):
            return DateValidationResult(False, "Date is too far in the future")
    return DateValidationResult(True, date=parsed)


@dataclass
class ZonedDateResult:
    is_valid: bool
    error: str | None = None
    utc_date: datetime | None = None
    local_date: datetime | None = None
    timezone: str | None = None


def validate_datetime_with_timezone(
    value: str | None,
    timezone_name: str | None = None,
    now: datetime | None = None,
    check_bounds: bool = True,
) -> ZonedDateResult:
    """Resolve *value* to UTC.

    Strings carrying an offset are taken as-is. Naive strings are read as
    wall-clock time in *timezone_name* when one is given, otherwise as UTC.
    """
    validation = validate_date_string(value, now=now, check_bounds=check_bounds)
    if not validation.is_valid:
        return ZonedDateResult(False, validation.error)

    zone_name = "UTC"
    if timezone_name:
        tz_validation = validate_timezone(timezone_name)
        if not tz_validation.is_valid:
            return ZonedDateResult(False, tz_validation.error)
        zone_name = tz_validation.normalized_timezone

    if _OFFSET_SUFFIX.search(value.strip()):
        return ZonedDateResult(
            True, utc_date=validation.date, local_date=validation.date, timezone="UTC"
        )

    if zone_name != "UTC":
        naive = _parse(value).replace(tzinfo=None)
        local = naive.replace(tzinfo=get_zone(zone_name))
        try:
            utc_date = local.astimezone(timezone.utc)
        except OverflowError:
            return ZonedDateResult(False, "Invalid date format")
        return ZonedDateResult(
            True,
            utc_date=utc_date,
            local_date=local,
            timezone=zone_name,
        )

    return ZonedDateResult(
        True, utc_date=validation.date, local_date=validation.date, timezone="UTC"
    )


@dataclass
class DurationResult:
    is_valid: bool
    error: str | None = None
    duration_minutes: int | None = None


def validate_event_duration(
    start_utc: str | None,
    end_utc: str | None = None,
    now: datetime | None = None,
    check_bounds: bool = True,
) -> DurationResult:
    """Require end after start, at least one minute and at most seven days."""
    start = validate_date_string(start_utc, now=now, check_bounds=check_bounds)
    if not start.is_valid:
        return DurationResult(False, f"Invalid start date: {start.error}")
    if not end_utc:
        return DurationResult(True)

    end = validate_date_string(end_utc, now=now, check_bounds=check_bounds)
    if not end.is_valid:
        return DurationResult(False, f"Invalid end date: {end.error}")

    if end.date <= start.date:
        return DurationResult(False, "End date must be after start date")
    duration = end.date - start.date
    minutes = int(duration.total_seconds() // 60)
    if duration > MAX_EVENT_DURATION:
        return DurationResult(
            False, f"Event duration too long: {minutes // 60} hours (max 168 hours)"
        )
    if duration < MIN_EVENT_DURATION:
        return DurationResult(False, "Event duration too short: must be at least 1 minute")
    return DurationResult(True, duration_minutes=minutes)
