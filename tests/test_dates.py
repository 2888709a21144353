"""Tests for date parsing, bounds and duration checks."""

from datetime import datetime, timedelta, timezone

import pytest

from validation.dates import (
    is_iso_datetime,
    parse_datetime,
    validate_date_string,
    validate_datetime_with_timezone,
    validate_event_duration,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestParseDatetime:
    def test_z_suffix(self):
        assert parse_datetime("2025-06-10T19:30:00Z") == datetime(
            2025, 6, 10, 19, 30, tzinfo=timezone.utc
        )

    def test_offset_converted_to_utc(self):
        assert parse_datetime("2025-06-10T19:30:00-04:00") == datetime(
            2025, 6, 10, 23, 30, tzinfo=timezone.utc
        )

    def test_naive_is_utc(self):
        assert parse_datetime("2025-06-10T19:30:00").tzinfo == timezone.utc

    def test_date_only(self):
        assert parse_datetime("2025-06-10") == datetime(2025, 6, 10, tzinfo=timezone.utc)

    def test_nanosecond_fraction(self):
        parsed = parse_datetime("2025-06-10T19:30:00.123456789Z")
        assert parsed.microsecond == 123456

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-date",
            "",
            None,
            "2025-13-40T00:00:00Z",
            "0001-01-01T00:00:00+01:00",
            "9999-12-31T23:00:00-05:00",
        ],
    )
    def test_unparseable(self, value):
        assert parse_datetime(value) is None


class TestIsIsoDatetime:
    @pytest.mark.parametrize(
        "value",
        ["2025-06-10T19:30:00Z", "2025-06-10T19:30:00.000Z", "2025-06-10T19:30+02:00"],
    )
    def test_accepts(self, value):
        assert is_iso_datetime(value)

    @pytest.mark.parametrize(
        "value",
        [
            "2025-06-10",
            "2025-06-10T19:30:00",
            "June 10 2025",
            "2025-02-30T10:00:00Z",
            "0001-01-01T00:00:00+01:00",
        ],
    )
    def test_rejects(self, value):
        assert not is_iso_datetime(value)


class TestValidateDateString:
    def test_valid(self):
        result = validate_date_string("2025-07-01T00:00:00Z", now=NOW)
        assert result.is_valid
        assert result.date == datetime(2025, 7, 1, tzinfo=timezone.utc)

    def test_required(self):
        assert validate_date_string("", now=NOW).error == "Date string is required"

    def test_invalid_format(self):
        assert validate_date_string("not-a-date", now=NOW).error == "Invalid date format"

    def test_too_far_past(self):
        result = validate_date_string("2023-01-01T00:00:00Z", now=NOW)
        assert result.error == "Date is too far in the past"

    def test_too_far_future(self):
        result = validate_date_string("2027-07-01T00:00:00Z", now=NOW)
        assert result.error == "Date is too far in the future"

    def test_bounds_can_be_disabled(self):
        assert validate_date_string("2030-01-01T00:00:00Z", now=NOW, check_bounds=False).is_valid

    def test_leap_day_now(self):
        leap = datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert validate_date_string("2025-01-01T00:00:00Z", now=leap).is_valid


class TestValidateDatetimeWithTimezone:
    def test_offset_string_ignores_zone(self):
        result = validate_datetime_with_timezone(
            "2025-06-10T19:30:00Z", "America/New_York", now=NOW
        )
        assert result.is_valid
        assert result.timezone == "UTC"
        assert result.utc_date == datetime(2025, 6, 10, 19, 30, tzinfo=timezone.utc)

    def test_naive_string_read_in_zone(self):
        result = validate_datetime_with_timezone("2025-06-10T19:30:00", "EDT", now=NOW)
        assert result.is_valid
        assert result.timezone == "America/New_York"
        assert result.utc_date == datetime(2025, 6, 10, 23, 30, tzinfo=timezone.utc)

    def test_naive_without_zone_is_utc(self):
        result = validate_datetime_with_timezone("2025-06-10T19:30:00", now=NOW)
        assert result.timezone == "UTC"
        assert result.utc_date.hour == 19

    def test_invalid_zone(self):
        result = validate_datetime_with_timezone("2025-06-10T19:30:00Z", "Bad/Zone", now=NOW)
        assert not result.is_valid
        assert result.error == "Invalid timezone identifier"

    def test_naive_out_of_range_in_zone(self):
        result = validate_datetime_with_timezone(
            "0001-01-01T00:00:00", "Asia/Tokyo", check_bounds=False
        )
        assert not result.is_valid
        assert result.error == "Invalid date format"


class TestValidateEventDuration:
    def test_no_end_is_valid(self):
        assert validate_event_duration("2025-06-10T19:00:00Z", None, now=NOW).is_valid

    def test_duration_minutes(self):
        result = validate_event_duration("2025-06-10T19:00:00Z", "2025-06-10T21:30:00Z", now=NOW)
        assert result.duration_minutes == 150

    def test_end_before_start(self):
        result = validate_event_duration("2025-06-10T19:00:00Z", "2025-06-10T18:00:00Z", now=NOW)
        assert result.error == "End date must be after start date"

    def test_too_long(self):
        start = datetime(2025, 6, 10, tzinfo=timezone.utc)
        end = start + timedelta(days=7, minutes=1)
        result = validate_event_duration(
            start.isoformat(), end.isoformat(), now=NOW
        )
        assert not result.is_valid
        assert "max 168 hours" in result.error

    def test_exactly_seven_days(self):
        assert validate_event_duration(
            "2025-06-10T00:00:00Z", "2025-06-17T00:00:00Z", now=NOW
        ).is_valid

    def test_too_short(self):
        result = validate_event_duration("2025-06-10T19:00:00Z", "2025-06-10T19:00:30Z", now=NOW)
        assert result.error == "Event duration too short: must be at least 1 minute"

    def test_invalid_start(self):
        result = validate_event_duration("nope", "2025-06-10T19:00:30Z", now=NOW)
        assert result.error == "Invalid start date: Invalid date format"
