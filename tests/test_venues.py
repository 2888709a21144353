"""Tests for venue-name formatting."""

import pytest

from fetchers.models import EventSource
from normalization.venues import (
    capitalize_venue_name,
    extract_venue_name_from_address,
    format_venue_name,
    normalize_venue_name,
    validate_venue_name,
)


class TestFormatVenueName:
    def test_title_cases_words(self):
        assert format_venue_name("madison square garden", "manual") == "Madison Square Garden"

    def test_acronyms(self):
        assert "MSG" in format_venue_name("msg arena", "manual")
        assert format_venue_name("at&t stadium", "ticketmaster") == "AT&T Stadium"

    def test_minor_words_lowercase_except_first(self):
        assert format_venue_name("THE HALL OF FAME", "manual") == "The Hall of Fame"

    def test_hyphen_and_apostrophe(self):
        assert capitalize_venue_name("wilkes-barre arena") == "Wilkes-Barre Arena"
        assert capitalize_venue_name("joe's pub") == "Joe's Pub"
        assert capitalize_venue_name("o'neill center") == "O'Neill Center"

    def test_parentheses(self):
        assert capitalize_venue_name("webster hall (nyc)") == "Webster Hall (NYC)"

    @pytest.mark.parametrize("value", [None, "", "  \t "])
    def test_blank(self, value):
        assert format_venue_name(value, "manual") is None

    @pytest.mark.parametrize(
        ("raw", "source"),
        [
            ("Blue Note - Eventbrite", EventSource.EVENTBRITE),
            ("Blue Note @ Ticketmaster", EventSource.TICKETMASTER),
            ("Blue Note (SeatGeek)", EventSource.SEATGEEK),
            ("Blue Note - Manual", EventSource.MANUAL),
        ],
    )
    def test_provider_suffix_stripped(self, raw, source):
        assert format_venue_name(raw, source) == "Blue Note"

    def test_google_calendar_address_reduced_to_venue(self):
        formatted = format_venue_name(
            "Brooklyn Bowl, 61 Wythe Ave, Brooklyn, NY 11249, USA", EventSource.GOOGLECAL
        )
        assert formatted == "Brooklyn Bowl"

    def test_unknown_source_still_capitalizes(self):
        assert format_venue_name("the bitter end", "other") == "The Bitter End"


class TestValidateVenueName:
    def test_clean_name(self):
        result = validate_venue_name("Blue Note")
        assert result.is_valid
        assert result.warnings == []
        assert result.normalized_name == "Blue Note"

    def test_too_short(self):
        assert validate_venue_name("X").error == "Venue name too short (min 2 characters)"

    def test_too_long(self):
        assert not validate_venue_name("A" * 256).is_valid

    def test_warnings(self):
        result = validate_venue_name("123 TEST VENUE!!!!")
        assert result.is_valid
        assert "Venue name contains suspicious patterns" in result.warnings
        assert "Venue name is all uppercase - consider proper capitalization" in result.warnings
        assert "Venue name has excessive punctuation" in result.warnings
        assert "Venue name starts with a number - might be an address" in result.warnings
        assert result.normalized_name == "123 TEST VENUE"

    def test_blank_is_valid(self):
        assert validate_venue_name("").is_valid


class TestVenueHelpers:
    def test_extract_from_address(self):
        assert extract_venue_name_from_address("the fillmore; 1805 geary blvd, san francisco") == (
            "The Fillmore"
        )
        assert extract_venue_name_from_address("") is None

    def test_normalize(self):
        result = normalize_venue_name("  radio city music hall  ", "ticketmaster")
        assert result.normalized_name == "Radio City Music Hall"
        assert result.warnings == []

    def test_normalize_rejects_short_name(self):
        result = normalize_venue_name("x", "manual")
        assert result.normalized_name is None
        assert result.warnings == ["Venue name validation failed: Venue name too short (min 2 characters)"]
