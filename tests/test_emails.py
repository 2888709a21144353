"""Tests for email and phone validation."""

import pytest

from validation.emails import (
    is_disposable_email,
    is_trusted_email_domain,
    sanitize_email_for_display,
    validate_and_sanitize_email,
    validate_email,
    validate_emails,
    validate_phone_number,
)


class TestValidateEmail:
    def test_normalizes_case_and_whitespace(self):
        result = validate_email("  Jane.Doe@Example.COM ")
        assert result.is_valid
        assert result.normalized_email == "jane.doe@example.com"

    def test_strips_control_characters(self):
        result = validate_email("jane\x00@example.com")
        assert result.normalized_email == "jane@example.com"

    @pytest.mark.parametrize("email", ["", None])
    def test_required(self, email):
        result = validate_email(email)
        assert not result.is_valid
        assert result.error == "Email is required"

    @pytest.mark.parametrize(
        "email", ["plainaddress", "@example.com", "jane@", "jane@@example.com", "jane doe@example.com"]
    )
    def test_rejects_bad_format(self, email):
        result = validate_email(email)
        assert not result.is_valid
        assert result.error == "Invalid email format"

    def test_rejects_too_long(self):
        result = validate_email("a" * 250 + "@example.com")
        assert result.error == "Email too long (max 254 characters)"

    @pytest.mark.parametrize(
        "email",
        [
            "test@test.com",
            "admin@admin.org",
            "noreply@venue.com",
            "no-reply@venue.com",
            "donotreply@venue.com",
            "someone@mailinator.com",
            "someone@guerrillamail.com",
        ],
    )
    def test_rejects_suspicious(self, email):
        result = validate_email(email)
        assert not result.is_valid
        assert result.error == "Email contains suspicious patterns"

    def test_rejects_short_tld(self):
        result = validate_email("jane@example.c")
        assert result.error == "Invalid top-level domain"

    def test_rejects_short_domain(self):
        result = validate_email("jane@ab")
        assert result.error == "Domain too short"

    def test_rejects_disposable(self):
        result = validate_email("someone@yopmail.com")
        assert not result.is_valid
        assert result.error == "Disposable email addresses are not allowed"

    def test_disposable_allowed_when_enabled(self):
        assert validate_email("someone@yopmail.com", allow_disposable=True).is_valid


class TestValidateAndSanitizeEmail:
    def test_trusted_domain(self):
        result = validate_and_sanitize_email("Organizer@Gmail.com")
        assert result.is_valid
        assert result.normalized_email == "organizer@gmail.com"
        assert result.warnings == []

    def test_untrusted_domain_warns(self):
        result = validate_and_sanitize_email("hello@bluenote.net")
        assert result.is_valid
        assert result.warnings == ["Email is from an untrusted domain"]

    def test_require_trusted_domain(self):
        result = validate_and_sanitize_email("hello@bluenote.net", require_trusted_domain=True)
        assert not result.is_valid
        assert result.error == "Email must be from a trusted domain"

    def test_rejects_disposable(self):
        result = validate_and_sanitize_email("someone@yopmail.com")
        assert not result.is_valid
        assert result.error == "Disposable email addresses are not allowed"

    def test_disposable_allowed_when_enabled(self):
        result = validate_and_sanitize_email("someone@yopmail.com", allow_disposable=True)
        assert result.is_valid

    def test_max_length(self):
        result = validate_and_sanitize_email("organizer@gmail.com", max_length=10)
        assert result.error == "Email too long (max 10 characters)"


class TestEmailHelpers:
    def test_validate_emails_splits_results(self):
        result = validate_emails(["A@gmail.com", "broken", "b@outlook.com"])
        assert result.valid == ["A@gmail.com", "b@outlook.com"]
        assert result.normalized == ["a@gmail.com", "b@outlook.com"]
        assert result.invalid == [("broken", "Invalid email format")]

    def test_trusted_subdomain(self):
        assert is_trusted_email_domain("ops@mail.eventbrite.com")
        assert not is_trusted_email_domain("ops@eventbrite.com.evil.io")
        assert is_trusted_email_domain("ops@bluenote.net", ["bluenote.net"])

    def test_is_disposable(self):
        assert is_disposable_email("x@maildrop.cc")
        assert not is_disposable_email("x@gmail.com")
        assert not is_disposable_email("not-an-email")

    @pytest.mark.parametrize(
        ("email", "expected"),
        [
            ("johndoe@example.com", "jo****e@example.com"),
            ("ab@example.com", "a*@example.com"),
            ("abc@example.com", "abc@example.com"),
            ("broken", "broken"),
        ],
    )
    def test_sanitize_for_display(self, email, expected):
        assert sanitize_email_for_display(email) == expected


class TestValidatePhoneNumber:
    def test_strips_formatting(self):
        result = validate_phone_number("+1 (212) 555-0123")
        assert result.is_valid
        assert result.normalized_phone == "12125550123"

    def test_too_short(self):
        assert validate_phone_number("555-0123").error == "Phone number too short"

    def test_too_long(self):
        assert validate_phone_number("1" * 16).error == "Phone number too long"

    def test_required(self):
        assert validate_phone_number("").error == "Phone number is required"
