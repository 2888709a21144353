"""Email and phone-number checks for organizer and contact fields."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from normalization.text import CONTROL_CHARS

_LABEL = r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?"
_EMAIL = re.compile(rf"^[a-z0-9.!#$%&'*+/=?^_`{{|}}~-]+@{_LABEL}(?:\.{_LABEL})*$", re.I)
_DOMAIN = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*$", re.I)

SUSPICIOUS_EMAIL_PATTERNS = [
    re.compile(p, re.I)
    for p in (
        r"test@test", r"example@example", r"admin@admin", r"root@root",
        r"user@user", r"spam@spam", r"fake@fake", r"temp@temp",
        r"temporary@temporary", r"throwaway@throwaway", r"disposable@disposable",
        r"^noreply@", r"^no-reply@", r"^donotreply@",
        r"10minutemail", r"guerrillamail", r"mailinator", r"tempmail", r"trashmail",
    )
]

DEFAULT_TRUSTED_EMAIL_DOMAINS = (
    "gmail.com", "yahoo.com", "outlook.com", "hotmail.com", "icloud.com",
    "aol.com", "protonmail.com", "google.com", "microsoft.com", "apple.com",
    "eventbrite.com", "ticketmaster.com", "seatgeek.com", "meetup.com",
    "facebook.com",
)

DISPOSABLE_EMAIL_DOMAINS = (
    "10minutemail.com", "guerrillamail.com", "mailinator.com", "tempmail.org",
    "trashmail.com", "throwaway.email", "temp-mail.org", "getnada.com",
    "maildrop.cc", "yopmail.com",
)


@dataclass
class EmailValidationResult:
    is_valid: bool
    error: str | None = None
    normalized_email: str | None = None
    warnings: list[str] = field(default_factory=list)


def _domain_of(email: str) -> str:
    return email.rpartition("@")[2] if "@" in email else ""


def _matches_domain(domain: str, candidates: Iterable[str]) -> bool:
    return any(domain == d or domain.endswith(f".{d}") for d in candidates)


def is_suspicious_email(email: str) -> bool:
    return any(p.search(email) for p in SUSPICIOUS_EMAIL_PATTERNS)


def _validate_domain(domain: str) -> str | None:
    if not domain:
        return "Invalid email domain"
    if not _DOMAIN.match(domain):
        return "Invalid domain format"
    if len(domain) < 3:
        return "Domain too short"
    if len(domain) > 253:
        return "Domain too long"
    if len(domain.rsplit(".", 1)[-1]) < 2:
        return "Invalid top-level domain"
    return None


def validate_email(email: str | None, allow_disposable: bool = False) -> EmailValidationResult:
    """Trim, lowercase and validate *email*; noreply and disposable addresses fail."""
    if not email or not isinstance(email, str):
        return EmailValidationResult(False, "Email is required")

    clean = CONTROL_CHARS.sub("", email.strip().lower())
    if not _EMAIL.match(clean):
        return EmailValidationResult(False, "Invalid email format")
    if len(clean) > 254:
        return EmailValidationResult(False, "Email too long (max 254 characters)")
    if is_suspicious_email(clean):
        return EmailValidationResult(False, "Email contains suspicious patterns")

    domain_error = _validate_domain(_domain_of(clean))
    if domain_error:
        return EmailValidationResult(False, domain_error)
    if not allow_disposable and is_disposable_email(clean):
        return EmailValidationResult(False, "Disposable email addresses are not allowed")
    return EmailValidationResult(True, normalized_email=clean)


@dataclass
class EmailBatchResult:
    valid: list[str] = field(default_factory=list)
    invalid: list[tuple[str, str]] = field(default_factory=list)
    normalized: list[str] = field(default_factory=list)


def validate_emails(emails: Iterable[str]) -> EmailBatchResult:
    result = EmailBatchResult()
    for email in emails:
        validation = validate_email(email)
        if validation.is_valid:
            result.valid.append(email)
            result.normalized.append(validation.normalized_email)
        else:
            result.invalid.append((email, validation.error))
    return result


def is_trusted_email_domain(email: str, trusted_domains: Iterable[str] = ()) -> bool:
    domain = _domain_of(email)
    if not domain:
        return False
    return _matches_domain(domain, (*DEFAULT_TRUSTED_EMAIL_DOMAINS, *trusted_domains))


def is_disposable_email(email: str) -> bool:
    domain = _domain_of(email)
    return bool(domain) and _matches_domain(domain, DISPOSABLE_EMAIL_DOMAINS)


def sanitize_email_for_display(email: str) -> str:
    """Mask the middle of the local part: ``johndoe@x.com`` -> ``jo****e@x.com``."""
    local, _, domain = email.partition("@")
    if not local or not domain:
        return email
    if len(local) <= 2:
        return f"{local[0]}*@{domain}"
    hidden = "*" * min(len(local) - 3, 6)
    return f"{local[:2]}{hidden}{local[-1]}@{domain}"


def validate_and_sanitize_email(
    email: str | None,
    allow_disposable: bool = False,
    trusted_domains: Iterable[str] = (),
    max_length: int = 254,
    require_trusted_domain: bool = False,
) -> EmailValidationResult:
    validation = validate_email(email, allow_disposable=allow_disposable)
    if not validation.is_valid:
        return validation

    normalized = validation.normalized_email
    if len(normalized) > max_length:
        return EmailValidationResult(False, f"Email too long (max {max_length} characters)")

    warnings: list[str] = []
    if not is_trusted_email_domain(normalized, trusted_domains):
        if require_trusted_domain:
            return EmailValidationResult(False, "Email must be from a trusted domain")
        warnings.append("Email is from an untrusted domain")

    return EmailValidationResult(True, normalized_email=normalized, warnings=warnings)


@dataclass
class PhoneValidationResult:
    is_valid: bool
    error: str | None = None
    normalized_phone: str | None = None


def validate_phone_number(phone: str | None) -> PhoneValidationResult:
    """Accept 10 to 15 digits once punctuation is stripped."""
    if not phone or not isinstance(phone, str):
        return PhoneValidationResult(False, "Phone number is required")
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10:
        return PhoneValidationResult(False, "Phone number too short")
    if len(digits) > 15:
        return PhoneValidationResult(False, "Phone number too long")
    return PhoneValidationResult(True, normalized_phone=digits)
