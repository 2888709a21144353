"""URL validation and canonicalization."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

from normalization.text import CONTROL_CHARS

DANGEROUS_SCHEMES = ("javascript:", "data:", "vbscript:", "file:", "ftp:", "gopher:")

DEFAULT_TRUSTED_DOMAINS = (
    "google.com",
    "eventbrite.com",
    "ticketmaster.com",
    "seatgeek.com",
    "facebook.com",
    "meetup.com",
    "youtube.com",
    "vimeo.com",
    "github.com",
    "stackoverflow.com",
)

SHORTENER_DOMAINS = ("bit.ly", "tinyurl.com")

SENSITIVE_QUERY_PARAMS = frozenset({"token", "key", "secret", "password", "auth", "session"})

_SUSPICIOUS_HOST_PATTERNS = [
    re.compile(r"^localhost$"),
    re.compile(r"\.local$"),
    re.compile(r"\.onion$"),
    re.compile(r"phishing|malware|virus|scam"),
]
_HAS_SCHEME = re.compile(r"^https?://", re.I)
_BARE_SCHEME = re.compile(r"^https?://$", re.I)
_DOT_HOST = re.compile(r"^https?://\.", re.I)
_HOST_LABEL = re.compile(r"^(?!-)[^\W_](?:[^\W_]|-){0,62}(?<!-)$")


@dataclass
class UrlValidationResult:
    is_valid: bool
    error: str | None = None
    normalized_url: str | None = None
    warnings: list[str] = field(default_factory=list)


def _is_malformed(url: str) -> bool:
    return (
        url.startswith("://")
        or url.endswith("://")
        or bool(_BARE_SCHEME.match(url))
        or bool(_DOT_HOST.match(url))
        or ".." in url
        or url.endswith(":")
    )


def _ip_literal(host: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        return None


def _is_valid_hostname(host: str) -> bool:
    if _ip_literal(host) is not None:
        return True
    labels = host.rstrip(".").split(".")
    return len(host) <= 253 and all(_HOST_LABEL.match(label) for label in labels)


def is_suspicious_host(host: str) -> bool:
    """Private, loopback and unroutable hosts, plus known-bad keywords."""
    host = host.lower()
    ip = _ip_literal(host)
    if ip is not None and (ip.is_private or ip.is_loopback or ip.is_unspecified or ip.is_link_local):
        return True
    return any(p.search(host) for p in _SUSPICIOUS_HOST_PATTERNS)


def _inspect(url: str) -> tuple[SplitResult | None, str | None]:
    """Parse *url* (scheme already present) and run the structural checks."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None, "Invalid URL format"

    if parts.scheme not in ("http", "https"):
        return None, "Only HTTP and HTTPS URLs are allowed"
    host = parts.hostname
    if not host:
        return None, "Invalid hostname"
    if not _is_valid_hostname(host):
        return None, "Invalid URL format"

    try:
        port = parts.port
    except ValueError:
        return None, "Invalid port number"
    if port is not None and not 1 <= port <= 65535:
        return None, "Invalid port number"

    if is_suspicious_host(host):
        return None, "URL contains suspicious patterns"
    return parts, None


def canonicalize_url(parts: SplitResult) -> str:
    """Drop default ports and one trailing path slash, sort query keys."""
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    netloc = host if port in (None, 80, 443) else f"{host}:{port}"

    path = parts.path[:-1] if parts.path.endswith("/") else parts.path

    query = ""
    if parts.query:
        first: dict[str, str] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            first.setdefault(key, value)
        query = urlencode(sorted(first.items()))

    return urlunsplit((parts.scheme, netloc, path, query, parts.fragment))


def validate_url(url: str | None) -> UrlValidationResult:
    """Validate and canonicalize an event URL.

    Blank input is valid and normalizes to ``""``. Scheme-less input gets
    ``https://`` only when it looks like a domain.
    """
    if not url or not url.strip():
        return UrlValidationResult(is_valid=True, normalized_url="")

    clean = CONTROL_CHARS.sub("", url.strip())
    if clean.lower().startswith(DANGEROUS_SCHEMES):
        return UrlValidationResult(False, "Dangerous protocol not allowed")
    if _is_malformed(clean):
        return UrlValidationResult(False, "Invalid URL format")

    if not _HAS_SCHEME.match(clean):
        if "." in clean or clean.lower() == "localhost":
            clean = f"https://{clean}"
        else:
            return UrlValidationResult(False, "Invalid URL format")

    parts, error = _inspect(clean)
    if error:
        return UrlValidationResult(False, error)
    return UrlValidationResult(True, normalized_url=canonicalize_url(parts))


def validate_and_sanitize_url(
    url: str | None,
    allow_http: bool = False,
    max_length: int = 2000,
    trusted_domains: Iterable[str] = (),
    require_https: bool | None = None,
) -> UrlValidationResult:
    """Stricter variant of :func:`validate_url` used for stored event links.

    HTTPS is required unless *allow_http* is set. Untrusted domains and link
    shorteners produce warnings, not errors.
    """
    if require_https is None:
        require_https = not allow_http
    if not url or not url.strip():
        return UrlValidationResult(is_valid=True, normalized_url="")

    clean = CONTROL_CHARS.sub("", url.strip())
    if clean.lower().startswith(DANGEROUS_SCHEMES):
        return UrlValidationResult(False, "Dangerous protocol not allowed")
    if _is_malformed(clean):
        return UrlValidationResult(False, "Invalid URL format")
    if not _HAS_SCHEME.match(clean):
        clean = f"{'http' if allow_http else 'https'}://{clean}"

    parts, error = _inspect(clean)
    if error:
        return UrlValidationResult(False, error)

    if require_https and parts.scheme != "https":
        return UrlValidationResult(False, "HTTPS is required for this URL")
    if not allow_http and parts.scheme == "http":
        return UrlValidationResult(False, "HTTP URLs are not allowed")
    if len(clean) > max_length:
        return UrlValidationResult(False, f"URL too long (max {max_length} characters)")

    warnings: list[str] = []
    if not is_trusted_domain(clean, trusted_domains):
        warnings.append("URL is from an untrusted domain")
    host = parts.hostname or ""
    if any(host == d or host.endswith(f".{d}") for d in SHORTENER_DOMAINS):
        warnings.append("URL appears to be a shortened link")

    return UrlValidationResult(True, normalized_url=canonicalize_url(parts), warnings=warnings)


def sanitize_url_for_display(url: str, max_length: int = 100) -> str:
    """Remove credential-like query parameters and truncate long URLs."""
    display = url
    try:
        parts = urlsplit(url)
    except ValueError:
        parts = None
    if parts is not None and parts.scheme and parts.netloc:
        kept = [
            (k, v)
            for k, v in parse_qsl(parts.query, keep_blank_values=True)
            if k.lower() not in SENSITIVE_QUERY_PARAMS
        ]
        display = urlunsplit(parts._replace(query=urlencode(kept)))
    if len(display) > max_length:
        return display[: max_length - 3] + "..."
    return display


def extract_domain(url: str | None) -> str | None:
    if not url or not url.strip():
        return None
    candidate = url.strip()
    if not _HAS_SCHEME.match(candidate):
        if "." in candidate or candidate.lower() == "localhost":
            candidate = f"https://{candidate}"
        else:
            return None
    try:
        return urlsplit(candidate).hostname or None
    except ValueError:
        return None


def is_trusted_domain(url: str, trusted_domains: Iterable[str] = ()) -> bool:
    domain = extract_domain(url)
    if not domain:
        return False
    for trusted in (*DEFAULT_TRUSTED_DOMAINS, *trusted_domains):
        if domain == trusted or domain.endswith(f".{trusted}"):
            return True
    return False
