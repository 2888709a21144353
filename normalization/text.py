"""Free-text cleanup helpers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


def has_control_chars(text: str, allow_newlines: bool = False) -> bool:
    if allow_newlines:
        text = text.replace("\t", "").replace("\n", "").replace("\r", "")
    return bool(CONTROL_CHARS.search(text))


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_text(text: str | None, max_length: int | None = None) -> str | None:
    """Strip control characters, collapse whitespace and drop blank values."""
    if not text or not isinstance(text, str):
        return None
    # Whitespace first so newlines and tabs become spaces instead of vanishing.
    sanitized = CONTROL_CHARS.sub("", _WHITESPACE.sub(" ", text)).strip()
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length].strip()
    return sanitized or None


def strip_html(html: str | None) -> str:
    """Return the visible text of an HTML fragment."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    return collapse_whitespace(soup.get_text(" "))
