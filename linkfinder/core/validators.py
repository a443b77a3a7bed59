"""
Input Validators and Sanitizers

This module provides normalization and validation for what the user types
and for what is sent to the link store.

Security Considerations:
- Aliases are used as URL path segments, so none may step out of its segment
- Length limits keep oversized payloads off the wire
"""

from typing import Optional
from urllib.parse import quote

MAX_URL_LENGTH = 2048

RELATIVE_SEGMENTS = {".", ".."}


def normalize_input(text: Optional[str]) -> str:
    """
    Normalize raw input text for searching and matching.

    Leading and trailing whitespace is removed; case is preserved.

    Args:
        text: Raw text as typed by the user

    Returns:
        The normalized text ('' for None)
    """
    if not text:
        return ""
    return text.strip()


def alias_path_segment(alias: str) -> Optional[str]:
    """
    Turn an alias into a percent-encoded URL path segment.

    The store decides which characters an alias may hold, so any alias is
    accepted as long as it stays inside one segment: it must be non-empty,
    contain no '/' and not be '.' or '..'.

    Args:
        alias: The alias as returned by the store

    Returns:
        The encoded segment if the alias is usable, None otherwise
    """
    if not alias or not isinstance(alias, str):
        return None

    if '/' in alias or alias in RELATIVE_SEGMENTS:
        return None

    return quote(alias, safe="")


def validate_url_length(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate target length before it is sent for shortening.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length
