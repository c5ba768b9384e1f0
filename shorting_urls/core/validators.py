"""
Input Validators

Validation helpers for the two user-controlled inputs of the service:
the long URL and the optional custom short code.

Security Considerations:
- Only http, https and ftp URLs are accepted (no javascript:, data:, file: ...)
- Length limits keep oversized payloads out of the database
- Custom codes only lose the characters that would break routing
"""

import re
from typing import Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048  # RFC 7230 practical limit
MAX_SHORT_CODE_LENGTH = 64

ALLOWED_SCHEMES = frozenset({"http", "https", "ftp"})

# First path segments owned by other routes; a short code equal to one of
# these would never be reachable through GET /{short_code}.
RESERVED_SHORT_CODES = frozenset({
    "api",
    "health",
    "docs",
    "redoc",
    "openapi.json",
    # Dot segments are collapsed by clients before the request is sent
    ".",
    "..",
})

# Path separators, query and fragment markers, whitespace and control characters
FORBIDDEN_SHORT_CODE_CHARS = re.compile(r"[/?#\s\x00-\x1f\x7f]")


def is_valid_url(url: str) -> bool:
    """
    Validate URL format.

    A URL is well-formed when it has an http, https or ftp scheme and a host.
    The URL is never normalized; what the caller sent is what gets stored.

    Args:
        url: The URL string to validate

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if len(url) > MAX_URL_LENGTH:
        return False

    if any(char.isspace() for char in url):
        return False

    try:
        result = urlparse(url)
        # Accessing .port validates the port component (raises ValueError)
        result.port
    except ValueError:
        return False

    if result.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    return bool(result.hostname)


def short_code_problem(short_code: str) -> Optional[str]:
    """
    Explain why a custom short code cannot be used.

    Args:
        short_code: Caller-supplied short code

    Returns:
        A human readable reason, or None when the code is usable
    """
    if not short_code:
        return "Short code must not be empty"

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return f"Short code must be at most {MAX_SHORT_CODE_LENGTH} characters"

    if FORBIDDEN_SHORT_CODE_CHARS.search(short_code):
        return "Short code must not contain '/', '?', '#', whitespace or control characters"

    if short_code.lower() in RESERVED_SHORT_CODES:
        return "Short code is reserved"

    return None
