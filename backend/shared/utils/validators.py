"""
Shared validators for input sanitization.
"""

from urllib.parse import urlparse

# Internal hosts that must never appear in stored image URLs
BLOCKED_HOSTS = (
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "10.",
    "192.168.",
    "169.254.",  # Link-local and cloud metadata
    "[::1]",
    "metadata.google",
)

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp"}

MAX_URL_LENGTH = 2048


def validate_image_url(url: str | None) -> str | None:
    """
    Validate a menu item or restaurant image URL.

    Returns the stripped URL, or None for empty input.

    Raises:
        ValueError: If the URL is not http(s), points at an internal host
            or is too long.
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    if len(url) > MAX_URL_LENGTH:
        raise ValueError(f"URL too long (max {MAX_URL_LENGTH} characters)")

    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES or scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS image URLs are allowed")

    host = parsed.netloc.lower()
    if not host:
        raise ValueError("Image URL has no host")

    if any(blocked in host for blocked in BLOCKED_HOSTS):
        raise ValueError("Internal image URLs are not allowed")

    return url


def clean_text(value: str | None) -> str | None:
    """Strip surrounding whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
