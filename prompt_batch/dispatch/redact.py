"""Redaction of credentials before logging."""

from urllib.parse import urlparse, urlunparse


# Headers that must never appear in logs
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "x-api-key",
        "proxy-authorization",
    }
)

REDACTED_VALUE = "[REDACTED]"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Replace the values of sensitive headers with a placeholder.

    Args:
        headers: Request headers.

    Returns:
        New dictionary safe to log.
    """
    return {
        key: REDACTED_VALUE if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def redact_url_credentials(url: str) -> str:
    """Redact ``user:password@`` credentials from a URL."""
    parsed = urlparse(url)
    if not parsed.username and not parsed.password:
        return url

    host = parsed.hostname or ""
    if parsed.port:
        host = f"{host}:{parsed.port}"
    return urlunparse(parsed._replace(netloc=f"{REDACTED_VALUE}@{host}"))
