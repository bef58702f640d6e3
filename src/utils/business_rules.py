"""Business rules validation utilities."""

import httpx
from exceptions import ValidationError


def normalize_origin(url: str, field: str = "siteUrl") -> str:
    """
    Reduce a site URL to its origin, e.g. ``https://Example.com:443/a?b``
    becomes ``https://example.com``.

    Raises:
        ValidationError: The URL has no http(s) scheme or no host
    """
    try:
        parsed = httpx.URL(url.strip())
    except (httpx.InvalidURL, TypeError):
        raise ValidationError(field, f"Invalid URL: {url}")

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValidationError(field, f"Invalid URL: {url}")

    host = parsed.host
    if ":" in host:
        # IPv6 literal; httpx returns it without brackets
        host = f"[{host}]"

    # httpx drops the port when it is the scheme's default
    origin = f"{parsed.scheme}://{host}"
    if parsed.port is not None:
        origin = f"{origin}:{parsed.port}"
    return origin
