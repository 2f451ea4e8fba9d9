from typing import Optional, Tuple
from urllib.parse import urlparse

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> Tuple[str, bool]:

    url = url.strip()

    if not url.lower().startswith(("http://", "https://")):
        normalized = f"https://{url}"
        return normalized, True

    return url, False


def validate_url(url: Optional[str]) -> Tuple[bool, str, str]:
    if not url or not url.strip():
        return False, "", "URL is required"

    normalized_url, was_modified = normalize_url(url)

    if any(ord(ch) < 32 or ord(ch) == 127 for ch in normalized_url):
        return False, normalized_url, "Invalid URL format: contains control characters"

    try:
        parsed = urlparse(normalized_url)
        parsed.port  # raises on a malformed port

        if not parsed.netloc or not parsed.hostname:
            return False, normalized_url, "Invalid URL format: missing domain"

        return True, normalized_url, ""

    except ValueError as e:
        return False, normalized_url, f"URL parsing error: {str(e)}"


def get_origin(url: str) -> str:
    """
    scheme://host[:port] of an absolute URL, default ports dropped.
    """
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"

    port = parsed.port
    if port and port != DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"
