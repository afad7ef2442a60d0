"""URL building and normalization utilities."""

from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode, urlparse, urlunparse


def normalize_base_url(url: str) -> str:
    """
    Normalize the API origin: trim whitespace and trailing slashes, default to http.

    Examples:
        - normalize_base_url('http://localhost:3001/') -> 'http://localhost:3001'
        - normalize_base_url('api.example.com') -> 'http://api.example.com'
        - normalize_base_url(' https://api.example.com/v1/ ') -> 'https://api.example.com/v1'
    """
    url = url.strip()
    if "://" not in url:
        url = f"http://{url}"

    parsed = urlparse(url)
    path = parsed.path.rstrip("/")
    return urlunparse((parsed.scheme, parsed.netloc, path, "", "", ""))


def path_segment(value: Any) -> str:
    """Percent-encode a value for use as one path segment (ids, domain ids)."""
    return quote(str(value), safe="")


def with_query(endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
    """
    Append a query string, dropping parameters that are None or empty.

    Absence is meaningful for some endpoints (no companyId = visible to
    everyone), so unset values are omitted rather than sent as "".

    Examples:
        - with_query('/api/users', {'companyId': 'c1', 'role': None}) -> '/api/users?companyId=c1'
        - with_query('/api/users', {}) -> '/api/users'
    """
    present = {
        key: value.value if isinstance(value, Enum) else value
        for key, value in (params or {}).items()
        if value is not None and value != ""
    }
    if not present:
        return endpoint
    return f"{endpoint}?{urlencode(present)}"
