import re
from typing import NamedTuple, Optional
from urllib.parse import urlparse

NOT_AVAILABLE = "N/A"

_URL_PATTERN = re.compile(r"^(https?://)?[\da-z.-]+\.[a-z.]{2,6}.*$", re.IGNORECASE | re.DOTALL)
_SCHEME_PATTERN = re.compile(r"^[a-z][a-z\d+.-]*://", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s")


class UrlParts(NamedTuple):
    domain: str
    protocol: str


UNKNOWN_PARTS = UrlParts(domain=NOT_AVAILABLE, protocol=NOT_AVAILABLE)


def looks_like_url(text: Optional[str]) -> bool:
    """Permissive URL gate: optional http(s) prefix, a dotted host, anything after."""
    if not text or not text.strip():
        return False
    trimmed = text.strip()
    if _WHITESPACE.search(trimmed):
        return False
    return _URL_PATTERN.match(trimmed) is not None


def parse_url_parts(text: str) -> UrlParts:
    """Best-effort host and scheme of ``text``; ``N/A`` for whatever cannot be read."""
    candidate = text.strip()
    if not _SCHEME_PATTERN.match(candidate):
        candidate = "http://" + candidate

    try:
        parsed = urlparse(candidate)
        host = parsed.hostname
    except ValueError:
        return UNKNOWN_PARTS

    if not host or not parsed.scheme:
        return UNKNOWN_PARTS
    return UrlParts(domain=host, protocol=parsed.scheme.lower())
