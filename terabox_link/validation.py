import re
from typing import Iterable
from urllib.parse import urlparse

from terabox_link.config import DEFAULT_ALLOWED_DOMAINS
from terabox_link.errors import InvalidUrl, ShareIdNotFound, UnsupportedDomain

# First match wins.
SHARE_ID_PATTERNS = (
    re.compile(r"/s/([a-zA-Z0-9_-]+)"),
    re.compile(r"surl=([a-zA-Z0-9_-]+)"),
    re.compile(r"/share/link\?surl=([a-zA-Z0-9_-]+)"),
    re.compile(r"/web/share/link\?surl=([a-zA-Z0-9_-]+)"),
)


def _hostname(url: str) -> str:
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError as exc:
        raise InvalidUrl(detail=str(exc)) from exc
    if not parsed.scheme or not hostname:
        raise InvalidUrl(detail=f"not an absolute URL: {url!r}")
    return hostname


def is_supported_url(url: str, domains: Iterable[str] = DEFAULT_ALLOWED_DOMAINS) -> bool:
    try:
        hostname = _hostname(url)
    except InvalidUrl:
        return False
    return any(domain in hostname for domain in domains)


def extract_share_id(url: str) -> str | None:
    for pattern in SHARE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def validate_and_extract(raw_url: str, domains: Iterable[str] = DEFAULT_ALLOWED_DOMAINS) -> str:
    """Check the host against the allow-list and return the share id."""
    hostname = _hostname(raw_url)
    if not any(domain in hostname for domain in domains):
        raise UnsupportedDomain(detail=f"host {hostname!r} is not a known share domain")

    share_id = extract_share_id(raw_url)
    if not share_id:
        raise ShareIdNotFound()
    return share_id
