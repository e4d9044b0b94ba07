"""URL helpers: absolutization, Substack URL canonicalization, link sorting."""

import re
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

from substack_twin.errors import InvalidInputUrl

_SUBSTACK_HANDLE = re.compile(r"https?://([^./]+)\.substack\.com", re.IGNORECASE)
_AT_PATH = re.compile(r"^/@([^/]+)/?")
_SIMPLE_PATH = re.compile(r"^/([a-z0-9-]+)/?$", re.IGNORECASE)
_URL_IN_TEXT = re.compile(r"https?://[^\s<>\"]+", re.IGNORECASE)

SOCIAL_HOSTS = ("twitter.com", "x.com", "tiktok.com", "instagram.com")

ALLOWED_IMAGE_HOSTS = frozenset({"substackcdn.com", "substack-post-media.s3.amazonaws.com"})


def to_absolute_url(src: str, base: str) -> str:
    try:
        return urljoin(base, src.strip())
    except ValueError:
        return src


def format_substack_url(url: str) -> str:
    """Canonicalize the ways people paste a Substack address.

    https://substack.com/@pmarca  -> https://pmarca.substack.com/
    substack.com/pmarca           -> https://pmarca.substack.com/
    https://pmarca.substack.com   -> https://pmarca.substack.com/
    """
    if not url or not url.strip():
        return ""
    value = url.strip()
    if not re.match(r"^https?://", value, re.IGNORECASE):
        value = f"https://{value}"

    try:
        parsed = urlparse(value)
        host = (parsed.hostname or "").lower()
    except ValueError:
        match = re.search(r"substack\.com/@([^/]+)", value, re.IGNORECASE)
        if match:
            return f"https://{match.group(1)}.substack.com/"
        return value

    if not host:
        return value

    path = parsed.path or ""
    if host == "substack.com":
        match = _AT_PATH.match(path) or _SIMPLE_PATH.match(path)
        if match:
            return f"https://{match.group(1)}.substack.com/"

    # Subdomain form and custom domains both collapse to the bare host.
    return f"https://{host}/"


def normalize_base_url(url: Optional[str]) -> str:
    value = (url or "").strip().rstrip("/")
    if not value:
        raise InvalidInputUrl("URL is required")
    if not re.match(r"^https?://", value, re.IGNORECASE):
        value = f"https://{value}"
    try:
        host = urlparse(value).hostname
    except ValueError as exc:
        raise InvalidInputUrl(f"Invalid URL: {url}") from exc
    if not host or "." not in host:
        raise InvalidInputUrl(f"Invalid URL: {url}")
    return value


def creator_handle_from_url(url: str) -> str:
    match = _SUBSTACK_HANDLE.search(url or "")
    return match.group(1) if match else ""


def creator_name_from_handle(handle: str) -> str:
    words = re.split(r"[-_]", handle or "")
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def split_contact_links(text: str) -> Tuple[str, str]:
    """Return (website, social) found in free text; the last match of each kind wins."""
    website = ""
    social = ""
    for found in _URL_IN_TEXT.findall(text or ""):
        if "substack.com" in found or "mailto:" in found:
            continue
        try:
            host = (urlparse(found).hostname or "").lower()
        except ValueError:
            continue
        if any(host == h or host.endswith("." + h) for h in SOCIAL_HOSTS):
            social = found
        else:
            website = found
    return website, social


def is_allowed_image_host(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme != "https":
        return False
    host = (parsed.hostname or "").lower()
    return host in ALLOWED_IMAGE_HOSTS or host.endswith(".substack.com")
