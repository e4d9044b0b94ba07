"""Fetching: feeds, publication pages and profile images over HTTP."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple

import requests

from substack_twin.config import fetch_timeout, user_agent
from substack_twin.errors import FetchError
from substack_twin.urls import is_allowed_image_host

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/xml, text/xml, */*"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
IMAGE_ACCEPT = "image/*,application/octet-stream"

# (url, accept) -> body text; raises FetchError on failure.
AsyncFetch = Callable[[str, str], Awaitable[str]]


def _browser_headers(accept: str) -> dict:
    return {
        "User-Agent": user_agent(),
        "Accept": accept,
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


def fetch_text(url: str, accept: str = HTML_ACCEPT, timeout: Optional[float] = None) -> str:
    timeout = fetch_timeout() if timeout is None else timeout
    try:
        resp = requests.get(url, headers=_browser_headers(accept), timeout=timeout)
        logger.info(f"GET {url} -> {resp.status_code}")
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Upstream fetch failed: {url}") from exc
    return resp.text


async def async_fetch_text(url: str, accept: str = HTML_ACCEPT, timeout: Optional[float] = None) -> str:
    """Run fetch_text in a worker thread, abandoning it once ``timeout`` elapses."""
    timeout = fetch_timeout() if timeout is None else timeout
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(fetch_text, url, accept, timeout),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        raise FetchError(f"Timed out after {timeout}s: {url}") from exc


def fetch_image_bytes(url: str, timeout: Optional[float] = None) -> Tuple[bytes, str]:
    """Download a profile image from a Substack-owned host; returns (body, content type)."""
    if not is_allowed_image_host(url):
        raise FetchError(f"URL not allowed: {url}")

    timeout = fetch_timeout() if timeout is None else timeout
    try:
        resp = requests.get(url, headers=_browser_headers(IMAGE_ACCEPT), timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Upstream fetch failed: {url}") from exc

    content_type = resp.headers.get("Content-Type") or "application/octet-stream"
    return resp.content, content_type
