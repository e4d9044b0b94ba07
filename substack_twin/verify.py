"""Ownership verification: look for the agent marker on the creator's about page."""

import logging
from typing import Dict, Optional

from bs4 import BeautifulSoup

from substack_twin.errors import FetchError
from substack_twin.fetch import HTML_ACCEPT, fetch_text

logger = logging.getLogger(__name__)


def _linked_hrefs(html: str):
    soup = BeautifulSoup(html or "", "html.parser")
    for anchor in soup.find_all("a", href=True):
        yield anchor["href"].strip().rstrip("/")


def page_contains_marker(html: str, marker: str, verification_link: Optional[str] = None) -> bool:
    html = html or ""
    if marker and marker in html:
        return True
    if not verification_link:
        return False
    if verification_link in html:
        return True
    wanted = verification_link.strip().rstrip("/")
    return any(href == wanted for href in _linked_hrefs(html))


def verify_ownership(
    about_url: str,
    marker: str,
    verification_link: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Dict:
    if not about_url or not marker:
        return {"verified": False, "error": "Missing required parameters: aboutUrl and agentId"}

    logger.info(f"Verifying agent marker {marker!r} on {about_url}")
    try:
        html = fetch_text(about_url, HTML_ACCEPT, timeout)
    except FetchError as exc:
        logger.warning(f"Failed to fetch about page {about_url}: {exc!r}")
        return {"verified": False, "error": f"Failed to fetch Substack about page: {exc}"}

    if page_contains_marker(html, marker, verification_link):
        return {
            "verified": True,
            "message": "Ownership verified successfully! Agent marker or link found in Substack about page.",
        }
    return {
        "verified": False,
        "error": (
            "Verification marker not found in Substack about page. Please make sure you have "
            "added the link/ID to your about page and try again."
        ),
    }
