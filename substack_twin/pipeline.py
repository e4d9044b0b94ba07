"""Substack extraction: feed, category and profile image for one publication."""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from substack_twin.categorize import categorize_content
from substack_twin.config import max_feed_items
from substack_twin.errors import FetchError, InvalidFeedFormat
from substack_twin.fetch import FEED_ACCEPT, HTML_ACCEPT, AsyncFetch, async_fetch_text
from substack_twin.images import locate_profile_image
from substack_twin.models import ExtractionResult, FeedInfo, PostRecord, SubstackProfile
from substack_twin.parse import parse_feed
from substack_twin.urls import (
    creator_handle_from_url,
    creator_name_from_handle,
    normalize_base_url,
    split_contact_links,
)

logger = logging.getLogger(__name__)

CANNOT_CONNECT = "CANNOT_CONNECT_TO_SUBSTACK"
CANNOT_CONNECT_MESSAGE = "I'm sorry, cannot continue. Unable to connect to your Substack page."

MAX_RETURNED_POSTS = 10
FALLBACK_POST_COUNT = 5
FALLBACK_CATEGORY = "General"

_NAME_SUFFIX = re.compile(r"['’]s?\s*(newsletter|substack|blog)", re.IGNORECASE)


def fallback_posts(creator_name: str) -> List[str]:
    templates = [
        f"{creator_name or 'Creator'}'s Weekly Insights",
        "The Future of Digital Innovation",
        "Building Authentic Connections Online",
        "Lessons from the Creator Economy",
        "Why Personal Branding Matters in 2024",
        "Monetizing Your Expertise: A Guide",
        "The Psychology of Viral Content",
        "Building Community Through Content",
        "Navigating the Digital Landscape",
        "Creating Value in the Information Age",
    ]
    return templates[:FALLBACK_POST_COUNT]


def author_from_feed_title(feed_title: str, default: str) -> str:
    """Use the feed title as the author name unless it is just Substack branding."""
    if not feed_title or "substack" in feed_title.lower():
        return default
    cleaned = _NAME_SUFFIX.sub("", feed_title).strip()
    return cleaned or default


def build_variables(
    substack_url: str,
    rss_url: str,
    creator_name: str,
    website: str = "",
    social: str = "",
    image_url: Optional[str] = None,
) -> dict:
    return {
        "SUBSTACK_URL": substack_url,
        "RSS_URL": rss_url,
        "CREATOR_NAME": creator_name,
        "CREATOR_WEBSITE": website or substack_url,
        "CREATOR_SOCIAL": social or substack_url,
        "CREATOR_IMAGE": image_url or "",
    }


async def _fetch_feed(fetch: AsyncFetch, rss_url: str) -> Tuple[FeedInfo, Sequence[PostRecord]]:
    """Fetch and parse the feed. InvalidFeedFormat propagates; a failed fetch yields no posts."""
    try:
        body = await fetch(rss_url, FEED_ACCEPT)
    except FetchError as exc:
        logger.warning(f"RSS fetch error for {rss_url}: {exc!r}; using fallback data")
        return FeedInfo(), ()
    logger.info(f"RSS content length: {len(body)}")
    feed = parse_feed(body, max_feed_items())
    return feed.feed_info, feed.posts


async def find_profile_image(fetch: AsyncFetch, base_url: str, target_name: Optional[str] = None) -> Optional[str]:
    """Search the homepage, then the /about page, for a profile image."""
    about_url = f"{base_url.rstrip('/')}/about"
    for page_url in (base_url, about_url):
        try:
            html = await fetch(page_url, HTML_ACCEPT)
        except FetchError as exc:
            logger.warning(f"Could not fetch {page_url}: {exc!r}")
            continue
        image = locate_profile_image(html, page_url, target_name)
        if image:
            return image
    return None


def fatal_result() -> ExtractionResult:
    return ExtractionResult(success=False, data=None, error=CANNOT_CONNECT, message=CANNOT_CONNECT_MESSAGE)


def fallback_result(url: str, error: str) -> ExtractionResult:
    handle = creator_handle_from_url(url)
    name = handle[:1].upper() + handle[1:] if handle else "Creator"
    base = url.rstrip("/")
    rss_url = f"{base}/feed" if base else ""
    posts = fallback_posts(name)
    profile = SubstackProfile(
        author=name,
        posts=tuple(posts),
        category=FALLBACK_CATEGORY,
        rss_url=rss_url,
        substack_url=url,
        total_posts=len(posts),
        variables=build_variables(url, rss_url, name),
    )
    return ExtractionResult(success=False, data=profile, error=error)


async def extract_substack(url: str, fetch: Optional[AsyncFetch] = None) -> ExtractionResult:
    """Build the creator profile for a Substack publication.

    Raises InvalidInputUrl before any network activity when ``url`` is empty or
    unparseable. A body that is not a feed yields the fatal CANNOT_CONNECT
    result; every other failure degrades to placeholder data.
    """
    clean_url = normalize_base_url(url)
    fetch = fetch or async_fetch_text

    try:
        logger.info(f"Starting Substack analysis for: {clean_url}")
        rss_url = f"{clean_url}/feed"
        about_url = f"{clean_url}/about"

        handle = creator_handle_from_url(clean_url)
        creator_name = creator_name_from_handle(handle)
        logger.info(f"Creator info: handle={handle!r} name={creator_name!r}")

        try:
            feed_info, records = await _fetch_feed(fetch, rss_url)
        except InvalidFeedFormat as exc:
            logger.error(f"Invalid RSS feed at {rss_url}: {exc}")
            return fatal_result()

        posts = [r.title for r in records]
        if not posts:
            logger.info("Generating fallback content")
            posts = fallback_posts(creator_name)

        author = author_from_feed_title(feed_info.title, creator_name)
        description = feed_info.description
        category = categorize_content(posts, description)
        website, social = split_contact_links(description)

        profile_image_url = await find_profile_image(fetch, clean_url, author or creator_name or handle)
        logger.info(f"Profile image: {profile_image_url or 'not found'}")

        profile = SubstackProfile(
            author=author,
            posts=tuple(posts[:MAX_RETURNED_POSTS]),
            articles=tuple(records[:MAX_RETURNED_POSTS]),
            category=category,
            rss_url=rss_url,
            substack_url=clean_url,
            total_posts=len(posts),
            about_url=about_url,
            social_urls=(social,) if social else (),
            description=description,
            profile_image_url=profile_image_url,
            variables=build_variables(clean_url, rss_url, author, website, social, profile_image_url),
        )
        logger.info(f"Analysis complete: {len(profile.posts)} posts, category {category}")
        return ExtractionResult(success=True, data=profile)
    except Exception as exc:
        logger.exception(f"Scraping error for {clean_url}")
        return fallback_result(clean_url, str(exc) or exc.__class__.__name__)
