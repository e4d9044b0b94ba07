"""Feed parsing: tolerant, pattern-based extraction from RSS/Atom text.

Real-world feeds are often slightly malformed, so nothing here builds an XML
tree. Tags are located with non-greedy, case-insensitive patterns and CDATA
wrappers are unwrapped when present. A CDATA section that itself contains the
closing tag of its element will be cut short.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

from substack_twin.errors import InvalidFeedFormat
from substack_twin.models import FeedInfo, ParsedFeed, PostRecord
from substack_twin.text import clean_inline, decode_entities, strip_tags
from substack_twin.validate import is_valid_post_title

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 15

_CDATA = re.compile(r"^\s*<!\[CDATA\[([\s\S]*?)\]\]>\s*$")
_CDATA_OPEN = re.compile(r"^\s*<!\[CDATA\[")
_HREF = re.compile(r"\bhref\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_LINK_ELEMENT = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_ITEM_START = re.compile(r"<(?:item|entry)\b", re.IGNORECASE)


@lru_cache(maxsize=None)
def _element_pattern(tag: str) -> Pattern[str]:
    name = re.escape(tag)
    # Attributes are allowed, a self-closing tag is not an opening tag.
    return re.compile(
        rf"<{name}(?:\s[^>]*?)?(?<!/)>([\s\S]*?)</{name}\s*>",
        re.IGNORECASE,
    )


def _unwrap(inner: str) -> Tuple[str, bool]:
    match = _CDATA.match(inner)
    if match:
        return match.group(1), True
    if _CDATA_OPEN.match(inner):
        # Unterminated CDATA: keep what follows the opener.
        return _CDATA_OPEN.sub("", inner, count=1), True
    return inner, False


def _first_tag(text: str, tag: str) -> Tuple[Optional[str], bool]:
    match = _element_pattern(tag).search(text or "")
    if match is None:
        return None, False
    value, is_cdata = _unwrap(match.group(1))
    return value.strip(), is_cdata


def extract_first_tag(text: str, tag: str) -> Optional[str]:
    """Return the content of the first ``<tag>`` element, CDATA unwrapped.

    Returns None when the element is absent and "" when it is empty.
    """
    value, _ = _first_tag(text, tag)
    return value


def extract_all_blocks(text: str, tag: str) -> List[str]:
    """Return the inner text of every ``<tag>...</tag>`` block in document order."""
    return [m.group(1) for m in _element_pattern(tag).finditer(text or "")]


def _first_non_empty_text(text: str, tags: Tuple[str, ...]) -> Tuple[str, bool]:
    for tag in tags:
        value, is_cdata = _first_tag(text, tag)
        if value:
            return value, is_cdata
    return "", False


def _body_to_text(raw: str, is_cdata: bool) -> str:
    if not raw:
        return ""
    if not is_cdata:
        # Outside CDATA, embedded HTML arrives XML-escaped.
        raw = decode_entities(raw)
    return strip_tags(raw)


def check_feed_format(raw: str) -> None:
    """Raise InvalidFeedFormat unless ``raw`` looks like an RSS or Atom document."""
    if "<rss" not in raw and "<feed" not in raw and "<?xml" not in raw:
        raise InvalidFeedFormat("format", "RSS_INVALID_FORMAT")

    has_rss = "<rss" in raw and "<channel>" in raw
    has_atom = "<feed" in raw and "xmlns" in raw
    if not (has_rss or has_atom):
        raise InvalidFeedFormat("structure", "RSS_INVALID_STRUCTURE")


def parse_feed_info(raw: str) -> FeedInfo:
    start = _ITEM_START.search(raw)
    head = raw[: start.start()] if start else raw

    title = extract_first_tag(head, "title") or ""
    description = extract_first_tag(head, "description")
    if not description:
        description = extract_first_tag(head, "subtitle") or ""

    return FeedInfo(title=clean_inline(title), description=clean_inline(description))


def _item_link(block: str) -> Optional[str]:
    link = extract_first_tag(block, "link")
    if link:
        return decode_entities(link).strip()
    # Atom: <link rel="alternate" href="..."/>
    for element in _LINK_ELEMENT.findall(block):
        if "rel=" in element.lower() and "alternate" not in element.lower():
            continue
        href = _HREF.search(element)
        if href:
            return decode_entities(href.group(1)).strip()
    return None


def parse_item(block: str) -> Optional[PostRecord]:
    """Build a PostRecord from one item/entry block, or None if its title is rejected."""
    raw_title, _ = _first_non_empty_text(block, ("title", "dc:title"))
    title = clean_inline(raw_title)
    if not is_valid_post_title(title):
        if title:
            logger.debug(f"Skipping item with rejected title: {title!r}")
        return None

    raw_body, is_cdata = _first_non_empty_text(
        block, ("content:encoded", "description", "content", "summary")
    )
    content = _body_to_text(raw_body, is_cdata)

    published_at, _ = _first_non_empty_text(block, ("pubDate", "published", "updated"))

    return PostRecord(
        title=title,
        url=_item_link(block) or None,
        content=content or None,
        published_at=published_at or None,
    )


def parse_feed(raw: str, max_items: int = DEFAULT_MAX_ITEMS) -> ParsedFeed:
    """Parse an RSS/Atom body into feed metadata and validated posts.

    Raises InvalidFeedFormat when ``raw`` is not a feed. The first ``max_items``
    items are considered; the ones whose titles fail validation are dropped.
    """
    raw = raw or ""
    check_feed_format(raw)

    feed_info = parse_feed_info(raw)

    blocks = extract_all_blocks(raw, "item")
    if not blocks:
        blocks = extract_all_blocks(raw, "entry")
    logger.info(f"Found {len(blocks)} feed items")

    posts: List[PostRecord] = []
    for block in blocks[:max_items]:
        post = parse_item(block)
        if post is not None:
            posts.append(post)

    logger.info(f"Kept {len(posts)} valid posts")
    return ParsedFeed(feed_info=feed_info, posts=tuple(posts))
