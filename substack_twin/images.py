"""Profile image discovery in arbitrary publication HTML.

Candidates are searched in tiers: scored <picture> blocks, scored bare <img>
tags, JSON-LD metadata, then the og:image meta tag. The first tier that
produces a URL wins.
"""

import json
import logging
import re
from typing import Any, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from substack_twin.srcset import pick_best_from_srcset
from substack_twin.urls import to_absolute_url

logger = logging.getLogger(__name__)

# <picture> scoring
PICTURE_KEYWORD_SCORE = 3
PICTURE_ALT_AVATAR_SCORE = 4
PICTURE_NAME_SCORE = 3
PICTURE_SIZE_HINT_SCORE = 2
PICTURE_SOURCE_SCORE = 1
PICTURE_MAX_SOURCE_SCORE = 2

# bare <img> scoring
IMG_KEYWORD_SCORE = 3
IMG_ALT_AVATAR_SCORE = 3
IMG_NAME_SCORE = 2
IMG_SIZE_HINT_SCORE = 1

_KEYWORDS = re.compile(r"avatar|profile|author|user")
# Matched against bs4's serialized markup, where attribute values are always double-quoted.
_SIZE_ATTR = re.compile(r"\b(?:width|height)=\"(?:96|112|128)\"")
_SIZES_112 = re.compile(r"\bsizes=\"\s*112px")
_OG_IMAGE = re.compile(r"^\s*og:image\s*$", re.IGNORECASE)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _attr(tag: Optional[Tag], name: str) -> Optional[str]:
    if tag is None:
        return None
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    value = (value or "").strip()
    return value or None


def _has_size_hint(lower: str) -> bool:
    return bool(_SIZE_ATTR.search(lower) or _SIZES_112.search(lower))


def score_picture(block: Tag, target_name: Optional[str] = None) -> int:
    lower = str(block).lower()
    alt = (_attr(block.find(attrs={"alt": True}), "alt") or "").lower()
    name = (target_name or "").strip().lower()

    score = 0
    if _KEYWORDS.search(lower):
        score += PICTURE_KEYWORD_SCORE
    if "avatar" in alt:
        score += PICTURE_ALT_AVATAR_SCORE
    if name and (name in alt or name in lower):
        score += PICTURE_NAME_SCORE
    if _has_size_hint(lower):
        score += PICTURE_SIZE_HINT_SCORE
    sources = len(block.find_all("source"))
    score += min(sources * PICTURE_SOURCE_SCORE, PICTURE_MAX_SOURCE_SCORE)
    return score


def score_img_tag(img: Tag, target_name: Optional[str] = None) -> int:
    lower = str(img).lower()
    alt = (_attr(img, "alt") or "").lower()
    name = (target_name or "").strip().lower()

    score = 0
    if _KEYWORDS.search(lower):
        score += IMG_KEYWORD_SCORE
    if "avatar" in alt:
        score += IMG_ALT_AVATAR_SCORE
    if name and (name in alt or name in lower):
        score += IMG_NAME_SCORE
    if _has_size_hint(lower):
        score += IMG_SIZE_HINT_SCORE
    return score


def _rank(items: Iterable[Tuple[Tag, int]]) -> List[Tag]:
    # sorted() is stable: equal scores keep document order.
    return [item for item, _ in sorted(items, key=lambda pair: pair[1], reverse=True)]


def _url_from_img(img: Tag, base_url: str) -> Optional[str]:
    srcset = _attr(img, "srcset")
    if srcset:
        best = pick_best_from_srcset(srcset, base_url)
        if best:
            return best
    src = _attr(img, "src")
    if src:
        return to_absolute_url(src, base_url)
    return None


def _url_from_picture(block: Tag, base_url: str) -> Optional[str]:
    img = block.find("img")
    if img is not None:
        url = _url_from_img(img, base_url)
        if url:
            return url
    srcset = _attr(block.find("source"), "srcset")
    if srcset:
        return pick_best_from_srcset(srcset, base_url)
    return None


def image_from_pictures(soup: BeautifulSoup, base_url: str, target_name: Optional[str] = None) -> Optional[str]:
    blocks = soup.find_all("picture")
    ranked = _rank((block, score_picture(block, target_name)) for block in blocks)
    for block in ranked:
        url = _url_from_picture(block, base_url)
        if url:
            return url
    return None


def image_from_img_tags(soup: BeautifulSoup, base_url: str, target_name: Optional[str] = None) -> Optional[str]:
    bare = [img for img in soup.find_all("img") if img.find_parent("picture") is None]
    ranked = _rank((img, score_img_tag(img, target_name)) for img in bare)
    for img in ranked:
        url = _url_from_img(img, base_url)
        if url:
            return url
    return None


def _image_field(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        return _image_field(value.get("url"))
    if isinstance(value, list):
        for entry in value:
            found = _image_field(entry)
            if found:
                return found
    return None


def _json_ld_candidates(data: Any) -> Iterable[Optional[str]]:
    nodes = data if isinstance(data, list) else [data]
    for node in nodes:
        if not isinstance(node, dict):
            continue
        yield _image_field(node.get("image"))
        yield _image_field(node.get("logo"))
        publisher = node.get("publisher")
        if isinstance(publisher, dict):
            yield _image_field(publisher.get("logo"))


def image_from_json_ld(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads((script.string or "").strip())
        except ValueError:
            logger.debug("Skipping malformed JSON-LD block")
            continue
        for candidate in _json_ld_candidates(data):
            if candidate:
                return to_absolute_url(candidate, base_url)
    return None


def image_from_og_meta(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    for attr in ("property", "name"):
        for meta in soup.find_all("meta", attrs={attr: _OG_IMAGE}):
            content = _attr(meta, "content")
            if content:
                return to_absolute_url(content, base_url)
    return None


def locate_profile_image(html: Optional[str], base_url: str, target_name: Optional[str] = None) -> Optional[str]:
    if not html:
        return None
    soup = _soup(html)
    return (
        image_from_pictures(soup, base_url, target_name)
        or image_from_img_tags(soup, base_url, target_name)
        or image_from_json_ld(soup, base_url)
        or image_from_og_meta(soup, base_url)
    )
