"""Post title filtering: rejects links, counters and feed boilerplate."""

import re
from typing import Optional, Pattern, Tuple

MIN_TITLE_LENGTH = 10
MAX_TITLE_LENGTH = 200

INVALID_TITLE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"^https?://", re.IGNORECASE),
    re.compile(r"^www\.", re.IGNORECASE),
    re.compile(r"subscribe|unsubscribe", re.IGNORECASE),
    re.compile(r"^comments?$", re.IGNORECASE),
    re.compile(r"^rss$", re.IGNORECASE),
    re.compile(r"^feeds?$", re.IGNORECASE),
    re.compile(r"^\d+$"),
    re.compile(r"^[^a-zA-Z]*$"),
    re.compile(r"newsletter.*substack", re.IGNORECASE),
)


def is_valid_post_title(title: Optional[str]) -> bool:
    if not title:
        return False
    if len(title) < MIN_TITLE_LENGTH or len(title) > MAX_TITLE_LENGTH:
        return False
    candidate = title.strip()
    return not any(pattern.search(candidate) for pattern in INVALID_TITLE_PATTERNS)
