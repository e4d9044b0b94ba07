"""Text cleanup: entity decoding and HTML-to-text conversion."""

import re
from typing import Optional

# Applied in order; &amp; first so "&amp;lt;" ends up as "<".
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&nbsp;", " "),
)

# noscript holds fallback markup for script-less browsers, not article text.
_DROP_BLOCKS = re.compile(r"<(script|style|noscript)\b[\s\S]*?</\1\s*>", re.IGNORECASE)
_BR = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)
_BLOCK_TAGS = re.compile(r"</?(?:p|div|h[1-6])\b[^>]*>", re.IGNORECASE)
_LIST_ITEM = re.compile(r"</?li\b[^>]*>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]*>")
_SPACE_BEFORE_NEWLINE = re.compile(r"\s+\n")
_SPACE_AFTER_NEWLINE = re.compile(r"\n\s+")
_INLINE_RUNS = re.compile(r"[ \t]{2,}")
_WHITESPACE = re.compile(r"\s+")


def decode_entities(text: Optional[str]) -> str:
    if not text:
        return ""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def strip_tags(html: Optional[str]) -> str:
    if not html:
        return ""
    text = _DROP_BLOCKS.sub(" ", html)
    text = _BR.sub("\n", text)
    text = _BLOCK_TAGS.sub("\n", text)
    text = _LIST_ITEM.sub("\n- ", text)
    text = _ANY_TAG.sub(" ", text)
    text = decode_entities(text)
    text = _SPACE_BEFORE_NEWLINE.sub("\n", text)
    text = _SPACE_AFTER_NEWLINE.sub("\n", text)
    text = _INLINE_RUNS.sub(" ", text)
    return text.strip()


def clean_inline(text: Optional[str]) -> str:
    """Decode entities, drop any tags left behind and fold onto one line."""
    text = _ANY_TAG.sub("", decode_entities(text))
    return _WHITESPACE.sub(" ", text).strip()
