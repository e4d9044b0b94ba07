"""Knowledge-base documents built from extracted articles."""

import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from substack_twin.models import PostRecord

MAX_ARTICLES = 10
ARTICLE_CONTENT_LIMIT = 8000
SINGLE_ARTICLE_CONTENT_LIMIT = 120_000
DOCUMENT_LIMIT = 250_000
EMPTY_CONTENT = "(No content extracted from RSS)"


def clamp_text(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n\n[truncated]"


def safe_doc_name(text: str, max_len: int = 96) -> str:
    cleaned = re.sub(r"\s+", " ", text or "").strip()
    if not cleaned:
        return "Document"
    if len(cleaned) <= max_len:
        return cleaned
    return cleaned[: max_len - 1].rstrip() + "…"


def _header(creator_name: str, substack_url: str, generated_at: Optional[datetime]) -> List[str]:
    stamp = (generated_at or datetime.now(timezone.utc)).isoformat()
    lines = [f"Creator: {(creator_name or '').strip() or 'Creator'}"]
    if substack_url and substack_url.strip():
        lines.append(f"Substack: {substack_url.strip()}")
    lines.append(f"GeneratedAt: {stamp}")
    return lines


def build_article_text(
    article: PostRecord,
    creator_name: str = "",
    substack_url: str = "",
    generated_at: Optional[datetime] = None,
) -> str:
    lines = _header(creator_name, substack_url, generated_at)
    lines.append(f"Title: {article.title.strip()}")
    if article.published_at:
        lines.append(f"PublishedAt: {article.published_at.strip()}")
    if article.url:
        lines.append(f"URL: {article.url.strip()}")
    lines.append("")

    content = clamp_text((article.content or "").strip(), SINGLE_ARTICLE_CONTENT_LIMIT)
    return clamp_text("\n".join(lines) + (content or EMPTY_CONTENT), DOCUMENT_LIMIT)


def build_knowledge_base_text(
    articles: Iterable[PostRecord],
    creator_name: str = "",
    substack_url: str = "",
    generated_at: Optional[datetime] = None,
) -> str:
    header = "\n".join(_header(creator_name, substack_url, generated_at) + [""])

    usable = [a for a in articles if a.title and a.title.strip()][:MAX_ARTICLES]
    blocks = []
    for idx, article in enumerate(usable, start=1):
        lines = [f"### Article {idx}: {article.title.strip()}"]
        if article.published_at:
            lines.append(f"PublishedAt: {article.published_at.strip()}")
        if article.url:
            lines.append(f"URL: {article.url.strip()}")
        lines.append("")
        content = clamp_text((article.content or "").strip(), ARTICLE_CONTENT_LIMIT)
        lines.append(content or EMPTY_CONTENT)
        lines.append("")
        blocks.append("\n".join(lines))

    return clamp_text(header + "\n".join(blocks), DOCUMENT_LIMIT)


def articles_from_dicts(items: Iterable[dict]) -> List[PostRecord]:
    """Rebuild PostRecords from the JSON ``articles`` array of an extraction result."""
    records = []
    for item in items:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        if not title:
            continue
        records.append(
            PostRecord(
                title=title,
                url=item.get("url") or None,
                content=item.get("content") or None,
                published_at=item.get("publishedAt") or None,
            )
        )
    return records
