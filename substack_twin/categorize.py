"""Keyword-based topic categorization of a creator's posts."""

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General Interest"

# Declaration order is the tie-break order.
CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "Technology & AI",
        (
            "ai", "artificial intelligence", "tech", "technology", "software", "coding",
            "programming", "machine learning", "automation", "digital", "innovation",
        ),
    ),
    (
        "Business & Entrepreneurship",
        (
            "business", "startup", "entrepreneur", "marketing", "sales", "revenue",
            "growth", "strategy", "leadership", "company",
        ),
    ),
    (
        "Personal Development",
        (
            "productivity", "habits", "mindset", "success", "motivation",
            "self-improvement", "goals", "discipline", "personal", "development",
        ),
    ),
    (
        "Content & Media",
        (
            "content", "writing", "newsletter", "social media", "creator", "audience",
            "engagement", "viral", "storytelling", "media",
        ),
    ),
    (
        "Finance & Investment",
        (
            "money", "investment", "finance", "crypto", "stocks", "wealth", "financial",
            "economy", "trading", "investing",
        ),
    ),
    (
        "Health & Wellness",
        (
            "health", "fitness", "wellness", "mental health", "exercise", "nutrition",
            "lifestyle", "wellbeing", "medical",
        ),
    ),
    (
        "Education & Learning",
        (
            "education", "learning", "teaching", "knowledge", "skills", "training",
            "course", "study", "academic", "research",
        ),
    ),
)

# Coarser taxonomy used for prompt topics.
TOPICS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Technology", ("tech", "ai", "software", "digital", "innovation", "coding", "programming")),
    ("Business", ("business", "startup", "entrepreneur", "marketing", "sales", "strategy")),
    ("Personal Development", ("productivity", "habits", "mindset", "growth", "success")),
    ("Writing", ("writing", "content", "storytelling", "communication")),
    ("Health", ("health", "wellness", "fitness", "mental health")),
    ("Finance", ("money", "investment", "finance", "wealth", "economy")),
    ("Education", ("learning", "education", "teaching", "knowledge")),
    ("Creativity", ("creative", "art", "design", "inspiration")),
)


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def keyword_score(text: str, keywords: Iterable[str]) -> int:
    return sum(len(_keyword_pattern(k).findall(text)) for k in keywords)


def score_categories(text: str, taxonomy=CATEGORIES) -> List[Tuple[str, int]]:
    lowered = (text or "").lower()
    return [(name, keyword_score(lowered, keywords)) for name, keywords in taxonomy]


def categorize_content(posts: Sequence[str], description: Optional[str] = "") -> str:
    all_text = " ".join(posts or ()) + " " + (description or "")

    best_category = DEFAULT_CATEGORY
    max_score = 0
    for category, score in score_categories(all_text):
        if score > max_score:
            max_score = score
            best_category = category

    logger.info(f"Category analysis: {best_category} (score: {max_score})")
    return best_category


def extract_topics(text: str, limit: int = 6) -> List[str]:
    scored = [(topic, score) for topic, score in score_categories(text, TOPICS) if score > 0]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [topic for topic, _ in scored[:limit]]


def infer_expertise(topics: Sequence[str]) -> str:
    primary = list(topics[:3])
    if not primary:
        return "General content creation"
    return f"{', '.join(primary)} content creation and community building"

