"""Persona variables for the voice-agent system prompt, derived without an LLM."""

from datetime import datetime
from typing import Any, Dict, Optional

from substack_twin.categorize import extract_topics, infer_expertise
from substack_twin.models import ParsedFeed
from substack_twin.pipeline import author_from_feed_title
from substack_twin.urls import creator_handle_from_url, creator_name_from_handle

DEFAULT_RESTRICTIONS = "adult content, spam, promotional material"
DEFAULT_WORKFLOW_VARIABLES = "N8n automation workflows, content distribution"


def time_of_day(now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def build_fallback_prompt_variables(
    feed: ParsedFeed,
    substack_url: str,
    additional_restrictions: str = "",
    workflow_variables: str = "",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    default_name = creator_name_from_handle(creator_handle_from_url(substack_url)) or "Creator"
    creator_name = author_from_feed_title(feed.feed_info.title, default_name)

    all_text = " ".join(f"{p.title} {p.content or ''}" for p in feed.posts).lower()
    topics = extract_topics(all_text)

    return {
        "creator_name": creator_name,
        "post_titles": [p.title for p in feed.posts[:10]],
        "post_topics": topics,
        "additional_restrictions": additional_restrictions or DEFAULT_RESTRICTIONS,
        "creator_domain_expertise": infer_expertise(topics),
        "creator_background": (
            f"Content creator and writer sharing insights about {' and '.join(topics[:2])}."
        ),
        "substack_rss_url": f"{substack_url.rstrip('/')}/feed",
        "substack_url": substack_url,
        "workflow_variables": workflow_variables or DEFAULT_WORKFLOW_VARIABLES,
        "time_of_day": time_of_day(now),
        "user_status": "new",
        "user_emotional_state": "neutral",
    }
