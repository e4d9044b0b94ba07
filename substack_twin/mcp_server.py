"""MCP server: exposes Substack profile extraction tools to MCP clients."""

from typing import List, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from substack_twin.fetch import FEED_ACCEPT, async_fetch_text
from substack_twin.knowledge import articles_from_dicts, build_knowledge_base_text
from substack_twin.parse import parse_feed
from substack_twin.pipeline import extract_substack
from substack_twin.prompt import build_fallback_prompt_variables
from substack_twin.urls import format_substack_url
from substack_twin.verify import verify_ownership

load_dotenv(override=True)

mcp = FastMCP("Substack Twin")


@mcp.tool(name="format_substack_url")
def format_url(url: str) -> str:
    """Canonicalize a Substack address (substack.com/@handle, bare handle URLs, subdomains)."""
    return format_substack_url(url)


@mcp.tool()
async def scrape_substack(url: str) -> dict:
    """Extract posts, articles, topic category and profile image for a Substack publication.

    The result carries `success`, `data` and, on failure, `error`. An `error` of
    CANNOT_CONNECT_TO_SUBSTACK with no `data` means the feed is not reachable as RSS
    and onboarding should stop.
    """
    result = await extract_substack(format_substack_url(url))
    return result.to_dict()


@mcp.tool()
async def build_prompt_variables(
    substack_url: str,
    additional_restrictions: str = "",
    workflow_variables: str = "",
) -> dict:
    """Derive voice-agent persona variables (creator name, post titles, topics) from the feed."""
    base = substack_url.rstrip("/")
    feed = parse_feed(await async_fetch_text(f"{base}/feed", FEED_ACCEPT), max_items=20)
    return build_fallback_prompt_variables(
        feed,
        base,
        additional_restrictions=additional_restrictions,
        workflow_variables=workflow_variables,
    )


@mcp.tool()
def build_knowledge_base(articles: List[dict], creator_name: str = "", substack_url: str = "") -> str:
    """Render scraped articles (title, url, content, publishedAt) into one knowledge-base document."""
    return build_knowledge_base_text(articles_from_dicts(articles), creator_name, substack_url)


@mcp.tool()
def verify_substack_ownership(about_url: str, marker: str, verification_link: Optional[str] = None) -> dict:
    """Check whether the creator placed the agent marker or link on their about page."""
    return verify_ownership(about_url, marker, verification_link)


if __name__ == "__main__":
    mcp.run()
