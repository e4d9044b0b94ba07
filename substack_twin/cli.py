"""CLI entry point for the Substack profile extractor.

Usage: python -m substack_twin.cli <command> [args]

All commands output JSON to stdout; logs go to stderr.
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

from substack_twin.config import DEFAULT_USER_AGENT, fetch_timeout, log_level, max_feed_items, user_agent
from substack_twin.fetch import FEED_ACCEPT, fetch_image_bytes, fetch_text
from substack_twin.knowledge import articles_from_dicts, build_article_text, build_knowledge_base_text, safe_doc_name
from substack_twin.parse import parse_feed
from substack_twin.pipeline import extract_substack
from substack_twin.prompt import build_fallback_prompt_variables
from substack_twin.urls import format_substack_url
from substack_twin.util import article_filename, load_extraction_data, save_json, setup_logging
from substack_twin.verify import verify_ownership

# Variables from a local .env override the process environment.
load_dotenv(override=True)

PROMPT_FEED_ITEMS = 20


def _output(data: dict):
    """Print JSON to stdout."""
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


# --- Commands ---


def cmd_setup_check(args):
    _output({
        "fetch_timeout_seconds": fetch_timeout(),
        "max_feed_items": max_feed_items(),
        "custom_user_agent": user_agent() != DEFAULT_USER_AGENT,
        "log_level": log_level(),
    })


def cmd_format_url(args):
    _output({"input": args.url, "url": format_substack_url(args.url)})


def cmd_scrape(args):
    url = args.url if args.raw_url else format_substack_url(args.url)
    result = asyncio.run(extract_substack(url))
    payload = result.to_dict()

    if args.output:
        save_json(Path(args.output), payload)

    _output(payload)
    if result.is_fatal:
        sys.exit(1)


def cmd_prompt_variables(args):
    substack_url = args.substack_url.rstrip("/")
    rss_url = args.rss_url or f"{substack_url}/feed"

    feed = parse_feed(fetch_text(rss_url, FEED_ACCEPT), max_items=PROMPT_FEED_ITEMS)
    variables = build_fallback_prompt_variables(
        feed,
        substack_url,
        additional_restrictions=args.additional_restrictions,
        workflow_variables=args.workflow_variables,
    )
    _output({
        "variables": variables,
        "metadata": {
            "totalPosts": len(feed.posts),
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        },
    })


def cmd_knowledge_base(args):
    data = load_extraction_data(Path(args.input))
    articles = articles_from_dicts(data.get("articles") or [])
    if not articles:
        raise ValueError("Missing articles")

    creator = args.creator_name or data.get("author") or ""
    substack_url = data.get("substackUrl") or ""
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    if args.per_article:
        for idx, article in enumerate(articles, start=1):
            path = out_dir / article_filename(idx, article.title)
            path.write_text(build_article_text(article, creator, substack_url), encoding="utf-8")
            written.append({"name": safe_doc_name(article.title), "path": str(path)})
    else:
        path = out_dir / "substack-articles.txt"
        path.write_text(build_knowledge_base_text(articles, creator, substack_url), encoding="utf-8")
        written.append({"name": safe_doc_name(f"{creator} Substack articles"), "path": str(path)})

    _output({"documents": written, "articles_count": len(articles)})


def cmd_verify(args):
    result = verify_ownership(args.about_url, args.marker, args.verification_link)
    _output(result)
    if not result.get("verified"):
        sys.exit(1)


def cmd_fetch_image(args):
    body, content_type = fetch_image_bytes(args.url)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(body)
    _output({"path": str(out), "content_type": content_type, "size_bytes": len(body)})


# --- Argument parser ---


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="substack_twin.cli", description="Substack profile extractor")
    sub = parser.add_subparsers(dest="command", required=True)

    # setup_check
    sub.add_parser("setup_check", help="Show effective configuration")

    # format_url
    p = sub.add_parser("format_url", help="Canonicalize a Substack URL")
    p.add_argument("url")

    # scrape
    p = sub.add_parser("scrape", help="Extract posts, category and profile image")
    p.add_argument("url", help="Substack publication URL")
    p.add_argument("--raw-url", action="store_true", help="Skip Substack URL canonicalization")
    p.add_argument("--output", help="Also write the JSON result to this path")

    # prompt_variables
    p = sub.add_parser("prompt_variables", help="Derive persona prompt variables from the feed")
    p.add_argument("--substack-url", required=True)
    p.add_argument("--rss-url", default="")
    p.add_argument("--additional-restrictions", default="")
    p.add_argument("--workflow-variables", default="")

    # knowledge_base
    p = sub.add_parser("knowledge_base", help="Write knowledge-base text from a saved scrape result")
    p.add_argument("--input", required=True, help="JSON written by `scrape --output`")
    p.add_argument("--out-dir", default="output/knowledge-base")
    p.add_argument("--creator-name", default="")
    p.add_argument("--per-article", action="store_true", help="One document per article")

    # verify
    p = sub.add_parser("verify", help="Check the about page for the ownership marker")
    p.add_argument("--about-url", required=True)
    p.add_argument("--marker", required=True, help="Agent ID or twin ID")
    p.add_argument("--verification-link", default=None)

    # fetch_image
    p = sub.add_parser("fetch_image", help="Download a profile image from a Substack host")
    p.add_argument("url")
    p.add_argument("--out", required=True)

    return parser


def main(argv=None):
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "setup_check": cmd_setup_check,
        "format_url": cmd_format_url,
        "scrape": cmd_scrape,
        "prompt_variables": cmd_prompt_variables,
        "knowledge_base": cmd_knowledge_base,
        "verify": cmd_verify,
        "fetch_image": cmd_fetch_image,
    }

    try:
        commands[args.command](args)
    except Exception as e:
        _output({"error": str(e)})
        sys.exit(1)


if __name__ == "__main__":
    main()
