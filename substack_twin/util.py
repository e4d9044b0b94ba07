"""Shared utilities: logging setup, saved-result I/O, document file names."""

import json
import logging
import re
import sys
import unicodedata
from pathlib import Path

from substack_twin.config import log_level


def setup_logging() -> None:
    """Log to stderr so stdout stays reserved for JSON output."""
    logging.basicConfig(
        level=getattr(logging, log_level(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def save_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)


def load_extraction_data(path: Path) -> dict:
    """Return the profile dict from a file written by ``scrape --output``.

    Accepts either the full result envelope or a bare profile object.
    """
    if not path.exists():
        raise ValueError(f"No such file: {path}")
    with path.open("r", encoding="utf-8") as f:
        saved = json.load(f)
    if not isinstance(saved, dict):
        raise ValueError(f"Not an extraction result: {path}")
    data = saved.get("data") if "success" in saved else saved
    if not isinstance(data, dict):
        raise ValueError("Extraction result has no data")
    return data


def slugify(text: str, max_len: int = 80) -> str:
    # Fold accents so "Café" becomes "cafe" rather than "caf".
    text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9\s-]", "", text.lower().strip())
    text = re.sub(r"[\s-]+", "-", text)
    return text[:max_len].strip("-") or "untitled"


def article_filename(index: int, title: str) -> str:
    return f"{index:02d}-{slugify(title)}.txt"
