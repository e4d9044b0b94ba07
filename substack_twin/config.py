"""Environment-based configuration helpers."""

import os

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def env(name: str, default: str = "") -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def env_int(name: str, default: int) -> int:
    raw = env(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def fetch_timeout() -> float:
    return float(env_int("SUBSTACK_FETCH_TIMEOUT", 15))


def user_agent() -> str:
    return env("SUBSTACK_USER_AGENT", DEFAULT_USER_AGENT)


def max_feed_items() -> int:
    return max(1, env_int("SUBSTACK_MAX_FEED_ITEMS", 15))


def log_level() -> str:
    return env("SUBSTACK_LOG_LEVEL", "INFO").upper()
