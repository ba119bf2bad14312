"""Configuration loading for news-pulse."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, MutableMapping

from dotenv import load_dotenv

from .log import get_logger

LOGGER = get_logger(__name__)

OUTPUT_FORMATS = ("md", "html", "json")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass
class AppConfig:
    """Runtime configuration for the dashboard."""

    news_api_key: str | None
    ollama_api_key: str | None
    model: str
    story_limit: int
    summary_limit: int
    topic_limit: int
    display_count: int
    http_timeout: float
    fetch_workers: int
    newsapi_category: str
    newsapi_country: str
    newsapi_sources: str
    output_format: str
    ai_enabled: bool


def _parse_int(env: Mapping[str, str], key: str, default: int, minimum: int = 1, maximum: int | None = None) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Invalid integer for %s, using default %s", key, default)
        return default
    if value < minimum:
        LOGGER.warning("%s below minimum (%s), clamping", key, minimum)
        value = minimum
    if maximum is not None and value > maximum:
        LOGGER.warning("%s above maximum (%s), clamping", key, maximum)
        value = maximum
    return value


def _parse_float(env: Mapping[str, str], key: str, default: float, minimum: float) -> float:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Invalid number for %s, using default %s", key, default)
        return default
    if value < minimum:
        LOGGER.warning("%s below minimum (%s), clamping", key, minimum)
        value = minimum
    return value


def _parse_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    LOGGER.warning("Invalid boolean for %s ('%s'), using default %s", key, raw, default)
    return default


def _normalise_format(fmt: str) -> str:
    fmt_lower = fmt.lower().strip()
    if fmt_lower not in OUTPUT_FORMATS:
        LOGGER.warning("Unsupported OUTPUT_FORMAT '%s', falling back to 'md'", fmt)
        return "md"
    return fmt_lower


def load_config(env: MutableMapping[str, str] | Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from environment variables.

    Parameters
    ----------
    env:
        Environment mapping to read configuration from. Defaults to ``os.environ``
        after loading a ``.env`` file if one is present.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    news_api_key = env.get("NEWS_API_KEY") or None
    if not news_api_key:
        LOGGER.debug("NEWS_API_KEY missing; the newsapi source will be unavailable")

    config = AppConfig(
        news_api_key=news_api_key,
        ollama_api_key=env.get("OLLAMA_API_KEY") or None,
        model=env.get("MODEL", "qwen3:4b"),
        story_limit=_parse_int(env, "STORY_LIMIT", default=30, minimum=1, maximum=100),
        summary_limit=_parse_int(env, "SUMMARY_LIMIT", default=10, minimum=1, maximum=30),
        topic_limit=_parse_int(env, "TOPIC_LIMIT", default=15, minimum=1, maximum=50),
        display_count=_parse_int(env, "DISPLAY_COUNT", default=10, minimum=1),
        http_timeout=_parse_float(env, "HTTP_TIMEOUT", default=10.0, minimum=1.0),
        fetch_workers=_parse_int(env, "FETCH_WORKERS", default=10, minimum=1, maximum=32),
        newsapi_category=env.get("NEWSAPI_CATEGORY", "technology"),
        newsapi_country=env.get("NEWSAPI_COUNTRY", "us"),
        newsapi_sources=env.get("NEWSAPI_SOURCES", ""),
        output_format=_normalise_format(env.get("OUTPUT_FORMAT", "md")),
        ai_enabled=_parse_bool(env, "AI_ENABLED", default=True),
    )

    LOGGER.debug("Loaded configuration: model=%s story_limit=%s", config.model, config.story_limit)
    return config
