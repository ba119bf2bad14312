"""Fetch and normalise stories from the Hacker News Firebase API."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any

import requests

from .config import AppConfig
from .errors import FeedError
from .hotness import annotate_story
from .models import Story
from .utils import domain_of, from_unix

HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
HN_ITEM_PAGE = "https://news.ycombinator.com/item?id={id}"
HN_HEADERS = {"User-Agent": "news-pulse/0.1 (+https://github.com/HackerNews/API)"}

STORY_TYPES = ("top", "new", "best", "ask", "show", "job")


def fetch_story_ids(story_type: str, cfg: AppConfig, logger) -> list[int]:
    """Return the ranked story IDs for one of the Hacker News lists."""
    if story_type not in STORY_TYPES:
        raise ValueError(f"Unknown story type '{story_type}'")

    endpoint = f"{HN_API_BASE}/{story_type}stories.json"
    try:
        response = requests.get(endpoint, headers=HN_HEADERS, timeout=cfg.http_timeout)
        response.raise_for_status()
        ids = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Failed to fetch %s story IDs: %s", story_type, exc)
        raise FeedError("hackernews", f"could not load {story_type} stories") from exc

    if not isinstance(ids, list):
        raise FeedError("hackernews", f"unexpected payload for {story_type} stories")
    return [item for item in ids if isinstance(item, int)]


def fetch_story_details(story_id: int, cfg: AppConfig, logger) -> dict[str, Any] | None:
    """Fetch a single item; failures are logged and give ``None``."""
    try:
        response = requests.get(f"{HN_API_BASE}/item/{story_id}.json", headers=HN_HEADERS, timeout=cfg.http_timeout)
        response.raise_for_status()
        item = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Failed to fetch story %s: %s", story_id, exc)
        return None
    return item if isinstance(item, dict) else None


def format_story(item: dict[str, Any], rank: int, now: datetime | None = None) -> Story:
    """Normalise a raw item into a ranked, annotated :class:`Story`."""
    story_id = item.get("id")
    comments_url = HN_ITEM_PAGE.format(id=story_id)
    url = item.get("url") or comments_url

    story = Story(
        id=story_id,
        title=item.get("title") or "Untitled",
        points=item.get("score") or 0,
        comment_count=item.get("descendants") or 0,
        timestamp=from_unix(item.get("time")),
        rank=rank,
        url=url,
        domain=domain_of(item.get("url")),
        author=item.get("by") or "anonymous",
        source="Hacker News",
        is_hacker_news=True,
        comments_url=comments_url,
    )
    return annotate_story(story, now)


def fetch_stories(
    story_type: str,
    cfg: AppConfig,
    logger,
    limit: int | None = None,
    now: datetime | None = None,
) -> list[Story]:
    """Fetch up to ``limit`` stories of a type, fanning detail requests out in parallel.

    Stories whose detail request fails, or which are not of type ``story``,
    are dropped; the rest keep the list order and are ranked from 1.
    """

    ids = fetch_story_ids(story_type, cfg, logger)
    selected = ids[: limit if limit is not None else cfg.story_limit]
    if not selected:
        logger.warning("No %s story IDs returned", story_type)
        return []

    logger.info("Fetching %s %s stories …", len(selected), story_type)
    with ThreadPoolExecutor(max_workers=min(cfg.fetch_workers, len(selected))) as executor:
        items = list(executor.map(lambda story_id: fetch_story_details(story_id, cfg, logger), selected))

    kept = [item for item in items if item is not None and item.get("type") == "story"]
    dropped = len(selected) - len(kept)
    if dropped:
        logger.debug("Dropped %s of %s %s items", dropped, len(selected), story_type)

    stories = [format_story(item, rank, now) for rank, item in enumerate(kept, start=1)]
    logger.info("Fetched %s %s stories", len(stories), story_type)
    return stories
