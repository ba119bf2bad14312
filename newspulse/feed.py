"""Client-side filtering, sorting and pagination of a loaded story batch."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from .models import Story
from .utils import as_utc

PAGE_STEP = 10

TIME_WINDOWS: dict[str, timedelta | None] = {
    "all": None,
    "1h": timedelta(hours=1),
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
}

SORT_OPTIONS = ("rank", "velocity")


@dataclass
class FeedOptions:
    query: str = ""
    time_window: str = "all"
    sort_by: str = "rank"
    display_count: int = PAGE_STEP


def filter_by_query(stories: list[Story], query: str) -> list[Story]:
    """Keep stories whose title, domain or author contains ``query``."""
    needle = (query or "").strip().lower()
    if not needle:
        return stories
    return [
        story
        for story in stories
        if needle in story.title.lower()
        or needle in (story.domain or "").lower()
        or needle in (story.author or "").lower()
    ]


def filter_by_time(stories: list[Story], window: str, now: datetime | None = None) -> list[Story]:
    """Keep stories posted within the window; undated stories fall out of bounded windows."""
    span = TIME_WINDOWS.get(window)
    if span is None:
        return stories
    reference = as_utc(now) if now is not None else datetime.now(timezone.utc)
    kept: list[Story] = []
    for story in stories:
        if story.timestamp is None:
            continue
        if reference - as_utc(story.timestamp) <= span:
            kept.append(story)
    return kept


def _velocity(story: Story) -> float:
    return story.hotness.velocity if story.hotness is not None else 0


def sort_stories(stories: list[Story], sort_by: str) -> list[Story]:
    """Order by source rank, or by velocity with ranks reassigned from 1."""
    if sort_by != "velocity":
        return stories
    ordered = sorted(stories, key=_velocity, reverse=True)
    return [replace(story, rank=rank) for rank, story in enumerate(ordered, start=1)]


def paginate(stories: list[Story], display_count: int) -> tuple[list[Story], int]:
    """Return the visible slice and how many stories remain behind "load more"."""
    count = max(display_count, 0)
    return stories[:count], max(len(stories) - count, 0)


def build_view(
    stories: list[Story],
    options: FeedOptions,
    now: datetime | None = None,
) -> tuple[list[Story], list[Story], int]:
    """Apply query, time window, sort and pagination.

    Returns ``(filtered, visible, remaining)``; ``filtered`` is the full
    post-filter set that trending topics are computed from.
    """

    filtered = filter_by_query(stories, options.query)
    filtered = filter_by_time(filtered, options.time_window, now)
    ordered = sort_stories(filtered, options.sort_by)
    visible, remaining = paginate(ordered, options.display_count)
    return filtered, visible, remaining
