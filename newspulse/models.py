"""Data models for news-pulse."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class HotnessLevel(str, Enum):
    FIRE = "fire"
    HOT = "hot"
    WARM = "warm"
    MILD = "mild"
    COLD = "cold"


class DiscussionLevel(str, Enum):
    INTENSE = "intense"
    CONTROVERSIAL = "controversial"
    ACTIVE = "active"


class SizeClass(str, Enum):
    XS = "xs"
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


@dataclass(slots=True, frozen=True)
class HotnessResult:
    score: float
    velocity: float
    level: HotnessLevel
    reason: str | None
    hours_old: float


@dataclass(slots=True, frozen=True)
class DiscussionResult:
    level: DiscussionLevel
    reason: str


@dataclass(slots=True, frozen=True)
class Topic:
    word: str
    count: int
    weight: float
    is_tech: bool


@dataclass(slots=True)
class Story:
    """A normalised story from either source.

    ``points`` and ``comment_count`` are ``None`` for sources without
    engagement metrics; hotness does not apply to those stories.
    """

    id: int | str
    title: str
    points: int | None = None
    comment_count: int | None = None
    timestamp: datetime | None = None
    rank: int = 0
    url: str | None = None
    domain: str = ""
    author: str = ""
    source: str = ""
    is_hacker_news: bool = False
    comments_url: str | None = None
    description: str | None = None
    image_url: str | None = None
    hotness: HotnessResult | None = None
    discussion: DiscussionResult | None = None
    ai_summary: str | None = None


@dataclass(slots=True)
class FeedStats:
    total: int
    level_counts: dict[str, int]
    discussed: int
    mean_velocity: float
    hottest_id: int | str | None = None


@dataclass(slots=True)
class Dashboard:
    source: str
    source_label: str
    generated_at: datetime
    stories: list[Story]
    remaining: int
    topics: list[Topic]
    stats: FeedStats
    sort_by: str = "rank"
    query: str = ""
    time_window: str = "all"
    model: str | None = None
    summaries_enabled: bool = False
    notes: list[str] = field(default_factory=list)
