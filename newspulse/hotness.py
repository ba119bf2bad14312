"""Velocity-based hotness scoring and discussion intensity for stories.

A story's hotness is its points-per-hour velocity amplified for freshness:
stories under eight hours old get up to a 3x boost so early momentum shows
up before velocity has had time to accumulate. The resulting score is
bucketed into a level by fixed thresholds, and the level decides the short
"why it's hot" reason shown next to the story.
"""
from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from .models import DiscussionLevel, DiscussionResult, HotnessLevel, HotnessResult, Story
from .utils import as_utc, round_half_up

FIRE_THRESHOLD = 100
HOT_THRESHOLD = 50
WARM_THRESHOLD = 20
MILD_THRESHOLD = 5

MIN_HOURS_OLD = 0.1
MAX_RECENCY_MULTIPLIER = 3
RECENCY_DECAY_HOURS = 4
FRESH_HOURS = 2

MIN_DISCUSSION_COMMENTS = 10
INTENSE_COMMENTS = 200
CONTROVERSIAL_COMMENTS = 50
CONTROVERSY_RATIO = 2
ACTIVE_COMMENTS = 100

_SECONDS_PER_HOUR = 3600

COLD_SENTINEL = HotnessResult(score=0, velocity=0, level=HotnessLevel.COLD, reason=None, hours_old=0)

ReasonBuilder = Callable[[float, float], Optional[str]]


def _velocity_reason(icon: str) -> ReasonBuilder:
    def build(velocity: float, hours_old: float) -> str:
        return f"{icon} {int(round_half_up(velocity))} pts/hr"

    return build


def _fresh_reason(velocity: float, hours_old: float) -> str | None:
    return "🆕 Fresh" if hours_old < FRESH_HOURS else None


def _no_reason(velocity: float, hours_old: float) -> None:
    return None


# Checked top to bottom; the first threshold the score reaches wins.
HOTNESS_RULES: tuple[tuple[float, HotnessLevel, ReasonBuilder], ...] = (
    (FIRE_THRESHOLD, HotnessLevel.FIRE, _velocity_reason("🔥")),
    (HOT_THRESHOLD, HotnessLevel.HOT, _velocity_reason("🔥")),
    (WARM_THRESHOLD, HotnessLevel.WARM, _velocity_reason("📈")),
    (MILD_THRESHOLD, HotnessLevel.MILD, _fresh_reason),
    (-math.inf, HotnessLevel.COLD, _no_reason),
)


def recency_multiplier(hours_old: float) -> float:
    """Linear decay from 3x at age zero to 1x at eight hours, never below 1x."""
    return max(1, MAX_RECENCY_MULTIPLIER - hours_old / RECENCY_DECAY_HOURS)


def classify_hotness(score: float, velocity: float, hours_old: float) -> tuple[HotnessLevel, str | None]:
    """Map an unrounded score to its level and reason."""
    for threshold, level, build_reason in HOTNESS_RULES:
        if score >= threshold:
            return level, build_reason(velocity, hours_old)
    return HotnessLevel.COLD, None


def calculate_hotness(points: float | None, timestamp: datetime | None, now: datetime | None = None) -> HotnessResult:
    """Score a story by points per hour, boosted while it is fresh.

    A missing or non-datetime ``timestamp`` yields the cold sentinel rather
    than an error. Naive datetimes are read as UTC.
    """

    if not isinstance(timestamp, datetime):
        return COLD_SENTINEL

    reference = as_utc(now) if now is not None else datetime.now(timezone.utc)
    elapsed_hours = (reference - as_utc(timestamp)).total_seconds() / _SECONDS_PER_HOUR
    hours_old = max(elapsed_hours, MIN_HOURS_OLD)

    velocity = (points or 0) / hours_old
    score = velocity * recency_multiplier(hours_old)
    level, reason = classify_hotness(score, velocity, hours_old)

    return HotnessResult(
        score=round_half_up(score, 1),
        velocity=round_half_up(velocity, 1),
        level=level,
        reason=reason,
        hours_old=round_half_up(hours_old, 1),
    )


# Checked top to bottom on (comment_count, ratio); first match wins.
DISCUSSION_RULES: tuple[tuple[Callable[[int, float], bool], DiscussionLevel, Callable[[int], str]], ...] = (
    (
        lambda comments, ratio: comments >= INTENSE_COMMENTS,
        DiscussionLevel.INTENSE,
        lambda comments: f"💬 {comments} comments",
    ),
    (
        lambda comments, ratio: ratio > CONTROVERSY_RATIO and comments >= CONTROVERSIAL_COMMENTS,
        DiscussionLevel.CONTROVERSIAL,
        lambda comments: "💬 Heated debate",
    ),
    (
        lambda comments, ratio: comments >= ACTIVE_COMMENTS,
        DiscussionLevel.ACTIVE,
        lambda comments: f"💬 {comments} discussing",
    ),
)


def calculate_discussion_intensity(comment_count: int | None, points: float | None) -> DiscussionResult | None:
    """Classify how heated the comment thread is, or ``None`` if unremarkable."""

    if not comment_count or comment_count < MIN_DISCUSSION_COMMENTS:
        return None

    ratio = comment_count / points if points and points > 0 else 0
    for matches, level, build_reason in DISCUSSION_RULES:
        if matches(comment_count, ratio):
            return DiscussionResult(level=level, reason=build_reason(comment_count))
    return None


def get_why_its_hot(story: Story) -> str | None:
    """Return the single explanation shown for a story: hotness first, then discussion."""

    if story.hotness is not None and story.hotness.reason:
        return story.hotness.reason
    if story.discussion is not None and story.discussion.reason:
        return story.discussion.reason
    return None


def annotate_story(story: Story, now: datetime | None = None) -> Story:
    """Return a copy of ``story`` with hotness and discussion attached.

    Stories without engagement metrics get neither signal.
    """

    if story.points is None:
        return replace(story, hotness=None, discussion=None)
    return replace(
        story,
        hotness=calculate_hotness(story.points, story.timestamp, now),
        discussion=calculate_discussion_intensity(story.comment_count, story.points),
    )
