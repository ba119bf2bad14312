"""Summary statistics for a story batch."""
from __future__ import annotations

from typing import Sequence

from .models import FeedStats, HotnessLevel, Story
from .utils import round_half_up


def compute_feed_stats(stories: Sequence[Story]) -> FeedStats:
    """Count stories per hotness level and find the fastest-moving one.

    Stories without engagement metrics are counted in ``total`` only.
    """

    level_counts = {level.value: 0 for level in HotnessLevel}
    discussed = 0
    velocities: list[float] = []
    hottest: Story | None = None

    for story in stories:
        if story.discussion is not None:
            discussed += 1
        if story.hotness is None:
            continue
        level_counts[story.hotness.level.value] += 1
        velocities.append(story.hotness.velocity)
        if hottest is None or story.hotness.score > hottest.hotness.score:
            hottest = story

    mean_velocity = round_half_up(sum(velocities) / len(velocities), 1) if velocities else 0.0
    return FeedStats(
        total=len(stories),
        level_counts=level_counts,
        discussed=discussed,
        mean_velocity=mean_velocity,
        hottest_id=hottest.id if hottest is not None else None,
    )
