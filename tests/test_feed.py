from datetime import timedelta

from newspulse.feed import FeedOptions, build_view, filter_by_query, filter_by_time, paginate, sort_stories
from newspulse.models import HotnessLevel, HotnessResult, Story


def make_story(idx, title, velocity=None, age_hours=None, now=None, domain="", author=""):
    hotness = None
    if velocity is not None:
        hotness = HotnessResult(score=velocity, velocity=velocity, level=HotnessLevel.WARM, reason=None, hours_old=1)
    timestamp = now - timedelta(hours=age_hours) if age_hours is not None else None
    return Story(id=idx, title=title, rank=idx, points=10, hotness=hotness, timestamp=timestamp, domain=domain, author=author)


def test_filter_by_query_matches_title_domain_and_author():
    stories = [
        make_story(1, "Postgres internals"),
        make_story(2, "Unrelated", domain="postgresql.org"),
        make_story(3, "Other", author="PostgresFan"),
        make_story(4, "Nothing here"),
    ]
    assert [s.id for s in filter_by_query(stories, "POSTGRES")] == [1, 2, 3]
    assert filter_by_query(stories, "  ") == stories


def test_filter_by_time_windows(now):
    stories = [
        make_story(1, "fresh", age_hours=0.5, now=now),
        make_story(2, "today", age_hours=5, now=now),
        make_story(3, "week", age_hours=24 * 3, now=now),
        make_story(4, "undated"),
    ]
    assert [s.id for s in filter_by_time(stories, "1h", now)] == [1]
    assert [s.id for s in filter_by_time(stories, "24h", now)] == [1, 2]
    assert [s.id for s in filter_by_time(stories, "7d", now)] == [1, 2, 3]
    assert filter_by_time(stories, "all", now) == stories


def test_sort_by_velocity_reranks_and_keeps_ties_stable():
    stories = [
        make_story(1, "slow", velocity=2),
        make_story(2, "fast", velocity=40),
        make_story(3, "none"),
        make_story(4, "also slow", velocity=2),
    ]
    ordered = sort_stories(stories, "velocity")
    assert [s.id for s in ordered] == [2, 1, 4, 3]
    assert [s.rank for s in ordered] == [1, 2, 3, 4]
    assert stories[1].rank == 2
    assert sort_stories(stories, "rank") == stories


def test_paginate_reports_remaining():
    stories = [make_story(idx, f"s{idx}") for idx in range(1, 13)]
    visible, remaining = paginate(stories, 10)
    assert len(visible) == 10
    assert remaining == 2
    assert paginate(stories, 20) == (stories, 0)


def test_build_view_runs_every_step(now):
    stories = [
        make_story(1, "rust one", velocity=5, age_hours=1, now=now),
        make_story(2, "rust two", velocity=50, age_hours=2, now=now),
        make_story(3, "rust old", velocity=500, age_hours=48, now=now),
        make_story(4, "python", velocity=80, age_hours=1, now=now),
    ]
    options = FeedOptions(query="rust", time_window="24h", sort_by="velocity", display_count=1)
    filtered, visible, remaining = build_view(stories, options, now)

    assert [s.id for s in filtered] == [1, 2]
    assert [s.id for s in visible] == [2]
    assert visible[0].rank == 1
    assert remaining == 1


def test_filter_by_time_reads_naive_now_as_utc(now):
    stories = [make_story(1, "fresh", age_hours=5 / 60, now=now), make_story(2, "stale", age_hours=3, now=now)]
    naive_now = now.replace(tzinfo=None)
    assert [s.id for s in filter_by_time(stories, "1h", naive_now)] == [1]
