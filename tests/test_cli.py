import json
from dataclasses import replace
from datetime import timedelta

from newspulse import cli
from newspulse.errors import FeedError
from newspulse.feed import FeedOptions
from newspulse.hotness import annotate_story
from newspulse.models import Story
from newspulse.render import render_markdown


def hn_batch(now) -> list[Story]:
    raw = [
        (1, "Rust is great", 100, 20, 5),
        (2, "Why Rust wins", 50, 120, 1),
        (3, "Learning Python", 10, 2, 3),
    ]
    return [
        annotate_story(
            Story(id=idx, title=title, points=points, comment_count=comments, rank=idx, timestamp=now - timedelta(hours=age)),
            now=now,
        )
        for idx, title, points, comments, age in raw
    ]


def test_build_dashboard_sorts_filters_and_extracts_topics(cfg, logger, now):
    options = FeedOptions(sort_by="velocity", display_count=2)
    dashboard = cli.build_dashboard("top", hn_batch(now), cfg, logger, options, now=now)

    assert [story.id for story in dashboard.stories] == [2, 1]
    assert [story.rank for story in dashboard.stories] == [1, 2]
    assert dashboard.remaining == 1
    assert [topic.word for topic in dashboard.topics] == ["rust"]
    assert dashboard.stats.total == 3
    assert dashboard.summaries_enabled is False


def test_build_dashboard_attaches_summaries(monkeypatch, cfg, logger, now):
    monkeypatch.setattr(cli, "summarise_stories", lambda stories, cfg, logger: {"1": "Summary one."})
    dashboard = cli.build_dashboard("top", hn_batch(now), replace(cfg, ai_enabled=True), logger, FeedOptions(), now=now)

    summaries = {story.id: story.ai_summary for story in dashboard.stories}
    assert summaries == {1: "Summary one.", 2: None, 3: None}
    assert dashboard.summaries_enabled is True


def test_build_dashboard_survives_summary_failure(monkeypatch, cfg, logger, now):
    def failing(stories, cfg, logger):
        raise ConnectionError("ollama down")

    monkeypatch.setattr(cli, "summarise_stories", failing)
    dashboard = cli.build_dashboard("top", hn_batch(now), replace(cfg, ai_enabled=True), logger, FeedOptions(), now=now)

    assert dashboard.notes == ["AI summaries unavailable for this run."]
    assert all(story.ai_summary is None for story in dashboard.stories)


def test_headlines_ignore_velocity_sort(cfg, logger, now):
    headlines = [Story(id=f"newsapi-{idx}", title=f"Headline {idx}", rank=idx) for idx in (1, 2)]
    dashboard = cli.build_dashboard("newsapi", headlines, cfg, logger, FeedOptions(sort_by="velocity"), now=now)
    assert dashboard.sort_by == "rank"
    assert [story.id for story in dashboard.stories] == ["newsapi-1", "newsapi-2"]


def test_main_writes_json_output(monkeypatch, tmp_path, now):
    monkeypatch.setattr(cli, "load_stories", lambda source, cfg, logger: hn_batch(now))
    out_path = tmp_path / "dash" / "pulse.json"

    exit_code = cli.main(["--source", "best", "--no-ai", "--format", "json", "--out", str(out_path)])

    assert exit_code == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["source_label"] == "Hacker News - Best Stories"
    assert [story["id"] for story in payload["stories"]] == [1, 2, 3]
    assert payload["topics"][0]["word"] == "rust"


def test_main_returns_error_when_feed_fails(monkeypatch):
    def failing(source, cfg, logger):
        raise FeedError("newsapi", "NEWS_API_KEY is not configured")

    monkeypatch.setattr(cli, "load_stories", failing)
    assert cli.main(["--source", "newsapi", "--no-ai"]) == 1


def test_parser_ai_flags_default_to_config():
    parser = cli.build_parser()
    assert parser.parse_args([]).ai is None
    assert parser.parse_args(["--ai"]).ai is True
    assert parser.parse_args(["--no-ai"]).ai is False


def test_detail_replaces_short_summary_in_rendered_story(monkeypatch, cfg, logger, now):
    calls = []

    def fake_detail(story, cfg, logger, detailed=False):
        calls.append((story.id, detailed))
        return "A longer look at why Rust keeps winning converts."

    monkeypatch.setattr(cli, "summarise_stories", lambda stories, cfg, logger: {"2": "Short take."})
    monkeypatch.setattr(cli, "summarise_story", fake_detail)
    dashboard = cli.build_dashboard(
        "top", hn_batch(now), replace(cfg, ai_enabled=True), logger, FeedOptions(), now=now, detail_id="2"
    )

    assert calls == [(2, True)]
    summaries = {story.id: story.ai_summary for story in dashboard.stories}
    assert summaries[2] == "A longer look at why Rust keeps winning converts."
    assert "> ✨ A longer look at why Rust keeps winning converts." in render_markdown(dashboard)
    assert "Short take." not in render_markdown(dashboard)


def test_detail_for_unknown_story_adds_note(monkeypatch, cfg, logger, now):
    monkeypatch.setattr(cli, "summarise_story", lambda *args, **kwargs: "unused")
    dashboard = cli.build_dashboard("top", hn_batch(now), cfg, logger, FeedOptions(), now=now, detail_id="99")

    assert dashboard.notes == ["Story 99 was not loaded, so no detailed summary was requested."]
    assert all(story.ai_summary is None for story in dashboard.stories)


def test_parser_accepts_sources_and_detail():
    args = cli.build_parser().parse_args(["--source", "newsapi", "--sources", "bbc-news", "--detail", "42"])
    assert args.sources == "bbc-news"
    assert args.detail == "42"
