"""Command-line interface for news-pulse."""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from .config import OUTPUT_FORMATS, AppConfig, load_config
from .errors import FeedError
from .feed import PAGE_STEP, SORT_OPTIONS, TIME_WINDOWS, FeedOptions, build_view
from .hackernews import STORY_TYPES, fetch_stories
from .log import get_logger
from .metrics import compute_feed_stats
from .models import Dashboard, Story
from .newsapi import fetch_top_headlines
from .render import render_html, render_json, render_markdown, source_label
from .summarise import summarise_stories, summarise_story
from .topics import extract_trending_topics

SOURCES = STORY_TYPES + ("newsapi",)


def _prepare_config(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    updated = cfg
    if args.limit is not None:
        updated = replace(updated, story_limit=max(1, min(100, args.limit)))
    if args.topics is not None:
        updated = replace(updated, topic_limit=max(1, args.topics))
    if args.show is not None:
        updated = replace(updated, display_count=max(1, args.show))
    if args.category:
        updated = replace(updated, newsapi_category=args.category)
    if args.country:
        updated = replace(updated, newsapi_country=args.country)
    if args.sources:
        updated = replace(updated, newsapi_sources=args.sources)
    if args.format:
        updated = replace(updated, output_format=args.format)
    if args.ai is not None:
        updated = replace(updated, ai_enabled=args.ai)
    return updated


def load_stories(source: str, cfg: AppConfig, logger) -> list[Story]:
    if source == "newsapi":
        return fetch_top_headlines(cfg, logger)
    return fetch_stories(source, cfg, logger)


def _attach_summaries(stories: list[Story], summaries: dict[str, str]) -> list[Story]:
    return [replace(story, ai_summary=summaries.get(str(story.id))) for story in stories]


def _attach_detail(
    detail_id: str,
    stories: list[Story],
    visible: list[Story],
    cfg: AppConfig,
    logger,
    notes: list[str],
) -> list[Story]:
    """Replace one story's short summary with the longer analysis."""

    target = next((story for story in stories if str(story.id) == detail_id), None)
    if target is None:
        logger.warning("Story %s is not in the loaded batch; no detailed summary requested", detail_id)
        notes.append(f"Story {detail_id} was not loaded, so no detailed summary was requested.")
        return visible
    try:
        detail = summarise_story(target, cfg, logger, detailed=True)
    except Exception as exc:
        logger.warning("Detailed summary unavailable: %s", exc)
        notes.append("Detailed summary unavailable for this run.")
        return visible
    if not detail:
        return visible
    return [replace(story, ai_summary=detail) if str(story.id) == detail_id else story for story in visible]


def build_dashboard(
    source: str,
    stories: list[Story],
    cfg: AppConfig,
    logger,
    options: FeedOptions,
    now: datetime | None = None,
    detail_id: str | None = None,
) -> Dashboard:
    """Turn a loaded batch into the view model that the renderers consume."""

    generated_at = now or datetime.now(timezone.utc)
    if source == "newsapi" and options.sort_by != "rank":
        logger.info("Velocity sort is unavailable for headlines without engagement; keeping rank order")
        options = replace(options, sort_by="rank")

    filtered, visible, remaining = build_view(stories, options, generated_at)
    topics = extract_trending_topics(filtered, cfg.topic_limit)

    notes: list[str] = []
    summaries_enabled = False
    if cfg.ai_enabled and stories:
        try:
            summaries = summarise_stories(stories, cfg, logger)
        except Exception as exc:
            logger.warning("AI summaries unavailable: %s", exc)
            notes.append("AI summaries unavailable for this run.")
        else:
            summaries_enabled = bool(summaries)
            visible = _attach_summaries(visible, summaries)

    if detail_id:
        visible = _attach_detail(detail_id, stories, visible, cfg, logger, notes)
        summaries_enabled = summaries_enabled or any(story.ai_summary for story in visible)

    return Dashboard(
        source=source,
        source_label=source_label(source),
        generated_at=generated_at,
        stories=visible,
        remaining=remaining,
        topics=topics,
        stats=compute_feed_stats(filtered),
        sort_by=options.sort_by,
        query=options.query,
        time_window=options.time_window,
        model=cfg.model,
        summaries_enabled=summaries_enabled,
        notes=notes,
    )


def render(dashboard: Dashboard, output_format: str) -> str:
    if output_format == "html":
        return render_html(dashboard)
    if output_format == "json":
        return json.dumps(render_json(dashboard), indent=2, ensure_ascii=False) + "\n"
    return render_markdown(dashboard)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank Hacker News and NewsAPI stories by hotness and surface trending topics.")
    parser.add_argument("--source", choices=SOURCES, default="top", help="Story list to load (default: top).")
    parser.add_argument("--limit", type=int, help="Number of stories to fetch (<=100).")
    parser.add_argument("--category", help="NewsAPI category (newsapi source only).")
    parser.add_argument("--country", help="NewsAPI country code (newsapi source only).")
    parser.add_argument("--sources", help="Comma-separated NewsAPI source IDs; overrides category and country.")
    parser.add_argument("--search", default="", help="Only show stories whose title, domain or author match.")
    parser.add_argument("--time", choices=sorted(TIME_WINDOWS), default="all", help="Only show stories posted within this window.")
    parser.add_argument("--sort", choices=SORT_OPTIONS, default="rank", help="Order by source rank or by velocity.")
    parser.add_argument("--show", type=int, help=f"Number of stories to display (default {PAGE_STEP}).")
    parser.add_argument("--topics", type=int, help="Maximum trending topics to list.")
    parser.add_argument("--ai", dest="ai", action="store_true", default=None, help="Request AI summaries via Ollama.")
    parser.add_argument("--no-ai", dest="ai", action="store_false", default=None, help="Skip AI summaries.")
    parser.add_argument("--detail", metavar="STORY_ID", help="Request a longer AI analysis for one loaded story.")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, help="Output format (default from OUTPUT_FORMAT or md).")
    parser.add_argument("--out", help="Write the dashboard to this path instead of stdout.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging (DEBUG level).")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger("newspulse", verbose=args.verbose)

    cfg = _prepare_config(load_config(), args)
    options = FeedOptions(
        query=args.search,
        time_window=args.time,
        sort_by=args.sort,
        display_count=cfg.display_count,
    )

    try:
        stories = load_stories(args.source, cfg, logger)
        dashboard = build_dashboard(args.source, stories, cfg, logger, options, detail_id=args.detail)
        output = render(dashboard, cfg.output_format)

        if args.out:
            out_path = Path(args.out)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(output, encoding="utf-8")
            logger.info("Dashboard written to %s", out_path.resolve())
        else:
            sys.stdout.write(output)
        return 0
    except FeedError as exc:
        logger.error("Failed to load stories: %s", exc)
        return 1
    except Exception as exc:  # pragma: no cover - top-level safety
        logger.exception("Run failed: %s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
