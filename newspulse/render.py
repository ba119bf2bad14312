"""Rendering utilities for the dashboard."""
from __future__ import annotations

from datetime import datetime
from html import escape

from .hotness import get_why_its_hot
from .models import Dashboard, HotnessLevel, Story, Topic
from .topics import get_topic_size_class
from .utils import format_number, format_relative_time, truncate_sentence

SOURCE_LABELS = {
    "top": "Hacker News - Top Stories",
    "best": "Hacker News - Best Stories",
    "new": "Hacker News - New Stories",
    "ask": "Hacker News - Ask HN",
    "show": "Hacker News - Show HN",
    "job": "Hacker News - Jobs",
    "newsapi": "NewsAPI - Top Headlines",
}

_MAX_DESCRIPTION_CHARS = 240
_SIZE_EM = {"xs": 0.8, "sm": 0.95, "md": 1.1, "lg": 1.35, "xl": 1.6}


def source_label(source: str) -> str:
    return SOURCE_LABELS.get(source, "Unknown Source")


def _format_updated(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M %Z").strip()


def _story_meta(story: Story, now: datetime) -> list[str]:
    parts: list[str] = []
    if story.points is not None:
        parts.append(f"{format_number(story.points)} points")
    if story.comment_count is not None:
        parts.append(f"{format_number(story.comment_count)} comments")
    parts.append(f"by {story.author or 'Unknown'}")
    relative = format_relative_time(story.timestamp, now)
    if relative:
        parts.append(relative)
    return parts


def _topic_cloud(topics: list[Topic]) -> list[tuple[Topic, str]]:
    if not topics:
        return []
    max_weight = max(topic.weight for topic in topics)
    return [(topic, get_topic_size_class(topic.weight, max_weight).value) for topic in topics]


def _stats_line(dashboard: Dashboard) -> str:
    stats = dashboard.stats
    parts = [
        f"{stats.total} stories",
        dashboard.source_label,
        f"Updated {_format_updated(dashboard.generated_at)}",
    ]
    if dashboard.source != "newsapi":
        parts.append(f"Sort: {dashboard.sort_by}")
    if dashboard.summaries_enabled and dashboard.model:
        parts.append(f"AI: {dashboard.model}")
    return " · ".join(parts)


def _heat_line(dashboard: Dashboard) -> str | None:
    counts = dashboard.stats.level_counts
    hot_total = counts.get(HotnessLevel.FIRE.value, 0) + counts.get(HotnessLevel.HOT.value, 0)
    if not any(counts.values()):
        return None
    return (
        f"🔥 {hot_total} hot · 📈 {counts.get(HotnessLevel.WARM.value, 0)} warming · "
        f"💬 {dashboard.stats.discussed} discussed · avg {dashboard.stats.mean_velocity} pts/hr"
    )


def render_markdown(dashboard: Dashboard) -> str:
    """Render the dashboard to Markdown."""

    now = dashboard.generated_at
    lines: list[str] = [f"# {dashboard.source_label}", f"_{_stats_line(dashboard)}_"]

    heat = _heat_line(dashboard)
    if heat:
        lines.append(heat)
    for note in dashboard.notes:
        lines.append(f"> {note}")

    filters: list[str] = []
    if dashboard.query:
        filters.append(f"search “{dashboard.query}”")
    if dashboard.time_window != "all":
        filters.append(f"last {dashboard.time_window}")
    if filters:
        lines.append(f"Filtered by {', '.join(filters)}")

    lines.append("")
    lines.append("## Stories")
    if not dashboard.stories:
        lines.append("*No stories found. Try a different source or adjust the filters.*")

    for story in dashboard.stories:
        title = f"[{story.title}]({story.url})" if story.url else story.title
        heading = f"{story.rank}. {title}"
        if story.domain:
            heading += f" ({story.domain})"
        lines.append("")
        lines.append(f"### {heading}")
        why = get_why_its_hot(story)
        if why:
            lines.append(f"**{why}**")
        lines.append(" · ".join(_story_meta(story, now)))
        if story.ai_summary:
            lines.append(f"> ✨ {story.ai_summary}")
        elif story.description:
            lines.append(truncate_sentence(story.description, _MAX_DESCRIPTION_CHARS))
        if story.comments_url:
            lines.append(f"[Discussion]({story.comments_url})")

    if dashboard.remaining:
        lines.append("")
        lines.append(f"_… {dashboard.remaining} more stories not shown_")

    cloud = _topic_cloud(dashboard.topics)
    lines.append("")
    lines.append("## Trending Topics")
    if cloud:
        for topic, size in cloud:
            tech = " 🛠" if topic.is_tech else ""
            lines.append(f"- **{topic.word}**{tech} · {topic.count} stories · weight {topic.weight} · {size}")
    else:
        lines.append("*Not enough overlap between stories to surface topics.*")

    return "\n".join(lines).strip() + "\n"


def render_html(dashboard: Dashboard) -> str:
    """Render the dashboard to a standalone HTML document."""

    now = dashboard.generated_at
    head_css = (
        "body{font-family:'Segoe UI',Arial,sans-serif;margin:0;background:var(--bg);color:var(--fg);}"
        "main{display:flex;gap:2rem;max-width:1100px;margin:0 auto;padding:2rem;}"
        "section.stories{flex:3;}aside.topics{flex:1;}"
        "article{border-bottom:1px solid var(--border);padding:.8rem 0;}"
        "article h3{margin:0 0 .3rem 0;font-size:1.05rem;}"
        ".rank{color:var(--muted);margin-right:.4rem;}.domain{color:var(--muted);font-size:.85em;}"
        ".why{display:inline-block;border:1px solid var(--border);padding:.1rem .4rem;border-radius:.5rem;font-size:.85rem;}"
        ".hot-fire,.hot-hot{border-color:#e25822;}.hot-warm{border-color:#e2a822;}"
        "p.meta{font-size:.9rem;color:var(--muted);margin:.2rem 0;}"
        "p.summary{font-style:italic;}"
        ".topic{display:inline-block;margin:.2rem .4rem;}.topic.tech{color:var(--accent);}"
        "@media (prefers-color-scheme: dark){:root{--bg:#111;--fg:#f4f4f4;--accent:#9cc0ff;--border:#333;--muted:#bbb;}}"
        "@media (prefers-color-scheme: light){:root{--bg:#ffffff;--fg:#222;--accent:#3050a0;--border:#ddd;--muted:#666;}}"
    )

    parts: list[str] = [
        "<!DOCTYPE html>",
        "<html lang=\"en\">",
        "<head>",
        "  <meta charset=\"utf-8\">",
        f"  <title>{escape(dashboard.source_label)}</title>",
        f"  <style>{head_css}</style>",
        "</head>",
        "<body>",
        f"  <header><h1>{escape(dashboard.source_label)}</h1>",
        f"  <p class=\"meta stats\">{escape(_stats_line(dashboard))}</p>",
    ]
    heat = _heat_line(dashboard)
    if heat:
        parts.append(f"  <p class=\"meta heat\">{escape(heat)}</p>")
    for note in dashboard.notes:
        parts.append(f"  <p class=\"note\">{escape(note)}</p>")
    parts.extend(["  </header>", "  <main>", "    <section class=\"stories\">"])

    if not dashboard.stories:
        parts.append("      <p class=\"empty\">No stories found.</p>")

    for story in dashboard.stories:
        level = story.hotness.level.value if story.hotness is not None else "none"
        title = escape(story.title)
        if story.url:
            title = f"<a href=\"{escape(story.url)}\">{title}</a>"
        parts.append(f"      <article class=\"story\" id=\"story-{escape(str(story.id))}\">")
        domain = f" <span class=\"domain\">({escape(story.domain)})</span>" if story.domain else ""
        parts.append(f"        <h3><span class=\"rank\">{story.rank}.</span>{title}{domain}</h3>")
        why = get_why_its_hot(story)
        if why:
            parts.append(f"        <span class=\"why hot-{level}\">{escape(why)}</span>")
        parts.append(f"        <p class=\"meta\">{escape(' · '.join(_story_meta(story, now)))}</p>")
        if story.ai_summary:
            parts.append(f"        <p class=\"summary\">✨ {escape(story.ai_summary)}</p>")
        elif story.description:
            parts.append(f"        <p>{escape(truncate_sentence(story.description, _MAX_DESCRIPTION_CHARS))}</p>")
        if story.comments_url:
            parts.append(f"        <p class=\"meta\"><a href=\"{escape(story.comments_url)}\">Discussion</a></p>")
        parts.append("      </article>")

    if dashboard.remaining:
        parts.append(f"      <p class=\"more\">… {dashboard.remaining} more stories not shown</p>")
    parts.extend(["    </section>", "    <aside class=\"topics\">", "      <h2>Trending Topics</h2>"])

    for topic, size in _topic_cloud(dashboard.topics):
        classes = f"topic topic-{size}" + (" tech" if topic.is_tech else "")
        parts.append(
            f"      <span class=\"{classes}\" style=\"font-size:{_SIZE_EM[size]}em\" "
            f"title=\"{topic.count} stories\">{escape(topic.word)}</span>"
        )

    parts.extend(["    </aside>", "  </main>", "</body>", "</html>"])
    return "\n".join(parts)


def _story_payload(story: Story) -> dict:
    return {
        "id": story.id,
        "rank": story.rank,
        "title": story.title,
        "url": story.url,
        "domain": story.domain,
        "author": story.author,
        "source": story.source,
        "points": story.points,
        "comment_count": story.comment_count,
        "timestamp": story.timestamp.isoformat() if story.timestamp else None,
        "comments_url": story.comments_url,
        "hotness": (
            {
                "score": story.hotness.score,
                "velocity": story.hotness.velocity,
                "level": story.hotness.level.value,
                "reason": story.hotness.reason,
                "hours_old": story.hotness.hours_old,
            }
            if story.hotness is not None
            else None
        ),
        "discussion": (
            {"level": story.discussion.level.value, "reason": story.discussion.reason}
            if story.discussion is not None
            else None
        ),
        "why_its_hot": get_why_its_hot(story),
        "ai_summary": story.ai_summary,
    }


def render_json(dashboard: Dashboard) -> dict:
    """Return a JSON-serialisable representation of the dashboard."""

    return {
        "source": dashboard.source,
        "source_label": dashboard.source_label,
        "generated_at": dashboard.generated_at.isoformat(),
        "sort_by": dashboard.sort_by,
        "query": dashboard.query,
        "time_window": dashboard.time_window,
        "model": dashboard.model if dashboard.summaries_enabled else None,
        "stats": {
            "total": dashboard.stats.total,
            "levels": dashboard.stats.level_counts,
            "discussed": dashboard.stats.discussed,
            "mean_velocity": dashboard.stats.mean_velocity,
            "hottest_id": dashboard.stats.hottest_id,
        },
        "stories": [_story_payload(story) for story in dashboard.stories],
        "remaining": dashboard.remaining,
        "topics": [
            {
                "word": topic.word,
                "count": topic.count,
                "weight": topic.weight,
                "is_tech": topic.is_tech,
                "size": size,
            }
            for topic, size in _topic_cloud(dashboard.topics)
        ],
        "notes": list(dashboard.notes),
    }
