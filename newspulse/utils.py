"""Utility helpers for news-pulse."""
from __future__ import annotations

import math
import re
import urllib.parse
from datetime import datetime, timezone

_CODE_FENCE_PATTERN = re.compile(r"^\s*(```|~~~)[\w-]*\s*$")


def domain_of(url: str | None) -> str:
    """Extract the host from a URL without a leading ``www.`` (best-effort)."""
    if not url:
        return ""
    try:
        parsed = urllib.parse.urlsplit(url.strip())
    except ValueError:
        return ""
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` places with halves going up (``0.25`` -> ``0.3``)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def as_utc(moment: datetime) -> datetime:
    """Read a naive datetime as UTC; aware datetimes pass through."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def from_unix(seconds: int | float | None) -> datetime | None:
    """Convert a unix timestamp in seconds to an aware UTC datetime."""
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError):
        return None


def parse_iso_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp such as ``2024-05-30T12:00:00Z``."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_relative_time(moment: datetime | None, now: datetime | None = None) -> str:
    """Render a past moment as a compact relative string like ``3h ago``."""
    if not isinstance(moment, datetime):
        return ""
    reference = as_utc(now) if now is not None else datetime.now(timezone.utc)
    seconds = int((reference - as_utc(moment)).total_seconds())
    if seconds < 60:
        return "just now"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"

    days = hours // 24
    if days < 7:
        return f"{days}d ago"

    weeks = days // 7
    if weeks < 4:
        return f"{weeks}w ago"

    months = days // 30
    if months < 12:
        return f"{months}mo ago"

    return f"{days // 365}y ago"


def format_number(value: int | float | None) -> str:
    """Format a number with thousands separators; ``None`` becomes empty."""
    if value is None:
        return ""
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.1f}"
    return f"{int(value):,}"


def strip_code_fences(text: str) -> str:
    """Drop Markdown code fence lines wrapped around model output."""
    if not text:
        return ""
    lines = [line for line in text.splitlines() if not _CODE_FENCE_PATTERN.match(line)]
    return "\n".join(lines).strip()


def normalise_spaces(text: str) -> str:
    """Collapse repeated whitespace and trim surrounding spaces."""

    return re.sub(r"\s+", " ", text or "").strip()


def truncate_sentence(text: str, max_chars: int) -> str:
    """Truncate text at word boundaries, appending ellipsis if needed."""

    if max_chars <= 0:
        return ""
    clean = normalise_spaces(text)
    if len(clean) <= max_chars:
        return clean
    words = clean.split()
    acc: list[str] = []
    length = 0
    for word in words:
        pending = length + len(word) + (1 if acc else 0)
        if pending > max_chars:
            break
        acc.append(word)
        length = pending
    if not acc:
        return clean[: max_chars - 1] + "…"
    return " ".join(acc).rstrip(".,;:") + "…"
