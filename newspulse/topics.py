"""Trending keyword extraction across a batch of story titles."""
from __future__ import annotations

import math
import re
from typing import Iterable, Sequence

from .models import SizeClass, Story, Topic
from .utils import round_half_up

DEFAULT_TOPIC_LIMIT = 15
MIN_STORIES_PER_TOPIC = 2
MIN_WORD_LENGTH = 2
MAX_WORD_LENGTH = 20
TECH_BONUS = 1.5

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "is", "it", "as", "be", "was", "are",
        "been", "being", "have", "has", "had", "do", "does", "did", "will",
        "would", "could", "should", "may", "might", "must", "shall", "can",
        "this", "that", "these", "those", "i", "you", "he", "she", "we",
        "they", "what", "which", "who", "whom", "when", "where", "why", "how",
        "all", "each", "every", "both", "few", "more", "most", "other", "some",
        "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
        "very", "just", "about", "into", "through", "during", "before", "after",
        "above", "below", "between", "under", "again", "further", "then", "once",
        "here", "there", "any", "my", "your", "its", "our", "their", "out", "up",
        "down", "off", "over", "now", "new", "also", "get", "got", "getting",
        "show", "ask", "hn", "via", "using", "use", "used", "make", "made",
        "video", "pdf", "im", "i'm", "dont", "don't", "cant",
        "can't", "wont", "won't", "like", "need", "want", "way", "one", "two",
        "first", "last", "year", "years", "day", "days", "time", "still",
    }
)

TECH_KEYWORDS = frozenset(
    {
        "ai", "ml", "gpt", "llm", "openai", "chatgpt", "claude", "gemini",
        "rust", "python", "javascript", "typescript", "golang", "swift",
        "react", "vue", "angular", "node", "deno", "bun",
        "linux", "windows", "macos", "android", "ios",
        "aws", "azure", "gcp", "cloud", "kubernetes", "docker",
        "blockchain", "crypto", "bitcoin", "ethereum", "web3",
        "startup", "vc", "funding", "ipo", "acquisition",
        "apple", "google", "microsoft", "meta", "amazon", "nvidia", "tesla",
        "security", "privacy", "hack", "breach", "vulnerability",
        "opensource", "github", "gitlab",
        "database", "sql", "postgres", "mongodb", "redis",
        "api", "sdk", "framework", "library",
    }
)

# Lower bounds of each size class as a fraction of the heaviest topic.
SIZE_BREAKPOINTS: tuple[tuple[float, SizeClass], ...] = (
    (0.8, SizeClass.XL),
    (0.6, SizeClass.LG),
    (0.4, SizeClass.MD),
    (0.2, SizeClass.SM),
)

_NON_WORD_PATTERN = re.compile(r"[^\w\s-]", re.ASCII)
_DIGITS_PATTERN = re.compile(r"^\d+$", re.ASCII)


def _keep_token(token: str) -> bool:
    return (
        MIN_WORD_LENGTH <= len(token) <= MAX_WORD_LENGTH
        and token not in STOP_WORDS
        and not _DIGITS_PATTERN.match(token)
    )


def tokenize_title(title: str) -> list[str]:
    """Lowercase a title and return its candidate keywords in order."""
    if not title:
        return []
    cleaned = _NON_WORD_PATTERN.sub(" ", title.lower())
    return [token for token in cleaned.split() if _keep_token(token)]


def topic_weight(count: int, avg_points: float, is_tech: bool) -> float:
    """Frequency weighted by log-dampened average points, with a tech bonus."""
    bonus = TECH_BONUS if is_tech else 1
    return count * (1 + math.log10(max(avg_points, 1))) * bonus


def _accumulate(stories: Iterable[Story]) -> dict[str, list[float]]:
    # word -> [story count, summed points]; dicts keep first-seen order.
    totals: dict[str, list[float]] = {}
    for story in stories:
        if not story.title:
            continue
        for word in dict.fromkeys(tokenize_title(story.title)):
            entry = totals.setdefault(word, [0, 0])
            entry[0] += 1
            entry[1] += story.points or 0
    return totals


def extract_trending_topics(stories: Sequence[Story], limit: int = DEFAULT_TOPIC_LIMIT) -> list[Topic]:
    """Rank keywords shared by at least two stories.

    Each story contributes a word once however often its title repeats it.
    Ties on weight keep the order in which words were first seen.
    """

    ranked: list[tuple[float, str, int, bool]] = []
    for word, (count, points) in _accumulate(stories).items():
        if count < MIN_STORIES_PER_TOPIC:
            continue
        is_tech = word in TECH_KEYWORDS
        weight = topic_weight(int(count), points / count, is_tech)
        ranked.append((weight, word, int(count), is_tech))

    ranked.sort(key=lambda item: item[0], reverse=True)

    return [
        Topic(word=word, count=count, weight=round_half_up(weight, 1), is_tech=is_tech)
        for weight, word, count, is_tech in ranked[: max(limit, 0)]
    ]


def get_topic_size_class(weight: float, max_weight: float) -> SizeClass:
    """Bucket a topic's weight relative to the heaviest topic for display."""
    if max_weight <= 0:
        return SizeClass.XS
    ratio = weight / max_weight
    for lower_bound, size in SIZE_BREAKPOINTS:
        if ratio >= lower_bound:
            return size
    return SizeClass.XS
