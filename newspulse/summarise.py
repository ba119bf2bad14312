"""AI story summaries using Ollama chat."""
from __future__ import annotations

import json
import re
from typing import Any, Sequence

from ollama import Client, chat

from .config import AppConfig
from .models import Story
from .prompts import (
    BATCH_SYSTEM_PROMPT,
    BATCH_USER_TEMPLATE,
    DETAILED_SYSTEM_PROMPT,
    DETAILED_USER_TEMPLATE,
    SHORT_SYSTEM_PROMPT,
    SHORT_USER_TEMPLATE,
)
from .utils import normalise_spaces, strip_code_fences

_JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")
_THINK_BLOCK_PATTERN = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)

SHORT_MAX_TOKENS = 100
DETAILED_MAX_TOKENS = 200
BATCH_MAX_TOKENS = 800
TEMPERATURE = 0.7


def _extract_message_content(response: Any) -> str:
    """Safely extract assistant content from an Ollama chat response."""

    if hasattr(response, "message"):
        message = getattr(response, "message")
        if message is not None:
            content = getattr(message, "content", None)
            if content:
                return content
            if isinstance(message, dict):
                content = message.get("content")
                if content:
                    return content
    if isinstance(response, dict):
        message = response.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if content:
                return content
        content = response.get("content")
        if content:
            return content
    return ""


def _clean_reply(text: str) -> str:
    without_thinking = _THINK_BLOCK_PATTERN.sub("", text or "")
    return strip_code_fences(without_thinking).strip()


def _story_source(story: Story) -> str:
    return story.domain or "Hacker News"


def _chat_function(cfg: AppConfig):
    """Use an authenticated client when an API key is configured, else the default host."""
    if cfg.ollama_api_key:
        return Client(headers={"Authorization": f"Bearer {cfg.ollama_api_key}"}).chat
    return chat


def _chat(cfg: AppConfig, system: str, user: str, max_tokens: int) -> str:
    response = _chat_function(cfg)(
        model=cfg.model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        options={"num_predict": max_tokens, "temperature": TEMPERATURE},
    )
    return _clean_reply(_extract_message_content(response))


def summarise_story(story: Story, cfg: AppConfig, logger, detailed: bool = False) -> str | None:
    """Summarise one story in one or two sentences, or three to four when ``detailed``."""

    system = DETAILED_SYSTEM_PROMPT if detailed else SHORT_SYSTEM_PROMPT
    template = DETAILED_USER_TEMPLATE if detailed else SHORT_USER_TEMPLATE
    user = template.format(
        title=story.title,
        source=_story_source(story),
        points=story.points,
        comments=story.comment_count,
    )

    logger.debug("Summarising story %s (detailed=%s)", story.id, detailed)
    try:
        text = _chat(cfg, system, user, DETAILED_MAX_TOKENS if detailed else SHORT_MAX_TOKENS)
    except Exception as exc:
        logger.error("Summary request failed for story %s: %s", story.id, exc)
        raise

    return normalise_spaces(text) or None


def _story_list(stories: Sequence[Story]) -> str:
    return "\n".join(
        f'{idx}. "{story.title}" ({story.points} pts)' for idx, story in enumerate(stories, start=1)
    )


def _parse_batch_summaries(content: str, stories: Sequence[Story], logger) -> dict[str, str]:
    """Map the model's ``[{index, summary}]`` reply back onto story IDs."""

    summaries: dict[str, str] = {}
    match = _JSON_ARRAY_PATTERN.search(content or "")
    if not match:
        logger.warning("Batch summary reply contained no JSON array")
        return summaries

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse batch summaries: %s", exc)
        return summaries

    if not isinstance(parsed, list):
        return summaries

    for entry in parsed:
        if not isinstance(entry, dict):
            continue
        index = entry.get("index")
        summary = entry.get("summary")
        if not isinstance(index, int) or not isinstance(summary, str):
            continue
        if not 1 <= index <= len(stories):
            logger.debug("Ignoring summary for out-of-range index %s", index)
            continue
        text = normalise_spaces(summary)
        if text:
            summaries[str(stories[index - 1].id)] = text
    return summaries


def summarise_stories(
    stories: Sequence[Story],
    cfg: AppConfig,
    logger,
    limit: int | None = None,
) -> dict[str, str]:
    """Summarise the leading stories in a single request.

    Returns a mapping of story ID (as a string) to its one-sentence summary.
    """

    top_stories = list(stories[: limit if limit is not None else cfg.summary_limit])
    if not top_stories:
        return {}

    logger.info("Requesting AI summaries for %s stories with %s …", len(top_stories), cfg.model)
    user = BATCH_USER_TEMPLATE.format(story_list=_story_list(top_stories))
    try:
        content = _chat(cfg, BATCH_SYSTEM_PROMPT, user, BATCH_MAX_TOKENS)
    except Exception as exc:
        logger.error("Batch summary request failed: %s", exc)
        raise

    summaries = _parse_batch_summaries(content, top_stories, logger)
    logger.info("Received %s AI summaries", len(summaries))
    return summaries
