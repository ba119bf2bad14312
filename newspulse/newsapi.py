"""Top headlines from NewsAPI, normalised to stories without engagement."""
from __future__ import annotations

from typing import Any

import requests

from .config import AppConfig
from .errors import FeedError
from .models import Story
from .utils import domain_of, parse_iso_timestamp

NEWSAPI_URL = "https://newsapi.org/v2/top-headlines"
MAX_PAGE_SIZE = 100


def build_params(category: str = "", country: str = "", sources: str = "", page_size: int = 30) -> dict[str, str]:
    """Build query parameters; ``sources`` cannot be combined with country or category."""
    params = {"pageSize": str(max(1, min(MAX_PAGE_SIZE, page_size)))}
    if sources:
        params["sources"] = sources
    else:
        if country:
            params["country"] = country
        if category:
            params["category"] = category
    return params


def format_article(article: dict[str, Any], rank: int) -> Story:
    source_name = (article.get("source") or {}).get("name")
    url = article.get("url")
    return Story(
        id=f"newsapi-{rank}",
        title=article.get("title") or "Untitled",
        timestamp=parse_iso_timestamp(article.get("publishedAt")),
        rank=rank,
        url=url,
        domain=domain_of(url),
        author=article.get("author") or source_name or "Unknown",
        source=source_name or "Unknown",
        description=article.get("description"),
        image_url=article.get("urlToImage"),
    )


def fetch_top_headlines(
    cfg: AppConfig,
    logger,
    category: str | None = None,
    country: str | None = None,
    sources: str | None = None,
    page_size: int | None = None,
) -> list[Story]:
    """Fetch top headlines; a failed request degrades to an empty list."""
    if not cfg.news_api_key:
        raise FeedError("newsapi", "NEWS_API_KEY is not configured")

    params = build_params(
        category=cfg.newsapi_category if category is None else category,
        country=cfg.newsapi_country if country is None else country,
        sources=cfg.newsapi_sources if sources is None else sources,
        page_size=page_size or cfg.story_limit,
    )
    logger.info("Fetching NewsAPI headlines %s …", params)

    try:
        response = requests.get(
            NEWSAPI_URL,
            params=params,
            headers={"X-Api-Key": cfg.news_api_key},
            timeout=cfg.http_timeout,
        )
        data = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("NewsAPI request failed: %s", exc)
        return []

    if not isinstance(data, dict) or data.get("status") != "ok":
        message = data.get("message") if isinstance(data, dict) else None
        logger.warning("NewsAPI fetch failed (HTTP %s): %s", response.status_code, message or "unknown error")
        return []

    articles = data.get("articles") or []
    stories = [format_article(article, rank) for rank, article in enumerate(articles, start=1) if isinstance(article, dict)]
    logger.info("Fetched %s NewsAPI headlines", len(stories))
    return stories
