from newspulse.config import load_config


def test_defaults():
    cfg = load_config({})
    assert cfg.news_api_key is None
    assert cfg.model == "qwen3:4b"
    assert cfg.story_limit == 30
    assert cfg.summary_limit == 10
    assert cfg.topic_limit == 15
    assert cfg.display_count == 10
    assert cfg.http_timeout == 10.0
    assert cfg.newsapi_category == "technology"
    assert cfg.newsapi_country == "us"
    assert cfg.newsapi_sources == ""
    assert cfg.output_format == "md"
    assert cfg.ai_enabled is True


def test_integers_are_clamped_and_validated():
    cfg = load_config({"STORY_LIMIT": "500", "TOPIC_LIMIT": "0", "SUMMARY_LIMIT": "lots"})
    assert cfg.story_limit == 100
    assert cfg.topic_limit == 1
    assert cfg.summary_limit == 10


def test_format_bool_and_timeout_parsing():
    cfg = load_config({"OUTPUT_FORMAT": " HTML ", "AI_ENABLED": "off", "HTTP_TIMEOUT": "0.2"})
    assert cfg.output_format == "html"
    assert cfg.ai_enabled is False
    assert cfg.http_timeout == 1.0

    fallback = load_config({"OUTPUT_FORMAT": "pdf", "AI_ENABLED": "maybe", "HTTP_TIMEOUT": "soon"})
    assert fallback.output_format == "md"
    assert fallback.ai_enabled is True
    assert fallback.http_timeout == 10.0
