from datetime import datetime, timedelta, timezone

import pytest

from newspulse.utils import (
    as_utc,
    domain_of,
    format_number,
    format_relative_time,
    from_unix,
    parse_iso_timestamp,
    round_half_up,
    strip_code_fences,
    truncate_sentence,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_domain_of_handles_www_and_case():
    assert domain_of("HTTPS://WWW.BBC.CO.UK/news/article") == "bbc.co.uk"
    assert domain_of(None) == ""
    assert domain_of("not a url") == ""


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3), "3h ago"),
        (timedelta(days=2), "2d ago"),
        (timedelta(days=14), "2w ago"),
        (timedelta(days=65), "2mo ago"),
        (timedelta(days=800), "2y ago"),
    ],
)
def test_format_relative_time(delta, expected):
    assert format_relative_time(NOW - delta, NOW) == expected


def test_format_relative_time_invalid():
    assert format_relative_time(None, NOW) == ""
    assert format_relative_time("yesterday", NOW) == ""


def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number(12.5) == "12.5"
    assert format_number(None) == ""


def test_timestamp_parsing():
    assert parse_iso_timestamp("2025-03-01T10:30:00Z") == datetime(2025, 3, 1, 10, 30, tzinfo=timezone.utc)
    assert parse_iso_timestamp("garbage") is None
    assert parse_iso_timestamp(None) is None
    assert from_unix(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert from_unix(None) is None


def test_strip_code_fences():
    assert strip_code_fences("```json\n[1, 2]\n```") == "[1, 2]"


def test_truncate_sentence():
    assert truncate_sentence("one two three four", 9) == "one two…"
    assert truncate_sentence("short", 10) == "short"


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(0.25, 1) == 0.3
    assert round_half_up(2.5) == 3
    assert round_half_up(7.44, 1) == 7.4


def test_as_utc_only_touches_naive_datetimes():
    naive = datetime(2025, 3, 1, 12, 0)
    assert as_utc(naive) == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    offset = datetime(2025, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(offset) is offset
