from datetime import datetime, timezone

import pytest

from newspulse.config import AppConfig, load_config


class DummyLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def _record(self, level: str, msg: str, *args) -> None:
        self.messages.append((level, msg % args if args else msg))

    def debug(self, msg: str, *args) -> None:
        self._record("debug", msg, *args)

    def info(self, msg: str, *args) -> None:
        self._record("info", msg, *args)

    def warning(self, msg: str, *args) -> None:
        self._record("warning", msg, *args)

    def error(self, msg: str, *args) -> None:
        self._record("error", msg, *args)

    def levels(self) -> list[str]:
        return [level for level, _ in self.messages]


class FakeResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def logger() -> DummyLogger:
    return DummyLogger()


@pytest.fixture
def cfg() -> AppConfig:
    return load_config({"NEWS_API_KEY": "test-key", "AI_ENABLED": "false", "FETCH_WORKERS": "4"})
