"""Exceptions raised by the feed collaborators."""
from __future__ import annotations


class FeedError(RuntimeError):
    """A story source could not produce a batch at all."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
