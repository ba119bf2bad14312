"""Hacker News and NewsAPI dashboard with hotness ranking and trending topics."""

__version__ = "0.1.0"
