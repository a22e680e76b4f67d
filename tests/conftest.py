"""Shared fixtures for crypto news feed tests."""

from datetime import datetime, timedelta, timezone
from xml.sax.saxutils import escape

import feedparser
import pytest

import crypto_news_feed.config as config_module
from crypto_news_feed.models import Article, FeedDescriptor
from crypto_news_feed.utils.hash_utils import compute_article_id

BASE_TIME = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Give every test a fresh global config without file logging."""
    monkeypatch.setenv("LOG_FILE_ENABLED", "false")
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def feed():
    """A single feed descriptor."""
    return FeedDescriptor(name="TestFeed", url="https://example.com/feed.xml", color="#123456")


def build_rss(items: list[dict]) -> bytes:
    """Build an RSS 2.0 document from item dicts (title, link, guid, description, pubDate)."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0"><channel>',
        "<title>Test Channel</title><link>https://example.com/</link>",
        "<description>Test channel</description>",
    ]
    for item in items:
        parts.append("<item>")
        for tag in ("title", "link", "guid", "description", "pubDate"):
            value = item.get(tag)
            if value is not None:
                parts.append(f"<{tag}>{escape(value)}</{tag}>")
        parts.append("</item>")
    parts.append("</channel></rss>")
    return "".join(parts).encode("utf-8")


@pytest.fixture
def rss_bytes():
    """Factory building RSS bytes from item dicts."""
    return build_rss


@pytest.fixture
def rss_document():
    """Factory building a parsed feed document from item dicts."""

    def _build(items: list[dict]):
        return feedparser.parse(build_rss(items))

    return _build


@pytest.fixture
def make_article():
    """Factory creating articles; ``age_minutes`` sets published_at before BASE_TIME."""

    def _make(
        title: str,
        link: str = None,
        description: str = "",
        age_minutes: int = 0,
        source_name: str = "TestFeed",
        source_color: str = "#123456",
    ) -> Article:
        link = link or f"https://example.com/{title.lower().replace(' ', '-')}"
        return Article(
            id=compute_article_id(title, link),
            title=title,
            link=link,
            description=description,
            published_at=BASE_TIME - timedelta(minutes=age_minutes),
            source_name=source_name,
            source_color=source_color,
        )

    return _make
