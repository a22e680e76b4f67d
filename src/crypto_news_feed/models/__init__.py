"""Data models for crypto news feed."""

from crypto_news_feed.models.article import ALL_SOURCES, Article, FilterState
from crypto_news_feed.models.feed import FeedDescriptor

__all__ = [
    "ALL_SOURCES",
    "Article",
    "FeedDescriptor",
    "FilterState",
]
