"""Core pipeline: registry, fetcher, parser, store, filter engine and scheduler.

A refresh cycle flows through the modules in this order:

    FeedRegistry -> FeedFetcher -> ItemParser -> ArticleStore -> FilterEngine -> FeedView
"""

from crypto_news_feed.core.fetcher import FeedFetcher, FetchResult, FetchStats, create_fetcher
from crypto_news_feed.core.filter_engine import FilterEngine, create_filter_engine, filter_articles
from crypto_news_feed.core.parser import ItemParser, clean_html_text, create_parser, truncate_text
from crypto_news_feed.core.registry import FeedRegistry, create_registry
from crypto_news_feed.core.scheduler import (
    CycleResult,
    FeedContext,
    FeedScheduler,
    SchedulerStats,
    create_scheduler,
)
from crypto_news_feed.core.store import ArticleStore

__all__ = [
    "ArticleStore",
    "CycleResult",
    "FeedContext",
    "FeedFetcher",
    "FeedRegistry",
    "FeedScheduler",
    "FetchResult",
    "FetchStats",
    "FilterEngine",
    "ItemParser",
    "SchedulerStats",
    "clean_html_text",
    "create_fetcher",
    "create_filter_engine",
    "create_parser",
    "create_registry",
    "create_scheduler",
    "filter_articles",
    "truncate_text",
]
