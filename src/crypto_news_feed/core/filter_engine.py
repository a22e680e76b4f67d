"""
Filter engine for deriving the displayed subset of the article store.

Combines an exact source filter with a case-insensitive search over title and
description.
"""

from typing import Iterable, Optional

from crypto_news_feed.logger import get_logger
from crypto_news_feed.models import ALL_SOURCES, Article, FilterState

logger = get_logger(__name__)


class FilterEngine:
    """Engine for applying a FilterState to articles."""

    def _match_source(self, active_source: str, article: Article) -> bool:
        """Match the source filter.

        Args:
            active_source: "all" or a feed name
            article: Article to check

        Returns:
            True if the article comes from the active source
        """
        return active_source == ALL_SOURCES or article.source_name == active_source

    def _match_keyword(self, term: str, text: Optional[str]) -> bool:
        """Match a search term against text, ignoring case."""
        if not text:
            return False
        return term.casefold() in text.casefold()

    def matches(self, article: Article, state: FilterState) -> bool:
        """Check whether an article passes the filter.

        Args:
            article: Article to check
            state: Active filter state

        Returns:
            True if both the source and the search predicate match
        """
        if not self._match_source(state.active_source, article):
            return False

        term = state.search_term.strip()
        if not term:
            return True

        return self._match_keyword(term, article.title) or self._match_keyword(
            term, article.description
        )

    def filter_entries(self, articles: Iterable[Article], state: FilterState) -> list[Article]:
        """Filter articles, preserving their order.

        Args:
            articles: Articles in display order
            state: Active filter state

        Returns:
            Matching articles (possibly empty)
        """
        articles = list(articles)
        passed = [article for article in articles if self.matches(article, state)]

        logger.debug(
            f"Filtered {len(articles)} articles: {len(passed)} shown "
            f"(source={state.active_source!r}, search={state.search_term!r})"
        )

        return passed


def filter_articles(articles: Iterable[Article], state: FilterState) -> list[Article]:
    """Filter ``articles`` with a default FilterEngine."""
    return FilterEngine().filter_entries(articles, state)


def create_filter_engine() -> FilterEngine:
    """Factory function to create a FilterEngine."""
    return FilterEngine()
