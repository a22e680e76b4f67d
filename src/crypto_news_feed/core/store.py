"""
In-memory article store with first-seen-wins deduplication.
"""

from collections import Counter
from typing import Iterable, Iterator

from crypto_news_feed.logger import get_logger
from crypto_news_feed.models import Article

logger = get_logger(__name__)


class ArticleStore:
    """Accumulating collection of articles, newest first.

    An article is a duplicate when its ``id`` or its ``link`` is already
    stored. Duplicates are discarded; stored articles are never replaced or
    removed.
    """

    def __init__(self) -> None:
        self._articles: list[Article] = []
        self._ids: set[str] = set()
        self._links: set[str] = set()

    def __len__(self) -> int:
        return len(self._articles)

    def __iter__(self) -> Iterator[Article]:
        return iter(tuple(self._articles))

    @property
    def articles(self) -> tuple[Article, ...]:
        """Snapshot of the stored articles in display order."""
        return tuple(self._articles)

    @property
    def is_empty(self) -> bool:
        return not self._articles

    def contains(self, article: Article) -> bool:
        """Check whether ``article`` would be rejected as a duplicate."""
        return article.id in self._ids or article.link in self._links

    def merge(self, candidates: Iterable[Article]) -> int:
        """Add new articles and re-sort the store by publication date.

        Args:
            candidates: Articles from one fetch cycle

        Returns:
            Number of articles actually added
        """
        added = 0
        skipped = 0

        for article in candidates:
            if self.contains(article):
                skipped += 1
                continue

            self._articles.append(article)
            self._ids.add(article.id)
            self._links.add(article.link)
            added += 1

        # list.sort is stable, so equal timestamps keep insertion order
        self._articles.sort(key=lambda a: a.published_at, reverse=True)

        logger.debug(f"Merged articles: {added} added, {skipped} duplicates, {len(self)} total")

        return added

    def sources(self) -> dict[str, int]:
        """Count stored articles per source name."""
        return dict(Counter(article.source_name for article in self._articles))

    def __repr__(self) -> str:
        return f"<ArticleStore(articles={len(self)})>"
