"""
Feed registry: the fixed set of sources fetched on every refresh cycle.
"""

from typing import Iterable, Iterator, Optional

from crypto_news_feed.config import get_config
from crypto_news_feed.models import ALL_SOURCES, FeedDescriptor


class FeedRegistry:
    """Immutable, ordered collection of feed descriptors."""

    def __init__(self, feeds: Iterable[FeedDescriptor]):
        """Initialize feed registry.

        Args:
            feeds: Feed descriptors, in display order

        Raises:
            ValueError: If two feeds share a name
        """
        self._feeds = tuple(feeds)
        self._by_name: dict[str, FeedDescriptor] = {}

        for feed in self._feeds:
            if feed.name in self._by_name:
                raise ValueError(f"Duplicate feed name: {feed.name!r}")
            if feed.name == ALL_SOURCES:
                raise ValueError(f"Feed name {ALL_SOURCES!r} is reserved")
            self._by_name[feed.name] = feed

    def __iter__(self) -> Iterator[FeedDescriptor]:
        return iter(self._feeds)

    def __len__(self) -> int:
        return len(self._feeds)

    @property
    def feeds(self) -> tuple[FeedDescriptor, ...]:
        return self._feeds

    def names(self) -> list[str]:
        return [feed.name for feed in self._feeds]

    def get(self, name: str) -> FeedDescriptor:
        """Look up a feed by name.

        Raises:
            KeyError: If no feed has that name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown feed: {name!r}") from None

    def has_source(self, name: str) -> bool:
        """Check whether ``name`` is a valid source filter value."""
        return name == ALL_SOURCES or name in self._by_name

    def __repr__(self) -> str:
        return f"<FeedRegistry(feeds={self.names()})>"


def create_registry(feeds: Optional[Iterable[FeedDescriptor]] = None) -> FeedRegistry:
    """Create a FeedRegistry from ``feeds`` or from the configured feed list."""
    if feeds is None:
        feeds = get_config().feeds
    return FeedRegistry(feeds)
