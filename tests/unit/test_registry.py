"""Unit tests for the feed registry."""

import pytest

from crypto_news_feed.config import DEFAULT_FEEDS
from crypto_news_feed.core.registry import FeedRegistry, create_registry
from crypto_news_feed.models import FeedDescriptor


@pytest.fixture
def registry():
    return FeedRegistry([
        FeedDescriptor(name="Alpha", url="https://alpha.test/feed", color="#111111"),
        FeedDescriptor(name="Beta", url="https://beta.test/feed", color="#222222"),
    ])


class TestFeedRegistry:
    """Tests for FeedRegistry."""

    def test_iteration_order(self, registry):
        assert [feed.name for feed in registry] == ["Alpha", "Beta"]
        assert registry.names() == ["Alpha", "Beta"]
        assert len(registry) == 2

    def test_get(self, registry):
        assert registry.get("Beta").url == "https://beta.test/feed"

    def test_get_unknown(self, registry):
        with pytest.raises(KeyError, match="Unknown feed"):
            registry.get("Gamma")

    def test_has_source(self, registry):
        assert registry.has_source("all")
        assert registry.has_source("Alpha")
        assert not registry.has_source("alpha")
        assert not registry.has_source("Gamma")

    def test_duplicate_names_rejected(self):
        feed = FeedDescriptor(name="Alpha", url="https://alpha.test/feed")

        with pytest.raises(ValueError, match="Duplicate feed name"):
            FeedRegistry([feed, feed])

    def test_reserved_name_rejected(self):
        with pytest.raises(ValueError, match="reserved"):
            FeedRegistry([FeedDescriptor(name="all", url="https://all.test/feed")])

    def test_descriptors_are_immutable(self, registry):
        with pytest.raises(Exception):
            registry.get("Alpha").name = "Changed"


class TestCreateRegistry:
    """Tests for create_registry."""

    def test_defaults_from_config(self):
        registry = create_registry()

        assert len(registry) == 7
        assert registry.names() == [feed.name for feed in DEFAULT_FEEDS]
        assert registry.get("CoinDesk").color == "#F7931A"

    def test_explicit_feeds(self):
        registry = create_registry([FeedDescriptor(name="Solo", url="https://solo.test/rss")])

        assert registry.names() == ["Solo"]
