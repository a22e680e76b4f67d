"""
RSS feed fetcher.

Feeds are requested through a CORS relay and fetched concurrently; a failing
feed is reported as a failed FetchResult and never affects the others.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional
from xml.sax import SAXException

import feedparser
import httpx

from crypto_news_feed.config import get_config
from crypto_news_feed.logger import get_logger
from crypto_news_feed.models import FeedDescriptor
from crypto_news_feed.utils.hash_utils import encode_uri_component

logger = get_logger(__name__)


@dataclass
class FetchResult:
    """Result of a feed fetch operation."""

    success: bool
    feed: FeedDescriptor
    document: Optional[dict] = None
    error: Optional[str] = None
    http_status: Optional[int] = None
    fetch_time_seconds: float = 0.0

    def __post_init__(self):
        """Validate fetch result."""
        if self.success and self.error:
            raise ValueError("Successful fetch cannot have an error")
        if not self.success and not self.error:
            self.error = "Unknown error"

    @property
    def feed_name(self) -> str:
        return self.feed.name

    @property
    def entries_count(self) -> int:
        if self.document is None:
            return 0
        return len(self.document.get("entries", []))


@dataclass
class FetchStats:
    """Statistics for feed fetching operations."""

    total_feeds: int = 0
    successful_fetches: int = 0
    failed_fetches: int = 0
    total_entries: int = 0
    total_time_seconds: float = 0.0
    errors_by_type: dict = field(default_factory=dict)

    def add_result(self, result: FetchResult) -> None:
        """Add a fetch result to statistics.

        Args:
            result: FetchResult to add
        """
        self.total_feeds += 1
        self.total_time_seconds += result.fetch_time_seconds

        if result.success:
            self.successful_fetches += 1
            self.total_entries += result.entries_count
        else:
            self.failed_fetches += 1
            error_type = result.error.split(":")[0] if result.error else "unknown"
            self.errors_by_type[error_type] = self.errors_by_type.get(error_type, 0) + 1

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total_feeds == 0:
            return 0.0
        return self.successful_fetches / self.total_feeds

    @property
    def avg_time_seconds(self) -> float:
        """Calculate average fetch time."""
        if self.total_feeds == 0:
            return 0.0
        return self.total_time_seconds / self.total_feeds


class FeedFetcher:
    """Concurrent RSS fetcher routed through a CORS relay."""

    def __init__(
        self,
        relay_url: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize feed fetcher.

        Args:
            relay_url: Relay endpoint; an empty string fetches feeds directly
            timeout_seconds: Request timeout in seconds
            user_agent: User-Agent header for HTTP requests
            transport: Optional httpx transport (used to stub the network)
        """
        config = get_config()

        self.relay_url = config.fetcher.relay_url if relay_url is None else relay_url
        self.timeout_seconds = timeout_seconds or config.fetcher.timeout_seconds
        self.user_agent = user_agent or config.fetcher.user_agent
        self.follow_redirects = config.fetcher.follow_redirects
        self.max_redirects = config.fetcher.max_redirects
        self.transport = transport

        self.stats = FetchStats()

    def build_fetch_url(self, feed: FeedDescriptor) -> str:
        """Build the URL used to fetch ``feed``.

        Args:
            feed: Feed to fetch

        Returns:
            Relay URL carrying the encoded feed URL, or the feed URL itself
        """
        if not self.relay_url:
            return feed.url
        return f"{self.relay_url}?url={encode_uri_component(feed.url)}"

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_seconds,
            follow_redirects=self.follow_redirects,
            max_redirects=self.max_redirects,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    async def fetch_feed(self, feed: FeedDescriptor, client: httpx.AsyncClient) -> FetchResult:
        """Fetch and parse a single feed document.

        Never raises: every failure is returned as an unsuccessful FetchResult.

        Args:
            feed: Feed to fetch
            client: Shared HTTP client

        Returns:
            FetchResult with the parsed document or an error
        """
        start_time = time.monotonic()
        http_status = None

        logger.debug(f"Fetching feed: {feed.name}")

        try:
            response = await client.get(self.build_fetch_url(feed))
            http_status = response.status_code
            response.raise_for_status()

            parsed = feedparser.parse(response.content)

            # feedparser falls back to a lenient parser; malformed XML is still a failure
            if parsed.get("bozo") and isinstance(parsed.get("bozo_exception"), SAXException):
                raise SAXException(f"XML parsing error: {parsed.bozo_exception}")

            fetch_time = time.monotonic() - start_time
            result = FetchResult(
                success=True,
                feed=feed,
                document=parsed,
                http_status=http_status,
                fetch_time_seconds=fetch_time,
            )
            logger.info(
                f"Fetched {result.entries_count} entries from {feed.name} in {fetch_time:.2f}s"
            )

        except httpx.TimeoutException as e:
            result = self._failure(feed, f"Timeout: {e}", http_status, start_time)

        except httpx.HTTPStatusError as e:
            result = self._failure(
                feed, f"HTTP {e.response.status_code}: {e}", e.response.status_code, start_time
            )

        except httpx.RequestError as e:
            result = self._failure(feed, f"Request error: {e}", http_status, start_time)

        except SAXException as e:
            result = self._failure(feed, f"Parse error: {e}", http_status, start_time)

        except Exception as e:
            result = self._failure(
                feed, f"Unexpected error: {type(e).__name__}: {e}", http_status, start_time
            )

        self.stats.add_result(result)
        return result

    def _failure(
        self,
        feed: FeedDescriptor,
        error: str,
        http_status: Optional[int],
        start_time: float,
    ) -> FetchResult:
        logger.warning(f"Failed to fetch {feed.name}: {error}")
        return FetchResult(
            success=False,
            feed=feed,
            error=error,
            http_status=http_status,
            fetch_time_seconds=time.monotonic() - start_time,
        )

    async def fetch_all(self, feeds: Iterable[FeedDescriptor]) -> list[FetchResult]:
        """Fetch all feeds concurrently and wait for every one to finish.

        Args:
            feeds: Feeds to fetch

        Returns:
            One FetchResult per feed, in input order
        """
        feeds = list(feeds)

        async with self._create_client() as client:
            outcomes = await asyncio.gather(
                *(self.fetch_feed(feed, client) for feed in feeds),
                return_exceptions=True,
            )

        results = []
        for feed, outcome in zip(feeds, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Fetch task for {feed.name} raised: {outcome!r}")
                outcome = FetchResult(
                    success=False,
                    feed=feed,
                    error=f"Unexpected error: {type(outcome).__name__}: {outcome}",
                )
                self.stats.add_result(outcome)
            results.append(outcome)

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Fetched {succeeded}/{len(results)} feeds")

        return results


def create_fetcher(transport: Optional[httpx.AsyncBaseTransport] = None) -> FeedFetcher:
    """Create a configured FeedFetcher instance.

    Args:
        transport: Optional httpx transport

    Returns:
        Configured FeedFetcher instance
    """
    return FeedFetcher(transport=transport)
