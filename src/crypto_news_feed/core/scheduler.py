"""
Refresh scheduler for the news feed.

Runs a fetch cycle at startup and on a fixed interval using APScheduler. A
cycle fetches every registered feed concurrently, parses and merges the
results into the article store, and drives the presentation layer.
"""

import asyncio
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.events import EVENT_JOB_ERROR, JobEvent
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from crypto_news_feed.config import get_config
from crypto_news_feed.core.fetcher import FeedFetcher, FetchResult
from crypto_news_feed.core.filter_engine import FilterEngine
from crypto_news_feed.core.parser import ItemParser
from crypto_news_feed.core.registry import FeedRegistry
from crypto_news_feed.core.store import ArticleStore
from crypto_news_feed.logger import get_logger
from crypto_news_feed.models import Article, FilterState
from crypto_news_feed.view import EmptyState, FeedView

logger = get_logger(__name__)

REFRESH_JOB_ID = "refresh_feeds"
HIDE_NOTIFICATION_JOB_ID = "hide_notification"


@dataclass
class FeedContext:
    """Mutable state of a running feed, owned by the scheduler."""

    store: ArticleStore = field(default_factory=ArticleStore)
    filter_state: FilterState = field(default_factory=FilterState)
    is_loading: bool = False
    last_updated: Optional[datetime] = None


@dataclass
class CycleResult:
    """Outcome of one fetch cycle."""

    background: bool
    results: list[FetchResult] = field(default_factory=list)
    parsed_count: int = 0
    added_count: int = 0
    error: Optional[str] = None

    @property
    def failed_feeds(self) -> list[str]:
        return [r.feed_name for r in self.results if not r.success]

    @property
    def total_failure(self) -> bool:
        """True when nothing could be fetched this cycle."""
        if self.error:
            return True
        return bool(self.results) and all(not r.success for r in self.results)


@dataclass
class SchedulerStats:
    """Statistics for scheduler operations."""

    total_cycles: int = 0
    skipped_cycles: int = 0
    failed_cycles: int = 0
    total_articles_added: int = 0
    last_cycle_time: Optional[datetime] = None
    uptime_seconds: float = 0.0


class FeedScheduler:
    """Scheduler driving periodic feed refreshes."""

    def __init__(
        self,
        registry: FeedRegistry,
        view: FeedView,
        fetcher: Optional[FeedFetcher] = None,
        parser: Optional[ItemParser] = None,
        context: Optional[FeedContext] = None,
        interval_seconds: Optional[int] = None,
        notification_seconds: Optional[float] = None,
    ):
        """Initialize feed scheduler.

        Args:
            registry: Feeds fetched on every cycle
            view: Presentation layer receiving signals
            fetcher: Feed fetcher (default from config)
            parser: Item parser (default from config)
            context: Feed state (a fresh one if not provided)
            interval_seconds: Refresh interval in seconds
            notification_seconds: How long a new-article notification stays up
        """
        config = get_config()

        self.registry = registry
        self.view = view
        self.fetcher = fetcher or FeedFetcher()
        self.parser = parser or ItemParser()
        self.filter_engine = FilterEngine()
        self.context = context or FeedContext()
        self.interval_seconds = interval_seconds or config.scheduler.refresh_interval_seconds
        self.notification_seconds = (
            notification_seconds or config.scheduler.notification_seconds
        )

        # One worker: refresh cycles never overlap
        self.scheduler = BackgroundScheduler(
            executors={"default": ThreadPoolExecutor(max_workers=1)},
            timezone=config.scheduler.timezone,
        )
        self.scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)

        self._cycle_lock = threading.Lock()

        self.stats = SchedulerStats()
        self.start_time: Optional[datetime] = None

    @property
    def is_loading(self) -> bool:
        return self.context.is_loading

    def start(self, initial_fetch: bool = True) -> None:
        """Start periodic refreshing.

        Args:
            initial_fetch: Run the startup cycle before returning
        """
        if self.scheduler.running:
            logger.warning("Scheduler is already running")
            return

        if initial_fetch:
            self.run_cycle(background=False)

        self.scheduler.add_job(
            func=self.run_cycle,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=REFRESH_JOB_ID,
            name="Refresh feeds",
            kwargs={"background": True},
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        self.start_time = datetime.now(timezone.utc)

        logger.info(
            f"Scheduler started: {len(self.registry)} feeds every {self.interval_seconds}s"
        )

    def stop(self, wait: bool = True) -> None:
        """Stop periodic refreshing.

        Args:
            wait: Whether to wait for a running cycle to complete
        """
        if not self.scheduler.running:
            logger.warning("Scheduler is not running")
            return

        self.scheduler.shutdown(wait=wait)
        if self.start_time:
            self.stats.uptime_seconds = (
                datetime.now(timezone.utc) - self.start_time
            ).total_seconds()
        logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        return self.scheduler.running

    def refresh_now(self) -> Optional[CycleResult]:
        """Run a cycle on user request; notifies like a background refresh once data exists."""
        return self.run_cycle(background=not self.context.store.is_empty)

    def run_cycle(self, background: bool = False) -> Optional[CycleResult]:
        """Fetch all feeds, merge new articles and update the view.

        A call made while another cycle is in flight does nothing.

        Args:
            background: Whether this is a periodic refresh (enables notifications)

        Returns:
            CycleResult, or None if the cycle was skipped
        """
        if not self._cycle_lock.acquire(blocking=False):
            self.stats.skipped_cycles += 1
            logger.debug("Refresh already in progress, skipping cycle")
            return None

        context = self.context
        context.is_loading = True
        cycle = CycleResult(background=background)

        try:
            if context.store.is_empty:
                self.view.show_loading()

            cycle.results = asyncio.run(self.fetcher.fetch_all(self.registry))
            fetched_at = datetime.now(timezone.utc)

            candidates: list[Article] = []
            for result in cycle.results:
                if result.success:
                    candidates.extend(
                        self.parser.parse_items(result.document, result.feed, fetched_at)
                    )
            cycle.parsed_count = len(candidates)

            cycle.added_count = context.store.merge(candidates)
            context.last_updated = fetched_at

            if cycle.failed_feeds:
                logger.warning(f"Feeds failed this cycle: {', '.join(cycle.failed_feeds)}")
            logger.info(
                f"Refresh complete: {cycle.added_count} new of {cycle.parsed_count} parsed, "
                f"{len(context.store)} total"
            )

            if cycle.total_failure and context.store.is_empty:
                self.view.show_empty_or_error(EmptyState.LOAD_ERROR)
            else:
                if background and cycle.added_count > 0:
                    self._notify(cycle.added_count)
                self.render()

        except Exception as e:
            cycle.error = f"{type(e).__name__}: {e}"
            logger.exception(f"Error refreshing feeds: {e}")
            if context.store.is_empty:
                self.view.show_empty_or_error(EmptyState.LOAD_ERROR)

        finally:
            context.is_loading = False
            self.view.hide_loading()
            self._cycle_lock.release()

        self.stats.total_cycles += 1
        self.stats.total_articles_added += cycle.added_count
        self.stats.last_cycle_time = datetime.now(timezone.utc)
        if cycle.total_failure:
            self.stats.failed_cycles += 1

        return cycle

    def render(self) -> list[Article]:
        """Recompute the visible articles and push them to the view.

        Returns:
            Articles shown
        """
        context = self.context
        visible = self.filter_engine.filter_entries(context.store, context.filter_state)

        if visible:
            self.view.render_list(visible)
        elif context.filter_state.search_term.strip():
            self.view.show_empty_or_error(EmptyState.NO_MATCHES)
        else:
            self.view.show_empty_or_error(EmptyState.NO_ARTICLES)

        self.view.update_stats(
            len(context.store), context.last_updated or datetime.now(timezone.utc)
        )
        return visible

    def set_filter(
        self,
        source: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Article]:
        """Change the active filter and re-render.

        Args:
            source: "all" or a registered feed name; unchanged if None
            search: Search term; unchanged if None

        Returns:
            Articles shown

        Raises:
            ValueError: If ``source`` is not a registered feed
        """
        state = self.context.filter_state

        if source is not None:
            if not self.registry.has_source(source):
                raise ValueError(f"Unknown source: {source!r}")
            state.active_source = source

        if search is not None:
            state.search_term = search.strip()

        return self.render()

    def _notify(self, count: int) -> None:
        """Show the new-article notification and schedule its dismissal."""
        self.view.show_notification(count)
        self.scheduler.add_job(
            func=self._hide_notification,
            trigger=DateTrigger(
                run_date=datetime.now(timezone.utc) + timedelta(seconds=self.notification_seconds)
            ),
            id=HIDE_NOTIFICATION_JOB_ID,
            name="Hide notification",
            replace_existing=True,
        )

    def _hide_notification(self) -> None:
        self.view.hide_notification()

    def get_stats(self) -> SchedulerStats:
        """Get scheduler statistics."""
        if self.start_time and self.scheduler.running:
            self.stats.uptime_seconds = (
                datetime.now(timezone.utc) - self.start_time
            ).total_seconds()
        return self.stats

    def _on_job_error(self, event: JobEvent) -> None:
        """Handle job error event.

        Args:
            event: Job event
        """
        if event.exception:
            logger.error(
                f"Job {event.job_id} failed: {type(event.exception).__name__}: {event.exception}"
            )


def create_scheduler(
    view: FeedView,
    registry: Optional[FeedRegistry] = None,
    fetcher: Optional[FeedFetcher] = None,
) -> FeedScheduler:
    """Create a configured FeedScheduler instance.

    Args:
        view: Presentation layer
        registry: Feed registry (default from config)
        fetcher: Optional feed fetcher

    Returns:
        Configured FeedScheduler instance
    """
    from crypto_news_feed.core.registry import create_registry

    return FeedScheduler(registry=registry or create_registry(), view=view, fetcher=fetcher)
