"""
Command line entry point.

Runs the feed in the terminal: one refresh with ``--once``, otherwise a
startup refresh followed by periodic refreshes until interrupted.
"""

import argparse
import time
from typing import Optional, Sequence

from crypto_news_feed.config import get_config, load_config_from_yaml, set_config
from crypto_news_feed.core.registry import create_registry
from crypto_news_feed.core.scheduler import FeedScheduler
from crypto_news_feed.logger import get_logger, setup_logger
from crypto_news_feed.models import ALL_SOURCES
from crypto_news_feed.view import ConsoleView

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crypto-news-feed",
        description="Aggregated cryptocurrency news from several RSS feeds",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--once", action="store_true", help="Fetch once, print and exit")
    parser.add_argument(
        "--source", default=ALL_SOURCES, help="Only show articles from this feed"
    )
    parser.add_argument("--search", default="", help="Only show articles containing this text")
    parser.add_argument("--interval", type=int, help="Refresh interval in seconds")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        set_config(load_config_from_yaml(args.config))
    config = get_config()

    setup_logger(level=args.log_level)

    registry = create_registry()
    if not registry.has_source(args.source):
        parser.error(f"unknown source {args.source!r}; choose from {registry.names()}")

    scheduler = FeedScheduler(
        registry=registry,
        view=ConsoleView(),
        interval_seconds=args.interval,
    )
    scheduler.context.filter_state.active_source = args.source
    scheduler.context.filter_state.search_term = args.search.strip()

    logger.info(f"Starting {config.app_name} with {len(registry)} sources")

    if args.once:
        result = scheduler.run_cycle()
        return 1 if result is None or result.total_failure else 0

    if not config.scheduler.enabled:
        logger.warning("Periodic refresh disabled; running a single cycle")
        scheduler.run_cycle()
        return 0

    scheduler.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        scheduler.stop(wait=False)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
