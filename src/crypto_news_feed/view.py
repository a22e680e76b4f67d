"""
Presentation interface driven by the refresh scheduler.

FeedView is the set of signals the scheduler emits; ConsoleView is a plain-text
implementation used by the command line.
"""

import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Protocol, Sequence, TextIO

from crypto_news_feed.models import Article


class EmptyState(str, Enum):
    """Reasons the article list can be empty."""

    NO_ARTICLES = "no_articles"
    NO_MATCHES = "no_matches"
    LOAD_ERROR = "load_error"

    @property
    def message(self) -> str:
        return _EMPTY_MESSAGES[self]


_EMPTY_MESSAGES = {
    EmptyState.NO_ARTICLES: "No articles available.",
    EmptyState.NO_MATCHES: "No articles found matching your search.",
    EmptyState.LOAD_ERROR: (
        "Unable to load news feeds. Please check your internet connection and try again."
    ),
}


class FeedView(Protocol):
    """Signals consumed by a presentation layer."""

    def show_loading(self) -> None: ...

    def hide_loading(self) -> None: ...

    def render_list(self, articles: Sequence[Article]) -> None: ...

    def show_notification(self, count: int) -> None: ...

    def hide_notification(self) -> None: ...

    def show_empty_or_error(self, kind: EmptyState) -> None: ...

    def update_stats(self, total_count: int, last_updated: datetime) -> None: ...


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_relative_time(date: datetime, now: Optional[datetime] = None) -> str:
    """Describe how long ago ``date`` was.

    Args:
        date: Past timestamp
        now: Reference time, defaults to the current time

    Returns:
        "Just now", "N minutes ago", "N hours ago" or "N days ago"
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = (now - date).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{_plural(minutes, 'minute')} ago"
    if hours < 24:
        return f"{_plural(hours, 'hour')} ago"
    return f"{_plural(days, 'day')} ago"


def format_notification(count: int) -> str:
    """Text of the new-articles notification."""
    return f"{_plural(count, 'new article')} loaded!"


class ConsoleView:
    """Plain-text FeedView writing to a stream."""

    def __init__(self, stream: Optional[TextIO] = None, clock=None):
        """Initialize console view.

        Args:
            stream: Output stream (defaults to stdout)
            clock: Callable returning the current time, for relative dates
        """
        self.stream = stream or sys.stdout
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.loading = False
        self.notification: Optional[str] = None

    def _write(self, text: str = "") -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def show_loading(self) -> None:
        self.loading = True
        self._write("Loading news feeds...")

    def hide_loading(self) -> None:
        self.loading = False

    def render_list(self, articles: Sequence[Article]) -> None:
        now = self.clock()
        for article in articles:
            self._write(f"[{article.source_name}] {article.title}")
            if article.description:
                self._write(f"    {article.description}")
            self._write(f"    {format_relative_time(article.published_at, now)} | {article.link}")
            self._write()

    def show_notification(self, count: int) -> None:
        self.notification = format_notification(count)
        self._write(f"*** {self.notification} ***")

    def hide_notification(self) -> None:
        self.notification = None

    def show_empty_or_error(self, kind: EmptyState) -> None:
        self._write(kind.message)

    def update_stats(self, total_count: int, last_updated: datetime) -> None:
        self._write(
            f"{_plural(total_count, 'article')} | "
            f"last updated {last_updated.astimezone().strftime('%H:%M:%S')}"
        )
