"""
Item parser for turning parsed feed documents into Article records.

Handles the per-feed item cap, required-field checks, HTML cleaning, description
truncation and date normalization.
"""

import re
import warnings
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from crypto_news_feed.config import get_config
from crypto_news_feed.logger import get_logger
from crypto_news_feed.models import Article, FeedDescriptor
from crypto_news_feed.utils.hash_utils import compute_article_id

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def clean_html_text(html: Optional[str]) -> str:
    """Strip markup and decode entities, returning plain text.

    Args:
        html: Text that may contain HTML

    Returns:
        Plain text with whitespace collapsed
    """
    if not html:
        return ""

    with warnings.catch_warnings():
        # Short plain strings such as titles trip bs4's "looks like a URL" heuristic
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(html, "html.parser")

    for element in soup(["script", "style", "noscript"]):
        element.decompose()

    return _WHITESPACE.sub(" ", soup.get_text()).strip()


def truncate_text(text: Optional[str], max_length: int = 200, ellipsis: str = "...") -> str:
    """Cut ``text`` to ``max_length`` characters, appending ``ellipsis`` when cut.

    Args:
        text: Text to truncate
        max_length: Maximum number of characters kept
        ellipsis: Marker appended to truncated text

    Returns:
        Text unchanged if short enough, else its prefix plus the marker
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + ellipsis


class ItemParser:
    """Parser for normalizing feed entries into articles."""

    def __init__(
        self,
        max_items: Optional[int] = None,
        description_max_length: Optional[int] = None,
        ellipsis: Optional[str] = None,
        id_length: Optional[int] = None,
    ):
        """Initialize item parser.

        Args:
            max_items: Maximum number of entries considered per feed
            description_max_length: Description length before truncation
            ellipsis: Marker appended to truncated descriptions
            id_length: Article id length
        """
        config = get_config().parser

        self.max_items = config.max_items_per_feed if max_items is None else max_items
        self.description_max_length = (
            config.description_max_length if description_max_length is None else description_max_length
        )
        self.ellipsis = config.ellipsis if ellipsis is None else ellipsis
        self.id_length = config.id_length if id_length is None else id_length

    def parse_items(
        self,
        document: dict,
        feed: FeedDescriptor,
        fetched_at: Optional[datetime] = None,
    ) -> list[Article]:
        """Parse the entries of a feed document.

        Only the first ``max_items`` entries in document order are considered;
        entries without a title or link are dropped.

        Args:
            document: Parsed feed document (feedparser result)
            feed: Feed the document came from
            fetched_at: Fallback publication time, defaults to now

        Returns:
            List of articles in document order
        """
        fetched_at = fetched_at or datetime.now(timezone.utc)
        entries = list(document.get("entries", []))

        if len(entries) > self.max_items:
            logger.debug(
                f"{feed.name}: ignoring {len(entries) - self.max_items} entries over the cap"
            )

        articles = []
        for entry in entries[: self.max_items]:
            article = self.parse_entry(entry, feed, fetched_at)
            if article is not None:
                articles.append(article)

        return articles

    def parse_entry(
        self,
        entry: dict,
        feed: FeedDescriptor,
        fetched_at: datetime,
    ) -> Optional[Article]:
        """Parse a single entry.

        Returns:
            Article, or None when the title or link is missing
        """
        raw_title = (entry.get("title") or "").strip()
        raw_link = (entry.get("link") or "").strip()

        # feedparser copies a permalink <guid> into "link" when no link element exists
        if entry.get("guidislink") and not entry.get("links"):
            raw_link = ""

        if not raw_title or not raw_link:
            logger.debug(f"{feed.name}: dropping entry without title or link")
            return None

        title = clean_html_text(raw_title)
        if not title:
            logger.debug(f"{feed.name}: dropping entry with markup-only title")
            return None

        description = truncate_text(
            clean_html_text(entry.get("summary") or entry.get("description")),
            self.description_max_length,
            self.ellipsis,
        )

        return Article(
            id=compute_article_id(raw_title, raw_link, self.id_length),
            title=title,
            link=raw_link,
            description=description,
            published_at=self._parse_date(entry) or fetched_at,
            source_name=feed.name,
            source_color=feed.color,
        )

    def _parse_date(self, entry: dict) -> Optional[datetime]:
        """Extract the publication date of an entry.

        Args:
            entry: feedparser entry

        Returns:
            Timezone-aware datetime, or None if absent or unparsable
        """
        # feedparser normalizes recognized dates to UTC struct_time
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        if parsed:
            try:
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                pass

        date_str = entry.get("published") or entry.get("pubDate") or entry.get("updated")
        if not date_str:
            return None

        if isinstance(date_str, datetime):
            return date_str if date_str.tzinfo else date_str.replace(tzinfo=timezone.utc)

        try:
            parsed_date = parsedate_to_datetime(str(date_str).strip())
        except (TypeError, ValueError, IndexError):
            parsed_date = None

        if parsed_date is None:
            try:
                parsed_date = datetime.fromisoformat(str(date_str).strip().replace("Z", "+00:00"))
            except ValueError:
                logger.warning(f"Failed to parse date: {date_str}")
                return None

        if parsed_date.tzinfo is None:
            parsed_date = parsed_date.replace(tzinfo=timezone.utc)
        return parsed_date


def create_parser(
    max_items: Optional[int] = None,
    description_max_length: Optional[int] = None,
) -> ItemParser:
    """Create a configured ItemParser instance.

    Args:
        max_items: Maximum entries per feed
        description_max_length: Description length before truncation

    Returns:
        Configured ItemParser instance
    """
    return ItemParser(max_items=max_items, description_max_length=description_max_length)
