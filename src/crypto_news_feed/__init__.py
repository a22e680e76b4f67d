"""
Crypto News Feed - aggregated, auto-refreshing cryptocurrency news timeline.

This package fetches a fixed set of RSS feeds concurrently, deduplicates their
items into a single newest-first timeline, and exposes source filtering and
free-text search over it.
"""

__version__ = "0.1.0"
