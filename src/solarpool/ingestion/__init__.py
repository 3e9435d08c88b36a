"""Ingestion layer.

This package contains the feed contracts and adapters that receive remote
log and config updates and emit normalized events.
"""

from solarpool.ingestion.feeds import ConfigFeed, LogFeed, MemoryConfigFeed, MemoryLogFeed
from solarpool.ingestion.normalize import iter_log_entries, parse_sample, parse_sample_key

__all__ = [
    "ConfigFeed",
    "LogFeed",
    "MemoryConfigFeed",
    "MemoryLogFeed",
    "iter_log_entries",
    "parse_sample",
    "parse_sample_key",
]
