"""Push-feed contracts and in-process feed implementations.

A feed delivers events to subscribed handlers one at a time. The monitor
depends only on :class:`LogFeed` and :class:`ConfigFeed`, so it can be driven
by synthetic event sequences as easily as by a live transport.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable
from typing import Any, Protocol

from solarpool.ingestion.normalize import iter_log_entries
from solarpool.state.events import ConfigUpdate, IngestionSource, LogEventKind, SampleUpdate

SampleHandler = Callable[[SampleUpdate], None]
ConfigHandler = Callable[[ConfigUpdate], None]
Unsubscribe = Callable[[], None]


class LogFeed(Protocol):
    """Source of per-slot sample upserts."""

    def subscribe(self, handler: SampleHandler) -> Unsubscribe: ...


class ConfigFeed(Protocol):
    """Source of whole-config replacements."""

    def subscribe(self, handler: ConfigHandler) -> Unsubscribe: ...


class _HandlerList:
    def __init__(self) -> None:
        self._handlers: list[Callable[[Any], None]] = []

    def add(self, handler: Callable[[Any], None]) -> Unsubscribe:
        self._handlers.append(handler)

        def _remove() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _remove

    def dispatch(self, event: Any) -> None:
        for handler in list(self._handlers):
            handler(event)

    def __len__(self) -> int:
        return len(self._handlers)


class MemoryLogFeed:
    """Synchronous in-process log feed."""

    def __init__(self, *, source: IngestionSource = IngestionSource.MEMORY) -> None:
        self._source = source
        self._handlers = _HandlerList()

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: SampleHandler) -> Unsubscribe:
        return self._handlers.add(handler)

    def push(self, key: Any, value: Any, *, kind: LogEventKind = LogEventKind.ADDED) -> None:
        """Deliver one sample notification to every subscriber."""
        self._handlers.dispatch(SampleUpdate(key=key, value=value, kind=kind, source=self._source))

    def push_log(self, log: Any) -> int:
        """Deliver every entry of an exported log node as ``child_added``."""
        count = 0
        for key, value in iter_log_entries(log):
            self.push(key, value)
            count += 1
        return count


class MemoryConfigFeed:
    """Synchronous in-process config feed."""

    def __init__(self, *, source: IngestionSource = IngestionSource.MEMORY) -> None:
        self._source = source
        self._handlers = _HandlerList()

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: ConfigHandler) -> Unsubscribe:
        return self._handlers.add(handler)

    def push(self, value: Any) -> None:
        self._handlers.dispatch(ConfigUpdate(value=value, source=self._source))
