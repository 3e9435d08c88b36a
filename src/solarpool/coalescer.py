"""Leading-edge-armed, non-resetting debounce.

The first :meth:`UpdateCoalescer.notify` after the coalescer goes idle
schedules exactly one deferred fire. Further notifications while armed are
ignored; they neither cancel nor push back the pending fire. Because the fire
callback reads live state, updates that arrived during the window are still
reflected.

State machine::

    notify: IDLE  -> ARMED  (schedule fire)
    notify: ARMED -> ARMED  (no-op)
    fire:   ARMED -> IDLE   (then on_fire)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

_logger = logging.getLogger(__name__)

#: Default quiet period between the first update of a burst and the rebuild.
DEFAULT_DELAY_SECONDS = 3.0

Scheduler = Callable[[float, Callable[[], None]], Any]
"""``(delay_seconds, callback) -> handle``; the handle is never cancelled."""


class CoalescerState(StrEnum):
    IDLE = "idle"
    ARMED = "armed"


def _loop_scheduler(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class UpdateCoalescer:
    """Batch bursts of notifications into a single ``on_fire`` call."""

    def __init__(
        self,
        on_fire: Callable[[], None],
        *,
        delay: float = DEFAULT_DELAY_SECONDS,
        scheduler: Scheduler | None = None,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self._on_fire = on_fire
        self._delay = delay
        self._scheduler = scheduler or _loop_scheduler
        self._state = CoalescerState.IDLE
        self._fire_count = 0

    @property
    def state(self) -> CoalescerState:
        return self._state

    @property
    def is_armed(self) -> bool:
        return self._state is CoalescerState.ARMED

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def fire_count(self) -> int:
        """Number of times ``on_fire`` has run."""
        return self._fire_count

    def notify(self) -> bool:
        """Record one update; returns ``True`` if this call armed a new fire."""
        if self._state is CoalescerState.ARMED:
            return False
        self._state = CoalescerState.ARMED
        try:
            self._scheduler(self._delay, self._fire)
        except Exception:
            # Nothing was scheduled; stay notifiable.
            self._state = CoalescerState.IDLE
            raise
        _logger.debug("Coalescer armed delay=%.3fs", self._delay)
        return True

    def _fire(self) -> None:
        # Go idle first so a notify issued from on_fire arms the next window.
        self._state = CoalescerState.IDLE
        self._fire_count += 1
        try:
            self._on_fire()
        except Exception:
            _logger.warning("Coalesced update callback failed", exc_info=True)
