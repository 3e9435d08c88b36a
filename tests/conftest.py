from __future__ import annotations

from collections.abc import Callable

import pytest

from solarpool.models import CalibrationConfig


class FakeScheduler:
    """Records scheduled callbacks instead of running them on a loop."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, Callable[[], None]]] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> object:
        self.calls.append((delay, callback))
        return object()

    def fire_all(self) -> int:
        pending, self.calls = self.calls, []
        for _, callback in pending:
            callback()
        return len(pending)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def calibration() -> CalibrationConfig:
    return CalibrationConfig(
        polling_milliseconds=5000,
        series_resistor=10000.0,
        resistance_at_0=10000.0,
        temperature_at_0=25.0,
        b_coefficient=3950.0,
    )
