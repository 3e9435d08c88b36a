from __future__ import annotations

import asyncio

import pytest

from solarpool.coalescer import CoalescerState, UpdateCoalescer


def test_burst_of_notifications_schedules_exactly_one_fire(scheduler) -> None:
    fired: list[int] = []
    coalescer = UpdateCoalescer(lambda: fired.append(1), delay=3.0, scheduler=scheduler)

    assert coalescer.notify() is True
    for _ in range(9):
        assert coalescer.notify() is False

    assert len(scheduler.calls) == 1
    assert scheduler.calls[0][0] == 3.0
    assert coalescer.state is CoalescerState.ARMED

    scheduler.fire_all()
    assert fired == [1]
    assert coalescer.state is CoalescerState.IDLE
    assert coalescer.fire_count == 1


def test_notify_after_fire_arms_one_more(scheduler) -> None:
    coalescer = UpdateCoalescer(lambda: None, scheduler=scheduler)
    coalescer.notify()
    scheduler.fire_all()

    coalescer.notify()
    coalescer.notify()
    assert len(scheduler.calls) == 1
    scheduler.fire_all()
    assert coalescer.fire_count == 2


def test_fire_reads_live_state(scheduler) -> None:
    values: list[int] = []
    seen: list[list[int]] = []
    coalescer = UpdateCoalescer(lambda: seen.append(list(values)), scheduler=scheduler)

    for i in range(3):
        values.append(i)
        coalescer.notify()
    scheduler.fire_all()

    assert seen == [[0, 1, 2]]


def test_failing_callback_returns_to_idle(scheduler) -> None:
    def boom() -> None:
        raise RuntimeError("render failed")

    coalescer = UpdateCoalescer(boom, scheduler=scheduler)
    coalescer.notify()
    scheduler.fire_all()

    assert coalescer.state is CoalescerState.IDLE
    assert coalescer.notify() is True


def test_failing_scheduler_leaves_coalescer_idle(scheduler) -> None:
    attempts: list[float] = []

    def flaky(delay, callback):
        attempts.append(delay)
        if len(attempts) == 1:
            raise RuntimeError("no running event loop")
        return scheduler(delay, callback)

    coalescer = UpdateCoalescer(lambda: None, delay=0.5, scheduler=flaky)
    with pytest.raises(RuntimeError):
        coalescer.notify()

    assert coalescer.state is CoalescerState.IDLE
    assert coalescer.notify() is True
    assert coalescer.is_armed
    assert len(scheduler.calls) == 1
    assert scheduler.fire_all() == 1
    assert coalescer.fire_count == 1


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValueError):
        UpdateCoalescer(lambda: None, delay=-1.0)


@pytest.mark.asyncio
async def test_window_is_not_extended_by_later_notifications() -> None:
    loop = asyncio.get_running_loop()
    fired_at: list[float] = []
    coalescer = UpdateCoalescer(lambda: fired_at.append(loop.time()), delay=0.2)

    armed_at = loop.time()
    coalescer.notify()
    for _ in range(3):
        await asyncio.sleep(0.05)
        coalescer.notify()

    await asyncio.sleep(0.2)
    assert len(fired_at) == 1
    # A sliding window would have fired ~0.35s after arming.
    assert fired_at[0] - armed_at < 0.3

    coalescer.notify()
    await asyncio.sleep(0.3)
    assert coalescer.fire_count == 2
