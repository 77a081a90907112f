"""Unit tests for the coalescing trigger."""

import asyncio

import pytest

from readrmood.domain.services.coalescing import CoalescingTrigger


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        CoalescingTrigger(Counter(), window=0)


def test_without_loop_waits_for_flush():
    """Test that triggers outside a loop stay pending until flushed."""
    counter = Counter()
    trigger = CoalescingTrigger(counter, window=0.01)

    trigger.trigger()
    trigger.trigger()
    trigger.trigger()
    assert counter.calls == 0
    assert trigger.pending is True

    assert trigger.flush() is True
    assert counter.calls == 1
    assert trigger.pending is False


def test_last_result_follows_latest_callback():
    results = iter([["a"], []])
    trigger = CoalescingTrigger(lambda: next(results))

    trigger.trigger()
    trigger.flush()
    assert trigger.last_result == ["a"]

    trigger.trigger()
    trigger.flush()
    assert trigger.last_result == []


def test_flush_without_pending_does_nothing():
    counter = Counter()
    trigger = CoalescingTrigger(counter)

    assert trigger.flush() is False
    assert counter.calls == 0


def test_cancel_drops_pending():
    counter = Counter()
    trigger = CoalescingTrigger(counter)
    trigger.trigger()
    trigger.cancel()

    assert trigger.flush() is False
    assert counter.calls == 0


@pytest.mark.asyncio
async def test_burst_fires_once():
    """Test that a burst of triggers produces a single callback."""
    counter = Counter()
    trigger = CoalescingTrigger(counter, window=0.05)

    trigger.trigger()
    trigger.trigger()
    trigger.trigger()
    await asyncio.sleep(0.2)

    assert counter.calls == 1
    assert trigger.fire_count == 1
    assert trigger.pending is False


@pytest.mark.asyncio
async def test_window_restarts_on_each_trigger():
    counter = Counter()
    trigger = CoalescingTrigger(counter, window=0.1)

    trigger.trigger()
    await asyncio.sleep(0.06)
    trigger.trigger()
    await asyncio.sleep(0.06)
    assert counter.calls == 0

    await asyncio.sleep(0.15)
    assert counter.calls == 1


@pytest.mark.asyncio
async def test_separate_bursts_fire_separately():
    counter = Counter()
    trigger = CoalescingTrigger(counter, window=0.02)

    trigger.trigger()
    await asyncio.sleep(0.1)
    trigger.trigger()
    await asyncio.sleep(0.1)

    assert counter.calls == 2


@pytest.mark.asyncio
async def test_flush_inside_loop_cancels_timer():
    counter = Counter()
    trigger = CoalescingTrigger(counter, window=0.05)

    trigger.trigger()
    trigger.flush()
    await asyncio.sleep(0.15)

    assert counter.calls == 1
