"""Tests for cooperative latency simulation."""

import asyncio

import pytest

from mortgage_sim.routing import LatencySimulator


class _RecordingSleep:
    """Sleep double recording requested durations."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_latency_delay_applies_scale() -> None:
    """Verify milliseconds are converted to seconds and multiplied by scale."""

    recording_sleep = _RecordingSleep()
    simulator = LatencySimulator(scale=0.5, sleep=recording_sleep)

    await simulator.latency_delay(1500)
    await simulator.latency_delay(0)

    assert recording_sleep.calls == [0.75, 0.0]


@pytest.mark.asyncio
async def test_latency_delay_rejects_negative_delay() -> None:
    """Verify negative delays raise ValueError."""

    simulator = LatencySimulator(scale=0, sleep=_RecordingSleep())

    with pytest.raises(ValueError):
        await simulator.latency_delay(-1)


def test_latency_simulator_rejects_negative_scale() -> None:
    """Verify negative scale raises ValueError."""

    with pytest.raises(ValueError):
        LatencySimulator(scale=-0.1)


@pytest.mark.asyncio
async def test_latency_concurrent_delays_resolve_shortest_first() -> None:
    """Verify a 3000 ms and an 800 ms delay started together finish shortest first."""

    simulator = LatencySimulator(scale=0.01)
    completion_order: list[int] = []

    async def _delayed(milliseconds: int) -> None:
        await simulator.latency_delay(milliseconds)
        completion_order.append(milliseconds)

    await asyncio.gather(_delayed(3000), _delayed(800))

    assert completion_order == [800, 3000]
