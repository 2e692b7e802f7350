"""Cooperative latency simulation for virtual service handlers."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

SleepCallable = Callable[[float], Awaitable[None]]


class LatencySimulator:
    """Awaitable delay source shared by every handler of one orchestrator.

    Delays suspend only the awaiting coroutine; concurrent dispatches keep
    running on the same event loop.
    """

    def __init__(self, scale: float = 1.0, sleep: SleepCallable | None = None):
        """Initialize simulator with delay scale and sleep implementation.

        Args:
            scale: Multiplier applied to every requested delay. Zero disables waiting.
            sleep: Optional awaitable sleep override used by tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when scale is negative.
        """

        if scale < 0:
            raise ValueError("scale must be >= 0")
        self._scale = float(scale)
        self._sleep = sleep or asyncio.sleep

    @property
    def scale(self) -> float:
        return self._scale

    async def latency_delay(self, milliseconds: float) -> None:
        """Suspend the current coroutine for a scaled number of milliseconds.

        A zero delay still yields to the event loop once.

        Args:
            milliseconds: Unscaled delay.

        Returns:
            None: Coroutine resolves after the delay.

        Raises:
            ValueError: Raised when milliseconds is negative.
        """

        if milliseconds < 0:
            raise ValueError("milliseconds must be >= 0")
        await self._sleep(milliseconds / 1000.0 * self._scale)
