"""Periodic remote-service recheck."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import contextlib
import logging

from ghostwrite.constants import RECHECK_INTERVAL
from ghostwrite.manager import CapabilityManager

log = logging.getLogger(__name__)


class RecheckScheduler:
    """Rechecks the remote service on a fixed interval while it is connected.

    A tick that finds the previous one still running does nothing, so rechecks
    never overlap.
    """

    def __init__(
        self,
        manager: CapabilityManager,
        interval_seconds: float = RECHECK_INTERVAL,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self.manager = manager
        self.interval = interval_seconds
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._in_flight = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="ghostwrite-recheck")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def tick(self) -> bool:
        """Run one recheck. Returns False when the tick was skipped."""
        if self._in_flight:
            log.debug("Recheck already in flight, skipping tick")
            return False
        if not self.manager.state.remote.connected:
            return False

        self._in_flight = True
        try:
            await self.manager.recheck_remote_service()
        except Exception as e:
            log.warning("Periodic recheck failed: %s", e)
        finally:
            self._in_flight = False
        return True

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval)
            await self.tick()
