"""Periodic refresh of the active view."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Awaitable, Optional, Protocol

from newsfeed.utils.logging import get_logger

logger = get_logger(__name__)


class _Refreshable(Protocol):
    def refresh(self) -> Awaitable[Any]: ...  # noqa: D401


class RefreshScheduler:
    """Calls ``controller.refresh()`` every ``interval_seconds``.

    Only one timer task exists at a time; the next wait starts after the
    previous refresh has finished.
    """

    def __init__(self, controller: _Refreshable, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._controller = controller
        self._interval = float(interval_seconds)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            logger.info("refresh.tick", extra={"interval_seconds": self._interval})
            try:
                await self._controller.refresh()
            except Exception:
                logger.exception("refresh.failed")
