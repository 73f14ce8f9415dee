import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicRefresher:
    """
    Background task that calls ``refresh`` now and then every ``interval`` seconds.

    A failing refresh is logged and the loop keeps going. ``stop()`` cancels
    the task and waits for it, so nothing outlives its owner.

    Usage:
        refresher = PeriodicRefresher(monitor.fetch, 30, name="alerts")
        refresher.start()
        ...
        await refresher.stop()
    """

    def __init__(self, refresh: Callable[[], Awaitable[object]], interval: float, name: str = "refresh"):
        self.refresh = refresh
        self.interval = interval
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=f"refresher:{self.name}")
        logger.debug(f"[{self.name}] refresher started (every {self.interval}s)")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.debug(f"[{self.name}] refresher stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"[{self.name}] refresh failed: {e}")
            await asyncio.sleep(self.interval)
