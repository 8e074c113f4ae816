"""Periodic wake source on the asyncio loop."""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """Calls ``callback`` every ``interval_sec`` until stopped.

    Runs as a task on the current event loop, so callbacks never overlap with
    other handlers on that loop.
    """

    def __init__(self, interval_sec: float, callback: Callable[[], None], name: str = "ticker") -> None:
        self._interval_sec = interval_sec
        self._callback = callback
        self._name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_sec)
            try:
                self._callback()
            except Exception:
                logger.exception("%s: tick failed", self._name)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)
        logger.debug("%s: started (interval %.3fs)", self._name, self._interval_sec)

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("%s: stopped", self._name)
