"""
Background refresh of the report cache
"""

import asyncio
import contextlib
import logging
from typing import Optional

from src.core.exceptions import StoreUnavailable
from src.crowdsource.service import ValidationService

logger = logging.getLogger(__name__)


class ReportRefresher:
    """
    Polls the stores on a fixed interval.

    A failed cycle is logged and the next tick tries again. ``stop()``
    cancels the task and waits for it to finish.
    """

    def __init__(self, service: ValidationService, interval: float = 3.0):
        self.service = service
        self.interval = interval
        self.cycles = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                await self.service.refresh()
            except StoreUnavailable:
                self.failures += 1
            self.cycles += 1
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="report-refresher")
        logger.info(f"Report refresher started (every {self.interval}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Report refresher stopped")
