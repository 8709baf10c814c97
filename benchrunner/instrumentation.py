"""Instrumentation around a measured page action.

For CPU benchmarks the measured window is, in order:

1. apply CPU throttling (only when a slowdown factor is given)
2. start tracing
3. settle for SETTLE_BEFORE_RUN_MS
4. force a major garbage collection in the page
5. run the benchmark action
6. settle for SETTLE_AFTER_RUN_MS, then stop tracing
7. reset throttling

Throttling covers exactly the traced window, and the forced GC falls inside
the trace but before the action.
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from benchrunner.models.constants import (
    BYTES_PER_MEGABYTE,
    FORCE_GC_SCRIPT,
    MEASURE_MEMORY_SCRIPT,
    SETTLE_AFTER_RUN_MS,
    SETTLE_BEFORE_RUN_MS,
    TRACE_CATEGORIES,
    UNTHROTTLED_RATE,
)
from benchrunner.utils.logger import Logger

if TYPE_CHECKING:
    from playwright.async_api import Page

    from benchrunner.browser import BrowserSession

Sleep = Callable[[float], Awaitable[Any]]


class Instrumentation:
    """Drives tracing, throttling, GC and settle delays for one browser session.

    Args:
        session: Browser session owning the page being measured.
        sleep: Coroutine used for settle delays, in seconds.
    """

    def __init__(self, session: "BrowserSession", sleep: Sleep = asyncio.sleep) -> None:
        self._session = session
        self._sleep = sleep
        self._log = Logger.get("instrumentation")

    async def settle(self, milliseconds: int) -> None:
        """Wait a fixed time so page activity can quiesce."""
        await self._sleep(milliseconds / 1000)

    async def force_gc(self, page: "Page") -> None:
        """Run a synchronous last-resort major GC in the page."""
        await page.evaluate(FORCE_GC_SCRIPT)

    async def sample_memory_mb(self, page: "Page") -> float:
        """Sample the page's attributed memory usage in megabytes."""
        measurement = await page.evaluate(MEASURE_MEMORY_SCRIPT)
        return float(measurement["bytes"]) / BYTES_PER_MEGABYTE

    async def measure(
        self,
        page: "Page",
        trace_path: Path,
        action: Callable[[], Awaitable[None]],
        slowdown: float | None = None,
    ) -> None:
        """Trace ``action`` on ``page`` into ``trace_path``.

        Args:
            page: Page prepared by the benchmark's init step.
            trace_path: Where the trace file is written.
            action: The measured benchmark step.
            slowdown: CPU slowdown factor for the traced window, or None.
        """
        if slowdown:
            self._log.info(f"CPU slowdown {slowdown}")
            await self._session.set_cpu_throttling(page, slowdown)

        await self._session.start_tracing(page, trace_path, TRACE_CATEGORIES)
        await self.settle(SETTLE_BEFORE_RUN_MS)
        await self.force_gc(page)

        await action()

        await self.settle(SETTLE_AFTER_RUN_MS)
        await self._session.stop_tracing()

        if slowdown:
            await self._session.set_cpu_throttling(page, UNTHROTTLED_RATE)
