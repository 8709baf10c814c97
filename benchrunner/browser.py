"""Chromium sessions for benchmark jobs.

Playwright exposes tracing on the browser and CPU throttling through a CDP
session, so both are wrapped here next to the launch code. Executors and the
instrumentation controller only talk to ``BrowserSession``.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from playwright.async_api import async_playwright

from benchrunner.models.constants import UNTHROTTLED_RATE
from benchrunner.models.job_models import BenchmarkOptions, FrameworkData
from benchrunner.utils.logger import Logger

if TYPE_CHECKING:
    from playwright.async_api import Browser, CDPSession, Page, Playwright

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800

LAUNCH_ARGS: tuple[str, ...] = (
    f"--window-size={WINDOW_WIDTH},{WINDOW_HEIGHT}",
    "--js-flags=--expose-gc",
    "--enable-benchmarking",
    "--enable-features=ForceEagerMeasureMemory",
    "--disable-background-networking",
    "--no-first-run",
)


def benchmark_url(framework: FrameworkData, options: BenchmarkOptions) -> str:
    """Build the URL serving a framework's benchmark page."""
    return f"http://{options.host}:{options.port}/{framework.uri}/index.html"


class BrowserSession:
    """One Chromium instance owned by a single job.

    CPU throttling lives on a CDP session attached to the page. Chromium
    resets the rate when that session detaches, so it stays attached from
    the first throttle call until the rate is set back to 1 or the page is
    closed.
    """

    def __init__(self, playwright: "Playwright", browser: "Browser") -> None:
        self._playwright = playwright
        self._browser = browser
        self._cdp_sessions: dict["Page", "CDPSession"] = {}

    async def new_page(self) -> "Page":
        """Open a page in a fresh browser context."""
        return await self._browser.new_page(
            viewport={"width": WINDOW_WIDTH, "height": WINDOW_HEIGHT}
        )

    async def close_page(self, page: "Page") -> None:
        """Detach the page's throttling session, if any, and close the page."""
        cdp = self._cdp_sessions.pop(page, None)
        try:
            if cdp is not None:
                await cdp.detach()
        finally:
            await page.close()

    async def start_tracing(
        self, page: "Page", path: Path, categories: Sequence[str]
    ) -> None:
        """Start a Chromium trace of ``page`` written to ``path``."""
        await self._browser.start_tracing(
            page=page, path=str(path), screenshots=False, categories=list(categories)
        )

    async def stop_tracing(self) -> None:
        """Stop the running trace and flush it to disk."""
        await self._browser.stop_tracing()

    async def set_cpu_throttling(self, page: "Page", rate: float) -> None:
        """Slow the page's CPU down by ``rate``.

        Setting UNTHROTTLED_RATE resets the page and releases its CDP session.
        """
        cdp = self._cdp_sessions.get(page)
        if cdp is None:
            cdp = await page.context.new_cdp_session(page)
            self._cdp_sessions[page] = cdp

        await cdp.send("Emulation.setCPUThrottlingRate", {"rate": rate})

        if rate == UNTHROTTLED_RATE:
            del self._cdp_sessions[page]
            await cdp.detach()

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver."""
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


async def start_browser(options: BenchmarkOptions) -> BrowserSession:
    """Launch Chromium for one job.

    Args:
        options: Job options; ``headless`` and ``chrome_binary_path`` are used.

    Returns:
        A started BrowserSession. The caller owns it and must close it.
    """
    log = Logger.get("browser")
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=options.headless,
            executable_path=options.chrome_binary_path,
            args=list(LAUNCH_ARGS),
            ignore_default_args=["--enable-automation"],
        )
    except Exception:
        await playwright.stop()
        raise
    log.debug(
        f"browser started (version {browser.version}, headless={options.headless})"
    )
    return BrowserSession(playwright, browser)
