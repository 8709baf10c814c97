"""Page navigation with a single retry."""

from typing import TYPE_CHECKING

from benchrunner.utils.logger import Logger

if TYPE_CHECKING:
    from playwright.async_api import Page


async def navigate(page: "Page", url: str) -> None:
    """Load ``url`` and wait for the network to go idle.

    A failed load is retried once with the same parameters. A second failure
    propagates to the caller.
    """
    try:
        await page.goto(url, wait_until="networkidle")
    except Exception as e:
        Logger.get("navigation").warning(
            f"**** loading benchmark failed, retrying ({e})"
        )
        await page.goto(url, wait_until="networkidle")
