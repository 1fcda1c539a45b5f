"""Browser sessions: one headed Chromium per plan, released on every exit path."""
import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger
from playwright.async_api import Page, async_playwright

import config

# One semaphore per event loop (the console runs each goal in a fresh loop).
_SESSION_SLOTS: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Semaphore]" = (
    weakref.WeakKeyDictionary()
)


def _session_slots() -> asyncio.Semaphore:
    loop = asyncio.get_running_loop()
    slots = _SESSION_SLOTS.get(loop)
    if slots is None:
        slots = asyncio.Semaphore(config.get_max_sessions())
        _SESSION_SLOTS[loop] = slots
    return slots


@asynccontextmanager
async def open_session(
    headless: Optional[bool] = None,
    keep_open_ms: Optional[int] = None,
) -> AsyncIterator[Page]:
    """Yield a page in a maximized, full-size browser window.

    After a successful run the window lingers for keep_open_ms so the operator
    can look at the result. The slot stays held while it lingers, and browser
    and driver are closed on every exit path.
    """
    if headless is None:
        headless = config.get_headless()
    if keep_open_ms is None:
        keep_open_ms = config.get_keep_open_ms()

    async with _session_slots():
        p = await async_playwright().start()
        browser = None
        try:
            browser = await p.chromium.launch(headless=headless, args=["--start-maximized"])
            context = await browser.new_context(no_viewport=True)
            page = await context.new_page()
            logger.debug(f"Browser session opened (headless={headless})")
            yield page
            if keep_open_ms and keep_open_ms > 0:
                logger.info(f"Keeping browser window open for {keep_open_ms} ms")
                await page.wait_for_timeout(keep_open_ms)
        finally:
            await _close(p, browser)


async def _close(p, browser) -> None:
    try:
        if browser is not None:
            await browser.close()
    except Exception as e:
        logger.warning(f"Browser close failed: {e}")
    try:
        await p.stop()
    except Exception as e:
        logger.warning(f"Playwright stop failed: {e}")
    logger.debug("Browser session closed")
