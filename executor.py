"""Browser executor: runs planned steps one by one against a Playwright page."""
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PWTimeoutError

import config
from core.browser import open_session

# First a/button/div/span (document order) whose visible text contains the fragment.
FIND_AND_CLICK_TEXT_JS = """(text) => {
  const needle = text.toLowerCase();
  const el = [...document.querySelectorAll("a, button, div, span")].find(
    (e) => e.innerText && e.innerText.trim().toLowerCase().includes(needle)
  );
  if (el) {
    el.click();
    return true;
  }
  return false;
}"""


class PlanExecutionError(Exception):
    """A step failed in a way that stops the rest of the plan."""

    def __init__(self, index: int, action: Dict[str, Any], cause: Exception):
        self.index = index
        self.action = action
        self.cause = cause
        super().__init__(f"Step {index} {action!r} failed: {cause}")


class BrowserAgent:
    """Execute planned steps (goto, type, click, findAndClickText, wait) on one page."""

    def __init__(
        self,
        page: Page,
        locator_timeout_ms: Optional[int] = None,
        type_delay_ms: Optional[int] = None,
        settle_ms: Optional[int] = None,
        default_wait_ms: Optional[int] = None,
    ):
        self.page = page
        self.locator_timeout_ms = (
            config.get_locator_timeout_ms() if locator_timeout_ms is None else locator_timeout_ms
        )
        self.type_delay_ms = config.get_type_delay_ms() if type_delay_ms is None else type_delay_ms
        self.settle_ms = config.get_settle_ms() if settle_ms is None else settle_ms
        self.default_wait_ms = (
            config.get_default_wait_ms() if default_wait_ms is None else default_wait_ms
        )

    async def navigate(self, url: str) -> None:
        await self.page.goto(url, wait_until="networkidle")

    async def type_text(self, selector: str, text: str, delay: Optional[int] = None) -> None:
        await self.page.wait_for_selector(selector, timeout=self.locator_timeout_ms)
        await self.page.type(
            selector, text, delay=self.type_delay_ms if delay is None else delay
        )

    async def click(self, selector: str) -> None:
        await self.page.wait_for_selector(selector, timeout=self.locator_timeout_ms)
        await self.page.click(selector)

    async def find_and_click_text(self, text: str) -> bool:
        clicked = await self.page.evaluate(FIND_AND_CLICK_TEXT_JS, text)
        if not clicked:
            logger.warning(f"No element with visible text containing {text!r}")
        await self.page.wait_for_timeout(self.settle_ms)
        return bool(clicked)

    async def wait(self, time_ms: Optional[int] = None) -> None:
        await self.page.wait_for_timeout(time_ms or self.default_wait_ms)

    async def execute(self, action: Dict[str, Any]) -> None:
        action_type = action.get("action")
        logger.info(f"Running step: {action}")

        if action_type == "goto":
            await self.navigate(action.get("url"))
        elif action_type == "type":
            await self.type_text(action.get("selector"), action.get("text"), action.get("delay"))
        elif action_type == "click":
            await self.click(action.get("selector"))
        elif action_type == "findAndClickText":
            text = action.get("text")
            if isinstance(text, str) and text.strip():
                await self.find_and_click_text(text)
            else:
                logger.warning(f"findAndClickText step has no text, not clicking: {action}")
                await self.page.wait_for_timeout(self.settle_ms)
        elif action_type == "wait":
            await self.wait(action.get("time"))
        else:
            logger.warning(f"Unknown action, skipping: {action}")

    async def run(self, actions: List[Dict[str, Any]]) -> int:
        """Run every step once, in order. Returns the number of steps run."""
        for i, action in enumerate(actions):
            try:
                await self.execute(action)
            except PWTimeoutError as e:
                logger.error(f"Timed out waiting for step {i}: {action}")
                raise PlanExecutionError(i, action, e) from e
            except PlaywrightError as e:
                logger.error(f"Step {i} failed: {action}: {e}")
                raise PlanExecutionError(i, action, e) from e
        return len(actions)


async def execute_actions(
    actions: List[Dict[str, Any]],
    headless: Optional[bool] = None,
    keep_open_ms: Optional[int] = None,
) -> int:
    """Open one browser session and run the whole plan in it."""
    async with open_session(headless=headless, keep_open_ms=keep_open_ms) as page:
        agent = BrowserAgent(page)
        return await agent.run(actions)
