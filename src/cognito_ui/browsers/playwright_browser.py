"""
Playwright Browser - Implementation of the browser interfaces using Playwright.

This module adapts Playwright's async API to IBrowser, IPage and IElement.
"""

from typing import Any, List, Optional, Pattern, Union
import logging

from cognito_ui.interfaces.browser import (
    IBrowser,
    IPage,
    IElement,
    BrowserType,
    ElementState,
)
from cognito_ui.exceptions.browser import (
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)

logger = logging.getLogger(__name__)

# Nearest candidate by distance between top-left corners
NEAREST_SCRIPT = """(el, [selector, maxDistance]) => {
    const origin = el.getBoundingClientRect();
    let best = null;
    let bestDistance = Infinity;
    for (const candidate of document.querySelectorAll(selector)) {
        if (candidate === el) continue;
        const rect = candidate.getBoundingClientRect();
        const distance = Math.hypot(rect.left - origin.left, rect.top - origin.top);
        if (distance <= maxDistance && distance < bestDistance) {
            best = candidate;
            bestDistance = distance;
        }
    }
    return best;
}"""

NEXT_SIBLING_SCRIPT = """(el, selector) => {
    for (let next = el.nextElementSibling; next; next = next.nextElementSibling) {
        if (next.matches(selector)) return next;
    }
    return null;
}"""

# States Playwright cannot wait for on a handle directly
CONNECTION_SCRIPTS = {
    ElementState.ATTACHED: "el => el.isConnected",
    ElementState.DETACHED: "el => !el.isConnected",
}


class PlaywrightElement(IElement):
    """
    Playwright implementation of IElement.

    Wraps a Playwright ElementHandle for interaction and inspection.
    """

    def __init__(self, element: Any, page: Any, selector: str = ""):
        """
        Initialize the element wrapper.

        Args:
            element: Playwright ElementHandle
            page: The Playwright Page that owns the handle
            selector: The selector used to find this element
        """
        self._element = element
        self._page = page
        self._selector = selector

    @property
    def selector(self) -> str:
        return self._selector

    async def get_attribute(self, name: str) -> Optional[str]:
        """Get an attribute value."""
        return await self._element.get_attribute(name)

    async def text_content(self) -> Optional[str]:
        """Get text content."""
        return await self._element.text_content()

    async def tag_name(self) -> str:
        """Get lower-cased tag name."""
        return await self._element.evaluate("el => el.tagName.toLowerCase()")

    async def is_visible(self) -> bool:
        """Check if visible."""
        return await self._element.is_visible()

    async def wait_for_state(self, state: Union[ElementState, str], timeout: Optional[int] = None) -> None:
        """Wait for a lifecycle state."""
        state = ElementState(state)
        if state in CONNECTION_SCRIPTS:
            await self._page.wait_for_function(CONNECTION_SCRIPTS[state], arg=self._element, timeout=timeout)
            return
        await self._element.wait_for_element_state(state.value, timeout=timeout)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Run JavaScript with this element as first argument."""
        return await self._element.evaluate(expression, arg)

    async def query_selector_all(self, selector: str) -> List[IElement]:
        """Find matching descendants."""
        elements = await self._element.query_selector_all(selector)
        return [PlaywrightElement(el, self._page, selector) for el in elements]

    async def nearest(self, selector: str, max_distance: float) -> Optional[IElement]:
        """Find the closest matching element on screen."""
        handle = await self._element.evaluate_handle(NEAREST_SCRIPT, [selector, max_distance])
        return await self._wrap_handle(handle, selector)

    async def next_sibling(self, selector: str) -> Optional[IElement]:
        """Find the first following sibling matching a selector."""
        handle = await self._element.evaluate_handle(NEXT_SIBLING_SCRIPT, selector)
        return await self._wrap_handle(handle, f"{self._selector} ~ {selector}")

    async def _wrap_handle(self, handle: Any, selector: str) -> Optional[IElement]:
        element = handle.as_element()
        if element is None:
            await handle.dispose()
            return None
        return PlaywrightElement(element, self._page, selector)

    async def click(self, **options: Any) -> None:
        """Click on this element."""
        await self._element.click(**options)

    async def select_option(
        self,
        value: Optional[str] = None,
        *,
        label: Optional[str] = None,
        **options: Any,
    ) -> List[str]:
        """Select an option in a <select> element."""
        if label is not None:
            result = await self._element.select_option(label=label, **options)
        else:
            result = await self._element.select_option(value, **options)
        return result if isinstance(result, list) else [result]


class PlaywrightPage(IPage):
    """
    Playwright implementation of IPage.

    Wraps a Playwright Page for navigation and element queries.
    """

    def __init__(self, page: Any):
        """
        Initialize the page wrapper.

        Args:
            page: Playwright Page object
        """
        self._page = page

    @property
    def url(self) -> str:
        """Get current URL."""
        return self._page.url

    async def goto(self, url: str, **options: Any) -> None:
        """Navigate to URL."""
        try:
            await self._page.goto(url, **options)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url)

    async def set_content(self, html: str, **options: Any) -> None:
        """Replace the document."""
        await self._page.set_content(html, **options)

    async def query_selector(self, selector: str) -> Optional[IElement]:
        """Find first matching element."""
        element = await self._page.query_selector(selector)
        if element:
            return PlaywrightElement(element, self._page, selector)
        return None

    async def query_selector_all(self, selector: str) -> List[IElement]:
        """Find all matching elements."""
        elements = await self._page.query_selector_all(selector)
        return [PlaywrightElement(el, self._page, selector) for el in elements]

    async def get_by_role(
        self,
        role: str,
        name: Union[str, Pattern[str]],
        exact: bool = False,
    ) -> List[IElement]:
        """Find elements by accessible role and name."""
        if isinstance(name, str):
            locator = self._page.get_by_role(role, name=name, exact=exact)
        else:
            locator = self._page.get_by_role(role, name=name)
        handles = await locator.element_handles()
        selector = f"role={role}"
        return [PlaywrightElement(el, self._page, selector) for el in handles]

    async def evaluate(self, expression: str, *args: Any) -> Any:
        """Execute JavaScript."""
        return await self._page.evaluate(expression, *args)

    async def screenshot(
        self,
        path: Optional[Any] = None,
        full_page: bool = False,
        **options: Any,
    ) -> bytes:
        """Take screenshot."""
        return await self._page.screenshot(path=path, full_page=full_page, **options)

    async def wait_for_timeout(self, timeout: int) -> None:
        """Wait for timeout."""
        await self._page.wait_for_timeout(timeout)

    async def close(self) -> None:
        """Close page."""
        await self._page.close()


class PlaywrightBrowser(IBrowser):
    """
    Playwright implementation of IBrowser.

    Example:
        >>> browser = PlaywrightBrowser()
        >>> await browser.launch(headless=True)
        >>> page = await browser.new_page()
        >>> await page.goto("https://example.com")
        >>> await browser.close()
    """

    def __init__(self):
        """Initialize the browser (not launched yet)."""
        self._playwright: Any = None
        self._browser: Any = None
        self._default_context: Any = None

    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()

    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """
        Launch the browser.

        Args:
            headless: Whether to run headless
            browser_type: Type of browser to launch
            **options: Additional Playwright launch options
        """
        try:
            from playwright.async_api import async_playwright

            self._playwright = await async_playwright().start()

            browser_launchers = {
                BrowserType.CHROMIUM: self._playwright.chromium,
                BrowserType.FIREFOX: self._playwright.firefox,
                BrowserType.WEBKIT: self._playwright.webkit,
            }
            launcher = browser_launchers.get(browser_type, self._playwright.chromium)

            self._browser = await launcher.launch(headless=headless, **options)

            logger.info(f"Launched {browser_type.value} browser (headless={headless})")

        except Exception as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}")

    async def new_page(self, **options: Any) -> IPage:
        """
        Create a new page.

        Args:
            **options: Context options (viewport, user_agent, etc.)

        Returns:
            New page instance
        """
        if not self._browser:
            raise BrowserConnectionError("Browser not launched. Call launch() first.")

        if not self._default_context:
            self._default_context = await self._browser.new_context(**options)

        page = await self._default_context.new_page()
        return PlaywrightPage(page)

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._default_context:
            await self._default_context.close()
            self._default_context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("Browser closed")
