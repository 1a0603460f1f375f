"""
Browser Interface - Abstract base classes for the document collaborator.

The resolution engine never talks to a browser directly. It borrows live
element references from an ``IPage`` implementation, reads them, and (in the
action layer) performs a single interaction on one of them.

Example:
    >>> from cognito_ui.browsers import PlaywrightBrowser
    >>> browser = PlaywrightBrowser()
    >>> await browser.launch(headless=True)
    >>> page = await browser.new_page()
    >>> await page.goto("https://example.com")
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Pattern, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class BrowserType(Enum):
    """Supported browser types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class ElementState(str, Enum):
    """Lifecycle states an element can be waited for."""
    ATTACHED = "attached"
    DETACHED = "detached"
    VISIBLE = "visible"
    HIDDEN = "hidden"
    EDITABLE = "editable"


class IElement(ABC):
    """
    Abstract interface for a live DOM element.

    Handles are owned by the page. Callers only borrow them for the
    duration of one resolution or action and must re-query afterwards.
    """

    @abstractmethod
    async def get_attribute(self, name: str) -> Optional[str]:
        """
        Get an attribute value from this element.

        Args:
            name: The attribute name

        Returns:
            The attribute value, or None if not present
        """
        ...

    @abstractmethod
    async def text_content(self) -> Optional[str]:
        """
        Get the text content of this element.

        Returns:
            The text content including descendants
        """
        ...

    @abstractmethod
    async def tag_name(self) -> str:
        """
        Get the lower-cased tag name (e.g. 'button', 'input').
        """
        ...

    @abstractmethod
    async def is_visible(self) -> bool:
        """
        Check if this element is visible.

        Returns:
            True if the element is visible
        """
        ...

    @abstractmethod
    async def wait_for_state(self, state: Union[ElementState, str], timeout: Optional[int] = None) -> None:
        """
        Wait until the element reaches a lifecycle state.

        Args:
            state: One of attached, detached, visible, hidden, editable
            timeout: Maximum time to wait in milliseconds

        Raises:
            Exception: If the state is not reached in time
        """
        ...

    @abstractmethod
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """
        Run a JavaScript function with this element as first argument.

        Args:
            expression: Function source, e.g. ``(el, value) => ...``
            arg: Optional second argument passed to the function

        Returns:
            The serialized result
        """
        ...

    @abstractmethod
    async def query_selector_all(self, selector: str) -> List["IElement"]:
        """
        Find descendants of this element matching a selector.

        Args:
            selector: CSS selector

        Returns:
            Matching elements in document order
        """
        ...

    @abstractmethod
    async def nearest(self, selector: str, max_distance: float) -> Optional["IElement"]:
        """
        Find the element matching ``selector`` closest to this one on screen.

        Args:
            selector: CSS selector for candidates
            max_distance: Maximum distance in CSS pixels between top-left corners

        Returns:
            The nearest candidate, or None if none is close enough
        """
        ...

    @abstractmethod
    async def next_sibling(self, selector: str) -> Optional["IElement"]:
        """
        Find the first following sibling matching ``selector``.

        Args:
            selector: CSS selector the sibling must match

        Returns:
            The sibling, or None if no later sibling matches
        """
        ...

    @abstractmethod
    async def click(self, **options: Any) -> None:
        """
        Click on this element.

        Args:
            **options: Browser-specific click options (e.g., button, modifiers)
        """
        ...

    @abstractmethod
    async def select_option(
        self,
        value: Optional[str] = None,
        *,
        label: Optional[str] = None,
        **options: Any,
    ) -> List[str]:
        """
        Select an option in a <select> element.

        Args:
            value: Option value (or, for some engines, value-or-label)
            label: Option label
            **options: Browser-specific options

        Returns:
            List of selected option values
        """
        ...


class IPage(ABC):
    """
    Abstract interface for the live document.

    Covers the read-only queries the resolution engine needs plus the few
    navigation helpers used by the CLI and integration tests.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Get the current page URL."""
        ...

    @abstractmethod
    async def goto(self, url: str, **options: Any) -> None:
        """
        Navigate to a URL.

        Args:
            url: The URL to navigate to
            **options: Browser-specific navigation options (e.g., wait_until, timeout)
        """
        ...

    @abstractmethod
    async def set_content(self, html: str, **options: Any) -> None:
        """Replace the document with the given HTML."""
        ...

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional[IElement]:
        """
        Find the first element matching a selector.

        Args:
            selector: CSS selector

        Returns:
            The matching element, or None if not found
        """
        ...

    @abstractmethod
    async def query_selector_all(self, selector: str) -> List[IElement]:
        """
        Find all elements matching a selector.

        Args:
            selector: CSS selector

        Returns:
            List of matching elements in document order
        """
        ...

    @abstractmethod
    async def get_by_role(
        self,
        role: str,
        name: Union[str, Pattern[str]],
        exact: bool = False,
    ) -> List[IElement]:
        """
        Find elements by accessible role and accessible name.

        Args:
            role: ARIA role (implicit or explicit)
            name: Accessible name, or a compiled pattern matched against it
            exact: Require a full, case-sensitive name match (string names only)

        Returns:
            Matching elements in document order
        """
        ...

    @abstractmethod
    async def evaluate(self, expression: str, *args: Any) -> Any:
        """
        Execute JavaScript in the page context.

        Args:
            expression: JavaScript expression or function to execute
            *args: Arguments to pass to the function

        Returns:
            The result of the JavaScript execution
        """
        ...

    @abstractmethod
    async def screenshot(
        self,
        path: Optional["Path"] = None,
        full_page: bool = False,
        **options: Any,
    ) -> bytes:
        """
        Take a screenshot of the page.

        Returns:
            The screenshot as PNG bytes
        """
        ...

    @abstractmethod
    async def wait_for_timeout(self, timeout: int) -> None:
        """
        Wait for a specified amount of time.

        Args:
            timeout: Time to wait in milliseconds
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close this page."""
        ...


class IBrowser(ABC):
    """
    Abstract interface for browser management.
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the browser is connected and running."""
        ...

    @abstractmethod
    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """
        Launch a browser instance.

        Args:
            headless: Whether to run in headless mode
            browser_type: Type of browser to launch
            **options: Browser-specific launch options
        """
        ...

    @abstractmethod
    async def new_page(self, **options: Any) -> IPage:
        """
        Create a new browser page/tab.

        Args:
            **options: Browser-specific context options (e.g., viewport size)

        Returns:
            A new page instance
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the browser and cleanup resources."""
        ...
