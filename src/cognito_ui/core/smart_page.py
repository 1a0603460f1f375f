"""
Smart Page - Description-driven actions on a page.

Each action resolves its target with retry, checks that the element is the
right kind, waits for it to be ready, then performs exactly one interaction.

Example:
    >>> smart = SmartPage(page)
    >>> await smart.smart_fill("Email", "user@example.com")
    >>> await smart.smart_click("Login Button")
"""

import logging
from typing import Awaitable, Callable, List, Optional, Union, TYPE_CHECKING

from cognito_ui.config.settings import LocatorSettings
from cognito_ui.engine.element_kind import is_input_element, is_select_element
from cognito_ui.engine.resolver import SmartTextLocator
from cognito_ui.engine.strategies import LocatorResult
from cognito_ui.engine.waiter import ResolutionOptions, WaitState, controller_from_settings
from cognito_ui.exceptions.locator import (
    ActionFailedError,
    ElementNotFoundError,
    WrongElementKindError,
)
from cognito_ui.interfaces.browser import ElementState

if TYPE_CHECKING:
    from cognito_ui.interfaces.browser import IElement, IPage
    from cognito_ui.utils.clock import Clock

logger = logging.getLogger(__name__)

# Assign the value directly and notify listeners the way typing would
FILL_SCRIPT = """(el, value) => {
    el.value = '';
    el.value = value;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
}"""


class SmartPage:
    """
    Action executor over a page.

    Args:
        page: The page to act on
        settings: Locator settings (timeouts, retries, matching)
        clock: Time source for the retry loops
    """

    def __init__(
        self,
        page: "IPage",
        settings: Optional[LocatorSettings] = None,
        clock: Optional["Clock"] = None,
    ):
        self._page = page
        self._settings = settings or LocatorSettings()
        self._controller = controller_from_settings(page, self._settings, clock)

    @property
    def page(self) -> "IPage":
        return self._page

    def _options(self, timeout_ms: Optional[int], prefer_inputs: bool = False) -> ResolutionOptions:
        overrides = {"prefer_inputs": prefer_inputs}
        if timeout_ms is not None:
            overrides["timeout_ms"] = timeout_ms
        return ResolutionOptions.from_settings(self._settings, **overrides)

    async def _resolve(
        self,
        description: str,
        kind: str,
        timeout_ms: Optional[int],
        prefer_inputs: bool = False,
    ) -> LocatorResult:
        result = await self._controller.resolve_with_retry(
            description, self._options(timeout_ms, prefer_inputs)
        )
        if result is None:
            raise ElementNotFoundError(description, kind)
        logger.debug(
            f"Resolved '{description}' via {result.strategy} "
            f"(confidence={result.confidence:.2f})"
        )
        return result

    async def _perform(
        self,
        description: str,
        action: str,
        step: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await step()
        except Exception as e:
            raise ActionFailedError(description, action, e) from e

    async def find_by_text(self, description: str, prefer_inputs: bool = False) -> Optional[LocatorResult]:
        """Single resolution attempt, no retries."""
        locator = SmartTextLocator(self._page, self._controller.match_options)
        return await locator.find_by_text(description, prefer_inputs=prefer_inputs)

    async def smart_click(self, description: str, timeout_ms: Optional[int] = None) -> LocatorResult:
        """
        Click the element best matching ``description``.

        Raises:
            ElementNotFoundError: Nothing matched within the budget
            ActionFailedError: The element never became visible or the click failed
        """
        result = await self._resolve(description, "clickable element", timeout_ms)
        element = result.element

        async def click() -> None:
            await element.wait_for_state(ElementState.VISIBLE, self._settings.action_timeout_ms)
            await element.click()

        await self._perform(description, "click", click)
        logger.info(f"Clicked '{description}'")
        return result

    async def smart_fill(self, description: str, value: str, timeout_ms: Optional[int] = None) -> LocatorResult:
        """
        Set the value of the input field best matching ``description``.

        The value is assigned directly and ``input`` and ``change`` events are
        dispatched, so frameworks listening for either see the update.

        Raises:
            ElementNotFoundError: Nothing matched within the budget
            WrongElementKindError: The match is not a text input
            ActionFailedError: The input was not editable or the fill failed
        """
        result = await self._resolve(description, "input field", timeout_ms, prefer_inputs=True)
        element = result.element
        await self._require_kind(description, result, "an input field", is_input_element)

        async def fill() -> None:
            await element.wait_for_state(ElementState.VISIBLE, self._settings.action_timeout_ms)
            await element.wait_for_state(ElementState.EDITABLE, self._settings.action_timeout_ms)
            await element.evaluate(FILL_SCRIPT, value)

        await self._perform(description, "fill", fill)
        logger.info(f"Filled '{description}'")
        return result

    async def smart_select(self, description: str, option: str, timeout_ms: Optional[int] = None) -> LocatorResult:
        """
        Choose ``option`` in the dropdown best matching ``description``.

        The option is tried as a label, then as a value, then as raw text.

        Raises:
            ElementNotFoundError: Nothing matched within the budget
            WrongElementKindError: The match is not a select-like element
            ActionFailedError: No option matched or the element was not ready
        """
        result = await self._resolve(description, "select dropdown", timeout_ms, prefer_inputs=True)
        element = result.element
        await self._require_kind(description, result, "a select dropdown", is_select_element)

        async def select() -> None:
            await element.wait_for_state(ElementState.VISIBLE, self._settings.action_timeout_ms)
            await self._select_option(element, option)

        await self._perform(description, "select", select)
        logger.info(f"Selected '{option}' in '{description}'")
        return result

    async def smart_wait(
        self,
        description: str,
        state: Union[WaitState, str] = WaitState.VISIBLE,
        timeout_ms: Optional[int] = None,
    ) -> LocatorResult:
        """
        Wait until the element matching ``description`` reaches ``state``.

        Returns:
            The LocatorResult whose element satisfied the condition

        Raises:
            ValueError: ``state`` is not attached, detached, visible or hidden
            WaitTimeoutError: The budget ran out
        """
        budget = timeout_ms if timeout_ms is not None else self._settings.timeout_ms
        return await self._controller.wait_for_condition(description, budget, state)

    async def _require_kind(
        self,
        description: str,
        result: LocatorResult,
        expected: str,
        check: Callable[["IElement"], Awaitable[bool]],
    ) -> None:
        if await check(result.element):
            return
        actual = await result.element.tag_name()
        raise WrongElementKindError(description, expected, actual, result.selector)

    async def _select_option(self, element: "IElement", option: str) -> List[str]:
        timeout = self._settings.state_check_timeout_ms
        attempts = (
            lambda: element.select_option(label=option, timeout=timeout),
            lambda: element.select_option(value=option, timeout=timeout),
            lambda: element.select_option(option, timeout=timeout),
        )
        last_error: Optional[Exception] = None
        for attempt in attempts:
            try:
                return await attempt()
            except Exception as e:
                last_error = e
        raise last_error
