"""
Tests for the Playwright browser adapter.
"""

import re

import pytest
from unittest.mock import AsyncMock, MagicMock

from cognito_ui.exceptions import BrowserConnectionError, NavigationError
from cognito_ui.interfaces.browser import ElementState


class TestPlaywrightElement:
    """Test the PlaywrightElement wrapper."""

    @pytest.fixture
    def mock_element(self):
        """Create a mock Playwright element."""
        element = AsyncMock()
        element.click = AsyncMock()
        element.select_option = AsyncMock(return_value=["value1"])
        element.get_attribute = AsyncMock(return_value="test-attr")
        element.text_content = AsyncMock(return_value="Test Text")
        element.is_visible = AsyncMock(return_value=True)
        element.wait_for_element_state = AsyncMock()
        element.evaluate = AsyncMock(return_value="div")
        element.query_selector_all = AsyncMock(return_value=[AsyncMock(), AsyncMock()])
        return element

    @pytest.fixture
    def mock_page(self):
        """Create a mock Playwright page."""
        page = MagicMock()
        page.wait_for_function = AsyncMock()
        return page

    @pytest.fixture
    def playwright_element(self, mock_element, mock_page):
        """Create a PlaywrightElement instance."""
        from cognito_ui.browsers.playwright_browser import PlaywrightElement
        return PlaywrightElement(mock_element, mock_page, "button")

    @pytest.mark.asyncio
    async def test_click(self, playwright_element, mock_element):
        """Test click method."""
        await playwright_element.click()
        mock_element.click.assert_called_once()

    @pytest.mark.asyncio
    async def test_select_option_by_value(self, playwright_element, mock_element):
        """Test select_option with a value."""
        result = await playwright_element.select_option("value1")
        mock_element.select_option.assert_called_once_with("value1")
        assert result == ["value1"]

    @pytest.mark.asyncio
    async def test_select_option_by_label(self, playwright_element, mock_element):
        """Test select_option with a label."""
        await playwright_element.select_option(label="Canada", timeout=2000)
        mock_element.select_option.assert_called_once_with(label="Canada", timeout=2000)

    @pytest.mark.asyncio
    async def test_get_attribute(self, playwright_element, mock_element):
        """Test get_attribute method."""
        result = await playwright_element.get_attribute("class")
        mock_element.get_attribute.assert_called_once_with("class")
        assert result == "test-attr"

    @pytest.mark.asyncio
    async def test_text_content(self, playwright_element):
        """Test text_content method."""
        assert await playwright_element.text_content() == "Test Text"

    @pytest.mark.asyncio
    async def test_tag_name(self, playwright_element):
        """Test tag_name method."""
        assert await playwright_element.tag_name() == "div"

    @pytest.mark.asyncio
    async def test_is_visible(self, playwright_element):
        """Test is_visible method."""
        assert await playwright_element.is_visible() is True

    def test_selector(self, playwright_element):
        """Test the selector is kept for diagnostics."""
        assert playwright_element.selector == "button"

    @pytest.mark.asyncio
    async def test_wait_for_visible(self, playwright_element, mock_element):
        """Test waiting for a state Playwright supports directly."""
        await playwright_element.wait_for_state(ElementState.VISIBLE, timeout=5000)
        mock_element.wait_for_element_state.assert_called_once_with("visible", timeout=5000)

    @pytest.mark.asyncio
    async def test_wait_for_detached(self, playwright_element, mock_element, mock_page):
        """Test detached waits poll the connection state."""
        await playwright_element.wait_for_state("detached", timeout=1000)
        mock_page.wait_for_function.assert_called_once_with(
            "el => !el.isConnected", arg=mock_element, timeout=1000,
        )
        mock_element.wait_for_element_state.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_selector_all_wraps_children(self, playwright_element):
        """Test descendants are wrapped."""
        from cognito_ui.browsers.playwright_browser import PlaywrightElement
        children = await playwright_element.query_selector_all("input")
        assert len(children) == 2
        assert all(isinstance(child, PlaywrightElement) for child in children)

    @pytest.mark.asyncio
    async def test_nearest_found(self, playwright_element, mock_element):
        """Test nearest returns the wrapped element."""
        handle = MagicMock()
        handle.as_element.return_value = AsyncMock()
        mock_element.evaluate_handle = AsyncMock(return_value=handle)

        result = await playwright_element.nearest("input", 200)

        assert result is not None
        assert result.selector == "input"
        assert mock_element.evaluate_handle.call_args.args[1] == ["input", 200]

    @pytest.mark.asyncio
    async def test_nearest_none(self, playwright_element, mock_element):
        """Test nearest disposes the handle when nothing is close."""
        handle = MagicMock()
        handle.as_element.return_value = None
        handle.dispose = AsyncMock()
        mock_element.evaluate_handle = AsyncMock(return_value=handle)

        assert await playwright_element.nearest("input", 200) is None
        handle.dispose.assert_called_once()

    @pytest.mark.asyncio
    async def test_next_sibling_found(self, playwright_element, mock_element):
        """Test next_sibling passes the selector and wraps the sibling."""
        handle = MagicMock()
        handle.as_element.return_value = AsyncMock()
        mock_element.evaluate_handle = AsyncMock(return_value=handle)

        result = await playwright_element.next_sibling("input, textarea, select")

        assert result is not None
        assert result.selector.endswith("~ input, textarea, select")
        assert mock_element.evaluate_handle.call_args.args[1] == "input, textarea, select"

    @pytest.mark.asyncio
    async def test_next_sibling_none(self, playwright_element, mock_element):
        """Test next_sibling disposes the handle when no sibling matches."""
        handle = MagicMock()
        handle.as_element.return_value = None
        handle.dispose = AsyncMock()
        mock_element.evaluate_handle = AsyncMock(return_value=handle)

        assert await playwright_element.next_sibling("input") is None
        handle.dispose.assert_called_once()


class TestPlaywrightPage:
    """Test the PlaywrightPage wrapper."""

    @pytest.fixture
    def mock_page(self):
        """Create a mock Playwright page."""
        page = AsyncMock()
        page.url = "https://example.com"
        page.goto = AsyncMock()
        page.query_selector = AsyncMock(return_value=AsyncMock())
        page.query_selector_all = AsyncMock(return_value=[AsyncMock()])
        page.evaluate = AsyncMock(return_value=True)
        page.screenshot = AsyncMock(return_value=b"image_data")
        page.wait_for_timeout = AsyncMock()
        page.close = AsyncMock()
        locator = MagicMock()
        locator.element_handles = AsyncMock(return_value=[AsyncMock()])
        page.get_by_role = MagicMock(return_value=locator)
        return page

    @pytest.fixture
    def playwright_page(self, mock_page):
        """Create a PlaywrightPage instance."""
        from cognito_ui.browsers.playwright_browser import PlaywrightPage
        return PlaywrightPage(mock_page)

    def test_url_property(self, playwright_page):
        """Test url property."""
        assert playwright_page.url == "https://example.com"

    @pytest.mark.asyncio
    async def test_goto(self, playwright_page, mock_page):
        """Test goto method."""
        await playwright_page.goto("https://test.com")
        mock_page.goto.assert_called_once_with("https://test.com")

    @pytest.mark.asyncio
    async def test_goto_failure(self, playwright_page, mock_page):
        """Test navigation failures are wrapped."""
        mock_page.goto.side_effect = Exception("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(NavigationError) as exc_info:
            await playwright_page.goto("https://nowhere.invalid")

        assert exc_info.value.url == "https://nowhere.invalid"

    @pytest.mark.asyncio
    async def test_query_selector_missing(self, playwright_page, mock_page):
        """Test query_selector returns None when nothing matches."""
        mock_page.query_selector.return_value = None
        assert await playwright_page.query_selector("#missing") is None

    @pytest.mark.asyncio
    async def test_query_selector_all(self, playwright_page):
        """Test query_selector_all wraps every handle."""
        elements = await playwright_page.query_selector_all("button")
        assert len(elements) == 1
        assert elements[0].selector == "button"

    @pytest.mark.asyncio
    async def test_get_by_role_exact(self, playwright_page, mock_page):
        """Test string names forward the exact flag."""
        elements = await playwright_page.get_by_role("button", "Save", exact=True)
        mock_page.get_by_role.assert_called_once_with("button", name="Save", exact=True)
        assert elements[0].selector == "role=button"

    @pytest.mark.asyncio
    async def test_get_by_role_pattern(self, playwright_page, mock_page):
        """Test pattern names are passed without exact."""
        pattern = re.compile("save", re.IGNORECASE)
        await playwright_page.get_by_role("button", pattern)
        mock_page.get_by_role.assert_called_once_with("button", name=pattern)

    @pytest.mark.asyncio
    async def test_screenshot(self, playwright_page):
        """Test screenshot method."""
        assert await playwright_page.screenshot() == b"image_data"

    @pytest.mark.asyncio
    async def test_close(self, playwright_page, mock_page):
        """Test close method."""
        await playwright_page.close()
        mock_page.close.assert_called_once()


class TestPlaywrightBrowser:
    """Test the PlaywrightBrowser class."""

    def test_is_connected_before_launch(self):
        """Test is_connected returns False before launch."""
        from cognito_ui.browsers.playwright_browser import PlaywrightBrowser
        browser = PlaywrightBrowser()
        assert browser.is_connected is False

    @pytest.mark.asyncio
    async def test_new_page_before_launch_raises(self):
        """Test new_page raises error if not launched."""
        from cognito_ui.browsers.playwright_browser import PlaywrightBrowser
        browser = PlaywrightBrowser()
        with pytest.raises(BrowserConnectionError, match="Browser not launched"):
            await browser.new_page()

    @pytest.mark.asyncio
    async def test_new_page_reuses_default_context(self):
        """Test pages share one context."""
        from cognito_ui.browsers.playwright_browser import PlaywrightBrowser, PlaywrightPage
        browser = PlaywrightBrowser()
        context = AsyncMock()
        browser._browser = AsyncMock()
        browser._browser.new_context = AsyncMock(return_value=context)

        first = await browser.new_page()
        second = await browser.new_page()

        assert isinstance(first, PlaywrightPage)
        assert isinstance(second, PlaywrightPage)
        browser._browser.new_context.assert_called_once()
        assert context.new_page.call_count == 2

    @pytest.mark.asyncio
    async def test_close_releases_everything(self):
        """Test close shuts down context, browser and Playwright."""
        from cognito_ui.browsers.playwright_browser import PlaywrightBrowser
        browser = PlaywrightBrowser()
        context, chromium, playwright = AsyncMock(), AsyncMock(), AsyncMock()
        browser._default_context = context
        browser._browser = chromium
        browser._playwright = playwright

        await browser.close()

        context.close.assert_called_once()
        chromium.close.assert_called_once()
        playwright.stop.assert_called_once()
        assert browser.is_connected is False
