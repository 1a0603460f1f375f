"""
Cognito UI - Resolve human descriptions of page elements to live elements.

Given "Login Button", "email address" or "textbox[Email]", the engine runs an
ordered set of locating strategies against the live page, keeps the most
confident match, retries while the page settles, and performs one action.

Example:
    >>> from cognito_ui import SmartPage
    >>> smart = SmartPage(page)
    >>> await smart.smart_fill("email address", "user@example.com")
    >>> await smart.smart_click("button[Sign in]")
"""

__version__ = "0.1.0"

# Public API exports
from cognito_ui.core.smart_page import SmartPage
from cognito_ui.config.settings import Settings
from cognito_ui.engine.resolver import SmartTextLocator
from cognito_ui.engine.strategies import LocatorResult
from cognito_ui.engine.waiter import ResolutionOptions, RetryController

__all__ = [
    "SmartPage",
    "SmartTextLocator",
    "RetryController",
    "ResolutionOptions",
    "LocatorResult",
    "Settings",
    "__version__",
]
