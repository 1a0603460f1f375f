"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Cognito UI,
providing clear error types for different failure scenarios.
"""

from cognito_ui.exceptions.base import (
    CognitoError,
    ConfigurationError,
)
from cognito_ui.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)
from cognito_ui.exceptions.locator import (
    LocatorError,
    ElementNotFoundError,
    WrongElementKindError,
    WaitTimeoutError,
    ActionFailedError,
)

__all__ = [
    # Base exceptions
    "CognitoError",
    "ConfigurationError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "BrowserConnectionError",
    "NavigationError",
    # Locator exceptions
    "LocatorError",
    "ElementNotFoundError",
    "WrongElementKindError",
    "WaitTimeoutError",
    "ActionFailedError",
]
