"""
Browser-related exceptions.
"""

from cognito_ui.exceptions.base import CognitoError


class BrowserError(CognitoError):
    """Base exception for browser-related errors."""
    pass


class BrowserLaunchError(BrowserError):
    """
    Error launching the browser.
    
    Raised when the browser fails to start, which could be due to
    missing browser binaries or invalid launch options.
    """
    pass


class BrowserConnectionError(BrowserError):
    """
    Error connecting to the browser.
    
    Raised when the browser has not been launched or the connection was lost.
    """
    pass


class NavigationError(BrowserError):
    """
    Error during page navigation.
    
    Raised when navigation fails (invalid URL, network error, timeout).
    """
    
    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, {"url": url})
        self.url = url
