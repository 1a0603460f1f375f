"""
Utilities module - Common utility functions.
"""

from cognito_ui.utils.logging import setup_logging
from cognito_ui.utils.retry import with_timeout
from cognito_ui.utils.clock import Clock, SystemClock

__all__ = [
    "setup_logging",
    "with_timeout",
    "Clock",
    "SystemClock",
]
