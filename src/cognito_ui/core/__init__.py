"""
Core module - Smart actions on top of element resolution.
"""

from cognito_ui.core.smart_page import SmartPage, FILL_SCRIPT

__all__ = [
    "SmartPage",
    "FILL_SCRIPT",
]
