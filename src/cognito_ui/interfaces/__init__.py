"""
Interfaces module - Abstract base classes for pluggable collaborators.

The resolution engine depends only on these contracts, so any browser
engine (or an in-memory fake in tests) can back it.
"""

from cognito_ui.interfaces.browser import (
    IBrowser,
    IPage,
    IElement,
    ElementState,
    BrowserType,
)

__all__ = [
    "IBrowser",
    "IPage",
    "IElement",
    "ElementState",
    "BrowserType",
]
