"""
Element resolution and action exceptions.

Resolution itself never raises for "nothing matched"; it returns None.
These errors are raised at the action boundary, where the caller has
decided that a missing or unsuitable element is a failure.
"""

from typing import Optional

from cognito_ui.exceptions.base import CognitoError


class LocatorError(CognitoError):
    """Base exception for element resolution and smart actions."""
    
    def __init__(self, message: str, description: str, details: dict | None = None):
        super().__init__(message, details)
        self.description = description
    
    def __str__(self) -> str:
        return self.message


class ElementNotFoundError(LocatorError):
    """
    No element matched the description.
    
    Every strategy failed, or every result fell below the acceptance
    threshold, on every retry attempt.
    """
    
    def __init__(self, description: str, kind: str = "element"):
        super().__init__(
            f'Could not find {kind} with description: "{description}"',
            description,
            {"kind": kind},
        )
        self.kind = kind


class WrongElementKindError(LocatorError):
    """
    Resolution succeeded but the element is not the kind the action needs.
    
    For example a <div> was resolved when a fill target was required.
    """
    
    def __init__(self, description: str, expected: str, actual: str, selector: Optional[str] = None):
        super().__init__(
            f'Found element for "{description}" is not {expected}: got <{actual}>'
            + (f" ({selector})" if selector else ""),
            description,
            {"expected": expected, "actual": actual, "selector": selector},
        )
        self.expected = expected
        self.actual = actual
        self.selector = selector


class WaitTimeoutError(LocatorError):
    """
    The wait budget ran out before the element reached the requested state.
    
    Attributes:
        timeout_ms: The overall budget that elapsed
        state: The requested lifecycle state
        last_error: The last sub-error observed while polling, if any
    """
    
    def __init__(
        self,
        description: str,
        timeout_ms: int,
        state: str,
        last_error: str | BaseException | None = None,
    ):
        last = str(last_error) if last_error else "none"
        super().__init__(
            f'Timeout waiting for element: "{description}" to be {state}. Last error: {last}',
            description,
            {"timeout_ms": timeout_ms, "state": state},
        )
        self.timeout_ms = timeout_ms
        self.state = state
        self.last_error = last_error


class ActionFailedError(LocatorError):
    """
    The element was resolved and valid but the action itself failed.
    
    Typical causes are a stale handle or an element that never became
    visible or editable within the precondition timeout.
    """
    
    def __init__(self, description: str, action: str, cause: BaseException):
        super().__init__(
            f'{action} failed for "{description}": {cause}',
            description,
            {"action": action},
        )
        self.action = action
        self.cause = cause
