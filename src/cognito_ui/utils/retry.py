"""
Timeout utilities for racing a coroutine against a deadline.
"""

import asyncio
from typing import Any, Awaitable


async def with_timeout(
    coro: Awaitable[Any],
    timeout_seconds: float,
    error_message: str = "Operation timed out",
) -> Any:
    """
    Execute a coroutine with a timeout.
    
    The coroutine is cancelled when the deadline passes. Callers must not
    share mutable state with it, since its partial work is simply dropped.
    
    Args:
        coro: Coroutine to execute
        timeout_seconds: Timeout in seconds
        error_message: Message for timeout error
        
    Returns:
        Coroutine result
        
    Raises:
        asyncio.TimeoutError if timeout is exceeded
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise asyncio.TimeoutError(error_message)
