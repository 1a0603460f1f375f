"""
Retry Controller - Time-bounded resolution and state waits.

Two loops, both explicit state machines over ``PollState``:

- ``resolve_with_retry``: split the budget across ``max_retries`` attempts,
  race each one against its share, pause ``retry_delay_ms`` in between.
- ``wait_for_condition``: re-resolve on every poll and wait for the found
  element to reach a lifecycle state.

Nothing is carried from one attempt to the next except elapsed time, so a
document that changes between attempts is always read fresh.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union, TYPE_CHECKING

from cognito_ui.engine.normalizer import MatchOptions
from cognito_ui.engine.resolver import ACCEPTANCE_THRESHOLD, SmartTextLocator
from cognito_ui.engine.strategies import LocatorResult
from cognito_ui.exceptions.locator import WaitTimeoutError
from cognito_ui.interfaces.browser import ElementState
from cognito_ui.utils.clock import Clock, SystemClock
from cognito_ui.utils.retry import with_timeout

if TYPE_CHECKING:
    from cognito_ui.config.settings import LocatorSettings
    from cognito_ui.interfaces.browser import IPage

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 500
DEFAULT_STATE_CHECK_TIMEOUT_MS = 2000


class PollState(Enum):
    """States of the retry and wait loops."""
    ATTEMPTING = "attempting"
    WAITING_BACKOFF = "waiting_backoff"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"


class WaitState(str, Enum):
    """Lifecycle states wait_for_condition accepts."""
    ATTACHED = "attached"
    DETACHED = "detached"
    VISIBLE = "visible"
    HIDDEN = "hidden"


@dataclass
class ResolutionOptions:
    """
    Per-call resolution budget.

    Attributes:
        timeout_ms: Overall time budget
        max_retries: Number of attempts the budget is split across
        acceptance_threshold: Minimum confidence (exclusive) for a result
        prefer_inputs: Use the input-oriented strategy order
        retry_delay_ms: Pause between attempts
    """
    timeout_ms: int = 30000
    max_retries: int = 3
    acceptance_threshold: float = ACCEPTANCE_THRESHOLD
    prefer_inputs: bool = False
    retry_delay_ms: int = 500

    @classmethod
    def from_settings(cls, settings: "LocatorSettings", **overrides) -> "ResolutionOptions":
        values = {
            "timeout_ms": settings.timeout_ms,
            "max_retries": settings.max_retries,
            "retry_delay_ms": settings.retry_delay_ms,
        }
        values.update(overrides)
        return cls(**values)


class RetryController:
    """
    Drives a SmartTextLocator under a time budget.

    Args:
        page: Document to resolve against
        match_options: Text comparison options
        clock: Time source; a fake clock makes the loops deterministic
        poll_interval_ms: Delay between polls in ``wait_for_condition``
        state_check_timeout_ms: Cap on each per-poll state wait
    """

    def __init__(
        self,
        page: "IPage",
        match_options: Optional[MatchOptions] = None,
        clock: Optional[Clock] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        state_check_timeout_ms: int = DEFAULT_STATE_CHECK_TIMEOUT_MS,
    ):
        self._page = page
        self._match_options = match_options or MatchOptions()
        self._clock = clock or SystemClock()
        self._poll_interval_ms = poll_interval_ms
        self._state_check_timeout_ms = state_check_timeout_ms

    @property
    def match_options(self) -> MatchOptions:
        return self._match_options

    def _locator(self, acceptance_threshold: float = ACCEPTANCE_THRESHOLD) -> SmartTextLocator:
        return SmartTextLocator(self._page, self._match_options, acceptance_threshold)

    async def resolve_with_retry(
        self,
        description: str,
        options: Optional[ResolutionOptions] = None,
    ) -> Optional[LocatorResult]:
        """
        Resolve a description, retrying until found or the budget runs out.

        Returns:
            LocatorResult, or None when every attempt came back empty
        """
        options = options or ResolutionOptions()
        locator = self._locator(options.acceptance_threshold)
        max_retries = max(1, options.max_retries)
        per_attempt_s = options.timeout_ms / max_retries / 1000

        start = self._clock.monotonic()
        attempt = 0
        result: Optional[LocatorResult] = None
        state = PollState.ATTEMPTING

        while True:
            if state is PollState.ATTEMPTING:
                attempt += 1
                try:
                    result = await with_timeout(
                        locator.find_by_text(description, prefer_inputs=options.prefer_inputs),
                        per_attempt_s,
                        f"Resolution attempt {attempt} timed out",
                    )
                except asyncio.TimeoutError as e:
                    logger.debug(f"'{description}': {e}")
                    result = None
                except Exception as e:
                    logger.debug(f"'{description}': attempt {attempt} failed: {e}")
                    result = None

                if result is not None:
                    state = PollState.SUCCEEDED
                elif attempt >= max_retries or self._clock.elapsed_ms(start) >= options.timeout_ms:
                    state = PollState.TIMED_OUT
                else:
                    state = PollState.WAITING_BACKOFF

            elif state is PollState.WAITING_BACKOFF:
                logger.debug(f"'{description}' not found, retry {attempt + 1}/{max_retries}")
                await self._clock.sleep(options.retry_delay_ms / 1000)
                state = PollState.ATTEMPTING

            elif state is PollState.SUCCEEDED:
                if attempt > 1:
                    logger.info(f"Resolved '{description}' on attempt {attempt}")
                return result

            else:
                logger.warning(f"Gave up resolving '{description}' after {attempt} attempts")
                return None

    async def wait_for_condition(
        self,
        description: str,
        timeout_ms: int = 30000,
        state: Union[WaitState, str] = WaitState.VISIBLE,
        prefer_inputs: bool = False,
    ) -> LocatorResult:
        """
        Wait until an element matching the description reaches ``state``.

        The element must be found for every state, including hidden and
        detached; a description that never resolves times out.

        Raises:
            ValueError: ``state`` is not one of attached, detached, visible, hidden
            WaitTimeoutError: The budget ran out; carries the last error seen
        """
        target_state = ElementState(WaitState(state).value)
        locator = self._locator()
        start = self._clock.monotonic()
        last_error: Optional[str] = None
        result: Optional[LocatorResult] = None
        poll = PollState.ATTEMPTING

        while True:
            remaining = timeout_ms - self._clock.elapsed_ms(start)

            if poll is PollState.ATTEMPTING:
                if remaining <= 0:
                    poll = PollState.TIMED_OUT
                    continue
                try:
                    result = await with_timeout(
                        locator.find_by_text(description, prefer_inputs=prefer_inputs),
                        remaining / 1000,
                        f"Resolving '{description}' timed out",
                    )
                    if result is None:
                        last_error = "element not found"
                    else:
                        sub_timeout = max(1, int(min(remaining, self._state_check_timeout_ms)))
                        await result.element.wait_for_state(target_state, sub_timeout)
                        poll = PollState.SUCCEEDED
                        continue
                except Exception as e:
                    last_error = str(e)
                    logger.debug(f"Waiting for '{description}' to be {target_state.value}: {e}")
                poll = PollState.WAITING_BACKOFF

            elif poll is PollState.WAITING_BACKOFF:
                if remaining <= 0:
                    poll = PollState.TIMED_OUT
                    continue
                await self._clock.sleep(min(self._poll_interval_ms, remaining) / 1000)
                poll = PollState.ATTEMPTING

            elif poll is PollState.SUCCEEDED:
                return result

            else:
                raise WaitTimeoutError(
                    description=description,
                    timeout_ms=timeout_ms,
                    state=target_state.value,
                    last_error=last_error,
                )


def controller_from_settings(
    page: "IPage",
    settings: "LocatorSettings",
    clock: Optional[Clock] = None,
) -> RetryController:
    """Build a RetryController configured from LocatorSettings."""
    return RetryController(
        page,
        match_options=MatchOptions(
            ignore_case=settings.ignore_case,
            trim_whitespace=settings.trim_whitespace,
            threshold=settings.threshold,
        ),
        clock=clock,
        poll_interval_ms=settings.poll_interval_ms,
        state_check_timeout_ms=settings.state_check_timeout_ms,
    )
