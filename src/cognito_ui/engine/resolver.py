"""
Smart Text Locator - Resolve a human description to one live element.

Runs role queries first when the description uses ``role[text]`` syntax,
then the ordered strategy list, keeping the most confident result.

Example:
    >>> locator = SmartTextLocator(page)
    >>> result = await locator.find_by_text("Login Button")
    >>> result.strategy, result.confidence
    ('button-text', 1.0)
"""

import logging
from typing import Optional, Sequence, TYPE_CHECKING

from cognito_ui.engine.normalizer import MatchOptions
from cognito_ui.engine.role_syntax import parse_role_syntax
from cognito_ui.engine.strategies import (
    LocatorResult,
    ROLE_STRATEGY_ORDER,
    StrategyDescriptor,
    strategies_for,
)

if TYPE_CHECKING:
    from cognito_ui.interfaces.browser import IPage

logger = logging.getLogger(__name__)

# Results at or below this confidence are discarded
ACCEPTANCE_THRESHOLD = 0.5

# A result this strong ends the strategy sweep immediately
EARLY_EXIT_CONFIDENCE = 0.95


class SmartTextLocator:
    """
    Single-attempt resolver over a page.

    Holds no state between calls; every call reads the live document.
    """

    def __init__(
        self,
        page: "IPage",
        options: Optional[MatchOptions] = None,
        acceptance_threshold: float = ACCEPTANCE_THRESHOLD,
    ):
        self._page = page
        self._options = options or MatchOptions()
        self._acceptance_threshold = acceptance_threshold

    @property
    def options(self) -> MatchOptions:
        return self._options

    async def find_by_text(
        self,
        description: str,
        prefer_inputs: bool = False,
    ) -> Optional[LocatorResult]:
        """
        Find the element best matching a description.

        Args:
            description: Free text or ``role[text]``
            prefer_inputs: Run input-oriented strategies first

        Returns:
            LocatorResult, or None when nothing clears the acceptance threshold
        """
        if not description or not description.strip():
            return None

        if parse_role_syntax(description) is not None:
            result = await self._run_role_strategies(description)
            if result is not None:
                return result
            logger.debug(f"Role query '{description}' unmatched, falling back to text strategies")

        return await self._run_strategies(description, strategies_for(prefer_inputs))

    async def _attempt(self, strategy: StrategyDescriptor, description: str) -> Optional[LocatorResult]:
        try:
            result = await strategy.find(self._page, description, self._options)
        except Exception as e:
            logger.debug(f"Strategy {strategy.name} failed for '{description}': {e}")
            return None

        if result is not None:
            logger.debug(
                f"Strategy {result.strategy} matched '{description}' "
                f"(confidence={result.confidence:.2f})"
            )
        return result

    async def _run_role_strategies(self, description: str) -> Optional[LocatorResult]:
        for strategy in ROLE_STRATEGY_ORDER:
            result = await self._attempt(strategy, description)
            if result is not None and result.confidence > self._acceptance_threshold:
                return result
        return None

    async def _run_strategies(
        self,
        description: str,
        strategies: Sequence[StrategyDescriptor],
    ) -> Optional[LocatorResult]:
        best: Optional[LocatorResult] = None

        for strategy in strategies:
            result = await self._attempt(strategy, description)
            if result is None:
                continue
            if result.confidence >= EARLY_EXIT_CONFIDENCE:
                return result
            # Strictly greater: the earliest strategy wins ties
            if best is None or result.confidence > best.confidence:
                best = result

        if best is not None and best.confidence > self._acceptance_threshold:
            return best

        if best is not None:
            logger.debug(
                f"Best match for '{description}' below threshold "
                f"({best.strategy}, confidence={best.confidence:.2f})"
            )
        return None
