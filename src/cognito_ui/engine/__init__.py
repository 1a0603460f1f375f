"""
Engine Module - Smart element resolution.

Turns a human description ("Login Button", "textbox[Email]") into one live
element:
- Text normalization and fuzzy similarity scoring
- The ``role[description]`` query syntax
- An ordered set of independent locating strategies
- A single-attempt resolver and a time-bounded retry/wait controller
"""

from cognito_ui.engine.normalizer import MatchOptions, normalize
from cognito_ui.engine.similarity import (
    levenshtein_distance,
    partial_match_confidence,
    similarity,
)
from cognito_ui.engine.role_syntax import (
    IMPLICIT_ROLE_SELECTORS,
    RoleQuery,
    build_name_pattern,
    parse_role_syntax,
)
from cognito_ui.engine.strategies import (
    GENERAL_STRATEGY_ORDER,
    INPUT_STRATEGY_ORDER,
    LocatorResult,
    StrategyDescriptor,
    strategies_for,
)
from cognito_ui.engine.resolver import SmartTextLocator
from cognito_ui.engine.waiter import PollState, ResolutionOptions, RetryController, WaitState

__all__ = [
    # Text
    "MatchOptions",
    "normalize",
    "levenshtein_distance",
    "similarity",
    "partial_match_confidence",
    # Role syntax
    "RoleQuery",
    "parse_role_syntax",
    "build_name_pattern",
    "IMPLICIT_ROLE_SELECTORS",
    # Strategies
    "LocatorResult",
    "StrategyDescriptor",
    "GENERAL_STRATEGY_ORDER",
    "INPUT_STRATEGY_ORDER",
    "strategies_for",
    # Resolution
    "SmartTextLocator",
    "RetryController",
    "ResolutionOptions",
    "PollState",
    "WaitState",
]
