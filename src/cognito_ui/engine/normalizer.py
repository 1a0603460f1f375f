"""
Text Normalizer - Canonical form for search strings and candidate text.
"""

import re
from dataclasses import dataclass
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class MatchOptions:
    """
    How text is compared during resolution.
    
    Attributes:
        ignore_case: Lower-case both sides before comparing
        trim_whitespace: Trim ends and collapse inner whitespace runs
        threshold: Minimum similarity the fuzzy full-document sweep accepts
    """
    ignore_case: bool = True
    trim_whitespace: bool = True
    threshold: float = 0.3


def normalize(
    text: Optional[str],
    ignore_case: bool = True,
    trim_whitespace: bool = True,
) -> str:
    """
    Normalize text for comparison.
    
    Idempotent: ``normalize(normalize(x)) == normalize(x)`` for the same
    options. ``None`` and empty input give ``""``.
    
    Args:
        text: Raw text (may be None)
        ignore_case: Lower-case the result
        trim_whitespace: Collapse whitespace runs to one space and trim
        
    Returns:
        Normalized text
    """
    if not text:
        return ""
    
    if trim_whitespace:
        text = _WHITESPACE.sub(" ", text).strip()
    if ignore_case:
        text = text.lower()
    return text


def normalize_with(text: Optional[str], options: MatchOptions) -> str:
    """Normalize ``text`` using the flags from ``options``."""
    return normalize(text, options.ignore_case, options.trim_whitespace)
