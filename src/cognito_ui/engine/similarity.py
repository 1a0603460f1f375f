"""
Similarity Scorer - Fuzzy text matching for element resolution.

Two scores are provided:

- ``similarity``: full fuzzy score used by the last-resort document sweep.
- ``partial_match_confidence``: prefix/suffix/substring aware score used by
  strategies that match a description against one attribute or text.

Both return values in [0, 1] and compare normalized text.
"""

from typing import Optional

from cognito_ui.engine.normalizer import normalize

# Weights applied to the fuzzy components
TOKEN_WEIGHT = 0.7
CHAR_WEIGHT = 0.6

# Fixed scores for direct containment
EXACT_SCORE = 1.0
CONTAINS_SCORE = 0.9
STARTS_WITH_SCORE = 0.9
ENDS_WITH_SCORE = 0.8
PARTIAL_CONTAINS_SCORE = 0.7


def levenshtein_distance(a: str, b: str) -> int:
    """
    Edit distance with unit cost insert, delete and substitute.
    
    Iterative two-row dynamic programme: O(len(a) * len(b)) time,
    O(min(len(a), len(b))) space.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def char_similarity(search: str, target: str) -> float:
    """Unweighted ``1 - distance / longest`` on already-normalized text."""
    longest = max(len(search), len(target))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(search, target) / longest


def token_overlap(search: str, target: str) -> float:
    """
    Fraction of search tokens that appear inside some target token.
    """
    search_tokens = search.split()
    if not search_tokens:
        return 0.0
    target_tokens = target.split()
    matched = sum(
        1 for token in search_tokens
        if any(token in candidate for candidate in target_tokens)
    )
    return matched / len(search_tokens)


def similarity(
    search: Optional[str],
    target: Optional[str],
    ignore_case: bool = True,
    trim_whitespace: bool = True,
) -> float:
    """
    Fuzzy similarity between a search string and a candidate text.
    
    Rules, first match wins:
    1. Exact match after normalization -> 1.0
    2. Target contains search -> 0.9
    3. Otherwise ``max(token_overlap * 0.7, char_similarity * 0.6)``
    
    Args:
        search: What the caller is looking for
        target: Candidate text from the page
        
    Returns:
        Score in [0, 1]
    """
    s = normalize(search, ignore_case, trim_whitespace)
    t = normalize(target, ignore_case, trim_whitespace)
    
    if s == t:
        return EXACT_SCORE
    if not s or not t:
        return 0.0
    if s in t:
        return CONTAINS_SCORE
    
    token_score = token_overlap(s, t) * TOKEN_WEIGHT
    char_score = char_similarity(s, t) * CHAR_WEIGHT
    return max(token_score, char_score)


def partial_match_confidence(
    search: Optional[str],
    target: Optional[str],
    ignore_case: bool = True,
    trim_whitespace: bool = True,
) -> float:
    """
    Confidence that ``target`` is what ``search`` partially describes.
    
    exact 1.0, starts-with 0.9, ends-with 0.8, contains 0.7, otherwise the
    weighted character similarity.
    """
    s = normalize(search, ignore_case, trim_whitespace)
    t = normalize(target, ignore_case, trim_whitespace)
    
    if not s or not t:
        return 0.0
    if s == t:
        return EXACT_SCORE
    if t.startswith(s):
        return STARTS_WITH_SCORE
    if t.endswith(s):
        return ENDS_WITH_SCORE
    if s in t:
        return PARTIAL_CONTAINS_SCORE
    return char_similarity(s, t) * CHAR_WEIGHT
