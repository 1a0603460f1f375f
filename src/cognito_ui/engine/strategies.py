"""
Strategy Set - Independent heuristics for finding one element by description.

Each strategy reads the live page and returns at most one LocatorResult.
Strategies never mutate the page. Confidence values are comparable across
strategies so the resolver can keep a global best:

    exact-text          1.0            normalized text equality
    button-text         1.0 / 0.95     buttons, exact / contains
    link-text           partial        anchors
    aria-label          0.9            exact aria-label
    aria-labelledby     0.95           text of referenced ids
    aria-describedby    partial x 0.95 secondary signal
    placeholder         partial        input/textarea placeholder
    title-attr          0.8 / 0.7      title attribute, exact / contains
    partial-text        partial        broad sweep, queries of 3+ chars
    fuzzy-text          similarity     full document sweep, last resort
    label-for-input     1.0 / 0.95     <label> association (input order only)
    input-name          0.9            name attribute (input order only)
    input-id            0.85           id attribute (input order only)
    text-near-input     0.7            control nearest to matching text

Role queries (``role[description]``) use the two role strategies at the
bottom of this module instead of the ordered lists.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, FrozenSet, List, Optional, Tuple, TYPE_CHECKING

from cognito_ui.engine.element_kind import FORM_CONTROL_SELECTOR, is_form_control, is_input_element
from cognito_ui.engine.normalizer import MatchOptions, normalize_with
from cognito_ui.engine.role_syntax import build_name_pattern, parse_role_syntax, role_selectors
from cognito_ui.engine.similarity import (
    PARTIAL_CONTAINS_SCORE,
    partial_match_confidence,
    similarity,
)

if TYPE_CHECKING:
    from cognito_ui.interfaces.browser import IElement, IPage

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT & DESCRIPTOR TYPES
# =============================================================================

@dataclass
class LocatorResult:
    """
    A resolved element.

    Attributes:
        element: Live handle borrowed from the page; do not keep it across retries
        confidence: Match strength in [0, 1]
        strategy: Name of the strategy that produced the match
        matched_text: Text or attribute value that matched, if any
        selector: Diagnostic description of how the element was queried
    """
    element: "IElement"
    confidence: float
    strategy: str
    matched_text: Optional[str] = None
    selector: Optional[str] = None


Finder = Callable[["IPage", str, MatchOptions], Awaitable[Optional[LocatorResult]]]


@dataclass(frozen=True)
class StrategyDescriptor:
    """A named, immutable element-finding heuristic."""
    name: str
    finder: Finder
    description: str = ""

    async def find(self, page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
        return await self.finder(page, description, options)


# =============================================================================
# SELECTORS & CONSTANTS
# =============================================================================

CONTENT_TAGS = (
    "button, a, span, div, p, h1, h2, h3, h4, h5, h6, "
    "li, td, th, option, legend, summary"
)
INLINE_TAGS = ", strong, em, b, small, dt, dd, caption, figcaption"
TEXT_TAGS = CONTENT_TAGS + ", label"
PARTIAL_TEXT_TAGS = TEXT_TAGS + INLINE_TAGS

# When looking for a field, a <label> stands for its control, never for itself
FIELD_TEXT_TAGS = CONTENT_TAGS
FIELD_PARTIAL_TEXT_TAGS = CONTENT_TAGS + INLINE_TAGS

BUTTON_SELECTOR = (
    'button, [role="button"], input[type="submit"], '
    'input[type="button"], input[type="reset"]'
)
LINK_SELECTOR = "a"
PLACEHOLDER_SELECTOR = "input[placeholder], textarea[placeholder]"

# Tags whose text is never user-facing content
NON_CONTENT_TAGS = frozenset({
    "html", "head", "body", "script", "style", "noscript", "template",
    "title", "meta", "link", "svg", "path",
})
FIELD_NON_CONTENT_TAGS = NON_CONTENT_TAGS | {"label"}

BUTTON_CONTAINS_SCORE = 0.95
ARIA_LABEL_SCORE = 0.9
LABELLEDBY_SCORE = 0.95
DESCRIBEDBY_WEIGHT = 0.95
TITLE_EXACT_SCORE = 0.8
TITLE_CONTAINS_SCORE = 0.7
LABEL_NESTED_WEIGHT = 0.95
LABEL_SIBLING_WEIGHT = 0.9
INPUT_NAME_SCORE = 0.9
INPUT_ID_SCORE = 0.85
NEAR_INPUT_SCORE = 0.7
NEAR_INPUT_MAX_DISTANCE = 200
ROLE_EXACT_SCORE = 1.0
ROLE_PARTIAL_SCORE = 0.9
IMPLICIT_TEXT_WEIGHT = 0.85

MIN_PARTIAL_LENGTH = 3
MAX_FUZZY_TEXT_LENGTH = 200


# =============================================================================
# HELPERS
# =============================================================================

async def _safe_visible(element: "IElement") -> bool:
    try:
        return await element.is_visible()
    except Exception:
        return False


class _BestCandidate:
    """
    Keeps the strongest candidate a strategy has seen.

    Higher confidence wins; on equal confidence a visible element replaces a
    hidden one; otherwise the earlier element in document order is kept.
    """

    def __init__(self, strategy: str):
        self.strategy = strategy
        self.result: Optional[LocatorResult] = None
        self.visible = False

    @property
    def settled(self) -> bool:
        """A visible exact match cannot be beaten."""
        return self.result is not None and self.visible and self.result.confidence >= 1.0

    async def offer(
        self,
        element: "IElement",
        confidence: float,
        matched_text: Optional[str] = None,
        selector: Optional[str] = None,
        strategy: Optional[str] = None,
    ) -> None:
        if self.result is not None:
            if confidence < self.result.confidence:
                return
            if confidence == self.result.confidence and self.visible:
                return
        visible = await _safe_visible(element)
        if self.result is not None and confidence == self.result.confidence and not visible:
            return
        self.result = LocatorResult(
            element=element,
            confidence=confidence,
            strategy=strategy or self.strategy,
            matched_text=matched_text,
            selector=selector,
        )
        self.visible = visible


async def _text_of(element: "IElement") -> str:
    return (await element.text_content() or "").strip()


async def _referenced_text(page: "IPage", element: "IElement", attribute: str) -> str:
    """Joined text of the elements whose ids are listed in ``attribute``."""
    ids = (await element.get_attribute(attribute) or "").split()
    parts: List[str] = []
    for ref in ids:
        target = await page.query_selector(f'[id="{ref}"]')
        if target is not None:
            text = await _text_of(target)
            if text:
                parts.append(text)
    return " ".join(parts)


def _contained(search: str, target: str, options: MatchOptions) -> float:
    """Partial-match confidence, or 0.0 unless target contains search."""
    confidence = partial_match_confidence(search, target, options.ignore_case, options.trim_whitespace)
    return confidence if confidence >= PARTIAL_CONTAINS_SCORE else 0.0


# =============================================================================
# GENERIC STRATEGIES
# =============================================================================

async def _exact_text(page: "IPage", description: str, options: MatchOptions, tags: str) -> Optional[LocatorResult]:
    search = normalize_with(description, options)
    best = _BestCandidate("exact-text")
    for element in await page.query_selector_all(tags):
        text = await _text_of(element)
        if text and normalize_with(text, options) == search:
            await best.offer(element, 1.0, text, f'text="{description}"')
            if best.settled:
                break
    return best.result


async def find_button_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    search = normalize_with(description, options)
    best = _BestCandidate("button-text")
    for element in await page.query_selector_all(BUTTON_SELECTOR):
        texts = [await _text_of(element), (await element.get_attribute("value") or "").strip()]
        for text in texts:
            candidate = normalize_with(text, options)
            if not candidate:
                continue
            if candidate == search:
                await best.offer(element, 1.0, text, BUTTON_SELECTOR)
            elif search in candidate:
                await best.offer(element, BUTTON_CONTAINS_SCORE, text, BUTTON_SELECTOR)
        if best.settled:
            break
    return best.result


async def find_link_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    best = _BestCandidate("link-text")
    for element in await page.query_selector_all(LINK_SELECTOR):
        text = await _text_of(element)
        confidence = _contained(description, text, options)
        if confidence:
            await best.offer(element, confidence, text, f'a:has-text("{description}")')
            if best.settled:
                break
    return best.result


async def find_aria_label(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    search = normalize_with(description, options)
    best = _BestCandidate("aria-label")
    for element in await page.query_selector_all("[aria-label]"):
        label = await element.get_attribute("aria-label") or ""
        if normalize_with(label, options) == search:
            await best.offer(element, ARIA_LABEL_SCORE, label, f'[aria-label="{label}"]')
            if best.visible:
                break
    return best.result


async def find_aria_labelledby(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    search = normalize_with(description, options)
    best = _BestCandidate("aria-labelledby")
    for element in await page.query_selector_all("[aria-labelledby]"):
        label = await _referenced_text(page, element, "aria-labelledby")
        if label and normalize_with(label, options) == search:
            await best.offer(element, LABELLEDBY_SCORE, label, "[aria-labelledby]")
            if best.visible:
                break
    return best.result


async def find_aria_describedby(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    best = _BestCandidate("aria-describedby")
    for element in await page.query_selector_all("[aria-describedby]"):
        text = await _referenced_text(page, element, "aria-describedby")
        if not text:
            continue
        confidence = partial_match_confidence(description, text, options.ignore_case, options.trim_whitespace)
        if confidence > 0:
            await best.offer(element, confidence * DESCRIBEDBY_WEIGHT, text, "[aria-describedby]")
    return best.result


async def find_placeholder(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    best = _BestCandidate("placeholder")
    for element in await page.query_selector_all(PLACEHOLDER_SELECTOR):
        placeholder = await element.get_attribute("placeholder") or ""
        confidence = _contained(description, placeholder, options)
        if confidence:
            await best.offer(element, confidence, placeholder, f'[placeholder*="{description}"]')
            if best.settled:
                break
    return best.result


async def find_title(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    search = normalize_with(description, options)
    best = _BestCandidate("title-attr")
    for element in await page.query_selector_all("[title]"):
        title = await element.get_attribute("title") or ""
        candidate = normalize_with(title, options)
        if not candidate or not search:
            continue
        if candidate == search:
            await best.offer(element, TITLE_EXACT_SCORE, title, f'[title="{title}"]')
        elif search in candidate:
            await best.offer(element, TITLE_CONTAINS_SCORE, title, f'[title*="{description}"]')
    return best.result


async def _partial_text(page: "IPage", description: str, options: MatchOptions, tags: str) -> Optional[LocatorResult]:
    if len(normalize_with(description, options)) < MIN_PARTIAL_LENGTH:
        return None
    best = _BestCandidate("partial-text")
    for element in await page.query_selector_all(tags):
        text = await _text_of(element)
        confidence = _contained(description, text, options)
        if confidence:
            await best.offer(element, confidence, text, f"text={description}")
            if best.settled:
                break
    return best.result


async def _fuzzy_text(
    page: "IPage",
    description: str,
    options: MatchOptions,
    skip_tags: FrozenSet[str],
) -> Optional[LocatorResult]:
    # Visits every element: O(elements) per call
    best = _BestCandidate("fuzzy-text")
    for element in await page.query_selector_all("*"):
        if await element.tag_name() in skip_tags:
            continue
        text = normalize_with(await element.text_content(), options)
        if not 0 < len(text) < MAX_FUZZY_TEXT_LENGTH:
            continue
        score = similarity(description, text, options.ignore_case, options.trim_whitespace)
        if score >= options.threshold:
            await best.offer(element, score, text, "*")
    return best.result


async def find_exact_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _exact_text(page, description, options, TEXT_TAGS)


async def find_partial_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _partial_text(page, description, options, PARTIAL_TEXT_TAGS)


async def find_fuzzy_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _fuzzy_text(page, description, options, NON_CONTENT_TAGS)


async def find_field_exact_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _exact_text(page, description, options, FIELD_TEXT_TAGS)


async def find_field_partial_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _partial_text(page, description, options, FIELD_PARTIAL_TEXT_TAGS)


async def find_field_fuzzy_text(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _fuzzy_text(page, description, options, FIELD_NON_CONTENT_TAGS)


# =============================================================================
# INPUT-ORIENTED STRATEGIES
# =============================================================================

async def find_label_for_input(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    best = _BestCandidate("label-for-input")
    for label in await page.query_selector_all("label"):
        text = await _text_of(label)
        confidence = _contained(description, text, options)
        if not confidence:
            continue

        target_id = await label.get_attribute("for")
        if target_id:
            control = await page.query_selector(f'[id="{target_id}"]')
            if control is not None and await is_form_control(control):
                await best.offer(control, confidence, text, f'[id="{target_id}"]')
                continue

        nested = await label.query_selector_all(FORM_CONTROL_SELECTOR)
        if nested:
            await best.offer(
                nested[0],
                confidence * LABEL_NESTED_WEIGHT,
                text,
                f'label:has-text("{description}") input',
                strategy="label-contains-input",
            )
        else:
            sibling = await label.next_sibling(FORM_CONTROL_SELECTOR)
            if sibling is not None:
                await best.offer(
                    sibling,
                    confidence * LABEL_SIBLING_WEIGHT,
                    text,
                    f'label:has-text("{description}") ~ input',
                    strategy="label-next-sibling",
                )
        if best.settled:
            break
    return best.result


async def _find_by_control_attribute(
    page: "IPage",
    description: str,
    options: MatchOptions,
    attribute: str,
    score: float,
    strategy: str,
) -> Optional[LocatorResult]:
    search = normalize_with(description, options)
    if not search:
        return None
    best = _BestCandidate(strategy)
    for element in await page.query_selector_all(FORM_CONTROL_SELECTOR):
        value = await element.get_attribute(attribute)
        if value and search in normalize_with(value, options):
            await best.offer(element, score, value, f'[{attribute}*="{search}"]')
            if best.visible:
                break
    return best.result


async def find_input_name(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _find_by_control_attribute(page, description, options, "name", INPUT_NAME_SCORE, "input-name")


async def find_input_id(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    return await _find_by_control_attribute(page, description, options, "id", INPUT_ID_SCORE, "input-id")


async def _has_matching_descendant(element: "IElement", description: str, options: MatchOptions) -> bool:
    # Anchor on the innermost text, not on wrappers around several fields
    for child in await element.query_selector_all(PARTIAL_TEXT_TAGS):
        if _contained(description, await _text_of(child), options):
            return True
    return False


async def find_text_near_input(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    for element in await page.query_selector_all(PARTIAL_TEXT_TAGS):
        text = await _text_of(element)
        if not _contained(description, text, options):
            continue
        if await _has_matching_descendant(element, description, options):
            continue
        control = await element.nearest('input:not([type="hidden"]), textarea, select', NEAR_INPUT_MAX_DISTANCE)
        if control is not None and await is_input_element(control):
            return LocatorResult(
                element=control,
                confidence=NEAR_INPUT_SCORE,
                strategy="text-near-input",
                matched_text=text,
                selector=f"text={description} (nearest input)",
            )
    return None


# =============================================================================
# ROLE STRATEGIES
# =============================================================================

async def _first_visible(elements: List["IElement"]) -> Optional["IElement"]:
    for element in elements:
        if await _safe_visible(element):
            return element
    return elements[0] if elements else None


async def find_native_role(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    """
    Accessible role + name query: exact name first, then a word pattern.
    """
    query = parse_role_syntax(description)
    if query is None:
        return None

    exact = await _first_visible(await page.get_by_role(query.role, name=query.description, exact=True))
    if exact is not None:
        return LocatorResult(
            element=exact,
            confidence=ROLE_EXACT_SCORE,
            strategy="aria-role-native-exact",
            matched_text=description,
            selector=f'role={query.role}[name="{query.description}"]',
        )

    logger.debug(f"No {query.role} named exactly '{query.description}', trying word pattern")
    pattern = build_name_pattern(query.description)
    partial = await _first_visible(await page.get_by_role(query.role, name=pattern))
    if partial is not None:
        return LocatorResult(
            element=partial,
            confidence=ROLE_PARTIAL_SCORE,
            strategy="aria-role-native-partial",
            matched_text=description,
            selector=f"role={query.role}[name=/{pattern.pattern}/i]",
        )
    return None


async def _implicit_role_match(
    page: "IPage",
    element: "IElement",
    role: str,
    search: str,
    options: MatchOptions,
) -> Optional[Tuple[float, str]]:
    """First label source that matches, in priority order."""
    label = await element.get_attribute("aria-label")
    if label:
        confidence = _contained(search, label, options)
        if confidence:
            return confidence, "aria-label"

    labelledby = await _referenced_text(page, element, "aria-labelledby")
    if labelledby:
        confidence = _contained(search, labelledby, options)
        if confidence:
            return confidence, "aria-labelledby"

    describedby = await _referenced_text(page, element, "aria-describedby")
    if describedby:
        confidence = _contained(search, describedby, options)
        if confidence:
            return confidence * DESCRIBEDBY_WEIGHT, "aria-describedby"

    if role == "textbox":
        placeholder = await element.get_attribute("placeholder")
        if placeholder:
            confidence = _contained(search, placeholder, options)
            if confidence:
                return confidence, "placeholder"

    text = await _text_of(element)
    if text:
        confidence = _contained(search, text, options)
        if confidence:
            return confidence * IMPLICIT_TEXT_WEIGHT, "text"
    return None


async def find_implicit_role(page: "IPage", description: str, options: MatchOptions) -> Optional[LocatorResult]:
    """
    Scan elements carrying the role implicitly (by tag) or explicitly.

    Unknown roles only match elements with a matching ``role`` attribute.
    """
    query = parse_role_syntax(description)
    if query is None:
        return None

    best = _BestCandidate("implicit-aria-role")
    for selector in role_selectors(query.role):
        for element in await page.query_selector_all(selector):
            match = await _implicit_role_match(page, element, query.role, query.description, options)
            if match is None:
                continue
            confidence, source = match
            await best.offer(
                element,
                confidence,
                description,
                selector,
                strategy=f"implicit-aria-role:{source}",
            )
            if best.settled:
                return best.result
    return best.result


# =============================================================================
# REGISTRY
# =============================================================================

EXACT_TEXT = StrategyDescriptor("exact-text", find_exact_text, "normalized text equality")
BUTTON_TEXT = StrategyDescriptor("button-text", find_button_text, "button-like elements")
LINK_TEXT = StrategyDescriptor("link-text", find_link_text, "anchor text")
ARIA_LABEL = StrategyDescriptor("aria-label", find_aria_label, "aria-label attribute")
ARIA_LABELLEDBY = StrategyDescriptor("aria-labelledby", find_aria_labelledby, "text of labelling ids")
ARIA_DESCRIBEDBY = StrategyDescriptor("aria-describedby", find_aria_describedby, "text of describing ids")
PLACEHOLDER = StrategyDescriptor("placeholder", find_placeholder, "input placeholder")
TITLE_ATTR = StrategyDescriptor("title-attr", find_title, "title attribute")
PARTIAL_TEXT = StrategyDescriptor("partial-text", find_partial_text, "text containing the query")
FUZZY_TEXT = StrategyDescriptor("fuzzy-text", find_fuzzy_text, "whole-document similarity")
FIELD_EXACT_TEXT = StrategyDescriptor("exact-text", find_field_exact_text, "normalized text equality, labels excluded")
FIELD_PARTIAL_TEXT = StrategyDescriptor("partial-text", find_field_partial_text, "text containing the query, labels excluded")
FIELD_FUZZY_TEXT = StrategyDescriptor("fuzzy-text", find_field_fuzzy_text, "whole-document similarity, labels excluded")
LABEL_FOR_INPUT = StrategyDescriptor("label-for-input", find_label_for_input, "<label> association")
INPUT_NAME = StrategyDescriptor("input-name", find_input_name, "form control name")
INPUT_ID = StrategyDescriptor("input-id", find_input_id, "form control id")
TEXT_NEAR_INPUT = StrategyDescriptor("text-near-input", find_text_near_input, "control nearest to text")

ARIA_ROLE_NATIVE = StrategyDescriptor("aria-role-native", find_native_role, "accessible role and name")
IMPLICIT_ARIA_ROLE = StrategyDescriptor("implicit-aria-role", find_implicit_role, "role selectors and labels")

GENERAL_STRATEGY_ORDER: Tuple[StrategyDescriptor, ...] = (
    BUTTON_TEXT,
    LINK_TEXT,
    ARIA_LABEL,
    ARIA_LABELLEDBY,
    EXACT_TEXT,
    PARTIAL_TEXT,
    PLACEHOLDER,
    TITLE_ATTR,
    ARIA_DESCRIBEDBY,
    FUZZY_TEXT,
)

INPUT_STRATEGY_ORDER: Tuple[StrategyDescriptor, ...] = (
    PLACEHOLDER,
    ARIA_LABEL,
    ARIA_LABELLEDBY,
    LABEL_FOR_INPUT,
    INPUT_NAME,
    INPUT_ID,
    TITLE_ATTR,
    TEXT_NEAR_INPUT,
    FIELD_EXACT_TEXT,
    BUTTON_TEXT,
    LINK_TEXT,
    FIELD_PARTIAL_TEXT,
    ARIA_DESCRIBEDBY,
    FIELD_FUZZY_TEXT,
)

ROLE_STRATEGY_ORDER: Tuple[StrategyDescriptor, ...] = (
    ARIA_ROLE_NATIVE,
    IMPLICIT_ARIA_ROLE,
)


def strategies_for(prefer_inputs: bool) -> Tuple[StrategyDescriptor, ...]:
    """The ordered strategy list for a resolution profile."""
    return INPUT_STRATEGY_ORDER if prefer_inputs else GENERAL_STRATEGY_ORDER
