"""
Test fixtures for engine module tests.

An in-memory document that implements the browser interfaces closely enough
for the resolution engine: a small CSS selector subset, implicit ARIA roles,
accessible names, visibility and element lifecycle states.
"""

import asyncio
import re
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple, Union

from cognito_ui.interfaces.browser import ElementState, IElement, IPage
from cognito_ui.utils.clock import Clock


class FakeTimeoutError(Exception):
    """Raised when a fake element cannot reach a requested state."""
    pass


# =============================================================================
# SELECTORS
# =============================================================================

_COMPOUND = re.compile(r"^(?P<tag>\*|[a-zA-Z][\w-]*)?(?P<rest>.*)$")
_PART = re.compile(
    r'(?P<neg>:not\()?\[(?P<attr>[\w-]+)(?:(?P<op>[*^$]?=)"(?P<val>[^"]*)")?\]\)?'
    r"|#(?P<id>[\w-]+)"
)


def _parse_compound(selector: str) -> Tuple[Optional[str], List[Tuple[bool, str, Optional[str], Optional[str]]]]:
    match = _COMPOUND.match(selector.strip())
    tag = match.group("tag")
    parts = []
    for part in _PART.finditer(match.group("rest")):
        if part.group("id"):
            parts.append((False, "id", "=", part.group("id")))
        else:
            parts.append((bool(part.group("neg")), part.group("attr"), part.group("op"), part.group("val")))
    return tag, parts


def matches_selector(element: "FakeElement", selector: str) -> bool:
    """Match a comma list of ``tag[attr="v"]:not([attr])`` style selectors."""
    for compound in selector.split(","):
        tag, parts = _parse_compound(compound)
        if tag and tag != "*" and tag.lower() != element.tag:
            continue
        if all(_matches_part(element, *part) for part in parts):
            return True
    return False


def _matches_part(element: "FakeElement", negated: bool, attr: str, op: Optional[str], value: Optional[str]) -> bool:
    actual = element.attrs.get(attr)
    if op is None:
        found = actual is not None
    elif actual is None:
        found = False
    elif op == "=":
        found = actual == value
    elif op == "*=":
        found = value in actual
    elif op == "^=":
        found = actual.startswith(value)
    else:
        found = actual.endswith(value)
    return not found if negated else found


# =============================================================================
# ROLES
# =============================================================================

_TEXTBOX_TYPES = {"text", "email", "password", "tel", "url", "number"}
_TAG_ROLES = {
    "button": "button",
    "textarea": "textbox",
    "select": "combobox",
    "h1": "heading", "h2": "heading", "h3": "heading",
    "h4": "heading", "h5": "heading", "h6": "heading",
    "ul": "list", "ol": "list",
    "li": "listitem",
    "img": "img",
    "nav": "navigation",
    "main": "main",
    "form": "form",
    "table": "table",
    "tr": "row",
    "td": "cell",
    "aside": "complementary",
    "footer": "contentinfo",
    "header": "banner",
    "dialog": "dialog",
}


def role_of(element: "FakeElement") -> Optional[str]:
    explicit = element.attrs.get("role")
    if explicit:
        return explicit.lower()
    if element.tag == "a":
        return "link" if "href" in element.attrs else None
    if element.tag == "input":
        input_type = element.attrs.get("type", "text").lower()
        if input_type in ("submit", "button", "reset"):
            return "button"
        if input_type in ("checkbox", "radio"):
            return input_type
        if input_type == "search":
            return "searchbox"
        if input_type in _TEXTBOX_TYPES:
            return "textbox"
        return None
    return _TAG_ROLES.get(element.tag)


def _collapse(text: str) -> str:
    return " ".join(text.split())


# =============================================================================
# ELEMENTS
# =============================================================================

class FakeElement(IElement):
    """
    In-memory element.

    Args:
        tag: Tag name
        text: Own text; descendants' text is appended for text_content()
        attrs: Attributes
        children: Child elements
        visible: Own visibility (ancestors must be visible too)
        editable: Whether an editable wait succeeds
        options: (value, label) pairs for <select>
    """

    def __init__(
        self,
        tag: str,
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        children: Optional[List["FakeElement"]] = None,
        visible: bool = True,
        editable: bool = True,
        options: Optional[List[Tuple[str, str]]] = None,
    ):
        self.tag = tag.lower()
        self.text = text
        self.attrs: Dict[str, str] = dict(attrs or {})
        self.children: List["FakeElement"] = []
        self.parent: Optional["FakeElement"] = None
        self.visible = visible
        self.editable = editable
        self.options = list(options or [])
        self.attached = True

        self.value = self.attrs.get("value", "")
        self.clicks = 0
        self.selected: List[str] = []
        self.events: List[str] = []
        self.state_waits: List[Tuple[str, Optional[int]]] = []
        self.near: Optional["FakeElement"] = None
        self.fail_click: Optional[Exception] = None

        for child in children or []:
            self.append(child)

    def __repr__(self) -> str:
        return f"<FakeElement {self.tag} {self.attrs} {self.text!r}>"

    # --- tree helpers ---

    def append(self, child: "FakeElement") -> "FakeElement":
        child.parent = self
        child.attached = self.attached
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None
        for node in self.walk():
            node.attached = False

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def full_text(self) -> str:
        parts = [self.text] + [child.full_text() for child in self.children]
        return " ".join(part for part in parts if part)

    def rendered(self) -> bool:
        node: Optional[FakeElement] = self
        while node is not None:
            if not node.visible:
                return False
            node = node.parent
        return self.attached

    # --- IElement ---

    async def get_attribute(self, name: str) -> Optional[str]:
        if not self.attached:
            raise FakeTimeoutError("Element is not attached to the DOM")
        return self.attrs.get(name)

    async def text_content(self) -> Optional[str]:
        return self.full_text()

    async def tag_name(self) -> str:
        return self.tag

    async def is_visible(self) -> bool:
        return self.rendered()

    async def wait_for_state(self, state: Union[ElementState, str], timeout: Optional[int] = None) -> None:
        state = ElementState(state)
        self.state_waits.append((state.value, timeout))
        reached = {
            ElementState.ATTACHED: self.attached,
            ElementState.DETACHED: not self.attached,
            ElementState.VISIBLE: self.rendered(),
            ElementState.HIDDEN: not self.rendered(),
            ElementState.EDITABLE: self.rendered() and self.editable and "disabled" not in self.attrs,
        }[state]
        if not reached:
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded waiting for element to be {state.value}")

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if "dispatchEvent" in expression:
            self.value = arg
            self.events.extend(["input", "change"])
            return None
        if "tagName" in expression:
            return self.tag
        return None

    async def query_selector_all(self, selector: str) -> List[IElement]:
        return [node for node in list(self.walk())[1:] if matches_selector(node, selector)]

    async def nearest(self, selector: str, max_distance: float) -> Optional[IElement]:
        if self.near is not None and matches_selector(self.near, selector):
            return self.near
        return None

    async def next_sibling(self, selector: str) -> Optional[IElement]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        for sibling in siblings[siblings.index(self) + 1:]:
            if matches_selector(sibling, selector):
                return sibling
        return None

    async def click(self, **options: Any) -> None:
        if self.fail_click is not None:
            raise self.fail_click
        if not self.attached:
            raise FakeTimeoutError("Element is not attached to the DOM")
        self.clicks += 1

    async def select_option(
        self,
        value: Optional[str] = None,
        *,
        label: Optional[str] = None,
        **options: Any,
    ) -> List[str]:
        for option_value, option_label in self.options:
            if (label is not None and option_label == label) or (label is None and option_value == value):
                self.selected = [option_value]
                return [option_value]
        raise FakeTimeoutError(f"No option matching label={label!r} value={value!r}")


# =============================================================================
# PAGE
# =============================================================================

class FakePage(IPage):
    """
    In-memory document rooted at <body>.

    Example:
        >>> page = FakePage(FakeElement("button", "Login Button"))
    """

    def __init__(self, *elements: FakeElement, url: str = "https://example.com"):
        self._url = url
        self.body = FakeElement("body")
        self.queries: List[str] = []
        for element in elements:
            self.body.append(element)

    @property
    def url(self) -> str:
        return self._url

    def add(self, element: FakeElement, parent: Optional[FakeElement] = None) -> FakeElement:
        return (parent or self.body).append(element)

    def all_elements(self) -> List[FakeElement]:
        return list(self.body.walk())

    def _by_id(self, element_id: str) -> Optional[FakeElement]:
        for node in self.all_elements():
            if node.attrs.get("id") == element_id:
                return node
        return None

    def accessible_name(self, element: FakeElement) -> str:
        label = element.attrs.get("aria-label")
        if label:
            return _collapse(label)
        labelledby = element.attrs.get("aria-labelledby")
        if labelledby:
            parts = [self._by_id(ref) for ref in labelledby.split()]
            return _collapse(" ".join(part.full_text() for part in parts if part))
        if element.tag in ("input", "textarea", "select"):
            element_id = element.attrs.get("id")
            if element_id:
                for node in self.all_elements():
                    if node.tag == "label" and node.attrs.get("for") == element_id:
                        return _collapse(node.full_text())
            if element.attrs.get("placeholder"):
                return _collapse(element.attrs["placeholder"])
            if element.attrs.get("type") in ("submit", "button", "reset"):
                return _collapse(element.attrs.get("value", ""))
            return _collapse(element.attrs.get("title", ""))
        return _collapse(element.full_text() or element.attrs.get("title", ""))

    # --- IPage ---

    async def goto(self, url: str, **options: Any) -> None:
        self._url = url

    async def set_content(self, html: str, **options: Any) -> None:
        raise NotImplementedError("FakePage is built from FakeElement trees")

    async def query_selector(self, selector: str) -> Optional[IElement]:
        found = await self.query_selector_all(selector)
        return found[0] if found else None

    async def query_selector_all(self, selector: str) -> List[IElement]:
        self.queries.append(selector)
        return [node for node in self.all_elements() if matches_selector(node, selector)]

    async def get_by_role(
        self,
        role: str,
        name: Union[str, Pattern[str]],
        exact: bool = False,
    ) -> List[IElement]:
        found = []
        for node in self.all_elements():
            if role_of(node) != role or not node.rendered():
                continue
            accessible = self.accessible_name(node)
            if isinstance(name, str):
                if exact:
                    matched = accessible == _collapse(name)
                else:
                    matched = _collapse(name).lower() in accessible.lower()
            else:
                matched = name.search(accessible) is not None
            if matched:
                found.append(node)
        return found

    async def evaluate(self, expression: str, *args: Any) -> Any:
        return None

    async def screenshot(self, path: Optional[Any] = None, full_page: bool = False, **options: Any) -> bytes:
        return b""

    async def wait_for_timeout(self, timeout: int) -> None:
        await asyncio.sleep(0)

    async def close(self) -> None:
        pass


class BrokenPage(FakePage):
    """A page whose queries always fail."""

    async def query_selector_all(self, selector: str) -> List[IElement]:
        raise RuntimeError("Target page, context or browser has been closed")

    async def get_by_role(self, role: str, name: Union[str, Pattern[str]], exact: bool = False) -> List[IElement]:
        raise RuntimeError("Target page, context or browser has been closed")


# =============================================================================
# CLOCK
# =============================================================================

class FakeClock(Clock):
    """
    Manually advanced clock.

    ``sleep`` advances time instantly and runs any callbacks scheduled with
    ``at`` whose time has come, so tests can mutate the page mid-wait.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []
        self._scheduled: List[Tuple[float, Callable[[], None]]] = []

    def monotonic(self) -> float:
        return self.now

    def at(self, seconds: float, callback: Callable[[], None]) -> None:
        self._scheduled.append((self.now + seconds, callback))
        self._scheduled.sort(key=lambda item: item[0])

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        while self._scheduled and self._scheduled[0][0] <= self.now:
            _, callback = self._scheduled.pop(0)
            callback()
        await asyncio.sleep(0)


# =============================================================================
# SAMPLE DOCUMENTS
# =============================================================================

def login_form() -> FakePage:
    """A small login form used across resolver tests."""
    return FakePage(
        FakeElement("button", "Login Button", {"id": "login-btn"}),
        FakeElement("button", "Submit", {"type": "submit"}),
        FakeElement("a", "Link Button", {"href": "#", "role": "button"}),
        FakeElement("input", attrs={"type": "text", "aria-label": "Username field", "id": "username"}),
        FakeElement("input", attrs={"type": "email", "placeholder": "Enter your email address", "id": "email-input"}),
        FakeElement("textarea", attrs={"placeholder": "Type your message"}),
        FakeElement("label", "Email Field", {"for": "email-input"}),
        FakeElement("span", "🔐", {"title": "Click to login"}),
        FakeElement("div", "This is a submit button"),
        FakeElement("p", "Some random text content"),
    )
