"""
Element kind checks used before actions and by input-oriented strategies.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cognito_ui.interfaces.browser import IElement

# Input types that accept free text via value assignment
TEXT_INPUT_TYPES = frozenset({
    "text", "email", "password", "search", "tel", "url", "number",
    "date", "time", "datetime-local", "month", "week",
})

TEXT_INPUT_ROLES = frozenset({"textbox", "searchbox"})
SELECT_ROLES = frozenset({"listbox", "combobox"})

FORM_CONTROL_SELECTOR = "input, textarea, select"


async def is_input_element(element: "IElement") -> bool:
    """True for textareas, text-like inputs and textbox/searchbox roles."""
    tag = await element.tag_name()
    if tag == "textarea":
        return True
    if tag == "input":
        input_type = (await element.get_attribute("type") or "text").lower()
        return input_type in TEXT_INPUT_TYPES
    role = await element.get_attribute("role")
    return (role or "").lower() in TEXT_INPUT_ROLES


async def is_select_element(element: "IElement") -> bool:
    """True for <select> and listbox/combobox roles."""
    if await element.tag_name() == "select":
        return True
    role = await element.get_attribute("role")
    return (role or "").lower() in SELECT_ROLES


async def is_form_control(element: "IElement") -> bool:
    """True for input, textarea and select elements."""
    return await element.tag_name() in ("input", "textarea", "select")
