"""
Role Syntax - The ``role[description]`` query micro-language.

``button[Submit Form]`` asks for an element whose accessible role is
``button`` and whose label or text matches ``Submit Form``. Anything that
does not fit the pattern is treated as a plain free-text description.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

ROLE_SYNTAX = re.compile(r"^(\w+)\[([^\]]+)\]$")


@dataclass(frozen=True)
class RoleQuery:
    """A parsed ``role[description]`` query."""
    role: str
    description: str


# Concrete selectors for elements carrying each role implicitly or explicitly
IMPLICIT_ROLE_SELECTORS: Dict[str, List[str]] = {
    "button": [
        "button",
        'input[type="button"]',
        'input[type="submit"]',
        'input[type="reset"]',
        '[role="button"]',
    ],
    "textbox": [
        'input[type="text"]',
        'input[type="email"]',
        'input[type="password"]',
        'input[type="tel"]',
        'input[type="url"]',
        'input[type="search"]',
        "input:not([type])",
        "textarea",
        '[role="textbox"]',
    ],
    "checkbox": ['input[type="checkbox"]', '[role="checkbox"]'],
    "radio": ['input[type="radio"]', '[role="radio"]'],
    "link": ["a[href]", '[role="link"]'],
    "heading": ["h1", "h2", "h3", "h4", "h5", "h6", '[role="heading"]'],
    "list": ["ul", "ol", '[role="list"]'],
    "listitem": ["li", '[role="listitem"]'],
    "img": ["img", '[role="img"]'],
    "table": ["table", '[role="table"]'],
    "row": ["tr", '[role="row"]'],
    "cell": ["td", '[role="cell"]'],
    "form": ["form", '[role="form"]'],
    "navigation": ["nav", '[role="navigation"]'],
    "main": ["main", '[role="main"]'],
    "complementary": ["aside", '[role="complementary"]'],
    "contentinfo": ["footer", '[role="contentinfo"]'],
    "banner": ["header", '[role="banner"]'],
    "search": ['[role="search"]'],
    "alert": ['[role="alert"]'],
    "dialog": ["dialog", '[role="dialog"]'],
    "menu": ['[role="menu"]'],
    "menuitem": ['[role="menuitem"]'],
    "tab": ['[role="tab"]'],
    "tabpanel": ['[role="tabpanel"]'],
}


def parse_role_syntax(text: Optional[str]) -> Optional[RoleQuery]:
    """
    Parse ``role[description]``.
    
    The role is lower-cased and the description trimmed. Returns None for
    anything else, including unbalanced brackets or a missing role.
    
    Example:
        >>> parse_role_syntax("button[ Submit ]")
        RoleQuery(role='button', description='Submit')
        >>> parse_role_syntax("button[incomplete") is None
        True
    """
    if not text:
        return None
    match = ROLE_SYNTAX.match(text.strip())
    if not match:
        return None
    description = match.group(2).strip()
    if not description:
        return None
    return RoleQuery(role=match.group(1).lower(), description=description)


def role_selectors(role: str) -> List[str]:
    """
    Selectors for a role; unknown roles fall back to the explicit attribute.
    """
    known = IMPLICIT_ROLE_SELECTORS.get(role)
    if known:
        return known
    return [f'[role="{role}"]']


def build_name_pattern(description: str) -> Pattern[str]:
    """
    Case-insensitive pattern matching the description's words in order
    with anything in between.
    
    Example:
        >>> build_name_pattern("submit form").pattern
        'submit.*form'
    """
    words = description.split()
    return re.compile(".*".join(re.escape(word) for word in words), re.IGNORECASE)
