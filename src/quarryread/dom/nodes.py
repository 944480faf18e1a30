"""
Predicates and accessors for single nodes of a BeautifulSoup tree.

Nodes are either ``bs4.Tag`` elements or ``bs4.NavigableString`` text. The
``BeautifulSoup`` object is the document node and never counts as an element.
Compare nodes with ``is``: bs4 gives tags a structural ``==``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, PageElement, PreformattedString

from .. import patterns

Node = Union[Tag, NavigableString]

_DISPLAY_RE = re.compile(r"display[^:]*:\s*([^; ]{1,5})", re.IGNORECASE)


def is_element(node: Optional[PageElement]) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: Optional[PageElement]) -> bool:
    """True for character data; comments, doctypes and CDATA are not text."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_comment(node: Optional[PageElement]) -> bool:
    return isinstance(node, Comment)


def has_tag(node: Optional[PageElement], *tags: str) -> bool:
    """Check if the node is an element with one of the given lowercase tag names."""
    return is_element(node) and node.name in tags  # type: ignore[union-attr]


def get_attr(node: Optional[PageElement], name: str) -> Optional[str]:
    """Return an attribute value as a single string, or None if absent.

    Multi-valued attributes such as ``class`` come back space-joined.
    """
    if not is_element(node):
        return None
    value = node.attrs.get(name)  # type: ignore[union-attr]
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def attr_equals(node: Optional[PageElement], name: str, expected: str) -> bool:
    return get_attr(node, name) == expected


def has_ancestor_tag(node: Optional[PageElement], tag: str) -> Optional[Tag]:
    """Return the closest ancestor with the given tag, the node itself included."""
    while node is not None:
        if has_tag(node, tag):
            return node  # type: ignore[return-value]
        node = node.parent
    return None


def is_ancestor_of(ancestor: PageElement, node: Optional[PageElement]) -> bool:
    while node is not None:
        if node is ancestor:
            return True
        node = node.parent
    return False


def element_children(node: PageElement) -> List[Tag]:
    if not isinstance(node, Tag):
        return []
    return [child for child in node.contents if is_element(child)]


def child_element_count(node: Optional[PageElement]) -> int:
    if node is None:
        return 0
    return len(element_children(node))


def _is_display_none(style: str) -> bool:
    # Only the first 'display' declaration is looked at
    match = _DISPLAY_RE.search(style)
    return match is not None and match.group(1).lower() == "none"


def is_node_visible(node: PageElement) -> bool:
    """Check the style, hidden and aria-hidden attributes of a node."""
    style = get_attr(node, "style")
    if style is not None and _is_display_none(style):
        return False
    if get_attr(node, "hidden") is not None:
        return False
    if get_attr(node, "aria-hidden") != "true":
        return True
    # Wikimedia math images are displayed despite aria-hidden
    class_name = get_attr(node, "class")
    return class_name is not None and "fallback-image" in class_name


def has_unlikely_class_id(node: PageElement) -> bool:
    """Considering only class and id, is this node unlikely to be readable?"""
    class_name = get_attr(node, "class")
    node_id = get_attr(node, "id")

    if not patterns.matches(patterns.UNLIKELY_CANDIDATES, class_name) and not patterns.matches(
        patterns.UNLIKELY_CANDIDATES, node_id
    ):
        return False
    if patterns.matches(patterns.MAYBE_CANDIDATE, class_name) or patterns.matches(patterns.MAYBE_CANDIDATE, node_id):
        return False
    return True


def class_weight(node: PageElement, enabled: bool = True) -> int:
    """Score a node's class and id against the positive and negative patterns.

    Args:
        node: Node to weigh
        enabled: Whether class weighting is active; if not, the weight is 0

    Returns:
        A multiple of 25 between -50 and +50
    """
    if not enabled:
        return 0

    weight = 0
    for value in (get_attr(node, "class"), get_attr(node, "id")):
        if value is None:
            continue
        if patterns.matches(patterns.NEGATIVE, value):
            weight -= 25
        if patterns.matches(patterns.POSITIVE, value):
            weight += 25
    return weight


_TAG_FACTORY = BeautifulSoup("", "html.parser")


def new_tag(name: str, attrs: Optional[dict] = None) -> Tag:
    """Create a detached element that can be inserted into any tree."""
    return _TAG_FACTORY.new_tag(name, attrs=attrs or {})
