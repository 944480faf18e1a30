"""
Document-order traversal of a BeautifulSoup tree.

Everything here is built on four primitives: ``first_node``,
``following_node`` (pre-order successor), ``skip_descendants`` (successor
outside the current subtree) and ``remove_and_get_following``. The bulk
helpers accept callbacks that may modify or remove the node they are given,
but never an ancestor or a node that has not been visited yet; the next
position is always computed after the callback returns.
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from .annotations import AnnotationStore
from .nodes import has_tag, is_element

Check = Callable[[PageElement], bool]
Replace = Callable[[PageElement], PageElement]

_ASCII_WHITESPACE = " \t\n\r\f\v"


def root_element(doc: BeautifulSoup) -> Optional[Tag]:
    """Return the first element child of the document, or None."""
    for child in doc.contents:
        if is_element(child):
            return child  # type: ignore[return-value]
    return None


def skip_descendants(node: Optional[PageElement]) -> Optional[PageElement]:
    """Get the next node in document order that is not a descendant of this one."""
    while node is not None:
        if node.next_sibling is not None:
            return node.next_sibling
        node = node.parent
    return None


def following_node(node: PageElement) -> Optional[PageElement]:
    """Get the next node in document order, descending into children first."""
    if isinstance(node, Tag) and node.contents:
        return node.contents[0]
    return skip_descendants(node)


def first_node(doc: BeautifulSoup) -> Optional[PageElement]:
    root = root_element(doc)
    if root is None:
        return None
    return following_node(root)


def last_node(root: PageElement) -> PageElement:
    """Get the last descendant of root in document order (root if it has none)."""
    node = root
    while isinstance(node, Tag) and node.contents:
        node = node.contents[-1]
    return node


def previous_node(node: PageElement) -> Optional[PageElement]:
    """Get the node that precedes this one in document order."""
    prev = node.previous_sibling
    if prev is None:
        return node.parent
    while isinstance(prev, Tag) and prev.contents:
        prev = prev.contents[-1]
    return prev


def iter_nodes(doc: BeautifulSoup) -> Iterator[PageElement]:
    """Yield every node under the root element, in document order."""
    node = first_node(doc)
    while node is not None:
        yield node
        node = following_node(node)


def iter_descendants(node: PageElement) -> Iterator[PageElement]:
    """Yield the descendants of a node in document order."""
    last = skip_descendants(node)
    current = following_node(node)
    while current is not None and current is not last:
        yield current
        current = following_node(current)


def remove_node(node: PageElement, annotations: Optional[AnnotationStore] = None) -> None:
    """Unlink a node and destroy it together with its annotations."""
    node.extract()
    if annotations is not None:
        annotations.discard_subtree(node)
    if isinstance(node, Tag):
        node.decompose()


def replace_node(old: PageElement, new: PageElement, annotations: Optional[AnnotationStore] = None) -> PageElement:
    """Put ``new`` where ``old`` is, then destroy ``old``."""
    old.replace_with(new)
    remove_node(old, annotations)
    return new


def remove_and_get_following(
    node: PageElement, annotations: Optional[AnnotationStore] = None
) -> Optional[PageElement]:
    following = skip_descendants(node)
    remove_node(node, annotations)
    return following


def remove_and_get_previous(
    node: PageElement, annotations: Optional[AnnotationStore] = None
) -> Optional[PageElement]:
    previous = previous_node(node)
    remove_node(node, annotations)
    return previous


def remove_descendants_if(node: PageElement, check: Check, annotations: Optional[AnnotationStore] = None) -> None:
    """Remove every descendant for which the check is true, parents before children."""
    last = skip_descendants(node)
    current = following_node(node)
    while current is not None and current is not last:
        if check(current):
            current = remove_and_get_following(current, annotations)
        else:
            current = following_node(current)


def remove_nodes_if(doc: BeautifulSoup, check: Check, annotations: Optional[AnnotationStore] = None) -> None:
    root = root_element(doc)
    if root is not None:
        remove_descendants_if(root, check, annotations)


def bw_remove_descendants_if(
    node: PageElement, check: Check, annotations: Optional[AnnotationStore] = None
) -> None:
    """Remove every descendant for which the check is true, children before parents.

    The walk goes backwards in document order, so by the time a node is
    checked all of its descendants have already been checked (and maybe removed).
    """
    current: Optional[PageElement] = last_node(node)
    while current is not None and current is not node:
        if check(current):
            current = remove_and_get_previous(current, annotations)
        else:
            current = previous_node(current)


def change_descendants(node: PageElement, replace: Replace) -> None:
    """Run a replacement on every descendant.

    The callback returns the node now standing in the visited position (the
    visited node itself if nothing was replaced); the walk resumes from there.
    """
    last = skip_descendants(node)
    current = following_node(node)
    while current is not None and current is not last:
        current = following_node(replace(current))


def forall_descendants(node: PageElement, check: Check) -> bool:
    return all(check(descendant) for descendant in iter_descendants(node))


def has_such_descendant(node: PageElement, check: Check) -> bool:
    return any(check(descendant) for descendant in iter_descendants(node))


def count_descendants(node: PageElement, check: Check) -> int:
    return sum(1 for descendant in iter_descendants(node) if check(descendant))


def sum_over_descendants(node: PageElement, calc: Callable[[PageElement], float]) -> float:
    return sum(calc(descendant) for descendant in iter_descendants(node))


def first_descendant_with_tag(node: Optional[PageElement], tag: str) -> Optional[Tag]:
    if node is None:
        return None
    for descendant in iter_descendants(node):
        if has_tag(descendant, tag):
            return descendant  # type: ignore[return-value]
    return None


def first_node_with_tag(doc: BeautifulSoup, tag: str) -> Optional[Tag]:
    return first_descendant_with_tag(root_element(doc), tag)


def _is_blank(node: PageElement) -> bool:
    return not str(node).strip(_ASCII_WHITESPACE)


def next_element(node: PageElement) -> Optional[Tag]:
    """Find the next element sibling, looking past whitespace only.

    Returns None if a non-empty text node comes first.
    """
    sibling = node.next_sibling
    while sibling is not None:
        if is_element(sibling):
            return sibling  # type: ignore[return-value]
        if not _is_blank(sibling):
            return None
        sibling = sibling.next_sibling
    return None


def prev_element(node: PageElement) -> Optional[Tag]:
    """Like ``next_element``, but looking at the preceding siblings."""
    sibling = node.previous_sibling
    while sibling is not None:
        if is_element(sibling):
            return sibling  # type: ignore[return-value]
        if not _is_blank(sibling):
            return None
        sibling = sibling.previous_sibling
    return None
