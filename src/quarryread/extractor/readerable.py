"""
Quick check of whether a document is worth running the full extraction on.
"""

from __future__ import annotations

import math

from bs4 import BeautifulSoup
from bs4.element import PageElement

from ..dom.navigator import first_node, following_node, skip_descendants
from ..dom.nodes import has_ancestor_tag, has_tag, has_unlikely_class_id, is_node_visible
from ..text import text_content_length

READERABLE_MIN_LENGTH = 140
READERABLE_MIN_SCORE = 20


def _is_paragraph_in_list(node: PageElement) -> bool:
    return has_tag(node, "p") and has_ancestor_tag(node, "li") is not None


def node_score(node: PageElement) -> float:
    """Score a paragraph-like node by the square root of its length beyond 140 characters."""
    if not is_node_visible(node):
        return 0.0
    if has_unlikely_class_id(node):
        return 0.0
    if _is_paragraph_in_list(node):
        return 0.0

    length = text_content_length(node)
    if length < READERABLE_MIN_LENGTH:
        return 0.0
    return math.sqrt(length - READERABLE_MIN_LENGTH)


def is_probably_readerable(doc: BeautifulSoup) -> bool:
    """Decide whether the document is readerable without parsing the whole thing.

    Every <p> and <pre> is scored, and so is every <div> with <br> children,
    for pages that separate their paragraphs with line breaks. Stops as soon
    as the total is high enough.
    """
    score = 0.0
    node = first_node(doc)
    while node is not None:
        parent = node.parent
        if has_tag(node, "p", "pre"):
            score += node_score(node)
            node = following_node(node)
        elif has_tag(node, "br") and has_tag(parent, "div"):
            score += node_score(parent)  # type: ignore[arg-type]
            # The whole div was measured, so skip the rest of it
            node = skip_descendants(parent)
        else:
            node = following_node(node)
            continue

        if score > READERABLE_MIN_SCORE:
            return True
    return False
