"""
Document preparation that runs once, before metadata extraction and grabbing.

Strips comments, scripts and styles, swaps lazy placeholder images for their
<noscript> versions, and turns runs of <br> into paragraphs.
"""

from __future__ import annotations

from typing import Optional

import structlog
from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from .. import patterns
from ..dom.navigator import (
    first_node,
    first_node_with_tag,
    following_node,
    iter_nodes,
    next_element,
    prev_element,
    remove_and_get_following,
    remove_node,
    remove_nodes_if,
    root_element,
)
from ..dom.nodes import get_attr, has_tag, is_comment, is_element, is_text
from ..text import is_phrasing_content, normalized_content_length, text_content_length
from .models import ExtractionOptions
from .urls import to_absolute_url

logger = structlog.get_logger(__name__)


def remove_root_siblings(doc: BeautifulSoup) -> None:
    """Drop everything at the top level except the root element (doctype included)."""
    root = root_element(doc)
    for sibling in list(doc.contents):
        if sibling is not root:
            remove_node(sibling)


def base_url_from_doc(doc: BeautifulSoup, options: ExtractionOptions) -> ExtractionOptions:
    """Adopt the document's <base href>, if any, as the base URL."""
    href = get_attr(first_node_with_tag(doc, "base"), "href")
    if href is None:
        return options
    base_url = to_absolute_url(href, options.base_url, options.url_override)
    logger.debug("base_url_from_document", base_url=base_url)
    return options.model_copy(update={"base_url": base_url, "url_override": True})


def is_image_placeholder(node: PageElement) -> bool:
    """An <img> with nothing that could ever point to an image."""
    if not has_tag(node, "img"):
        return False
    for name in node.attrs:  # type: ignore[union-attr]
        if name in ("src", "srcset", "data-src", "data-srcset"):
            return False
        if patterns.matches(patterns.IMAGE_EXTENSION, get_attr(node, name)):
            return False
    return True


def get_single_image(node: Optional[PageElement]) -> Optional[Tag]:
    """Return the node if it is an image, or the one image nested in it alone.

    Every level down to the image may hold one element and blank text only.
    """
    if has_tag(node, "img"):
        return node  # type: ignore[return-value]

    while node is not None:
        elem_child: Optional[Tag] = None
        for child in node.contents:  # type: ignore[union-attr]
            if is_element(child):
                if elem_child is not None:
                    return None
                elem_child = child  # type: ignore[assignment]
            elif normalized_content_length(child):
                return None
        if has_tag(elem_child, "img"):
            return elem_child
        node = elem_child
    return None


def _is_image_attr(name: str, value: Optional[str]) -> bool:
    if not value:
        return False
    if name.lower() in ("src", "srcset"):
        return True
    return patterns.matches(patterns.IMAGE_EXTENSION, value)


def copy_image_attrs(dest: Tag, src: Tag) -> None:
    """Copy image-bearing attributes; a conflicting value is kept as ``data-old-<name>``."""
    for name in list(src.attrs):
        value = get_attr(src, name)
        if not _is_image_attr(name, value):
            continue
        existing = get_attr(dest, name)
        if existing is None:
            dest[name] = value
        elif existing != value:
            dest[f"data-old-{name}"] = value


def _unwrap_if_noscript_image(node: PageElement) -> None:
    if not has_tag(node, "noscript"):
        return
    new_img = get_single_image(node)
    if new_img is None:
        return
    prev = prev_element(node)
    if prev is None:
        return
    old_img = get_single_image(prev)
    if old_img is None:
        return

    copy_image_attrs(new_img, old_img)
    prev.replace_with(new_img)
    remove_node(prev)


def unwrap_noscript_images(doc: BeautifulSoup) -> None:
    """Replace lazy images with the real ones found inside a following <noscript>."""
    # Placeholders would otherwise be taken as the image to replace
    remove_nodes_if(doc, is_image_placeholder)
    for node in iter_nodes(doc):
        _unwrap_if_noscript_image(node)


def _is_script_or_noscript(node: PageElement) -> bool:
    if has_tag(node, "noscript"):
        return True
    if has_tag(node, "script"):
        node.attrs.pop("src", None)  # type: ignore[union-attr]
        node.clear()  # type: ignore[union-attr]
        return True
    return False


def is_whitespace(node: PageElement) -> bool:
    if is_text(node) and not text_content_length(node):
        return True
    return has_tag(node, "br")


def prune_trailing_whitespace(node: Tag) -> None:
    """Remove the trailing children that are blank text or <br>."""
    while node.contents and is_whitespace(node.contents[-1]):
        remove_node(node.contents[-1])


def _is_double_br(node: PageElement) -> bool:
    return has_tag(node, "br") and has_tag(next_element(node), "br")


def _replace_brs(node: PageElement) -> None:
    if not has_tag(node, "br"):
        return

    replaced = False
    following = next_element(node)
    while following is not None and has_tag(following, "br"):
        replaced = True
        remove_node(following)
        following = next_element(node)
    if not replaced:
        return

    node.name = "p"  # type: ignore[union-attr]
    sibling = node.next_sibling
    while sibling is not None:
        # Another <br><br> ends this paragraph
        if _is_double_br(sibling) or not is_phrasing_content(sibling):
            break
        node.append(sibling)  # type: ignore[union-attr]
        sibling = node.next_sibling
    prune_trailing_whitespace(node)  # type: ignore[arg-type]

    if has_tag(node.parent, "p"):
        node.parent.name = "div"  # type: ignore[union-attr]


def replace_brs(doc: BeautifulSoup) -> None:
    """Replace every run of two or more <br> with a <p>, ignoring whitespace between them.

    ``<div>foo<br>bar<br> <br><br>abc</div>`` becomes
    ``<div>foo<br>bar<p>abc</p></div>``.
    """
    for node in iter_nodes(doc):
        _replace_brs(node)


def prep_document(doc: BeautifulSoup) -> None:
    """Remove styles, turn <font> into <span> and rewrite <br> runs."""
    node = first_node(doc)
    while node is not None:
        if has_tag(node, "style"):
            node = remove_and_get_following(node)
            continue
        if has_tag(node, "font"):
            node.name = "span"  # type: ignore[union-attr]
        node = following_node(node)
    replace_brs(doc)


def prepare_document(doc: BeautifulSoup, options: ExtractionOptions) -> ExtractionOptions:
    """Run every preparation step on the document, in place.

    Returns the options to use from now on, which may carry a base URL
    taken from the document.
    """
    remove_root_siblings(doc)
    options = base_url_from_doc(doc, options)
    remove_nodes_if(doc, is_comment)
    unwrap_noscript_images(doc)
    remove_nodes_if(doc, _is_script_or_noscript)
    prep_document(doc)
    return options
