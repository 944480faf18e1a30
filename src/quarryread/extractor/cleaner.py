"""
Cleanup of a gathered article before it is presented.

The passes run in a fixed order: later ones rely on what the earlier ones
removed or marked (data tables in particular). Conditional cleaning walks
backwards so that a node's children are cleaned before the node itself is
judged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

import structlog
from bs4 import Tag
from bs4.element import PageElement

from .. import patterns
from ..dom.annotations import AnnotationStore
from ..dom.navigator import (
    bw_remove_descendants_if,
    change_descendants,
    count_descendants,
    following_node,
    forall_descendants,
    has_such_descendant,
    iter_descendants,
    next_element,
    remove_descendants_if,
    remove_node,
    skip_descendants,
)
from ..dom.nodes import attr_equals, class_weight, get_attr, has_ancestor_tag, has_tag, is_element, new_tag
from ..text import (
    char_count,
    has_single_tag_inside,
    is_phrasing_content,
    link_density,
    normalized_content_length,
    text_content,
    text_content_length,
)
from .models import ExtractionOptions, RelaxationFlags

logger = structlog.get_logger(__name__)

PRESENTATIONAL_ATTRS = (
    "align",
    "background",
    "bgcolor",
    "border",
    "cellpadding",
    "cellspacing",
    "frame",
    "hspace",
    "rules",
    "style",
    "valign",
    "vspace",
)

DEPRECATED_SIZE_ELEMS = ("table", "th", "td", "hr", "pre")

TABLE_DATA_ELEMS = ("col", "colgroup", "tfoot", "thead", "th")

EMBED_ELEMS = ("object", "embed", "iframe")

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _attr_num(node: PageElement, name: str) -> int:
    """Read a positive integer attribute; anything unusable reads as 0."""
    value = get_attr(node, name)
    if value is None:
        return 0
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return 0
    return max(int(match.group(1)), 0)


@dataclass
class TableSize:
    rows: int = 0
    columns: int = 0


def get_table_size(table: Tag) -> TableSize:
    """Count the rows (with rowspan) and the widest row's cells (with colspan)."""
    size = TableSize()
    last = skip_descendants(table)
    curr = following_node(table)
    while curr is not None and curr is not last:
        if not has_tag(curr, "tr"):
            curr = following_node(curr)
            continue

        size.rows += _attr_num(curr, "rowspan") or 1
        cols_in_row = 0
        for cell in curr.contents:  # type: ignore[union-attr]
            if has_tag(cell, "td"):
                cols_in_row += _attr_num(cell, "colspan") or 1
        size.columns = max(size.columns, cols_in_row)
        curr = skip_descendants(curr)
    return size


def clean_styles(node: Optional[Tag]) -> None:
    """Remove presentational attributes from a node and all its descendants, except inside <svg>."""
    if node is None:
        return
    last = skip_descendants(node)
    curr: Optional[PageElement] = node
    while curr is not None and curr is not last:
        if not is_element(curr) or has_tag(curr, "svg"):
            curr = skip_descendants(curr)
            continue

        for attr in PRESENTATIONAL_ATTRS:
            curr.attrs.pop(attr, None)  # type: ignore[union-attr]
        if has_tag(curr, *DEPRECATED_SIZE_ELEMS):
            curr.attrs.pop("width", None)  # type: ignore[union-attr]
            curr.attrs.pop("height", None)  # type: ignore[union-attr]

        curr = following_node(curr)


def _is_table_caption(node: PageElement) -> bool:
    return has_tag(node, "caption") and bool(node.contents)  # type: ignore[union-attr]


def is_embed(node: PageElement) -> bool:
    return has_tag(node, *EMBED_ELEMS)


def is_embed_with_video(node: PageElement) -> bool:
    """An <object>, <embed> or <iframe> that points to a known video host."""
    if not is_embed(node):
        return False
    for name in node.attrs:  # type: ignore[union-attr]
        if patterns.matches(patterns.VIDEOS, get_attr(node, name)):
            return True
    # For <object>, the inner markup counts too
    if not has_tag(node, "object"):
        return False
    return patterns.matches(patterns.VIDEOS, str(node))


def image_src_is_meaningless(img: Tag) -> bool:
    """Is the src a tiny base64 placeholder, while another attribute has the real image?"""
    src = get_attr(img, "src") or ""
    if not patterns.matches(patterns.B64_DATA_URL, src):
        return False

    # SVG can have a meaningful image in under 133 bytes
    if "image/svg+xml" in src.lower():
        return False

    has_other_image = any(
        patterns.matches(patterns.IMAGE_EXTENSION, get_attr(img, name)) for name in img.attrs if name != "src"
    )
    if not has_other_image:
        return False

    # Under 100 bytes (133 once base64-encoded) it is probably a placeholder
    encoded = src[src.lower().find("base64") :]
    return len(encoded) - 7 < 133


def is_image_lazy(img: Tag) -> bool:
    """Will this image only be loaded by javascript? May drop a placeholder src."""
    if image_src_is_meaningless(img):
        del img["src"]

    if "src" not in img.attrs and "srcset" not in img.attrs:
        return True
    class_name = get_attr(img, "class")
    return class_name is not None and "lazy" in class_name.lower()


def fix_lazy_image(img: Tag) -> None:
    """Move data-src style attributes into src/srcset so the image loads without javascript."""
    for name in list(img.attrs):
        if name in ("src", "srcset"):
            continue

        value = get_attr(img, name)
        if patterns.matches(patterns.SRCSET, value):
            dest = "srcset"
        elif patterns.matches(patterns.SRC, value):
            dest = "src"
        else:
            continue

        if has_tag(img, "img", "picture"):
            img[dest] = value  # type: ignore[assignment]
        elif not has_such_descendant(img, lambda n: has_tag(n, "img", "picture")):
            # A <figure> without an image gets one
            image = new_tag("img")
            image[dest] = value  # type: ignore[assignment]
            img.append(image)


def _fix_if_lazy_image(node: PageElement) -> PageElement:
    if has_tag(node, "img", "picture", "figure") and is_image_lazy(node):  # type: ignore[arg-type]
        fix_lazy_image(node)  # type: ignore[arg-type]
    return node


def _is_share(node: PageElement) -> bool:
    return patterns.matches(patterns.SHARE, get_attr(node, "class")) or patterns.matches(
        patterns.SHARE, get_attr(node, "id")
    )


def _is_extra_paragraph(node: PageElement) -> bool:
    if not has_tag(node, "p"):
        return False
    # Only embedded videos are left among the iframes at this point
    if has_such_descendant(node, lambda n: has_tag(n, "img", "embed", "object", "iframe")):
        return False
    return text_content_length(node) == 0


def _is_line_break_before_paragraph(node: PageElement) -> bool:
    return has_tag(node, "br") and has_tag(next_element(node), "p")


def unwrap_if_single_cell_table(node: PageElement, annotations: Optional[AnnotationStore] = None) -> PageElement:
    """Replace a table with a single cell by the cell's content; return what is now in place."""
    if not has_tag(node, "table"):
        return node

    tbody = has_single_tag_inside(node, "tbody")
    if tbody is None:
        tbody = node
    row = has_single_tag_inside(tbody, "tr")
    if row is None:
        return node
    cell = has_single_tag_inside(row, "td")
    if cell is None:
        return node

    cell.name = "p" if forall_descendants(cell, is_phrasing_content) else "div"
    node.replace_with(cell)
    remove_node(node, annotations)
    return cell


class ArticleCleaner:
    """Cleans one gathered article, using the scoring state of its attempt."""

    def __init__(
        self,
        annotations: AnnotationStore,
        flags: RelaxationFlags,
        options: ExtractionOptions,
        title: Optional[str] = None,
    ) -> None:
        self.annotations = annotations
        self.flags = flags
        self.options = options
        self.title = title

    def _weight(self, node: PageElement) -> int:
        return class_weight(node, self.flags.weight_classes)

    def _mark_if_data_table(self, node: PageElement) -> PageElement:
        if not has_tag(node, "table"):
            return node
        if attr_equals(node, "role", "presentation") or attr_equals(node, "datatable", "0"):
            return node

        if (
            "summary" in node.attrs  # type: ignore[union-attr]
            or has_such_descendant(node, _is_table_caption)
            or has_such_descendant(node, lambda n: has_tag(n, *TABLE_DATA_ELEMS))
        ):
            self.annotations.mark_data_table(node)
            return node

        # Nested tables are a sign of layout
        if has_such_descendant(node, lambda n: has_tag(n, "table")):
            return node

        size = get_table_size(node)  # type: ignore[arg-type]
        if size.rows >= 10 or size.columns > 4 or size.rows * size.columns > 10:
            self.annotations.mark_data_table(node)
        return node

    def _inside_data_table(self, node: PageElement) -> bool:
        table = has_ancestor_tag(node, "table")
        return table is not None and self.annotations.is_data_table(table)

    def looks_fishy(self, node: Tag) -> bool:
        """Decide whether a node is boilerplate that conditional cleaning should drop."""
        if self._inside_data_table(node):
            return False

        weight = self._weight(node)
        if weight < 0:
            return True

        if char_count(text_content(node), ",") >= 10:
            return False

        p_count = count_descendants(node, lambda n: has_tag(n, "p"))
        img_count = count_descendants(node, lambda n: has_tag(n, "img"))
        li_count = count_descendants(node, lambda n: has_tag(n, "li")) - 100
        input_count = count_descendants(node, lambda n: has_tag(n, "input"))

        embed_count = 0
        for descendant in iter_descendants(node):
            if is_embed_with_video(descendant):
                return False
            if is_embed(descendant):
                embed_count += 1

        density = link_density(node)
        content_length = normalized_content_length(node)
        is_list = has_tag(node, "ul", "ol")

        if has_ancestor_tag(node, "figure") is None:
            if img_count > 1 and p_count < img_count / 2.0:
                return True
            if not is_list and content_length < 25 and (img_count == 0 or img_count > 2):
                return True
        if not is_list and li_count > p_count:
            return True
        if input_count > p_count // 3:
            return True
        if not is_list and weight < 25 and density > 0.2:
            return True
        if weight >= 25 and density > 0.5:
            return True
        return (embed_count == 1 and content_length < 75) or embed_count > 1

    def clean_conditionally(self, article: Tag, tag: str) -> None:
        if not self.flags.clean_conditionally:
            return
        bw_remove_descendants_if(
            article,
            lambda n: has_tag(n, tag) and self.looks_fishy(n),  # type: ignore[arg-type]
            self.annotations,
        )

    def clean_all(self, article: Tag, tag: str) -> None:
        """Remove every element with this tag, except embedded videos."""
        bw_remove_descendants_if(
            article,
            lambda n: has_tag(n, tag) and not is_embed_with_video(n),
            self.annotations,
        )

    def _is_small_share_node(self, node: PageElement) -> bool:
        return _is_share(node) and text_content_length(node) < self.options.char_threshold

    def remove_title(self, article: Tag) -> None:
        """Drop a lone <h2> that repeats the article title."""
        if not self.title:
            return

        h2: Optional[Tag] = None
        for node in iter_descendants(article):
            if has_tag(node, "h2"):
                if h2 is not None:
                    return
                h2 = node  # type: ignore[assignment]
        if h2 is None:
            return

        h2_text = text_content(h2)
        title_len = len(self.title)
        diff = (len(h2_text) - title_len) / title_len
        if abs(diff) >= 0.5:
            return
        is_match = self.title in h2_text if diff > 0 else h2_text in self.title
        if is_match:
            remove_node(h2, self.annotations)

    def _is_spurious_header(self, node: PageElement) -> bool:
        return has_tag(node, "h1", "h2") and self._weight(node) < 0

    def prep_article(self, article: Tag) -> None:
        """Clean out inline styles, junk elements, empty paragraphs and the like, in place."""
        clean_styles(article)

        # Data tables are often isolated from other content, so mark them first to keep them
        change_descendants(article, self._mark_if_data_table)
        change_descendants(article, _fix_if_lazy_image)

        self.clean_conditionally(article, "form")
        self.clean_conditionally(article, "fieldset")
        for tag in ("object", "embed", "h1", "footer", "link", "aside"):
            self.clean_all(article, tag)
        remove_descendants_if(article, self._is_small_share_node, self.annotations)
        self.remove_title(article)
        for tag in ("iframe", "input", "textarea", "select", "button"):
            self.clean_all(article, tag)
        remove_descendants_if(article, self._is_spurious_header, self.annotations)

        # Last, since the passes above may have removed junk that affects these
        self.clean_conditionally(article, "table")
        self.clean_conditionally(article, "ul")
        self.clean_conditionally(article, "div")

        remove_descendants_if(article, _is_extra_paragraph, self.annotations)
        remove_descendants_if(article, _is_line_break_before_paragraph, self.annotations)
        change_descendants(article, lambda n: unwrap_if_single_cell_table(n, self.annotations))
        logger.debug("article_cleaned", flags=self.flags.active())
