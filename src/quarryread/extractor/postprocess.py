"""
Final fix-ups on the winning article: absolute URLs, classes, text nodes
and elements that must not serialize as self-closing.
"""

from __future__ import annotations

from typing import Optional

from bs4 import NavigableString, Tag
from bs4.element import PageElement

from ..dom.navigator import change_descendants, remove_node, replace_node
from ..dom.nodes import get_attr, has_ancestor_tag, has_tag, is_element, is_text, new_tag
from ..text import normalize_whitespace
from .models import ExtractionOptions
from .urls import to_absolute_srcset, to_absolute_url

MEDIA_ELEMS = ("img", "picture", "figure", "video", "audio", "source")

# Elements that would come out as <x/> if left empty
NON_SELF_CLOSING_ELEMS = ("iframe", "em", "a")

PRESERVED_CLASS = "page"


def remove_but_preserve_content(node: Tag) -> PageElement:
    """Replace an element by its content and return what now stands in its place.

    A single text child becomes plain text; anything else goes into a <span>.
    """
    replacement: PageElement
    if len(node.contents) == 1 and is_text(node.contents[0]):
        replacement = NavigableString(str(node.contents[0]))
    else:
        span = new_tag("span")
        for child in list(node.contents):
            span.append(child)
        replacement = span

    node.replace_with(replacement)
    remove_node(node)
    return replacement


class ArticlePostProcessor:
    """Applies the presentation fix-ups to an extracted article."""

    def __init__(self, options: ExtractionOptions) -> None:
        self.options = options

    def _absolute(self, url: str) -> str:
        return to_absolute_url(url, self.options.base_url, self.options.url_override)

    def fix_non_absolute_link(self, node: PageElement) -> PageElement:
        """Make a link's href absolute; a javascript: link is replaced by its content."""
        href = get_attr(node, "href") if has_tag(node, "a") else None
        if href is None:
            return node
        if "javascript:" in href.lower():
            return remove_but_preserve_content(node)  # type: ignore[arg-type]
        node["href"] = self._absolute(href)  # type: ignore[index]
        return node

    def fix_relative_media(self, node: PageElement) -> PageElement:
        if not has_tag(node, *MEDIA_ELEMS):
            return node
        for name in ("src", "poster"):
            value = get_attr(node, name)
            if value is not None:
                node[name] = self._absolute(value)  # type: ignore[index]
        srcset = get_attr(node, "srcset")
        if srcset is not None:
            node["srcset"] = to_absolute_srcset(  # type: ignore[index]
                srcset, self.options.base_url, self.options.url_override
            )
        return node

    @staticmethod
    def clean_classes(node: PageElement) -> PageElement:
        """Remove the class attribute, except for our own page marker."""
        class_name = get_attr(node, "class")
        if class_name is None:
            return node
        if PRESERVED_CLASS in class_name.split():
            node["class"] = PRESERVED_CLASS  # type: ignore[index]
        else:
            del node["class"]  # type: ignore[attr-defined]
        return node

    @staticmethod
    def clean_text_node(node: PageElement) -> PageElement:
        """Normalize the whitespace of text outside <pre> and <code>."""
        if has_tag(node, "code") and has_tag(node.parent, "pre"):
            # The <code> takes the place of its <pre>; anything else in the <pre> is dropped
            replace_node(node.parent, node)  # type: ignore[arg-type]
            node.name = "pre"  # type: ignore[union-attr]
            return node

        if not is_text(node):
            return node
        if has_ancestor_tag(node, "code") is not None or has_ancestor_tag(node, "pre") is not None:
            return node
        normalized = normalize_whitespace(str(node))
        if normalized == str(node):
            return node
        replacement = NavigableString(normalized)
        node.replace_with(replacement)
        return replacement

    @staticmethod
    def fill_if_not_self_closing(node: PageElement) -> PageElement:
        if has_tag(node, *NON_SELF_CLOSING_ELEMS) and not node.contents:  # type: ignore[union-attr]
            node.append(NavigableString(" "))  # type: ignore[union-attr]
        return node

    def process(self, article: Tag) -> Optional[Tag]:
        """Run every fix-up and return the page div, detached from the wrapper."""
        change_descendants(article, self.fix_non_absolute_link)
        change_descendants(article, self.fix_relative_media)
        change_descendants(article, self.clean_classes)
        change_descendants(article, self.clean_text_node)
        change_descendants(article, self.fill_if_not_self_closing)

        content = next((child for child in article.contents if is_element(child)), None)
        if content is None:
            return None
        content.extract()
        article.decompose()
        return content  # type: ignore[return-value]
