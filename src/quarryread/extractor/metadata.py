"""
Metadata extraction from <meta> and <title> tags.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from .. import patterns
from ..dom.navigator import iter_nodes, root_element
from ..dom.nodes import get_attr, has_tag
from ..text import (
    find_last_separator,
    normalize_whitespace,
    normalized_content,
    word_count,
    word_in_str,
)
from .models import ArticleMetadata

logger = structlog.get_logger(__name__)

# Source names for each field, best first
TITLE_NAMES: Tuple[str, ...] = (
    "dc:title",
    "dcterm:title",
    "og:title",
    "weibo:article:title",
    "weibo:webpage:title",
    "title",
    "twitter:title",
)
BYLINE_NAMES: Tuple[str, ...] = ("dc:creator", "dcterm:creator", "author")
EXCERPT_NAMES: Tuple[str, ...] = (
    "dc:description",
    "dcterm:description",
    "og:description",
    "weibo:article:description",
    "weibo:webpage:description",
    "description",
    "twitter:description",
)
SITE_NAME_NAMES: Tuple[str, ...] = ("og:site_name",)

_FIELD_SOURCES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("title", TITLE_NAMES),
    ("byline", BYLINE_NAMES),
    ("excerpt", EXCERPT_NAMES),
    ("site_name", SITE_NAME_NAMES),
)


class MetadataExtractor:
    """Collects the best-ranked metadata of a single document.

    Each field remembers the rank of the best source seen so far, and a later
    source overwrites it only if its rank is at least as good.
    """

    def __init__(self) -> None:
        self.metadata = ArticleMetadata()
        self._best_rank: Dict[str, int] = {name: len(sources) for name, sources in _FIELD_SOURCES}

    def extract(self, doc: BeautifulSoup) -> ArticleMetadata:
        """Scan the whole document once, in order, and fill in the metadata."""
        title_node: Optional[Tag] = None
        for node in iter_nodes(doc):
            if has_tag(node, "title"):
                title_node = node  # type: ignore[assignment]
            elif has_tag(node, "meta"):
                self._consider_meta(node)  # type: ignore[arg-type]

        if self.metadata.title is None and title_node is not None:
            self.metadata.title = refine_title(doc, normalized_content(title_node))
        return self.metadata

    def _consider_meta(self, node: Tag) -> None:
        content = get_attr(node, "content")
        if content is None:
            return

        prop = get_attr(node, "property")
        if patterns.matches(patterns.META_PROPERTY, prop):
            self._parse_meta_attrs(prop, content)  # type: ignore[arg-type]
            return

        name = get_attr(node, "name")
        if patterns.matches(patterns.META_NAME, name):
            self._parse_meta_attrs(name, content)  # type: ignore[arg-type]

    def _is_better(self, field_name: str, sources: Tuple[str, ...], nameprop: str) -> bool:
        best = self._best_rank[field_name]
        for rank, source in enumerate(sources):
            if rank <= best and word_in_str(nameprop, source):
                self._best_rank[field_name] = rank
                return True
        return False

    def _parse_meta_attrs(self, nameprop: str, content: str) -> None:
        if not content:
            return
        nameprop = nameprop.replace(".", ":")
        for field_name, sources in _FIELD_SOURCES:
            if self._is_better(field_name, sources, nameprop):
                setattr(self.metadata, field_name, normalize_whitespace(content))
                logger.debug("metadata_found", field=field_name, source=nameprop)
                return


def _has_heading_with_text(doc: BeautifulSoup, text: str) -> bool:
    root = root_element(doc)
    if root is None:
        return False
    return any(has_tag(node, "h1", "h2") and normalized_content(node) == text for node in root.descendants)


def refine_title(doc: BeautifulSoup, title: str) -> str:
    """Strip the site name and similar decorations from a <title> text.

    Args:
        doc: Document the title comes from, used to look for matching headings
        title: The normalized text of the <title> element

    Returns:
        The refined title, or the original one if refining left too little of it
    """
    original = title

    sep = find_last_separator(title)
    if sep >= 0:
        title = title[: sep - 1]
    else:
        colon = title.rfind(":")
        if colon >= 0:
            # A heading with this exact text means the colon is part of the title
            if _has_heading_with_text(doc, title):
                return title
            title = title[colon + 1 :]

    title_count = word_count(title)
    orig_count = word_count(original, separators_are_spaces=True)
    if title_count <= 4 and (sep < 0 or title_count != orig_count - 1):
        return original
    return title


def extract_metadata(doc: BeautifulSoup) -> ArticleMetadata:
    return MetadataExtractor().extract(doc)
