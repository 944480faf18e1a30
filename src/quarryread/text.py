"""
Text and content utilities: whitespace normalization, entity unescaping,
word and character counting, link density and phrasing-content checks.

Lengths are counted in characters. "Whitespace" means ASCII whitespace,
plus the non-breaking space where normalization is concerned.
"""

from __future__ import annotations

import re
from typing import Optional

from bs4 import Tag
from bs4.element import PageElement

from . import patterns
from .dom.navigator import forall_descendants, iter_descendants
from .dom.nodes import has_tag, is_element, is_text

ASCII_WHITESPACE = " \t\n\v\f\r"
SEPARATORS = "|-\\/>»"

_WHITESPACE_RUN_RE = re.compile(r"[ \t\n\v\f\r\xa0]+")
_WORD_RE = re.compile(r"[^ \t\n\v\f\r]+")
_SEPARATED_WORD_RE = re.compile(r"[^ \t\n\v\f\r|\-\\/>»]+")
_ENTITY_RE = re.compile(r"&(amp|quot|apos|lt|gt);|&#([0-9]+);")

_NAMED_ENTITIES = {"amp": "&", "quot": '"', "apos": "'", "lt": "<", "gt": ">"}

PHRASING_ELEMS = frozenset(
    {
        "abbr", "audio", "b", "bdo", "br", "button", "cite", "code", "data",
        "datalist", "dfn", "em", "embed", "i", "img", "input", "kbd", "label",
        "mark", "math", "meter", "noscript", "object", "output", "progress", "q",
        "ruby", "samp", "script", "select", "small", "span", "strong", "sub",
        "sup", "textarea", "time", "var", "wbr",
    }
)  # fmt: skip

# Phrasing content only if everything inside them is
CONDITIONAL_PHRASING_ELEMS = ("a", "del", "ins")


def text_content(node: Optional[PageElement]) -> str:
    """Concatenate the character data of a node and all its descendants."""
    if node is None:
        return ""
    if is_text(node):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    return "".join(str(child) for child in node.descendants if is_text(child))


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and drop zero-width spaces.

    The outer whitespace is collapsed but not trimmed.
    """
    return _WHITESPACE_RUN_RE.sub(" ", text.replace("\u200b", ""))


def normalized_content(node: Optional[PageElement]) -> str:
    return normalize_whitespace(text_content(node))


def normalized_content_length(node: Optional[PageElement]) -> int:
    """Length of the normalized text, not counting a leading or trailing space."""
    return len(normalized_content(node).strip(" "))


def text_content_length(node: Optional[PageElement]) -> int:
    """Length of the raw text, ignoring leading and trailing ASCII whitespace."""
    return len(text_content(node).strip(ASCII_WHITESPACE))


def char_count(text: Optional[str], char: str) -> int:
    if not text:
        return 0
    return text.count(char)


def link_density(node: PageElement) -> float:
    """Fraction of the node's normalized text that sits inside links.

    Returns 0.0 when the node has no text at all.
    """
    textlen = normalized_content_length(node)
    if not textlen:
        return 0.0
    linklen = sum(normalized_content_length(d) for d in iter_descendants(node) if has_tag(d, "a"))
    return linklen / textlen


def _is_definitely_phrasing_content(node: PageElement) -> bool:
    if is_text(node):
        return True
    return is_element(node) and node.name in PHRASING_ELEMS  # type: ignore[union-attr]


def _can_be_phrasing_content(node: PageElement) -> bool:
    return _is_definitely_phrasing_content(node) or has_tag(node, *CONDITIONAL_PHRASING_ELEMS)


def is_phrasing_content(node: PageElement) -> bool:
    """Check if a node qualifies as inline (phrasing) content."""
    if _is_definitely_phrasing_content(node):
        return True
    if not has_tag(node, *CONDITIONAL_PHRASING_ELEMS):
        return False
    return forall_descendants(node, _can_be_phrasing_content)


def has_single_tag_inside(node: PageElement, tag: str) -> Optional[Tag]:
    """Return the only child element if it has the given tag and no child text has content.

    Returns None if there is non-whitespace text among the children, or if
    the node has zero or several element children, or a child with another tag.
    """
    if not isinstance(node, Tag):
        return None

    element_child: Optional[Tag] = None
    for child in node.contents:
        if is_element(child):
            if element_child is not None or child.name != tag:
                return None
            element_child = child  # type: ignore[assignment]
        elif is_text(child) and patterns.matches(patterns.HAS_CONTENT, str(child)):
            return None
    return element_child


def word_count(text: str, separators_are_spaces: bool = False) -> int:
    """Count whitespace-delimited words, optionally splitting on title separators too."""
    pattern = _SEPARATED_WORD_RE if separators_are_spaces else _WORD_RE
    return len(pattern.findall(text))


def find_last_separator(text: str) -> int:
    """Index of the last separator with a space on each side, or -1 if there is none."""
    for index in range(len(text) - 2, 0, -1):
        if text[index] in SEPARATORS and text[index - 1] == " " and text[index + 1] == " ":
            return index
    return -1


def word_in_str(text: Optional[str], word: str) -> bool:
    """Is ``word`` one of the whitespace-separated words of ``text``? Case is ignored."""
    if not text or not word:
        return False
    word = word.lower()
    return any(token.lower() == word for token in _WORD_RE.findall(text))


def unescape_entities(text: str) -> str:
    """Decode the five basic named entities and decimal character references.

    Hexadecimal references, references to NUL, surrogates or code points
    out of range, and any other entity, are left as they are.
    """

    def _replace(match: re.Match[str]) -> str:
        name, number = match.groups()
        if name is not None:
            return _NAMED_ENTITIES[name]
        codepoint = int(number)
        if codepoint == 0 or 0xD800 <= codepoint <= 0xDFFF or codepoint > 0x10FFFF:
            return match.group(0)
        return chr(codepoint)

    return _ENTITY_RE.sub(_replace, text)
