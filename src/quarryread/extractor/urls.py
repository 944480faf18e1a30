"""
Resolution of relative URLs and srcset lists.
"""

from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urljoin

from .. import patterns
from ..text import ASCII_WHITESPACE


def to_absolute_url(url: str, base_url: Optional[str], url_override: bool = False) -> str:
    """Resolve a URL against the base URL.

    Hash links are left alone unless ``url_override`` is set, since they
    point into the document itself.
    """
    if not url_override and url.startswith("#"):
        return url

    url = url.rstrip(ASCII_WHITESPACE)
    if base_url is None:
        return url
    if patterns.matches(patterns.ABSOLUTE_URL, url) and not url.startswith("//"):
        return url
    try:
        return urljoin(base_url, url)
    except ValueError:
        return url


def parse_srcset(srcset: str) -> List[Tuple[str, str]]:
    """Split a srcset into (url, size) pairs; the size may be empty.

    Parsing stops quietly at the first item without a URL.
    """
    entries: List[Tuple[str, str]] = []
    pos = 0
    length = len(srcset)

    while pos < length:
        while pos < length and srcset[pos] in ASCII_WHITESPACE:
            pos += 1
        start = pos
        while pos < length and srcset[pos] not in ASCII_WHITESPACE:
            pos += 1
        url = srcset[start:pos]
        if not url:
            break

        # A comma glued to the url means there is no size descriptor
        if url.endswith(","):
            entries.append((url[:-1], ""))
            continue

        while pos < length and srcset[pos] in ASCII_WHITESPACE:
            pos += 1
        start = pos
        while pos < length and srcset[pos] != ",":
            pos += 1
        entries.append((url, srcset[start:pos].rstrip(ASCII_WHITESPACE)))
        if pos < length:
            pos += 1

    return entries


def build_srcset(entries: List[Tuple[str, str]]) -> str:
    return ", ".join(f"{url} {size}" if size else url for url, size in entries)


def to_absolute_srcset(srcset: str, base_url: Optional[str], url_override: bool = False) -> str:
    entries = [(to_absolute_url(url, base_url, url_override), size) for url, size in parse_srcset(srcset)]
    return build_srcset(entries)
