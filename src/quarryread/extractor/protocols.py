"""
Protocol for reader-mode extractors that can be driven from async code.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ExtractionOptions, ExtractResult


@runtime_checkable
class Extractor(Protocol):
    """Turns an HTML page into its readable article.

    Implementations hold the ``ExtractionOptions`` they run with and never
    raise for a page without an article: a missing, short or unprocessable
    article comes back as an ``ExtractResult`` with empty ``html``/``text``
    and a score of 0.
    """

    name: str
    options: ExtractionOptions

    async def extract(self, html: str, *, url: str | None = None) -> ExtractResult:
        """Extract the readable article and its metadata from a page.

        Args:
            html: Markup of the whole page
            url: Address of the page; relative links are resolved against it
                unless the options already carry a base URL

        Returns:
            ExtractResult with the article HTML and text, the title, byline,
            excerpt, site name and text direction, whether the page looked
            readerable, and ``score``: the article length as a fraction of
            ``options.char_threshold``, capped at 1.0. Articles shorter than
            the threshold are only returned when ``keep_short_articles`` is set.
        """
        ...
