"""
Async adapter around the readability pipeline.
"""

from __future__ import annotations

import asyncio
import logging

from ..exceptions import DocumentStructureError
from .models import ExtractionOptions, ExtractResult
from .protocols import Extractor
from .readability import DEFAULT_FEATURES, parse_document, parse_html
from .readerable import is_probably_readerable

logger = logging.getLogger(__name__)


def _empty_result(url: str | None) -> ExtractResult:
    return ExtractResult(url=url, html="", text="", title=None)


class ReadabilityExtractor(Extractor):
    """Extractor running the readability pipeline in a worker thread."""

    name = "readability"

    def __init__(self, options: ExtractionOptions | None = None, *, features: str = DEFAULT_FEATURES) -> None:
        self.options = options or ExtractionOptions()
        self.features = features

    async def extract(self, html: str, *, url: str | None = None) -> ExtractResult:
        """Extract the article from an HTML string.

        Args:
            html: HTML content to extract from
            url: Optional URL of the page, used as the base for relative links

        Returns:
            ExtractResult with extracted content
        """
        if not html.strip():
            logger.warning("Empty HTML, nothing to extract")
            return _empty_result(url)

        try:
            # Extraction is CPU-bound, keep it off the event loop
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, self._extract_sync, html, url)
        except DocumentStructureError as e:
            logger.warning(f"Document cannot be processed: {e}")
            return _empty_result(url)
        except Exception as e:
            logger.warning(f"Readability extraction failed: {e}")
            return _empty_result(url)

    def _extract_sync(self, html: str, url: str | None) -> ExtractResult:
        """Synchronous extraction."""
        options = self.options
        if url is not None and options.base_url is None:
            options = options.model_copy(update={"base_url": url})

        doc = parse_html(html, self.features)
        readerable = is_probably_readerable(doc)
        result = parse_document(doc, options)
        metadata = result.metadata

        return ExtractResult(
            url=url,
            html=result.html(),
            text=result.text(),
            title=metadata.title,
            byline=metadata.byline,
            excerpt=metadata.excerpt,
            site_name=metadata.site_name,
            direction=metadata.direction,
            readerable=readerable,
            score=min(result.length / options.char_threshold, 1.0),
        )
