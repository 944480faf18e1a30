"""
Entry points of the extraction pipeline.

``parse_document`` runs the whole sequence on an already parsed tree:
preparation, metadata, the grabbing loop, and the final fix-ups.
``extract_article`` does the same starting from markup.
"""

from __future__ import annotations

import codecs
from typing import Optional, Union

import structlog
from bs4 import BeautifulSoup

from ..dom.navigator import first_descendant_with_tag
from ..text import normalized_content
from .grabber import get_body, grab_article
from .metadata import extract_metadata
from .models import ExtractionOptions, ExtractionResult
from .postprocess import ArticlePostProcessor
from .preprocess import prepare_document

logger = structlog.get_logger(__name__)

DEFAULT_FEATURES = "lxml"


def parse_html(
    markup: Union[str, bytes],
    features: str = DEFAULT_FEATURES,
    from_encoding: Optional[str] = None,
) -> BeautifulSoup:
    """Build a document tree with the given bs4 tree builder.

    Bytes are decoded with ``from_encoding`` when one is given, so every
    Python codec name works with every tree builder. Otherwise the builder
    detects the encoding itself.

    Raises:
        LookupError: If ``from_encoding`` is not a known encoding
    """
    if isinstance(markup, bytes) and from_encoding is not None:
        markup = markup.decode(codecs.lookup(from_encoding).name, errors="replace")
    return BeautifulSoup(markup, features)


def parse_document(doc: BeautifulSoup, options: Optional[ExtractionOptions] = None) -> ExtractionResult:
    """Extract the article and metadata from a parsed document.

    The document is modified in place; the returned content is a detached
    ``<div id="readability-page-1" class="page">``.

    Args:
        doc: Parsed HTML document
        options: Extraction options; defaults are used if omitted

    Returns:
        ExtractionResult whose ``content`` is None when no article was found

    Raises:
        DocumentStructureError: If the document has no root element or no <body>
    """
    if options is None:
        options = ExtractionOptions()

    # Fail before touching the tree
    get_body(doc)

    options = prepare_document(doc, options)
    metadata = extract_metadata(doc)
    best, attempts = grab_article(doc, options, metadata)

    if best is not None and best.length < options.char_threshold and not options.keep_short_articles:
        logger.info("article_too_short", length=best.length, threshold=options.char_threshold)
        best.article.decompose()
        best = None

    if best is None:
        metadata.finalize()
        logger.info("no_article_found", attempts=attempts)
        return ExtractionResult(content=None, metadata=metadata, attempts=attempts, length=0)

    metadata.direction = best.direction
    content = ArticlePostProcessor(options).process(best.article)

    if metadata.excerpt is None and content is not None:
        paragraph = first_descendant_with_tag(content, "p")
        if paragraph is not None:
            metadata.excerpt = normalized_content(paragraph)
    metadata.finalize()

    logger.info("article_extracted", attempts=attempts, length=best.length, title=metadata.title)
    return ExtractionResult(content=content, metadata=metadata, attempts=attempts, length=best.length)


def extract_article(
    markup: Union[str, bytes],
    options: Optional[ExtractionOptions] = None,
    *,
    features: str = DEFAULT_FEATURES,
    from_encoding: Optional[str] = None,
) -> ExtractionResult:
    """Parse markup and extract its article; see ``parse_document``."""
    return parse_document(parse_html(markup, features, from_encoding), options)
