"""
QuarryRead - Reader-mode article extraction for HTML documents.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .exceptions import DocumentStructureError, QuarryReadError, TemplateError
from .extractor import (
    ArticleMetadata,
    ExtractionOptions,
    ExtractionResult,
    ExtractResult,
    ReadabilityExtractor,
    extract_article,
    is_probably_readerable,
    parse_document,
)

__all__ = [
    "__version__",
    "ArticleMetadata",
    "DocumentStructureError",
    "ExtractionOptions",
    "ExtractionResult",
    "ExtractResult",
    "QuarryReadError",
    "ReadabilityExtractor",
    "TemplateError",
    "extract_article",
    "is_probably_readerable",
    "parse_document",
]
