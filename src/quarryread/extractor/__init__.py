"""
QuarryRead Content Extraction Module - Reader-Mode Article Extractor

This module finds the main readable content of an HTML page:
1. Preparation: comments, scripts, styles and <br> runs are cleaned up
2. Metadata: title, byline, excerpt and site name from <meta> and <title>
3. Grabbing: paragraphs are scored, the best container is picked and its related siblings gathered
4. Cleanup: boilerplate, fishy subtrees and presentational markup are removed

Features:
- Retry loop relaxing its filters when the article comes out too short
- Data-table detection so tabular content survives cleanup
- Lazy-image repair (data-src, noscript fallbacks)
- Quick "probably readerable" check without a full extraction
"""

from .cleaner import ArticleCleaner
from .grabber import ArticleGrabber, grab_article
from .metadata import MetadataExtractor, extract_metadata
from .models import ArticleMetadata, Attempt, ExtractionOptions, ExtractionResult, ExtractResult, RelaxationFlags
from .postprocess import ArticlePostProcessor
from .protocols import Extractor
from .readability import extract_article, parse_document, parse_html
from .readability_extractor import ReadabilityExtractor
from .readerable import is_probably_readerable

__all__ = [
    "ArticleCleaner",
    "ArticleGrabber",
    "ArticleMetadata",
    "ArticlePostProcessor",
    "Attempt",
    "ExtractionOptions",
    "ExtractionResult",
    "ExtractResult",
    "Extractor",
    "MetadataExtractor",
    "ReadabilityExtractor",
    "RelaxationFlags",
    "extract_article",
    "extract_metadata",
    "grab_article",
    "is_probably_readerable",
    "parse_document",
    "parse_html",
]
