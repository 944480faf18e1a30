"""
Unit tests for metadata extraction and title refinement.
"""

import pytest
from bs4 import BeautifulSoup

from quarryread.extractor.metadata import MetadataExtractor, extract_metadata, refine_title

pytestmark = pytest.mark.unit


def _doc(head, body=""):
    return BeautifulSoup(f"<html><head>{head}</head><body>{body}</body></html>", "html.parser")


class TestMetaTags:
    """Test cases for reading <meta> tags."""

    def test_all_fields(self):
        doc = _doc(
            '<meta property="og:title" content="A Title">'
            '<meta name="author" content="Jane Rivers">'
            '<meta name="description" content="What it is about.">'
            '<meta property="og:site_name" content="Coastal Notes">'
        )
        metadata = extract_metadata(doc)
        assert metadata.title == "A Title"
        assert metadata.byline == "Jane Rivers"
        assert metadata.excerpt == "What it is about."
        assert metadata.site_name == "Coastal Notes"
        assert metadata.direction is None

    @pytest.mark.parametrize(
        "head",
        [
            '<meta property="og:title" content="Open Graph"><meta name="twitter:title" content="Twitter">',
            '<meta name="twitter:title" content="Twitter"><meta property="og:title" content="Open Graph">',
        ],
    )
    def test_better_source_wins_in_any_order(self, head):
        """og:title ranks above twitter:title wherever it appears."""
        assert extract_metadata(_doc(head)).title == "Open Graph"

    def test_dotted_names(self):
        doc = _doc('<meta name="twitter:title" content="Twitter"><meta name="dc.title" content="Dublin Core">')
        assert extract_metadata(doc).title == "Dublin Core"

    def test_equal_rank_later_wins(self):
        doc = _doc('<meta name="description" content="first"><meta name="description" content="second">')
        assert extract_metadata(doc).excerpt == "second"

    def test_content_whitespace_normalized(self):
        doc = _doc('<meta name="description" content="  spread\n  out  ">')
        assert extract_metadata(doc).excerpt == " spread out "

    def test_ignores_unrelated_and_empty(self):
        doc = _doc('<meta name="viewport" content="width=device-width"><meta name="author" content="">')
        metadata = MetadataExtractor().extract(doc)
        assert metadata.byline is None
        assert metadata.title is None

    def test_title_tag_used_without_meta_title(self):
        doc = _doc("<title>Understanding the Life of Tide Pools | Coastal Notes</title>")
        assert extract_metadata(doc).title == "Understanding the Life of Tide Pools"

    def test_meta_title_beats_title_tag(self):
        doc = _doc('<title>Tag Title</title><meta property="og:title" content="Meta Title">')
        assert extract_metadata(doc).title == "Meta Title"


class TestRefineTitle:
    """Test cases for refine_title."""

    @pytest.fixture
    def doc(self):
        return _doc("", "<h1>Coastal Notes: A Field Guide</h1>")

    def test_site_name_after_separator_removed(self, doc):
        assert refine_title(doc, "Understanding the Life of Tide Pools - Coastal Notes") == (
            "Understanding the Life of Tide Pools"
        )

    def test_last_separator_is_used(self, doc):
        assert refine_title(doc, "Tide Pools of the Pacific Northwest - Part Two | Coastal Notes") == (
            "Tide Pools of the Pacific Northwest - Part Two"
        )

    def test_short_result_reverts(self, doc):
        """Too few words left, and more than the site name was cut off."""
        assert refine_title(doc, "Tide Pools | Coastal Notes") == "Tide Pools | Coastal Notes"

    def test_short_result_kept_when_only_one_word_cut(self, doc):
        assert refine_title(doc, "Tide Pools - Coastal") == "Tide Pools"

    def test_colon_keeps_text_after_it(self, doc):
        title = refine_title(doc, "Coastal Notes: A Field Guide to the Creatures of Tide Pools")
        assert title.strip() == "A Field Guide to the Creatures of Tide Pools"

    def test_colon_in_heading_is_kept(self, doc):
        assert refine_title(doc, "Coastal Notes: A Field Guide") == "Coastal Notes: A Field Guide"

    def test_no_separator(self, doc):
        assert refine_title(doc, "Tide Pools") == "Tide Pools"
