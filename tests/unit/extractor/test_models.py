"""
Unit tests for extraction options and result models.
"""

import pytest
from pydantic import ValidationError

from quarryread.extractor.models import ArticleMetadata, ExtractionOptions, ExtractionResult, ExtractResult, RelaxationFlags

pytestmark = pytest.mark.unit


class TestExtractionOptions:
    """Test cases for ExtractionOptions."""

    def test_defaults(self):
        options = ExtractionOptions()
        assert options.strip_unlikely and options.weight_classes and options.clean_conditionally
        assert not options.url_override
        assert options.base_url is None
        assert options.char_threshold == 500
        assert options.template == ["body"]

    def test_template_from_comma_list(self):
        options = ExtractionOptions(template="title, body,byline")
        assert options.template == ["title", "body", "byline"]

    def test_unknown_template_field(self):
        with pytest.raises(ValidationError, match="unrecognized field"):
            ExtractionOptions(template="title,author")

    def test_threshold_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExtractionOptions(char_threshold=0)


class TestRelaxationFlags:
    """Test cases for RelaxationFlags."""

    def test_relaxes_in_order(self):
        """Flags are switched off one at a time, then there is nothing left."""
        flags = RelaxationFlags()
        seen = []
        while flags is not None:
            seen.append(flags.active())
            flags = flags.relaxed()

        assert seen == [
            ["strip_unlikely", "weight_classes", "clean_conditionally"],
            ["weight_classes", "clean_conditionally"],
            ["clean_conditionally"],
            [],
        ]

    def test_disabled_flags_are_skipped(self):
        options = ExtractionOptions(strip_unlikely=False, clean_conditionally=False)
        flags = RelaxationFlags.from_options(options)
        assert flags.active() == ["weight_classes"]
        assert flags.relaxed().active() == []
        assert flags.relaxed().relaxed() is None


class TestArticleMetadata:
    """Test cases for ArticleMetadata."""

    def test_finalize_trims_and_unescapes(self):
        metadata = ArticleMetadata(title="  Tom &amp; Jerry ", byline=" Jane ", direction="rtl")
        metadata.finalize()
        assert metadata.title == "Tom & Jerry"
        assert metadata.byline == "Jane"
        assert metadata.excerpt is None
        assert metadata.direction == "rtl"

    @pytest.mark.parametrize(
        "direction,spelled",
        [("ltr", "Left to right"), ("rtl", "Right to left"), ("auto", None), (None, None)],
    )
    def test_spelled_direction(self, direction, spelled):
        assert ArticleMetadata(direction=direction).spelled_direction() == spelled


class TestResults:
    """Test cases for the result records."""

    def test_empty_extraction_result(self):
        result = ExtractionResult(content=None)
        assert not result.found
        assert result.html() == ""
        assert result.text() == ""

    def test_extract_result_score_range(self):
        with pytest.raises(ValueError, match="Score must be between"):
            ExtractResult(url=None, html="", text="", title=None, score=1.5)
