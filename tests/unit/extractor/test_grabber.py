"""
Unit tests for node scoring, candidate selection and the attempt loop.
"""

import pytest
from bs4 import BeautifulSoup

from quarryread.dom.annotations import AnnotationStore
from quarryread.exceptions import DocumentStructureError
from quarryread.extractor.grabber import (
    ArticleGrabber,
    AttemptScorer,
    get_body,
    is_division_without_content,
    is_node_unlikely,
    is_paragraph_with_content,
)
from quarryread.extractor.models import ArticleMetadata, ExtractionOptions, RelaxationFlags

pytestmark = pytest.mark.unit

# Two commas and just over a hundred characters
SCORED_TEXT = "alpha, beta, " + "g" * 100


def _node(markup):
    return BeautifulSoup(markup, "html.parser").contents[0]


class TestStructure:
    """Test cases for get_body."""

    def test_body_found(self):
        doc = BeautifulSoup("<html><head></head><body><p>x</p></body></html>", "html.parser")
        assert get_body(doc) is doc.body

    def test_no_root(self):
        with pytest.raises(DocumentStructureError) as exc_info:
            get_body(BeautifulSoup("", "html.parser"))
        assert exc_info.value.reason == "no_root"

    def test_no_body(self):
        with pytest.raises(DocumentStructureError) as exc_info:
            get_body(BeautifulSoup("<p>loose paragraph</p>", "html.parser"))
        assert exc_info.value.reason == "no_body"


class TestNodeChecks:
    """Test cases for the pruning predicates."""

    @pytest.mark.parametrize(
        "markup,expected",
        [
            ("<div><br/> <hr/> </div>", True),
            ("<h2></h2>", True),
            ("<div>x</div>", False),
            ("<div><img/></div>", False),
            ("<p></p>", False),
        ],
    )
    def test_is_division_without_content(self, markup, expected):
        assert is_division_without_content(_node(markup)) is expected

    def test_is_node_unlikely(self):
        assert is_node_unlikely(_node("<div role='complementary'></div>"))
        assert is_node_unlikely(_node("<div class='sidebar'></div>"))
        assert not is_node_unlikely(_node("<a class='sidebar'></a>"))
        assert not is_node_unlikely(_node("<div class='sidebar-content'></div>"))

    def test_unlikely_inside_table_is_kept(self):
        doc = BeautifulSoup("<table><tr><td><div class='sidebar'>x</div></td></tr></table>", "html.parser")
        assert not is_node_unlikely(doc.find("div"))

    def test_is_paragraph_with_content(self):
        assert is_paragraph_with_content(_node(f"<p>{'word ' * 20}</p>"))
        assert is_paragraph_with_content(_node("<p>Short. Sentence</p>"))
        assert not is_paragraph_with_content(_node("<p>no full stop</p>"))
        assert not is_paragraph_with_content(_node(f"<p><a href='#'>{'link ' * 20}</a></p>"))
        assert not is_paragraph_with_content(_node("<div>Short.</div>"))


class TestAttemptScorer:
    """Test cases for AttemptScorer."""

    def _scorer(self, doc, flags=None):
        return AttemptScorer(doc, flags or RelaxationFlags(), ExtractionOptions(), AnnotationStore())

    def test_initialize_node(self):
        doc = BeautifulSoup("<div class='post'></div><li></li><h2 class='widget'></h2>", "html.parser")
        scorer = self._scorer(doc)
        div, li, h2 = doc.contents
        for node in (div, li, h2):
            scorer.initialize_node(node)

        assert scorer.annotations.score(div) == 30
        assert scorer.annotations.score(li) == -3
        assert scorer.annotations.score(h2) == -30
        assert scorer.annotations.is_initialized(div)

    def test_initialize_node_without_class_weights(self):
        doc = BeautifulSoup("<div class='post'></div>", "html.parser")
        scorer = self._scorer(doc, RelaxationFlags(weight_classes=False))
        scorer.initialize_node(doc.div)
        assert scorer.annotations.score(doc.div) == 5

    def test_content_score_shared_with_ancestors(self):
        """The parent gets the full score, the grandparent half of it; the root is never scored."""
        doc = BeautifulSoup(f"<html><body><div id='a'><p>{SCORED_TEXT}</p></div></body></html>", "html.parser")
        scorer = self._scorer(doc)
        ann = scorer.annotations
        ann.mark_to_score(doc.p)

        scorer.assign_content_score(doc.p)

        assert ann.score(doc.div) == 5 + 5
        assert ann.score(doc.body) == 2.5
        assert ann.is_candidate(doc.div)
        assert ann.is_candidate(doc.body)
        assert doc.html not in ann

    def test_short_text_not_scored(self):
        doc = BeautifulSoup("<html><body><div><p>too short</p></div></body></html>", "html.parser")
        scorer = self._scorer(doc)
        scorer.annotations.mark_to_score(doc.p)

        scorer.assign_content_score(doc.p)

        assert len(scorer.annotations) == 1

    def test_top_candidates_best_first(self):
        doc = BeautifulSoup("<html><body><div id='a'></div><div id='b'></div></body></html>", "html.parser")
        scorer = self._scorer(doc)
        first, second = doc.find_all("div")
        for node, score in ((first, 10), (second, 20)):
            scorer.annotations.mark_candidate(node)
            scorer.annotations.set_score(node, score)

        assert scorer.top_candidates() == [second, first]

    def test_top_candidate_from_all(self):
        doc = BeautifulSoup("<html><body><p>one</p><p>two</p></body></html>", "html.parser")
        scorer = self._scorer(doc)

        wrapper = scorer.top_candidate_from_all()

        assert wrapper.parent is doc.body
        assert [child.name for child in doc.body.contents] == ["div"]
        assert len(wrapper.find_all("p")) == 2
        assert scorer.annotations.score(wrapper) == 5
        assert scorer.annotations.is_top_candidate(wrapper)

    def test_find_top_candidate_marks_winner(self):
        doc = BeautifulSoup(
            "<html><body><div id='a'><div id='b'>x</div><p>y</p></div></body></html>", "html.parser"
        )
        scorer = self._scorer(doc)
        outer = doc.find(id="a")
        inner = doc.find(id="b")
        scorer.annotations.mark_candidate(inner)
        scorer.annotations.set_score(inner, 20)

        top = scorer.find_top_candidate()

        assert top is inner
        assert scorer.annotations.is_top_candidate(inner)
        assert not scorer.annotations.is_top_candidate(outer)

    def test_no_top_candidate_when_body_wins(self):
        doc = BeautifulSoup("<html><body><p>y</p></body></html>", "html.parser")
        scorer = self._scorer(doc)
        scorer.annotations.mark_candidate(doc.body)
        scorer.annotations.set_score(doc.body, 20)

        assert scorer.find_top_candidate() is None
        assert not scorer.annotations.is_top_candidate(doc.body)

    def test_gather_related_content(self):
        doc = BeautifulSoup(
            "<html><body>"
            "<div id='top'>top</div>"
            "<div id='weak'>weak</div>"
            f"<p>{'sentence words ' * 8}</p>"
            "<form id='strong'>strong</form>"
            "</body></html>",
            "html.parser",
        )
        scorer = self._scorer(doc)
        ann = scorer.annotations
        top = doc.find(id="top")
        weak = doc.find(id="weak")
        strong = doc.find(id="strong")
        for node, score in ((top, 50), (weak, 5), (strong, 20)):
            ann.mark_initialized(node)
            ann.set_score(node, score)

        content = scorer.gather_related_content(top)

        assert [child.get("id") for child in content.contents] == ["top", None, "strong"]
        assert content.contents[1].name == "p"
        # Anything but div, article, section and p is renamed
        assert content.contents[2].name == "div"
        assert weak.parent is doc.body


class TestArticleGrabber:
    """Test cases for the attempt loop."""

    def test_byline_node_removed_and_recorded(self):
        paragraphs = "".join(f"<p>{'Long sentence with words, and more words. ' * 4}</p>" for _ in range(5))
        doc = BeautifulSoup(
            f"<html><body><div><p class='byline'>By Jane Rivers</p>{paragraphs}</div></body></html>",
            "html.parser",
        )
        metadata = ArticleMetadata()
        grabber = ArticleGrabber(doc, ExtractionOptions(), metadata)

        best = grabber.grab()

        assert metadata.byline == "By Jane Rivers"
        assert "Jane Rivers" not in best.article.get_text()

    def test_byline_from_meta_not_overwritten(self):
        doc = BeautifulSoup(
            "<html><body><div><span rel='author'>Someone Else</span><p>Body text.</p></div></body></html>",
            "html.parser",
        )
        metadata = ArticleMetadata(byline="Jane Rivers")
        ArticleGrabber(doc, ExtractionOptions(), metadata).grab()
        assert metadata.byline == "Jane Rivers"

    def test_original_document_untouched(self):
        """Attempts work on copies of the prepared document."""
        markup = '<html><body><div class="sidebar"><p>Some text.</p></div></body></html>'
        doc = BeautifulSoup(markup, "html.parser")
        ArticleGrabber(doc, ExtractionOptions(), ArticleMetadata()).grab()
        assert str(doc) == markup

    def test_attempts_bounded(self):
        doc = BeautifulSoup("<html><body><p>Tiny.</p></body></html>", "html.parser")
        grabber = ArticleGrabber(doc, ExtractionOptions(), ArticleMetadata())
        best = grabber.grab()

        assert len(grabber.attempts) == 4
        assert best is not None
        assert best.length == len("Tiny.")
        assert best.flags.active() == []
