"""
Unit tests for the regular expression rule set and the class/id checks built on it.
"""

import pytest
from bs4 import BeautifulSoup

from quarryread import patterns
from quarryread.dom.nodes import class_weight, has_unlikely_class_id, is_node_visible

pytestmark = pytest.mark.unit


def _node(markup):
    return BeautifulSoup(markup, "html.parser").contents[0]


class TestPatterns:
    """Test cases for individual patterns."""

    def test_absent_text_never_matches(self):
        assert not patterns.matches(patterns.POSITIVE, None)

    @pytest.mark.parametrize("value", ["sidebar", "site-footer", "Comment-list", "social-links"])
    def test_unlikely_candidates(self, value):
        assert patterns.matches(patterns.UNLIKELY_CANDIDATES, value)

    def test_case_insensitive(self):
        assert patterns.matches(patterns.POSITIVE, "ARTICLE-BODY")

    @pytest.mark.parametrize(
        "value,expected",
        [("post_share", True), ("share", True), ("sharedaddy", True), ("share-buttons", False), ("timeshare", False)],
    )
    def test_share(self, value, expected):
        assert patterns.matches(patterns.SHARE, value) is expected

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.youtube.com/embed/abc", True),
            ("//player.vimeo.com/video/1", True),
            ("https://example.com/video.mp4", False),
        ],
    )
    def test_videos(self, url, expected):
        assert patterns.matches(patterns.VIDEOS, url) is expected

    @pytest.mark.parametrize(
        "url,expected",
        [("https://example.com", True), ("//cdn.example.com/x", True), ("mailto://x", True), ("/path", False)],
    )
    def test_absolute_url(self, url, expected):
        assert patterns.matches(patterns.ABSOLUTE_URL, url) is expected

    def test_meta_name(self):
        assert patterns.matches(patterns.META_NAME, "dc.title")
        assert patterns.matches(patterns.META_NAME, "twitter:description")
        assert not patterns.matches(patterns.META_NAME, "viewport")

    def test_srcset_and_src(self):
        assert patterns.matches(patterns.SRCSET, "a.jpg 1x, b.jpg 2x")
        assert patterns.matches(patterns.SRC, " /img/photo.png?w=200 ")
        assert not patterns.matches(patterns.SRC, "photo.png 2x")


class TestClassChecks:
    """Node checks built on the patterns."""

    def test_unlikely_class(self):
        assert has_unlikely_class_id(_node("<div class='sidebar'></div>"))
        assert has_unlikely_class_id(_node("<div id='footer'></div>"))

    def test_maybe_candidate_rescues(self):
        assert not has_unlikely_class_id(_node("<div class='sidebar main'></div>"))

    def test_class_weight(self):
        assert class_weight(_node("<div class='post'></div>")) == 25
        assert class_weight(_node("<div class='widget'></div>")) == -25
        assert class_weight(_node("<div class='post' id='entry'></div>")) == 50
        assert class_weight(_node("<div class='article' id='comment'></div>")) == 0
        assert class_weight(_node("<div class='post'></div>"), enabled=False) == 0

    @pytest.mark.parametrize(
        "markup,expected",
        [
            ("<p>x</p>", True),
            ("<p style='display: none'>x</p>", False),
            ("<p style='color: red; display:block'>x</p>", True),
            ("<p hidden>x</p>", False),
            ("<p aria-hidden='true'>x</p>", False),
            ("<img aria-hidden='true' class='mwe-math-fallback-image-inline'/>", True),
        ],
    )
    def test_is_node_visible(self, markup, expected):
        assert is_node_visible(_node(markup)) is expected
