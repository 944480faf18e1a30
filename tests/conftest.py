"""
Shared test configuration for QuarryRead.

Provides sample documents for the extraction tests: a regular article page,
an article hidden in a sidebar, and a page too short to hold an article.
"""

import os

import pytest
from bs4 import BeautifulSoup

from quarryread.extractor.models import ExtractionOptions

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Sample Content
# ============================================================================

PARAGRAPHS = [
    "Tide pools form wherever the retreating sea leaves water trapped among the rocks, and for a few "
    "hours each day they become small, isolated worlds. Anemones close up, crabs retreat under ledges, "
    "and snails graze slowly across the algae that coats every surface of the pool.",
    "The animals that live there must cope with rapid changes in temperature, salinity, and oxygen. "
    "A pool warmed by the afternoon sun can lose much of its dissolved oxygen, while a heavy rain can "
    "dilute the water until it is barely salty at all, even for the hardiest of residents.",
    "Scientists divide the shore into zones, from the splash zone at the top to the low intertidal "
    "zone that is only exposed during the lowest tides of the year. Each zone has its own community, "
    "shaped by how long it spends out of the water and how hard the waves hit it.",
    "Visiting a tide pool is easy, but it comes with responsibilities. Step only on bare rock, put back "
    'any stone you turn over, and never carry animals away from their pool. <a href="/guides/etiquette">'
    "Read our shore etiquette guide</a> before you go.",
    "The best time to explore is an hour before low tide, when the water is still falling and the pools "
    "are at their clearest. Check a tide table for your local beach, wear shoes with a good grip, and "
    "bring a friend along to share what you find.",
]

ARTICLE_HTML = """<!DOCTYPE html>
<html lang="en" dir="ltr">
<head>
<title>Understanding the Life of Tide Pools | Coastal Notes</title>
<meta name="author" content="Jane Rivers">
<meta property="og:site_name" content="Coastal Notes">
<meta name="description" content="A short guide to tide pools.">
<style>body { font-family: serif; }</style>
<script>window.analytics = true;</script>
</head>
<body>
<div class="menu"><a href="/">Home</a> <a href="/about">About</a> <a href="/contact">Contact</a></div>
<div id="main">
<article>
{paragraphs}
</article>
</div>
<div class="footer">Copyright Coastal Notes. All rights reserved.</div>
</body>
</html>
""".replace(
    "{paragraphs}", "\n".join(f"<p>{text}</p>" for text in PARAGRAPHS)
)

SIDEBAR_HTML = """<html>
<head><title>Sidebar Notes</title></head>
<body>
<div class="sidebar">
{paragraphs}
</div>
</body>
</html>
""".replace(
    "{paragraphs}", "\n".join(f"<p>{text}</p>" for text in PARAGRAPHS)
)

SHORT_HTML = "<html><head><title>Hello</title></head><body><p>Hello.</p></body></html>"

BASE_URL = "https://example.com/articles/tide-pools"


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def sidebar_html() -> str:
    return SIDEBAR_HTML


@pytest.fixture
def short_html() -> str:
    return SHORT_HTML


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def options() -> ExtractionOptions:
    return ExtractionOptions()


@pytest.fixture
def make_soup():
    """Parse a fragment or document with the pure-Python tree builder."""

    def _make(markup: str) -> BeautifulSoup:
        return BeautifulSoup(markup, "html.parser")

    return _make


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep QUARRYREAD_ environment overrides from leaking into tests."""
    for key in list(os.environ):
        if key.startswith("QUARRYREAD_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def paragraphs() -> list:
    return list(PARAGRAPHS)
