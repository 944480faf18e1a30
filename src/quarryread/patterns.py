"""
Precompiled regular expressions used to classify nodes, attributes and text.

All patterns are case-insensitive and searched (not anchored) unless the
pattern itself carries an anchor.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern

_FLAGS = re.IGNORECASE

# Class/id names of nodes that rarely hold the article
UNLIKELY_CANDIDATES: Pattern[str] = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|"
    r"extra|footer|gdpr|header|legends|menu|related|remark|replies|rss|shoutbox|"
    r"sidebar|skyscraper|social|sponsor|supplemental|ad-break|agegate|"
    r"pagination|pager|popup|yom-remote",
    _FLAGS,
)

# Names that rescue a node from the unlikely list
MAYBE_CANDIDATE: Pattern[str] = re.compile(r"and|article|body|column|content|main|shadow", _FLAGS)

BYLINE: Pattern[str] = re.compile(r"byline|author|dateline|writtenby|p-author", _FLAGS)

META_PROPERTY: Pattern[str] = re.compile(
    r"\s*(?:dc|dcterm|og|twitter)\s*:\s*(?:author|creator|description|title|site_name)\s*",
    _FLAGS,
)

META_NAME: Pattern[str] = re.compile(
    r"^\s*(?:(?:dc|dcterm|og|twitter|weibo:(?:article|webpage))\s*[.:]\s*)?"
    r"(?:author|creator|description|title|site_name)\s*$",
    _FLAGS,
)

IMAGE_EXTENSION: Pattern[str] = re.compile(r"\.(?:jpg|jpeg|png|webp)", _FLAGS)

HAS_CONTENT: Pattern[str] = re.compile(r"\S$", _FLAGS)

NEGATIVE: Pattern[str] = re.compile(
    r"hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|foot|"
    r"footer|footnote|gdpr|masthead|media|meta|outbrain|promo|related|scroll|"
    r"share|shoutbox|sidebar|skyscraper|sponsor|shopping|tags|tool|widget",
    _FLAGS,
)

POSITIVE: Pattern[str] = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story",
    _FLAGS,
)

SENTENCE_DOT: Pattern[str] = re.compile(r"\.(?: |$)", _FLAGS)

B64_DATA_URL: Pattern[str] = re.compile(r"^data:\s*[^\s;,]+\s*;\s*base64\s*,", _FLAGS)

SRCSET: Pattern[str] = re.compile(r"\.(?:jpg|jpeg|png|webp)\s+\d", _FLAGS)

SRC: Pattern[str] = re.compile(r"^\s*\S+\.(?:jpg|jpeg|png|webp)\S*\s*$", _FLAGS)

VIDEOS: Pattern[str] = re.compile(
    r"//(?:www\.)?(?:(?:dailymotion|youtube|youtube-nocookie|player\.vimeo|v\.qq)\.com|"
    r"(?:archive|upload\.wikimedia)\.org|player\.twitch\.tv)",
    _FLAGS,
)

SHARE: Pattern[str] = re.compile(r"(?:^|\s|_)(?:share|sharedaddy)(?:$|\s|_)", _FLAGS)

ABSOLUTE_URL: Pattern[str] = re.compile(r"^(?:[a-z]+:)?//", _FLAGS)

ALL_PATTERNS: tuple[Pattern[str], ...] = (
    UNLIKELY_CANDIDATES,
    MAYBE_CANDIDATE,
    BYLINE,
    META_PROPERTY,
    META_NAME,
    IMAGE_EXTENSION,
    HAS_CONTENT,
    NEGATIVE,
    POSITIVE,
    SENTENCE_DOT,
    B64_DATA_URL,
    SRCSET,
    SRC,
    VIDEOS,
    SHARE,
    ABSOLUTE_URL,
)


def matches(pattern: Pattern[str], text: Optional[str]) -> bool:
    """Search ``text`` for ``pattern``; an absent text never matches."""
    if text is None:
        return False
    return pattern.search(text) is not None
