"""
Data models for extraction options and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional

from bs4 import Tag
from pydantic import BaseModel, Field, field_validator

from ..text import normalize_whitespace, text_content, unescape_entities

TEMPLATE_FIELDS = ("title", "body", "byline", "excerpt", "sitename", "url")


class ExtractionOptions(BaseModel):
    """Options for one extraction run. Never mutated by the extractor."""

    strip_unlikely: bool = Field(default=True, description="Remove nodes whose class/id look like boilerplate.")
    weight_classes: bool = Field(default=True, description="Score nodes by their class and id names.")
    clean_conditionally: bool = Field(default=True, description="Remove fishy-looking subtrees from the article.")
    url_override: bool = Field(default=False, description="Resolve hash links against the base URL as well.")
    base_url: Optional[str] = Field(default=None, description="URL relative links are resolved against.")
    char_threshold: int = Field(default=500, gt=0, description="Article length that stops the retry loop.")
    n_top_candidates: int = Field(default=5, ge=1, description="Number of top candidates to compare.")
    keep_short_articles: bool = Field(
        default=False, description="Return the longest attempt even if it is below char_threshold."
    )
    template: List[str] = Field(default_factory=lambda: ["body"], description="Output template for the CLI.")

    @field_validator("template", mode="before")
    @classmethod
    def split_template(cls, v: object) -> object:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("template")
    @classmethod
    def validate_template(cls, v: List[str]) -> List[str]:
        """Ensure every template field is known."""
        for item in v:
            if item not in TEMPLATE_FIELDS:
                raise ValueError(f"unrecognized field in article template: {item!r}")
        return v


@dataclass(slots=True)
class RelaxationFlags:
    """The filters that get switched off, in order, when an attempt comes up short."""

    strip_unlikely: bool = True
    weight_classes: bool = True
    clean_conditionally: bool = True

    @classmethod
    def from_options(cls, options: ExtractionOptions) -> RelaxationFlags:
        return cls(
            strip_unlikely=options.strip_unlikely,
            weight_classes=options.weight_classes,
            clean_conditionally=options.clean_conditionally,
        )

    def relaxed(self) -> Optional[RelaxationFlags]:
        """Return a copy with the next active flag turned off, or None if all are off."""
        for item in fields(self):
            if getattr(self, item.name):
                values = {f.name: getattr(self, f.name) for f in fields(self)}
                values[item.name] = False
                return RelaxationFlags(**values)
        return None

    def active(self) -> List[str]:
        return [item.name for item in fields(self) if getattr(self, item.name)]


@dataclass
class ArticleMetadata:
    """Title, byline, excerpt, site name and text direction of one document."""

    title: Optional[str] = None
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None
    direction: Optional[str] = None

    def finalize(self) -> None:
        """Trim and unescape the text fields for presentation."""
        for name in ("title", "byline", "excerpt", "site_name"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, unescape_entities(value.strip()))

    def spelled_direction(self) -> Optional[str]:
        if self.direction == "ltr":
            return "Left to right"
        if self.direction == "rtl":
            return "Right to left"
        return None


@dataclass
class Attempt:
    """One run of the grabbing loop."""

    article: Tag
    length: int
    direction: Optional[str]
    flags: RelaxationFlags


@dataclass
class ExtractionResult:
    """Outcome of extracting one document.

    ``content`` is the detached ``div#readability-page-1`` element, or None
    when no article was found.
    """

    content: Optional[Tag]
    metadata: ArticleMetadata = field(default_factory=ArticleMetadata)
    attempts: int = 0
    length: int = 0

    @property
    def found(self) -> bool:
        return self.content is not None

    def html(self) -> str:
        if self.content is None:
            return ""
        return self.content.decode()

    def text(self) -> str:
        if self.content is None:
            return ""
        return normalize_whitespace(text_content(self.content)).strip()


@dataclass(slots=True, frozen=True)
class ExtractResult:
    """Result of HTML content extraction."""

    url: str | None
    html: str
    text: str
    title: str | None
    byline: str | None = None
    excerpt: str | None = None
    site_name: str | None = None
    direction: str | None = None
    readerable: bool = False
    score: float = 0.0  # 0-1, fraction of char_threshold reached

    def __post_init__(self) -> None:
        """Validate the result."""
        if not (0.0 <= self.score <= 1.0):
            raise ValueError("Score must be between 0.0 and 1.0")
