"""
Article grabbing: node scoring, top-candidate selection, sibling gathering
and the retry loop.

Every attempt works on a fresh copy of the prepared document with its own
annotation store, so no score leaks from one attempt into the next. When an
attempt comes up short, the next one runs with one more filter switched off,
in the order strip_unlikely, weight_classes, clean_conditionally.
"""

from __future__ import annotations

import copy
from typing import List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from .. import patterns
from ..dom.annotations import AnnotationStore
from ..dom.navigator import (
    first_node,
    following_node,
    has_such_descendant,
    iter_nodes,
    remove_and_get_following,
    remove_node,
    root_element,
)
from ..dom.nodes import (
    attr_equals,
    child_element_count,
    class_weight,
    get_attr,
    has_ancestor_tag,
    has_tag,
    has_unlikely_class_id,
    is_ancestor_of,
    is_element,
    is_node_visible,
    new_tag,
)
from ..exceptions import DocumentStructureError
from ..text import (
    char_count,
    has_single_tag_inside,
    is_phrasing_content,
    link_density,
    normalized_content,
    normalized_content_length,
    text_content_length,
)
from .cleaner import ArticleCleaner
from .models import ArticleMetadata, Attempt, ExtractionOptions, RelaxationFlags
from .preprocess import is_whitespace, prune_trailing_whitespace

logger = structlog.get_logger(__name__)

TAGS_TO_SCORE = ("section", "h2", "h3", "h4", "h5", "h6", "p", "td", "pre")

DIV_ELEMS = ("div", "section", "header", "h1", "h2", "h3", "h4", "h5", "h6")

# Any of these inside a <div> keeps it from being turned into a <p>
DIV_TO_P_ELEMS = ("a", "blockquote", "dl", "div", "img", "ol", "p", "pre", "table", "ul", "select")

# Tags kept as they are when gathered into the article; the rest become <div>
APPEND_AS_IS = ("div", "article", "section", "p")

MINIMUM_TOPCANDIDATES = 3

PAGE_ID = "readability-page-1"
PAGE_CLASS = "page"


def get_body(doc: BeautifulSoup) -> Tag:
    """Return the <body> child of the root element.

    Raises:
        DocumentStructureError: If there is no root element, or it has no body
    """
    root = root_element(doc)
    if root is None:
        raise DocumentStructureError("document has no root element", reason="no_root")
    for child in root.contents:
        if has_tag(child, "body"):
            return child  # type: ignore[return-value]
    raise DocumentStructureError("document has no body tag", reason="no_body")


def _is_break_if_element(node: PageElement) -> bool:
    if not is_element(node):
        return True
    return has_tag(node, "br", "hr")


def is_division_without_content(node: PageElement) -> bool:
    """A div, section, header or heading with no text and nothing but line breaks inside."""
    if not has_tag(node, *DIV_ELEMS):
        return False
    if text_content_length(node):
        return False
    return all(_is_break_if_element(descendant) for descendant in node.descendants)  # type: ignore[union-attr]


def is_node_unlikely(node: PageElement) -> bool:
    if attr_equals(node, "role", "complementary"):
        return True
    if has_ancestor_tag(node, "table") or has_tag(node, "body", "a"):
        return False
    return has_unlikely_class_id(node)


def _is_block_element(node: PageElement) -> bool:
    return has_tag(node, *DIV_TO_P_ELEMS)


def is_paragraph_with_content(node: PageElement) -> bool:
    if not has_tag(node, "p"):
        return False
    content = normalized_content(node)
    density = link_density(node)
    if len(content) > 80 and density < 0.25:
        return True
    return density == 0 and patterns.matches(patterns.SENTENCE_DOT, content)


class AttemptScorer:
    """Scoring state for a single attempt: the working copy and its annotations."""

    def __init__(
        self,
        doc: BeautifulSoup,
        flags: RelaxationFlags,
        options: ExtractionOptions,
        annotations: AnnotationStore,
    ) -> None:
        self.doc = doc
        self.flags = flags
        self.options = options
        self.annotations = annotations

    def initialize_node(self, node: Tag) -> None:
        """Give a node its preliminary score from its tag and class names."""
        ann = self.annotations
        if has_tag(node, "div"):
            ann.add_score(node, 5)
        elif has_tag(node, "pre", "td", "blockquote"):
            ann.add_score(node, 3)
        elif has_tag(node, "address", "form"):
            ann.add_score(node, -3)
        elif has_tag(node, "ol", "ul", "dl", "dd", "dt", "li"):
            ann.add_score(node, -3)
        elif has_tag(node, "h1", "h2", "h3", "h4", "h5", "h6", "th"):
            ann.add_score(node, -5)

        ann.add_score(node, class_weight(node, self.flags.weight_classes))
        ann.mark_initialized(node)

    # --- scoring ---

    def _assign_content_score_ancestors(self, node: PageElement, score: int) -> None:
        shares = (1.0, 2.0, 6.0)
        level = 0
        ancestor = node.parent
        while ancestor is not None and level < len(shares):
            if not is_element(ancestor) or not is_element(ancestor.parent):
                ancestor = ancestor.parent
                continue
            if not self.annotations.is_initialized(ancestor):
                self.initialize_node(ancestor)
                self.annotations.mark_candidate(ancestor)
            self.annotations.add_score(ancestor, score / shares[level])
            level += 1
            ancestor = ancestor.parent

    def assign_content_score(self, node: PageElement) -> None:
        """Score a paragraph-like node by how content-y it looks and pass it up to its ancestors."""
        if not self.annotations.is_to_score(node):
            return
        if not is_element(node.parent):
            return

        text = normalized_content(node)
        length = len(text)
        if length < 25:
            return

        score = 1  # the paragraph itself
        score += char_count(text, ",") + 1
        score += min(length // 100, 3)
        self._assign_content_score_ancestors(node, score)

    def score_document(self) -> None:
        for node in iter_nodes(self.doc):
            self.assign_content_score(node)

    # --- top candidate ---

    def _find_ancestor_with_more_content(self, node: Tag) -> Tag:
        """Walk up while the score keeps growing; a parent scoring higher may join more content."""
        lastscore = self.annotations.score(node)
        threshold = lastscore / 3.0

        ancestor = node.parent
        while ancestor is not None and not has_tag(ancestor, "body"):
            ancestor_score = self.annotations.score(ancestor)
            if ancestor_score:
                if ancestor_score < threshold:
                    break
                if ancestor_score > lastscore:
                    return ancestor
                lastscore = ancestor_score
            ancestor = ancestor.parent
        return node

    def _find_better_top_candidate(self, tops: List[Tag]) -> Tag:
        ann = self.annotations
        topnode = tops[0]
        topscore = ann.score(topnode)
        if not topscore:
            return topnode

        # An ancestor holding several other close contenders is a better pick
        ancestor = topnode.parent
        while ancestor is not None and not has_tag(ancestor, "body"):
            contained = sum(
                1 for other in tops[1:] if ann.score(other) / topscore >= 0.75 and is_ancestor_of(ancestor, other)
            )
            if contained >= MINIMUM_TOPCANDIDATES:
                topnode = ancestor
                break
            ancestor = ancestor.parent
        if not ann.is_initialized(topnode):
            self.initialize_node(topnode)

        topnode = self._find_ancestor_with_more_content(topnode)

        # An only child is better replaced by its parent, so the sibling pass can see more
        while child_element_count(topnode.parent) == 1:
            parent = topnode.parent
            if not is_element(parent) or has_tag(parent, "body"):
                break
            topnode = parent  # type: ignore[assignment]
        if not ann.is_initialized(topnode):
            self.initialize_node(topnode)
        return topnode

    def top_candidates(self) -> List[Tag]:
        """Rescale candidate scores by link density and return the best ones, best first."""
        limit = self.options.n_top_candidates
        tops: List[Tag] = []
        for node in iter_nodes(self.doc):
            if not self.annotations.is_candidate(node):
                continue
            score = self.annotations.score(node) * (1 - link_density(node))
            self.annotations.set_score(node, score)

            for index in range(limit):
                if index < len(tops) and score <= self.annotations.score(tops[index]):
                    continue
                tops.insert(index, node)  # type: ignore[arg-type]
                del tops[limit:]
                break
        return tops

    def find_top_candidate(self) -> Optional[Tag]:
        tops = self.top_candidates()
        if not tops or has_tag(tops[0], "body"):
            return None
        top = self._find_better_top_candidate(tops)
        self.annotations.mark_top_candidate(top)
        return top

    def top_candidate_from_all(self) -> Tag:
        """Wrap the whole body in a new <div> and use that as the top candidate."""
        body = get_body(self.doc)
        wrapper = new_tag("div")
        for child in list(body.contents):
            wrapper.append(child)
        body.append(wrapper)
        self.initialize_node(wrapper)
        self.annotations.mark_top_candidate(wrapper)
        return wrapper

    # --- sibling gathering ---

    def _append_content(self, content: Tag, node: Tag) -> None:
        if not has_tag(node, *APPEND_AS_IS):
            # Something like a form or td would be filtered out later by accident
            node.name = "div"
        content.append(node)

    def gather_related_content(self, top: Tag) -> Tag:
        """Collect the top candidate and whichever of its siblings look related."""
        ann = self.annotations
        parent = top.parent
        topscore = ann.score(top)
        threshold = max(topscore * 0.2, 10.0)
        topclass = get_attr(top, "class")

        content = new_tag("div")
        for child in list(parent.contents):  # type: ignore[union-attr]
            if child is top:
                self._append_content(content, child)
                continue
            if not is_element(child):
                continue

            bonus = 0.0
            child_class = get_attr(child, "class")
            if child_class and topclass is not None and child_class.lower() == topclass.lower():
                bonus = topscore * 0.2

            if ann.is_initialized(child) and ann.score(child) + bonus >= threshold:
                self._append_content(content, child)  # type: ignore[arg-type]
            elif is_paragraph_with_content(child):
                self._append_content(content, child)  # type: ignore[arg-type]
        return content


class ArticleGrabber:
    """Runs the attempt loop over one prepared document.

    The byline is looked for across attempts, but only the first byline node
    of the document is ever taken.
    """

    def __init__(self, doc: BeautifulSoup, options: ExtractionOptions, metadata: ArticleMetadata) -> None:
        self.doc = doc
        self.options = options
        self.metadata = metadata
        self.attempts: List[Attempt] = []
        self._found_byline = False

    # --- prune and classify ---

    def _check_byline(self, node: PageElement) -> bool:
        if self._found_byline or not is_element(node):
            return False

        itemprop = get_attr(node, "itemprop")
        is_byline = (
            attr_equals(node, "rel", "author")
            or (itemprop is not None and "author" in itemprop)
            or patterns.matches(patterns.BYLINE, get_attr(node, "class"))
            or patterns.matches(patterns.BYLINE, get_attr(node, "id"))
        )
        if not is_byline:
            return False

        length = text_content_length(node)
        if 0 < length < 100:
            if self.metadata.byline is None:
                self.metadata.byline = normalized_content(node)
            self._found_byline = True
        return self._found_byline

    def _no_need_to_score(self, node: PageElement, flags: RelaxationFlags) -> bool:
        """Can this node be dropped right away? Finding the byline is a side effect."""
        if not is_node_visible(node):
            return True
        if self._check_byline(node):
            return True
        if flags.strip_unlikely and is_node_unlikely(node):
            return True
        return is_division_without_content(node)

    def _reparent_to_p_sibling(self, node: PageElement, paragraph: Optional[Tag]) -> Optional[Tag]:
        if paragraph is None:
            if is_whitespace(node):
                return None
            paragraph = new_tag("p")
            node.insert_before(paragraph)
        paragraph.append(node)
        return paragraph

    def _handle_div(self, node: Tag, annotations: AnnotationStore) -> Optional[PageElement]:
        """Turn phrasing runs into paragraphs and paragraph-like divs into <p>; return the next node."""
        paragraph: Optional[Tag] = None
        child = node.contents[0] if node.contents else None
        while child is not None:
            if is_phrasing_content(child):
                paragraph = self._reparent_to_p_sibling(child, paragraph)
                if paragraph is not None:
                    child = paragraph
            elif paragraph is not None:
                prune_trailing_whitespace(paragraph)
                paragraph = None
            child = child.next_sibling

        single = has_single_tag_inside(node, "p")
        if single is not None and link_density(node) < 0.25:
            node.replace_with(single)
            remove_node(node, annotations)
            node = single
            annotations.mark_to_score(node)
        elif not has_such_descendant(node, _is_block_element):
            node.name = "p"
            annotations.mark_to_score(node)
        return following_node(node)

    def _prune_and_classify(self, doc: BeautifulSoup, flags: RelaxationFlags, annotations: AnnotationStore) -> None:
        node = first_node(doc)
        while node is not None:
            if self._no_need_to_score(node, flags):
                node = remove_and_get_following(node, annotations)
                continue

            if has_tag(node, *TAGS_TO_SCORE):
                annotations.mark_to_score(node)

            if has_tag(node, "div"):
                node = self._handle_div(node, annotations)  # type: ignore[arg-type]
                continue
            node = following_node(node)

    # --- attempts ---

    def _copy_document(self) -> BeautifulSoup:
        work = BeautifulSoup("", "html.parser")
        root = root_element(self.doc)
        if root is not None:
            work.append(copy.copy(root))
        return work

    @staticmethod
    def _text_direction(top: Tag, top_parent: Optional[PageElement]) -> Optional[str]:
        """Find the dir attribute of the top candidate or of its original ancestors."""
        ancestor: Optional[PageElement] = top
        while ancestor is not None:
            direction = get_attr(ancestor, "dir")
            if direction is not None:
                return direction
            ancestor = top_parent if ancestor is top else ancestor.parent
        return None

    @staticmethod
    def _create_main_div(article: Tag) -> None:
        div = new_tag("div", {"id": PAGE_ID, "class": PAGE_CLASS})
        for child in list(article.contents):
            div.append(child)
        article.append(div)

    def _grab_once(self, flags: RelaxationFlags) -> Attempt:
        annotations = AnnotationStore()
        work = self._copy_document()
        scorer = AttemptScorer(work, flags, self.options, annotations)
        try:
            self._prune_and_classify(work, flags, annotations)
            scorer.score_document()

            top = scorer.find_top_candidate()
            top_is_new = top is None
            if top is None:
                top = scorer.top_candidate_from_all()
            top_parent = top.parent
            article = scorer.gather_related_content(top)

            ArticleCleaner(annotations, flags, self.options, self.metadata.title).prep_article(article)
            if not article.contents:
                # Even the top candidate is gone
                return Attempt(article=article, length=0, direction=None, flags=flags)

            if top_is_new:
                top["id"] = PAGE_ID
                top["class"] = PAGE_CLASS
            else:
                self._create_main_div(article)

            return Attempt(
                article=article,
                length=normalized_content_length(article),
                direction=self._text_direction(top, top_parent),
                flags=flags,
            )
        finally:
            annotations.clear()

    def grab(self) -> Optional[Attempt]:
        """Run attempts until one is long enough or there is nothing left to relax.

        Returns:
            The longest non-empty attempt, or None if every attempt came out empty.
            All other attempts are destroyed.
        """
        get_body(self.doc)

        flags: Optional[RelaxationFlags] = RelaxationFlags.from_options(self.options)
        while flags is not None:
            attempt = self._grab_once(flags)
            self.attempts.append(attempt)
            logger.debug(
                "grab_attempt",
                attempt=len(self.attempts),
                flags=flags.active(),
                length=attempt.length,
            )
            if attempt.length >= self.options.char_threshold:
                break
            flags = flags.relaxed()

        best: Optional[Attempt] = None
        for attempt in self.attempts:
            if attempt.length and (best is None or attempt.length > best.length):
                best = attempt

        for attempt in self.attempts:
            if attempt is not best:
                attempt.article.decompose()
        return best


def grab_article(
    doc: BeautifulSoup, options: ExtractionOptions, metadata: ArticleMetadata
) -> Tuple[Optional[Attempt], int]:
    """Grab the article from a prepared document.

    Returns:
        The winning attempt (or None) and the number of attempts made
    """
    grabber = ArticleGrabber(doc, options, metadata)
    best = grabber.grab()
    return best, len(grabber.attempts)
