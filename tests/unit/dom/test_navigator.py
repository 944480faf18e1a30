"""
Unit tests for document-order traversal and bulk tree edits.
"""

import pytest
from bs4 import BeautifulSoup

from quarryread.dom.annotations import AnnotationStore
from quarryread.dom.navigator import (
    bw_remove_descendants_if,
    change_descendants,
    count_descendants,
    first_descendant_with_tag,
    first_node,
    first_node_with_tag,
    following_node,
    forall_descendants,
    has_such_descendant,
    iter_descendants,
    iter_nodes,
    last_node,
    next_element,
    prev_element,
    previous_node,
    remove_descendants_if,
    remove_node,
    root_element,
    skip_descendants,
    sum_over_descendants,
)
from quarryread.dom.nodes import has_tag, is_element

pytestmark = pytest.mark.unit

DOC = "<html><body><div id='d'><p>a</p><p>b</p></div><span>c</span></body></html>"


def _names(nodes):
    return [node.name if is_element(node) else str(node) for node in nodes]


class TestTraversal:
    """Pre-order walking of the tree."""

    def test_root_element_skips_doctype(self):
        """The doctype is not the root element."""
        doc = BeautifulSoup("<!DOCTYPE html><html><body></body></html>", "html.parser")
        assert root_element(doc).name == "html"

    def test_root_element_of_empty_document(self):
        """An empty document has no root element."""
        doc = BeautifulSoup("", "html.parser")
        assert root_element(doc) is None
        assert first_node(doc) is None

    def test_iter_nodes_is_document_order(self):
        """Nodes come parents first, then children, then following siblings."""
        doc = BeautifulSoup(DOC, "html.parser")
        assert _names(iter_nodes(doc)) == ["body", "div", "p", "a", "p", "b", "span", "c"]

    def test_skip_descendants(self):
        """Skipping a subtree lands on the next sibling, or climbs up to find one."""
        doc = BeautifulSoup(DOC, "html.parser")
        div = doc.find(id="d")
        assert skip_descendants(div) is doc.span
        last_p = div.find_all("p")[-1]
        assert skip_descendants(last_p) is doc.span

    def test_following_node_enters_children(self):
        doc = BeautifulSoup(DOC, "html.parser")
        div = doc.find(id="d")
        assert following_node(div) is div.p

    def test_previous_node_is_inverse_of_following(self):
        """Walking backwards from the last node visits the same nodes in reverse."""
        doc = BeautifulSoup(DOC, "html.parser")
        root = root_element(doc)
        forward = list(iter_nodes(doc))
        backward = []
        node = last_node(root)
        while node is not None and node is not root:
            backward.append(node)
            node = previous_node(node)
        assert [id(n) for n in backward] == [id(n) for n in reversed(forward)]

    def test_iter_descendants_stays_inside(self):
        """Descendants of the div do not include the span that follows it."""
        doc = BeautifulSoup(DOC, "html.parser")
        div = doc.find(id="d")
        assert _names(iter_descendants(div)) == ["p", "a", "p", "b"]


class TestRemoval:
    """Removing nodes while walking."""

    def test_remove_node_discards_annotations(self):
        """Annotations of the removed subtree go away with it."""
        doc = BeautifulSoup(DOC, "html.parser")
        annotations = AnnotationStore()
        div = doc.find(id="d")
        annotations.set_score(div, 10)
        annotations.set_score(div.p, 3)

        remove_node(div, annotations)

        assert len(annotations) == 0
        assert doc.find(id="d") is None

    def test_remove_descendants_if(self):
        """Every matching node is removed, and the walk carries on after it."""
        doc = BeautifulSoup(DOC, "html.parser")
        remove_descendants_if(doc.body, lambda n: has_tag(n, "p"))
        assert doc.find("p") is None
        assert doc.span is not None

    def test_bw_remove_checks_children_first(self):
        """A parent emptied by the removal of its children is removed as well."""
        doc = BeautifulSoup("<div id='r'><div><p>x</p></div><span>y</span></div>", "html.parser")
        root = doc.find(id="r")

        def check(node):
            return has_tag(node, "p") or (has_tag(node, "div") and not node.contents)

        bw_remove_descendants_if(root, check)
        assert _names(root.contents) == ["span"]

    def test_change_descendants_resumes_from_replacement(self):
        """The walk continues from whatever stands in the visited position."""
        doc = BeautifulSoup("<div><b>one</b><i>two</i></div>", "html.parser")

        def rename(node):
            if has_tag(node, "b"):
                node.name = "strong"
            return node

        change_descendants(doc.div, rename)
        assert str(doc.div) == "<div><strong>one</strong><i>two</i></div>"


class TestAggregates:
    """Checks and sums over descendants."""

    def test_counting_and_summing(self):
        doc = BeautifulSoup(DOC, "html.parser")
        div = doc.find(id="d")
        assert count_descendants(div, lambda n: has_tag(n, "p")) == 2
        assert sum_over_descendants(div, lambda n: 1.5 if has_tag(n, "p") else 0) == 3.0
        assert has_such_descendant(div, lambda n: str(n) == "b")
        assert not has_such_descendant(div, lambda n: has_tag(n, "span"))
        assert forall_descendants(div, lambda n: not has_tag(n, "span"))

    def test_first_with_tag(self):
        doc = BeautifulSoup(DOC, "html.parser")
        assert first_node_with_tag(doc, "p") is doc.p
        assert first_descendant_with_tag(doc.find(id="d"), "span") is None
        assert first_descendant_with_tag(None, "p") is None


class TestSiblingElements:
    """Element siblings that look past whitespace."""

    def test_next_element_skips_blank_text(self):
        doc = BeautifulSoup("<div><br/> \n <br/></div>", "html.parser")
        first, second = doc.find_all("br")
        assert next_element(first) is second
        assert prev_element(second) is first

    def test_next_element_stops_at_text(self):
        """Real text between two elements means there is no next element."""
        doc = BeautifulSoup("<div><br/>words<br/></div>", "html.parser")
        first, second = doc.find_all("br")
        assert next_element(first) is None
        assert prev_element(second) is None
