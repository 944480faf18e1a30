"""
Side table of per-node scoring state.

Annotations live outside the tree so bs4 nodes keep their public shape. An
entry holds a strong reference to its node, so the id() key stays unique for
as long as the entry exists; entries must be discarded when their node is
destroyed (``navigator.remove_node`` does this).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from bs4 import Tag
from bs4.element import PageElement


class NodeFlag(enum.IntFlag):
    TO_SCORE = 1 << 0
    INITIALIZED = 1 << 1
    CANDIDATE = 1 << 2
    TOP_CANDIDATE = 1 << 3
    DATA_TABLE = 1 << 4


@dataclass
class NodeAnnotation:
    """Scoring state attached to one node."""

    flags: NodeFlag = NodeFlag(0)
    score: float = 0.0


class AnnotationStore:
    """Maps node identity to its annotation; a missing entry reads as zero."""

    def __init__(self) -> None:
        self._entries: Dict[int, Tuple[PageElement, NodeAnnotation]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, node: PageElement) -> bool:
        return id(node) in self._entries

    def get(self, node: PageElement) -> Optional[NodeAnnotation]:
        entry = self._entries.get(id(node))
        return entry[1] if entry is not None else None

    def get_or_create(self, node: PageElement) -> NodeAnnotation:
        entry = self._entries.get(id(node))
        if entry is None:
            entry = (node, NodeAnnotation())
            self._entries[id(node)] = entry
        return entry[1]

    def discard(self, node: PageElement) -> None:
        self._entries.pop(id(node), None)

    def discard_subtree(self, node: PageElement) -> None:
        """Drop the entries of a node and of all its descendants."""
        if not self._entries:
            return
        self.discard(node)
        if isinstance(node, Tag):
            for descendant in node.descendants:
                self.discard(descendant)

    def clear(self) -> None:
        self._entries.clear()

    def nodes(self) -> Iterator[PageElement]:
        for node, _ in self._entries.values():
            yield node

    # --- flags ---

    def has_flag(self, node: PageElement, flag: NodeFlag) -> bool:
        annotation = self.get(node)
        return annotation is not None and bool(annotation.flags & flag)

    def set_flag(self, node: PageElement, flag: NodeFlag) -> None:
        self.get_or_create(node).flags |= flag

    def is_initialized(self, node: PageElement) -> bool:
        return self.has_flag(node, NodeFlag.INITIALIZED)

    def mark_initialized(self, node: PageElement) -> None:
        self.set_flag(node, NodeFlag.INITIALIZED)

    def is_candidate(self, node: PageElement) -> bool:
        return self.has_flag(node, NodeFlag.CANDIDATE)

    def mark_candidate(self, node: PageElement) -> None:
        self.set_flag(node, NodeFlag.CANDIDATE)

    def is_top_candidate(self, node: PageElement) -> bool:
        return self.has_flag(node, NodeFlag.TOP_CANDIDATE)

    def mark_top_candidate(self, node: PageElement) -> None:
        self.set_flag(node, NodeFlag.TOP_CANDIDATE)

    def is_data_table(self, node: PageElement) -> bool:
        return self.has_flag(node, NodeFlag.DATA_TABLE)

    def mark_data_table(self, node: PageElement) -> None:
        self.set_flag(node, NodeFlag.DATA_TABLE)

    def is_to_score(self, node: PageElement) -> bool:
        return self.has_flag(node, NodeFlag.TO_SCORE)

    def mark_to_score(self, node: PageElement) -> None:
        self.set_flag(node, NodeFlag.TO_SCORE)

    # --- score ---

    def score(self, node: PageElement) -> float:
        annotation = self.get(node)
        return annotation.score if annotation is not None else 0.0

    def set_score(self, node: PageElement, score: float) -> None:
        self.get_or_create(node).score = score

    def add_score(self, node: PageElement, change: float) -> None:
        self.get_or_create(node).score += change
