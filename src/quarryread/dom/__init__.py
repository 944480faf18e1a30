"""Tree traversal, node predicates and per-node annotations over bs4 trees."""

from __future__ import annotations

from .annotations import AnnotationStore, NodeAnnotation, NodeFlag

__all__ = ["AnnotationStore", "NodeAnnotation", "NodeFlag"]
