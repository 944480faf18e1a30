"""
Exceptions raised by quarryread.

Failing to find an article is a normal outcome and is reported through the
result object; only documents that cannot be processed at all raise.
"""

from __future__ import annotations


class QuarryReadError(Exception):
    """Base class for all quarryread errors."""


class DocumentStructureError(QuarryReadError, ValueError):
    """The document has no root element, or its root has no <body> child."""

    def __init__(self, message: str, *, reason: str = "structure") -> None:
        super().__init__(message)
        self.reason = reason


class TemplateError(QuarryReadError, ValueError):
    """An output template names a field that does not exist."""

    def __init__(self, field: str) -> None:
        super().__init__(f"unrecognized field in article template: {field!r}")
        self.field = field
