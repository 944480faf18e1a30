"""Structured logging for QuarryRead."""

from __future__ import annotations

from .logging import add_correlation_id, configure_logging

__all__ = ["add_correlation_id", "configure_logging"]
