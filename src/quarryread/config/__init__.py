"""Configuration for QuarryRead."""

from __future__ import annotations

from .config import Config, LoggingConfig, ParserConfig, find_config_file

__all__ = ["Config", "LoggingConfig", "ParserConfig", "find_config_file"]
