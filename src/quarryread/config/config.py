"""
Configuration management for QuarryRead using Pydantic.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quarryread.extractor.models import ExtractionOptions

# --- Setup Logging ---
log = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("quarryread.yaml", "quarryread.yml")

# --- Nested Configuration Models ---


class ParserConfig(BaseModel):
    """HTML parser configuration."""

    features: str = Field(default="lxml", description="bs4 tree builder (lxml, html.parser, html5lib).")
    from_encoding: Optional[str] = Field(
        default=None, description="Encoding of byte input. None lets the parser detect it."
    )

    @field_validator("features")
    @classmethod
    def validate_features(cls, v: str) -> str:
        """Ensure a tree builder is named."""
        if not v.strip():
            raise ValueError("features must name a bs4 tree builder")
        return v.strip()

    @field_validator("from_encoding")
    @classmethod
    def validate_encoding(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e
        return v


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    log_level: str = Field(default="WARNING", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to the console.",
    )
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    extraction: ExtractionOptions = Field(default_factory=ExtractionOptions)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="QUARRYREAD_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls()
        if not isinstance(yaml_data, dict):
            raise ValueError(f"Configuration file must hold a mapping: {path}")
        # Keyword values win over environment variables, nested sections are merged
        return cls(**yaml_data)


def find_config_file(directory: Path | None = None) -> Path | None:
    current_dir = directory or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        path = current_dir / name
        if path.exists():
            return path
    return None


