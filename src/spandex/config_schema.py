"""Unified configuration schema for spandex.

Defines Pydantic models for the unified config structure with dedicated
sections for the migration run, each backend, and logging. Includes an
adapter flattening it into fallbacks for ``load_config()``.

Usage:
    from spandex.config_schema import build_config, to_yaml_fallbacks

    raw = load_hierarchical_config()
    unified = build_config(raw)
    config = load_config(source="TextExpander", yaml_fallbacks=to_yaml_fallbacks(unified))
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_AUTOKEY_DIR = "~/.config/autokey"
DEFAULT_TEXTEXPANDER_FILE = "~/Dropbox/TextExpander/Settings.textexpander"


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class MigrationConfig(BaseModel):
    """Which backends to migrate between.

    All fields are optional so env vars and CLI args can supply them.
    """

    source: str | None = Field(default=None, description="Source expander")
    dest: str | None = Field(
        default=None, description="Destination expander"
    )
    import_name: str | None = Field(
        default=None, description="Group name for imported snippets"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {"frozen": True}


class AutoKeyConfig(BaseModel):
    """AutoKey backend settings."""

    dir: str = Field(
        default=DEFAULT_AUTOKEY_DIR,
        description="AutoKey settings directory",
    )

    model_config = {"frozen": True}


class TextExpanderConfig(BaseModel):
    """TextExpander backend settings."""

    file: str = Field(
        default=DEFAULT_TEXTEXPANDER_FILE,
        description="TextExpander settings file",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``"text"`` or ``"json"``.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: str = Field(default="text", description="Log format")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has sensible defaults, so ``UnifiedConfig()``
    (zero-config) is always valid.
    """

    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    autokey: AutoKeyConfig = Field(default_factory=AutoKeyConfig)
    textexpander: TextExpanderConfig = Field(
        default_factory=TextExpanderConfig
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapter: UnifiedConfig -> load_config() fallbacks
# ---------------------------------------------------------------------------


def to_yaml_fallbacks(unified: UnifiedConfig) -> dict:
    """Flatten a ``UnifiedConfig`` into the ``yaml_fallbacks`` dict accepted
    by ``load_config()``.

    Backend paths always carry a value (their schema defaults). Migration
    fields are included only when set, so they fall through to env vars
    or fail validation in ``load_config()``.

    Args:
        unified: The unified config produced by ``build_config()``.

    Returns:
        Dict with keys source, dest, import_name, autokey_dir,
        textexpander_file, debug.
    """
    fallbacks: dict = {
        "autokey_dir": unified.autokey.dir,
        "textexpander_file": unified.textexpander.file,
        "debug": unified.migration.debug,
    }
    if unified.migration.source:
        fallbacks["source"] = unified.migration.source
    if unified.migration.dest:
        fallbacks["dest"] = unified.migration.dest
    if unified.migration.import_name:
        fallbacks["import_name"] = unified.migration.import_name
    return fallbacks
