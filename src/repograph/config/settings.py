"""Settings for repograph scans and extraction."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from ..core.exceptions import ConfigError
from .defaults import (
    DEFAULT_EMBEDDING_CONCURRENCY,
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_MAX_FILE_SIZE,
)


@dataclass
class ParseSettings:
    """How the scanner finds files and which extractors it uses."""

    max_file_size: int = DEFAULT_MAX_FILE_SIZE  # Bytes; larger files are skipped
    use_tree_sitter: bool = False  # Grammar-backed JS/TS extraction
    follow_symlinks: bool = False
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    ignore_patterns: list[str] = field(default_factory=list)  # Merged with defaults

    def __post_init__(self) -> None:
        if self.max_file_size <= 0:
            raise ConfigError(
                f"max_file_size must be positive, got {self.max_file_size}",
                context={"field": "parse.max_file_size"},
            )
        self.extensions = [
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.extensions
        ]

    @property
    def all_ignore_patterns(self) -> set[str]:
        return set(DEFAULT_IGNORE_PATTERNS) | set(self.ignore_patterns)


@dataclass
class EmbeddingSettings:
    """How code contexts are sent to the embedding collaborator."""

    max_concurrent: int = DEFAULT_EMBEDDING_CONCURRENCY  # 1 = sequential

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise ConfigError(
                f"max_concurrent must be at least 1, got {self.max_concurrent}",
                context={"field": "embedding.max_concurrent"},
            )


@dataclass
class RepoGraphSettings:
    """Complete repograph configuration."""

    parse: ParseSettings = field(default_factory=ParseSettings)
    embedding: EmbeddingSettings = field(default_factory=EmbeddingSettings)

    @classmethod
    def load(cls, path: Path | None) -> RepoGraphSettings:
        """Load configuration from a YAML file, then apply environment overrides.

        Args:
            path: Path to YAML configuration file (defaults used if missing)

        Returns:
            RepoGraphSettings instance
        """
        data: dict[str, Any] = {}
        if path is not None and path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(
                    f"Invalid YAML in {path}: {e}", context={"path": str(path)}
                ) from e
            if not isinstance(data, dict):
                raise ConfigError(
                    f"Configuration root must be a mapping: {path}",
                    context={"path": str(path)},
                )
            logger.debug(f"Loaded configuration from {path}")

        settings = cls.from_dict(data)
        settings.apply_env_overrides(os.environ)
        return settings

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepoGraphSettings:
        """Create settings from a dictionary, rejecting unknown keys."""
        return cls(
            parse=_build(ParseSettings, data.get("parse") or {}, "parse"),
            embedding=_build(EmbeddingSettings, data.get("embedding") or {}, "embedding"),
        )

    def apply_env_overrides(self, environ: Any) -> None:
        """Apply ``REPOGRAPH_*`` environment variables on top of file settings."""
        max_size = environ.get("REPOGRAPH_MAX_FILE_SIZE")
        if max_size:
            self.parse.max_file_size = _parse_int("REPOGRAPH_MAX_FILE_SIZE", max_size)
            self.parse.__post_init__()

        tree_sitter = environ.get("REPOGRAPH_USE_TREE_SITTER")
        if tree_sitter:
            self.parse.use_tree_sitter = tree_sitter.strip().lower() in (
                "1",
                "true",
                "yes",
                "on",
            )

        concurrency = environ.get("REPOGRAPH_EMBED_CONCURRENCY")
        if concurrency:
            self.embedding.max_concurrent = _parse_int(
                "REPOGRAPH_EMBED_CONCURRENCY", concurrency
            )
            self.embedding.__post_init__()

    def to_dict(self) -> dict[str, Any]:
        return {"parse": asdict(self.parse), "embedding": asdict(self.embedding)}


def _build(cls: type, data: dict[str, Any], section: str) -> Any:
    if not isinstance(data, dict):
        raise ConfigError(f"Section {section!r} must be a mapping", context={"section": section})
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(
            f"Unknown {section} settings: {', '.join(sorted(unknown))}",
            context={"section": section, "unknown": sorted(unknown)},
        )
    try:
        return cls(**data)
    except TypeError as e:
        raise ConfigError(f"Invalid {section} settings: {e}", context={"section": section}) from e


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"Invalid {name} value: {value!r}", context={"variable": name}) from e
