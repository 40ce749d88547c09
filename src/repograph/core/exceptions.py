"""Typed exception hierarchy for repograph.

Hierarchy
---------
RepoGraphError (base)
├── ParsingError            – internal extractor faults (never raised for bad source text)
│   └── UnsupportedLanguageError
├── GraphError              – graph assembly / query failures
│   ├── GraphDeserializationError
│   └── NodeNotFoundError
├── EmbeddingError          – embedding collaborator failures
├── ConfigError             – configuration / validation errors
└── ScanError               – repository scanning failures

Malformed source code is not an error at the extraction layer: extractors
simply emit fewer symbols.  ``is_input_error()`` lets boundary code tell
"bad input" failures apart from internal faults.
"""

from typing import Any

# ── convenience alias so consumers can write ``from repograph import RGError``
RGError = None  # defined after class below


class RepoGraphError(Exception):
    """Base exception for repograph."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# Convenience alias
RGError = RepoGraphError  # type: ignore[assignment]


# ── Parsing layer ───────────────────────────────────────────────────────


class ParsingError(RepoGraphError):
    """An extractor failed internally.

    Raised only for faults in the extractor itself (for example a grammar
    that cannot be loaded), never for source text that fails to match.
    """

    pass


class UnsupportedLanguageError(ParsingError):
    """A language tag outside the supported set was requested strictly."""

    pass


# ── Graph layer ─────────────────────────────────────────────────────────


class GraphError(RepoGraphError):
    """Graph assembly or query failed."""

    pass


class GraphDeserializationError(GraphError):
    """Serialized graph data is malformed.

    The live graph is left untouched when this is raised.
    """

    pass


class NodeNotFoundError(GraphError):
    """A node id required by the operation does not exist."""

    pass


# ── Embedding layer ─────────────────────────────────────────────────────


class EmbeddingError(RepoGraphError):
    """Embedding collaborator errors."""

    pass


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(RepoGraphError):
    """Configuration / validation errors."""

    pass


# ── Scanning layer ──────────────────────────────────────────────────────


class ScanError(RepoGraphError):
    """Repository scanning failed (root missing, unreadable, ...)."""

    pass


_INPUT_ERRORS = (
    UnsupportedLanguageError,
    GraphDeserializationError,
    NodeNotFoundError,
    ConfigError,
    ScanError,
)


def is_input_error(exc: BaseException) -> bool:
    """Return True if *exc* was caused by caller input rather than an internal fault."""
    return isinstance(exc, _INPUT_ERRORS)
