"""Tests for the typed exception hierarchy.

Validates:
- Class hierarchy is correct (isinstance checks)
- Context dicts are carried on every exception
- is_input_error() separates caller mistakes from internal faults
"""

from __future__ import annotations

import pytest

from repograph.core.exceptions import (
    ConfigError,
    EmbeddingError,
    GraphDeserializationError,
    GraphError,
    NodeNotFoundError,
    ParsingError,
    RepoGraphError,
    RGError,
    ScanError,
    UnsupportedLanguageError,
    is_input_error,
)

# ---------------------------------------------------------------------------
# Hierarchy tests
# ---------------------------------------------------------------------------


class TestExceptionHierarchy:
    """Verify the class hierarchy defined in core/exceptions.py."""

    def test_base_is_exception(self):
        assert isinstance(RepoGraphError("base"), Exception)

    def test_alias(self):
        assert RGError is RepoGraphError

    @pytest.mark.parametrize(
        "cls,parent",
        [
            (ParsingError, RepoGraphError),
            (UnsupportedLanguageError, ParsingError),
            (GraphError, RepoGraphError),
            (GraphDeserializationError, GraphError),
            (NodeNotFoundError, GraphError),
            (EmbeddingError, RepoGraphError),
            (ConfigError, RepoGraphError),
            (ScanError, RepoGraphError),
        ],
    )
    def test_parents(self, cls, parent):
        assert issubclass(cls, parent)

    def test_package_root_exports_base(self):
        import repograph

        assert repograph.RepoGraphError is RepoGraphError


class TestExceptionContext:
    def test_default_context_is_empty(self):
        assert GraphError("boom").context == {}

    def test_context_is_kept(self):
        err = EmbeddingError("failed", context={"symbol": "load"})

        assert err.context == {"symbol": "load"}
        assert str(err) == "failed"


class TestIsInputError:
    @pytest.mark.parametrize(
        "exc",
        [
            UnsupportedLanguageError("cobol"),
            GraphDeserializationError("bad json"),
            NodeNotFoundError("missing"),
            ConfigError("bad value"),
            ScanError("no root"),
        ],
    )
    def test_input_errors(self, exc):
        assert is_input_error(exc)

    @pytest.mark.parametrize(
        "exc",
        [ParsingError("grammar"), EmbeddingError("model"), GraphError("x"), ValueError("v")],
    )
    def test_internal_faults(self, exc):
        assert not is_input_error(exc)
