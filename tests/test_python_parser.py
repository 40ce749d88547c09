"""Tests for Python parser."""

import pytest

from repograph.core.models import DependencyKind, SymbolKind, Visibility
from repograph.parsers.python import PythonParser


@pytest.fixture
def python_parser():
    return PythonParser()


@pytest.fixture
def sample_python_code():
    return '''import os, json as j
from pathlib import Path

MAX_SIZE = 100
_cache: dict = {}


class Loader:
    """Loads things from disk."""

    def __init__(self, root, strict=False):
        self.root = root

    async def load(self, name):
        """Load one item."""
        data = read(name)
        print(data)
        return data

    def _hidden(self):
        pass


def helper():
    return Loader(os.getcwd())
'''


def _kinds(result, name):
    return [s.kind for s in result.symbols if s.name == name]


def test_python_parser_initialization(python_parser):
    assert python_parser.language == "python"
    assert python_parser.get_supported_extensions() == [".py"]


def test_class_with_indented_method():
    """An indented def inside a class is a method."""
    result = PythonParser().parse("class Foo:\n    def bar(self):\n        pass")

    assert _kinds(result, "Foo") == [SymbolKind.CLASS]
    assert _kinds(result, "bar") == [SymbolKind.METHOD]
    bar = next(s for s in result.symbols if s.name == "bar")
    assert bar.start_line == 2
    assert bar.signature == "(self)"


def test_python_parser_functions_and_methods(python_parser, sample_python_code):
    result = python_parser.parse(sample_python_code, "loader.py")

    assert _kinds(result, "helper") == [SymbolKind.FUNCTION]
    assert _kinds(result, "__init__") == [SymbolKind.METHOD]
    assert _kinds(result, "load") == [SymbolKind.METHOD]

    init = next(s for s in result.symbols if s.name == "__init__")
    assert init.signature == "(self, root, strict=False)"

    helper = next(s for s in result.symbols if s.name == "helper")
    assert helper.signature == "()"


def test_python_parser_docstrings(python_parser, sample_python_code):
    result = python_parser.parse(sample_python_code)
    by_name = {s.name: s for s in result.symbols}

    assert by_name["Loader"].documentation == "Loads things from disk."
    assert by_name["load"].documentation == "Load one item."
    assert by_name["helper"].documentation is None


def test_python_parser_visibility(python_parser, sample_python_code):
    result = python_parser.parse(sample_python_code)
    by_name = {s.name: s for s in result.symbols}

    assert by_name["_hidden"].visibility == Visibility.PRIVATE
    assert by_name["_cache"].visibility == Visibility.PRIVATE
    assert by_name["Loader"].visibility == Visibility.PUBLIC


def test_python_parser_variables(python_parser, sample_python_code):
    result = python_parser.parse(sample_python_code)
    variables = [s.name for s in result.symbols if s.kind == SymbolKind.VARIABLE]

    assert "MAX_SIZE" in variables
    assert "_cache" in variables
    assert "data" in variables


def test_comparison_is_not_assignment(python_parser):
    result = python_parser.parse("if x == 1:\n    pass")

    assert [s for s in result.symbols if s.kind == SymbolKind.VARIABLE] == []


def test_python_parser_imports(python_parser, sample_python_code):
    result = python_parser.parse(sample_python_code)

    imports = [s.name for s in result.symbols if s.kind == SymbolKind.IMPORT]
    assert imports == ["os", "json"]

    module_deps = [d.target_name for d in result.dependencies if d.kind == DependencyKind.IMPORTS]
    assert module_deps == ["os", "json"]

    from_deps = [d for d in result.dependencies if d.kind == DependencyKind.IMPORTS_FROM]
    assert [d.target_name for d in from_deps] == ["pathlib"]


def test_python_parser_calls(python_parser, sample_python_code):
    result = python_parser.parse(sample_python_code)
    calls = [d.target_name for d in result.dependencies if d.kind == DependencyKind.CALLS]

    # Lines containing "=" are skipped, so read() is not reported
    assert "read" not in calls
    assert "print" in calls
    assert "Loader" in calls
    # def lines are never calls
    assert "load" not in calls


def test_python_parser_line_count(python_parser):
    result = python_parser.parse("a = 1\nb = 2\n")

    assert result.metadata.line_count == 3
    assert result.metadata.symbol_count == 2
