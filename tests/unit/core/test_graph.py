"""Tests for the graph assembler and its serialization."""

from __future__ import annotations

from datetime import datetime, timezone

import orjson
import pytest

from repograph.core.exceptions import (
    GraphDeserializationError,
    GraphError,
    NodeNotFoundError,
)
from repograph.core.graph import GraphGenerator, calculate_symbol_complexity
from repograph.core.models import (
    Dependency,
    DependencyKind,
    ParseMetadata,
    ParserResult,
    Symbol,
    SymbolKind,
)
from repograph.parsers.go import GoParser


def _symbol(name: str, kind: SymbolKind = SymbolKind.FUNCTION, start: int = 1, end: int = 1):
    return Symbol(name, kind, start, end, 1, 10)


def _result(symbols=(), dependencies=(), language="python", size=100, parse_time=1.5):
    return ParserResult(
        symbols=list(symbols),
        dependencies=list(dependencies),
        metadata=ParseMetadata(
            language=language,
            file_size=size,
            parse_time=parse_time,
            symbol_count=len(symbols),
            dependency_count=len(dependencies),
            line_count=10,
        ),
    )


def _dep(target: str, kind: DependencyKind = DependencyKind.CALLS) -> Dependency:
    return Dependency("current_file", target, kind)


@pytest.fixture
def generator():
    gen = GraphGenerator()
    gen.add_repository("repo", "demo", "/src/demo")
    gen.add_package("pkg", "core", "/src/demo/core", "repo")
    return gen


def _assert_counts(gen: GraphGenerator) -> None:
    meta = gen.graph.metadata
    assert meta.node_count == len(gen.graph.nodes)
    assert meta.edge_count == len(gen.graph.edges)


class TestSymbolComplexity:
    @pytest.mark.parametrize(
        "kind,expected",
        [
            (SymbolKind.FUNCTION, 2),
            (SymbolKind.METHOD, 2),
            (SymbolKind.CLASS, 3),
            (SymbolKind.INTERFACE, 3),
            (SymbolKind.STRUCT, 2),
            (SymbolKind.TRAIT, 2),
            (SymbolKind.VARIABLE, 1),
            (SymbolKind.IMPORT, 1),
        ],
    )
    def test_base_by_kind(self, kind, expected):
        assert calculate_symbol_complexity(_symbol("x", kind)) == expected

    @pytest.mark.parametrize(
        "lines,bonus",
        [(50, 0), (51, 2), (100, 2), (101, 5), (200, 5), (201, 10)],
    )
    def test_size_bonuses_are_cumulative(self, lines, bonus):
        symbol = _symbol("f", SymbolKind.FUNCTION, start=1, end=lines)
        assert calculate_symbol_complexity(symbol) == 2 + bonus


class TestGraphAssembly:
    def test_hierarchy(self, generator):
        generator.add_file("core/a.py", "a.py", "core/a.py", "pkg", _result([_symbol("run")]))

        assert generator.get_node("pkg").parent == "repo"
        assert generator.get_node("repo").children == ["pkg"]
        assert generator.get_node("pkg").children == ["core/a.py"]
        assert generator.get_node("core/a.py:run").parent == "core/a.py"
        assert [n.id for n in generator.get_parents("core/a.py:run")] == ["core/a.py"]
        assert generator.get_parents("repo") == []
        _assert_counts(generator)

    def test_file_metadata_and_totals(self, generator):
        modified = datetime(2024, 1, 1, tzinfo=timezone.utc)
        generator.add_file(
            "a.py", "a.py", "a.py", "pkg", _result(size=100, parse_time=1.5),
            last_modified=modified,
        )
        generator.add_file(
            "b.go", "b.go", "b.go", "pkg", _result(language="go", size=50, parse_time=0.5)
        )

        node = generator.get_node("a.py")
        assert node.type == "file"
        assert node.metadata.language == "python"
        assert node.metadata.size == 100
        assert node.metadata.parse_time == 1.5
        assert node.metadata.last_modified == modified

        meta = generator.graph.metadata
        assert meta.total_size == 150
        assert meta.total_parse_time == pytest.approx(2.0)
        assert meta.languages == {"python", "go"}

    def test_symbol_nodes(self, generator):
        generator.add_file(
            "a.py", "a.py", "a.py", "pkg",
            _result([_symbol("Widget", SymbolKind.CLASS, 1, 60)]),
        )
        node = generator.get_node("a.py:Widget")

        assert node.type == "class"
        assert node.metadata.line_count == 60
        assert node.metadata.complexity == 5
        assert node.children == []

    def test_edges(self, generator):
        generator.add_file("a.py", "a.py", "a.py", "pkg", _result(dependencies=[_dep("os")]))
        edge = generator.get_edge("a.py:current_file:os")

        assert edge.source == "a.py"
        assert edge.target == "os"
        assert edge.type == "calls"
        assert edge.weight == 1
        assert generator.get_dependencies("a.py") == [edge]
        assert generator.get_dependents("os") == [edge]
        assert generator.get_node("os") is None

    def test_missing_parent_raises(self, generator):
        with pytest.raises(NodeNotFoundError):
            generator.add_package("p2", "p2", "/p2", "no-such-repo")
        with pytest.raises(NodeNotFoundError):
            generator.add_file("f", "f", "f", "repo", _result())

    def test_duplicate_container_id_raises(self, generator):
        with pytest.raises(GraphError):
            generator.add_package("pkg", "again", "/again", "repo")
        _assert_counts(generator)

    def test_symbol_id_collision_replaces_without_duplicating(self, generator):
        symbols = [_symbol("dup", SymbolKind.FUNCTION), _symbol("dup", SymbolKind.CLASS)]
        generator.add_file("a.py", "a.py", "a.py", "pkg", _result(symbols))

        assert generator.get_node("a.py").children == ["a.py:dup"]
        assert generator.get_node("a.py:dup").type == "class"
        _assert_counts(generator)

    def test_edge_id_collision_increments_weight(self, generator):
        generator.add_file(
            "a.py", "a.py", "a.py", "pkg", _result(dependencies=[_dep("log"), _dep("log")])
        )

        assert len(generator.graph.edges) == 1
        assert generator.get_edge("a.py:current_file:log").weight == 2
        _assert_counts(generator)

    def test_counts_invariant_with_real_parser(self, generator):
        code = "func Add(a int, b int) int { return a + b }\nfunc main() {\n    Add(1, 2)\n    Add(3, 4)\n}\n"
        generator.add_file("main.go", "main.go", "main.go", "pkg", GoParser().parse(code))

        _assert_counts(generator)
        assert generator.get_node("main.go:Add") is not None


class TestSerialization:
    @pytest.fixture
    def populated(self, generator):
        generator.add_file(
            "a.py", "a.py", "a.py", "pkg",
            _result([_symbol("f"), _symbol("C", SymbolKind.CLASS)], [_dep("os")]),
            last_modified=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        return generator

    def test_wire_shape(self, populated):
        data = orjson.loads(populated.serialize())

        assert data["nodes"][0] == [
            "repo",
            {"id": "repo", "type": "repository", "name": "demo", "metadata": {}, "children": ["pkg"], "path": "/src/demo"},
        ]
        assert data["edges"][0][0] == "a.py:current_file:os"
        assert data["metadata"]["nodeCount"] == 5
        assert data["metadata"]["edgeCount"] == 1
        assert data["metadata"]["languages"] == ["python"]

        file_meta = dict(data["nodes"])["a.py"]["metadata"]
        assert file_meta["symbolCount"] == 2
        assert file_meta["parseTime"] == 1.5
        assert file_meta["lastModified"].startswith("2024-05-01T12:00:00")

    def test_round_trip(self, populated):
        restored = GraphGenerator()
        restored.deserialize(populated.serialize())

        assert restored.graph == populated.graph
        assert list(restored.graph.nodes) == list(populated.graph.nodes)
        _assert_counts(restored)

    def test_round_trip_from_dict_and_bytes(self, populated):
        from_dict = GraphGenerator()
        from_dict.deserialize(populated.to_dict())
        from_bytes = GraphGenerator()
        from_bytes.deserialize(populated.serialize().encode())

        assert from_dict.graph == populated.graph
        assert from_bytes.graph == populated.graph

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            '{"nodes": [], "edges": []}',
            '{"nodes": [["a"]], "edges": [], "metadata": {"nodeCount": 1, "edgeCount": 0}}',
            '{"nodes": [], "edges": [], "metadata": {"nodeCount": 3, "edgeCount": 0}}',
            '{"nodes": [["a", {"id": "b", "type": "file", "name": "b"}]], "edges": [], '
            '"metadata": {"nodeCount": 1, "edgeCount": 0}}',
        ],
    )
    def test_failed_deserialize_leaves_graph_untouched(self, populated, payload):
        before = populated.serialize()

        with pytest.raises(GraphDeserializationError):
            populated.deserialize(payload)

        assert populated.serialize() == before

    def test_save_and_load(self, populated, tmp_path):
        path = tmp_path / "graph.json"
        populated.save(path)

        loaded = GraphGenerator.load(path)
        assert loaded.graph == populated.graph

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(GraphDeserializationError):
            GraphGenerator.load(tmp_path / "missing.json")
