"""End-to-end tests for CLI commands."""

import sys
from pathlib import Path

import orjson
import pytest
from loguru import logger
from typer.testing import CliRunner

from repograph import __version__
from repograph.cli.main import app


@pytest.fixture
def cli_runner():
    """Create CLI runner for testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI callback rebinds loguru to the runner's stderr; undo that afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def temp_project_dir(tmp_path: Path) -> Path:
    """Small mixed-language repository."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.py").write_text(
        "import os\n\n"
        "class App:\n"
        "    def run(self, argv):\n"
        "        main(argv)\n\n"
        "def main(argv):\n"
        "    print(argv)\n"
    )
    (root / "src" / "server.go").write_text(
        'package main\n\nimport "fmt"\n\nfunc Serve(port int) {\n    fmt.Println(port)\n}\n'
    )
    return root


@pytest.fixture
def graph_file(cli_runner, temp_project_dir, tmp_path) -> Path:
    output = tmp_path / "graph.json"
    result = cli_runner.invoke(app, ["graph", str(temp_project_dir), "--output", str(output)])
    assert result.exit_code == 0, result.output
    return output


class TestParseCommand:
    def test_table_output(self, cli_runner, temp_project_dir):
        result = cli_runner.invoke(app, ["parse", str(temp_project_dir / "src" / "app.py")])

        assert result.exit_code == 0
        assert "Symbols" in result.output
        assert "App" in result.output

    def test_json_output(self, cli_runner, temp_project_dir):
        result = cli_runner.invoke(
            app, ["parse", str(temp_project_dir / "src" / "server.go"), "--json"]
        )

        assert result.exit_code == 0
        data = orjson.loads(result.stdout)
        assert data["metadata"]["language"] == "go"
        assert "Serve" in [s["name"] for s in data["symbols"]]
        assert "fmt" in [d["targetName"] for d in data["dependencies"]]

    def test_language_override(self, cli_runner, tmp_path):
        script = tmp_path / "script.txt"
        script.write_text("def hello():\n    pass\n")

        result = cli_runner.invoke(app, ["parse", str(script), "-l", "python", "--json"])

        assert result.exit_code == 0
        assert orjson.loads(result.stdout)["symbols"][0]["name"] == "hello"

    def test_unsupported_language(self, cli_runner, temp_project_dir):
        result = cli_runner.invoke(
            app, ["parse", str(temp_project_dir / "src" / "app.py"), "--language", "cobol"]
        )

        assert result.exit_code == 1
        assert "Unsupported language" in result.output

    def test_missing_file(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["parse", str(tmp_path / "nope.py")])

        assert result.exit_code != 0


class TestGraphCommand:
    def test_writes_graph(self, cli_runner, graph_file):
        data = orjson.loads(graph_file.read_bytes())

        node_ids = [node_id for node_id, _ in data["nodes"]]
        assert "repo:project" in node_ids
        assert "src/app.py:App" in node_ids
        assert "src/server.go:Serve" in node_ids
        assert data["metadata"]["nodeCount"] == len(data["nodes"])
        assert data["metadata"]["languages"] == ["go", "python"]

    def test_summary(self, cli_runner, temp_project_dir, tmp_path):
        output = tmp_path / "out.json"
        result = cli_runner.invoke(app, ["graph", str(temp_project_dir), "-o", str(output)])

        assert result.exit_code == 0
        assert "Graph Summary" in result.output
        assert output.exists()

    def test_config_file(self, cli_runner, temp_project_dir, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("parse:\n  extensions: [.go]\n")
        output = tmp_path / "go-only.json"

        result = cli_runner.invoke(
            app, ["graph", str(temp_project_dir), "-o", str(output), "-c", str(config)]
        )

        assert result.exit_code == 0
        node_ids = [node_id for node_id, _ in orjson.loads(output.read_bytes())["nodes"]]
        assert "src/app.py" not in node_ids
        assert "src/server.go" in node_ids

    def test_invalid_config(self, cli_runner, temp_project_dir, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("parse:\n  bogus: 1\n")

        result = cli_runner.invoke(
            app, ["graph", str(temp_project_dir), "-o", str(tmp_path / "g.json"), "-c", str(config)]
        )

        assert result.exit_code == 1


class TestMetricsCommand:
    def test_tables(self, cli_runner, graph_file):
        result = cli_runner.invoke(app, ["metrics", str(graph_file), "--top", "3"])

        assert result.exit_code == 0
        assert "centrality" in result.output
        assert "clustering" in result.output

    def test_json(self, cli_runner, graph_file):
        result = cli_runner.invoke(app, ["metrics", str(graph_file), "--json"])

        assert result.exit_code == 0
        data = orjson.loads(result.stdout)
        assert set(data) == {"centrality", "clustering", "complexity"}
        assert data["centrality"]["src/app.py"] > 0

    def test_corrupt_graph(self, cli_runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        result = cli_runner.invoke(app, ["metrics", str(bad)])

        assert result.exit_code == 1


class TestCytoscapeCommand:
    def test_stdout(self, cli_runner, graph_file):
        result = cli_runner.invoke(app, ["cytoscape", str(graph_file)])

        assert result.exit_code == 0
        document = orjson.loads(result.stdout)
        assert document["layout"]["name"] == "dagre"
        assert len(document["style"]) == 7
        assert any(e["data"]["id"] == "repo:project" for e in document["elements"])

    def test_output_file_without_style(self, cli_runner, graph_file, tmp_path):
        output = tmp_path / "cy.json"
        result = cli_runner.invoke(
            app, ["cytoscape", str(graph_file), "-o", str(output), "--no-style"]
        )

        assert result.exit_code == 0
        assert set(orjson.loads(output.read_bytes())) == {"elements"}

    def test_unwritable_output(self, cli_runner, graph_file, tmp_path):
        output = tmp_path / "missing-dir" / "cy.json"
        result = cli_runner.invoke(app, ["cytoscape", str(graph_file), "-o", str(output)])

        assert result.exit_code == 1
        assert "Cannot write" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_invalid_layout(self, cli_runner, graph_file):
        result = cli_runner.invoke(app, ["cytoscape", str(graph_file), "--layout", "spiral"])

        assert result.exit_code == 1


class TestInfoCommands:
    def test_languages(self, cli_runner):
        result = cli_runner.invoke(app, ["languages"])

        assert result.exit_code == 0
        for language in ("python", "go", "rust", "java"):
            assert language in result.output

    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self, cli_runner):
        result = cli_runner.invoke(app, [])

        assert "Usage" in result.output
