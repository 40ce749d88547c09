"""Tests for workspace detection."""

from pathlib import Path

import orjson
import pytest

from repograph.core.monorepo import (
    detect_monorepo,
    detect_package_manager,
    expand_workspace_patterns,
)


def _package(directory: Path, name: str, **extra) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_bytes(orjson.dumps({"name": name, **extra}))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    _package(tmp_path, "root", private=True, workspaces=["packages/*"])
    _package(tmp_path / "packages" / "core", "@demo/core", version="1.2.0")
    _package(
        tmp_path / "packages" / "web",
        "@demo/web",
        dependencies={"@demo/core": "^1.2.0", "react": "^18.0.0"},
    )
    # Directory without package.json is not a workspace package
    (tmp_path / "packages" / "scratch").mkdir()
    return tmp_path


class TestDetectMonorepo:
    def test_plain_repository(self, tmp_path):
        _package(tmp_path, "single")

        assert detect_monorepo(tmp_path) is None

    def test_no_package_json(self, tmp_path):
        assert detect_monorepo(tmp_path) is None

    def test_npm_workspaces(self, workspace):
        config = detect_monorepo(workspace)

        assert config is not None
        assert config.type == "npm"
        assert config.workspace_patterns == ["packages/*"]
        assert sorted(p.name for p in config.packages) == ["@demo/core", "@demo/web"]
        assert config.root_package.name == "root"
        assert config.root_package.private is True

    def test_yarn_workspaces_object_form(self, tmp_path):
        _package(tmp_path, "root", workspaces={"packages": ["libs/*"]})
        _package(tmp_path / "libs" / "a", "a")
        (tmp_path / "yarn.lock").write_text("")

        config = detect_monorepo(tmp_path)

        assert config.type == "yarn"
        assert config.package_manager == "yarn"
        assert [p.name for p in config.packages] == ["a"]

    def test_pnpm(self, tmp_path):
        (tmp_path / "pnpm-workspace.yaml").write_text("packages:\n  - 'apps/*'\n")
        _package(tmp_path / "apps" / "site", "site")

        config = detect_monorepo(tmp_path)

        assert config.type == "pnpm"
        assert config.root_package is None
        assert [p.name for p in config.packages] == ["site"]

    def test_lerna_default_patterns(self, tmp_path):
        (tmp_path / "lerna.json").write_text("{}")
        _package(tmp_path / "packages" / "tool", "tool")

        config = detect_monorepo(tmp_path)

        assert config.type == "lerna"
        assert config.workspace_patterns == ["packages/*"]
        assert [p.name for p in config.packages] == ["tool"]

    def test_internal_dependencies(self, workspace):
        config = detect_monorepo(workspace)

        assert config.internal_dependencies() == {
            "@demo/core": set(),
            "@demo/web": {"@demo/core"},
        }


class TestHelpers:
    def test_expand_with_exclusion(self, workspace):
        paths = expand_workspace_patterns(workspace, ["packages/*", "!packages/web"])

        assert paths == [workspace / "packages" / "core"]

    @pytest.mark.parametrize(
        "lockfile,expected",
        [
            ("pnpm-lock.yaml", "pnpm"),
            ("yarn.lock", "yarn"),
            ("package-lock.json", "npm"),
            (None, "unknown"),
        ],
    )
    def test_detect_package_manager(self, tmp_path, lockfile, expected):
        if lockfile:
            (tmp_path / lockfile).write_text("")

        assert detect_package_manager(tmp_path) == expected

    @pytest.mark.parametrize(
        "pattern",
        ["", "/abs/*", "../outside/*", "!", "!/abs/*", "packages/../../*"],
    )
    def test_invalid_patterns_are_skipped(self, workspace, pattern):
        paths = expand_workspace_patterns(workspace, [pattern, "packages/*"])

        assert paths == [workspace / "packages" / "core", workspace / "packages" / "web"]

    def test_only_invalid_patterns(self, tmp_path):
        _package(tmp_path, "root", workspaces=["", "/abs/*"])

        config = detect_monorepo(tmp_path)

        assert config is not None
        assert config.packages == []
