"""Workspace (monorepo) detection for JavaScript-style repositories.

Recognises npm/yarn ``workspaces`` in ``package.json``, ``pnpm-workspace.yaml``
and ``lerna.json``.  Workspace globs are expanded against the filesystem;
each matching directory with a ``package.json`` becomes one package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

import orjson
import yaml
from loguru import logger

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


@dataclass
class PackageInfo:
    name: str
    version: str
    path: Path  # Directory containing package.json
    dependencies: dict[str, str] = field(default_factory=dict)
    private: bool = False


@dataclass
class MonorepoConfig:
    type: str  # npm, yarn, pnpm or lerna
    root_package: PackageInfo | None
    packages: list[PackageInfo]
    workspace_patterns: list[str]
    package_manager: str

    def internal_dependencies(self) -> dict[str, set[str]]:
        """Map each package name to the other workspace packages it depends on."""
        names = {pkg.name for pkg in self.packages}
        return {
            pkg.name: {dep for dep in pkg.dependencies if dep in names and dep != pkg.name}
            for pkg in self.packages
        }


def _read_package_json(directory: Path) -> dict[str, Any] | None:
    package_json = directory / "package.json"
    if not package_json.is_file():
        return None
    try:
        data = orjson.loads(package_json.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        logger.debug(f"Failed to parse {package_json}: {e}")
        return None
    return data if isinstance(data, dict) else None


def _package_info(directory: Path, data: dict[str, Any]) -> PackageInfo:
    deps: dict[str, str] = {}
    for section in DEPENDENCY_SECTIONS:
        value = data.get(section)
        if isinstance(value, dict):
            deps.update({str(k): str(v) for k, v in value.items()})
    return PackageInfo(
        name=str(data.get("name") or directory.name),
        version=str(data.get("version") or "0.0.0"),
        path=directory,
        dependencies=deps,
        private=bool(data.get("private", False)),
    )


def _workspace_patterns(data: dict[str, Any] | None) -> list[str]:
    if not data:
        return []
    workspaces = data.get("workspaces")
    # Yarn also allows {"packages": [...], "nohoist": [...]}
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if isinstance(workspaces, list):
        return [str(p) for p in workspaces]
    return []


def _pnpm_patterns(root: Path) -> list[str]:
    try:
        with open(root / "pnpm-workspace.yaml", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.debug(f"Failed to read pnpm-workspace.yaml: {e}")
        return []
    packages = data.get("packages") if isinstance(data, dict) else None
    return [str(p) for p in packages] if isinstance(packages, list) else []


def _lerna_patterns(root: Path) -> list[str]:
    try:
        data = orjson.loads((root / "lerna.json").read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        logger.debug(f"Failed to read lerna.json: {e}")
        data = {}
    packages = data.get("packages") if isinstance(data, dict) else None
    return [str(p) for p in packages] if isinstance(packages, list) else ["packages/*"]


def detect_package_manager(root: Path) -> str:
    """Package manager inferred from the lockfile present at *root*."""
    if (root / "pnpm-lock.yaml").exists():
        return "pnpm"
    if (root / "yarn.lock").exists():
        return "yarn"
    if (root / "package-lock.json").exists():
        return "npm"
    return "unknown"


def _usable_pattern(pattern: str) -> bool:
    """Workspace globs must be non-empty and stay inside the root."""
    path = PurePosixPath(pattern)
    return bool(pattern) and not path.is_absolute() and ".." not in path.parts


def _glob(root: Path, pattern: str) -> list[Path]:
    try:
        return sorted(root.glob(pattern))
    except (ValueError, NotImplementedError) as e:
        logger.warning(f"Ignoring invalid workspace pattern {pattern!r} in {root}: {e}")
        return []


def expand_workspace_patterns(root: Path, patterns: list[str]) -> list[Path]:
    """Directories under *root* matching workspace globs that hold a package.json.

    Empty, absolute and parent-relative (``..``) patterns are skipped with a
    warning.
    """
    includes, excludes = [], []
    for raw in patterns:
        negated = raw.startswith("!")
        pattern = (raw[1:] if negated else raw).strip().rstrip("/")
        if not _usable_pattern(pattern):
            logger.warning(f"Ignoring invalid workspace pattern {raw!r} in {root}")
            continue
        (excludes if negated else includes).append(pattern)

    found: dict[Path, None] = {}
    for pattern in includes:
        for match in _glob(root, pattern):
            if match.is_dir() and (match / "package.json").is_file():
                found[match] = None
    excluded = {match for pattern in excludes for match in _glob(root, pattern)}
    return [path for path in found if path not in excluded]


def detect_monorepo(root: Path) -> MonorepoConfig | None:
    """Detect a workspace layout at *root*, or return ``None`` for a plain repository."""
    root_data = _read_package_json(root)

    if (root / "lerna.json").exists():
        kind, patterns = "lerna", _lerna_patterns(root)
    elif (root / "pnpm-workspace.yaml").exists():
        kind, patterns = "pnpm", _pnpm_patterns(root)
    elif _workspace_patterns(root_data):
        patterns = _workspace_patterns(root_data)
        kind = "yarn" if (root / "yarn.lock").exists() else "npm"
    else:
        return None

    packages = []
    for directory in expand_workspace_patterns(root, patterns):
        data = _read_package_json(directory)
        if data is not None:
            packages.append(_package_info(directory, data))

    config = MonorepoConfig(
        type=kind,
        root_package=_package_info(root, root_data) if root_data else None,
        packages=packages,
        workspace_patterns=patterns,
        package_manager=detect_package_manager(root),
    )
    logger.info(f"Detected {kind} monorepo with {len(packages)} packages")
    return config
