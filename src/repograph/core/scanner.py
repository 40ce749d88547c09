"""Repository scanning: discover files, run extractors, assemble the graph."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from ..config.settings import RepoGraphSettings
from ..parsers.registry import ParserRegistry, get_language_from_file
from .exceptions import ScanError
from .file_discovery import FileDiscovery
from .graph import GraphGenerator
from .monorepo import detect_monorepo

ROOT_PACKAGE = "."


def _package_dirs(root: Path, files: list[Path]) -> dict[str, Path]:
    """Package id -> directory.

    Workspace packages when a monorepo is detected (plus the root for files
    outside every workspace), otherwise one package per directory that
    directly holds source files.
    """
    monorepo = detect_monorepo(root)
    if monorepo is not None and monorepo.packages:
        packages = {
            pkg.path.relative_to(root).as_posix(): pkg.path for pkg in monorepo.packages
        }
        packages.setdefault(ROOT_PACKAGE, root)
        return packages

    packages = {}
    for file_path in files:
        directory = file_path.parent
        packages.setdefault(directory.relative_to(root).as_posix(), directory)
    return packages


def _owning_package(file_path: Path, packages: dict[str, Path]) -> str:
    """The deepest package directory containing *file_path*."""
    best, best_depth = ROOT_PACKAGE, -1
    for package_id, directory in packages.items():
        if file_path.is_relative_to(directory) and len(directory.parts) > best_depth:
            best, best_depth = package_id, len(directory.parts)
    return best


def scan_repository(
    root: Path,
    settings: RepoGraphSettings | None = None,
    registry: ParserRegistry | None = None,
) -> GraphGenerator:
    """Build a graph for every supported source file under *root*.

    Unreadable and oversized files are logged and skipped; the scan itself
    only fails when *root* is not a directory.

    Args:
        root: Repository root directory
        settings: Scan configuration (defaults when omitted)
        registry: Extractor registry (a fresh one honouring settings when omitted)

    Returns:
        GraphGenerator holding the assembled graph

    Raises:
        ScanError: If root does not exist or is not a directory
    """
    root = root.resolve()
    if not root.is_dir():
        raise ScanError(f"Not a directory: {root}", context={"root": str(root)})

    settings = settings or RepoGraphSettings()
    registry = registry or ParserRegistry(use_tree_sitter=settings.parse.use_tree_sitter)
    start = time.perf_counter()

    discovery = FileDiscovery(
        root,
        extensions=settings.parse.extensions,
        ignore_patterns=set(settings.parse.ignore_patterns),
        max_file_size=settings.parse.max_file_size,
        follow_symlinks=settings.parse.follow_symlinks,
    )
    files = discovery.find_files()
    skipped = len(discovery.skipped)

    generator = GraphGenerator()
    repository_id = f"repo:{root.name}"
    generator.add_repository(repository_id, root.name, str(root))

    packages = _package_dirs(root, files)
    added_packages: set[str] = set()
    parsed = 0

    for file_path in files:
        relative = file_path.relative_to(root).as_posix()
        try:
            code = file_path.read_text(encoding="utf-8")
            mtime = file_path.stat().st_mtime
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable file {relative}: {e}")
            skipped += 1
            continue

        package_id = _owning_package(file_path, packages)
        if package_id not in added_packages:
            package_dir = packages[package_id]
            generator.add_package(
                f"pkg:{package_id}",
                package_dir.name if package_id != ROOT_PACKAGE else root.name,
                str(package_dir),
                repository_id,
            )
            added_packages.add(package_id)

        result = registry.parse(code, relative, get_language_from_file(file_path))
        logger.debug(
            f"Parsed {relative}: {result.metadata.symbol_count} symbols, "
            f"{result.metadata.dependency_count} dependencies in "
            f"{result.metadata.parse_time:.2f}ms"
        )
        parsed += 1
        generator.add_file(
            relative,
            file_path.name,
            relative,
            f"pkg:{package_id}",
            result,
            last_modified=datetime.fromtimestamp(mtime, tz=timezone.utc),
        )

    meta = generator.graph.metadata
    logger.info(
        f"Scanned {root.name}: {parsed} files, "
        f"{meta.node_count} nodes, {meta.edge_count} edges, {skipped} skipped "
        f"in {time.perf_counter() - start:.2f}s"
    )
    return generator
