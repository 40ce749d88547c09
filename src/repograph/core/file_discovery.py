"""Source file discovery for repository scans."""

from __future__ import annotations

import fnmatch
import os
import re
from pathlib import Path

from loguru import logger

from ..config.defaults import DEFAULT_IGNORE_PATTERNS, DEFAULT_MAX_FILE_SIZE


class FileDiscovery:
    """Finds source files under a root, honouring ignore patterns and a size budget.

    Ignore patterns are fnmatch globs tested against every path component, so
    ``node_modules`` prunes the directory wherever it appears and ``*.min.js``
    skips matching files.
    """

    def __init__(
        self,
        root: Path,
        extensions: set[str] | list[str],
        ignore_patterns: set[str] | None = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        follow_symlinks: bool = False,
    ) -> None:
        """Initialize file discovery.

        Args:
            root: Directory to scan
            extensions: File extensions to include (e.g., {'.py', '.go'})
            ignore_patterns: Additional patterns to ignore (merged with defaults)
            max_file_size: Files larger than this many bytes are skipped
            follow_symlinks: Descend into symlinked directories
        """
        self.root = root
        self.extensions = {ext.lower() for ext in extensions}
        self.max_file_size = max_file_size
        self.follow_symlinks = follow_symlinks
        self._ignore_patterns = set(DEFAULT_IGNORE_PATTERNS) | (ignore_patterns or set())

        # fnmatch.translate once instead of fnmatch.fnmatch per path component
        self._compiled_patterns: list[re.Pattern[str]] = []
        for pattern in sorted(self._ignore_patterns):
            try:
                self._compiled_patterns.append(re.compile(fnmatch.translate(pattern)))
            except re.error as e:
                logger.warning(f"Failed to compile pattern '{pattern}': {e}")

        self.skipped: list[tuple[Path, str]] = []

    def is_ignored(self, name: str) -> bool:
        """True if a single path component matches any ignore pattern."""
        return any(p.match(name) for p in self._compiled_patterns)

    def should_include(self, file_path: Path) -> bool:
        """Check extension, ignore patterns and size budget for one file."""
        if file_path.suffix.lower() not in self.extensions:
            return False
        if self.is_ignored(file_path.name):
            return False
        try:
            size = file_path.stat().st_size
        except OSError as e:
            logger.warning(f"Cannot stat {file_path}: {e}")
            self.skipped.append((file_path, "unreadable"))
            return False
        if size > self.max_file_size:
            logger.warning(
                f"Skipping {file_path}: {size} bytes exceeds limit of {self.max_file_size}"
            )
            self.skipped.append((file_path, "too_large"))
            return False
        return True

    def find_files(self) -> list[Path]:
        """Walk the root and return matching files, sorted."""
        found = []
        dir_count = 0

        for dirpath, dirs, files in os.walk(self.root, followlinks=self.follow_symlinks):
            dir_count += 1
            # Prune in place so os.walk never enters ignored directories
            dirs[:] = sorted(d for d in dirs if not self.is_ignored(d))

            root_path = Path(dirpath)
            for filename in files:
                file_path = root_path / filename
                if self.should_include(file_path):
                    found.append(file_path)

        logger.debug(f"File scan complete: {dir_count} directories, {len(found)} source files")
        return sorted(found)
