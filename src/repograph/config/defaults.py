"""Default configurations for repograph."""

# Language used when a file extension or language tag is not recognised
DEFAULT_LANGUAGE = "typescript"

# Language mappings for extractors
LANGUAGE_MAPPINGS: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".java": "java",
    ".go": "go",
    ".rs": "rust",
}

# Extensions the repository scanner picks up by default
DEFAULT_FILE_EXTENSIONS = list(LANGUAGE_MAPPINGS)

# Directories and files the repository scanner never descends into
DEFAULT_IGNORE_PATTERNS = [
    # Version control
    ".git",
    ".hg",
    ".svn",
    # Python caches and environments
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".tox",
    ".venv",
    "venv",
    # JavaScript/Node.js
    ".next",
    ".yarn",
    "bower_components",
    "coverage",
    "node_modules",
    # Build outputs
    "build",
    "dist",
    "target",
    "*.egg-info",
    "vendor",
    # IDEs and editors
    ".idea",
    ".vscode",
    # Minified bundles (one enormous line each)
    "*.min.js",
]

# Files larger than this (in bytes) are skipped by the scanner
DEFAULT_MAX_FILE_SIZE = 1024 * 1024  # 1 MiB

# Sequential embedding unless configured otherwise
DEFAULT_EMBEDDING_CONCURRENCY = 1

# Symbol complexity: base score per kind, then bonuses for long spans
BASE_COMPLEXITY: dict[str, int] = {
    "function": 2,
    "method": 2,
    "class": 3,
    "interface": 3,
    "struct": 2,
    "trait": 2,
}
DEFAULT_BASE_COMPLEXITY = 1
# (line span threshold, bonus); bonuses are cumulative
SIZE_COMPLEXITY_BONUSES: tuple[tuple[int, int], ...] = ((50, 2), (100, 3), (200, 5))

# Symbol kinds handed to the embedding collaborator
EMBEDDABLE_SYMBOL_KINDS = ("function", "class", "variable", "type")

# Configuration file looked up in the project root
CONFIG_FILENAME = ".repograph.yaml"
