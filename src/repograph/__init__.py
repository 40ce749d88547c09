"""repograph - multi-language symbol extraction and code graph metrics."""

__version__ = "0.3.1"
__author__ = "Robert Matsuoka"
__email__ = "bobmatnyc@gmail.com"

from .core.exceptions import RepoGraphError

__all__ = ["RepoGraphError", "__version__"]
