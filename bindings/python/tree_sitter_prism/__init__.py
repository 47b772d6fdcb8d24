"""PRISM grammar for tree-sitter"""

from ._binding import LIBRARY_ENV, GrammarLoadError, language, library_path
from .build import GrammarBuildError

__all__ = [
    "LIBRARY_ENV",
    "GrammarBuildError",
    "GrammarLoadError",
    "language",
    "library_path",
]
