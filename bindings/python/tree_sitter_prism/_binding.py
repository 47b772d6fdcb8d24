"""Load the compiled prism grammar and wrap it for the tree-sitter runtime.

The grammar is built by the tree-sitter CLI (``tree-sitter build``) into a
shared library exporting ``tree_sitter_prism``. That entry point returns a
``TSLanguage *`` which ``tree_sitter.Language`` accepts once it is wrapped in
a capsule named ``tree_sitter.Language``.
"""

import ctypes
import logging
import os
import sys
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

LIBRARY_ENV = "TREE_SITTER_PRISM_LIBRARY"
SYMBOL = "tree_sitter_prism"
CAPSULE_NAME = b"tree_sitter.Language"

_capsule_new = ctypes.pythonapi.PyCapsule_New
_capsule_new.restype = ctypes.py_object
_capsule_new.argtypes = (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_void_p)


class GrammarLoadError(RuntimeError):
    """The prism grammar library could not be loaded."""


def _library_names():
    if sys.platform == "win32":
        return ("prism.dll", "tree-sitter-prism.dll")
    if sys.platform == "darwin":
        return ("prism.dylib", "libtree-sitter-prism.dylib", "prism.so")
    return ("prism.so", "libtree-sitter-prism.so")


def package_dir():
    return Path(__file__).resolve().parent


def grammar_root():
    """Return the checkout holding ``grammar.js``, or ``None`` when installed."""
    parents = package_dir().parents
    if len(parents) < 3:
        return None
    root = parents[2]
    return root if (root / "grammar.js").is_file() else None


def _candidates():
    override = os.environ.get(LIBRARY_ENV)
    if override:
        return [Path(override)]
    dirs = [package_dir()]
    root = grammar_root()
    # `tree-sitter build` writes into the grammar root by default.
    if root is not None:
        dirs.append(root)
    return [d / name for d in dirs for name in _library_names()]


def library_path():
    """Return the grammar library ``language()`` would open, or ``None``."""
    for path in _candidates():
        if path.is_file():
            return path
    return None


@lru_cache(maxsize=None)
def _load():
    path = library_path()
    if path is None:
        searched = ", ".join(str(p) for p in _candidates())
        raise GrammarLoadError(
            f"prism grammar library not found (searched: {searched}); "
            f"run `python -m tree_sitter_prism.build` or set {LIBRARY_ENV}"
        )

    logger.debug("Loading prism grammar from %s", path)
    try:
        lib = ctypes.CDLL(str(path))
    except OSError as e:
        raise GrammarLoadError(f"cannot open {path}: {e}") from e

    try:
        entry = getattr(lib, SYMBOL)
    except AttributeError as e:
        raise GrammarLoadError(f"{path} does not export {SYMBOL}") from e
    entry.restype = ctypes.c_void_p
    entry.argtypes = ()

    handle = entry()
    if not handle:
        raise GrammarLoadError("Error loading prism grammar")

    # lib is returned alongside the capsule so the library outlives the pointer.
    return lib, _capsule_new(handle, CAPSULE_NAME, None)


def language():
    """Return the tree-sitter language capsule for the prism grammar."""
    return _load()[1]
