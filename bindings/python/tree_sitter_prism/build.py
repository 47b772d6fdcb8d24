"""Generate and compile the prism grammar with the tree-sitter CLI.

Run from a source checkout::

    python -m tree_sitter_prism.build

This writes the compiled grammar into the package directory, where
``tree_sitter_prism.language()`` finds it.
"""

import logging
import shutil
import subprocess
import sys
from pathlib import Path

from ._binding import (
    GrammarLoadError,
    _library_names,
    _load,
    grammar_root,
    package_dir,
)

logger = logging.getLogger(__name__)

CLI = "tree-sitter"


class GrammarBuildError(GrammarLoadError):
    """The tree-sitter CLI could not produce the grammar library."""


def cli_available():
    return shutil.which(CLI) is not None


def build(output=None, root=None):
    """Generate and compile the grammar, returning the library path."""
    root = Path(root) if root is not None else grammar_root()
    if root is None:
        raise GrammarBuildError("grammar.js not found; build from a source checkout")
    exe = shutil.which(CLI)
    if exe is None:
        raise GrammarBuildError(f"`{CLI}` CLI not found on PATH")
    output = Path(output) if output is not None else package_dir() / _library_names()[0]

    for args in (["generate"], ["build", "-o", str(output)]):
        logger.info("Running %s %s in %s", CLI, " ".join(args), root)
        try:
            subprocess.run(
                [exe, *args], cwd=root, check=True, capture_output=True, text=True
            )
        except subprocess.CalledProcessError as e:
            raise GrammarBuildError(
                f"`{CLI} {args[0]}` failed: {(e.stderr or '').strip()}"
            ) from e

    _load.cache_clear()
    return output


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        path = build()
    except GrammarBuildError as e:
        logger.error("%s", e)
        return 1
    logger.info("Wrote %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
