"""Sphinx configuration for agg-lens documentation."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

_DOCS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _DOCS_DIR.parent
_SRC_DIR = _REPO_ROOT / "src"
_GENERATED_DIR = _DOCS_DIR / "_generated"
_EXTERNAL_MARKDOWN = ("README.md", "DESIGN.md")

sys.path.insert(0, str(_SRC_DIR))

project = "agg-lens"
author = "agg-lens contributors"
release = "0.1.0"

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
]

autosummary_generate = True
autodoc_typehints = "description"
autodoc_mock_imports = ["elasticsearch", "opensearchpy"]
napoleon_google_docstring = True
napoleon_numpy_docstring = False

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]
html_theme = "alabaster"
html_static_path = ["_static"]


def _copy_external_markdown() -> None:
    """Copy repository markdown files into Sphinx source tree."""
    _GENERATED_DIR.mkdir(parents=True, exist_ok=True)
    for name in _EXTERNAL_MARKDOWN:
        shutil.copy2(_REPO_ROOT / name, _GENERATED_DIR / name)


_copy_external_markdown()
