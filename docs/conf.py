"""Sphinx configuration for the lineup API reference."""

from __future__ import annotations

import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from lineup import __version__  # noqa: E402

project = "Lineup Formations"
author = "Richard Owen"
copyright = f"{datetime.now():%Y}, {author}"
version = release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
    "numpydoc",
]

autosummary_generate = True
autodoc_mock_imports = ["pygame"]
numpydoc_show_class_members = False
intersphinx_mapping = {"python": ("https://docs.python.org/3", None)}

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build"]

html_theme = "sphinx_rtd_theme"
html_title = f"Lineup {release}"
