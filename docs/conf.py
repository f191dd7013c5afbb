# Configuration file for the Sphinx documentation builder.
#
# Full list of options:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

project = "Club Portal"
copyright = "2025, Club Portal contributors"
author = "Club Portal contributors"

# The full version, including alpha/beta/rc tags
release = "1.0.0"


# -- General configuration ---------------------------------------------------

extensions = ["myst_parser"]

templates_path = []

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# Design notes and the api description are written in markdown
source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}


# -- Options for HTML output -------------------------------------------------

# Read the Docs Theme: https://sphinx-rtd-theme.readthedocs.io/en/latest/
html_theme = "sphinx_rtd_theme"

html_static_path = []

myst_heading_anchors = 3
