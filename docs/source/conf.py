# pylint: disable=redefined-builtin,invalid-name
"""radixnum sphinx configuration."""

import os
from importlib.metadata import metadata

# -- Project information

_metadata = metadata("radixnum")

project = _metadata["Name"]
author = _metadata["Author-email"].split("<", 1)[0].strip()
copyright = f"2026, {author}"

version = _metadata["Version"]
if os.environ.get("READTHEDOCS", False):
    rtd_version = os.environ.get("READTHEDOCS_VERSION", "")
    if "." not in rtd_version and rtd_version.lower() != "stable":
        version = "dev"
release = version


# -- General configuration

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
    "numpydoc",
]

exclude_patterns = [
    "Thumbs.db",
    ".DS_Store",
]

default_role = "autolink"
add_function_parentheses = False

nitpicky = True
nitpick_ignore = [
    ("py:class", "ndarray"),
    ("py:class", "array_like"),
    ("py:class", "optional"),
    ("py:class", "module"),
    ("py:class", "callable"),
]

autosummary_generate = True
autodoc_typehints = "none"

numpydoc_show_class_members = False
numpydoc_xref_param_type = True
numpydoc_xref_ignore = {"of", "or", "optional", "scalar", "default"}
numpydoc_xref_aliases = {
    "ndarray": ":class:`numpy.ndarray`",
    "np.ndarray": ":class:`numpy.ndarray`",
}

intersphinx_mapping = {
    "numpy": ("https://numpy.org/doc/stable/", None),
    "python": ("https://docs.python.org/3/", None),
    "cupy": ("https://docs.cupy.dev/en/stable/", None),
}

# -- Options for HTML output

html_theme = "pydata_sphinx_theme"
html_title = f"{project} v{version} Manual"
html_last_updated_fmt = "%b %d, %Y"
html_copy_source = False
htmlhelp_basename = "radixnum"
