# Configuration file for the Sphinx documentation builder.

# -- Project information

project = 'Noisy Simulator'
copyright = '2026, Noisy Simulator developers'
author = 'Noisy Simulator developers'

release = '0.1'
version = '0.1.0'

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join('../../src')))

# -- General configuration

extensions = [
    'sphinx.ext.napoleon',
    'sphinx.ext.duration',
    'sphinx.ext.doctest',
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.intersphinx',
    'sphinx.ext.viewcode',
]

intersphinx_mapping = {
    'python': ('https://docs.python.org/3/', None),
    'numpy': ('https://numpy.org/doc/stable', None),
    'scipy': ('https://docs.scipy.org/doc/scipy', None),
    'qiskit': ('https://docs.quantum.ibm.com/api/qiskit', None),
}

autosummary_generate = True
autodoc_member_order = 'bysource'
autodoc_typehints = "both"
autodoc_typehints_format = "short"
napoleon_include_private_with_doc = True
napoleon_google_docstring = True

intersphinx_disabled_domains = ['std']

templates_path = ['_templates']
exclude_patterns = []

# -- Options for HTML output

html_theme = 'sphinx_rtd_theme'

# -- Options for EPUB output
epub_show_urls = 'footnote'
