"""
Jabuti - editor tooling for the Jabuti smart-contract DSL.

Provides completion, hover, go-to-definition, an outline and a formatter,
served over LSP or used from the ``jabuti`` command line.
"""

__version__ = "0.3.0"
