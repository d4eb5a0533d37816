"""
Entry point for the Jabuti LSP server.

Usage:
    python -m jabuti.lsp
"""

from .server import start_server

if __name__ == "__main__":
    start_server()
