"""
Jabuti Language Server Protocol implementation.

Provides IDE features for the Jabuti DSL:
- Completion
- Hover documentation
- Go-to-definition
- Document symbols
- Formatting
"""

from .server import start_server

__all__ = ["start_server"]
