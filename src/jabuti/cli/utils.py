"""
Jabuti CLI Utilities.

Shared utility functions used across CLI modules.
"""

import platform
from pathlib import Path

import typer

from jabuti import __version__
from jabuti.core.errors import ConfigError
from jabuti.core.manifest import Settings, find_settings, load_settings


def get_version() -> str:
    """Get Jabuti version from package metadata."""
    try:
        from importlib.metadata import version

        return version("jabuti-lsp")
    except Exception:
        return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        # Check LSP server availability
        lsp_available = False
        try:
            # Silence pygls feature registration before importing the server
            import logging

            logging.getLogger("pygls").setLevel(logging.ERROR)

            import jabuti.lsp.server  # noqa: F401 - intentional import for availability check

            lsp_available = True
        except ImportError:
            pass

        typer.echo(f"Jabuti version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo("")
        typer.echo("Features:")
        if lsp_available:
            lsp_status = "✓ Available"
        else:
            lsp_status = "✗ Not available (install with: pip install jabuti-lsp)"
        typer.echo(f"  LSP Server:    {lsp_status}")

        raise typer.Exit()


def resolve_settings(source: Path, config: Path | None) -> Settings:
    """
    Settings for a command operating on ``source``.

    An explicit ``--config`` file wins; otherwise jabuti.toml next to the
    source file is used when present.
    """
    try:
        if config is not None:
            return load_settings(config)
        return find_settings(source.resolve().parent)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
