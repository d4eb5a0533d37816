"""
Jabuti CLI Package.

- document.py: format and outline commands
- lsp.py: language server commands
- utils.py: shared utilities
"""

import typer

from jabuti import __version__
from jabuti.cli.document import format_command, outline_command
from jabuti.cli.lsp import lsp_app
from jabuti.cli.utils import get_version, version_callback

app = typer.Typer(
    help="Jabuti – editor tooling for the Jabuti contract DSL",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """Jabuti CLI main callback for global options."""
    pass


app.command(name="format")(format_command)
app.command(name="outline")(outline_command)
app.add_typer(lsp_app, name="lsp")


def main() -> None:
    app(standalone_mode=True)


__all__ = [
    "__version__",
    "app",
    "main",
    "lsp_app",
    "get_version",
    "version_callback",
]
