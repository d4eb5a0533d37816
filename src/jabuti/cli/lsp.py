"""
Language server commands.

``run`` serves the Jabuti language server over stdio (the transport editors
launch) or TCP; ``check`` reports the installed pygls/lsprotocol versions.
"""

from collections.abc import Callable

import typer

lsp_app = typer.Typer(
    help="Language Server Protocol (LSP) commands.",
    no_args_is_help=True,
)

LSP_PACKAGES = ("pygls", "lsprotocol")


def _serve(start: Callable[[], None]) -> None:
    """Run a blocking server loop; Ctrl-C stops it, any other failure exits 1."""
    try:
        start()
    except KeyboardInterrupt:
        typer.echo("\nLSP server stopped.")
    except Exception as e:
        typer.echo(f"Error starting LSP server: {e}", err=True)
        raise typer.Exit(code=1)


@lsp_app.command("run")
def lsp_run(
    tcp: bool = typer.Option(False, "--tcp", help="Serve over TCP instead of stdio"),
    host: str = typer.Option("127.0.0.1", "--host", help="TCP host (only used with --tcp)"),
    port: int = typer.Option(2087, "--port", help="TCP port (only used with --tcp)"),
) -> None:
    """Start the Jabuti language server."""
    from jabuti.lsp.server import server, start_server

    if tcp:
        typer.echo(f"Starting Jabuti LSP server on {host}:{port}...")
        _serve(lambda: server.start_tcp(host, port))
    else:
        _serve(start_server)


@lsp_app.command("check")
def lsp_check() -> None:
    """Report the language server dependencies and their versions."""
    from importlib.metadata import PackageNotFoundError, version

    missing = []
    for package in LSP_PACKAGES:
        try:
            typer.echo(f"{package + ':':<14}{version(package)}")
        except PackageNotFoundError:
            missing.append(package)

    if missing:
        typer.echo(
            f"\nMissing dependencies: {', '.join(missing)}\nInstall with: pip install jabuti-lsp",
            err=True,
        )
        raise typer.Exit(code=1)

    typer.echo("\nAll LSP dependencies installed.")
