"""
Document commands: format and outline a single .jabuti file.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.tree import Tree

from jabuti.cli.utils import resolve_settings
from jabuti.core.formatter import format_text
from jabuti.core.scope_tree import ScopeNode, build_scope_tree

console = Console()

_KIND_STYLES = {
    "Module": "bold magenta",
    "Field": "cyan",
    "Property": "green",
    "Function": "yellow",
    "Variable": "blue",
}


def _read(file: Path) -> str:
    try:
        return file.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: cannot read {file}: {e}", err=True)
        raise typer.Exit(code=1)


def format_command(
    file: Path = typer.Argument(..., help="Jabuti document to format", dir_okay=False),
    check: bool = typer.Option(
        False,
        "--check",
        help="Exit with code 1 if the file is not formatted, without changing it",
    ),
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Rewrite the file in place instead of printing",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Settings file (default: jabuti.toml next to FILE)",
    ),
) -> None:
    """Print the canonical form of a Jabuti document."""
    settings = resolve_settings(file, config)
    text = _read(file)
    formatted = format_text(text, settings.format.indent_size)

    if check:
        if formatted != text:
            console.print(f"[yellow]Would reformat {file}[/yellow]")
            raise typer.Exit(code=1)
        console.print(f"[green]{file} is already formatted[/green]")
        return

    if write:
        if formatted == text:
            console.print(f"[dim]{file} unchanged[/dim]")
            return
        file.write_text(formatted, encoding="utf-8")
        console.print(f"[green]Reformatted {file}[/green]")
        return

    typer.echo(formatted, nl=False)


def _add_branch(tree: Tree, node: ScopeNode) -> None:
    style = _KIND_STYLES.get(node.kind.value, "")
    label = f"[{style}]{node.label}[/{style}]" if style else node.label
    if node.detail:
        label += f" {node.detail}"
    label += f" [dim]{node.position.line + 1}:{node.position.column + 1}[/dim]"
    branch = tree.add(label)
    for child in node.children:
        _add_branch(branch, child)


def outline_command(
    file: Path = typer.Argument(..., help="Jabuti document to outline", dir_okay=False),
) -> None:
    """Show the recovered outline (scope tree) of a Jabuti document."""
    roots = build_scope_tree(_read(file))
    if not roots:
        console.print(f"[yellow]{file} is empty[/yellow]")
        return

    tree = Tree(f"[bold]{file.name}[/bold]")
    for root in roots:
        _add_branch(tree, root)
    console.print(tree)

    count = sum(1 for root in roots for _ in root.walk())
    console.print(f"[dim]{count} symbols[/dim]")
