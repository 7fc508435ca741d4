from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cliche.core.meta import from_file
from cliche.core.tag import parse_arg, parse_default, parse_flag
from cliche.models import Command

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    json = "json"
    table = "table"


def _render_table(command: Command) -> None:
    # Go doc comments use [pkg.Name] for doc links.
    console.print(f"[bold]{escape(command.name)}[/bold] ({escape(command.package)}.{escape(command.type)})")
    if command.help:
        console.print(escape(command.help))
    if command.description:
        console.print(f"[dim]{escape(command.description)}[/dim]")

    table = Table(show_lines=False)
    for header in ("field", "type", "arg", "flag", "default", "doc"):
        table.add_column(header)
    for field in command.inputs:
        arg = parse_arg(field.tag)
        flag = parse_flag(field.tag)
        table.add_row(
            escape(field.field_name),
            escape(field.type),
            escape(str(arg)) if arg else "",
            escape(str(flag)) if flag else "",
            escape(parse_default(field.tag) or ""),
            escape(field.doc),
        )
    console.print(table)
    console.print(f"({len(command.inputs)} inputs)")


def compile_(
    path: Annotated[Path, typer.Argument(help="Path to the Go source file declaring the command type.")],
    type_name: Annotated[str, typer.Option("--type", "-t", help="Name of the struct type to compile.")],
    output: Annotated[OutputFormat, typer.Option("--format", "-f", help="Output format.")] = OutputFormat.json,
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Source language (go or golang). Defaults to the file extension."),
    ] = None,
    tag_key: Annotated[str | None, typer.Option(help="Struct tag key holding the directives.")] = None,
) -> None:
    """Compile a Go command type into CLI metadata."""
    try:
        command = from_file(path, type_name, language=language, tag_key=tag_key)
    except (FileNotFoundError, ValueError) as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from None

    if command is None:
        err_console.print(f"[red]Could not compile type {escape(type_name)} from {escape(str(path))}[/red]")
        raise typer.Exit(code=1)

    if output is OutputFormat.table:
        _render_table(command)
    else:
        console.print_json(command.model_dump_json())
