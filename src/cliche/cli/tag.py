from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cliche.core.tag import decompose, parse_arg, parse_default, parse_flag

console = Console()


def tag(
    value: Annotated[str, typer.Argument(help='Tag value, e.g. "arg:[1:]; flag:verbose,v".')],
) -> None:
    """Show how a struct tag value is understood."""
    directives = decompose(value)
    arg = parse_arg(value)
    flag = parse_flag(value)
    default = parse_default(value)

    table = Table(show_lines=False)
    for header in ("directive", "raw", "parsed"):
        table.add_column(header)
    table.add_row("arg", escape(directives.arg), escape(repr(arg)) if arg else "")
    table.add_row("flag", escape(directives.flag), escape(repr(flag)) if flag else "")
    table.add_row("default", escape(directives.default), escape(default or ""))
    console.print(table)
