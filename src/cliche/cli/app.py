import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from cliche.cli.compile import compile_
from cliche.cli.tag import tag
from cliche.config import get_settings

app = typer.Typer(
    name="cliche",
    help="Cliche CLI: compile struct-tag annotations on Go command types into CLI metadata.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("compile")(compile_)
app.command("tag")(tag)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


@app.callback()
def _root(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every compilation step.")] = False,
) -> None:
    _configure_logging("DEBUG" if verbose else get_settings().log_level)


def main() -> None:
    app()
