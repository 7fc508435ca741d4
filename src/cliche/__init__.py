"""Compile struct-tag annotations on Go command types into CLI metadata."""

from cliche.core.meta import compile_command, from_file, from_source, load_command
from cliche.models import ArgSpec, Command, CommandInput, FlagSpec

__all__ = [
    "ArgSpec",
    "Command",
    "CommandInput",
    "FlagSpec",
    "compile_command",
    "from_file",
    "from_source",
    "load_command",
]
