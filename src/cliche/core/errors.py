"""Exception hierarchy for compiling command metadata."""


class CompileError(Exception):
    """Base exception for metadata compilation failures."""


class SourceUnparsableError(CompileError, ValueError):
    """Source text could not be turned into a declaration set."""


class TypeNotFoundError(CompileError, LookupError):
    """The requested type is missing, or is not a struct."""

    def __init__(self, type_name: str, reason: str = "not found") -> None:
        super().__init__(f"Type {type_name!r} {reason}")
        self.type_name = type_name
        self.reason = reason


class DirectiveMalformedError(CompileError, ValueError):
    """A tag directive value does not match its grammar."""

    def __init__(self, directive: str, value: str, reason: str) -> None:
        super().__init__(f"Malformed {directive} directive {value!r}: {reason}")
        self.directive = directive
        self.value = value
        self.reason = reason
