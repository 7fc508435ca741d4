from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class Directives(NamedTuple):
    """Raw directive values from a decomposed tag. Empty strings mean absent."""

    arg: str = ""
    default: str = ""
    flag: str = ""

    def __str__(self) -> str:
        parts = [f"{key}:{value}" for key, value in zip(self._fields, self) if value]
        return ";".join(parts)


class ArgSpec(BaseModel):
    """Positional argument binding parsed from an ``arg:`` directive.

    ``start`` is inclusive and ``end`` exclusive. ``start == end`` marks a single
    fixed position; ``end == -1`` consumes every remaining argument from ``start``.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=-1)

    @property
    def is_range(self) -> bool:
        return self.start != self.end

    @property
    def is_unbounded(self) -> bool:
        return self.end == -1

    def __str__(self) -> str:
        if not self.is_range:
            return f"arg:{self.start}"
        if self.is_unbounded:
            return "arg:[:]" if self.start == 0 else f"arg:[{self.start}:]"
        return f"arg:[{self.start}:{self.end}]"


class FlagSpec(BaseModel):
    """Named flag binding parsed from a ``flag:`` directive."""

    model_config = ConfigDict(frozen=True)

    long: str
    short: str = ""

    @property
    def posixy(self) -> bool:
        """True when the flag has both a long and a single-letter short form."""
        return self.long != "" and len(self.short) == 1

    def __str__(self) -> str:
        if self.posixy:
            return f"flag:{self.long},{self.short}"
        return f"flag:{self.long}"


class CommandInput(BaseModel):
    """How one struct field maps onto an input of the generated command."""

    model_config = ConfigDict(frozen=True)

    field_name: str
    tag: str = ""
    doc: str = ""
    type: str


class Command(BaseModel):
    """Metadata compiled from a Go struct type, handed to code generation."""

    model_config = ConfigDict(frozen=True)

    # Name of the generated command, derived from the package name.
    name: str
    # Package the command type is declared in.
    package: str
    # Name of the command type.
    type: str
    # Usage help, sourced from the package doc comment.
    help: str = ""
    # Short description, sourced from the doc comment on the type.
    description: str = ""
    # Struct fields exposed as command inputs, in declaration order.
    inputs: tuple[CommandInput, ...] = ()


# ---------------------------------------------------------------------------
# Declarations supplied by a DeclarationParser
# ---------------------------------------------------------------------------


class FieldDecl(BaseModel):
    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...] = ()
    doc: str = ""
    # Raw tag literal as written in source, quotes included.
    tag: str | None = None
    type: str

    @property
    def exported(self) -> bool:
        return len(self.names) == 1 and self.names[0][:1].isupper()


class TypeDecl(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    doc: str = ""
    kind: str
    fields: tuple[FieldDecl, ...] | None = None

    @property
    def is_struct(self) -> bool:
        return self.kind == "struct_type" and self.fields is not None


class PackageDecl(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    doc: str = ""
    types: tuple[TypeDecl, ...] = ()

    def find_type(self, name: str) -> TypeDecl | None:
        for typ in self.types:
            if typ.name == name:
                return typ
        return None
