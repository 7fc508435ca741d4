"""Compile Go type declarations into command metadata."""

import logging
import re
from pathlib import Path

from cliche.config import get_settings
from cliche.core.errors import SourceUnparsableError, TypeNotFoundError
from cliche.core.languages import declaration_parser, language_for
from cliche.core.ports.introspection import DeclarationParser
from cliche.core.tag import parse_arg, parse_flag
from cliche.models import Command, CommandInput, PackageDecl, TypeDecl

logger = logging.getLogger(__name__)

_WHITESPACE_RUNS_RE = re.compile(r"\s+")

_GO_ESCAPES = {"a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "\\": "\\", '"': '"'}
_GO_ESCAPE_RE = re.compile(
    r"\\(?:(?P<simple>[abfnrtv\\\"])|x(?P<hex>[0-9a-fA-F]{2})|u(?P<u4>[0-9a-fA-F]{4})"
    r"|U(?P<u8>[0-9a-fA-F]{8})|(?P<oct>[0-3][0-7]{2})|(?P<bad>.?))",
    re.DOTALL,
)


# ---------------------------------------------------------------------------
# Naming and help text
# ---------------------------------------------------------------------------


def _starts_word(prev: str, ch: str, nxt: str) -> bool:
    if ch.isdigit() != prev.isdigit():
        return True
    if not ch.isupper():
        return False
    # "HTTPServer": the last capital of a run begins the next word.
    return prev.islower() or (prev.isupper() and nxt.islower())


def _words(name: str) -> list[str]:
    words: list[str] = []
    word = ""
    for i, ch in enumerate(name):
        if not ch.isalnum():
            if word:
                words.append(word)
            word = ""
            continue
        if word and _starts_word(word[-1], ch, name[i + 1 : i + 2]):
            words.append(word)
            word = ""
        word += ch
    if word:
        words.append(word)
    return words


def command_name(package: str) -> str:
    """Return the command name for a package: its name in kebab-case.

    ``simple`` stays ``simple``, ``myTool`` and ``my_tool`` become ``my-tool``,
    ``HTTPServer`` becomes ``http-server``. Non-ASCII letters are kept.
    """
    # TODO: accept an explicit name override once the CLI exposes one.
    return "-".join(word.lower() for word in _words(package))


def sanitize_help(doc: str, package: str, command: str) -> str:
    """Turn a package doc comment into usage help for the command."""
    if doc.startswith("Package "):
        doc = doc[len("Package ") :]
    else:
        logger.warning("Package doc comment is malformed; proceeding anyway (package=%s)", package)
    if doc == "":
        logger.warning("Package has no doc comment (package=%s)", package)
        return ""

    # Refer to the command rather than the package it was generated from.
    if doc.startswith(package):
        doc = doc.replace(package, command, 1)
    return _WHITESPACE_RUNS_RE.sub(" ", doc).strip()


# ---------------------------------------------------------------------------
# Struct tags
# ---------------------------------------------------------------------------


def unquote_go_string(literal: str) -> str:
    """Return the value of a Go string literal, raw or interpreted."""
    if len(literal) >= 2 and literal[0] == literal[-1] == "`":
        return literal[1:-1].replace("\r", "")
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise ValueError(f"not a Go string literal: {literal!r}")

    body = literal[1:-1]
    if "\n" in body or re.search(r'(?<!\\)(?:\\\\)*"', body):
        raise ValueError(f"invalid Go string literal: {literal!r}")

    def _replace(m: re.Match[str]) -> str:
        if m["simple"] is not None:
            return _GO_ESCAPES[m["simple"]]
        if m["bad"] is not None:
            raise ValueError(f"invalid escape \\{m['bad']} in {literal!r}")
        code = m["hex"] or m["u4"] or m["u8"]
        return chr(int(code, 16)) if code else chr(int(m["oct"], 8))

    return _GO_ESCAPE_RE.sub(_replace, body)


def lookup_struct_tag(tag: str, key: str) -> str | None:
    """Look up ``key`` in a conventional ``key:"value" key2:"value2"`` struct tag.

    Follows the rules of Go's reflect.StructTag.Lookup: scanning stops at the
    first malformed pair, and None is returned when the key is absent.
    """
    while tag:
        tag = tag.lstrip(" ")
        if not tag:
            break

        i = 0
        while i < len(tag) and tag[i] > " " and tag[i] not in ':"\x7f':
            i += 1
        if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
            break
        name = tag[:i]
        tag = tag[i + 1 :]

        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            break
        quoted = tag[: i + 1]
        tag = tag[i + 1 :]

        if name == key:
            try:
                return unquote_go_string(quoted)
            except ValueError:
                break
    return None


def _field_tag(name: str, literal: str | None, tag_key: str) -> str:
    if literal is None:
        logger.info("Field %s has no struct tag", name)
        return ""
    try:
        struct_tag = unquote_go_string(literal)
    except ValueError as exc:
        logger.warning("Couldn't unquote struct tag %s on field %s: %s", literal, name, exc)
        return ""

    value = lookup_struct_tag(struct_tag, tag_key)
    if value is None:
        logger.info("Field %s has no %s tag", name, tag_key)
        return ""
    logger.info("Field %s has %s tag %r", name, tag_key, value)
    # Parsing here only reports malformed directives; the raw tag is kept as written.
    parse_arg(value)
    parse_flag(value)
    return value


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def compile_inputs(type_decl: TypeDecl, tag_key: str | None = None) -> tuple[CommandInput, ...]:
    """Compile the fields of a struct type into command inputs, in source order.

    Embedded fields, fields declaring several names and unexported fields are
    skipped.
    """
    if not type_decl.fields:
        return ()
    if tag_key is None:
        tag_key = get_settings().tag_key

    inputs: list[CommandInput] = []
    for field in type_decl.fields:
        n = len(field.names)
        if n == 0:
            logger.info("Skipping nameless field of type %s", field.type)
            continue
        if n > 1:
            logger.warning("Skipping field with multiple names: %s; cannot handle this case.", ", ".join(field.names))
            continue
        if not field.exported:
            logger.info("Skipping unexported field %s", field.names[0])
            continue

        name = field.names[0]
        logger.info("Compiling field named %s", name)
        if field.doc:
            logger.info("Field %s has doc comment: %r", name, field.doc)
        else:
            logger.info("Field %s has no doc comment", name)

        inputs.append(
            CommandInput(
                field_name=name,
                tag=_field_tag(name, field.tag, tag_key),
                doc=field.doc,
                type=field.type,
            )
        )
    return tuple(inputs)


def compile_command(decl: PackageDecl, type_name: str, tag_key: str | None = None) -> Command:
    """Assemble the Command for ``type_name``.

    A missing or non-struct type yields a Command without inputs.
    """
    name = command_name(decl.name)
    typ = decl.find_type(type_name)
    inputs: tuple[CommandInput, ...] = ()
    description = ""
    if typ is not None:
        description = typ.doc.strip()
        if typ.is_struct:
            inputs = compile_inputs(typ, tag_key)
    return Command(
        name=name,
        package=decl.name,
        type=type_name,
        help=sanitize_help(decl.doc, decl.name, name),
        description=description,
        inputs=inputs,
    )


def load_command(
    source: bytes | str,
    type_name: str,
    filename: str = "<source>",
    parser: DeclarationParser | None = None,
    tag_key: str | None = None,
) -> Command:
    """Compile the Command for ``type_name`` declared in ``source``.

    Raises SourceUnparsableError when the source cannot be parsed and
    TypeNotFoundError when the type is missing or is not a struct.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    if parser is None:
        parser = declaration_parser()

    decl = parser.parse(source, filename)
    typ = decl.find_type(type_name)
    if typ is None:
        raise TypeNotFoundError(type_name, f"not found in {filename}")
    if not typ.is_struct:
        raise TypeNotFoundError(type_name, f"in {filename} is a {typ.kind}, not a struct")
    return compile_command(decl, type_name, tag_key)


def from_source(
    source: bytes | str,
    type_name: str,
    filename: str = "<source>",
    parser: DeclarationParser | None = None,
    tag_key: str | None = None,
) -> Command | None:
    """Like load_command, but logs and returns None when nothing can be compiled."""
    try:
        return load_command(source, type_name, filename, parser, tag_key)
    except SourceUnparsableError as exc:
        logger.warning("Failed creating declarations from %s: %s", filename, exc)
    except TypeNotFoundError as exc:
        logger.warning("Type not found in %s: %s", filename, exc)
    return None


def from_file(
    path: str | Path,
    type_name: str,
    language: str | None = None,
    tag_key: str | None = None,
) -> Command | None:
    """Compile the Command for ``type_name`` from a source file, or None.

    The source language is ``language`` when given, otherwise it follows the
    file suffix.
    """
    file_path = Path(path)
    parser = declaration_parser(language_for(file_path, language))

    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    return from_source(source_bytes, type_name, str(file_path), parser=parser, tag_key=tag_key)
