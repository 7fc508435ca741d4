"""Source languages command types can be declared in, and the parser for each."""

from collections.abc import Callable
from pathlib import Path

from cliche.core.ports.introspection import DeclarationParser
from cliche.introspect.go_adapter import GoDeclarationParser

_DECLARATION_PARSERS: dict[str, Callable[[], DeclarationParser]] = {
    "go": GoDeclarationParser,
}

_LANGUAGE_NAMES = {
    "go": "go",
    "golang": "go",
}

_SUFFIX_LANGUAGES = {
    ".go": "go",
}


def language_for(path: Path, language: str | None = None) -> str:
    """Return the language the command type in ``path`` is declared in.

    An explicit ``language`` (``go`` or ``golang``) overrides the file suffix,
    so sources with other extensions can still be compiled.
    """
    if language:
        name = _LANGUAGE_NAMES.get(language.strip().lower())
        if name is None:
            raise ValueError(f"Unsupported language {language!r}; choose one of: {', '.join(sorted(_LANGUAGE_NAMES))}")
        return name

    name = _SUFFIX_LANGUAGES.get(path.suffix.lower())
    if name is None:
        raise ValueError(f"Unsupported file extension {path.suffix or '(none)'!r} for {path}; name the language explicitly")
    return name


def declaration_parser(language: str = "go") -> DeclarationParser:
    """Return a fresh declaration parser for ``language``."""
    try:
        factory = _DECLARATION_PARSERS[language]
    except KeyError:
        raise ValueError(f"No declaration parser for language {language!r}") from None
    return factory()
