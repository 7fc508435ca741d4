"""Parsing of the annotation mini-language carried in struct tags.

A tag is a semicolon separated list of directives::

    arg:[1:]; flag:verbose,v; default:false

Whitespace around separators and values is ignored, unknown directives are
skipped and the last occurrence of a directive wins.
"""

import logging
import re

from cliche.core.errors import DirectiveMalformedError
from cliche.models import ArgSpec, Directives, FlagSpec

logger = logging.getLogger(__name__)

_PREFIXES = {"arg:": "arg", "default:": "default", "flag:": "flag"}

_ARG_RE = re.compile(r"(?P<index>\d+)|\[(?P<start>[^:\]]+)?(?P<range>:)?(?P<end>[^\]]+)?\]", re.ASCII)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLAG_RE = re.compile(r"(?P<long>[a-zA-Z][a-zA-Z0-9_-]+)(?:,\s*(?P<short>[a-zA-Z]))?")


def decompose(tag: str | None) -> Directives:
    """Split a tag into its raw ``arg``, ``default`` and ``flag`` values."""
    if not tag:
        return Directives()

    found = {"arg": "", "default": "", "flag": ""}
    for component in tag.split(";"):
        component = component.strip()
        for prefix, key in _PREFIXES.items():
            if component.startswith(prefix):
                found[key] = component[len(prefix) :].strip()
                break
    return Directives(**found)


def _to_index(value: str, what: str, raw: str) -> int:
    value = value.strip()
    if _INT_RE.fullmatch(value) is None:
        raise DirectiveMalformedError("arg", raw, f"{what} {value!r} is not an integer")
    index = int(value)
    if index < 0:
        raise DirectiveMalformedError("arg", raw, f"{what} {index} is negative")
    return index


def parse_arg_value(value: str) -> ArgSpec:
    """Parse the value of an ``arg:`` directive.

    Raises DirectiveMalformedError when the value does not describe a valid
    position or range.
    """
    value = value.strip()
    if value == "":
        raise DirectiveMalformedError("arg", value, "directive is present but empty")

    m = _ARG_RE.fullmatch(value)
    if m is None:
        raise DirectiveMalformedError("arg", value, "expected N, [N], [S:E], [S:], [:E] or [:]")

    if m["index"] is not None:
        index = int(m["index"])
        return ArgSpec(start=index, end=index)

    start_text, is_range, end_text = m["start"], m["range"], m["end"]
    if start_text is None and is_range is None and end_text is None:
        raise DirectiveMalformedError("arg", value, "empty brackets")

    start = 0 if start_text is None else _to_index(start_text, "start", value)
    if is_range is None:
        return ArgSpec(start=start, end=start)

    if end_text is None:
        return ArgSpec(start=start, end=-1)

    end = _to_index(end_text, "end", value)
    if end <= start:
        raise DirectiveMalformedError("arg", value, f"range end {end} must be greater than start {start}")
    return ArgSpec(start=start, end=end)


def parse_flag_value(value: str) -> FlagSpec:
    """Parse the value of a ``flag:`` directive, e.g. ``verbose`` or ``verbose,v``."""
    value = value.strip()
    if value == "":
        raise DirectiveMalformedError("flag", value, "directive is present but empty")
    m = _FLAG_RE.fullmatch(value)
    if m is None:
        raise DirectiveMalformedError("flag", value, "expected a long name optionally followed by ', X'")
    return FlagSpec(long=m["long"], short=m["short"] or "")


def _has_directive(tag: str | None, prefix: str) -> bool:
    if not tag:
        return False
    return any(component.strip().startswith(prefix) for component in tag.split(";"))


def parse_arg(tag: str | None) -> ArgSpec | None:
    """Return the positional argument binding of a tag, or None.

    None is returned both when the tag has no ``arg:`` directive and when the
    directive is malformed; only the latter is logged.
    """
    arg = decompose(tag).arg
    if arg == "":
        if _has_directive(tag, "arg:"):
            logger.warning("Ignoring arg directive in tag %r: directive is present but empty", tag)
        return None
    try:
        return parse_arg_value(arg)
    except DirectiveMalformedError as exc:
        logger.warning("Ignoring arg directive in tag %r: %s", tag, exc.reason)
        return None


def parse_default(tag: str | None) -> str | None:
    """Return the default value of a tag exactly as written, or None."""
    default = decompose(tag).default
    return default or None


def parse_flag(tag: str | None) -> FlagSpec | None:
    """Return the flag binding of a tag, or None."""
    flag = decompose(tag).flag
    if flag == "":
        if _has_directive(tag, "flag:"):
            logger.warning("Ignoring flag directive in tag %r: directive is present but empty", tag)
        return None
    try:
        return parse_flag_value(flag)
    except DirectiveMalformedError as exc:
        logger.warning("Ignoring flag directive in tag %r: %s", tag, exc.reason)
        return None
