"""Unit tests for struct tag directive parsing."""

import logging

import pytest

from cliche.core.errors import DirectiveMalformedError
from cliche.core.tag import (
    decompose,
    parse_arg,
    parse_arg_value,
    parse_default,
    parse_flag,
    parse_flag_value,
)
from cliche.models import ArgSpec, Directives, FlagSpec


class TestDecompose:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            (None, ("", "", "")),
            ("", ("", "", "")),
            ("arg:;default:;flag:", ("", "", "")),
            ("arg:FOO;default:BAR;flag:BAZ", ("FOO", "BAR", "BAZ")),
            ("default:BAR;flag:BAZ;arg:FOO", ("FOO", "BAR", "BAZ")),
            ("arg: FOO ; default: BAR ; flag: BAZ ;", ("FOO", "BAR", "BAZ")),
            ("arg:FOO;default:BAR;nonsense:CANTFINDTHIS!;flag:BAZ", ("FOO", "BAR", "BAZ")),
            ("just some words", ("", "", "")),
        ],
        ids=[
            "none",
            "implicitly-empty",
            "explicitly-empty",
            "all",
            "shifted-order",
            "whitespace-trimmed",
            "extra-ignored",
            "bare-text-ignored",
        ],
    )
    def test_decompose(self, tag: str | None, expected: tuple[str, str, str]) -> None:
        assert decompose(tag) == expected

    def test_order_independent(self) -> None:
        assert decompose("arg:FOO;default:BAR;flag:BAZ") == decompose("default:BAR;flag:BAZ;arg:FOO")

    def test_last_duplicate_wins(self) -> None:
        assert decompose("arg:FOO;arg:QUX").arg == "QUX"

    def test_prefix_is_case_sensitive(self) -> None:
        assert decompose("ARG:1;Flag:foo").arg == ""
        assert decompose("ARG:1;Flag:foo").flag == ""

    def test_redecomposing_serialized_directives_is_stable(self) -> None:
        directives = decompose(" flag: foo,F ;nonsense:1; arg:[2:] ;default: \"x\" ")
        assert decompose(str(directives)) == directives
        assert str(directives) == 'arg:[2:];default:"x";flag:foo,F'

    def test_returns_named_directives(self) -> None:
        directives = decompose("flag:foo")
        assert isinstance(directives, Directives)
        assert directives.flag == "foo"


class TestParseArg:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("arg:42", ArgSpec(start=42, end=42)),
            ("arg:[42]", ArgSpec(start=42, end=42)),
            ("arg:[2:4]", ArgSpec(start=2, end=4)),
            ("arg:[0:4]", ArgSpec(start=0, end=4)),
            ("arg:[:4]", ArgSpec(start=0, end=4)),
            ("arg:[2:]", ArgSpec(start=2, end=-1)),
            ("arg:[:]", ArgSpec(start=0, end=-1)),
            ("flag:foo; arg: [1:3] ", ArgSpec(start=1, end=3)),
        ],
        ids=[
            "plain-index",
            "slice-index",
            "range-between",
            "range-from-explicit-zero",
            "range-consume-to",
            "range-consume-from",
            "range-consume-all",
            "surrounded-by-other-directives",
        ],
    )
    def test_valid(self, tag: str, expected: ArgSpec) -> None:
        assert parse_arg(tag) == expected

    @pytest.mark.parametrize(
        "tag",
        [
            "",
            "arg:",
            "arg:[2:2]",
            "arg:[4:2]",
            "arg:[2:0]",
            "arg:[:0]",
            "arg:[2:a]",
            "arg:[]",
            "arg:I thrive in chaos.",
            "arg:-1",
            "arg:[-1]",
            "arg:[-1:3]",
            "arg:[1:2:3]",
            "arg:4x",
        ],
        ids=[
            "empty",
            "explicitly-unset",
            "range-same",
            "range-end-before-start",
            "range-to-zero",
            "range-consume-to-zero",
            "range-malformed",
            "slice-index-empty",
            "malformed",
            "negative-index",
            "negative-slice-index",
            "negative-range-start",
            "three-part-slice",
            "trailing-garbage",
        ],
    )
    def test_rejected(self, tag: str) -> None:
        assert parse_arg(tag) is None

    def test_absent_directive_is_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cliche.core.tag"):
            assert parse_arg("flag:foo") is None
        assert caplog.records == []

    def test_empty_directive_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cliche.core.tag"):
            assert parse_arg("arg:") is None
        assert "present but empty" in caplog.text

    def test_malformed_directive_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cliche.core.tag"):
            assert parse_arg("arg:[4:2]") is None
        assert "must be greater than start" in caplog.text


class TestParseArgValue:
    def test_raises_with_reason(self) -> None:
        with pytest.raises(DirectiveMalformedError) as excinfo:
            parse_arg_value("[]")
        assert excinfo.value.directive == "arg"
        assert excinfo.value.reason == "empty brackets"

    def test_empty_value_raises(self) -> None:
        with pytest.raises(DirectiveMalformedError, match="present but empty"):
            parse_arg_value("  ")

    def test_non_integer_bound(self) -> None:
        with pytest.raises(DirectiveMalformedError, match="not an integer"):
            parse_arg_value("[1:x]")


class TestParseDefault:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("", None),
            ("default:42", "42"),
            ("default:BAR", "BAR"),
            ('default:"foo"', '"foo"'),
            ("default:", None),
            ("arg:1", None),
        ],
        ids=["empty", "value", "word", "quotes-preserved", "explicitly-unset", "absent"],
    )
    def test_default(self, tag: str, expected: str | None) -> None:
        assert parse_default(tag) == expected


class TestParseFlag:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("flag:foo", FlagSpec(long="foo", short="")),
            ("flag:foo,F", FlagSpec(long="foo", short="F")),
            ("flag:foo, F", FlagSpec(long="foo", short="F")),
            ("flag:dry-run,n", FlagSpec(long="dry-run", short="n")),
            ("flag:max_depth2", FlagSpec(long="max_depth2", short="")),
        ],
        ids=["go-style", "posix-style", "posix-style-spaced", "dashed", "underscore-digit"],
    )
    def test_valid(self, tag: str, expected: FlagSpec) -> None:
        assert parse_flag(tag) == expected

    @pytest.mark.parametrize(
        "tag",
        ["", "flag:", "flag:f,b", "flag:foo,bar", "flag:2fast", "flag:-foo", "flag:foo,1", "default:"],
        ids=[
            "empty",
            "explicitly-unset",
            "two-short-flags",
            "two-long-flags",
            "leading-digit",
            "leading-dash",
            "digit-short",
            "absent",
        ],
    )
    def test_rejected(self, tag: str) -> None:
        assert parse_flag(tag) is None

    def test_posix_detection(self) -> None:
        go_style = parse_flag("flag:foo")
        posix_style = parse_flag("flag:foo,F")
        assert go_style is not None and not go_style.posixy
        assert posix_style is not None and posix_style.posixy

    def test_malformed_directive_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cliche.core.tag"):
            assert parse_flag("flag:foo,bar") is None
        assert "Ignoring flag directive" in caplog.text


def test_parse_flag_value_raises_for_malformed() -> None:
    with pytest.raises(DirectiveMalformedError) as excinfo:
        parse_flag_value("foo,bar")
    assert excinfo.value.directive == "flag"
    assert excinfo.value.value == "foo,bar"
