from __future__ import annotations

import pytest

from envbind.errors import (
    MalformedTagError,
    MissingKeyError,
    UnknownDecodeFormatError,
    UnknownTagOptionError,
)
from envbind.tags import DecodeFormat, parse_tag, tokenize


def test_key_only_uses_defaults() -> None:
    directives = parse_tag("key=PORT")
    assert directives.key == "PORT"
    assert directives.default is None
    assert directives.decode is DecodeFormat.AUTO
    assert directives.required is False


def test_all_options() -> None:
    directives = parse_tag("key=LIST decode=yaml default=[] required=true")
    assert directives.key == "LIST"
    assert directives.default == "[]"
    assert directives.decode is DecodeFormat.YAML
    assert directives.required is True


def test_value_split_on_first_equals_only() -> None:
    directives = parse_tag("key=DSN default=postgres://db?sslmode=require")
    assert directives.default == "postgres://db?sslmode=require"


def test_empty_default_is_present() -> None:
    directives = parse_tag("key=NAME default=")
    assert directives.default == ""
    assert directives.has_default


def test_escaped_space_stays_in_value() -> None:
    directives = parse_tag(r"key=MAP default={a:\ A}")
    assert directives.default == "{a: A}"


def test_tokenize_collapses_whitespace_runs() -> None:
    assert tokenize("  key=A \t default=1  ") == ["key=A", "default=1"]


def test_tokenize_keeps_unrelated_backslashes() -> None:
    assert tokenize(r"key=A default=C:\temp") == ["key=A", r"default=C:\temp"]
    assert tokenize(r"key=A default=a\\b") == ["key=A", r"default=a\b"]


def test_dangling_escape_is_malformed() -> None:
    with pytest.raises(MalformedTagError):
        parse_tag("key=A default=x\\")


@pytest.mark.parametrize("tag", ["", "   ", "default=1", "key= default=1"])
def test_missing_key(tag: str) -> None:
    with pytest.raises(MissingKeyError):
        parse_tag(tag)


def test_unknown_option() -> None:
    with pytest.raises(UnknownTagOptionError) as excinfo:
        parse_tag("key=A optional=true")
    assert "optional" in str(excinfo.value)


@pytest.mark.parametrize("tag", ["key=A decode=toml", "key=A decode="])
def test_unknown_decode_format(tag: str) -> None:
    with pytest.raises(UnknownDecodeFormatError):
        parse_tag(tag)


def test_decode_format_is_case_insensitive() -> None:
    assert parse_tag("key=A decode=JSON").decode is DecodeFormat.JSON


@pytest.mark.parametrize("tag", ["key=A required", "=x key=A", "key=A key=B"])
def test_malformed_tokens(tag: str) -> None:
    with pytest.raises(MalformedTagError):
        parse_tag(tag)


@pytest.mark.parametrize(
    ("literal", "expected"),
    [("true", True), ("T", True), ("1", True), ("False", False), ("0", False), ("f", False)],
)
def test_required_literals(literal: str, expected: bool) -> None:
    assert parse_tag(f"key=A required={literal}").required is expected


def test_required_rejects_other_words() -> None:
    with pytest.raises(MalformedTagError) as excinfo:
        parse_tag("key=A required=yes")
    assert not isinstance(excinfo.value, MissingKeyError)


def test_tag_errors_share_base_class() -> None:
    for error_type in (MissingKeyError, UnknownTagOptionError, UnknownDecodeFormatError):
        assert issubclass(error_type, MalformedTagError)
