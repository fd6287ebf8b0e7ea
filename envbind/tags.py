"""Parser for the ``key=NAME default=VALUE decode=FORMAT required=BOOL`` tag grammar."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from envbind.errors import (
    MalformedTagError,
    MissingKeyError,
    UnknownDecodeFormatError,
    UnknownTagOptionError,
)

TAG_OPTIONS = ("key", "default", "decode", "required")

_TRUE_LITERALS = frozenset({"1", "t", "true"})
_FALSE_LITERALS = frozenset({"0", "f", "false"})


class DecodeFormat(str, Enum):
    """Structured decode formats accepted by the ``decode`` option."""

    AUTO = "auto"
    YAML = "yaml"
    JSON = "json"


class DirectiveSet(BaseModel):
    """Parsed form of one field's tag annotation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str = Field(min_length=1, description="Environment variable to read.")
    default: Optional[str] = Field(
        default=None,
        description="Raw text used when the variable is unset.",
    )
    decode: DecodeFormat = Field(
        default=DecodeFormat.AUTO,
        description="Decode format for sequence and mapping targets.",
    )
    required: bool = Field(
        default=False,
        description="Fail when the variable is unset and no default exists.",
    )

    @property
    def has_default(self) -> bool:
        return self.default is not None


def parse_bool_literal(text: str) -> Optional[bool]:
    """Map ``true/false/1/0/t/f`` (any case) to a bool, ``None`` for anything else."""

    lowered = text.lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    return None


def tokenize(tag: str) -> List[str]:
    """Split ``tag`` on unescaped whitespace.

    ``\\ `` yields a literal space and ``\\\\`` a literal backslash. Any other
    backslash is kept as written.
    """

    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    index = 0
    while index < len(tag):
        char = tag[index]
        if char == "\\":
            if index + 1 >= len(tag):
                raise MalformedTagError("dangling escape at end of tag", raw=tag)
            following = tag[index + 1]
            if following.isspace() or following == "\\":
                current.append(following)
                index += 2
            else:
                current.append(char)
                index += 1
            in_token = True
            continue
        if char.isspace():
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(char)
            in_token = True
        index += 1
    if in_token:
        tokens.append("".join(current))
    return tokens


def parse_pairs(tokens: List[str], tag: str = "") -> Dict[str, str]:
    """Turn ``option=value`` tokens into a mapping, splitting on the first ``=``."""

    options: Dict[str, str] = {}
    for token in tokens:
        name, sep, value = token.partition("=")
        if not sep or not name:
            raise MalformedTagError(
                f"expected option=value, got {token!r}", raw=tag or token
            )
        if name not in TAG_OPTIONS:
            raise UnknownTagOptionError(
                f"unknown tag option {name!r}; expected one of: "
                + ", ".join(TAG_OPTIONS),
                raw=tag or token,
            )
        if name in options:
            raise MalformedTagError(f"option {name!r} given twice", raw=tag or token)
        options[name] = value
    return options


def parse_tag(tag: str) -> DirectiveSet:
    """Parse one field annotation into a :class:`DirectiveSet`."""

    options = parse_pairs(tokenize(tag), tag)

    if not options.get("key"):
        raise MissingKeyError("tag has no key option", raw=tag)

    decode = DecodeFormat.AUTO
    if "decode" in options:
        try:
            decode = DecodeFormat(options["decode"].lower())
        except ValueError as exc:
            raise UnknownDecodeFormatError(
                f"unknown decode format {options['decode']!r}; expected one of: "
                + ", ".join(item.value for item in DecodeFormat),
                raw=tag,
            ) from exc

    required = False
    if "required" in options:
        parsed = parse_bool_literal(options["required"])
        if parsed is None:
            raise MalformedTagError(
                f"required must be a boolean, got {options['required']!r}", raw=tag
            )
        required = parsed

    return DirectiveSet(
        key=options["key"],
        default=options.get("default"),
        decode=decode,
        required=required,
    )


__all__ = [
    "TAG_OPTIONS",
    "DecodeFormat",
    "DirectiveSet",
    "parse_bool_literal",
    "parse_pairs",
    "parse_tag",
    "tokenize",
]
