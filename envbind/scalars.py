"""Coerce raw strings into bool, integer, float, string, path and duration values."""
from __future__ import annotations

import math
import re
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict

import annotated_types

from envbind.durations import Duration, parse_duration
from envbind.errors import (
    InvalidBoolError,
    InvalidNumberError,
    UnsupportedFieldTypeError,
)
from envbind.fields import FloatWidth, Kind, TargetType
from envbind.tags import parse_bool_literal

FLOAT32_MAX = 3.4028234663852886e38

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_bool(raw: str) -> bool:
    value = parse_bool_literal(raw)
    if value is None:
        raise InvalidBoolError("invalid boolean", raw=raw)
    return value


def parse_int(raw: str) -> int:
    if not _INTEGER.fullmatch(raw):
        raise InvalidNumberError("invalid integer", raw=raw)
    try:
        return int(raw)
    except ValueError:
        raise InvalidNumberError("value out of range", raw=raw) from None


def parse_float(raw: str) -> float:
    if not _FLOAT.fullmatch(raw):
        raise InvalidNumberError("invalid number", raw=raw)
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise InvalidNumberError("value out of range", raw=raw)
    return value


def check_bounds(value: Any, target: TargetType, raw: str) -> Any:
    """Raise :class:`InvalidNumberError` when ``value`` violates a declared bound."""

    for constraint in target.constraints:
        if isinstance(constraint, annotated_types.Gt) and not value > constraint.gt:
            raise InvalidNumberError(f"value must be > {constraint.gt}", raw=raw)
        if isinstance(constraint, annotated_types.Ge) and not value >= constraint.ge:
            raise InvalidNumberError(f"value must be >= {constraint.ge}", raw=raw)
        if isinstance(constraint, annotated_types.Lt) and not value < constraint.lt:
            raise InvalidNumberError(f"value must be < {constraint.lt}", raw=raw)
        if isinstance(constraint, annotated_types.Le) and not value <= constraint.le:
            raise InvalidNumberError(f"value must be <= {constraint.le}", raw=raw)
        if (
            isinstance(constraint, FloatWidth)
            and constraint.bits == 32
            and math.isfinite(value)
            and abs(value) > FLOAT32_MAX
        ):
            raise InvalidNumberError("value out of range for float32", raw=raw)
    return value


def _coerce_int(raw: str, target: TargetType) -> int:
    return check_bounds(parse_int(raw), target, raw)


def _coerce_float(raw: str, target: TargetType) -> float:
    return check_bounds(parse_float(raw), target, raw)


def _coerce_duration(raw: str, target: TargetType) -> Any:
    nanoseconds = parse_duration(raw)
    if target.python_type is timedelta:
        return Duration(nanoseconds).to_timedelta()
    return Duration(nanoseconds)


_COERCERS: Dict[Kind, Callable[[str, TargetType], Any]] = {
    Kind.BOOL: lambda raw, _target: parse_bool(raw),
    Kind.INT: _coerce_int,
    Kind.FLOAT: _coerce_float,
    Kind.STR: lambda raw, _target: raw,
    Kind.PATH: lambda raw, _target: Path(raw),
    Kind.DURATION: _coerce_duration,
}


def coerce_scalar(raw: str, target: TargetType) -> Any:
    """Convert ``raw`` into the scalar described by ``target``."""

    coercer = _COERCERS.get(target.kind)
    if coercer is None:
        raise UnsupportedFieldTypeError(
            f"{target.describe()} is not a scalar type"
        )
    return coercer(raw, target)


__all__ = [
    "FLOAT32_MAX",
    "check_bounds",
    "coerce_scalar",
    "parse_bool",
    "parse_float",
    "parse_int",
]
