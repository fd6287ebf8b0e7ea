"""Compact duration literals such as ``5s``, ``1h30m`` or ``250ms``."""
from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Dict, Final

from pydantic_core import core_schema

from envbind.errors import InvalidDurationError

NANOSECOND: Final[int] = 1
MICROSECOND: Final[int] = 1_000 * NANOSECOND
MILLISECOND: Final[int] = 1_000 * MICROSECOND
SECOND: Final[int] = 1_000 * MILLISECOND
MINUTE: Final[int] = 60 * SECOND
HOUR: Final[int] = 60 * MINUTE

MAX_NANOSECONDS: Final[int] = 2**63 - 1

UNITS: Final[Dict[str, int]] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# Fraction digits past this are dropped.
_FRACTION_DIGITS: Final[int] = 18
_SEGMENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")


def parse_duration(text: str) -> int:
    """Parse ``text`` into a signed number of nanoseconds.

    The literal is an optional sign followed by one or more ``<number><unit>``
    segments, where the number may carry a decimal fraction. Segment
    magnitudes are summed, so ``"1h30m"`` equals ``"90m"``. A bare number,
    an unknown unit and an empty string are all rejected.
    """

    if not isinstance(text, str):
        raise InvalidDurationError("duration must be text", raw=repr(text))
    remaining = text
    negative = False
    if remaining[:1] in ("-", "+"):
        negative = remaining[0] == "-"
        remaining = remaining[1:]
    if not remaining:
        raise InvalidDurationError("invalid duration", raw=text)

    total = 0
    while remaining:
        match = _SEGMENT.match(remaining)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise InvalidDurationError("invalid duration", raw=text)
        if not unit:
            raise InvalidDurationError("missing unit in duration", raw=text)
        scale = UNITS.get(unit)
        if scale is None:
            raise InvalidDurationError(f"unknown unit {unit!r} in duration", raw=text)
        whole = whole.lstrip("0")
        if len(whole) > len(str(MAX_NANOSECONDS)):
            raise InvalidDurationError("duration out of range", raw=text)
        total += int(whole or "0") * scale
        if fraction:
            fraction = fraction[:_FRACTION_DIGITS]
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > MAX_NANOSECONDS:
            raise InvalidDurationError("duration out of range", raw=text)
        remaining = remaining[match.end():]

    return -total if negative else total


def format_duration(nanoseconds: int) -> str:
    """Render ``nanoseconds`` the way :func:`parse_duration` reads it back.

    Sub-second values use the smallest fitting unit (``1.5ms``); larger values
    are split into hours, minutes and fractional seconds (``1h30m0s``).
    """

    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    value = abs(nanoseconds)
    if value < SECOND:
        for unit, scale in (("ms", MILLISECOND), ("µs", MICROSECOND)):
            if value >= scale:
                return f"{sign}{_fixed(value, scale)}{unit}"
        return f"{sign}{value}ns"

    hours, value = divmod(value, HOUR)
    minutes, value = divmod(value, MINUTE)
    text = f"{_fixed(value, SECOND)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def _fixed(value: int, scale: int) -> str:
    whole, rest = divmod(value, scale)
    if not rest:
        return str(whole)
    digits = len(str(scale)) - 1
    return f"{whole}.{rest:0{digits}d}".rstrip("0")


class Duration(int):
    """Integer nanosecond count that prints as a compact duration literal."""

    @classmethod
    def parse(cls, text: str) -> "Duration":
        return cls(parse_duration(text))

    @property
    def seconds(self) -> float:
        return int(self) / SECOND

    def to_timedelta(self) -> timedelta:
        """Return the duration as a ``timedelta``, truncated to microseconds."""

        micros = abs(int(self)) // MICROSECOND
        return timedelta(microseconds=-micros if self < 0 else micros)

    def __str__(self) -> str:
        return format_duration(int(self))

    def __repr__(self) -> str:
        return f"Duration({format_duration(int(self))!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        return core_schema.no_info_after_validator_function(
            cls, core_schema.int_schema()
        )


__all__ = [
    "Duration",
    "HOUR",
    "MICROSECOND",
    "MILLISECOND",
    "MINUTE",
    "NANOSECOND",
    "SECOND",
    "UNITS",
    "format_duration",
    "parse_duration",
]
