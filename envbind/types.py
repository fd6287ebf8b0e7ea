"""Fixed-width numeric aliases for configuration fields.

Python integers are unbounded, so width is expressed as an inclusive range
attached through ``Annotated``. Pydantic models honour the same bounds.
"""
from __future__ import annotations

from typing import Annotated

from annotated_types import Interval

from envbind.fields import FloatWidth

Int8 = Annotated[int, Interval(ge=-(2**7), le=2**7 - 1)]
Int16 = Annotated[int, Interval(ge=-(2**15), le=2**15 - 1)]
Int32 = Annotated[int, Interval(ge=-(2**31), le=2**31 - 1)]
Int64 = Annotated[int, Interval(ge=-(2**63), le=2**63 - 1)]

Uint8 = Annotated[int, Interval(ge=0, le=2**8 - 1)]
Uint16 = Annotated[int, Interval(ge=0, le=2**16 - 1)]
Uint32 = Annotated[int, Interval(ge=0, le=2**32 - 1)]
Uint64 = Annotated[int, Interval(ge=0, le=2**64 - 1)]

Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]

__all__ = [
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
]
