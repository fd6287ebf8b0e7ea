"""Bind typed configuration objects from tagged environment variables."""
from __future__ import annotations

from loguru import logger

from .binder import DEFAULT_TAG_NAME, envfield, process
from .durations import Duration, format_duration, parse_duration
from .errors import (
    CoercionError,
    EnvBindError,
    InvalidBoolError,
    InvalidDurationError,
    InvalidNumberError,
    InvalidStructuredValueError,
    MalformedTagError,
    MissingKeyError,
    RequiredValueMissingError,
    UnknownDecodeFormatError,
    UnknownTagOptionError,
    UnsupportedFieldTypeError,
)
from .types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from .version import __version__

# Silent unless the application calls logger.enable("envbind").
logger.disable("envbind")

__all__ = [
    "DEFAULT_TAG_NAME",
    "CoercionError",
    "Duration",
    "EnvBindError",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidBoolError",
    "InvalidDurationError",
    "InvalidNumberError",
    "InvalidStructuredValueError",
    "MalformedTagError",
    "MissingKeyError",
    "RequiredValueMissingError",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "UnknownDecodeFormatError",
    "UnknownTagOptionError",
    "UnsupportedFieldTypeError",
    "envfield",
    "format_duration",
    "parse_duration",
    "process",
    "__version__",
]
