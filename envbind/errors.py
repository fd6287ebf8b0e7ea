"""Exception hierarchy raised while binding environment variables."""
from __future__ import annotations

from typing import Any, Optional

SECRET_TOKENS = ("password", "secret", "token", "credential", "api_key")
MASK = "***masked***"


def is_secret(*names: Optional[str]) -> bool:
    """Return True when any of ``names`` looks like it holds a credential."""

    for name in names:
        if not name:
            continue
        lowered = name.lower()
        if any(token in lowered for token in SECRET_TOKENS):
            return True
    return False


class EnvBindError(RuntimeError):
    """Base class for every binding failure.

    ``field`` is the dotted path of the offending field and is filled in by
    the traversal driver, ``key`` the environment variable it was bound to
    and ``raw`` the text that failed to parse, when there is one.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        key: Optional[str] = None,
        raw: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.key = key
        self.raw = raw

    def at(self, path: str, key: Optional[str] = None) -> "EnvBindError":
        """Prefix the field path with ``path`` and return ``self`` for re-raising."""

        if self.field:
            separator = "" if self.field.startswith("[") else "."
            self.field = f"{path}{separator}{self.field}"
        else:
            self.field = path
        if key and not self.key:
            self.key = key
        return self

    def __str__(self) -> str:
        parts: list[str] = []
        if self.field:
            parts.append(f"{self.field}: ")
        parts.append(self.message)
        if self.key:
            parts.append(f" [env {self.key}]")
        if self.raw is not None:
            shown = MASK if is_secret(self.field, self.key) else repr(self.raw)
            parts.append(f" (received={shown})")
        return "".join(parts)


class MalformedTagError(EnvBindError):
    """The tag annotation does not follow the ``option=value`` grammar."""


class MissingKeyError(MalformedTagError):
    """The tag annotation has no ``key`` option."""


class UnknownTagOptionError(MalformedTagError):
    """The tag annotation names an option other than the recognized four."""


class UnknownDecodeFormatError(MalformedTagError):
    """``decode`` names a format that is not ``auto``, ``yaml`` or ``json``."""


class RequiredValueMissingError(EnvBindError):
    """A required variable is unset and the tag declares no default."""


class UnsupportedFieldTypeError(EnvBindError):
    """The field's declared type has no coercion rule."""


class CoercionError(EnvBindError, ValueError):
    """Raw text could not be converted into the target type."""


class InvalidBoolError(CoercionError):
    pass


class InvalidNumberError(CoercionError):
    pass


class InvalidDurationError(CoercionError):
    pass


class InvalidStructuredValueError(CoercionError):
    """Structured text is malformed or does not match the declared shape."""

    def __init__(self, message: str, *, target: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.target = target


__all__ = [
    "MASK",
    "SECRET_TOKENS",
    "CoercionError",
    "EnvBindError",
    "InvalidBoolError",
    "InvalidDurationError",
    "InvalidNumberError",
    "InvalidStructuredValueError",
    "MalformedTagError",
    "MissingKeyError",
    "RequiredValueMissingError",
    "UnknownDecodeFormatError",
    "UnknownTagOptionError",
    "UnsupportedFieldTypeError",
    "is_secret",
]
