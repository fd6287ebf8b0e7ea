"""Resolve a field's raw text from the environment or its declared default."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union

from envbind.errors import RequiredValueMissingError
from envbind.tags import DirectiveSet

Lookup = Callable[[str], Optional[str]]
Environment = Union[Mapping[str, str], Lookup, None]


@dataclass(frozen=True)
class RawValue:
    """Text awaiting coercion and where it came from."""

    text: str
    from_env: bool

    @property
    def source(self) -> str:
        return "env" if self.from_env else "default"


def as_lookup(environ: Environment = None) -> Lookup:
    """Normalize a mapping, a callable or ``None`` (``os.environ``) into a lookup."""

    if environ is None:
        return os.environ.get
    if callable(environ) and not isinstance(environ, Mapping):
        return environ
    return environ.get


def resolve(directives: DirectiveSet, lookup: Lookup) -> Optional[RawValue]:
    """Return the raw value for ``directives`` or ``None`` when the field is skipped.

    A present variable wins over the default, including when it is empty.
    """

    value = lookup(directives.key)
    if value is not None:
        return RawValue(text=value, from_env=True)
    if directives.has_default:
        return RawValue(text=directives.default, from_env=False)
    if directives.required:
        raise RequiredValueMissingError(
            "required variable is not set", key=directives.key
        )
    return None


__all__ = ["Environment", "Lookup", "RawValue", "as_lookup", "resolve"]
