"""Target type analysis and the per-class field descriptor table."""
from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import annotated_types
from pydantic import BaseModel
from pydantic.fields import FieldInfo

from envbind.durations import Duration
from envbind.errors import UnsupportedFieldTypeError


class Kind(str, Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    PATH = "path"
    DURATION = "duration"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    STRUCT = "struct"


SCALAR_KINDS = frozenset(
    {Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.STR, Kind.PATH, Kind.DURATION}
)
CONTAINER_KINDS = frozenset({Kind.SEQUENCE, Kind.MAPPING})


@dataclass(frozen=True)
class FloatWidth:
    """Marks a float field as limited to an IEEE 754 width (32 or 64 bits)."""

    bits: int


@dataclass(frozen=True)
class TargetType:
    """What a raw string has to become for one field or container slot."""

    kind: Kind
    python_type: Any
    args: Tuple["TargetType", ...] = ()
    constraints: Tuple[Any, ...] = ()

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS

    def describe(self) -> str:
        name = getattr(self.python_type, "__name__", str(self.python_type))
        if self.kind is Kind.SEQUENCE:
            if self.python_type is tuple:
                return f"tuple[{self.args[0].describe()}, ...]"
            return f"{name}[{self.args[0].describe()}]"
        if self.kind is Kind.MAPPING:
            return f"dict[{self.args[0].describe()}, {self.args[1].describe()}]"
        return name

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class FieldDescriptor:
    """One bindable field: its name, raw tag text and target type."""

    name: str
    tag: Optional[str]
    target: TargetType

    @property
    def is_nested(self) -> bool:
        return self.tag is None and self.target.kind is Kind.STRUCT


_SCALARS = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT,
    str: Kind.STR,
    Path: Kind.PATH,
    timedelta: Kind.DURATION,
    Duration: Kind.DURATION,
}

_SEQUENCE_ORIGINS = {
    list: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    tuple: tuple,
    set: set,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
    frozenset: frozenset,
}

_MAPPING_ORIGINS = {
    dict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}

_UNION_TYPES = (typing.Union, types.UnionType)


def is_structure(candidate: Any) -> bool:
    """Return True for dataclass types and pydantic model classes."""

    if not isinstance(candidate, type) or typing.get_origin(candidate) is not None:
        return False
    return dataclasses.is_dataclass(candidate) or issubclass(candidate, BaseModel)


def _expand_metadata(items: Iterable[Any]) -> List[Any]:
    expanded: List[Any] = []
    for item in items:
        if isinstance(item, FieldInfo):
            expanded.extend(_expand_metadata(item.metadata))
        elif isinstance(item, annotated_types.GroupedMetadata):
            expanded.extend(_expand_metadata(iter(item)))
        else:
            expanded.append(item)
    return expanded


def _unwrap(annotation: Any) -> Tuple[Any, List[Any]]:
    """Strip ``Annotated`` and ``Optional`` layers, collecting metadata."""

    metadata: List[Any] = []
    while True:
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated:
            metadata.extend(_expand_metadata(annotation.__metadata__))
            annotation = annotation.__origin__
            continue
        if origin in _UNION_TYPES:
            members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(members) == 1:
                annotation = members[0]
                continue
        return annotation, metadata


def _numeric_constraints(metadata: Iterable[Any]) -> Tuple[Any, ...]:
    kept = (
        annotated_types.Gt,
        annotated_types.Ge,
        annotated_types.Lt,
        annotated_types.Le,
        FloatWidth,
    )
    return tuple(item for item in metadata if isinstance(item, kept))


def describe_type(annotation: Any, metadata: Iterable[Any] = ()) -> TargetType:
    """Build the :class:`TargetType` for ``annotation``.

    Raises :class:`UnsupportedFieldTypeError` for annotations without a
    coercion rule.
    """

    annotation, found = _unwrap(annotation)
    constraints = _numeric_constraints([*_expand_metadata(metadata), *found])

    if typing.get_origin(annotation) is None and annotation in _SCALARS:
        kind = _SCALARS[annotation]
        if kind not in (Kind.INT, Kind.FLOAT):
            constraints = ()
        return TargetType(kind=kind, python_type=annotation, constraints=constraints)

    if is_structure(annotation):
        return TargetType(kind=Kind.STRUCT, python_type=annotation)

    origin = typing.get_origin(annotation) or annotation
    args = typing.get_args(annotation)

    if origin in _SEQUENCE_ORIGINS:
        container = _SEQUENCE_ORIGINS[origin]
        if container is tuple and args:
            if len(args) != 2 or args[1] is not Ellipsis:
                raise UnsupportedFieldTypeError(
                    f"only homogeneous tuple[T, ...] is supported, not {annotation!r}"
                )
            args = args[:1]
        element = _element(args[0] if args else str, annotation)
        if container in (set, frozenset) and element.is_container:
            raise UnsupportedFieldTypeError(
                f"set elements must be hashable scalars, not {element.describe()}"
            )
        return TargetType(kind=Kind.SEQUENCE, python_type=container, args=(element,))

    if origin in _MAPPING_ORIGINS:
        key_annotation, value_annotation = args if args else (str, str)
        key = _element(key_annotation, annotation)
        if not key.is_scalar:
            raise UnsupportedFieldTypeError(
                f"mapping keys must be scalar, not {key.describe()}"
            )
        value = _element(value_annotation, annotation)
        return TargetType(kind=Kind.MAPPING, python_type=dict, args=(key, value))

    raise UnsupportedFieldTypeError(f"no coercion rule for type {annotation!r}")


def _element(annotation: Any, parent: Any) -> TargetType:
    target = describe_type(annotation)
    if target.kind is Kind.STRUCT:
        raise UnsupportedFieldTypeError(
            f"structures cannot be decoded from text inside {parent!r}"
        )
    return target


def _nested_structure(annotation: Any) -> Optional[type]:
    annotation, _ = _unwrap(annotation)
    return annotation if is_structure(annotation) else None


def _iter_declared(cls: type, tag_name: str) -> Iterable[Tuple[str, Any, List[Any], Optional[str]]]:
    if issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            tag = extra.get(tag_name)
            yield name, info.annotation, list(info.metadata), tag
        return
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as exc:
        raise UnsupportedFieldTypeError(
            f"cannot resolve the annotations of {cls.__qualname__}: {exc}"
        ) from exc
    for item in dataclasses.fields(cls):
        tag = item.metadata.get(tag_name) if item.metadata else None
        yield item.name, hints.get(item.name, item.type), [], tag


@lru_cache(maxsize=None)
def describe_fields(cls: type, tag_name: str) -> Tuple[FieldDescriptor, ...]:
    """Return the descriptor table for ``cls``, in declaration order.

    Tagged fields get a full target type; untagged fields appear only when
    they hold a nested structure to recurse into. Underscore-prefixed names
    are not part of the table.
    """

    if not is_structure(cls):
        raise TypeError(f"{cls!r} is not a dataclass or pydantic model")

    table: List[FieldDescriptor] = []
    for name, annotation, metadata, tag in _iter_declared(cls, tag_name):
        if name.startswith("_"):
            continue
        if tag is None:
            nested = _nested_structure(annotation)
            if nested is not None:
                table.append(
                    FieldDescriptor(
                        name=name,
                        tag=None,
                        target=TargetType(kind=Kind.STRUCT, python_type=nested),
                    )
                )
            continue
        if not isinstance(tag, str):
            raise TypeError(f"{cls.__name__}.{name}: tag must be a string, got {tag!r}")
        try:
            target = describe_type(annotation, metadata)
        except UnsupportedFieldTypeError as exc:
            raise exc.at(name)
        if target.kind is Kind.STRUCT:
            raise UnsupportedFieldTypeError(
                "nested structures are bound field by field and cannot carry a tag",
                field=name,
            )
        table.append(FieldDescriptor(name=name, tag=tag, target=target))
    return tuple(table)


__all__ = [
    "CONTAINER_KINDS",
    "SCALAR_KINDS",
    "FieldDescriptor",
    "FloatWidth",
    "Kind",
    "TargetType",
    "describe_fields",
    "describe_type",
    "is_structure",
]
