"""Decode sequence and mapping values from flow-style YAML or JSON text.

Every decode format resolves to the same loader. JSON literals are YAML flow
collections, so a single YAML parser accepts ``[a,b]``, ``{a: A}``,
``["a","b"]`` and ``{"a":"A"}`` alike, whether the tag says ``decode=yaml``,
``decode=json`` or nothing at all. The loader is PyYAML's ``BaseLoader``,
which keeps every scalar as text; element conversion is left to the scalar
coercer so ``[1, 2]`` means the same thing for ``list[str]`` and
``list[int]``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List

import yaml

from envbind.errors import (
    EnvBindError,
    InvalidStructuredValueError,
    UnsupportedFieldTypeError,
)
from envbind.fields import Kind, TargetType
from envbind.scalars import coerce_scalar
from envbind.tags import DecodeFormat


def load_superset(text: str) -> Any:
    """Parse ``text`` as a YAML document whose scalars all stay strings."""

    return yaml.load(text, Loader=yaml.BaseLoader)


LOADERS: Dict[DecodeFormat, Callable[[str], Any]] = {
    DecodeFormat.AUTO: load_superset,
    DecodeFormat.YAML: load_superset,
    DecodeFormat.JSON: load_superset,
}


def decode_structured(
    raw: str,
    target: TargetType,
    decode: DecodeFormat = DecodeFormat.AUTO,
) -> Any:
    """Convert ``raw`` into the container described by ``target``.

    Blank text decodes to an empty container of the declared type.
    """

    if not target.is_container:
        raise UnsupportedFieldTypeError(f"{target.describe()} is not a container type")

    if not raw.strip():
        return _empty(target)

    try:
        document = LOADERS[decode](raw)
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or str(exc).splitlines()[0]
        raise InvalidStructuredValueError(
            f"malformed {target.describe()} literal: {problem}",
            raw=raw,
            target=target,
        ) from exc

    if document is None:
        return _empty(target)
    return _build(document, target, raw)


def _empty(target: TargetType) -> Any:
    return target.python_type()


def _build(node: Any, target: TargetType, raw: str) -> Any:
    if target.kind is Kind.SEQUENCE:
        if not isinstance(node, list):
            raise _shape_error(node, target, raw)
        element = target.args[0]
        items: List[Any] = []
        for index, item in enumerate(node):
            try:
                items.append(_convert(item, element, raw))
            except EnvBindError as exc:
                raise exc.at(f"[{index}]")
        return target.python_type(items)

    if not isinstance(node, dict):
        raise _shape_error(node, target, raw)
    key_target, value_target = target.args
    result: Dict[Any, Any] = {}
    for key, value in node.items():
        try:
            converted_key = _convert(key, key_target, raw)
            result[converted_key] = _convert(value, value_target, raw)
        except EnvBindError as exc:
            raise exc.at(f"[{key}]")
    return result


def _convert(node: Any, target: TargetType, raw: str) -> Any:
    if target.is_container:
        return _build(node, target, raw)
    if not isinstance(node, str):
        raise _shape_error(node, target, raw)
    return coerce_scalar(node, target)


def _shape_error(node: Any, target: TargetType, raw: str) -> InvalidStructuredValueError:
    found = {list: "sequence", dict: "mapping"}.get(type(node), "scalar")
    return InvalidStructuredValueError(
        f"expected {target.describe()}, found a {found}",
        raw=raw,
        target=target,
    )


__all__ = ["LOADERS", "decode_structured", "load_superset"]
