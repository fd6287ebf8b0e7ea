"""Bind tagged dataclass or pydantic fields from environment variables."""
from __future__ import annotations

import dataclasses
from datetime import timedelta
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from envbind.durations import Duration
from envbind.errors import MASK, EnvBindError, is_secret
from envbind.fields import FieldDescriptor, describe_fields, is_structure
from envbind.resolver import Environment, Lookup, RawValue, as_lookup, resolve
from envbind.scalars import coerce_scalar
from envbind.structured import decode_structured
from envbind.tags import DirectiveSet, parse_tag

DEFAULT_TAG_NAME = "env"

T = TypeVar("T")


def envfield(
    tag: str,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    tag_name: str = DEFAULT_TAG_NAME,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field bound by ``tag``.

    Shorthand for ``field(default=..., metadata={"env": tag})``.
    """

    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_name] = tag
    return dataclasses.field(
        default=default, default_factory=default_factory, metadata=metadata, **kwargs
    )


def _check_mutable(obj: Any) -> None:
    if isinstance(obj, type):
        raise TypeError(
            f"process() needs an instance, got the class {obj.__name__}"
        )
    cls = type(obj)
    if not is_structure(cls):
        raise TypeError(
            f"process() needs a dataclass or pydantic model instance, got {cls.__name__}"
        )
    if dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen:
        raise TypeError(f"{cls.__name__} is a frozen dataclass and cannot be bound")
    if isinstance(obj, BaseModel) and cls.model_config.get("frozen"):
        raise TypeError(f"{cls.__name__} is a frozen model and cannot be bound")


def _display(value: Any, path: str, key: str) -> str:
    if is_secret(path, key):
        return MASK
    if isinstance(value, timedelta):
        return str(Duration(value // timedelta(microseconds=1) * 1_000))
    if isinstance(value, Duration):
        return str(value)
    return repr(value)


def _convert(raw: RawValue, directives: DirectiveSet, descriptor: FieldDescriptor) -> Any:
    if descriptor.target.is_container:
        return decode_structured(raw.text, descriptor.target, directives.decode)
    return coerce_scalar(raw.text, descriptor.target)


def _bind_field(obj: Any, descriptor: FieldDescriptor, path: str, lookup: Lookup) -> bool:
    directives = parse_tag(descriptor.tag)
    raw = resolve(directives, lookup)
    if raw is None:
        logger.debug(f"{path}: {directives.key} is unset, keeping current value")
        return False
    try:
        value = _convert(raw, directives, descriptor)
    except EnvBindError as exc:
        if exc.key is None:
            exc.key = directives.key
        raise
    setattr(obj, descriptor.name, value)
    logger.debug(
        f"{path} = {_display(value, path, directives.key)} "
        f"[{raw.source} {directives.key}]"
    )
    return True


def _walk(obj: Any, prefix: str, lookup: Lookup, tag_name: str) -> int:
    bound = 0
    for descriptor in describe_fields(type(obj), tag_name):
        path = f"{prefix}.{descriptor.name}" if prefix else descriptor.name
        try:
            if descriptor.is_nested:
                nested = getattr(obj, descriptor.name, None)
                if nested is None:
                    logger.debug(f"{path}: nested structure is None, skipping")
                    continue
                _check_mutable(nested)
                bound += _walk(nested, path, lookup, tag_name)
            elif _bind_field(obj, descriptor, path, lookup):
                bound += 1
        except EnvBindError as exc:
            raise exc.at(descriptor.name)
    return bound


def process(
    obj: T,
    *,
    environ: Environment = None,
    tag_name: str = DEFAULT_TAG_NAME,
) -> T:
    """Populate the tagged fields of ``obj`` from the environment and return it.

    ``obj`` is a dataclass or pydantic model instance. Fields are visited in
    declaration order, recursing into untagged nested structures. The first
    failure aborts the pass and is raised as an :class:`EnvBindError`
    subclass naming the dotted field path; the failing field is left
    untouched.

    ``environ`` may be a mapping or a ``key -> Optional[str]`` callable and
    defaults to ``os.environ``.
    """

    _check_mutable(obj)
    lookup = as_lookup(environ)
    cls_name = type(obj).__name__
    bound = _walk(obj, "", lookup, tag_name)
    logger.info(f"Bound {bound} field(s) of {cls_name} from the environment")
    return obj


__all__ = ["DEFAULT_TAG_NAME", "envfield", "process"]
