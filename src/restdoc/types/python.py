"""Derive type descriptors from Python annotations.

Supports dataclasses and pydantic models as structs, the builtin scalar
types, Optional[...] as a pointer and homogeneous containers as sequences.
Field naming is declared explicitly:

    @dataclass
    class User:
        id: int = field(metadata=field_meta(name="id"))
        base: Base = field(metadata=field_meta(embedded=True))

Pydantic models use the field alias as the exposed name, ``exclude=True``
to hide a field and ``json_schema_extra={"embedded": True}`` to embed it.
"""

import asyncio
import collections.abc
import dataclasses
import queue
import types
import typing
from typing import Annotated, Any, Union

from pydantic import BaseModel

from restdoc.types.base import FieldDescriptor, TypeDescriptor, TypeKind

META_NAME = "json"
META_EMBEDDED = "embedded"
META_EXPORTED = "exported"

_SCALARS = {
    bool: TypeKind.BOOLEAN,
    int: TypeKind.INTEGER,
    float: TypeKind.NUMBER,
    str: TypeKind.STRING,
}

_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)

_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def field_meta(name: str | None = None, embedded: bool = False, exported: bool | None = None) -> dict:
    """Build dataclass field metadata understood by describe()."""
    meta: dict[str, Any] = {}
    if name:
        meta[META_NAME] = name
    if embedded:
        meta[META_EMBEDDED] = True
    if exported is not None:
        meta[META_EXPORTED] = exported
    return meta


def describe(annotation: Any) -> TypeDescriptor:
    """Return the descriptor for a Python annotation."""
    if isinstance(annotation, TypeDescriptor):
        return annotation

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is Annotated:
        return describe(args[0])

    if origin is Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        if len(members) == 1 and len(members) < len(args):
            return TypeDescriptor.pointer(describe(members[0]))
        return TypeDescriptor(TypeKind.UNION, name=_union_name(members))

    if annotation is Any:
        return TypeDescriptor(TypeKind.ANY, name="Any", namespace="typing")

    if origin is not None:
        return _describe_generic(annotation, origin, args)

    if not isinstance(annotation, type):
        return TypeDescriptor(TypeKind.ANY, name=repr(annotation))

    namespace, name = _identity(annotation)
    if annotation in _SCALARS:
        return TypeDescriptor(_SCALARS[annotation], name=name, namespace=namespace)
    if dataclasses.is_dataclass(annotation):
        return TypeDescriptor.struct(name, namespace, fields=lambda: _dataclass_fields(annotation))
    if issubclass(annotation, BaseModel):
        return TypeDescriptor.struct(name, namespace, fields=lambda: _model_fields(annotation))
    if issubclass(annotation, (queue.Queue, asyncio.Queue)):
        return TypeDescriptor(TypeKind.CHANNEL, name=name, namespace=namespace)
    if issubclass(annotation, (str, bytes, bytearray)) and annotation is not str:
        return TypeDescriptor(TypeKind.OPAQUE, name=name, namespace=namespace)
    if issubclass(annotation, _MAP_ORIGINS):
        return TypeDescriptor(TypeKind.MAP, name=name, namespace=namespace)
    if issubclass(annotation, (list, tuple, set, frozenset)):
        # bare containers carry no element type
        return TypeDescriptor(TypeKind.ANY, name=name, namespace=namespace)
    if annotation is collections.abc.Callable:
        return TypeDescriptor(TypeKind.FUNCTION, name=name, namespace=namespace)
    return TypeDescriptor(TypeKind.OPAQUE, name=name, namespace=namespace)


def _describe_generic(annotation: Any, origin: Any, args: tuple) -> TypeDescriptor:
    name = repr(annotation)
    if origin is collections.abc.Callable:
        return TypeDescriptor(TypeKind.FUNCTION, name=name)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeDescriptor.sequence(describe(args[0]))
        return TypeDescriptor(TypeKind.UNION, name=name)
    if origin in _SEQUENCE_ORIGINS:
        return TypeDescriptor.sequence(describe(args[0]) if args else TypeDescriptor(TypeKind.ANY))
    if origin in _MAP_ORIGINS:
        return TypeDescriptor(TypeKind.MAP, name=name)
    if isinstance(origin, type) and issubclass(origin, (queue.Queue, asyncio.Queue)):
        return TypeDescriptor(TypeKind.CHANNEL, name=name)
    return TypeDescriptor(TypeKind.ANY, name=name)


def _identity(cls: type) -> tuple[str, str]:
    return cls.__module__.replace(".", "/"), cls.__qualname__


def _union_name(members: list) -> str:
    return " | ".join(getattr(m, "__qualname__", repr(m)) for m in members)


def _dataclass_fields(cls: type) -> list[FieldDescriptor]:
    hints = typing.get_type_hints(cls, include_extras=True)
    result = []
    for f in dataclasses.fields(cls):
        meta = f.metadata
        result.append(
            FieldDescriptor(
                name=meta.get(META_NAME) or f.name,
                type=describe(hints.get(f.name, f.type)),
                exported=meta.get(META_EXPORTED, not f.name.startswith("_")),
                embedded=bool(meta.get(META_EMBEDDED, False)),
            )
        )
    return result


def _model_fields(cls: type[BaseModel]) -> list[FieldDescriptor]:
    result = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        result.append(
            FieldDescriptor(
                name=info.serialization_alias or info.alias or name,
                type=describe(info.annotation),
                exported=not info.exclude and not name.startswith("_"),
                embedded=bool(extra.get(META_EMBEDDED, False)),
            )
        )
    return result
