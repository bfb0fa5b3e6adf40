"""Recursive conversion of type descriptors into schema nodes.

Structs and known types are registered once under their normalized name
and referenced everywhere else. Primitives and arrays are inlined at the
point of use.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from restdoc.errors import UnsupportedTypeError
from restdoc.schema.models import Reference, Schema
from restdoc.schema.naming import normalize_type_name
from restdoc.schema.registry import KnownTypes, SchemaRegistry
from restdoc.types.base import TypeDescriptor, TypeKind
from restdoc.types.python import describe

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = {
    TypeKind.STRING: "string",
    TypeKind.INTEGER: "integer",
    TypeKind.NUMBER: "number",
    TypeKind.BOOLEAN: "boolean",
}


@dataclass(frozen=True)
class DeriveOptions:
    is_optional: bool = False  # reached through a pointer
    is_embedded: bool = False  # flattened into the enclosing object


class SchemaBuilder:
    """Converts types into schemas, populating a registry as it goes."""

    def __init__(
        self,
        registry: SchemaRegistry,
        known_types: Mapping[Any, Schema] | None = None,
        strip_pkg_paths: Iterable[str] = (),
    ):
        self.registry = registry
        self.known_types = known_types if isinstance(known_types, KnownTypes) else KnownTypes(known_types)
        self.strip_pkg_paths = tuple(strip_pkg_paths)
        self._embedding: list[TypeDescriptor] = []
        self._building: set[str] = set()

    def derive(self, annotation: Any, opts: DeriveOptions = DeriveOptions()) -> Reference | Schema:
        """Return the schema, or a reference to it, for a type."""
        t = describe(annotation)
        name = self.schema_name(t)

        if name in self.registry:
            return self.registry.ref(name)

        known = self.known_types.get(t)
        if known is not None:
            logger.debug("Using known schema for %s", name)
            return self.registry.register(name, known.model_copy(deep=True))

        kind = t.kind
        if kind is TypeKind.SEQUENCE:
            # an absent sequence cannot be told apart from an empty one
            return Schema(type="array", nullable=True, items=self.derive(t.elem))
        if kind in PRIMITIVE_TYPES:
            return Schema(type=PRIMITIVE_TYPES[kind], nullable=opts.is_optional)
        if kind is TypeKind.POINTER:
            return self.derive(t.elem, DeriveOptions(is_optional=True))
        if kind is TypeKind.STRUCT:
            return self._derive_struct(t, name, opts)

        raise UnsupportedTypeError(t.namespace, t.name, reason=f"unsupported type kind {kind.value}")

    def schema_name(self, t: TypeDescriptor) -> str:
        """Component name for a type. Pointers share the pointee's identity."""
        namespace, name = t.namespace, t.name
        if t.kind is TypeKind.POINTER and t.elem is not None:
            namespace = t.elem.namespace
            name = t.elem.name + "Ptr" if t.elem.name else ""
        if not name:
            return f"AnonymousType{len(self.registry)}"
        return normalize_type_name(namespace, name, self.strip_pkg_paths)

    def _derive_struct(self, t: TypeDescriptor, name: str, opts: DeriveOptions) -> Reference | Schema:
        schema = Schema(type="object", properties={})
        if not opts.is_embedded:
            # registered before the fields are walked so cycles end in a reference
            self.registry.register(name, schema)
            self._building.add(name)

        try:
            for field in t.fields:
                if not field.exported:
                    continue
                if field.embedded:
                    schema.properties.update(self._embedded_properties(t, field.type))
                    continue
                schema.properties[field.name] = self.derive(field.type)
        finally:
            if not opts.is_embedded:
                self._building.discard(name)

        if opts.is_embedded:
            return schema
        return self.registry.ref(name)

    def _embedded_properties(self, owner: TypeDescriptor, embedded: TypeDescriptor) -> dict:
        target = embedded.elem if embedded.kind is TypeKind.POINTER and embedded.elem is not None else embedded
        if target == owner or target in self._embedding:
            raise UnsupportedTypeError(target.namespace, target.name, reason="recursive embedding")

        self._embedding.append(owner)
        try:
            name = self.schema_name(target)
            if target.kind is TypeKind.STRUCT and name in self._building:
                # the registered body is still a placeholder, so walk the fields
                node = self._derive_struct(target, name, DeriveOptions(is_embedded=True))
            else:
                node = self.derive(embedded, DeriveOptions(is_embedded=True))
        finally:
            self._embedding.pop()

        # already registered standalone, so copy from the stored body
        body = self.registry.resolve(node)
        if body.properties is None:
            raise UnsupportedTypeError(embedded.namespace, embedded.name, reason="embedded type is not an object")
        return dict(body.properties)
