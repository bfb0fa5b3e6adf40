"""Schema registry and caller supplied known type overrides."""

import datetime
import logging
import uuid
from collections.abc import Mapping
from typing import Any, Iterator, Optional

from restdoc.schema.models import Reference, Schema
from restdoc.types.base import TypeDescriptor
from restdoc.types.python import describe

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Named schema bodies for one document.

    Wraps the document's components/schemas mapping. A name, once
    registered, is only ever handed out again as a Reference.
    """

    def __init__(self, schemas: dict[str, Schema] | None = None):
        self.schemas = schemas if schemas is not None else {}

    def __contains__(self, name: str) -> bool:
        return name in self.schemas

    def __len__(self) -> int:
        return len(self.schemas)

    def __getitem__(self, name: str) -> Schema:
        return self.schemas[name]

    def register(self, name: str, schema: Schema) -> Reference:
        logger.debug("Registering schema %s", name)
        self.schemas[name] = schema
        return Reference.to(name)

    def ref(self, name: str) -> Reference:
        return Reference.to(name)

    def resolve(self, node: Reference | Schema) -> Schema:
        """Return the stored body for a reference, or the node itself."""
        if isinstance(node, Reference):
            return self.schemas[node.name]
        return node


class KnownTypes(Mapping):
    """Read-only mapping of type descriptor to a pre-built schema."""

    def __init__(self, types: Mapping[Any, Schema] | None = None):
        self._types: dict[TypeDescriptor, Schema] = {}
        for annotation, schema in (types or {}).items():
            self._types[describe(annotation)] = schema

    def __getitem__(self, key: Any) -> Schema:
        return self._types[describe(key)]

    def __contains__(self, key: object) -> bool:
        return describe(key) in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def merged(self, other: Mapping[Any, Schema] | None) -> "KnownTypes":
        """Return a new table with other's entries taking precedence."""
        result = KnownTypes()
        result._types.update(self._types)
        if other:
            result._types.update(KnownTypes(other)._types)
        return result


def _formatted(fmt: str, nullable: bool = False) -> Schema:
    return Schema(type="string", format=fmt, nullable=nullable)


DEFAULT_KNOWN_TYPES = KnownTypes(
    {
        datetime.datetime: _formatted("date-time"),
        Optional[datetime.datetime]: _formatted("date-time", nullable=True),
        datetime.date: _formatted("date"),
        Optional[datetime.date]: _formatted("date", nullable=True),
        uuid.UUID: _formatted("uuid"),
        Optional[uuid.UUID]: _formatted("uuid", nullable=True),
        bytes: _formatted("byte"),
        Optional[bytes]: _formatted("byte", nullable=True),
    }
)
