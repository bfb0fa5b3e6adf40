"""Type descriptors consumed by the schema builder.

A descriptor is a lightweight handle on the shape of a payload type. They
can be declared by hand or derived from Python annotations
(see restdoc.types.python).
"""

from enum import Enum
from typing import Callable, Iterable


class TypeKind(str, Enum):
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    POINTER = "pointer"
    SEQUENCE = "sequence"
    STRUCT = "struct"
    OPAQUE = "opaque"  # only usable through the known types table
    MAP = "map"
    FUNCTION = "function"
    CHANNEL = "channel"
    UNION = "union"
    ANY = "any"


PRIMITIVE_KINDS = {TypeKind.INTEGER, TypeKind.NUMBER, TypeKind.STRING, TypeKind.BOOLEAN}


class FieldDescriptor:
    """A single struct field: exposed name, type and visibility."""

    def __init__(self, name: str, type: "TypeDescriptor", exported: bool = True, embedded: bool = False):
        self.name = name
        self.type = type
        self.exported = exported
        self.embedded = embedded

    def __repr__(self) -> str:
        return f"FieldDescriptor({self.name!r}, {self.type!r}, exported={self.exported}, embedded={self.embedded})"


FieldSource = Iterable[FieldDescriptor] | Callable[[], Iterable[FieldDescriptor]]


class TypeDescriptor:
    """Shape of a type: kind, identity, element type or fields."""

    def __init__(
        self,
        kind: TypeKind,
        name: str = "",
        namespace: str = "",
        elem: "TypeDescriptor | None" = None,
        fields: FieldSource | None = None,
    ):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.elem = elem
        self._fields = fields

    @classmethod
    def primitive(cls, kind: TypeKind, name: str = "", namespace: str = "") -> "TypeDescriptor":
        if kind not in PRIMITIVE_KINDS:
            raise ValueError(f"{kind} is not a primitive kind")
        return cls(kind, name=name or kind.value, namespace=namespace)

    @classmethod
    def pointer(cls, elem: "TypeDescriptor") -> "TypeDescriptor":
        return cls(TypeKind.POINTER, elem=elem)

    @classmethod
    def sequence(cls, elem: "TypeDescriptor", name: str = "", namespace: str = "") -> "TypeDescriptor":
        return cls(TypeKind.SEQUENCE, name=name, namespace=namespace, elem=elem)

    @classmethod
    def struct(cls, name: str = "", namespace: str = "", fields: FieldSource | None = None) -> "TypeDescriptor":
        return cls(TypeKind.STRUCT, name=name, namespace=namespace, fields=fields if fields is not None else [])

    @property
    def fields(self) -> list[FieldDescriptor]:
        """Struct fields in declaration order. Lazy sources are resolved once."""
        if self._fields is None:
            return []
        if callable(self._fields):
            self._fields = list(self._fields())
        elif not isinstance(self._fields, list):
            self._fields = list(self._fields)
        return self._fields

    @fields.setter
    def fields(self, value: FieldSource) -> None:
        self._fields = value

    @property
    def is_anonymous(self) -> bool:
        return not self.name

    def _key(self) -> tuple:
        if self.name:
            return (self.kind, self.namespace, self.name)
        if self.elem is not None:
            return (self.kind, self.elem._key())
        return (self.kind, id(self))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        if self.elem is not None:
            return f"TypeDescriptor({self.kind.value}, elem={self.elem!r})"
        return f"TypeDescriptor({self.kind.value}, {self.namespace}/{self.name})"
