"""OpenAPI 3.0 document models.

The generator builds these in memory, then serializes them for the
validation round trip.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from restdoc.errors import UnknownMethodError

OPENAPI_VERSION = "3.0.0"
COMPONENTS_PREFIX = "#/components/schemas/"
JSON_MEDIA_TYPE = "application/json"


class Reference(BaseModel):
    """Pointer to a schema registered under components/schemas."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    ref: str = Field(alias="$ref")

    @classmethod
    def to(cls, name: str) -> "Reference":
        return cls(ref=COMPONENTS_PREFIX + name)

    @property
    def name(self) -> str:
        return self.ref.removeprefix(COMPONENTS_PREFIX)


class Schema(BaseModel):
    """A schema body: primitive, array or object."""

    model_config = ConfigDict(extra="forbid")

    type: str | None = None
    format: str | None = None
    description: str | None = None
    nullable: bool = False
    items: "Reference | Schema | None" = None
    properties: "dict[str, Reference | Schema] | None" = None
    enum: list[Any] | None = None
    example: Any = None


Schema.model_rebuild()

SchemaOrRef = Reference | Schema


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: SchemaOrRef | None = Field(default=None, alias="schema")


class RequestBody(BaseModel):
    description: str | None = None
    content: dict[str, MediaType] = {}


class Response(BaseModel):
    description: str = ""
    content: dict[str, MediaType] = {}


class Operation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}

    def add_response(self, status: int, response: Response) -> None:
        self.responses[str(status)] = response


class PathItem(BaseModel):
    """Operations available on a single path."""

    model_config = ConfigDict(populate_by_name=True)

    get: Operation | None = None
    head: Operation | None = None
    post: Operation | None = None
    put: Operation | None = None
    patch: Operation | None = None
    delete: Operation | None = None
    # OpenAPI 3.0 has no connect field on a path item
    connect: Operation | None = Field(default=None, alias="x-connect")
    options: Operation | None = None
    trace: Operation | None = None

    def set_operation(self, method: str, operation: Operation) -> None:
        token = str(getattr(method, "value", method))
        attr = token.lower()
        if attr not in _OPERATION_FIELDS:
            raise UnknownMethodError(token)
        setattr(self, attr, operation)

    def operations(self) -> dict[str, Operation]:
        return {m.upper(): op for m in _OPERATION_FIELDS if (op := getattr(self, m)) is not None}


_OPERATION_FIELDS = ("get", "head", "post", "put", "patch", "delete", "connect", "options", "trace")


class Info(BaseModel):
    title: str
    version: str = "0.0.0"


class Components(BaseModel):
    schemas: dict[str, Schema] = {}


class OpenAPI(BaseModel):
    """Top level API document."""

    openapi: str = OPENAPI_VERSION
    info: Info
    components: Components = Field(default_factory=Components)
    paths: dict[str, PathItem] = {}

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def new_document(title: str, version: str = "0.0.0") -> OpenAPI:
    return OpenAPI(info=Info(title=title, version=version))
