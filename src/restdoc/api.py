"""Top level entry points for generating an API document."""

import logging
from typing import Any, Iterable, Mapping

from restdoc.errors import RestDocError
from restdoc.generator.assembler import RouteAssembler, RouteTable
from restdoc.generator.finalizer import finalize_document
from restdoc.generator.routes import HTTPMethod, MethodSpec, Route
from restdoc.schema.builder import SchemaBuilder
from restdoc.schema.models import OpenAPI, Schema, new_document
from restdoc.schema.registry import DEFAULT_KNOWN_TYPES, KnownTypes, SchemaRegistry

logger = logging.getLogger(__name__)


def create_openapi(
    routes: RouteTable,
    title: str,
    version: str = "0.0.0",
    known_types: Mapping[Any, Schema] | None = None,
    strip_pkg_paths: Iterable[str] = (),
) -> OpenAPI:
    """Generate and validate a document for a route table.

    Each call uses its own registry. known_types is merged over
    DEFAULT_KNOWN_TYPES. Errors carry the partially built document as
    ``err.document``.
    """
    doc = new_document(title, version)
    registry = SchemaRegistry(doc.components.schemas)
    builder = SchemaBuilder(
        registry,
        known_types=DEFAULT_KNOWN_TYPES.merged(known_types),
        strip_pkg_paths=strip_pkg_paths,
    )
    try:
        doc.paths = RouteAssembler(builder).assemble(routes)
    except RestDocError as e:
        e.document = doc
        raise
    return finalize_document(doc)


class Api:
    """Route table plus the settings used to document it.

    Routes are declared fluently:

        api = Api("Users")
        api.get("/users").has_response_model(200, list[User])
        api.post("/users").has_request_model(User).has_response_model(201, User)
        doc = api.spec()
    """

    def __init__(
        self,
        name: str,
        version: str = "0.0.0",
        known_types: Mapping[Any, Schema] | None = None,
        strip_pkg_paths: Iterable[str] = (),
    ):
        self.name = name
        self.version = version
        self.routes: dict[str, Route] = {}
        self.known_types: KnownTypes = DEFAULT_KNOWN_TYPES.merged(known_types)
        self.strip_pkg_paths = list(strip_pkg_paths)

    def route(self, path: str) -> Route:
        if path not in self.routes:
            self.routes[path] = Route(path=path)
        return self.routes[path]

    def method(self, method: HTTPMethod | str, path: str) -> MethodSpec:
        return self.route(path).method(method)

    def get(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.GET, path)

    def head(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.HEAD, path)

    def post(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.POST, path)

    def put(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.PUT, path)

    def patch(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.PATCH, path)

    def delete(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.DELETE, path)

    def connect(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.CONNECT, path)

    def options(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.OPTIONS, path)

    def trace(self, path: str) -> MethodSpec:
        return self.method(HTTPMethod.TRACE, path)

    def spec(self) -> OpenAPI:
        logger.debug("Generating document for %s (%d routes)", self.name, len(self.routes))
        return create_openapi(
            self.routes,
            title=self.name,
            version=self.version,
            known_types=self.known_types,
            strip_pkg_paths=self.strip_pkg_paths,
        )
