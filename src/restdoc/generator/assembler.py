"""Builds the paths section of a document from a route table."""

import logging
from collections.abc import Iterable, Mapping

from restdoc.generator.routes import ALL_METHODS, MethodSpec, Route
from restdoc.schema.builder import SchemaBuilder
from restdoc.schema.models import JSON_MEDIA_TYPE, MediaType, Operation, PathItem, RequestBody, Response

logger = logging.getLogger(__name__)

RouteTable = Mapping[str, Route] | Iterable[Route]


def iter_routes(routes: RouteTable) -> Iterable[Route]:
    """Accept either a path -> Route mapping or a plain iterable of routes."""
    if isinstance(routes, Mapping):
        return routes.values()
    return routes


class RouteAssembler:
    """Turns routes into path items, deriving payload schemas on the way."""

    def __init__(self, builder: SchemaBuilder):
        self.builder = builder

    def assemble(self, routes: RouteTable) -> dict[str, PathItem]:
        paths: dict[str, PathItem] = {}
        for route in iter_routes(routes):
            paths[route.path] = self.assemble_route(route)
        return paths

    def assemble_route(self, route: Route) -> PathItem:
        path = PathItem()
        for method in ALL_METHODS:
            spec = route.methods.get(method)
            if spec is None:
                continue
            logger.debug("Assembling %s %s", method, route.path)
            path.set_operation(method, self._operation(spec))
        return path

    def _operation(self, spec: MethodSpec) -> Operation:
        op = Operation()
        if spec.request is not None:
            op.request_body = RequestBody(
                description="",
                content={JSON_MEDIA_TYPE: MediaType(schema_=self.builder.derive(spec.request))},
            )
        for status in sorted(spec.responses):
            op.add_response(
                status,
                Response(
                    description="",
                    content={JSON_MEDIA_TYPE: MediaType(schema_=self.builder.derive(spec.responses[status]))},
                ),
            )
        return op
