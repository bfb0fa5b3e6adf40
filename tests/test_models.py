import pytest
from pydantic import ValidationError

from restdoc.errors import UnknownMethodError
from restdoc.generator.routes import HTTPMethod, MethodSpec, Route
from restdoc.schema.models import (
    COMPONENTS_PREFIX,
    MediaType,
    OpenAPI,
    Operation,
    PathItem,
    Reference,
    Response,
    Schema,
    new_document,
)


class TestReference:
    def test_to_and_name(self):
        ref = Reference.to("User")
        assert ref.ref == COMPONENTS_PREFIX + "User"
        assert ref.name == "User"

    def test_dumps_dollar_ref(self):
        assert Reference.to("User").model_dump(by_alias=True) == {"$ref": "#/components/schemas/User"}


class TestSchemaRoundtrip:
    def test_union_members_stay_distinct(self):
        schema = Schema(
            type="object",
            properties={"owner": Reference.to("User"), "name": Schema(type="string")},
        )
        data = schema.model_dump_json(by_alias=True, exclude_none=True)
        loaded = Schema.model_validate_json(data)
        assert isinstance(loaded.properties["owner"], Reference)
        assert isinstance(loaded.properties["name"], Schema)

    def test_media_type_schema_alias(self):
        media = MediaType(schema_=Reference.to("User"))
        assert media.model_dump(by_alias=True) == {"schema": {"$ref": "#/components/schemas/User"}}


class TestPathItem:
    def test_set_operation(self):
        path = PathItem()
        op = Operation()
        path.set_operation(HTTPMethod.POST, op)
        assert path.post is op
        assert path.operations() == {"POST": op}

    def test_set_operation_lowercase_token(self):
        path = PathItem()
        path.set_operation("get", Operation())
        assert path.get is not None

    def test_unknown_method(self):
        with pytest.raises(UnknownMethodError) as exc:
            PathItem().set_operation("BREW", Operation())
        assert exc.value.method == "BREW"

    def test_connect_uses_extension_key(self):
        path = PathItem()
        path.set_operation(HTTPMethod.CONNECT, Operation())
        data = path.model_dump(by_alias=True, exclude_none=True)
        assert "x-connect" in data
        assert "connect" not in data


class TestDocument:
    def test_new_document(self):
        doc = new_document("Pets", "1.2.3")
        data = doc.to_dict()
        assert data["openapi"] == "3.0.0"
        assert data["info"] == {"title": "Pets", "version": "1.2.3"}
        assert data["components"] == {"schemas": {}}
        assert data["paths"] == {}

    def test_add_response_keys_status_as_string(self):
        op = Operation()
        op.add_response(200, Response())
        assert list(op.responses) == ["200"]

    def test_roundtrip(self):
        doc = new_document("Pets")
        doc.components.schemas["Pet"] = Schema(type="object", properties={"name": Schema(type="string")})
        path = PathItem()
        op = Operation()
        op.add_response(200, Response(content={"application/json": MediaType(schema_=Reference.to("Pet"))}))
        path.set_operation("GET", op)
        doc.paths["/pets"] = path
        loaded = OpenAPI.model_validate_json(doc.model_dump_json(by_alias=True, exclude_none=True))
        assert loaded == doc


class TestRoute:
    def test_method_keys_normalized(self):
        route = Route(path="/users", methods={"get": MethodSpec()})
        assert HTTPMethod.GET in route.methods

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            Route(path="/users", methods={"brew": MethodSpec()})

    def test_method_creates_spec(self):
        route = Route(path="/users")
        spec = route.method("post")
        assert route.methods[HTTPMethod.POST] is spec
        assert route.method(HTTPMethod.POST) is spec

    def test_fluent_spec(self):
        spec = MethodSpec().has_request_model(int).has_response_model(201, str)
        assert spec.request is int
        assert spec.responses == {201: str}

    def test_all_methods_order(self):
        assert [m.value for m in HTTPMethod] == [
            "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "CONNECT", "OPTIONS", "TRACE",
        ]
