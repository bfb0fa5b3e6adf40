import json
from unittest.mock import patch

import pytest
import yaml

from restdoc.errors import DeserializationError, DocumentValidationError, SerializationError
from restdoc.generator.finalizer import finalize_document, render_document, validate_data
from restdoc.schema.models import JSON_MEDIA_TYPE, MediaType, Operation, PathItem, Reference, RequestBody, Response, Schema, new_document


def _valid_document():
    doc = new_document("Pets", "1.0.0")
    doc.components.schemas["Pet"] = Schema(type="object", properties={"name": Schema(type="string")})
    op = Operation()
    op.add_response(200, Response(content={JSON_MEDIA_TYPE: MediaType(schema_=Reference.to("Pet"))}))
    path = PathItem()
    path.set_operation("GET", op)
    doc.paths["/pets"] = path
    return doc


class TestFinalizeDocument:
    def test_valid_document(self):
        doc = finalize_document(_valid_document())
        assert doc.info.title == "Pets"
        assert "Pet" in doc.components.schemas
        assert doc.paths["/pets"].get.responses["200"].content[JSON_MEDIA_TYPE].schema_ == Reference.to("Pet")

    def test_serialization_failure(self):
        doc = _valid_document()
        doc.components.schemas["Bad"] = Schema(type="string", enum=[object()])
        with pytest.raises(SerializationError) as exc:
            finalize_document(doc)
        assert exc.value.document is doc

    def test_deserialization_failure(self):
        doc = _valid_document()
        with patch("restdoc.generator.finalizer.OpenAPI") as MockOpenAPI:
            MockOpenAPI.model_validate_json.side_effect = ValueError("bad document")
            with pytest.raises(DeserializationError) as exc:
                finalize_document(doc)
        assert exc.value.document is doc

    def test_operation_without_responses_fails_validation(self):
        doc = _valid_document()
        op = Operation(request_body=RequestBody(content={JSON_MEDIA_TYPE: MediaType(schema_=Reference.to("Pet"))}))
        doc.paths["/pets"].set_operation("POST", op)
        with pytest.raises(DocumentValidationError) as exc:
            finalize_document(doc)
        assert exc.value.document is not None

    def test_reference_to_removed_schema_fails_validation(self):
        doc = _valid_document()
        del doc.components.schemas["Pet"]
        with pytest.raises(DocumentValidationError) as exc:
            finalize_document(doc)
        assert exc.value.document is not None


class TestValidateData:
    def test_missing_info(self):
        with pytest.raises(DocumentValidationError):
            validate_data({"openapi": "3.0.0", "paths": {}})

    def test_valid(self):
        validate_data(_valid_document().to_dict())

    def test_version_not_detected(self):
        with pytest.raises(DocumentValidationError) as exc:
            validate_data({"foo": 1})
        assert "not detected" in str(exc.value)

    def test_dangling_reference(self):
        data = _valid_document().to_dict()
        data["paths"]["/pets"]["get"]["responses"]["200"]["content"][JSON_MEDIA_TYPE]["schema"] = {
            "$ref": "#/components/schemas/Missing"
        }
        with pytest.raises(DocumentValidationError) as exc:
            validate_data(data)
        assert "unresolvable reference" in str(exc.value)


class TestRenderDocument:
    def test_json(self):
        doc = _valid_document()
        text = render_document(doc, "json")
        assert json.loads(text) == doc.to_dict()
        assert text.endswith("\n")

    def test_yaml(self):
        doc = _valid_document()
        data = yaml.safe_load(render_document(doc, "yaml"))
        assert data["paths"]["/pets"]["get"]["responses"]["200"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/Pet"
        }

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            render_document(_valid_document(), "xml")
