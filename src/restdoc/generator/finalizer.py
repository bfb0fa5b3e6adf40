"""Serialize, reload and validate a finished document."""

import json
import logging

import yaml
from openapi_spec_validator import validate
from openapi_spec_validator.validation.exceptions import OpenAPIValidationError, ValidatorDetectError
from pydantic_core import PydanticSerializationError
from referencing.exceptions import Unresolvable

from restdoc.errors import DeserializationError, DocumentValidationError, SerializationError
from restdoc.schema.models import OpenAPI

logger = logging.getLogger(__name__)


def finalize_document(doc: OpenAPI) -> OpenAPI:
    """Round-trip the document through JSON and validate its structure.

    Returns the reloaded document. On failure the error carries the
    document as it was at the failing step.
    """
    try:
        data = doc.model_dump_json(by_alias=True, exclude_none=True)
    except PydanticSerializationError as e:
        raise SerializationError(f"failed to marshal spec to JSON: {e}", document=doc) from e

    try:
        loaded = OpenAPI.model_validate_json(data)
    except ValueError as e:
        raise DeserializationError(f"failed to load spec from JSON: {e}", document=doc) from e

    validate_data(loaded.to_dict(), document=loaded)
    logger.info("Finalized document %r with %d schemas", loaded.info.title, len(loaded.components.schemas))
    return loaded


def validate_data(data: dict, document=None) -> None:
    """Check a loaded document against the OpenAPI schema."""
    try:
        validate(data)
    except OpenAPIValidationError as e:
        raise DocumentValidationError(f"failed validation: {e.message}", document=document) from e
    except ValidatorDetectError as e:
        raise DocumentValidationError("failed validation: OpenAPI version not detected", document=document) from e
    except Unresolvable as e:
        raise DocumentValidationError(f"failed validation: unresolvable reference: {e}", document=document) from e


def render_document(doc: OpenAPI, fmt: str = "json") -> str:
    """Render a document as indented JSON or YAML."""
    data = doc.to_dict()
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    raise ValueError(f"unknown output format: {fmt}")
