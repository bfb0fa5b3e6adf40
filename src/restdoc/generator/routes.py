"""Route table models.

A route maps HTTP methods to the payload types they accept and return.
Payload types are Python annotations or TypeDescriptor instances.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class HTTPMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    def __str__(self) -> str:
        return self.value


ALL_METHODS = tuple(HTTPMethod)


class MethodSpec(BaseModel):
    """Request type and status code -> response type for one method."""

    request: Any = None
    responses: dict[int, Any] = {}

    def has_request_model(self, model: Any) -> "MethodSpec":
        self.request = model
        return self

    def has_response_model(self, status: int, model: Any) -> "MethodSpec":
        self.responses[status] = model
        return self


class Route(BaseModel):
    """A single path and the methods defined on it."""

    path: str
    methods: dict[HTTPMethod, MethodSpec] = {}

    @field_validator("methods", mode="before")
    @classmethod
    def _upper_method_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {(k.upper() if isinstance(k, str) else k): v for k, v in value.items()}
        return value

    def method(self, method: HTTPMethod | str) -> MethodSpec:
        """Return the spec for a method, creating it when missing."""
        key = HTTPMethod(method.upper() if isinstance(method, str) else method)
        return self.methods.setdefault(key, MethodSpec())
