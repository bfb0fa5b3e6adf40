"""Error types raised while generating an API document.

Every error carries the partially built document (when one exists) so
callers can inspect how far generation got.
"""


class RestDocError(Exception):
    """Base class for all document generation errors."""

    def __init__(self, message: str, document=None):
        super().__init__(message)
        self.document = document


class UnsupportedTypeError(RestDocError):
    """A type kind outside the supported set was reached."""

    def __init__(self, namespace: str, name: str, reason: str = "unsupported type"):
        super().__init__(f"{reason}: {namespace}/{name}")
        self.namespace = namespace
        self.name = name


class UnknownMethodError(RestDocError):
    """An HTTP method token outside the fixed set was assembled."""

    def __init__(self, method: str):
        super().__init__(f"unknown HTTP method: {method}")
        self.method = method


class SerializationError(RestDocError):
    pass


class DeserializationError(RestDocError):
    pass


class DocumentValidationError(RestDocError):
    pass


class ConfigError(RestDocError):
    pass
