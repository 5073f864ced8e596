"""Custom exceptions for xml2schema."""

from typing import Optional


class Xml2SchemaError(Exception):
    """Base exception for all xml2schema errors."""
    pass


class ConfigError(Xml2SchemaError):
    """Configuration-related errors."""
    pass


class InputError(Xml2SchemaError):
    """Document is empty, malformed, or has no root element.

    The parser's own exception, when there is one, is kept on
    ``original_error`` and chained as ``__cause__`` by the raiser.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.source = source
        self.original_error = original_error
        super().__init__(message)


class EmptyDocumentError(InputError):
    """Document has no content at all."""
    pass
