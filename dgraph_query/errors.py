"""Error types raised while building or rendering queries."""

from __future__ import annotations

from typing import Optional


class ErrorCode:
    """Error codes attached to every builder exception."""
    UNKNOWN = "UNKNOWN"
    DUPLICATE_ID = "DUPLICATE_ID"
    MALFORMED_FILTER = "MALFORMED_FILTER"
    INVALID_DATETIME = "INVALID_DATETIME"
    PATH_RESOLUTION = "PATH_RESOLUTION"
    VARIABLE_CONFLICT = "VARIABLE_CONFLICT"
    TRANSPORT = "TRANSPORT"


class QueryBuilderError(Exception):
    """Base exception class for all query builder errors."""

    def __init__(self, message: str, code: str = ErrorCode.UNKNOWN):
        super().__init__(message)
        self.code = code


class DuplicateIdError(QueryBuilderError):
    """Error raised when a filter or edge id already exists in its collection."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DUPLICATE_ID)


class MalformedFilterError(QueryBuilderError):
    """Error raised when a filter or condition is missing its func or argument."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MALFORMED_FILTER)


class InvalidDateTimeError(QueryBuilderError):
    """Error raised when a dateTime argument is built from a non-date value."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_DATETIME)


class PathResolutionError(QueryBuilderError):
    """Error raised when a query block variable path cannot be followed."""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message, ErrorCode.PATH_RESOLUTION)
        self.step = step


class VariableConflictError(QueryBuilderError):
    """Error raised when one variable name is bound to two different values."""

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message, ErrorCode.VARIABLE_CONFLICT)
        self.name = name


class TransportError(QueryBuilderError):
    """Error raised when the transport fails to run a rendered query."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.TRANSPORT)
