"""Fluent builder for parameterized Dgraph queries."""

from .args import SCALAR_TYPES, QueryArg, RenderedComponent, Scalar, merge_args
from .errors import (
    DuplicateIdError,
    ErrorCode,
    InvalidDateTimeError,
    MalformedFilterError,
    PathResolutionError,
    QueryBuilderError,
    TransportError,
    VariableConflictError,
)
from .filters import Filter, FilterGroup, render_func
from .ids import new_id, reset_id_factory, set_id_factory
from .node import Node
from .ordering import Pager, Sort
from .query import (
    SUPPORTED_PARAM_TYPES,
    BlockVar,
    Condition,
    Directive,
    Query,
    QueryBlock,
    Transaction,
)

__version__ = "0.4.0"

__all__ = [
    "version",
    "QueryArg",
    "Scalar",
    "SCALAR_TYPES",
    "RenderedComponent",
    "merge_args",
    "Filter",
    "FilterGroup",
    "render_func",
    "Sort",
    "Pager",
    "Node",
    "Query",
    "Condition",
    "BlockVar",
    "QueryBlock",
    "Directive",
    "Transaction",
    "SUPPORTED_PARAM_TYPES",
    "new_id",
    "set_id_factory",
    "reset_id_factory",
    # Error types
    "ErrorCode",
    "QueryBuilderError",
    "DuplicateIdError",
    "MalformedFilterError",
    "InvalidDateTimeError",
    "PathResolutionError",
    "VariableConflictError",
    "TransportError",
]


def version() -> str:
    """Return the package version string."""
    return __version__
