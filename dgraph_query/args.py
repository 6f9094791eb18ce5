"""Typed query variables and the merge used when sub-renders are combined."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from typing_extensions import Literal, TypedDict

from .datetimes import from_native_date, is_native_date, is_recognized_datetime
from .errors import InvalidDateTimeError, VariableConflictError

Scalar = Literal["default", "int", "float", "string", "bool", "dateTime", "geo"]

SCALAR_TYPES = ("default", "int", "float", "string", "bool", "dateTime", "geo")


class QueryArg:
    """A named, typed variable rendered into query text as ``$name``."""

    __slots__ = ("type", "value", "name")

    def __init__(self, type: Scalar, value: Any, name: str):
        if type not in SCALAR_TYPES:
            raise ValueError(f"unsupported scalar type '{type}'")
        if not isinstance(name, str) or not name:
            raise ValueError("query arg requires a non-empty name")
        if type == "dateTime" and not is_recognized_datetime(value):
            if not is_native_date(value):
                raise InvalidDateTimeError(
                    f"value for dateTime arg '{name}' must be a date or datetime, got {type_name(value)}"
                )
            value = from_native_date(value)
        self.type = type
        self.value = value
        self.name = name

    def compare(self, other: "QueryArg") -> bool:
        return (
            isinstance(other, QueryArg)
            and self.type == other.type
            and self.value == other.value
            and self.name == other.name
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryArg):
            return NotImplemented
        return self.compare(other)

    def __repr__(self) -> str:
        return f"QueryArg({self.type!r}, {self.value!r}, {self.name!r})"


class RenderedComponent(TypedDict):
    """Text fragment plus the variables it references."""

    string: str
    values: List[QueryArg]


def type_name(value: Any) -> str:
    return type(value).__name__


def merge_args(first: Sequence[QueryArg], second: Sequence[QueryArg]) -> List[QueryArg]:
    """Combine two binding lists, keeping one entry per variable name.

    Bindings that share a name must agree on type and value; otherwise the
    same ``$name`` would denote two different inputs and
    :class:`VariableConflictError` is raised. The first instance seen for a
    name is kept, so the result preserves first-appearance order.
    """
    merged: List[QueryArg] = list(first)
    by_name: Dict[str, QueryArg] = {arg.name: arg for arg in merged}
    for arg in second:
        existing = by_name.get(arg.name)
        if existing is None:
            merged.append(arg)
            by_name[arg.name] = arg
            continue
        if existing is arg or existing.compare(arg):
            continue
        raise VariableConflictError(
            f"variable '${arg.name}' is bound to both {existing.type} {existing.value!r} "
            f"and {arg.type} {arg.value!r}",
            name=arg.name,
        )
    return merged
