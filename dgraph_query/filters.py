"""Filter predicates and their boolean grouping."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from typing_extensions import Literal

from .args import QueryArg, RenderedComponent, Scalar, merge_args
from .errors import DuplicateIdError, MalformedFilterError
from .ids import new_id

Operator = Literal["AND", "OR"]

# Funcs that take the value as their only argument.
_SINGLE_ARG_FUNCS = ("uid", "type")


def render_func(func: str, value: Union[QueryArg, str], field: Optional[str] = None) -> str:
    """Render a filter or condition func.

    ``value`` is a :class:`QueryArg` when the value is injected as a query
    variable, or a plain string naming a variable created by another block of
    the query. ``field`` is ignored by ``uid`` and ``type``.
    """
    value_name = value if isinstance(value, str) else f"${value.name}"
    if func in _SINGLE_ARG_FUNCS:
        return f"{func}({value_name})"
    return f"{func}({field}, {value_name})"


class Filter:
    """A single predicate applied to a node."""

    def __init__(
        self,
        id: Optional[str] = None,
        func: Optional[str] = None,
        filter_arg: Optional[Union[QueryArg, Scalar]] = None,
        value: Any = None,
        name: Optional[str] = None,
    ):
        if (not func) != (filter_arg is None):
            raise MalformedFilterError("Filter requires either both a func and filter_arg or neither.")
        self.id = id or new_id()
        self.func: Optional[str] = None
        self.field: Optional[str] = None
        self.filter_arg: Optional[Union[QueryArg, str]] = None
        self.is_not = False
        if func:
            self.set_func(func)
            self.set_arg(filter_arg, value, name)  # type: ignore[arg-type]

    def negate(self) -> "Filter":
        self.is_not = not self.is_not
        return self

    def set_value_variable(self, name: str) -> "Filter":
        """Reference a variable produced by another query block."""
        if not isinstance(name, str) or not name:
            raise ValueError("set_value_variable() requires a non-empty variable name")
        self.filter_arg = name
        return self

    def set_arg(
        self,
        filter_arg: Union[QueryArg, Scalar],
        value: Any = None,
        name: Optional[str] = None,
    ) -> "Filter":
        """Set the filter's arg from a complete QueryArg or a scalar type plus value and name."""
        if isinstance(filter_arg, str):
            filter_arg = QueryArg(filter_arg, value, name or f"{self.id}_arg")  # type: ignore[arg-type]
        if not isinstance(filter_arg, QueryArg):
            raise TypeError("filter arg must be a QueryArg or a scalar type name")
        self.filter_arg = filter_arg
        return self

    def set_func(self, func: str) -> "Filter":
        if not isinstance(func, str) or not func:
            raise ValueError("filter func must be a non-empty string")
        self.func = func
        return self

    def set_field(self, field: str) -> "Filter":
        self.field = field
        return self

    def render(self) -> RenderedComponent:
        if not self.func or self.filter_arg is None:
            raise MalformedFilterError(f"filter {self.id} requires a func and an arg before rendering")
        values: List[QueryArg] = []
        if isinstance(self.filter_arg, QueryArg):
            values.append(self.filter_arg)
        string = render_func(self.func, self.filter_arg, self.field)
        return {"string": f"{'NOT ' if self.is_not else ''}{string}", "values": values}


class FilterGroup:
    """Boolean composition of filters and nested filter groups."""

    def __init__(self, id: Optional[str] = None, operator: Operator = "AND"):
        self.id = id or new_id()
        self.operator: Operator = "AND"
        self.is_not = False
        self.filters: Dict[str, Union[Filter, FilterGroup]] = {}
        self.set_operator(operator)

    def negate(self) -> "FilterGroup":
        self.is_not = not self.is_not
        return self

    def add_filter(self, filter: Union[Filter, "FilterGroup"]) -> "FilterGroup":
        if not isinstance(filter, (Filter, FilterGroup)):
            raise TypeError("add_filter() requires a Filter or FilterGroup")
        if filter.id in self.filters:
            raise DuplicateIdError(f"{filter.id} is not unique for filter group {self.id}.")
        self.filters[filter.id] = filter
        return self

    def remove_filter(self, filter_id: str) -> "FilterGroup":
        self.filters.pop(filter_id, None)
        return self

    def set_operator(self, operator: Operator) -> "FilterGroup":
        if operator not in ("AND", "OR"):
            raise ValueError(f"invalid operator: {operator}")
        self.operator = operator
        return self

    def render(self) -> RenderedComponent:
        strings: List[str] = []
        values: List[QueryArg] = []
        for child in self.filters.values():
            rendered = child.render()
            strings.append(rendered["string"])
            values = merge_args(values, rendered["values"])
        body = f"\n{self.operator}\n".join(strings)
        return {"string": f"\n{'NOT ' if self.is_not else ''}(\n{body}\n)", "values": values}
