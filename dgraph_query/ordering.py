"""Sort and pagination directives."""

from __future__ import annotations

from typing import List, Optional

from typing_extensions import Literal

from .args import QueryArg, RenderedComponent
from .ids import new_id

Direction = Literal["asc", "desc"]
SortFormat = Literal["var", "predicate"]


class Sort:
    """Orders a block by a predicate or by a value variable."""

    def __init__(
        self,
        id: Optional[str] = None,
        field: str = "",
        direction: Direction = "asc",
        format: SortFormat = "predicate",
    ):
        if format not in ("var", "predicate"):
            raise ValueError(f"invalid sort format: {format}")
        self.id = id or new_id()
        self.field = field
        self.format: SortFormat = format
        self.direction: Direction = "asc"
        self.set_direction(direction)

    def set_val(self, var_name: str) -> "Sort":
        self.format = "var"
        self.field = var_name
        return self

    def set_field(self, field: str) -> "Sort":
        self.format = "predicate"
        self.field = field
        return self

    def set_direction(self, direction: Direction) -> "Sort":
        if direction not in ("asc", "desc"):
            raise ValueError(f"invalid direction: {direction}")
        self.direction = direction
        return self

    def reverse(self) -> "Sort":
        """Return a new sort with the opposite direction."""
        return Sort(
            f"{self.id}_reversed",
            self.field,
            "desc" if self.direction == "asc" else "asc",
            self.format,
        )

    def render(self) -> str:
        if self.format == "var":
            return f"order{self.direction} val({self.field})"
        return f"order{self.direction} <{self.field}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sort):
            return NotImplemented
        return (
            self.id == other.id
            and self.field == other.field
            and self.direction == other.direction
            and self.format == other.format
        )

    def __repr__(self) -> str:
        return f"Sort({self.id!r}, {self.field!r}, {self.direction!r}, {self.format!r})"


class Pager:
    """``first``/``offset``/``after`` pagination; offset and after exclude each other."""

    def __init__(
        self,
        id: Optional[str] = None,
        first: Optional[int] = None,
        offset: Optional[int] = None,
        after: Optional[str] = None,
    ):
        if offset is not None and after is not None:
            raise ValueError("offset and after are mutually exclusive")
        self.id = id or new_id()
        self.first: Optional[QueryArg] = None
        self.offset: Optional[QueryArg] = None
        self.after: Optional[QueryArg] = None
        if first is not None:
            self.set_first(first)
        if offset is not None:
            self.set_offset(offset)
        if after is not None:
            self.set_after(after)

    def set_first(self, first: int) -> "Pager":
        self.first = QueryArg("int", first, f"{self.id}_first")
        return self

    def set_offset(self, offset: int) -> "Pager":
        self.after = None
        self.offset = QueryArg("int", offset, f"{self.id}_offset")
        return self

    def set_after(self, after: str) -> "Pager":
        self.offset = None
        self.after = QueryArg("string", after, f"{self.id}_after")
        return self

    def render(self) -> RenderedComponent:
        if self.first is None:
            return {"string": "", "values": []}
        values: List[QueryArg] = [self.first]
        string = f"first: ${self.first.name}"
        if self.offset is not None:
            string += f", offset: ${self.offset.name}"
            values.append(self.offset)
        elif self.after is not None:
            string += f", after: ${self.after.name}"
            values.append(self.after)
        return {"string": string, "values": values}
