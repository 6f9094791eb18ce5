"""Query nodes: field selection plus nested edges."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .args import QueryArg, RenderedComponent, merge_args
from .errors import DuplicateIdError
from .filters import FilterGroup
from .ids import new_id
from .ordering import Pager, Sort


def _normalize_fields(fields: Iterable[str]) -> List[str]:
    if isinstance(fields, str):
        return [fields]
    result: List[str] = []
    for field in fields:
        if not isinstance(field, str) or not field.strip():
            raise ValueError("fields must be non-empty strings")
        result.append(field)
    return result


class Node:
    """A selection point in the query tree.

    Fields render one per line, followed by every edge in insertion order.
    Edges are themselves nodes and render recursively with their own id,
    filters, sorts and pager.
    """

    def __init__(self, id: Optional[str] = None):
        self.id = id or new_id()
        self.fields: List[str] = []
        self.filters: Optional[FilterGroup] = None
        self.sorts: List[Sort] = []
        self.pager: Optional[Pager] = None
        self.edges: Dict[str, Node] = {}

    def add_fields(self, fields: Iterable[str]) -> "Node":
        """Add fields to request from the node. Duplicates are ignored."""
        for field in _normalize_fields(fields):
            if field not in self.fields:
                self.fields.append(field)
        return self

    def remove_fields(self, fields: Iterable[str]) -> "Node":
        """Remove fields from the node. Unknown fields are ignored."""
        drop = set(_normalize_fields(fields))
        self.fields = [field for field in self.fields if field not in drop]
        return self

    def add_edge(self, node: "Node") -> "Node":
        if not isinstance(node, Node):
            raise TypeError("add_edge() requires a Node")
        if node.id in self.edges:
            raise DuplicateIdError(f"{node.id} is not unique for add_edge on {self.id}")
        self.edges[node.id] = node
        return self

    def remove_edge(self, node_id: str) -> "Node":
        self.edges.pop(node_id, None)
        return self

    def get_edge(self, node_id: str) -> Optional["Node"]:
        return self.edges.get(node_id)

    def set_filters(self, filters: Optional[FilterGroup]) -> "Node":
        """Apply a filter group, or ``None`` to remove all filters."""
        self.filters = filters
        return self

    def add_sort(self, sort: Sort) -> "Node":
        if not isinstance(sort, Sort):
            raise TypeError("add_sort() requires a Sort")
        self.sorts.append(sort)
        return self

    def remove_sort(self, sort_id: str) -> "Node":
        self.sorts = [sort for sort in self.sorts if sort.id != sort_id]
        return self

    def set_sorts(self, sorts: Iterable[Sort]) -> "Node":
        items = list(sorts)
        for sort in items:
            if not isinstance(sort, Sort):
                raise TypeError("set_sorts() requires Sort instances")
        self.sorts = items
        return self

    def set_pager(self, pager: Optional[Pager]) -> "Node":
        self.pager = pager
        return self

    def render_sorts(self) -> str:
        return ", ".join(sort.render() for sort in self.sorts)

    def render_inner(self, as_block: bool = True) -> RenderedComponent:
        """Render everything after the node id.

        With ``as_block`` the node's sorts and pager are rendered in
        parentheses ahead of the filter; callers that place them next to a
        root condition pass ``False``.
        """
        values: List[QueryArg] = []

        fields = "".join(f"\n{field}" for field in self.fields)

        edges = ""
        for node in self.edges.values():
            # Edges always render as nested selections, even when they are Query instances.
            rendered = Node.render(node)
            values = merge_args(values, rendered["values"])
            edges += f"\n{rendered['string']}"

        filter_string = ""
        if self.filters is not None:
            rendered_filters = self.filters.render()
            values = merge_args(values, rendered_filters["values"])
            filter_string = f" @filter{rendered_filters['string']}"

        args: List[str] = []
        if as_block:
            if self.sorts:
                args.append(self.render_sorts())
            if self.pager is not None:
                pager = self.pager.render()
                if pager["string"]:
                    args.append(pager["string"])
                    values = merge_args(values, pager["values"])
        block_args = f" ({', '.join(args)})" if args else ""

        return {
            "string": f"{block_args}{filter_string} {{{fields}{edges}\n}}",
            "values": values,
        }

    def render(self) -> RenderedComponent:
        rendered = self.render_inner(True)
        return {"string": f"{self.id}{rendered['string']}", "values": rendered["values"]}
