"""Top-level Dgraph query with condition, directives and auxiliary query blocks."""

from __future__ import annotations

import inspect
import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from typing_extensions import NotRequired, Protocol, TypedDict

from .args import QueryArg, RenderedComponent, merge_args
from .datetimes import to_iso_string
from .errors import MalformedFilterError, PathResolutionError, QueryBuilderError, TransportError
from .filters import render_func
from .node import Node

logger = logging.getLogger(__name__)

# Scalar types declared as-is in the query signature; anything else is declared as string.
SUPPORTED_PARAM_TYPES = ("int", "float", "string", "bool")


class Condition(TypedDict):
    func: str
    value: Union[QueryArg, str]
    field: NotRequired[str]


class BlockVar(TypedDict):
    var_name: str
    path: List[str]


class QueryBlock(TypedDict):
    query: "Query"
    as_var: bool
    vars: List[BlockVar]


class Directive(TypedDict):
    name: str
    value: Optional[str]


class Transaction(Protocol):
    """Anything that can run a parameterized query, e.g. a pydgraph ``Txn``."""

    def query(self, query: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        ...


async def _wrap_transport_call(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Invoke the transport, awaiting it when needed, and re-raise with typed errors."""
    try:
        result = fn(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
    except QueryBuilderError:
        raise
    except Exception as err:
        raise TransportError(str(err) or type(err).__name__) from err
    return result


_VARIABLE_TOKEN = re.compile(r"\$([A-Za-z0-9_]+)")


def _variable_text(arg: QueryArg) -> str:
    value = arg.value
    if arg.type == "dateTime":
        return to_iso_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _literal_text(arg: QueryArg) -> str:
    value = arg.value
    if arg.type == "dateTime":
        return json.dumps(to_iso_string(value))
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value)
    try:
        return json.dumps(value)
    except TypeError:
        return str(value)


class Query(Node):
    """A named root query block.

    On top of a :class:`Node` a query has a root ``condition`` (the
    ``func:`` selector), toggleable directives such as ``@cascade``, and
    auxiliary query blocks whose captured values are exposed as variables
    that this query's filters and condition can reference by name.
    """

    def __init__(self, id: Optional[str] = None):
        super().__init__(id)
        self.directives: List[Directive] = []
        self.condition: Optional[Condition] = None
        self.query_blocks: List[QueryBlock] = []

    def toggle_directive(self, name: str, value: Optional[str] = None) -> "Query":
        """Add the directive, or remove it when it is already present."""
        if not isinstance(name, str) or not name:
            raise ValueError("directive name must be a non-empty string")
        if any(directive["name"] == name for directive in self.directives):
            self.directives = [d for d in self.directives if d["name"] != name]
        else:
            self.directives.append({"name": name, "value": value})
        return self

    def cascade(self) -> "Query":
        return self.toggle_directive("cascade")

    def normalize(self) -> "Query":
        return self.toggle_directive("normalize")

    def recursive(self, depth: int = 5, loop: bool = False) -> "Query":
        if not isinstance(depth, int) or isinstance(depth, bool) or depth <= 0:
            raise ValueError("recursive() depth must be a positive integer")
        return self.toggle_directive("recursive", f"depth:{depth}, loop:{'true' if loop else 'false'}")

    def set_condition(self, condition: Optional[Condition]) -> "Query":
        if condition is None:
            self.condition = None
            return self
        if not isinstance(condition, Mapping):
            raise TypeError("condition must be a mapping with 'func', 'value' and optional 'field'")
        if not condition.get("func") or condition.get("value") is None:
            raise MalformedFilterError("condition requires both a func and a value")
        value = condition["value"]
        if not isinstance(value, (QueryArg, str)) or value == "":
            raise TypeError("condition value must be a QueryArg or a variable name")
        self.condition = condition
        return self

    def add_query_block(
        self,
        query: "Query",
        as_var: bool = False,
        vars: Optional[Iterable[BlockVar]] = None,
    ) -> "Query":
        """Register an auxiliary query block.

        Each entry of ``vars`` names a variable and the path of edge names
        leading from the block root to the field whose value it captures. The
        captured field is rendered as ``<var_name> as <field>``. With
        ``as_var`` the block renders as ``var (...)`` instead of under its id.
        """
        if not isinstance(query, Query):
            raise TypeError("add_query_block() requires a Query")
        if query is self:
            raise ValueError("a query cannot be registered as its own query block")
        if query.query_blocks:
            raise ValueError(f"query block {query.id} has query blocks of its own; register them on {self.id}")
        entries = [
            {"var_name": entry["var_name"], "path": list(entry["path"])} for entry in (vars or [])
        ]
        targets = self._resolve_var_paths(query, entries)
        for node, step, var_name in targets:
            node.fields[node.fields.index(step)] = f"{var_name} as {step}"
        self.query_blocks.append({"query": query, "as_var": bool(as_var), "vars": entries})
        logger.debug(
            "registered query block %s on %s capturing %s",
            query.id,
            self.id,
            [entry["var_name"] for entry in entries],
        )
        return self

    def _resolve_var_paths(
        self, query: "Query", entries: List[BlockVar]
    ) -> List[Tuple[Node, str, str]]:
        targets: List[Tuple[Node, str, str]] = []
        captured = set()
        for entry in entries:
            var_name = entry["var_name"]
            path = entry["path"]
            if not isinstance(var_name, str) or not var_name:
                raise ValueError("query block vars require a non-empty var_name")
            if not path:
                raise PathResolutionError(f"path for {var_name} on query block {query.id} is empty")
            node: Node = query
            for index, step in enumerate(path):
                is_last = index == len(path) - 1
                if step in node.fields:
                    if not is_last:
                        raise PathResolutionError(
                            f"Query cannot continue to follow path past {step}. {step} is a predicate, not an edge.",
                            step,
                        )
                    if (id(node), step) in captured:
                        raise PathResolutionError(f"{step} on {node.id} is already captured by another var", step)
                    captured.add((id(node), step))
                    targets.append((node, step, var_name))
                elif step in node.edges:
                    if is_last:
                        raise PathResolutionError(
                            f"Path for {var_name} ends on edge {step}; it must end on a field.", step
                        )
                    node = node.edges[step]
                else:
                    raise PathResolutionError(
                        f"Step {step} for query {self.id} could not be found on {node.id}.", step
                    )
        return targets

    def render_condition(self) -> RenderedComponent:
        """Render ``func: ...``; empty when the query has no condition."""
        if self.condition is None:
            return {"string": "", "values": []}
        value = self.condition["value"]
        string = f"func: {render_func(self.condition['func'], value, self.condition.get('field'))}"
        values = [value] if isinstance(value, QueryArg) else []
        return {"string": string, "values": values}

    def render_directives(self) -> str:
        rendered = ""
        for directive in self.directives:
            if directive["value"]:
                rendered += f" @{directive['name']}({directive['value']})"
            else:
                rendered += f" @{directive['name']}"
        return rendered

    def _render_header(self) -> RenderedComponent:
        """The ``(func: ..., <sorts>, <pager>)<directives>`` part following the block name."""
        condition = self.render_condition()
        values = list(condition["values"])
        args: List[str] = []
        if condition["string"]:
            args.append(condition["string"])
        if self.sorts:
            args.append(self.render_sorts())
        if self.pager is not None:
            pager = self.pager.render()
            if pager["string"]:
                args.append(pager["string"])
                values = merge_args(values, pager["values"])
        string = f" ({', '.join(args)})" if args else ""
        return {"string": f"{string}{self.render_directives()}", "values": values}

    def render_query_blocks(self) -> RenderedComponent:
        string = ""
        values: List[QueryArg] = []
        for block in self.query_blocks:
            query = block["query"]
            header = query._render_header()
            values = merge_args(values, header["values"])
            inner = query.render_inner(False)
            values = merge_args(values, inner["values"])
            name = "var" if block["as_var"] else query.id
            string += f"{name}{header['string']}{inner['string']}\n\n"
        return {"string": string, "values": values}

    def _assemble(self, declare: bool) -> RenderedComponent:
        inner = self.render_inner(False)
        values = inner["values"]

        blocks = self.render_query_blocks()
        values = merge_args(values, blocks["values"])

        header = self._render_header()
        values = merge_args(values, header["values"])

        signature = ""
        if declare:
            definitions = [
                f"${arg.name}: {arg.type if arg.type in SUPPORTED_PARAM_TYPES else 'string'}"
                for arg in values
            ]
            signature = f"({', '.join(definitions)})"

        string = (
            f"query {self.id}{signature} {{\n"
            f"{blocks['string']}"
            f"{self.id}{header['string']}{inner['string']}\n}}"
        )
        return {"string": string, "values": values}

    def render(self) -> RenderedComponent:
        """Render the full query text and the merged variable list."""
        rendered = self._assemble(declare=True)
        logger.debug("rendered query %s with %d variables", self.id, len(rendered["values"]))
        return rendered

    def normalize_args(self, query_args: Union[Iterable[QueryArg], Mapping[str, QueryArg]]) -> Dict[str, str]:
        """Key each arg by ``$name``; Dgraph variable maps only carry strings."""
        if isinstance(query_args, Mapping):
            query_args = query_args.values()
        normal: Dict[str, str] = {}
        for arg in query_args:
            normal[f"${arg.name}"] = _variable_text(arg)
        return normal

    async def execute(self, transaction: Transaction) -> Any:
        """Render the query and run it through ``transaction.query``."""
        rendered = self.render()
        variables = self.normalize_args(rendered["values"])
        logger.debug("executing query %s", self.id)
        return await _wrap_transport_call(transaction.query, rendered["string"], variables=variables)

    def to_string(self) -> str:
        """Render with literal values in place of variables.

        Only meant for logs and debugging: values are not escaped for the
        query language and the result should not be sent to the database.
        """
        rendered = self._assemble(declare=False)
        literals = {arg.name: _literal_text(arg) for arg in rendered["values"]}
        return _VARIABLE_TOKEN.sub(
            lambda match: literals.get(match.group(1), match.group(0)),
            rendered["string"],
        )

    def __str__(self) -> str:
        return self.to_string()
