"""End-to-end fluent query example: filters, edges, query blocks and execution."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from dgraph_query import Filter, FilterGroup, Node, Query, QueryArg, Sort


class PrintingTxn:
    """Stand-in for a pydgraph transaction that echoes what it receives."""

    def query(self, query: str, variables: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        print(query)
        print(f"variables: {dict(variables or {})}")
        return {"rows": []}


def tasty_hamburgers() -> Query:
    cooked = Filter("cookedFilter").set_field("cooked").set_func("eq").set_arg("bool", True, "isCooked")
    return (
        Query("tastyHamburgers")
        .set_condition({"func": "type", "value": QueryArg("string", "Hamburger", "foodType")})
        .set_filters(FilterGroup("goodThings").add_filter(cooked))
        .add_fields(["uid"])
        .add_edge(Node("owner").add_fields(["name"]))
    )


def popular_reviewed_posts() -> Query:
    reviewers = (
        Query("reviewers")
        .set_condition({"func": "type", "value": QueryArg("string", "Reviewer", "userType")})
        .add_fields(["uid"])
    )
    ranking = (
        Query("ranking")
        .set_condition({"func": "type", "value": QueryArg("string", "Post", "isPost")})
        .add_fields(["max(votes)"])
    )
    owned_by_reviewer = Filter().set_func("uid").set_value_variable("isOwner")
    return (
        Query("main")
        .set_condition({"func": "eq", "field": "votes", "value": "mostPopular"})
        .set_filters(FilterGroup().add_filter(owned_by_reviewer))
        .add_fields(["name"])
        .add_sort(Sort("byName").set_field("name"))
        .add_query_block(reviewers, True, [{"var_name": "isOwner", "path": ["uid"]}])
        .add_query_block(ranking, False, [{"var_name": "mostPopular", "path": ["max(votes)"]}])
        .cascade()
    )


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    print("literal rendering for logs:")
    print(tasty_hamburgers())

    print("\nparameterized query sent to the transport:")
    asyncio.run(popular_reviewed_posts().execute(PrintingTxn()))


if __name__ == "__main__":
    main()
