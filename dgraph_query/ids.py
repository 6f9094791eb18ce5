"""Identifier generation for nodes, filters, sorts and pagers.

Ids double as Dgraph block names and as prefixes for generated variable
names, so the default factory only produces ``[A-Za-z0-9_]`` strings that do
not start with a digit. Tests and callers that need stable output can install
their own factory with :func:`set_id_factory`.
"""

from __future__ import annotations

import uuid
from typing import Callable

IdFactory = Callable[[], str]


def _uuid_id() -> str:
    return f"_{uuid.uuid4().hex}"


_factory: IdFactory = _uuid_id


def new_id() -> str:
    """Return a fresh id from the active factory."""
    value = _factory()
    if not isinstance(value, str) or not value:
        raise ValueError("id factory must return a non-empty string")
    return value


def set_id_factory(factory: IdFactory) -> IdFactory:
    """Install ``factory`` and return the one it replaces."""
    global _factory
    if not callable(factory):
        raise TypeError("id factory must be callable")
    previous = _factory
    _factory = factory
    return previous


def reset_id_factory() -> None:
    global _factory
    _factory = _uuid_id
