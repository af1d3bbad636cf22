"""asynchronous mirror of the query engine."""

from .query import AsyncQuery, AsyncOrderedQuery
from .factories import (
    from_async,
    from_range,
    repeat,
    once,
    empty,
    generate,
    hierarchy,
    AP
)

__all__ = [
    "AsyncQuery",
    "AsyncOrderedQuery",
    "from_async",
    "from_range",
    "repeat",
    "once",
    "empty",
    "generate",
    "hierarchy",
    "AP"
]
