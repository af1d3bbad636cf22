"""
'    .__                               
'    |  | _____  ___________.__. ______
'    |  | \__  \ \___   <   |  |/ ____/
'    |  |__/ __ \_/    / \___  < <_|  |
'    |____(____  /_____ \/ ____|\__   |
'              \/      \/\/        |__|
"""
import logging

# expose the main classes
from .query import Query, OrderedQuery, Grouping, Page
from .lookup import Lookup

# expose the factory functions
from .factories import (
    from_iterable,
    from_range,
    range_of,
    repeat,
    once,
    empty,
    continuous,
    generate,
    consume,
    hierarchy,
    query,
    P
)

# expose equality and errors
from .equality import Equaler, same_value, same_value_hash
from .errors import EmptySequenceError, HierarchyRequiredError
from .types import HierarchyProvider

# async mirror
from .aio import AsyncQuery, AsyncOrderedQuery, from_async, AP

logging.getLogger(__name__).addHandler(logging.NullHandler())

# define what `import *` does
__all__ = [
    "Query",
    "OrderedQuery",
    "Grouping",
    "Page",
    "Lookup",
    "from_iterable",
    "from_range",
    "range_of",
    "repeat",
    "once",
    "empty",
    "continuous",
    "generate",
    "consume",
    "hierarchy",
    "query",
    "P",
    "Equaler",
    "same_value",
    "same_value_hash",
    "EmptySequenceError",
    "HierarchyRequiredError",
    "HierarchyProvider",
    "AsyncQuery",
    "AsyncOrderedQuery",
    "from_async",
    "AP"
]
