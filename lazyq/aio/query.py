from __future__ import annotations

from typing import AsyncIterator

from ..types import *
from ..ordering import SortKey, root_key, sort_by_keys
from ..internal import aopened, must_be_callable, must_be_callable_or_none, resolve

# --- core functionality ---
from .core import _AsyncCoreOperations

# --- accessors ---
from .set import AsyncSetAccessor
from .join import AsyncJoinAccessor
from .grouping import AsyncGroupingAccessor
from .stats import AsyncStatsAccessor
from .terminal import AsyncTerminalAccessor
from .tree import AsyncTreeAccessor
from .zip import AsyncZipAccessor


# --- main async query class ---

class AsyncQuery(_AsyncCoreOperations[T]):
    """
    the asynchronous twin of `Query`.

    `aiter_func` returns a fresh async iterator per traversal. sources may be
    async or plain iterables, callbacks may return awaitables, and terminal
    operators are coroutines: `await AP(source).where(pred).to.list()`.
    """

    def __init__(self, aiter_func: Callable[[], AsyncIterator[T]],
                 hierarchy: Optional[HierarchyProvider[T]] = None):
        self._aiter_func = aiter_func
        self._hierarchy = hierarchy
        # --- initialize accessors ---
        self.set = AsyncSetAccessor(self)
        self.join = AsyncJoinAccessor(self)
        self.zip = AsyncZipAccessor(self)
        self.group = AsyncGroupingAccessor(self)
        self.stats = AsyncStatsAccessor(self)
        self.to = AsyncTerminalAccessor(self)
        self.tree = AsyncTreeAccessor(self)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._aiter_func().__aiter__()

    async def _get_data(self) -> List[T]:
        """materialize one full traversal"""
        async with aopened(self) as iterator:
            return [item async for item in iterator]

    def _flow(self, aiter_func: Callable[[], AsyncIterator[T]]) -> 'AsyncQuery[T]':
        return AsyncQuery(aiter_func, self._hierarchy)

    def __repr__(self) -> str:
        tag = type(self).__name__
        return f"<{tag} with hierarchy>" if self._hierarchy is not None else f"<{tag}>"


# --- ordered async query class ---

class AsyncOrderedQuery(AsyncQuery[T]):
    """
    a sorted async query. the source is drained first; key selectors may be
    async and are awaited once per element and key, comparers are plain functions.
    """

    def __init__(self, source: AsyncQuery[T], sort_key: SortKey):
        async def ordered_data():
            elements = await source._get_data()
            links = sort_key.chain()
            columns = []
            for link in links:
                columns.append([await resolve(link.key_selector(element)) for element in elements])
            for element in sort_by_keys(elements, links, columns):
                yield element
        super().__init__(ordered_data, source._hierarchy)
        self._source = source
        self._sort_key = sort_key

    def then_by(self, key_selector: KeySelector[T, K], comparer: Optional[Comparer[K]] = None) -> 'AsyncOrderedQuery[T]':
        """secondary sort ascending"""
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return AsyncOrderedQuery(self._source, self._sort_key.extend(key_selector, comparer, False))

    def then_by_descending(self, key_selector: KeySelector[T, K],
                           comparer: Optional[Comparer[K]] = None) -> 'AsyncOrderedQuery[T]':
        """secondary sort descending"""
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return AsyncOrderedQuery(self._source, self._sort_key.extend(key_selector, comparer, True))


def ordered(source: AsyncQuery[T], key_selector, comparer, descending: bool) -> AsyncOrderedQuery[T]:
    return AsyncOrderedQuery(source, root_key(key_selector, comparer, descending))
