from __future__ import annotations

from .types import *
from .ordering import SortKey, root_key, stable_order
from .internal import must_be_callable, must_be_callable_or_none

# --- core functionality ---
from .extensions.core import _CoreOperations

# --- accessors ---
from .extensions.set import SetAccessor
from .extensions.join import JoinAccessor
from .extensions.grouping import GroupingAccessor
from .extensions.stats import StatsAccessor
from .extensions.terminal import TerminalAccessor
from .extensions.tree import TreeAccessor
from .extensions.zip import ZipAccessor


# --- main query class ---

class Query(_CoreOperations[T]):
    """
    a lazy, re-iterable query over a sequence.

    a query owns one `iter_func`, a zero-argument callable returning a fresh
    iterator. building a chain of operators never iterates; every traversal
    (a `for` loop or a terminal such as `to.list()`) re-runs the whole chain.
    queries are immutable: operators always return a new query.

    use the factory functions (`from_iterable`, `from_range`, ...) rather than
    constructing queries directly.
    """

    def __init__(self, iter_func: Callable[[], Iterator[T]],
                 hierarchy: Optional[HierarchyProvider[T]] = None,
                 sized: Optional[Any] = None):
        self._iter_func = iter_func
        self._hierarchy = hierarchy
        # set only for queries that wrap a sized source unchanged
        self._sized = sized
        # --- initialize accessors ---
        self.set = SetAccessor(self)
        self.join = JoinAccessor(self)
        self.zip = ZipAccessor(self)
        self.group = GroupingAccessor(self)
        self.stats = StatsAccessor(self)
        self.to = TerminalAccessor(self)
        self.tree = TreeAccessor(self)

    def __iter__(self) -> Iterator[T]:
        return iter(self._iter_func())

    def _get_data(self) -> List[T]:
        """materialize one full traversal"""
        return list(self._iter_func())

    def _flow(self, iter_func: Callable[[], Iterator[T]]) -> 'Query[T]':
        """wraps an element-preserving operator, keeping the hierarchy provider"""
        return Query(iter_func, self._hierarchy)

    def to_json(self) -> List[T]:
        """json hook: the list form of the query"""
        return self._get_data()

    def __repr__(self) -> str:
        tag = type(self).__name__
        return f"<{tag} with hierarchy>" if self._hierarchy is not None else f"<{tag}>"


# --- ordered query class ---

class OrderedQuery(Query[T]):
    """a sorted query, allowing subsequent orderings with `then_by`."""

    def __init__(self, source: Query[T], sort_key: SortKey):
        super().__init__(lambda: iter(stable_order(source._get_data(), sort_key)), source._hierarchy)
        self._source = source
        self._sort_key = sort_key

    def then_by(self, key_selector: KeySelector[T, K], comparer: Optional[Comparer[K]] = None) -> 'OrderedQuery[T]':
        """secondary sort ascending"""
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return OrderedQuery(self._source, self._sort_key.extend(key_selector, comparer, False))

    def then_by_descending(self, key_selector: KeySelector[T, K],
                           comparer: Optional[Comparer[K]] = None) -> 'OrderedQuery[T]':
        """secondary sort descending"""
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return OrderedQuery(self._source, self._sort_key.extend(key_selector, comparer, True))


def ordered(source: Query[T], key_selector, comparer, descending: bool) -> OrderedQuery[T]:
    return OrderedQuery(source, root_key(key_selector, comparer, descending))


# --- keyed queries ---

class Grouping(Query[V], Generic[K, V]):
    """a query over the elements that share one key."""

    def __init__(self, key: K, elements: List[V], hierarchy: Optional[HierarchyProvider[V]] = None):
        super().__init__(lambda: iter(elements), hierarchy, sized=elements)
        self._key = key

    @property
    def key(self) -> K:
        return self._key

    def __repr__(self) -> str:
        return f"<Grouping key={self._key!r}>"


class Page(Query[T]):
    """a fixed-size run of consecutive elements, as produced by `group.page_by`."""

    def __init__(self, page: int, offset: int, elements: List[T],
                 hierarchy: Optional[HierarchyProvider[T]] = None):
        super().__init__(lambda: iter(elements), hierarchy, sized=elements)
        self._page = page
        self._offset = offset

    @property
    def page(self) -> int:
        return self._page

    @property
    def offset(self) -> int:
        return self._offset

    def __repr__(self) -> str:
        return f"<Page page={self._page} offset={self._offset}>"
