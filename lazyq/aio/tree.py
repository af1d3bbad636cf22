from __future__ import annotations
import typing
from .. import axis
from ..types import *
from ..equality import keyed
from ..errors import HierarchyRequiredError
from ..internal import aopened, must_be_callable_or_none, must_be_int, opened, resolve

if typing.TYPE_CHECKING:
    from .query import AsyncQuery


class AsyncTreeAccessor(Generic[T]):
    """
    hierarchy traversal for `AsyncQuery`. the provider itself is synchronous;
    only the source elements and the predicate are awaited.
    """

    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    def _provider(self) -> HierarchyProvider[T]:
        provider = self._query._hierarchy
        if provider is None:
            raise HierarchyRequiredError(
                "this query has no hierarchy provider; attach one with to_hierarchy()")
        return provider

    def _axis(self, walk: Callable[[HierarchyProvider[T], T], Iterator[T]],
              predicate: Optional[Predicate[T]]) -> 'AsyncQuery[T]':
        from .query import AsyncQuery
        provider = self._provider()
        must_be_callable_or_none(predicate, 'predicate')
        source = self._query

        async def axis_data():
            async with aopened(source) as iterator:
                async for element in iterator:
                    with opened(walk(provider, element)) as nodes:
                        for node in nodes:
                            if predicate is None or await resolve(predicate(node)):
                                yield node
        return AsyncQuery(axis_data, provider)

    def self(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.self, predicate)

    def parents(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.parents, predicate)

    def root(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.root, predicate)

    def ancestors(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.ancestors, predicate)

    def ancestors_and_self(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(lambda provider, element: axis.ancestors(provider, element, True), predicate)

    def children(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.children, predicate)

    def nth_child(self, offset: int, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        must_be_int(offset, 'offset')
        return self._axis(lambda provider, element: axis.nth_child(provider, element, offset), predicate)

    def descendants(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.descendants, predicate)

    def descendants_and_self(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(lambda provider, element: axis.descendants(provider, element, True), predicate)

    def siblings(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.siblings, predicate)

    def siblings_and_self(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(lambda provider, element: axis.siblings(provider, element, True), predicate)

    def siblings_before_self(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.siblings_before_self, predicate)

    def siblings_after_self(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        return self._axis(axis.siblings_after_self, predicate)

    def top_most(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        """the elements that have no ancestor among the other source elements"""
        from .query import AsyncQuery
        provider = self._provider()
        must_be_callable_or_none(predicate, 'predicate')
        source = self._query

        async def top_most_data():
            nodes = await source._get_data()
            key = keyed()
            present = {key(node) for node in nodes}
            for node in nodes:
                if any(key(ancestor) in present for ancestor in axis.ancestors(provider, node)):
                    continue
                if predicate is None or await resolve(predicate(node)):
                    yield node
        return AsyncQuery(top_most_data, provider)

    def bottom_most(self, predicate: Optional[Predicate[T]] = None) -> 'AsyncQuery[T]':
        """the elements that are not an ancestor of any other source element"""
        from .query import AsyncQuery
        provider = self._provider()
        must_be_callable_or_none(predicate, 'predicate')
        source = self._query

        async def bottom_most_data():
            nodes = await source._get_data()
            key = keyed()
            ancestors_of_nodes = {key(ancestor) for node in nodes for ancestor in axis.ancestors(provider, node)}
            for node in nodes:
                if key(node) in ancestors_of_nodes:
                    continue
                if predicate is None or await resolve(predicate(node)):
                    yield node
        return AsyncQuery(bottom_most_data, provider)
