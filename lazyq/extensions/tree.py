from __future__ import annotations
import typing
from .. import axis
from ..types import *
from ..equality import keyed
from ..errors import HierarchyRequiredError
from ..internal import must_be_callable_or_none, must_be_int, opened

if typing.TYPE_CHECKING:
    from ..query import Query


class TreeAccessor(Generic[T]):
    """
    hierarchy traversal over the query's hierarchy provider.

    every operator maps each source element to an axis (its parents,
    ancestors, children, ...) and yields the axis nodes in source order,
    optionally filtered by a predicate. results carry the same provider, so
    traversals chain: `q.tree.children().tree.descendants()`.
    a provider is attached with `to_hierarchy()` or the `hierarchy()` factory.
    """

    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    def _provider(self) -> HierarchyProvider[T]:
        provider = self._query._hierarchy
        if provider is None:
            raise HierarchyRequiredError(
                "this query has no hierarchy provider; attach one with to_hierarchy()")
        return provider

    def _axis(self, walk: Callable[[HierarchyProvider[T], T], Iterator[T]],
              predicate: Optional[Predicate[T]]) -> 'Query[T]':
        from ..query import Query
        provider = self._provider()
        must_be_callable_or_none(predicate, 'predicate')
        source = self._query

        def axis_data():
            with opened(source) as iterator:
                for element in iterator:
                    with opened(walk(provider, element)) as nodes:
                        for node in nodes:
                            if predicate is None or predicate(node):
                                yield node
        return Query(axis_data, provider)

    def self(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """each element itself"""
        return self._axis(axis.self, predicate)

    def parents(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the parent of each element that has one"""
        return self._axis(axis.parents, predicate)

    def root(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the topmost ancestor of each element (the element itself for a root)"""
        return self._axis(axis.root, predicate)

    def ancestors(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the ancestors of each element, nearest first"""
        return self._axis(axis.ancestors, predicate)

    def ancestors_and_self(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """each element followed by its ancestors, nearest first"""
        return self._axis(lambda provider, element: axis.ancestors(provider, element, True), predicate)

    def children(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the children of each element"""
        return self._axis(axis.children, predicate)

    def nth_child(self, offset: int, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the child at `offset` of each element that has one"""
        must_be_int(offset, 'offset')
        return self._axis(lambda provider, element: axis.nth_child(provider, element, offset), predicate)

    def descendants(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the descendants of each element in pre-order"""
        return self._axis(axis.descendants, predicate)

    def descendants_and_self(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """each element followed by its descendants in pre-order"""
        return self._axis(lambda provider, element: axis.descendants(provider, element, True), predicate)

    def siblings(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the other children of each element's parent"""
        return self._axis(axis.siblings, predicate)

    def siblings_and_self(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """all children of each element's parent, the element included"""
        return self._axis(lambda provider, element: axis.siblings(provider, element, True), predicate)

    def siblings_before_self(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        return self._axis(axis.siblings_before_self, predicate)

    def siblings_after_self(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        return self._axis(axis.siblings_after_self, predicate)

    def top_most(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the elements that have no ancestor among the other source elements"""
        from ..query import Query
        provider = self._provider()
        must_be_callable_or_none(predicate, 'predicate')
        source = self._query

        def top_most_data():
            nodes = source._get_data()
            key = keyed()
            present = {key(node) for node in nodes}
            for node in nodes:
                if any(key(ancestor) in present for ancestor in axis.ancestors(provider, node)):
                    continue
                if predicate is None or predicate(node):
                    yield node
        return Query(top_most_data, provider)

    def bottom_most(self, predicate: Optional[Predicate[T]] = None) -> 'Query[T]':
        """the elements that are not an ancestor of any other source element"""
        from ..query import Query
        provider = self._provider()
        must_be_callable_or_none(predicate, 'predicate')
        source = self._query

        def bottom_most_data():
            nodes = source._get_data()
            key = keyed()
            ancestors_of_nodes = {key(ancestor) for node in nodes for ancestor in axis.ancestors(provider, node)}
            for node in nodes:
                if key(node) in ancestors_of_nodes:
                    continue
                if predicate is None or predicate(node):
                    yield node
        return Query(bottom_most_data, provider)
