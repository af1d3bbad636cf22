from __future__ import annotations
import typing
from ..types import *
from ..equality import Equaler, same_value
from ..internal import (
    must_be_callable, must_be_callable_or_none, must_be_equaler_or_none,
    must_be_positive_int, opened
)

if typing.TYPE_CHECKING:
    from ..query import Query, Grouping, Page
    from ..lookup import Lookup


class GroupingAccessor(Generic[T]):
    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    def group_by(self, key_selector: KeySelector[T, K],
                 element_selector: Optional[Selector[T, V]] = None,
                 result_selector: Optional[Callable[[K, 'Query[V]'], R]] = None,
                 equaler: Optional[Equaler[K]] = None) -> 'Query[Union[Grouping[K, V], R]]':
        """
        group elements by key. nothing runs until the first group is pulled; then
        the whole source is scanned once and one result per key is yielded in
        first-seen key order, elements in encounter order.
        """
        from ..query import Query, Grouping
        from ..lookup import collect_buckets
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(element_selector, 'element_selector')
        must_be_callable_or_none(result_selector, 'result_selector')
        must_be_equaler_or_none(equaler, 'equaler')
        source = self._query
        # groups of untransformed elements keep the hierarchy
        hierarchy = source._hierarchy if element_selector is None else None

        def group_data():
            for key, elements in collect_buckets(source, key_selector, element_selector, equaler):
                group = Grouping(key, elements, hierarchy)
                yield result_selector(key, group) if result_selector else group
        return Query(group_data)

    def to_lookup(self, key_selector: KeySelector[T, K],
                  element_selector: Optional[Selector[T, V]] = None,
                  equaler: Optional[Equaler[K]] = None) -> 'Lookup[K, V]':
        """eager: scan the source once into a `Lookup`"""
        from ..lookup import build_lookup
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(element_selector, 'element_selector')
        must_be_equaler_or_none(equaler, 'equaler')
        return build_lookup(self._query, key_selector, element_selector, equaler)

    def span_map(self, key_selector: KeySelector[T, K],
                 element_selector: Optional[Selector[T, V]] = None,
                 span_selector: Optional[Callable[[K, 'Query[V]'], R]] = None) -> 'Query[Union[Grouping[K, V], R]]':
        """group runs of consecutive elements with equal keys, streaming"""
        from ..query import Query, Grouping
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(element_selector, 'element_selector')
        must_be_callable_or_none(span_selector, 'span_selector')
        source = self._query
        hierarchy = source._hierarchy if element_selector is None else None

        def emit(key, elements):
            group = Grouping(key, elements, hierarchy)
            return span_selector(key, group) if span_selector else group

        def span_map_data():
            span = None
            previous_key = None
            with opened(source) as iterator:
                for item in iterator:
                    key = key_selector(item)
                    if span is None:
                        span, previous_key = [], key
                    elif not same_value(previous_key, key):
                        yield emit(previous_key, span)
                        span, previous_key = [], key
                    span.append(element_selector(item) if element_selector else item)
            if span is not None:
                yield emit(previous_key, span)
        return Query(span_map_data)

    def page_by(self, page_size: int) -> 'Query[Page[T]]':
        """split into consecutive pages of `page_size`; the last page may be shorter"""
        from ..query import Query, Page
        must_be_positive_int(page_size, 'page_size')
        source = self._query

        def page_data():
            elements = []
            page = 0
            with opened(source) as iterator:
                for item in iterator:
                    elements.append(item)
                    if len(elements) >= page_size:
                        yield Page(page, page * page_size, elements, source._hierarchy)
                        elements = []
                        page += 1
            if elements:
                yield Page(page, page * page_size, elements, source._hierarchy)
        return Query(page_data)

    def span(self, predicate: Predicate[T]) -> Tuple['Query[T]', 'Query[T]']:
        """split into the longest prefix satisfying predicate and the remainder"""
        must_be_callable(predicate, 'predicate')
        return self._query.take_while(predicate), self._query.skip_while(predicate)

    def break_(self, predicate: Predicate[T]) -> Tuple['Query[T]', 'Query[T]']:
        """split into the longest prefix not satisfying predicate and the remainder"""
        must_be_callable(predicate, 'predicate')
        return self.span(lambda item: not predicate(item))

    def partition(self, predicate: Predicate[T]) -> Tuple[List[T], List[T]]:
        """partition elements based on predicate"""
        must_be_callable(predicate, 'predicate')
        true_items, false_items = [], []
        with opened(self._query) as iterator:
            for item in iterator:
                (true_items if predicate(item) else false_items).append(item)
        return true_items, false_items
