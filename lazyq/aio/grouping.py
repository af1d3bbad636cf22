from __future__ import annotations
import logging
import typing
from ..types import *
from ..equality import Equaler, EqualityKey, same_value
from ..internal import (
    aopened, must_be_callable, must_be_callable_or_none, must_be_equaler_or_none,
    must_be_positive_int, resolve
)

if typing.TYPE_CHECKING:
    from .query import AsyncQuery
    from ..lookup import Lookup

logger = logging.getLogger(__name__)


async def collect_buckets(source: Any, key_selector: KeySelector[T, K],
                          element_selector: Optional[Selector[T, V]] = None,
                          equaler: Optional[Equaler[K]] = None) -> List[Tuple[K, List[V]]]:
    """async twin of `lookup.collect_buckets`"""
    eq = equaler if equaler is not None else Equaler.default
    buckets: Dict[EqualityKey, Tuple[K, List[V]]] = {}
    count = 0
    async with aopened(source) as iterator:
        async for element in iterator:
            key = await resolve(key_selector(element))
            value = await resolve(element_selector(element)) if element_selector is not None else element
            buckets.setdefault(EqualityKey(key, eq), (key, []))[1].append(value)
            count += 1
    logger.debug("grouped %d elements into %d key(s)", count, len(buckets))
    return list(buckets.values())


async def build_lookup(source: Any, key_selector: KeySelector[T, K],
                       element_selector: Optional[Selector[T, V]] = None,
                       equaler: Optional[Equaler[K]] = None) -> 'Lookup[K, V]':
    from ..lookup import Lookup
    return Lookup(await collect_buckets(source, key_selector, element_selector, equaler), equaler)


class AsyncGroupingAccessor(Generic[T]):
    """
    grouping for `AsyncQuery`. the groups themselves are plain `Grouping`
    queries: their elements are already in memory once the source is drained.
    """

    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    def group_by(self, key_selector: KeySelector[T, K],
                 element_selector: Optional[Selector[T, V]] = None,
                 result_selector: Optional[Callable[[K, Any], R]] = None,
                 equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[Any]':
        from ..query import Grouping
        from .query import AsyncQuery
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(element_selector, 'element_selector')
        must_be_callable_or_none(result_selector, 'result_selector')
        must_be_equaler_or_none(equaler, 'equaler')
        source = self._query
        hierarchy = source._hierarchy if element_selector is None else None

        async def group_data():
            for key, elements in await collect_buckets(source, key_selector, element_selector, equaler):
                group = Grouping(key, elements, hierarchy)
                yield await resolve(result_selector(key, group)) if result_selector else group
        return AsyncQuery(group_data)

    async def to_lookup(self, key_selector: KeySelector[T, K],
                        element_selector: Optional[Selector[T, V]] = None,
                        equaler: Optional[Equaler[K]] = None) -> 'Lookup[K, V]':
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(element_selector, 'element_selector')
        must_be_equaler_or_none(equaler, 'equaler')
        return await build_lookup(self._query, key_selector, element_selector, equaler)

    def span_map(self, key_selector: KeySelector[T, K],
                 element_selector: Optional[Selector[T, V]] = None,
                 span_selector: Optional[Callable[[K, Any], R]] = None) -> 'AsyncQuery[Any]':
        """group runs of consecutive elements with equal keys, streaming"""
        from ..query import Grouping
        from .query import AsyncQuery
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(element_selector, 'element_selector')
        must_be_callable_or_none(span_selector, 'span_selector')
        source = self._query
        hierarchy = source._hierarchy if element_selector is None else None

        async def emit(key, elements):
            group = Grouping(key, elements, hierarchy)
            return await resolve(span_selector(key, group)) if span_selector else group

        async def span_map_data():
            span = None
            previous_key = None
            async with aopened(source) as iterator:
                async for item in iterator:
                    key = await resolve(key_selector(item))
                    if span is None:
                        span, previous_key = [], key
                    elif not same_value(previous_key, key):
                        yield await emit(previous_key, span)
                        span, previous_key = [], key
                    span.append(await resolve(element_selector(item)) if element_selector else item)
            if span is not None:
                yield await emit(previous_key, span)
        return AsyncQuery(span_map_data)

    def page_by(self, page_size: int) -> 'AsyncQuery[Any]':
        from ..query import Page
        from .query import AsyncQuery
        must_be_positive_int(page_size, 'page_size')
        source = self._query

        async def page_data():
            elements = []
            page = 0
            async with aopened(source) as iterator:
                async for item in iterator:
                    elements.append(item)
                    if len(elements) >= page_size:
                        yield Page(page, page * page_size, elements, source._hierarchy)
                        elements = []
                        page += 1
            if elements:
                yield Page(page, page * page_size, elements, source._hierarchy)
        return AsyncQuery(page_data)

    def span(self, predicate: Predicate[T]) -> Tuple['AsyncQuery[T]', 'AsyncQuery[T]']:
        must_be_callable(predicate, 'predicate')
        return self._query.take_while(predicate), self._query.skip_while(predicate)

    def break_(self, predicate: Predicate[T]) -> Tuple['AsyncQuery[T]', 'AsyncQuery[T]']:
        must_be_callable(predicate, 'predicate')

        async def negated(item):
            return not await resolve(predicate(item))
        return self.span(negated)

    async def partition(self, predicate: Predicate[T]) -> Tuple[List[T], List[T]]:
        must_be_callable(predicate, 'predicate')
        true_items, false_items = [], []
        async with aopened(self._query) as iterator:
            async for item in iterator:
                (true_items if await resolve(predicate(item)) else false_items).append(item)
        return true_items, false_items
