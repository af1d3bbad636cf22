from __future__ import annotations
import typing
from collections import deque
from ..types import *
from ..internal import (
    MISSING, must_be_callable, must_be_callable_or_none, must_be_hierarchy_provider,
    must_be_non_negative_int, must_be_queryable, opened, to_iterable
)

if typing.TYPE_CHECKING:
    from ..query import Query, OrderedQuery


class _CoreOperations(Generic[T]):
    def where(self: 'Query[T]', predicate: Predicate[T]) -> 'Query[T]':
        """filter elements based on a predicate"""
        must_be_callable(predicate, 'predicate')
        def filter_data():
            with opened(self) as iterator:
                for item in iterator:
                    if predicate(item):
                        yield item
        return self._flow(filter_data)

    def where_defined(self: 'Query[T]') -> 'Query[T]':
        """drop None elements"""
        return self.where(lambda item: item is not None)

    def of_type(self: 'Query[T]', type_filter: Type[U]) -> 'Query[U]':
        """filters the elements of a sequence based on a specified type"""
        if not isinstance(type_filter, (type, tuple)):
            raise TypeError("type_filter must be a type or a tuple of types")
        return self.where(lambda item: isinstance(item, type_filter))

    def select(self: 'Query[T]', selector: Selector[T, U]) -> 'Query[U]':
        """project each element to a new form"""
        from ..query import Query
        must_be_callable(selector, 'selector')
        def map_data():
            with opened(self) as iterator:
                for item in iterator:
                    yield selector(item)
        return Query(map_data)

    def select_with_index(self: 'Query[T]', selector: Callable[[T, int], U]) -> 'Query[U]':
        """project each element to a new form, using the element's index"""
        from ..query import Query
        must_be_callable(selector, 'selector')
        def map_with_index_data():
            with opened(self) as iterator:
                for index, item in enumerate(iterator):
                    yield selector(item, index)
        return Query(map_with_index_data)

    def select_many(self: 'Query[T]', selector: Selector[T, Iterable[U]],
                    result_selector: Optional[Callable[[T, U], V]] = None) -> 'Query[U]':
        """project and flatten sequences"""
        from ..query import Query
        must_be_callable(selector, 'selector')
        must_be_callable_or_none(result_selector, 'result_selector')
        def flat_map_data():
            with opened(self) as outer:
                for item in outer:
                    with opened(to_iterable(selector(item), 'selector result')) as inner:
                        for sub_item in inner:
                            yield result_selector(item, sub_item) if result_selector else sub_item
        return Query(flat_map_data)

    def expand(self: 'Query[T]', projection: Selector[T, Iterable[T]]) -> 'Query[T]':
        """
        breadth-first expansion: yields the source, then the projection of every
        yielded element, level by level, until the projections run dry.
        """
        must_be_callable(projection, 'projection')
        def expand_data():
            queue = deque([self])
            while queue:
                with opened(queue.popleft()) as iterator:
                    for item in iterator:
                        queue.append(to_iterable(projection(item), 'projection result'))
                        yield item
        return self._flow(expand_data)

    def tap(self: 'Query[T]', action: Callable[[T], Any]) -> 'Query[T]':
        """run a side effect for each element as it passes through"""
        must_be_callable(action, 'action')
        def tap_data():
            with opened(self) as iterator:
                for item in iterator:
                    action(item)
                    yield item
        return self._flow(tap_data)

    def through(self: 'Query[T]', callback: Callable[['Query[T]'], Iterable[U]]) -> 'Query[U]':
        """pass this query through a callback that composes further operators"""
        from ..factories import from_iterable
        must_be_callable(callback, 'callback')
        result = callback(self)
        must_be_queryable(result, 'callback result')
        return from_iterable(result)

    def take(self: 'Query[T]', count: int) -> 'Query[T]':
        """take the first 'count' elements, closing the source as soon as the last one is pulled"""
        must_be_non_negative_int(count, 'count')
        def take_data():
            if count == 0:
                return
            last = MISSING
            with opened(self) as iterator:
                for taken, item in enumerate(iterator, 1):
                    if taken >= count:
                        last = item
                        break
                    yield item
            if last is not MISSING:
                yield last
        return self._flow(take_data)

    def skip(self: 'Query[T]', count: int) -> 'Query[T]':
        """skip the first 'count' elements"""
        must_be_non_negative_int(count, 'count')
        def skip_data():
            with opened(self) as iterator:
                for index, item in enumerate(iterator):
                    if index >= count:
                        yield item
        return self._flow(skip_data)

    def take_while(self: 'Query[T]', predicate: Predicate[T]) -> 'Query[T]':
        """take elements while predicate is true; the source is closed at the first failure"""
        must_be_callable(predicate, 'predicate')
        def take_while_data():
            with opened(self) as iterator:
                for item in iterator:
                    if not predicate(item):
                        return
                    yield item
        return self._flow(take_while_data)

    def skip_while(self: 'Query[T]', predicate: Predicate[T]) -> 'Query[T]':
        """skip elements while predicate is true"""
        must_be_callable(predicate, 'predicate')
        def skip_while_data():
            skipping = True
            with opened(self) as iterator:
                for item in iterator:
                    if skipping and predicate(item):
                        continue
                    skipping = False
                    yield item
        return self._flow(skip_while_data)

    def take_until(self: 'Query[T]', predicate: Predicate[T]) -> 'Query[T]':
        """take elements until predicate is true; the matching element is not yielded"""
        must_be_callable(predicate, 'predicate')
        return self.take_while(lambda item: not predicate(item))

    def skip_until(self: 'Query[T]', predicate: Predicate[T]) -> 'Query[T]':
        """skip elements until predicate is true; the matching element is yielded"""
        must_be_callable(predicate, 'predicate')
        return self.skip_while(lambda item: not predicate(item))

    def exclude(self: 'Query[T]', *values: T) -> 'Query[T]':
        """distinct elements that are not among `values`"""
        if not values:
            raise TypeError("exclude() needs at least one value")
        return self.set.except_(list(values))

    def take_right(self: 'Query[T]', count: int) -> 'Query[T]':
        """take the last 'count' elements"""
        must_be_non_negative_int(count, 'count')
        def take_right_data():
            if count == 0:
                return
            with opened(self) as iterator:
                pending = deque(iterator, maxlen=count)
            yield from pending
        return self._flow(take_right_data)

    def skip_right(self: 'Query[T]', count: int) -> 'Query[T]':
        """skip the last 'count' elements"""
        must_be_non_negative_int(count, 'count')
        def skip_right_data():
            pending = deque()
            with opened(self) as iterator:
                for item in iterator:
                    pending.append(item)
                    if len(pending) > count:
                        yield pending.popleft()
        return self._flow(skip_right_data)

    def reverse(self: 'Query[T]') -> 'Query[T]':
        """inverts the order of the elements in a sequence"""
        return self._flow(lambda: reversed(self._get_data()))

    def append(self: 'Query[T]', element: T) -> 'Query[T]':
        """appends a value to the end of the sequence"""
        def append_data():
            with opened(self) as iterator:
                for item in iterator:
                    yield item
            yield element
        return self._flow(append_data)

    def prepend(self: 'Query[T]', element: T) -> 'Query[T]':
        """adds a value to the beginning of the sequence"""
        def prepend_data():
            yield element
            with opened(self) as iterator:
                for item in iterator:
                    yield item
        return self._flow(prepend_data)

    def concat(self: 'Query[T]', other: Iterable[T]) -> 'Query[T]':
        """concatenate with another sequence, preserving all elements and order."""
        must_be_queryable(other, 'other')
        def concat_data():
            with opened(self) as iterator:
                for item in iterator:
                    yield item
            with opened(other) as iterator:
                for item in iterator:
                    yield item
        return self._flow(concat_data)

    def default_if_empty(self: 'Query[T]', default_value: T) -> 'Query[T]':
        """returns the elements of a sequence, or a default value in a singleton collection if the sequence is empty"""
        def default_data():
            has_elements = False
            with opened(self) as iterator:
                for item in iterator:
                    has_elements = True
                    yield item
            if not has_elements:
                yield default_value
        return self._flow(default_data)

    def patch(self: 'Query[T]', start: int, skip_count: int = 0,
              replacement: Optional[Iterable[T]] = None) -> 'Query[T]':
        """
        replaces `skip_count` elements at offset `start` with `replacement`.
        when the source is shorter than `start`, the replacement is appended.
        """
        must_be_non_negative_int(start, 'start')
        must_be_non_negative_int(skip_count, 'skip_count')
        if replacement is not None:
            must_be_queryable(replacement, 'replacement')

        def replacement_data():
            if replacement is not None:
                with opened(replacement) as iterator:
                    for item in iterator:
                        yield item

        def patch_data():
            patched = False
            with opened(self) as iterator:
                for offset, item in enumerate(iterator):
                    if offset < start:
                        yield item
                        continue
                    if offset < start + skip_count:
                        continue
                    if not patched:
                        patched = True
                        yield from replacement_data()
                    yield item
            if not patched:
                yield from replacement_data()
        return self._flow(patch_data)

    def scan(self: 'Query[T]', accumulator: Accumulator[U, T], seed: U = MISSING) -> 'Query[U]':
        """
        running reduction. without a seed the first element starts the run and is
        yielded as is; with a seed every element yields `accumulator(current, item)`.
        """
        from ..query import Query
        must_be_callable(accumulator, 'accumulator')
        def scan_data():
            current = seed
            with opened(self) as iterator:
                for item in iterator:
                    current = item if current is MISSING else accumulator(current, item)
                    yield current
        return Query(scan_data)

    def scan_right(self: 'Query[T]', accumulator: Accumulator[U, T], seed: U = MISSING) -> 'Query[U]':
        """running reduction from the last element to the first"""
        from ..query import Query
        must_be_callable(accumulator, 'accumulator')
        def scan_right_data():
            current = seed
            for item in reversed(self._get_data()):
                current = item if current is MISSING else accumulator(current, item)
                yield current
        return Query(scan_right_data)

    def order_by(self: 'Query[T]', key_selector: KeySelector[T, K],
                 comparer: Optional[Comparer[K]] = None) -> 'OrderedQuery[T]':
        """sort elements by a key (stable)"""
        from ..query import ordered
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return ordered(self, key_selector, comparer, False)

    def order_by_descending(self: 'Query[T]', key_selector: KeySelector[T, K],
                            comparer: Optional[Comparer[K]] = None) -> 'OrderedQuery[T]':
        """sort elements by a key in descending order (stable)"""
        from ..query import ordered
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return ordered(self, key_selector, comparer, True)

    def to_hierarchy(self: 'Query[T]', provider: HierarchyProvider[T]) -> 'Query[T]':
        """attach a hierarchy provider, enabling the `tree` operators"""
        from ..query import Query
        must_be_hierarchy_provider(provider, 'provider')
        return Query(self._iter_func, provider)
