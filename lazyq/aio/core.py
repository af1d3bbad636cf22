from __future__ import annotations
import typing
from collections import deque
from ..types import *
from ..internal import (
    MISSING, aopened, must_be_async_queryable, must_be_callable, must_be_callable_or_none,
    must_be_hierarchy_provider, must_be_non_negative_int, resolve
)

if typing.TYPE_CHECKING:
    from .query import AsyncQuery, AsyncOrderedQuery


class _AsyncCoreOperations(Generic[T]):
    """stateless operators of `AsyncQuery`; callbacks may return awaitables."""

    def where(self: 'AsyncQuery[T]', predicate: Predicate[T]) -> 'AsyncQuery[T]':
        """filter elements based on a predicate"""
        must_be_callable(predicate, 'predicate')
        async def filter_data():
            async with aopened(self) as iterator:
                async for item in iterator:
                    if await resolve(predicate(item)):
                        yield item
        return self._flow(filter_data)

    def where_defined(self: 'AsyncQuery[T]') -> 'AsyncQuery[T]':
        """drop None elements"""
        return self.where(lambda item: item is not None)

    def of_type(self: 'AsyncQuery[T]', type_filter: Type[U]) -> 'AsyncQuery[U]':
        if not isinstance(type_filter, (type, tuple)):
            raise TypeError("type_filter must be a type or a tuple of types")
        return self.where(lambda item: isinstance(item, type_filter))

    def select(self: 'AsyncQuery[T]', selector: Selector[T, U]) -> 'AsyncQuery[U]':
        """project each element to a new form"""
        from .query import AsyncQuery
        must_be_callable(selector, 'selector')
        async def map_data():
            async with aopened(self) as iterator:
                async for item in iterator:
                    yield await resolve(selector(item))
        return AsyncQuery(map_data)

    def select_with_index(self: 'AsyncQuery[T]', selector: Callable[[T, int], U]) -> 'AsyncQuery[U]':
        from .query import AsyncQuery
        must_be_callable(selector, 'selector')
        async def map_with_index_data():
            index = 0
            async with aopened(self) as iterator:
                async for item in iterator:
                    yield await resolve(selector(item, index))
                    index += 1
        return AsyncQuery(map_with_index_data)

    def select_many(self: 'AsyncQuery[T]', selector: Selector[T, Iterable[U]],
                    result_selector: Optional[Callable[[T, U], V]] = None) -> 'AsyncQuery[U]':
        """project and flatten; the selector may return a sync or async iterable"""
        from .query import AsyncQuery
        must_be_callable(selector, 'selector')
        must_be_callable_or_none(result_selector, 'result_selector')
        async def flat_map_data():
            async with aopened(self) as outer:
                async for item in outer:
                    async with aopened(await resolve(selector(item))) as inner:
                        async for sub_item in inner:
                            if result_selector:
                                yield await resolve(result_selector(item, sub_item))
                            else:
                                yield sub_item
        return AsyncQuery(flat_map_data)

    def expand(self: 'AsyncQuery[T]', projection: Selector[T, Iterable[T]]) -> 'AsyncQuery[T]':
        """breadth-first expansion: the source, then each level of projections"""
        must_be_callable(projection, 'projection')
        async def expand_data():
            queue = deque([self])
            while queue:
                async with aopened(queue.popleft()) as iterator:
                    async for item in iterator:
                        next_level = await resolve(projection(item))
                        must_be_async_queryable(next_level, 'projection result')
                        queue.append(next_level)
                        yield item
        return self._flow(expand_data)

    def tap(self: 'AsyncQuery[T]', action: Callable[[T], Any]) -> 'AsyncQuery[T]':
        must_be_callable(action, 'action')
        async def tap_data():
            async with aopened(self) as iterator:
                async for item in iterator:
                    await resolve(action(item))
                    yield item
        return self._flow(tap_data)

    def through(self: 'AsyncQuery[T]', callback: Callable[['AsyncQuery[T]'], Any]) -> 'AsyncQuery[U]':
        """pass this query through a callback that composes further operators"""
        from .factories import from_async
        must_be_callable(callback, 'callback')
        result = callback(self)
        must_be_async_queryable(result, 'callback result')
        return from_async(result)

    def take(self: 'AsyncQuery[T]', count: int) -> 'AsyncQuery[T]':
        """take the first 'count' elements, closing the source as soon as the last one is pulled"""
        must_be_non_negative_int(count, 'count')
        async def take_data():
            if count == 0:
                return
            last = MISSING
            taken = 0
            async with aopened(self) as iterator:
                async for item in iterator:
                    taken += 1
                    if taken >= count:
                        last = item
                        break
                    yield item
            if last is not MISSING:
                yield last
        return self._flow(take_data)

    def skip(self: 'AsyncQuery[T]', count: int) -> 'AsyncQuery[T]':
        must_be_non_negative_int(count, 'count')
        async def skip_data():
            index = 0
            async with aopened(self) as iterator:
                async for item in iterator:
                    if index >= count:
                        yield item
                    index += 1
        return self._flow(skip_data)

    def take_while(self: 'AsyncQuery[T]', predicate: Predicate[T]) -> 'AsyncQuery[T]':
        """take elements while predicate is true; the source is closed at the first failure"""
        must_be_callable(predicate, 'predicate')
        async def take_while_data():
            async with aopened(self) as iterator:
                async for item in iterator:
                    if not await resolve(predicate(item)):
                        return
                    yield item
        return self._flow(take_while_data)

    def skip_while(self: 'AsyncQuery[T]', predicate: Predicate[T]) -> 'AsyncQuery[T]':
        must_be_callable(predicate, 'predicate')
        async def skip_while_data():
            skipping = True
            async with aopened(self) as iterator:
                async for item in iterator:
                    if skipping and await resolve(predicate(item)):
                        continue
                    skipping = False
                    yield item
        return self._flow(skip_while_data)

    def take_until(self: 'AsyncQuery[T]', predicate: Predicate[T]) -> 'AsyncQuery[T]':
        must_be_callable(predicate, 'predicate')
        async def failed(item):
            return not await resolve(predicate(item))
        return self.take_while(failed)

    def skip_until(self: 'AsyncQuery[T]', predicate: Predicate[T]) -> 'AsyncQuery[T]':
        must_be_callable(predicate, 'predicate')
        async def failed(item):
            return not await resolve(predicate(item))
        return self.skip_while(failed)

    def exclude(self: 'AsyncQuery[T]', *values: T) -> 'AsyncQuery[T]':
        if not values:
            raise TypeError("exclude() needs at least one value")
        return self.set.except_(list(values))

    def take_right(self: 'AsyncQuery[T]', count: int) -> 'AsyncQuery[T]':
        must_be_non_negative_int(count, 'count')
        async def take_right_data():
            if count == 0:
                return
            pending = deque(maxlen=count)
            async with aopened(self) as iterator:
                async for item in iterator:
                    pending.append(item)
            for item in pending:
                yield item
        return self._flow(take_right_data)

    def skip_right(self: 'AsyncQuery[T]', count: int) -> 'AsyncQuery[T]':
        must_be_non_negative_int(count, 'count')
        async def skip_right_data():
            pending = deque()
            async with aopened(self) as iterator:
                async for item in iterator:
                    pending.append(item)
                    if len(pending) > count:
                        yield pending.popleft()
        return self._flow(skip_right_data)

    def reverse(self: 'AsyncQuery[T]') -> 'AsyncQuery[T]':
        async def reverse_data():
            for item in reversed(await self._get_data()):
                yield item
        return self._flow(reverse_data)

    def append(self: 'AsyncQuery[T]', element: T) -> 'AsyncQuery[T]':
        async def append_data():
            async with aopened(self) as iterator:
                async for item in iterator:
                    yield item
            yield element
        return self._flow(append_data)

    def prepend(self: 'AsyncQuery[T]', element: T) -> 'AsyncQuery[T]':
        async def prepend_data():
            yield element
            async with aopened(self) as iterator:
                async for item in iterator:
                    yield item
        return self._flow(prepend_data)

    def concat(self: 'AsyncQuery[T]', other: Any) -> 'AsyncQuery[T]':
        """concatenate with another sync or async sequence"""
        must_be_async_queryable(other, 'other')
        async def concat_data():
            for side in (self, other):
                async with aopened(side) as iterator:
                    async for item in iterator:
                        yield item
        return self._flow(concat_data)

    def default_if_empty(self: 'AsyncQuery[T]', default_value: T) -> 'AsyncQuery[T]':
        async def default_data():
            has_elements = False
            async with aopened(self) as iterator:
                async for item in iterator:
                    has_elements = True
                    yield item
            if not has_elements:
                yield default_value
        return self._flow(default_data)

    def patch(self: 'AsyncQuery[T]', start: int, skip_count: int = 0,
              replacement: Optional[Any] = None) -> 'AsyncQuery[T]':
        """replaces `skip_count` elements at offset `start` with `replacement`"""
        must_be_non_negative_int(start, 'start')
        must_be_non_negative_int(skip_count, 'skip_count')
        if replacement is not None:
            must_be_async_queryable(replacement, 'replacement')

        async def replacement_items():
            if replacement is None:
                return []
            async with aopened(replacement) as iterator:
                return [item async for item in iterator]

        async def patch_data():
            patched = False
            offset = 0
            async with aopened(self) as iterator:
                async for item in iterator:
                    if offset >= start + skip_count and not patched:
                        patched = True
                        for new_item in await replacement_items():
                            yield new_item
                    if offset < start or offset >= start + skip_count:
                        yield item
                    offset += 1
            if not patched:
                for new_item in await replacement_items():
                    yield new_item
        return self._flow(patch_data)

    def scan(self: 'AsyncQuery[T]', accumulator: Accumulator[U, T], seed: U = MISSING) -> 'AsyncQuery[U]':
        """running reduction; without a seed the first element is yielded as is"""
        from .query import AsyncQuery
        must_be_callable(accumulator, 'accumulator')
        async def scan_data():
            current = seed
            async with aopened(self) as iterator:
                async for item in iterator:
                    current = item if current is MISSING else await resolve(accumulator(current, item))
                    yield current
        return AsyncQuery(scan_data)

    def scan_right(self: 'AsyncQuery[T]', accumulator: Accumulator[U, T], seed: U = MISSING) -> 'AsyncQuery[U]':
        from .query import AsyncQuery
        must_be_callable(accumulator, 'accumulator')
        async def scan_right_data():
            current = seed
            for item in reversed(await self._get_data()):
                current = item if current is MISSING else await resolve(accumulator(current, item))
                yield current
        return AsyncQuery(scan_right_data)

    def order_by(self: 'AsyncQuery[T]', key_selector: KeySelector[T, K],
                 comparer: Optional[Comparer[K]] = None) -> 'AsyncOrderedQuery[T]':
        """sort elements by a key (stable)"""
        from .query import ordered
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return ordered(self, key_selector, comparer, False)

    def order_by_descending(self: 'AsyncQuery[T]', key_selector: KeySelector[T, K],
                            comparer: Optional[Comparer[K]] = None) -> 'AsyncOrderedQuery[T]':
        """sort elements by a key in descending order (stable)"""
        from .query import ordered
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(comparer, 'comparer')
        return ordered(self, key_selector, comparer, True)

    def to_hierarchy(self: 'AsyncQuery[T]', provider: HierarchyProvider[T]) -> 'AsyncQuery[T]':
        """attach a hierarchy provider, enabling the `tree` operators"""
        from .query import AsyncQuery
        must_be_hierarchy_provider(provider, 'provider')
        return AsyncQuery(self._aiter_func, provider)
