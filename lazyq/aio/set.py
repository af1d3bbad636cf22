from __future__ import annotations
import typing
from ..types import *
from ..equality import Equaler, EqualityKey
from ..internal import MISSING, aopened, must_be_async_queryable, must_be_callable, must_be_equaler_or_none, resolve

if typing.TYPE_CHECKING:
    from .query import AsyncQuery

AsyncKey = Callable[[Any], Awaitable[EqualityKey]]


def async_keyed(equaler: Optional[Equaler] = None,
                key_selector: Optional[Callable[[Any], Any]] = None) -> AsyncKey:
    """like `equality.keyed`, awaiting a key selector that returns an awaitable"""
    eq = equaler if equaler is not None else Equaler.default

    async def key(value):
        if key_selector is not None:
            value = await resolve(key_selector(value))
        return EqualityKey(value, eq)
    return key


async def key_set(source: Any, key: AsyncKey) -> typing.Set[EqualityKey]:
    keys = set()
    async with aopened(source) as iterator:
        async for item in iterator:
            keys.add(await key(item))
    return keys


class AsyncSetAccessor(Generic[T]):
    """set algebra for `AsyncQuery`, with the same ordering rules as the sync accessor."""

    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    # --- shared implementations ---

    def _distinct(self, key: AsyncKey) -> 'AsyncQuery[T]':
        source = self._query
        async def distinct_data():
            seen = set()
            async with aopened(source) as iterator:
                async for item in iterator:
                    item_key = await key(item)
                    if item_key not in seen:
                        seen.add(item_key)
                        yield item
        return source._flow(distinct_data)

    def _union(self, other: Any, key: AsyncKey) -> 'AsyncQuery[T]':
        source = self._query
        async def union_data():
            seen = set()
            for side in (source, other):
                async with aopened(side) as iterator:
                    async for item in iterator:
                        item_key = await key(item)
                        if item_key not in seen:
                            seen.add(item_key)
                            yield item
        return source._flow(union_data)

    def _intersect(self, other: Any, key: AsyncKey) -> 'AsyncQuery[T]':
        source = self._query
        async def intersect_data():
            pending = await key_set(other, key)
            if not pending:
                return
            async with aopened(source) as iterator:
                async for item in iterator:
                    item_key = await key(item)
                    if item_key in pending:
                        pending.remove(item_key)
                        yield item
        return source._flow(intersect_data)

    def _except(self, other: Any, key: AsyncKey) -> 'AsyncQuery[T]':
        source = self._query
        async def except_data():
            excluded = await key_set(other, key)
            async with aopened(source) as iterator:
                async for item in iterator:
                    item_key = await key(item)
                    if item_key not in excluded:
                        excluded.add(item_key)
                        yield item
        return source._flow(except_data)

    def _symmetric_difference(self, other: Any, key: AsyncKey) -> 'AsyncQuery[T]':
        source = self._query
        async def symmetric_difference_data():
            right: Dict[EqualityKey, T] = {}
            async with aopened(other) as iterator:
                async for item in iterator:
                    right.setdefault(await key(item), item)
            left_keys = set()
            async with aopened(source) as iterator:
                async for item in iterator:
                    item_key = await key(item)
                    if item_key in left_keys:
                        continue
                    left_keys.add(item_key)
                    if item_key not in right:
                        yield item
            for item_key, item in right.items():
                if item_key not in left_keys:
                    yield item
        return source._flow(symmetric_difference_data)

    @staticmethod
    def _check(other: Any, equaler: Optional[Equaler], key_selector: Any = MISSING) -> None:
        if other is not None:
            must_be_async_queryable(other, 'other')
        if key_selector is not MISSING:
            must_be_callable(key_selector, 'key_selector')
        must_be_equaler_or_none(equaler, 'equaler')

    # --- element equality ---

    def distinct(self, equaler: Optional[Equaler[T]] = None) -> 'AsyncQuery[T]':
        self._check(None, equaler)
        return self._distinct(async_keyed(equaler))

    def union(self, other: Any, equaler: Optional[Equaler[T]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler)
        return self._union(other, async_keyed(equaler))

    def intersect(self, other: Any, equaler: Optional[Equaler[T]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler)
        return self._intersect(other, async_keyed(equaler))

    def except_(self, other: Any, equaler: Optional[Equaler[T]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler)
        return self._except(other, async_keyed(equaler))

    def symmetric_difference(self, other: Any, equaler: Optional[Equaler[T]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler)
        return self._symmetric_difference(other, async_keyed(equaler))

    # --- key equality ---

    def distinct_by(self, key_selector: KeySelector[T, K], equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[T]':
        self._check(None, equaler, key_selector)
        return self._distinct(async_keyed(equaler, key_selector))

    def union_by(self, other: Any, key_selector: KeySelector[T, K],
                 equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler, key_selector)
        return self._union(other, async_keyed(equaler, key_selector))

    def intersect_by(self, other: Any, key_selector: KeySelector[T, K],
                     equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler, key_selector)
        return self._intersect(other, async_keyed(equaler, key_selector))

    def except_by(self, other: Any, key_selector: KeySelector[T, K],
                  equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler, key_selector)
        return self._except(other, async_keyed(equaler, key_selector))

    def symmetric_difference_by(self, other: Any, key_selector: KeySelector[T, K],
                                equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[T]':
        self._check(other, equaler, key_selector)
        return self._symmetric_difference(other, async_keyed(equaler, key_selector))

    # --- boolean set checks (coroutines) ---

    async def is_subset_of(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        self._check(other, equaler)
        key = async_keyed(equaler)
        return await key_set(self._query, key) <= await key_set(other, key)

    async def is_superset_of(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        self._check(other, equaler)
        key = async_keyed(equaler)
        return await key_set(self._query, key) >= await key_set(other, key)

    async def is_disjoint_with(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        self._check(other, equaler)
        key = async_keyed(equaler)
        return (await key_set(self._query, key)).isdisjoint(await key_set(other, key))
