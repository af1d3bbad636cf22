from __future__ import annotations
import json
import typing
from collections import deque
import numpy as np
import pandas as pd
from ..types import *
from ..equality import Equaler, is_equaler, same_value
from ..errors import EmptySequenceError
from ..internal import (
    MISSING, aopened, default_compare, must_be_async_queryable, must_be_callable,
    must_be_callable_or_none, must_be_equaler_or_none, must_be_int, next_or_missing, resolve
)

if typing.TYPE_CHECKING:
    from .query import AsyncQuery
    from ..lookup import Lookup


def _equals(equaler: Optional[Equaler]) -> Callable[[Any, Any], bool]:
    return equaler.equals if equaler is not None else same_value


def _identity(value: Any) -> Any:
    return value


def _correspondence(equaler: Any) -> Callable[[Any, Any], bool]:
    if equaler is None:
        return same_value
    if is_equaler(equaler):
        return equaler.equals
    if callable(equaler):
        return equaler
    raise TypeError("equaler must be an Equaler or a callable")


async def _materialize(source: Any) -> List[Any]:
    async with aopened(source) as iterator:
        return [item async for item in iterator]


class AsyncTerminalAccessor(Generic[T]):
    """terminal coroutines of `AsyncQuery`; the same "None for no value" rules as the sync accessor."""

    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    # --- conversions ---

    async def list(self) -> List[T]:
        return await self._query._get_data()

    async def set(self) -> Set[T]:
        return set(await self._query._get_data())

    async def dict(self, key_selector: KeySelector[T, K],
                   value_selector: Optional[Selector[T, V]] = None) -> Dict[K, V]:
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(value_selector, 'value_selector')
        result = {}
        async with aopened(self._query) as iterator:
            async for item in iterator:
                value = await resolve(value_selector(item)) if value_selector else item
                result[await resolve(key_selector(item))] = value
        return result

    async def lookup(self, key_selector: KeySelector[T, K],
                     element_selector: Optional[Selector[T, V]] = None,
                     equaler: Optional[Equaler[K]] = None) -> 'Lookup[K, V]':
        return await self._query.group.to_lookup(key_selector, element_selector, equaler)

    async def array(self) -> np.ndarray:
        return np.array(await self._query._get_data())

    async def pandas(self) -> pd.Series:
        return pd.Series(await self._query._get_data())

    async def df(self) -> pd.DataFrame:
        return pd.DataFrame(await self._query._get_data())

    async def json(self, **kwargs: Any) -> str:
        return json.dumps(await self._query._get_data(), **kwargs)

    # --- counting and quantifiers ---

    async def count(self, predicate: Optional[Predicate[T]] = None) -> int:
        must_be_callable_or_none(predicate, 'predicate')
        total = 0
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if predicate is None or await resolve(predicate(item)):
                    total += 1
        return total

    async def any(self, predicate: Optional[Predicate[T]] = None) -> bool:
        must_be_callable_or_none(predicate, 'predicate')
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if predicate is None or await resolve(predicate(item)):
                    return True
        return False

    async def all(self, predicate: Predicate[T]) -> bool:
        must_be_callable(predicate, 'predicate')
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if not await resolve(predicate(item)):
                    return False
        return True

    # --- element access ---

    async def first(self, predicate: Optional[Predicate[T]] = None) -> Optional[T]:
        must_be_callable_or_none(predicate, 'predicate')
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if predicate is None or await resolve(predicate(item)):
                    return item
        return None

    async def last(self, predicate: Optional[Predicate[T]] = None) -> Optional[T]:
        must_be_callable_or_none(predicate, 'predicate')
        result = None
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if predicate is None or await resolve(predicate(item)):
                    result = item
        return result

    async def single(self, predicate: Optional[Predicate[T]] = None) -> Optional[T]:
        must_be_callable_or_none(predicate, 'predicate')
        result = MISSING
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if predicate is None or await resolve(predicate(item)):
                    if result is not MISSING:
                        return None
                    result = item
        return None if result is MISSING else result

    async def element_at(self, offset: int) -> Optional[T]:
        must_be_int(offset, 'offset')
        if offset < 0:
            return None
        index = 0
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if index == offset:
                    return item
                index += 1
        return None

    async def _extreme(self, selector, comparer, sign: int) -> Optional[T]:
        must_be_callable_or_none(selector, 'selector')
        must_be_callable_or_none(comparer, 'comparer')
        compare = comparer or default_compare
        best = best_key = MISSING
        async with aopened(self._query) as iterator:
            async for item in iterator:
                key = await resolve(selector(item)) if selector else item
                if best is MISSING or compare(key, best_key) * sign > 0:
                    best, best_key = item, key
        return None if best is MISSING else best

    async def min(self, selector: Optional[Selector[T, K]] = None, comparer: Optional[Comparer[K]] = None) -> Optional[T]:
        return await self._extreme(selector, comparer, -1)

    async def max(self, selector: Optional[Selector[T, K]] = None, comparer: Optional[Comparer[K]] = None) -> Optional[T]:
        return await self._extreme(selector, comparer, 1)

    # --- reductions ---

    async def reduce(self, accumulator: Accumulator[U, T], seed: U = MISSING,
                     result_selector: Optional[Selector[U, V]] = None) -> Union[U, V]:
        must_be_callable(accumulator, 'accumulator')
        must_be_callable_or_none(result_selector, 'result_selector')
        current = seed
        async with aopened(self._query) as iterator:
            async for item in iterator:
                current = item if current is MISSING else await resolve(accumulator(current, item))
        if current is MISSING:
            raise EmptySequenceError("cannot reduce an empty sequence without a seed")
        return await resolve(result_selector(current)) if result_selector else current

    async def reduce_right(self, accumulator: Accumulator[U, T], seed: U = MISSING,
                           result_selector: Optional[Selector[U, V]] = None) -> Union[U, V]:
        must_be_callable(accumulator, 'accumulator')
        must_be_callable_or_none(result_selector, 'result_selector')
        current = seed
        for item in reversed(await self._query._get_data()):
            current = item if current is MISSING else await resolve(accumulator(current, item))
        if current is MISSING:
            raise EmptySequenceError("cannot reduce an empty sequence without a seed")
        return await resolve(result_selector(current)) if result_selector else current

    async def for_each(self, action: Callable[[T], Any]) -> None:
        must_be_callable(action, 'action')
        async with aopened(self._query) as iterator:
            async for item in iterator:
                await resolve(action(item))

    async def drain(self) -> None:
        async with aopened(self._query) as iterator:
            async for _ in iterator:
                pass

    # --- comparisons ---

    async def sequence_equals(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        must_be_async_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        async with aopened(self._query) as left, aopened(other) as right:
            while True:
                left_item = await next_or_missing(left)
                right_item = await next_or_missing(right)
                if left_item is MISSING or right_item is MISSING:
                    return left_item is right_item
                if not equals(left_item, right_item):
                    return False

    async def corresponds(self, other: Any,
                          equaler: Union[Equaler, Callable[[T, Any], bool], None] = None) -> bool:
        return await self.corresponds_by(other, _identity, _identity, equaler)

    async def corresponds_by(self, other: Any, key_selector: KeySelector[T, K],
                             other_key_selector: Optional[KeySelector[Any, K]] = None,
                             key_equaler: Union[Equaler, Callable[[K, K], bool], None] = None) -> bool:
        """key selectors may be coroutines; the key equaler is synchronous"""
        must_be_async_queryable(other, 'other')
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(other_key_selector, 'other_key_selector')
        equals = _correspondence(key_equaler)
        other_key = other_key_selector if other_key_selector is not None else key_selector
        async with aopened(self._query) as left, aopened(other) as right:
            while True:
                left_item = await next_or_missing(left)
                right_item = await next_or_missing(right)
                if left_item is MISSING or right_item is MISSING:
                    return left_item is right_item
                left_key = await resolve(key_selector(left_item))
                right_key = await resolve(other_key(right_item))
                if not equals(left_key, right_key):
                    return False

    async def includes(self, value: T, equaler: Optional[Equaler[T]] = None) -> bool:
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        async with aopened(self._query) as iterator:
            async for item in iterator:
                if equals(item, value):
                    return True
        return False

    async def includes_sequence(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        must_be_async_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        needle = await _materialize(other)
        if not needle:
            return True
        window = deque(maxlen=len(needle))
        async with aopened(self._query) as iterator:
            async for item in iterator:
                window.append(item)
                if len(window) == len(needle) and all(map(equals, window, needle)):
                    return True
        return False

    async def starts_with(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        must_be_async_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        async with aopened(self._query) as left, aopened(other) as right:
            async for right_item in right:
                left_item = await next_or_missing(left)
                if left_item is MISSING or not equals(left_item, right_item):
                    return False
        return True

    async def ends_with(self, other: Any, equaler: Optional[Equaler[T]] = None) -> bool:
        must_be_async_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        needle = await _materialize(other)
        if not needle:
            return True
        tail = deque(await self._query._get_data(), maxlen=len(needle))
        return len(tail) == len(needle) and all(map(equals, tail, needle))
