from __future__ import annotations
import typing
from ..types import *
from ..equality import Equaler, EqualityKey
from ..internal import (
    aopened, must_be_async_queryable, must_be_callable, must_be_equaler_or_none, resolve
)
from .grouping import build_lookup

if typing.TYPE_CHECKING:
    from .query import AsyncQuery


class AsyncJoinAccessor(Generic[T]):
    """key-based joins for `AsyncQuery`; the inner side is drained into a lookup on first pull."""

    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    @staticmethod
    def _check(inner, outer_key_selector, inner_key_selector, result_selector, equaler) -> None:
        must_be_async_queryable(inner, 'inner')
        must_be_callable(outer_key_selector, 'outer_key_selector')
        must_be_callable(inner_key_selector, 'inner_key_selector')
        must_be_callable(result_selector, 'result_selector')
        must_be_equaler_or_none(equaler, 'equaler')

    def join(self, inner: Any, outer_key_selector: KeySelector[T, K],
             inner_key_selector: KeySelector[U, K],
             result_selector: Callable[[T, U], V],
             equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[V]':
        from .query import AsyncQuery
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query

        async def join_data():
            lookup = await build_lookup(inner, inner_key_selector, None, equaler)
            async with aopened(outer) as iterator:
                async for outer_item in iterator:
                    for inner_item in lookup._find(await resolve(outer_key_selector(outer_item))):
                        yield await resolve(result_selector(outer_item, inner_item))
        return AsyncQuery(join_data)

    def group_join(self, inner: Any, outer_key_selector: KeySelector[T, K],
                   inner_key_selector: KeySelector[U, K],
                   result_selector: Callable[[T, Any], V],
                   equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[V]':
        """one result per outer element; matches arrive as a plain (possibly empty) `Query`"""
        from .query import AsyncQuery
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query

        async def group_join_data():
            lookup = await build_lookup(inner, inner_key_selector, None, equaler)
            async with aopened(outer) as iterator:
                async for outer_item in iterator:
                    matches = lookup.get(await resolve(outer_key_selector(outer_item)))
                    yield await resolve(result_selector(outer_item, matches))
        return AsyncQuery(group_join_data)

    def left_join(self, inner: Any, outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[T, Optional[U]], V],
                  default_inner: Optional[U] = None,
                  equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[V]':
        from .query import AsyncQuery
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query

        async def left_join_data():
            lookup = await build_lookup(inner, inner_key_selector, None, equaler)
            async with aopened(outer) as iterator:
                async for outer_item in iterator:
                    matched_inners = lookup._find(await resolve(outer_key_selector(outer_item)))
                    if not matched_inners:
                        yield await resolve(result_selector(outer_item, default_inner))
                    for inner_item in matched_inners:
                        yield await resolve(result_selector(outer_item, inner_item))
        return AsyncQuery(left_join_data)

    def full_join(self, inner: Any, outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[Optional[T], Optional[U]], V],
                  equaler: Optional[Equaler[K]] = None) -> 'AsyncQuery[V]':
        from .query import AsyncQuery
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query
        eq = equaler if equaler is not None else Equaler.default

        async def full_join_data():
            lookup = await build_lookup(inner, inner_key_selector, None, equaler)
            matched_keys = set()
            async with aopened(outer) as iterator:
                async for outer_item in iterator:
                    key = await resolve(outer_key_selector(outer_item))
                    matched_inners = lookup._find(key)
                    if not matched_inners:
                        yield await resolve(result_selector(outer_item, None))
                        continue
                    matched_keys.add(EqualityKey(key, eq))
                    for inner_item in matched_inners:
                        yield await resolve(result_selector(outer_item, inner_item))
            for group in lookup:
                if EqualityKey(group.key, eq) not in matched_keys:
                    for inner_item in group:
                        yield await resolve(result_selector(None, inner_item))
        return AsyncQuery(full_join_data)
