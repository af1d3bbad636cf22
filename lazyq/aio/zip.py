from __future__ import annotations
import typing
from ..types import *
from ..internal import MISSING, aopened, must_be_async_queryable, must_be_callable_or_none, next_or_missing, resolve

if typing.TYPE_CHECKING:
    from .query import AsyncQuery


class AsyncZipAccessor(Generic[T]):
    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    def zip_with(self, other: Any,
                 result_selector: Optional[Callable[[T, U], V]] = None) -> 'AsyncQuery[V]':
        """pair elements positionally, stopping at the shorter sequence"""
        from .query import AsyncQuery
        must_be_async_queryable(other, 'other')
        must_be_callable_or_none(result_selector, 'result_selector')
        source = self._query

        async def zip_data():
            async with aopened(source) as left, aopened(other) as right:
                async for left_item in left:
                    right_item = await next_or_missing(right)
                    if right_item is MISSING:
                        return
                    if result_selector:
                        yield await resolve(result_selector(left_item, right_item))
                    else:
                        yield left_item, right_item
        return AsyncQuery(zip_data)

    def zip_longest_with(self, other: Any,
                         result_selector: Optional[Callable[[Optional[T], Optional[U]], V]] = None,
                         default_self: Optional[T] = None, default_other: Optional[U] = None) -> 'AsyncQuery[V]':
        from .query import AsyncQuery
        must_be_async_queryable(other, 'other')
        must_be_callable_or_none(result_selector, 'result_selector')
        source = self._query

        async def zip_longest_data():
            async with aopened(source) as left, aopened(other) as right:
                while True:
                    left_item = await next_or_missing(left)
                    right_item = await next_or_missing(right)
                    if left_item is MISSING and right_item is MISSING:
                        return
                    s_item = default_self if left_item is MISSING else left_item
                    o_item = default_other if right_item is MISSING else right_item
                    if result_selector:
                        yield await resolve(result_selector(s_item, o_item))
                    else:
                        yield s_item, o_item
        return AsyncQuery(zip_longest_data)

    async def unzip(self) -> Tuple[List[Any], ...]:
        data = await self._query._get_data()
        if not data:
            return tuple()
        return tuple(list(column) for column in zip(*data))
