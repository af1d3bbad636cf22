import typing
from ..types import *
from ..internal import (
    must_be_async_queryable, must_be_callable, must_be_hierarchy_provider, must_be_int,
    must_be_non_negative_int, resolve, to_async_iterator
)

if typing.TYPE_CHECKING:
    from .query import AsyncQuery


def from_async(data: Any) -> 'AsyncQuery[T]':
    """
    create an async query over an async iterable, a plain iterable (a `Query`
    included) or an array-like source. an async generator object is one-shot:
    only the first traversal sees its elements.
    """
    from .query import AsyncQuery
    if isinstance(data, AsyncQuery):
        return data
    must_be_async_queryable(data, 'data')
    return AsyncQuery(lambda: to_async_iterator(data, 'data'))


def from_range(start: int, count: int) -> 'AsyncQuery[int]':
    must_be_int(start, 'start')
    must_be_non_negative_int(count, 'count')
    return from_async(range(start, start + count))


def repeat(item: T, count: int) -> 'AsyncQuery[T]':
    from .query import AsyncQuery
    must_be_non_negative_int(count, 'count')

    async def repeat_data():
        for _ in range(count):
            yield item
    return AsyncQuery(repeat_data)


def once(item: T) -> 'AsyncQuery[T]':
    return from_async((item,))


def empty() -> 'AsyncQuery[Any]':
    return from_async(())


def generate(count: int, generator_func: Callable[[int], T]) -> 'AsyncQuery[T]':
    """generate `count` elements; generator_func receives the offset and may be async"""
    from .query import AsyncQuery
    must_be_non_negative_int(count, 'count')
    must_be_callable(generator_func, 'generator_func')

    async def generate_data():
        for offset in range(count):
            yield await resolve(generator_func(offset))
    return AsyncQuery(generate_data)


def hierarchy(root: T, provider: HierarchyProvider[T]) -> 'AsyncQuery[T]':
    from .query import AsyncQuery
    must_be_hierarchy_provider(provider, 'provider')
    return AsyncQuery(lambda: to_async_iterator((root,)), provider)


# --- aliases ---
AP = from_async
