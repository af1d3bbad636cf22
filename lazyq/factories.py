import typing
from .types import *
from .internal import (
    must_be_callable, must_be_hierarchy_provider, must_be_int,
    must_be_non_negative_int, to_iterable
)

if typing.TYPE_CHECKING:
    from .query import Query


def from_iterable(data: Iterable[T]) -> 'Query[T]':
    """create a query over an iterable or array-like source"""
    from .query import Query
    if isinstance(data, Query):
        return data
    source = to_iterable(data, 'data')
    # a sized, re-iterable source lets count() answer without a traversal
    sized = data if hasattr(data, '__len__') and not hasattr(data, '__next__') else None
    return Query(lambda: iter(source), sized=sized)


def from_range(start: int, count: int) -> 'Query[int]':
    """create query over `count` consecutive integers starting at `start`"""
    from .query import Query
    must_be_int(start, 'start')
    must_be_non_negative_int(count, 'count')
    return Query(lambda: iter(range(start, start + count)))


def range_of(start: int, stop: int, step: int = 1) -> 'Query[int]':
    """create query over range(start, stop, step); counts down when stop < start and step is omitted"""
    from .query import Query
    must_be_int(start, 'start')
    must_be_int(stop, 'stop')
    must_be_int(step, 'step')
    if step == 0:
        raise ValueError("step must not be zero")
    if stop < start and step > 0:
        step = -step
    return Query(lambda: iter(range(start, stop, step)))


def repeat(item: T, count: int) -> 'Query[T]':
    """create query with repeated item"""
    from .query import Query
    must_be_non_negative_int(count, 'count')

    def repeat_data():
        for _ in range(count):
            yield item
    return Query(repeat_data)


def once(item: T) -> 'Query[T]':
    """create query with a single item"""
    from .query import Query
    return Query(lambda: iter((item,)))


def empty() -> 'Query[Any]':
    """create empty query"""
    from .query import Query
    return Query(lambda: iter(()))


def continuous(item: T) -> 'Query[T]':
    """create an infinite query repeating item"""
    from .query import Query

    def continuous_data():
        while True:
            yield item
    return Query(continuous_data)


def generate(count: int, generator_func: Callable[[int], T]) -> 'Query[T]':
    """generate `count` elements by calling generator_func with each offset"""
    from .query import Query
    must_be_non_negative_int(count, 'count')
    must_be_callable(generator_func, 'generator_func')

    def generate_data():
        for offset in range(count):
            yield generator_func(offset)
    return Query(generate_data)


def consume(iterator: Iterator[T]) -> 'Query[T]':
    """
    wrap an existing iterator. the iterator is shared, so only the first
    traversal sees its elements.
    """
    from .query import Query
    if not hasattr(iterator, '__next__'):
        raise TypeError(f"iterator must be an iterator, got {type(iterator).__name__}")
    return Query(lambda: iterator)


def hierarchy(root: T, provider: HierarchyProvider[T]) -> 'Query[T]':
    """create a single-element query over `root` with a hierarchy provider attached"""
    from .query import Query
    must_be_hierarchy_provider(provider, 'provider')
    return Query(lambda: iter((root,)), provider)


# --- aliases ---
query = from_iterable
P = from_iterable
