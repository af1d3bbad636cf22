"""argument checks and scoped iterator release shared by the operators."""
from __future__ import annotations

import inspect
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterable, Iterator

from .equality import is_equaler

# marks an argument the caller did not pass, where None is a legal value
MISSING: Any = object()


def identity(value):
    return value


def default_compare(x: Any, y: Any) -> int:
    return (x > y) - (x < y)


# --- argument checks ---

def must_be_callable(value: Any, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {type(value).__name__}")


def must_be_callable_or_none(value: Any, name: str) -> None:
    if value is not None and not callable(value):
        raise TypeError(f"{name} must be callable or None, got {type(value).__name__}")


def must_be_int(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")


def must_be_non_negative_int(value: Any, name: str) -> None:
    must_be_int(value, name)
    if value < 0:
        raise ValueError(f"{name} must not be negative")


def must_be_positive_int(value: Any, name: str) -> None:
    must_be_int(value, name)
    if value <= 0:
        raise ValueError(f"{name} must be positive")


def must_be_equaler_or_none(value: Any, name: str) -> None:
    if value is not None and not is_equaler(value):
        raise TypeError(f"{name} must provide callable equals() and hash()")


def must_be_hierarchy_provider(value: Any, name: str) -> None:
    if not (callable(getattr(value, 'parent', None)) and callable(getattr(value, 'children', None))):
        raise TypeError(f"{name} must provide callable parent() and children()")


def is_array_like(value: Any) -> bool:
    return hasattr(value, '__len__') and hasattr(value, '__getitem__')


def is_queryable(value: Any) -> bool:
    return hasattr(value, '__iter__') or is_array_like(value)


def must_be_queryable(value: Any, name: str) -> None:
    if not is_queryable(value):
        raise TypeError(f"{name} must be iterable or array-like, got {type(value).__name__}")


def is_async_queryable(value: Any) -> bool:
    return hasattr(value, '__aiter__') or is_queryable(value)


def must_be_async_queryable(value: Any, name: str) -> None:
    if not is_async_queryable(value):
        raise TypeError(f"{name} must be an async iterable, iterable or array-like, "
                        f"got {type(value).__name__}")


# --- sources ---

class ArrayLikeIterable:
    """iterates an object that only offers `len()` and integer indexing."""

    def __init__(self, source):
        self._source = source

    def __iter__(self) -> Iterator:
        source = self._source
        offset = 0
        # length is re-read on every step so a growing source is followed
        while offset < len(source):
            yield source[offset]
            offset += 1


def to_iterable(source: Any, name: str = "source") -> Iterable:
    if hasattr(source, '__iter__'):
        return source
    if is_array_like(source):
        return ArrayLikeIterable(source)
    raise TypeError(f"{name} must be iterable or array-like, got {type(source).__name__}")


# --- scoped release ---

def close(iterator: Any) -> None:
    closer = getattr(iterator, 'close', None)
    if closer is not None:
        closer()


@contextmanager
def opened(source: Iterable) -> Iterator[Iterator]:
    """
    opens an iterator over `source` and closes it on every exit path.
    nest one `opened` per source so a failing close cannot skip the others.
    """
    iterator = iter(to_iterable(source))
    try:
        yield iterator
    finally:
        close(iterator)


class _SyncAsyncIterator:
    """presents a plain iterator through the async iterator protocol."""

    def __init__(self, iterator: Iterator):
        self._iterator = iterator

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._iterator)
        except StopIteration:
            raise StopAsyncIteration from None

    async def aclose(self) -> None:
        close(self._iterator)


def to_async_iterator(source: Any, name: str = "source") -> AsyncIterator:
    if hasattr(source, '__aiter__'):
        return source.__aiter__()
    return _SyncAsyncIterator(iter(to_iterable(source, name)))


async def aclose(iterator: Any) -> None:
    closer = getattr(iterator, 'aclose', None)
    if closer is not None:
        await closer()
        return
    close(iterator)


@asynccontextmanager
async def aopened(source: Any):
    """async twin of `opened`: the iterator is `aclose`d on every exit path."""
    iterator = to_async_iterator(source)
    try:
        yield iterator
    finally:
        await aclose(iterator)


async def next_or_missing(iterator: AsyncIterator) -> Any:
    """one async pull; MISSING once the iterator is exhausted"""
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return MISSING


async def resolve(value: Any) -> Any:
    """awaits callback results that are awaitable, passes others through."""
    if inspect.isawaitable(value):
        return await value
    return value
