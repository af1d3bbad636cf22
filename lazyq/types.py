from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, Any, Optional, Union,
    Dict, List, Tuple, Set, Type, Protocol, Awaitable, AsyncIterator, AsyncIterable
)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')
R = TypeVar('R')

Predicate = Callable[[T], bool]
Selector = Callable[[T], U]
KeySelector = Callable[[T], K]
Comparer = Callable[[T, T], int]
Accumulator = Callable[[U, T], U]


class HierarchyProvider(Protocol[T]):
    """
    the parent/children relation the hierarchy operators walk.
    `parent` returns None for a root; `children` may return None for a leaf.
    """

    def parent(self, element: T) -> Optional[T]: ...

    def children(self, element: T) -> Optional[Iterable[T]]: ...
