from __future__ import annotations
import typing
from ..types import *
from ..internal import MISSING, must_be_callable_or_none, must_be_queryable, opened

if typing.TYPE_CHECKING:
    from ..query import Query


class ZipAccessor(Generic[T]):
    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    def zip_with(self, other: Iterable[U],
                 result_selector: Optional[Callable[[T, U], V]] = None) -> 'Query[V]':
        """pair elements positionally, stopping at the shorter sequence; pairs are tuples by default"""
        from ..query import Query
        must_be_queryable(other, 'other')
        must_be_callable_or_none(result_selector, 'result_selector')
        source = self._query

        def zip_data():
            with opened(source) as left, opened(other) as right:
                for left_item in left:
                    right_item = next(right, MISSING)
                    if right_item is MISSING:
                        return
                    yield result_selector(left_item, right_item) if result_selector else (left_item, right_item)
        return Query(zip_data)

    def zip_longest_with(self, other: Iterable[U],
                         result_selector: Optional[Callable[[Optional[T], Optional[U]], V]] = None,
                         default_self: Optional[T] = None, default_other: Optional[U] = None) -> 'Query[V]':
        """zip sequences padding shorter with defaults"""
        from ..query import Query
        must_be_queryable(other, 'other')
        must_be_callable_or_none(result_selector, 'result_selector')
        source = self._query

        def zip_longest_data():
            with opened(source) as left, opened(other) as right:
                while True:
                    left_item = next(left, MISSING)
                    right_item = next(right, MISSING)
                    if left_item is MISSING and right_item is MISSING:
                        return
                    s_item = default_self if left_item is MISSING else left_item
                    o_item = default_other if right_item is MISSING else right_item
                    yield result_selector(s_item, o_item) if result_selector else (s_item, o_item)
        return Query(zip_longest_data)

    def unzip(self) -> Tuple[List[Any], ...]:
        """
        the inverse of zip: a sequence of tuples becomes a tuple of lists.
        e.g., [(a, 1), (b, 2)] -> ([a, b], [1, 2])
        """
        data = self._query._get_data()
        if not data:
            return tuple()
        return tuple(list(column) for column in zip(*data))
