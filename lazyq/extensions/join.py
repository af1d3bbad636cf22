from __future__ import annotations
import typing
from ..types import *
from ..equality import Equaler, EqualityKey
from ..internal import (
    must_be_callable, must_be_equaler_or_none, must_be_queryable, opened
)

if typing.TYPE_CHECKING:
    from ..query import Query


class JoinAccessor(Generic[T]):
    """
    key-based joins. the inner sequence is indexed once (all matches per key
    kept, in order) when the result is first pulled; the outer sequence is then
    streamed against the index.
    """
    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    @staticmethod
    def _check(inner, outer_key_selector, inner_key_selector, result_selector, equaler) -> None:
        must_be_queryable(inner, 'inner')
        must_be_callable(outer_key_selector, 'outer_key_selector')
        must_be_callable(inner_key_selector, 'inner_key_selector')
        must_be_callable(result_selector, 'result_selector')
        must_be_equaler_or_none(equaler, 'equaler')

    def join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
             inner_key_selector: KeySelector[U, K],
             result_selector: Callable[[T, U], V],
             equaler: Optional[Equaler[K]] = None) -> 'Query[V]':
        """inner join: one result per matching (outer, inner) pair; unmatched outer elements are dropped"""
        from ..query import Query
        from ..lookup import build_lookup
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query

        def join_data():
            lookup = build_lookup(inner, inner_key_selector, None, equaler)
            with opened(outer) as iterator:
                for outer_item in iterator:
                    for inner_item in lookup._find(outer_key_selector(outer_item)):
                        yield result_selector(outer_item, inner_item)
        return Query(join_data)

    def group_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                   inner_key_selector: KeySelector[U, K],
                   result_selector: Callable[[T, 'Query[U]'], V],
                   equaler: Optional[Equaler[K]] = None) -> 'Query[V]':
        """one result per outer element, paired with a (possibly empty) query of its matches"""
        from ..query import Query
        from ..lookup import build_lookup
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query

        def group_join_data():
            lookup = build_lookup(inner, inner_key_selector, None, equaler)
            with opened(outer) as iterator:
                for outer_item in iterator:
                    yield result_selector(outer_item, lookup.get(outer_key_selector(outer_item)))
        return Query(group_join_data)

    def left_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[T, Optional[U]], V],
                  default_inner: Optional[U] = None,
                  equaler: Optional[Equaler[K]] = None) -> 'Query[V]':
        """left outer join - includes all outer elements even without matches"""
        from ..query import Query
        from ..lookup import build_lookup
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query

        def left_join_data():
            lookup = build_lookup(inner, inner_key_selector, None, equaler)
            with opened(outer) as iterator:
                for outer_item in iterator:
                    matched_inners = lookup._find(outer_key_selector(outer_item))
                    if not matched_inners:
                        yield result_selector(outer_item, default_inner)
                    for inner_item in matched_inners:
                        yield result_selector(outer_item, inner_item)
        return Query(left_join_data)

    def full_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[Optional[T], Optional[U]], V],
                  equaler: Optional[Equaler[K]] = None) -> 'Query[V]':
        """
        full outer join: every outer element (with None when unmatched) in outer
        order, then inner elements whose key no outer element had, with None.
        """
        from ..query import Query
        from ..lookup import build_lookup
        self._check(inner, outer_key_selector, inner_key_selector, result_selector, equaler)
        outer = self._query
        eq = equaler if equaler is not None else Equaler.default

        def full_join_data():
            lookup = build_lookup(inner, inner_key_selector, None, equaler)
            matched_keys = set()
            with opened(outer) as iterator:
                for outer_item in iterator:
                    key = outer_key_selector(outer_item)
                    matched_inners = lookup._find(key)
                    if not matched_inners:
                        yield result_selector(outer_item, None)
                        continue
                    matched_keys.add(EqualityKey(key, eq))
                    for inner_item in matched_inners:
                        yield result_selector(outer_item, inner_item)
            for group in lookup:
                if EqualityKey(group.key, eq) not in matched_keys:
                    for inner_item in group:
                        yield result_selector(None, inner_item)
        return Query(full_join_data)
