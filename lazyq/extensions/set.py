from __future__ import annotations
import typing
from ..types import *
from ..equality import Equaler, EqualityKey, keyed
from ..internal import MISSING, must_be_callable, must_be_equaler_or_none, must_be_queryable, opened

if typing.TYPE_CHECKING:
    from ..query import Query


class SetAccessor(Generic[T]):
    """
    set algebra over sequences. every operator compares elements through an
    `Equaler` (default: `same_value`), either on the elements themselves or,
    for the `*_by` variants, on a projected key. results keep the order in
    which elements were first seen.
    """
    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    # --- shared implementations ---

    def _distinct(self, key: Callable[[T], EqualityKey]) -> 'Query[T]':
        source = self._query
        def distinct_data():
            seen = set()
            with opened(source) as iterator:
                for item in iterator:
                    item_key = key(item)
                    if item_key not in seen:
                        seen.add(item_key)
                        yield item
        return source._flow(distinct_data)

    def _union(self, other: Iterable[T], key: Callable[[T], EqualityKey]) -> 'Query[T]':
        source = self._query
        def union_data():
            seen = set()
            for side in (source, other):
                with opened(side) as iterator:
                    for item in iterator:
                        item_key = key(item)
                        if item_key not in seen:
                            seen.add(item_key)
                            yield item
        return source._flow(union_data)

    def _intersect(self, other: Iterable[T], key: Callable[[T], EqualityKey]) -> 'Query[T]':
        source = self._query
        def intersect_data():
            with opened(other) as iterator:
                pending = {key(item) for item in iterator}
            if not pending:
                return
            with opened(source) as iterator:
                for item in iterator:
                    item_key = key(item)
                    # each matching key is consumed on its first hit
                    if item_key in pending:
                        pending.remove(item_key)
                        yield item
        return source._flow(intersect_data)

    def _except(self, other: Iterable[T], key: Callable[[T], EqualityKey]) -> 'Query[T]':
        source = self._query
        def except_data():
            with opened(other) as iterator:
                excluded = {key(item) for item in iterator}
            with opened(source) as iterator:
                for item in iterator:
                    item_key = key(item)
                    if item_key not in excluded:
                        excluded.add(item_key)
                        yield item
        return source._flow(except_data)

    def _symmetric_difference(self, other: Iterable[T], key: Callable[[T], EqualityKey]) -> 'Query[T]':
        source = self._query
        def symmetric_difference_data():
            right: Dict[EqualityKey, T] = {}
            with opened(other) as iterator:
                for item in iterator:
                    right.setdefault(key(item), item)
            left_keys = set()
            with opened(source) as iterator:
                for item in iterator:
                    item_key = key(item)
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
    def _check(other: Optional[Iterable[T]], equaler: Optional[Equaler], key_selector: Any = MISSING) -> None:
        if other is not None:
            must_be_queryable(other, 'other')
        if key_selector is not MISSING:
            must_be_callable(key_selector, 'key_selector')
        must_be_equaler_or_none(equaler, 'equaler')

    # --- element equality ---

    def distinct(self, equaler: Optional[Equaler[T]] = None) -> 'Query[T]':
        """return distinct elements. preserves order of first appearance."""
        self._check(None, equaler)
        return self._distinct(keyed(equaler))

    def union(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> 'Query[T]':
        """distinct elements of this sequence, then those of `other` not yet seen."""
        self._check(other, equaler)
        return self._union(other, keyed(equaler))

    def intersect(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> 'Query[T]':
        """distinct elements of this sequence that also occur in `other`."""
        self._check(other, equaler)
        return self._intersect(other, keyed(equaler))

    def except_(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> 'Query[T]':
        """distinct elements of this sequence that never occur in `other`."""
        self._check(other, equaler)
        return self._except(other, keyed(equaler))

    def symmetric_difference(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> 'Query[T]':
        """elements found in exactly one of the two sequences, this one's first."""
        self._check(other, equaler)
        return self._symmetric_difference(other, keyed(equaler))

    # --- key equality ---

    def distinct_by(self, key_selector: KeySelector[T, K], equaler: Optional[Equaler[K]] = None) -> 'Query[T]':
        self._check(None, equaler, key_selector)
        return self._distinct(keyed(equaler, key_selector))

    def union_by(self, other: Iterable[T], key_selector: KeySelector[T, K],
                 equaler: Optional[Equaler[K]] = None) -> 'Query[T]':
        self._check(other, equaler, key_selector)
        return self._union(other, keyed(equaler, key_selector))

    def intersect_by(self, other: Iterable[T], key_selector: KeySelector[T, K],
                     equaler: Optional[Equaler[K]] = None) -> 'Query[T]':
        self._check(other, equaler, key_selector)
        return self._intersect(other, keyed(equaler, key_selector))

    def except_by(self, other: Iterable[T], key_selector: KeySelector[T, K],
                  equaler: Optional[Equaler[K]] = None) -> 'Query[T]':
        self._check(other, equaler, key_selector)
        return self._except(other, keyed(equaler, key_selector))

    def symmetric_difference_by(self, other: Iterable[T], key_selector: KeySelector[T, K],
                                equaler: Optional[Equaler[K]] = None) -> 'Query[T]':
        self._check(other, equaler, key_selector)
        return self._symmetric_difference(other, keyed(equaler, key_selector))

    # --- boolean set checks ---

    def _key_set(self, source: Iterable[T], equaler: Optional[Equaler[T]]) -> typing.Set[EqualityKey]:
        key = keyed(equaler)
        with opened(source) as iterator:
            return {key(item) for item in iterator}

    def is_subset_of(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """determines whether every element of this sequence occurs in another."""
        self._check(other, equaler)
        return self._key_set(self._query, equaler) <= self._key_set(other, equaler)

    def is_superset_of(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """determines whether every element of another sequence occurs in this one."""
        self._check(other, equaler)
        return self._key_set(self._query, equaler) >= self._key_set(other, equaler)

    def is_disjoint_with(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """determines whether this sequence has no elements in common with another."""
        self._check(other, equaler)
        return self._key_set(self._query, equaler).isdisjoint(self._key_set(other, equaler))
