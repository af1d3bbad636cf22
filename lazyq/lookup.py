from __future__ import annotations

import logging

from .types import *
from .equality import Equaler, EqualityKey
from .internal import must_be_callable, opened
from .query import Grouping, Query

logger = logging.getLogger(__name__)


class Lookup(Generic[K, V]):
    """
    an immutable multi-map from key to the elements that share it.

    keys keep first-seen order and each key's elements keep encounter order.
    iterating a lookup yields one `Grouping` per key.
    """

    def __init__(self, entries: Iterable[Tuple[K, Iterable[V]]], equaler: Optional[Equaler[K]] = None):
        self._equaler = equaler if equaler is not None else Equaler.default
        self._entries: Dict[EqualityKey, Tuple[K, List[V]]] = {}
        for key, values in entries:
            bucket = self._entries.setdefault(EqualityKey(key, self._equaler), (key, []))
            bucket[1].extend(values)

    @property
    def size(self) -> int:
        """number of distinct keys"""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def has(self, key: K) -> bool:
        return EqualityKey(key, self._equaler) in self._entries

    __contains__ = has

    def get(self, key: K) -> Query[V]:
        """the elements for `key`, or an empty query for an unknown key"""
        values = self._find(key)
        return Query(lambda: iter(values), sized=values)

    def _find(self, key: K) -> List[V]:
        entry = self._entries.get(EqualityKey(key, self._equaler))
        return entry[1] if entry is not None else []

    def apply_result_selector(self, selector: Callable[[K, Query[V]], R]) -> Query[R]:
        """projects every group again without re-scanning the original source"""
        must_be_callable(selector, 'selector')
        entries = self._entries

        def select_data():
            for key, values in entries.values():
                yield selector(key, Grouping(key, values))
        return Query(select_data)

    def __iter__(self) -> Iterator[Grouping[K, V]]:
        for key, values in self._entries.values():
            yield Grouping(key, values)

    def __repr__(self) -> str:
        return f"<Lookup size={self.size}>"


def collect_buckets(source: Iterable[T], key_selector: KeySelector[T, K],
                    element_selector: Optional[Selector[T, V]] = None,
                    equaler: Optional[Equaler[K]] = None) -> List[Tuple[K, List[V]]]:
    """one full pass of `source` into (key, elements) buckets in first-seen key order"""
    eq = equaler if equaler is not None else Equaler.default
    buckets: Dict[EqualityKey, Tuple[K, List[V]]] = {}
    count = 0
    with opened(source) as iterator:
        for element in iterator:
            key = key_selector(element)
            value = element_selector(element) if element_selector is not None else element
            buckets.setdefault(EqualityKey(key, eq), (key, []))[1].append(value)
            count += 1
    logger.debug("grouped %d elements into %d key(s)", count, len(buckets))
    return list(buckets.values())


def build_lookup(source: Iterable[T], key_selector: KeySelector[T, K],
                 element_selector: Optional[Selector[T, V]] = None,
                 equaler: Optional[Equaler[K]] = None) -> Lookup[K, V]:
    return Lookup(collect_buckets(source, key_selector, element_selector, equaler), equaler)
