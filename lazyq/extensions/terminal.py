from __future__ import annotations
import json
import typing
from collections import deque
import numpy as np
import pandas as pd
from ..types import *
from ..equality import Equaler, is_equaler, same_value
from ..errors import EmptySequenceError
from ..internal import (
    MISSING, default_compare, must_be_callable, must_be_callable_or_none,
    must_be_equaler_or_none, must_be_int, must_be_queryable, opened
)

if typing.TYPE_CHECKING:
    from ..query import Query
    from ..lookup import Lookup


def _equals(equaler: Optional[Equaler]) -> Callable[[Any, Any], bool]:
    return equaler.equals if equaler is not None else same_value


def _identity(value: Any) -> Any:
    return value


def _correspondence(equaler: Any) -> Callable[[Any, Any], bool]:
    if equaler is None:
        return same_value
    if is_equaler(equaler):
        return equaler.equals
    if callable(equaler):
        return equaler
    raise TypeError("equaler must be an Equaler or a callable")


class TerminalAccessor(Generic[T]):
    """
    terminal operations: each one runs the query (once) and returns a concrete
    value. the "no value" outcomes (first/last/single/element_at/min/max on an
    empty or unmatched sequence) return None rather than raising.
    """

    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    # --- conversions ---

    def list(self) -> List[T]:
        """convert to list"""
        return self._query._get_data()

    def set(self) -> Set[T]:
        """convert to set"""
        with opened(self._query) as iterator:
            return set(iterator)

    def dict(self, key_selector: KeySelector[T, K],
             value_selector: Optional[Selector[T, V]] = None) -> Dict[K, V]:
        """convert to dictionary; later elements overwrite earlier ones with the same key"""
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(value_selector, 'value_selector')
        val_sel = value_selector if value_selector else lambda item: item
        with opened(self._query) as iterator:
            return {key_selector(item): val_sel(item) for item in iterator}

    def lookup(self, key_selector: KeySelector[T, K],
               element_selector: Optional[Selector[T, V]] = None,
               equaler: Optional[Equaler[K]] = None) -> 'Lookup[K, V]':
        """convert to an immutable multi-map"""
        return self._query.group.to_lookup(key_selector, element_selector, equaler)

    def array(self) -> np.ndarray:
        """convert to numpy array"""
        return np.array(self._query._get_data())

    def pandas(self) -> pd.Series:
        """convert to pandas series"""
        return pd.Series(self._query._get_data())

    def df(self) -> pd.DataFrame:
        """convert to pandas dataframe"""
        return pd.DataFrame(self._query._get_data())

    def json(self, **kwargs: Any) -> str:
        """serialize the list form to json text"""
        return json.dumps(self._query.to_json(), **kwargs)

    # --- counting and quantifiers ---

    def count(self, predicate: Optional[Predicate[T]] = None) -> int:
        """count elements, or the elements matching predicate"""
        must_be_callable_or_none(predicate, 'predicate')
        if predicate is None and self._query._sized is not None:
            return len(self._query._sized)
        with opened(self._query) as iterator:
            if predicate is None:
                return sum(1 for _ in iterator)
            return sum(1 for x in iterator if predicate(x))

    def any(self, predicate: Optional[Predicate[T]] = None) -> bool:
        """check if any element satisfies condition"""
        must_be_callable_or_none(predicate, 'predicate')
        with opened(self._query) as iterator:
            if predicate is None:
                return next(iterator, MISSING) is not MISSING
            return any(predicate(x) for x in iterator)

    def all(self, predicate: Predicate[T]) -> bool:
        """check if all elements satisfy condition"""
        must_be_callable(predicate, 'predicate')
        with opened(self._query) as iterator:
            return all(predicate(x) for x in iterator)

    # --- element access ---

    def first(self, predicate: Optional[Predicate[T]] = None) -> Optional[T]:
        """first element (matching predicate), or None"""
        must_be_callable_or_none(predicate, 'predicate')
        with opened(self._query) as iterator:
            for item in iterator:
                if predicate is None or predicate(item):
                    return item
        return None

    def last(self, predicate: Optional[Predicate[T]] = None) -> Optional[T]:
        """last element (matching predicate), or None"""
        must_be_callable_or_none(predicate, 'predicate')
        result = None
        with opened(self._query) as iterator:
            for item in iterator:
                if predicate is None or predicate(item):
                    result = item
        return result

    def single(self, predicate: Optional[Predicate[T]] = None) -> Optional[T]:
        """the only element (matching predicate); None when there are none or several"""
        must_be_callable_or_none(predicate, 'predicate')
        result = MISSING
        with opened(self._query) as iterator:
            for item in iterator:
                if predicate is None or predicate(item):
                    if result is not MISSING:
                        return None
                    result = item
        return None if result is MISSING else result

    def element_at(self, offset: int) -> Optional[T]:
        """element at a zero-based offset, or None; a negative offset never touches the source"""
        must_be_int(offset, 'offset')
        if offset < 0:
            return None
        with opened(self._query) as iterator:
            for index, item in enumerate(iterator):
                if index == offset:
                    return item
        return None

    def _extreme(self, selector: Optional[Selector[T, K]], comparer: Optional[Comparer[K]], sign: int) -> Optional[T]:
        must_be_callable_or_none(selector, 'selector')
        must_be_callable_or_none(comparer, 'comparer')
        compare = comparer or default_compare
        best = best_key = MISSING
        with opened(self._query) as iterator:
            for item in iterator:
                key = selector(item) if selector else item
                if best is MISSING or compare(key, best_key) * sign > 0:
                    best, best_key = item, key
        return None if best is MISSING else best

    def min(self, selector: Optional[Selector[T, K]] = None, comparer: Optional[Comparer[K]] = None) -> Optional[T]:
        """smallest element (by selector key and comparer), first one on ties; None when empty"""
        return self._extreme(selector, comparer, -1)

    def max(self, selector: Optional[Selector[T, K]] = None, comparer: Optional[Comparer[K]] = None) -> Optional[T]:
        """largest element (by selector key and comparer), first one on ties; None when empty"""
        return self._extreme(selector, comparer, 1)

    # --- reductions ---

    def reduce(self, accumulator: Accumulator[U, T], seed: U = MISSING,
               result_selector: Optional[Selector[U, V]] = None) -> Union[U, V]:
        """
        applies accumulator over the sequence. without a seed the first element
        is the seed, and an empty sequence raises EmptySequenceError.
        """
        must_be_callable(accumulator, 'accumulator')
        must_be_callable_or_none(result_selector, 'result_selector')
        current = seed
        with opened(self._query) as iterator:
            for item in iterator:
                current = item if current is MISSING else accumulator(current, item)
        if current is MISSING:
            raise EmptySequenceError("cannot reduce an empty sequence without a seed")
        return result_selector(current) if result_selector else current

    def reduce_right(self, accumulator: Accumulator[U, T], seed: U = MISSING,
                     result_selector: Optional[Selector[U, V]] = None) -> Union[U, V]:
        """reduce from the last element to the first"""
        must_be_callable(accumulator, 'accumulator')
        must_be_callable_or_none(result_selector, 'result_selector')
        current = seed
        for item in reversed(self._query._get_data()):
            current = item if current is MISSING else accumulator(current, item)
        if current is MISSING:
            raise EmptySequenceError("cannot reduce an empty sequence without a seed")
        return result_selector(current) if result_selector else current

    def for_each(self, action: Callable[[T], Any]) -> None:
        """performs the specified action on each element of a sequence for side-effects."""
        must_be_callable(action, 'action')
        with opened(self._query) as iterator:
            for item in iterator:
                action(item)

    def drain(self) -> None:
        """run the query to completion, discarding the elements"""
        with opened(self._query) as iterator:
            deque(iterator, maxlen=0)

    # --- comparisons ---

    def sequence_equals(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """pairwise lock-step comparison; stops at the first mismatch or length difference"""
        must_be_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        with opened(self._query) as left, opened(other) as right:
            while True:
                left_item = next(left, MISSING)
                right_item = next(right, MISSING)
                if left_item is MISSING or right_item is MISSING:
                    return left_item is right_item
                if not equals(left_item, right_item):
                    return False

    def corresponds(self, other: Iterable[Any],
                    equaler: Union[Equaler, Callable[[T, Any], bool], None] = None) -> bool:
        """
        like `sequence_equals`, but `equaler` may also be a plain two-argument
        callable, so the two sequences can hold different element types.
        """
        return self.corresponds_by(other, _identity, _identity, equaler)

    def corresponds_by(self, other: Iterable[Any], key_selector: KeySelector[T, K],
                       other_key_selector: Optional[KeySelector[Any, K]] = None,
                       key_equaler: Union[Equaler, Callable[[K, K], bool], None] = None) -> bool:
        """lock-step comparison of the keys of both sequences"""
        must_be_queryable(other, 'other')
        must_be_callable(key_selector, 'key_selector')
        must_be_callable_or_none(other_key_selector, 'other_key_selector')
        equals = _correspondence(key_equaler)
        other_key = other_key_selector if other_key_selector is not None else key_selector
        with opened(self._query) as left, opened(other) as right:
            while True:
                left_item = next(left, MISSING)
                right_item = next(right, MISSING)
                if left_item is MISSING or right_item is MISSING:
                    return left_item is right_item
                if not equals(key_selector(left_item), other_key(right_item)):
                    return False

    def includes(self, value: T, equaler: Optional[Equaler[T]] = None) -> bool:
        """whether any element equals value"""
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        with opened(self._query) as iterator:
            return any(equals(item, value) for item in iterator)

    def includes_sequence(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """whether `other` occurs as a contiguous run"""
        must_be_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        with opened(other) as iterator:
            needle = list(iterator)
        if not needle:
            return True
        window = deque(maxlen=len(needle))
        with opened(self._query) as iterator:
            for item in iterator:
                window.append(item)
                if len(window) == len(needle) and all(map(equals, window, needle)):
                    return True
        return False

    def starts_with(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """whether the sequence begins with the elements of `other`"""
        must_be_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        with opened(self._query) as left, opened(other) as right:
            for right_item in right:
                left_item = next(left, MISSING)
                if left_item is MISSING or not equals(left_item, right_item):
                    return False
        return True

    def ends_with(self, other: Iterable[T], equaler: Optional[Equaler[T]] = None) -> bool:
        """whether the sequence ends with the elements of `other`"""
        must_be_queryable(other, 'other')
        must_be_equaler_or_none(equaler, 'equaler')
        equals = _equals(equaler)
        with opened(other) as iterator:
            needle = list(iterator)
        if not needle:
            return True
        with opened(self._query) as iterator:
            tail = deque(iterator, maxlen=len(needle))
        return len(tail) == len(needle) and all(map(equals, tail, needle))
