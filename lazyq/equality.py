"""
pluggable equality for the set, grouping and join operators.

the default rule is `same_value`: plain `==`, except that nan equals nan and
+0.0 and -0.0 are kept apart. an `Equaler` pairs an equality test with a hash
that must agree with it (equal elements hash equally).
"""
from __future__ import annotations

import math
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar('T')
K = TypeVar('K')

_NAN_HASH = 0x7FF8_0000


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and value != value


def _is_zero(value: Any) -> bool:
    return isinstance(value, (int, float)) and value == 0


def same_value(x: Any, y: Any) -> bool:
    """value identity: nan equals nan, +0.0 and -0.0 are distinct."""
    if x is y:
        return True
    if _is_nan(x) or _is_nan(y):
        return _is_nan(x) and _is_nan(y)
    if (isinstance(x, float) or isinstance(y, float)) and _is_zero(x) and _is_zero(y):
        return math.copysign(1.0, x) == math.copysign(1.0, y)
    return bool(x == y)


def same_value_hash(value: Any) -> int:
    """hash consistent with `same_value`."""
    if _is_nan(value):
        return _NAN_HASH
    try:
        return hash(value)
    except TypeError:
        # unhashable values share a per-type bucket and fall back to `==`
        return hash(type(value))


class Equaler(Generic[T]):
    """an equality test together with a hash that agrees with it."""

    default: 'Equaler[Any]'

    __slots__ = ('_equals', '_hash')

    def __init__(self, equals: Callable[[T, T], bool], hash: Optional[Callable[[T], int]] = None):
        if not callable(equals):
            raise TypeError("equals must be callable")
        if hash is not None and not callable(hash):
            raise TypeError("hash must be callable")
        self._equals = equals
        self._hash = hash if hash is not None else same_value_hash

    def equals(self, x: T, y: T) -> bool:
        return bool(self._equals(x, y))

    def hash(self, value: T) -> int:
        return self._hash(value)

    @classmethod
    def create(cls, equals: Callable[[T, T], bool], hash: Optional[Callable[[T], int]] = None) -> 'Equaler[T]':
        """
        builds an equaler from callbacks. without a hash callback every element
        hashes by `same_value_hash`, which is only correct when `equals` is no
        looser than `same_value`; pass a hash for anything coarser.
        """
        return cls(equals, hash)

    @classmethod
    def by(cls, key_selector: Callable[[T], K], equaler: Optional['Equaler[K]'] = None) -> 'Equaler[T]':
        """equality on a projected key"""
        inner = equaler if equaler is not None else cls.default
        return cls(lambda x, y: inner.equals(key_selector(x), key_selector(y)),
                   lambda x: inner.hash(key_selector(x)))

    def __repr__(self) -> str:
        if self is Equaler.default:
            return "Equaler.default"
        return f"Equaler(equals={self._equals!r}, hash={self._hash!r})"


Equaler.default = Equaler(same_value, same_value_hash)


def is_equaler(value: Any) -> bool:
    return callable(getattr(value, 'equals', None)) and callable(getattr(value, 'hash', None))


class EqualityKey:
    """wraps a value so plain dicts and sets compare it through an equaler."""

    __slots__ = ('value', '_equaler', '_hash')

    def __init__(self, value: Any, equaler: Equaler):
        self.value = value
        self._equaler = equaler
        self._hash = equaler.hash(value)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EqualityKey):
            return NotImplemented
        return self._equaler.equals(self.value, other.value)

    def __repr__(self) -> str:
        return f"EqualityKey({self.value!r})"


def keyed(equaler: Optional[Equaler] = None,
          key_selector: Optional[Callable[[Any], Any]] = None) -> Callable[[Any], EqualityKey]:
    """returns a function mapping an element to its dict/set key."""
    eq = equaler if equaler is not None else Equaler.default
    if key_selector is None:
        return lambda value: EqualityKey(value, eq)
    return lambda value: EqualityKey(key_selector(value), eq)
