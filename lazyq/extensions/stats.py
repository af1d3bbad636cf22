from __future__ import annotations
import typing
import numpy as np
from ..types import *
from ..errors import EmptySequenceError
from ..internal import must_be_callable_or_none

if typing.TYPE_CHECKING:
    from ..query import Query


def numeric_values(data: List[Any]) -> List[Union[int, float]]:
    """validate that every value is numeric for a statistical operation"""
    if data and not all(isinstance(x, (int, float, np.number)) for x in data):
        raise TypeError("sequence contains non-numeric types for statistical operation.")
    return data


def _native(result: Any) -> Any:
    return result.item() if hasattr(result, 'item') else result


def summarize(values: List[Union[int, float]], operation: str) -> Union[int, float]:
    """numpy reduction over already-materialized numeric values"""
    if operation == 'sum':
        return _native(np.sum(values)) if values else 0
    if not values:
        raise EmptySequenceError(f"cannot calculate {operation} of empty sequence")
    arr = np.asarray(values, dtype=float)
    if operation == 'average':
        return float(np.mean(arr))
    if operation == 'std_dev':
        # population standard deviation (ddof=0), numpy's default
        return float(np.std(arr))
    if operation == 'median':
        return float(np.median(arr))
    raise ValueError(f"unknown operation '{operation}'")


class StatsAccessor(Generic[T]):
    """numeric aggregates; each one is a terminal operation over one traversal."""

    def __init__(self, query_instance: 'Query[T]'):
        self._query = query_instance

    def _get_values(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> List[Union[int, float]]:
        """helper to extract numeric values for statistical operations."""
        must_be_callable_or_none(selector, 'selector')
        if selector:
            return numeric_values(self._query.select(selector)._get_data())
        return numeric_values(self._query._get_data())

    def sum(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> Union[int, float]:
        """calc sum; 0 for an empty sequence"""
        return summarize(self._get_values(selector), 'sum')

    def average(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> float:
        """calc average"""
        return summarize(self._get_values(selector), 'average')

    def std_dev(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> float:
        """calculate standard deviation"""
        return summarize(self._get_values(selector), 'std_dev')

    def median(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> float:
        """calculate median value"""
        return summarize(self._get_values(selector), 'median')
