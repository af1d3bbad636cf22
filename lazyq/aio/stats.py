from __future__ import annotations
import typing
from ..types import *
from ..extensions.stats import numeric_values, summarize
from ..internal import must_be_callable_or_none

if typing.TYPE_CHECKING:
    from .query import AsyncQuery


class AsyncStatsAccessor(Generic[T]):
    """numeric aggregates for `AsyncQuery`, computed with numpy once the source is drained."""

    def __init__(self, query_instance: 'AsyncQuery[T]'):
        self._query = query_instance

    async def _get_values(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> List[Union[int, float]]:
        must_be_callable_or_none(selector, 'selector')
        source = self._query.select(selector) if selector else self._query
        return numeric_values(await source._get_data())

    async def sum(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> Union[int, float]:
        return summarize(await self._get_values(selector), 'sum')

    async def average(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> float:
        return summarize(await self._get_values(selector), 'average')

    async def std_dev(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> float:
        return summarize(await self._get_values(selector), 'std_dev')

    async def median(self, selector: Optional[Selector[T, Union[int, float]]] = None) -> float:
        return summarize(await self._get_values(selector), 'median')
