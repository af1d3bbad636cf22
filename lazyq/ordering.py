"""stable multi-key ordering over an immutable chain of sort keys."""
from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from .internal import default_compare

logger = logging.getLogger(__name__)


class SortKey(NamedTuple):
    """one link of a sort-key chain. links point at their parent, never the other way."""
    key_selector: Callable[[Any], Any]
    comparer: Callable[[Any, Any], int]
    descending: bool
    parent: Optional['SortKey']

    def extend(self, key_selector, comparer=None, descending=False) -> 'SortKey':
        return SortKey(key_selector, comparer or default_compare, descending, self)

    def chain(self) -> List['SortKey']:
        """links from the primary key (chain root) to this one"""
        links = []
        link = self
        while link is not None:
            links.append(link)
            link = link.parent
        links.reverse()
        return links


def root_key(key_selector, comparer=None, descending=False) -> SortKey:
    return SortKey(key_selector, comparer or default_compare, descending, None)


def compute_keys(elements: Sequence[Any], links: Sequence[SortKey]) -> List[List[Any]]:
    """one key column per link; each key is computed once per element."""
    return [[link.key_selector(element) for element in elements] for link in links]


def sort_by_keys(elements: Sequence[Any], links: Sequence[SortKey], columns: Sequence[Sequence[Any]]) -> List[Any]:
    """
    sorts an index permutation by the cached key columns, primary key first.
    elements tied on every key keep their source order.
    """
    def compare(i: int, j: int) -> int:
        for link, column in zip(links, columns):
            result = link.comparer(column[i], column[j])
            if result:
                return -result if link.descending else result
        return i - j

    logger.debug("ordering %d elements by %d key(s)", len(elements), len(links))
    permutation = sorted(range(len(elements)), key=cmp_to_key(compare))
    return [elements[i] for i in permutation]


def stable_order(elements: Sequence[Any], sort_key: SortKey) -> List[Any]:
    links = sort_key.chain()
    return sort_by_keys(elements, links, compute_keys(elements, links))
