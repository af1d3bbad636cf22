"""
hierarchy axes over a parent/children provider.

each axis is a generator of the nodes reachable from one element. nothing here
assumes a backing tree: any provider shaped like `HierarchyProvider` works,
forests included. a None element, parent or child means "absent".
"""
from __future__ import annotations

from typing import Iterator

from .equality import same_value
from .internal import opened
from .types import HierarchyProvider, T


def children(provider: HierarchyProvider[T], element: T) -> Iterator[T]:
    if element is None:
        return
    nodes = provider.children(element)
    if nodes is None:
        return
    with opened(nodes) as iterator:
        for child in iterator:
            if child is not None:
                yield child


def parents(provider: HierarchyProvider[T], element: T) -> Iterator[T]:
    if element is None:
        return
    parent = provider.parent(element)
    if parent is not None:
        yield parent


def self(provider: HierarchyProvider[T], element: T) -> Iterator[T]:
    if element is not None:
        yield element


def ancestors(provider: HierarchyProvider[T], element: T, include_self: bool = False) -> Iterator[T]:
    """nearest ancestor first, walking `parent` until it is absent"""
    if element is None:
        return
    ancestor = element if include_self else provider.parent(element)
    while ancestor is not None:
        yield ancestor
        ancestor = provider.parent(ancestor)


def root(provider: HierarchyProvider[T], element: T) -> Iterator[T]:
    top = None
    for top in ancestors(provider, element, include_self=True):
        pass
    if top is not None:
        yield top


def descendants(provider: HierarchyProvider[T], element: T, include_self: bool = False) -> Iterator[T]:
    """pre-order depth-first: a node, then each child's whole subtree in turn"""
    if element is None:
        return
    if include_self:
        yield element
    for child in children(provider, element):
        yield from descendants(provider, child, include_self=True)


def siblings(provider: HierarchyProvider[T], element: T, include_self: bool = False) -> Iterator[T]:
    if element is None:
        return
    parent = provider.parent(element)
    if parent is None:
        # a root is its own only sibling
        if include_self:
            yield element
        return
    for child in children(provider, parent):
        if include_self or not same_value(child, element):
            yield child


def siblings_before_self(provider: HierarchyProvider[T], element: T) -> Iterator[T]:
    with opened(siblings(provider, element, include_self=True)) as iterator:
        for sibling in iterator:
            if same_value(sibling, element):
                return
            yield sibling


def siblings_after_self(provider: HierarchyProvider[T], element: T) -> Iterator[T]:
    seen_self = False
    for sibling in siblings(provider, element, include_self=True):
        if seen_self:
            yield sibling
        else:
            seen_self = same_value(sibling, element)


def nth_child(provider: HierarchyProvider[T], element: T, offset: int) -> Iterator[T]:
    if offset < 0:
        return
    with opened(children(provider, element)) as iterator:
        for index, child in enumerate(iterator):
            if index == offset:
                break
        else:
            return
    yield child
