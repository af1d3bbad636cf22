"""instrumented sources that record pulls, opens and releases."""
from typing import Any, Iterable, List, Optional


class SourceError(RuntimeError):
    pass


class TrackedSource:
    """
    a re-iterable source. every iterator it hands out counts towards `opened`,
    every element served towards `pulled`, and every close() call towards `closed`.
    with `fail_at`, the n-th pull (1-based, per iterator) raises SourceError.
    """

    def __init__(self, items: Iterable[Any], fail_at: Optional[int] = None):
        self.items: List[Any] = list(items)
        self.fail_at = fail_at
        self.opened = 0
        self.pulled = 0
        self.closed = 0

    def __iter__(self):
        self.opened += 1
        return _TrackedIterator(self)


class _TrackedIterator:
    def __init__(self, tracked: TrackedSource):
        self._source = tracked
        self._index = 0

    def __iter__(self):
        return self

    def __next__(self):
        tracked = self._source
        if tracked.fail_at is not None and self._index + 1 == tracked.fail_at:
            raise SourceError(f"pull {tracked.fail_at} failed")
        if self._index >= len(tracked.items):
            raise StopIteration
        item = tracked.items[self._index]
        self._index += 1
        tracked.pulled += 1
        return item

    def close(self):
        self._source.closed += 1


class AsyncTrackedSource(TrackedSource):
    """async twin of TrackedSource; release is counted through aclose()."""

    def __aiter__(self):
        self.opened += 1
        return _AsyncTrackedSourceIterator(self)


class _AsyncTrackedSourceIterator:
    def __init__(self, tracked: AsyncTrackedSource):
        self._inner = _TrackedIterator(tracked)
        self._source = tracked

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._inner)
        except StopIteration:
            raise StopAsyncIteration from None

    async def aclose(self):
        self._source.closed += 1


class Node:
    def __init__(self, name: str, *children: 'Node'):
        self.name = name
        self.parent: Optional['Node'] = None
        self.children = list(children)
        for child in self.children:
            child.parent = self

    def __repr__(self):
        return f"Node({self.name!r})"


class NodeProvider:
    def parent(self, node: Node) -> Optional[Node]:
        return node.parent

    def children(self, node: Node) -> List[Node]:
        return node.children


def sample_tree() -> Node:
    """
    root
    ├── a
    │   ├── a1
    │   └── a2
    │       └── a2x
    ├── b
    └── c
        └── c1
    """
    return Node('root',
                Node('a', Node('a1'), Node('a2', Node('a2x'))),
                Node('b'),
                Node('c', Node('c1')))


def names(nodes: Iterable[Node]) -> List[str]:
    return [node.name for node in nodes]
