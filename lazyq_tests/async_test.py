import asyncio

import suite
from lazyq import P, AP, EmptySequenceError, HierarchyRequiredError
from lazyq.aio import empty, from_range, generate, hierarchy, once, repeat
from lazyq_tests.tracking import AsyncTrackedSource, NodeProvider, TrackedSource, SourceError, Node, names, sample_tree

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises


def run(coroutine):
    return asyncio.run(coroutine)


async def agen(items):
    for item in items:
        await asyncio.sleep(0)
        yield item


async def double_later(x):
    await asyncio.sleep(0)
    return x * 2


async def is_even_later(x):
    await asyncio.sleep(0)
    return x % 2 == 0


# --- sources and stateless operators ---

@test("async factories and sources")
def test_sources():
    assert_equal(run(AP(agen([1, 2, 3])).to.list()), [1, 2, 3])
    assert_equal(run(AP([1, 2]).to.list()), [1, 2], "plain iterables are accepted")
    assert_equal(run(AP(P([1, 2]).select(lambda x: x + 1)).to.list()), [2, 3], "sync queries are accepted")
    assert_equal(run(from_range(2, 3).to.list()), [2, 3, 4])
    assert_equal(run(repeat('z', 2).to.list()), ['z', 'z'])
    assert_equal(run(once(1).to.list()), [1])
    assert_equal(run(empty().to.list()), [])
    assert_equal(run(generate(3, double_later).to.list()), [0, 2, 4])
    assert_raises(TypeError, lambda: AP(5))


@test("callbacks may be coroutines")
def test_async_callbacks():
    q = AP(agen(range(6))).where(is_even_later).select(double_later)
    assert_equal(run(q.to.list()), [0, 4, 8])


@test("stateless operators mirror the sync ones")
def test_core_mirror():
    q = AP(list(range(1, 8)))
    assert_equal(run(q.take(3).to.list()), [1, 2, 3])
    assert_equal(run(q.skip(5).to.list()), [6, 7])
    assert_equal(run(q.take_while(lambda x: x < 3).to.list()), [1, 2])
    assert_equal(run(q.skip_while(lambda x: x < 6).to.list()), [6, 7])
    assert_equal(run(q.take_right(2).to.list()), [6, 7])
    assert_equal(run(q.skip_right(5).to.list()), [1, 2])
    assert_equal(run(q.reverse().take(2).to.list()), [7, 6])
    assert_equal(run(AP([1]).append(2).prepend(0).concat(agen([3])).to.list()), [0, 1, 2, 3])
    assert_equal(run(AP([1, 2, 3]).patch(1, 1, agen(['x', 'y'])).to.list()), [1, 'x', 'y', 3])
    assert_equal(run(AP([1, 2, 3]).scan(lambda a, x: a + x).to.list()), [1, 3, 6])
    assert_equal(run(AP([[1], [2, 3]]).select_many(lambda xs: agen(xs)).to.list()), [1, 2, 3])
    assert_equal(run(AP([]).default_if_empty(0).to.list()), [0])
    assert_equal(run(AP([None, 1]).where_defined().to.list()), [1])
    assert_equal(run(q.take_until(is_even_later).to.list()), [1])
    assert_equal(run(q.skip_until(lambda x: x > 5).to.list()), [6, 7])
    assert_equal(run(AP([1, 2, 2, 3]).exclude(2).to.list()), [1, 3])


@test("async ordering is stable and accepts async keys")
def test_ordering():
    pairs = AP(agen([('b', 1), ('a', 2), ('b', 0), ('a', 1)]))
    ordered = pairs.order_by(lambda p: p[0]).then_by_descending(lambda p: p[1])
    assert_equal(run(ordered.to.list()), [('a', 2), ('a', 1), ('b', 1), ('b', 0)])
    assert_equal(run(AP([1, 2, 2, 3]).order_by(double_later).to.list()), [1, 2, 2, 3])
    assert_equal(run(AP([1, 2, 2, 3]).order_by(lambda x: -x).to.list()), [3, 2, 2, 1])


@test("async set algebra")
def test_set():
    q = AP([1, 2, 2, 3])
    assert_equal(run(q.set.distinct().to.list()), [1, 2, 3])
    assert_equal(run(q.set.union(agen([3, 4])).to.list()), [1, 2, 3, 4])
    assert_equal(run(q.set.intersect([2, 3, 5]).to.list()), [2, 3])
    assert_equal(run(q.set.except_([2]).to.list()), [1, 3])
    assert_equal(run(q.set.symmetric_difference([3, 4]).to.list()), [1, 2, 4])
    assert_equal(run(AP(['aa', 'b', 'cc']).set.distinct_by(len).to.list()), ['aa', 'b'])
    assert_that(run(q.set.is_subset_of([1, 2, 3, 4])), "subset")


@test("async grouping yields plain groupings")
def test_grouping():
    groups = run(AP(agen([1, 2, 2, 3])).group.group_by(lambda x: x).to.list())
    assert_equal([(g.key, g.to.list()) for g in groups], [(1, [1]), (2, [2, 2]), (3, [3])])
    lookup = run(AP(['ab', 'ac', 'b']).to.lookup(lambda s: s[0]))
    assert_equal(lookup.get('a').to.list(), ['ab', 'ac'])
    runs = run(AP([1, 1, 2]).group.span_map(lambda x: x).select(lambda g: g.to.count()).to.list())
    assert_equal(runs, [2, 1])
    pages = run(AP(range(5)).group.page_by(2).select(lambda p: p.to.list()).to.list())
    assert_equal(pages, [[0, 1], [2, 3], [4]])
    assert_equal(run(AP(range(4)).group.partition(is_even_later)), ([0, 2], [1, 3]))


@test("async joins")
def test_joins():
    outer = AP(agen([1, 2, 3]))
    inner = [(1, 'a'), (3, 'c'), (3, 'cc'), (4, 'd')]
    rows = run(outer.join.join(inner, lambda o: o, lambda i: i[0], lambda o, i: i[1]).to.list())
    assert_equal(rows, ['a', 'c', 'cc'])
    counts = run(AP([1, 2, 3]).join.group_join(inner, lambda o: o, lambda i: i[0],
                                                  lambda o, m: m.to.count()).to.list())
    assert_equal(counts, [1, 0, 2])
    full = run(AP([1, 2]).join.full_join(inner, lambda o: o, lambda i: i[0],
                                         lambda o, i: (o, i and i[1])).to.list())
    assert_equal(full, [(1, 'a'), (2, None), (None, 'c'), (None, 'cc'), (None, 'd')])


@test("async zip")
def test_zip():
    assert_equal(run(AP([1, 2, 3]).zip.zip_with(agen('ab')).to.list()), [(1, 'a'), (2, 'b')])
    assert_equal(run(AP([1]).zip.zip_longest_with([1, 2]).to.list()), [(1, 1), (None, 2)])
    assert_equal(run(AP([(1, 'a'), (2, 'b')]).zip.unzip()), ([1, 2], ['a', 'b']))


@test("async hierarchy traversal")
def test_tree():
    provider = NodeProvider()
    root = sample_tree()
    assert_equal(names(run(hierarchy(root, provider).tree.descendants().to.list())),
                 ['a', 'a1', 'a2', 'a2x', 'b', 'c', 'c1'])
    grandchild = Node('g')
    Node('r', Node('c', grandchild))
    up = run(AP([grandchild]).to_hierarchy(provider).tree.ancestors_and_self().to.list())
    assert_equal(names(up), ['g', 'c', 'r'])
    assert_raises(HierarchyRequiredError, lambda: AP([1]).tree.children())


@test("async terminals")
def test_terminals():
    q = AP(agen([3, 1, 2]))
    assert_equal(run(AP([3, 1, 2]).to.count()), 3)
    assert_equal(run(q.to.first()), 3)
    assert_equal(run(AP([3, 1, 2]).to.min()), 1)
    assert_equal(run(AP([3, 1, 2]).to.max()), 3)
    assert_equal(run(AP([3, 1, 2]).to.element_at(2)), 2)
    assert_equal(run(AP([3, 1, 2]).to.single()), None)
    assert_equal(run(AP([1, 2]).to.reduce(lambda a, x: a + x)), 3)
    assert_equal(run(AP([1, 2, 3]).stats.sum()), 6)
    assert_that(run(AP([1, 2, 3]).to.sequence_equals(agen([1, 2, 3]))), "sequence_equals")
    assert_that(run(AP([1, 2, 3]).to.includes_sequence([2, 3])), "includes_sequence")
    assert_that(run(AP([1, 2, 3]).to.ends_with([3])), "ends_with")
    assert_that(run(AP([1, 2]).to.corresponds(agen(['1', '2']), lambda a, b: str(a) == b)), "corresponds")
    assert_that(not run(AP([1, 2]).to.corresponds_by([2, 2], double_later, lambda x: x * 2)), "corresponds_by")
    assert_equal(run(AP([1, 2]).to.json()), '[1, 2]')

    async def empty_reduce():
        return await AP([]).to.reduce(lambda a, x: a + x)
    assert_raises(EmptySequenceError, lambda: run(empty_reduce()))


# --- laziness and release ---

@test("async chains are lazy and re-run per terminal")
def test_lazy():
    tracked = AsyncTrackedSource(range(5))
    q = AP(tracked).select(lambda x: x).where(lambda x: True).skip(0).take(10).select(str)
    assert_equal(tracked.pulled, 0)
    run(q.to.list())
    run(q.to.list())
    assert_equal(tracked.pulled, 10)
    assert_equal((tracked.opened, tracked.closed), (2, 2))


@test("async early exit closes the source")
def test_early_exit():
    tracked = AsyncTrackedSource(range(100))
    assert_equal(run(AP(tracked).where(lambda x: x > 2).to.first()), 3)
    assert_equal(tracked.pulled, 4)
    assert_equal(tracked.closed, 1)

    tracked = AsyncTrackedSource(range(100))
    assert_equal(run(AP(tracked).take(2).to.list()), [0, 1])
    assert_equal(tracked.closed, 1)


@test("async failures release every opened iterator")
def test_failure_release():
    failing = AsyncTrackedSource([1, 2, 3, 4], fail_at=3)
    other = TrackedSource('abcd')
    q = AP(failing).where(lambda x: True).zip.zip_with(other).select(lambda p: p)
    assert_raises(SourceError, lambda: run(q.to.list()))
    assert_equal((failing.opened, failing.closed), (1, 1))
    assert_equal((other.opened, other.closed), (1, 1))


if __name__ == "__main__":
    suite.main("lazyq async mirror")
