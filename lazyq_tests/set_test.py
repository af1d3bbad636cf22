import math

import suite
from dgen import from_schema
from lazyq import P, Equaler, empty, same_value

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises

case_insensitive = Equaler.create(lambda a, b: a.lower() == b.lower(), lambda s: hash(s.lower()))

tag_schema = {
    'tag': {'_dgen': 'choice', 'from': ['red', 'green', 'blue', 'red', 'red']},
}


def as_sorted(q):
    return sorted(q.to.list(), key=repr)


# --- equality ---

@test("same_value treats nan as equal and signed zeros as distinct")
def test_same_value():
    assert_that(same_value(float('nan'), float('nan')), "nan equals nan")
    assert_that(not same_value(0.0, -0.0), "+0.0 and -0.0 differ")
    assert_that(same_value(1, 1.0), "plain == otherwise")
    assert_that(not same_value('1', 1), "no coercion between types")


@test("distinct keeps first occurrences in order")
def test_distinct():
    assert_equal(P([1, 2, 2, 3]).set.distinct().to.list(), [1, 2, 3])
    assert_equal(P([3, 1, 3, 2, 1]).set.distinct().to.list(), [3, 1, 2])
    nan = float('nan')
    result = P([nan, 1.0, float('nan'), 0.0, -0.0]).set.distinct().to.list()
    assert_equal(len(result), 4, "one nan, 1.0 and both zeros survive")
    assert_that(math.isnan(result[0]), "nan comes first")


@test("distinct handles unhashable elements")
def test_distinct_unhashable():
    rows = P([{'a': 1}, {'a': 2}, {'a': 1}, [1], [1]])
    assert_equal(rows.set.distinct().to.list(), [{'a': 1}, {'a': 2}, [1]])


@test("distinct with a custom equaler")
def test_distinct_equaler():
    assert_equal(P(['Apple', 'apple', 'Pear', 'APPLE']).set.distinct(case_insensitive).to.list(), ['Apple', 'Pear'])


@test("union, intersect, except and symmetric difference")
def test_binary_operators():
    left, right = P([1, 2, 3, 3, 4]), [3, 4, 5, 5, 6]
    assert_equal(left.set.union(right).to.list(), [1, 2, 3, 4, 5, 6])
    assert_equal(left.set.intersect(right).to.list(), [3, 4])
    assert_equal(left.set.except_(right).to.list(), [1, 2])
    assert_equal(left.set.symmetric_difference(right).to.list(), [1, 2, 5, 6])


@test("set operators accept an equaler")
def test_binary_with_equaler():
    left = P(['A', 'b', 'C'])
    right = ['a', 'B', 'd']
    assert_equal(left.set.union(right, case_insensitive).to.list(), ['A', 'b', 'C', 'd'])
    assert_equal(left.set.intersect(right, case_insensitive).to.list(), ['A', 'b'])
    assert_equal(left.set.except_(right, case_insensitive).to.list(), ['C'])
    assert_equal(left.set.symmetric_difference(right, case_insensitive).to.list(), ['C', 'd'])


@test("_by variants compare a projected key")
def test_by_variants():
    people = P([('ann', 'eng'), ('bob', 'hr'), ('cat', 'eng')])
    others = [('dan', 'hr'), ('eve', 'ops')]
    dept = lambda p: p[1]
    assert_equal(people.set.distinct_by(dept).to.list(), [('ann', 'eng'), ('bob', 'hr')])
    assert_equal(people.set.union_by(others, dept).to.list(), [('ann', 'eng'), ('bob', 'hr'), ('eve', 'ops')])
    assert_equal(people.set.intersect_by(others, dept).to.list(), [('bob', 'hr')])
    assert_equal(people.set.except_by(others, dept).to.list(), [('ann', 'eng')])
    assert_equal(people.set.symmetric_difference_by(others, dept).to.list(), [('ann', 'eng'), ('eve', 'ops')])
    by_name_length = Equaler.by(len)
    assert_equal(P(['ab', 'cd', 'efg']).set.distinct(by_name_length).to.list(), ['ab', 'efg'])


@test("idempotence and closure laws hold")
def test_laws():
    sources = [
        P([1, 2, 2, 3, 3, 3]),
        P(['x', 'y', 'x']),
        from_schema(tag_schema, seed=3).take(25).select(lambda r: r['tag']),
        empty(),
    ]
    for s in sources:
        distinct = as_sorted(s.set.distinct())
        assert_equal(as_sorted(s.set.distinct().set.distinct()), distinct, "distinct is idempotent")
        assert_equal(as_sorted(s.set.union(s)), distinct, "union with itself is distinct")
        assert_equal(as_sorted(s.set.intersect(s)), distinct, "intersect with itself is distinct")
        assert_equal(s.set.except_(s).to.list(), [], "except itself is empty")
        assert_equal(s.set.symmetric_difference(s).to.list(), [], "symmetric difference with itself is empty")


@test("subset, superset and disjoint checks")
def test_boolean_checks():
    small, big = P([1, 2]), [1, 2, 3]
    assert_that(small.set.is_subset_of(big), "[1, 2] is a subset of [1, 2, 3]")
    assert_that(not P(big).set.is_subset_of(small), "[1, 2, 3] is not a subset of [1, 2]")
    assert_that(P(big).set.is_superset_of(small), "superset")
    assert_that(small.set.is_disjoint_with([7, 8]), "disjoint")
    assert_that(not small.set.is_disjoint_with([2]), "not disjoint")
    assert_that(P(['A']).set.is_subset_of(['a'], case_insensitive), "equaler applies")


@test("set operators keep the hierarchy provider")
def test_hierarchy_flows():
    class Flat:
        def parent(self, x):
            return None

        def children(self, x):
            return []

    q = P([1, 1, 2]).to_hierarchy(Flat())
    assert_that(q.set.distinct()._hierarchy is not None, "distinct keeps the provider")
    assert_that(q.select(lambda x: x)._hierarchy is None, "select drops the provider")


@test("set operators validate their arguments")
def test_arguments():
    assert_raises(TypeError, lambda: P([1]).set.union(3))
    assert_raises(TypeError, lambda: P([1]).set.distinct(equaler='nope'))
    assert_raises(TypeError, lambda: P([1]).set.distinct_by(None))
    assert_raises(TypeError, lambda: Equaler.create(None))


if __name__ == "__main__":
    suite.main("lazyq set algebra")
