import json

import numpy as np
import pandas as pd

import suite
from dgen import from_schema
from lazyq import P, Equaler, EmptySequenceError, empty
from lazyq_tests.tracking import TrackedSource

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises

product_schema = {
    'name': 'word',
    'price': ('pyint', {'min_value': 5, 'max_value': 500}),
    'category': {'_dgen': 'choice', 'from': ['electronics', 'books', 'clothing']},
}


# --- conversions ---

@test("list, set and dict conversions")
def test_collections():
    q = P([3, 1, 3, 2])
    assert_equal(q.to.list(), [3, 1, 3, 2])
    assert_equal(q.to.set(), {1, 2, 3})
    assert_equal(P(['a', 'bb']).to.dict(lambda s: s, len), {'a': 1, 'bb': 2})
    assert_equal(P([('k', 1), ('k', 2)]).to.dict(lambda p: p[0], lambda p: p[1]), {'k': 2}, "later keys win")


@test("numpy and pandas conversions")
def test_numeric_conversions():
    arr = P([1, 2, 3]).to.array()
    assert_that(isinstance(arr, np.ndarray), "array returns an ndarray")
    assert_equal(arr.tolist(), [1, 2, 3])
    series = P([1.5, 2.5]).to.pandas()
    assert_that(isinstance(series, pd.Series), "pandas returns a Series")
    assert_equal(series.sum(), 4.0)
    products = from_schema(product_schema, seed=9).take(10)
    frame = products.to.df()
    assert_that(isinstance(frame, pd.DataFrame), "df returns a DataFrame")
    assert_equal(list(frame.columns), ['name', 'price', 'category'])
    assert_equal(len(frame), 10)


@test("json serializes the list form")
def test_json():
    q = P([{'a': 1}, {'a': 2}])
    assert_equal(json.loads(q.to.json()), [{'a': 1}, {'a': 2}])
    assert_equal(q.to_json(), [{'a': 1}, {'a': 2}])
    assert_equal(P([1]).to.json(indent=2), '[\n  1\n]')


# --- counting and quantifiers ---

@test("count, any and all")
def test_quantifiers():
    q = P(range(10))
    assert_equal(q.to.count(), 10)
    assert_equal(q.to.count(lambda x: x % 3 == 0), 4)
    assert_that(q.to.any(), "a non-empty source has any")
    assert_that(not empty().to.any(), "empty has none")
    assert_that(q.to.any(lambda x: x > 8), "9 matches")
    assert_that(q.to.all(lambda x: x < 10), "all below 10")
    assert_that(empty().to.all(lambda x: False), "all is vacuously true")


# --- element access ---

@test("first, last and single return None when nothing qualifies")
def test_element_access():
    q = P([4, 5, 6])
    assert_equal(q.to.first(), 4)
    assert_equal(q.to.first(lambda x: x > 4), 5)
    assert_equal(q.to.last(), 6)
    assert_equal(q.to.last(lambda x: x < 6), 5)
    assert_equal(empty().to.first(), None)
    assert_equal(empty().to.last(), None)
    assert_equal(P([7]).to.single(), 7)
    assert_equal(q.to.single(lambda x: x == 5), 5)
    assert_equal(q.to.single(), None, "more than one element")
    assert_equal(q.to.single(lambda x: x > 10), None, "no element")


@test("single stops at the second match")
def test_single_short_circuit():
    tracked = TrackedSource([1, 2, 3, 4])
    assert_equal(P(tracked).to.single(lambda x: x > 1), None)
    assert_equal(tracked.pulled, 3)


@test("element_at indexes from zero and ignores negative offsets")
def test_element_at():
    q = P(['a', 'b', 'c'])
    assert_equal(q.to.element_at(1), 'b')
    assert_equal(q.to.element_at(3), None)
    tracked = TrackedSource([1, 2])
    assert_equal(P(tracked).to.element_at(-1), None)
    assert_equal(tracked.opened, 0, "a negative offset never touches the source")


@test("min and max by key and comparer, first extreme wins")
def test_min_max():
    q = P([('a', 3), ('b', 1), ('c', 3), ('d', 1)])
    assert_equal(q.to.min(lambda p: p[1]), ('b', 1))
    assert_equal(q.to.max(lambda p: p[1]), ('a', 3))
    assert_equal(P([5, 2, 9]).to.min(), 2)
    by_length = lambda a, b: len(a) - len(b)
    assert_equal(P(['ccc', 'a', 'bb']).to.max(comparer=by_length), 'ccc')
    assert_equal(empty().to.min(), None)
    assert_equal(empty().to.max(), None)


# --- reductions ---

@test("reduce with and without a seed")
def test_reduce():
    q = P([1, 2, 3, 4])
    assert_equal(q.to.reduce(lambda acc, x: acc + x), 10)
    assert_equal(q.to.reduce(lambda acc, x: acc * x, 1), 24)
    assert_equal(q.to.reduce(lambda acc, x: acc + x, 0, lambda total: total / 2), 5.0)
    assert_equal(empty().to.reduce(lambda acc, x: acc + x, 'seed'), 'seed')
    error = assert_raises(EmptySequenceError, lambda: empty().to.reduce(lambda acc, x: acc + x))
    assert_that(isinstance(error, ValueError), "an empty reduction is a ValueError")


@test("reduce_right folds from the end")
def test_reduce_right():
    assert_equal(P(['a', 'b', 'c']).to.reduce_right(lambda acc, x: acc + x), 'cba')
    assert_equal(P([1, 2]).to.reduce_right(lambda acc, x: acc + [x], []), [2, 1])
    assert_raises(EmptySequenceError, lambda: empty().to.reduce_right(lambda acc, x: acc))


@test("for_each and drain run the chain for side effects")
def test_for_each_drain():
    seen = []
    P([1, 2, 3]).to.for_each(seen.append)
    assert_equal(seen, [1, 2, 3])
    tracked = TrackedSource(range(5))
    P(tracked).to.drain()
    assert_equal(tracked.pulled, 5)


# --- comparisons ---

@test("sequence_equals compares in lock step")
def test_sequence_equals():
    assert_that(P([1, 2, 3]).to.sequence_equals([1, 2, 3]), "equal sequences")
    assert_that(not P([1, 2]).to.sequence_equals([1, 2, 3]), "length differs")
    assert_that(not P([1, 2, 3]).to.sequence_equals([1, 2]), "length differs the other way")
    assert_that(P([float('nan')]).to.sequence_equals([float('nan')]), "nan matches nan")
    ci = Equaler.create(lambda a, b: a.lower() == b.lower())
    assert_that(P(['A', 'b']).to.sequence_equals(['a', 'B'], ci), "custom equaler")


@test("corresponds compares sequences of different element types")
def test_corresponds():
    assert_that(P([1, 2, 3]).to.corresponds([1, 2, 3]), "default equality")
    assert_that(P([1, 2]).to.corresponds(['1', '2'], lambda a, b: str(a) == b), "two-argument callable")
    assert_that(not P([1, 2]).to.corresponds(['1'], lambda a, b: str(a) == b), "length differs")
    ci = Equaler.create(lambda a, b: a.lower() == b.lower())
    assert_that(P(['A']).to.corresponds(['a'], ci), "an Equaler is accepted too")
    people = [{'id': 1}, {'id': 2}]
    assert_that(P(people).to.corresponds_by([1, 2], lambda p: p['id'], lambda i: i), "keys on each side")
    assert_that(P(['ab', 'cd']).to.corresponds_by(['xy', 'zw'], len), "one key selector for both")
    assert_raises(TypeError, lambda: P([1]).to.corresponds([1], 'eq'))


@test("includes, includes_sequence, starts_with and ends_with")
def test_membership():
    q = P([1, 2, 3, 4, 5])
    assert_that(q.to.includes(3), "3 is included")
    assert_that(not q.to.includes(-0.0) and P([0.0]).to.includes(0.0), "signed zeros are distinct")
    assert_that(q.to.includes_sequence([3, 4]), "contiguous run")
    assert_that(not q.to.includes_sequence([3, 5]), "not contiguous")
    assert_that(q.to.includes_sequence([]), "the empty run is everywhere")
    assert_that(q.to.starts_with([1, 2]), "prefix")
    assert_that(not q.to.starts_with([2]), "not a prefix")
    assert_that(not P([1]).to.starts_with([1, 2]), "longer prefix")
    assert_that(q.to.ends_with([4, 5]), "suffix")
    assert_that(not q.to.ends_with([0, 1, 2, 3, 4, 5]), "longer suffix")


@test("terminals validate their arguments")
def test_terminal_arguments():
    assert_raises(TypeError, lambda: P([1]).to.all(None))
    assert_raises(TypeError, lambda: P([1]).to.element_at('1'))
    assert_raises(TypeError, lambda: P([1]).to.sequence_equals(5))
    assert_raises(TypeError, lambda: P([1]).to.reduce('add'))


if __name__ == "__main__":
    suite.main("lazyq terminal operations")
