import suite
from dgen import from_schema
from lazyq import P, empty

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises

employee_schema = {
    'name': 'first_name',
    'department': {'_dgen': 'choice', 'from': ['eng', 'sales', 'hr']},
    'level': {'_dgen': 'choice', 'from': [1, 2, 3]},
}


@test("order_by sorts ascending and keeps ties in source order")
def test_order_by_stable():
    pairs = P([('b', 1), ('a', 2), ('b', 3), ('a', 4)])
    assert_equal(pairs.order_by(lambda p: p[0]).to.list(), [('a', 2), ('a', 4), ('b', 1), ('b', 3)])


@test("order_by_descending keeps ties in source order")
def test_order_by_descending_stable():
    pairs = P([('b', 1), ('a', 2), ('b', 3), ('a', 4)])
    assert_equal(pairs.order_by_descending(lambda p: p[0]).to.list(),
                 [('b', 1), ('b', 3), ('a', 2), ('a', 4)])


@test("then_by orders within primary-key ties")
def test_then_by():
    rows = P([
        {'dept': 'eng', 'age': 40, 'id': 1},
        {'dept': 'hr', 'age': 30, 'id': 2},
        {'dept': 'eng', 'age': 25, 'id': 3},
        {'dept': 'hr', 'age': 30, 'id': 4},
        {'dept': 'eng', 'age': 25, 'id': 5},
    ])
    ordered = rows.order_by(lambda r: r['dept']).then_by(lambda r: r['age']).to.list()
    assert_equal([r['id'] for r in ordered], [3, 5, 1, 2, 4], "full ties keep their source order")

    mixed = rows.order_by(lambda r: r['dept']).then_by_descending(lambda r: r['age']).to.list()
    assert_equal([r['id'] for r in mixed], [1, 3, 5, 2, 4])


@test("then_by extends a new chain without changing the original ordering")
def test_chain_immutable():
    data = P([(2, 'b'), (1, 'z'), (2, 'a'), (1, 'y')])
    primary = data.order_by(lambda t: t[0])
    secondary = primary.then_by(lambda t: t[1])
    assert_equal(primary.to.list(), [(1, 'z'), (1, 'y'), (2, 'b'), (2, 'a')])
    assert_equal(secondary.to.list(), [(1, 'y'), (1, 'z'), (2, 'a'), (2, 'b')])


@test("negated key sorts [1, 2, 2, 3] as [3, 2, 2, 1]")
def test_negated_key():
    assert_equal(P([1, 2, 2, 3]).order_by(lambda x: -x).to.list(), [3, 2, 2, 1])


@test("custom comparers decide the order")
def test_custom_comparer():
    by_length = lambda a, b: len(a) - len(b)
    words = P(['ccc', 'a', 'bb', 'dd', 'e'])
    assert_equal(words.order_by(lambda w: w, by_length).to.list(), ['a', 'e', 'bb', 'dd', 'ccc'])
    assert_equal(words.order_by_descending(lambda w: w, by_length).to.list(), ['ccc', 'bb', 'dd', 'a', 'e'])
    case_insensitive = lambda a, b: (a.lower() > b.lower()) - (a.lower() < b.lower())
    assert_equal(P(['b', 'A', 'a', 'B']).order_by(lambda w: w, case_insensitive).to.list(), ['A', 'a', 'b', 'B'])


@test("each key selector runs once per element per key")
def test_keys_computed_once():
    calls = []

    def key(x):
        calls.append(x)
        return x % 3

    P(list(range(20))).order_by(key).then_by(lambda x: -x).to.list()
    assert_equal(len(calls), 20)


@test("ordering keeps working after other operators")
def test_ordered_chain():
    result = P([5, 3, 8, 1]).order_by(lambda x: x).where(lambda x: x > 2).select(lambda x: x * 10).to.list()
    assert_equal(result, [30, 50, 80])
    assert_equal(empty().order_by(lambda x: x).to.list(), [])


@test("ordering generated records by two keys")
def test_generated_two_keys():
    staff = from_schema(employee_schema, seed=11).take(40)
    ordered = staff.order_by(lambda e: e['department']).then_by_descending(lambda e: e['level']).to.list()
    keys = [(e['department'], -e['level']) for e in ordered]
    assert_equal(keys, sorted(keys))


@test("ordering validates its arguments")
def test_order_arguments():
    assert_raises(TypeError, lambda: P([1]).order_by('key'))
    assert_raises(TypeError, lambda: P([1]).order_by(lambda x: x, comparer=3))
    assert_raises(TypeError, lambda: P([1]).order_by(lambda x: x).then_by(None))


if __name__ == "__main__":
    suite.main("lazyq ordering")
