import suite
from dgen import from_schema
from lazyq import Query

test = suite.test
assert_that = suite.assert_that
assert_equal = suite.assert_equal
assert_raises = suite.assert_raises

team_schema = {
    'id': ('pyint', {'min_value': 1, 'max_value': 9}),
    'name': 'first_name',
    'team': {'_dgen': 'choice', 'from': ['red', 'blue']},
    'handle': {'_dgen': 'ref', 'key': 'name', 'format': 'user-{}'},
    'active': {'_dgen': 'literal', 'value': True},
    'tags': [{'_dgen_items': 'word', '_dgen_count': (1, 3)}],
}


@test("schemas produce re-iterable queries of records")
def test_records():
    people = from_schema(team_schema, seed=3).take(12)
    assert_that(isinstance(people, Query), "take returns a query")
    assert_equal(people.to.count(), 12)
    assert_equal(people.to.list(), people.to.list(), "the same records on every traversal")
    assert_that(people.to.all(lambda p: 1 <= p['id'] <= 9), "faker kwargs are honoured")
    assert_that(people.to.all(lambda p: p['team'] in ('red', 'blue')), "choice picks from the list")
    assert_that(people.to.all(lambda p: p['handle'] == f"user-{p['name']}"), "ref formats an earlier field")
    assert_that(people.to.all(lambda p: p['active'] is True), "literal is passed through")
    assert_that(people.to.all(lambda p: 1 <= len(p['tags']) <= 3), "list counts stay in range")


@test("a seed makes generation repeatable")
def test_seeded():
    first = from_schema(team_schema, seed=11).take(5).to.list()
    second = from_schema(team_schema, seed=11).take(5).to.list()
    assert_equal(first, second)


@test("bad schemas are reported")
def test_bad_schema():
    assert_raises(ValueError, lambda: from_schema({'x': {'_dgen': 'nope'}}).take(1))
    assert_raises(ValueError, lambda: from_schema({'x': {'_dgen': 'ref', 'key': 'y'}}).take(1))
    assert_raises(ValueError, lambda: from_schema({'x': ('no_such_provider', {})}).take(1))


if __name__ == "__main__":
    suite.main("dgen schema data")
