'''
.------..------..------..------.
|d.--. ||g.--. ||e.--. ||n.--. |
| :/\: || :/\: || (\/) || :(): |
| (__) || :\/: || :\/: || ()() |
| '--'d|| '--'g|| '--'e|| '--'n|
`------'`------'`------'`------'

seeded synthetic records for tests, described by a schema:

    {'id': ('pyint', {'min_value': 1, 'max_value': 100}),   # faker method + kwargs
     'name': 'first_name',                                  # faker method
     'team': {'_dgen': 'choice', 'from': ['a', 'b']},       # numpy rng choice
     'label': {'_dgen': 'ref', 'key': 'name', 'format': 'user-{}'},
     'tags': [{'_dgen_items': 'word', '_dgen_count': (1, 3)}]}
'''

from typing import Any, Dict, Optional

import numpy as np
from faker import Faker

from lazyq import Query, from_iterable


class Generator:
    """interprets a schema into one record per `create` call."""

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        if seed is not None:
            self._fake.seed_instance(seed)
        self._rng = np.random.default_rng(seed)

    def _faker(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        method = getattr(self._fake, method_name, None)
        if method is None:
            raise ValueError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _directive(self, config: Dict, context: Dict) -> Any:
        kind = config['_dgen']
        if kind == 'choice':
            picked = self._rng.choice(len(config['from']))
            return config['from'][int(picked)]
        if kind == 'ref':
            key = config['key']
            if key not in context:
                raise ValueError(f"reference to '{key}' not found in current context.")
            value = context[key]
            return config['format'].format(value) if 'format' in config else value
        if kind == 'literal':
            return config.get('value')
        raise ValueError(f"unknown _dgen directive: '{kind}'")

    def _count(self, item_schema: Any) -> int:
        if not isinstance(item_schema, dict):
            return 5
        count = item_schema.get('_dgen_count', 5)
        if isinstance(count, (list, tuple)):
            low, high = count
            return int(self._rng.integers(low, high, endpoint=True))
        return count

    def create(self, schema: Any, context: Optional[Dict] = None) -> Any:
        context = context or {}
        if isinstance(schema, dict):
            if '_dgen' in schema:
                return self._directive(schema, context)
            record = {}
            for key, value in schema.items():
                # refs see the enclosing record and the fields built so far
                record[key] = self.create(value, {**context, **record})
            return record
        if isinstance(schema, list):
            if not schema:
                return []
            item_schema = schema[0]
            inner = item_schema.get('_dgen_items', item_schema) if isinstance(item_schema, dict) else item_schema
            return [self.create(inner, context) for _ in range(self._count(item_schema))]
        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._faker(schema[0], schema[1])
        if isinstance(schema, str) and hasattr(self._fake, schema):
            return self._faker(schema)
        return schema


class SchemaProvider:
    def __init__(self, schema: Any, seed: Optional[int] = None):
        self._schema = schema
        self._generator = Generator(seed)

    def take(self, count: int) -> Query:
        """`count` records, generated once; the returned query re-iterates the same records"""
        return from_iterable([self._generator.create(self._schema) for _ in range(count)])


def from_schema(schema: Any, seed: Optional[int] = None) -> SchemaProvider:
    return SchemaProvider(schema, seed)
