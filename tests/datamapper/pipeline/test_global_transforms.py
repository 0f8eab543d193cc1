"""Tests for the collection-level global transform stage."""

import pytest
from hypothesis import given, strategies as st

from datamapper.exceptions import TransformError
from datamapper.pipeline import apply_global_transforms, deduplicate_rows, sort_rows
from datamapper.schema import GlobalTransform, compile_schema, DataMappingSchema


def compiled_transforms(*transforms):
    schema = DataMappingSchema(
        id='global', name='Global', source_type='json', target_type='user',
        global_transforms=[GlobalTransform.model_validate(t) for t in transforms],
    )
    return compile_schema(schema).global_transforms


class TestFilter:
    def test_condition_against_whole_row(self, registry):
        registry.register_condition('isActive', lambda row, _row, ctx: row.get('active') is True)
        rows = [{'id': 1, 'active': True}, {'id': 2, 'active': False}, {'id': 3, 'active': True}]

        result = apply_global_transforms(rows, compiled_transforms({'type': 'filter', 'condition': 'isActive'}), registry)
        assert [r['id'] for r in result] == [1, 3]

    def test_condition_against_named_field(self, registry):
        rows = [{'email': 'a@b.com'}, {'email': ''}, {}]
        transforms = compiled_transforms({
            'type': 'filter', 'condition': 'notEmpty', 'parameters': {'field': 'email'},
        })
        assert apply_global_transforms(rows, transforms, registry) == [{'email': 'a@b.com'}]

    def test_filter_condition_with_argument(self, registry):
        rows = [{'status': 'open'}, {'status': 'closed'}]
        transforms = compiled_transforms({
            'type': 'filter', 'condition': 'equals:open', 'parameters': {'field': 'status'},
        })
        assert apply_global_transforms(rows, transforms, registry) == [{'status': 'open'}]

    def test_filter_without_condition_is_noop(self, registry):
        rows = [{'a': 1}]
        assert apply_global_transforms(rows, compiled_transforms({'type': 'filter'}), registry) == rows

    def test_context_carries_index(self, registry):
        seen = []

        def record_index(value, row, context):
            seen.append(context.row_index)
            return True

        registry.register_condition('recordIndex', record_index)
        apply_global_transforms([{}, {}, {}], compiled_transforms({'type': 'filter', 'condition': 'recordIndex'}), registry)
        assert seen == [0, 1, 2]


class TestSort:
    def test_ascending_with_missing_last(self):
        rows = [{'n': 3}, {}, {'n': 1}, {'n': None}, {'n': 2}]
        assert [r.get('n') for r in sort_rows(rows, {'field': 'n'})] == [1, 2, 3, None, None]

    def test_descending(self):
        rows = [{'n': 1}, {'n': 3}, {'n': 2}]
        assert [r['n'] for r in sort_rows(rows, {'field': 'n', 'order': 'desc'})] == [3, 2, 1]

    def test_nested_field(self):
        rows = [{'a': {'b': 2}}, {'a': {'b': 1}}]
        assert sort_rows(rows, {'field': 'a.b'})[0] == {'a': {'b': 1}}

    def test_incomparable_keys(self):
        with pytest.raises(TransformError) as exc_info:
            sort_rows([{'n': 1}, {'n': 'x'}], {'field': 'n'})
        assert exc_info.value.error_code == "TRANSFORM_007"

    def test_missing_field_parameter_is_noop(self, caplog):
        rows = [{'n': 2}, {'n': 1}]
        assert sort_rows(rows, {}) == rows
        assert any("no 'field' parameter" in r.message for r in caplog.records)

    @given(st.lists(st.tuples(st.integers(min_value=0, max_value=3), st.integers()), max_size=30),
           st.sampled_from(['asc', 'desc']))
    def test_stable(self, pairs, order):
        rows = [{'key': key, 'seq': seq_index} for seq_index, (key, _) in enumerate(pairs)]
        result = sort_rows(rows, {'field': 'key', 'order': order})

        keys = [r['key'] for r in result]
        assert keys == sorted(keys, reverse=(order == 'desc'))
        for key in set(keys):
            sequence = [r['seq'] for r in result if r['key'] == key]
            assert sequence == sorted(sequence)


class TestDeduplicate:
    def test_first_row_wins(self):
        rows = [
            {'email': 'a@b.com', 'name': 'First'},
            {'email': 'c@d.com', 'name': 'Other'},
            {'email': 'a@b.com', 'name': 'Second'},
        ]
        result = deduplicate_rows(rows, {'key': 'email'})
        assert [r['name'] for r in result] == ['First', 'Other']

    def test_unhashable_keys(self):
        rows = [{'tags': ['a', 'b']}, {'tags': ['a', 'b']}, {'tags': ['b']}]
        assert len(deduplicate_rows(rows, {'key': 'tags'})) == 2

    def test_boolean_keys_distinct_from_numbers(self):
        rows = [{'k': 1}, {'k': True}, {'k': 1.0}, {'k': False}, {'k': 0}]
        assert deduplicate_rows(rows, {'key': 'k'}) == [{'k': 1}, {'k': True}, {'k': False}, {'k': 0}]

    def test_missing_keys_share_one_slot(self):
        rows = [{}, {'other': 1}, {'email': None}]
        assert deduplicate_rows(rows, {'key': 'email'}) == [{}, {'email': None}]

    @given(st.lists(st.integers(min_value=0, max_value=5), max_size=30))
    def test_keeps_first_occurrence_of_each_key(self, keys):
        rows = [{'key': key, 'position': index} for index, key in enumerate(keys)]
        result = deduplicate_rows(rows, {'key': 'key'})
        assert [r['key'] for r in result] == list(dict.fromkeys(keys))
        assert all(r['position'] == keys.index(r['key']) for r in result)


class TestPipeline:
    def test_applied_in_declared_order(self, registry):
        rows = [{'id': 3, 'k': 'x'}, {'id': 1, 'k': 'x'}, {'id': 2, 'k': 'y'}]
        transforms = compiled_transforms(
            {'type': 'sort', 'parameters': {'field': 'id'}},
            {'type': 'deduplicate', 'parameters': {'key': 'k'}},
        )
        assert [r['id'] for r in apply_global_transforms(rows, transforms, registry)] == [1, 2]

    def test_group_is_noop(self, registry):
        rows = [{'a': 1}, {'a': 2}]
        assert apply_global_transforms(rows, compiled_transforms({'type': 'group'}), registry) == rows

    def test_input_not_mutated(self, registry):
        rows = [{'n': 2}, {'n': 1}]
        snapshot = list(rows)
        apply_global_transforms(rows, compiled_transforms({'type': 'sort', 'parameters': {'field': 'n'}}), registry)
        assert rows == snapshot
