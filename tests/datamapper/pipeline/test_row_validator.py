"""Tests for row-level validation rules."""

from datamapper.pipeline import TransformContext, validate_row
from datamapper.schema import DataMappingSchema, Severity, compile_schema


def compiled_rules(*rules):
    schema = DataMappingSchema.model_validate({
        'id': 'rules', 'name': 'Rules', 'sourceType': 'csv', 'targetType': 'team',
        'validation': list(rules),
    })
    return compile_schema(schema).validation


def context_for(row_index=0):
    return TransformContext(source_data=[], current_row={}, row_index=row_index)


def test_passing_rules_report_nothing(registry):
    rules = compiled_rules({'field': 'name', 'rule': 'notEmpty', 'message': 'Name required'})
    assert validate_row({'name': 'Tigers'}, rules, registry, context_for()) == ([], [])


def test_failing_error_rule(registry):
    rules = compiled_rules({'field': 'name', 'rule': 'minLength:3', 'message': 'Name too short'})
    errors, warnings = validate_row({'name': 'AB'}, rules, registry, context_for(4))

    assert warnings == []
    assert len(errors) == 1
    error = errors[0]
    assert (error.row, error.field, error.message, error.raw_value) == (5, 'name', 'Name too short', 'AB')
    assert error.severity is Severity.ERROR


def test_failing_warning_rule(registry):
    rules = compiled_rules({
        'field': 'coach.email', 'rule': 'notEmpty', 'message': 'No coach', 'severity': 'warning',
    })
    errors, warnings = validate_row({'name': 'Tigers'}, rules, registry, context_for())
    assert errors == []
    assert warnings[0].message == 'No coach'
    assert warnings[0].severity is Severity.WARNING
    assert warnings[0].raw_value is None


def test_rule_sees_transformed_record(registry):
    registry.register_validation(
        'endsAfterStart', lambda value, record, ctx: record['end'] > record['start']
    )
    rules = compiled_rules({'field': 'end', 'rule': 'endsAfterStart', 'message': 'Ends before start'})
    errors, _ = validate_row({'start': '10:00', 'end': '09:00'}, rules, registry, context_for())
    assert [e.message for e in errors] == ['Ends before start']


def test_exception_becomes_error_entry(registry):
    def explode(value, record, context):
        raise RuntimeError("lookup service down")

    registry.register_validation('explode', explode)
    rules = compiled_rules(
        {'field': 'name', 'rule': 'explode', 'message': 'unused', 'severity': 'warning'},
        {'field': 'name', 'rule': 'notEmpty', 'message': 'Name required'},
    )
    errors, warnings = validate_row({'name': ''}, rules, registry, context_for())

    assert warnings == []
    assert [e.message for e in errors] == ["Validation error: lookup service down", "Name required"]
    assert errors[0].severity is Severity.ERROR


def test_unknown_rule_reported_not_raised(registry):
    rules = compiled_rules({'field': 'name', 'rule': 'isTeamName', 'message': 'Bad name'})
    errors, _ = validate_row({'name': 'x'}, rules, registry, context_for())
    assert errors[0].message == "Validation error: Unknown validation function: isTeamName"
