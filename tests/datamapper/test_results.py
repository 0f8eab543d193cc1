"""Tests for the transformation result model and its summary helpers."""

import threading

import pytest

from datamapper.results import (
    ResultMetadata,
    TransformationError,
    TransformationResult,
    TransformationWarning,
)
from datamapper.schema import Severity


def result_with(errors=(), warnings=(), **counters):
    counters.setdefault('total_records', 3)
    counters.setdefault('processed_records', 3)
    counters.setdefault('valid_records', 3)
    return TransformationResult(
        success=not errors,
        errors=list(errors),
        warnings=list(warnings),
        metadata=ResultMetadata(**counters),
    )


class TestEntries:
    def test_warning_defaults_to_warning_severity(self):
        warning = TransformationWarning(row=2, message="No coach", field='coach.email')
        assert warning.severity is Severity.WARNING
        assert warning.to_dict()['severity'] == 'warning'

    def test_error_to_dict(self):
        error = TransformationError(row=1, message="bad", field='email', raw_value={'email': 'x'})
        assert error.to_dict() == {
            'row': 1,
            'message': 'bad',
            'field': 'email',
            'severity': 'error',
            'raw_value': {'email': 'x'},
            'transformed_value': None,
        }


class TestResult:
    def test_entries_with_uncopyable_raw_rows(self):
        row = {'email': 'x', 'lock': threading.Lock()}
        result = result_with(errors=[TransformationError(row=1, message="bad", raw_value=row)])

        assert result.to_dict()['errors'][0]['raw_value'] is row
        assert result.errors_frame()['row'].tolist() == [1]

    def test_to_dict(self):
        result = result_with(errors=[TransformationError(row=1, message="bad")])
        result.data.append({'email': 'a@b.com'})
        document = result.to_dict()

        assert document['success'] is False
        assert document['data'] == [{'email': 'a@b.com'}]
        assert document['errors'][0]['row'] == 1
        assert document['metadata']['total_records'] == 3

    def test_errors_frame(self):
        result = result_with(
            errors=[TransformationError(row=1, message="bad", field='email')],
            warnings=[TransformationWarning(row=2, message="meh", field='phone')],
        )
        frame = result.errors_frame()

        assert list(frame.columns) == ['row', 'field', 'severity', 'message', 'raw_value', 'transformed_value']
        assert frame['row'].tolist() == [1, 2]
        assert frame['severity'].tolist() == ['error', 'warning']

    def test_empty_errors_frame_keeps_columns(self):
        frame = result_with().errors_frame()
        assert frame.empty
        assert 'message' in frame.columns

    def test_field_error_counts_most_frequent_first(self):
        errors = [TransformationError(row=i, message="x", field='phone') for i in range(1, 3)]
        errors.append(TransformationError(row=3, message="x", field='email'))
        errors.append(TransformationError(row=0, message="setup"))
        assert list(result_with(errors=errors).field_error_counts().items()) == [('phone', 2), ('email', 1)]


class TestRecommendations:
    def test_clean_run(self):
        assert result_with().recommendations() == [
            "Data validation passed successfully. Your data is ready for import!"
        ]

    def test_many_errors_on_one_field(self):
        errors = [TransformationError(row=i, message="bad", field='email') for i in range(1, 12)]
        hints = result_with(errors=errors, total_records=11, processed_records=11, valid_records=0).recommendations()

        assert hints[0].startswith("You have 11 validation errors")
        assert hints[1] == 'The field "email" has the most errors (11). Check the data format for this field.'
        assert "No records passed validation" in hints[2]

    def test_warnings_and_large_dataset(self):
        warnings = [TransformationWarning(row=1, message="meh")]
        hints = result_with(warnings=warnings, total_records=5000).recommendations()

        assert hints[0].startswith("1 warnings were found")
        assert hints[1].startswith("Large dataset detected")

    @pytest.mark.parametrize("field_errors, expected", [(5, False), (6, True)])
    def test_field_threshold(self, field_errors, expected):
        errors = [TransformationError(row=i, message="bad", field='phone') for i in range(1, field_errors + 1)]
        hints = result_with(errors=errors).recommendations()
        assert any('"phone"' in hint for hint in hints) is expected

    def test_summary(self):
        result = result_with(
            errors=[TransformationError(row=1, message="bad", field='email')],
            warnings=[TransformationWarning(row=2, message="meh")],
            valid_records=2,
        )
        summary = result.summary()

        assert summary['success'] is False
        assert summary['invalid_records'] == 1
        assert summary['warning_records'] == 1
        assert summary['valid_records'] == 2
        assert summary['field_error_counts'] == {'email': 1}
        assert summary['recommendations'] == result.recommendations()
