"""
Transformation result model.

A :class:`TransformationResult` is built incrementally by the engine and
returned once. Every error and warning carries a 1-based row number relative
to the working collection (after global transforms); row ``0`` marks a
failure that belongs to the run rather than to any row.
"""

from collections import Counter
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

import pandas as pd

from datamapper.schema.models import Severity

# Thresholds for summary recommendations
MANY_ERRORS_THRESHOLD = 10
FIELD_ERRORS_THRESHOLD = 5
LARGE_DATASET_THRESHOLD = 1000


@dataclass
class TransformationError:
    """One problem found while converting or validating a row."""

    row: int
    message: str
    field: Optional[str] = None
    severity: Severity = Severity.ERROR
    raw_value: Any = None
    transformed_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        # Shallow: raw_value may hold objects that cannot be copied
        entry = {f.name: getattr(self, f.name) for f in fields(self)}
        entry['severity'] = Severity(self.severity).value
        return entry


@dataclass
class TransformationWarning(TransformationError):
    """A rule violation that does not exclude the row."""

    severity: Severity = Severity.WARNING


@dataclass
class ResultMetadata:
    """Counters for one run.

    Outside validate-only mode ``processed_records == transformed_records +
    skipped_records``. A run stopped by ``max_errors`` may report more errors
    than the cap, by at most the entries of the last processed row.
    """

    total_records: int = 0
    processed_records: int = 0
    skipped_records: int = 0
    transformed_records: int = 0
    valid_records: int = 0
    duration_ms: float = 0.0


@dataclass
class TransformationResult:
    """
    Outcome of one ``transform_data`` call.

    Attributes:
        success: False if the run aborted or any error was recorded
        data: Accepted target records, in working-collection order
        errors: Error-severity entries
        warnings: Warning-severity entries
        metadata: Run counters and duration
    """

    success: bool = True
    data: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[TransformationError] = field(default_factory=list)
    warnings: List[TransformationWarning] = field(default_factory=list)
    metadata: ResultMetadata = field(default_factory=ResultMetadata)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form suitable for JSON responses."""
        return {
            'success': self.success,
            'data': self.data,
            'errors': [error.to_dict() for error in self.errors],
            'warnings': [warning.to_dict() for warning in self.warnings],
            'metadata': asdict(self.metadata),
        }

    def errors_frame(self) -> pd.DataFrame:
        """Errors followed by warnings as a DataFrame, one entry per line."""
        columns = ['row', 'field', 'severity', 'message', 'raw_value', 'transformed_value']
        entries = [entry.to_dict() for entry in [*self.errors, *self.warnings]]
        return pd.DataFrame(entries, columns=columns)

    def field_error_counts(self) -> Dict[str, int]:
        """Number of errors per field path, most frequent first."""
        counts = Counter(error.field for error in self.errors if error.field)
        return dict(counts.most_common())

    def recommendations(self) -> List[str]:
        """Remediation hints for an operator reviewing this run."""
        recommendations = []

        error_count = len(self.errors)
        if error_count > MANY_ERRORS_THRESHOLD:
            recommendations.append(
                f"You have {error_count} validation errors. "
                "Consider reviewing your data format and required fields."
            )

        field_counts = self.field_error_counts()
        if field_counts:
            top_field, top_count = next(iter(field_counts.items()))
            if top_count > FIELD_ERRORS_THRESHOLD:
                recommendations.append(
                    f'The field "{top_field}" has the most errors ({top_count}). '
                    "Check the data format for this field."
                )

        if self.warnings:
            recommendations.append(
                f"{len(self.warnings)} warnings were found. "
                "Review these before importing to ensure data quality."
            )

        if self.metadata.processed_records and not self.metadata.valid_records:
            recommendations.append(
                "No records passed validation. Check that the mapping schema matches the source format."
            )

        if self.metadata.total_records > LARGE_DATASET_THRESHOLD:
            recommendations.append(
                "Large dataset detected. Consider importing in smaller batches for better performance."
            )

        if not recommendations:
            recommendations.append("Data validation passed successfully. Your data is ready for import!")
        return recommendations

    def summary(self) -> Dict[str, Any]:
        """Counts and recommendations for a review surface."""
        return {
            'success': self.success,
            'total_records': self.metadata.total_records,
            'processed_records': self.metadata.processed_records,
            'valid_records': self.metadata.valid_records,
            'invalid_records': len(self.errors),
            'warning_records': len(self.warnings),
            'field_error_counts': self.field_error_counts(),
            'recommendations': self.recommendations(),
        }


__all__ = [
    'TransformationError',
    'TransformationWarning',
    'ResultMetadata',
    'TransformationResult',
]
