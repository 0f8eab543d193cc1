"""Per-row transform context handed to every registered function."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence


@dataclass
class TransformContext:
    """
    Everything a transform, condition or validation function may need beyond its value.

    Attributes:
        source_data: The working collection (after global transforms)
        current_row: The row being processed
        row_index: 0-based position of ``current_row`` in ``source_data``
        field_mappings: The schema's field mappings, in declared order
        metadata: Bag shared by every row of one run, for cross-row accumulation
        cache: Memo dict for the current row only
    """

    source_data: Sequence[Dict[str, Any]]
    current_row: Dict[str, Any]
    row_index: int
    field_mappings: List[Any] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    cache: Dict[str, Any] = field(default_factory=dict)

    @property
    def row_number(self) -> int:
        """1-based row number used in error reports."""
        return self.row_index + 1
