"""
================================================================================
Validation Results
================================================================================

Data produced by the validation engine. Mismatches are recorded here rather
than raised; callers render the diff tables when they decide to fail.

Components:
    - PropertyResult: outcome of one validation on one item
    - ValidationItemResult: outcomes of all validations on one item
    - ValidationResult: aggregate over all checked items plus diff rendering

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..common.table_formatter import TableFormatter
from .comparers import ComparisonType
from .validation_table import ItemValidation


NOT_FOUND_MARKER = "Not Found"


@dataclass
class PropertyResult:
    """Outcome of one validation against one item."""
    validation: ItemValidation
    is_valid: bool
    field_exists: bool
    actual_value: Optional[str] = None

    def check_field_exists(self) -> Tuple[bool, Optional[str]]:
        return self.field_exists or self.is_valid, NOT_FOUND_MARKER

    def check_field_value(self) -> Tuple[bool, Optional[str]]:
        return (not self.field_exists) or self.is_valid, self.actual_value


@dataclass
class ValidationItemResult:
    """Per-item record; property results are kept in validation order."""
    property_results: List[PropertyResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return all(r.is_valid for r in self.property_results)

    def note_missing_property(self, validation: ItemValidation, is_valid: bool = False) -> None:
        """Record that the validated field does not exist on the item."""
        self.property_results.append(
            PropertyResult(validation, is_valid=is_valid, field_exists=False)
        )

    def note_validation_result(
        self,
        validation: ItemValidation,
        successful: bool,
        actual_value: Optional[str],
    ) -> None:
        """Record the outcome of a validation on an existing field."""
        self.property_results.append(
            PropertyResult(validation, is_valid=successful, field_exists=True, actual_value=actual_value)
        )

    def get_result(self, validation: ItemValidation) -> Optional[PropertyResult]:
        for result in self.property_results:
            if result.validation is validation:
                return result
        return None

    def describe(self) -> str:
        """Short label for the item made of its distinct actual values."""
        values: List[str] = []
        for result in self.property_results:
            if result.actual_value and result.actual_value not in values:
                values.append(result.actual_value)
        return ", ".join(values) if values else "<EMPTY>"


class ValidationResult:
    """
    Aggregate result of a validation call.

    Attributes:
        validations: Validations that were evaluated
        checked_items: One ValidationItemResult per checked item
        is_valid: Overall outcome
        item_count: Number of items available for checking
        comparison_type: List-level comparison (None for single items and
            item lookups)
        unexpected_items: Labels of list items matching no expected item
        missing_items: Expected items no list item matched
    """

    def __init__(self, validations: Sequence[ItemValidation]) -> None:
        self.validations: Tuple[ItemValidation, ...] = tuple(validations)
        self.checked_items: List[ValidationItemResult] = []
        self.is_valid = False
        self.item_count = 0
        self.comparison_type: Optional[ComparisonType] = None
        self.unexpected_items: List[str] = []
        self.missing_items: List[str] = []

    def get_comparison_table(self) -> str:
        """
        Render one column per validation and one row per checked item, with
        the actual values in the cells.
        """
        formatter: TableFormatter[ValidationItemResult] = TableFormatter()
        for index, validation in enumerate(self.validations):
            formatter.add_column(
                str(validation),
                lambda item, i=index: self._actual_cell(item, i),
            )
        return formatter.create_table(self.checked_items)

    def get_comparison_table_by_rule(self) -> str:
        """
        Render one row per validation (Field | Rule | Value) for a single item.

        Raises:
            ValueError: If not exactly one item was checked
        """
        if len(self.checked_items) != 1:
            raise ValueError(
                f"A rule table can only be rendered for a single item; "
                f"{len(self.checked_items)} items were checked"
            )

        formatter: TableFormatter[PropertyResult] = TableFormatter()
        formatter.add_column("Field", lambda p: p.validation.raw_field_name, lambda p: p.check_field_exists())
        formatter.add_column("Rule", lambda p: p.validation.raw_comparison_type)
        formatter.add_column("Value", lambda p: p.validation.comparison_value, lambda p: p.check_field_value())
        return formatter.create_table(self.checked_items[0].property_results)

    @staticmethod
    def _actual_cell(item: ValidationItemResult, index: int) -> Optional[str]:
        if index >= len(item.property_results):
            return None
        result = item.property_results[index]
        if not result.field_exists:
            return f"[{NOT_FOUND_MARKER}]"
        return result.actual_value

    def __repr__(self) -> str:
        return (
            f"ValidationResult(is_valid={self.is_valid}, item_count={self.item_count}, "
            f"checked={len(self.checked_items)})"
        )


__all__ = [
    "PropertyResult",
    "ValidationItemResult",
    "ValidationResult",
    "NOT_FOUND_MARKER",
]
