"""
================================================================================
Validation Table
================================================================================

Field / rule / expected-value triples describing one assertion step.

    table = ValidationTable()
    table.add_validation("Name", "Equals", "Hello")
    table.add_validation("Status", "Does Not Contain", "Error")
    table.process(ComparerLookup(default_comparers()))

Rows are immutable ItemValidation values. process() resolves every rule to
its comparer, substitutes tokens in expected values and freezes the table.

For exact list matches, rows sharing an item key describe one expected
item; a row without a key is an expected item on its own:

    table = ValidationTable.from_items(
        [{"Name": "Ann", "Grade": "A"}, {"Name": "Bob", "Grade": "B"}],
        comparison_type=ComparisonType.CONTAINS_EXACTLY,
    )

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from loguru import logger

from ..common.config_loader import ConfigurationError
from ..common.lookup import to_lookup_key
from .comparers import ComparerLookup, ComparisonType, ValidationComparer


NULL_MARKER = "<NULL>"

_FIELD_HEADERS = ("field", "fieldname", "name")
_RULE_HEADERS = ("rule", "comparison", "comparisontype")
_VALUE_HEADERS = ("value", "expected", "expectedvalue")
_ITEM_HEADERS = ("item", "itemnumber", "row")


@dataclass(frozen=True)
class ItemValidation:
    """
    One field / rule / expected-value triple.

    Attributes:
        raw_field_name: Field name as written in the test
        raw_comparison_type: Rule text as written in the test
        raw_comparison_value: Expected value as written in the test
        comparison_value: Expected value after token substitution
        comparer: Resolved comparer (None until processed)
        item_key: Expected list item the row belongs to (None: its own item)
    """
    raw_field_name: str
    raw_comparison_type: str
    raw_comparison_value: Optional[str] = None
    comparison_value: Optional[str] = None
    comparer: Optional[ValidationComparer] = field(default=None, compare=False)
    item_key: Optional[Any] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_field_name", (self.raw_field_name or "").strip())
        object.__setattr__(self, "raw_comparison_type", (self.raw_comparison_type or "").strip())
        if self.raw_comparison_value is not None:
            object.__setattr__(self, "raw_comparison_value", self.raw_comparison_value.strip())
        if self.comparer is None:
            object.__setattr__(self, "comparison_value", self.raw_comparison_value)

    @property
    def field_name(self) -> str:
        """Lookup key of the field name."""
        return to_lookup_key(self.raw_field_name)

    @property
    def is_processed(self) -> bool:
        return self.comparer is not None

    @property
    def comparison_type(self) -> Optional[ComparisonType]:
        return self.comparer.comparison_type if self.comparer else None

    @property
    def check_element_existence(self) -> bool:
        return self.comparer.should_check_element_existence if self.comparer else True

    @property
    def requires_field_value(self) -> bool:
        return self.comparer.requires_field_value if self.comparer else True

    def resolve(self, comparer: ValidationComparer, comparison_value: Optional[str]) -> "ItemValidation":
        """Return a processed copy bound to `comparer`."""
        return dataclasses.replace(self, comparer=comparer, comparison_value=comparison_value)

    def compare(self, prop: Any, actual_value: Optional[str]) -> bool:
        """
        Evaluate this validation against a property's actual value.

        Raises:
            ConfigurationError: If the validation was never processed
        """
        if self.comparer is None:
            raise ConfigurationError(
                f"Validation '{self}' has not been processed; no comparer is assigned"
            )
        return self.comparer.compare(prop, self.comparison_value, actual_value)

    def __str__(self) -> str:
        value = NULL_MARKER if self.raw_comparison_value is None else self.raw_comparison_value
        return f"{self.raw_field_name} {self.raw_comparison_type} {value}"


class ValidationTable:
    """
    Ordered set of item validations for one assertion step.

    Args:
        comparison_type: List-level comparison (Contains, ContainsExactly, ...)
            for list validations; unused for single items
    """

    def __init__(self, comparison_type: Optional[ComparisonType] = None) -> None:
        self.comparison_type = comparison_type
        self._validations: List[ItemValidation] = []
        self._processed = False

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, Any]],
        comparison_type: Optional[ComparisonType] = None,
    ) -> "ValidationTable":
        """
        Build a table from header-keyed rows (e.g. a BDD data table).

        Headers are matched loosely: Field/Field Name, Rule/Comparison,
        Value/Expected. An optional Item/Row column groups rows into
        expected list items.
        """
        table = cls(comparison_type)
        for row in rows:
            keyed = {to_lookup_key(str(k)): v for k, v in row.items()}
            field_name = next((keyed[h] for h in _FIELD_HEADERS if h in keyed), None)
            rule = next((keyed[h] for h in _RULE_HEADERS if h in keyed), None)
            value = next((keyed[h] for h in _VALUE_HEADERS if h in keyed), None)
            item = next((keyed[h] for h in _ITEM_HEADERS if h in keyed), None)
            if field_name is None or rule is None:
                raise ConfigurationError(
                    f"Validation row {dict(row)!r} needs a field and a rule column"
                )
            item_key = None
            if item is not None and str(item).strip():
                item_key = str(item).strip()
            table.add_validation(
                str(field_name),
                str(rule),
                None if value is None else str(value),
                item_key=item_key,
            )
        return table

    @classmethod
    def from_items(
        cls,
        items: Iterable[Mapping[str, Any]],
        rule: str = "Equals",
        comparison_type: Optional[ComparisonType] = None,
    ) -> "ValidationTable":
        """
        Build a table with one expected item per mapping.

        Args:
            items: Field name -> expected value, one mapping per list item
            rule: Rule applied to every field
            comparison_type: List-level comparison
        """
        table = cls(comparison_type)
        for index, item in enumerate(items, start=1):
            for field_name, value in item.items():
                table.add_validation(
                    str(field_name),
                    rule,
                    None if value is None else str(value),
                    item_key=index,
                )
        return table

    @property
    def validations(self) -> Tuple[ItemValidation, ...]:
        return tuple(self._validations)

    @property
    def validation_count(self) -> int:
        return len(self._validations)

    @property
    def is_processed(self) -> bool:
        return self._processed

    def add_validation(
        self,
        field_name: str,
        comparison_type: str,
        comparison_value: Optional[str],
        item_key: Optional[Any] = None,
    ) -> ItemValidation:
        """
        Append a validation row.

        Args:
            field_name: Field to validate
            comparison_type: Rule text
            comparison_value: Expected value
            item_key: Expected list item the row belongs to

        Raises:
            ConfigurationError: If the table was already processed
        """
        if self._processed:
            raise ConfigurationError("Cannot add validations to a processed table")
        validation = ItemValidation(field_name, comparison_type, comparison_value, item_key=item_key)
        self._validations.append(validation)
        return validation

    def process(self, comparers: ComparerLookup, token_manager: Any = None) -> "ValidationTable":
        """
        Resolve comparers and expected values. Safe to call more than once.

        Args:
            comparers: Rule lookup
            token_manager: Optional TokenManager for expected values

        Raises:
            ConfigurationError: If a rule text is not supported
        """
        if self._processed:
            return self

        resolved = []
        for validation in self._validations:
            comparer = comparers.get(validation.raw_comparison_type)
            value = validation.raw_comparison_value
            if token_manager is not None:
                value = token_manager.set_token(value)
            resolved.append(validation.resolve(comparer, value))

        self._validations = resolved
        self._processed = True
        logger.debug(f"Processed validation table with {len(resolved)} row(s)")
        return self

    def __iter__(self) -> Iterator[ItemValidation]:
        return iter(self._validations)

    def __len__(self) -> int:
        return len(self._validations)


def group_expected_items(validations: Iterable[ItemValidation]) -> List[List[int]]:
    """
    Group validation positions into expected list items.

    Rows sharing an item key form one group, in order of first appearance;
    each row without a key is a group of its own.
    """
    groups: List[List[int]] = []
    keyed: Dict[Any, List[int]] = {}
    for position, validation in enumerate(validations):
        if validation.item_key is None:
            groups.append([position])
        elif validation.item_key in keyed:
            keyed[validation.item_key].append(position)
        else:
            keyed[validation.item_key] = [position]
            groups.append(keyed[validation.item_key])
    return groups


__all__ = ["ItemValidation", "ValidationTable", "group_expected_items", "NULL_MARKER"]
