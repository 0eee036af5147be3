"""
================================================================================
Validation Engine
================================================================================

Evaluates validation tables against property handles.

Modes:
    - Single item: evaluate(validations, resolver)
    - List: validate_list_items(items, comparison_type, validations)

List comparison semantics:
    Equals            every item satisfies all validations
    Contains          at least one item satisfies all validations
    StartsWith        the first item satisfies all validations
    EndsWith          the last item satisfies all validations
    DoesNotContain    no item satisfies all validations (DoesNotEqual alike)
    ContainsExactly   the table describes the expected items (rows sharing an
                      item key form one item); every expected item is matched
                      by exactly one list item satisfying all of its rows,
                      and no list item is left over

Any other list comparison raises ConfigurationError.

================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from loguru import logger

from ..common.config_loader import ConfigurationError
from .comparers import ComparisonType
from .results import ValidationItemResult, ValidationResult
from .validation_table import ItemValidation, group_expected_items


PropertyResolver = Callable[[str], Optional[Any]]


def page_resolver(page: Any) -> PropertyResolver:
    """Build a resolver looking up properties on a page object."""
    def resolve(field_name: str) -> Optional[Any]:
        found, prop = page.try_get_property(field_name)
        return prop if found else None
    return resolve


def check_item(resolver: PropertyResolver, validations: Sequence[ItemValidation]) -> ValidationItemResult:
    """
    Evaluate every validation against one item.

    A field the item does not have is recorded as missing; it only passes for
    rules that accept absence (does not exist / does not contain).

    Args:
        resolver: Resolves a field lookup key to a property handle or None
        validations: Processed validations

    Returns:
        ValidationItemResult with one PropertyResult per validation, in order
    """
    item_result = ValidationItemResult()
    for validation in validations:
        prop = resolver(validation.field_name)
        if prop is None:
            passes = bool(validation.comparer and validation.comparer.passes_when_missing)
            item_result.note_missing_property(validation, is_valid=passes)
            continue

        successful, actual = prop.validate_item(validation)
        item_result.note_validation_result(validation, successful, actual)
    return item_result


def evaluate(validations: Iterable[ItemValidation], resolver: PropertyResolver) -> ValidationResult:
    """
    Validate a single item.

    Args:
        validations: Processed validations (or a processed ValidationTable)
        resolver: Resolves a field lookup key to a property handle or None

    Returns:
        ValidationResult with exactly one checked item
    """
    validations = tuple(validations)
    result = ValidationResult(validations)
    item_result = check_item(resolver, validations)
    result.checked_items.append(item_result)
    result.item_count = 1
    result.is_valid = item_result.is_valid
    logger.debug(f"Validated {len(validations)} field(s): valid={result.is_valid}")
    return result


def validate_list_items(
    items: Sequence[Any],
    comparison_type: ComparisonType,
    validations: Iterable[ItemValidation],
) -> ValidationResult:
    """
    Validate the items of a list.

    Every item is checked so the report covers the whole list.

    Args:
        items: Page objects of the list items
        comparison_type: List-level comparison
        validations: Processed validations

    Returns:
        ValidationResult with one checked item per list item

    Raises:
        ConfigurationError: If the comparison type is not supported for lists
    """
    validations = tuple(validations)
    handlers = {
        ComparisonType.EQUALS: lambda matches: all(matches),
        ComparisonType.CONTAINS: lambda matches: any(matches),
        ComparisonType.STARTS_WITH: lambda matches: bool(matches) and matches[0],
        ComparisonType.ENDS_WITH: lambda matches: bool(matches) and matches[-1],
        ComparisonType.DOES_NOT_CONTAIN: lambda matches: not any(matches),
        ComparisonType.DOES_NOT_EQUAL: lambda matches: not any(matches),
    }
    if comparison_type not in handlers and comparison_type != ComparisonType.CONTAINS_EXACTLY:
        raise ConfigurationError(
            f"Comparison '{comparison_type.value}' is not supported for list validation"
        )

    result = ValidationResult(validations)
    result.comparison_type = comparison_type
    result.item_count = len(items)
    result.checked_items = [check_item(page_resolver(item), validations) for item in items]

    if comparison_type == ComparisonType.CONTAINS_EXACTLY:
        result.is_valid = _match_exactly(validations, result)
    else:
        result.is_valid = handlers[comparison_type]([r.is_valid for r in result.checked_items])

    logger.debug(
        f"List validation ({comparison_type.value}) over {result.item_count} item(s): "
        f"valid={result.is_valid}"
    )
    return result


def _match_exactly(validations: Sequence[ItemValidation], result: ValidationResult) -> bool:
    groups = group_expected_items(validations)
    # expected item indexes each checked item fully satisfies
    candidates = [
        [
            g for g, positions in enumerate(groups)
            if all(item_result.property_results[p].is_valid for p in positions)
        ]
        for item_result in result.checked_items
    ]

    group_owner: Dict[int, int] = {}
    for item_index in range(len(candidates)):
        _assign(item_index, candidates, group_owner, set())

    matched_items = set(group_owner.values())
    result.unexpected_items = [
        item_result.describe()
        for i, item_result in enumerate(result.checked_items)
        if i not in matched_items
    ]
    result.missing_items = [
        " and ".join(str(validations[p]) for p in positions)
        for g, positions in enumerate(groups)
        if g not in group_owner
    ]
    return (
        not result.unexpected_items
        and not result.missing_items
        and len(result.checked_items) == len(groups)
    )


def _assign(item_index: int, candidates: List[List[int]], group_owner: Dict[int, int], seen: Set[int]) -> bool:
    # augmenting path: an item may take a group whose owner can move elsewhere
    for group in candidates[item_index]:
        if group in seen:
            continue
        seen.add(group)
        owner = group_owner.get(group)
        if owner is None or _assign(owner, candidates, group_owner, seen):
            group_owner[group] = item_index
            return True
    return False


def find_first_match(items: Iterable[Any], validations: Sequence[ItemValidation]) -> Tuple[Optional[Any], ValidationResult]:
    """
    Return the first item satisfying every validation.

    Returns:
        (matching item or None, ValidationResult over the checked items)
    """
    validations = tuple(validations)
    result = ValidationResult(validations)
    for item in items:
        result.item_count += 1
        item_result = check_item(page_resolver(item), validations)
        result.checked_items.append(item_result)
        if item_result.is_valid:
            result.is_valid = True
            return item, result
    return None, result


__all__ = [
    "PropertyResolver",
    "page_resolver",
    "check_item",
    "evaluate",
    "validate_list_items",
    "find_first_match",
]
