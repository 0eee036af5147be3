"""
================================================================================
Validation Engine
================================================================================

Declarative expected-vs-actual comparison over single items and lists.

Components:
    - comparers: comparison rules and rule lookup
    - validation_table: field / rule / value triples
    - results: per-item and aggregate results with diff tables
    - engine: single-item and list evaluation

Author: Automation Team
License: MIT
================================================================================
"""

from .comparers import (
    ComparerLookup,
    ComparisonType,
    NumericComparisonType,
    ValidationComparer,
    default_comparers,
)
from .engine import check_item, evaluate, find_first_match, page_resolver, validate_list_items
from .results import PropertyResult, ValidationItemResult, ValidationResult
from .validation_table import ItemValidation, ValidationTable

__all__ = [
    "ComparerLookup",
    "ComparisonType",
    "NumericComparisonType",
    "ValidationComparer",
    "default_comparers",
    "check_item",
    "evaluate",
    "find_first_match",
    "page_resolver",
    "validate_list_items",
    "PropertyResult",
    "ValidationItemResult",
    "ValidationResult",
    "ItemValidation",
    "ValidationTable",
]
