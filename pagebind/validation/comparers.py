"""
================================================================================
Comparison Engine
================================================================================

Pure comparison rules evaluated against the actual value of a page property.

Key Features:
- Closed set of comparison types (equals, contains, starts with, exists, ...)
- Rule lookup by free-form rule text ("Does Not Contain" -> doesnotcontain)
- Typed value comparison (bool, int, float, date/time, then text)
- Flags telling the validation engine whether a rule needs the element to
  exist, needs its text, or passes when the field is absent

================================================================================
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from ..common.config_loader import ConfigurationError
from ..common.lookup import to_lookup_key


# ================================================================================
# Comparison Types
# ================================================================================

class ComparisonType(str, Enum):
    """Supported comparison types."""
    EQUALS = "Equals"
    DOES_NOT_EQUAL = "DoesNotEqual"
    CONTAINS = "Contains"
    DOES_NOT_CONTAIN = "DoesNotContain"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"
    ENABLED = "Enabled"
    NOT_ENABLED = "NotEnabled"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_EQUALS = "GreaterThanEquals"
    LESS_THAN = "LessThan"
    LESS_THAN_EQUALS = "LessThanEquals"
    CONTAINS_EXACTLY = "ContainsExactly"

    @classmethod
    def parse(cls, text: str) -> "ComparisonType":
        """
        Parse a comparison type from free-form text ("does not contain").

        Raises:
            ConfigurationError: If the text names no comparison type
        """
        key = to_lookup_key(text)
        for member in cls:
            if to_lookup_key(member.value) == key:
                return member
        raise ConfigurationError(f"Unknown comparison type: '{text}'")


class NumericComparisonType(str, Enum):
    """Comparison applied to list row counts."""
    EQUALS = "Equals"
    GREATER_THAN_EQUALS = "GreaterThanEquals"
    LESS_THAN_EQUALS = "LessThanEquals"

    def compare(self, expected: int, actual: int) -> bool:
        if self is NumericComparisonType.GREATER_THAN_EQUALS:
            return actual >= expected
        if self is NumericComparisonType.LESS_THAN_EQUALS:
            return actual <= expected
        return actual == expected


# ================================================================================
# Comparer Base Classes
# ================================================================================

class ValidationComparer:
    """
    Base class for comparison rules.

    Attributes:
        comparison_type: The comparison type implemented
        rule_keys: Lookup keys of the rule texts mapped to this comparer
        requires_field_value: Whether the element text must be read
        should_check_element_existence: Whether a missing element is an error
        passes_when_missing: Whether an absent field satisfies the rule
    """
    comparison_type: ComparisonType = ComparisonType.EQUALS
    rule_keys: Tuple[str, ...] = ()
    requires_field_value: bool = True
    should_check_element_existence: bool = True
    passes_when_missing: bool = False

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        """
        Evaluate the rule.

        Args:
            prop: Property handle being validated (used by state rules)
            expected: Expected value from the validation table
            actual: Actual value read from the property

        Returns:
            True if the rule is satisfied
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.comparison_type.value}>"


_NO_VALUE = object()


def _parse_bool(value: Optional[str]) -> Any:
    if value is None:
        return _NO_VALUE
    text = value.strip().lower()
    if text in ("true", "false"):
        return text == "true"
    return _NO_VALUE


def _parse_int(value: Optional[str]) -> Any:
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return _NO_VALUE


def _parse_float(value: Optional[str]) -> Any:
    try:
        number = float(value.strip())
    except (AttributeError, ValueError):
        return _NO_VALUE
    return number if math.isfinite(number) else _NO_VALUE


_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%Y %H:%M:%S", "%m/%d/%Y %I:%M %p", "%d %B %Y")


def _parse_datetime(value: Optional[str]) -> Any:
    if value is None or not value.strip():
        return _NO_VALUE
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for date_format in _DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format)
        except ValueError:
            continue
    return _NO_VALUE


# Parse order: first parser that accepts the expected value wins
_TYPED_PARSERS: Tuple[Tuple[Callable[[Optional[str]], Any], Any], ...] = (
    (_parse_bool, False),
    (_parse_int, 0),
    (_parse_float, 0.0),
    (_parse_datetime, datetime.min),
)


class ValueComparer(ValidationComparer):
    """
    Comparer working on typed values.

    The expected value selects the type; the actual value is parsed into the
    same type, falling back to the type's default when it does not parse. A
    comparer that does not support a type raises NotImplementedError from
    compare_typed and the next type is tried. Text comparison is the last
    resort.
    """

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        for parser, default in _TYPED_PARSERS:
            typed_expected = parser(expected)
            if typed_expected is _NO_VALUE:
                continue

            typed_actual = parser(actual)
            if typed_actual is _NO_VALUE:
                typed_actual = default

            try:
                return self.compare_typed(typed_expected, typed_actual)
            except NotImplementedError:
                continue
            except TypeError as e:
                # e.g. timezone-aware vs naive datetimes
                logger.debug(f"Values '{expected}' and '{actual}' are not comparable: {e}")
                return False

        return self.compare_text(expected or "", actual or "")

    def compare_typed(self, expected: Any, actual: Any) -> bool:
        raise NotImplementedError

    def compare_text(self, expected: str, actual: str) -> bool:
        return False


# ================================================================================
# Value Comparers
# ================================================================================

class EqualsComparer(ValueComparer):
    """Actual equals expected (text is compared case-insensitively)."""
    comparison_type = ComparisonType.EQUALS
    rule_keys = ("equals", "equal", "is")

    def compare_typed(self, expected: Any, actual: Any) -> bool:
        return actual == expected

    def compare_text(self, expected: str, actual: str) -> bool:
        return actual.lower() == expected.lower()


class DoesNotEqualComparer(EqualsComparer):
    """Negation of EqualsComparer."""
    comparison_type = ComparisonType.DOES_NOT_EQUAL
    rule_keys = ("doesnotequal", "notequals", "notequal", "isnot")

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        return not super().compare(prop, expected, actual)


class _OrderingComparer(ValueComparer):
    """Ordering comparisons are undefined for booleans and text."""

    def compare_typed(self, expected: Any, actual: Any) -> bool:
        if isinstance(expected, bool):
            raise NotImplementedError
        return self.compare_ordered(expected, actual)

    def compare_ordered(self, expected: Any, actual: Any) -> bool:
        raise NotImplementedError


class GreaterThanComparer(_OrderingComparer):
    comparison_type = ComparisonType.GREATER_THAN
    rule_keys = ("greaterthan", "isgreaterthan", "morethan")

    def compare_ordered(self, expected: Any, actual: Any) -> bool:
        return actual > expected


class GreaterThanEqualsComparer(_OrderingComparer):
    comparison_type = ComparisonType.GREATER_THAN_EQUALS
    rule_keys = ("greaterthanequals", "greaterthanequalto", "greaterthanorequals", "greaterthanorequalto")

    def compare_ordered(self, expected: Any, actual: Any) -> bool:
        return actual >= expected


class LessThanComparer(_OrderingComparer):
    comparison_type = ComparisonType.LESS_THAN
    rule_keys = ("lessthan", "islessthan")

    def compare_ordered(self, expected: Any, actual: Any) -> bool:
        return actual < expected


class LessThanEqualsComparer(_OrderingComparer):
    comparison_type = ComparisonType.LESS_THAN_EQUALS
    rule_keys = ("lessthanequals", "lessthanequalto", "lessthanorequals", "lessthanorequalto")

    def compare_ordered(self, expected: Any, actual: Any) -> bool:
        return actual <= expected


# ================================================================================
# Text Comparers
# ================================================================================

class ContainsComparer(ValidationComparer):
    """Actual text contains expected text (case-sensitive)."""
    comparison_type = ComparisonType.CONTAINS
    rule_keys = ("contains", "contain")

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        return actual is not None and (expected or "") in actual


class DoesNotContainComparer(ValidationComparer):
    """Actual text does not contain expected text; an absent field passes."""
    comparison_type = ComparisonType.DOES_NOT_CONTAIN
    rule_keys = ("doesnotcontain", "notcontains", "doesntcontain")
    passes_when_missing = True

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        return actual is None or (expected or "") not in actual


class StartsWithComparer(ValidationComparer):
    comparison_type = ComparisonType.STARTS_WITH
    rule_keys = ("startswith", "startwith", "beginswith")

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        return actual is not None and actual.lower().startswith((expected or "").lower())


class EndsWithComparer(ValidationComparer):
    comparison_type = ComparisonType.ENDS_WITH
    rule_keys = ("endswith", "endwith")

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        return actual is not None and actual.lower().endswith((expected or "").lower())


# ================================================================================
# State Comparers
# ================================================================================

def _expects_false(expected: Optional[str]) -> bool:
    return _parse_bool(expected) is False


class ExistsComparer(ValidationComparer):
    """Element exists ("exists false" checks the opposite)."""
    comparison_type = ComparisonType.EXISTS
    rule_keys = ("exists", "exist")
    requires_field_value = False
    should_check_element_existence = False

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        exists = prop.check_element_exists()
        return not exists if _expects_false(expected) else exists


class DoesNotExistComparer(ValidationComparer):
    """Element does not exist; an absent field passes."""
    comparison_type = ComparisonType.DOES_NOT_EXIST
    rule_keys = ("doesnotexist", "notexists", "doesntexist")
    requires_field_value = False
    should_check_element_existence = False
    passes_when_missing = True

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        exists = prop.check_element_exists()
        return exists if _expects_false(expected) else not exists


class EnabledComparer(ValidationComparer):
    """Element is enabled ("enabled false" checks the opposite)."""
    comparison_type = ComparisonType.ENABLED
    rule_keys = ("enabled", "isenabled")
    requires_field_value = False

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        enabled = prop.check_element_enabled()
        return not enabled if _expects_false(expected) else enabled


class NotEnabledComparer(ValidationComparer):
    comparison_type = ComparisonType.NOT_ENABLED
    rule_keys = ("notenabled", "isnotenabled", "disabled", "isdisabled")
    requires_field_value = False

    def compare(self, prop: Any, expected: Optional[str], actual: Optional[str]) -> bool:
        enabled = prop.check_element_enabled()
        return enabled if _expects_false(expected) else not enabled


# ================================================================================
# Comparer Lookup
# ================================================================================

def default_comparers() -> List[ValidationComparer]:
    """Return one instance of every built-in comparer."""
    return [
        EqualsComparer(),
        DoesNotEqualComparer(),
        ContainsComparer(),
        DoesNotContainComparer(),
        StartsWithComparer(),
        EndsWithComparer(),
        ExistsComparer(),
        DoesNotExistComparer(),
        EnabledComparer(),
        NotEnabledComparer(),
        GreaterThanComparer(),
        GreaterThanEqualsComparer(),
        LessThanComparer(),
        LessThanEqualsComparer(),
    ]


class ComparerLookup:
    """
    Resolves rule text to comparers.

    Example:
        lookup = ComparerLookup(default_comparers())
        lookup.get("Does Not Contain")  # -> DoesNotContainComparer
    """

    def __init__(self, comparers: Iterable[ValidationComparer]):
        self._by_key: Dict[str, ValidationComparer] = {}
        self._by_type: Dict[ComparisonType, ValidationComparer] = {}
        for comparer in comparers:
            self._by_type.setdefault(comparer.comparison_type, comparer)
            for key in comparer.rule_keys:
                self._by_key[key] = comparer

    def get(self, rule: str) -> ValidationComparer:
        """
        Return the comparer for rule text.

        Raises:
            ConfigurationError: If no comparer handles the rule
        """
        comparer = self._by_key.get(to_lookup_key(rule))
        if comparer is None:
            raise ConfigurationError(
                f"Unsupported comparison rule '{rule}'. "
                f"Supported rules: {', '.join(sorted(self._by_key))}"
            )
        return comparer

    def for_type(self, comparison_type: ComparisonType) -> ValidationComparer:
        comparer = self._by_type.get(comparison_type)
        if comparer is None:
            raise ConfigurationError(f"No comparer registered for {comparison_type.value}")
        return comparer


__all__ = [
    "ComparisonType",
    "NumericComparisonType",
    "ValidationComparer",
    "ValueComparer",
    "EqualsComparer",
    "DoesNotEqualComparer",
    "ContainsComparer",
    "DoesNotContainComparer",
    "StartsWithComparer",
    "EndsWithComparer",
    "ExistsComparer",
    "DoesNotExistComparer",
    "EnabledComparer",
    "NotEnabledComparer",
    "GreaterThanComparer",
    "GreaterThanEqualsComparer",
    "LessThanComparer",
    "LessThanEqualsComparer",
    "ComparerLookup",
    "default_comparers",
]
