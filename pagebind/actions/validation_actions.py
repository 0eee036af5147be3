"""
================================================================================
Validation Actions
================================================================================

Verbs asserting on page state. Mismatches are returned as failed
ActionResults carrying a diff table, which is also attached to the Allure
report.

Combo box options are validated by ValidateComboBoxAction against expected
ComboBoxItems, by text, by value or both.

When `retry_validation_until_timeout` is enabled, a failing validation is
re-evaluated until it passes or the default timeout elapses.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import allure
from loguru import logger

from ..common.config_loader import Settings
from ..common.token_manager import TokenManager
from ..common.wait_helpers import Waiter
from ..drivers.base import ComboBoxItem
from ..pages.exceptions import ElementExecuteException
from ..pages.property_handle import PropertyHandle, ScalarPropertyHandle
from ..pipeline.action_base import ActionBase, ActionCapability
from ..pipeline.action_result import ActionContext, ActionResult
from ..validation.comparers import ComparisonType, NumericComparisonType
from ..validation.engine import evaluate
from ..validation.results import ValidationResult
from ..validation.validation_table import ValidationTable


# ================================================================================
# Contexts
# ================================================================================

@dataclass
class ValidationTableContext(ActionContext):
    """Context carrying a validation table (processed by ValidationTablePreAction)."""
    validation_table: Optional[ValidationTable] = None


@dataclass
class ValidateItemContext(ValidationTableContext):
    pass


@dataclass
class ValidateListContext(ValidationTableContext):
    comparison_type: Optional[ComparisonType] = None


@dataclass
class ValidateListRowCountContext(ActionContext):
    comparison_type: NumericComparisonType = NumericComparisonType.EQUALS
    row_count: int = 0


@dataclass
class ValidationCheckContext(ActionContext):
    should_exist: bool = True


class ComboComparisonType(str, Enum):
    """How expected combo box items are compared with the options."""
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    CONTAINS_EXACTLY = "contains_exactly"


@dataclass
class ValidateComboBoxContext(ActionContext):
    comparison_type: ComboComparisonType = ComboComparisonType.CONTAINS
    items: List[ComboBoxItem] = field(default_factory=list)
    match_name: bool = True
    match_value: bool = False


@dataclass
class ValidateTokenContext(ValidationTableContext):
    @classmethod
    def for_token(cls, token_name: str, rule: str, value: Optional[str]) -> "ValidateTokenContext":
        table = ValidationTable()
        table.add_validation(token_name, rule, value)
        return cls(validation_table=table)


# ================================================================================
# Helpers
# ================================================================================

def attach_details(details: str, name: str = "Validation Details") -> None:
    allure.attach(details, name=name, attachment_type=allure.attachment_type.TEXT)


_LIST_FAILURE_REASONS = {
    ComparisonType.EQUALS: "not every item satisfied the rule checks",
    ComparisonType.CONTAINS: "no items satisfied the rule checks",
    ComparisonType.STARTS_WITH: "the first item did not satisfy the rule checks",
    ComparisonType.ENDS_WITH: "the last item did not satisfy the rule checks",
    ComparisonType.DOES_NOT_CONTAIN: "one or more items satisfied the rule checks and should not have",
    ComparisonType.DOES_NOT_EQUAL: "one or more items satisfied the rule checks and should not have",
    ComparisonType.CONTAINS_EXACTLY: "the items did not exactly match the expected items",
}


def list_failure_message(prefix: str, result: ValidationResult) -> str:
    """Failure text for list validations, including the per-item diff table."""
    reason = _LIST_FAILURE_REASONS.get(result.comparison_type, "no items satisfied the rule checks")
    if result.item_count == 0 and result.comparison_type in (ComparisonType.STARTS_WITH, ComparisonType.ENDS_WITH):
        reason = "the list contains no items"
    lines = [
        f"{prefix}, {reason}.",
        f"List Item Count: {result.item_count}",
    ]
    if result.unexpected_items:
        lines.append(f"Unexpected Items: {'; '.join(result.unexpected_items)}")
    if result.missing_items:
        lines.append(f"Missing Items: {'; '.join(result.missing_items)}")
    lines.append("Validation Details:")
    lines.append(result.get_comparison_table())
    return "\n".join(lines)


def item_failure(result: ValidationResult) -> ActionResult:
    table = result.get_comparison_table_by_rule()
    attach_details(table)
    return ActionResult.failure(
        ElementExecuteException(
            f"Value comparison(s) failed. See details for validation results.\n{table}"
        )
    )


class ValidateActionBase(ActionBase):
    """Base for verbs that may re-evaluate until their check passes."""

    capabilities = frozenset({ActionCapability.VALIDATION})

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self._settings = settings or Settings()

    def do_validate(self, check: Callable[[], bool]) -> None:
        """Run `check` once, or until it passes when retrying is enabled."""
        if not self._settings.retry_validation_until_timeout:
            check()
            return

        waiter = Waiter(self._settings.default_timeout, self._settings.wait_interval)
        if not waiter.try_wait_for(check, description=f"{self.name} to pass"):
            logger.debug(f"{self.name}: expected condition not met within {waiter.timeout}s")


# ================================================================================
# Item Validation
# ================================================================================

class ValidateItemAction(ValidateActionBase):
    """Validate properties of the current page against a validation table."""

    name = "ValidateItemAction"
    context_type = ValidateItemContext

    def do_execute(self, context: ValidateItemContext) -> ActionResult:
        validations = context.validation_table.validations
        outcome = {}

        def check() -> bool:
            outcome["result"] = evaluate(validations, self._resolve)
            return outcome["result"].is_valid

        self.do_validate(check)
        result = outcome["result"]
        if result.is_valid:
            return ActionResult.successful()
        return item_failure(result)

    def _resolve(self, field_name: str) -> Optional[PropertyHandle]:
        _, prop = self.locator.try_get_property(field_name)
        return prop


class ValidateTokenAction(ValidateActionBase):
    """Validate stored token values against a validation table."""

    name = "ValidateTokenAction"
    context_type = ValidateTokenContext

    def __init__(self, settings: Optional[Settings] = None, token_manager: Optional[TokenManager] = None):
        super().__init__(settings)
        self._token_manager = token_manager or TokenManager()

    def do_execute(self, context: ValidateTokenContext) -> ActionResult:
        result = evaluate(context.validation_table.validations, self._resolve)
        if result.is_valid:
            return ActionResult.successful()
        return item_failure(result)

    def _resolve(self, field_name: str) -> Optional[PropertyHandle]:
        if self._token_manager.get_token(field_name) is None:
            return None
        return ScalarPropertyHandle(
            field_name,
            "Tokens",
            getter=lambda: self._token_manager.get_token(field_name),
            setter=lambda value: self._token_manager.store_token(field_name, value),
        )


# ================================================================================
# List Validation
# ================================================================================

class ValidateListAction(ValidateActionBase):
    """Validate the items of a list property."""

    name = "ValidateListAction"
    capabilities = frozenset({ActionCapability.VALIDATION, ActionCapability.LIST})
    context_type = ValidateListContext

    def do_execute(self, context: ValidateListContext) -> ActionResult:
        prop = self.locator.get_property(context.property_name)
        if not prop.is_list:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Property '{prop.name}' was found but is not a list element.",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )

        table = context.validation_table
        comparison_type = context.comparison_type or table.comparison_type or ComparisonType.EQUALS
        outcome = {}

        def check() -> bool:
            outcome["result"] = prop.validate_list(comparison_type, table.validations)
            return outcome["result"].is_valid

        self.do_validate(check)
        result = outcome["result"]
        if result.is_valid:
            return ActionResult.successful()

        message = list_failure_message(f"List validation of field '{prop.name}' failed", result)
        attach_details(result.get_comparison_table())
        return ActionResult.failure(
            ElementExecuteException(message, property_name=prop.name, page_name=prop.page_name)
        )


class ValidateListRowCountAction(ValidateActionBase):
    """Validate the number of items in a list property."""

    name = "ValidateListRowCountAction"
    capabilities = frozenset({ActionCapability.VALIDATION, ActionCapability.LIST})
    context_type = ValidateListRowCountContext

    def do_execute(self, context: ValidateListRowCountContext) -> ActionResult:
        prop = self.locator.get_property(context.property_name)
        if not prop.is_list:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Property '{prop.name}' was found but is not a list element.",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )

        outcome = {}

        def check() -> bool:
            outcome["result"] = prop.validate_list_row_count(context.comparison_type, context.row_count)
            return outcome["result"][0]

        self.do_validate(check)
        ok, actual = outcome["result"]
        if ok:
            return ActionResult.successful()
        return ActionResult.failure(
            ElementExecuteException(
                f"List count validation of field '{prop.name}' failed. "
                f"Expected Items: {context.row_count}, Actual Items: {actual}",
                property_name=prop.name,
                page_name=prop.page_name,
            )
        )


# ================================================================================
# Combo Box Validation
# ================================================================================

def _sorted_texts(items: List[ComboBoxItem]) -> str:
    return ",".join(sorted(item.text for item in items))


class ValidateComboBoxAction(ValidateActionBase):
    """
    Validate the options of a combo box element.

    An expected item matches an option when its text (match_name) and its
    value (match_value) are equal. ContainsExactly also requires the option
    count to equal the expected item count.
    """

    name = "ValidateComboBoxAction"
    context_type = ValidateComboBoxContext

    def do_execute(self, context: ValidateComboBoxContext) -> ActionResult:
        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located

        prop = located.result
        outcome = {}

        def check() -> bool:
            outcome["actual"] = prop.get_combo_box_items()
            if outcome["actual"] is None:
                return False
            outcome["failed"] = self._failed_items(context, outcome["actual"])
            return not outcome["failed"] and self._counts_match(context, outcome["actual"])

        self.do_validate(check)
        actual = outcome["actual"]
        if actual is None:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Property '{prop.name}' was found but is not a combo box element.",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )

        failed = outcome["failed"]
        if not failed and self._counts_match(context, actual):
            return ActionResult.successful()

        if failed:
            problem = (
                "exists but should not have"
                if context.comparison_type == ComboComparisonType.DOES_NOT_CONTAIN
                else "do not exist"
            )
            message = (
                f"Combo box validation of field '{prop.name}' failed. "
                f"Expected items that {problem}: {_sorted_texts(failed)}"
            )
        else:
            message = (
                f"Combo box exact match validation of field '{prop.name}' failed. "
                f"Expected Items: {_sorted_texts(context.items)}; Actual Items: {_sorted_texts(actual)}"
            )
        logger.warning(f"⚠️ {message}")
        return ActionResult.failure(
            ElementExecuteException(message, property_name=prop.name, page_name=prop.page_name)
        )

    @staticmethod
    def _failed_items(context: ValidateComboBoxContext, actual: List[ComboBoxItem]) -> List[ComboBoxItem]:
        def matches(option: ComboBoxItem, expected: ComboBoxItem) -> bool:
            return (not context.match_name or option.text == expected.text) and (
                not context.match_value or option.value == expected.value
            )

        should_exist = context.comparison_type != ComboComparisonType.DOES_NOT_CONTAIN
        return [
            expected
            for expected in context.items
            if any(matches(option, expected) for option in actual) != should_exist
        ]

    @staticmethod
    def _counts_match(context: ValidateComboBoxContext, actual: List[ComboBoxItem]) -> bool:
        return (
            context.comparison_type != ComboComparisonType.CONTAINS_EXACTLY
            or len(context.items) == len(actual)
        )


# ================================================================================
# Element State Validation
# ================================================================================

class _ElementCheckAction(ValidateActionBase):
    context_type = ValidationCheckContext
    true_error_message = ""
    false_error_message = ""

    def check_element(self, prop: PropertyHandle) -> bool:
        raise NotImplementedError

    def do_execute(self, context: ValidationCheckContext) -> ActionResult:
        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located

        prop = located.result
        outcome = {}

        def check() -> bool:
            outcome["state"] = self.check_element(prop)
            return outcome["state"] == context.should_exist

        self.do_validate(check)
        state = outcome["state"]
        if context.should_exist and not state:
            return ActionResult.failure(
                ElementExecuteException(self.true_error_message.format(prop.name), property_name=prop.name)
            )
        if not context.should_exist and state:
            return ActionResult.failure(
                ElementExecuteException(self.false_error_message.format(prop.name), property_name=prop.name)
            )
        return ActionResult.successful()


class ValidateElementExistsAction(_ElementCheckAction):
    """Validate that an element exists (or does not)."""

    name = "ValidateElementExistsAction"
    true_error_message = "Element '{0}' does not exist on the page and should exist."
    false_error_message = "Element '{0}' exists on the page and should not exist."

    def check_element(self, prop: PropertyHandle) -> bool:
        return prop.check_element_exists()


class ValidateElementEnabledAction(_ElementCheckAction):
    """Validate that an existing element is enabled (or not)."""

    name = "ValidateElementEnabledAction"
    true_error_message = "Element '{0}' is not enabled on the page and should be enabled."
    false_error_message = "Element '{0}' is enabled on the page and should not be enabled."

    def check_element(self, prop: PropertyHandle) -> bool:
        if not prop.check_element_exists():
            raise ElementExecuteException(
                f"Element mapped to property '{prop.name}' does not exist on page {prop.page_name}.",
                property_name=prop.name,
                page_name=prop.page_name,
            )
        return prop.check_element_enabled()


__all__ = [
    "ValidationTableContext",
    "ValidateItemContext",
    "ValidateListContext",
    "ValidateListRowCountContext",
    "ValidationCheckContext",
    "ValidateTokenContext",
    "ComboComparisonType",
    "ValidateComboBoxContext",
    "ValidateActionBase",
    "ValidateItemAction",
    "ValidateTokenAction",
    "ValidateListAction",
    "ValidateListRowCountAction",
    "ValidateComboBoxAction",
    "ValidateElementExistsAction",
    "ValidateElementEnabledAction",
    "list_failure_message",
]
