"""
================================================================================
Property Handles
================================================================================

Lazily-bound accessors for the properties of a page object.

Handle kinds:
    - ScalarPropertyHandle: plain value backed by the page instance
    - ElementPropertyHandle: single element (click / fill / clear / read)
    - NestedPagePropertyHandle: element that is the root of a nested page
    - ListPropertyHandle: repeating list whose items are page objects

Element handles never cache native references: every call re-runs the
resolution thunk, since UI elements may detach and re-attach between calls.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
import typing
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from loguru import logger

from ..common.lookup import to_lookup_key
from ..common.wait_helpers import WaitConfig, WaitTimeoutError, wait_for
from ..drivers.base import ComboBoxItem, Locator, NativeDriver
from ..validation.comparers import ComparisonType, NumericComparisonType
from ..validation.engine import find_first_match, validate_list_items
from ..validation.results import ValidationResult
from ..validation.validation_table import ItemValidation
from .exceptions import ElementExecuteException, UnsupportedOperationError


# ================================================================================
# Wait Conditions
# ================================================================================

class WaitCondition(str, Enum):
    """Element states that can be waited for."""
    BECOMES_EXISTENT = "BecomesExistent"
    BECOMES_NON_EXISTENT = "BecomesNonExistent"
    BECOMES_ENABLED = "BecomesEnabled"
    BECOMES_DISABLED = "BecomesDisabled"
    REMAINS_EXISTENT = "RemainsExistent"
    REMAINS_NON_EXISTENT = "RemainsNonExistent"
    REMAINS_ENABLED = "RemainsEnabled"
    REMAINS_DISABLED = "RemainsDisabled"
    NOT_MOVING = "NotMoving"

    @classmethod
    def parse(cls, text: str) -> "WaitCondition":
        """Parse a condition from free-form text ("becomes enabled", "not exists")."""
        key = to_lookup_key(text)
        if key in _WAIT_ALIASES:
            return _WAIT_ALIASES[key]
        for member in cls:
            if to_lookup_key(member.value) == key:
                return member
        raise ValueError(f"Unknown wait condition: '{text}'")


_WAIT_ALIASES = {
    "exists": WaitCondition.BECOMES_EXISTENT,
    "notexists": WaitCondition.BECOMES_NON_EXISTENT,
    "doesnotexist": WaitCondition.BECOMES_NON_EXISTENT,
    "enabled": WaitCondition.BECOMES_ENABLED,
    "notenabled": WaitCondition.BECOMES_DISABLED,
    "disabled": WaitCondition.BECOMES_DISABLED,
}


# ================================================================================
# Base Handle
# ================================================================================

class PropertyHandle:
    """
    Base class for page properties.

    Every verb defaults to raising UnsupportedOperationError; subclasses
    override the verbs their kind supports.
    """

    is_element = False
    is_list = False
    kind_name = "property"

    def __init__(self, name: str, page_name: str, value_type: Any = None):
        self.name = name
        self.page_name = page_name
        self.value_type = value_type

    @property
    def key(self) -> str:
        return to_lookup_key(self.name)

    def _not_supported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"{operation} is not supported by property type '{self.kind_name}' "
            f"(property '{self.name}' on page {self.page_name})",
            property_name=self.name,
            page_name=self.page_name,
        )

    # ==================== State Checks ====================

    def check_element_exists(self) -> bool:
        return True

    def check_element_enabled(self) -> bool:
        return True

    # ==================== Verbs ====================

    def click_element(self, wait_until_ready: bool = True, timeout: Optional[float] = None) -> bool:
        raise self._not_supported("Click Element")

    def double_click_element(self, wait_until_ready: bool = True, timeout: Optional[float] = None) -> bool:
        raise self._not_supported("Double Click Element")

    def hover_element(self, wait_until_ready: bool = True, timeout: Optional[float] = None) -> bool:
        raise self._not_supported("Hover Over Element")

    def get_combo_box_items(self) -> Optional[List[ComboBoxItem]]:
        raise self._not_supported("Get Combo Box Items")

    def fill_data(self, value: Optional[str]) -> None:
        raise self._not_supported("Fill Data")

    def clear_data(self) -> None:
        raise self._not_supported("Clear Data")

    def get_current_value(self) -> Optional[str]:
        raise self._not_supported("Get Current Value")

    def highlight(self) -> None:
        raise self._not_supported("Highlight")

    def validate_item(self, validation: ItemValidation) -> Tuple[bool, Optional[str]]:
        raise self._not_supported("Validate Item")

    def wait_for_element_condition(self, condition: WaitCondition, timeout: Optional[float] = None) -> bool:
        raise self._not_supported("Wait For Element Condition")

    def get_item_as_page(self) -> Optional[Any]:
        raise self._not_supported("Get Item As Page")

    def get_item_at_index(self, index: int) -> Optional[Any]:
        raise self._not_supported("Get Item At Index")

    def validate_list(
        self,
        comparison_type: ComparisonType,
        validations: Sequence[ItemValidation],
    ) -> ValidationResult:
        raise self._not_supported("Validate List")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.page_name}.{self.name}>"


# ================================================================================
# Scalar Properties
# ================================================================================

_SCALAR_CONVERTERS = {
    str: str,
    int: int,
    float: float,
    bool: lambda value: value.strip().lower() in ("true", "yes", "on", "1"),
}


def _scalar_converter(value_type: Any) -> Optional[Callable[[str], Any]]:
    if isinstance(value_type, str):
        # unresolved annotation such as "Optional[int]"
        name = value_type.replace("Optional[", "").rstrip("]")
        value_type = {"str": str, "int": int, "float": float, "bool": bool}.get(name)

    args = [a for a in typing.get_args(value_type) if a is not type(None)]
    if typing.get_origin(value_type) is typing.Union and len(args) == 1:
        value_type = args[0]
    return _SCALAR_CONVERTERS.get(value_type)


class ScalarPropertyHandle(PropertyHandle):
    """Plain value read from and written to the page instance."""

    kind_name = "scalar"

    def __init__(
        self,
        name: str,
        page_name: str,
        getter: Callable[[], Any],
        setter: Callable[[Any], None],
        value_type: Any = None,
    ):
        super().__init__(name, page_name, value_type)
        self._getter = getter
        self._setter = setter

    def fill_data(self, value: Optional[str]) -> None:
        converter = _scalar_converter(self.value_type)
        if converter is None:
            raise self._not_supported("Fill Data")
        try:
            self._setter(None if value is None else converter(value))
        except ValueError as e:
            raise ElementExecuteException(
                f"Value '{value}' cannot be assigned to property '{self.name}' "
                f"on page {self.page_name}: {e}",
                property_name=self.name,
                page_name=self.page_name,
            ) from e

    def clear_data(self) -> None:
        self._setter(None)

    def get_current_value(self) -> Optional[str]:
        value = self._getter()
        return None if value is None else str(value)

    def validate_item(self, validation: ItemValidation) -> Tuple[bool, Optional[str]]:
        value = self._getter()
        if isinstance(value, (list, tuple, set, frozenset)):
            values = [str(v) for v in value]
            actual = ",".join(values)
            return any(validation.compare(self, v) for v in values), actual

        actual = None if value is None else str(value)
        return validation.compare(self, actual), actual


# ================================================================================
# Native Element Properties
# ================================================================================

class _NativeHandle(PropertyHandle):
    """Shared behavior of handles backed by a native element."""

    def __init__(
        self,
        name: str,
        page_name: str,
        driver: NativeDriver,
        resolve: Callable[[], Any],
        element_kind: str = "text",
        wait_config: Optional[WaitConfig] = None,
        value_type: Any = None,
    ):
        super().__init__(name, page_name, value_type)
        self._driver = driver
        self._resolve = resolve
        self.element_kind = element_kind
        self.wait_config = wait_config or WaitConfig()

    @property
    def kind_name(self) -> str:
        return self.element_kind

    def native(self) -> Optional[Any]:
        """Resolve the native element now (never cached)."""
        return self._resolve()

    # ==================== State Checks ====================

    def check_element_exists(self) -> bool:
        try:
            element = self._resolve()
            return element is not None and self._driver.element_exists(element)
        except Exception as e:
            logger.debug(f"Existence check for '{self.name}' failed: {e}")
            return False

    def check_element_enabled(self) -> bool:
        try:
            element = self._resolve()
            return (
                element is not None
                and self._driver.element_exists(element)
                and self._driver.element_enabled(element)
            )
        except Exception as e:
            logger.debug(f"Enabled check for '{self.name}' failed: {e}")
            return False

    def _require_element(self) -> Any:
        element = self._resolve()
        if element is None or not self._driver.element_exists(element):
            raise ElementExecuteException(
                f"Element mapped to property '{self.name}' does not exist on page {self.page_name}.",
                property_name=self.name,
                page_name=self.page_name,
            )
        return element

    # ==================== Reading ====================

    def _read_text(self, element: Any) -> Optional[str]:
        text = self._driver.element_text(element)
        if text is None:
            return None
        return text.strip().replace("\r\n", " ").replace("\n", " ")

    def get_current_value(self) -> Optional[str]:
        return self._driver.element_text(self._require_element())

    def validate_item(self, validation: ItemValidation) -> Tuple[bool, Optional[str]]:
        element = self._require_element() if validation.check_element_existence else self._resolve()

        actual = None
        if validation.requires_field_value and element is not None:
            actual = self._read_text(element)

        return validation.compare(self, actual), actual

    def highlight(self) -> None:
        element = self._resolve()
        if element is not None and self._driver.element_exists(element):
            self._driver.highlight(element)

    # ==================== Waiting ====================

    def wait_for_element_condition(self, condition: WaitCondition, timeout: Optional[float] = None) -> bool:
        """
        Wait for an element state.

        Args:
            condition: State to wait for
            timeout: Timeout in seconds (configured default if omitted)

        Returns:
            True once a Becomes/NotMoving condition is reached; for Remains
            conditions, whether the state held for the whole timeout

        Raises:
            WaitTimeoutError: If a Becomes/NotMoving condition is not reached
        """
        timeout = self.wait_config.timeout if timeout is None else timeout
        checks = {
            WaitCondition.BECOMES_EXISTENT: self.check_element_exists,
            WaitCondition.BECOMES_NON_EXISTENT: lambda: not self.check_element_exists(),
            WaitCondition.BECOMES_ENABLED: self.check_element_enabled,
            WaitCondition.BECOMES_DISABLED: lambda: not self.check_element_enabled(),
            WaitCondition.NOT_MOVING: self._not_moving_check(),
        }
        remains = {
            WaitCondition.REMAINS_EXISTENT: self.check_element_exists,
            WaitCondition.REMAINS_NON_EXISTENT: lambda: not self.check_element_exists(),
            WaitCondition.REMAINS_ENABLED: self.check_element_enabled,
            WaitCondition.REMAINS_DISABLED: lambda: not self.check_element_enabled(),
        }
        description = f"'{self.name}' {condition.value}"

        if condition in remains:
            return self._wait_remains(remains[condition], timeout, description)

        wait_for(checks[condition], timeout=timeout, interval=self.wait_config.interval, description=description)
        return True

    def _wait_remains(self, check: Callable[[], bool], timeout: float, description: str) -> bool:
        try:
            wait_for(lambda: not check(), timeout=timeout, interval=self.wait_config.interval, description=description)
        except WaitTimeoutError:
            return True
        logger.debug(f"Condition {description} was violated before {timeout}s")
        return False

    def _not_moving_check(self) -> Callable[[], bool]:
        last_position: List[Any] = [None]

        def check() -> bool:
            element = self._resolve()
            if element is None or not self._driver.element_exists(element):
                return False
            position = self._driver.element_position(element)
            if position is None:
                return True
            stable = position == last_position[0]
            last_position[0] = position
            return stable

        return check


class ElementPropertyHandle(_NativeHandle):
    """Single element property."""

    is_element = True

    def _wait_until_ready(self, timeout: Optional[float]) -> None:
        # both readiness waits share one deadline
        timeout = self.wait_config.timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        try:
            self.wait_for_element_condition(WaitCondition.NOT_MOVING, timeout)
            remaining = max(0.0, deadline - time.monotonic())
            self.wait_for_element_condition(WaitCondition.BECOMES_ENABLED, remaining)
        except WaitTimeoutError as e:
            logger.warning(f"⚠️ '{self.name}' not ready within {timeout}s, acting anyway: {e}")

    def _actuate(self, operation: str, act: Callable[[Any], bool], wait_until_ready: bool, timeout: Optional[float]) -> bool:
        element = self._require_element()

        if wait_until_ready:
            self._wait_until_ready(timeout)
            element = self._require_element()

        try:
            done = act(element)
        except Exception as e:
            if self._driver.is_transient_click_error(e):
                logger.warning(f"⚠️ Transient {operation} error on '{self.name}' treated as success: {e}")
                return True
            raise ElementExecuteException(
                f"{operation.capitalize()} on property '{self.name}' on page {self.page_name} failed: {e}",
                property_name=self.name,
                page_name=self.page_name,
            ) from e

        if not done:
            raise ElementExecuteException(
                f"{operation.capitalize()} action for property '{self.name}' on page {self.page_name} failed!",
                property_name=self.name,
                page_name=self.page_name,
            )
        logger.debug(f"✅ {operation.capitalize()} on '{self.name}' on {self.page_name}")
        return True

    def click_element(self, wait_until_ready: bool = True, timeout: Optional[float] = None) -> bool:
        """
        Click the element.

        Args:
            wait_until_ready: Wait for the element to stop moving and become
                enabled first; the click is attempted even if that wait times out
            timeout: Total timeout for the readiness waits

        Returns:
            True when the click was dispatched

        Raises:
            ElementExecuteException: If the element does not exist or the click failed
        """
        return self._actuate("click", self._driver.click, wait_until_ready, timeout)

    def double_click_element(self, wait_until_ready: bool = True, timeout: Optional[float] = None) -> bool:
        return self._actuate("double click", self._driver.double_click, wait_until_ready, timeout)

    def hover_element(self, wait_until_ready: bool = True, timeout: Optional[float] = None) -> bool:
        """Move the pointer over the element; click-style transient errors count as success."""
        return self._actuate("hover", self._driver.hover, wait_until_ready, timeout)

    def get_combo_box_items(self) -> Optional[List[ComboBoxItem]]:
        """Options of a combo box element, or None when the element is not one."""
        items = self._driver.get_combo_box_items(self._require_element())
        return None if items is None else list(items)

    def fill_data(self, value: Optional[str]) -> None:
        element = self._require_element()
        fill = self._driver.get_fill_method(self.element_kind)
        if fill is None:
            raise ElementExecuteException(
                f"Cannot find input handler for property '{self.name}' on page {self.page_name}. "
                f"No fill strategy for element kind '{self.element_kind}'.",
                property_name=self.name,
                page_name=self.page_name,
            )
        fill(element, "" if value is None else value)
        logger.debug(f"Filled '{self.name}' on {self.page_name}")

    def clear_data(self) -> None:
        element = self._require_element()
        clear = self._driver.get_clear_method(self.element_kind)
        if clear is not None:
            clear(element)
            return

        fill = self._driver.get_fill_method(self.element_kind)
        if fill is None:
            raise ElementExecuteException(
                f"Cannot find clear handler for property '{self.name}' on page {self.page_name}. "
                f"No clear strategy for element kind '{self.element_kind}'.",
                property_name=self.name,
                page_name=self.page_name,
            )
        fill(element, "")

    def get_item_as_page(self) -> Optional[Any]:
        return None


class NestedPagePropertyHandle(ElementPropertyHandle):
    """Element that is the root of a nested page object."""

    def __init__(self, *args: Any, child_page: Any = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._child_page = child_page

    def get_item_as_page(self) -> Optional[Any]:
        if not self.check_element_exists():
            return None
        return self._child_page


class ListPropertyHandle(_NativeHandle):
    """
    Repeating list of sub-pages.

    Items are materialized on every enumeration: the list element is
    resolved, its item elements are found and each is wrapped in a fresh
    page object by the item factory.
    """

    is_list = True

    def __init__(
        self,
        *args: Any,
        item_locator: Locator,
        item_factory: Callable[[Any], Any],
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self._item_locator = item_locator
        self._item_factory = item_factory

    def _item_elements(self) -> Sequence[Any]:
        container = self._resolve()
        if container is None:
            return []
        return self._driver.find_all(container, self._item_locator)

    def get_items(self) -> Iterator[Any]:
        """Yield one page object per current list item."""
        for element in self._item_elements():
            yield self._item_factory(element)

    def item_count(self) -> int:
        return len(self._item_elements())

    def get_item_at_index(self, index: int) -> Optional[Any]:
        """Return the page of the 0-based item, or None if out of range."""
        if index < 0:
            return None
        elements = self._item_elements()
        if index >= len(elements):
            return None
        return self._item_factory(elements[index])

    def get_item_as_page(self) -> Optional[Any]:
        return self.get_item_at_index(0)

    def validate_list(
        self,
        comparison_type: ComparisonType,
        validations: Sequence[ItemValidation],
    ) -> ValidationResult:
        items = list(self.get_items())
        logger.debug(f"Validating list '{self.name}' with {len(items)} item(s)")
        return validate_list_items(items, comparison_type, validations)

    def validate_list_row_count(
        self,
        comparison_type: NumericComparisonType,
        expected: int,
    ) -> Tuple[bool, int]:
        actual = self.item_count()
        return comparison_type.compare(expected, actual), actual

    def find_item_in_list(self, validations: Iterable[ItemValidation]) -> Tuple[Optional[Any], ValidationResult]:
        return find_first_match(self.get_items(), tuple(validations))


__all__ = [
    "WaitCondition",
    "PropertyHandle",
    "ScalarPropertyHandle",
    "ElementPropertyHandle",
    "NestedPagePropertyHandle",
    "ListPropertyHandle",
]
