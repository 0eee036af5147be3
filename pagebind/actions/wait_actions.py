"""
================================================================================
Wait Actions
================================================================================

Verbs that block until the UI reaches a state:

    WaitForElementAction    - element condition (exists, enabled, not moving...)
    WaitForListItemsAction  - list has at least one item
    WaitForPageAction       - browser is on a named page
    WaitForElementsAction   - every row of a validation table passes
    WaitForPageTitleAction  - page title contains a text, refreshing meanwhile

Timeouts from the wait primitive are converted here into descriptive
failures that include the waited duration.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..common.config_loader import Settings
from ..common.wait_helpers import Waiter, WaitTimeoutError
from ..drivers.base import NativeDriver
from ..pages.declarations import get_page_metadata
from ..pages.exceptions import ElementExecuteException, PageNavigationException
from ..pages.page_builder import PageBuilder
from ..pages.page_mapper import PageMapper
from ..pages.property_handle import WaitCondition
from ..pipeline.action_base import ActionBase, ActionCapability
from ..pipeline.action_result import ActionContext, ActionResult
from ..validation.engine import evaluate
from .validation_actions import ValidationTableContext


@dataclass
class WaitForElementContext(ActionContext):
    condition: WaitCondition = WaitCondition.BECOMES_EXISTENT
    timeout: Optional[float] = None


@dataclass
class WaitForListItemsContext(ActionContext):
    timeout: Optional[float] = None


@dataclass
class WaitForPageContext(ActionContext):
    timeout: Optional[float] = None


@dataclass
class WaitForElementsContext(ValidationTableContext):
    timeout: Optional[float] = None


@dataclass
class WaitForPageTitleContext(ActionContext):
    title: str = ""
    timeout: Optional[float] = None


def page_not_found(name: str) -> ActionResult:
    return ActionResult.failure(
        PageNavigationException(
            f"Cannot locate a page for name: {name}. Check page aliases in the registered page types.",
            page_name=name,
        )
    )


class WaitForElementAction(ActionBase):
    """Wait for an element to reach a condition."""

    name = "WaitForElementAction"
    capabilities = frozenset({ActionCapability.WAIT, ActionCapability.ELEMENT})
    context_type = WaitForElementContext

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self._settings = settings or Settings()

    def do_execute(self, context: WaitForElementContext) -> ActionResult:
        timeout = self._settings.default_timeout if context.timeout is None else context.timeout
        started = time.monotonic()

        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located
        prop = located.result

        remaining = max(0.0, timeout - (time.monotonic() - started))
        try:
            reached = prop.wait_for_element_condition(context.condition, remaining)
        except WaitTimeoutError as e:
            logger.debug(str(e))
            reached = False

        if reached:
            return ActionResult.successful()

        elapsed = time.monotonic() - started
        logger.warning(f"⚠️ '{prop.name}' did not reach {context.condition.value} in {elapsed:.2f}s")
        return ActionResult.failure(
            ElementExecuteException(
                f"Could not perform action '{context.condition.value}' on '{prop.name}' before timeout: "
                f"{timeout}s (waited {elapsed:.2f}s)",
                property_name=prop.name,
                page_name=prop.page_name,
            )
        )


class WaitForListItemsAction(ActionBase):
    """Wait until a list property contains at least one item."""

    name = "WaitForListItemsAction"
    capabilities = frozenset({ActionCapability.WAIT, ActionCapability.LIST})
    context_type = WaitForListItemsContext

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self._settings = settings or Settings()

    def do_execute(self, context: WaitForListItemsContext) -> ActionResult:
        prop = self.locator.get_property(context.property_name)
        if not prop.is_list:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Property '{prop.name}' is not a list and cannot be used in this wait.",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )

        timeout = self._settings.list_wait_timeout if context.timeout is None else context.timeout
        waiter = Waiter(timeout, self._settings.wait_interval)

        def has_items() -> bool:
            if prop.get_item_at_index(0) is not None:
                return True
            logger.debug(f"List '{prop.name}' did not contain any elements, waiting...")
            return False

        if waiter.try_wait_for(has_items, description=f"items in list '{prop.name}'"):
            return ActionResult.successful()

        return ActionResult.failure(
            PageNavigationException(
                f"List '{context.property_name}' did not contain elements after {timeout}s",
                page_name=prop.page_name,
            )
        )


class WaitForPageAction(ActionBase):
    """Wait until the browser is on a named page, returning that page."""

    name = "WaitForPageAction"
    capabilities = frozenset({ActionCapability.WAIT, ActionCapability.NAVIGATION})
    context_type = WaitForPageContext

    def __init__(
        self,
        driver: NativeDriver,
        page_builder: PageBuilder,
        page_mapper: PageMapper,
        settings: Optional[Settings] = None,
    ):
        super().__init__()
        self._driver = driver
        self._page_builder = page_builder
        self._page_mapper = page_mapper
        self._settings = settings or Settings()

    def do_execute(self, context: WaitForPageContext) -> ActionResult:
        page_name = context.property_name
        page_type = self._page_mapper.get_type_from_name(page_name)
        if page_type is None:
            return page_not_found(page_name)

        navigation = get_page_metadata(page_type).navigation
        timeout = self._settings.default_timeout if context.timeout is None else context.timeout
        waiter = Waiter(timeout, self._settings.wait_interval)

        def on_page() -> bool:
            if navigation is None:
                return True
            current = self._driver.current_url()
            if navigation.matches(current):
                return True
            logger.debug(f"Browser is not on page '{page_name}' yet (at {current})")
            return False

        if not waiter.try_wait_for(on_page, description=f"page '{page_name}'"):
            return ActionResult.failure(
                PageNavigationException(
                    f"Browser did not resolve to the '{page_name}' page in {timeout}s",
                    page_name=page_name,
                )
            )

        return ActionResult.successful(self._page_builder.build(page_type))


class WaitForElementsAction(ActionBase):
    """Wait until every row of a validation table passes on the current page."""

    name = "WaitForElementsAction"
    capabilities = frozenset({ActionCapability.WAIT, ActionCapability.VALIDATION})
    context_type = WaitForElementsContext

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self._settings = settings or Settings()

    def do_execute(self, context: WaitForElementsContext) -> ActionResult:
        timeout = self._settings.default_timeout if context.timeout is None else context.timeout
        waiter = Waiter(timeout, self._settings.wait_interval)
        validations = context.validation_table.validations
        outcome = {}

        def passes() -> bool:
            outcome["result"] = evaluate(validations, self._resolve)
            if not outcome["result"].is_valid:
                logger.debug(f"Value comparison(s) not met yet:\n{outcome['result'].get_comparison_table_by_rule()}")
            return outcome["result"].is_valid

        if waiter.try_wait_for(passes, description="value comparison(s)"):
            return ActionResult.successful()

        return ActionResult.failure(
            ElementExecuteException(
                f"Value comparison(s) failed after {timeout}s.\n"
                f"{outcome['result'].get_comparison_table_by_rule()}"
            )
        )

    def _resolve(self, field_name: str):
        _, prop = self.locator.try_get_property(field_name)
        return prop


class WaitForPageTitleAction(ActionBase):
    """Wait until the page title contains a text, refreshing the page between checks."""

    name = "WaitForPageTitleAction"
    capabilities = frozenset({ActionCapability.WAIT})
    context_type = WaitForPageTitleContext

    def __init__(self, driver: NativeDriver, settings: Optional[Settings] = None):
        super().__init__()
        self._driver = driver
        self._settings = settings or Settings()

    def do_execute(self, context: WaitForPageTitleContext) -> ActionResult:
        timeout = self._settings.default_timeout if context.timeout is None else context.timeout
        waiter = Waiter(timeout, self._settings.wait_interval)

        def title_matches() -> bool:
            current = self._driver.title()
            if context.title in current:
                return True
            logger.debug(f"Page title '{current}' does not contain '{context.title}', refreshing...")
            self._driver.refresh()
            return False

        if waiter.try_wait_for(title_matches, description=f"page title containing '{context.title}'"):
            return ActionResult.successful()

        return ActionResult.failure(
            PageNavigationException(f"Page title did not contain '{context.title}' after {timeout}s")
        )


__all__ = [
    "WaitForElementContext",
    "WaitForListItemsContext",
    "WaitForPageContext",
    "WaitForElementsContext",
    "WaitForPageTitleContext",
    "WaitForElementAction",
    "WaitForListItemsAction",
    "WaitForPageAction",
    "WaitForElementsAction",
    "WaitForPageTitleAction",
    "page_not_found",
]
