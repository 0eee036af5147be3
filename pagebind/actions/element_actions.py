"""
================================================================================
Element Actions
================================================================================

Verbs acting on single elements and list items.

    ButtonClickAction          - click an element
    ButtonDoubleClickAction    - double click an element
    HoverOverElementAction     - move the pointer over an element
    EnterDataAction            - fill an element (token aware)
    ClearDataAction            - clear an element or scalar property
    GetElementAsPageAction     - the nested page behind an element
    GetElementAsContextInPageAction - the nested page behind an element of a given page
    GetListItemByIndexAction   - list item by 1-based number
    GetListItemByCriteriaAction - first list item matching a validation table
    SetTokenFromValueAction    - store a property's current value as a token

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..common.config_loader import Settings
from ..common.token_manager import TokenManager
from ..pages.exceptions import ElementExecuteException
from ..pages.page_object import PageObject
from ..pipeline.action_base import ActionBase, ActionCapability
from ..pipeline.action_result import ActionContext, ActionResult
from .validation_actions import ValidationTableContext, list_failure_message


# ================================================================================
# Contexts
# ================================================================================

@dataclass
class EnterDataContext(ActionContext):
    data: Optional[str] = None


@dataclass
class ListItemByIndexContext(ActionContext):
    item_number: int = 1


@dataclass
class ListItemByCriteriaContext(ValidationTableContext):
    pass


@dataclass
class TokenFieldContext(ActionContext):
    token_name: str = ""


@dataclass
class ElementInPageContext(ActionContext):
    page: Optional[PageObject] = None


def _not_a_list(name: str) -> ActionResult:
    return ActionResult.failure(
        ElementExecuteException(f"Property '{name}' was found but is not a list element.", property_name=name)
    )


# ================================================================================
# Element Verbs
# ================================================================================

class ButtonClickAction(ActionBase):
    """Click an element, optionally waiting for it to settle first."""

    name = "ButtonClickAction"
    capabilities = frozenset({ActionCapability.ELEMENT})

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self._settings = settings or Settings()

    def do_execute(self, context: ActionContext) -> ActionResult:
        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located

        located.result.click_element(
            wait_until_ready=self._settings.wait_for_still_element_before_clicking
        )
        return ActionResult.successful()


class _PointerAction(ActionBase):
    capabilities = frozenset({ActionCapability.ELEMENT})

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self._settings = settings or Settings()

    def act(self, prop, wait_until_ready: bool) -> bool:
        raise NotImplementedError

    def do_execute(self, context: ActionContext) -> ActionResult:
        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located

        self.act(located.result, self._settings.wait_for_still_element_before_clicking)
        return ActionResult.successful()


class ButtonDoubleClickAction(_PointerAction):
    """Double click an element."""

    name = "ButtonDoubleClickAction"

    def act(self, prop, wait_until_ready: bool) -> bool:
        return prop.double_click_element(wait_until_ready=wait_until_ready)


class HoverOverElementAction(_PointerAction):
    """Move the pointer over an element."""

    name = "HoverOverElementAction"

    def act(self, prop, wait_until_ready: bool) -> bool:
        return prop.hover_element(wait_until_ready=wait_until_ready)


class EnterDataAction(ActionBase):
    """Fill an element after expanding token expressions in the data."""

    name = "EnterDataAction"
    capabilities = frozenset({ActionCapability.ELEMENT})
    context_type = EnterDataContext

    def __init__(self, token_manager: Optional[TokenManager] = None):
        super().__init__()
        self._token_manager = token_manager or TokenManager()

    def do_execute(self, context: EnterDataContext) -> ActionResult:
        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located

        value = self._token_manager.set_token(context.data)
        located.result.fill_data(value)
        return ActionResult.successful()


class ClearDataAction(ActionBase):
    """Clear an element, falling back to a scalar property of the same name."""

    name = "ClearDataAction"
    capabilities = frozenset({ActionCapability.ELEMENT})

    def do_execute(self, context: ActionContext) -> ActionResult:
        found, prop = self.locator.try_get_element(context.property_name)
        if not found:
            prop = self.locator.get_property(context.property_name)

        prop.clear_data()
        return ActionResult.successful()


class GetElementAsPageAction(ActionBase):
    """Return the nested page object behind an element."""

    name = "GetElementAsPageAction"
    capabilities = frozenset({ActionCapability.ELEMENT})

    def do_execute(self, context: ActionContext) -> ActionResult:
        located = self.locator.get_element(context.property_name)
        if not located.success:
            return located

        prop = located.result
        page = prop.get_item_as_page()
        if page is None:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Could not retrieve a page from property '{prop.name}'",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )
        return ActionResult.successful(page)


class GetElementAsContextInPageAction(ActionBase):
    """
    Return the nested page behind an element of a given page.

    The element is looked up on `context.page` when one is supplied,
    otherwise on the active page.
    """

    name = "GetElementAsContextInPageAction"
    capabilities = frozenset({ActionCapability.ELEMENT})
    context_type = ElementInPageContext

    def do_execute(self, context: ElementInPageContext) -> ActionResult:
        locator = self.locator if context.page is None else self.locator.for_page(context.page)
        prop = locator.get_property(context.property_name)
        if prop.is_list:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Property '{prop.name}' was located but is a list element which cannot be a sub-page.",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )
        if not prop.is_element:
            raise ElementExecuteException(
                f"Property '{prop.name}' was located on page {prop.page_name} but is not an element.",
                property_name=prop.name,
                page_name=prop.page_name,
            )

        page = prop.get_item_as_page()
        if page is None:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Could not retrieve a page from property '{prop.name}'",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )
        return ActionResult.successful(page)


class SetTokenFromValueAction(ActionBase):
    """Store the current value of a property under a token name."""

    name = "SetTokenFromValueAction"
    capabilities = frozenset({ActionCapability.ELEMENT})
    context_type = TokenFieldContext

    def __init__(self, token_manager: Optional[TokenManager] = None):
        super().__init__()
        self._token_manager = token_manager or TokenManager()

    def do_execute(self, context: TokenFieldContext) -> ActionResult:
        prop = self.locator.get_property(context.property_name)
        value = prop.get_current_value()
        self._token_manager.store_token(context.token_name, value)
        logger.debug(f"Token '{context.token_name}' set from '{prop.name}'")
        return ActionResult.successful(value)


# ================================================================================
# List Item Verbs
# ================================================================================

class GetListItemByIndexAction(ActionBase):
    """Return the page of a list item by its 1-based number."""

    name = "GetListItemByIndexAction"
    capabilities = frozenset({ActionCapability.LIST})
    context_type = ListItemByIndexContext

    def do_execute(self, context: ListItemByIndexContext) -> ActionResult:
        prop = self.locator.get_property(context.property_name)
        if not prop.is_list:
            return _not_a_list(prop.name)

        item = prop.get_item_at_index(context.item_number - 1)
        if item is None:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Could not find item {context.item_number} on list '{prop.name}'",
                    property_name=prop.name,
                    page_name=prop.page_name,
                )
            )
        return ActionResult.successful(item)


class GetListItemByCriteriaAction(ActionBase):
    """Return the page of the first list item satisfying a validation table."""

    name = "GetListItemByCriteriaAction"
    capabilities = frozenset({ActionCapability.LIST})
    context_type = ListItemByCriteriaContext

    def do_execute(self, context: ListItemByCriteriaContext) -> ActionResult:
        prop = self.locator.get_property(context.property_name)
        if not prop.is_list:
            return _not_a_list(prop.name)

        item, result = prop.find_item_in_list(context.validation_table.validations)
        if item is not None:
            return ActionResult.successful(item)

        return ActionResult.failure(
            ElementExecuteException(
                list_failure_message(f"Retrieving item from list '{prop.name}' failed", result),
                property_name=prop.name,
                page_name=prop.page_name,
            )
        )


__all__ = [
    "EnterDataContext",
    "ListItemByIndexContext",
    "ListItemByCriteriaContext",
    "TokenFieldContext",
    "ElementInPageContext",
    "ButtonClickAction",
    "ButtonDoubleClickAction",
    "HoverOverElementAction",
    "EnterDataAction",
    "ClearDataAction",
    "GetElementAsPageAction",
    "GetElementAsContextInPageAction",
    "SetTokenFromValueAction",
    "GetListItemByIndexAction",
    "GetListItemByCriteriaAction",
]
