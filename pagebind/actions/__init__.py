"""
================================================================================
Verbs and Hooks
================================================================================

Components:
    - element_actions: click, double click, hover, enter data, clear, list items, nested pages
    - validation_actions: item, list, row count, combo box, existence and enabled checks
    - wait_actions: element, element table, list, page and page title waits
    - navigation_actions: navigate / ensure on page / back
    - hooks: pre/post/locator hooks registered by the runtime

Author: Automation Team
License: MIT
================================================================================
"""

from .element_actions import (
    ButtonClickAction,
    ButtonDoubleClickAction,
    ClearDataAction,
    ElementInPageContext,
    EnterDataAction,
    EnterDataContext,
    GetElementAsContextInPageAction,
    GetElementAsPageAction,
    GetListItemByCriteriaAction,
    GetListItemByIndexAction,
    HoverOverElementAction,
    ListItemByCriteriaContext,
    ListItemByIndexContext,
    SetTokenFromValueAction,
    TokenFieldContext,
)
from .hooks import (
    HighlightLocatorAction,
    NavigationPostAction,
    SetCookiePreAction,
    ValidationTablePreAction,
)
from .navigation_actions import PageAction, PageNavigationAction, PageNavigationContext
from .validation_actions import (
    ComboComparisonType,
    ValidateComboBoxAction,
    ValidateComboBoxContext,
    ValidateElementEnabledAction,
    ValidateElementExistsAction,
    ValidateItemAction,
    ValidateItemContext,
    ValidateListAction,
    ValidateListContext,
    ValidateListRowCountAction,
    ValidateListRowCountContext,
    ValidateTokenAction,
    ValidateTokenContext,
    ValidationCheckContext,
    ValidationTableContext,
)
from .wait_actions import (
    WaitForElementAction,
    WaitForElementContext,
    WaitForElementsAction,
    WaitForElementsContext,
    WaitForListItemsAction,
    WaitForListItemsContext,
    WaitForPageAction,
    WaitForPageContext,
    WaitForPageTitleAction,
    WaitForPageTitleContext,
)

__all__ = [
    "ButtonClickAction",
    "ButtonDoubleClickAction",
    "ClearDataAction",
    "ElementInPageContext",
    "EnterDataAction",
    "EnterDataContext",
    "GetElementAsContextInPageAction",
    "GetElementAsPageAction",
    "HoverOverElementAction",
    "GetListItemByCriteriaAction",
    "GetListItemByIndexAction",
    "ListItemByCriteriaContext",
    "ListItemByIndexContext",
    "SetTokenFromValueAction",
    "TokenFieldContext",
    "HighlightLocatorAction",
    "NavigationPostAction",
    "SetCookiePreAction",
    "ValidationTablePreAction",
    "PageAction",
    "PageNavigationAction",
    "PageNavigationContext",
    "ComboComparisonType",
    "ValidateComboBoxAction",
    "ValidateComboBoxContext",
    "ValidateElementEnabledAction",
    "ValidateElementExistsAction",
    "ValidateItemAction",
    "ValidateItemContext",
    "ValidateListAction",
    "ValidateListContext",
    "ValidateListRowCountAction",
    "ValidateListRowCountContext",
    "ValidateTokenAction",
    "ValidateTokenContext",
    "ValidationCheckContext",
    "ValidationTableContext",
    "WaitForElementAction",
    "WaitForElementContext",
    "WaitForElementsAction",
    "WaitForElementsContext",
    "WaitForListItemsAction",
    "WaitForListItemsContext",
    "WaitForPageAction",
    "WaitForPageContext",
    "WaitForPageTitleAction",
    "WaitForPageTitleContext",
]
