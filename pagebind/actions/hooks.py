"""
================================================================================
Pipeline Hooks
================================================================================

    ValidationTablePreAction - processes validation tables carried by contexts
    SetCookiePreAction       - sets cookies declared on a page before navigating
    NavigationPostAction     - page-activation callback after navigation
    HighlightLocatorAction   - highlights located elements in highlight mode

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from loguru import logger

from ..common.config_loader import Settings
from ..common.token_manager import TokenManager
from ..drivers.base import NativeDriver
from ..pages.declarations import get_page_metadata
from ..pages.page_mapper import PageMapper
from ..pages.page_object import PageObject
from ..pages.property_handle import PropertyHandle
from ..pipeline.action_base import ActionBase, ActionCapability, PostAction, PreAction
from ..pipeline.action_result import ActionContext, ActionResult
from ..pipeline.element_locator import LocatorAction
from ..validation.comparers import ComparerLookup
from ..validation.validation_table import ValidationTable
from .navigation_actions import PageAction

PageNavigateCallback = Callable[[PageObject, Optional[PageAction], Optional[Dict[str, str]]], None]


class ValidationTablePreAction(PreAction):
    """Resolve comparers and tokens of any validation table in the context."""

    def __init__(self, comparers: ComparerLookup, token_manager: Optional[TokenManager] = None):
        self._comparers = comparers
        self._token_manager = token_manager

    def perform_pre_action(self, action: ActionBase, context: ActionContext) -> None:
        table = getattr(context, "validation_table", None)
        if isinstance(table, ValidationTable):
            table.process(self._comparers, self._token_manager)


class SetCookiePreAction(PreAction):
    """Set the cookies a target page declares before navigating to it."""

    def __init__(self, driver: NativeDriver, page_mapper: PageMapper):
        self._driver = driver
        self._page_mapper = page_mapper

    def perform_pre_action(self, action: ActionBase, context: ActionContext) -> None:
        if not action.has_capability(ActionCapability.NAVIGATION) or not context.property_name:
            return
        if getattr(context, "page_action", None) == PageAction.NAVIGATE_BACK:
            return

        page_type = self._page_mapper.get_type_from_name(context.property_name)
        if page_type is None:
            return

        for cookie in get_page_metadata(page_type).cookies:
            logger.debug(f"Setting Cookie: {cookie.name} (path={cookie.path}, domain={cookie.domain})")
            self._driver.add_cookie(cookie)


def activate_page(page: PageObject, action: Optional[PageAction], arguments: Optional[Dict[str, str]]) -> None:
    page.wait_for_page_to_be_active()


class NavigationPostAction(PostAction):
    """
    Invoke a callback with the page produced by a successful navigation verb.

    The default callback waits for the page to become active.
    """

    def __init__(self, on_page_navigate: PageNavigateCallback = activate_page):
        self._on_page_navigate = on_page_navigate

    def perform_post_action(self, action: ActionBase, context: ActionContext, result: ActionResult) -> None:
        if not result.success or not action.has_capability(ActionCapability.NAVIGATION):
            return
        if not isinstance(result.result, PageObject):
            return

        self._on_page_navigate(
            result.result,
            getattr(context, "page_action", None),
            getattr(context, "page_arguments", None),
        )


class HighlightLocatorAction(LocatorAction):
    """Highlight each located element while highlight mode is enabled."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()

    def on_locate_complete(self, property_name: str, handle: Optional[PropertyHandle]) -> None:
        if handle is None or not self._settings.highlight_mode:
            return
        if handle.is_element or handle.is_list:
            handle.highlight()


__all__ = [
    "ValidationTablePreAction",
    "SetCookiePreAction",
    "NavigationPostAction",
    "HighlightLocatorAction",
    "activate_page",
]
