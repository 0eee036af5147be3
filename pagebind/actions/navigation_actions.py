"""
================================================================================
Navigation Actions
================================================================================

PageNavigationAction resolves a page name through the PageMapper and
navigates to it, checks the browser is already on it, or goes back.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from loguru import logger

from ..common.config_loader import Settings
from ..drivers.base import NativeDriver
from ..pages.declarations import get_page_metadata
from ..pages.exceptions import PageNavigationException
from ..pages.page_builder import PageBuilder
from ..pages.page_mapper import PageMapper
from ..pipeline.action_base import ActionBase, ActionCapability
from ..pipeline.action_result import ActionContext, ActionResult
from .wait_actions import page_not_found


class PageAction(str, Enum):
    """Kind of page navigation."""
    NAVIGATE_TO_PAGE = "NavigateToPage"
    ENSURE_ON_PAGE = "EnsureOnPage"
    NAVIGATE_BACK = "NavigateBack"


@dataclass
class PageNavigationContext(ActionContext):
    page_action: PageAction = PageAction.NAVIGATE_TO_PAGE
    page_arguments: Optional[Dict[str, str]] = None


class PageNavigationAction(ActionBase):
    """
    Navigate to, verify, or leave a page.

    The property name of the context is the page name; the result of a
    successful navigate / ensure is the PageObject of the target page.
    """

    name = "PageNavigationAction"
    capabilities = frozenset({ActionCapability.NAVIGATION})
    context_type = PageNavigationContext

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

    def do_execute(self, context: PageNavigationContext) -> ActionResult:
        if context.page_action == PageAction.NAVIGATE_BACK:
            logger.debug("Navigating back.")
            self._driver.go_back()
            return ActionResult.successful()

        page_name = context.property_name
        page_type = self._page_mapper.get_type_from_name(page_name)
        if page_type is None:
            return page_not_found(page_name)

        navigation = get_page_metadata(page_type).navigation

        if context.page_action == PageAction.NAVIGATE_TO_PAGE:
            if navigation is None:
                raise PageNavigationException(
                    f"Page '{page_name}' ({page_type.__name__}) does not declare a navigation URL",
                    page_name=page_name,
                )
            url = navigation.build_url(self._settings.base_url, context.page_arguments, page_name)
            logger.info(f"Navigating to page: {page_name} ({page_type.__name__}) at {url}")
            if context.page_arguments:
                logger.debug(
                    "Page Arguments: " + ", ".join(f"{k}={v}" for k, v in context.page_arguments.items())
                )
            self._driver.navigate(url)
        else:
            logger.debug(f"Ensuring browser is on page: {page_name} ({page_type.__name__})")
            if navigation is not None:
                current = self._driver.current_url()
                if not navigation.matches(current):
                    raise PageNavigationException(
                        f"Browser is not on page '{page_name}'. Expected '{navigation.url}' "
                        f"but was '{current}'",
                        page_name=page_name,
                    )

        return ActionResult.successful(self._page_builder.build(page_type))


__all__ = ["PageAction", "PageNavigationContext", "PageNavigationAction"]
