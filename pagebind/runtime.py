"""
================================================================================
PageBind Runtime
================================================================================

Composition root wiring the page object runtime, the action pipeline and
the validation engine around one driver.

Usage:
    >>> runtime = PageBindRuntime(PlaywrightDriver(page), pages=[LoginPage, HomePage])
    >>> login = runtime.navigate_to("login")
    >>> runtime.perform_action(login, EnterDataAction, EnterDataContext("user name", "admin"))
    >>> runtime.perform_action(login, ButtonClickAction, ActionContext("log in")).check_result()

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Type, Union

from loguru import logger

from .actions.hooks import (
    HighlightLocatorAction,
    NavigationPostAction,
    SetCookiePreAction,
    ValidationTablePreAction,
)
from .actions.navigation_actions import PageAction, PageNavigationAction, PageNavigationContext
from .common.config_loader import Settings
from .common.token_manager import TokenManager
from .drivers.base import NativeDriver
from .pages.descriptors import DescriptorCache
from .pages.page_builder import PageBuilder
from .pages.page_mapper import PageMapper
from .pages.page_object import PageObject
from .pipeline.action_base import ActionBase
from .pipeline.action_pipeline import ActionPipelineService
from .pipeline.action_repository import ActionRepository
from .pipeline.action_result import ActionContext, ActionResult
from .validation.comparers import default_comparers


class PageBindRuntime:
    """
    Owns the services of one automation session.

    Attributes:
        driver: Native driver
        settings: Runtime settings
        descriptor_cache: Page type descriptors
        page_builder: Builds page objects
        page_mapper: Page name registry
        token_manager: Token store
        repository: Hooks, comparers and services
        pipeline: Action pipeline service
    """

    def __init__(
        self,
        driver: NativeDriver,
        settings: Optional[Settings] = None,
        pages: Iterable[type] = (),
        token_context: Optional[Dict[str, str]] = None,
    ):
        self.driver = driver
        self.settings = settings or Settings.from_config()
        self.descriptor_cache = DescriptorCache()
        self.page_builder = PageBuilder(driver, self.descriptor_cache, self.settings)
        self.page_mapper = PageMapper()
        self.page_mapper.add_types(pages)
        self.token_manager = TokenManager(token_context)

        self.repository = ActionRepository()
        self._register_defaults()
        self.pipeline = ActionPipelineService(self.repository, self.settings)

        logger.info(f"✅ PageBind runtime ready ({len(self.page_mapper)} page types)")

    def _register_defaults(self) -> None:
        repository = self.repository
        for comparer in default_comparers():
            repository.register_comparer(comparer)

        repository.register_service("driver", self.driver)
        repository.register_service("settings", self.settings)
        repository.register_service("page_builder", self.page_builder)
        repository.register_service("page_mapper", self.page_mapper)
        repository.register_service("token_manager", self.token_manager)
        repository.register_service("descriptor_cache", self.descriptor_cache)

        repository.register_pre_action(
            ValidationTablePreAction(repository.get_comparer_lookup(), self.token_manager)
        )
        repository.register_pre_action(SetCookiePreAction(self.driver, self.page_mapper))
        repository.register_post_action(NavigationPostAction())
        repository.register_locator_action(HighlightLocatorAction(self.settings))

    # ==================== Pages ====================

    def register_pages(self, pages: Iterable[type]) -> None:
        self.page_mapper.add_types(pages)

    def build_page(self, page_type: type) -> PageObject:
        """Build a page object for `page_type` rooted at the document."""
        return self.page_builder.build(page_type)

    def navigate_to(self, page_name: str, arguments: Optional[Dict[str, str]] = None) -> PageObject:
        """
        Navigate to a registered page and return its page object.

        Raises:
            PageNavigationException: If the page is unknown or navigation failed
        """
        context = PageNavigationContext(page_name, PageAction.NAVIGATE_TO_PAGE, arguments)
        return self.perform_action(None, PageNavigationAction, context).check_result()

    # ==================== Actions ====================

    def perform_action(
        self,
        page: Optional[PageObject],
        action: Union[ActionBase, Type[ActionBase]],
        context: ActionContext,
    ) -> ActionResult:
        return self.pipeline.perform_action(page, action, context)


__all__ = ["PageBindRuntime"]
