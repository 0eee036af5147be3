"""
================================================================================
Action Pipeline Service
================================================================================

Runs verbs with their hooks:

    1. pre-action hooks (registration order)
    2. the verb, retried while it fails (RetryConfig from Settings)
    3. post-action hooks, only when the verb succeeded

Location and navigation failures raised by a verb are converted to
ActionResult.failure here and nowhere else. Configuration errors and
unconverted wait timeouts propagate to the caller.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import Optional, Type, Union

import allure
from loguru import logger

from ..common.config_loader import Settings
from ..pages.exceptions import ElementExecuteException, PageNavigationException
from ..pages.page_object import PageObject
from .action_base import ActionBase
from .action_repository import ActionRepository
from .action_result import ActionContext, ActionResult
from .element_locator import ElementLocator


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 1,
        delay_seconds: float = 1.0,
        backoff_multiplier: float = 1.0,
        max_delay_seconds: float = 10.0
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts (1 means no retry)
            delay_seconds: Initial delay between attempts
            backoff_multiplier: Multiplier applied to the delay after each attempt
            max_delay_seconds: Maximum delay between attempts
        """
        self.max_attempts = max(1, max_attempts)
        self.delay_seconds = delay_seconds
        self.backoff_multiplier = backoff_multiplier
        self.max_delay_seconds = max_delay_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryConfig":
        return cls(
            max_attempts=settings.action_retry_limit + 1,
            delay_seconds=settings.action_retry_delay,
            backoff_multiplier=settings.action_retry_backoff,
        )


class ActionPipelineService:
    """
    Executes verbs against a page.

    Usage:
        >>> pipeline = ActionPipelineService(repository, settings)
        >>> result = pipeline.perform_action(page, ButtonClickAction, ActionContext("login"))
        >>> result.check_result()
    """

    def __init__(self, repository: ActionRepository, settings: Optional[Settings] = None):
        self._repository = repository
        self._settings = settings or Settings()
        self.retry_config = RetryConfig.from_settings(self._settings)

    @property
    def repository(self) -> ActionRepository:
        return self._repository

    def perform_action(
        self,
        page: Optional[PageObject],
        action: Union[ActionBase, Type[ActionBase]],
        context: ActionContext,
    ) -> ActionResult:
        """
        Run a verb with its hooks.

        Args:
            page: Page the verb's property lookups are scoped to
            action: Verb instance, or verb class to create via the repository
            context: Verb parameters

        Returns:
            The verb's ActionResult

        Raises:
            ConfigurationError: Propagated from hooks or the verb
        """
        if isinstance(action, type):
            action = self._repository.create_action(action)

        action.element_locator = ElementLocator(page, self._repository.get_locator_actions())

        title = action.name if not context.property_name else f"{action.name}: {context.property_name}"
        with allure.step(title):
            self._perform_pre_actions(action, context)
            result = self._execute_with_retry(action, context)

            if result.success:
                self._perform_post_actions(action, context, result)
            else:
                logger.error(f"❌ {title} failed: {result.error}")

        return result

    # ==================== Internals ====================

    def _perform_pre_actions(self, action: ActionBase, context: ActionContext) -> None:
        for hook in self._repository.get_pre_actions():
            logger.debug(f"Pre-action {type(hook).__name__} for {action.name}")
            hook.perform_pre_action(action, context)

    def _perform_post_actions(self, action: ActionBase, context: ActionContext, result: ActionResult) -> None:
        for hook in self._repository.get_post_actions():
            logger.debug(f"Post-action {type(hook).__name__} for {action.name}")
            hook.perform_post_action(action, context, result)

    def _execute_with_retry(self, action: ActionBase, context: ActionContext) -> ActionResult:
        config = self.retry_config
        delay = config.delay_seconds
        result = None

        for attempt in range(config.max_attempts):
            result = self._execute(action, context)
            if result.success:
                return result

            if attempt < config.max_attempts - 1:
                logger.warning(
                    f"Attempt {attempt + 1}/{config.max_attempts} failed for "
                    f"{action.name}: {result.error}. Retrying in {delay}s..."
                )
                time.sleep(delay)
                delay = min(delay * config.backoff_multiplier, config.max_delay_seconds)

        return result

    @staticmethod
    def _execute(action: ActionBase, context: ActionContext) -> ActionResult:
        try:
            return action.execute(context)
        except (ElementExecuteException, PageNavigationException) as e:
            return ActionResult.failure(e)


__all__ = ["ActionPipelineService", "RetryConfig"]
