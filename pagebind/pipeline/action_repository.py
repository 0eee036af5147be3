"""
================================================================================
Action Repository
================================================================================

Registry of the hooks, comparers and services the pipeline works with.

Verbs are created by create_action(), which fills constructor parameters
by name from the registered services:

    >>> repository.register_service("driver", driver)
    >>> action = repository.create_action(ButtonClickAction)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import inspect
from typing import Any, Dict, List, Tuple, Type, TypeVar

from loguru import logger

from ..common.config_loader import ConfigurationError
from ..validation.comparers import ComparerLookup, ValidationComparer
from .action_base import ActionBase, PostAction, PreAction
from .element_locator import LocatorAction

A = TypeVar("A", bound=ActionBase)


class ActionRepository:
    """Hooks, comparers and injectable services."""

    def __init__(self) -> None:
        self._pre_actions: List[PreAction] = []
        self._post_actions: List[PostAction] = []
        self._locator_actions: List[LocatorAction] = []
        self._comparers: List[ValidationComparer] = []
        self._services: Dict[str, Any] = {}
        self._comparer_lookup: Any = None

    # ==================== Registration ====================

    def register_pre_action(self, action: PreAction) -> None:
        self._pre_actions.append(action)

    def register_post_action(self, action: PostAction) -> None:
        self._post_actions.append(action)

    def register_locator_action(self, action: LocatorAction) -> None:
        self._locator_actions.append(action)

    def register_comparer(self, comparer: ValidationComparer) -> None:
        self._comparers.append(comparer)
        self._comparer_lookup = None

    def register_service(self, name: str, service: Any) -> None:
        """Make `service` injectable into verb constructors as `name`."""
        self._services[name] = service

    # ==================== Access ====================

    def get_pre_actions(self) -> Tuple[PreAction, ...]:
        return tuple(self._pre_actions)

    def get_post_actions(self) -> Tuple[PostAction, ...]:
        return tuple(self._post_actions)

    def get_locator_actions(self) -> Tuple[LocatorAction, ...]:
        return tuple(self._locator_actions)

    def get_comparer_lookup(self) -> ComparerLookup:
        if self._comparer_lookup is None:
            self._comparer_lookup = ComparerLookup(self._comparers)
        return self._comparer_lookup

    def get_service(self, name: str) -> Any:
        return self._services.get(name)

    def create_action(self, action_type: Type[A]) -> A:
        """
        Create a verb, injecting registered services by parameter name.

        Raises:
            ConfigurationError: If a required parameter has no registered service
        """
        kwargs: Dict[str, Any] = {}
        for name, param in inspect.signature(action_type).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if name == "comparers":
                kwargs[name] = self.get_comparer_lookup()
            elif name in self._services:
                kwargs[name] = self._services[name]
            elif param.default is param.empty:
                raise ConfigurationError(
                    f"Cannot create action {action_type.__name__}: "
                    f"no service registered for parameter '{name}'"
                )

        logger.debug(f"Creating action {action_type.__name__} with {sorted(kwargs)}")
        return action_type(**kwargs)


__all__ = ["ActionRepository"]
