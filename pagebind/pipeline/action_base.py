"""
================================================================================
Action Base Classes
================================================================================

Verbs and the hooks that run around them.

    ActionBase   - a verb; declares its capabilities and the context type
                   it accepts, and returns an ActionResult
    PreAction    - runs before every verb
    PostAction   - runs after every successful verb

The pipeline selects hook behavior from a verb's declared capabilities,
never from its class hierarchy.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional, Type

from .action_result import ActionContext, ActionResult
from .element_locator import ElementLocator


class ActionCapability(str, Enum):
    """Capabilities a verb can declare."""
    ELEMENT = "element"
    LIST = "list"
    VALIDATION = "validation"
    WAIT = "wait"
    NAVIGATION = "navigation"


class ActionBase:
    """
    Base class for verbs.

    Subclasses set `name`, `capabilities` and `context_type` and implement
    do_execute(). The pipeline attaches an ElementLocator before executing.
    """

    name: str = "Action"
    capabilities: FrozenSet[ActionCapability] = frozenset()
    context_type: Type[ActionContext] = ActionContext

    def __init__(self) -> None:
        self.element_locator: Optional[ElementLocator] = None

    @property
    def locator(self) -> ElementLocator:
        if self.element_locator is None:
            raise RuntimeError(f"Action '{self.name}' has no element locator; run it through the pipeline")
        return self.element_locator

    def has_capability(self, capability: ActionCapability) -> bool:
        return capability in self.capabilities

    def execute(self, context: ActionContext) -> ActionResult:
        """
        Execute the verb.

        Raises:
            TypeError: If the context is not of the verb's context type
        """
        if not isinstance(context, self.context_type):
            raise TypeError(
                f"Action '{self.name}' requires a {self.context_type.__name__}, "
                f"got {type(context).__name__}"
            )
        return self.do_execute(context)

    def do_execute(self, context: ActionContext) -> ActionResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self.name}'>"


class PreAction:
    """Hook executed before each verb. Must not suppress the verb."""

    def perform_pre_action(self, action: ActionBase, context: ActionContext) -> None:
        raise NotImplementedError


class PostAction:
    """Hook executed after each successful verb."""

    def perform_post_action(self, action: ActionBase, context: ActionContext, result: ActionResult) -> None:
        raise NotImplementedError


__all__ = [
    "ActionCapability",
    "ActionBase",
    "PreAction",
    "PostAction",
]
