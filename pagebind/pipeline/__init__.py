"""
================================================================================
Action Pipeline
================================================================================

Verb execution: property lookup, pre/post hooks, retries and the
exception-to-result translation.

Components:
    - action_result: ActionContext and ActionResult
    - action_base: verb and hook base classes
    - element_locator: property lookup scoped to a page
    - action_repository: hooks, comparers and injectable services
    - action_pipeline: the pipeline service

Author: Automation Team
License: MIT
================================================================================
"""

from .action_base import ActionBase, ActionCapability, PostAction, PreAction
from .action_pipeline import ActionPipelineService, RetryConfig
from .action_repository import ActionRepository
from .action_result import ActionContext, ActionResult
from .element_locator import ElementLocator, LocatorAction

__all__ = [
    "ActionBase",
    "ActionCapability",
    "PostAction",
    "PreAction",
    "ActionPipelineService",
    "RetryConfig",
    "ActionRepository",
    "ActionContext",
    "ActionResult",
    "ElementLocator",
    "LocatorAction",
]
