"""
================================================================================
PageBind
================================================================================

Declarative page-object runtime for UI test automation.

Page dataclasses annotated with element-location metadata are built into
lazily-bound page objects; verbs (click, fill, wait, validate) run against
their properties through an action pipeline with pre/post hooks, and the
validation engine compares expected and actual values over single items
and repeating lists, rendering tabular diff reports.

Packages:
    - common: configuration, logging, lookup keys, waits, tokens
    - pages: declarations, descriptors, handles, page objects, builder
    - validation: comparers, validation tables, results, engine
    - pipeline: action results, locator, repository, pipeline service
    - actions: verbs and hooks
    - drivers: native driver boundary and Playwright adapter

Author: Automation Team
License: MIT
================================================================================
"""

from .common import ConfigLoader, ConfigurationError, Settings, init_logger, to_lookup_key
from .pages import (
    ElementExecuteException,
    PageNavigationException,
    PageObject,
    alias,
    element,
    element_list,
    navigation,
    nested_page,
    set_cookie,
)
from .pipeline import ActionContext, ActionResult
from .runtime import PageBindRuntime
from .validation import ComparisonType, NumericComparisonType, ValidationTable

__version__ = "0.1.0"

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "Settings",
    "init_logger",
    "to_lookup_key",
    "ElementExecuteException",
    "PageNavigationException",
    "PageObject",
    "alias",
    "element",
    "element_list",
    "navigation",
    "nested_page",
    "set_cookie",
    "ActionContext",
    "ActionResult",
    "PageBindRuntime",
    "ComparisonType",
    "NumericComparisonType",
    "ValidationTable",
    "__version__",
]
