"""
================================================================================
Page Object Runtime
================================================================================

Declarative page types, their descriptors, and the lazily-bound page object
graphs built from them.

Components:
    - declarations: element / element_list / nested_page fields, page decorators
    - descriptors: immutable page type descriptors and their cache
    - property_handle: lazily-bound property accessors and verbs
    - page_object: named bag of property handles
    - page_builder: builds page objects from descriptors
    - page_mapper: page name -> page type registry
    - exceptions: location and navigation failures

Author: Automation Team
License: MIT
================================================================================
"""

from .declarations import (
    PageNavigation,
    PropertyKind,
    alias,
    element,
    element_list,
    navigation,
    nested_page,
    set_cookie,
)
from .descriptors import DescriptorCache, PageTypeDescriptor, PropertyDescriptor, describe
from .exceptions import ElementExecuteException, PageNavigationException, UnsupportedOperationError
from .page_builder import PageBuilder, ResolutionContext
from .page_mapper import PageMapper
from .page_object import PageObject
from .property_handle import (
    ElementPropertyHandle,
    ListPropertyHandle,
    NestedPagePropertyHandle,
    PropertyHandle,
    ScalarPropertyHandle,
    WaitCondition,
)

__all__ = [
    "PageNavigation",
    "PropertyKind",
    "alias",
    "element",
    "element_list",
    "navigation",
    "nested_page",
    "set_cookie",
    "DescriptorCache",
    "PageTypeDescriptor",
    "PropertyDescriptor",
    "describe",
    "ElementExecuteException",
    "PageNavigationException",
    "UnsupportedOperationError",
    "PageBuilder",
    "ResolutionContext",
    "PageMapper",
    "PageObject",
    "ElementPropertyHandle",
    "ListPropertyHandle",
    "NestedPagePropertyHandle",
    "PropertyHandle",
    "ScalarPropertyHandle",
    "WaitCondition",
]
