"""
================================================================================
Page Builder
================================================================================

Builds PageObject graphs from page type descriptors.

Build rules per declared property:
    - scalar       getter/setter pair against the page instance
    - element      handle whose resolution thunk looks the element up in the
                   current scope on every access
    - list         handle whose items are built on demand, one child page per
                   item element
    - nested page  recursive build in a child resolution context whose scope
                   is the nested element

Resolution contexts only thread scopes down (root -> parent -> child); they
do not own pages.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

from loguru import logger

from ..common.config_loader import ConfigurationError, Settings
from ..common.wait_helpers import WaitConfig
from ..drivers.base import Locator, NativeDriver
from .declarations import PropertyKind
from .descriptors import DescriptorCache, PageTypeDescriptor, PropertyDescriptor
from .page_object import PageObject
from .property_handle import (
    ElementPropertyHandle,
    ListPropertyHandle,
    NestedPagePropertyHandle,
    PropertyHandle,
    ScalarPropertyHandle,
)


@dataclass(frozen=True)
class ResolutionContext:
    """
    Scope in which element lookups are performed.

    Attributes:
        resolve_scope: Returns the native scope element (re-evaluated on use)
        parent: Enclosing context (None for the document root)
    """
    resolve_scope: Callable[[], Any]
    parent: Optional["ResolutionContext"] = None

    @classmethod
    def root(cls, driver: NativeDriver) -> "ResolutionContext":
        return cls(driver.root)

    def child(self, resolve_scope: Callable[[], Any]) -> "ResolutionContext":
        return ResolutionContext(resolve_scope, parent=self)

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    def chain(self) -> List["ResolutionContext"]:
        """Contexts from the root down to this one."""
        chain = [] if self.parent is None else self.parent.chain()
        chain.append(self)
        return chain


class PageBuilder:
    """
    Creates page objects for page types.

    Usage:
        >>> builder = PageBuilder(driver, DescriptorCache(), settings)
        >>> page = builder.build(LoginPage)
        >>> row = builder.page_from_element(StudentRow, native_row)
    """

    def __init__(
        self,
        driver: NativeDriver,
        descriptor_cache: Optional[DescriptorCache] = None,
        settings: Optional[Settings] = None,
    ):
        self._driver = driver
        self._cache = descriptor_cache or DescriptorCache()
        settings = settings or Settings()
        self._wait_config = WaitConfig(timeout=settings.default_timeout, interval=settings.wait_interval)

    @property
    def descriptor_cache(self) -> DescriptorCache:
        return self._cache

    def build(
        self,
        page_type: Union[type, PageTypeDescriptor],
        parent_context: Optional[ResolutionContext] = None,
        native: Any = None,
    ) -> PageObject:
        """
        Build a page object.

        Args:
            page_type: Page dataclass or its descriptor
            parent_context: Scope to build in (document root if omitted)
            native: Existing page instance for scalar properties (a new
                instance is created if omitted)

        Returns:
            A new, independent PageObject

        Raises:
            ConfigurationError: If the page definition is invalid
        """
        descriptor = page_type if isinstance(page_type, PageTypeDescriptor) else self._cache.get(page_type)
        context = parent_context or ResolutionContext.root(self._driver)
        return self._build(descriptor, context, native, ())

    def page_from_element(
        self,
        page_type: Union[type, PageTypeDescriptor],
        element: Any,
        parent_context: Optional[ResolutionContext] = None,
    ) -> PageObject:
        """Build a page rooted at an existing native element."""
        context = (parent_context or ResolutionContext.root(self._driver)).child(lambda: element)
        return self.build(page_type, context)

    # ==================== Internals ====================

    def _build(
        self,
        descriptor: PageTypeDescriptor,
        context: ResolutionContext,
        native: Any,
        ancestors: Tuple[type, ...],
    ) -> PageObject:
        page_type = descriptor.page_type
        if page_type in ancestors:
            raise ConfigurationError(
                f"Page '{descriptor.name}' is nested inside itself: "
                f"{' -> '.join(t.__name__ for t in ancestors + (page_type,))}"
            )

        if native is None:
            try:
                native = page_type()
            except TypeError as e:
                raise ConfigurationError(
                    f"Page type '{descriptor.name}' cannot be created without arguments; "
                    f"pass an instance to build(): {e}"
                ) from e

        ancestors = ancestors + (page_type,)
        handles = [
            self._build_handle(prop, descriptor, native, context, ancestors)
            for prop in descriptor.properties
        ]
        logger.debug(
            f"Built page {descriptor.name} with {len(handles)} properties "
            f"(scope depth {context.depth})"
        )
        return PageObject(descriptor, native, handles, context)

    def _build_handle(
        self,
        prop: PropertyDescriptor,
        descriptor: PageTypeDescriptor,
        native: Any,
        context: ResolutionContext,
        ancestors: Tuple[type, ...],
    ) -> PropertyHandle:
        if prop.kind == PropertyKind.SCALAR:
            return ScalarPropertyHandle(
                prop.name,
                descriptor.name,
                getter=lambda: getattr(native, prop.name),
                setter=lambda value: setattr(native, prop.name, value),
                value_type=prop.value_type,
            )

        resolve = self._scoped_lookup(context, prop.locator)
        common = dict(
            driver=self._driver,
            resolve=resolve,
            element_kind=prop.element_kind,
            wait_config=self._wait_config,
            value_type=prop.value_type,
        )

        if prop.kind == PropertyKind.ELEMENT:
            return ElementPropertyHandle(prop.name, descriptor.name, **common)

        item_descriptor = self._cache.get(prop.item_type)

        if prop.kind == PropertyKind.NESTED_PAGE:
            child_page = self._build(item_descriptor, context.child(resolve), None, ancestors)
            return NestedPagePropertyHandle(prop.name, descriptor.name, child_page=child_page, **common)

        def build_item(element: Any) -> PageObject:
            return self._build(item_descriptor, context.child(lambda: element), None, ())

        return ListPropertyHandle(
            prop.name,
            descriptor.name,
            item_locator=prop.item_locator,
            item_factory=build_item,
            **common,
        )

    def _scoped_lookup(self, context: ResolutionContext, locator: Locator) -> Callable[[], Any]:
        if not locator:
            return context.resolve_scope

        def resolve() -> Any:
            scope = context.resolve_scope()
            if scope is None:
                return None
            return self._driver.find(scope, locator)

        return resolve


__all__ = ["PageBuilder", "ResolutionContext"]
