"""
================================================================================
Element Locator
================================================================================

Resolves property names scoped to a page object into property handles.

Features:
    - Name normalization ("The User Name" finds user_name)
    - Candidate list in every not-found error
    - Element lookups report list properties as a business failure
    - Locator hooks notified before and after each lookup

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple

from loguru import logger

from ..pages.exceptions import ElementExecuteException
from ..pages.page_object import PageObject
from ..pages.property_handle import PropertyHandle
from .action_result import ActionResult


class LocatorAction:
    """Hook notified around property lookups."""

    def on_locate(self, property_name: str) -> None:
        """Called before a property is looked up."""

    def on_locate_complete(self, property_name: str, handle: Optional[PropertyHandle]) -> None:
        """Called after a lookup with the located handle (None if not found)."""


class ElementLocator:
    """
    Property lookup service bound to one page.

    Usage:
        >>> locator = ElementLocator(page)
        >>> handle = locator.get_element("Login Button").check_result()
        >>> found, prop = locator.try_get_property("title")
    """

    def __init__(self, page: Optional[PageObject], locator_actions: Iterable[LocatorAction] = ()):
        """
        Initialize the locator.

        Args:
            page: Page the lookups are scoped to (None when no page is active)
            locator_actions: Hooks notified around each lookup
        """
        self.page = page
        self._locator_actions: Tuple[LocatorAction, ...] = tuple(locator_actions)

    def for_page(self, page: Optional[PageObject]) -> "ElementLocator":
        """Locator scoped to another page, sharing this locator's hooks."""
        return ElementLocator(page, self._locator_actions)

    # ==================== Element Lookup ====================

    def get_element(self, property_name: str) -> ActionResult:
        """
        Locate an element property.

        Returns:
            Success carrying the handle, or a failure when the property is a
            list (a list verb must be used instead)

        Raises:
            ElementExecuteException: If the property does not exist or is not
                an element
        """
        handle = self._locate(property_name)
        if handle is None:
            raise self._not_found(property_name)

        if handle.is_list:
            return ActionResult.failure(
                ElementExecuteException(
                    f"Property '{handle.name}' was located but is a list element and cannot be "
                    f"used as a single element on page {self.page.name}.",
                    property_name=handle.name,
                    page_name=self.page.name,
                )
            )

        if not handle.is_element:
            raise ElementExecuteException(
                f"Property '{handle.name}' was located on page {self.page.name} "
                f"but is not an element.",
                property_name=handle.name,
                page_name=self.page.name,
                available_fields=self._candidates(lambda h: h.is_element),
            )

        return ActionResult.successful(handle)

    def try_get_element(self, property_name: str) -> Tuple[bool, Optional[PropertyHandle]]:
        handle = self._locate(property_name)
        if handle is not None and handle.is_element:
            return True, handle
        return False, None

    # ==================== Property Lookup ====================

    def get_property(self, property_name: str) -> PropertyHandle:
        """
        Locate any property.

        Raises:
            ElementExecuteException: If the property does not exist
        """
        handle = self._locate(property_name)
        if handle is None:
            raise self._not_found(property_name)
        return handle

    def try_get_property(self, property_name: str) -> Tuple[bool, Optional[PropertyHandle]]:
        handle = self._locate(property_name)
        return handle is not None, handle

    def get_properties(self, predicate: Optional[Callable[[PropertyHandle], bool]] = None) -> List[PropertyHandle]:
        """Return the page's handles matching `predicate`."""
        if self.page is None:
            return []
        return [h for h in self.page.properties() if predicate is None or predicate(h)]

    # ==================== Internals ====================

    def _locate(self, property_name: str) -> Optional[PropertyHandle]:
        if self.page is None:
            raise ElementExecuteException(
                f"No page is active; cannot locate property '{property_name}'.",
                property_name=property_name,
            )

        for action in self._locator_actions:
            action.on_locate(property_name)

        _, handle = self.page.try_get_property(property_name)
        logger.debug(
            f"Locate '{property_name}' on {self.page.name}: "
            f"{'found' if handle is not None else 'not found'}"
        )

        for action in self._locator_actions:
            action.on_locate_complete(property_name, handle)
        return handle

    def _candidates(self, predicate: Optional[Callable[[PropertyHandle], bool]] = None) -> List[str]:
        return sorted(self.page.get_property_names(predicate))

    def _not_found(self, property_name: str) -> ElementExecuteException:
        candidates = self._candidates()
        return ElementExecuteException(
            f"Could not locate property '{property_name}' on page {self.page.name}. "
            f"Available Fields: \n" + "\n".join(candidates),
            property_name=property_name,
            page_name=self.page.name,
            available_fields=candidates,
        )


__all__ = ["ElementLocator", "LocatorAction"]
