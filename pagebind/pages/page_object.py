"""
================================================================================
Page Object
================================================================================

A named bag of property handles for one logical page, dialog or list item.

Provides:
    - Lookup by (normalized) property name
    - Lookup by capability (elements only, lists only, ...)
    - Page activation callback

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from ..common.lookup import to_lookup_key
from .descriptors import PageTypeDescriptor
from .property_handle import PropertyHandle


class PageObject:
    """
    Composite of property handles built by the PageBuilder.

    Usage:
        >>> page = builder.build(LoginPage)
        >>> found, handle = page.try_get_element("User Name")
        >>> page.get_property_names(lambda p: p.is_element)
        ['user_name', 'password', 'login']
    """

    def __init__(
        self,
        descriptor: PageTypeDescriptor,
        native: Any,
        handles: Iterable[PropertyHandle],
        context: Any = None,
    ):
        """
        Initialize page object.

        Args:
            descriptor: Descriptor of the page type
            native: Instance of the page dataclass backing scalar properties
            handles: Property handles of the page
            context: Resolution context the page was built in
        """
        self.descriptor = descriptor
        self.native = native
        self.context = context
        self._handles: Dict[str, PropertyHandle] = {h.key: h for h in handles}

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def page_type(self) -> type:
        return self.descriptor.page_type

    # ==================== Lookup ====================

    def get_property_names(self, predicate: Optional[Callable[[PropertyHandle], bool]] = None) -> List[str]:
        """
        Return declared property names, optionally filtered by capability.

        Args:
            predicate: Filter applied to each handle
        """
        return [h.name for h in self._handles.values() if predicate is None or predicate(h)]

    def try_get_property(self, name: str) -> Tuple[bool, Optional[PropertyHandle]]:
        """Look up any property by name."""
        handle = self._handles.get(to_lookup_key(name))
        return handle is not None, handle

    def try_get_element(self, name: str) -> Tuple[bool, Optional[PropertyHandle]]:
        """Look up an element property by name (lists and scalars do not match)."""
        found, handle = self.try_get_property(name)
        if found and handle.is_element:
            return True, handle
        return False, None

    def properties(self) -> List[PropertyHandle]:
        return list(self._handles.values())

    # ==================== Activation ====================

    def wait_for_page_to_be_active(self) -> None:
        """Invoke the page instance's wait_for_active() hook if it defines one."""
        hook = getattr(self.native, "wait_for_active", None)
        if callable(hook):
            logger.debug(f"Waiting for page {self.name} to become active")
            hook()

    def __contains__(self, name: str) -> bool:
        return to_lookup_key(name) in self._handles

    def __iter__(self) -> Iterator[PropertyHandle]:
        return iter(self._handles.values())

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"<PageObject {self.name} ({len(self._handles)} properties)>"


__all__ = ["PageObject"]
