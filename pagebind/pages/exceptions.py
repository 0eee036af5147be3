"""
================================================================================
Page Runtime Exceptions
================================================================================

Raised errors of the page object runtime. Both are caught by the action
pipeline and converted into a failed ActionResult.

    - ElementExecuteException: a property could not be located or is of the
      wrong kind for the requested verb
    - PageNavigationException: a page-level operation could not establish the
      expected page

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple


class ElementExecuteException(Exception):
    """Raised when a property cannot be located or acted upon."""

    def __init__(
        self,
        message: str,
        property_name: Optional[str] = None,
        page_name: Optional[str] = None,
        available_fields: Sequence[str] = (),
    ):
        super().__init__(message)
        self.property_name = property_name
        self.page_name = page_name
        self.available_fields: Tuple[str, ...] = tuple(available_fields)


class UnsupportedOperationError(ElementExecuteException):
    """Raised when a verb is not supported by a property's kind."""
    pass


class PageNavigationException(Exception):
    """Raised when navigation or page identity checks fail."""

    def __init__(self, message: str, page_name: Optional[str] = None):
        super().__init__(message)
        self.page_name = page_name


__all__ = [
    "ElementExecuteException",
    "UnsupportedOperationError",
    "PageNavigationException",
]
