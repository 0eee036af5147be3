"""
================================================================================
Native Driver Boundary
================================================================================

The contract between the page object runtime and a concrete UI automation
engine. The runtime never touches native elements directly; it asks the
driver to locate, inspect and act on them.

Components:
    - Scoped lookup: find / find_all relative to a native scope
    - Element capabilities: exists / enabled / text / position / click / fill
    - Optional element verbs: double_click / hover / get_combo_box_items
    - Browser operations: navigate / current_url / go_back / add_cookie / title / refresh

Location metadata is an opaque mapping of strategy name -> selector, ordered
by preference (e.g. {"primary": "[data-testid='x']", "fallback_1": "#x"}).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple


Locator = Mapping[str, str]
FillMethod = Callable[[Any, str], None]
ClearMethod = Callable[[Any], None]


@dataclass(frozen=True)
class Cookie:
    """A cookie declared on a page type, set before navigating to it."""
    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None
    expires: Optional[datetime] = None
    secure: bool = False


@dataclass(frozen=True)
class ComboBoxItem:
    """One option of a combo box (select) element."""
    text: str
    value: Optional[str] = None


class NativeDriver(ABC):
    """
    Base class for automation engine adapters.

    Element arguments may be None (not found); state checks must treat that as
    "does not exist" rather than raising.
    """

    # ==================== Scoped Lookup ====================

    @abstractmethod
    def root(self) -> Any:
        """Return the root scope (document / page)."""

    @abstractmethod
    def find(self, scope: Any, locator: Locator) -> Optional[Any]:
        """Return zero-or-one native element under `scope`."""

    @abstractmethod
    def find_all(self, scope: Any, locator: Locator) -> Sequence[Any]:
        """Return the native elements of a repeating list under `scope`."""

    # ==================== Element Capabilities ====================

    @abstractmethod
    def element_exists(self, element: Any) -> bool:
        """Whether the element is present."""

    @abstractmethod
    def element_enabled(self, element: Any) -> bool:
        """Whether the element is enabled."""

    @abstractmethod
    def element_text(self, element: Any) -> Optional[str]:
        """Displayed text (or current input value) of the element."""

    def element_position(self, element: Any) -> Optional[Tuple[float, float, float, float]]:
        """Bounding box (x, y, width, height), or None when not rendered."""
        return None

    @abstractmethod
    def click(self, element: Any) -> bool:
        """Click the element, returning False if the click was not dispatched."""

    def double_click(self, element: Any) -> bool:
        raise NotImplementedError(f"{type(self).__name__} does not support double clicking")

    def hover(self, element: Any) -> bool:
        raise NotImplementedError(f"{type(self).__name__} does not support hovering")

    def get_combo_box_items(self, element: Any) -> Optional[Sequence[ComboBoxItem]]:
        """Options of a combo box element, or None when it is not one."""
        return None

    def is_transient_click_error(self, error: Exception) -> bool:
        """Whether a click error means the element was actuated anyway."""
        return False

    @abstractmethod
    def get_fill_method(self, kind: str) -> Optional[FillMethod]:
        """Return the fill strategy for an element kind, or None."""

    def get_clear_method(self, kind: str) -> Optional[ClearMethod]:
        """Return the clear strategy for an element kind, or None."""
        return None

    def highlight(self, element: Any) -> None:
        """Visually highlight the element."""

    # ==================== Browser ====================

    def navigate(self, url: str) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support navigation")

    def current_url(self) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not expose the current URL")

    def go_back(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support history navigation")

    def add_cookie(self, cookie: Cookie) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support cookies")

    def title(self) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not expose the page title")

    def refresh(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not support refreshing")


__all__ = [
    "NativeDriver",
    "Cookie",
    "ComboBoxItem",
    "Locator",
    "FillMethod",
    "ClearMethod",
]
