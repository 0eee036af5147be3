"""
================================================================================
Playwright Driver
================================================================================

NativeDriver adapter over the Playwright sync API.

Features:
    - Locator maps with primary and fallback selectors, tried in order
    - Fallback usage recorded for a locator health report
    - Fill / clear strategies per element kind
    - "Pointer intercepted" style click errors treated as transient

Usage:
    >>> from playwright.sync_api import sync_playwright
    >>> with sync_playwright() as p:
    ...     page = p.chromium.launch().new_page()
    ...     driver = PlaywrightDriver(page, base_url="https://example.com")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from .base import ClearMethod, ComboBoxItem, Cookie, FillMethod, NativeDriver
from .base import Locator as LocatorMap


# Click errors raised although the click reached the element
TRANSIENT_CLICK_ERRORS = (
    "intercepts pointer events",
    "element is not attached",
    "element was detached",
    "not stable",
)

HIGHLIGHT_SCRIPT = "e => { e.style.outline = '3px solid #ff3b30'; e.style.outlineOffset = '2px'; }"

TEXT_SCRIPT = (
    "e => ['INPUT', 'TEXTAREA', 'SELECT'].includes(e.tagName) ? e.value : e.innerText"
)

COMBO_BOX_SCRIPT = (
    "e => e.tagName === 'SELECT' "
    "? Array.from(e.options).map(o => ({text: o.text, value: o.value})) : null"
)


@dataclass
class LocatorHealth:
    """
    Records that an element needed a fallback selector.

    Attributes:
        primary_selector: The preferred selector
        fallback_name: Name of the fallback used
        fallback_selector: The fallback selector used
    """
    primary_selector: str
    fallback_name: str
    fallback_selector: str


def _to_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "yes", "on", "1", "checked")


class PlaywrightDriver(NativeDriver):
    """
    Drives a Playwright sync Page.

    Native elements are Playwright Locators narrowed to a single match.
    """

    def __init__(self, page: Page, base_url: str = "", action_timeout: float = 5.0):
        """
        Initialize the driver.

        Args:
            page: Playwright Page to drive
            base_url: Base URL used for cookies declared without a domain
            action_timeout: Timeout in seconds for clicks and fills
        """
        self.page = page
        self.base_url = base_url
        self._timeout_ms = action_timeout * 1000
        self._fallback_used: Dict[str, LocatorHealth] = {}
        self._fill_methods: Dict[str, FillMethod] = {
            "text": self._fill_text,
            "input": self._fill_text,
            "textarea": self._fill_text,
            "select": self._select,
            "checkbox": self._check,
            "radio": self._check,
            "file": self._upload,
        }
        self._clear_methods: Dict[str, ClearMethod] = {
            "text": self._clear_text,
            "input": self._clear_text,
            "textarea": self._clear_text,
            "checkbox": lambda element: element.set_checked(False, timeout=self._timeout_ms),
        }

    # ==================== Scoped Lookup ====================

    def root(self) -> Any:
        return self.page

    def _first_matching(self, scope: Any, locator: LocatorMap) -> Optional[Locator]:
        for strategy_name, selector in locator.items():
            candidate = scope.locator(selector)
            if candidate.count() == 0:
                continue

            if strategy_name != "primary":
                primary = locator.get("primary", selector)
                logger.warning(f"⚠️ Selector fallback used: {strategy_name} -> {selector} (primary: {primary})")
                self._fallback_used[primary] = LocatorHealth(primary, strategy_name, selector)
            return candidate
        return None

    def find(self, scope: Any, locator: LocatorMap) -> Optional[Any]:
        match = self._first_matching(scope, locator)
        return None if match is None else match.first

    def find_all(self, scope: Any, locator: LocatorMap) -> Sequence[Any]:
        match = self._first_matching(scope, locator)
        if match is None:
            return []
        return [match.nth(i) for i in range(match.count())]

    # ==================== Element Capabilities ====================

    def element_exists(self, element: Any) -> bool:
        return element is not None and element.count() > 0

    def element_enabled(self, element: Any) -> bool:
        return element.is_enabled()

    def element_text(self, element: Any) -> Optional[str]:
        return element.evaluate(TEXT_SCRIPT)

    def element_position(self, element: Any) -> Optional[Tuple[float, float, float, float]]:
        box = element.bounding_box()
        if box is None:
            return None
        return box["x"], box["y"], box["width"], box["height"]

    def click(self, element: Any) -> bool:
        element.click(timeout=self._timeout_ms)
        return True

    def double_click(self, element: Any) -> bool:
        element.dblclick(timeout=self._timeout_ms)
        return True

    def hover(self, element: Any) -> bool:
        element.hover(timeout=self._timeout_ms)
        return True

    def get_combo_box_items(self, element: Any) -> Optional[Sequence[ComboBoxItem]]:
        options = element.evaluate(COMBO_BOX_SCRIPT)
        if options is None:
            return None
        return [ComboBoxItem(option["text"], option["value"]) for option in options]

    def is_transient_click_error(self, error: Exception) -> bool:
        if not isinstance(error, PlaywrightError):
            return False
        message = str(error).lower()
        return any(fragment in message for fragment in TRANSIENT_CLICK_ERRORS)

    def get_fill_method(self, kind: str) -> Optional[FillMethod]:
        return self._fill_methods.get(kind.lower())

    def get_clear_method(self, kind: str) -> Optional[ClearMethod]:
        return self._clear_methods.get(kind.lower())

    def highlight(self, element: Any) -> None:
        element.evaluate(HIGHLIGHT_SCRIPT)

    # ==================== Fill Strategies ====================

    def _fill_text(self, element: Locator, value: str) -> None:
        element.fill(value, timeout=self._timeout_ms)

    def _clear_text(self, element: Locator) -> None:
        element.clear(timeout=self._timeout_ms)

    def _select(self, element: Locator, value: str) -> None:
        try:
            element.select_option(label=value, timeout=self._timeout_ms)
        except PlaywrightError:
            element.select_option(value=value, timeout=self._timeout_ms)

    def _check(self, element: Locator, value: str) -> None:
        element.set_checked(_to_bool(value), timeout=self._timeout_ms)

    def _upload(self, element: Locator, value: str) -> None:
        element.set_input_files(value, timeout=self._timeout_ms)

    # ==================== Browser ====================

    def navigate(self, url: str) -> None:
        logger.info(f"Navigating to {url}")
        self.page.goto(url)

    def current_url(self) -> str:
        return self.page.url

    def go_back(self) -> None:
        self.page.go_back()

    def title(self) -> str:
        return self.page.title()

    def refresh(self) -> None:
        self.page.reload()

    def add_cookie(self, cookie: Cookie) -> None:
        entry: Dict[str, Any] = {
            "name": cookie.name,
            "value": cookie.value,
            "secure": cookie.secure,
        }
        if cookie.domain:
            entry["domain"] = cookie.domain
            entry["path"] = cookie.path
        else:
            entry["url"] = self.base_url or self.page.url
        if cookie.expires is not None:
            entry["expires"] = cookie.expires.timestamp()

        self.page.context.add_cookies([entry])
        logger.debug(f"Cookie '{cookie.name}' added")

    # ==================== Reporting ====================

    def get_health_report(self) -> str:
        """
        Summarize elements that needed fallback selectors.

        Returns:
            Formatted health report string
        """
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        lines: List[str] = [
            "⚠️ Locator Health Report - Fallbacks Used:",
            "",
            "Consider updating the following primary selectors:",
            "",
        ]
        for primary, health in self._fallback_used.items():
            lines.append(f"  - {primary} -> {health.fallback_name}: {health.fallback_selector}")
        return "\n".join(lines)


__all__ = ["PlaywrightDriver", "LocatorHealth", "TRANSIENT_CLICK_ERRORS"]
