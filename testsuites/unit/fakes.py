"""
In-memory NativeDriver used by the unit suites.

Elements form a tree keyed by selector: `FakeElement.add("#name", child)`
makes `child` findable under that element with the selector "#name".
"""

from typing import Any, Dict, List, Optional, Sequence

from pagebind.drivers.base import ComboBoxItem, Cookie, NativeDriver


class TransientClickError(Exception):
    """Click error the fake driver reports as transient."""


class FakeElement:
    def __init__(
        self,
        text: Optional[str] = None,
        enabled: bool = True,
        exists: bool = True,
        position: Any = None,
    ):
        self.text = text
        self.enabled = enabled
        self.exists = exists
        self.position = position
        self.children: Dict[str, List["FakeElement"]] = {}
        self.clicks = 0
        self.double_clicks = 0
        self.hovers = 0
        self.click_error: Optional[Exception] = None
        self.checked = False
        self.options: Optional[List[ComboBoxItem]] = None

    def add(self, selector: str, *elements: "FakeElement") -> "FakeElement":
        """Attach child elements under `selector`; returns the first one."""
        self.children.setdefault(selector, []).extend(elements)
        return elements[0] if elements else self

    def remove(self, selector: str) -> None:
        self.children.pop(selector, None)

    def __repr__(self) -> str:
        return f"<FakeElement {self.text!r}>"


class FakeDriver(NativeDriver):
    def __init__(self, document: Optional[FakeElement] = None):
        self.document = document or FakeElement()
        self.url = "about:blank"
        self.history: List[str] = []
        self.cookies: List[Cookie] = []
        self.highlighted: List[FakeElement] = []
        self.page_title = ""
        # titles shown after each refresh, in order
        self.titles_after_refresh: List[str] = []
        self.refreshes = 0
        self.find_calls = 0

    # ==================== Scoped Lookup ====================

    def root(self) -> Any:
        return self.document

    def find(self, scope: Any, locator) -> Optional[Any]:
        matches = self.find_all(scope, locator)
        return matches[0] if matches else None

    def find_all(self, scope: Any, locator) -> Sequence[Any]:
        self.find_calls += 1
        for selector in locator.values():
            matches = scope.children.get(selector)
            if matches:
                return list(matches)
        return []

    # ==================== Element Capabilities ====================

    def element_exists(self, element: Any) -> bool:
        return element is not None and element.exists

    def element_enabled(self, element: Any) -> bool:
        return element.enabled

    def element_text(self, element: Any) -> Optional[str]:
        return element.text

    def element_position(self, element: Any):
        position = element.position
        return position() if callable(position) else position

    def click(self, element: Any) -> bool:
        if element.click_error is not None:
            raise element.click_error
        element.clicks += 1
        return True

    def double_click(self, element: Any) -> bool:
        if element.click_error is not None:
            raise element.click_error
        element.double_clicks += 1
        return True

    def hover(self, element: Any) -> bool:
        if element.click_error is not None:
            raise element.click_error
        element.hovers += 1
        return True

    def get_combo_box_items(self, element: Any):
        return element.options

    def is_transient_click_error(self, error: Exception) -> bool:
        return isinstance(error, TransientClickError)

    def get_fill_method(self, kind: str):
        return {
            "text": self._fill_text,
            "checkbox": self._check,
        }.get(kind)

    def get_clear_method(self, kind: str):
        if kind == "checkbox":
            return lambda element: setattr(element, "checked", False)
        return None

    def highlight(self, element: Any) -> None:
        self.highlighted.append(element)

    @staticmethod
    def _fill_text(element: FakeElement, value: str) -> None:
        element.text = value

    @staticmethod
    def _check(element: FakeElement, value: str) -> None:
        element.checked = value.lower() == "true"

    # ==================== Browser ====================

    def navigate(self, url: str) -> None:
        self.history.append(self.url)
        self.url = url

    def current_url(self) -> str:
        return self.url

    def go_back(self) -> None:
        self.url = self.history.pop() if self.history else "about:blank"

    def add_cookie(self, cookie: Cookie) -> None:
        self.cookies.append(cookie)

    def title(self) -> str:
        return self.page_title

    def refresh(self) -> None:
        self.refreshes += 1
        if self.titles_after_refresh:
            self.page_title = self.titles_after_refresh.pop(0)
