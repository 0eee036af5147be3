"""
================================================================================
Page Declarations
================================================================================

Metadata helpers used to declare page types as plain dataclasses.

Field helpers:
    - element(*selectors, kind=...)            single element property
    - element_list(item_type, *selectors)      repeating list of sub-pages
    - nested_page(page_type, *selectors)       nested page rooted at an element

Class decorators:
    - navigation(url, url_template=None)       where the page lives
    - alias(*names)                            extra names for page lookup
    - set_cookie(name, value, ...)             cookie set before navigating

Usage:
    @navigation("/students")
    @alias("Student List")
    @dataclass
    class StudentsPage:
        search: Optional[Any] = element("[data-testid='search']", "#search")
        results: Optional[Any] = element_list(StudentRow, "tbody tr", container="table")
        title: str = "Students"

Fields declared without a helper are scalar properties read from and written
to the page instance.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import urljoin, urlparse

from ..drivers.base import Cookie, Locator
from .exceptions import PageNavigationException


METADATA_KEY = "pagebind"
PAGE_METADATA_ATTR = "__pagebind_page__"

_URL_PLACEHOLDER = re.compile(r"\{[^{}]+\}")


class PropertyKind(str, Enum):
    """Declared kind of a page property."""
    SCALAR = "scalar"
    ELEMENT = "element"
    LIST = "list"
    NESTED_PAGE = "nested_page"


@dataclass(frozen=True)
class PropertySpec:
    """Location metadata attached to a dataclass field."""
    kind: PropertyKind
    locator: Mapping[str, str] = field(default_factory=dict)
    element_kind: str = "text"
    item_type: Optional[type] = None
    item_locator: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PageNavigation:
    """
    Navigation metadata of a page type.

    Attributes:
        url: Path (or absolute URL) of the page
        url_template: Path with {placeholders} used when arguments are supplied
    """
    url: str
    url_template: Optional[str] = None

    def build_url(
        self,
        base_url: str = "",
        arguments: Optional[Mapping[str, Any]] = None,
        page_name: Optional[str] = None,
    ) -> str:
        """
        Build the URL to navigate to.

        Args:
            base_url: Base URL for relative paths
            arguments: Values for the template placeholders
            page_name: Page name used in error messages

        Returns:
            Absolute URL when a base URL is available, else the path

        Raises:
            PageNavigationException: If a template placeholder has no argument
        """
        if arguments and self.url_template:
            try:
                path = self.url_template.format(**arguments)
            except (KeyError, IndexError) as e:
                raise PageNavigationException(
                    f"Cannot build the URL of page '{page_name or self.url}': no argument for "
                    f"placeholder {e} in '{self.url_template}' "
                    f"(arguments: {', '.join(sorted(arguments)) or 'none'})",
                    page_name=page_name,
                ) from e
        else:
            path = self.url

        if urlparse(path).scheme or not base_url:
            return path
        return urljoin(base_url.rstrip("/") + "/", path.lstrip("/"))

    def matches(self, current_url: str) -> bool:
        """Whether `current_url` points at this page (placeholders match one path segment)."""
        path = urlparse(current_url).path or "/"
        for candidate in (self.url, self.url_template):
            if not candidate:
                continue
            template = urlparse(candidate).path or "/"
            pieces = _URL_PLACEHOLDER.split(template.rstrip("/"))
            pattern = "[^/]+".join(re.escape(piece) for piece in pieces) + "/?"
            if re.fullmatch(pattern, path) is not None:
                return True
        return False


@dataclass
class PageMetadata:
    """Class-level metadata collected by the page decorators."""
    navigation: Optional[PageNavigation] = None
    aliases: List[str] = field(default_factory=list)
    cookies: List[Cookie] = field(default_factory=list)


def _build_locator(
    selectors: Sequence[str],
    locator: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    if locator:
        return dict(locator)
    built: Dict[str, str] = {}
    for i, selector in enumerate(selectors):
        built["primary" if i == 0 else f"fallback_{i}"] = selector
    return built


def element(
    *selectors: str,
    kind: str = "text",
    locator: Optional[Mapping[str, str]] = None,
) -> Any:
    """
    Declare an element property.

    Args:
        *selectors: Primary selector followed by fallbacks
        kind: Element kind used to pick fill/clear strategies
            ("text", "select", "checkbox", "file", "button", ...)
        locator: Explicit strategy -> selector map (overrides selectors)
    """
    spec = PropertySpec(PropertyKind.ELEMENT, _build_locator(selectors, locator), element_kind=kind)
    return field(default=None, metadata={METADATA_KEY: spec})


def element_list(
    item_type: type,
    *item_selectors: str,
    container: Union[str, Mapping[str, str], None] = None,
    item_locator: Optional[Mapping[str, str]] = None,
) -> Any:
    """
    Declare a repeating list whose items are built as `item_type` pages.

    Args:
        item_type: Page dataclass describing one list item
        *item_selectors: Selectors for the item elements (relative to the container)
        container: Selector (or locator map) of the list element itself; the
            enclosing scope is used when omitted
        item_locator: Explicit item locator map (overrides item_selectors)
    """
    if isinstance(container, str):
        container_locator = _build_locator([container])
    else:
        container_locator = dict(container or {})

    spec = PropertySpec(
        PropertyKind.LIST,
        container_locator,
        element_kind="list",
        item_type=item_type,
        item_locator=_build_locator(item_selectors, item_locator),
    )
    return field(default=None, metadata={METADATA_KEY: spec})


def nested_page(
    page_type: type,
    *selectors: str,
    locator: Optional[Mapping[str, str]] = None,
) -> Any:
    """
    Declare a nested page rooted at an element (or at the enclosing scope
    when no selector is given).
    """
    spec = PropertySpec(
        PropertyKind.NESTED_PAGE,
        _build_locator(selectors, locator),
        element_kind="page",
        item_type=page_type,
    )
    return field(default=None, metadata={METADATA_KEY: spec})


def get_page_metadata(page_type: type) -> PageMetadata:
    """Return the page metadata of a type (empty metadata when undecorated)."""
    return getattr(page_type, PAGE_METADATA_ATTR, None) or PageMetadata()


def _own_metadata(page_type: type) -> PageMetadata:
    own = page_type.__dict__.get(PAGE_METADATA_ATTR)
    if own is None:
        inherited = get_page_metadata(page_type)
        own = PageMetadata(
            navigation=inherited.navigation,
            aliases=list(inherited.aliases),
            cookies=list(inherited.cookies),
        )
        setattr(page_type, PAGE_METADATA_ATTR, own)
    return own


def navigation(url: str, url_template: Optional[str] = None):
    """Class decorator declaring where a page lives."""
    def decorator(page_type: type) -> type:
        _own_metadata(page_type).navigation = PageNavigation(url, url_template)
        return page_type
    return decorator


def alias(*names: str):
    """Class decorator declaring extra names the page can be looked up by."""
    def decorator(page_type: type) -> type:
        _own_metadata(page_type).aliases.extend(names)
        return page_type
    return decorator


def set_cookie(
    name: str,
    value: str,
    path: str = "/",
    domain: Optional[str] = None,
    expires: Optional[datetime] = None,
    secure: bool = False,
):
    """Class decorator declaring a cookie to set before navigating to the page."""
    def decorator(page_type: type) -> type:
        _own_metadata(page_type).cookies.append(
            Cookie(name=name, value=value, path=path, domain=domain, expires=expires, secure=secure)
        )
        return page_type
    return decorator


def property_spec(data_field: "dataclasses.Field") -> Optional[PropertySpec]:
    """Return the location metadata of a dataclass field, if any."""
    return data_field.metadata.get(METADATA_KEY)


__all__ = [
    "PropertyKind",
    "PropertySpec",
    "PageNavigation",
    "PageMetadata",
    "Locator",
    "element",
    "element_list",
    "nested_page",
    "navigation",
    "alias",
    "set_cookie",
    "get_page_metadata",
    "property_spec",
]
