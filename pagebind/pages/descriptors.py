"""
================================================================================
Page Type Descriptors
================================================================================

Immutable descriptions of page types, derived once from dataclass metadata
and cached per type.

Components:
    - PropertyDescriptor: one declared property (name, kind, location metadata)
    - PageTypeDescriptor: all properties of a page type plus navigation metadata
    - describe(): builds a descriptor from a dataclass
    - DescriptorCache: weak, append-only type -> descriptor cache

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
import typing
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from loguru import logger

from ..common.config_loader import ConfigurationError
from ..common.lookup import to_lookup_key
from ..drivers.base import Cookie
from .declarations import (
    PageNavigation,
    PropertyKind,
    get_page_metadata,
    property_spec,
)


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    Declared property of a page type.

    Attributes:
        name: Attribute name on the page dataclass
        kind: Scalar, element, list or nested page
        value_type: Declared type annotation (used by scalar fills)
        locator: Opaque location metadata passed to the driver
        element_kind: Kind used to pick fill/clear strategies
        item_type: Page type of list items / nested page
        item_locator: Location metadata of list items
    """
    name: str
    kind: PropertyKind
    value_type: Any = None
    locator: Mapping[str, str] = field(default_factory=dict)
    element_kind: str = "text"
    item_type: Optional[type] = None
    item_locator: Mapping[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return to_lookup_key(self.name)

    @property
    def is_element(self) -> bool:
        return self.kind in (PropertyKind.ELEMENT, PropertyKind.NESTED_PAGE)

    @property
    def is_list(self) -> bool:
        return self.kind == PropertyKind.LIST


@dataclass(frozen=True)
class PageTypeDescriptor:
    """
    Immutable description of a page type.

    The page type itself is held weakly so that caching a descriptor never
    keeps its type alive.
    """
    name: str
    properties: Tuple[PropertyDescriptor, ...]
    type_ref: "weakref.ReferenceType[type]"
    navigation: Optional[PageNavigation] = None
    aliases: Tuple[str, ...] = ()
    cookies: Tuple[Cookie, ...] = ()

    @property
    def page_type(self) -> type:
        page_type = self.type_ref()
        if page_type is None:
            raise ConfigurationError(f"Page type '{self.name}' no longer exists")
        return page_type

    @property
    def property_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.properties)

    def get_property(self, name: str) -> Optional[PropertyDescriptor]:
        key = to_lookup_key(name)
        for prop in self.properties:
            if prop.key == key:
                return prop
        return None


def _resolve_type_hints(page_type: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(page_type)
    except (NameError, TypeError):
        # Forward references that cannot be resolved fall back to raw annotations
        return {}


def describe(page_type: type) -> PageTypeDescriptor:
    """
    Build the descriptor of a page dataclass.

    Args:
        page_type: A dataclass decorated with page metadata

    Returns:
        PageTypeDescriptor for the type

    Raises:
        ConfigurationError: If the type is not a dataclass or two properties
            normalize to the same lookup key
    """
    if not (isinstance(page_type, type) and dataclasses.is_dataclass(page_type)):
        raise ConfigurationError(f"Page type '{page_type!r}' must be a dataclass")

    hints = _resolve_type_hints(page_type)
    properties = []
    seen: Dict[str, str] = {}

    for data_field in dataclasses.fields(page_type):
        if data_field.name.startswith("_"):
            continue

        key = to_lookup_key(data_field.name)
        if key in seen:
            raise ConfigurationError(
                f"Page '{page_type.__name__}' declares properties '{seen[key]}' and "
                f"'{data_field.name}' which both resolve to the lookup key '{key}'"
            )
        seen[key] = data_field.name

        value_type = hints.get(data_field.name, data_field.type)
        spec = property_spec(data_field)
        if spec is None:
            properties.append(PropertyDescriptor(data_field.name, PropertyKind.SCALAR, value_type))
            continue

        if spec.kind == PropertyKind.LIST and not spec.item_locator:
            raise ConfigurationError(
                f"List property '{data_field.name}' on page '{page_type.__name__}' "
                f"has no item selector"
            )

        properties.append(
            PropertyDescriptor(
                name=data_field.name,
                kind=spec.kind,
                value_type=value_type,
                locator=dict(spec.locator),
                element_kind=spec.element_kind,
                item_type=spec.item_type,
                item_locator=dict(spec.item_locator),
            )
        )

    metadata = get_page_metadata(page_type)
    return PageTypeDescriptor(
        name=page_type.__name__,
        properties=tuple(properties),
        type_ref=weakref.ref(page_type),
        navigation=metadata.navigation,
        aliases=tuple(metadata.aliases),
        cookies=tuple(metadata.cookies),
    )


class DescriptorCache:
    """
    Type -> descriptor cache.

    Entries are created on first use and never change afterwards; they go
    away together with their page type.

    Usage:
        >>> cache = DescriptorCache()
        >>> descriptor = cache.get(LoginPage)
        >>> cache.get(LoginPage) is descriptor
        True
    """

    def __init__(self) -> None:
        self._descriptors: "weakref.WeakKeyDictionary[type, PageTypeDescriptor]" = (
            weakref.WeakKeyDictionary()
        )

    def get(self, page_type: type) -> PageTypeDescriptor:
        """Return the descriptor for `page_type`, describing it on first use."""
        descriptor = self._descriptors.get(page_type)
        if descriptor is None:
            descriptor = describe(page_type)
            self._descriptors[page_type] = descriptor
            logger.debug(
                f"Described page type '{descriptor.name}' with "
                f"{len(descriptor.properties)} properties"
            )
        return descriptor

    def __contains__(self, page_type: type) -> bool:
        return page_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


__all__ = [
    "PropertyDescriptor",
    "PageTypeDescriptor",
    "DescriptorCache",
    "describe",
]
