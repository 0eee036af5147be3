"""
================================================================================
Page Mapper
================================================================================

Maps user-facing page names to page types.

A page type is registered under its class name, its class name without a
trailing "Page" and every alias declared with @alias(...). All names are
stored as lookup keys, so "Student List", "student list page" and
"StudentListPage" resolve to the same type.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from loguru import logger

from ..common.lookup import to_lookup_key
from .declarations import get_page_metadata


class PageMapper:
    """
    Registry of page types by name.

    Usage:
        >>> mapper = PageMapper()
        >>> mapper.add_types([HomePage, StudentsPage])
        >>> mapper.get_type_from_name("students")
        <class 'StudentsPage'>
    """

    def __init__(self) -> None:
        self._types: Dict[str, type] = {}

    def add_type(self, page_type: type) -> None:
        """Register a page type under its names and aliases."""
        names: List[str] = [page_type.__name__]
        if page_type.__name__.lower().endswith("page") and len(page_type.__name__) > 4:
            names.append(page_type.__name__[:-4])
        names.extend(get_page_metadata(page_type).aliases)

        for name in names:
            key = to_lookup_key(name)
            if not key:
                continue
            existing = self._types.get(key)
            if existing is not None and existing is not page_type:
                logger.warning(
                    f"⚠️ Page name '{name}' maps to both {existing.__name__} and "
                    f"{page_type.__name__}; keeping {existing.__name__}"
                )
                continue
            self._types[key] = page_type

        logger.debug(f"Registered page type {page_type.__name__} as {names}")

    def add_types(self, page_types: Iterable[type]) -> None:
        for page_type in page_types:
            self.add_type(page_type)

    def get_type_from_name(self, name: str) -> Optional[type]:
        """Return the page type registered for `name`, or None."""
        return self._types.get(to_lookup_key(name))

    @property
    def names(self) -> List[str]:
        return sorted(self._types)

    def __len__(self) -> int:
        return len(set(self._types.values()))


__all__ = ["PageMapper"]
