"""
================================================================================
Table Formatter
================================================================================

Renders column-aligned plain-text tables for validation failure reports.

    | name Equals Hello |
    | World             |

Every cell is written as "| " + value padded to the column width + " ", every
row is closed by "|", and rows are joined by newlines. Column width is the
widest cell in the column, header included.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar


T = TypeVar("T")

EMPTY_MARKER = "<EMPTY>"


@dataclass
class _Column(Generic[T]):
    header: str
    value_selector: Callable[[T], Any]
    validation_selector: Optional[Callable[[T], Tuple[bool, Optional[str]]]] = None

    def format_cell(self, item: T) -> str:
        value = self.value_selector(item)
        text = EMPTY_MARKER if value is None or str(value) == "" else str(value)

        if self.validation_selector is None:
            return text

        is_valid, actual = self.validation_selector(item)
        if is_valid:
            return text

        actual_text = EMPTY_MARKER if actual is None or actual == "" else actual
        return f"{text} [{actual_text}]"


class TableFormatter(Generic[T]):
    """
    Column-oriented text table builder.

    Usage:
        >>> formatter = TableFormatter()
        >>> formatter.add_column("Field", lambda r: r.field)
        >>> formatter.add_column("Value", lambda r: r.expected, lambda r: (r.ok, r.actual))
        >>> print(formatter.create_table(rows))
    """

    def __init__(self) -> None:
        self._columns: List[_Column[T]] = []
        self._exclude_if_empty = False

    def add_column(
        self,
        header: str,
        value_selector: Callable[[T], Any],
        validation_selector: Optional[Callable[[T], Tuple[bool, Optional[str]]]] = None,
        index: Optional[int] = None,
    ) -> "TableFormatter[T]":
        """
        Add a column to the table.

        Args:
            header: Column header text
            value_selector: Returns the cell value for a row item
            validation_selector: Returns (is_valid, actual) for a row item; invalid
                cells are rendered as "value [actual]"
            index: Optional position to insert the column at

        Returns:
            The formatter, for chaining
        """
        column = _Column(header, value_selector, validation_selector)
        if index is None:
            self._columns.append(column)
        else:
            self._columns.insert(index, column)
        return self

    def exclude_printing_if_no_rows(self) -> "TableFormatter[T]":
        """Make create_table return None when there are no rows."""
        self._exclude_if_empty = True
        return self

    def create_table(self, items: Iterable[T]) -> Optional[str]:
        """
        Render the table for the given row items.

        Args:
            items: Row items

        Returns:
            Rendered table, or None when empty and exclusion is enabled
        """
        rows = [[column.format_cell(item) for column in self._columns] for item in items]
        if not rows and self._exclude_if_empty:
            return None

        widths = [len(column.header) for column in self._columns]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))

        lines = [self._render_row([c.header for c in self._columns], widths)]
        lines.extend(self._render_row(row, widths) for row in rows)
        return "\n".join(lines)

    @staticmethod
    def _render_row(cells: List[str], widths: List[int]) -> str:
        return "".join(f"| {cell.ljust(width)} " for cell, width in zip(cells, widths)) + "|"


__all__ = ["TableFormatter", "EMPTY_MARKER"]
