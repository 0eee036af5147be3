from dataclasses import dataclass

from pagebind.common.table_formatter import EMPTY_MARKER, TableFormatter


@dataclass
class Row:
    field: str
    expected: str
    actual: str = None
    ok: bool = True


def test_columns_are_padded_to_widest_cell():
    formatter = TableFormatter()
    formatter.add_column("Field", lambda r: r.field)
    formatter.add_column("Value", lambda r: r.expected)

    table = formatter.create_table([Row("name", "Hello"), Row("description", "x")])

    assert table.splitlines() == [
        "| Field       | Value |",
        "| name        | Hello |",
        "| description | x     |",
    ]


def test_invalid_cells_show_actual_value():
    formatter = TableFormatter()
    formatter.add_column("Value", lambda r: r.expected, lambda r: (r.ok, r.actual))

    table = formatter.create_table([Row("name", "Hello", "World", ok=False), Row("name", "Same", "Same")])

    assert table.splitlines() == [
        "| Value         |",
        "| Hello [World] |",
        "| Same          |",
    ]


def test_empty_values_render_marker():
    formatter = TableFormatter()
    formatter.add_column("Value", lambda r: r.expected, lambda r: (r.ok, r.actual))

    table = formatter.create_table([Row("name", "", None, ok=False)])

    assert table.splitlines()[1] == f"| {EMPTY_MARKER} [{EMPTY_MARKER}] |"


def test_column_can_be_inserted_at_index():
    formatter = TableFormatter()
    formatter.add_column("Value", lambda r: r.expected)
    formatter.add_column("Field", lambda r: r.field, index=0)

    assert formatter.create_table([]) == "| Field | Value |"


def test_exclude_printing_if_no_rows():
    formatter = TableFormatter().exclude_printing_if_no_rows()
    formatter.add_column("Field", lambda r: r.field)

    assert formatter.create_table([]) is None
