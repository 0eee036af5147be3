import pytest

from pagebind.common.config_loader import ConfigurationError, Settings
from pagebind.common.token_manager import TokenManager
from pagebind.pages.descriptors import DescriptorCache
from pagebind.pages.page_builder import PageBuilder
from pagebind.validation.comparers import ComparerLookup, ComparisonType, default_comparers
from pagebind.validation.engine import evaluate, find_first_match, page_resolver, validate_list_items
from pagebind.validation.validation_table import ItemValidation, ValidationTable, group_expected_items
from testsuites.unit.fakes import FakeDriver
from testsuites.unit.sample_pages import StudentRow, StudentsPage, student_row, students_document

LOOKUP = ComparerLookup(default_comparers())


def table_of(*rows, comparison_type=None):
    table = ValidationTable(comparison_type)
    for field_name, rule, value in rows:
        table.add_validation(field_name, rule, value)
    return table.process(LOOKUP)


def row_pages(*names):
    driver = FakeDriver()
    builder = PageBuilder(driver, DescriptorCache(), Settings())
    return [builder.page_from_element(StudentRow, student_row(name)) for name in names]


def graded_pages(*rows):
    builder = PageBuilder(FakeDriver(), DescriptorCache(), Settings())
    return [builder.page_from_element(StudentRow, student_row(name, grade)) for name, grade in rows]


# ==================== Validation Table ====================

def test_item_validation_strips_and_renders():
    validation = ItemValidation(" name ", " Equals ", " Hello ")

    assert str(validation) == "name Equals Hello"
    assert validation.field_name == "name"
    assert not validation.is_processed


def test_unprocessed_validation_cannot_compare():
    with pytest.raises(ConfigurationError, match="has not been processed"):
        ItemValidation("name", "equals", "x").compare(None, "x")


def test_process_resolves_comparers_and_tokens():
    tokens = TokenManager()
    tokens.store_token("student", "Ann")
    table = ValidationTable()
    table.add_validation("name", "Does Not Contain", "{student}")

    table.process(LOOKUP, tokens)

    validation = table.validations[0]
    assert validation.comparison_type == ComparisonType.DOES_NOT_CONTAIN
    assert validation.comparison_value == "Ann"
    assert validation.raw_comparison_value == "{student}"


def test_process_is_idempotent_and_freezes_the_table():
    table = table_of(("name", "equals", "Ann"))
    first = table.validations

    table.process(LOOKUP)

    assert table.validations == first
    with pytest.raises(ConfigurationError, match="processed table"):
        table.add_validation("grade", "equals", "A")


def test_process_rejects_unknown_rule():
    table = ValidationTable()
    table.add_validation("name", "rhymes with", "Ann")

    with pytest.raises(ConfigurationError, match="Unsupported comparison rule"):
        table.process(LOOKUP)


def test_from_rows_matches_headers_loosely():
    table = ValidationTable.from_rows(
        [
            {"Field": "name", "Rule": "equals", "Value": "Ann"},
            {"Field Name": "grade", "Comparison": "exists"},
        ]
    )

    assert [str(v) for v in table] == ["name equals Ann", "grade exists <NULL>"]


def test_from_rows_requires_field_and_rule():
    with pytest.raises(ConfigurationError):
        ValidationTable.from_rows([{"Value": "Ann"}])


# ==================== Single Item ====================

def test_single_item_diff_table():
    row = row_pages("World")[0]

    result = evaluate(table_of(("name", "Equals", "Hello")), page_resolver(row))

    assert not result.is_valid
    assert result.item_count == 1
    assert result.get_comparison_table() == "| name Equals Hello |\n| World             |"


def test_rule_table_marks_failed_values():
    row = row_pages("World")[0]

    result = evaluate(
        table_of(("name", "Equals", "Hello"), ("grade", "Equals", "A")),
        page_resolver(row),
    )

    assert result.get_comparison_table_by_rule().splitlines() == [
        "| Field | Rule   | Value         |",
        "| name  | Equals | Hello [World] |",
        "| grade | Equals | A             |",
    ]


def test_missing_field_is_reported():
    row = row_pages("Ann")[0]

    result = evaluate(
        table_of(("nickname", "Equals", "Annie"), ("nickname", "Does Not Exist", None)),
        page_resolver(row),
    )

    item = result.checked_items[0]
    assert [r.is_valid for r in item.property_results] == [False, True]
    assert not result.is_valid
    assert "[Not Found]" in result.get_comparison_table()
    assert "nickname [Not Found]" in result.get_comparison_table_by_rule()


def test_rule_table_needs_a_single_item():
    result = validate_list_items(row_pages("A", "B"), ComparisonType.EQUALS, table_of(("name", "Equals", "A")))

    with pytest.raises(ValueError):
        result.get_comparison_table_by_rule()


def test_evaluate_with_scalar_properties():
    driver = FakeDriver(students_document())
    page = PageBuilder(driver, DescriptorCache(), Settings()).build(StudentsPage)

    result = evaluate(
        table_of(("heading", "Equals", "students"), ("page size", "greater than", "5")),
        page_resolver(page),
    )

    assert result.is_valid


# ==================== Lists ====================

def test_contains_is_satisfied_by_one_item():
    result = validate_list_items(
        row_pages("A", "B", "C"), ComparisonType.CONTAINS, table_of(("name", "Equals", "B"))
    )

    assert result.is_valid
    assert result.item_count == 3


def test_contains_without_match_reports_all_items():
    result = validate_list_items(
        row_pages("A", "B", "C"), ComparisonType.CONTAINS, table_of(("name", "Equals", "Z"))
    )

    assert not result.is_valid
    assert result.item_count == 3
    assert len(result.checked_items) == 3
    assert result.get_comparison_table().splitlines() == [
        "| name Equals Z |",
        "| A             |",
        "| B             |",
        "| C             |",
    ]


@pytest.mark.parametrize(
    "comparison_type, expected, outcome",
    [
        (ComparisonType.EQUALS, "A", False),
        (ComparisonType.STARTS_WITH, "A", True),
        (ComparisonType.STARTS_WITH, "C", False),
        (ComparisonType.ENDS_WITH, "C", True),
        (ComparisonType.DOES_NOT_CONTAIN, "Z", True),
        (ComparisonType.DOES_NOT_CONTAIN, "B", False),
        (ComparisonType.DOES_NOT_EQUAL, "B", False),
    ],
)
def test_list_comparisons(comparison_type, expected, outcome):
    result = validate_list_items(
        row_pages("A", "B", "C"), comparison_type, table_of(("name", "Equals", expected))
    )

    assert result.is_valid is outcome


def test_equals_requires_every_item():
    result = validate_list_items(
        row_pages("A", "A"), ComparisonType.EQUALS, table_of(("grade", "Equals", "A"))
    )

    assert result.is_valid


def test_starts_with_on_empty_list_fails():
    result = validate_list_items([], ComparisonType.STARTS_WITH, table_of(("name", "Equals", "A")))

    assert not result.is_valid
    assert result.item_count == 0


def test_contains_exactly_names_unexpected_items():
    result = validate_list_items(
        row_pages("A", "B", "C"),
        ComparisonType.CONTAINS_EXACTLY,
        table_of(("name", "Equals", "A"), ("name", "Equals", "B")),
    )

    assert not result.is_valid
    assert result.unexpected_items == ["C"]
    assert result.missing_items == []


def test_contains_exactly_names_missing_rows():
    result = validate_list_items(
        row_pages("A"),
        ComparisonType.CONTAINS_EXACTLY,
        table_of(("name", "Equals", "A"), ("name", "Equals", "B")),
    )

    assert not result.is_valid
    assert result.missing_items == ["name Equals B"]


def test_contains_exactly_matches_same_items():
    result = validate_list_items(
        row_pages("B", "A"),
        ComparisonType.CONTAINS_EXACTLY,
        table_of(("name", "Equals", "A"), ("name", "Equals", "B")),
    )

    assert result.is_valid


def test_unsupported_list_comparison_raises():
    with pytest.raises(ConfigurationError, match="not supported for list validation"):
        validate_list_items(row_pages("A"), ComparisonType.GREATER_THAN, table_of(("name", "Equals", "A")))


def test_find_first_match_stops_at_first_valid_item():
    rows = row_pages("A", "B", "B")

    item, result = find_first_match(rows, table_of(("name", "Equals", "B")))

    assert item is rows[1]
    assert result.is_valid
    assert result.item_count == 2


def test_find_first_match_without_match():
    item, result = find_first_match(row_pages("A"), table_of(("name", "Equals", "B")))

    assert item is None
    assert not result.is_valid


# ==================== Exact Matches Over Multi-Field Items ====================

def student_table(*students):
    return ValidationTable.from_items(
        [{"name": name, "grade": grade} for name, grade in students],
        comparison_type=ComparisonType.CONTAINS_EXACTLY,
    ).process(LOOKUP)


def test_from_items_groups_fields_per_item():
    table = ValidationTable.from_items([{"name": "A", "grade": "1"}, {"name": "B", "grade": "2"}])

    assert [str(v) for v in table] == ["name Equals A", "grade Equals 1", "name Equals B", "grade Equals 2"]
    assert group_expected_items(table.validations) == [[0, 1], [2, 3]]


def test_from_rows_groups_by_item_column():
    table = ValidationTable.from_rows(
        [
            {"Item": "1", "Field": "name", "Rule": "equals", "Value": "A"},
            {"Item": "2", "Field": "name", "Rule": "equals", "Value": "B"},
            {"Item": "1", "Field": "grade", "Rule": "equals", "Value": "9"},
            {"Field": "grade", "Rule": "exists"},
        ]
    )

    assert group_expected_items(table.validations) == [[0, 2], [1], [3]]


def test_contains_exactly_matches_multi_field_item():
    result = validate_list_items(graded_pages(("A", "1")), ComparisonType.CONTAINS_EXACTLY, student_table(("A", "1")))

    assert result.is_valid
    assert result.unexpected_items == []
    assert result.missing_items == []


def test_contains_exactly_rejects_partial_matches():
    result = validate_list_items(
        graded_pages(("A", "9"), ("Z", "1")),
        ComparisonType.CONTAINS_EXACTLY,
        student_table(("A", "1")),
    )

    assert not result.is_valid
    assert result.unexpected_items == ["A, 9", "Z, 1"]
    assert result.missing_items == ["name Equals A and grade Equals 1"]


def test_contains_exactly_matches_each_expected_item_once():
    result = validate_list_items(
        graded_pages(("A", "1"), ("A", "1")),
        ComparisonType.CONTAINS_EXACTLY,
        student_table(("A", "1"), ("B", "2")),
    )

    assert not result.is_valid
    assert result.unexpected_items == ["A, 1"]
    assert result.missing_items == ["name Equals B and grade Equals 2"]


def test_contains_exactly_reassigns_overlapping_rows():
    # Ann satisfies both rows, Abe only the first
    table = table_of(("name", "Starts With", "A"), ("name", "Equals", "Ann"), comparison_type=ComparisonType.CONTAINS_EXACTLY)

    result = validate_list_items(row_pages("Ann", "Abe"), ComparisonType.CONTAINS_EXACTLY, table)

    assert result.is_valid


def test_contains_exactly_in_any_order():
    result = validate_list_items(
        graded_pages(("B", "2"), ("A", "1")),
        ComparisonType.CONTAINS_EXACTLY,
        student_table(("A", "1"), ("B", "2")),
    )

    assert result.is_valid
