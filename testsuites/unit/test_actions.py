import threading
import time

import pytest

from pagebind.actions.element_actions import (
    ButtonClickAction,
    ButtonDoubleClickAction,
    ClearDataAction,
    ElementInPageContext,
    EnterDataAction,
    EnterDataContext,
    GetElementAsContextInPageAction,
    GetElementAsPageAction,
    GetListItemByCriteriaAction,
    GetListItemByIndexAction,
    HoverOverElementAction,
    ListItemByCriteriaContext,
    ListItemByIndexContext,
    SetTokenFromValueAction,
    TokenFieldContext,
)
from pagebind.actions.validation_actions import (
    ComboComparisonType,
    ValidateComboBoxAction,
    ValidateComboBoxContext,
    ValidateElementEnabledAction,
    ValidateElementExistsAction,
    ValidateItemAction,
    ValidateItemContext,
    ValidateListAction,
    ValidateListContext,
    ValidateListRowCountAction,
    ValidateListRowCountContext,
    ValidateTokenAction,
    ValidateTokenContext,
    ValidationCheckContext,
)
from pagebind.actions.wait_actions import (
    WaitForElementAction,
    WaitForElementContext,
    WaitForElementsAction,
    WaitForElementsContext,
    WaitForListItemsAction,
    WaitForListItemsContext,
    WaitForPageAction,
    WaitForPageContext,
    WaitForPageTitleAction,
    WaitForPageTitleContext,
)
from pagebind.common.config_loader import ConfigurationError, Settings
from pagebind.drivers.base import ComboBoxItem
from pagebind.pages.exceptions import ElementExecuteException, PageNavigationException
from pagebind.pages.page_object import PageObject
from pagebind.pages.property_handle import WaitCondition
from pagebind.pipeline.action_result import ActionContext
from pagebind.runtime import PageBindRuntime
from pagebind.validation.comparers import ComparisonType, NumericComparisonType
from pagebind.validation.validation_table import ValidationTable
from testsuites.unit.fakes import FakeDriver
from testsuites.unit.sample_pages import HomePage, StudentsPage, students_document

SETTINGS = Settings(
    base_url="http://test.local",
    default_timeout=0.5,
    wait_interval=0.05,
    list_wait_timeout=0.3,
    wait_for_still_element_before_clicking=False,
)


def make_runtime(document=None, settings=SETTINGS):
    driver = FakeDriver(document or students_document())
    runtime = PageBindRuntime(driver, settings, pages=[StudentsPage, HomePage])
    return driver, runtime, runtime.build_page(StudentsPage)


def table(*rows):
    validation_table = ValidationTable()
    for field_name, rule, value in rows:
        validation_table.add_validation(field_name, rule, value)
    return validation_table


def item_name(page):
    return page.try_get_property("name")[1].get_current_value()


# ==================== Element Verbs ====================

def test_button_click():
    driver, runtime, page = make_runtime()

    result = runtime.perform_action(page, ButtonClickAction, ActionContext("Save Button"))

    assert result.success
    assert driver.document.children["[data-testid='save']"][0].clicks == 1


def test_button_click_on_missing_property_fails():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(page, ButtonClickAction, ActionContext("Cancel"))

    assert not result.success
    assert "Could not locate property 'Cancel'" in str(result.error)


def test_button_click_on_list_fails():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(page, ButtonClickAction, ActionContext("students"))

    assert not result.success
    assert "is a list element" in str(result.error)


def test_enter_data_expands_tokens():
    driver, runtime, page = make_runtime()

    result = runtime.perform_action(page, EnterDataAction, EnterDataContext("title", data="{heading:Honors}"))

    assert result.success
    assert driver.document.children["h1"][0].text == "Honors"
    assert runtime.token_manager.get_token("heading") == "Honors"


def test_clear_data_on_element_and_scalar():
    driver, runtime, page = make_runtime()

    assert runtime.perform_action(page, ClearDataAction, ActionContext("title")).success
    assert runtime.perform_action(page, ClearDataAction, ActionContext("heading")).success

    assert driver.document.children["h1"][0].text == ""
    assert page.native.heading is None


def test_get_element_as_page():
    _, runtime, page = make_runtime()

    nested = runtime.perform_action(page, GetElementAsPageAction, ActionContext("panel"))
    plain = runtime.perform_action(page, GetElementAsPageAction, ActionContext("title"))

    assert isinstance(nested.result, PageObject)
    assert nested.result.name == "SearchPanel"
    assert not plain.success
    assert "Could not retrieve a page from property 'title'" in str(plain.error)


def test_set_token_from_value():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(page, SetTokenFromValueAction, TokenFieldContext("title", token_name="page title"))

    assert result.result == "Students"
    assert runtime.token_manager.get_token("Page Title") == "Students"


def test_double_click_and_hover_over_element():
    driver, runtime, page = make_runtime()
    button = driver.document.children["[data-testid='save']"][0]

    assert runtime.perform_action(page, ButtonDoubleClickAction, ActionContext("save button")).success
    assert runtime.perform_action(page, HoverOverElementAction, ActionContext("save button")).success

    assert button.double_clicks == 1
    assert button.hovers == 1


def test_hover_over_list_fails():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(page, HoverOverElementAction, ActionContext("students"))

    assert not result.success
    assert "is a list element" in str(result.error)


def test_get_element_as_context_in_given_page():
    _, runtime, page = make_runtime()

    nested = runtime.perform_action(None, GetElementAsContextInPageAction, ElementInPageContext("panel", page=page))
    plain = runtime.perform_action(page, GetElementAsContextInPageAction, ElementInPageContext("title"))
    listed = runtime.perform_action(page, GetElementAsContextInPageAction, ElementInPageContext("students"))

    assert nested.result.name == "SearchPanel"
    assert str(plain.error) == "Could not retrieve a page from property 'title'"
    assert str(listed.error) == (
        "Property 'students' was located but is a list element which cannot be a sub-page."
    )


# ==================== List Verbs ====================

def test_get_list_item_by_index_is_one_based():
    _, runtime, page = make_runtime()

    second = runtime.perform_action(page, GetListItemByIndexAction, ListItemByIndexContext("students", item_number=2))
    missing = runtime.perform_action(page, GetListItemByIndexAction, ListItemByIndexContext("students", item_number=4))

    assert item_name(second.result) == "Bob"
    assert "Could not find item 4 on list 'students'" in str(missing.error)


def test_get_list_item_on_non_list_fails():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(page, GetListItemByIndexAction, ListItemByIndexContext("title"))

    assert "is not a list element" in str(result.error)


def test_get_list_item_by_criteria():
    _, runtime, page = make_runtime()

    found = runtime.perform_action(
        page,
        GetListItemByCriteriaAction,
        ListItemByCriteriaContext("students", validation_table=table(("name", "equals", "cid"))),
    )
    missing = runtime.perform_action(
        page,
        GetListItemByCriteriaAction,
        ListItemByCriteriaContext("students", validation_table=table(("name", "equals", "Dee"))),
    )

    assert item_name(found.result) == "Cid"
    message = str(missing.error)
    assert message.startswith("Retrieving item from list 'students' failed, no items satisfied the rule checks.")
    assert "List Item Count: 3" in message


# ==================== Validation Verbs ====================

def test_validate_item():
    _, runtime, page = make_runtime()

    passed = runtime.perform_action(
        page,
        ValidateItemAction,
        ValidateItemContext(validation_table=table(("title", "equals", "Students"), ("page size", "equals", "10"))),
    )
    failed = runtime.perform_action(
        page,
        ValidateItemAction,
        ValidateItemContext(validation_table=table(("title", "equals", "Teachers"))),
    )

    assert passed.success
    assert not failed.success
    assert "Value comparison(s) failed" in str(failed.error)
    assert "Teachers [Students]" in str(failed.error)


def test_validate_item_with_unknown_rule_raises():
    _, runtime, page = make_runtime()

    with pytest.raises(ConfigurationError):
        runtime.perform_action(
            page,
            ValidateItemAction,
            ValidateItemContext(validation_table=table(("title", "sounds like", "Students"))),
        )


def test_validate_item_retries_until_timeout():
    settings = Settings(default_timeout=0.3, wait_interval=0.05, retry_validation_until_timeout=True)
    _, runtime, page = make_runtime(settings=settings)

    started = time.monotonic()
    result = runtime.perform_action(
        page,
        ValidateItemAction,
        ValidateItemContext(validation_table=table(("title", "equals", "Teachers"))),
    )

    assert not result.success
    assert time.monotonic() - started >= 0.3


def test_validate_list_contains_and_exactly():
    _, runtime, page = make_runtime()

    contains = runtime.perform_action(
        page,
        ValidateListAction,
        ValidateListContext(
            "students", validation_table=table(("name", "equals", "Bob")), comparison_type=ComparisonType.CONTAINS
        ),
    )
    exactly = runtime.perform_action(
        page,
        ValidateListAction,
        ValidateListContext(
            "students",
            validation_table=table(("name", "equals", "Ann"), ("name", "equals", "Bob")),
            comparison_type=ComparisonType.CONTAINS_EXACTLY,
        ),
    )

    assert contains.success
    assert not exactly.success
    message = str(exactly.error)
    assert message.startswith("List validation of field 'students' failed")
    assert "Unexpected Items: Cid" in message
    assert "Validation Details:" in message


@pytest.mark.parametrize(
    "comparison_type, reason",
    [
        (ComparisonType.EQUALS, "not every item satisfied the rule checks."),
        (ComparisonType.CONTAINS, "no items satisfied the rule checks."),
        (ComparisonType.STARTS_WITH, "the first item did not satisfy the rule checks."),
        (ComparisonType.ENDS_WITH, "the last item did not satisfy the rule checks."),
        (ComparisonType.DOES_NOT_CONTAIN, "one or more items satisfied the rule checks and should not have."),
        (ComparisonType.CONTAINS_EXACTLY, "the items did not exactly match the expected items."),
    ],
)
def test_validate_list_failure_reason_follows_comparison(comparison_type, reason):
    _, runtime, page = make_runtime()
    expected_name = "Zed" if comparison_type == ComparisonType.CONTAINS else "Bob"

    result = runtime.perform_action(
        page,
        ValidateListAction,
        ValidateListContext(
            "students", validation_table=table(("name", "equals", expected_name)), comparison_type=comparison_type
        ),
    )

    first_line = str(result.error).splitlines()[0]
    assert first_line == f"List validation of field 'students' failed, {reason}"


def test_validate_list_starts_with_on_empty_list():
    _, runtime, page = make_runtime(students_document(names=()))

    result = runtime.perform_action(
        page,
        ValidateListAction,
        ValidateListContext(
            "students", validation_table=table(("name", "equals", "Ann")), comparison_type=ComparisonType.STARTS_WITH
        ),
    )

    assert str(result.error).startswith("List validation of field 'students' failed, the list contains no items.")


def test_validate_list_contains_exactly_with_multi_field_items():
    _, runtime, page = make_runtime()
    expected = ValidationTable.from_items(
        [{"name": "Ann", "grade": "A"}, {"name": "Bob", "grade": "A"}, {"name": "Cid", "grade": "B"}],
        comparison_type=ComparisonType.CONTAINS_EXACTLY,
    )

    result = runtime.perform_action(page, ValidateListAction, ValidateListContext("students", validation_table=expected))

    message = str(result.error)
    assert "Unexpected Items: Cid, A" in message
    assert "Missing Items: name Equals Cid and grade Equals B" in message


def test_validate_list_defaults_to_table_comparison_type():
    _, runtime, page = make_runtime()
    validation_table = ValidationTable(ComparisonType.DOES_NOT_CONTAIN)
    validation_table.add_validation("name", "equals", "Zed")

    result = runtime.perform_action(
        page, ValidateListAction, ValidateListContext("students", validation_table=validation_table)
    )

    assert result.success


def test_validate_list_on_element_fails():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(
        page, ValidateListAction, ValidateListContext("title", validation_table=table(("name", "equals", "x")))
    )

    assert "Property 'title' was found but is not a list element." in str(result.error)


def test_validate_list_row_count():
    _, runtime, page = make_runtime()

    equal = runtime.perform_action(page, ValidateListRowCountAction, ValidateListRowCountContext("students", row_count=3))
    at_least = runtime.perform_action(
        page,
        ValidateListRowCountAction,
        ValidateListRowCountContext("students", NumericComparisonType.GREATER_THAN_EQUALS, 5),
    )

    assert equal.success
    assert str(at_least.error) == (
        "List count validation of field 'students' failed. Expected Items: 5, Actual Items: 3"
    )


def test_validate_element_exists():
    driver, runtime, page = make_runtime()

    assert runtime.perform_action(page, ValidateElementExistsAction, ValidationCheckContext("title")).success
    not_expected = runtime.perform_action(
        page, ValidateElementExistsAction, ValidationCheckContext("title", should_exist=False)
    )
    driver.document.remove("h1")
    missing = runtime.perform_action(page, ValidateElementExistsAction, ValidationCheckContext("title"))

    assert str(not_expected.error) == "Element 'title' exists on the page and should not exist."
    assert str(missing.error) == "Element 'title' does not exist on the page and should exist."


def test_validate_element_enabled():
    driver, runtime, page = make_runtime()
    driver.document.children["[data-testid='save']"][0].enabled = False

    disabled = runtime.perform_action(page, ValidateElementEnabledAction, ValidationCheckContext("save button"))
    expected_disabled = runtime.perform_action(
        page, ValidateElementEnabledAction, ValidationCheckContext("save button", should_exist=False)
    )
    driver.document.remove("h1")
    missing = runtime.perform_action(page, ValidateElementEnabledAction, ValidationCheckContext("title"))

    assert str(disabled.error) == "Element 'save_button' is not enabled on the page and should be enabled."
    assert expected_disabled.success
    assert isinstance(missing.error, ElementExecuteException)
    assert "does not exist" in str(missing.error)


def test_validate_token():
    _, runtime, page = make_runtime()
    runtime.token_manager.store_token("order id", "1042")

    passed = runtime.perform_action(
        page, ValidateTokenAction, ValidateTokenContext.for_token("order id", "greater than", "1000")
    )
    missing = runtime.perform_action(
        page, ValidateTokenAction, ValidateTokenContext.for_token("invoice", "equals", "7")
    )

    assert passed.success
    assert not missing.success


# ==================== Combo Box Validation ====================

def combo_runtime(*options):
    driver, runtime, page = make_runtime()
    driver.document.children["h1"][0].options = list(options)
    return runtime, page


def validate_combo(runtime, page, comparison_type, *items, **flags):
    return runtime.perform_action(
        page,
        ValidateComboBoxAction,
        ValidateComboBoxContext("title", comparison_type=comparison_type, items=list(items), **flags),
    )


def test_validate_combo_box_contains():
    runtime, page = combo_runtime(ComboBoxItem("7a", "1"), ComboBoxItem("7b", "2"), ComboBoxItem("8a", "3"))

    passed = validate_combo(runtime, page, ComboComparisonType.CONTAINS, ComboBoxItem("7b"))
    failed = validate_combo(runtime, page, ComboComparisonType.CONTAINS, ComboBoxItem("9z"), ComboBoxItem("9a"))

    assert passed.success
    assert str(failed.error) == "Combo box validation of field 'title' failed. Expected items that do not exist: 9a,9z"


def test_validate_combo_box_does_not_contain():
    runtime, page = combo_runtime(ComboBoxItem("7a", "1"), ComboBoxItem("7b", "2"))

    passed = validate_combo(runtime, page, ComboComparisonType.DOES_NOT_CONTAIN, ComboBoxItem("8a"))
    failed = validate_combo(runtime, page, ComboComparisonType.DOES_NOT_CONTAIN, ComboBoxItem("7a"))

    assert passed.success
    assert str(failed.error) == (
        "Combo box validation of field 'title' failed. Expected items that exists but should not have: 7a"
    )


def test_validate_combo_box_contains_exactly():
    runtime, page = combo_runtime(ComboBoxItem("7a", "1"), ComboBoxItem("7b", "2"))

    passed = validate_combo(
        runtime, page, ComboComparisonType.CONTAINS_EXACTLY, ComboBoxItem("7b"), ComboBoxItem("7a")
    )
    failed = validate_combo(runtime, page, ComboComparisonType.CONTAINS_EXACTLY, ComboBoxItem("7a"))

    assert passed.success
    assert str(failed.error) == (
        "Combo box exact match validation of field 'title' failed. Expected Items: 7a; Actual Items: 7a,7b"
    )


def test_validate_combo_box_by_value():
    runtime, page = combo_runtime(ComboBoxItem("7a", "1"), ComboBoxItem("7b", "2"))

    by_value = validate_combo(
        runtime, page, ComboComparisonType.CONTAINS, ComboBoxItem("Seventh", "2"), match_name=False, match_value=True
    )
    by_both = validate_combo(
        runtime, page, ComboComparisonType.CONTAINS, ComboBoxItem("7a", "2"), match_value=True
    )

    assert by_value.success
    assert not by_both.success


def test_validate_combo_box_on_plain_element_fails():
    _, runtime, page = make_runtime()

    result = validate_combo(runtime, page, ComboComparisonType.CONTAINS, ComboBoxItem("7a"))

    assert str(result.error) == "Property 'title' was found but is not a combo box element."


# ==================== Wait Verbs ====================

def test_wait_for_element():
    driver, runtime, page = make_runtime()

    present = runtime.perform_action(page, WaitForElementAction, WaitForElementContext("title"))
    driver.document.remove("h1")
    started = time.monotonic()
    timed_out = runtime.perform_action(page, WaitForElementAction, WaitForElementContext("title", timeout=0.3))

    assert present.success
    assert time.monotonic() - started < 1.5
    assert "Could not perform action 'BecomesExistent' on 'title' before timeout: 0.3s" in str(timed_out.error)


def test_wait_for_element_remains_condition():
    driver, runtime, page = make_runtime()
    driver.document.remove("h1")

    result = runtime.perform_action(
        page,
        WaitForElementAction,
        WaitForElementContext("title", condition=WaitCondition.REMAINS_NON_EXISTENT, timeout=0.2),
    )

    assert result.success


def test_wait_for_list_items():
    _, runtime, page = make_runtime()

    assert runtime.perform_action(page, WaitForListItemsAction, WaitForListItemsContext("students")).success


def test_wait_for_list_items_times_out():
    _, runtime, page = make_runtime(students_document(names=()))

    result = runtime.perform_action(page, WaitForListItemsAction, WaitForListItemsContext("students"))

    assert isinstance(result.error, PageNavigationException)
    assert str(result.error) == "List 'students' did not contain elements after 0.3s"


def test_wait_for_list_items_rejects_non_list():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(page, WaitForListItemsAction, WaitForListItemsContext("title"))

    assert "is not a list and cannot be used in this wait" in str(result.error)


def test_wait_for_page():
    driver, runtime, _ = make_runtime()
    driver.url = "http://test.local/students/7b"

    on_page = runtime.perform_action(None, WaitForPageAction, WaitForPageContext("student list"))
    elsewhere = runtime.perform_action(None, WaitForPageAction, WaitForPageContext("home", timeout=0.2))
    unknown = runtime.perform_action(None, WaitForPageAction, WaitForPageContext("billing"))

    assert on_page.result.name == "StudentsPage"
    assert on_page.result.native.activated
    assert str(elsewhere.error) == "Browser did not resolve to the 'home' page in 0.2s"
    assert "Cannot locate a page for name: billing" in str(unknown.error)


def test_wait_for_elements_until_values_match():
    driver, runtime, page = make_runtime()
    threading.Timer(0.1, setattr, (driver.document.children["h1"][0], "text", "Honors")).start()

    result = runtime.perform_action(
        page,
        WaitForElementsAction,
        WaitForElementsContext(validation_table=table(("title", "equals", "Honors"), ("page size", "equals", "10"))),
    )

    assert result.success


def test_wait_for_elements_times_out():
    _, runtime, page = make_runtime()

    result = runtime.perform_action(
        page,
        WaitForElementsAction,
        WaitForElementsContext(validation_table=table(("title", "equals", "Teachers")), timeout=0.2),
    )

    assert isinstance(result.error, ElementExecuteException)
    assert str(result.error).startswith("Value comparison(s) failed after 0.2s.")
    assert "Teachers [Students]" in str(result.error)


def test_wait_for_page_title_refreshes_until_it_matches():
    driver, runtime, _ = make_runtime()
    driver.page_title = "Loading"
    driver.titles_after_refresh = ["Loading", "Students | School"]

    result = runtime.perform_action(None, WaitForPageTitleAction, WaitForPageTitleContext(title="Students"))

    assert result.success
    assert driver.refreshes == 2


def test_wait_for_page_title_times_out():
    driver, runtime, _ = make_runtime()
    driver.page_title = "Home"

    result = runtime.perform_action(None, WaitForPageTitleAction, WaitForPageTitleContext(title="Students", timeout=0.2))

    assert isinstance(result.error, PageNavigationException)
    assert str(result.error) == "Page title did not contain 'Students' after 0.2s"
    assert driver.refreshes > 0
