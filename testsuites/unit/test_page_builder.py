from dataclasses import dataclass
from typing import Any, Optional

import pytest

from pagebind.common.config_loader import ConfigurationError, Settings
from pagebind.pages.declarations import PropertyKind, element, element_list, nested_page
from pagebind.pages.descriptors import DescriptorCache, describe
from pagebind.pages.page_builder import PageBuilder, ResolutionContext
from pagebind.pages.page_object import PageObject
from testsuites.unit.fakes import FakeDriver, FakeElement
from testsuites.unit.sample_pages import StudentRow, StudentsPage, student_row, students_document


@dataclass
class LoopPage:
    title: Optional[Any] = element("h1")
    inner: Optional[Any] = None


LoopPage.__dataclass_fields__["inner"].metadata = nested_page(LoopPage, "#inner").metadata


@dataclass
class NeedsArguments:
    title: str


def make_builder(document=None):
    driver = FakeDriver(document or students_document())
    return driver, PageBuilder(driver, DescriptorCache(), Settings(default_timeout=1.0, wait_interval=0.05))


def test_describe_collects_property_kinds():
    descriptor = describe(StudentsPage)

    kinds = {p.name: p.kind for p in descriptor.properties}
    assert kinds["title"] == PropertyKind.ELEMENT
    assert kinds["panel"] == PropertyKind.NESTED_PAGE
    assert kinds["students"] == PropertyKind.LIST
    assert kinds["heading"] == PropertyKind.SCALAR
    assert descriptor.get_property("Save Button").locator == {
        "primary": "[data-testid='save']",
        "fallback_1": "#save",
    }
    assert descriptor.aliases == ("Student List",)
    assert descriptor.navigation.url == "/students"
    assert [c.name for c in descriptor.cookies] == ["locale"]


def test_describe_rejects_non_dataclass():
    class NotAPage:
        pass

    with pytest.raises(ConfigurationError, match="must be a dataclass"):
        describe(NotAPage)


def test_describe_rejects_colliding_lookup_keys():
    @dataclass
    class Clash:
        user_name: str = ""
        username: str = ""

    with pytest.raises(ConfigurationError, match="username"):
        describe(Clash)


def test_describe_rejects_list_without_item_selector():
    @dataclass
    class BrokenList:
        rows: Optional[Any] = element_list(StudentRow)

    with pytest.raises(ConfigurationError, match="no item selector"):
        describe(BrokenList)


def test_descriptor_cache_describes_once():
    cache = DescriptorCache()

    first = cache.get(StudentsPage)

    assert cache.get(StudentsPage) is first
    assert StudentsPage in cache
    assert len(cache) == 1


def test_build_creates_handles_without_touching_the_driver():
    driver, builder = make_builder()

    page = builder.build(StudentsPage)

    assert isinstance(page, PageObject)
    assert page.name == "StudentsPage"
    assert len(page) == 9
    assert driver.find_calls == 0


def test_property_lookup_is_normalized():
    _, builder = make_builder()
    page = builder.build(StudentsPage)

    found, handle = page.try_get_property("The Save Button")

    assert found
    assert handle.name == "save_button"
    assert "page size" in page


def test_try_get_element_skips_lists_and_scalars():
    _, builder = make_builder()
    page = builder.build(StudentsPage)

    assert page.try_get_element("students") == (False, None)
    assert page.try_get_element("heading") == (False, None)
    assert page.try_get_element("title")[0]
    assert sorted(page.get_property_names(lambda h: h.is_element)) == [
        "agree",
        "panel",
        "save_button",
        "title",
    ]


def test_element_resolution_is_never_cached():
    document = students_document()
    _, builder = make_builder(document)
    title = builder.build(StudentsPage).try_get_property("title")[1]

    assert title.check_element_exists()
    document.remove("h1")
    assert not title.check_element_exists()
    document.add("h1", FakeElement("Back again"))
    assert title.get_current_value() == "Back again"


def test_nested_page_is_scoped_to_its_element():
    document = students_document()
    document.add("#query", FakeElement("outside the panel"))
    _, builder = make_builder(document)
    page = builder.build(StudentsPage)

    panel = page.try_get_property("panel")[1].get_item_as_page()

    assert isinstance(panel, PageObject)
    assert panel.name == "SearchPanel"
    assert panel.try_get_property("query")[1].get_current_value() == ""
    assert panel.context.depth == 1


def test_nested_page_is_none_when_element_missing():
    document = students_document()
    document.remove("#panel")
    _, builder = make_builder(document)

    panel = builder.build(StudentsPage).try_get_property("panel")[1]

    assert panel.get_item_as_page() is None


def test_list_items_are_fresh_pages_reflecting_the_document():
    document = students_document(["Ann", "Bob"])
    _, builder = make_builder(document)
    students = builder.build(StudentsPage).try_get_property("students")[1]

    first_pass = list(students.get_items())
    second_pass = list(students.get_items())

    assert [p.try_get_property("name")[1].get_current_value() for p in first_pass] == ["Ann", "Bob"]
    assert first_pass[0] is not second_pass[0]

    document.children["table"][0].add("tr", student_row("Cid"))
    assert students.item_count() == 3
    assert students.get_item_at_index(2).try_get_property("name")[1].get_current_value() == "Cid"
    assert students.get_item_at_index(3) is None
    assert students.get_item_at_index(-1) is None


def test_self_nesting_page_is_rejected():
    _, builder = make_builder()

    with pytest.raises(ConfigurationError, match="nested inside itself"):
        builder.build(LoopPage)


def test_page_type_requiring_arguments_is_rejected():
    _, builder = make_builder()

    with pytest.raises(ConfigurationError, match="cannot be created without arguments"):
        builder.build(NeedsArguments)


def test_build_uses_given_instance_for_scalars():
    _, builder = make_builder()
    native = StudentsPage(heading="Custom")

    page = builder.build(StudentsPage, native=native)

    assert page.try_get_property("heading")[1].get_current_value() == "Custom"
    assert page.native is native


def test_page_from_element_roots_lookups_at_element():
    driver, builder = make_builder()

    row = builder.page_from_element(StudentRow, student_row("Dee", "B"))

    assert row.try_get_property("grade")[1].get_current_value() == "B"


def test_resolution_context_chain():
    driver = FakeDriver()
    root = ResolutionContext.root(driver)
    child = root.child(lambda: None)

    assert child.chain() == [root, child]
    assert child.depth == 1
    assert root.resolve_scope() is driver.document


def test_page_activation_hook():
    _, builder = make_builder()
    page = builder.build(StudentsPage)

    page.wait_for_page_to_be_active()

    assert page.native.activated
