import pytest

from pagebind.common.config_loader import Settings
from pagebind.pages.descriptors import DescriptorCache
from pagebind.pages.exceptions import ElementExecuteException
from pagebind.pages.page_builder import PageBuilder
from pagebind.pipeline.element_locator import ElementLocator, LocatorAction
from testsuites.unit.fakes import FakeDriver
from testsuites.unit.sample_pages import StudentsPage, students_document


class RecordingLocatorAction(LocatorAction):
    def __init__(self):
        self.events = []

    def on_locate(self, property_name):
        self.events.append(("locate", property_name))

    def on_locate_complete(self, property_name, handle):
        self.events.append(("complete", property_name, handle is not None))


def make_locator(*hooks):
    builder = PageBuilder(FakeDriver(students_document()), DescriptorCache(), Settings())
    return ElementLocator(builder.build(StudentsPage), hooks)


def test_get_element_returns_handle():
    locator = make_locator()

    result = locator.get_element("Save Button")

    assert result.success
    assert result.result.name == "save_button"


def test_get_element_lists_candidates_when_missing():
    locator = make_locator()

    with pytest.raises(ElementExecuteException) as exc_info:
        locator.get_element("doesnotexist")

    message = str(exc_info.value)
    assert "Could not locate property 'doesnotexist' on page StudentsPage" in message
    assert "Available Fields:" in message
    for candidate in ("save_button", "students", "title", "heading"):
        assert candidate in message
    assert exc_info.value.available_fields == tuple(sorted(exc_info.value.available_fields))
    assert exc_info.value.property_name == "doesnotexist"


def test_get_element_on_list_is_a_failed_result():
    locator = make_locator()

    result = locator.get_element("students")

    assert not result.success
    assert isinstance(result.error, ElementExecuteException)
    assert "'students'" in str(result.error)
    assert "is a list element" in str(result.error)


def test_get_element_on_scalar_raises():
    locator = make_locator()

    with pytest.raises(ElementExecuteException, match="is not an element"):
        locator.get_element("heading")


def test_try_get_element_and_property():
    locator = make_locator()

    assert locator.try_get_element("students") == (False, None)
    assert locator.try_get_property("students")[0]
    assert locator.try_get_property("nothing") == (False, None)
    assert locator.get_property("The Heading").name == "heading"


def test_get_property_raises_when_missing():
    locator = make_locator()

    with pytest.raises(ElementExecuteException, match="Available Fields"):
        locator.get_property("nothing")


def test_get_properties_filters_by_capability():
    locator = make_locator()

    assert [h.name for h in locator.get_properties(lambda h: h.is_list)] == ["students"]
    assert ElementLocator(None).get_properties() == []


def test_lookup_without_page_raises():
    with pytest.raises(ElementExecuteException, match="No page is active"):
        ElementLocator(None).get_element("title")


def test_locator_hooks_wrap_every_lookup():
    hook = RecordingLocatorAction()
    locator = make_locator(hook)

    locator.try_get_property("title")
    locator.try_get_property("nothing")

    assert hook.events == [
        ("locate", "title"),
        ("complete", "title", True),
        ("locate", "nothing"),
        ("complete", "nothing", False),
    ]
