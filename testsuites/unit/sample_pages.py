"""
Page types and documents shared by the unit suites.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from pagebind.pages.declarations import alias, element, element_list, navigation, nested_page, set_cookie
from testsuites.unit.fakes import FakeElement


@dataclass
class StudentRow:
    name: Optional[Any] = element(".name")
    grade: Optional[Any] = element(".grade")


@dataclass
class SearchPanel:
    query: Optional[Any] = element("#query")
    search: Optional[Any] = element("#search", kind="button")


@navigation("/students", url_template="/students/{group}")
@alias("Student List")
@set_cookie("locale", "en-US")
@dataclass
class StudentsPage:
    title: Optional[Any] = element("h1")
    save_button: Optional[Any] = element("[data-testid='save']", "#save")
    agree: Optional[Any] = element("#agree", kind="checkbox")
    panel: Optional[Any] = nested_page(SearchPanel, "#panel")
    students: Optional[Any] = element_list(StudentRow, "tr", container="table")
    heading: str = "Students"
    page_size: int = 10
    tags: tuple = ()
    activated: bool = False

    def wait_for_active(self):
        self.activated = True


@navigation("/")
@dataclass
class HomePage:
    welcome: Optional[Any] = element("#welcome")


def student_row(name: str, grade: str = "A") -> FakeElement:
    row = FakeElement()
    row.add(".name", FakeElement(name))
    row.add(".grade", FakeElement(grade))
    return row


def students_document(names: Sequence[str] = ("Ann", "Bob", "Cid")) -> FakeElement:
    document = FakeElement()
    document.add("h1", FakeElement("Students"))
    document.add("[data-testid='save']", FakeElement("Save"))
    document.add("#agree", FakeElement())
    panel = document.add("#panel", FakeElement())
    panel.add("#query", FakeElement(""))
    panel.add("#search", FakeElement("Search"))
    table = document.add("table", FakeElement())
    table.add("tr", *[student_row(name) for name in names])
    return document
