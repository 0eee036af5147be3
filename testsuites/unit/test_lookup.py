import pytest

from pagebind.common.lookup import normalized_equals, to_lookup_key


@pytest.mark.parametrize(
    "source",
    ["My Field", "my field", "The My Field", "MY_FIELD", "my-field", "  the   my field  "],
)
def test_lookup_key_variants_collapse(source):
    assert to_lookup_key(source) == "myfield"


@pytest.mark.parametrize("source", [None, "", "   "])
def test_lookup_key_of_empty_input_is_empty(source):
    assert to_lookup_key(source) == ""


@pytest.mark.parametrize(
    "source",
    ["The My Field", "a user name", "Theme Color", "Another Field", "an", "the"],
)
def test_lookup_key_is_idempotent(source):
    once = to_lookup_key(source)
    assert to_lookup_key(once) == once


def test_filler_words_only_dropped_as_whole_words():
    assert to_lookup_key("Theme Color") == "themecolor"
    assert to_lookup_key("Another Field") == "anotherfield"
    assert to_lookup_key("Save as a draft") == "saveasdraft"


def test_lone_filler_word_is_kept():
    assert to_lookup_key("The") == "the"


def test_normalized_equals():
    assert normalized_equals("The User Name", "username")
    assert not normalized_equals("User Name", "password")
