from smoketest.automation.util import full_title, screenshot_name


def test_screenshot_name_replaces_everything_but_alnum_and_dash():
    title = "VSCode Smoke Tests (Electron) Search: should find-in-files"
    assert screenshot_name(title) == "VSCode_Smoke_Tests__Electron__Search__should_find-in-files"


def test_screenshot_name_keeps_case():
    assert screenshot_name("AbC-123") == "AbC-123"


def test_screenshot_name_handles_empty():
    assert screenshot_name("") == ""
    assert screenshot_name(None) == ""


def test_full_title_from_nodeid():
    assert full_title("areas/test_search.py::TestSearch::test_find") == "test_search TestSearch test_find"
    assert full_title("test_editor.py::test_undo[param]") == "test_editor test_undo[param]"
    assert full_title("") == ""
