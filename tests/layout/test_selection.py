"""
Selection Toggle Tests
"""

from display.interaction import SelectionController, toggle_selection


def test_click_selects():
    assert toggle_selection(None, "a") == "a"


def test_click_twice_clears():
    assert toggle_selection(toggle_selection(None, "a"), "a") is None


def test_click_other_replaces():
    assert toggle_selection("a", "b") == "b"


class TestSelectionController:

    def test_reports_every_change(self):
        changes = []
        controller = SelectionController(on_select=changes.append)

        controller.click("a")
        controller.click("b")
        controller.click("b")

        assert changes == ["a", "b", None]
        assert controller.selected is None

    def test_without_callback(self):
        controller = SelectionController(selected="a")
        assert controller.click("c") == "c"
        controller.clear()
        assert controller.selected is None
