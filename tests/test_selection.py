from __future__ import annotations

import unittest

from termtools.selection import SelectableList


class SelectableListTests(unittest.TestCase):
    def test_reset_selects_first_item_or_nothing(self) -> None:
        selection = SelectableList()
        self.assertIsNone(selection.selected)
        self.assertEqual(selection.reset(3), 0)
        self.assertEqual(selection.reset(0), None)
        self.assertEqual(len(selection), 0)

    def test_moves_do_not_wrap(self) -> None:
        selection = SelectableList(3)
        self.assertFalse(selection.select_prev())
        self.assertTrue(selection.select_next())
        self.assertTrue(selection.select_next())
        self.assertFalse(selection.select_next())
        self.assertEqual(selection.selected, 2)

    def test_moves_on_empty_list_are_no_ops(self) -> None:
        selection = SelectableList(0)
        self.assertFalse(selection.select_next())
        self.assertFalse(selection.select_prev())
        self.assertFalse(selection.page_forward(10))
        self.assertFalse(selection.page_backward(10))
        self.assertIsNone(selection.selected)

    def test_page_forward_clamps_to_last_item(self) -> None:
        selection = SelectableList(8)
        selection.select(5)
        self.assertTrue(selection.page_forward(10))
        self.assertEqual(selection.selected, 7)
        self.assertFalse(selection.page_forward(10))

    def test_page_backward_clamps_to_first_item(self) -> None:
        selection = SelectableList(30)
        selection.select(12)
        selection.page_backward(10)
        self.assertEqual(selection.selected, 2)
        selection.page_backward(10)
        self.assertEqual(selection.selected, 0)

    def test_select_clamps_out_of_range_index(self) -> None:
        selection = SelectableList(4)
        self.assertEqual(selection.select(99), 3)
        self.assertEqual(selection.select(-5), 0)

    def test_visible_window_follows_selection(self) -> None:
        selection = SelectableList(50)
        selection.select(30)
        self.assertEqual(selection.visible_window(0, 10), 21)
        selection.select(5)
        self.assertEqual(selection.visible_window(21, 10), 5)
        self.assertEqual(selection.visible_window(3, 10), 3)


if __name__ == "__main__":
    unittest.main()
