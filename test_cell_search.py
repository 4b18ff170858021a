import unittest

from cell_search import FindSession, find_cells
from sheet import Sheet


class FindCellsTests(unittest.TestCase):
    def setUp(self):
        self.sheet = Sheet("s")
        self.sheet.load_rows(
            [
                ["Name", "City"],
                ["Ana", "Lima"],
                ["Olaf", "Oslo"],
                ["Lina", 2.0],
            ]
        )

    def test_case_insensitive_row_major(self):
        self.assertEqual(find_cells(self.sheet, "LI"), [("B2", "Lima"), ("A4", "Lina")])

    def test_matches_display_text_of_numbers(self):
        self.assertEqual(find_cells(self.sheet, "2"), [("B4", "2")])

    def test_blank_query_matches_nothing(self):
        self.assertEqual(find_cells(self.sheet, "   "), [])
        self.assertEqual(find_cells(self.sheet, "zzz"), [])


class FindSessionTests(unittest.TestCase):
    def setUp(self):
        self.sheet = Sheet("s")
        self.sheet.load_rows([["ab", "x"], ["AB", "abc"]])
        self.finder = FindSession()

    def test_repeating_query_cycles_matches(self):
        self.assertEqual(self.finder.search(self.sheet, "ab"), ("A1", "ab"))
        self.assertEqual(self.finder.search(self.sheet, "AB"), ("A2", "AB"))
        self.assertEqual(self.finder.search(self.sheet, "ab"), ("B2", "abc"))
        self.assertEqual(self.finder.search(self.sheet, "ab"), ("A1", "ab"))

    def test_new_query_restarts(self):
        self.finder.search(self.sheet, "ab")
        self.finder.search(self.sheet, "ab")
        self.assertEqual(self.finder.search(self.sheet, "x"), ("B1", "x"))
        self.assertEqual(self.finder.index, 0)

    def test_reset_keeps_query_and_searches_again(self):
        self.finder.search(self.sheet, "ab")
        self.finder.search(self.sheet, "ab")
        self.finder.reset()
        self.assertEqual(self.finder.query, "ab")
        self.sheet.update_cell("A1", None)
        self.assertEqual(self.finder.search(self.sheet, "ab"), ("A2", "AB"))

    def test_no_match(self):
        self.assertIsNone(self.finder.search(self.sheet, "nope"))
        self.assertEqual(self.finder.matches, [])


if __name__ == "__main__":
    unittest.main()
