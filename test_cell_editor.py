import unittest

from cell_editor import EDITING, NOT_EDITING, CellEditor
from selection import GridSelection
from sheet import Sheet


class CellEditorTests(unittest.TestCase):
    def setUp(self):
        self.sheet = Sheet("s", row_count=10, col_count=5)
        self.sel = GridSelection(self.sheet)
        self.messages = []
        self.commits = []
        self.editor = CellEditor(
            self.sheet,
            selection=self.sel,
            on_commit=lambda a, v: self.commits.append((a, v)),
            set_status=lambda m, _=None: self.messages.append(m),
        )

    def test_replace_edit_commits_text(self):
        self.sel.click("B2")
        self.assertTrue(self.editor.begin_replace("B2", "h"))
        self.assertEqual(self.editor.state, EDITING)
        self.editor.append_text("i")
        self.assertEqual(self.editor.commit(), ("B2", "hi"))
        self.assertEqual(self.sheet.value_at("B2"), "hi")
        self.assertEqual(self.editor.state, NOT_EDITING)
        self.assertEqual(self.commits, [("B2", "hi")])

    def test_preserve_edit_starts_with_current_text(self):
        self.sheet.update_cell("A1", 12)
        self.sel.click("A1")
        self.editor.begin_preserve("A1")
        self.assertEqual(self.editor.buffer, "12")
        self.editor.append_text("5")
        self.editor.commit()
        # numeric cells stay numeric
        self.assertEqual(self.sheet.value_at("A1"), 125)

    def test_begin_edit_requires_single_selection_on_address(self):
        self.sel.click("A1")
        self.assertFalse(self.editor.begin_edit("B2"))
        self.sel.shift_click("B2")
        self.assertFalse(self.editor.begin_edit("A1"))
        self.assertFalse(self.editor.is_editing)

    def test_force_bypasses_selection_check(self):
        self.sel.click("A1")
        self.sel.shift_click("B2")
        self.assertTrue(self.editor.begin_edit("A1", "x", force=True))

    def test_begin_edit_same_address_is_noop(self):
        self.sel.click("A1")
        self.editor.begin_edit("A1", "abc")
        self.assertFalse(self.editor.begin_edit("A1", "zzz"))
        self.assertEqual(self.editor.buffer, "abc")

    def test_begin_edit_elsewhere_commits_previous(self):
        self.editor.begin_edit("A1", "one", force=True)
        self.editor.begin_edit("C3", "", force=True)
        self.assertEqual(self.sheet.value_at("A1"), "one")
        self.assertEqual(self.editor.address, "C3")

    def test_cancel_discards_buffer(self):
        self.sheet.update_cell("A1", "keep")
        self.sel.click("A1")
        self.editor.begin_replace("A1", "x")
        self.assertTrue(self.editor.cancel())
        self.assertEqual(self.sheet.value_at("A1"), "keep")
        self.assertEqual(self.commits, [])

    def test_empty_buffer_clears_cell(self):
        self.sheet.update_cell("A1", "gone")
        self.sel.click("A1")
        self.editor.begin_preserve("A1")
        self.editor.update_buffer("")
        self.editor.commit()
        self.assertIsNone(self.sheet.value_at("A1"))

    def test_backspace(self):
        self.sel.click("A1")
        self.editor.begin_edit("A1", "abc")
        self.editor.backspace()
        self.assertEqual(self.editor.buffer, "ab")

    def test_calls_while_not_editing_are_ignored(self):
        with self.assertLogs("cell_editor", level="WARNING"):
            self.assertIsNone(self.editor.commit())
        with self.assertLogs("cell_editor", level="WARNING"):
            self.assertIsNone(self.editor.cancel())
        self.assertIsNone(self.editor.commit_if_editing())

    def test_rejected_commit_keeps_session_and_reports(self):
        def reject(address, value):
            raise ValueError("numbers only")

        editor = CellEditor(
            self.sheet,
            validator=reject,
            set_status=lambda m, _=None: self.messages.append(m),
        )
        editor.begin_edit("A1", "abc")
        self.assertIsNone(editor.commit())
        self.assertTrue(editor.is_editing)
        self.assertIsNone(self.sheet.value_at("A1"))
        self.assertIn("numbers only", self.messages[-1])

    def test_writer_replaces_direct_update(self):
        writes = []
        editor = CellEditor(self.sheet, writer=lambda a, v: writes.append((a, v)))
        editor.begin_edit("A1", "x")
        editor.commit()
        self.assertEqual(writes, [("A1", "x")])
        self.assertIsNone(self.sheet.value_at("A1"))


if __name__ == "__main__":
    unittest.main()
