import curses
import unittest

from overlay import OverlayView
from prompt_line import PromptLine


def _type(prompt, text):
    for ch in text:
        prompt.handle_key(ord(ch))


class PromptLineTests(unittest.TestCase):
    def setUp(self):
        self.messages = []
        self.submitted = []
        self.prompt = PromptLine(lambda m, _=None: self.messages.append(m))

    def test_submit_closes_prompt(self):
        self.prompt.start("Go to: ", self.submitted.append)
        _type(self.prompt, "B7")
        self.prompt.handle_key(10)
        self.assertEqual(self.submitted, ["B7"])
        self.assertFalse(self.prompt.active)

    def test_rejected_submit_keeps_prompt_open(self):
        self.prompt.start("Aggregate: ", lambda text: False)
        _type(self.prompt, "bad(")
        self.prompt.handle_key(curses.KEY_ENTER)
        self.assertTrue(self.prompt.active)
        self.assertEqual(self.prompt.buffer, "bad(")

    def test_empty_submit_reports(self):
        self.prompt.start("Save as: ", self.submitted.append)
        self.prompt.handle_key(13)
        self.assertTrue(self.prompt.active)
        self.assertEqual(self.messages, ["Save as required"])

    def test_cursor_editing(self):
        self.prompt.start("Chart type: ", self.submitted.append, initial="br")
        self.prompt.handle_key(curses.KEY_LEFT)
        self.prompt.handle_key(ord("a"))
        self.assertEqual(self.prompt.buffer, "bar")
        self.prompt.handle_key(curses.KEY_END)
        self.prompt.handle_key(127)
        self.assertEqual(self.prompt.buffer, "ba")

    def test_function_and_editing_keys_are_not_text(self):
        self.prompt.start("Find: ", self.submitted.append, initial="ab")
        for key in (curses.KEY_F5, curses.KEY_DC, curses.KEY_NPAGE, curses.KEY_F12):
            self.prompt.handle_key(key)
        self.assertEqual(self.prompt.buffer, "ab")
        self.prompt.handle_key(ord("é"))
        self.assertEqual(self.prompt.buffer, "abé")

    def test_escape_cancels(self):
        self.prompt.start("Go to: ", self.submitted.append)
        _type(self.prompt, "A1")
        self.prompt.handle_key(27)
        self.assertFalse(self.prompt.active)
        self.assertEqual(self.submitted, [])


class OverlayViewTests(unittest.TestCase):
    def test_scroll_and_close(self):
        overlay = OverlayView()
        overlay.open("\n".join(str(i) for i in range(30)), title="t")
        self.assertEqual(len(overlay.lines), 30)
        overlay.handle_key(ord("j"), page_rows=10)
        overlay.handle_key(curses.KEY_END, page_rows=10)
        self.assertEqual(overlay.scroll, 20)
        overlay.handle_key(ord("k"), page_rows=10)
        self.assertEqual(overlay.scroll, 19)
        overlay.handle_key(ord("q"))
        self.assertFalse(overlay.visible)
        self.assertEqual(overlay.lines, [])


if __name__ == "__main__":
    unittest.main()
