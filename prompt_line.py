import curses
from typing import Callable, Optional


class PromptLine:
    """Single-line input on the status bar; Enter submits, Esc cancels."""

    def __init__(self, set_status_cb: Callable[[str, float], None]):
        self._set_status = set_status_cb

        self.active = False
        self.label = ""
        self.buffer = ""
        self.cursor = 0
        self._on_submit: Optional[Callable[[str], bool]] = None

    def start(self, label: str, on_submit: Callable[[str], bool], initial: str = ""):
        self.active = True
        self.label = label
        self.buffer = initial
        self.cursor = len(initial)
        self._on_submit = on_submit

    def cancel(self):
        self.active = False
        self.label = ""
        self.buffer = ""
        self.cursor = 0
        self._on_submit = None

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13, curses.KEY_ENTER):
            text = self.buffer.strip()
            if not text:
                self._set_status(f"{self.label.rstrip(': ')} required", 3)
                return
            # on_submit returns False to keep the prompt open
            if self._on_submit is None or self._on_submit(text) is not False:
                self.cancel()
            return

        if ch == 27:  # Esc
            self.cancel()
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            return

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return
        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return
        if ch == curses.KEY_HOME:
            self.cursor = 0
            return
        if ch == curses.KEY_END:
            self.cursor = len(self.buffer)
            return

        # codes from KEY_MIN up are function and editing keys
        if 32 <= ch < curses.KEY_MIN:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1

    def draw(self, win):
        win.erase()
        _, w = win.getmaxyx()
        text = f"{self.label}{self.buffer}"
        visible = text[-(w - 1) :] if len(text) >= w else text
        try:
            win.addnstr(0, 0, visible, w - 1)
            win.move(0, min(w - 1, len(self.label) + self.cursor - (len(text) - len(visible))))
        except curses.error:
            pass
        win.refresh()
