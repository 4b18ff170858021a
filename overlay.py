import curses
from typing import List


class OverlayView:
    """Scrollable read-only text shown over the grid (help, query output)."""

    def __init__(self):
        self.visible = False
        self.lines: List[str] = []
        self.scroll = 0
        self.title = ""

    def open(self, lines, title: str = ""):
        if isinstance(lines, str):
            lines = lines.splitlines()
        self.lines = list(lines or [])
        self.title = title
        self.scroll = 0
        self.visible = True

    def close(self):
        self.visible = False
        self.lines = []
        self.scroll = 0
        self.title = ""

    def handle_key(self, ch, page_rows: int = 10):
        if not self.visible or ch == -1:
            return

        max_scroll = max(0, len(self.lines) - page_rows)
        half_page = max(1, page_rows // 2)

        # close
        if ch in (27, ord("q"), 10, 13, curses.KEY_ENTER):
            self.close()
            return

        if ch in (curses.KEY_DOWN, ord("j")):
            self.scroll = min(max_scroll, self.scroll + 1)
        elif ch in (curses.KEY_UP, ord("k")):
            self.scroll = max(0, self.scroll - 1)
        elif ch == curses.KEY_NPAGE:
            self.scroll = min(max_scroll, self.scroll + half_page)
        elif ch == curses.KEY_PPAGE:
            self.scroll = max(0, self.scroll - half_page)
        elif ch == curses.KEY_HOME:
            self.scroll = 0
        elif ch == curses.KEY_END:
            self.scroll = max_scroll

    def draw(self, win):
        if not self.visible:
            return
        win.erase()
        h, w = win.getmaxyx()
        y = 0
        if self.title:
            try:
                win.addnstr(0, 0, self.title.ljust(w), w, curses.A_BOLD)
            except curses.error:
                pass
            y = 1
        for line in self.lines[self.scroll :]:
            if y >= h - 1:
                break
            try:
                win.addnstr(y, 0, line, w)
            except curses.error:
                pass
            y += 1
        try:
            win.addnstr(h - 1, 0, " q/Esc close  j/k scroll".ljust(w), w, curses.A_REVERSE)
        except curses.error:
            pass
        win.refresh()
