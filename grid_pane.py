import curses

from cell_address import column_letters, decode, encode
from cell_range import range_bounds
from viewport import ViewportWindow


def _within(bounds, row: int, col: int) -> bool:
    r0, r1, c0, c1 = bounds
    return r0 <= row <= r1 and c0 <= col <= c1


class GridPane:
    MAX_COL_WIDTH = 24
    MIN_COL_WIDTH = 5
    HEADER_ROWS = 1

    def __init__(self, controller):
        self.controller = controller
        self.col_offset = 0

        # hit-testing maps from the last draw
        self._row_at_y: dict[int, int] = {}
        self._col_at_x: list[tuple[int, int, int]] = []  # (x0, x1, col)

    @property
    def sheet(self):
        return self.controller.sheet

    def body_height(self, win) -> int:
        h, _ = win.getmaxyx()
        # header line + footer line
        return max(1, h - self.HEADER_ROWS - 1)

    def get_col_width(self, col: int, window: ViewportWindow) -> int:
        max_len = len(column_letters(col))
        for r in window.rows():
            max_len = max(max_len, len(self.sheet.text_at(encode(r, col))))
        return max(self.MIN_COL_WIDTH, min(self.MAX_COL_WIDTH, max_len + 2))

    def adjust_col_viewport(self, cursor_col: int, width_of, avail_w: int):
        """Shift col_offset so cursor_col is fully visible."""
        if cursor_col < self.col_offset:
            self.col_offset = cursor_col
            return
        while self.col_offset < cursor_col:
            used = sum(width_of(c) + 1 for c in range(self.col_offset, cursor_col + 1))
            if used <= avail_w:
                break
            self.col_offset += 1

    def visible_columns(self, width_of, avail_w: int) -> list[int]:
        cols = []
        used = 0
        for c in range(self.col_offset, self.sheet.col_count):
            cw = width_of(c)
            if used + cw + 1 > avail_w and cols:
                break
            cols.append(c)
            used += cw + 1
        return cols

    def address_at(self, y: int, x: int) -> str | None:
        row = self._row_at_y.get(y)
        if row is None:
            return None
        for x0, x1, col in self._col_at_x:
            if x0 <= x < x1:
                return encode(row, col)
        return None

    # ---------- rendering ----------
    def draw(self, win, active=True):
        win.erase()
        h, w = win.getmaxyx()
        ctl = self.controller
        ctl.resize(self.body_height(win))
        visible = ctl.viewport.visible_rows()

        row_w = max(3, len(str(visible.end_row)) + 1)
        avail_w = max(1, w - (row_w + 1))

        # widths only measure the rows on screen
        widths: dict[int, int] = {}

        def width_of(c):
            if c not in widths:
                widths[c] = self.get_col_width(c, visible)
            return widths[c]

        self.col_offset = min(self.col_offset, self.sheet.col_count - 1)
        cursor = ctl.selection.cursor
        if cursor is not None:
            self.adjust_col_viewport(decode(cursor)[1], width_of, avail_w)
        cols = self.visible_columns(width_of, avail_w)

        # bounds, not the resolved address list; ranges can span the whole sheet
        selected = None
        if not ctl.selection.is_empty():
            selected = range_bounds(ctl.selection.anchor, ctl.selection.cursor)
        editing = ctl.editor.address if ctl.editor.is_editing else None

        # header
        self._col_at_x = []
        x = row_w + 1
        for c in cols:
            cw = min(width_of(c), max(1, w - x))
            name = column_letters(c).center(cw)
            try:
                win.addnstr(0, x, name, cw, curses.A_BOLD)
            except curses.error:
                pass
            self._col_at_x.append((x, x + cw, c))
            x += cw + 1

        # rows
        self._row_at_y = {}
        y = self.HEADER_ROWS
        for r in visible.rows():
            if y >= h - 1:
                break
            self._row_at_y[y] = r
            try:
                win.addnstr(y, 0, str(r + 1).rjust(row_w), row_w)
            except curses.error:
                pass
            for x0, x1, c in self._col_at_x:
                address = encode(r, c)
                cw = x1 - x0
                if address == editing:
                    text = ctl.editor.buffer[-cw:].ljust(cw)
                    attr = curses.A_UNDERLINE | curses.A_REVERSE
                else:
                    cell = self.sheet.get(address)
                    text = cell.text if cell is not None else ""
                    attr = self._cell_attr(cell)
                    if cell is not None and cell.style.align == "center":
                        text = text[:cw].center(cw)
                    elif cell is not None and cell.style.align == "right":
                        text = text[:cw].rjust(cw)
                    else:
                        text = text[:cw].ljust(cw)
                    if active and address == cursor:
                        attr |= curses.A_REVERSE
                    elif selected is not None and _within(selected, r, c):
                        attr |= curses.A_STANDOUT
                try:
                    win.addnstr(y, x0, text, cw, attr)
                except curses.error:
                    pass
            y += 1

        # footer line
        try:
            win.hline(h - 1, 0, " ", w)
        except curses.error:
            pass

        win.refresh()

    @staticmethod
    def _cell_attr(cell) -> int:
        attr = curses.A_NORMAL
        if cell is None:
            return attr
        if cell.style.bold:
            attr |= curses.A_BOLD
        if cell.style.underline:
            attr |= curses.A_UNDERLINE
        return attr
