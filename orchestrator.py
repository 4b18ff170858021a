import curses
import logging
import time

from aggregate import AggregateSyntaxError
from cell_address import decode, parse_range
from cell_range import describe_selection
from cell_search import FindSession
from chart_spec import chart_from_selection
from config_paths import MESSAGES_PATH, ensure_config_dirs, load_config
from file_type_handler import FileTypeHandler, UnsupportedFileType
from grid_controller import GridController
from grid_pane import GridPane
from message_store import MessageStore
from overlay import OverlayView
from prompt_line import PromptLine
from query_executor import SheetQueryExecutor
from screen_layout import ScreenLayout
from selection_context import create_selection_context, format_selection_context
from selection_summary import format_summary, summarize_selection
from status_bar import render_status, render_tabs

logger = logging.getLogger(__name__)

KEY_NAMES = {
    curses.KEY_UP: ("up", False),
    curses.KEY_DOWN: ("down", False),
    curses.KEY_LEFT: ("left", False),
    curses.KEY_RIGHT: ("right", False),
    curses.KEY_SR: ("up", True),
    curses.KEY_SF: ("down", True),
    curses.KEY_SLEFT: ("left", True),
    curses.KEY_SRIGHT: ("right", True),
    curses.KEY_ENTER: ("enter", False),
    10: ("enter", False),
    13: ("enter", False),
    9: ("tab", False),
    27: ("escape", False),
    curses.KEY_F2: ("f2", False),
    curses.KEY_BACKSPACE: ("backspace", False),
    127: ("backspace", False),
    8: ("backspace", False),
    curses.KEY_DC: ("delete", False),
}

HELP_LINES = [
    "Navigation",
    "  arrows / shift+arrows   move / extend selection",
    "  mouse click, drag       select cell / range (shift+click extends)",
    "  PgUp / PgDn             scroll",
    "  Esc                     clear selection (cancel edit while editing)",
    "Editing",
    "  type                    replace cell content",
    "  Enter / F2 / dbl-click  edit keeping content",
    "  Enter / Tab             commit and move down / right",
    "  Del                     clear selected cells",
    "Workbook",
    "  Ctrl+Z / Ctrl+Y         undo / redo",
    "  Ctrl+B                  toggle bold on selection",
    "  F3 / F4                 sort selection ascending / descending",
    "  Ctrl+N, F5 / F6         new sheet, previous / next sheet",
    "  Ctrl+G                  go to address or range",
    "  Ctrl+F                  find text (repeat for the next match)",
    "  F7                      aggregate query, e.g. sum(Revenue) by Region",
    "  F8                      chart from selection",
    "  F9 / F10                selection context / recent messages",
    "  Ctrl+S                  save     Ctrl+Q  quit",
]


def translate_key(ch):
    """curses key code -> (key name, shift) for GridController, or None."""
    if ch in KEY_NAMES:
        return KEY_NAMES[ch]
    # codes from KEY_MIN up are function keys, not characters
    if 32 <= ch < curses.KEY_MIN:
        text = chr(ch)
        if text.isprintable():
            return text, False
    return None


class Orchestrator:
    def __init__(self, stdscr, app_state):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.timeout(100)
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        curses.mouseinterval(150)

        ensure_config_dirs()
        self.config = load_config()

        self.state = app_state
        self.layout = ScreenLayout(stdscr)
        self.exit_requested = False

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        grid_cfg = self.config["GRID"]
        self.controller = GridController(
            self.state.sheet,
            set_status_cb=self._set_status,
            on_selection_change=self._on_selection_change,
            on_cell_commit=self._on_cell_commit,
            push_undo_cb=self.state.push_undo,
            viewport_height=max(1, self.layout.table_h - 2),
            **grid_cfg,
        )
        self.grid = GridPane(self.controller)
        self.selection_label = ""
        self.selection_summary = ""
        self.finder = FindSession()

        self.overlay = OverlayView()
        self.prompt = PromptLine(self._set_status)

        self.messages = MessageStore(MESSAGES_PATH, max_items=self.config["MESSAGES_MAX_ITEMS"])
        self.messages.load()
        self.executor = SheetQueryExecutor(self.state)

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _on_selection_change(self, addresses):
        self.selection_label = describe_selection(addresses)

    def _on_cell_commit(self, address, value):
        logger.debug("commit %s=%r", address, value)

    def _refresh_summary(self):
        sel = self.controller.selection
        summary = summarize_selection(self.state.sheet, sel.anchor, sel.cursor)
        self.selection_summary = format_summary(summary)

    def _rebind_sheet(self):
        if self.controller.sheet is not self.state.sheet:
            self.controller.set_sheet(self.state.sheet)
            self.grid.col_offset = 0
            return
        self.controller.refresh_bounds()

    # ---------------- UI ----------------

    def redraw(self):
        try:
            curses.curs_set(1 if self.prompt.active else 0)
        except curses.error:
            pass

        if self.overlay.visible:
            self.overlay.draw(self.layout.table_win)
        else:
            self.grid.draw(self.layout.table_win, active=True)

        tw = self.layout.tabs_win
        tw.erase()
        _, w = tw.getmaxyx()
        names = self.state.get_sheet_names()
        active_idx = self.state.sheet_order.index(self.state.active_sheet)
        try:
            tw.addnstr(0, 0, render_tabs(names, active_idx, w), w - 1)
        except curses.error:
            pass
        tw.refresh()

        sw = self.layout.status_win
        if self.prompt.active:
            self.prompt.draw(sw)
            return
        sw.erase()
        _, w = sw.getmaxyx()
        editor = self.controller.editor
        sheet = self.state.sheet
        text = render_status(
            {
                "status_msg": self.status_msg,
                "status_until": self.status_msg_until,
                "editing": editor.is_editing,
                "edit_address": editor.address,
                "edit_buffer": editor.buffer,
                "selection_label": self.selection_label,
                "selection_summary": self.selection_summary,
                "file_path": self.state.file_path,
                "sheet_shape": f"{sheet.row_count}x{sheet.col_count}",
                "window": self.controller.viewport.visible_rows(),
                "ai_mode": self.state.ai_mode,
            },
            w,
        )
        try:
            sw.addnstr(0, 0, text, w - 1)
        except curses.error:
            pass
        sw.refresh()

    # ---------------- commands ----------------

    def _undo(self, redo=False):
        self.controller.blur()
        done = self.state.redo() if redo else self.state.undo()
        if not done:
            self._set_status("Nothing to redo" if redo else "Nothing to undo", 2)
            return
        self._rebind_sheet()
        self._set_status("Redone" if redo else "Undone", 2)

    def _switch_sheet(self, delta):
        self.controller.blur()
        self.state.switch_sheet(delta)
        self._rebind_sheet()
        self._set_status(f"Sheet: {self.state.sheet.name}", 2)

    def _add_sheet(self):
        self.controller.blur()
        self.state.add_sheet()
        self._rebind_sheet()
        self._set_status(f"Added {self.state.sheet.name}", 2)

    def _toggle_bold(self):
        anchor = self.controller.selection.anchor
        cell = self.state.sheet.get(anchor) if anchor else None
        bold = not (cell is not None and cell.style.bold)
        self.controller.format_selection(bold=bold)

    def _reveal(self, anchor, cursor):
        self.controller.click(anchor)
        if cursor != anchor:
            self.controller.click(cursor, shift=True)
        self.controller.viewport.ensure_row_visible(decode(cursor)[0])

    def _goto(self, text):
        try:
            anchor, cursor = parse_range(text)
        except ValueError as exc:
            self._set_status(str(exc), 3)
            return False
        self._reveal(anchor, cursor)
        return True

    def _find(self, text):
        hit = self.finder.search(self.state.sheet, text)
        if hit is None:
            self._set_status(f'No results found for "{text}"', 3)
            return False
        address, _ = hit
        self._reveal(address, address)
        total = len(self.finder.matches)
        self._set_status(f"{address}: match {self.finder.index + 1} of {total} (Ctrl+F for next)", 3)
        return True

    def _run_aggregate(self, text):
        self.messages.add("user", text)
        try:
            rows = self.executor.execute(text)
        except (AggregateSyntaxError, KeyError, TypeError) as exc:
            self._set_status(f"Query failed: {exc}", 4)
            return False
        lines = []
        for row in rows:
            lines.append(", ".join(f"{k}: {v}" for k, v in row.items()))
        self.messages.add("ai", "\n".join(lines) or "(no rows)")
        self.overlay.open(lines or ["(no rows)"], title=f" {text}")
        return True

    def _make_chart(self, kind):
        addresses = self.controller.selection.addresses()
        try:
            chart = chart_from_selection(kind, addresses, self.state.sheet)
        except ValueError as exc:
            self._set_status(str(exc), 3)
            return False
        chart_id = self.state.add_chart(chart)
        self.messages.add("ai", chart.title, chart={"id": chart_id, "kind": chart.kind.value})
        self._set_status(f"{chart.title} ({len(chart.data)} points)", 3)
        return True

    def _show_selection_context(self):
        ctx = create_selection_context(self.controller.selection.addresses(), self.state.sheet)
        if ctx is None:
            self._set_status("No selection", 2)
            return
        self.overlay.open(format_selection_context(ctx), title=" Selection context")

    def _show_messages(self):
        lines = []
        for msg in self.messages.recent():
            lines.append(f"[{msg.kind}] {msg.content}")
        self.overlay.open(lines or ["(no messages)"], title=" Recent messages")

    def _save(self):
        self.controller.blur()
        handler = self.state.file_handler
        if handler is None:
            self.prompt.start("Save as: ", self._save_as)
            return
        try:
            handler.save([self.state.sheets[s] for s in self.state.sheet_order])
            self._set_status(f"Saved {self.state.file_path}", 3)
        except (OSError, ValueError) as exc:
            self._set_status(f"Save failed: {exc}"[: self.layout.W - 2], 4)

    def _save_as(self, path):
        try:
            handler = FileTypeHandler(path)
        except UnsupportedFileType as exc:
            self._set_status(str(exc), 4)
            return False
        self.state.file_handler = handler
        self.state.file_path = path
        self._save()
        return True

    # ---------------- mouse ----------------

    def _handle_mouse(self):
        try:
            _, x, y, _, bstate = curses.getmouse()
        except curses.error:
            return
        ctl = self.controller
        address = self.grid.address_at(y, x) if y < self.layout.table_h else None
        shift = bool(bstate & curses.BUTTON_SHIFT)

        if bstate & curses.BUTTON4_PRESSED:
            ctl.scroll(ctl.viewport.scroll_top - 3 * ctl.viewport.row_height)
            return
        if bstate & getattr(curses, "BUTTON5_PRESSED", 0):
            ctl.scroll(ctl.viewport.scroll_top + 3 * ctl.viewport.row_height)
            return

        if bstate & curses.BUTTON1_DOUBLE_CLICKED and address:
            ctl.double_click(address)
        elif bstate & curses.BUTTON1_PRESSED:
            if address is None:
                ctl.click_outside()
            else:
                ctl.pointer_down(address, shift=shift)
        elif bstate & curses.BUTTON1_RELEASED:
            if address is not None:
                ctl.pointer_enter(address)
            ctl.pointer_up()
        elif bstate & curses.BUTTON1_CLICKED:
            if address is None:
                ctl.click_outside()
            else:
                ctl.click(address, shift=shift)
        elif bstate & curses.REPORT_MOUSE_POSITION and address is not None:
            ctl.pointer_enter(address)

    # ---------------- main loop ----------------

    def handle_key(self, ch):
        ctl = self.controller

        if ch == curses.KEY_MOUSE:
            self._handle_mouse()
            return
        if ctl.selection.dragging:
            # pointer-up never arrived
            ctl.cancel_drag()
        if ch != 6:
            # any other command ends the match cycle
            self.finder.reset()

        if ch in (3, 17, 24):  # Ctrl+C / Ctrl+Q / Ctrl+X
            ctl.blur()
            self.exit_requested = True
            return
        if ch == 19:  # Ctrl+S
            self._save()
        elif ch == 26:  # Ctrl+Z
            self._undo()
        elif ch == 25:  # Ctrl+Y
            self._undo(redo=True)
        elif ch == 2:  # Ctrl+B
            self._toggle_bold()
        elif ch == 14:  # Ctrl+N
            self._add_sheet()
        elif ch == 7:  # Ctrl+G
            self.prompt.start("Go to: ", self._goto)
        elif ch == 6:  # Ctrl+F
            ctl.blur()
            self.prompt.start("Find: ", self._find, initial=self.finder.query)
        elif ch == curses.KEY_F1:
            self.overlay.open(HELP_LINES, title=" Shortcuts")
        elif ch == curses.KEY_F3:
            ctl.sort_selection()
        elif ch == curses.KEY_F4:
            ctl.sort_selection(descending=True)
        elif ch == curses.KEY_F5:
            self._switch_sheet(-1)
        elif ch == curses.KEY_F6:
            self._switch_sheet(1)
        elif ch == curses.KEY_F7:
            ctl.blur()
            self.prompt.start("Aggregate: ", self._run_aggregate)
        elif ch == curses.KEY_F8:
            ctl.blur()
            self.prompt.start("Chart type: ", self._make_chart, initial="bar")
        elif ch == curses.KEY_F9:
            self._show_selection_context()
        elif ch == curses.KEY_F10:
            self._show_messages()
        elif ch == curses.KEY_NPAGE:
            ctl.scroll(ctl.viewport.scroll_top + ctl.viewport.viewport_height_px)
        elif ch == curses.KEY_PPAGE:
            ctl.scroll(ctl.viewport.scroll_top - ctl.viewport.viewport_height_px)
        else:
            key = translate_key(ch)
            if key is not None:
                name, shift = key
                ctl.handle_key(name, shift=shift)

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self._refresh_summary()
        self.redraw()

        while not self.exit_requested:
            ch = self.stdscr.getch()

            if ch == -1:
                self.redraw()
                continue

            if ch == curses.KEY_RESIZE:
                self.layout.resize()
                self.redraw()
                continue

            if self.overlay.visible:
                self.overlay.handle_key(ch, page_rows=max(1, self.layout.table_h - 2))
            elif self.prompt.active:
                self.prompt.handle_key(ch)
            else:
                self.handle_key(ch)

            self._refresh_summary()
            self.redraw()

        self.controller.cancel_drag()
