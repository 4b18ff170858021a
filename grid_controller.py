import logging
from typing import Any, Callable

from cell_address import decode, encode
from cell_editor import CellEditor
from cell_range import range_size
from selection import GridSelection
from viewport import VirtualViewport

logger = logging.getLogger(__name__)

ARROW_KEYS = {"up", "down", "left", "right"}


class GridController:
    """Routes pointer, keyboard and scroll events to the grid state machines."""

    def __init__(
        self,
        sheet,
        set_status_cb: Callable[[str, float], None] | None = None,
        on_selection_change: Callable[[list[str]], None] | None = None,
        on_cell_commit: Callable[[str, Any], None] | None = None,
        on_request_rows: Callable[[int], None] | None = None,
        push_undo_cb: Callable[[], None] | None = None,
        row_height: int = 1,
        viewport_height: int = 20,
        buffer_rows: int = 5,
        row_batch: int = 100,
        row_ceiling: int = 10_000,
        more_rows_threshold: int = 10,
        max_range_cells: int = 100_000,
        coerce_numbers: bool = False,
    ):
        self.sheet = sheet
        self._set_status = set_status_cb or (lambda *_: None)
        self.on_selection_change = on_selection_change
        self.on_request_rows = on_request_rows or self._append_rows
        self._push_undo = push_undo_cb or (lambda: None)

        self.row_batch = row_batch
        self.row_ceiling = row_ceiling
        self.more_rows_threshold = more_rows_threshold
        self.max_range_cells = max_range_cells

        self.selection = GridSelection(
            sheet,
            on_change=self._selection_changed,
            before_transition=self._commit_pending_edit,
        )
        self.editor = CellEditor(
            sheet,
            selection=self.selection,
            writer=self._write_cell,
            on_commit=on_cell_commit,
            set_status=self._set_status,
            coerce_numbers=coerce_numbers,
        )
        self.viewport = VirtualViewport(
            row_height=row_height,
            total_rows=sheet.row_count,
            viewport_height_px=viewport_height,
            buffer_rows=buffer_rows,
        )

    # ---------- wiring ----------
    def _selection_changed(self, addresses):
        if self.on_selection_change is not None:
            self.on_selection_change(addresses)

    def _commit_pending_edit(self):
        if not self.editor.is_editing:
            return
        self.editor.commit()
        if self.editor.is_editing:
            # rejected values are reported by the editor; never retried
            self.editor.cancel()

    def _write_cell(self, address, value):
        self._push_undo()
        self.sheet.update_cell(address, value)

    def _append_rows(self, count: int):
        self.sheet.append_rows(count)

    def set_sheet(self, sheet):
        self._commit_pending_edit()
        self.selection.pointer_up()
        self.sheet = sheet
        self.selection.sheet = sheet
        self.editor.sheet = sheet
        self.selection.escape()
        self.viewport.update_total_rows(sheet.row_count)
        self.viewport.scroll_to(0)

    def refresh_bounds(self) -> bool:
        """Drop the selection when its anchor or cursor left the sheet bounds.

        Returns True when the selection was dropped.
        """
        self.viewport.update_total_rows(self.sheet.row_count)
        for address in (self.selection.anchor, self.selection.cursor):
            if address is None:
                continue
            row, col = decode(address)
            if not self.sheet.in_bounds(row, col):
                self.selection.escape()
                return True
        return False

    def sync_selection(self, addresses):
        """Adopt a selection pushed in by the host."""
        self.selection.select_addresses(addresses)

    @property
    def active_cell(self):
        # a range edits its anchor cell
        return self.selection.anchor

    def window(self):
        return self.viewport.compute_window()

    # ---------- pointer ----------
    def click(self, address: str, shift: bool = False):
        if shift:
            self.selection.shift_click(address)
        else:
            self.selection.click(address)

    def pointer_down(self, address: str, shift: bool = False):
        self.selection.pointer_down(address, shift=shift)

    def pointer_enter(self, address: str):
        self.selection.pointer_enter(address)

    def pointer_up(self):
        self.selection.pointer_up()

    def cancel_drag(self):
        self.selection.cancel_drag()

    def click_outside(self):
        self.selection.click_outside()

    def double_click(self, address: str):
        self.selection.click(address)
        self.editor.begin_preserve(self.selection.anchor)

    def blur(self):
        """Focus left the editor: commit without moving."""
        self._commit_pending_edit()

    # ---------- keyboard ----------
    def handle_key(self, key: str, shift: bool = False) -> bool:
        if self.editor.is_editing:
            return self._handle_editing_key(key, shift)
        return self._handle_navigation_key(key, shift)

    def _handle_editing_key(self, key: str, shift: bool) -> bool:
        if key in ("enter", "tab"):
            self._commit_and_step(key)
            return True
        if key == "escape":
            self.editor.cancel()
            return True
        if key == "backspace":
            self.editor.backspace()
            return True
        if key in ARROW_KEYS:
            self.selection.arrow(key, shift=shift)
            self._follow_cursor()
            return True
        if len(key) == 1 and key.isprintable():
            self.editor.append_text(key)
            return True
        return False

    def _handle_navigation_key(self, key: str, shift: bool) -> bool:
        if key == "escape":
            self.selection.escape()
            return True
        if self.selection.is_empty():
            return False
        if key in ARROW_KEYS:
            self.selection.arrow(key, shift=shift)
            self._follow_cursor()
            return True
        if key == "tab":
            self.selection.arrow("right")
            self._follow_cursor()
            return True
        if key in ("enter", "f2"):
            self._begin_edit(preserve=True)
            return True
        if key in ("delete", "backspace"):
            self.clear_selection()
            return True
        if len(key) == 1 and key.isprintable():
            self._begin_edit(preserve=False, char=key)
            return True
        return False

    def _begin_edit(self, preserve: bool, char: str = "") -> bool:
        address = self.active_cell
        force = not self.selection.is_single()
        if preserve:
            return self.editor.begin_edit(address, self.sheet.text_at(address), force=force)
        return self.editor.begin_edit(address, char, force=force)

    def _commit_and_step(self, key: str):
        multi = self.selection.is_range()
        result = self.editor.commit()
        if result is None or multi:
            return
        address, _ = result
        row, col = decode(address)
        if key == "enter":
            row += 1
        else:
            col += 1
        row = min(row, self.sheet.row_count - 1)
        col = min(col, self.sheet.col_count - 1)
        self.selection.move_to(encode(row, col))
        self._follow_cursor()

    # ---------- scrolling ----------
    def _follow_cursor(self):
        cursor = self.selection.cursor
        if cursor is None:
            return
        row, _ = decode(cursor)
        self.viewport.ensure_row_visible(row)
        self._maybe_request_rows()

    def scroll(self, scroll_top: int):
        window = self.viewport.scroll_to(scroll_top)
        if self._maybe_request_rows():
            window = self.viewport.compute_window()
        return window

    def resize(self, viewport_height: int):
        self.viewport.resize(viewport_height)
        self._maybe_request_rows()

    def _maybe_request_rows(self) -> bool:
        self.viewport.update_total_rows(self.sheet.row_count)
        if not self.viewport.needs_more_rows(self.more_rows_threshold, self.row_ceiling):
            return False
        batch = min(self.row_batch, self.row_ceiling - self.sheet.row_count)
        if batch <= 0:
            return False
        logger.debug("requesting %d more rows (have %d)", batch, self.sheet.row_count)
        self.on_request_rows(batch)
        self.viewport.update_total_rows(self.sheet.row_count)
        return True

    # ---------- bulk operations ----------
    def _guard_range(self) -> list[str] | None:
        if self.selection.is_empty():
            self._set_status("No selection", 2)
            return None
        size = range_size(self.selection.anchor, self.selection.cursor)
        if size > self.max_range_cells:
            self._set_status(f"Selection too large ({size} cells)", 3)
            return None
        return self.selection.addresses()

    def clear_selection(self) -> bool:
        addresses = self._guard_range()
        if addresses is None:
            return False
        updates = {a: None for a in addresses if self.sheet.value_at(a) is not None}
        if not updates:
            return False
        self._push_undo()
        self.sheet.apply_updates(updates)
        return True

    def sort_selection(self, descending: bool = False) -> bool:
        addresses = self._guard_range()
        if addresses is None:
            return False
        _, key_col = decode(self.selection.anchor)
        self._push_undo()
        self.sheet.sort_range(addresses, key_col, descending=descending)
        return True

    def format_selection(self, **style) -> bool:
        addresses = self._guard_range()
        if addresses is None:
            return False
        self._push_undo()
        self.sheet.format_cells(addresses, **style)
        return True
