import logging
from typing import Any, Callable, Optional

from cell_coercion import coerce_cell_value
from errors import GridError, InvalidState

logger = logging.getLogger(__name__)

NOT_EDITING = "not_editing"
EDITING = "editing"


class CellEditor:
    """Transient edit session for one cell: begin, buffer, commit or cancel."""

    def __init__(
        self,
        sheet,
        selection=None,
        writer: Callable[[str, Any], Any] | None = None,
        validator: Callable[[str, Any], None] | None = None,
        on_commit: Callable[[str, Any], None] | None = None,
        set_status: Callable[[str, float], None] | None = None,
        coerce_numbers: bool = False,
    ):
        self.sheet = sheet
        self.selection = selection
        self._writer = writer
        self._validator = validator
        self.on_commit = on_commit
        self._set_status = set_status or (lambda *_: None)
        self.coerce_numbers = coerce_numbers

        self.address: Optional[str] = None
        self.buffer: str = ""

    # ---------- queries ----------
    @property
    def state(self) -> str:
        return EDITING if self.address is not None else NOT_EDITING

    @property
    def is_editing(self) -> bool:
        return self.address is not None

    def _invalid(self, op: str):
        logger.warning("%s", InvalidState(f"{op} called while not editing"))
        return None

    # ---------- begin ----------
    def begin_edit(self, address: str, initial_text: str = "", force: bool = False) -> bool:
        if self.address == address:
            return False
        if self.is_editing and self.commit() is None:
            # previous cell could not be committed; keep it open
            return False
        if not force and self.selection is not None:
            if not (self.selection.is_single() and self.selection.anchor == address):
                logger.warning(
                    "%s", InvalidState(f"begin_edit({address}) without single selection")
                )
                return False
        self.address = address
        self.buffer = "" if initial_text is None else str(initial_text)
        return True

    def begin_replace(self, address: str, char: str) -> bool:
        """Typing a printable character replaces the cell content."""
        return self.begin_edit(address, char)

    def begin_preserve(self, address: str) -> bool:
        """F2 / double-click / Enter keep the current value in the buffer."""
        return self.begin_edit(address, self.sheet.text_at(address))

    # ---------- session ----------
    def update_buffer(self, text: str) -> bool:
        if not self.is_editing:
            return self._invalid("update_buffer")
        self.buffer = "" if text is None else str(text)
        return True

    def append_text(self, text: str) -> bool:
        if not self.is_editing:
            return self._invalid("append_text")
        self.buffer += text
        return True

    def backspace(self) -> bool:
        if not self.is_editing:
            return self._invalid("backspace")
        self.buffer = self.buffer[:-1]
        return True

    def commit(self) -> tuple[str, Any] | None:
        if not self.is_editing:
            return self._invalid("commit")
        address = self.address
        value = coerce_cell_value(
            self.sheet.value_at(address), self.buffer, coerce_numbers=self.coerce_numbers
        )
        try:
            if self._validator is not None:
                self._validator(address, value)
            if self._writer is not None:
                self._writer(address, value)
            else:
                self.sheet.update_cell(address, value)
        except (ValueError, GridError) as exc:
            self._set_status(f"Rejected value for {address}: {exc}", 3)
            return None

        self.address = None
        self.buffer = ""
        if self.on_commit is not None:
            self.on_commit(address, value)
        return address, value

    def commit_if_editing(self) -> tuple[str, Any] | None:
        if not self.is_editing:
            return None
        return self.commit()

    def cancel(self) -> bool:
        if not self.is_editing:
            return self._invalid("cancel")
        self.address = None
        self.buffer = ""
        return True
