import logging
from dataclasses import dataclass
from typing import Callable, Optional

from cell_address import decode, encode
from cell_range import bounding_rect, cells_in_range, is_rectangle
from errors import OutOfBounds

logger = logging.getLogger(__name__)

EMPTY = "empty"
SINGLE = "single"
RANGE = "range"

ARROWS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


@dataclass(frozen=True)
class Selection:
    kind: str = EMPTY
    anchor: Optional[str] = None
    cursor: Optional[str] = None

    @classmethod
    def empty(cls) -> "Selection":
        return cls()

    @classmethod
    def single(cls, address: str) -> "Selection":
        return cls(SINGLE, address, address)

    @classmethod
    def range(cls, anchor: str, cursor: str) -> "Selection":
        if anchor == cursor:
            return cls.single(anchor)
        return cls(RANGE, anchor, cursor)

    def addresses(self) -> list[str]:
        if self.kind == EMPTY:
            return []
        if self.kind == SINGLE:
            return [self.anchor]
        return cells_in_range(self.anchor, self.cursor)

    def __repr__(self):
        if self.kind == EMPTY:
            return "Empty"
        if self.kind == SINGLE:
            return f"Single({self.anchor})"
        return f"Range({self.anchor}, {self.cursor})"


class GridSelection:
    """Selection state machine driven by pointer and keyboard events.

    `sheet` only needs `row_count` / `col_count`. `before_transition` is called
    ahead of every transition so a pending edit can be committed first, and
    `on_change` receives the resolved address list whenever the visible
    selection changes.
    """

    def __init__(
        self,
        sheet,
        on_change: Callable[[list[str]], None] | None = None,
        before_transition: Callable[[], None] | None = None,
    ):
        self.sheet = sheet
        self.on_change = on_change
        self.before_transition = before_transition
        self.state = Selection.empty()

        # drag bookkeeping
        self.dragging = False
        self._drag_anchor: Optional[str] = None
        self._drag_origin: Optional[Selection] = None

    # ---------- queries ----------
    @property
    def kind(self) -> str:
        return self.state.kind

    @property
    def anchor(self) -> Optional[str]:
        return self.state.anchor

    @property
    def cursor(self) -> Optional[str]:
        return self.state.cursor

    def addresses(self) -> list[str]:
        return self.state.addresses()

    def is_empty(self) -> bool:
        return self.state.kind == EMPTY

    def is_single(self) -> bool:
        return self.state.kind == SINGLE

    def is_range(self) -> bool:
        return self.state.kind == RANGE

    # ---------- internals ----------
    def _prepare(self):
        if self.before_transition is not None:
            self.before_transition()

    def _checked(self, row: int, col: int) -> str:
        if not (0 <= row < self.sheet.row_count and 0 <= col < self.sheet.col_count):
            raise OutOfBounds(row, col, self.sheet.row_count, self.sheet.col_count)
        return encode(row, col)

    def _clamped(self, row: int, col: int) -> str:
        try:
            return self._checked(row, col)
        except OutOfBounds as exc:
            logger.debug("clamping %s", exc)
            row = max(0, min(self.sheet.row_count - 1, row))
            col = max(0, min(self.sheet.col_count - 1, col))
            return encode(row, col)

    def _normalize(self, address: str) -> str:
        row, col = decode(address)
        return self._clamped(row, col)

    def _set(self, new_state: Selection) -> bool:
        if new_state == self.state:
            return False
        self.state = new_state
        if self.on_change is not None:
            self.on_change(new_state.addresses())
        return True

    # ---------- pointer ----------
    def click(self, address: str) -> bool:
        self._prepare()
        return self._set(Selection.single(self._normalize(address)))

    def shift_click(self, address: str) -> bool:
        self._prepare()
        address = self._normalize(address)
        if self.state.kind == EMPTY:
            return self._set(Selection.single(address))
        return self._set(Selection.range(self.state.anchor, address))

    def pointer_down(self, address: str, shift: bool = False) -> bool:
        if shift:
            return self.shift_click(address)
        self._prepare()
        address = self._normalize(address)
        self._drag_origin = self.state
        self._drag_anchor = address
        self.dragging = True
        return self._set(Selection.single(address))

    def pointer_enter(self, address: str) -> bool:
        if not self.dragging or self._drag_anchor is None:
            return False
        return self._set(Selection.range(self._drag_anchor, self._normalize(address)))

    def pointer_up(self) -> None:
        self.dragging = False
        self._drag_anchor = None
        self._drag_origin = None

    def cancel_drag(self) -> bool:
        """Global pointer-up fallback: revert an unfinished drag."""
        if not self.dragging:
            return False
        origin = self._drag_origin or Selection.empty()
        self.pointer_up()
        return self._set(origin)

    def click_outside(self) -> bool:
        self._prepare()
        self.pointer_up()
        return self._set(Selection.empty())

    # ---------- keyboard ----------
    def arrow(self, direction: str, shift: bool = False) -> bool:
        if direction not in ARROWS or self.state.kind == EMPTY:
            return False
        self._prepare()
        dr, dc = ARROWS[direction]
        row, col = decode(self.state.cursor)
        target = self._clamped(row + dr, col + dc)
        if shift:
            return self._set(Selection.range(self.state.anchor, target))
        return self._set(Selection.single(target))

    def escape(self) -> bool:
        self.pointer_up()
        return self._set(Selection.empty())

    # ---------- host driven ----------
    def move_to(self, address: str) -> bool:
        """Select a single cell without committing (post-commit stepping)."""
        return self._set(Selection.single(self._normalize(address)))

    def select_addresses(self, addresses) -> bool:
        addresses = list(addresses or [])
        self._prepare()
        if not addresses:
            return self._set(Selection.empty())
        if len(addresses) == 1:
            return self._set(Selection.single(self._normalize(addresses[0])))
        if is_rectangle(addresses):
            r0, r1, c0, c1 = bounding_rect(addresses)
            first = decode(addresses[0])
            # keep the first listed corner as the anchor when it is one
            if first == (r1, c1):
                anchor, cursor = (r1, c1), (r0, c0)
            else:
                anchor, cursor = (r0, c0), (r1, c1)
            return self._set(
                Selection.range(self._clamped(*anchor), self._clamped(*cursor))
            )
        logger.debug("ignoring non-rectangular selection of %d cells", len(addresses))
        return False
