from dataclasses import dataclass, field, replace
from typing import Any, Optional

import numpy as np
import pandas as pd

from cell_address import MAX_COLS, MAX_ROWS, column_letters, decode, encode
from cell_coercion import display_text
from errors import OutOfBounds

DEFAULT_ROW_COUNT = 100
DEFAULT_COL_COUNT = 26


@dataclass(frozen=True)
class CellStyle:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    align: str = "left"  # left | center | right
    text_color: Optional[str] = None
    background_color: Optional[str] = None


@dataclass
class Cell:
    value: Any = None
    style: CellStyle = field(default_factory=CellStyle)

    @property
    def text(self) -> str:
        return display_text(self.value)


def _scalar(value):
    if isinstance(value, np.generic):
        value = value.item()
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _is_blank(value) -> bool:
    return value is None or value == ""


class Sheet:
    def __init__(
        self,
        name: str,
        row_count: int = DEFAULT_ROW_COUNT,
        col_count: int = DEFAULT_COL_COUNT,
        cells: dict[str, Cell] | None = None,
    ):
        self.name = name
        self.row_count = max(1, min(MAX_ROWS, int(row_count)))
        self.col_count = max(1, min(MAX_COLS, int(col_count)))
        self.cells: dict[str, Cell] = {}
        for address, cell in (cells or {}).items():
            if not isinstance(cell, Cell):
                cell = Cell(value=cell)
            self._check(address)
            self.cells[address] = cell

    def __repr__(self):
        return f"Sheet({self.name!r}, {self.row_count}x{self.col_count}, {len(self.cells)} cells)"

    # ---------- bounds ----------
    def _check(self, address: str) -> tuple[int, int]:
        row, col = decode(address)
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self.row_count, self.col_count)
        return row, col

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.row_count and 0 <= col < self.col_count

    def clamp(self, row: int, col: int) -> tuple[int, int]:
        row = max(0, min(self.row_count - 1, row))
        col = max(0, min(self.col_count - 1, col))
        return row, col

    def append_rows(self, count: int) -> int:
        if count <= 0:
            return self.row_count
        self.row_count = min(MAX_ROWS, self.row_count + count)
        return self.row_count

    def grow_cols(self, count: int) -> int:
        if count <= 0:
            return self.col_count
        self.col_count = min(MAX_COLS, self.col_count + count)
        return self.col_count

    def resize(self, row_count: int, col_count: int):
        row_count = max(1, min(MAX_ROWS, row_count))
        col_count = max(1, min(MAX_COLS, col_count))
        for address in self.cells:
            row, col = decode(address)
            if row >= row_count or col >= col_count:
                raise OutOfBounds(row, col, row_count, col_count)
        self.row_count = row_count
        self.col_count = col_count

    # ---------- cell access ----------
    def get(self, address: str) -> Cell | None:
        return self.cells.get(address)

    def value_at(self, address: str):
        cell = self.cells.get(address)
        return cell.value if cell is not None else None

    def text_at(self, address: str) -> str:
        cell = self.cells.get(address)
        return cell.text if cell is not None else ""

    def update_cell(self, address: str, value) -> Cell:
        self._check(address)
        cell = self.cells.get(address)
        if _is_blank(value):
            # a cleared cell without formatting leaves the sparse map
            if cell is None or cell.style == CellStyle():
                self.cells.pop(address, None)
                return Cell()
            cell.value = None
            return cell
        if cell is None:
            cell = Cell(value=value)
            self.cells[address] = cell
        else:
            cell.value = value
        return cell

    def format_cells(self, addresses, **style) -> None:
        for address in addresses:
            self._check(address)
        for address in addresses:
            cell = self.cells.get(address)
            if cell is None:
                cell = self.cells[address] = Cell()
            cell.style = replace(cell.style, **style)

    def apply_updates(self, updates: dict[str, Any]) -> list[str]:
        """Bulk value write (paste, AI-applied updates). Returns touched addresses."""
        for address in updates:
            self._check(address)
        for address, value in updates.items():
            self.update_cell(address, value)
        return list(updates)

    def clear(self):
        self.cells = {}

    # ---------- bulk data ----------
    def load_rows(self, rows) -> None:
        """Replace every cell with the values of a 2D list; bounds grow to fit."""
        rows = [list(r) for r in rows or []]
        height = len(rows)
        width = max((len(r) for r in rows), default=0)
        if height > self.row_count:
            self.append_rows(height - self.row_count)
        if width > self.col_count:
            self.grow_cols(width - self.col_count)
        cells = {}
        for r, row in enumerate(rows[: self.row_count]):
            for c, value in enumerate(row[: self.col_count]):
                value = _scalar(value)
                if _is_blank(value):
                    continue
                cells[encode(r, c)] = Cell(value=value)
        self.cells = cells

    def used_extent(self) -> tuple[int, int]:
        """(rows, cols) spanned by non-empty cells."""
        max_r = max_c = -1
        for address, cell in self.cells.items():
            if _is_blank(cell.value):
                continue
            r, c = decode(address)
            max_r = max(max_r, r)
            max_c = max(max_c, c)
        return max_r + 1, max_c + 1

    def to_rows(self) -> list[list]:
        height, width = self.used_extent()
        rows = [[None] * width for _ in range(height)]
        for address, cell in self.cells.items():
            if _is_blank(cell.value):
                continue
            r, c = decode(address)
            rows[r][c] = cell.value
        return rows

    def header_names(self) -> list[str]:
        """Canonical column names: row-1 text, or the column letter when blank.

        Names are unique. A repeated name gets a numeric suffix (``x``, ``x_2``)
        so every column stays addressable by name in queries and frames.
        """
        _, width = self.used_extent()
        names = []
        seen = set()
        for c in range(width):
            base = self.text_at(encode(0, c)).strip() or column_letters(c)
            name = base
            n = 2
            while name in seen:
                name = f"{base}_{n}"
                n += 1
            seen.add(name)
            names.append(name)
        return names

    def column_for_header(self, name: str) -> int | None:
        for idx, header in enumerate(self.header_names()):
            if header == name:
                return idx
        return None

    def to_frame(self) -> pd.DataFrame:
        rows = self.to_rows()
        headers = self.header_names()
        body = [[np.nan if v is None else v for v in row] for row in rows[1:]]
        df = pd.DataFrame(body, columns=headers)
        for col in df.columns:
            try:
                df[col] = pd.to_numeric(df[col])
            except (ValueError, TypeError):
                pass
        return df

    @classmethod
    def from_frame(cls, name: str, df: pd.DataFrame) -> "Sheet":
        header = [str(c) for c in df.columns]
        rows = [header] + df.astype(object).values.tolist()
        sheet = cls(
            name,
            row_count=max(DEFAULT_ROW_COUNT, len(rows)),
            col_count=max(DEFAULT_COL_COUNT, len(header)),
        )
        sheet.load_rows(rows)
        return sheet

    # ---------- sort ----------
    def sort_range(self, addresses, key_col: int, descending: bool = False) -> None:
        """Reorder the rows of a rectangular range by the values in key_col."""
        positions = [self._check(a) for a in addresses]
        if not positions:
            return
        r0 = min(r for r, _ in positions)
        r1 = max(r for r, _ in positions)
        c0 = min(c for _, c in positions)
        c1 = max(c for _, c in positions)
        if not c0 <= key_col <= c1:
            raise OutOfBounds(r0, key_col, self.row_count, self.col_count)

        block = []
        for r in range(r0, r1 + 1):
            block.append([self.cells.get(encode(r, c)) for c in range(c0, c1 + 1)])

        def sort_key(row_cells):
            cell = row_cells[key_col - c0]
            value = cell.value if cell is not None else None
            if value is None or value == "":
                return (2, 0, "")
            if pd.api.types.is_number(value) and not pd.api.types.is_bool(value):
                return (0, value, "")
            return (1, 0, str(value).lower())

        filled = [row for row in block if sort_key(row)[0] != 2]
        empty = [row for row in block if sort_key(row)[0] == 2]
        filled.sort(key=sort_key, reverse=descending)
        ordered = filled + empty

        for offset, row_cells in enumerate(ordered):
            r = r0 + offset
            for c, cell in zip(range(c0, c1 + 1), row_cells):
                address = encode(r, c)
                if cell is None:
                    self.cells.pop(address, None)
                else:
                    self.cells[address] = cell

    def copy(self) -> "Sheet":
        cells = {a: Cell(value=c.value, style=c.style) for a, c in self.cells.items()}
        return Sheet(self.name, self.row_count, self.col_count, cells)
