import math
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from cell_address import decode
from cell_coercion import display_text
from cell_range import range_bounds


@dataclass(frozen=True)
class SelectionSummary:
    count: int = 0
    count_numbers: int = 0
    total: float = 0
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @property
    def average(self) -> float:
        return self.total / self.count_numbers if self.count_numbers else 0

    @property
    def all_non_numeric(self) -> bool:
        return self.count > 0 and self.count_numbers == 0

    @property
    def mixed(self) -> bool:
        return 0 < self.count_numbers < self.count

    def items(self) -> list[tuple[str, object]]:
        """(label, value) pairs in display order.

        Text-only selections show just the count. Mixed selections add the
        count of numeric cells.
        """
        if self.all_non_numeric:
            return [("Count", self.count)]
        items = [
            ("Sum", self.total),
            ("Average", self.average),
            ("Minimum", self.minimum),
            ("Maximum", self.maximum),
            ("Count", self.count),
        ]
        if self.mixed:
            items.append(("Count Numbers", self.count_numbers))
        return items


def as_number(value) -> Optional[float]:
    """Numeric value of a cell, or None for text, bools and blanks."""
    if value is None or pd.api.types.is_bool(value):
        return None
    if pd.api.types.is_number(value):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def summarize_selection(sheet, anchor: str | None, cursor: str | None) -> SelectionSummary | None:
    """Sum/average/min/max/count over the non-empty cells between two corners.

    Walks the sheet's stored cells rather than the resolved range, so a
    whole-sheet selection costs as much as the number of filled cells.
    """
    if sheet is None or anchor is None or cursor is None:
        return None
    r0, r1, c0, c1 = range_bounds(anchor, cursor)

    count = count_numbers = 0
    total = 0
    minimum = maximum = None
    for address, cell in sheet.cells.items():
        if cell.value is None or cell.value == "":
            continue
        r, c = decode(address)
        if not (r0 <= r <= r1 and c0 <= c <= c1):
            continue
        count += 1
        number = as_number(cell.value)
        if number is None:
            continue
        count_numbers += 1
        total += number
        minimum = number if minimum is None else min(minimum, number)
        maximum = number if maximum is None else max(maximum, number)

    return SelectionSummary(count, count_numbers, total, minimum, maximum)


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        value = round(value, 2)
    return display_text(value)


def format_summary(summary: SelectionSummary | None) -> str:
    if summary is None or summary.count == 0:
        return ""
    short = {"Average": "Avg", "Minimum": "Min", "Maximum": "Max", "Count Numbers": "Nums"}
    return " ".join(f"{short.get(label, label)}={_fmt(value)}" for label, value in summary.items())
