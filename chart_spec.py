from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import pandas as pd

from cell_address import encode
from cell_range import bounding_rect, describe_selection


class ChartKind(str, Enum):
    BAR = "bar"
    LINE = "line"
    AREA = "area"
    PIE = "pie"
    SCATTER = "scatter"

    @classmethod
    def parse(cls, text) -> "ChartKind":
        if isinstance(text, ChartKind):
            return text
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            supported = ", ".join(k.value for k in cls)
            raise ValueError(f"Unsupported chart type {text!r} (use {supported})") from None


@dataclass(frozen=True)
class AxisChartConfig:
    """bar / line / area"""

    x_key: str
    y_keys: tuple[str, ...]
    stacked: bool = False
    value_format: str = "number"  # number | currency | percentage


@dataclass(frozen=True)
class PieChartConfig:
    label_key: str
    value_key: str
    donut: bool = False


@dataclass(frozen=True)
class ScatterChartConfig:
    x_key: str
    y_key: str


ChartConfig = Union[AxisChartConfig, PieChartConfig, ScatterChartConfig]

_CONFIG_TYPES = {
    ChartKind.BAR: AxisChartConfig,
    ChartKind.LINE: AxisChartConfig,
    ChartKind.AREA: AxisChartConfig,
    ChartKind.PIE: PieChartConfig,
    ChartKind.SCATTER: ScatterChartConfig,
}


@dataclass(frozen=True)
class Chart:
    kind: ChartKind
    title: str
    config: ChartConfig
    data: tuple = field(default_factory=tuple)
    range: str = ""
    minimized: bool = False
    chart_id: Optional[str] = None

    def __post_init__(self):
        expected = _CONFIG_TYPES[self.kind]
        if not isinstance(self.config, expected):
            raise TypeError(
                f"{self.kind.value} chart needs {expected.__name__}, got {type(self.config).__name__}"
            )


def _numeric(value) -> Any:
    if value is None or value == "":
        return None
    if pd.api.types.is_number(value) and not pd.api.types.is_bool(value):
        return value
    text = str(value).strip().replace(",", "").rstrip("%")
    try:
        return float(text)
    except ValueError:
        return None


def _default_config(kind: ChartKind, headers: list[str]) -> ChartConfig:
    label = headers[0]
    values = headers[1:] or headers[:1]
    if kind is ChartKind.PIE:
        return PieChartConfig(label_key=label, value_key=values[0])
    if kind is ChartKind.SCATTER:
        return ScatterChartConfig(x_key=label, y_key=values[0])
    return AxisChartConfig(x_key=label, y_keys=tuple(values))


def chart_from_selection(kind, addresses, sheet, title: str = "", config: ChartConfig | None = None) -> Chart:
    """Build a chart from a rectangular selection whose first row holds headers.

    The first column is the label/x column; remaining columns are series.
    Non-numeric series values become None.
    """
    kind = ChartKind.parse(kind)
    rect = bounding_rect(addresses)
    if rect is None:
        raise ValueError("Chart needs a selection")
    r0, r1, c0, c1 = rect
    if r1 == r0:
        raise ValueError("Chart needs a header row and at least one data row")

    headers = []
    for c in range(c0, c1 + 1):
        text = sheet.text_at(encode(r0, c)).strip()
        headers.append(text or f"series_{c - c0 + 1}")

    rows = []
    for r in range(r0 + 1, r1 + 1):
        record = {}
        for idx, c in enumerate(range(c0, c1 + 1)):
            value = sheet.value_at(encode(r, c))
            if idx == 0 and kind is not ChartKind.SCATTER:
                record[headers[idx]] = "" if value is None else str(value)
            else:
                record[headers[idx]] = _numeric(value)
        if any(v not in (None, "") for v in record.values()):
            rows.append(record)

    return Chart(
        kind=kind,
        title=title or f"{kind.value.title()} of {describe_selection(addresses)}",
        config=config or _default_config(kind, headers),
        data=tuple(rows),
        range=describe_selection(addresses),
    )
