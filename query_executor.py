from typing import Protocol

import pandas as pd

from aggregate import AggregateQuery, evaluate, parse_aggregate


class QueryExecutor(Protocol):
    def execute(self, query) -> list[dict]: ...


class FrameQueryExecutor:
    """Runs aggregate queries against named pandas frames."""

    def __init__(self, frames: dict[str, pd.DataFrame] | None = None, default_table: str | None = None):
        self.frames: dict[str, pd.DataFrame] = dict(frames or {})
        self.default_table = default_table or next(iter(self.frames), None)

    def register(self, name: str, df: pd.DataFrame):
        self.frames[name] = df
        if self.default_table is None:
            self.default_table = name

    def tables(self) -> list[str]:
        return list(self.frames)

    def _frame(self, table: str | None) -> pd.DataFrame:
        name = table or self.default_table
        if name is None or name not in self.frames:
            raise KeyError(f"Unknown table: {name}")
        return self.frames[name]

    def execute(self, query) -> list[dict]:
        if isinstance(query, str):
            query = parse_aggregate(query)
        if not isinstance(query, AggregateQuery):
            raise TypeError(f"Unsupported query type: {type(query).__name__}")
        return evaluate(query, self._frame(query.table))


class SheetQueryExecutor(FrameQueryExecutor):
    """One table per workbook sheet, rebuilt from the live cells on each call."""

    def __init__(self, state):
        super().__init__()
        self.state = state

    def _frame(self, table: str | None) -> pd.DataFrame:
        if table is None:
            return self.state.sheet.to_frame()
        sheet = self.state.find_sheet(table)
        if sheet is None:
            raise KeyError(f"Unknown table: {table}")
        return sheet.to_frame()

    def tables(self) -> list[str]:
        return self.state.get_sheet_names()
