import re
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

OPS = {
    "sum": "sum",
    "average": "average",
    "avg": "average",
    "mean": "average",
    "count": "count",
    "min": "min",
    "max": "max",
}

_QUERY_RE = re.compile(
    r"^\s*(?P<op>[A-Za-z]+)\s*\(\s*(?P<column>.*?)\s*\)\s*(?:by\s+(?P<group>.+?))?\s*$",
    re.IGNORECASE,
)


class AggregateSyntaxError(ValueError):
    pass


@dataclass(frozen=True)
class AggregateQuery:
    op: str
    column: str  # "*" only for count
    group_by: Optional[str] = None
    table: Optional[str] = None


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return text[1:-1]
    return text


def parse_aggregate(text: str, table: str | None = None) -> AggregateQuery:
    """`sum(Sales Revenue)`, `avg("Units Sold") by Region`, `count(*)`."""
    if not isinstance(text, str) or not text.strip():
        raise AggregateSyntaxError("empty aggregate")
    match = _QUERY_RE.match(text)
    if not match:
        raise AggregateSyntaxError(f"expected op(column) [by column]: {text!r}")
    op = OPS.get(match.group("op").lower())
    if op is None:
        supported = ", ".join(sorted(set(OPS.values())))
        raise AggregateSyntaxError(f"unsupported operation {match.group('op')!r} (use {supported})")
    column = _unquote(match.group("column"))
    if not column:
        raise AggregateSyntaxError("missing column")
    if column == "*" and op != "count":
        raise AggregateSyntaxError(f"{op} needs a column")
    group = match.group("group")
    group = _unquote(group) if group else None
    return AggregateQuery(op=op, column=column, group_by=group, table=table)


def _reduce(op: str, series: pd.Series):
    if op == "count":
        return int(series.notna().sum())
    numeric = pd.to_numeric(series, errors="coerce").dropna()
    if numeric.empty:
        return np.nan
    if op == "sum":
        return float(numeric.sum())
    if op == "average":
        return float(numeric.mean())
    if op == "min":
        return float(numeric.min())
    return float(numeric.max())


def evaluate(query: AggregateQuery, df: pd.DataFrame) -> list[dict]:
    if query.column != "*" and query.column not in df.columns:
        raise KeyError(f"Unknown column: {query.column}")
    if query.group_by is not None and query.group_by not in df.columns:
        raise KeyError(f"Unknown column: {query.group_by}")

    label = f"{query.op}({query.column})"
    if query.column == "*":
        target = pd.Series(np.ones(len(df)), index=df.index)
    else:
        target = df[query.column]

    if query.group_by is None:
        return [{label: _reduce(query.op, target)}]

    rows = []
    keys = df[query.group_by]
    for key in pd.unique(keys.dropna()):
        rows.append({query.group_by: key, label: _reduce(query.op, target[keys == key])})
    return rows
