import json
from dataclasses import dataclass, field

import pandas as pd

from cell_address import column_letters, decode
from cell_range import describe_selection


@dataclass
class SelectionContext:
    selected_range: str
    columns: list[str]
    row_count: int
    sample_values: list[dict] = field(default_factory=list)
    selection_type: str = "single"  # single | range | multiple
    has_headers: bool = False
    numeric_columns: list[str] = field(default_factory=list)
    text_columns: list[str] = field(default_factory=list)


def _headers(sheet, cols) -> dict[int, str]:
    # the same unique names queries and frames use
    names = sheet.header_names()
    return {c: names[c] if c < len(names) else column_letters(c) for c in cols}


def _is_numeric(value) -> bool:
    if pd.api.types.is_bool(value):
        return False
    if pd.api.types.is_number(value):
        return True
    try:
        float(str(value).strip())
    except ValueError:
        return False
    return True


def create_selection_context(addresses, sheet, max_samples: int = 3) -> SelectionContext | None:
    addresses = list(addresses or [])
    if not addresses or sheet is None:
        return None

    positions = [decode(a) for a in addresses]
    cols = sorted({c for _, c in positions})
    headers = _headers(sheet, cols)
    columns = [headers[c] for c in cols]

    selected_range = describe_selection(addresses)
    if len(addresses) == 1:
        selection_type = "single"
    elif ":" in selected_range:
        selection_type = "range"
    else:
        selection_type = "multiple"

    has_headers = any(r == 0 for r, _ in positions)
    rows = sorted({r for r, _ in positions})
    row_count = len(rows) - 1 if has_headers else len(rows)

    by_row: dict[int, dict] = {}
    counts = {c: [0, 0] for c in cols}  # numeric, text
    for (r, c), address in zip(positions, addresses):
        if r == 0:
            continue
        value = sheet.value_at(address)
        by_row.setdefault(r, {})[headers[c]] = "" if value is None else value
        if value is None or value == "":
            continue
        counts[c][0 if _is_numeric(value) else 1] += 1

    samples = []
    for r in sorted(by_row):
        if len(samples) >= max_samples:
            break
        record = by_row[r]
        if any(v not in ("", None) for v in record.values()):
            samples.append(record)

    numeric_columns = []
    text_columns = []
    for c in cols:
        numeric, text = counts[c]
        if numeric > text:
            numeric_columns.append(headers[c])
        else:
            text_columns.append(headers[c])

    return SelectionContext(
        selected_range=selected_range,
        columns=columns,
        row_count=row_count,
        sample_values=samples,
        selection_type=selection_type,
        has_headers=has_headers,
        numeric_columns=numeric_columns,
        text_columns=text_columns,
    )


def format_selection_context(ctx: SelectionContext) -> str:
    lines = [
        f"Selected Range: {ctx.selected_range}",
        f"Selection Type: {ctx.selection_type}",
        f"Columns: [{', '.join(ctx.columns)}]",
        f"Data Rows: {ctx.row_count}",
        f"Has Headers: {'Yes' if ctx.has_headers else 'No'}",
    ]
    if ctx.numeric_columns:
        lines.append(f"Numeric Columns: [{', '.join(ctx.numeric_columns)}]")
    if ctx.text_columns:
        lines.append(f"Text Columns: [{', '.join(ctx.text_columns)}]")

    lines.append("")
    lines.append("Query Targeting Instructions:")
    if ctx.selection_type == "single":
        lines.append(f'- Focus on column "{ctx.columns[0]}" only')
    else:
        quoted = ", ".join(f'"{c}"' for c in ctx.columns)
        lines.append(f"- Use only these columns: {quoted}")
    if ctx.has_headers:
        lines.append("- The selection includes headers, focus on data rows only")
    lines.append(f"- Limit results to approximately {ctx.row_count} rows from the selected range")
    lines.append(
        f"- Treat this selection as the complete dataset - do not query beyond these {len(ctx.columns)} column(s)"
    )

    if ctx.sample_values:
        lines.append("")
        lines.append("Sample Data from Selection:")
        for idx, sample in enumerate(ctx.sample_values, start=1):
            body = ", ".join(f"{k}: {json.dumps(v, default=str)}" for k, v in sample.items())
            lines.append(f"  Row {idx}: {{{body}}}")

    return "\n".join(lines)
