import pandas as pd

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def _parse_number(text):
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def coerce_cell_value(current, text, coerce_numbers=False):
    """Convert edited text to the storage type of the cell being replaced.

    Empty text clears the cell (None). Number and bool cells keep their type
    when the text parses; anything else is stored as raw text.
    """
    text = "" if text is None else str(text)
    stripped = text.strip()
    if stripped == "":
        return None

    if pd.api.types.is_bool(current):
        lowered = stripped.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        return text

    if pd.api.types.is_number(current) or coerce_numbers:
        parsed = _parse_number(stripped)
        if parsed is not None:
            if pd.api.types.is_float(current) and isinstance(parsed, int):
                return float(parsed)
            return parsed

    return text


def display_text(value) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
