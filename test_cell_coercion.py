import math

import numpy as np
import pytest

from cell_coercion import coerce_cell_value, display_text


@pytest.mark.parametrize(
    "current, text, expected",
    [
        (None, "", None),
        ("old", "   ", None),
        (None, "hello", "hello"),
        (None, "42", "42"),
        (3, "42", 42),
        (3, "4.5", 4.5),
        (2.5, "4", 4.0),
        (3, "abc", "abc"),
        (True, "no", False),
        (False, "Yes", True),
        (True, "maybe", "maybe"),
        (np.int64(1), "7", 7),
    ],
)
def test_coerce_cell_value(current, text, expected):
    result = coerce_cell_value(current, text)
    assert result == expected
    assert type(result) is type(expected)


def test_coerce_numbers_flag_parses_text_cells():
    assert coerce_cell_value(None, "12", coerce_numbers=True) == 12
    assert coerce_cell_value("x", "1e3", coerce_numbers=True) == 1000.0
    assert coerce_cell_value(None, "12 apples", coerce_numbers=True) == "12 apples"


@pytest.mark.parametrize(
    "value, expected",
    [(None, ""), (math.nan, ""), (3.0, "3"), (3.25, "3.25"), (7, "7"), ("x", "x"), (True, "True")],
)
def test_display_text(value, expected):
    assert display_text(value) == expected
