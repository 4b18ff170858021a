from cell_range import (
    bounding_rect,
    cells_in_range,
    describe_selection,
    is_rectangle,
    range_bounds,
    range_size,
)


def test_cells_in_range_is_row_major():
    assert cells_in_range("A1", "B2") == ["A1", "B1", "A2", "B2"]


def test_cells_in_range_degenerate():
    assert cells_in_range("C3", "C3") == ["C3"]


def test_cells_in_range_ignores_corner_order():
    assert cells_in_range("B2", "A1") == ["A1", "B1", "A2", "B2"]
    assert cells_in_range("A2", "B1") == cells_in_range("B1", "A2")


def test_range_bounds_and_size():
    assert range_bounds("D4", "B2") == (1, 3, 1, 3)
    assert range_size("A1", "D4") == 16
    assert range_size("A1", "A1") == 1


def test_bounding_rect():
    assert bounding_rect([]) is None
    assert bounding_rect(["C3", "A2", "B5"]) == (1, 4, 0, 2)


def test_is_rectangle():
    assert is_rectangle(["A1", "B1", "A2", "B2"])
    assert not is_rectangle(["A1", "B2"])
    assert not is_rectangle([])


def test_describe_selection():
    assert describe_selection([]) == ""
    assert describe_selection(["B7"]) == "B7"
    assert describe_selection(cells_in_range("A1", "C2")) == "A1:C2"
    assert describe_selection(["A1", "C3"]) == "2 selected cells"
