import math

import pytest

from viewport import VirtualViewport, ViewportWindow, column_window, compute_window


def test_window_covers_scrolled_rows_with_buffer():
    vp = VirtualViewport(row_height=48, total_rows=1000, viewport_height_px=800, buffer_rows=5, scroll_top=4800)
    window = vp.compute_window()
    assert window.start_row == 95
    assert window.end_row == 122


@pytest.mark.parametrize("scroll_top", [0, 1, 47, 48, 4800, 4801, 47199, 48000])
def test_window_contains_every_intersecting_row(scroll_top):
    vp = VirtualViewport(row_height=48, total_rows=1000, viewport_height_px=800, buffer_rows=5)
    window = vp.scroll_to(scroll_top)
    top = vp.scroll_top
    first = top // 48
    last = min(999, math.ceil((top + 800) / 48) - 1)
    for row in range(first, last + 1):
        assert row in window
    assert window.end_row <= 1000


def test_window_clamps_to_total():
    window = compute_window(scroll_px=0, extent_px=800, unit_px=48, total=10, buffer=5)
    assert window == ViewportWindow(0, 10)


def test_window_never_empty_past_end():
    window = compute_window(scroll_px=10_000, extent_px=100, unit_px=10, total=50, buffer=0)
    assert window.start_row == 49
    assert len(window) == 1


def test_empty_sheet_window():
    assert len(compute_window(0, 100, 10, 0, 5)) == 0


def test_scroll_to_clamps():
    vp = VirtualViewport(row_height=10, total_rows=100, viewport_height_px=200)
    vp.scroll_to(-50)
    assert vp.scroll_top == 0
    vp.scroll_to(10_000)
    assert vp.scroll_top == vp.max_scroll_top == 800
    vp.scroll_by(-100)
    assert vp.scroll_top == 700


def test_visible_rows_excludes_buffer():
    vp = VirtualViewport(row_height=1, total_rows=100, viewport_height_px=20, buffer_rows=5, scroll_top=30)
    assert vp.visible_rows() == ViewportWindow(30, 50)
    assert vp.compute_window() == ViewportWindow(25, 55)


def test_ensure_row_visible():
    vp = VirtualViewport(row_height=1, total_rows=100, viewport_height_px=20)
    vp.ensure_row_visible(40)
    assert vp.scroll_top == 21
    assert 40 in vp.visible_rows()
    vp.ensure_row_visible(3)
    assert vp.scroll_top == 3


def test_needs_more_rows():
    vp = VirtualViewport(row_height=1, total_rows=100, viewport_height_px=20)
    assert not vp.needs_more_rows(threshold_rows=10, row_ceiling=1000)
    vp.scroll_to(80)
    assert vp.needs_more_rows(threshold_rows=10, row_ceiling=1000)
    assert not vp.needs_more_rows(threshold_rows=10, row_ceiling=100)


def test_column_window_variable_widths():
    widths = [10, 10, 30, 10, 10]
    assert column_window(widths, scroll_left=0, viewport_width=25) == ViewportWindow(0, 3)
    assert column_window(widths, scroll_left=20, viewport_width=25) == ViewportWindow(2, 3)
    assert column_window(widths, scroll_left=20, viewport_width=25, buffer_cols=1) == ViewportWindow(1, 4)
    assert column_window([], 0, 100) == ViewportWindow(0, 0)
