import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ViewportWindow:
    start_row: int
    end_row: int

    def __contains__(self, row: int) -> bool:
        return self.start_row <= row < self.end_row

    def __len__(self) -> int:
        return max(0, self.end_row - self.start_row)

    def rows(self) -> range:
        return range(self.start_row, self.end_row)


def compute_window(scroll_px: float, extent_px: float, unit_px: float, total: int, buffer: int) -> ViewportWindow:
    """Span of units (rows or columns) covering [scroll_px, scroll_px + extent_px] plus a buffer."""
    if total <= 0:
        return ViewportWindow(0, 0)
    unit_px = max(1, unit_px)
    scroll_px = max(0, scroll_px)
    start = max(0, math.floor(scroll_px / unit_px) - buffer)
    end = min(total, math.ceil((scroll_px + extent_px) / unit_px) + buffer)
    # scrolled past the end: still materialize the last unit
    start = min(start, total - 1)
    end = max(end, start + 1)
    return ViewportWindow(start, end)


class VirtualViewport:
    def __init__(
        self,
        row_height: int,
        total_rows: int,
        viewport_height_px: int,
        buffer_rows: int = 5,
        scroll_top: int = 0,
    ):
        self.row_height = max(1, row_height)
        self.total_rows = max(0, total_rows)
        self.viewport_height_px = max(0, viewport_height_px)
        self.buffer_rows = max(0, buffer_rows)
        self.scroll_top = max(0, scroll_top)

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)

    def resize(self, viewport_height_px: int):
        self.viewport_height_px = max(0, viewport_height_px)

    @property
    def max_scroll_top(self) -> int:
        return max(0, self.total_rows * self.row_height - self.viewport_height_px)

    def scroll_to(self, scroll_top: int) -> ViewportWindow:
        self.scroll_top = max(0, min(self.max_scroll_top, scroll_top))
        return self.compute_window()

    def scroll_by(self, delta_px: int) -> ViewportWindow:
        return self.scroll_to(self.scroll_top + delta_px)

    def compute_window(self) -> ViewportWindow:
        return compute_window(
            self.scroll_top,
            self.viewport_height_px,
            self.row_height,
            self.total_rows,
            self.buffer_rows,
        )

    def visible_rows(self) -> ViewportWindow:
        """Rows intersecting the viewport, without the buffer."""
        return compute_window(
            self.scroll_top, self.viewport_height_px, self.row_height, self.total_rows, 0
        )

    def ensure_row_visible(self, row: int) -> ViewportWindow:
        if self.total_rows == 0:
            self.scroll_top = 0
            return self.compute_window()
        row = max(0, min(self.total_rows - 1, row))
        top = row * self.row_height
        bottom = top + self.row_height
        if top < self.scroll_top:
            self.scroll_top = top
        elif bottom > self.scroll_top + self.viewport_height_px:
            self.scroll_top = max(0, bottom - self.viewport_height_px)
        return self.compute_window()

    def needs_more_rows(self, threshold_rows: int, row_ceiling: int) -> bool:
        if self.total_rows >= row_ceiling:
            return False
        window = self.visible_rows()
        return window.end_row + threshold_rows >= self.total_rows


def column_window(col_widths, scroll_left: int, viewport_width: int, buffer_cols: int = 0) -> ViewportWindow:
    """Column virtualization for variable widths; fixed widths reduce to compute_window."""
    total = len(col_widths)
    if total == 0:
        return ViewportWindow(0, 0)
    scroll_left = max(0, scroll_left)
    edges = [0]
    for w in col_widths:
        edges.append(edges[-1] + max(1, w))
    start = 0
    while start < total - 1 and edges[start + 1] <= scroll_left:
        start += 1
    end = start
    right = scroll_left + viewport_width
    while end < total and edges[end] < right:
        end += 1
    end = max(end, start + 1)
    return ViewportWindow(max(0, start - buffer_cols), min(total, end + buffer_cols))
