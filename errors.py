class GridError(Exception):
    """Base class for grid addressing/selection/editing errors."""


class InvalidAddress(GridError, ValueError):
    def __init__(self, address, reason: str = ""):
        self.address = address
        msg = f"Invalid cell address: {address!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class OutOfBounds(GridError):
    def __init__(self, row: int, col: int, row_count: int, col_count: int):
        self.row = row
        self.col = col
        self.row_count = row_count
        self.col_count = col_count
        super().__init__(
            f"({row}, {col}) outside {row_count}x{col_count} sheet"
        )


class InvalidState(GridError):
    """An editing operation was invoked in the wrong state."""
