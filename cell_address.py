import re

from errors import InvalidAddress

# Excel limits
MAX_ROWS = 1_048_576
MAX_COLS = 16_384

_ADDRESS_RE = re.compile(r"^([A-Z]+)([0-9]+)$")


def column_letters(col: int) -> str:
    """Bijective base-26: 0 -> A, 25 -> Z, 26 -> AA."""
    if not isinstance(col, int) or col < 0:
        raise InvalidAddress(col, "column must be a non-negative int")
    letters = []
    n = col + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def column_index(letters: str) -> int:
    if not letters or not letters.isascii() or not letters.isalpha() or not letters.isupper():
        raise InvalidAddress(letters, "column letters must be A-Z")
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def encode(row: int, col: int) -> str:
    if not isinstance(row, int) or row < 0:
        raise InvalidAddress((row, col), "row must be a non-negative int")
    return f"{column_letters(col)}{row + 1}"


def decode(address: str) -> tuple[int, int]:
    if not isinstance(address, str):
        raise InvalidAddress(address, "not a string")
    match = _ADDRESS_RE.match(address)
    if not match:
        raise InvalidAddress(address)
    letters, digits = match.groups()
    row_num = int(digits)
    if row_num == 0:
        raise InvalidAddress(address, "rows are 1-based")
    return row_num - 1, column_index(letters)


def is_valid(address: str) -> bool:
    try:
        decode(address)
    except InvalidAddress:
        return False
    return True


def parse_range(text: str) -> tuple[str, str]:
    """'A1:B2' -> ('A1', 'B2'); a lone address is a degenerate range."""
    if not isinstance(text, str):
        raise InvalidAddress(text, "not a string")
    parts = text.strip().upper().split(":")
    if len(parts) == 1:
        parts = [parts[0], parts[0]]
    if len(parts) != 2:
        raise InvalidAddress(text, "expected START:END")
    for part in parts:
        decode(part)
    return parts[0], parts[1]


def format_range(a: str, b: str) -> str:
    return a if a == b else f"{a}:{b}"
