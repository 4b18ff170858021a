from cell_address import decode


def find_cells(sheet, query: str) -> list[tuple[str, str]]:
    """Case-insensitive substring search over cell text.

    Returns (address, text) pairs in row-major order. A blank query
    matches nothing.
    """
    needle = (query or "").strip().lower()
    if not needle or sheet is None:
        return []
    hits = []
    for address, cell in sheet.cells.items():
        text = cell.text
        if needle in text.lower():
            hits.append((decode(address), address, text))
    hits.sort()
    return [(address, text) for _, address, text in hits]


class FindSession:
    """Remembers the last query so repeating it steps through the matches."""

    def __init__(self):
        self.query = ""
        self.matches: list[tuple[str, str]] = []
        self.index = -1

    def search(self, sheet, query: str) -> tuple[str, str] | None:
        query = query.strip()
        if query.lower() == self.query.lower() and self.matches:
            self.index = (self.index + 1) % len(self.matches)
            return self.matches[self.index]
        self.query = query
        self.matches = find_cells(sheet, query)
        self.index = 0 if self.matches else -1
        return self.matches[0] if self.matches else None

    def reset(self):
        # keep the query so the prompt can offer it again
        self.matches = []
        self.index = -1
