from cell_address import decode, encode, format_range


def range_bounds(a: str, b: str) -> tuple[int, int, int, int]:
    ar, ac = decode(a)
    br, bc = decode(b)
    r0, r1 = sorted((ar, br))
    c0, c1 = sorted((ac, bc))
    return r0, r1, c0, c1


def range_size(a: str, b: str) -> int:
    r0, r1, c0, c1 = range_bounds(a, b)
    return (r1 - r0 + 1) * (c1 - c0 + 1)


def cells_in_range(a: str, b: str) -> list[str]:
    # Row-major order; callers zip this with parallel value lists.
    r0, r1, c0, c1 = range_bounds(a, b)
    return [encode(r, c) for r in range(r0, r1 + 1) for c in range(c0, c1 + 1)]


def bounding_rect(addresses) -> tuple[int, int, int, int] | None:
    positions = [decode(a) for a in addresses or []]
    if not positions:
        return None
    rows = [r for r, _ in positions]
    cols = [c for _, c in positions]
    return min(rows), max(rows), min(cols), max(cols)


def is_rectangle(addresses) -> bool:
    rect = bounding_rect(addresses)
    if rect is None:
        return False
    r0, r1, c0, c1 = rect
    return len(set(addresses)) == (r1 - r0 + 1) * (c1 - c0 + 1)


def describe_selection(addresses) -> str:
    addresses = list(addresses or [])
    if not addresses:
        return ""
    if len(addresses) == 1:
        return addresses[0]
    if is_rectangle(addresses):
        r0, r1, c0, c1 = bounding_rect(addresses)
        return format_range(encode(r0, c0), encode(r1, c1))
    return f"{len(addresses)} selected cells"
