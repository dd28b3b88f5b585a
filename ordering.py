"""
Row ordering index: float sort keys that let a row be placed between two
existing rows without renumbering the others.
"""
from typing import Sequence

# Neighbouring keys closer than this can no longer be split reliably.
MIN_GAP = 1e-9


def sort_rows(rows: Sequence) -> list:
    """Display order: ascending order_index, ties broken by id."""
    return sorted(rows, key=lambda r: (r.order_index, r.id if r.id is not None else float("inf")))


def next_order_index(rows: Sequence) -> float:
    """Key for appending a row at the end."""
    if not rows:
        return 0.0
    return max(r.order_index for r in rows) + 1


def insert_after(rows: Sequence, index: int) -> float:
    """Key for a new row placed after display position ``index``.

    ``index`` is a position in the sorted list; -1 means "before the first
    row". The midpoint between the neighbours is used when there is a next
    row, otherwise the last key plus one.
    """
    ordered = sort_rows(rows)
    if not ordered:
        return 0.0
    if index < -1 or index >= len(ordered):
        raise IndexError(f"No row at position {index}.")
    if index == -1:
        return ordered[0].order_index - 1
    current = ordered[index].order_index
    if index + 1 < len(ordered):
        return (current + ordered[index + 1].order_index) / 2
    return current + 1


def swap_order(first, second) -> tuple[float, float]:
    """Keys after a drag-and-drop swap: (new key for first, new key for second)."""
    return second.order_index, first.order_index


def needs_renumbering(rows: Sequence) -> bool:
    """True when two adjacent keys are too close for another midpoint insert."""
    ordered = sort_rows(rows)
    for prev, nxt in zip(ordered, ordered[1:]):
        gap = nxt.order_index - prev.order_index
        mid = (prev.order_index + nxt.order_index) / 2
        if gap < MIN_GAP or mid in (prev.order_index, nxt.order_index):
            return True
    return False


def renumber(rows: Sequence) -> dict:
    """Map of row id -> fresh integer key 0, 1, 2, ... keeping display order."""
    return {row.id: float(i) for i, row in enumerate(sort_rows(rows))}
