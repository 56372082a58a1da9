"""Translation between logical and native key indexes.

Logical indexes count row-major, left to right and top to bottom, as the
keys appear to the user. Native indexes are the order the device uses on the
wire. Every supported layout only mirrors columns within a row, so the
mapping is its own inverse.
"""

from streamdeck_core.models import KeyDirection


def _is_reversed(row: int, direction: KeyDirection) -> bool:
    if direction is KeyDirection.RTL:
        return True
    if direction is KeyDirection.SERPENTINE:
        return row % 2 == 1
    return False


def panel_slot(row: int, column: int, columns: int, direction: KeyDirection) -> int:
    """Return the native key index displayed at a grid position."""
    if _is_reversed(row, direction):
        column = columns - 1 - column
    return row * columns + column


def to_native(index: int, columns: int, direction: KeyDirection) -> int:
    """Map a logical key index to the device's native index.

    No bounds checking is done; callers validate the index first.
    """
    row, column = divmod(index, columns)
    return panel_slot(row, column, columns, direction)


def to_logical(index: int, columns: int, direction: KeyDirection) -> int:
    """Map a native key index back to its logical index."""
    return to_native(index, columns, direction)
