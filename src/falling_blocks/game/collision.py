from __future__ import annotations

from .grid import Board
from .pieces import Shape


def is_valid_placement(shape: Shape, x: int, y: int, board: Board) -> bool:
    """Check whether `shape` anchored at (x, y) fits on `board`.

    Filled cells must stay within the side walls and above the floor. Cells
    with a negative row are above the visible board and never collide.
    """
    h, w = shape.shape
    for sy in range(h):
        for sx in range(w):
            if not shape[sy, sx]:
                continue
            bx = x + sx
            by = y + sy
            if bx < 0 or bx >= board.width or by >= board.height:
                return False
            if by >= 0 and board.occupied[by, bx]:
                return False
    return True
