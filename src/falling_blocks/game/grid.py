from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from .pieces import ActivePiece, Color


class Board:
    """Fixed-size grid holding the landed cells.

    Occupancy and color live in two separate arrays: `occupied` is a boolean
    mask and `colors` holds `Color` values, meaningful only where the cell is
    occupied. Row 0 is the top of the board.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"board dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.occupied = np.zeros((self.height, self.width), dtype=np.bool_)
        self.colors = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.occupied.fill(False)
        self.colors.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_empty(self, x: int, y: int) -> bool:
        return self.is_inside(x, y) and not self.occupied[y, x]

    def cell(self, x: int, y: int) -> Optional[Color]:
        if not self.is_inside(x, y) or not self.occupied[y, x]:
            return None
        return Color(int(self.colors[y, x]))

    def fill(self, x: int, y: int, color: Color) -> None:
        self.occupied[y, x] = True
        self.colors[y, x] = int(color)

    def merge(self, piece: ActivePiece) -> None:
        for x, y in piece.cells():
            # Rows above the visible board are dropped.
            if y < 0:
                continue
            self.fill(x, y, piece.color)

    def scan_full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.occupied, axis=1))[0]]

    def clear_rows(self, rows: Iterable[int]) -> None:
        indices = sorted({int(r) for r in rows})
        if not indices:
            return
        for r in indices:
            if not 0 <= r < self.height:
                raise IndexError(f"row {r} outside board of height {self.height}")
        num = len(indices)
        self.occupied = np.vstack(
            (np.zeros((num, self.width), dtype=np.bool_), np.delete(self.occupied, indices, axis=0))
        )
        self.colors = np.vstack(
            (np.zeros((num, self.width), dtype=np.int8), np.delete(self.colors, indices, axis=0))
        )

    def snapshot(self, overlay: Optional[ActivePiece] = None) -> np.ndarray:
        state = np.where(self.occupied, self.colors, 0).astype(np.int8)
        if overlay is not None:
            # Falling piece cells are marked with negative color values.
            for x, y in overlay.cells():
                if self.is_inside(x, y):
                    state[y, x] = -int(overlay.color)
        return state
