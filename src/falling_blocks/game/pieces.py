from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, NamedTuple, Tuple

import numpy as np


class PieceKind(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    Z = 6
    T = 7


class Color(IntEnum):
    CYAN = 1
    BLUE = 2
    ORANGE = 3
    YELLOW = 4
    GREEN = 5
    PURPLE = 6
    RED = 7


Shape = np.ndarray


class PieceTemplate(NamedTuple):
    shape: Shape
    color: Color


def _frozen(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Square bounding boxes so rotation keeps the matrix size.
TEMPLATES: Dict[PieceKind, PieceTemplate] = {
    PieceKind.I: PieceTemplate(
        _frozen([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]), Color.CYAN
    ),
    PieceKind.J: PieceTemplate(_frozen([[1, 0, 0], [1, 1, 1], [0, 0, 0]]), Color.BLUE),
    PieceKind.L: PieceTemplate(_frozen([[0, 0, 1], [1, 1, 1], [0, 0, 0]]), Color.ORANGE),
    PieceKind.O: PieceTemplate(_frozen([[1, 1], [1, 1]]), Color.YELLOW),
    PieceKind.S: PieceTemplate(_frozen([[0, 1, 1], [1, 1, 0], [0, 0, 0]]), Color.GREEN),
    PieceKind.T: PieceTemplate(_frozen([[0, 1, 0], [1, 1, 1], [0, 0, 0]]), Color.PURPLE),
    PieceKind.Z: PieceTemplate(_frozen([[1, 1, 0], [0, 1, 1], [0, 0, 0]]), Color.RED),
}


def template_for(kind: PieceKind) -> PieceTemplate:
    return TEMPLATES[PieceKind(kind)]


def rotate_cw(shape: Shape) -> Shape:
    """Return `shape` turned 90 degrees clockwise as a new array."""
    return np.rot90(shape, 1, axes=(1, 0)).copy()


@dataclass(frozen=True, eq=False)
class ActivePiece:
    kind: PieceKind
    shape: Shape
    x: int
    y: int
    color: Color

    @classmethod
    def from_kind(cls, kind: PieceKind, x: int, y: int) -> "ActivePiece":
        template = template_for(kind)
        return cls(kind=PieceKind(kind), shape=template.shape, x=x, y=y, color=template.color)

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return dataclasses.replace(self, x=self.x + dx, y=self.y + dy)

    def with_shape(self, shape: Shape) -> "ActivePiece":
        return dataclasses.replace(self, shape=shape)

    def cells(self) -> List[Tuple[int, int]]:
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells


COLOR_RGB: Dict[Color, Tuple[int, int, int]] = {
    Color.CYAN: (0, 240, 240),
    Color.BLUE: (0, 0, 240),
    Color.ORANGE: (240, 160, 0),
    Color.YELLOW: (240, 240, 0),
    Color.GREEN: (0, 240, 0),
    Color.PURPLE: (160, 0, 240),
    Color.RED: (240, 0, 0),
}
