from __future__ import annotations

import random
from typing import NamedTuple, Optional

from .collision import is_valid_placement
from .grid import Board
from .pieces import ActivePiece, PieceKind, rotate_cw


class MoveResult(NamedTuple):
    piece: ActivePiece
    accepted: bool


class PieceController:
    def __init__(self, width: int = 10, rng: Optional[random.Random] = None, spawn_y: int = 0) -> None:
        self.width = int(width)
        self.spawn_y = spawn_y
        self.rng = rng or random.Random()

    @property
    def spawn_x(self) -> int:
        return self.width // 2 - 2

    def random_kind(self) -> PieceKind:
        return self.rng.choice(list(PieceKind))

    def spawn(self, kind: PieceKind) -> ActivePiece:
        return ActivePiece.from_kind(kind, self.spawn_x, self.spawn_y)

    def fits(self, piece: ActivePiece, board: Board) -> bool:
        return is_valid_placement(piece.shape, piece.x, piece.y, board)

    def move(self, piece: ActivePiece, dx: int, dy: int, board: Board) -> MoveResult:
        if is_valid_placement(piece.shape, piece.x + dx, piece.y + dy, board):
            return MoveResult(piece.moved(dx, dy), True)
        return MoveResult(piece, False)

    def rotate(self, piece: ActivePiece, board: Board) -> MoveResult:
        # No wall kicks: the rotated shape is only tried at the current anchor.
        rotated = rotate_cw(piece.shape)
        if is_valid_placement(rotated, piece.x, piece.y, board):
            return MoveResult(piece.with_shape(rotated), True)
        return MoveResult(piece, False)

    def hard_drop_target(self, piece: ActivePiece, board: Board) -> int:
        y = piece.y
        while is_valid_placement(piece.shape, piece.x, y + 1, board):
            y += 1
        return y
