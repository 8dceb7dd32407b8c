import random
import unittest

import numpy as np

from falling_blocks.game.controller import PieceController
from falling_blocks.game.grid import Board
from falling_blocks.game.pieces import ActivePiece, Color, PieceKind, rotate_cw, template_for


class TestPieceController(unittest.TestCase):

    def setUp(self):
        self.board = Board()
        self.controller = PieceController(width=10, rng=random.Random(1))

    def test_spawn_position(self):
        for kind in PieceKind:
            piece = self.controller.spawn(kind)
            self.assertEqual((piece.x, piece.y), (3, 0))
            np.testing.assert_array_equal(piece.shape, template_for(kind).shape)

    def test_o_piece_falls_to_floor(self):
        piece = ActivePiece.from_kind(PieceKind.O, 4, 0)
        for step in range(18):
            result = self.controller.move(piece, 0, 1, self.board)
            self.assertTrue(result.accepted, f"step {step}")
            piece = result.piece
        self.assertEqual(piece.y, 18)
        result = self.controller.move(piece, 0, 1, self.board)
        self.assertFalse(result.accepted)
        self.assertIs(result.piece, piece)
        self.assertEqual(result.piece.y, 18)

    def test_move_blocked_by_wall(self):
        piece = ActivePiece.from_kind(PieceKind.O, 0, 5)
        result = self.controller.move(piece, -1, 0, self.board)
        self.assertFalse(result.accepted)
        self.assertIs(result.piece, piece)
        result = self.controller.move(piece, 1, 0, self.board)
        self.assertTrue(result.accepted)
        self.assertEqual(result.piece.x, 1)

    def test_rotate_in_open_space(self):
        piece = self.controller.spawn(PieceKind.I)
        result = self.controller.rotate(piece, self.board)
        self.assertTrue(result.accepted)
        self.assertEqual((result.piece.x, result.piece.y), (piece.x, piece.y))
        self.assertEqual(sorted(result.piece.cells()), [(5, 0), (5, 1), (5, 2), (5, 3)])

    def test_rotate_against_wall_has_no_kick(self):
        vertical = rotate_cw(template_for(PieceKind.I).shape)
        piece = ActivePiece(PieceKind.I, vertical, -2, 5, Color.CYAN)
        result = self.controller.rotate(piece, self.board)
        self.assertFalse(result.accepted)
        self.assertIs(result.piece, piece)

    def test_rotate_blocked_by_stack(self):
        piece = self.controller.spawn(PieceKind.I)
        self.board.fill(5, 2, Color.RED)
        result = self.controller.rotate(piece, self.board)
        self.assertFalse(result.accepted)

    def test_four_unobstructed_rotations(self):
        piece = ActivePiece.from_kind(PieceKind.T, 4, 8)
        for _ in range(4):
            result = self.controller.rotate(piece, self.board)
            self.assertTrue(result.accepted)
            piece = result.piece
        np.testing.assert_array_equal(piece.shape, template_for(PieceKind.T).shape)

    def test_hard_drop_target(self):
        piece = self.controller.spawn(PieceKind.I)
        self.assertEqual(self.controller.hard_drop_target(piece, self.board), 18)
        self.board.fill(4, 10, Color.BLUE)
        self.assertEqual(self.controller.hard_drop_target(piece, self.board), 8)

    def test_hard_drop_target_without_room(self):
        piece = ActivePiece.from_kind(PieceKind.O, 4, 18)
        self.assertEqual(self.controller.hard_drop_target(piece, self.board), 18)

    def test_random_kind(self):
        kinds = {self.controller.random_kind() for _ in range(200)}
        self.assertEqual(kinds, set(PieceKind))

    def test_random_kind_is_reproducible(self):
        a = PieceController(rng=random.Random(7))
        b = PieceController(rng=random.Random(7))
        self.assertEqual([a.random_kind() for _ in range(20)], [b.random_kind() for _ in range(20)])


if __name__ == '__main__':
    unittest.main()
