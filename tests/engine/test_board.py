import unittest

import numpy as np
from loguru import logger

from tafl.board import ATTACKER, DEFENDER, KING, Board
from tafl.exceptions import OccupancyError
from tafl.piece import Piece
from tafl.player import Player
from tafl.types import Position, Side


class TestBoard(unittest.TestCase):
    def setUp(self):
        self.defenders = Player(Side.DEFENDER)
        self.attackers = Player(Side.ATTACKER)
        self.board = Board(size=11, strict=False)

    def test_bounds_and_corners(self):
        self.assertTrue(self.board.in_bounds(Position(0, 10)))
        self.assertFalse(self.board.in_bounds(Position(11, 0)))
        self.assertFalse(self.board.in_bounds(Position(0, -1)))
        self.assertFalse(self.board.in_bounds(None))
        corners = [Position(0, 0), Position(0, 10), Position(10, 0), Position(10, 10)]
        for corner in corners:
            self.assertTrue(self.board.is_corner(corner))
        self.assertFalse(self.board.is_corner(Position(0, 5)))
        self.assertFalse(self.board.is_corner(Position(-1, 0)))
        self.assertFalse(self.board.is_corner(None))

    def test_corners_follow_board_size(self):
        small = Board(size=7, strict=False)
        self.assertTrue(small.is_corner(Position(6, 6)))
        self.assertTrue(small.is_corner(Position(0, 6)))
        self.assertFalse(small.is_corner(Position(10, 10)))

    def test_add_is_idempotent_and_remove_by_identity(self):
        pawn = Piece.pawn(self.attackers, 1, 3, 0)
        self.board.add(pawn)
        self.board.add(pawn)
        self.assertEqual(len(self.board.pieces), 1)
        self.assertIs(self.board.piece_at(Position(3, 0)), pawn)
        self.board.remove(pawn)
        self.assertIsNone(self.board.piece_at(Position(3, 0)))

    def test_duplicate_occupancy_is_logged(self):
        messages = []
        sink = logger.add(messages.append, level="WARNING")
        try:
            self.board.add(Piece.pawn(self.attackers, 1, 3, 3))
            second = Piece.pawn(self.defenders, 2, 3, 3)
            self.board.add(second)
            self.assertIs(self.board.piece_at(Position(3, 3)), second)
        finally:
            logger.remove(sink)
        self.assertTrue(any("Two pieces in the same position" in str(m) for m in messages))

    def test_duplicate_occupancy_raises_when_strict(self):
        board = Board(size=11, strict=True)
        board.add(Piece.pawn(self.attackers, 1, 3, 3))
        board.add(Piece.pawn(self.defenders, 2, 3, 3))
        with self.assertRaises(OccupancyError):
            board.piece_at(Position(3, 3))

    def test_visits_count_distinct_pieces(self):
        a1 = Piece.pawn(self.attackers, 1, 3, 3)
        d1 = Piece.pawn(self.defenders, 1, 4, 4)
        square = Position(3, 3)
        self.board.record_visit(a1, square)
        self.board.record_visit(a1, square)
        self.board.record_visit(d1, square)
        self.assertEqual(self.board.pieces_per_square()[square], {a1, d1})

        self.board.unrecord_visit(a1, square)
        self.assertEqual(self.board.pieces_per_square()[square], {a1, d1})
        self.board.unrecord_visit(a1, square)
        self.assertEqual(self.board.pieces_per_square()[square], {d1})
        self.assertEqual(self.board.visit_heatmap()[3, 3], 1)

    def test_to_array_codes(self):
        self.board.add(Piece.pawn(self.attackers, 1, 3, 0))
        self.board.add(Piece.pawn(self.defenders, 1, 5, 3))
        self.board.add(Piece.king(self.defenders, 7, 5, 5))
        grid = self.board.to_array()
        self.assertEqual(grid.shape, (11, 11))
        self.assertEqual(grid[0, 3], ATTACKER)
        self.assertEqual(grid[3, 5], DEFENDER)
        self.assertEqual(grid[5, 5], KING)
        self.assertEqual(int(np.count_nonzero(grid)), 3)


if __name__ == "__main__":
    unittest.main()
