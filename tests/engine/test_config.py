import unittest

from tafl.config import Config, config, corner_squares


class TestConfig(unittest.TestCase):
    def test_default_layout(self):
        self.assertEqual(config.BOARD_SIZE, 11)
        self.assertEqual(len(config.ATTACKER_START), 24)
        self.assertEqual(len(config.DEFENDER_START), 13)
        self.assertEqual(config.DEFENDER_START[config.KING_ID - 1], (5, 5))

    def test_corners_derived_from_size(self):
        self.assertEqual(
            corner_squares(config.BOARD_SIZE), frozenset({(0, 0), (0, 10), (10, 0), (10, 10)})
        )

    def test_duplicate_square_rejected(self):
        with self.assertRaises(ValueError):
            Config(ATTACKER_START=[(3, 0), (3, 0)])

    def test_corner_start_rejected(self):
        with self.assertRaises(ValueError):
            Config(ATTACKER_START=[(0, 0)])

    def test_off_board_start_rejected(self):
        with self.assertRaises(ValueError):
            Config(ATTACKER_START=[(11, 3)])


if __name__ == "__main__":
    unittest.main()
