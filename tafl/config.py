import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def corner_squares(size: int) -> frozenset:
    last = size - 1
    return frozenset({(0, 0), (0, last), (last, 0), (last, last)})


@dataclass(slots=True)
class Config:
    # --- Rules (fixed, a single ruleset is supported) ---
    BOARD_SIZE: int = 11

    # Attacker pawns, ids 1..24 in listed order
    ATTACKER_START: list[tuple[int, int]] = field(
        default_factory=lambda: [
            (3, 0), (4, 0), (5, 0), (6, 0), (7, 0), (5, 1),
            (0, 3), (10, 3), (0, 4), (10, 4), (0, 5), (1, 5),
            (9, 5), (10, 5), (0, 6), (10, 6), (0, 7), (10, 7),
            (5, 9), (3, 10), (4, 10), (5, 10), (6, 10), (7, 10),
        ]
    )
    # Defender pieces, ids 1..13 in listed order; KING_ID marks the King
    DEFENDER_START: list[tuple[int, int]] = field(
        default_factory=lambda: [
            (5, 3), (4, 4), (5, 4), (6, 4), (3, 5), (4, 5), (5, 5),
            (6, 5), (7, 5), (4, 6), (5, 6), (6, 6), (5, 7),
        ]
    )
    KING_ID: int = 7

    # --- Runtime switches ---
    STRICT_OCCUPANCY: bool = bool(int(os.getenv("TAFL_STRICT_OCCUPANCY", 0)))
    LOG_REPORT: bool = bool(int(os.getenv("TAFL_LOG_REPORT", 1)))
    REPORT_RULE_WIDTH: int = int(os.getenv("TAFL_REPORT_RULE_WIDTH", 75))

    def __post_init__(self):
        last = self.BOARD_SIZE - 1
        corners = corner_squares(self.BOARD_SIZE)

        squares = self.ATTACKER_START + self.DEFENDER_START
        if len(set(squares)) != len(squares):
            raise ValueError("Starting layout places two pieces on one square")
        for x, y in squares:
            if not (0 <= x <= last and 0 <= y <= last):
                raise ValueError(f"Starting square ({x}, {y}) is off the board")
            if (x, y) in corners:
                raise ValueError(f"Starting square ({x}, {y}) is a corner")
        if not 1 <= self.KING_ID <= len(self.DEFENDER_START):
            raise ValueError("KING_ID must index into DEFENDER_START")


config = Config()
