from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .piece import Piece


@dataclass(frozen=True, slots=True)
class Position:
    x: int
    y: int

    def distance(self, other: Position) -> int:
        """Manhattan distance between two squares."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def step(self, direction: Position, times: int = 1) -> Position:
        return Position(self.x + direction.x * times, self.y + direction.y * times)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


DIR_UP = Position(0, 1)
DIR_DOWN = Position(0, -1)
DIR_LEFT = Position(1, 0)
DIR_RIGHT = Position(-1, 0)
DIRECTIONS = (DIR_UP, DIR_DOWN, DIR_LEFT, DIR_RIGHT)


class PieceKind(Enum):
    PAWN = "pawn"
    KING = "king"


class Side(IntEnum):
    DEFENDER = 1  # first player
    ATTACKER = 2  # second player, moves first


class WinReason(Enum):
    KING_ESCAPED = "king_escaped"
    KING_CAPTURED = "king_captured"
    ATTACKERS_ELIMINATED = "attackers_eliminated"


@dataclass(frozen=True, slots=True)
class Move:
    """A committed turn: who moved, from where, and who was taken."""

    piece: Piece
    old_position: Position
    victims: Tuple[Piece, ...] = ()
