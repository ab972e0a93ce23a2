from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import PieceHistoryError
from .player import Player
from .types import PieceKind, Position


@dataclass(slots=True, eq=False)
class Piece:
    """A pawn or the King. Holds state only.

    Rule logic (legal moves, captures, wins) lives in the Game engine, which
    is also the only caller that reassigns ``position``. ``history`` is the
    stack of squares the piece has occupied since the last reset; its top is
    always the current square after a committed move.
    """

    kind: PieceKind
    owner: Player
    piece_id: int
    position: Position
    kills: int = field(default=0, init=False)
    history: List[Position] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    @classmethod
    def pawn(cls, owner: Player, piece_id: int, x: int, y: int) -> "Piece":
        return cls(PieceKind.PAWN, owner, piece_id, Position(x, y))

    @classmethod
    def king(cls, owner: Player, piece_id: int, x: int, y: int) -> "Piece":
        return cls(PieceKind.KING, owner, piece_id, Position(x, y))

    @property
    def is_king(self) -> bool:
        return self.kind is PieceKind.KING

    @property
    def can_capture(self) -> bool:
        # The King moves but never attacks
        return self.kind is PieceKind.PAWN

    def glyph(self) -> str:
        if self.is_king:
            return "♔"
        return "♙" if self.owner.is_player_one else "♟"

    def is_ally(self, other: Optional["Piece"]) -> bool:
        return other is not None and self.owner is other.owner

    def push_position(self, position: Position) -> None:
        self.history.append(position)

    def pop_position(self) -> Position:
        if len(self.history) <= 1:
            raise PieceHistoryError(f"{self} has no committed move to pop")
        return self.history.pop()

    def distance_travelled(self) -> int:
        return sum(a.distance(b) for a, b in zip(self.history, self.history[1:]))

    def add_kills(self, kills: int) -> None:
        self.kills += kills

    def reset(self) -> None:
        self.kills = 0
        self.history.clear()
        self.push_position(self.position)

    def __lt__(self, other: "Piece") -> bool:
        return self.piece_id < other.piece_id

    def __str__(self) -> str:
        if self.is_king:
            return f"K{self.piece_id}"
        return f"{'D' if self.owner.is_player_one else 'A'}{self.piece_id}"
