from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

import numpy as np
from loguru import logger

from .config import config, corner_squares
from .exceptions import OccupancyError
from .piece import Piece
from .player import Player
from .types import Position

EMPTY = 0
ATTACKER = 1
DEFENDER = 2
KING = 3


@dataclass(slots=True)
class Board:
    """Owns piece placement and square bookkeeping (no rule logic).

    ``pieces`` is the live collection: a piece is either present once or
    absent. Current occupancy is always answered by scanning it. ``_visits``
    counts, per square, how many committed arrivals each piece has made
    there over the game; it feeds statistics only.
    """

    size: int = config.BOARD_SIZE
    strict: bool = field(default_factory=lambda: config.STRICT_OCCUPANCY)
    pieces: List[Piece] = field(default_factory=list)
    _visits: Dict[Position, Counter] = field(default_factory=dict, init=False, repr=False)

    # --- Geometry ---
    def in_bounds(self, position: Optional[Position]) -> bool:
        if position is None:
            return False
        return 0 <= position.x < self.size and 0 <= position.y < self.size

    def is_corner(self, position: Optional[Position]) -> bool:
        if position is None:
            return False
        return (position.x, position.y) in corner_squares(self.size)

    # --- Live collection ---
    def clear(self) -> None:
        self.pieces.clear()
        self._visits.clear()

    def add(self, piece: Piece) -> None:
        if not self.contains(piece):
            self.pieces.append(piece)

    def add_all(self, pieces: Iterable[Piece]) -> None:
        for piece in pieces:
            self.add(piece)

    def remove(self, piece: Piece) -> None:
        self.pieces = [p for p in self.pieces if p is not piece]

    def contains(self, piece: Piece) -> bool:
        return any(p is piece for p in self.pieces)

    def pieces_of(self, player: Player) -> List[Piece]:
        return [p for p in self.pieces if p.owner is player]

    def piece_at(self, position: Optional[Position]) -> Optional[Piece]:
        """Return the live piece on ``position``, or None.

        Two live pieces on one square means an invariant was broken
        elsewhere: it is logged, or raised when the board is strict.
        """
        if position is None:
            return None
        found: Optional[Piece] = None
        for piece in self.pieces:
            if piece.position != position:
                continue
            if found is not None:
                if self.strict:
                    raise OccupancyError(f"Two pieces in the same position {position}")
                logger.warning(f"Two pieces in the same position {position}: {found}, {piece}")
            found = piece
        return found

    # --- Visit index ---
    def record_visit(self, piece: Piece, position: Position) -> None:
        self._visits.setdefault(position, Counter())[piece] += 1

    def unrecord_visit(self, piece: Piece, position: Position) -> None:
        visitors = self._visits.get(position)
        if not visitors or visitors[piece] <= 0:
            logger.warning(f"No recorded visit of {piece} to {position} to remove")
            return
        visitors[piece] -= 1
        if visitors[piece] == 0:
            del visitors[piece]

    def pieces_per_square(self) -> Dict[Position, Set[Piece]]:
        return {pos: set(visitors) for pos, visitors in self._visits.items() if visitors}

    # --- Array views for presentation layers ---
    def to_array(self) -> np.ndarray:
        """Return a (size, size) int8 grid indexed [y, x].

        Codes: 0 empty, 1 attacker, 2 defender pawn, 3 King.
        """
        grid = np.zeros((self.size, self.size), dtype=np.int8)
        for piece in self.pieces:
            if piece.is_king:
                code = KING
            elif piece.owner.is_player_one:
                code = DEFENDER
            else:
                code = ATTACKER
            grid[piece.position.y, piece.position.x] = code
        return grid

    def visit_heatmap(self) -> np.ndarray:
        """Number of distinct pieces that have visited each square, indexed [y, x]."""
        heat = np.zeros((self.size, self.size), dtype=np.int32)
        for pos, visitors in self._visits.items():
            if self.in_bounds(pos):
                heat[pos.y, pos.x] = len(visitors)
        return heat
